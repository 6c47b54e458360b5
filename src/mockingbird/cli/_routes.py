"""``mockingbird routes``: print the route table a scan would produce.

With ``--explain`` the files that did not become routes are listed too,
each with the decision chain that rejected it.
"""

import argparse
import sys

from mockingbird.app import ScanReport, run_scan
from mockingbird.cli._serve import build_config
from mockingbird.errors import ConfigurationError
from mockingbird.scanning.scanner import summarize
from mockingbird.scanning.types import DecisionStep


def _format_step(step: DecisionStep) -> str:
    text = f"{step.step}={step.result}"
    if step.source:
        text += f" [{step.source}]"
    if step.detail:
        text += f" ({step.detail})"
    return text


def print_table(report: ScanReport) -> None:
    if not report.routes:
        print("No mock routes found.")
        return

    rows = [(route.method, route.template, route.file) for route in report.routes]
    max_method = max(6, *(len(r[0]) for r in rows))  # "METHOD" header
    max_path = max(4, *(len(r[1]) for r in rows))  # "PATH" header

    fmt = f"{{:<{max_method}}}  {{:<{max_path}}}  {{}}"
    print(fmt.format("METHOD", "PATH", "FILE"))
    sep_len = max_method + max_path + 4 + max(len(r[2]) for r in rows)
    print("-" * min(sep_len, 80))
    for row in rows:
        print(fmt.format(*row))


def print_explain(report: ScanReport) -> None:
    if report.skipped:
        print()
        print("Skipped:")
        for skip in report.skipped:
            target = f" {skip.method} {skip.url}" if skip.method else ""
            print(f"  {skip.file}{target}: {skip.reason}")
            for step in skip.decision_chain:
                print(f"    {_format_step(step)}")
    if report.ignored:
        print()
        print("Ignored:")
        for ignore in report.ignored:
            print(f"  {ignore.file}: {ignore.reason}")
            for step in ignore.decision_chain:
                print(f"    {_format_step(step)}")
    counts = summarize([*report.skipped, *report.ignored])
    if counts:
        print()
        print(", ".join(f"{reason}: {count}" for reason, count in sorted(counts.items())))


def run_routes(args: argparse.Namespace) -> None:
    """Scan the directories named in *args* and print the route table."""
    try:
        config = build_config(args)
        config.validate()
    except ConfigurationError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    report = run_scan(config)
    print_table(report)
    if args.explain:
        print_explain(report)
