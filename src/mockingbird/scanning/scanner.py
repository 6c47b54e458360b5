"""File scanner and decision engine.

Every candidate file passes through the same ordered gates:

1. config files are reported, never routed
2. ``config.enabled``   -> skip ``disabled-dir``
3. ``ignore-prefix``    -> skip ``ignore-prefix``
4. ``file.supported``   -> ignore ``unsupported``
5. ``filter.exclude`` / ``filter.include`` -> skip ``exclude`` / ``include``
6. ``route.derived``    -> ignore ``invalid-route``
7. per rule ``rule.enabled`` -> skip ``disabled``

Each gate appends a ``DecisionStep``; the first failing gate ends the
file's evaluation and its chain is attached to the skip or ignore
record handed to the observers.
"""

import logging
import re
from collections.abc import Callable, Iterable, Mapping, Sequence
from pathlib import Path
from typing import Any

from mockingbird.routing.constants import DEFAULT_EXCLUDED_DIRS, DEFAULT_IGNORE_PREFIX
from mockingbird.routing.derive import DerivedRoute, derive_route_from_file, resolve_template
from mockingbird.routing.route import ResolvedRoute
from mockingbird.scanning.builder import RouteTableBuilder
from mockingbird.scanning.dirconfig import ScanCaches, resolve_directory_config
from mockingbird.scanning.files import collect_files, is_config_file, is_supported_file
from mockingbird.scanning.loader import load_rules
from mockingbird.scanning.types import (
    CandidateFile,
    ConfigRecord,
    DecisionStep,
    EffectiveConfig,
    IgnoreReason,
    IgnoreRecord,
    Patterns,
    SkipReason,
    SkipRecord,
    rule_fields,
)

logger = logging.getLogger("mockingbird.scanner")

type SkipObserver = Callable[[SkipRecord], None]
type IgnoreObserver = Callable[[IgnoreRecord], None]
type ConfigObserver = Callable[[ConfigRecord], None]

# Rule keys that only file naming may decide
_RESERVED_RULE_KEYS = ("response", "url", "method")


# ---------------------------------------------------------------------------
# Pattern and prefix helpers
# ---------------------------------------------------------------------------


def normalize_ignore_prefix(
    value: str | Sequence[str] | None,
    fallback: Sequence[str] = DEFAULT_IGNORE_PREFIX,
) -> tuple[str, ...]:
    """Coerce an ignore-prefix setting to a tuple of non-empty strings."""
    if value is None:
        entries: Iterable[Any] = fallback
    elif isinstance(value, str):
        entries = (value,)
    else:
        entries = value
    return tuple(entry for entry in entries if isinstance(entry, str) and entry)


def has_ignored_prefix(file: str | Path, root: str | Path, prefixes: Sequence[str]) -> bool:
    """True when any root-relative path segment starts with one of *prefixes*."""
    if not prefixes:
        return False
    relative = Path(file).absolute().relative_to(Path(root).absolute())
    return any(
        segment.startswith(prefix) for segment in relative.parts for prefix in prefixes
    )


def compile_patterns(patterns: Patterns | None) -> tuple[re.Pattern[str], ...]:
    """Compile a pattern or list of patterns; strings are treated as regexes."""
    if patterns is None:
        return ()
    entries = [patterns] if isinstance(patterns, (str, re.Pattern)) else list(patterns)
    compiled: list[re.Pattern[str]] = []
    for entry in entries:
        if isinstance(entry, re.Pattern):
            compiled.append(entry)
        elif isinstance(entry, str):
            try:
                compiled.append(re.compile(entry))
            except re.error as exc:
                logger.warning("Invalid pattern %r: %s", entry, exc)
    return tuple(compiled)


def match_any(patterns: Sequence[re.Pattern[str]], value: str) -> bool:
    return any(pattern.search(value) for pattern in patterns)


def _one_or_many(values: Sequence[str]) -> str | list[str] | None:
    if not values:
        return None
    return values[0] if len(values) == 1 else list(values)


def snapshot_effective_config(
    config: EffectiveConfig,
    *,
    include: Sequence[re.Pattern[str]],
    exclude: Sequence[re.Pattern[str]],
    ignore_prefix: Sequence[str],
) -> dict[str, Any] | None:
    """Plain-dict view of the config that applied to a file.

    Patterns are rendered as their source strings.  Returns ``None``
    when nothing is set.
    """
    snapshot: dict[str, Any] = {}
    if config.headers:
        snapshot["headers"] = dict(config.headers)
    if config.status is not None:
        snapshot["status"] = config.status
    if config.delay is not None:
        snapshot["delay"] = config.delay
    if config.enabled is not None:
        snapshot["enabled"] = config.enabled
    if ignore_prefix:
        snapshot["ignore_prefix"] = _one_or_many(ignore_prefix)
    if include:
        snapshot["include"] = _one_or_many([p.pattern for p in include])
    if exclude:
        snapshot["exclude"] = _one_or_many([p.pattern for p in exclude])
    return snapshot or None


def _enabled_detail(enabled: bool | None) -> str:
    if enabled is False:
        return "enabled=false"
    if enabled is True:
        return "enabled=true"
    return "enabled=true (default)"


def _filter_detail(matched: bool, patterns: Sequence[re.Pattern[str]]) -> str | None:
    if not patterns:
        return None
    label = "matched" if matched else "no match"
    return f"{label}: {', '.join(p.pattern for p in patterns)}"


# ---------------------------------------------------------------------------
# Scanner
# ---------------------------------------------------------------------------


class _FileScan:
    """Evaluation state of a single candidate file."""

    __slots__ = ("candidate", "chain", "effective", "snapshot", "steps")

    def __init__(
        self,
        candidate: CandidateFile,
        effective: EffectiveConfig,
        snapshot: dict[str, Any] | None,
    ) -> None:
        self.candidate = candidate
        self.effective = effective
        self.snapshot = snapshot
        self.chain = effective.config_chain
        self.steps: list[DecisionStep] = []

    @property
    def file(self) -> str:
        return str(self.candidate.file)

    def record(
        self,
        step: str,
        passed: bool,
        *,
        source: str | None = None,
        detail: str | None = None,
    ) -> bool:
        self.steps.append(
            DecisionStep(step=step, result="pass" if passed else "fail", source=source, detail=detail)
        )
        return passed


class _Scanner:
    __slots__ = (
        "builder",
        "caches",
        "exclude",
        "ignore_prefix",
        "include",
        "on_config",
        "on_ignore",
        "on_skip",
        "prefix",
    )

    def __init__(
        self,
        *,
        prefix: str,
        include: Patterns | None,
        exclude: Patterns | None,
        ignore_prefix: str | Sequence[str] | None,
        on_skip: SkipObserver | None,
        on_ignore: IgnoreObserver | None,
        on_config: ConfigObserver | None,
    ) -> None:
        self.prefix = prefix
        self.include = include
        self.exclude = exclude
        self.ignore_prefix = normalize_ignore_prefix(ignore_prefix)
        self.on_skip = on_skip
        self.on_ignore = on_ignore
        self.on_config = on_config
        self.caches = ScanCaches()
        self.builder = RouteTableBuilder(prefix)

    # -- Outcomes ----------------------------------------------------------

    def _skip(
        self,
        scan: _FileScan,
        reason: SkipReason,
        *,
        derived: DerivedRoute | None = None,
        steps: Sequence[DecisionStep] | None = None,
    ) -> None:
        if self.on_skip is None:
            return
        if derived is None:
            derived = derive_route_from_file(scan.candidate.file, scan.candidate.root, quiet=True)
        method = url = None
        if derived is not None:
            method = derived.method
            url = resolve_template(derived.template, self.prefix)
        self.on_skip(
            SkipRecord(
                file=scan.file,
                reason=reason,
                method=method,
                url=url,
                config_chain=scan.chain,
                decision_chain=tuple(scan.steps if steps is None else steps),
                effective_config=scan.snapshot,
            )
        )

    def _ignore(self, scan: _FileScan, reason: IgnoreReason) -> None:
        if self.on_ignore is None:
            return
        self.on_ignore(
            IgnoreRecord(
                file=scan.file,
                reason=reason,
                config_chain=scan.chain,
                decision_chain=tuple(scan.steps),
                effective_config=scan.snapshot,
            )
        )

    # -- Gates -------------------------------------------------------------

    def visit_config(self, candidate: CandidateFile) -> None:
        if self.on_config is None:
            return
        config = resolve_directory_config(candidate.file, candidate.root, self.caches)
        self.on_config(ConfigRecord(file=str(candidate.file), enabled=config.enabled is not False))

    def visit(self, candidate: CandidateFile) -> None:
        effective = resolve_directory_config(candidate.file, candidate.root, self.caches)
        sources = effective.config_sources

        # Directory values replace scan-level values wholesale
        ignore_prefix = (
            normalize_ignore_prefix(effective.ignore_prefix, ())
            if effective.ignore_prefix is not None
            else self.ignore_prefix
        )
        include = compile_patterns(
            effective.include if effective.include is not None else self.include
        )
        exclude = compile_patterns(
            effective.exclude if effective.exclude is not None else self.exclude
        )
        snapshot = snapshot_effective_config(
            effective, include=include, exclude=exclude, ignore_prefix=ignore_prefix
        )
        scan = _FileScan(candidate, effective, snapshot)
        supported = is_supported_file(candidate.file)

        if not scan.record(
            "config.enabled",
            effective.enabled is not False,
            source=sources.get("enabled"),
            detail=_enabled_detail(effective.enabled),
        ):
            if supported:
                self._skip(scan, "disabled-dir")
            return

        if ignore_prefix and not scan.record(
            "ignore-prefix",
            not has_ignored_prefix(candidate.file, candidate.root, ignore_prefix),
            source=sources.get("ignore_prefix"),
            detail=f"prefixes: {', '.join(ignore_prefix)}",
        ):
            if supported:
                self._skip(scan, "ignore-prefix")
            return

        if not scan.record(
            "file.supported",
            supported,
            detail=None if supported else "unsupported file type",
        ):
            self._ignore(scan, "unsupported")
            return

        posix_file = candidate.file.absolute().as_posix()
        if effective.exclude is not None or self.exclude is not None:
            excluded = match_any(exclude, posix_file)
            if not scan.record(
                "filter.exclude",
                not excluded,
                source=sources.get("exclude"),
                detail=_filter_detail(excluded, exclude),
            ):
                self._skip(scan, "exclude")
                return

        if effective.include is not None or self.include is not None:
            included = match_any(include, posix_file)
            if not scan.record(
                "filter.include",
                included,
                source=sources.get("include"),
                detail=_filter_detail(included, include),
            ):
                self._skip(scan, "include")
                return

        derived = derive_route_from_file(candidate.file, candidate.root)
        if derived is None:
            scan.record("route.derived", False, source=scan.file, detail="invalid route name")
            self._ignore(scan, "invalid-route")
            return
        scan.record("route.derived", True, source=scan.file)

        for index, raw_rule in enumerate(load_rules(candidate.file)):
            self.visit_rule(scan, derived, raw_rule, index)

    def visit_rule(
        self,
        scan: _FileScan,
        derived: DerivedRoute,
        raw_rule: Any,
        index: int,
    ) -> None:
        rule = rule_fields(raw_rule)
        if rule is None:
            logger.warning("Skip mock rule %d that is not a rule object: %s", index, scan.file)
            return

        if rule.get("enabled") is False:
            step = DecisionStep(
                step="rule.enabled", result="fail", source=scan.file, detail="enabled=false"
            )
            self._skip(scan, "disabled", derived=derived, steps=(*scan.steps, step))
            return

        unsupported = [key for key in _RESERVED_RULE_KEYS if key in rule]
        if unsupported:
            logger.warning(
                "Skip mock with unsupported fields (%s): %s", ", ".join(unsupported), scan.file
            )
            return
        if "handler" not in rule:
            logger.warning("Skip mock without handler: %s", scan.file)
            return

        self.builder.add(
            rule, derived, file=scan.file, effective=scan.effective, rule_index=index
        )


def scan_routes(
    dirs: Iterable[str | Path],
    *,
    prefix: str = "",
    include: Patterns | None = None,
    exclude: Patterns | None = None,
    ignore_prefix: str | Sequence[str] | None = None,
    on_skip: SkipObserver | None = None,
    on_ignore: IgnoreObserver | None = None,
    on_config: ConfigObserver | None = None,
    exclude_dirs: Iterable[str] = DEFAULT_EXCLUDED_DIRS,
) -> list[ResolvedRoute]:
    """Scan mock directories and build the sorted route table.

    Args:
        dirs: Mock root directories; missing ones contribute nothing.
        prefix: URL prefix applied to every derived template.
        include: Scan-level include pattern(s).
        exclude: Scan-level exclude pattern(s).
        ignore_prefix: Scan-level ignore prefixes (default ``"."``).
        on_skip: Receives a ``SkipRecord`` per skipped file or rule.
        on_ignore: Receives an ``IgnoreRecord`` per unroutable file.
        on_config: Receives a ``ConfigRecord`` per directory config file.
        exclude_dirs: Directory names never descended into.

    Returns:
        The route table, sorted and ready for a ``Dispatcher``.
    """
    scanner = _Scanner(
        prefix=prefix,
        include=include,
        exclude=exclude,
        ignore_prefix=ignore_prefix,
        on_skip=on_skip,
        on_ignore=on_ignore,
        on_config=on_config,
    )
    for candidate in collect_files(dirs, exclude_dirs=exclude_dirs):
        if is_config_file(candidate.file):
            scanner.visit_config(candidate)
            continue
        scanner.visit(candidate)

    routes = scanner.builder.build()
    logger.debug("Scanned %d routes", len(routes))
    return routes


def summarize(records: Iterable[SkipRecord | IgnoreRecord]) -> Mapping[str, int]:
    """Count records by reason."""
    counts: dict[str, int] = {}
    for record in records:
        counts[record.reason] = counts.get(record.reason, 0) + 1
    return counts
