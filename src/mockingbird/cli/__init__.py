"""Mockingbird CLI: serve a mock directory or inspect its route table.

Entry point registered as ``mockingbird`` in ``pyproject.toml``::

    [project.scripts]
    mockingbird = "mockingbird.cli:main"
"""

import argparse
import logging
import sys

from mockingbird.config import LOG_LEVELS


def _add_scan_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "dirs",
        nargs="*",
        default=["mock"],
        help="Mock directories to scan (default: mock)",
    )
    parser.add_argument("--prefix", default="", help="URL prefix for every route")
    parser.add_argument(
        "--include",
        action="append",
        default=None,
        help="Regex a file path must match (repeatable)",
    )
    parser.add_argument(
        "--exclude",
        action="append",
        default=None,
        help="Regex that excludes matching file paths (repeatable)",
    )
    parser.add_argument(
        "--ignore-prefix",
        action="append",
        default=None,
        help="Path-segment prefix that hides files (repeatable, default: .)",
    )
    parser.add_argument(
        "--log-level",
        default="info",
        choices=LOG_LEVELS,
        help="Logging verbosity",
    )


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for the ``mockingbird`` command."""
    parser = argparse.ArgumentParser(
        prog="mockingbird",
        description="Mockingbird: mock API server driven by convention-named files.",
    )
    subparsers = parser.add_subparsers(dest="command")

    # -- mockingbird serve --------------------------------------------------
    serve_parser = subparsers.add_parser("serve", help="Start the mock server")
    _add_scan_arguments(serve_parser)
    serve_parser.add_argument("--host", default=None, help="Bind host address")
    serve_parser.add_argument("--port", type=int, default=None, help="Bind port number")
    serve_parser.add_argument(
        "--watch",
        action=argparse.BooleanOptionalAction,
        default=True,
        help="Rescan when mock files change (default: on)",
    )
    serve_parser.add_argument(
        "--debug",
        action="store_true",
        help="Show exception details in 500 responses",
    )

    # -- mockingbird routes -------------------------------------------------
    routes_parser = subparsers.add_parser("routes", help="List the mock route table")
    _add_scan_arguments(routes_parser)
    routes_parser.add_argument(
        "--explain",
        action="store_true",
        help="Also list skipped and ignored files with their decision chains",
    )

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.command == "serve":
        from mockingbird.cli._serve import run_serve

        run_serve(args)
    elif args.command == "routes":
        from mockingbird.cli._routes import run_routes

        run_routes(args)
