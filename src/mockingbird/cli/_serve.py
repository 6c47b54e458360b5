"""``mockingbird serve``: scan, then serve with uvicorn."""

import argparse
import sys

from mockingbird.app import MockServer
from mockingbird.config import ServerConfig
from mockingbird.errors import ConfigurationError


def build_config(args: argparse.Namespace) -> ServerConfig:
    """Translate parsed CLI arguments into a ``ServerConfig``."""
    overrides: dict[str, object] = {}
    if getattr(args, "host", None):
        overrides["host"] = args.host
    if getattr(args, "port", None) is not None:
        overrides["port"] = args.port
    ignore_prefix = getattr(args, "ignore_prefix", None)
    return ServerConfig(
        dirs=tuple(args.dirs),
        prefix=args.prefix,
        include=tuple(args.include) if args.include else None,
        exclude=tuple(args.exclude) if args.exclude else None,
        ignore_prefix=tuple(ignore_prefix) if ignore_prefix else None,
        log_level=args.log_level,
        watch=getattr(args, "watch", False),
        debug=getattr(args, "debug", False),
        **overrides,
    )


def run_serve(args: argparse.Namespace) -> None:
    try:
        server = MockServer(build_config(args))
    except ConfigurationError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc
    server.run()
