"""Scanning: walk mock directories and build the route table.

    from mockingbird.scanning import scan_routes

    routes = scan_routes(["mock"], prefix="/api", on_skip=print)

Everything a scan produces (caches, records, the table itself) is
created fresh per call.
"""

from mockingbird.scanning.scanner import scan_routes
from mockingbird.scanning.types import DirectoryConfig, MockRule

__all__ = ["DirectoryConfig", "MockRule", "scan_routes"]
