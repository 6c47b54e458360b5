"""Mockingbird: a mock API server driven by convention-named files.

Drop files into a directory and each becomes a route::

    mock/
      index.config.py        # headers, status, delay, middleware for mock/
      health.json            # GET  /health
      users/[id].get.py      # GET  /users/:id
      users/index.post.py    # POST /users

Serve them::

    from mockingbird import MockServer, ServerConfig

    server = MockServer(ServerConfig(dirs=("mock",), prefix="/api", watch=True))
    server.run()

or from the shell with ``mockingbird serve mock --prefix /api --watch``.
"""

__version__ = "0.1.0"
__all__ = [
    "ConfigurationError",
    "DirectoryConfig",
    "Dispatcher",
    "HTTPError",
    "Middleware",
    "MockContext",
    "MockRule",
    "MockServer",
    "MockingbirdError",
    "NO_MATCH",
    "Next",
    "NotFound",
    "Request",
    "Response",
    "RouteTemplateError",
    "ServerConfig",
    "scan_routes",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import mockingbird`` cheap for mock files that only need
    ``DirectoryConfig`` or ``MockRule``.
    """
    if name == "MockServer":
        from mockingbird.app import MockServer

        return MockServer

    if name == "ServerConfig":
        from mockingbird.config import ServerConfig

        return ServerConfig

    if name in ("DirectoryConfig", "MockRule"):
        from mockingbird.scanning import types as _types

        return getattr(_types, name)

    if name == "scan_routes":
        from mockingbird.scanning.scanner import scan_routes

        return scan_routes

    if name in ("Dispatcher", "NO_MATCH"):
        from mockingbird.server import dispatch as _dispatch

        return getattr(_dispatch, name)

    if name == "MockContext":
        from mockingbird.server.context import MockContext

        return MockContext

    if name == "Request":
        from mockingbird.http.request import Request

        return Request

    if name == "Response":
        from mockingbird.http.response import Response

        return Response

    if name in ("Middleware", "Next"):
        from mockingbird.middleware import protocol as _mw

        return getattr(_mw, name)

    if name in (
        "ConfigurationError",
        "HTTPError",
        "MockingbirdError",
        "NotFound",
        "RouteTemplateError",
    ):
        from mockingbird import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
