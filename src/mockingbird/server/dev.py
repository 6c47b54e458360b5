"""Serve a live ``MockServer`` with uvicorn.

uvicorn's ``run()`` accepts the ASGI object directly, so the server the
caller configured is the one that answers requests.  Reloading is done
by the mock server's own file watcher, not by restarting the process.
"""

import uvicorn


def run_dev_server(
    app: object,
    host: str,
    port: int,
    *,
    log_level: str = "info",
) -> None:
    """Start uvicorn in the foreground until interrupted.

    Args:
        app: ASGI callable (a ``MockServer`` instance).
        host: Bind host address.
        port: Bind port number.
        log_level: uvicorn log level name.
    """
    config = uvicorn.Config(
        app,
        host=host,
        port=port,
        lifespan="on",
        log_level=log_level,
    )
    uvicorn.Server(config).run()
