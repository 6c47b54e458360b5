"""ASGI handler: the only place the mock pipeline touches raw ASGI.

Builds a ``Request`` from the scope, dispatches it against the current
route table and sends the response.  Unmatched requests go to the
fallback ASGI app when one is configured, otherwise they get a 404.
"""

import logging
import time

from mockingbird._internal.asgi import ASGIApp, Receive, Scope, Send
from mockingbird.errors import HTTPError, NotFound
from mockingbird.http.request import Request
from mockingbird.http.response import Response
from mockingbird.server.dispatch import NO_MATCH, Dispatcher
from mockingbird.server.errors import handle_http_error, handle_internal_error
from mockingbird.server.sender import send_response

logger = logging.getLogger("mockingbird.server")


async def handle_request(
    scope: Scope,
    receive: Receive,
    send: Send,
    *,
    dispatcher: Dispatcher,
    fallback: ASGIApp | None = None,
    debug: bool = False,
) -> None:
    """Process a single HTTP request through the mock pipeline."""
    if scope["type"] != "http":
        return

    request = Request.from_asgi(scope, receive)
    start = time.perf_counter()

    try:
        result = await dispatcher.dispatch(request)
        if result is NO_MATCH:
            if fallback is not None:
                await fallback(scope, receive, send)
                return
            raise NotFound(f"No mock for {request.method} {request.path}")
        response: Response = result
    except HTTPError as exc:
        response = handle_http_error(exc, request)
    except Exception as exc:
        response = handle_internal_error(exc, request, debug=debug)

    await send_response(response, send, head=request.method == "HEAD")
    elapsed = (time.perf_counter() - start) * 1000
    logger.info(
        "%s %s %d %.0fms", request.method, request.url, response.status, elapsed
    )
