"""Map exceptions raised while serving a mock to error responses."""

import logging

from mockingbird.errors import HTTPError
from mockingbird.http.request import Request
from mockingbird.http.response import Response

logger = logging.getLogger("mockingbird.server")


def handle_http_error(exc: HTTPError, request: Request) -> Response:
    """Plain-text response for an ``HTTPError``."""
    logger.debug("%d %s %s: %s", exc.status, request.method, request.path, exc.detail)
    response = Response.from_text(exc.detail or f"Error {exc.status}", status=exc.status)
    for name, value in exc.headers:
        response = response.with_header(name, value)
    return response


def handle_internal_error(exc: Exception, request: Request, *, debug: bool = False) -> Response:
    """Log the failure and answer with a generic 500.

    In debug mode the body carries the exception type and message.
    """
    logger.exception("500 %s %s", request.method, request.path)
    if debug:
        return Response.from_text(f"{type(exc).__name__}: {exc}", status=500)
    return Response.from_text("Internal Server Error", status=500)
