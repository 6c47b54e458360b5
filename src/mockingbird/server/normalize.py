"""Turn whatever a mock handler returns into a ``Response``.

=====================  ==========================================
Handler value          Response
=====================  ==========================================
``Response``           passed through untouched
``None``               empty body, 204 (or the status set on ctx)
``str``                ``text/plain``
bytes-like             ``application/octet-stream`` unless set
anything else          JSON
=====================  ==========================================
"""

from typing import Any

from mockingbird.http.response import BINARY_CONTENT_TYPE, Response
from mockingbird.server.context import MockContext


def normalize_result(ctx: MockContext, value: Any) -> Response:
    if isinstance(value, Response):
        return value

    if value is None:
        status = ctx.status if ctx.status_set and ctx.status != 200 else 204
        return _apply_pending(ctx, Response.empty(status))

    if isinstance(value, str):
        response = Response.from_text(value)
    elif isinstance(value, (bytes, bytearray, memoryview)):
        content_type = _pending_content_type(ctx) or BINARY_CONTENT_TYPE
        response = Response(body=bytes(value), content_type=content_type)
    else:
        response = Response.from_json(value)

    if ctx.status_set:
        response = response.with_status(ctx.status)
    return _apply_pending(ctx, response)


def _pending_content_type(ctx: MockContext) -> str | None:
    for name, value in ctx.pending_headers.items():
        if name.lower() == "content-type":
            return value
    return None


def _apply_pending(ctx: MockContext, response: Response) -> Response:
    if ctx.pending_headers:
        response = response.with_headers(ctx.pending_headers)
    return response
