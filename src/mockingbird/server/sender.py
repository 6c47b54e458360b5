"""ASGI response sending: translates a ``Response`` into ASGI messages."""

from mockingbird._internal.asgi import Send
from mockingbird.http.response import Response


def body_allowed(status: int) -> bool:
    """Whether *status* permits a message body."""
    return not (100 <= status < 200 or status in {204, 304})


def encode_headers(response: Response, content_length: int) -> list[tuple[bytes, bytes]]:
    raw_headers: list[tuple[bytes, bytes]] = []
    if response.content_type is not None:
        raw_headers.append((b"content-type", response.content_type.encode("latin-1")))
    for name, value in response.headers:
        lowered = name.lower()
        if lowered == "content-length":
            continue
        raw_headers.append((lowered.encode("latin-1"), value.encode("latin-1")))
    raw_headers.append((b"content-length", str(content_length).encode("latin-1")))
    return raw_headers


async def send_response(response: Response, send: Send, *, head: bool = False) -> None:
    """Send *response* as one start and one body message.

    Bodies are dropped for 1xx/204/304.  For ``HEAD`` requests the
    content-length of the would-be body is kept and the body omitted.
    """
    body = response.body_bytes if body_allowed(response.status) else b""
    await send(
        {
            "type": "http.response.start",
            "status": response.status,
            "headers": encode_headers(response, len(body)),
        }
    )
    await send(
        {
            "type": "http.response.body",
            "body": b"" if head else body,
        }
    )
