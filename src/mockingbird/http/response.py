"""HTTP response with chainable ``.with_*()`` transformations.

Every transformation returns a new ``Response``.  Unlike request
headers, response headers are *set*, not appended: ``with_header``
replaces any existing header of the same name (case-insensitive), which
is what status/header overrides on a mock route need.
"""

import json
from collections.abc import Mapping
from dataclasses import dataclass, replace
from typing import Any

JSON_CONTENT_TYPE = "application/json; charset=utf-8"
TEXT_CONTENT_TYPE = "text/plain; charset=utf-8"
BINARY_CONTENT_TYPE = "application/octet-stream"


@dataclass(frozen=True, slots=True)
class Response:
    """A mock response.

    ``content_type`` is kept apart from ``headers`` and sent as the
    ``content-type`` header when set.  Setting ``content-type`` through
    ``with_header`` updates ``content_type`` instead.
    """

    body: str | bytes = b""
    status: int = 200
    content_type: str | None = None
    headers: tuple[tuple[str, str], ...] = ()

    # -- Constructors --

    @classmethod
    def from_json(cls, value: Any, *, status: int = 200) -> "Response":
        """Serialize *value* as a JSON body."""
        return cls(
            body=json.dumps(value, ensure_ascii=False, default=str),
            status=status,
            content_type=JSON_CONTENT_TYPE,
        )

    @classmethod
    def from_text(cls, text: str, *, status: int = 200) -> "Response":
        return cls(body=text, status=status, content_type=TEXT_CONTENT_TYPE)

    @classmethod
    def empty(cls, status: int = 204) -> "Response":
        return cls(body=b"", status=status)

    # -- Chainable transformations --

    def with_status(self, status: int) -> "Response":
        return replace(self, status=status)

    def with_header(self, name: str, value: str) -> "Response":
        """Return a new Response with *name* set to *value*."""
        if name.lower() == "content-type":
            return replace(self, content_type=value)
        lowered = name.lower()
        kept = tuple((key, item) for key, item in self.headers if key.lower() != lowered)
        return replace(self, headers=(*kept, (name, value)))

    def with_headers(self, headers: Mapping[str, str]) -> "Response":
        """Set every header in *headers*; existing names are overwritten."""
        response = self
        for name, value in headers.items():
            response = response.with_header(name, value)
        return response

    def without_header(self, name: str) -> "Response":
        if name.lower() == "content-type":
            return replace(self, content_type=None)
        lowered = name.lower()
        return replace(
            self,
            headers=tuple((key, item) for key, item in self.headers if key.lower() != lowered),
        )

    # -- Accessors --

    def header(self, name: str, default: str | None = None) -> str | None:
        """Return the value of header *name*, or *default*."""
        if name.lower() == "content-type":
            return self.content_type if self.content_type is not None else default
        lowered = name.lower()
        for key, value in self.headers:
            if key.lower() == lowered:
                return value
        return default

    @property
    def header_dict(self) -> dict[str, str]:
        """All headers, including ``content-type``, keyed in lower case."""
        headers = {key.lower(): value for key, value in self.headers}
        if self.content_type is not None:
            headers["content-type"] = self.content_type
        return headers

    @property
    def body_bytes(self) -> bytes:
        if isinstance(self.body, str):
            return self.body.encode("utf-8")
        return bytes(self.body)

    @property
    def text(self) -> str:
        if isinstance(self.body, str):
            return self.body
        return bytes(self.body).decode("utf-8")

    def json(self) -> Any:
        return json.loads(self.body_bytes)
