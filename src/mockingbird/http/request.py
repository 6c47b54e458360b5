"""Immutable HTTP request.

Metadata is frozen when the request is created; the body is read lazily
from ASGI ``receive`` and cached, so handlers and middleware can all
call ``await request.json()`` without draining the stream twice.
"""

from __future__ import annotations

import json
from collections.abc import AsyncIterator
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import quote

from mockingbird._internal.asgi import Receive, Scope
from mockingbird.http.headers import Headers
from mockingbird.http.query import QueryParams


@dataclass(frozen=True, slots=True)
class Request:
    """An incoming request as seen by mock handlers."""

    method: str
    path: str
    headers: Headers
    query: QueryParams
    raw_path: str = ""
    http_version: str = "1.1"
    client: tuple[str, int] | None = None

    _receive: Receive | None = field(default=None, repr=False, compare=False)
    _cache: dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @property
    def content_type(self) -> str | None:
        return self.headers.get("content-type")

    @property
    def match_path(self) -> str:
        """Percent-encoded path used for route matching."""
        return self.raw_path or quote(self.path)

    @property
    def url(self) -> str:
        """Path plus query string."""
        if self.query.raw:
            return f"{self.path}?{self.query.raw}"
        return self.path

    async def stream(self) -> AsyncIterator[bytes]:
        if self._receive is None:
            return
        while True:
            message = await self._receive()
            chunk = message.get("body", b"")
            if chunk:
                yield chunk
            if not message.get("more_body", False):
                break

    async def body(self) -> bytes:
        """Read the full body once; later calls return the cached bytes."""
        if "body" not in self._cache:
            self._cache["body"] = b"".join([chunk async for chunk in self.stream()])
        return self._cache["body"]

    async def text(self) -> str:
        return (await self.body()).decode("utf-8")

    async def json(self) -> Any:
        """Parse the body as JSON. An empty body gives ``None``."""
        raw = await self.body()
        if not raw.strip():
            return None
        return json.loads(raw)

    @classmethod
    def from_asgi(cls, scope: Scope, receive: Receive | None = None) -> Request:
        client = scope.get("client")
        raw_path = scope.get("raw_path")
        return cls(
            method=scope["method"].upper(),
            path=scope["path"],
            headers=Headers(scope.get("headers", ())),
            query=QueryParams(scope.get("query_string", b"")),
            raw_path=raw_path.decode("latin-1") if raw_path else quote(scope["path"]),
            http_version=scope.get("http_version", "1.1"),
            client=tuple(client) if client else None,
            _receive=receive,
        )
