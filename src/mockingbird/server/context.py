"""Per-request context passed to mock handlers and middleware."""

from collections.abc import Mapping
from typing import Any

from mockingbird.http.headers import Headers
from mockingbird.http.query import QueryParams
from mockingbird.http.request import Request
from mockingbird.http.response import Response
from mockingbird.routing.route import ResolvedRoute


class MockContext:
    """Request data plus the in-flight response.

    ``response`` is ``None`` until the handler has produced one.  Before
    that, ``header()`` and ``set_status()`` are remembered and applied
    to whatever the handler returns; afterwards they rewrite
    ``response`` directly.
    """

    __slots__ = ("_headers", "_status", "params", "request", "response", "route", "state")

    def __init__(
        self,
        request: Request,
        route: ResolvedRoute,
        params: Mapping[str, str | list[str]] | None = None,
    ) -> None:
        self.request = request
        self.route = route
        self.params: dict[str, str | list[str]] = dict(params or {})
        self.response: Response | None = None
        self.state: dict[str, Any] = {}
        self._status: int | None = None
        self._headers: dict[str, str] = {}

    # -- Request shortcuts --

    @property
    def method(self) -> str:
        return self.request.method

    @property
    def path(self) -> str:
        return self.request.path

    @property
    def query(self) -> QueryParams:
        return self.request.query

    @property
    def headers(self) -> Headers:
        return self.request.headers

    async def body(self) -> bytes:
        return await self.request.body()

    async def text(self) -> str:
        return await self.request.text()

    async def json(self) -> Any:
        return await self.request.json()

    # -- Response state --

    @property
    def status(self) -> int:
        """Status of the in-flight response, or the pending status."""
        if self.response is not None:
            return self.response.status
        return self._status if self._status is not None else 200

    @property
    def status_set(self) -> bool:
        """True once ``set_status`` was called before a response existed."""
        return self._status is not None

    @property
    def pending_headers(self) -> Mapping[str, str]:
        return self._headers

    def set_status(self, status: int) -> None:
        self._status = status
        if self.response is not None:
            self.response = self.response.with_status(status)

    def header(self, name: str, value: str) -> None:
        self._headers[name] = value
        if self.response is not None:
            self.response = self.response.with_header(name, value)

    def __repr__(self) -> str:
        return f"MockContext({self.method} {self.path} -> {self.route.key})"
