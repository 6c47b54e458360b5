"""Request dispatcher: match a request against the route table and run it.

The table is compiled once per refresh; each route becomes an anchored
regex built from its tokens::

    /users/[id]           ^/users/(?P<p1>[^/]+)/?$
    /docs/[...slug]       ^/docs/(?P<p1>.+?)/?$
    /docs/[[...slug]]     ^/docs(?:/(?P<p1>.*?))?/?$

Matching walks the table in order and the first hit wins.  The matched
route then runs through a fixed chain::

    finalize -> pre -> normal -> post -> handler

``finalize`` applies the route's delay and its status/header overrides
to whatever the inner chain produced.
"""

import asyncio
import enum
import logging
import re
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from urllib.parse import quote

from mockingbird._internal.invoke import invoke
from mockingbird.http.request import Request
from mockingbird.http.response import Response
from mockingbird.middleware.protocol import Next
from mockingbird.routing.route import ResolvedRoute, RouteMatch
from mockingbird.routing.template import RouteToken, decode_segment
from mockingbird.server.context import MockContext
from mockingbird.server.normalize import normalize_result

logger = logging.getLogger("mockingbird.server")


class NoMatch(enum.Enum):
    """Returned instead of a response when no route matches."""

    NO_MATCH = "no-match"

    def __bool__(self) -> bool:
        return False


NO_MATCH = NoMatch.NO_MATCH

# Characters a client may leave unescaped inside a path segment
_SAFE_CHARS = "!$&'()*+,;=:@-._~"


# ---------------------------------------------------------------------------
# Pattern compilation
# ---------------------------------------------------------------------------


def compile_pattern(tokens: Sequence[RouteToken]) -> re.Pattern[str]:
    """Compile route tokens into an anchored path regex.

    Group names are positional (``p0``, ``p1``, ...) since parameter
    names may contain characters regex group names cannot.
    """
    parts: list[str] = []
    for index, token in enumerate(tokens):
        group = f"p{index}"
        match token.kind:
            case "static":
                parts.append("/" + _static_pattern(token.value))
            case "param":
                parts.append(f"/(?P<{group}>[^/]+)")
            case "catchall":
                parts.append(f"/(?P<{group}>.+?)")
            case "optional-catchall":
                parts.append(f"(?:/(?P<{group}>.*?))?")
    return re.compile("^" + "".join(parts) + "/?$")


def _static_pattern(value: str) -> str:
    literal = re.escape(value)
    quoted = quote(value, safe=_SAFE_CHARS)
    if quoted == value:
        return literal
    return f"(?:{literal}|{re.escape(quoted)})"


def _split_catchall(value: str | None) -> list[str]:
    if not value:
        return []
    return [decode_segment(segment) for segment in value.split("/") if segment]


def extract_params(
    tokens: Sequence[RouteToken],
    match: re.Match[str],
) -> dict[str, str | list[str]]:
    """Decode captured groups into named params."""
    params: dict[str, str | list[str]] = {}
    for index, token in enumerate(tokens):
        if token.kind == "static":
            continue
        value = match.group(f"p{index}")
        if token.kind == "param":
            params[token.value] = decode_segment(value)
        else:
            params[token.value] = _split_catchall(value)
    return params


# ---------------------------------------------------------------------------
# Status and override helpers
# ---------------------------------------------------------------------------


def is_valid_status(status: object) -> bool:
    return isinstance(status, int) and not isinstance(status, bool) and 200 <= status <= 599


def resolve_status(route_status: int | None, response_status: int) -> int:
    """Route status if valid, else the response's own status if valid, else 200."""
    if is_valid_status(route_status):
        return route_status  # type: ignore[return-value]
    if is_valid_status(response_status):
        return response_status
    return 200


def apply_route_overrides(response: Response, route: ResolvedRoute) -> Response:
    if route.headers:
        response = response.with_headers(route.headers)
    status = resolve_status(route.status, response.status)
    if status != response.status:
        response = response.with_status(status)
    return response


# ---------------------------------------------------------------------------
# Dispatcher
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class CompiledRoute:
    route: ResolvedRoute
    pattern: re.Pattern[str]


class Dispatcher:
    """Matches requests against one published route table.

    The table is never mutated; a refresh builds a new ``Dispatcher``.

    Usage::

        dispatcher = Dispatcher(scan_routes(["mock"]))
        response = await dispatcher.dispatch(request)
        if response is NO_MATCH:
            ...
    """

    __slots__ = ("_compiled", "routes")

    def __init__(self, routes: Iterable[ResolvedRoute] = ()) -> None:
        self.routes: tuple[ResolvedRoute, ...] = tuple(routes)
        self._compiled = tuple(
            CompiledRoute(route, compile_pattern(route.tokens)) for route in self.routes
        )

    def __len__(self) -> int:
        return len(self.routes)

    def _find(self, method: str, path: str) -> RouteMatch | NoMatch:
        for compiled in self._compiled:
            if compiled.route.method != method:
                continue
            match = compiled.pattern.match(path)
            if match is not None:
                return RouteMatch(
                    route=compiled.route,
                    params=extract_params(compiled.route.tokens, match),
                )
        return NO_MATCH

    def match(self, method: str, path: str) -> RouteMatch | NoMatch:
        """Return the first matching route in table order.

        ``HEAD`` falls back to ``GET`` routes when no ``HEAD`` route matches.
        """
        method = method.upper()
        if not path.startswith("/"):
            path = f"/{path}"
        found = self._find(method, path)
        if found is NO_MATCH and method == "HEAD":
            found = self._find("GET", path)
        return found

    async def dispatch(self, request: Request) -> Response | NoMatch:
        """Match *request* and run its route, or return ``NO_MATCH``."""
        found = self.match(request.method, request.match_path)
        if found is NO_MATCH:
            return NO_MATCH
        logger.debug("%s %s -> %s (%s)", request.method, request.path, found.route.key, found.route.file)
        return await self.handle(found, request)

    async def handle(self, match: RouteMatch, request: Request) -> Response:
        """Run the finalize -> pre -> normal -> post -> handler chain."""
        route = match.route
        ctx = MockContext(request, route, match.params)

        async def terminal() -> Response | None:
            value = route.handler
            if callable(value):
                value = await invoke(value, ctx)
            ctx.response = normalize_result(ctx, value)
            return ctx.response

        # Wrap middleware around the terminal handler, innermost last
        chain: Next = terminal
        for entry in reversed(route.middlewares):

            async def step(_mw: object = entry.handle, _next: Next = chain) -> Response | None:
                return await _run_middleware(ctx, _mw, _next)

            chain = step

        await chain()
        response = ctx.response if ctx.response is not None else normalize_result(ctx, None)

        if route.delay is not None and route.delay > 0:
            await asyncio.sleep(route.delay / 1000)
        return apply_route_overrides(response, route)


async def _run_middleware(ctx: MockContext, middleware: object, next_: Next) -> Response | None:
    """Call one middleware and apply its mutate-or-replace result."""

    async def call_next() -> Response | None:
        result = await next_()
        if result is not None:
            ctx.response = result
        return ctx.response

    result = await invoke(middleware, ctx, call_next)
    if result is not None:
        ctx.response = result if isinstance(result, Response) else normalize_result(ctx, result)
    return ctx.response
