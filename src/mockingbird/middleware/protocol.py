"""Middleware protocol and Next type alias.

A mock middleware is any callable matching::

    async def mw(ctx: MockContext, next: Next) -> Response | None: ...

Returning ``None`` keeps ``ctx.response`` (possibly mutated through
``ctx.header()`` / ``ctx.set_status()``); returning a ``Response``
replaces it; any other value is normalized like a handler result.
Plain ``def`` middleware works too and continues the chain by
returning ``next()``.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Protocol

from mockingbird.http.response import Response

if TYPE_CHECKING:
    from mockingbird.server.context import MockContext

# Runs the rest of the chain and returns the response it produced
type Next = Callable[[], Awaitable[Response | None]]


class Middleware(Protocol):
    """Protocol for directory-config middleware.

    Function and class forms are both accepted::

        async def stamp(ctx, next):
            await next()
            ctx.header("x-mock", "1")

        class Latency:
            async def __call__(self, ctx, next):
                await asyncio.sleep(0.1)
                return await next()
    """

    async def __call__(self, ctx: MockContext, next: Next) -> Response | None: ...
