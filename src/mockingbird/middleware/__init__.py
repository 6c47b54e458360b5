"""Middleware for mock routes.

A middleware is any callable matching::

    async def mw(ctx: MockContext, next: Next) -> Response | None

Registered per directory in ``index.config.py`` under ``pre``,
``normal`` (or the legacy ``middleware`` field) and ``post``.
"""

from mockingbird.middleware.protocol import Middleware, Next

__all__ = ["Middleware", "Next"]
