"""Call user code that may be ``def`` or ``async def``.

Mock handlers, middleware and config factories are all user-written;
this is the one place that decides whether to await the result.

Usage::

    from mockingbird._internal.invoke import invoke

    result = await invoke(rule.handler, ctx)
"""

import inspect
from typing import Any


async def invoke(func: Any, *args: Any, **kwargs: Any) -> Any:
    """Call *func* and await the result if it is awaitable."""
    result = func(*args, **kwargs)
    if inspect.isawaitable(result):
        result = await result
    return result
