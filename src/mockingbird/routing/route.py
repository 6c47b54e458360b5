"""ResolvedRoute, ResolvedMiddleware and RouteMatch frozen dataclasses."""

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any, Literal

from mockingbird.routing.template import RouteToken

type MiddlewarePosition = Literal["pre", "normal", "post"]


@dataclass(frozen=True, slots=True)
class ResolvedMiddleware:
    """A directory-config middleware tagged with where it came from.

    Attributes:
        handle: The middleware callable, ``(ctx, next) -> Response | None``.
        source: Path of the config file that registered it.
        index: Position within its source bucket.
        position: ``pre``, ``normal`` or ``post``.
    """

    handle: Callable[..., Any]
    source: str
    index: int
    position: MiddlewarePosition = "normal"


@dataclass(frozen=True, slots=True)
class ResolvedRoute:
    """A fully resolved entry of the route table.

    Built by the route table builder, compiled by the dispatcher.
    ``template`` always starts with ``/`` and ``method`` is one of the
    fixed verbs.
    """

    file: str
    template: str
    method: str
    tokens: tuple[RouteToken, ...]
    score: tuple[int, ...]
    handler: Any
    middlewares: tuple[ResolvedMiddleware, ...] = ()
    status: int | None = None
    headers: Mapping[str, str] = field(default_factory=dict)
    delay: float | None = None
    rule_index: int = 0
    config_chain: tuple[str, ...] = ()

    @property
    def key(self) -> str:
        """Deduplication key, e.g. ``"GET /api/users"``."""
        return f"{self.method} {self.template}"


@dataclass(frozen=True, slots=True)
class RouteMatch:
    """Result of a successful match.

    Catch-all parameters map to a list of decoded segments.
    """

    route: ResolvedRoute
    params: dict[str, str | list[str]]
