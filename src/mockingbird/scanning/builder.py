"""Route table builder.

Turns accepted rules into ``ResolvedRoute`` entries and orders them:
method, then specificity score, then template.  The sort is stable, so
routes that tie on all three keep their discovery order.

Duplicate ``METHOD template`` keys are logged but both entries are kept;
at dispatch the first one in table order answers.
"""

import functools
import logging
from collections.abc import Iterable, Mapping
from typing import Any

from mockingbird.routing.derive import DerivedRoute, resolve_template
from mockingbird.routing.route import ResolvedRoute
from mockingbird.routing.template import compare_route_score, parse_route_template
from mockingbird.scanning.types import EffectiveConfig

logger = logging.getLogger("mockingbird.scanner")


def compare_routes(a: ResolvedRoute, b: ResolvedRoute) -> int:
    """Total order used for the route table."""
    if a.method != b.method:
        return -1 if a.method < b.method else 1
    if score := compare_route_score(a.score, b.score):
        return score
    if a.template != b.template:
        return -1 if a.template < b.template else 1
    return 0


def sort_routes(routes: Iterable[ResolvedRoute]) -> list[ResolvedRoute]:
    return sorted(routes, key=functools.cmp_to_key(compare_routes))


class RouteTableBuilder:
    """Collects resolved routes for one scan cycle.

    Usage::

        builder = RouteTableBuilder(prefix="/api")
        builder.add(rule, derived, file=path, effective=config)
        table = builder.build()
    """

    __slots__ = ("_prefix", "_routes", "_seen")

    def __init__(self, prefix: str = "") -> None:
        self._prefix = prefix
        self._routes: list[ResolvedRoute] = []
        self._seen: set[str] = set()

    def __len__(self) -> int:
        return len(self._routes)

    def add(
        self,
        rule: Mapping[str, Any],
        derived: DerivedRoute,
        *,
        file: str,
        effective: EffectiveConfig,
        rule_index: int = 0,
    ) -> ResolvedRoute | None:
        """Resolve one accepted rule and append it to the table.

        Returns ``None`` when the prefixed template does not parse.
        """
        template = resolve_template(derived.template, self._prefix)
        parsed = parse_route_template(template)
        if parsed.errors:
            for error in parsed.errors:
                logger.warning("%s in %s", error, file)
            return None
        for warning in parsed.warnings:
            logger.warning("%s in %s", warning, file)

        headers = {**(effective.headers or {}), **(rule.get("headers") or {})}
        status = rule.get("status")
        if status is None:
            status = effective.status
        delay = rule.get("delay")
        if delay is None:
            delay = effective.delay

        route = ResolvedRoute(
            file=file,
            template=parsed.template,
            method=derived.method,
            tokens=parsed.tokens,
            score=parsed.score,
            handler=rule["handler"],
            middlewares=effective.middlewares,
            status=status,
            headers=headers,
            delay=delay,
            rule_index=rule_index,
            config_chain=effective.config_chain,
        )

        if route.key in self._seen:
            logger.warning("Duplicate mock route %s from %s", route.key, file)
        self._seen.add(route.key)
        self._routes.append(route)
        return route

    def build(self) -> list[ResolvedRoute]:
        """Return the sorted table. The builder can keep accepting rules."""
        return sort_routes(self._routes)
