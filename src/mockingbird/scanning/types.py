"""Data models for filesystem mock scanning.

User-facing declarations (``DirectoryConfig``, ``MockRule``) plus the
per-cycle records the scanner produces: effective configs, decision
steps and the skip/ignore/config audit trail.  Everything here is
created fresh on each scan cycle.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Literal

from mockingbird.routing.route import ResolvedMiddleware

type Pattern = re.Pattern[str] | str
type Patterns = Pattern | Sequence[Pattern]
type MiddlewareInput = Callable[..., Any] | Sequence[Callable[..., Any]]

type SkipReason = Literal["disabled", "disabled-dir", "exclude", "ignore-prefix", "include"]
type IgnoreReason = Literal["unsupported", "invalid-route"]
type StepResult = Literal["pass", "fail"]


@dataclass(frozen=True, slots=True)
class DirectoryConfig:
    """Configuration shared by every mock file under a directory.

    Declared as ``config`` in an ``index.config.py`` file.  Deeper
    directories override scalar fields of their ancestors; ``headers``
    merge key by key; middleware lists concatenate root to leaf.

    Attributes:
        headers: Extra response headers.
        status: Response status override.
        delay: Artificial latency in milliseconds.
        enabled: ``False`` disables every route below this directory.
        ignore_prefix: Path-segment prefixes that hide files (default ``"."``).
        include: Regex(es) a file path must match to become a route.
        exclude: Regex(es) that hide matching files.
        pre: Middleware that runs before ``normal``.
        normal: Middleware in the default position.
        post: Middleware that runs right before the handler.
        middleware: Legacy single field, treated as ``normal``.
    """

    headers: Mapping[str, str] | None = None
    status: int | None = None
    delay: float | None = None
    enabled: bool | None = None
    ignore_prefix: str | Sequence[str] | None = None
    include: Patterns | None = None
    exclude: Patterns | None = None
    pre: MiddlewareInput = ()
    normal: MiddlewareInput = ()
    post: MiddlewareInput = ()
    middleware: MiddlewareInput = ()

    @classmethod
    def from_value(cls, value: Any) -> DirectoryConfig | None:
        """Coerce a ``DirectoryConfig`` or mapping; ``None`` if neither."""
        if isinstance(value, DirectoryConfig):
            return value
        if not isinstance(value, Mapping):
            return None
        known = {f.name for f in fields(cls)}
        return cls(**{key: item for key, item in value.items() if key in known})


@dataclass(frozen=True, slots=True)
class MockRule:
    """One mock rule: a handler plus optional per-rule overrides.

    ``handler`` is either a static value (serialized as the response) or
    a callable receiving a ``MockContext``.
    """

    handler: Any
    enabled: bool | None = None
    status: int | None = None
    headers: Mapping[str, str] | None = None
    delay: float | None = None


def rule_fields(value: Any) -> Mapping[str, Any] | None:
    """View a rule declaration as a mapping; ``None`` for anything else."""
    if isinstance(value, MockRule):
        return {f.name: getattr(value, f.name) for f in fields(MockRule)}
    if isinstance(value, Mapping):
        return value
    return None


@dataclass(frozen=True, slots=True)
class CandidateFile:
    """A file found by the walker and the root it was found under."""

    file: Path
    root: Path


@dataclass(frozen=True, slots=True)
class EffectiveConfig:
    """A config chain reduced into one logical config plus provenance.

    ``config_sources`` maps each field name to the config file that last
    set it.
    """

    headers: Mapping[str, str] | None = None
    status: int | None = None
    delay: float | None = None
    enabled: bool | None = None
    ignore_prefix: str | Sequence[str] | None = None
    include: Patterns | None = None
    exclude: Patterns | None = None
    middlewares: tuple[ResolvedMiddleware, ...] = ()
    config_chain: tuple[str, ...] = ()
    config_sources: Mapping[str, str] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class DecisionStep:
    """One gate evaluation in a decision chain."""

    step: str
    result: StepResult
    source: str | None = None
    detail: str | None = None


@dataclass(frozen=True, slots=True)
class SkipRecord:
    """A supported file or rule that was deliberately not routed."""

    file: str
    reason: SkipReason
    method: str | None = None
    url: str | None = None
    config_chain: tuple[str, ...] = ()
    decision_chain: tuple[DecisionStep, ...] = ()
    effective_config: Mapping[str, Any] | None = None


@dataclass(frozen=True, slots=True)
class IgnoreRecord:
    """A file that could not be routed at all."""

    file: str
    reason: IgnoreReason
    config_chain: tuple[str, ...] = ()
    decision_chain: tuple[DecisionStep, ...] = ()
    effective_config: Mapping[str, Any] | None = None


@dataclass(frozen=True, slots=True)
class ConfigRecord:
    """A directory config file seen during the scan."""

    file: str
    enabled: bool = True
