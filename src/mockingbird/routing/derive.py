"""Derive HTTP method and URL template from a mock file path.

``users/[id].get.py``        -> GET  /users/[id]
``health.json``              -> GET  /health      (data files default to GET)
``users/index.post.py``      -> POST /users
``index.get.json``           -> GET  /
"""

import logging
from dataclasses import dataclass
from pathlib import Path, PurePosixPath

from mockingbird.routing.constants import DATA_EXTENSIONS, METHOD_SUFFIXES
from mockingbird.routing.template import RouteToken, parse_route_template

logger = logging.getLogger("mockingbird.routing")


@dataclass(frozen=True, slots=True)
class DerivedRoute:
    """Method and parsed template derived from a file name."""

    template: str
    method: str
    tokens: tuple[RouteToken, ...]
    score: tuple[int, ...]


def normalize_prefix(prefix: str | None) -> str:
    """``"api"`` and ``"/api/"`` both become ``"/api"``; empty stays empty."""
    if not prefix:
        return ""
    normalized = prefix if prefix.startswith("/") else f"/{prefix}"
    return normalized[:-1] if normalized.endswith("/") else normalized


def resolve_template(template: str, prefix: str | None) -> str:
    """Apply a URL prefix unless the template already lives under it."""
    normalized = template if template.startswith("/") else f"/{template}"
    normalized_prefix = normalize_prefix(prefix)
    if not normalized_prefix:
        return normalized
    if normalized == normalized_prefix or normalized.startswith(f"{normalized_prefix}/"):
        return normalized
    if normalized == "/":
        return f"{normalized_prefix}/"
    return f"{normalized_prefix}{normalized}"


def strip_method_suffix(base: str) -> tuple[str, str | None]:
    """Split ``"users.get"`` into ``("users", "GET")``.

    Returns the name unchanged and ``None`` when the last dotted part is
    not a known verb.
    """
    name, dot, last = base.rpartition(".")
    if dot and last.lower() in METHOD_SUFFIXES:
        return name, last.upper()
    return base, None


def _ignore(*args: object) -> None:
    pass


def relative_posix(file: str | Path, root: str | Path) -> str:
    return Path(file).relative_to(Path(root)).as_posix()


def derive_route_from_file(
    file: str | Path,
    root: str | Path,
    *,
    quiet: bool = False,
) -> DerivedRoute | None:
    """Derive ``{template, method, tokens, score}`` from a file path.

    Returns ``None`` (after logging a warning unless *quiet*) when the
    file name does not map onto a valid route.
    """
    warn = _ignore if quiet else logger.warning
    rel = PurePosixPath(relative_posix(file, root))
    ext = rel.suffix
    stem_path = rel.with_suffix("") if ext else rel
    name, method = strip_method_suffix(stem_path.name)
    if method is None and ext.lower() in DATA_EXTENSIONS:
        method = "GET"
    if method is None:
        warn("Skip mock without method suffix: %s", file)
        return None
    if not name:
        warn("Skip mock with empty route name: %s", file)
        return None

    segments = [*stem_path.parent.parts, name] if str(stem_path.parent) != "." else [name]
    if segments[-1] == "index":
        segments.pop()
    template = "/" + "/".join(segments)

    parsed = parse_route_template(template)
    if parsed.errors:
        for error in parsed.errors:
            warn("%s in %s", error, file)
        return None
    for warning in parsed.warnings:
        warn("%s in %s", warning, file)

    return DerivedRoute(
        template=parsed.template,
        method=method,
        tokens=parsed.tokens,
        score=parsed.score,
    )
