"""Route template parsing and specificity scoring.

Templates use bracketed segments taken straight from file names::

    "/users"               -> [static("users")]
    "/users/[id]"          -> [static("users"), param("id")]
    "/docs/[...slug]"      -> [static("docs"), catchall("slug")]
    "/docs/[[...slug]]"    -> [static("docs"), optional-catchall("slug")]

Each token carries a weight (static 4, param 3, catchall 2, optional
catchall 1); the score of a template is the tuple of its token weights.
Higher weights sort first, so a more specific template wins over a
looser one at the same depth.
"""

import re
from dataclasses import dataclass
from typing import Literal
from urllib.parse import unquote

from mockingbird.errors import RouteTemplateError

type TokenKind = Literal["static", "param", "catchall", "optional-catchall"]

_PARAM_NAME_RE = re.compile(r"^[\w-]+$")
_PARAM_RE = re.compile(r"^\[([^\]/]+)\]$")
_CATCHALL_RE = re.compile(r"^\[\.\.\.([^\]/]+)\]$")
_OPTIONAL_CATCHALL_RE = re.compile(r"^\[\[\.\.\.([^\]/]+)\]\]$")
_GROUP_RE = re.compile(r"^\([^)]+\)$")

_WEIGHTS: dict[str, int] = {
    "static": 4,
    "param": 3,
    "catchall": 2,
    "optional-catchall": 1,
}


@dataclass(frozen=True, slots=True)
class RouteToken:
    """A parsed segment of a route template.

    ``value`` is the literal text for static tokens and the parameter
    name for every other kind.
    """

    kind: TokenKind
    value: str

    @property
    def is_param(self) -> bool:
        return self.kind != "static"


@dataclass(frozen=True, slots=True)
class ParsedTemplate:
    """Result of parsing a template. ``errors`` non-empty means invalid."""

    template: str
    tokens: tuple[RouteToken, ...]
    score: tuple[int, ...]
    errors: tuple[str, ...] = ()
    warnings: tuple[str, ...] = ()

    @property
    def ok(self) -> bool:
        return not self.errors


def normalize_pathname(value: str) -> str:
    """Strip query and fragment, force a leading slash, drop one trailing slash."""
    without_query = value.split("?", 1)[0]
    without_hash = without_query.split("#", 1)[0]
    normalized = without_hash if without_hash.startswith("/") else f"/{without_hash}"
    if len(normalized) > 1 and normalized.endswith("/"):
        normalized = normalized[:-1]
    return normalized


def split_path(value: str) -> list[str]:
    return [part for part in normalize_pathname(value).split("/") if part]


def decode_segment(segment: str) -> str:
    return unquote(segment)


def _parse_named(
    segment: str,
    match: re.Match[str],
    label: str,
    *,
    is_last: bool,
    must_be_last: bool,
    errors: list[str],
) -> str | None:
    name = match.group(1)
    if not _PARAM_NAME_RE.match(name):
        errors.append(f'Invalid {label} name "{name}"')
        return None
    if must_be_last and not is_last:
        errors.append(f'{label.capitalize()} "{segment}" must be the last segment')
        return None
    return name


def parse_route_template(template: str) -> ParsedTemplate:
    """Parse a template into tokens and a specificity score.

    Never raises: problems are collected in ``errors`` (the template is
    unusable) and ``warnings`` (usable, but suspicious).
    """
    errors: list[str] = []
    warnings: list[str] = []
    normalized = normalize_pathname(template)
    segments = split_path(normalized)
    tokens: list[RouteToken] = []
    seen_params: set[str] = set()

    for index, segment in enumerate(segments):
        is_last = index == len(segments) - 1

        if _GROUP_RE.match(segment):
            errors.append(f"Route groups are not supported: {segment}")
            continue

        kind: TokenKind | None = None
        name: str | None = None
        if match := _OPTIONAL_CATCHALL_RE.match(segment):
            kind = "optional-catchall"
            name = _parse_named(
                segment, match, "optional catch-all param",
                is_last=is_last, must_be_last=True, errors=errors,
            )
        elif match := _CATCHALL_RE.match(segment):
            kind = "catchall"
            name = _parse_named(
                segment, match, "catch-all param",
                is_last=is_last, must_be_last=True, errors=errors,
            )
        elif match := _PARAM_RE.match(segment):
            kind = "param"
            name = _parse_named(
                segment, match, "param",
                is_last=is_last, must_be_last=False, errors=errors,
            )

        if kind is not None:
            if name is None:
                continue
            if name in seen_params:
                warnings.append(f'Duplicate param name "{name}"')
            seen_params.add(name)
            tokens.append(RouteToken(kind, name))
            continue

        if any(char in segment for char in "[]()"):
            errors.append(f'Invalid route segment "{segment}"')
            continue

        tokens.append(RouteToken("static", segment))

    return ParsedTemplate(
        template=normalized,
        tokens=tuple(tokens),
        score=score_tokens(tokens),
        errors=tuple(errors),
        warnings=tuple(warnings),
    )


def parse_route_template_strict(template: str) -> ParsedTemplate:
    """Parse a template, raising ``RouteTemplateError`` if it is invalid."""
    parsed = parse_route_template(template)
    if parsed.errors:
        raise RouteTemplateError(template, parsed.errors)
    return parsed


def score_tokens(tokens: list[RouteToken] | tuple[RouteToken, ...]) -> tuple[int, ...]:
    return tuple(_WEIGHTS[token.kind] for token in tokens)


def compare_route_score(a: tuple[int, ...], b: tuple[int, ...]) -> int:
    """Order two scores. Negative means *a* is more specific and sorts first.

    Compares weight by weight; when one score is a prefix of the other,
    the longer (deeper) template sorts first, unless its only extra token
    is an optional catch-all, which also matches the shorter path.  So
    ``/docs`` deliberately sorts ahead of ``/docs/[[...slug]]``.
    """
    for a_value, b_value in zip(a, b, strict=False):
        if a_value != b_value:
            return b_value - a_value
    if len(a) == len(b):
        return 0
    longer, sign = (a, -1) if len(a) > len(b) else (b, 1)
    extra = longer[min(len(a), len(b)):]
    if extra == (_WEIGHTS["optional-catchall"],):
        return -sign
    return sign
