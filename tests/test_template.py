"""Tests for mockingbird.routing.template: parsing and specificity scores."""

import functools

import pytest

from mockingbird.errors import RouteTemplateError
from mockingbird.routing.template import (
    RouteToken,
    compare_route_score,
    normalize_pathname,
    parse_route_template,
    parse_route_template_strict,
)


class TestNormalizePathname:
    def test_adds_leading_slash(self) -> None:
        assert normalize_pathname("users") == "/users"

    def test_strips_trailing_slash(self) -> None:
        assert normalize_pathname("/users/") == "/users"

    def test_root_is_kept(self) -> None:
        assert normalize_pathname("/") == "/"

    def test_strips_query_and_fragment(self) -> None:
        assert normalize_pathname("/users?page=2#top") == "/users"


class TestParseRouteTemplate:
    def test_static(self) -> None:
        parsed = parse_route_template("/api/users")
        assert parsed.ok
        assert parsed.tokens == (RouteToken("static", "api"), RouteToken("static", "users"))
        assert parsed.score == (4, 4)

    def test_param(self) -> None:
        parsed = parse_route_template("/users/[id]")
        assert parsed.tokens[1] == RouteToken("param", "id")
        assert parsed.tokens[1].is_param
        assert parsed.score == (4, 3)

    def test_catchall(self) -> None:
        parsed = parse_route_template("/docs/[...slug]")
        assert parsed.tokens[1] == RouteToken("catchall", "slug")
        assert parsed.score == (4, 2)

    def test_optional_catchall(self) -> None:
        parsed = parse_route_template("/docs/[[...slug]]")
        assert parsed.tokens[1] == RouteToken("optional-catchall", "slug")
        assert parsed.score == (4, 1)

    def test_root(self) -> None:
        parsed = parse_route_template("/")
        assert parsed.template == "/"
        assert parsed.tokens == ()
        assert parsed.score == ()

    def test_catchall_must_be_last(self) -> None:
        parsed = parse_route_template("/docs/[...slug]/edit")
        assert not parsed.ok
        assert "must be the last segment" in parsed.errors[0]

    def test_route_group_rejected(self) -> None:
        parsed = parse_route_template("/(admin)/users")
        assert not parsed.ok
        assert "Route groups" in parsed.errors[0]

    def test_invalid_param_name(self) -> None:
        parsed = parse_route_template("/users/[a b]")
        assert not parsed.ok

    def test_stray_bracket_rejected(self) -> None:
        parsed = parse_route_template("/users/id]")
        assert not parsed.ok
        assert 'Invalid route segment "id]"' in parsed.errors

    def test_duplicate_param_warns(self) -> None:
        parsed = parse_route_template("/[id]/[id]")
        assert parsed.ok
        assert parsed.warnings == ('Duplicate param name "id"',)

    def test_strict_raises(self) -> None:
        with pytest.raises(RouteTemplateError) as exc_info:
            parse_route_template_strict("/docs/[...a]/[b]")
        assert "/docs/[...a]/[b]" in str(exc_info.value)


def _sorted(*templates: str) -> list[str]:
    scores = {t: parse_route_template(t).score for t in templates}
    key = functools.cmp_to_key(lambda a, b: compare_route_score(scores[a], scores[b]))
    return sorted(templates, key=key)


class TestCompareRouteScore:
    def test_equal(self) -> None:
        assert compare_route_score((4, 3), (4, 3)) == 0

    def test_static_beats_param(self) -> None:
        assert compare_route_score((4, 4), (4, 3)) < 0
        assert compare_route_score((4, 3), (4, 4)) > 0

    def test_static_param_catchall_order(self) -> None:
        assert _sorted("/users/[...slug]", "/users/[id]", "/users/me") == [
            "/users/me",
            "/users/[id]",
            "/users/[...slug]",
        ]

    def test_deeper_template_first(self) -> None:
        assert _sorted("/users", "/users/[id]") == ["/users/[id]", "/users"]

    def test_optional_catchall_after_its_base(self) -> None:
        assert _sorted("/docs/[[...slug]]", "/docs") == ["/docs", "/docs/[[...slug]]"]

    def test_optional_catchall_after_catchall(self) -> None:
        assert _sorted("/docs/[[...slug]]", "/docs/[...slug]") == [
            "/docs/[...slug]",
            "/docs/[[...slug]]",
        ]
