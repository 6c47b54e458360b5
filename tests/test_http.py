"""Tests for mockingbird.http: Headers, QueryParams, Request and Response."""

import pytest

from mockingbird.http.headers import Headers
from mockingbird.http.query import QueryParams
from mockingbird.http.request import Request
from mockingbird.http.response import Response


def _h(*pairs: tuple[str, str]) -> Headers:
    """Shorthand: build Headers from string pairs."""
    return Headers(tuple((k.encode("latin-1"), v.encode("latin-1")) for k, v in pairs))


def _make_scope(**overrides: object) -> dict[str, object]:
    base: dict[str, object] = {
        "type": "http",
        "http_version": "1.1",
        "method": "GET",
        "path": "/",
        "raw_path": b"/",
        "query_string": b"",
        "headers": [],
        "client": ("127.0.0.1", 54321),
    }
    base.update(overrides)
    return base


def _make_receive(*bodies: bytes):
    messages = [
        {"type": "http.request", "body": body, "more_body": i < len(bodies) - 1}
        for i, body in enumerate(bodies)
    ] or [{"type": "http.request", "body": b"", "more_body": False}]
    it = iter(messages)

    async def receive():
        return next(it)

    return receive


class TestHeaders:
    def test_case_insensitive(self) -> None:
        h = _h(("Content-Type", "text/html"))
        assert h["content-type"] == "text/html"
        assert h["CONTENT-TYPE"] == "text/html"
        assert "Content-Type" in h
        assert 42 not in h  # type: ignore[operator]

    def test_missing_key_raises(self) -> None:
        with pytest.raises(KeyError):
            _h()["x-missing"]

    def test_repeated_names(self) -> None:
        h = _h(("Accept", "a"), ("accept", "b"))
        assert h["accept"] == "a"
        assert h.get_list("ACCEPT") == ["a", "b"]
        assert len(h) == 1
        assert h.raw == (("accept", "a"), ("accept", "b"))


class TestQueryParams:
    def test_first_value_and_list(self) -> None:
        q = QueryParams(b"tag=a&tag=b&page=2")
        assert q["tag"] == "a"
        assert q.get_list("tag") == ["a", "b"]
        assert q.to_dict() == {"tag": ["a", "b"], "page": "2"}

    def test_blank_values_kept(self) -> None:
        assert QueryParams("flag=").to_dict() == {"flag": ""}


class TestRequest:
    def test_from_asgi(self) -> None:
        scope = _make_scope(
            method="post",
            path="/users/a b",
            raw_path=b"/users/a%20b",
            query_string=b"page=2",
            headers=[(b"content-type", b"application/json")],
        )
        req = Request.from_asgi(scope, _make_receive())
        assert req.method == "POST"
        assert req.path == "/users/a b"
        assert req.match_path == "/users/a%20b"
        assert req.url == "/users/a b?page=2"
        assert req.content_type == "application/json"
        assert req.client == ("127.0.0.1", 54321)

    def test_match_path_without_raw_path(self) -> None:
        req = Request.from_asgi(_make_scope(path="/a b", raw_path=None))
        assert req.match_path == "/a%20b"

    async def test_body_is_cached(self) -> None:
        req = Request.from_asgi(_make_scope(), _make_receive(b"hel", b"lo"))
        assert await req.body() == b"hello"
        assert await req.text() == "hello"

    async def test_json(self) -> None:
        req = Request.from_asgi(_make_scope(), _make_receive(b'{"a": 1}'))
        assert await req.json() == {"a": 1}

    async def test_empty_json_is_none(self) -> None:
        req = Request.from_asgi(_make_scope(), _make_receive())
        assert await req.json() is None


class TestResponse:
    def test_json(self) -> None:
        r = Response.from_json({"name": "Ada"})
        assert r.json() == {"name": "Ada"}
        assert r.content_type.startswith("application/json")

    def test_with_header_replaces(self) -> None:
        r = Response("x").with_header("X-Mock", "1").with_header("x-mock", "2")
        assert r.headers == (("x-mock", "2"),)

    def test_content_type_header_maps_to_field(self) -> None:
        r = Response("x").with_header("Content-Type", "text/csv")
        assert r.content_type == "text/csv"
        assert r.headers == ()
        assert r.header("content-type") == "text/csv"

    def test_content_type_only_set_through_headers(self) -> None:
        r = Response("x", content_type="text/plain").with_headers({"Content-Type": "text/csv"})
        assert r.content_type == "text/csv"
        assert r.without_header("content-type").content_type is None
        assert not hasattr(Response, "with_content_type")

    def test_without_header(self) -> None:
        r = Response("x").with_headers({"a": "1", "b": "2"}).without_header("A")
        assert r.header_dict == {"b": "2"}

    def test_immutable_chain(self) -> None:
        original = Response("x")
        changed = original.with_status(201)
        assert original.status == 200
        assert changed.status == 201
