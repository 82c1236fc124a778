"""Tests for bridle.http.request — frozen Request with async body access."""

import pytest

from bridle.http.request import Request
from bridle.routing.params import Params


def _make_scope(**overrides: object) -> dict[str, object]:
    """Build a minimal valid ASGI HTTP scope."""
    base: dict[str, object] = {
        "type": "http",
        "asgi": {"version": "3.0"},
        "http_version": "1.1",
        "method": "GET",
        "path": "/",
        "raw_path": b"/",
        "query_string": b"",
        "root_path": "",
        "headers": [],
        "server": ("localhost", 8000),
        "client": ("127.0.0.1", 54321),
    }
    base.update(overrides)
    return base


def _make_receive(*bodies: bytes):
    """Create an ASGI receive callable that yields bodies."""
    messages = []
    for i, body in enumerate(bodies):
        is_last = i == len(bodies) - 1
        messages.append({"type": "http.request", "body": body, "more_body": not is_last})
    if not messages:
        messages.append({"type": "http.request", "body": b"", "more_body": False})
    it = iter(messages)

    async def receive():
        return next(it)

    return receive


class TestRequestFromASGI:
    def test_basic_fields(self) -> None:
        req = Request.from_asgi(_make_scope(method="POST", path="/users"), _make_receive())
        assert req.method == "POST"
        assert req.path == "/users"
        assert req.http_version == "1.1"
        assert req.server == ("localhost", 8000)
        assert req.client == ("127.0.0.1", 54321)

    def test_no_params_until_routed(self) -> None:
        req = Request.from_asgi(_make_scope(), _make_receive())
        assert req.path_params == Params()

    def test_headers(self) -> None:
        scope = _make_scope(headers=[(b"content-type", b"application/json")])
        req = Request.from_asgi(scope, _make_receive())
        assert req.content_type == "application/json"
        assert req.headers["Content-Type"] == "application/json"

    def test_missing_server_and_client(self) -> None:
        scope = _make_scope()
        del scope["server"]
        del scope["client"]
        req = Request.from_asgi(scope, _make_receive())
        assert req.server is None
        assert req.client is None

    def test_query(self) -> None:
        req = Request.from_asgi(_make_scope(query_string=b"q=hi&page=2&q=again"), _make_receive())
        assert req.query == {"q": "hi", "page": "2"}
        assert req.url == "/?q=hi&page=2&q=again"

    def test_url_without_query(self) -> None:
        req = Request.from_asgi(_make_scope(path="/a"), _make_receive())
        assert req.url == "/a"

    def test_frozen(self) -> None:
        req = Request.from_asgi(_make_scope(), _make_receive())
        with pytest.raises(AttributeError):
            req.method = "POST"  # type: ignore[misc]


class TestWithParams:
    def test_returns_copy(self) -> None:
        req = Request.from_asgi(_make_scope(path="/users/42"), _make_receive())
        bound = req.with_params(Params.of(("id", "42")))
        assert bound is not req
        assert bound.path_params.by_name("id") == "42"
        assert req.path_params == Params()
        assert bound.path == "/users/42"

    async def test_body_cache_shared_with_copy(self) -> None:
        req = Request.from_asgi(_make_scope(method="POST"), _make_receive(b"payload"))
        assert await req.body() == b"payload"
        copy = req.with_params(Params.of(("id", "1")))
        assert await copy.body() == b"payload"


class TestRequestBody:
    async def test_body_single_chunk(self) -> None:
        req = Request.from_asgi(_make_scope(method="POST"), _make_receive(b"hello"))
        assert await req.body() == b"hello"

    async def test_body_multiple_chunks(self) -> None:
        req = Request.from_asgi(_make_scope(method="POST"), _make_receive(b"hel", b"lo"))
        assert await req.body() == b"hello"

    async def test_body_cached(self) -> None:
        req = Request.from_asgi(_make_scope(method="POST"), _make_receive(b"once"))
        assert await req.body() == b"once"
        assert await req.body() == b"once"

    async def test_text(self) -> None:
        req = Request.from_asgi(_make_scope(method="POST"), _make_receive("héllo".encode()))
        assert await req.text() == "héllo"

    async def test_json(self) -> None:
        req = Request.from_asgi(_make_scope(method="POST"), _make_receive(b'{"a": 1}'))
        assert await req.json() == {"a": 1}

    async def test_stream(self) -> None:
        req = Request.from_asgi(_make_scope(method="POST"), _make_receive(b"a", b"", b"b"))
        assert [chunk async for chunk in req.stream()] == [b"a", b"b"]

    async def test_default_receive_is_empty(self) -> None:
        assert await Request(method="GET", path="/").body() == b""
