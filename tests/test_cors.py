"""Tests for CORS middleware."""

from bridle.app import Bridle
from bridle.http.request import Request
from bridle.http.response import Response
from bridle.http.writer import ResponseWriter
from bridle.middleware.builtin import CORSConfig, CORSMiddleware
from bridle.testing import TestClient


def _make_cors_app(config: CORSConfig | None = None) -> Bridle:
    """Helper: create an app with CORS middleware on /api."""
    root = Bridle()
    api = root.sub_path("/api").with_middleware(CORSMiddleware(config))

    async def data(request: Request, writer: ResponseWriter) -> None:
        await writer.send(Response('{"message": "hello"}').with_content_type("application/json"))

    async def create_data(request: Request, writer: ResponseWriter) -> None:
        await writer.send(Response("created", status=201))

    async def preflight_fallback(request: Request, writer: ResponseWriter) -> None:
        await writer.write_header(200)

    api.get("/data", data)
    api.post("/data", create_data)
    api.options("/data", preflight_fallback)
    return root


def _names(response: Response) -> set[str]:
    return {name for name, _ in response.headers}


class TestCORSNonCorsRequests:
    async def test_no_origin_header(self) -> None:
        app = _make_cors_app(CORSConfig(allow_origins=("*",)))
        async with TestClient(app) as client:
            response = await client.get("/api/data")
        assert response.status == 200
        assert "access-control-allow-origin" not in _names(response)


class TestCORSSimpleRequests:
    async def test_allowed_origin_gets_cors_headers(self) -> None:
        app = _make_cors_app(CORSConfig(allow_origins=("https://example.com",)))
        async with TestClient(app) as client:
            response = await client.get("/api/data", headers={"Origin": "https://example.com"})
        assert response.status == 200
        assert ("access-control-allow-origin", "https://example.com") in response.headers
        assert ("vary", "Origin") in response.headers

    async def test_disallowed_origin_no_cors_headers(self) -> None:
        app = _make_cors_app(CORSConfig(allow_origins=("https://example.com",)))
        async with TestClient(app) as client:
            response = await client.get("/api/data", headers={"Origin": "https://evil.com"})
        assert response.status == 200
        assert "access-control-allow-origin" not in _names(response)

    async def test_wildcard_origin(self) -> None:
        app = _make_cors_app(CORSConfig(allow_origins=("*",)))
        async with TestClient(app) as client:
            response = await client.get("/api/data", headers={"Origin": "https://anything.com"})
        assert ("access-control-allow-origin", "*") in response.headers
        assert ("vary", "Origin") not in response.headers

    async def test_wildcard_with_credentials_echoes_origin(self) -> None:
        app = _make_cors_app(CORSConfig(allow_origins=("*",), allow_credentials=True))
        async with TestClient(app) as client:
            response = await client.get("/api/data", headers={"Origin": "https://a.com"})
        assert ("access-control-allow-origin", "https://a.com") in response.headers
        assert ("access-control-allow-credentials", "true") in response.headers

    async def test_expose_headers(self) -> None:
        app = _make_cors_app(
            CORSConfig(allow_origins=("*",), expose_headers=("X-Total", "X-Page"))
        )
        async with TestClient(app) as client:
            response = await client.post("/api/data", headers={"Origin": "https://a.com"})
        assert response.status == 201
        assert response.header("access-control-expose-headers") == "X-Total, X-Page"


class TestCORSPreflightRequests:
    async def test_preflight_returns_204(self) -> None:
        app = _make_cors_app(
            CORSConfig(
                allow_origins=("https://example.com",),
                allow_methods=("GET", "POST"),
                allow_headers=("Content-Type",),
                max_age=60,
            )
        )
        async with TestClient(app) as client:
            response = await client.options(
                "/api/data",
                headers={
                    "Origin": "https://example.com",
                    "Access-Control-Request-Method": "POST",
                },
            )
        assert response.status == 204
        assert response.body == b""
        assert response.header("access-control-allow-methods") == "GET, POST"
        assert response.header("access-control-allow-headers") == "Content-Type"
        assert response.header("access-control-max-age") == "60"

    async def test_preflight_without_request_method(self) -> None:
        app = _make_cors_app(CORSConfig(allow_origins=("https://example.com",)))
        async with TestClient(app) as client:
            response = await client.options("/api/data", headers={"Origin": "https://example.com"})
        assert response.status == 204
        assert "access-control-allow-methods" not in _names(response)

    async def test_disallowed_preflight_reaches_route(self) -> None:
        app = _make_cors_app(CORSConfig(allow_origins=("https://example.com",)))
        async with TestClient(app) as client:
            response = await client.options("/api/data", headers={"Origin": "https://evil.com"})
        assert response.status == 200
