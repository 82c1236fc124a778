"""End-to-end check through httpx's ASGI transport."""

import httpx

from bridle import Bridle, params
from bridle.http.request import Request
from bridle.http.writer import ResponseWriter
from bridle.middleware import SecurityHeadersMiddleware


def _make_app() -> Bridle:
    root = Bridle()
    api = root.sub_path("/api/").with_middleware(SecurityHeadersMiddleware())

    async def show(request: Request, writer: ResponseWriter) -> None:
        writer.set_header("Content-Type", "application/json")
        await writer.write(f'{{"id": "{params(request).by_name("id")}"}}')

    async def echo(request: Request, writer: ResponseWriter) -> None:
        await writer.write(await request.body())

    api.get("/items/:id", show)
    api.post("/echo", echo)
    return root


async def test_get_with_params() -> None:
    transport = httpx.ASGITransport(app=_make_app())
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as client:
        response = await client.get("/api/items/42")
    assert response.status_code == 200
    assert response.json() == {"id": "42"}
    assert response.headers["x-frame-options"] == "DENY"


async def test_post_body_roundtrip() -> None:
    transport = httpx.ASGITransport(app=_make_app())
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as client:
        response = await client.post("/api/echo", content=b"ping")
    assert response.text == "ping"


async def test_method_mismatch_is_404() -> None:
    transport = httpx.ASGITransport(app=_make_app())
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as client:
        response = await client.delete("/api/items/42")
    assert response.status_code == 404
