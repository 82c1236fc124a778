"""Immutable HTTP request.

Frozen metadata with async body access. The router produces a copy with
``path_params`` bound before the handler chain runs.
"""

from __future__ import annotations

import json as json_module
from collections.abc import AsyncGenerator
from dataclasses import dataclass, field, replace
from typing import Any
from urllib.parse import parse_qs

from bridle._internal.asgi import Receive
from bridle.http.headers import Headers
from bridle.routing.params import EMPTY_PARAMS, Params


async def _empty_receive() -> dict[str, Any]:
    return {"type": "http.request", "body": b"", "more_body": False}


@dataclass(frozen=True, slots=True)
class Request:
    """An immutable HTTP request.

    Metadata (method, path, headers, etc.) is frozen at creation.
    Body is accessed asynchronously via ``.body()``, ``.text()``, ``.json()``.
    """

    method: str
    path: str
    headers: Headers = field(default_factory=Headers)
    query_string: bytes = b""
    path_params: Params = EMPTY_PARAMS
    http_version: str = "1.1"
    server: tuple[str, int] | None = None
    client: tuple[str, int] | None = None

    # Private: ASGI receive callable for body streaming
    _receive: Receive = _empty_receive

    # Private: body cache, shared by copies made with ``with_params``
    _cache: dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    # -- Computed properties --

    @property
    def content_type(self) -> str | None:
        """The Content-Type header value."""
        return self.headers.get("content-type")

    @property
    def query(self) -> dict[str, str]:
        """Query string parameters, first value per key."""
        parsed = parse_qs(self.query_string.decode("latin-1"), keep_blank_values=True)
        return {key: values[0] for key, values in parsed.items()}

    @property
    def url(self) -> str:
        """Path plus query string."""
        if self.query_string:
            return f"{self.path}?{self.query_string.decode('latin-1')}"
        return self.path

    def with_params(self, path_params: Params) -> Request:
        """Return a copy of this request carrying *path_params*."""
        return replace(self, path_params=path_params)

    # -- Async body access --

    async def body(self) -> bytes:
        """Read the full request body.

        The ASGI receive channel is consumed once; later calls (including
        calls on copies made by the router) return the cached bytes.
        """
        if "_body" in self._cache:
            return self._cache["_body"]
        chunks = [chunk async for chunk in self.stream()]
        result = b"".join(chunks)
        self._cache["_body"] = result
        return result

    async def stream(self) -> AsyncGenerator[bytes]:
        """Stream the request body in chunks."""
        while True:
            message = await self._receive()
            body = message.get("body", b"")
            if body:
                yield body
            if not message.get("more_body", False):
                break

    async def text(self) -> str:
        """Read the body as text (UTF-8)."""
        raw = await self.body()
        return raw.decode("utf-8")

    async def json(self) -> Any:
        """Parse the body as JSON."""
        raw = await self.body()
        return json_module.loads(raw)

    # -- Factory --

    @classmethod
    def from_asgi(cls, scope: dict[str, Any], receive: Receive) -> Request:
        """Create a Request from an ASGI HTTP scope and receive callable."""
        server = scope.get("server")
        client = scope.get("client")
        return cls(
            method=scope["method"],
            path=scope["path"],
            headers=Headers(tuple(scope.get("headers", ()))),
            query_string=scope.get("query_string", b""),
            http_version=scope.get("http_version", "1.1"),
            server=tuple(server) if server else None,
            client=tuple(client) if client else None,
            _receive=receive,
        )
