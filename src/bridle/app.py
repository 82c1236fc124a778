"""Bridle — the routing façade.

Ties one shared ``Router`` to a base path and an ordered middleware list.
Sub-scopes share the router but own copies of everything else, so route
tables can be built as a tree::

    root = Bridle()
    api = root.sub_path("/api").with_middleware(require_token)
    api.get("/items/:id", show_item)          # GET /api/items/:id
    api.post("/items", create_item, audit)    # require_token -> audit -> create_item
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from bridle._internal.asgi import Receive, Scope, Send
from bridle._internal.invoke import ensure_async
from bridle.config import RouterConfig
from bridle.middleware.protocol import Handler, Middleware, handler_middleware
from bridle.routing.router import Router


class Bridle:
    """A router, a base path, and the middleware every route below it gets.

    ``Bridle()`` creates the root scope with a fresh ``Router`` that answers
    404 (never 405) when a path is registered only for other methods.

    Derived scopes come from ``sub_path()`` and ``with_middleware()``; they
    never change the scope they were derived from.

    The instance is an ASGI application: pass it to any ASGI server.
    """

    __slots__ = ("_base_path", "_middleware", "_router")

    def __init__(self) -> None:
        self._router = Router(RouterConfig(handle_method_not_allowed=False))
        self._base_path = ""
        self._middleware: list[Middleware] = []

    @classmethod
    def _derive(cls, router: Router, base_path: str, middleware: list[Middleware]) -> Bridle:
        scope = cls.__new__(cls)
        scope._router = router
        scope._base_path = base_path
        scope._middleware = middleware
        return scope

    # -- Accessors --

    @property
    def router(self) -> Router:
        """The shared underlying ``Router``."""
        return self._router

    @property
    def base_path(self) -> str:
        return self._base_path

    @property
    def middleware(self) -> tuple[Middleware, ...]:
        """Snapshot of this scope's middleware, outermost first."""
        return tuple(self._middleware)

    def path(self, p: str) -> str:
        """Join *p* onto this scope's base path.

        The base loses its trailing slash and *p* gains a leading one, so
        the join never doubles or drops a slash. An empty *p* yields the
        trimmed base path itself.
        """
        base = self._base_path.removesuffix("/")
        if p and not p.startswith("/"):
            p = "/" + p
        return base + p

    # -- Scoping --

    def sub_path(self, path: str) -> Bridle:
        """Return a scope for routes under *path*.

        The new scope shares the router, extends the base path, and starts
        with a copy of this scope's middleware.
        """
        return self._derive(self._router, self.path(path), list(self._middleware))

    def with_middleware(self, *middleware: Middleware) -> Bridle:
        """Return a scope at the same path with *middleware* appended."""
        scope = self.sub_path("")
        scope._middleware.extend(middleware)
        return scope

    def with_handler_middleware(self, handler: Callable[..., Any]) -> Bridle:
        """Return a scope that runs *handler* before every route below it.

        *handler* runs to completion, then the chain continues with the
        same request and writer.
        """
        return self.with_middleware(handler_middleware(handler))

    # -- Registration --

    def handle(
        self,
        method: str,
        path: str,
        handler: Callable[..., Any],
        *middleware: Middleware,
    ) -> None:
        """Register *handler* for *method* at ``self.path(path)``.

        Scope middleware wraps per-call *middleware*, which wraps the
        handler. Both run in the order given, so a request to a scope with
        ``[A, B]`` registered with ``C, D`` runs A, B, C, D, then handler.

        Malformed patterns and duplicate registrations raise
        ``ConfigurationError`` from the router.
        """
        wrapped: Handler = ensure_async(handler)
        for mw in reversed(middleware):
            wrapped = mw(wrapped)
        for mw in reversed(self._middleware):
            wrapped = mw(wrapped)
        self._router.add(method, self.path(path), wrapped)

    def handle_func(
        self,
        method: str,
        path: str,
        handler: Callable[..., Any],
        *middleware: Middleware,
    ) -> None:
        """Register a plain function handler. Same as ``handle()``."""
        self.handle(method, path, handler, *middleware)

    def route(
        self,
        method: str,
        path: str,
        *middleware: Middleware,
    ) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
        """Decorator form of ``handle()``.

        Usage::

            @api.route("GET", "/items/:id")
            async def show_item(request, writer):
                ...

        The decorated function is returned unchanged.
        """

        def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
            self.handle(method, path, func, *middleware)
            return func

        return decorator

    def get(self, path: str, handler: Callable[..., Any], *middleware: Middleware) -> None:
        """Register a GET handler for *path*."""
        self.handle("GET", path, handler, *middleware)

    def put(self, path: str, handler: Callable[..., Any], *middleware: Middleware) -> None:
        """Register a PUT handler for *path*."""
        self.handle("PUT", path, handler, *middleware)

    def post(self, path: str, handler: Callable[..., Any], *middleware: Middleware) -> None:
        """Register a POST handler for *path*."""
        self.handle("POST", path, handler, *middleware)

    def patch(self, path: str, handler: Callable[..., Any], *middleware: Middleware) -> None:
        """Register a PATCH handler for *path*."""
        self.handle("PATCH", path, handler, *middleware)

    def delete(self, path: str, handler: Callable[..., Any], *middleware: Middleware) -> None:
        """Register a DELETE handler for *path*."""
        self.handle("DELETE", path, handler, *middleware)

    def options(self, path: str, handler: Callable[..., Any], *middleware: Middleware) -> None:
        """Register an OPTIONS handler for *path*."""
        self.handle("OPTIONS", path, handler, *middleware)

    # -- ASGI --

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI 3.0 entry point. Delegates to the shared router."""
        await self._router(scope, receive, send)

    def __repr__(self) -> str:
        return f"Bridle(base_path={self._base_path!r}, middleware={len(self._middleware)})"
