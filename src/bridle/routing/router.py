"""Trie-based path router.

Routes are registered during setup, one handler per ``(method, path)``
pair. Dispatch walks the trie one path segment at a time, preferring
static segments over ``:name`` parameters over ``*name`` catch-alls.
"""

import logging
from collections.abc import Callable, Iterator
from typing import Any

from bridle._internal.asgi import Receive, Scope, Send, run_lifespan
from bridle._internal.invoke import ensure_async, invoke
from bridle.config import RouterConfig
from bridle.errors import ConfigurationError, HTTPError, MethodNotAllowed, NotFound
from bridle.http.request import Request
from bridle.http.response import Response
from bridle.http.writer import ResponseWriter
from bridle.routing.params import Param, Params
from bridle.routing.route import PathSegment, Route, RouteMatch, SegmentKind

logger = logging.getLogger("bridle.routing")
server_logger = logging.getLogger("bridle.server")


def parse_path(path: str) -> list[PathSegment]:
    """Parse a route pattern into segments.

    Examples::

        "/"                  -> [PathSegment("")]
        "/users"             -> [PathSegment("users")]
        "/users/"            -> [PathSegment("users"), PathSegment("")]
        "/users/:id"         -> [PathSegment("users"), PathSegment(":id", PARAM, "id")]
        "/src/*filepath"     -> [PathSegment("src"), PathSegment("*filepath", CATCH_ALL, "filepath")]

    Raises ``ConfigurationError`` for patterns the router cannot serve.
    """
    if not path.startswith("/"):
        msg = f"Route path must begin with '/', got {path!r}."
        raise ConfigurationError(msg)

    parts = path[1:].split("/")
    segments: list[PathSegment] = []
    for index, part in enumerate(parts):
        if part[:1] in (":", "*"):
            name = part[1:]
            if not name:
                msg = f"Wildcard in route path {path!r} must be named (e.g. ':id' or '*filepath')."
                raise ConfigurationError(msg)
            if ":" in name or "*" in name:
                msg = f"Only one wildcard per path segment is allowed in {path!r}, got {part!r}."
                raise ConfigurationError(msg)
            if part[0] == "*":
                if index != len(parts) - 1:
                    msg = f"Catch-all {part!r} must be the last segment of {path!r}."
                    raise ConfigurationError(msg)
                segments.append(PathSegment(part, SegmentKind.CATCH_ALL, name))
            else:
                segments.append(PathSegment(part, SegmentKind.PARAM, name))
        else:
            segments.append(PathSegment(part))
    return segments


class _TrieNode:
    """A node in the route trie."""

    __slots__ = ("catch_all", "children", "param_child", "param_name", "routes")

    def __init__(self) -> None:
        # Static segment children: "users" -> node
        self.children: dict[str, _TrieNode] = {}
        # Single named-parameter child per level
        self.param_name = ""
        self.param_child: _TrieNode | None = None
        # Catch-all routes hanging off this node, keyed by method
        self.catch_all: tuple[str, dict[str, Route]] | None = None
        # Routes terminating at this node, keyed by method
        self.routes: dict[str, Route] = {}


class Router:
    """Path router with named and catch-all segments.

    Usage::

        router = Router()
        router.add("GET", "/users/:id", show_user)
        router.add("GET", "/static/*filepath", serve_static)
        match = router.lookup("GET", "/users/42")
        match.params.by_name("id")  # "42"

    The router is itself an ASGI application. ``not_found`` and
    ``method_not_allowed`` may be set to handlers that replace the
    default plain-text error responses.
    """

    __slots__ = ("_root", "_routes", "config", "method_not_allowed", "not_found")

    def __init__(self, config: RouterConfig | None = None) -> None:
        self.config = config or RouterConfig()
        self.not_found: Callable[..., Any] | None = None
        self.method_not_allowed: Callable[..., Any] | None = None
        self._root = _TrieNode()
        self._routes: list[Route] = []

    # -- Registration --

    def add(self, method: str, path: str, handler: Callable[..., Any]) -> Route:
        """Register *handler* for *method* requests to *path*.

        Raises ``ConfigurationError`` for malformed patterns, conflicting
        parameter names, or a duplicate ``(method, path)`` registration.
        """
        segments = parse_path(path)
        route = Route(method=method, path=path, handler=ensure_async(handler))
        node = self._root

        for seg in segments:
            if seg.kind is SegmentKind.CATCH_ALL:
                if node.catch_all is None:
                    node.catch_all = (seg.name, {})
                name, by_method = node.catch_all
                if name != seg.name:
                    msg = (
                        f"Catch-all {seg.value!r} in {path!r} conflicts with "
                        f"existing catch-all '*{name}' at the same position."
                    )
                    raise ConfigurationError(msg)
                self._store(by_method, route)
                return route

            if seg.kind is SegmentKind.PARAM:
                if node.param_child is None:
                    node.param_name = seg.name
                    node.param_child = _TrieNode()
                elif node.param_name != seg.name:
                    msg = (
                        f"Parameter {seg.value!r} in {path!r} conflicts with "
                        f"existing parameter ':{node.param_name}' at the same position."
                    )
                    raise ConfigurationError(msg)
                node = node.param_child
            else:
                node = node.children.setdefault(seg.value, _TrieNode())

        self._store(node.routes, route)
        return route

    def _store(self, by_method: dict[str, Route], route: Route) -> None:
        if route.method in by_method:
            msg = f"A handler is already registered for {route.method} {route.path!r}."
            raise ConfigurationError(msg)
        by_method[route.method] = route
        self._routes.append(route)
        logger.debug(
            "Registered %s %s -> %s",
            route.method,
            route.path,
            getattr(route.handler, "__qualname__", repr(route.handler)),
        )

    @property
    def routes(self) -> list[Route]:
        """All registered routes, in registration order."""
        return list(self._routes)

    # -- Lookup --

    def _candidates(self, path: str) -> Iterator[tuple[dict[str, Route], Params]]:
        """Yield every method table matching *path*, most specific first."""
        if not path.startswith("/"):
            return
        yield from self._walk(self._root, path[1:].split("/"), 0, ())

    def _walk(
        self,
        node: _TrieNode,
        parts: list[str],
        index: int,
        bound: tuple[Param, ...],
    ) -> Iterator[tuple[dict[str, Route], Params]]:
        if index == len(parts):
            if node.routes:
                yield node.routes, Params(bound)
            return

        part = parts[index]

        # 1. Static child (exact match)
        child = node.children.get(part)
        if child is not None:
            yield from self._walk(child, parts, index + 1, bound)

        # 2. Named parameter (one non-empty segment)
        if node.param_child is not None and part:
            yield from self._walk(
                node.param_child,
                parts,
                index + 1,
                (*bound, Param(node.param_name, part)),
            )

        # 3. Catch-all consumes the rest, leading slash included
        if node.catch_all is not None:
            name, by_method = node.catch_all
            remaining = "/" + "/".join(parts[index:])
            yield by_method, Params((*bound, Param(name, remaining)))

    def lookup(self, method: str, path: str) -> RouteMatch | None:
        """Return the route registered for *method* at *path*, or ``None``.

        A more specific node registered only for other methods does not
        hide a less specific one registered for *method*.
        """
        for by_method, bound in self._candidates(path):
            route = by_method.get(method)
            if route is not None:
                return RouteMatch(route=route, params=bound)
        return None

    def allowed(self, path: str) -> frozenset[str]:
        """Methods with a handler registered for *path*."""
        methods: set[str] = set()
        for by_method, _ in self._candidates(path):
            methods.update(by_method)
        return frozenset(methods)

    def match(self, method: str, path: str) -> RouteMatch:
        """Match a request method and path.

        Returns a ``RouteMatch`` on success.
        Raises ``MethodNotAllowed`` if the path matches but the method does
        not and ``config.handle_method_not_allowed`` is set.
        Raises ``NotFound`` otherwise.
        """
        match = self.lookup(method, path)
        if match is None:
            raise self._unmatched(method, path)
        return match

    def _unmatched(self, method: str, path: str) -> HTTPError:
        if self.config.handle_method_not_allowed:
            allowed = self.allowed(path)
            if allowed:
                return MethodNotAllowed(method, path, allowed)
        return NotFound.no_route(method, path)

    def _trailing_slash_redirect(self, method: str, path: str) -> str | None:
        """The alternate path to redirect to, if only it is registered."""
        if path == "/":
            return None
        alternate = path[:-1] if path.endswith("/") else path + "/"
        if self.lookup(method, alternate) is not None:
            return alternate
        return None

    # -- Dispatch --

    async def dispatch(self, request: Request, writer: ResponseWriter) -> None:
        """Route *request* and run the matched handler chain.

        An unmatched path is first offered a trailing-slash redirect, then
        answered 405 or 404. ``HTTPError`` is answered with its status; any
        other exception is logged and answered with 500 if the status line
        is still unsent.
        """
        try:
            match = self.lookup(request.method, request.path)
            if match is None:
                await self._unmatched_request(request, writer)
                return
            await match.route.handler(request.with_params(match.params), writer)

        except HTTPError as exc:
            await _write_error(writer, exc.status, exc.detail, exc.headers)
        except Exception:
            server_logger.exception("Unhandled error in %s %s", request.method, request.path)
            await _write_error(writer, 500, "Internal Server Error")

    async def _unmatched_request(self, request: Request, writer: ResponseWriter) -> None:
        if self.config.redirect_trailing_slash:
            target = self._trailing_slash_redirect(request.method, request.path)
            if target is not None:
                await self._redirect(request, writer, target)
                logger.debug("Redirected %s %s to %s", request.method, request.path, target)
                return

        error = self._unmatched(request.method, request.path)
        fallback = self.method_not_allowed if isinstance(error, MethodNotAllowed) else self.not_found
        if fallback is None:
            raise error
        await invoke(fallback, request, writer)

    async def _redirect(self, request: Request, writer: ResponseWriter, target: str) -> None:
        status = 301 if request.method == "GET" else 308
        location = target
        if request.query_string:
            location = f"{target}?{request.query_string.decode('latin-1')}"
        writer.set_header("Location", location)
        await writer.write_header(status)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI 3.0 entry point."""
        if scope["type"] == "lifespan":
            await run_lifespan(receive, send)
            return
        if scope["type"] != "http":
            return

        request = Request.from_asgi(scope, receive)
        writer = ResponseWriter(send)
        await self.dispatch(request, writer)
        await writer.finish()


async def _write_error(
    writer: ResponseWriter,
    status: int,
    detail: str,
    headers: tuple[tuple[str, str], ...] = (),
) -> None:
    """Write a plain-text error response unless the handler already answered."""
    if writer.header_written:
        server_logger.warning(
            "Cannot send %d error: status %d was already sent", status, writer.status
        )
        return
    response = Response(body=detail, status=status)
    for name, value in headers:
        response = response.with_header(name, value)
    await writer.send(response)
