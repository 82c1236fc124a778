"""Bridle — a router, a base path, and a middleware chain, tied together.

Composes a trie-based path router with ordered handler-to-handler
middleware, hierarchical sub-routing, and per-verb registration.

Basic usage::

    from bridle import Bridle, RequestLogger, params

    app = Bridle()

    async def show_user(request, writer):
        await writer.write(f"user {params(request).by_name('id')}")

    api = app.sub_path("/api").with_middleware(RequestLogger())
    api.get("/users/:id", show_user)

Serve ``app`` with any ASGI server.
"""

__version__ = "0.1.0"
__all__ = [
    "Bridle",
    "BridleError",
    "ConfigurationError",
    "HTTPError",
    "Handler",
    "MethodNotAllowed",
    "Middleware",
    "NotFound",
    "Param",
    "Params",
    "Request",
    "RequestLogger",
    "Response",
    "ResponseWriter",
    "Router",
    "RouterConfig",
    "params",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import bridle`` fast while providing a clean top-level API.
    """
    if name == "Bridle":
        from bridle.app import Bridle

        return Bridle

    if name == "RouterConfig":
        from bridle.config import RouterConfig

        return RouterConfig

    if name == "Router":
        from bridle.routing.router import Router

        return Router

    if name in ("Param", "Params", "params"):
        from bridle.routing import params as _params

        return getattr(_params, name)

    if name == "Request":
        from bridle.http.request import Request

        return Request

    if name == "Response":
        from bridle.http.response import Response

        return Response

    if name == "ResponseWriter":
        from bridle.http.writer import ResponseWriter

        return ResponseWriter

    if name in ("Handler", "Middleware", "RequestLogger"):
        from bridle import middleware as _mw

        return getattr(_mw, name)

    if name in ("BridleError", "ConfigurationError", "HTTPError", "MethodNotAllowed", "NotFound"):
        from bridle import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
