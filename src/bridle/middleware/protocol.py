"""Handler and Middleware types.

A handler is any async callable matching::

    async def handler(request: Request, writer: ResponseWriter) -> None: ...

A middleware is a function from handler to handler. It receives the next
handler in the chain and returns a new one that may do work before and
after delegating, or may answer itself and never delegate::

    def timing(next: Handler) -> Handler:
        async def handler(request: Request, writer: ResponseWriter) -> None:
            start = time.monotonic()
            writer.set_header("X-Started", f"{start:.3f}")
            await next(request, writer)
            log.info("took %.3fs", time.monotonic() - start)
        return handler

No base class required. Classes with ``__call__(self, next)`` work too.
"""

from collections.abc import Awaitable, Callable
from typing import Any, TypeAlias

from bridle._internal.invoke import invoke
from bridle.http.request import Request
from bridle.http.writer import ResponseWriter

# A request handler: terminal route handler or a middleware-wrapped one
Handler: TypeAlias = Callable[[Request, ResponseWriter], Awaitable[None]]

# Wraps a handler, producing a new handler
Middleware: TypeAlias = Callable[[Handler], Handler]


def handler_middleware(handler: Callable[..., Any]) -> Middleware:
    """Turn a terminal-style handler into a pass-through middleware.

    The returned middleware runs *handler* to completion (including any
    response writes), then calls the next handler with the same request
    and writer. Useful for handlers that never delegate on their own,
    such as a shared header-setting or auditing step.
    """

    def middleware(next: Handler) -> Handler:
        async def run_then_continue(request: Request, writer: ResponseWriter) -> None:
            await invoke(handler, request, writer)
            await next(request, writer)

        return run_then_continue

    return middleware
