"""Invoke helpers — call sync or async handlers uniformly.

Bridle handlers can be ``def`` or ``async def``. Middleware always awaits
the handler it wraps, so plain functions are adapted once at registration
time and the sync/async check lives in exactly one place.
"""

import functools
import inspect
from collections.abc import Awaitable, Callable
from typing import Any


async def invoke(handler: Any, *args: Any, **kwargs: Any) -> Any:
    """Call a handler and await the result if it's awaitable."""
    result = handler(*args, **kwargs)
    if inspect.isawaitable(result):
        result = await result
    return result


def ensure_async(handler: Callable[..., Any]) -> Callable[..., Awaitable[Any]]:
    """Return *handler* unchanged if it is a coroutine function, else wrap it.

    The wrapper keeps the original name and docstring so route tables and
    logs still show the user's function.
    """
    if inspect.iscoroutinefunction(handler):
        return handler

    @functools.wraps(handler)
    async def wrapper(*args: Any, **kwargs: Any) -> Any:
        return await invoke(handler, *args, **kwargs)

    return wrapper
