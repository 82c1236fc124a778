"""Raw ASGI type aliases and scope helpers.

Users never see these: handlers receive ``Request`` and ``ResponseWriter``.
"""

from collections.abc import Awaitable, Callable, MutableMapping
from typing import Any, TypeAlias

Scope: TypeAlias = MutableMapping[str, Any]
Receive: TypeAlias = Callable[[], Awaitable[MutableMapping[str, Any]]]
Send: TypeAlias = Callable[[MutableMapping[str, Any]], Awaitable[None]]


async def run_lifespan(receive: Receive, send: Send) -> None:
    """Answer the ASGI lifespan protocol.

    Bridle has no startup or shutdown work of its own, so every phase
    completes immediately.
    """
    while True:
        message = await receive()
        msg_type = message["type"]
        if msg_type == "lifespan.startup":
            await send({"type": "lifespan.startup.complete"})
        elif msg_type == "lifespan.shutdown":
            await send({"type": "lifespan.shutdown.complete"})
            return
