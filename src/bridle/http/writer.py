"""Response writer — the handler-facing side of ASGI ``send``.

A handler (or middleware) sets headers, writes the status line once, then
streams body chunks. Each chunk goes out as an ASGI body message with
``more_body=True``; the dispatcher closes the stream with ``finish()``
after the handler chain returns.

Headers can be changed until the status line is written. Later changes
are kept on the writer but never reach the client.
"""

import logging

from bridle._internal.asgi import Send
from bridle.http.response import Response

logger = logging.getLogger("bridle.server")

DEFAULT_CONTENT_TYPE = "text/plain; charset=utf-8"


def _body_allowed(status: int) -> bool:
    """Whether an HTTP status code permits a response body."""
    # RFC: 1xx, 204, and 304 responses do not include a message body.
    return not (100 <= status < 200 or status in {204, 304})


class ResponseWriter:
    """Writes one HTTP response through an ASGI ``send`` callable.

    Usage inside a handler::

        async def hello(request: Request, writer: ResponseWriter) -> None:
            writer.set_header("Cache-Control", "no-store")
            await writer.write_header(200)
            await writer.write("hello")

    Or with a complete ``Response``::

        await writer.send(Response("hello").with_status(201))

    ``status`` is ``None`` until the status line has been written, which
    lets middleware inspect the outcome after the inner handler returns.
    """

    __slots__ = ("_finished", "_headers", "_send", "bytes_written", "status")

    def __init__(self, send: Send) -> None:
        self._send = send
        self._headers: list[tuple[str, str]] = []
        self._finished = False
        self.status: int | None = None
        self.bytes_written = 0

    # -- Headers --

    @property
    def headers(self) -> list[tuple[str, str]]:
        """Pending response headers, in the order they will be sent."""
        return self._headers

    @property
    def header_written(self) -> bool:
        """True once the status line has been sent."""
        return self.status is not None

    @property
    def finished(self) -> bool:
        return self._finished

    def get_header(self, name: str) -> str | None:
        """Return the first pending value for *name* (case-insensitive)."""
        name = name.lower()
        for key, value in self._headers:
            if key.lower() == name:
                return value
        return None

    def set_header(self, name: str, value: str) -> None:
        """Replace every pending value for *name* with *value*."""
        lowered = name.lower()
        self._headers = [(k, v) for k, v in self._headers if k.lower() != lowered]
        self._headers.append((name, value))

    def add_header(self, name: str, value: str) -> None:
        """Append a value for *name*, keeping existing ones."""
        self._headers.append((name, value))

    # -- Writing --

    async def write_header(self, status: int) -> None:
        """Send the status line and pending headers.

        Only the first call has an effect. Later calls are logged and
        ignored, so a handler running after another one that already
        answered cannot corrupt the response.
        """
        if self.status is not None:
            logger.warning(
                "Superfluous write_header(%d): status %d was already sent",
                status,
                self.status,
            )
            return

        self.status = status
        if self.get_header("content-type") is None:
            self._headers.append(("Content-Type", DEFAULT_CONTENT_TYPE))

        raw_headers = [
            (name.lower().encode("latin-1"), value.encode("latin-1"))
            for name, value in self._headers
        ]
        await self._send(
            {
                "type": "http.response.start",
                "status": status,
                "headers": raw_headers,
            }
        )

    async def write(self, data: str | bytes) -> int:
        """Write a body chunk, sending a 200 status line first if needed.

        Returns the number of bytes written. Bodies for 1xx, 204 and 304
        responses are dropped.
        """
        if self._finished:
            msg = "Cannot write to a response that has already finished."
            raise RuntimeError(msg)
        if self.status is None:
            await self.write_header(200)

        chunk = data.encode("utf-8") if isinstance(data, str) else data
        if not chunk:
            return 0
        assert self.status is not None
        if not _body_allowed(self.status):
            logger.debug("Dropping %d body bytes for status %d", len(chunk), self.status)
            return 0

        await self._send(
            {
                "type": "http.response.body",
                "body": chunk,
                "more_body": True,
            }
        )
        self.bytes_written += len(chunk)
        return len(chunk)

    async def send(self, response: Response) -> None:
        """Write a complete ``Response``: content type, headers, status, body."""
        self.set_header("Content-Type", response.content_type)
        for name, value in response.headers:
            self.add_header(name, value)
        await self.write_header(response.status)
        await self.write(response.body_bytes)

    async def finish(self) -> None:
        """Close the response stream.

        A handler that never wrote anything produces an empty 200.
        Calling ``finish()`` twice is a no-op.
        """
        if self._finished:
            return
        if self.status is None:
            await self.write_header(200)
        self._finished = True
        await self._send(
            {
                "type": "http.response.body",
                "body": b"",
                "more_body": False,
            }
        )
