"""Security headers middleware — X-Frame-Options, X-Content-Type-Options, Referrer-Policy.

Headers are set on the writer before the inner handler runs, so they
reach the client with whatever status line the handler writes. A handler
can still override one with ``writer.set_header()``.
"""

from dataclasses import dataclass

from bridle.http.request import Request
from bridle.http.writer import ResponseWriter
from bridle.middleware.protocol import Handler


@dataclass(frozen=True, slots=True)
class SecurityHeadersConfig:
    """Configuration for security headers.

    All values are applied as-is. ``None`` disables a header.
    """

    x_frame_options: str = "DENY"
    x_content_type_options: str = "nosniff"
    referrer_policy: str = "strict-origin-when-cross-origin"
    content_security_policy: str | None = (
        "default-src 'self'; base-uri 'self'; frame-ancestors 'none'; object-src 'none'"
    )
    strict_transport_security: str | None = None

    def items(self) -> list[tuple[str, str]]:
        """Header name/value pairs for every enabled header."""
        pairs = [
            ("X-Frame-Options", self.x_frame_options),
            ("X-Content-Type-Options", self.x_content_type_options),
            ("Referrer-Policy", self.referrer_policy),
            ("Content-Security-Policy", self.content_security_policy),
            ("Strict-Transport-Security", self.strict_transport_security),
        ]
        return [(name, value) for name, value in pairs if value]


class SecurityHeadersMiddleware:
    """Add security headers to every response.

    Usage::

        from bridle.middleware import SecurityHeadersMiddleware

        site = Bridle().with_middleware(SecurityHeadersMiddleware())

    Or with custom config::

        site = Bridle().with_middleware(SecurityHeadersMiddleware(SecurityHeadersConfig(
            x_frame_options="SAMEORIGIN",
            strict_transport_security="max-age=63072000",
        )))
    """

    __slots__ = ("config",)

    def __init__(self, config: SecurityHeadersConfig | None = None) -> None:
        self.config = config or SecurityHeadersConfig()

    def __call__(self, next: Handler) -> Handler:
        headers = self.config.items()

        async def secure(request: Request, writer: ResponseWriter) -> None:
            for name, value in headers:
                writer.set_header(name, value)
            await next(request, writer)

        return secure
