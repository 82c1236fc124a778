"""Bridle exception hierarchy.

Registration problems surface as ``ConfigurationError`` while the route
table is being built. Request-time failures are ``HTTPError`` values that
the router's dispatch boundary turns into plain-text responses.
"""

from __future__ import annotations

from dataclasses import dataclass


class BridleError(Exception):
    """Base for all bridle-specific errors."""


class ConfigurationError(BridleError):
    """Raised when a route table is invalid.

    Typically raised by ``Router.add()`` at registration time: malformed
    patterns, conflicting wildcards, or a duplicate ``(method, path)``.
    """


@dataclass(frozen=True, slots=True)
class HTTPError(BridleError):
    """A request failure carrying the status, body text and extra headers to send.

    Handlers may raise it directly::

        raise HTTPError(422, "quantity must be positive")
    """

    status: int
    detail: str = ""
    headers: tuple[tuple[str, str], ...] = ()

    def __str__(self) -> str:
        if self.detail:
            return f"{self.status}: {self.detail}"
        return str(self.status)


class NotFound(HTTPError):  # noqa: N818 (conventional name in web frameworks)
    """404. The router raises it with the unmatched method and path."""

    def __init__(self, detail: str = "Not Found") -> None:
        super().__init__(status=404, detail=detail)

    @classmethod
    def no_route(cls, method: str, path: str) -> NotFound:
        return cls(f"No route matches {method} {path!r}")


class MethodNotAllowed(HTTPError):  # noqa: N818 (conventional name in web frameworks)
    """405 for a path whose routes are registered under other methods.

    Built by the router from ``Router.allowed(path)``. The ``Allow``
    header lists those methods in sorted order.
    """

    def __init__(self, method: str, path: str, allowed: frozenset[str]) -> None:
        allow = ", ".join(sorted(allowed))
        super().__init__(
            status=405,
            detail=f"{method} is not allowed for {path!r} (allowed: {allow})",
            headers=(("Allow", allow),),
        )

    @property
    def allowed(self) -> frozenset[str]:
        """Methods listed in the ``Allow`` header."""
        return frozenset(self.headers[0][1].split(", "))
