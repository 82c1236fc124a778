"""Middleware — handler-to-handler functions, no inheritance required.

A middleware is any callable matching:
    def mw(next: Handler) -> Handler

Built-in middleware:
    CORSMiddleware -- Cross-Origin Resource Sharing
    RequestLogger -- One access-log line per request
    SecurityHeadersMiddleware -- X-Frame-Options, X-Content-Type-Options, Referrer-Policy

Adapters:
    handler_middleware -- Run a terminal handler, then continue the chain
"""

from bridle.middleware.builtin import CORSConfig, CORSMiddleware, RequestLogger
from bridle.middleware.protocol import Handler, Middleware, handler_middleware
from bridle.middleware.security_headers import (
    SecurityHeadersConfig,
    SecurityHeadersMiddleware,
)

__all__ = [
    "CORSConfig",
    "CORSMiddleware",
    "Handler",
    "Middleware",
    "RequestLogger",
    "SecurityHeadersConfig",
    "SecurityHeadersMiddleware",
    "handler_middleware",
]
