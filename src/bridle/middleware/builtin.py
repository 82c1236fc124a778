"""Built-in middleware: CORS and request logging.

Both follow the handler-to-handler shape: construct with configuration,
then pass the instance to ``Bridle.with_middleware()``.
"""

import logging
import time
from dataclasses import dataclass

from bridle.errors import HTTPError
from bridle.http.request import Request
from bridle.http.writer import ResponseWriter
from bridle.middleware.protocol import Handler

access_logger = logging.getLogger("bridle.access")


@dataclass(frozen=True, slots=True)
class CORSConfig:
    """CORS middleware configuration.

    All fields have secure defaults (nothing is allowed).
    Override what you need::

        CORSConfig(
            allow_origins=("https://example.com",),
            allow_methods=("GET", "POST"),
        )
    """

    allow_origins: tuple[str, ...] = ()
    allow_methods: tuple[str, ...] = ("GET", "HEAD", "OPTIONS")
    allow_headers: tuple[str, ...] = ()
    expose_headers: tuple[str, ...] = ()
    allow_credentials: bool = False
    max_age: int = 600  # 10 minutes


class CORSMiddleware:
    """Standards-compliant CORS middleware.

    Handles:
    - Preflight ``OPTIONS`` requests (answers 204 without calling the route)
    - Actual requests (sets CORS headers before the route writes)
    - Credential support (``Access-Control-Allow-Credentials``)
    - Wildcard origins (``"*"``) when credentials are disabled

    Preflight requests only reach this middleware when a route is
    registered for ``OPTIONS`` on the path, since the router dispatches
    before any middleware runs::

        api = root.sub_path("/api").with_middleware(CORSMiddleware(CORSConfig(
            allow_origins=("https://example.com",),
            allow_methods=("GET", "POST", "PUT"),
        )))
        api.get("/items", list_items)
        api.options("/items", no_content)
    """

    __slots__ = ("config",)

    def __init__(self, config: CORSConfig | None = None) -> None:
        self.config = config or CORSConfig()

    def _is_allowed_origin(self, origin: str) -> bool:
        if "*" in self.config.allow_origins:
            return True
        return origin in self.config.allow_origins

    def _set_cors_headers(self, writer: ResponseWriter, origin: str) -> None:
        cfg = self.config

        if "*" in cfg.allow_origins and not cfg.allow_credentials:
            writer.set_header("Access-Control-Allow-Origin", "*")
        else:
            writer.set_header("Access-Control-Allow-Origin", origin)
            writer.add_header("Vary", "Origin")

        if cfg.allow_credentials:
            writer.set_header("Access-Control-Allow-Credentials", "true")

        if cfg.expose_headers:
            writer.set_header("Access-Control-Expose-Headers", ", ".join(cfg.expose_headers))

    async def _preflight(self, writer: ResponseWriter, origin: str, request_method: str | None) -> None:
        cfg = self.config
        self._set_cors_headers(writer, origin)

        if request_method:
            writer.set_header("Access-Control-Allow-Methods", ", ".join(cfg.allow_methods))

        if cfg.allow_headers:
            writer.set_header("Access-Control-Allow-Headers", ", ".join(cfg.allow_headers))

        writer.set_header("Access-Control-Max-Age", str(cfg.max_age))
        await writer.write_header(204)

    def __call__(self, next: Handler) -> Handler:
        async def cors(request: Request, writer: ResponseWriter) -> None:
            origin = request.headers.get("origin")

            # No Origin header or unknown origin: not our business
            if origin is None or not self._is_allowed_origin(origin):
                await next(request, writer)
                return

            if request.method == "OPTIONS":
                request_method = request.headers.get("access-control-request-method")
                await self._preflight(writer, origin, request_method)
                return

            self._set_cors_headers(writer, origin)
            await next(request, writer)

        return cors


class RequestLogger:
    """Log one line per request after the inner handler returns.

    Emits on the ``bridle.access`` logger at INFO::

        GET /api/items/42 -> 200 (17 bytes, 1.3ms)

    Requests whose handler raised are logged at ERROR and the exception
    propagates to the router's dispatch boundary.
    """

    __slots__ = ("level", "logger")

    def __init__(self, logger: logging.Logger | None = None, level: int = logging.INFO) -> None:
        self.logger = logger or access_logger
        self.level = level

    def __call__(self, next: Handler) -> Handler:
        async def log_request(request: Request, writer: ResponseWriter) -> None:
            start = time.perf_counter()
            try:
                await next(request, writer)
            except HTTPError as exc:
                self.logger.log(
                    self.level,
                    "%s %s -> %d (%.1fms)",
                    request.method,
                    request.path,
                    exc.status,
                    (time.perf_counter() - start) * 1000,
                )
                raise
            except Exception:
                self.logger.error(
                    "%s %s -> unhandled error (%.1fms)",
                    request.method,
                    request.path,
                    (time.perf_counter() - start) * 1000,
                )
                raise
            self.logger.log(
                self.level,
                "%s %s -> %s (%d bytes, %.1fms)",
                request.method,
                request.path,
                writer.status if writer.status is not None else 200,
                writer.bytes_written,
                (time.perf_counter() - start) * 1000,
            )

        return log_request
