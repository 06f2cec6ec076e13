"""
Scholarship Portal - HTTP Middleware
Request/Response logging, timing, and context management
"""

import time
from typing import Callable, Set
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.types import ASGIApp

from scholarship.core.logging_config import (
    logger,
    set_request_id,
    set_user_id,
    generate_request_id,
)


# Paths that should skip detailed logging (health checks, docs, served uploads)
SKIP_LOGGING_PATHS: Set[str] = {
    "/",
    "/api/health",
    "/favicon.ico",
    "/docs",
    "/redoc",
    "/openapi.json",
}


def should_skip_logging(path: str) -> bool:
    """Check if path should skip detailed logging"""
    if path in SKIP_LOGGING_PATHS:
        return True
    if path.startswith("/uploads/"):
        return True
    return False


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Middleware for logging HTTP requests and responses.

    - Generates and tracks request IDs for correlation
    - Logs request method, path, status, and duration
    - Adds X-Request-ID and X-Response-Time headers to responses
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get("X-Request-ID") or generate_request_id()
        set_request_id(request_id)

        path = request.url.path
        skip_logging = should_skip_logging(path)
        start_time = time.perf_counter()

        if not skip_logging:
            client_ip = request.client.host if request.client else "unknown"
            logger.info(
                f"→ {request.method} {path}",
                extra={
                    "event_type": "http_request_start",
                    "http_method": request.method,
                    "http_path": path,
                    "client_ip": client_ip,
                    "content_length": request.headers.get("content-length", 0),
                }
            )

        try:
            response = await call_next(request)

            duration_ms = (time.perf_counter() - start_time) * 1000

            response.headers["X-Request-ID"] = request_id
            response.headers["X-Response-Time"] = f"{duration_ms:.2f}ms"

            if not skip_logging:
                logger.log_request(request.method, path, response.status_code, duration_ms)

            return response

        except Exception as exc:
            duration_ms = (time.perf_counter() - start_time) * 1000

            logger.error(
                f"✗ {request.method} {path} - Exception ({duration_ms:.2f}ms): {type(exc).__name__}",
                exc_info=True,
                extra={
                    "event_type": "http_request_error",
                    "http_method": request.method,
                    "http_path": path,
                    "duration_ms": duration_ms,
                    "error_type": type(exc).__name__,
                    "error_message": str(exc),
                }
            )
            raise

        finally:
            set_request_id("")
            set_user_id("")


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """
    Middleware to add security headers to all responses
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        response = await call_next(request)

        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"

        return response


class RequestSizeLimitMiddleware(BaseHTTPMiddleware):
    """
    Middleware to limit request body size
    """

    def __init__(self, app: ASGIApp, max_size: int = 10 * 1024 * 1024):  # 10MB default
        super().__init__(app)
        self.max_size = max_size

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        content_length = request.headers.get("content-length")

        if content_length and content_length.isdigit() and int(content_length) > self.max_size:
            logger.warning(
                f"Request body too large: {content_length} bytes (max: {self.max_size})",
                extra={
                    "event_type": "request_too_large",
                    "content_length": int(content_length),
                    "max_size": self.max_size,
                    "http_path": request.url.path,
                }
            )
            return JSONResponse(
                status_code=413,
                content={"msg": f"Request body too large. Maximum size is {self.max_size // 1024 // 1024}MB"}
            )

        return await call_next(request)
