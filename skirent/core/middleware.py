import time
import logging
import uuid
from typing import Callable, Iterable, Optional
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from skirent.core.logging_utils import error_tracker

logger = logging.getLogger(__name__)

DEFAULT_EXCLUDE_PATHS = ("/health", "/docs", "/openapi.json", "/redoc", "/favicon.ico")


def get_client_ip(request: Request) -> str:
    """Получить IP клиента с учетом proxy"""
    forwarded_for = request.headers.get("x-forwarded-for")
    if forwarded_for:
        return forwarded_for.split(",")[0].strip()

    real_ip = request.headers.get("x-real-ip")
    if real_ip:
        return real_ip

    return request.client.host if request.client else "unknown"


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Logs every request with a short request id and flags slow requests.

    The id is exposed to handlers as ``request.state.request_id`` and echoed
    back in the ``X-Request-ID`` response header.
    """

    def __init__(
        self,
        app: ASGIApp,
        exclude_paths: Optional[Iterable[str]] = None,
        slow_request_threshold: float = 1.0,
    ):
        super().__init__(app)
        self.exclude_paths = set(exclude_paths or DEFAULT_EXCLUDE_PATHS)
        self.slow_request_threshold = slow_request_threshold

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        if request.url.path in self.exclude_paths:
            return await call_next(request)

        request_id = request.headers.get("x-request-id") or str(uuid.uuid4())[:8]
        request.state.request_id = request_id
        start_time = time.time()

        logger.info(
            f"Request started: {request.method} {request.url.path}",
            extra={
                "request_id": request_id,
                "method": request.method,
                "path": request.url.path,
                "query_params": (
                    str(request.query_params) if request.query_params else None
                ),
                "client_ip": get_client_ip(request),
                "user_agent": request.headers.get("user-agent"),
            },
        )

        try:
            response = await call_next(request)
        except Exception as e:
            duration_ms = round((time.time() - start_time) * 1000, 2)
            logger.error(
                f"Request failed: {request.method} {request.url.path}",
                extra={
                    "request_id": request_id,
                    "method": request.method,
                    "path": request.url.path,
                    "duration_ms": duration_ms,
                    "error_type": type(e).__name__,
                    "error_message": str(e),
                },
            )
            raise

        duration = time.time() - start_time
        duration_ms = round(duration * 1000, 2)

        logger.info(
            f"Request completed: {request.method} {request.url.path}",
            extra={
                "request_id": request_id,
                "method": request.method,
                "path": request.url.path,
                "status_code": response.status_code,
                "duration_ms": duration_ms,
                "response_size": response.headers.get("content-length"),
            },
        )

        if duration > self.slow_request_threshold:
            logger.warning(
                f"Slow request detected: {request.method} {request.url.path}",
                extra={
                    "request_id": request_id,
                    "duration_ms": duration_ms,
                    "threshold_ms": self.slow_request_threshold * 1000,
                    "status_code": response.status_code,
                    "category": "performance",
                },
            )

        response.headers["X-Request-ID"] = request_id
        return response


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """
    Middleware для добавления security headers
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        response = await call_next(request)

        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"

        # Swagger UI needs inline scripts; JSON and xlsx responses need nothing
        if not request.url.path.startswith(("/docs", "/redoc")):
            response.headers["Content-Security-Policy"] = "default-src 'none'; frame-ancestors 'none'"

        return response


class ErrorTrackingMiddleware(BaseHTTPMiddleware):
    """
    Записывает 5xx ответы и необработанные исключения в error_tracker
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        try:
            response = await call_next(request)
        except Exception as e:
            error_tracker.track_error(
                error_type=f"UNHANDLED_{type(e).__name__}",
                error_message=str(e),
                context={
                    "method": request.method,
                    "path": request.url.path,
                    "client_ip": get_client_ip(request),
                },
            )
            raise

        if response.status_code >= 500:
            error_tracker.track_error(
                error_type=f"HTTP_{response.status_code}",
                error_message=f"HTTP {response.status_code} response",
                context={
                    "method": request.method,
                    "path": request.url.path,
                    "status_code": response.status_code,
                },
            )

        return response


def setup_middleware(app, config: dict = None):
    """
    Настройка всех middleware для приложения

    Middleware применяются в обратном порядке добавления: request logging
    is outermost, error tracking innermost.
    """
    config = config or {}

    app.add_middleware(ErrorTrackingMiddleware)
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(
        RequestLoggingMiddleware,
        exclude_paths=config.get("exclude_paths", DEFAULT_EXCLUDE_PATHS),
        slow_request_threshold=config.get("slow_request_threshold", 1.0),
    )

    logger.info("All middleware configured successfully")
