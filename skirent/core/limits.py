import logging

from fastapi import Request
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

from skirent.core.config import RATE_LIMIT_ENABLED

logger = logging.getLogger(__name__)

limiter = Limiter(key_func=get_remote_address, enabled=RATE_LIMIT_ENABLED)


async def rate_limit_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """Render slowapi rejections in the same envelope as application errors"""
    logger.warning(
        f"Rate limit exceeded: {request.method} {request.url.path}",
        extra={
            "limit": str(exc.detail),
            "client_ip": get_remote_address(request),
            "path": request.url.path,
        },
    )

    return JSONResponse(
        status_code=429,
        content={
            "error": "RATE_LIMIT_EXCEEDED",
            "message": f"Rate limit exceeded: {exc.detail}",
            "details": {},
            "path": request.url.path,
        },
    )
