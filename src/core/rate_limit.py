"""Per-client request throttling using slowapi."""

import structlog
from fastapi import Request
from fastapi.responses import ORJSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

from core.config import settings
from core.exceptions import ErrorCode

logger = structlog.get_logger()

# Signup is unauthenticated, so it gets the tightest limit.
SIGNUP_LIMIT = "5/minute"
WRITE_LIMIT = "10/minute"
READ_LIMIT = "30/minute"

limiter = Limiter(
    key_func=get_remote_address,
    enabled=settings.rate_limit_enabled,
)


async def rate_limit_exceeded_handler(request: Request, exc: Exception) -> ORJSONResponse:
    """Render throttled requests in the shared error format."""
    limit = exc.detail if isinstance(exc, RateLimitExceeded) else str(exc)
    logger.warning(
        "rate_limited",
        client=get_remote_address(request),
        path=request.url.path,
        limit=limit,
    )
    return ORJSONResponse(
        status_code=429,
        content={
            "error": f"Too many requests, limit is {limit}",
            "error_code": ErrorCode.RATE_LIMIT_EXCEEDED.value,
            "details": {"limit": str(limit)},
        },
    )
