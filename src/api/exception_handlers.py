"""Exception handlers for the FastAPI application.

Every error leaves the service as ``{error, error_code, details}`` so the
frontend can show ``error`` as-is.
"""

from typing import Any

import structlog
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import ORJSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from api.v1.schemas.common import ErrorResponse
from core.exceptions import AppException, ErrorCode

logger = structlog.get_logger()

HTTP_ERROR_CODE = "HTTP_ERROR"
INTERNAL_ERROR_MESSAGE = "An unexpected error occurred"

_STATUS_ERROR_CODES: dict[int, str] = {
    status.HTTP_401_UNAUTHORIZED: ErrorCode.UNAUTHORIZED.value,
    status.HTTP_429_TOO_MANY_REQUESTS: ErrorCode.RATE_LIMIT_EXCEEDED.value,
}


def error_response(
    status_code: int,
    error: str,
    error_code: str,
    details: Any | None = None,
) -> ORJSONResponse:
    """Render the shared error body."""
    body = ErrorResponse(error=error, error_code=error_code, details=details)
    return ORJSONResponse(status_code=status_code, content=body.model_dump())


def _request_id(request: Request) -> str:
    return getattr(request.state, "request_id", "unknown")


def setup_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers on the FastAPI app."""

    @app.exception_handler(AppException)
    async def app_exception_handler(request: Request, exc: AppException) -> ORJSONResponse:
        """Handle domain and access errors."""
        # Rejected credentials are routine traffic; keep them out of warning level.
        log = logger.info if exc.status_code == status.HTTP_401_UNAUTHORIZED else logger.warning
        log(
            "app_exception",
            error_code=exc.error_code.value,
            message=exc.message,
            status_code=exc.status_code,
            request_id=_request_id(request),
        )
        return error_response(exc.status_code, exc.message, exc.error_code.value, exc.details)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> ORJSONResponse:
        """Handle routing and framework HTTP errors."""
        return error_response(
            exc.status_code,
            str(exc.detail),
            _STATUS_ERROR_CODES.get(exc.status_code, HTTP_ERROR_CODE),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ) -> ORJSONResponse:
        """Handle malformed request bodies."""
        fields = [
            {
                "field": ".".join(str(part) for part in error["loc"] if part != "body"),
                "message": error["msg"],
                "type": error["type"],
            }
            for error in exc.errors()
        ]
        logger.info(
            "validation_error",
            path=request.url.path,
            fields=[f["field"] for f in fields],
        )
        return error_response(
            status.HTTP_422_UNPROCESSABLE_ENTITY,
            "Request validation failed",
            ErrorCode.VALIDATION_ERROR.value,
            fields,
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> ORJSONResponse:
        """Handle unexpected exceptions; details go to the log, never the body."""
        request_id = _request_id(request)
        logger.error(
            "unhandled_exception",
            error=str(exc),
            error_type=type(exc).__name__,
            request_id=request_id,
            exc_info=exc,
        )
        return error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            INTERNAL_ERROR_MESSAGE,
            ErrorCode.INTERNAL_ERROR.value,
            {"request_id": request_id},
        )
