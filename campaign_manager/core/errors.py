"""Typed API failures and the FastAPI handlers that render them.

Every failure leaves the service as ``{"error", "type", "details"?}``.
"""
import logging
from enum import Enum
from typing import Any, Optional

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from campaign_manager.core.settings import settings

logger = logging.getLogger(__name__)

STORAGE_RETRY_AFTER_SECONDS = 5


class ErrorType(str, Enum):
    VALIDATION_ERROR = "VALIDATION_ERROR"
    NOT_FOUND = "NOT_FOUND"
    UNAUTHORIZED = "UNAUTHORIZED"
    FORBIDDEN = "FORBIDDEN"
    STORAGE_UNAVAILABLE = "STORAGE_UNAVAILABLE"
    INTERNAL_SERVER_ERROR = "INTERNAL_SERVER_ERROR"


ERROR_STATUS = {
    ErrorType.VALIDATION_ERROR: 400,
    ErrorType.NOT_FOUND: 404,
    ErrorType.UNAUTHORIZED: 401,
    ErrorType.FORBIDDEN: 403,
    ErrorType.STORAGE_UNAVAILABLE: 503,
    ErrorType.INTERNAL_SERVER_ERROR: 500,
}

_STATUS_TYPES = {status: error_type for error_type, status in ERROR_STATUS.items()}


class ApiError(Exception):
    error_type = ErrorType.INTERNAL_SERVER_ERROR

    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(message)
        self.message = message
        self.details = details

    @property
    def status_code(self) -> int:
        return ERROR_STATUS[self.error_type]

    def to_dict(self) -> dict:
        body = {"error": self.message, "type": self.error_type.value}
        if self.details is not None:
            body["details"] = self.details
        return body


class ValidationError(ApiError):
    error_type = ErrorType.VALIDATION_ERROR


class NotFoundError(ApiError):
    error_type = ErrorType.NOT_FOUND


class UnauthorizedError(ApiError):
    error_type = ErrorType.UNAUTHORIZED


class ForbiddenError(ApiError):
    error_type = ErrorType.FORBIDDEN


class StorageUnavailableError(ApiError):
    """The store could not be reached or rejected the operation. Retryable."""
    error_type = ErrorType.STORAGE_UNAVAILABLE


async def api_error_handler(request: Request, exc: ApiError):
    context = {"path": request.url.path, "error_type": exc.error_type.value}
    headers = None
    if exc.status_code >= 500:
        logger.error(f"[{exc.error_type.value}] {exc.message}", extra=context, exc_info=exc)
    else:
        logger.info(f"[{exc.error_type.value}] {exc.message}", extra=context)
    if isinstance(exc, UnauthorizedError):
        headers = {"WWW-Authenticate": "Bearer"}
    elif isinstance(exc, StorageUnavailableError):
        headers = {"Retry-After": str(STORAGE_RETRY_AFTER_SECONDS)}
    return JSONResponse(status_code=exc.status_code, content=jsonable_encoder(exc.to_dict()), headers=headers)


async def request_validation_handler(request: Request, exc: RequestValidationError):
    error = ValidationError("Invalid request", details=exc.errors())
    logger.info(f"[{error.error_type.value}] {error.message}", extra={"path": request.url.path})
    return JSONResponse(status_code=error.status_code, content=jsonable_encoder(error.to_dict()))


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    error_type = _STATUS_TYPES.get(exc.status_code, ErrorType.INTERNAL_SERVER_ERROR)
    body = {"error": str(exc.detail), "type": error_type.value}
    return JSONResponse(status_code=exc.status_code, content=body, headers=getattr(exc, "headers", None))


async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error("[INTERNAL_SERVER_ERROR] Unhandled exception", extra={"path": request.url.path}, exc_info=exc)
    # Don't expose internal error details in production
    message = "An unexpected error occurred" if settings.environment == "production" else str(exc)
    return JSONResponse(
        status_code=500,
        content={"error": message, "type": ErrorType.INTERNAL_SERVER_ERROR.value},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ApiError, api_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
