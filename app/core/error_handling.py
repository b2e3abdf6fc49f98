"""
Enhanced error handling and logging utilities
"""
import logging
import os
import traceback
from typing import Optional, Dict, Any
from fastapi import Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
import sentry_sdk

logger = logging.getLogger(__name__)


class AppException(Exception):
    """Base application exception"""
    stage = "request"

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        details: Optional[Dict[str, Any]] = None,
        stage: Optional[str] = None,
        cause: Optional[BaseException] = None,
    ):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        if stage:
            self.stage = stage
        # Kept for diagnostics only, never rendered to the client
        self.cause = cause
        super().__init__(self.message)


class ValidationException(AppException):
    """Validation error exception"""
    stage = "input"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, status_code=422, details=details)


class NotFoundException(AppException):
    """Resource not found exception"""
    def __init__(self, message: str = "Resource not found", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, status_code=404, details=details)


class UnauthorizedException(AppException):
    """Unauthorized access exception"""
    stage = "authentication"

    def __init__(self, message: str = "Unauthorized", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, status_code=401, details=details)


class ForbiddenException(AppException):
    """Forbidden access exception"""
    stage = "authorization"

    def __init__(self, message: str = "Forbidden", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, status_code=403, details=details)


class ConflictException(AppException):
    """Resource conflict exception"""
    def __init__(self, message: str = "Resource conflict", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, status_code=409, details=details)


# Diagnosis pipeline errors

ValidationError = ValidationException


class UpstreamUnavailable(AppException):
    """Prediction/recommendation service unreachable, timed out or returned non-2xx"""
    def __init__(
        self,
        message: str = "Prediction service is unavailable",
        stage: str = "prediction",
        cause: Optional[BaseException] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, status_code=503, details=details, stage=stage, cause=cause)


class MalformedUpstreamResponse(AppException):
    """Upstream answered 2xx but the body is missing or has the wrong shape"""
    def __init__(
        self,
        message: str = "Prediction service returned an unexpected response",
        stage: str = "prediction",
        cause: Optional[BaseException] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, status_code=502, details=details, stage=stage, cause=cause)


class VocabularyMismatch(AppException):
    """Vocabulary length disagrees with the model's dimensionality"""
    def __init__(
        self,
        message: str,
        stage: str = "resolution",
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, status_code=500, details=details, stage=stage)


class StorageError(AppException):
    """History read/write failure"""
    stage = "storage"

    def __init__(self, message: str = "Health history storage failed", cause: Optional[BaseException] = None):
        super().__init__(message, status_code=500, cause=cause)


def log_error(error: Exception, request: Optional[Request] = None, context: Optional[Dict[str, Any]] = None):
    """
    Log error with context and send to Sentry if configured
    """
    error_context = {
        "error_type": type(error).__name__,
        "error_message": str(error),
    }

    cause = getattr(error, "cause", None)
    if cause is not None:
        error_context["cause"] = f"{type(cause).__name__}: {cause}"

    if request:
        error_context.update({
            "path": request.url.path,
            "method": request.method,
            "client": request.client.host if request.client else None,
        })

    if context:
        error_context.update(context)

    if isinstance(error, AppException) and error.status_code < 500:
        logger.warning(f"Request failed: {error_context}")
    else:
        logger.error(f"Error occurred: {error_context}", exc_info=error)

    # No-op when Sentry is not initialised
    sentry_sdk.capture_exception(error)


def error_response(status_code: int, message: str, error_type: str, stage: str, details: Optional[Dict[str, Any]] = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "success": False,
            "message": message,
            "error": {
                "type": error_type,
                "stage": stage,
                "details": details or {},
            }
        }
    )


async def app_exception_handler(request: Request, exc: AppException):
    """Handle application exceptions"""
    log_error(exc, request)

    return error_response(
        exc.status_code,
        exc.message,
        type(exc).__name__,
        exc.stage,
        exc.details,
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handle validation exceptions with better formatting"""
    errors = []
    for error in exc.errors():
        errors.append({
            "field": ".".join(str(loc) for loc in error["loc"]),
            "message": error["msg"],
            "type": error["type"],
        })

    log_error(exc, request, {"validation_errors": errors})

    return error_response(
        status.HTTP_422_UNPROCESSABLE_ENTITY,
        "Validation error",
        "ValidationError",
        "input",
        {"errors": errors},
    )


async def general_exception_handler(request: Request, exc: Exception):
    """Handle general exceptions"""
    log_error(exc, request)

    # Don't expose internal errors in production
    is_development = os.getenv("ENVIRONMENT", "development") == "development"

    details = {}
    if is_development:
        details["traceback"] = traceback.format_exception(type(exc), exc, exc.__traceback__)

    return error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        str(exc) if is_development else "Internal server error",
        type(exc).__name__,
        "server",
        details,
    )
