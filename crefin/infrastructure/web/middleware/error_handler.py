"""
Global error handling for the FastAPI application.
Maps domain exceptions to HTTP statuses and formats every error body the same way.
"""

import logging
import traceback
from typing import Any, Dict
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse
from fastapi import FastAPI, status
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError as PydanticValidationError

from crefin.config import settings
from crefin.domain.models.base import (
    DomainException,
    ValidationError,
    EntityNotFoundError,
    ConflictError,
    PreconditionFailedError,
    ExternalServiceDegraded,
)

logger = logging.getLogger(__name__)


# Most specific first; DuplicateEntityError is matched through ConflictError
DOMAIN_STATUS_CODES = (
    (EntityNotFoundError, status.HTTP_404_NOT_FOUND, "Not Found"),
    (ConflictError, status.HTTP_409_CONFLICT, "Conflict"),
    (PreconditionFailedError, status.HTTP_412_PRECONDITION_FAILED, "Precondition Failed"),
    (ValidationError, status.HTTP_422_UNPROCESSABLE_ENTITY, "Validation Error"),
    (ExternalServiceDegraded, status.HTTP_503_SERVICE_UNAVAILABLE, "Service Unavailable"),
)


def format_error_response(exc: Exception) -> Dict[str, Any]:
    """
    Format exception into a consistent error response structure.
    """
    error_response = {
        "error": "Internal Server Error",
        "message": "An unexpected error occurred",
        "code": "INTERNAL_ERROR",
        "status_code": status.HTTP_500_INTERNAL_SERVER_ERROR
    }

    if isinstance(exc, DomainException):
        error_response.update({
            "error": "Bad Request",
            "message": exc.message,
            "code": exc.code,
            "status_code": status.HTTP_400_BAD_REQUEST
        })
        for exc_type, status_code, error in DOMAIN_STATUS_CODES:
            if isinstance(exc, exc_type):
                error_response.update({"error": error, "status_code": status_code})
                break
        if isinstance(exc, ValidationError) and exc.field:
            error_response["field"] = exc.field
    elif isinstance(exc, ValueError):
        error_response.update({
            "error": "Bad Request",
            "message": str(exc),
            "code": "BAD_REQUEST",
            "status_code": status.HTTP_400_BAD_REQUEST
        })
    elif isinstance(exc, PermissionError):
        error_response.update({
            "error": "Forbidden",
            "message": "You don't have permission to perform this action",
            "code": "FORBIDDEN",
            "status_code": status.HTTP_403_FORBIDDEN
        })

    return error_response


def _error_json(exc: Exception) -> JSONResponse:
    error_response = format_error_response(exc)
    return JSONResponse(status_code=error_response["status_code"], content=error_response)


async def domain_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Expected failures: logged at INFO without a traceback."""
    logger.info(f"{request.method} {request.url.path} failed: {type(exc).__name__}: {exc}")
    return _error_json(exc)


async def request_validation_handler(request: Request, exc: Exception) -> JSONResponse:
    """Request bodies, query strings and DTOs built inside handlers."""
    errors = exc.errors()
    first = errors[0] if errors else {}
    message = first.get("msg", "Invalid request")
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")

    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "error": "Validation Error",
            "message": f"{location}: {message}" if location else message,
            "code": "VALIDATION_ERROR",
            "status_code": status.HTTP_422_UNPROCESSABLE_ENTITY,
            "details": [
                {"loc": [str(part) for part in error.get("loc", ())], "msg": error.get("msg")}
                for error in errors
            ]
        }
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(DomainException, domain_exception_handler)
    app.add_exception_handler(ValueError, domain_exception_handler)
    app.add_exception_handler(PermissionError, domain_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(PydanticValidationError, request_validation_handler)


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """
    Middleware to handle all uncaught exceptions and format error responses.
    """

    async def dispatch(self, request: Request, call_next):
        try:
            return await call_next(request)
        except Exception as exc:
            return await self.handle_exception(request, exc)

    async def handle_exception(self, request: Request, exc: Exception) -> JSONResponse:
        logger.error(
            f"Unhandled exception: {type(exc).__name__}: {str(exc)}",
            exc_info=True,
            extra={
                "request_path": request.url.path,
                "request_method": request.method,
                "client_host": request.client.host if request.client else None
            }
        )

        error_response = format_error_response(exc)

        if settings.debug:
            error_response["debug"] = {
                "exception_type": type(exc).__name__,
                "traceback": traceback.format_exc().split("\n")
            }

        return JSONResponse(
            status_code=error_response["status_code"],
            content=error_response
        )
