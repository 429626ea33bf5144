"""
Error handling for the FastAPI application.
Translates domain exceptions to HTTP responses and catches everything else.
"""

import logging
import traceback
from typing import Any, Dict, List

from fastapi import FastAPI, status
from fastapi.exceptions import RequestValidationError
from pydantic.alias_generators import to_camel
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse

from time_reporting.application.dto.base_dto import (
    ErrorResponseDTO,
    FieldErrorDTO,
    ValidationErrorResponseDTO,
    to_dict
)
from time_reporting.config import settings
from time_reporting.domain.models.base import (
    ConflictError,
    DomainException,
    EntityNotFoundError,
    ForbiddenError,
    InvalidTransitionError,
    ValidationError,
    ValidationErrors
)

logger = logging.getLogger(__name__)


# Exception type -> (HTTP status, error label); first match wins
DOMAIN_ERROR_STATUS = [
    (EntityNotFoundError, status.HTTP_404_NOT_FOUND, "Not Found"),
    (ValidationErrors, status.HTTP_422_UNPROCESSABLE_ENTITY, "Validation Error"),
    (ValidationError, status.HTTP_422_UNPROCESSABLE_ENTITY, "Validation Error"),
    (ForbiddenError, status.HTTP_403_FORBIDDEN, "Forbidden"),
    (InvalidTransitionError, status.HTTP_409_CONFLICT, "Invalid Transition"),
    (ConflictError, status.HTTP_409_CONFLICT, "Conflict"),
]


def _field_errors(exc: DomainException) -> List[FieldErrorDTO]:
    if isinstance(exc, ValidationErrors):
        errors = exc.errors
    else:
        errors = [exc]
    return [
        FieldErrorDTO(field=error.field, message=error.message, allowed_values=error.allowed_values)
        for error in errors
    ]


def domain_error_response(request: Request, exc: DomainException) -> JSONResponse:
    """Build the HTTP response for a domain exception."""
    status_code, label = status.HTTP_400_BAD_REQUEST, "Bad Request"
    for exc_type, mapped_status, mapped_label in DOMAIN_ERROR_STATUS:
        if isinstance(exc, exc_type):
            status_code, label = mapped_status, mapped_label
            break

    request_id = getattr(request.state, "request_id", None)
    details = {
        to_camel(key): value
        for key, value in exc.to_dict().items()
        if key not in ("code", "message", "errors")
    }

    if isinstance(exc, (ValidationError, ValidationErrors)):
        body = ValidationErrorResponseDTO(
            error=label,
            message=exc.message,
            code=exc.code,
            details=details or None,
            field_errors=_field_errors(exc),
            request_id=request_id
        )
    else:
        body = ErrorResponseDTO(
            error=label,
            message=exc.message,
            code=exc.code,
            details=details or None,
            request_id=request_id
        )

    return JSONResponse(status_code=status_code, content=to_dict(body))


async def domain_exception_handler(request: Request, exc: DomainException) -> JSONResponse:
    logger.info(
        "%s %s -> %s: %s",
        request.method,
        request.url.path,
        exc.code,
        exc.message
    )
    return domain_error_response(request, exc)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Shape malformed request bodies like domain validation errors."""
    field_errors = [
        FieldErrorDTO(
            field=".".join(str(part) for part in error.get("loc", ()) if part != "body") or None,
            message=error.get("msg", "Invalid value")
        )
        for error in exc.errors()
    ]
    body = ValidationErrorResponseDTO(
        error="Validation Error",
        message="Request validation failed",
        code="REQUEST_VALIDATION_ERROR",
        field_errors=field_errors,
        request_id=getattr(request.state, "request_id", None)
    )
    return JSONResponse(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, content=to_dict(body))


def register_exception_handlers(app: FastAPI) -> None:
    """Install the domain and request validation exception handlers."""
    app.add_exception_handler(DomainException, domain_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """
    Middleware to handle all uncaught exceptions and format error responses.
    """

    async def dispatch(self, request: Request, call_next):
        """
        Process the request and handle any exceptions.
        """
        try:
            response = await call_next(request)
            return response
        except Exception as exc:
            return await self.handle_exception(request, exc)

    async def handle_exception(self, request: Request, exc: Exception) -> JSONResponse:
        """
        Log the exception and return a generic 500 response.
        """
        if isinstance(exc, DomainException):
            return domain_error_response(request, exc)

        # Log the full exception with traceback
        logger.error(
            f"Unhandled exception: {type(exc).__name__}: {str(exc)}",
            exc_info=True,
            extra={
                "request_path": request.url.path,
                "request_method": request.method,
                "client_host": request.client.host if request.client else None
            }
        )

        error_response: Dict[str, Any] = to_dict(ErrorResponseDTO(
            error="Internal Server Error",
            message="An unexpected error occurred",
            code="INTERNAL_ERROR",
            request_id=getattr(request.state, "request_id", None)
        ))

        # In development, add more debug information
        if settings.debug:
            error_response["debug"] = {
                "exceptionType": type(exc).__name__,
                "traceback": traceback.format_exc().split("\n")
            }

        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=error_response
        )
