"""
Error handling for the invoicing API.

Every error leaves the service as an ``ErrorResponse`` body:
- error_code: machine-readable identifier
- message: human-readable description
- hint: suggested recovery action
- errors: per-field problems, for form validation failures
"""

import traceback
from collections.abc import Awaitable, Callable
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from src.application.dto.responses import ErrorResponse
from src.config import get_logger
from src.core.exceptions import (
    CompanyNotFoundError,
    ConfigurationError,
    CustomerInUseError,
    CustomerNotFoundError,
    FakturaError,
    InvalidStatusTransitionError,
    InvoiceNotFoundError,
    InvoiceValidationError,
    MissingTenantError,
    NumberingConflictError,
    StorageError,
    TerminalStateError,
    ValidationError,
)

logger = get_logger(__name__)

# First match wins, so subclasses come before their bases
STATUS_BY_ERROR: tuple[tuple[type[Exception], int], ...] = (
    (InvoiceValidationError, status.HTTP_400_BAD_REQUEST),
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (MissingTenantError, status.HTTP_401_UNAUTHORIZED),
    (InvoiceNotFoundError, status.HTTP_404_NOT_FOUND),
    (CustomerNotFoundError, status.HTTP_404_NOT_FOUND),
    (CompanyNotFoundError, status.HTTP_404_NOT_FOUND),
    (TerminalStateError, status.HTTP_409_CONFLICT),
    (InvalidStatusTransitionError, status.HTTP_409_CONFLICT),
    (NumberingConflictError, status.HTTP_409_CONFLICT),
    (CustomerInUseError, status.HTTP_409_CONFLICT),
    (StorageError, status.HTTP_500_INTERNAL_SERVER_ERROR),
    (ConfigurationError, status.HTTP_500_INTERNAL_SERVER_ERROR),
)

HINTS: dict[str, str] = {
    "INVOICE_NOT_FOUND": "Check the invoice ID and try GET /api/invoices to list invoices.",
    "CUSTOMER_NOT_FOUND": "Check the customer ID and try GET /api/customers to list customers.",
    "COMPANY_NOT_FOUND": "Save the company profile with PUT /api/company first.",
    "CUSTOMER_IN_USE": "The customer has invoices. Cancel or delete them before removing the customer.",
    "INVOICE_VALIDATION_FAILED": "Fix every field listed in 'errors' and submit again.",
    "TERMINAL_STATE": "Paid and cancelled invoices are frozen. Issue a credit invoice instead.",
    "INVALID_STATUS_TRANSITION": "Allowed: draft->sent, sent->paid|late, late->paid, any open status->cancelled.",
    "INVOICE_NUMBER_CONFLICT": "The number is taken. Choose another, or leave it empty for the next one.",
    "MISSING_TENANT": "Send the tenant ID in the X-Tenant-ID header.",
    "VALIDATION_ERROR": "Fix the fields listed in 'errors' and submit again.",
    "DATABASE_ERROR": "A database operation failed. Retry, and check server logs if it persists.",
}

FALLBACK_HINTS: dict[int, str] = {
    400: "Check the request parameters and body.",
    401: "Send the tenant header.",
    404: "The requested resource was not found. Verify the URL and ID.",
    405: "Check the HTTP method for this endpoint.",
    409: "The request conflicts with the current state of the resource.",
    422: "Check the request body against the API schema.",
    500: "An internal error occurred. Check server logs.",
}

HTTP_ERROR_CODES: dict[int, str] = {
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
}


def status_for(exc: Exception) -> int:
    for error_type, code in STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def _field_errors(exc: FakturaError) -> list[dict[str, Any]] | None:
    if isinstance(exc, InvoiceValidationError):
        return exc.details["errors"]
    if isinstance(exc, ValidationError):
        return [{"field": exc.details["field"], "code": "invalid", "message": exc.details["message"]}]
    return None


def _respond(request: Request, status_code: int, **fields: Any) -> JSONResponse:
    code = fields["error_code"]
    body = ErrorResponse(
        hint=HINTS.get(code) or FALLBACK_HINTS.get(status_code),
        path=request.url.path,
        **fields,
    )
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"))


def build_error_response(request: Request, exc: Exception) -> JSONResponse:
    """Log ``exc`` and turn it into an ErrorResponse."""
    status_code = status_for(exc)
    if isinstance(exc, FakturaError):
        error_code, message = exc.code, exc.message
    else:
        error_code, message = "INTERNAL_ERROR", "An unexpected error occurred"

    request_id = getattr(request.state, "request_id", None)
    if status_code >= 500:
        logger.error(
            "request_error",
            request_id=request_id,
            path=request.url.path,
            error_type=type(exc).__name__,
            error=str(exc),
            traceback=traceback.format_exc(),
        )
    else:
        logger.warning(
            "request_rejected",
            request_id=request_id,
            path=request.url.path,
            error_code=error_code,
            status=status_code,
        )

    errors = _field_errors(exc) if isinstance(exc, FakturaError) else None
    return _respond(request, status_code, error_code=error_code, message=message, errors=errors)


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """Last line of defence for exceptions no handler claimed."""

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        try:
            return await call_next(request)
        except Exception as e:
            return build_error_response(request, e)


def setup_exception_handlers(app: FastAPI) -> None:
    """Register handlers for domain, request validation and HTTP errors."""

    @app.exception_handler(FakturaError)
    async def domain_exception_handler(request: Request, exc: FakturaError) -> JSONResponse:
        return build_error_response(request, exc)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request,
        exc: RequestValidationError,
    ) -> JSONResponse:
        # "body" and "query" prefixes say where, not which field
        errors = [
            {
                "field": ".".join(str(part) for part in error["loc"][1:]) or str(error["loc"][0]),
                "code": error["type"],
                "message": error["msg"],
            }
            for error in exc.errors()
        ]
        return _respond(
            request,
            422,
            error_code="VALIDATION_ERROR",
            message="Request validation failed",
            errors=errors,
        )

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
        return _respond(
            request,
            exc.status_code,
            error_code=HTTP_ERROR_CODES.get(exc.status_code, "HTTP_ERROR"),
            message=str(exc.detail) if exc.detail else "An error occurred",
        )
