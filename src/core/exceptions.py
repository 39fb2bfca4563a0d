"""
Domain exceptions for the Faktura application.

Provides specific exception types for different error scenarios.
"""

from typing import Any


class FakturaError(Exception):
    """Base exception for all Faktura errors."""

    def __init__(
        self,
        message: str,
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> dict:
        """Convert to dictionary for API responses."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


# Storage Exceptions
class StorageError(FakturaError):
    """Base exception for storage operations."""

    pass


class InvoiceNotFoundError(StorageError):
    """Invoice not found in storage."""

    def __init__(self, invoice_id: str):
        super().__init__(
            f"Invoice not found: {invoice_id}",
            code="INVOICE_NOT_FOUND",
            details={"invoice_id": invoice_id},
        )


class CustomerNotFoundError(StorageError):
    """Customer not found in storage."""

    def __init__(self, customer_id: str):
        super().__init__(
            f"Customer not found: {customer_id}",
            code="CUSTOMER_NOT_FOUND",
            details={"customer_id": customer_id},
        )


class CompanyNotFoundError(StorageError):
    """No company profile stored for the tenant."""

    def __init__(self, tenant_id: str):
        super().__init__(
            f"Company profile not found for tenant: {tenant_id}",
            code="COMPANY_NOT_FOUND",
            details={"tenant_id": tenant_id},
        )


class CustomerInUseError(StorageError):
    """Customer still referenced by invoices."""

    def __init__(self, customer_id: str):
        super().__init__(
            f"Customer {customer_id} has invoices and cannot be deleted",
            code="CUSTOMER_IN_USE",
            details={"customer_id": customer_id},
        )


class NumberingConflictError(StorageError):
    """Invoice number already taken within the tenant."""

    def __init__(self, invoice_number: str, tenant_id: str):
        super().__init__(
            f"Invoice number already in use: {invoice_number}",
            code="INVOICE_NUMBER_CONFLICT",
            details={"invoice_number": invoice_number, "tenant_id": tenant_id},
        )


class DatabaseError(StorageError):
    """Database operation failed."""

    def __init__(self, operation: str, error: str):
        super().__init__(
            f"Database error during {operation}: {error}",
            code="DATABASE_ERROR",
            details={"operation": operation, "error": error},
        )


# Invoice lifecycle Exceptions
class InvoiceStateError(FakturaError):
    """Base exception for invoice status violations."""

    pass


class TerminalStateError(InvoiceStateError):
    """Items of a paid or cancelled invoice cannot change."""

    def __init__(self, invoice_number: str, status: str):
        super().__init__(
            f"Invoice {invoice_number} is {status} and can no longer be modified",
            code="TERMINAL_STATE",
            details={"invoice_number": invoice_number, "status": status},
        )


class InvalidStatusTransitionError(InvoiceStateError):
    """Requested status change is not allowed."""

    def __init__(self, invoice_number: str, current: str, target: str):
        super().__init__(
            f"Invoice {invoice_number} cannot move from {current} to {target}",
            code="INVALID_STATUS_TRANSITION",
            details={
                "invoice_number": invoice_number,
                "current": current,
                "target": target,
            },
        )


# Validation Exceptions
class ValidationError(FakturaError):
    """Input validation failed."""

    def __init__(self, field: str, message: str, value: Any = None):
        super().__init__(
            f"Validation error for '{field}': {message}",
            code="VALIDATION_ERROR",
            details={
                "field": field,
                "message": message,
                "value": str(value)[:100] if value else None,
            },
        )


class InvoiceValidationError(FakturaError):
    """One or more invoice draft fields are invalid.

    Carries every problem found so the form can highlight all of them.
    """

    def __init__(self, errors: list[Any]):
        self.errors = list(errors)
        super().__init__(
            f"Invoice has {len(self.errors)} validation error(s)",
            code="INVOICE_VALIDATION_FAILED",
            details={
                "errors": [
                    e.model_dump() if hasattr(e, "model_dump") else e
                    for e in self.errors
                ]
            },
        )


# Auth Exceptions
class MissingTenantError(FakturaError):
    """Request carried no tenant identity."""

    def __init__(self, header: str):
        super().__init__(
            f"Missing tenant header: {header}",
            code="MISSING_TENANT",
            details={"header": header},
        )


class ConfigurationError(FakturaError):
    """Configuration error."""

    pass
