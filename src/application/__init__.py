"""
Application layer - Use cases, DTOs, and service factories.

This layer orchestrates business logic by:
1. Defining request/response DTOs for API contracts
2. Implementing use cases that coordinate core services and stores
3. Providing factory functions for dependency injection

Use cases are the only entry point for API handlers that change invoices.
"""

from src.application.services import (
    get_invoice_defaults,
    get_pdf_renderer,
    reset_services,
)
from src.application.use_cases import (
    ChangeInvoiceStatusUseCase,
    CreateInvoiceUseCase,
    GenerateInvoicePdfUseCase,
    GetDashboardSummaryUseCase,
    NextInvoiceNumberUseCase,
    PreviewTotalsUseCase,
    UpdateInvoiceUseCase,
)

__all__ = [
    # Use Cases
    "CreateInvoiceUseCase",
    "UpdateInvoiceUseCase",
    "ChangeInvoiceStatusUseCase",
    "PreviewTotalsUseCase",
    "NextInvoiceNumberUseCase",
    "GenerateInvoicePdfUseCase",
    "GetDashboardSummaryUseCase",
    # Service factories
    "get_invoice_defaults",
    "get_pdf_renderer",
    "reset_services",
]
