"""Data Transfer Objects for API layer.

Request DTOs: Validate and parse incoming API requests.
Response DTOs: Structure and serialize API responses.

These are the ONLY contracts between API handlers and use cases.
"""

from src.application.dto.requests import (
    AddressRequest,
    ChangeStatusRequest,
    CompanyRequest,
    ContactRequest,
    CreateInvoiceRequest,
    CustomerRequest,
    LineItemRequest,
    TotalsPreviewRequest,
    UpdateInvoiceRequest,
)
from src.application.dto.responses import (
    CompanyResponse,
    CustomerListResponse,
    CustomerResponse,
    DashboardResponse,
    DatabaseHealthResponse,
    ErrorResponse,
    HealthResponse,
    InvoiceListResponse,
    InvoiceResponse,
    LineItemResponse,
    NextNumberResponse,
    TotalsPreviewResponse,
    TotalsResponse,
)

__all__ = [
    # Requests
    "LineItemRequest",
    "TotalsPreviewRequest",
    "CreateInvoiceRequest",
    "UpdateInvoiceRequest",
    "ChangeStatusRequest",
    "AddressRequest",
    "ContactRequest",
    "CustomerRequest",
    "CompanyRequest",
    # Responses
    "TotalsResponse",
    "TotalsPreviewResponse",
    "LineItemResponse",
    "InvoiceResponse",
    "InvoiceListResponse",
    "NextNumberResponse",
    "CustomerResponse",
    "CustomerListResponse",
    "CompanyResponse",
    "DashboardResponse",
    "DatabaseHealthResponse",
    "HealthResponse",
    "ErrorResponse",
]
