"""
Dependency injection container for FastAPI.

Provides stores, use cases and the request tenant to route handlers.
"""

from functools import lru_cache

from fastapi import Request

from src.application.use_cases import (
    ChangeInvoiceStatusUseCase,
    CreateInvoiceUseCase,
    GenerateInvoicePdfUseCase,
    GetDashboardSummaryUseCase,
    NextInvoiceNumberUseCase,
    PreviewTotalsUseCase,
    UpdateInvoiceUseCase,
)
from src.config import Settings, get_settings
from src.core.exceptions import MissingTenantError
from src.core.interfaces import ICompanyStore, ICustomerStore, IInvoiceStore
from src.infrastructure.storage.sqlite import (
    get_company_store,
    get_customer_store,
    get_invoice_store,
)


@lru_cache
def get_app_settings() -> Settings:
    """Get cached application settings."""
    return get_settings()


# Tenant dependency
def get_tenant_id(request: Request) -> str:
    """
    Read the tenant identity from the configured request header.

    Raises:
        MissingTenantError: If the header is absent or blank.
    """
    header = get_app_settings().api.tenant_header
    tenant_id = (request.headers.get(header) or "").strip()
    if not tenant_id:
        raise MissingTenantError(header)
    return tenant_id


# Store dependencies
async def get_inv_store() -> IInvoiceStore:
    """Get invoice store."""
    return await get_invoice_store()


async def get_cust_store() -> ICustomerStore:
    """Get customer store."""
    return await get_customer_store()


async def get_comp_store() -> ICompanyStore:
    """Get company store."""
    return await get_company_store()


# Invoice use case dependencies
def get_create_invoice_use_case() -> CreateInvoiceUseCase:
    """Get create invoice use case."""
    return CreateInvoiceUseCase()


def get_update_invoice_use_case() -> UpdateInvoiceUseCase:
    """Get update invoice use case."""
    return UpdateInvoiceUseCase()


def get_change_status_use_case() -> ChangeInvoiceStatusUseCase:
    """Get change invoice status use case."""
    return ChangeInvoiceStatusUseCase()


def get_preview_totals_use_case() -> PreviewTotalsUseCase:
    """Get preview totals use case."""
    return PreviewTotalsUseCase()


def get_next_number_use_case() -> NextInvoiceNumberUseCase:
    """Get next invoice number use case."""
    return NextInvoiceNumberUseCase()


def get_generate_invoice_pdf_use_case() -> GenerateInvoicePdfUseCase:
    """Get generate invoice PDF use case."""
    return GenerateInvoicePdfUseCase()


# Dashboard use case dependency
def get_dashboard_use_case() -> GetDashboardSummaryUseCase:
    """Get dashboard summary use case."""
    return GetDashboardSummaryUseCase()
