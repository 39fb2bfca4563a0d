"""Fixtures for API tests: real use cases wired to mocked stores."""

from collections.abc import AsyncGenerator
from datetime import date
from unittest.mock import AsyncMock, MagicMock

import pytest
from httpx import ASGITransport, AsyncClient

from src.api.dependencies import (
    get_change_status_use_case,
    get_comp_store,
    get_create_invoice_use_case,
    get_cust_store,
    get_dashboard_use_case,
    get_generate_invoice_pdf_use_case,
    get_inv_store,
    get_next_number_use_case,
    get_preview_totals_use_case,
    get_update_invoice_use_case,
)
from src.api.main import app
from src.application.use_cases import (
    ChangeInvoiceStatusUseCase,
    CreateInvoiceUseCase,
    GenerateInvoicePdfUseCase,
    GetDashboardSummaryUseCase,
    NextInvoiceNumberUseCase,
    PreviewTotalsUseCase,
    UpdateInvoiceUseCase,
)

TENANT_HEADERS = {"X-Tenant-ID": "tenant-a"}


@pytest.fixture
def headers() -> dict[str, str]:
    return dict(TENANT_HEADERS)


@pytest.fixture
def mock_invoice_store(sample_invoice):
    store = AsyncMock()
    store.get_invoice = AsyncMock(return_value=sample_invoice)
    store.list_invoices = AsyncMock(return_value=[sample_invoice])
    store.count_invoices = AsyncMock(return_value=1)
    store.list_invoice_numbers = AsyncMock(return_value=["20240001"])
    store.create_invoice = AsyncMock(side_effect=lambda invoice: invoice)
    store.update_invoice = AsyncMock(side_effect=lambda invoice: invoice)
    store.delete_invoice = AsyncMock(return_value=True)
    return store


@pytest.fixture
def mock_customer_store(sample_customer):
    store = AsyncMock()
    store.get_customer = AsyncMock(return_value=sample_customer)
    store.list_customers = AsyncMock(return_value=[sample_customer])
    store.get_customers = AsyncMock(return_value=[sample_customer])
    store.count_customers = AsyncMock(return_value=1)
    store.create_customer = AsyncMock(side_effect=lambda customer: customer)
    store.update_customer = AsyncMock(side_effect=lambda customer: customer)
    store.delete_customer = AsyncMock(return_value=True)
    return store


@pytest.fixture
def mock_company_store(sample_company):
    store = AsyncMock()
    store.get_company = AsyncMock(return_value=sample_company)
    store.save_company = AsyncMock(side_effect=lambda company: company)
    return store


@pytest.fixture
def mock_renderer():
    renderer = MagicMock()
    renderer.render.return_value = b"%PDF-1.4 test"
    return renderer


@pytest.fixture
async def client(
    mock_invoice_store, mock_customer_store, mock_company_store, mock_renderer
) -> AsyncGenerator[AsyncClient, None]:
    """Async client with all stores replaced by mocks."""
    stores = {
        "invoice_store": mock_invoice_store,
        "customer_store": mock_customer_store,
        "company_store": mock_company_store,
    }
    overrides = {
        get_inv_store: lambda: mock_invoice_store,
        get_cust_store: lambda: mock_customer_store,
        get_comp_store: lambda: mock_company_store,
        get_create_invoice_use_case: lambda: CreateInvoiceUseCase(
            **stores, max_attempts=2, today=date(2024, 5, 10)
        ),
        get_update_invoice_use_case: lambda: UpdateInvoiceUseCase(**stores),
        get_change_status_use_case: lambda: ChangeInvoiceStatusUseCase(mock_invoice_store),
        get_preview_totals_use_case: lambda: PreviewTotalsUseCase(mock_company_store),
        get_next_number_use_case: lambda: NextInvoiceNumberUseCase(mock_invoice_store),
        get_generate_invoice_pdf_use_case: lambda: GenerateInvoicePdfUseCase(
            **stores, renderer=mock_renderer
        ),
        get_dashboard_use_case: lambda: GetDashboardSummaryUseCase(
            mock_invoice_store, mock_customer_store
        ),
    }
    app.dependency_overrides.update(overrides)

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    for dependency in overrides:
        app.dependency_overrides.pop(dependency, None)
