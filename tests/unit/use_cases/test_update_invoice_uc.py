"""Unit tests for UpdateInvoiceUseCase."""

from decimal import Decimal
from unittest.mock import AsyncMock

import pytest

from src.application.dto.requests import LineItemRequest, UpdateInvoiceRequest
from src.application.use_cases.update_invoice import UpdateInvoiceUseCase
from src.core.entities.invoice import InvoiceStatus
from src.core.exceptions import (
    InvoiceNotFoundError,
    InvoiceValidationError,
    TerminalStateError,
)


@pytest.fixture
def mock_invoice_store(sample_invoice):
    store = AsyncMock()
    store.get_invoice = AsyncMock(return_value=sample_invoice)
    store.update_invoice = AsyncMock(side_effect=lambda invoice: invoice)
    return store


@pytest.fixture
def mock_customer_store(sample_customer):
    store = AsyncMock()
    store.get_customer = AsyncMock(return_value=sample_customer)
    return store


@pytest.fixture
def mock_company_store():
    store = AsyncMock()
    store.get_company = AsyncMock(return_value=None)
    return store


@pytest.fixture
def use_case(mock_invoice_store, mock_customer_store, mock_company_store):
    return UpdateInvoiceUseCase(
        invoice_store=mock_invoice_store,
        customer_store=mock_customer_store,
        company_store=mock_company_store,
    )


@pytest.fixture
def edit_request() -> UpdateInvoiceRequest:
    return UpdateInvoiceRequest(
        customer_id="cust-1",
        items=[
            LineItemRequest(
                id="item-1",
                description="Konsulttjänster",
                quantity=Decimal("10"),
                unit="tim",
                unit_price=Decimal("1500"),
                tax_rate_percent=Decimal("25"),
            )
        ],
        notes="Justerat antal timmar",
    )


class TestUpdateInvoiceUseCase:
    """Tests for UpdateInvoiceUseCase."""

    async def test_recomputes_totals_and_keeps_number(
        self, use_case, edit_request, mock_invoice_store
    ):
        result = await use_case.execute("tenant-a", "inv-1", edit_request)

        invoice = result.invoice
        assert invoice.id == "inv-1"
        assert invoice.invoice_number == "20240001"
        assert invoice.notes == "Justerat antal timmar"
        assert invoice.totals.net == Decimal("15000")
        assert invoice.totals.gross == Decimal("18750")
        mock_invoice_store.update_invoice.assert_awaited_once()

    async def test_not_found(self, use_case, edit_request, mock_invoice_store):
        mock_invoice_store.get_invoice.return_value = None

        with pytest.raises(InvoiceNotFoundError):
            await use_case.execute("tenant-a", "missing", edit_request)

    @pytest.mark.parametrize("status", [InvoiceStatus.PAID, InvoiceStatus.CANCELLED])
    async def test_terminal_invoice_rejected(
        self, use_case, edit_request, mock_invoice_store, sample_invoice, status
    ):
        sample_invoice.status = status

        with pytest.raises(TerminalStateError):
            await use_case.execute("tenant-a", "inv-1", edit_request)

        mock_invoice_store.update_invoice.assert_not_awaited()

    async def test_sent_invoice_can_be_edited(
        self, use_case, edit_request, sample_invoice
    ):
        sample_invoice.status = InvoiceStatus.SENT

        result = await use_case.execute("tenant-a", "inv-1", edit_request)

        assert result.invoice.status == InvoiceStatus.SENT

    async def test_empty_items_rejected(self, use_case, mock_invoice_store):
        request = UpdateInvoiceRequest(customer_id="cust-1", items=[])

        with pytest.raises(InvoiceValidationError) as exc_info:
            await use_case.execute("tenant-a", "inv-1", request)

        assert [e.code for e in exc_info.value.errors] == ["empty"]
        mock_invoice_store.update_invoice.assert_not_awaited()
