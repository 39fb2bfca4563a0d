"""Unit tests for GetDashboardSummaryUseCase."""

from decimal import Decimal
from unittest.mock import AsyncMock

import pytest

from src.application.use_cases.get_dashboard_summary import (
    PAGE_SIZE,
    GetDashboardSummaryUseCase,
    paid_percentage,
)
from src.core.entities.invoice import InvoiceStatus, InvoiceTotals


@pytest.fixture
def invoices(sample_invoice):
    """Seven invoices: 2 paid, 1 sent, 1 late, 2 draft, 1 cancelled."""
    statuses = [
        (InvoiceStatus.PAID, "15000"),
        (InvoiceStatus.PAID, "1250.505"),
        (InvoiceStatus.SENT, "5000"),
        (InvoiceStatus.LATE, "700"),
        (InvoiceStatus.DRAFT, "100"),
        (InvoiceStatus.DRAFT, "100"),
        (InvoiceStatus.CANCELLED, "9999"),
    ]
    return [
        sample_invoice.model_copy(
            update={
                "id": f"inv-{n}",
                "invoice_number": f"2024{n:04d}",
                "status": status,
                "totals": InvoiceTotals(net=Decimal(gross), tax=Decimal("0")),
            }
        )
        for n, (status, gross) in enumerate(statuses, start=1)
    ]


@pytest.fixture
def mock_invoice_store(invoices):
    store = AsyncMock()
    store.list_invoices = AsyncMock(return_value=invoices)
    return store


@pytest.fixture
def mock_customer_store():
    store = AsyncMock()
    store.count_customers = AsyncMock(return_value=3)
    return store


@pytest.fixture
def use_case(mock_invoice_store, mock_customer_store):
    return GetDashboardSummaryUseCase(
        invoice_store=mock_invoice_store,
        customer_store=mock_customer_store,
    )


class TestPaidPercentage:
    @pytest.mark.parametrize(
        "paid,total,expected",
        [(0, 0, 0), (1, 3, 33), (2, 3, 67), (1, 8, 13), (4, 4, 100), (0, 5, 0)],
    )
    def test_rounding(self, paid, total, expected):
        assert paid_percentage(paid, total) == expected


class TestGetDashboardSummaryUseCase:
    """Tests for GetDashboardSummaryUseCase."""

    async def test_counts_per_status(self, use_case):
        summary = await use_case.execute("tenant-a")

        assert summary.total_invoices == 7
        assert summary.pending_invoices == 2
        assert summary.status_counts[InvoiceStatus.PAID] == 2
        assert summary.customer_count == 3

    async def test_revenue_only_from_paid(self, use_case):
        summary = await use_case.execute("tenant-a")

        assert summary.total_revenue == Decimal("16250.51")

    async def test_response(self, use_case):
        response = use_case.to_response(await use_case.execute("tenant-a"))

        assert response.total_invoices == 7
        assert response.draft_invoices == 2
        assert response.pending_invoices == 2
        assert response.paid_invoices == 2
        assert response.cancelled_invoices == 1
        assert response.paid_percentage == 29
        assert response.total_revenue == Decimal("16250.51")
        assert response.total_revenue_formatted == "16 250,51 SEK"
        assert len(response.recent_invoices) == 5

    async def test_empty_tenant(self, use_case, mock_invoice_store, mock_customer_store):
        mock_invoice_store.list_invoices.return_value = []
        mock_customer_store.count_customers.return_value = 0

        response = use_case.to_response(await use_case.execute("tenant-a"))

        assert response.total_invoices == 0
        assert response.paid_percentage == 0
        assert response.total_revenue == Decimal("0.00")

    async def test_pages_through_all_invoices(
        self, use_case, mock_invoice_store, sample_invoice
    ):
        paid = sample_invoice.model_copy(update={"status": InvoiceStatus.PAID})
        mock_invoice_store.list_invoices.side_effect = [
            [paid] * PAGE_SIZE,
            [paid] * 3,
        ]

        summary = await use_case.execute("tenant-a")

        assert summary.total_invoices == PAGE_SIZE + 3
        assert mock_invoice_store.list_invoices.await_count == 2
        second_call = mock_invoice_store.list_invoices.await_args_list[1]
        assert second_call.kwargs["offset"] == PAGE_SIZE

    async def test_revenue_sums_presented_gross(
        self, use_case, mock_invoice_store, sample_invoice
    ):
        # Each shows 5.00 + 1.25 = 6.25 although the exact gross is 6.24375
        paid = sample_invoice.model_copy(
            update={
                "status": InvoiceStatus.PAID,
                "totals": InvoiceTotals(net=Decimal("4.995"), tax=Decimal("1.24875")),
            }
        )
        mock_invoice_store.list_invoices.return_value = [paid, paid]

        response = use_case.to_response(await use_case.execute("tenant-a"))

        assert response.total_revenue == Decimal("12.50")
        assert response.total_revenue_formatted == "12,50 SEK"
