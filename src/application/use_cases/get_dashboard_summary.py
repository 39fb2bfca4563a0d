"""Dashboard Summary Use Case - invoice counts and revenue from paid invoices."""

from collections import Counter
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal

from src.application.dto.responses import DashboardResponse, InvoiceResponse
from src.application.services import get_invoice_defaults
from src.config import get_logger
from src.core.entities.invoice import Invoice, InvoiceStatus
from src.core.interfaces.storage import ICustomerStore, IInvoiceStore
from src.core.services import format_amount, presented_amounts, quantize_amount

logger = get_logger(__name__)

PAGE_SIZE = 500
RECENT_COUNT = 5


def paid_percentage(paid: int, total: int) -> int:
    """Share of paid invoices in whole percent, half rounded up."""
    if total <= 0:
        return 0
    share = Decimal(paid) * 100 / Decimal(total)
    return int(share.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


@dataclass
class DashboardSummary:
    """Aggregated invoice figures for one tenant."""

    status_counts: Counter = field(default_factory=Counter)
    total_revenue: Decimal = Decimal("0")
    customer_count: int = 0
    recent: list[Invoice] = field(default_factory=list)
    currency: str = "SEK"

    @property
    def total_invoices(self) -> int:
        return sum(self.status_counts.values())

    @property
    def pending_invoices(self) -> int:
        return self.status_counts[InvoiceStatus.SENT] + self.status_counts[InvoiceStatus.LATE]


class GetDashboardSummaryUseCase:
    """Summarize a tenant's invoices for the dashboard."""

    def __init__(
        self,
        invoice_store: IInvoiceStore | None = None,
        customer_store: ICustomerStore | None = None,
    ):
        self._invoice_store = invoice_store
        self._customer_store = customer_store

    async def _get_invoice_store(self) -> IInvoiceStore:
        if self._invoice_store is None:
            from src.infrastructure.storage.sqlite import get_invoice_store

            self._invoice_store = await get_invoice_store()
        return self._invoice_store

    async def _get_customer_store(self) -> ICustomerStore:
        if self._customer_store is None:
            from src.infrastructure.storage.sqlite import get_customer_store

            self._customer_store = await get_customer_store()
        return self._customer_store

    async def execute(self, tenant_id: str) -> DashboardSummary:
        """
        Count invoices per status and sum the gross of paid invoices.

        Revenue adds up the gross each paid invoice shows, so the dashboard
        figure matches the sum of the printed invoices.
        """
        store = await self._get_invoice_store()
        summary = DashboardSummary(currency=get_invoice_defaults().currency)

        offset = 0
        while True:
            page = await store.list_invoices(tenant_id, limit=PAGE_SIZE, offset=offset)
            if offset == 0:
                summary.recent = page[:RECENT_COUNT]
            for invoice in page:
                summary.status_counts[invoice.status] += 1
                if invoice.status == InvoiceStatus.PAID:
                    _, _, gross = presented_amounts(invoice.totals.net, invoice.totals.tax)
                    summary.total_revenue += gross
            if len(page) < PAGE_SIZE:
                break
            offset += PAGE_SIZE

        summary.customer_count = await (await self._get_customer_store()).count_customers(
            tenant_id
        )

        logger.debug(
            "dashboard_summary_computed",
            tenant_id=tenant_id,
            invoices=summary.total_invoices,
            customers=summary.customer_count,
        )
        return summary

    @staticmethod
    def to_response(summary: DashboardSummary) -> DashboardResponse:
        counts = summary.status_counts
        return DashboardResponse(
            total_invoices=summary.total_invoices,
            draft_invoices=counts[InvoiceStatus.DRAFT],
            pending_invoices=summary.pending_invoices,
            paid_invoices=counts[InvoiceStatus.PAID],
            cancelled_invoices=counts[InvoiceStatus.CANCELLED],
            paid_percentage=paid_percentage(counts[InvoiceStatus.PAID], summary.total_invoices),
            total_revenue=quantize_amount(summary.total_revenue),
            total_revenue_formatted=format_amount(summary.total_revenue, summary.currency),
            customer_count=summary.customer_count,
            recent_invoices=[InvoiceResponse.from_entity(inv) for inv in summary.recent],
        )
