"""Change Invoice Status Use Case."""

from dataclasses import dataclass

from src.application.dto.responses import InvoiceResponse
from src.config import get_logger
from src.core.entities.invoice import Invoice, InvoiceStatus
from src.core.exceptions import InvoiceNotFoundError
from src.core.interfaces.storage import IInvoiceStore
from src.core.services import transition_status

logger = get_logger(__name__)


@dataclass
class ChangeStatusResult:
    """Result of a status change."""

    invoice: Invoice
    previous_status: InvoiceStatus


class ChangeInvoiceStatusUseCase:
    """Move an invoice along its lifecycle (draft, sent, late, paid, cancelled)."""

    def __init__(self, invoice_store: IInvoiceStore | None = None):
        self._invoice_store = invoice_store

    async def _get_invoice_store(self) -> IInvoiceStore:
        if self._invoice_store is None:
            from src.infrastructure.storage.sqlite import get_invoice_store

            self._invoice_store = await get_invoice_store()
        return self._invoice_store

    async def execute(
        self, tenant_id: str, invoice_id: str, target: InvoiceStatus
    ) -> ChangeStatusResult:
        """
        Change the status of an invoice.

        Raises:
            InvoiceNotFoundError: If the invoice does not exist for the tenant.
            InvalidStatusTransitionError: If the move is not allowed.
        """
        store = await self._get_invoice_store()
        invoice = await store.get_invoice(tenant_id, invoice_id)
        if invoice is None:
            raise InvoiceNotFoundError(invoice_id)

        previous = invoice.status
        updated = await store.update_invoice(transition_status(invoice, target))

        logger.info(
            "invoice_status_changed",
            invoice_id=invoice_id,
            invoice_number=updated.invoice_number,
            previous=previous.value,
            status=updated.status.value,
        )
        return ChangeStatusResult(invoice=updated, previous_status=previous)

    @staticmethod
    def to_response(result: ChangeStatusResult) -> InvoiceResponse:
        return InvoiceResponse.from_entity(result.invoice)
