"""Update Invoice Use Case - edits an existing, non-terminal invoice."""

from dataclasses import dataclass

from src.application.dto.requests import UpdateInvoiceRequest
from src.application.dto.responses import InvoiceResponse
from src.application.services import get_invoice_defaults
from src.application.use_cases.create_invoice import build_draft, load_customer
from src.config import get_logger
from src.core.entities.customer import Customer
from src.core.entities.invoice import Invoice
from src.core.exceptions import InvoiceNotFoundError, InvoiceValidationError
from src.core.interfaces.storage import ICompanyStore, ICustomerStore, IInvoiceStore
from src.core.services import assemble_invoice

logger = get_logger(__name__)


@dataclass
class UpdateInvoiceResult:
    """Result of updating an invoice."""

    invoice: Invoice
    customer: Customer | None


class UpdateInvoiceUseCase:
    """Re-validate an edited invoice, recompute its totals and store it.

    The invoice number and status are kept. Paid and cancelled invoices
    are rejected with ``TerminalStateError`` before anything is validated.
    """

    def __init__(
        self,
        invoice_store: IInvoiceStore | None = None,
        customer_store: ICustomerStore | None = None,
        company_store: ICompanyStore | None = None,
    ):
        self._invoice_store = invoice_store
        self._customer_store = customer_store
        self._company_store = company_store

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

    async def _get_company_store(self) -> ICompanyStore:
        if self._company_store is None:
            from src.infrastructure.storage.sqlite import get_company_store

            self._company_store = await get_company_store()
        return self._company_store

    async def execute(
        self, tenant_id: str, invoice_id: str, request: UpdateInvoiceRequest
    ) -> UpdateInvoiceResult:
        """Execute update invoice use case."""
        logger.info("update_invoice_started", tenant_id=tenant_id, invoice_id=invoice_id)

        invoice_store = await self._get_invoice_store()
        existing = await invoice_store.get_invoice(tenant_id, invoice_id)
        if existing is None:
            raise InvoiceNotFoundError(invoice_id)

        customer = await load_customer(
            await self._get_customer_store(), tenant_id, request.customer_id
        )
        company = await (await self._get_company_store()).get_company(tenant_id)

        result = assemble_invoice(
            build_draft(request, customer),
            tenant_id=tenant_id,
            existing=existing,
            defaults=get_invoice_defaults(company),
        )
        if not result.ok:
            raise InvoiceValidationError(result.errors)

        invoice = await invoice_store.update_invoice(result.invoice)

        logger.info(
            "update_invoice_complete",
            invoice_id=invoice.id,
            invoice_number=invoice.invoice_number,
            gross=str(invoice.totals.gross),
        )
        return UpdateInvoiceResult(invoice=invoice, customer=customer)

    @staticmethod
    def to_response(result: UpdateInvoiceResult) -> InvoiceResponse:
        """Convert result to API response."""
        return InvoiceResponse.from_entity(result.invoice, result.customer)
