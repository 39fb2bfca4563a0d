"""
Create Invoice Use Case.

Validates the submitted form, assigns the next invoice number and stores
the invoice with its computed totals.
"""

from dataclasses import dataclass, field
from datetime import date

from tenacity import AsyncRetrying, retry_if_exception_type, stop_after_attempt

from src.application.dto.requests import CreateInvoiceRequest
from src.application.dto.responses import InvoiceResponse
from src.application.services import get_invoice_defaults
from src.config import get_logger, get_settings
from src.core.entities.customer import Customer
from src.core.entities.invoice import Invoice
from src.core.exceptions import (
    CustomerNotFoundError,
    InvoiceValidationError,
    NumberingConflictError,
)
from src.core.interfaces.storage import ICompanyStore, ICustomerStore, IInvoiceStore
from src.core.services import (
    InvoiceDraft,
    assemble_invoice,
    malformed_invoice_numbers,
)

logger = get_logger(__name__)


def build_draft(request: CreateInvoiceRequest, customer: Customer | None) -> InvoiceDraft:
    """Turn an invoice form request into a core draft."""
    return InvoiceDraft(
        customer=customer,
        items=[item.to_entity() for item in request.items],
        issue_date=request.issue_date,
        due_date=request.due_date,
        invoice_number=request.invoice_number,
        currency=request.currency,
        invoice_type=request.invoice_type,
        notes=request.notes,
        payment_terms=request.payment_terms,
        reference=request.reference,
        language=request.language,
    )


async def load_customer(
    store: ICustomerStore, tenant_id: str, customer_id: str | None
) -> Customer | None:
    """
    Look up the selected customer.

    Returns None when no customer was selected; validation reports that.

    Raises:
        CustomerNotFoundError: If a customer ID was given but does not exist
            for the tenant.
    """
    if not customer_id:
        return None
    customer = await store.get_customer(tenant_id, customer_id)
    if customer is None:
        raise CustomerNotFoundError(customer_id)
    return customer


@dataclass
class CreateInvoiceResult:
    """Result of creating an invoice."""

    invoice: Invoice
    customer: Customer | None
    attempts: int = 1
    skipped_numbers: list[str] = field(default_factory=list)


class CreateInvoiceUseCase:
    """
    Use case for creating invoices.

    Flow:
    1. Load customer and company profile
    2. Read existing invoice numbers of the tenant
    3. Assemble (validate, number, compute totals)
    4. Store; on a duplicate number, re-read numbers and try again
    """

    def __init__(
        self,
        invoice_store: IInvoiceStore | None = None,
        customer_store: ICustomerStore | None = None,
        company_store: ICompanyStore | None = None,
        max_attempts: int | None = None,
        today: date | None = None,
    ):
        self._invoice_store = invoice_store
        self._customer_store = customer_store
        self._company_store = company_store
        self._max_attempts = max_attempts or get_settings().invoice.number_conflict_attempts
        self._today = today

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
        self, tenant_id: str, request: CreateInvoiceRequest
    ) -> CreateInvoiceResult:
        """
        Create an invoice.

        Args:
            tenant_id: Issuing tenant.
            request: Invoice form data.

        Returns:
            CreateInvoiceResult with the stored invoice.

        Raises:
            CustomerNotFoundError: If the selected customer does not exist.
            InvoiceValidationError: With every problem found in the form.
            NumberingConflictError: If an explicit number is taken, or a
                generated number is still taken after the configured attempts.
        """
        logger.info(
            "create_invoice_started",
            tenant_id=tenant_id,
            customer_id=request.customer_id,
            items=len(request.items),
        )

        invoice_store = await self._get_invoice_store()
        customer = await load_customer(
            await self._get_customer_store(), tenant_id, request.customer_id
        )
        company = await (await self._get_company_store()).get_company(tenant_id)

        draft = build_draft(request, customer)
        defaults = get_invoice_defaults(company)
        skipped: list[str] = []
        # Only generated numbers are worth another try
        explicit_number = bool(request.invoice_number and request.invoice_number.strip())
        attempts = 1 if explicit_number else self._max_attempts

        async for attempt in AsyncRetrying(
            stop=stop_after_attempt(attempts),
            retry=retry_if_exception_type(NumberingConflictError),
            reraise=True,
        ):
            with attempt:
                attempt_number = attempt.retry_state.attempt_number
                if attempt_number > 1:
                    logger.warning(
                        "invoice_number_conflict_retry",
                        tenant_id=tenant_id,
                        attempt=attempt_number,
                    )

                numbers = await invoice_store.list_invoice_numbers(tenant_id)
                skipped = malformed_invoice_numbers(numbers)
                for number in skipped:
                    logger.warning(
                        "invoice_number_malformed",
                        tenant_id=tenant_id,
                        invoice_number=number,
                    )

                result = assemble_invoice(
                    draft,
                    tenant_id=tenant_id,
                    existing_numbers=numbers,
                    defaults=defaults,
                    today=self._today,
                )
                if not result.ok:
                    logger.info(
                        "create_invoice_rejected",
                        tenant_id=tenant_id,
                        errors=[e.field for e in result.errors],
                    )
                    raise InvoiceValidationError(result.errors)

                invoice = await invoice_store.create_invoice(result.invoice)

        logger.info(
            "create_invoice_complete",
            invoice_id=invoice.id,
            invoice_number=invoice.invoice_number,
            gross=str(invoice.totals.gross),
        )

        return CreateInvoiceResult(
            invoice=invoice,
            customer=customer,
            attempts=attempt_number,
            skipped_numbers=skipped,
        )

    @staticmethod
    def to_response(result: CreateInvoiceResult) -> InvoiceResponse:
        """Convert result to API response."""
        return InvoiceResponse.from_entity(result.invoice, result.customer)
