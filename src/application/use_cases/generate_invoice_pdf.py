"""
Generate Invoice PDF Use Case.

Renders a stored invoice, its customer and the tenant's company profile
into a PDF document.
"""

from dataclasses import dataclass

from src.application.services import get_pdf_renderer
from src.config import get_logger
from src.core.exceptions import InvoiceNotFoundError
from src.core.interfaces.storage import ICompanyStore, ICustomerStore, IInvoiceStore
from src.infrastructure.pdf import IInvoicePdfRenderer

logger = get_logger(__name__)


@dataclass
class InvoicePdfResult:
    """Result of invoice PDF generation."""

    pdf_bytes: bytes
    invoice_id: str
    invoice_number: str
    file_name: str

    @property
    def file_size(self) -> int:
        return len(self.pdf_bytes)


class GenerateInvoicePdfUseCase:
    """
    Use case for generating invoice PDFs.

    Flow:
    1. Load invoice, customer and company profile
    2. Render PDF via the invoice renderer
    3. Return PDF bytes and a download file name
    """

    def __init__(
        self,
        invoice_store: IInvoiceStore | None = None,
        customer_store: ICustomerStore | None = None,
        company_store: ICompanyStore | None = None,
        renderer: IInvoicePdfRenderer | None = None,
    ):
        self._invoice_store = invoice_store
        self._customer_store = customer_store
        self._company_store = company_store
        self._renderer = renderer or get_pdf_renderer()

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

    async def execute(self, tenant_id: str, invoice_id: str) -> InvoicePdfResult:
        """
        Generate an invoice PDF.

        Args:
            tenant_id: Owning tenant.
            invoice_id: The invoice ID.

        Returns:
            InvoicePdfResult with PDF bytes and metadata.

        Raises:
            InvoiceNotFoundError: If the invoice is not found.
        """
        logger.info("generate_invoice_pdf_started", invoice_id=invoice_id)

        invoice = await (await self._get_invoice_store()).get_invoice(tenant_id, invoice_id)
        if invoice is None:
            raise InvoiceNotFoundError(invoice_id)

        customer = await (await self._get_customer_store()).get_customer(
            tenant_id, invoice.customer_id
        )
        company = await (await self._get_company_store()).get_company(tenant_id)
        if company is None:
            logger.warning("generate_invoice_pdf_no_company", tenant_id=tenant_id)

        pdf_bytes = self._renderer.render(invoice, company=company, customer=customer)
        prefix = "faktura" if invoice.language == "sv" else "invoice"

        logger.info(
            "generate_invoice_pdf_complete",
            invoice_id=invoice_id,
            file_size=len(pdf_bytes),
        )

        return InvoicePdfResult(
            pdf_bytes=pdf_bytes,
            invoice_id=invoice.id,
            invoice_number=invoice.invoice_number,
            file_name=f"{prefix}_{invoice.invoice_number}.pdf",
        )
