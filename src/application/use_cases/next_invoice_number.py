"""Next Invoice Number Use Case - previews the number a new invoice would get."""

from dataclasses import dataclass, field
from datetime import date

from src.application.dto.responses import NextNumberResponse
from src.config import get_logger
from src.core.interfaces.storage import IInvoiceStore
from src.core.services import malformed_invoice_numbers, next_invoice_number

logger = get_logger(__name__)


@dataclass
class NextNumberResult:
    invoice_number: str
    year: int
    skipped: list[str] = field(default_factory=list)


class NextInvoiceNumberUseCase:
    """
    Derive the next invoice number for a tenant.

    The number is only a preview; it is not reserved until an invoice is
    stored with it.
    """

    def __init__(self, invoice_store: IInvoiceStore | None = None):
        self._invoice_store = invoice_store

    async def _get_invoice_store(self) -> IInvoiceStore:
        if self._invoice_store is None:
            from src.infrastructure.storage.sqlite import get_invoice_store

            self._invoice_store = await get_invoice_store()
        return self._invoice_store

    async def execute(self, tenant_id: str, year: int | None = None) -> NextNumberResult:
        store = await self._get_invoice_store()
        numbers = await store.list_invoice_numbers(tenant_id)
        year = year or date.today().year

        skipped = malformed_invoice_numbers(numbers)
        if skipped:
            logger.warning(
                "invoice_number_malformed",
                tenant_id=tenant_id,
                count=len(skipped),
                examples=skipped[:5],
            )

        return NextNumberResult(
            invoice_number=next_invoice_number(numbers, year),
            year=year,
            skipped=skipped,
        )

    @staticmethod
    def to_response(result: NextNumberResult) -> NextNumberResponse:
        return NextNumberResponse(
            invoice_number=result.invoice_number,
            year=result.year,
            skipped=result.skipped,
        )
