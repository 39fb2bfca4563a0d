"""
Preview Totals Use Case.

Computes live totals for the invoice form without storing anything.
Lines without a tax rate get the tenant's default rate, the same way they
would when the invoice is saved.
"""

from dataclasses import dataclass

from src.application.dto.requests import TotalsPreviewRequest
from src.application.dto.responses import (
    LineItemResponse,
    TotalsPreviewResponse,
    TotalsResponse,
)
from src.application.services import get_invoice_defaults
from src.core.entities.invoice import InvoiceTotals, LineItem
from src.core.interfaces.storage import ICompanyStore
from src.core.services import apply_default_tax_rate, compute_totals


@dataclass
class PreviewTotalsResult:
    """Items as they would be saved, with their totals."""

    items: list[LineItem]
    totals: InvoiceTotals
    currency: str
    language: str


class PreviewTotalsUseCase:
    """Compute invoice totals for unsaved line items."""

    def __init__(self, company_store: ICompanyStore | None = None):
        self._company_store = company_store

    async def _get_company_store(self) -> ICompanyStore:
        if self._company_store is None:
            from src.infrastructure.storage.sqlite import get_company_store

            self._company_store = await get_company_store()
        return self._company_store

    async def execute(
        self, tenant_id: str, request: TotalsPreviewRequest
    ) -> PreviewTotalsResult:
        company = await (await self._get_company_store()).get_company(tenant_id)
        defaults = get_invoice_defaults(company)

        items = apply_default_tax_rate(
            [item.to_entity() for item in request.items], defaults.tax_rate
        )
        return PreviewTotalsResult(
            items=items,
            totals=compute_totals(items),
            currency=request.currency or defaults.currency,
            language=request.language or defaults.language,
        )

    @staticmethod
    def to_response(result: PreviewTotalsResult) -> TotalsPreviewResponse:
        return TotalsPreviewResponse(
            items=[LineItemResponse.from_entity(item) for item in result.items],
            totals=TotalsResponse.from_totals(
                result.totals, result.currency, result.language
            ),
        )
