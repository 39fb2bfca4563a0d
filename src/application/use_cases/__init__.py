"""Application use cases."""

from src.application.use_cases.change_invoice_status import (
    ChangeInvoiceStatusUseCase,
    ChangeStatusResult,
)
from src.application.use_cases.create_invoice import (
    CreateInvoiceResult,
    CreateInvoiceUseCase,
)
from src.application.use_cases.generate_invoice_pdf import (
    GenerateInvoicePdfUseCase,
    InvoicePdfResult,
)
from src.application.use_cases.get_dashboard_summary import (
    DashboardSummary,
    GetDashboardSummaryUseCase,
)
from src.application.use_cases.next_invoice_number import (
    NextInvoiceNumberUseCase,
    NextNumberResult,
)
from src.application.use_cases.preview_totals import (
    PreviewTotalsResult,
    PreviewTotalsUseCase,
)
from src.application.use_cases.update_invoice import (
    UpdateInvoiceResult,
    UpdateInvoiceUseCase,
)

__all__ = [
    "CreateInvoiceUseCase",
    "CreateInvoiceResult",
    "UpdateInvoiceUseCase",
    "UpdateInvoiceResult",
    "ChangeInvoiceStatusUseCase",
    "ChangeStatusResult",
    "PreviewTotalsUseCase",
    "PreviewTotalsResult",
    "NextInvoiceNumberUseCase",
    "NextNumberResult",
    "GenerateInvoicePdfUseCase",
    "InvoicePdfResult",
    "GetDashboardSummaryUseCase",
    "DashboardSummary",
]
