"""
Invoice management endpoints.
"""

import re
from urllib.parse import quote

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import Response

from src.api.dependencies import (
    get_change_status_use_case,
    get_create_invoice_use_case,
    get_cust_store,
    get_generate_invoice_pdf_use_case,
    get_inv_store,
    get_next_number_use_case,
    get_preview_totals_use_case,
    get_tenant_id,
    get_update_invoice_use_case,
)
from src.application.dto.requests import (
    ChangeStatusRequest,
    CreateInvoiceRequest,
    TotalsPreviewRequest,
    UpdateInvoiceRequest,
)
from src.application.dto.responses import (
    ErrorResponse,
    InvoiceListResponse,
    InvoiceResponse,
    NextNumberResponse,
    TotalsPreviewResponse,
)
from src.application.use_cases import (
    ChangeInvoiceStatusUseCase,
    CreateInvoiceUseCase,
    GenerateInvoicePdfUseCase,
    NextInvoiceNumberUseCase,
    PreviewTotalsUseCase,
    UpdateInvoiceUseCase,
)
from src.core.entities.invoice import InvoiceStatus
from src.core.exceptions import InvoiceNotFoundError, TerminalStateError
from src.core.interfaces import ICustomerStore, IInvoiceStore

router = APIRouter(prefix="/api/invoices", tags=["invoices"])


def content_disposition(disposition: str, file_name: str) -> str:
    """
    Build a Content-Disposition value that survives any file name.

    Headers are Latin-1 on the wire, so ``filename`` carries an ASCII
    fallback and ``filename*`` (RFC 5987) the exact UTF-8 name.
    """
    fallback = re.sub(r'[^\x20-\x7e]|["\\/]', "_", file_name)
    encoded = quote(file_name, safe="")
    return f"{disposition}; filename=\"{fallback}\"; filename*=UTF-8''{encoded}"


@router.post("/totals", response_model=TotalsPreviewResponse)
async def preview_totals(
    request: TotalsPreviewRequest,
    tenant_id: str = Depends(get_tenant_id),
    use_case: PreviewTotalsUseCase = Depends(get_preview_totals_use_case),
) -> TotalsPreviewResponse:
    """
    Compute live totals for unsaved line items.

    Incomplete lines count as zero; nothing is stored.
    """
    result = await use_case.execute(tenant_id, request)
    return use_case.to_response(result)


@router.get("/next-number", response_model=NextNumberResponse)
async def next_number(
    year: int | None = Query(default=None, ge=1900, le=9999),
    tenant_id: str = Depends(get_tenant_id),
    use_case: NextInvoiceNumberUseCase = Depends(get_next_number_use_case),
) -> NextNumberResponse:
    """Preview the number the next new invoice would receive."""
    result = await use_case.execute(tenant_id, year)
    return use_case.to_response(result)


@router.get("", response_model=InvoiceListResponse)
async def list_invoices(
    status_filter: InvoiceStatus | None = Query(default=None, alias="status"),
    q: str | None = Query(
        default=None, max_length=100, description="Part of the invoice number or customer name"
    ),
    limit: int = Query(default=50, ge=1, le=500),
    offset: int = Query(default=0, ge=0),
    tenant_id: str = Depends(get_tenant_id),
    store: IInvoiceStore = Depends(get_inv_store),
    customer_store: ICustomerStore = Depends(get_cust_store),
) -> InvoiceListResponse:
    """List invoices, newest first, optionally filtered by status and search text."""
    invoices = await store.list_invoices(
        tenant_id, status=status_filter, limit=limit, offset=offset, search=q
    )
    customers = {
        c.id: c
        for c in await customer_store.get_customers(
            tenant_id, [inv.customer_id for inv in invoices]
        )
    }
    return InvoiceListResponse(
        invoices=[
            InvoiceResponse.from_entity(inv, customers.get(inv.customer_id))
            for inv in invoices
        ],
        total=await store.count_invoices(tenant_id, status=status_filter, search=q),
    )


@router.post(
    "",
    response_model=InvoiceResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse, "description": "Invoice form has errors"},
        404: {"model": ErrorResponse, "description": "Customer not found"},
        409: {"model": ErrorResponse, "description": "Invoice number conflict"},
    },
)
async def create_invoice(
    request: CreateInvoiceRequest,
    tenant_id: str = Depends(get_tenant_id),
    use_case: CreateInvoiceUseCase = Depends(get_create_invoice_use_case),
) -> InvoiceResponse:
    """Create an invoice; the number is generated when not given."""
    result = await use_case.execute(tenant_id, request)
    return use_case.to_response(result)


@router.get(
    "/{invoice_id}",
    response_model=InvoiceResponse,
    responses={404: {"model": ErrorResponse, "description": "Invoice not found"}},
)
async def get_invoice(
    invoice_id: str,
    tenant_id: str = Depends(get_tenant_id),
    store: IInvoiceStore = Depends(get_inv_store),
    customer_store: ICustomerStore = Depends(get_cust_store),
) -> InvoiceResponse:
    """Get invoice by ID, with line amounts and totals."""
    invoice = await store.get_invoice(tenant_id, invoice_id)
    if invoice is None:
        raise InvoiceNotFoundError(invoice_id)

    customer = await customer_store.get_customer(tenant_id, invoice.customer_id)
    return InvoiceResponse.from_entity(invoice, customer)


@router.put(
    "/{invoice_id}",
    response_model=InvoiceResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Invoice form has errors"},
        404: {"model": ErrorResponse, "description": "Invoice or customer not found"},
        409: {"model": ErrorResponse, "description": "Invoice is paid or cancelled"},
    },
)
async def update_invoice(
    invoice_id: str,
    request: UpdateInvoiceRequest,
    tenant_id: str = Depends(get_tenant_id),
    use_case: UpdateInvoiceUseCase = Depends(get_update_invoice_use_case),
) -> InvoiceResponse:
    """Edit an invoice. Totals are recomputed; number and status are kept."""
    result = await use_case.execute(tenant_id, invoice_id, request)
    return use_case.to_response(result)


@router.delete(
    "/{invoice_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={
        404: {"model": ErrorResponse, "description": "Invoice not found"},
        409: {"model": ErrorResponse, "description": "Invoice is paid or cancelled"},
    },
)
async def delete_invoice(
    invoice_id: str,
    tenant_id: str = Depends(get_tenant_id),
    store: IInvoiceStore = Depends(get_inv_store),
) -> None:
    """Delete an invoice that is not yet paid or cancelled."""
    invoice = await store.get_invoice(tenant_id, invoice_id)
    if invoice is None:
        raise InvoiceNotFoundError(invoice_id)
    if invoice.is_terminal:
        raise TerminalStateError(invoice.invoice_number, invoice.status.value)

    await store.delete_invoice(tenant_id, invoice_id)


@router.post(
    "/{invoice_id}/status",
    response_model=InvoiceResponse,
    responses={
        404: {"model": ErrorResponse, "description": "Invoice not found"},
        409: {"model": ErrorResponse, "description": "Transition not allowed"},
    },
)
async def change_status(
    invoice_id: str,
    request: ChangeStatusRequest,
    tenant_id: str = Depends(get_tenant_id),
    use_case: ChangeInvoiceStatusUseCase = Depends(get_change_status_use_case),
) -> InvoiceResponse:
    """Move an invoice to another status."""
    result = await use_case.execute(tenant_id, invoice_id, request.status)
    return use_case.to_response(result)


@router.get(
    "/{invoice_id}/pdf",
    responses={404: {"model": ErrorResponse, "description": "Invoice not found"}},
)
async def download_pdf(
    invoice_id: str,
    inline: bool = False,
    tenant_id: str = Depends(get_tenant_id),
    use_case: GenerateInvoicePdfUseCase = Depends(get_generate_invoice_pdf_use_case),
) -> Response:
    """
    Render the invoice as PDF.

    Returns an attachment by default; ``inline=true`` lets a browser
    display it directly.
    """
    result = await use_case.execute(tenant_id, invoice_id)
    disposition = "inline" if inline else "attachment"

    return Response(
        content=result.pdf_bytes,
        media_type="application/pdf",
        headers={
            "Content-Disposition": content_disposition(disposition, result.file_name),
        },
    )
