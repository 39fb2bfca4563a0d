"""
Invoice record assembly.

Validates an invoice draft and turns it into a persist-ready Invoice.
Layer-pure: depends only on core entities, services and exceptions.
"""

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Literal

from pydantic import BaseModel, Field

from src.core.entities.customer import Customer
from src.core.entities.invoice import (
    Invoice,
    InvoiceStatus,
    InvoiceType,
    LineItem,
)
from src.core.exceptions import TerminalStateError
from src.core.services.numbering import next_invoice_number
from src.core.services.totals import compute_totals


class FieldError(BaseModel):
    """A single validation problem, addressed to a form field."""

    field: str
    code: str
    message: str


class InvoiceDraft(BaseModel):
    """Everything the invoice form submits."""

    customer: Customer | None = None
    items: list[LineItem] = Field(default_factory=list)
    issue_date: date | None = None
    due_date: date | None = None

    invoice_number: str | None = None
    currency: str | None = None
    invoice_type: InvoiceType = InvoiceType.INVOICE
    notes: str | None = None
    payment_terms: str | None = None
    reference: str | None = None
    language: Literal["sv", "en"] | None = None


@dataclass(frozen=True)
class InvoiceDefaults:
    """Fallbacks for fields the draft leaves empty."""

    currency: str = "SEK"
    tax_rate: Decimal = Decimal("25")
    payment_days: int = 30
    payment_terms: str = "30 dagar"
    language: Literal["sv", "en"] = "sv"


@dataclass
class AssemblyResult:
    """Either an assembled invoice or every validation error found."""

    invoice: Invoice | None = None
    errors: list[FieldError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.invoice is not None and not self.errors


def apply_default_tax_rate(items: Iterable[LineItem], rate: Decimal) -> list[LineItem]:
    """Fill in ``rate`` on lines that have no tax rate set."""
    return [
        item if item.tax_rate_percent is not None
        else item.model_copy(update={"tax_rate_percent": rate})
        for item in items
    ]


def _missing_line_fields(item: LineItem) -> list[str]:
    missing = []
    if not (item.description and item.description.strip()):
        missing.append("description")
    if item.quantity is None:
        missing.append("quantity")
    if item.unit_price is None:
        missing.append("unit_price")
    if not (item.unit and item.unit.strip()):
        missing.append("unit")
    return missing


def validate_draft(draft: InvoiceDraft, issue_date: date, due_date: date) -> list[FieldError]:
    """Collect every problem with the draft; never stops at the first."""
    errors: list[FieldError] = []

    if draft.customer is None:
        errors.append(
            FieldError(field="customer", code="required", message="A customer must be selected")
        )

    if not draft.items:
        errors.append(
            FieldError(field="items", code="empty", message="At least one line item is required")
        )

    for index, item in enumerate(draft.items):
        missing = _missing_line_fields(item)
        if missing:
            errors.append(
                FieldError(
                    field=f"items[{index}]",
                    code="incomplete",
                    message=f"Line {index + 1} is missing: {', '.join(missing)}",
                )
            )
        elif not item.is_complete:
            errors.append(
                FieldError(
                    field=f"items[{index}].quantity",
                    code="not_positive",
                    message=f"Line {index + 1} quantity must be greater than zero",
                )
            )

    if due_date < issue_date:
        errors.append(
            FieldError(
                field="due_date",
                code="before_issue_date",
                message="Due date cannot be earlier than the invoice date",
            )
        )

    return errors


def replace_items(
    invoice: Invoice,
    items: list[LineItem],
    now: datetime | None = None,
) -> Invoice:
    """
    Swap in new line items and recompute totals.

    Raises:
        TerminalStateError: If the invoice is paid or cancelled. Nothing is
            changed in that case.
    """
    if invoice.is_terminal:
        raise TerminalStateError(invoice.invoice_number, invoice.status.value)
    return invoice.model_copy(
        update={
            "items": list(items),
            "totals": compute_totals(items),
            "updated_at": now or datetime.utcnow(),
        }
    )


def assemble_invoice(
    draft: InvoiceDraft,
    tenant_id: str,
    existing_numbers: Iterable[str] = (),
    existing: Invoice | None = None,
    defaults: InvoiceDefaults | None = None,
    today: date | None = None,
) -> AssemblyResult:
    """
    Validate a draft and build a persist-ready invoice.

    Args:
        draft: Submitted form data.
        tenant_id: Issuing company; stamped on the invoice.
        existing_numbers: The tenant's invoice numbers, used only when a new
            number must be generated.
        existing: The stored invoice when editing. Its number and status are
            preserved; totals are always recomputed from ``draft.items``.
        defaults: Fallback currency, tax rate, payment terms and language.
        today: Reference date for default dates and the numbering year.

    Returns:
        AssemblyResult holding the invoice, or all validation errors.

    Raises:
        TerminalStateError: When editing a paid or cancelled invoice.
    """
    if existing is not None and existing.is_terminal:
        raise TerminalStateError(existing.invoice_number, existing.status.value)

    defaults = defaults or InvoiceDefaults()
    today = today or date.today()

    issue_date = draft.issue_date or (existing.issue_date if existing else today)
    due_date = draft.due_date or (
        existing.due_date if existing else issue_date + timedelta(days=defaults.payment_days)
    )

    errors = validate_draft(draft, issue_date, due_date)
    customer = draft.customer
    if errors or customer is None:
        return AssemblyResult(errors=errors)

    items = apply_default_tax_rate(draft.items, defaults.tax_rate)

    if existing is not None:
        invoice_number = existing.invoice_number
    elif draft.invoice_number and draft.invoice_number.strip():
        invoice_number = draft.invoice_number.strip()
    else:
        invoice_number = next_invoice_number(existing_numbers, today.year)

    now = datetime.utcnow()
    fields = {
        "tenant_id": tenant_id,
        "invoice_number": invoice_number,
        "customer_id": customer.id,
        "issue_date": issue_date,
        "due_date": due_date,
        "currency": draft.currency or (existing.currency if existing else defaults.currency),
        "items": items,
        "status": existing.status if existing else InvoiceStatus.DRAFT,
        "invoice_type": draft.invoice_type,
        "totals": compute_totals(items),
        "notes": draft.notes,
        "payment_terms": draft.payment_terms
        or (existing.payment_terms if existing else defaults.payment_terms),
        "reference": draft.reference,
        "customer_reference": customer.reference,
        "language": draft.language or (existing.language if existing else defaults.language),
        "created_at": existing.created_at if existing else now,
        "updated_at": now,
    }
    if existing is not None:
        fields["id"] = existing.id

    return AssemblyResult(invoice=Invoice(**fields))
