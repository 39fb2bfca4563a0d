"""
Invoice domain entities with Pydantic v2 validation.

Monetary fields are ``Decimal`` end to end. Totals are never rounded here;
rounding happens only when amounts are presented.
"""

from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Literal
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, computed_field

ZERO = Decimal("0")


def _new_id() -> str:
    return uuid4().hex


class InvoiceStatus(str, Enum):
    """Invoice lifecycle status."""

    DRAFT = "draft"
    SENT = "sent"
    PAID = "paid"
    LATE = "late"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        """Paid and cancelled invoices are frozen."""
        return self in (InvoiceStatus.PAID, InvoiceStatus.CANCELLED)


class InvoiceType(str, Enum):
    """Regular invoice or credit note."""

    INVOICE = "invoice"
    CREDIT = "credit"


class LineItem(BaseModel):
    """
    One billable entry on an invoice.

    Every amount field may be missing while a draft is being edited; the
    totals engine treats missing values as zero.
    """

    id: str = Field(default_factory=_new_id)
    article_number: str | None = None
    description: str | None = None
    quantity: Decimal | None = None
    unit: str | None = None
    unit_price: Decimal | None = None  # negative for discount/credit lines
    tax_rate_percent: Decimal | None = Field(default=None, ge=0, le=100)
    discount_percent: Decimal | None = Field(default=None, ge=0, le=100)
    account: str | None = None

    @property
    def is_complete(self) -> bool:
        """True when the line carries everything needed to be invoiced."""
        return (
            bool(self.description and self.description.strip())
            and bool(self.unit and self.unit.strip())
            and self.unit_price is not None
            and self.quantity is not None
            and self.quantity > 0
        )


class LineAmounts(BaseModel):
    """Computed amounts for a single line."""

    model_config = ConfigDict(frozen=True)

    item_id: str
    net: Decimal = ZERO
    tax: Decimal = ZERO

    @computed_field  # type: ignore[prop-decorator]
    @property
    def gross(self) -> Decimal:
        return self.net + self.tax


class InvoiceTotals(BaseModel):
    """Net, tax and gross for a set of line items.

    ``gross`` is derived from ``net`` and ``tax`` and cannot drift from them.
    """

    model_config = ConfigDict(frozen=True)

    net: Decimal = ZERO
    tax: Decimal = ZERO

    @computed_field  # type: ignore[prop-decorator]
    @property
    def gross(self) -> Decimal:
        return self.net + self.tax


class Invoice(BaseModel):
    """A persisted or persist-ready invoice."""

    id: str = Field(default_factory=_new_id)
    tenant_id: str
    invoice_number: str
    customer_id: str
    issue_date: date
    due_date: date
    currency: str = "SEK"
    items: list[LineItem] = Field(default_factory=list)
    status: InvoiceStatus = InvoiceStatus.DRAFT
    invoice_type: InvoiceType = InvoiceType.INVOICE
    totals: InvoiceTotals = Field(default_factory=InvoiceTotals)

    notes: str | None = None
    payment_terms: str = ""
    reference: str | None = None
    customer_reference: str | None = None
    language: Literal["sv", "en"] = "sv"

    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    @property
    def is_credit(self) -> bool:
        return self.invoice_type == InvoiceType.CREDIT

    @property
    def is_terminal(self) -> bool:
        return self.status.is_terminal
