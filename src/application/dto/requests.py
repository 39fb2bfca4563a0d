"""Request DTOs for API endpoints.

Pydantic v2 models for API request validation.
These are the ONLY contracts between API and use cases.
"""

from datetime import date
from decimal import Decimal
from typing import Literal

from pydantic import BaseModel, Field

from src.core.entities.invoice import InvoiceStatus, InvoiceType, LineItem


class LineItemRequest(BaseModel):
    """One line of the invoice form.

    Every field is optional so a half-filled row can still be previewed;
    completeness is checked when the invoice is saved.
    """

    id: str | None = Field(default=None, description="Existing line ID when editing")
    article_number: str | None = Field(default=None, description="Article number")
    description: str | None = Field(default=None, description="Line description")
    quantity: Decimal | None = Field(default=None, description="Quantity", examples=["8"])
    unit: str | None = Field(default=None, description="Unit of measure", examples=["tim", "st"])
    unit_price: Decimal | None = Field(
        default=None,
        description="Price per unit before tax; negative for credit lines",
        examples=["1500"],
    )
    tax_rate_percent: Decimal | None = Field(
        default=None,
        ge=0,
        le=100,
        description="VAT rate in percent (company default when omitted)",
        examples=["25", "12", "6", "0"],
    )
    discount_percent: Decimal | None = Field(
        default=None, ge=0, le=100, description="Line discount in percent"
    )
    account: str | None = Field(default=None, description="Bookkeeping account")

    def to_entity(self) -> LineItem:
        data = self.model_dump(exclude_none=True)
        return LineItem(**data)


class TotalsPreviewRequest(BaseModel):
    """Live totals calculation for the invoice form."""

    items: list[LineItemRequest] = Field(default_factory=list, description="Line items")
    currency: str | None = Field(default=None, description="Currency for formatted output")
    language: Literal["sv", "en"] | None = Field(
        default=None, description="Formatting language"
    )


class CreateInvoiceRequest(BaseModel):
    """Request to create an invoice.

    Omitted dates, currency, payment terms and language fall back to the
    configured invoice defaults. ``invoice_number`` is generated when empty.
    """

    customer_id: str | None = Field(default=None, description="Customer to invoice")
    items: list[LineItemRequest] = Field(default_factory=list, description="Line items")
    issue_date: date | None = Field(default=None, description="Invoice date (YYYY-MM-DD)")
    due_date: date | None = Field(default=None, description="Due date (YYYY-MM-DD)")
    invoice_number: str | None = Field(
        default=None,
        max_length=32,
        pattern=r"^[A-Za-z0-9 ._/-]*$",
        description="Explicit invoice number (generated when omitted)",
    )
    currency: str | None = Field(default=None, description="Currency code", examples=["SEK"])
    invoice_type: InvoiceType = Field(default=InvoiceType.INVOICE, description="invoice or credit")
    notes: str | None = Field(default=None, description="Free-text notes")
    payment_terms: str | None = Field(default=None, description="Payment terms text")
    reference: str | None = Field(default=None, description="Our reference")
    language: Literal["sv", "en"] | None = Field(default=None, description="Invoice language")


class UpdateInvoiceRequest(CreateInvoiceRequest):
    """Request to edit an invoice. The stored number is always kept."""


class ChangeStatusRequest(BaseModel):
    """Request to move an invoice to another status."""

    status: InvoiceStatus = Field(..., description="Target status", examples=["sent"])


class AddressRequest(BaseModel):
    """Postal address."""

    street: str = Field(default="", description="Street address")
    postal_code: str = Field(default="", description="Postal code")
    city: str = Field(default="", description="City")
    country: str = Field(default="Sverige", description="Country")


class ContactRequest(BaseModel):
    """Contact person."""

    name: str = Field(default="", description="Contact name")
    email: str = Field(default="", description="Email address")
    phone: str = Field(default="", description="Phone number")


class CustomerRequest(BaseModel):
    """Request to create or update a customer."""

    name: str = Field(..., min_length=1, max_length=200, description="Customer name")
    org_number: str | None = Field(default=None, description="Organisation number")
    vat_number: str | None = Field(default=None, description="VAT registration number")
    reference: str | None = Field(default=None, description="Customer's reference person")
    address: AddressRequest = Field(default_factory=AddressRequest)
    contact: ContactRequest = Field(default_factory=ContactRequest)


class CompanyRequest(BaseModel):
    """Request to save the tenant's company profile."""

    name: str = Field(..., min_length=1, max_length=200, description="Company name")
    org_number: str = Field(default="", description="Organisation number")
    vat_number: str | None = Field(default=None, description="VAT registration number")
    address: AddressRequest = Field(default_factory=AddressRequest)
    contact: ContactRequest = Field(default_factory=ContactRequest)

    bankgiro: str | None = Field(default=None, description="Bankgiro number")
    plusgiro: str | None = Field(default=None, description="Plusgiro number")
    iban: str | None = Field(default=None, description="IBAN")
    swish: str | None = Field(default=None, description="Swish number")
    account_number: str | None = Field(default=None, description="Bank account number")
    clearing_number: str | None = Field(default=None, description="Clearing number")
    bank_name: str | None = Field(default=None, description="Bank name")
    swift: str | None = Field(default=None, description="BIC/SWIFT code")

    tax_rate: Decimal = Field(
        default=Decimal("25"), ge=0, le=100, description="Default VAT rate in percent"
    )
    logo_path: str | None = Field(default=None, description="Path to logo image")
