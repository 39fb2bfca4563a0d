"""Response DTOs for API endpoints.

Pydantic v2 models for API response serialization.
These are the ONLY contracts between use cases and API layer.
"""

from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, Field

from src.core.entities.company import Company
from src.core.entities.customer import Customer
from src.core.entities.invoice import Invoice, InvoiceTotals, LineItem
from src.core.services.money import format_amount, presented_amounts
from src.core.services.totals import compute_line_amounts


class TotalsResponse(BaseModel):
    """Invoice totals rounded to cents, with display strings."""

    net: Decimal = Field(..., description="Sum of line nets")
    tax: Decimal = Field(..., description="Sum of line taxes")
    gross: Decimal = Field(..., description="Rounded net plus rounded tax")
    net_formatted: str
    tax_formatted: str
    gross_formatted: str

    @classmethod
    def from_totals(
        cls, totals: InvoiceTotals, currency: str | None, language: str
    ) -> "TotalsResponse":
        net, tax, gross = presented_amounts(totals.net, totals.tax)
        return cls(
            net=net,
            tax=tax,
            gross=gross,
            net_formatted=format_amount(net, currency, language),
            tax_formatted=format_amount(tax, currency, language),
            gross_formatted=format_amount(gross, currency, language),
        )


class LineItemResponse(BaseModel):
    """Line item with its computed amounts."""

    id: str
    article_number: str | None = None
    description: str | None = None
    quantity: Decimal | None = None
    unit: str | None = None
    unit_price: Decimal | None = None
    tax_rate_percent: Decimal | None = None
    discount_percent: Decimal | None = None
    account: str | None = None
    net: Decimal = Field(..., description="Line net, rounded to cents")
    tax: Decimal = Field(..., description="Line tax, rounded to cents")
    gross: Decimal = Field(..., description="Line gross, rounded to cents")

    @classmethod
    def from_entity(cls, item: LineItem) -> "LineItemResponse":
        amounts = compute_line_amounts(item)
        net, tax, gross = presented_amounts(amounts.net, amounts.tax)
        return cls(**item.model_dump(), net=net, tax=tax, gross=gross)


class TotalsPreviewResponse(BaseModel):
    """Live totals for the invoice form."""

    items: list[LineItemResponse] = Field(default_factory=list)
    totals: TotalsResponse


class InvoiceResponse(BaseModel):
    """Invoice response DTO."""

    id: str = Field(..., description="Invoice ID")
    invoice_number: str = Field(..., description="Invoice number")
    customer_id: str = Field(..., description="Customer ID")
    customer_name: str | None = Field(default=None, description="Customer name")
    issue_date: date
    due_date: date
    currency: str
    status: str
    invoice_type: str
    items: list[LineItemResponse] = Field(default_factory=list)
    totals: TotalsResponse
    notes: str | None = None
    payment_terms: str = ""
    reference: str | None = None
    customer_reference: str | None = None
    language: str
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_entity(
        cls, invoice: Invoice, customer: Customer | None = None
    ) -> "InvoiceResponse":
        return cls(
            id=invoice.id,
            invoice_number=invoice.invoice_number,
            customer_id=invoice.customer_id,
            customer_name=customer.name if customer else None,
            issue_date=invoice.issue_date,
            due_date=invoice.due_date,
            currency=invoice.currency,
            status=invoice.status.value,
            invoice_type=invoice.invoice_type.value,
            items=[LineItemResponse.from_entity(item) for item in invoice.items],
            totals=TotalsResponse.from_totals(
                invoice.totals, invoice.currency, invoice.language
            ),
            notes=invoice.notes,
            payment_terms=invoice.payment_terms,
            reference=invoice.reference,
            customer_reference=invoice.customer_reference,
            language=invoice.language,
            created_at=invoice.created_at,
            updated_at=invoice.updated_at,
        )


class InvoiceListResponse(BaseModel):
    """List of invoices."""

    invoices: list[InvoiceResponse]
    total: int


class NextNumberResponse(BaseModel):
    """Invoice number the next created invoice would receive."""

    invoice_number: str
    year: int
    skipped: list[str] = Field(
        default_factory=list, description="Stored numbers not in the canonical format"
    )


class AddressResponse(BaseModel):
    street: str = ""
    postal_code: str = ""
    city: str = ""
    country: str = ""


class ContactResponse(BaseModel):
    name: str = ""
    email: str = ""
    phone: str = ""


class CustomerResponse(BaseModel):
    """Customer response DTO."""

    id: str
    name: str
    org_number: str | None = None
    vat_number: str | None = None
    reference: str | None = None
    address: AddressResponse
    contact: ContactResponse
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_entity(cls, customer: Customer) -> "CustomerResponse":
        data = customer.model_dump(exclude={"tenant_id"})
        return cls(**data)


class CustomerListResponse(BaseModel):
    """List of customers."""

    customers: list[CustomerResponse]
    total: int


class CompanyResponse(BaseModel):
    """Company profile response DTO."""

    name: str
    org_number: str = ""
    vat_number: str | None = None
    address: AddressResponse
    contact: ContactResponse
    bankgiro: str | None = None
    plusgiro: str | None = None
    iban: str | None = None
    swish: str | None = None
    account_number: str | None = None
    clearing_number: str | None = None
    bank_name: str | None = None
    swift: str | None = None
    tax_rate: Decimal
    logo_path: str | None = None
    updated_at: datetime

    @classmethod
    def from_entity(cls, company: Company) -> "CompanyResponse":
        data = company.model_dump(exclude={"tenant_id"})
        return cls(**data)


class DashboardResponse(BaseModel):
    """Invoice counts and paid revenue for the dashboard."""

    total_invoices: int = Field(..., ge=0)
    draft_invoices: int = Field(default=0, ge=0)
    pending_invoices: int = Field(..., ge=0, description="Sent or late")
    paid_invoices: int = Field(..., ge=0)
    cancelled_invoices: int = Field(default=0, ge=0)
    paid_percentage: int = Field(..., ge=0, le=100)
    total_revenue: Decimal = Field(..., description="Gross sum of paid invoices")
    total_revenue_formatted: str
    customer_count: int = Field(..., ge=0)
    recent_invoices: list[InvoiceResponse] = Field(default_factory=list)


class DatabaseHealthResponse(BaseModel):
    """Database health details."""

    status: str
    db_path: str
    applied_migrations: list[str] = Field(default_factory=list)
    pending_migrations: list[str] = Field(default_factory=list)
    error: str | None = None


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str = "1.0.0"
    uptime_seconds: float
    database: DatabaseHealthResponse | None = None


class ErrorResponse(BaseModel):
    """Standardized error response DTO.

    Every error response includes:
    - error_code: machine-readable code (e.g. INVOICE_NOT_FOUND)
    - message: human-readable description
    - hint: suggested recovery action
    - path: request path that triggered the error
    """

    error_code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error description")
    hint: str | None = Field(default=None, description="Suggested recovery action")
    detail: str | None = Field(default=None, description="Additional details")
    errors: list[dict] | None = Field(
        default=None, description="Field-level validation errors"
    )
    path: str | None = Field(default=None, description="Request path")
    timestamp: datetime = Field(default_factory=datetime.now)
