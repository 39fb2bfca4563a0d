"""Issuing company (tenant) profile."""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field

from src.core.entities.customer import Address, Contact


class Company(BaseModel):
    """
    The company issuing invoices.

    One profile per tenant. Supplies the default line tax rate and the
    header and payment details printed on PDFs.
    """

    tenant_id: str
    name: str
    org_number: str = ""
    vat_number: str | None = None
    address: Address = Field(default_factory=Address)
    contact: Contact = Field(default_factory=Contact)

    # Payment details
    bankgiro: str | None = None
    plusgiro: str | None = None
    iban: str | None = None
    swish: str | None = None
    account_number: str | None = None
    clearing_number: str | None = None
    bank_name: str | None = None
    swift: str | None = None  # BIC

    tax_rate: Decimal = Field(default=Decimal("25"), ge=0, le=100)
    logo_path: str | None = None

    updated_at: datetime = Field(default_factory=datetime.utcnow)
