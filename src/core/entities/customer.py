"""Customer and shared address/contact entities."""

from datetime import datetime
from uuid import uuid4

from pydantic import BaseModel, Field


class Address(BaseModel):
    """Postal address."""

    street: str = ""
    postal_code: str = ""
    city: str = ""
    country: str = "Sverige"


class Contact(BaseModel):
    """Contact person."""

    name: str = ""
    email: str = ""
    phone: str = ""


class Customer(BaseModel):
    """An invoice recipient owned by one tenant."""

    id: str = Field(default_factory=lambda: uuid4().hex)
    tenant_id: str
    name: str
    org_number: str | None = None
    vat_number: str | None = None
    reference: str | None = None  # their reference, printed on invoices
    address: Address = Field(default_factory=Address)
    contact: Contact = Field(default_factory=Contact)
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)
