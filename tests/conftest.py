"""Pytest configuration and fixtures."""

from datetime import date
from decimal import Decimal

import pytest

from src.core.entities import (
    Address,
    Company,
    Contact,
    Customer,
    Invoice,
    InvoiceStatus,
    LineItem,
)
from src.core.services import compute_totals

TENANT_ID = "tenant-a"


@pytest.fixture
def tenant_id() -> str:
    return TENANT_ID


@pytest.fixture
def sample_customer() -> Customer:
    """Customer with a reference printed on invoices."""
    return Customer(
        id="cust-1",
        tenant_id=TENANT_ID,
        name="Byggmästarna AB",
        org_number="556677-8899",
        reference="Anna Svensson",
        address=Address(street="Storgatan 1", postal_code="111 22", city="Stockholm"),
        contact=Contact(name="Anna Svensson", email="anna@byggmastarna.se"),
    )


@pytest.fixture
def sample_company() -> Company:
    """Company profile with payment details."""
    return Company(
        tenant_id=TENANT_ID,
        name="Konsultbolaget i Norr AB",
        org_number="559900-1122",
        vat_number="SE559900112201",
        address=Address(street="Hamngatan 4", postal_code="972 31", city="Luleå"),
        contact=Contact(name="Erik Lind", email="erik@konsultbolaget.se", phone="0920-123 45"),
        bankgiro="123-4567",
        swish="1231234567",
        iban="SE45 5000 0000 0583 9825 7466",
        swift="ESSESESS",
        tax_rate=Decimal("25"),
    )


@pytest.fixture
def consulting_item() -> LineItem:
    """8 hours at 1500 SEK, 25% VAT."""
    return LineItem(
        id="item-1",
        description="Konsulttjänster",
        quantity=Decimal("8"),
        unit="tim",
        unit_price=Decimal("1500"),
        tax_rate_percent=Decimal("25"),
    )


@pytest.fixture
def sample_invoice(sample_customer: Customer, consulting_item: LineItem) -> Invoice:
    """Draft invoice worth 12 000 net."""
    items = [consulting_item]
    return Invoice(
        id="inv-1",
        tenant_id=TENANT_ID,
        invoice_number="20240001",
        customer_id=sample_customer.id,
        issue_date=date(2024, 3, 1),
        due_date=date(2024, 3, 31),
        items=items,
        totals=compute_totals(items),
        status=InvoiceStatus.DRAFT,
        payment_terms="30 dagar",
        customer_reference=sample_customer.reference,
    )
