"""Core domain entities."""

from src.core.entities.company import Company
from src.core.entities.customer import Address, Contact, Customer
from src.core.entities.invoice import (
    Invoice,
    InvoiceStatus,
    InvoiceTotals,
    InvoiceType,
    LineAmounts,
    LineItem,
)

__all__ = [
    # Invoice entities
    "LineItem",
    "LineAmounts",
    "InvoiceTotals",
    "Invoice",
    "InvoiceStatus",
    "InvoiceType",
    # Parties
    "Customer",
    "Company",
    "Address",
    "Contact",
]
