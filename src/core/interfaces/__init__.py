"""Core interfaces (ports) for dependency injection."""

from src.core.interfaces.storage import (
    ICompanyStore,
    ICustomerStore,
    IInvoiceStore,
)

__all__ = [
    "IInvoiceStore",
    "ICustomerStore",
    "ICompanyStore",
]
