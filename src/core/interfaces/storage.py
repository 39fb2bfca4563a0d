"""
Abstract interfaces for storage providers.

Every operation is scoped to a tenant; a store never returns or changes
records belonging to another tenant.
"""

from abc import ABC, abstractmethod

from src.core.entities.company import Company
from src.core.entities.customer import Customer
from src.core.entities.invoice import Invoice, InvoiceStatus


class IInvoiceStore(ABC):
    """
    Abstract interface for invoice storage.

    Persists invoices verbatim, including their totals snapshot, and
    enforces invoice-number uniqueness per tenant.
    """

    @abstractmethod
    async def create_invoice(self, invoice: Invoice) -> Invoice:
        """
        Insert a new invoice with its items.

        Raises:
            NumberingConflictError: If the tenant already has the number.
        """
        pass

    @abstractmethod
    async def update_invoice(self, invoice: Invoice) -> Invoice:
        """Replace a stored invoice and its items."""
        pass

    @abstractmethod
    async def get_invoice(self, tenant_id: str, invoice_id: str) -> Invoice | None:
        """Get invoice by ID."""
        pass

    @abstractmethod
    async def delete_invoice(self, tenant_id: str, invoice_id: str) -> bool:
        """Delete invoice and its items."""
        pass

    @abstractmethod
    async def list_invoices(
        self,
        tenant_id: str,
        status: InvoiceStatus | None = None,
        limit: int = 100,
        offset: int = 0,
        search: str | None = None,
    ) -> list[Invoice]:
        """List invoices, newest first.

        ``search`` matches part of the invoice number or the customer name.
        """
        pass

    @abstractmethod
    async def count_invoices(
        self,
        tenant_id: str,
        status: InvoiceStatus | None = None,
        search: str | None = None,
    ) -> int:
        """Number of invoices matching the same filters as ``list_invoices``."""
        pass

    @abstractmethod
    async def list_invoice_numbers(self, tenant_id: str) -> list[str]:
        """All invoice numbers of the tenant, any year."""
        pass


class ICustomerStore(ABC):
    """Abstract interface for customer storage."""

    @abstractmethod
    async def create_customer(self, customer: Customer) -> Customer:
        """Insert a new customer."""
        pass

    @abstractmethod
    async def update_customer(self, customer: Customer) -> Customer:
        """Update an existing customer."""
        pass

    @abstractmethod
    async def get_customer(self, tenant_id: str, customer_id: str) -> Customer | None:
        """Get customer by ID."""
        pass

    @abstractmethod
    async def delete_customer(self, tenant_id: str, customer_id: str) -> bool:
        """Delete a customer."""
        pass

    @abstractmethod
    async def list_customers(
        self,
        tenant_id: str,
        limit: int = 100,
        offset: int = 0,
        search: str | None = None,
    ) -> list[Customer]:
        """List customers ordered by name.

        ``search`` matches part of the name or the contact email.
        """
        pass

    @abstractmethod
    async def get_customers(self, tenant_id: str, customer_ids: list[str]) -> list[Customer]:
        """Customers with the given IDs; unknown IDs are left out."""
        pass

    @abstractmethod
    async def count_customers(self, tenant_id: str, search: str | None = None) -> int:
        """Number of customers owned by the tenant."""
        pass


class ICompanyStore(ABC):
    """Abstract interface for the tenant company profile."""

    @abstractmethod
    async def get_company(self, tenant_id: str) -> Company | None:
        """Get the tenant's company profile."""
        pass

    @abstractmethod
    async def save_company(self, company: Company) -> Company:
        """Create or replace the tenant's company profile."""
        pass
