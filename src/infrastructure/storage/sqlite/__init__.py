"""SQLite storage implementations."""

from src.infrastructure.storage.sqlite.company_store import SQLiteCompanyStore
from src.infrastructure.storage.sqlite.connection import (
    ConnectionPool,
    close_pool,
    get_connection,
    get_pool,
    get_transaction,
)
from src.infrastructure.storage.sqlite.customer_store import SQLiteCustomerStore
from src.infrastructure.storage.sqlite.invoice_store import SQLiteInvoiceStore

# Aliases used by the app lifespan
get_connection_pool = get_pool
close_connection_pool = close_pool

# Singleton instances
_invoice_store: SQLiteInvoiceStore | None = None
_customer_store: SQLiteCustomerStore | None = None
_company_store: SQLiteCompanyStore | None = None


async def get_invoice_store() -> SQLiteInvoiceStore:
    """Get singleton invoice store instance."""
    global _invoice_store
    if _invoice_store is None:
        _invoice_store = SQLiteInvoiceStore()
    return _invoice_store


async def get_customer_store() -> SQLiteCustomerStore:
    """Get singleton customer store instance."""
    global _customer_store
    if _customer_store is None:
        _customer_store = SQLiteCustomerStore()
    return _customer_store


async def get_company_store() -> SQLiteCompanyStore:
    """Get singleton company store instance."""
    global _company_store
    if _company_store is None:
        _company_store = SQLiteCompanyStore()
    return _company_store


__all__ = [
    # Connection
    "ConnectionPool",
    "get_pool",
    "close_pool",
    "get_connection",
    "get_transaction",
    "get_connection_pool",
    "close_connection_pool",
    # Store classes
    "SQLiteInvoiceStore",
    "SQLiteCustomerStore",
    "SQLiteCompanyStore",
    # Factory functions
    "get_invoice_store",
    "get_customer_store",
    "get_company_store",
]
