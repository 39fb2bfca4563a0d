"""Storage infrastructure implementations."""

from src.infrastructure.storage.sqlite import (
    SQLiteCompanyStore,
    SQLiteCustomerStore,
    SQLiteInvoiceStore,
    close_pool,
    get_connection,
    get_pool,
    get_transaction,
)

__all__ = [
    # SQLite stores
    "SQLiteInvoiceStore",
    "SQLiteCustomerStore",
    "SQLiteCompanyStore",
    # Connection pool
    "get_pool",
    "close_pool",
    "get_connection",
    "get_transaction",
]
