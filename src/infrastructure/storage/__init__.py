"""Storage infrastructure implementations."""

from src.infrastructure.storage.sqlite import (
    SQLitePayrollStore,
    SQLitePurchaseInvoiceStore,
    SQLiteSalesInvoiceStore,
    close_pool,
    get_connection,
    get_pool,
    get_transaction,
)

__all__ = [
    # SQLite stores
    "SQLitePurchaseInvoiceStore",
    "SQLiteSalesInvoiceStore",
    "SQLitePayrollStore",
    # Connection pool
    "get_pool",
    "close_pool",
    "get_connection",
    "get_transaction",
]
