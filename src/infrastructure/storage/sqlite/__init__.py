"""SQLite storage implementations."""

from src.config import get_settings
from src.infrastructure.storage.sqlite.base_store import SQLiteNumberedStore
from src.infrastructure.storage.sqlite.connection import (
    ConnectionPool,
    close_pool,
    get_connection,
    get_pool,
    get_transaction,
)
from src.infrastructure.storage.sqlite.payroll_store import SQLitePayrollStore
from src.infrastructure.storage.sqlite.purchase_invoice_store import SQLitePurchaseInvoiceStore
from src.infrastructure.storage.sqlite.sales_invoice_store import SQLiteSalesInvoiceStore
from src.infrastructure.storage.sqlite.sequence_store import (
    SQLiteCountSequence,
    SQLiteCounterSequence,
    create_sequence_source,
)

# Aliases for readability at call sites
get_connection_pool = get_pool
close_connection_pool = close_pool

# Singleton instances
_purchase_invoice_store: SQLitePurchaseInvoiceStore | None = None
_sales_invoice_store: SQLiteSalesInvoiceStore | None = None
_payroll_store: SQLitePayrollStore | None = None


async def get_purchase_invoice_store() -> SQLitePurchaseInvoiceStore:
    """Get singleton purchase invoice store instance."""
    global _purchase_invoice_store
    if _purchase_invoice_store is None:
        settings = get_settings()
        _purchase_invoice_store = SQLitePurchaseInvoiceStore(
            sequence_source=create_sequence_source(settings.numbering.strategy),
        )
    return _purchase_invoice_store


async def get_sales_invoice_store() -> SQLiteSalesInvoiceStore:
    """Get singleton sales invoice store instance."""
    global _sales_invoice_store
    if _sales_invoice_store is None:
        settings = get_settings()
        _sales_invoice_store = SQLiteSalesInvoiceStore(
            sequence_source=create_sequence_source(settings.numbering.strategy),
            apply_line_discount=settings.sales.apply_line_discount,
        )
    return _sales_invoice_store


async def get_payroll_store() -> SQLitePayrollStore:
    """Get singleton payroll store instance."""
    global _payroll_store
    if _payroll_store is None:
        settings = get_settings()
        _payroll_store = SQLitePayrollStore(
            sequence_source=create_sequence_source(settings.numbering.strategy),
        )
    return _payroll_store


def reset_stores() -> None:
    """Drop cached store instances (for testing)."""
    global _purchase_invoice_store, _sales_invoice_store, _payroll_store
    _purchase_invoice_store = None
    _sales_invoice_store = None
    _payroll_store = None


__all__ = [
    # Connection
    "ConnectionPool",
    "get_pool",
    "close_pool",
    "get_connection",
    "get_transaction",
    "get_connection_pool",
    "close_connection_pool",
    # Sequences
    "SQLiteCounterSequence",
    "SQLiteCountSequence",
    "create_sequence_source",
    # Store classes
    "SQLiteNumberedStore",
    "SQLitePurchaseInvoiceStore",
    "SQLiteSalesInvoiceStore",
    "SQLitePayrollStore",
    # Factory functions
    "get_purchase_invoice_store",
    "get_sales_invoice_store",
    "get_payroll_store",
    "reset_stores",
]
