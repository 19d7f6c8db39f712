"""Core interfaces (ports) for dependency injection."""

from src.core.interfaces.document_store import (
    IDocumentStore,
    IPayrollStore,
    IPurchaseInvoiceStore,
    ISalesInvoiceStore,
    ISequenceSource,
)

__all__ = [
    "ISequenceSource",
    "IDocumentStore",
    "IPurchaseInvoiceStore",
    "ISalesInvoiceStore",
    "IPayrollStore",
]
