"""Abstract interfaces for finalized document persistence."""

from abc import ABC, abstractmethod
from datetime import date
from typing import Any, Generic, TypeVar

from src.core.entities.common import DocumentType
from src.core.entities.payroll import Payroll, PayrollItem, PayrollItemStatus
from src.core.entities.purchase_invoice import PurchaseInvoice
from src.core.entities.sales_invoice import SalesInvoice

DocT = TypeVar("DocT", PurchaseInvoice, SalesInvoice, Payroll)


class ISequenceSource(ABC):
    """Supplies the numeric suffix for generated document numbers."""

    @abstractmethod
    async def next_sequence(self, conn: Any, doc_type: DocumentType) -> int:
        """
        Return the sequence for the next document of ``doc_type``.

        ``conn`` is the storage handle of the write that will persist the
        document, so the sequence is taken inside the same transaction.
        """
        pass


class IDocumentStore(ABC, Generic[DocT]):
    """
    Persistence for a numbered, finalized document type.

    Implementations assign the document number (first save only) and run
    the totals calculator immediately before every write.
    """

    @abstractmethod
    async def create(self, document: DocT) -> DocT:
        """Number, finalize and insert a new document with its items."""
        pass

    @abstractmethod
    async def update(self, document: DocT) -> DocT:
        """Re-finalize and rewrite an existing document and its items."""
        pass

    @abstractmethod
    async def get(self, document_id: int) -> DocT | None:
        """Get a document by storage ID, items included."""
        pass

    @abstractmethod
    async def get_by_number(self, number: str) -> DocT | None:
        """Get a document by its generated number."""
        pass

    @abstractmethod
    async def list_documents(self, limit: int = 100, offset: int = 0) -> list[DocT]:
        """List documents, newest first."""
        pass

    @abstractmethod
    async def update_status(
        self,
        document_id: int,
        status: str,
        expected_status: str | None = None,
        **fields: Any,
    ) -> bool:
        """
        Set the status column (plus any extra header columns).

        False if missing, or if ``expected_status`` is given and no longer current.
        """
        pass

    @abstractmethod
    async def delete(self, document_id: int) -> bool:
        """Delete a document and its items. False if missing."""
        pass

    @abstractmethod
    async def count(self) -> int:
        """Number of stored documents."""
        pass


class IPurchaseInvoiceStore(IDocumentStore[PurchaseInvoice]):
    """Interface for purchase invoice persistence."""


class ISalesInvoiceStore(IDocumentStore[SalesInvoice]):
    """Interface for sales invoice persistence."""


class IPayrollStore(IDocumentStore[Payroll]):
    """Interface for payroll persistence."""

    @abstractmethod
    async def list_documents(
        self,
        limit: int = 100,
        offset: int = 0,
        *,
        employee_id: int | None = None,
        from_date: date | None = None,
        to_date: date | None = None,
    ) -> list[Payroll]:
        """Payroll runs, optionally for one employee or overlapping a date range."""
        pass

    @abstractmethod
    async def get_item(self, item_id: int) -> PayrollItem | None:
        """Get a single payroll item with its components."""
        pass

    @abstractmethod
    async def update_item_status(
        self,
        item_id: int,
        status: PayrollItemStatus,
        payment_reference: str | None = None,
        paid_on: date | None = None,
        expected_status: PayrollItemStatus | None = None,
    ) -> bool:
        """Set a payroll item's status and payment details. False if missing."""
        pass
