"""
Change Document Status Use Case.

Status transitions are checked here, never in the entities or stores.
Approving a payroll records the approver; paying a payroll item records
its payment reference and date.
"""

from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Any

from src.application.dto.requests import ChangePayrollItemStatusRequest, ChangeStatusRequest
from src.config import get_logger
from src.core.entities.common import DocumentType
from src.core.entities.payroll import PayrollItemStatus, PayrollStatus
from src.core.entities.purchase_invoice import PurchaseInvoiceStatus
from src.core.entities.sales_invoice import SalesInvoiceStatus
from src.core.exceptions import (
    DocumentNotFoundError,
    InvalidStatusTransitionError,
    ValidationError,
)
from src.core.interfaces.document_store import (
    IDocumentStore,
    IPayrollStore,
    IPurchaseInvoiceStore,
    ISalesInvoiceStore,
)

logger = get_logger(__name__)

STATUS_TYPES: dict[DocumentType, type[Enum]] = {
    DocumentType.PURCHASE_INVOICE: PurchaseInvoiceStatus,
    DocumentType.SALES_INVOICE: SalesInvoiceStatus,
    DocumentType.PAYROLL: PayrollStatus,
}


@dataclass
class StatusChangeResult:
    """Result of a status change."""

    doc_type: DocumentType
    document_id: int
    previous_status: str
    status: str


def _parse_status(status_type: type[Enum], value: str) -> Any:
    try:
        return status_type(value)
    except ValueError as e:
        allowed = ", ".join(s.value for s in status_type)
        raise ValidationError("status", f"Unknown status, expected one of: {allowed}", value) from e


class ChangeDocumentStatusUseCase:
    """Move a purchase invoice, sales invoice, payroll or payroll item to a new status."""

    def __init__(
        self,
        purchase_store: IPurchaseInvoiceStore | None = None,
        sales_store: ISalesInvoiceStore | None = None,
        payroll_store: IPayrollStore | None = None,
    ):
        self._purchase_store = purchase_store
        self._sales_store = sales_store
        self._payroll_store = payroll_store

    async def _get_purchase_store(self) -> IPurchaseInvoiceStore:
        if self._purchase_store is None:
            from src.infrastructure.storage.sqlite import get_purchase_invoice_store

            self._purchase_store = await get_purchase_invoice_store()
        return self._purchase_store

    async def _get_sales_store(self) -> ISalesInvoiceStore:
        if self._sales_store is None:
            from src.infrastructure.storage.sqlite import get_sales_invoice_store

            self._sales_store = await get_sales_invoice_store()
        return self._sales_store

    async def _get_payroll_store(self) -> IPayrollStore:
        if self._payroll_store is None:
            from src.infrastructure.storage.sqlite import get_payroll_store

            self._payroll_store = await get_payroll_store()
        return self._payroll_store

    async def _get_store(self, doc_type: DocumentType) -> IDocumentStore:
        if doc_type is DocumentType.PURCHASE_INVOICE:
            return await self._get_purchase_store()
        if doc_type is DocumentType.SALES_INVOICE:
            return await self._get_sales_store()
        return await self._get_payroll_store()

    async def execute(
        self, doc_type: DocumentType, request: ChangeStatusRequest
    ) -> StatusChangeResult:
        """Validate and apply a document status change."""
        logger.info(
            "change_status_started",
            doc_type=doc_type.value,
            document_id=request.document_id,
            status=request.status,
        )

        target = _parse_status(STATUS_TYPES[doc_type], request.status)
        store = await self._get_store(doc_type)

        document = await store.get(request.document_id)
        if document is None:
            raise DocumentNotFoundError(doc_type.value, request.document_id)

        current = document.status
        if not current.can_transition_to(target):
            raise InvalidStatusTransitionError(doc_type.value, current.value, target.value)

        fields: dict[str, Any] = {}
        if target is PayrollStatus.APPROVED:
            if request.approved_by is None:
                raise ValidationError("approved_by", "Approver is required to approve a payroll")
            fields["approved_by"] = request.approved_by

        updated = await store.update_status(
            request.document_id, target, expected_status=current, **fields
        )
        if not updated:
            # Changed or deleted since it was read
            latest = await store.get(request.document_id)
            if latest is None:
                raise DocumentNotFoundError(doc_type.value, request.document_id)
            raise InvalidStatusTransitionError(doc_type.value, latest.status.value, target.value)

        logger.info(
            "change_status_complete",
            doc_type=doc_type.value,
            document_id=request.document_id,
            previous=current.value,
            status=target.value,
        )

        return StatusChangeResult(
            doc_type=doc_type,
            document_id=request.document_id,
            previous_status=current.value,
            status=target.value,
        )

    async def execute_payroll_item(
        self, request: ChangePayrollItemStatusRequest
    ) -> StatusChangeResult:
        """Validate and apply a payroll item status change."""
        target = _parse_status(PayrollItemStatus, request.status)
        store = await self._get_payroll_store()

        item = await store.get_item(request.item_id)
        if item is None:
            raise DocumentNotFoundError("payroll_item", request.item_id)

        current = item.status
        if not current.can_transition_to(target):
            raise InvalidStatusTransitionError("payroll_item", current.value, target.value)

        paid_on = request.paid_on
        if target is PayrollItemStatus.PAID and paid_on is None:
            paid_on = date.today()

        updated = await store.update_item_status(
            request.item_id,
            target,
            payment_reference=request.payment_reference,
            paid_on=paid_on,
            expected_status=current,
        )
        if not updated:
            latest = await store.get_item(request.item_id)
            if latest is None:
                raise DocumentNotFoundError("payroll_item", request.item_id)
            raise InvalidStatusTransitionError("payroll_item", latest.status.value, target.value)

        logger.info(
            "payroll_item_status_changed",
            item_id=request.item_id,
            previous=current.value,
            status=target.value,
        )

        return StatusChangeResult(
            doc_type=DocumentType.PAYROLL,
            document_id=request.item_id,
            previous_status=current.value,
            status=target.value,
        )
