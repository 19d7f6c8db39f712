"""Tests for ChangeDocumentStatusUseCase."""

from datetime import date
from unittest.mock import AsyncMock

import pytest

from src.application.dto.requests import ChangePayrollItemStatusRequest, ChangeStatusRequest
from src.application.use_cases.change_document_status import ChangeDocumentStatusUseCase
from src.core.entities import (
    DocumentType,
    PayrollItemStatus,
    PayrollStatus,
    PurchaseInvoiceStatus,
    SalesInvoiceStatus,
)
from src.core.exceptions import (
    DocumentNotFoundError,
    InvalidStatusTransitionError,
    ValidationError,
)


@pytest.fixture
def purchase_store():
    return AsyncMock()


@pytest.fixture
def sales_store():
    return AsyncMock()


@pytest.fixture
def payroll_store():
    return AsyncMock()


@pytest.fixture
def use_case(purchase_store, sales_store, payroll_store):
    return ChangeDocumentStatusUseCase(
        purchase_store=purchase_store,
        sales_store=sales_store,
        payroll_store=payroll_store,
    )


class TestChangeDocumentStatus:
    async def test_confirm_purchase_invoice(
        self, use_case, purchase_store, sample_purchase_invoice
    ):
        sample_purchase_invoice.id = 1
        purchase_store.get.return_value = sample_purchase_invoice

        result = await use_case.execute(
            DocumentType.PURCHASE_INVOICE,
            ChangeStatusRequest(document_id=1, status="confirmed"),
        )

        purchase_store.update_status.assert_awaited_once_with(
            1, PurchaseInvoiceStatus.CONFIRMED, expected_status=PurchaseInvoiceStatus.DRAFT
        )
        assert result.previous_status == "draft"
        assert result.status == "confirmed"

    async def test_invalid_transition(self, use_case, sales_store, sample_sales_invoice):
        sample_sales_invoice.status = SalesInvoiceStatus.CONFIRMED
        sales_store.get.return_value = sample_sales_invoice

        with pytest.raises(InvalidStatusTransitionError):
            await use_case.execute(
                DocumentType.SALES_INVOICE,
                ChangeStatusRequest(document_id=1, status="cancelled"),
            )
        sales_store.update_status.assert_not_awaited()

    async def test_unknown_status(self, use_case, sales_store):
        with pytest.raises(ValidationError):
            await use_case.execute(
                DocumentType.SALES_INVOICE,
                ChangeStatusRequest(document_id=1, status="shipped"),
            )
        sales_store.get.assert_not_awaited()

    async def test_document_not_found(self, use_case, payroll_store):
        payroll_store.get.return_value = None

        with pytest.raises(DocumentNotFoundError):
            await use_case.execute(
                DocumentType.PAYROLL,
                ChangeStatusRequest(document_id=9, status="processing"),
            )

    async def test_status_changed_concurrently(
        self, use_case, sales_store, sample_sales_invoice
    ):
        """A write that finds the status already moved is rejected."""
        moved = sample_sales_invoice.model_copy(update={"status": SalesInvoiceStatus.CANCELLED})
        sales_store.get.side_effect = [sample_sales_invoice, moved]
        sales_store.update_status.return_value = False

        with pytest.raises(InvalidStatusTransitionError) as exc_info:
            await use_case.execute(
                DocumentType.SALES_INVOICE,
                ChangeStatusRequest(document_id=1, status="confirmed"),
            )
        assert exc_info.value.details["current"] == "cancelled"

    async def test_deleted_before_write(self, use_case, purchase_store, sample_purchase_invoice):
        purchase_store.get.side_effect = [sample_purchase_invoice, None]
        purchase_store.update_status.return_value = False

        with pytest.raises(DocumentNotFoundError):
            await use_case.execute(
                DocumentType.PURCHASE_INVOICE,
                ChangeStatusRequest(document_id=1, status="confirmed"),
            )

    async def test_approve_payroll_records_approver(self, use_case, payroll_store, sample_payroll):
        sample_payroll.status = PayrollStatus.PROCESSING
        payroll_store.get.return_value = sample_payroll

        await use_case.execute(
            DocumentType.PAYROLL,
            ChangeStatusRequest(document_id=3, status="approved", approved_by=42),
        )

        payroll_store.update_status.assert_awaited_once_with(
            3,
            PayrollStatus.APPROVED,
            expected_status=PayrollStatus.PROCESSING,
            approved_by=42,
        )

    async def test_approve_payroll_requires_approver(
        self, use_case, payroll_store, sample_payroll
    ):
        sample_payroll.status = PayrollStatus.PROCESSING
        payroll_store.get.return_value = sample_payroll

        with pytest.raises(ValidationError):
            await use_case.execute(
                DocumentType.PAYROLL,
                ChangeStatusRequest(document_id=3, status="approved"),
            )
        payroll_store.update_status.assert_not_awaited()


class TestChangePayrollItemStatus:
    async def test_pay_item_records_reference_and_date(
        self, use_case, payroll_store, sample_payroll
    ):
        item = sample_payroll.items[0]
        item.status = PayrollItemStatus.APPROVED
        payroll_store.get_item.return_value = item

        result = await use_case.execute_payroll_item(
            ChangePayrollItemStatusRequest(
                item_id=5,
                status="paid",
                payment_reference="TRX-1",
                paid_on=date(2024, 7, 1),
            )
        )

        payroll_store.update_item_status.assert_awaited_once_with(
            5,
            PayrollItemStatus.PAID,
            payment_reference="TRX-1",
            paid_on=date(2024, 7, 1),
            expected_status=PayrollItemStatus.APPROVED,
        )
        assert result.status == "paid"

    async def test_paid_on_defaults_to_today(self, use_case, payroll_store, sample_payroll):
        item = sample_payroll.items[0]
        item.status = PayrollItemStatus.APPROVED
        payroll_store.get_item.return_value = item

        await use_case.execute_payroll_item(
            ChangePayrollItemStatusRequest(item_id=5, status="paid")
        )

        kwargs = payroll_store.update_item_status.call_args.kwargs
        assert kwargs["paid_on"] == date.today()

    async def test_cannot_pay_pending_item(self, use_case, payroll_store, sample_payroll):
        payroll_store.get_item.return_value = sample_payroll.items[0]

        with pytest.raises(InvalidStatusTransitionError):
            await use_case.execute_payroll_item(
                ChangePayrollItemStatusRequest(item_id=5, status="paid")
            )

    async def test_item_not_found(self, use_case, payroll_store):
        payroll_store.get_item.return_value = None

        with pytest.raises(DocumentNotFoundError):
            await use_case.execute_payroll_item(
                ChangePayrollItemStatusRequest(item_id=5, status="approved")
            )

    async def test_item_paid_concurrently(self, use_case, payroll_store, sample_payroll):
        item = sample_payroll.items[0]
        item.status = PayrollItemStatus.APPROVED
        paid = item.model_copy(update={"status": PayrollItemStatus.PAID})
        payroll_store.get_item.side_effect = [item, paid]
        payroll_store.update_item_status.return_value = False

        with pytest.raises(InvalidStatusTransitionError) as exc_info:
            await use_case.execute_payroll_item(
                ChangePayrollItemStatusRequest(item_id=5, status="paid")
            )
        assert exc_info.value.details["current"] == "paid"
