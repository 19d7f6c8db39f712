"""Tests for purchase invoice entities."""

from decimal import Decimal

import pytest
from pydantic import ValidationError

from src.core.entities.purchase_invoice import (
    PurchaseInvoice,
    PurchaseInvoiceStatus,
    PurchaseItem,
)


class TestPurchaseItem:
    """Tests for PurchaseItem entity."""

    def test_net_weight_and_amount(self):
        """net_weight = total - both deductions; amount = net_weight * rate."""
        item = PurchaseItem(
            grade_id=1,
            total_weight="100",
            deduct_weight1="5",
            deduct_weight2="2",
            rate="50",
        )
        assert item.net_weight == Decimal("93")
        assert item.amount == Decimal("4650")

    def test_deductions_default_to_zero(self):
        item = PurchaseItem(grade_id=1, total_weight="12.5", rate="100")
        assert item.deduct_weight1 == Decimal("0")
        assert item.deduct_weight2 == Decimal("0")
        assert item.net_weight == Decimal("12.5")
        assert item.amount == Decimal("1250.0")

    def test_supplied_net_weight_is_overwritten(self):
        """Line values are always derived from weights and rate."""
        item = PurchaseItem(
            grade_id=1, total_weight="10", rate="2", net_weight="999", amount="999"
        )
        assert item.net_weight == Decimal("10")
        assert item.amount == Decimal("20")

    def test_float_input_keeps_decimal_precision(self):
        item = PurchaseItem(grade_id=1, total_weight=0.1, deduct_weight1=0.05, rate=3)
        assert item.net_weight == Decimal("0.05")

    def test_comma_separated_input(self):
        item = PurchaseItem(grade_id=1, total_weight="1,200", rate="1,000")
        assert item.amount == Decimal("1200000")

    def test_negative_weight_rejected(self):
        with pytest.raises(ValidationError):
            PurchaseItem(grade_id=1, total_weight="-1", rate="10")

    def test_negative_rate_rejected(self):
        with pytest.raises(ValidationError):
            PurchaseItem(grade_id=1, total_weight="1", rate="-10")


class TestPurchaseInvoice:
    """Tests for PurchaseInvoice entity."""

    def test_defaults(self):
        invoice = PurchaseInvoice(contractor_id=1)
        assert invoice.invoice_number is None
        assert invoice.cutting_rate == Decimal("250")
        assert invoice.total_advance == Decimal("0")
        assert invoice.items == []
        assert invoice.advance_payment_ids == []
        assert invoice.status == PurchaseInvoiceStatus.DRAFT

    def test_number_field(self):
        assert PurchaseInvoice.number_field == "invoice_number"
        assert PurchaseInvoice.doc_type.prefix == "PUR"

    def test_aggregates_not_computed_on_construction(self, sample_purchase_invoice):
        """Aggregates are left for the totals calculator."""
        assert sample_purchase_invoice.total_amount == Decimal("0")
        assert sample_purchase_invoice.final_amount == Decimal("0")

    def test_negative_advance_rejected(self):
        with pytest.raises(ValidationError):
            PurchaseInvoice(contractor_id=1, total_advance="-5")


class TestPurchaseInvoiceStatus:
    """Tests for purchase invoice status transitions."""

    @pytest.mark.parametrize(
        "current,target",
        [
            (PurchaseInvoiceStatus.DRAFT, PurchaseInvoiceStatus.CONFIRMED),
            (PurchaseInvoiceStatus.DRAFT, PurchaseInvoiceStatus.CANCELLED),
            (PurchaseInvoiceStatus.CONFIRMED, PurchaseInvoiceStatus.PAID),
            (PurchaseInvoiceStatus.CONFIRMED, PurchaseInvoiceStatus.CANCELLED),
        ],
    )
    def test_allowed(self, current, target):
        assert current.can_transition_to(target)

    @pytest.mark.parametrize(
        "current,target",
        [
            (PurchaseInvoiceStatus.DRAFT, PurchaseInvoiceStatus.PAID),
            (PurchaseInvoiceStatus.PAID, PurchaseInvoiceStatus.CANCELLED),
            (PurchaseInvoiceStatus.CANCELLED, PurchaseInvoiceStatus.DRAFT),
            (PurchaseInvoiceStatus.CONFIRMED, PurchaseInvoiceStatus.DRAFT),
        ],
    )
    def test_rejected(self, current, target):
        assert not current.can_transition_to(target)
