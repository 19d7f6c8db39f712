"""Tests for CreatePurchaseInvoiceUseCase."""

from datetime import date
from decimal import Decimal
from unittest.mock import AsyncMock

import pytest

from src.application.dto.requests import CreatePurchaseInvoiceRequest, CreatePurchaseItemRequest
from src.application.use_cases.create_purchase_invoice import CreatePurchaseInvoiceUseCase


@pytest.fixture
def mock_store():
    store = AsyncMock()

    async def create(invoice):
        invoice.id = 1
        invoice.invoice_number = "PUR24060001"
        return invoice

    store.create.side_effect = create
    return store


@pytest.fixture
def use_case(mock_store):
    return CreatePurchaseInvoiceUseCase(store=mock_store)


class TestCreatePurchaseInvoiceUseCase:
    async def test_builds_invoice_from_request(self, use_case, mock_store):
        """Items, advances and rate are carried onto the entity."""
        request = CreatePurchaseInvoiceRequest(
            contractor_id=7,
            invoice_date=date(2024, 6, 15),
            cutting_rate=Decimal("10"),
            advance_payment_ids=[3],
            total_advance=Decimal("50"),
            items=[
                CreatePurchaseItemRequest(
                    grade_id=1,
                    total_weight=Decimal("100"),
                    deduct_weight1=Decimal("5"),
                    deduct_weight2=Decimal("2"),
                    rate=Decimal("50"),
                ),
            ],
        )
        result = await use_case.execute(request)

        mock_store.create.assert_awaited_once()
        invoice = mock_store.create.call_args.args[0]
        assert invoice.contractor_id == 7
        assert invoice.invoice_date == date(2024, 6, 15)
        assert invoice.cutting_rate == Decimal("10")
        assert invoice.advance_payment_ids == [3]
        assert invoice.items[0].net_weight == Decimal("93")
        assert result.invoice.invoice_number == "PUR24060001"

    async def test_default_cutting_rate_from_settings(self, use_case, mock_store, monkeypatch):
        from src.config import reset_settings

        monkeypatch.setenv("PURCHASE_DEFAULT_CUTTING_RATE", "300")
        reset_settings()

        result = await use_case.execute(CreatePurchaseInvoiceRequest(contractor_id=1))
        assert result.invoice.cutting_rate == Decimal("300")

    def test_deductions_exceeding_weight_rejected(self):
        from pydantic import ValidationError

        with pytest.raises(ValidationError):
            CreatePurchaseItemRequest(
                grade_id=1,
                total_weight=Decimal("5"),
                deduct_weight1=Decimal("4"),
                deduct_weight2=Decimal("2"),
                rate=Decimal("10"),
            )
