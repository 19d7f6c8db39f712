"""Tests for document number generation."""

import re
from datetime import datetime
from unittest.mock import AsyncMock

import pytest

from src.core.entities import DocumentType, PurchaseInvoice
from src.core.exceptions import ValidationError
from src.core.services.document_numbering import (
    DocumentNumber,
    assign_document_number,
    format_document_number,
    parse_document_number,
)

JUNE_2024 = datetime(2024, 6, 15, 10, 30)


@pytest.fixture
def sequence_source():
    source = AsyncMock()
    source.next_sequence.return_value = 1
    return source


class TestFormatDocumentNumber:
    """Tests for format_document_number."""

    @pytest.mark.parametrize(
        "doc_type,expected",
        [
            (DocumentType.PAYROLL, "PAY24060001"),
            (DocumentType.PURCHASE_INVOICE, "PUR24060001"),
            (DocumentType.SALES_INVOICE, "SAL24060001"),
        ],
    )
    def test_first_number_of_month(self, doc_type, expected):
        assert format_document_number(doc_type, 1, JUNE_2024) == expected

    def test_zero_padding(self):
        assert format_document_number(DocumentType.SALES_INVOICE, 42, JUNE_2024) == "SAL24060042"

    def test_single_digit_month_padded(self):
        number = format_document_number(DocumentType.PAYROLL, 7, datetime(2025, 1, 3))
        assert number == "PAY25010007"

    def test_sequence_past_9999_keeps_all_digits(self):
        number = format_document_number(DocumentType.PURCHASE_INVOICE, 10000, JUNE_2024)
        assert number == "PUR240610000"

    def test_non_positive_sequence_rejected(self):
        with pytest.raises(ValueError):
            format_document_number(DocumentType.PAYROLL, 0, JUNE_2024)


class TestParseDocumentNumber:
    """Tests for parse_document_number."""

    def test_parse(self):
        assert parse_document_number("PUR24060123") == DocumentNumber(
            doc_type=DocumentType.PURCHASE_INVOICE, year=24, month=6, sequence=123
        )

    def test_parse_long_sequence(self):
        assert parse_document_number("SAL240610000").sequence == 10000

    @pytest.mark.parametrize("number", ["", "INV24060001", "PAY2406001", "pay24060001"])
    def test_invalid_format(self, number):
        with pytest.raises(ValidationError):
            parse_document_number(number)

    def test_invalid_month(self):
        with pytest.raises(ValidationError):
            parse_document_number("PAY24130001")


class TestAssignDocumentNumber:
    """Tests for assign_document_number."""

    async def test_assigns_when_empty(self, sequence_source):
        invoice = PurchaseInvoice(contractor_id=1)
        number = await assign_document_number(invoice, sequence_source, conn=None, now=JUNE_2024)

        assert number == "PUR24060001"
        assert invoice.invoice_number == "PUR24060001"
        sequence_source.next_sequence.assert_awaited_once_with(None, DocumentType.PURCHASE_INVOICE)

    async def test_existing_number_untouched(self, sequence_source):
        """A document that already has a number is not renumbered."""
        invoice = PurchaseInvoice(contractor_id=1, invoice_number="PUR23120007")
        number = await assign_document_number(invoice, sequence_source, conn=None, now=JUNE_2024)

        assert number == "PUR23120007"
        assert invoice.invoice_number == "PUR23120007"
        sequence_source.next_sequence.assert_not_awaited()

    async def test_idempotent(self, sequence_source):
        invoice = PurchaseInvoice(contractor_id=1)
        first = await assign_document_number(invoice, sequence_source, conn=None, now=JUNE_2024)
        sequence_source.next_sequence.return_value = 2
        second = await assign_document_number(invoice, sequence_source, conn=None, now=JUNE_2024)

        assert first == second
        assert sequence_source.next_sequence.await_count == 1

    async def test_uses_sequence_from_source(self, sequence_source, sample_payroll):
        sequence_source.next_sequence.return_value = 12
        await assign_document_number(sample_payroll, sequence_source, conn=None, now=JUNE_2024)
        assert sample_payroll.payroll_id == "PAY24060012"

    async def test_defaults_to_current_month(self, sequence_source, sample_sales_invoice):
        """Year and month come from the clock, not from the invoice date."""
        before = datetime.now()
        number = await assign_document_number(sample_sales_invoice, sequence_source, conn=None)
        after = datetime.now()

        assert re.fullmatch(r"SAL\d{4}0001", number)
        assert number[3:7] in {f"{before:%y%m}", f"{after:%y%m}"}
