"""
Core business logic services.

Layer-pure services that depend only on:
- src/core/entities/*
- src/core/interfaces/*
- src/core/exceptions.py

NO infrastructure imports. Storage handles are passed in by the caller.
"""

from src.core.services.document_numbering import (
    DocumentNumber,
    assign_document_number,
    format_document_number,
    parse_document_number,
)
from src.core.services.document_totals import (
    finalize,
    finalize_payroll,
    finalize_purchase_invoice,
    finalize_sales_invoice,
)

__all__ = [
    # Numbering
    "DocumentNumber",
    "assign_document_number",
    "format_document_number",
    "parse_document_number",
    # Totals
    "finalize",
    "finalize_payroll",
    "finalize_purchase_invoice",
    "finalize_sales_invoice",
]
