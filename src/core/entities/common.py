"""Shared building blocks for ERP document entities."""

from datetime import UTC, datetime
from decimal import Decimal
from enum import Enum
from typing import Any


class DocumentType(str, Enum):
    """Business documents that receive a generated number."""

    PAYROLL = "payroll"
    PURCHASE_INVOICE = "purchase_invoice"
    SALES_INVOICE = "sales_invoice"

    @property
    def prefix(self) -> str:
        return _PREFIXES[self]

    @classmethod
    def from_prefix(cls, prefix: str) -> "DocumentType":
        for doc_type, known in _PREFIXES.items():
            if known == prefix:
                return doc_type
        raise ValueError(f"Unknown document prefix: {prefix}")


_PREFIXES: dict[DocumentType, str] = {
    DocumentType.PAYROLL: "PAY",
    DocumentType.PURCHASE_INVOICE: "PUR",
    DocumentType.SALES_INVOICE: "SAL",
}

ZERO = Decimal("0")


def coerce_decimal(v: Any) -> Any:
    """
    Normalize numeric input before Decimal validation.

    None and blank strings become zero, floats go through their shortest
    repr so 0.1 stays 0.1, and thousands separators are dropped. Anything
    else is handed to pydantic unchanged, so junk still fails validation.
    """
    if v is None:
        return ZERO
    if isinstance(v, bool):
        return v
    if isinstance(v, float):
        return Decimal(str(v))
    if isinstance(v, str):
        s = v.strip().replace(",", "")
        return s or ZERO
    return v


def utcnow() -> datetime:
    return datetime.now(UTC)
