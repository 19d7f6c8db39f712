"""
Purchase invoice entities for raw cinnamon bought from contractors.

Weights are in kilograms; rate and cutting rate are per kilogram.
"""

from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, ClassVar

from pydantic import BaseModel, Field, field_validator, model_validator

from src.core.entities.common import ZERO, DocumentType, coerce_decimal, utcnow


class PurchaseInvoiceStatus(str, Enum):
    """Purchase invoice lifecycle."""

    DRAFT = "draft"
    CONFIRMED = "confirmed"
    PAID = "paid"
    CANCELLED = "cancelled"

    def can_transition_to(self, target: "PurchaseInvoiceStatus") -> bool:
        return target in PURCHASE_INVOICE_TRANSITIONS[self]


PURCHASE_INVOICE_TRANSITIONS: dict[PurchaseInvoiceStatus, frozenset[PurchaseInvoiceStatus]] = {
    PurchaseInvoiceStatus.DRAFT: frozenset(
        {PurchaseInvoiceStatus.CONFIRMED, PurchaseInvoiceStatus.CANCELLED}
    ),
    PurchaseInvoiceStatus.CONFIRMED: frozenset(
        {PurchaseInvoiceStatus.PAID, PurchaseInvoiceStatus.CANCELLED}
    ),
    PurchaseInvoiceStatus.PAID: frozenset(),
    PurchaseInvoiceStatus.CANCELLED: frozenset(),
}


class PurchaseItem(BaseModel):
    """One graded lot on a purchase invoice."""

    id: int | None = None
    invoice_id: int | None = None
    grade_id: int  # FK → grades.id
    total_weight: Decimal = Field(ge=0)
    deduct_weight1: Decimal = Field(default=ZERO, ge=0)
    deduct_weight2: Decimal = Field(default=ZERO, ge=0)
    net_weight: Decimal = ZERO  # total_weight - deduct_weight1 - deduct_weight2
    rate: Decimal = Field(ge=0)
    amount: Decimal = ZERO  # net_weight * rate

    @field_validator(
        "total_weight",
        "deduct_weight1",
        "deduct_weight2",
        "net_weight",
        "rate",
        "amount",
        mode="before",
    )
    @classmethod
    def coerce_numeric(cls, v: Any) -> Any:
        return coerce_decimal(v)

    @model_validator(mode="after")
    def compute_line(self) -> "PurchaseItem":
        """Derive net_weight and amount from the weights and rate."""
        self.net_weight = self.total_weight - self.deduct_weight1 - self.deduct_weight2
        self.amount = self.net_weight * self.rate
        return self


class PurchaseInvoice(BaseModel):
    """
    Purchase invoice raised against a manufacturing contractor.

    Aggregate fields are derived from the items by
    ``finalize_purchase_invoice`` before every save; values set here are
    overwritten.
    """

    doc_type: ClassVar[DocumentType] = DocumentType.PURCHASE_INVOICE
    number_field: ClassVar[str] = "invoice_number"

    id: int | None = None
    invoice_number: str | None = None
    contractor_id: int  # FK → manufacturing_contractors.id
    invoice_date: date = Field(default_factory=date.today)
    items: list[PurchaseItem] = Field(default_factory=list)

    cutting_rate: Decimal = Field(default=Decimal("250"), ge=0)
    advance_payment_ids: list[int] = Field(default_factory=list)
    total_advance: Decimal = Field(default=ZERO, ge=0)

    # Derived, never clamped
    total_net_weight: Decimal = ZERO
    total_amount: Decimal = ZERO
    cutting_charges: Decimal = ZERO
    final_amount: Decimal = ZERO

    status: PurchaseInvoiceStatus = PurchaseInvoiceStatus.DRAFT
    notes: str | None = None
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    @field_validator(
        "cutting_rate",
        "total_advance",
        "total_net_weight",
        "total_amount",
        "cutting_charges",
        "final_amount",
        mode="before",
    )
    @classmethod
    def coerce_numeric(cls, v: Any) -> Any:
        return coerce_decimal(v)
