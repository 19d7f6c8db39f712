"""Sales invoice entities for finished cinnamon products."""

from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, ClassVar

from pydantic import BaseModel, Field, field_validator, model_validator

from src.core.entities.common import ZERO, DocumentType, coerce_decimal, utcnow


class SalesInvoiceStatus(str, Enum):
    """Sales invoice lifecycle."""

    DRAFT = "draft"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"

    def can_transition_to(self, target: "SalesInvoiceStatus") -> bool:
        return target in SALES_INVOICE_TRANSITIONS[self]


SALES_INVOICE_TRANSITIONS: dict[SalesInvoiceStatus, frozenset[SalesInvoiceStatus]] = {
    SalesInvoiceStatus.DRAFT: frozenset(
        {SalesInvoiceStatus.CONFIRMED, SalesInvoiceStatus.CANCELLED}
    ),
    SalesInvoiceStatus.CONFIRMED: frozenset(),
    SalesInvoiceStatus.CANCELLED: frozenset(),
}


class PaymentStatus(str, Enum):
    """How much of a sales invoice has been collected."""

    PENDING = "pending"
    PARTIAL = "partial"
    PAID = "paid"


class CustomerSnapshot(BaseModel):
    """Customer details copied onto the invoice at sale time."""

    name: str
    address: str | None = None
    phone: str | None = None
    email: str | None = None

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, v: Any) -> Any:
        return v.strip() if isinstance(v, str) else v


class SalesItem(BaseModel):
    """A single product line on a sales invoice."""

    id: int | None = None
    invoice_id: int | None = None
    product_id: int  # FK → inventory.id
    quantity: Decimal = Field(ge=0)
    unit_price: Decimal = Field(ge=0)
    discount: Decimal = Field(default=ZERO, ge=0)  # not part of sub_total
    sub_total: Decimal = ZERO  # quantity * unit_price

    @field_validator("quantity", "unit_price", "discount", "sub_total", mode="before")
    @classmethod
    def coerce_numeric(cls, v: Any) -> Any:
        return coerce_decimal(v)

    @model_validator(mode="after")
    def compute_line(self) -> "SalesItem":
        """Compute sub_total from quantity and unit_price."""
        self.sub_total = self.quantity * self.unit_price
        return self


class SalesInvoice(BaseModel):
    """
    Sales invoice with a flat discount and a percentage tax.

    ``sub_total`` and ``total`` are derived by ``finalize_sales_invoice``.
    """

    doc_type: ClassVar[DocumentType] = DocumentType.SALES_INVOICE
    number_field: ClassVar[str] = "invoice_number"

    id: int | None = None
    invoice_number: str | None = None
    invoice_date: date = Field(default_factory=date.today)
    customer: CustomerSnapshot
    items: list[SalesItem] = Field(default_factory=list)

    discount: Decimal = Field(default=ZERO, ge=0)  # flat amount
    tax: Decimal = Field(default=ZERO, ge=0)  # percent of the discounted total

    sub_total: Decimal = ZERO
    total: Decimal = ZERO

    payment_method: str | None = None
    payment_status: PaymentStatus = PaymentStatus.PENDING
    status: SalesInvoiceStatus = SalesInvoiceStatus.DRAFT
    notes: str | None = None
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    @field_validator("discount", "tax", "sub_total", "total", mode="before")
    @classmethod
    def coerce_numeric(cls, v: Any) -> Any:
        return coerce_decimal(v)
