"""Payroll entities: a monthly run with one item per employee."""

from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, ClassVar

from pydantic import BaseModel, Field, field_validator, model_validator

from src.core.entities.common import ZERO, DocumentType, coerce_decimal, utcnow


class PayrollStatus(str, Enum):
    """Payroll run lifecycle."""

    DRAFT = "draft"
    PROCESSING = "processing"
    APPROVED = "approved"
    COMPLETED = "completed"

    def can_transition_to(self, target: "PayrollStatus") -> bool:
        return target in PAYROLL_TRANSITIONS[self]


PAYROLL_TRANSITIONS: dict[PayrollStatus, frozenset[PayrollStatus]] = {
    PayrollStatus.DRAFT: frozenset({PayrollStatus.PROCESSING}),
    PayrollStatus.PROCESSING: frozenset({PayrollStatus.APPROVED}),
    PayrollStatus.APPROVED: frozenset({PayrollStatus.COMPLETED}),
    PayrollStatus.COMPLETED: frozenset(),
}


class PayrollItemStatus(str, Enum):
    """Per-employee payment lifecycle."""

    PENDING = "pending"
    APPROVED = "approved"
    PAID = "paid"

    def can_transition_to(self, target: "PayrollItemStatus") -> bool:
        return target in PAYROLL_ITEM_TRANSITIONS[self]


PAYROLL_ITEM_TRANSITIONS: dict[PayrollItemStatus, frozenset[PayrollItemStatus]] = {
    PayrollItemStatus.PENDING: frozenset({PayrollItemStatus.APPROVED}),
    PayrollItemStatus.APPROVED: frozenset({PayrollItemStatus.PAID}),
    PayrollItemStatus.PAID: frozenset(),
}


class ComponentType(str, Enum):
    EARNING = "earning"
    DEDUCTION = "deduction"


class PayrollComponent(BaseModel):
    """A named earning or deduction, e.g. "EPF" or "Overtime"."""

    id: int | None = None
    name: str
    amount: Decimal = Field(ge=0)

    @field_validator("amount", mode="before")
    @classmethod
    def coerce_numeric(cls, v: Any) -> Any:
        return coerce_decimal(v)


class PaymentDetails(BaseModel):
    method: str | None = None  # "cash", "bank_transfer", ...
    reference: str | None = None
    paid_on: date | None = None


class PayrollItem(BaseModel):
    """
    One employee's line in a payroll run.

    ``gross_salary`` and ``net_salary`` are supplied by the caller and are
    not reconciled against the earnings and deductions lists.
    """

    id: int | None = None
    payroll_id: int | None = None
    employee_id: int  # FK → employees.id
    basic_salary: Decimal = Field(default=ZERO, ge=0)
    earnings: list[PayrollComponent] = Field(default_factory=list)
    deductions: list[PayrollComponent] = Field(default_factory=list)
    gross_salary: Decimal = Field(default=ZERO, ge=0)
    net_salary: Decimal = ZERO
    status: PayrollItemStatus = PayrollItemStatus.PENDING
    payment: PaymentDetails = Field(default_factory=PaymentDetails)

    @field_validator("basic_salary", "gross_salary", "net_salary", mode="before")
    @classmethod
    def coerce_numeric(cls, v: Any) -> Any:
        return coerce_decimal(v)

    @property
    def total_deductions(self) -> Decimal:
        return sum((d.amount for d in self.deductions), ZERO)

    @property
    def total_earnings(self) -> Decimal:
        return sum((e.amount for e in self.earnings), ZERO)


class Payroll(BaseModel):
    """
    Monthly payroll run.

    The four ``total_*`` fields are derived by ``finalize_payroll``.
    """

    doc_type: ClassVar[DocumentType] = DocumentType.PAYROLL
    number_field: ClassVar[str] = "payroll_id"

    id: int | None = None
    payroll_id: str | None = None
    month: int = Field(ge=1, le=12)
    year: int = Field(ge=2000)
    from_date: date
    to_date: date
    items: list[PayrollItem] = Field(default_factory=list)

    total_basic_salary: Decimal = ZERO
    total_gross_salary: Decimal = ZERO
    total_deductions: Decimal = ZERO
    total_net_salary: Decimal = ZERO

    status: PayrollStatus = PayrollStatus.DRAFT
    approved_by: int | None = None  # FK → users.id
    notes: str | None = None
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    @field_validator(
        "total_basic_salary",
        "total_gross_salary",
        "total_deductions",
        "total_net_salary",
        mode="before",
    )
    @classmethod
    def coerce_numeric(cls, v: Any) -> Any:
        return coerce_decimal(v)

    @model_validator(mode="after")
    def check_period(self) -> "Payroll":
        if self.to_date < self.from_date:
            raise ValueError("to_date must not be before from_date")
        return self
