"""Request DTOs for document use cases.

Pydantic v2 models validating caller input before any entity is built.
Negative weights, prices and amounts are rejected here.
"""

from datetime import date
from decimal import Decimal

from pydantic import BaseModel, Field, model_validator


# --- Purchase invoices ---


class CreatePurchaseItemRequest(BaseModel):
    """One graded lot bought from a contractor."""

    grade_id: int = Field(..., description="Cinnamon grade ID")
    total_weight: Decimal = Field(..., ge=0, description="Gross weight in kg")
    deduct_weight1: Decimal = Field(default=Decimal("0"), ge=0, description="First deduction in kg")
    deduct_weight2: Decimal = Field(default=Decimal("0"), ge=0, description="Second deduction in kg")
    rate: Decimal = Field(..., ge=0, description="Price per net kg")

    @model_validator(mode="after")
    def check_deductions(self) -> "CreatePurchaseItemRequest":
        if self.deduct_weight1 + self.deduct_weight2 > self.total_weight:
            raise ValueError("Deductions exceed total weight")
        return self


class CreatePurchaseInvoiceRequest(BaseModel):
    """Request to create a purchase invoice."""

    contractor_id: int = Field(..., description="Manufacturing contractor ID")
    invoice_date: date | None = Field(default=None, description="Defaults to today")
    items: list[CreatePurchaseItemRequest] = Field(default_factory=list)
    cutting_rate: Decimal | None = Field(
        default=None,
        ge=0,
        description="Cutting charge per net kg (defaults to the configured rate)",
    )
    advance_payment_ids: list[int] = Field(default_factory=list)
    total_advance: Decimal = Field(default=Decimal("0"), ge=0)
    notes: str | None = None


# --- Sales invoices ---


class CustomerRequest(BaseModel):
    name: str = Field(..., min_length=1)
    address: str | None = None
    phone: str | None = None
    email: str | None = None


class CreateSalesItemRequest(BaseModel):
    """A single product line on a sales invoice."""

    product_id: int = Field(..., description="Finished product ID")
    quantity: Decimal = Field(..., gt=0, description="Quantity sold")
    unit_price: Decimal = Field(..., ge=0, description="Selling price per unit")
    discount: Decimal = Field(default=Decimal("0"), ge=0, description="Per-line discount")


class CreateSalesInvoiceRequest(BaseModel):
    """Request to create a sales invoice."""

    customer: CustomerRequest
    invoice_date: date | None = Field(default=None, description="Defaults to today")
    items: list[CreateSalesItemRequest] = Field(default_factory=list)
    discount: Decimal = Field(default=Decimal("0"), ge=0, description="Flat discount")
    tax: Decimal = Field(default=Decimal("0"), ge=0, le=100, description="Tax percentage")
    payment_method: str | None = None
    notes: str | None = None


# --- Payroll ---


class PayrollComponentRequest(BaseModel):
    name: str = Field(..., min_length=1)
    amount: Decimal = Field(..., ge=0)


class CreatePayrollItemRequest(BaseModel):
    """One employee's pay for the period. Gross and net are taken as given."""

    employee_id: int
    basic_salary: Decimal = Field(..., ge=0)
    earnings: list[PayrollComponentRequest] = Field(default_factory=list)
    deductions: list[PayrollComponentRequest] = Field(default_factory=list)
    gross_salary: Decimal = Field(..., ge=0)
    net_salary: Decimal
    payment_method: str | None = None


class CreatePayrollRequest(BaseModel):
    """Request to create a payroll run."""

    month: int = Field(..., ge=1, le=12)
    year: int = Field(..., ge=2000)
    from_date: date
    to_date: date
    items: list[CreatePayrollItemRequest] = Field(default_factory=list)
    notes: str | None = None


# --- Status changes ---


class ChangeStatusRequest(BaseModel):
    """Move a document to a new status."""

    document_id: int
    status: str
    approved_by: int | None = Field(default=None, description="Required when approving a payroll")


class ChangePayrollItemStatusRequest(BaseModel):
    item_id: int
    status: str
    payment_reference: str | None = None
    paid_on: date | None = None
