"""Pytest configuration and fixtures."""

from collections.abc import Generator
from datetime import date
from decimal import Decimal

import pytest

from src.config import reset_settings
from src.core.entities import (
    CustomerSnapshot,
    Payroll,
    PayrollComponent,
    PayrollItem,
    PurchaseInvoice,
    PurchaseItem,
    SalesInvoice,
    SalesItem,
)


@pytest.fixture(autouse=True)
def fresh_settings(tmp_path, monkeypatch) -> Generator[None, None, None]:
    """Point settings at a temp data dir and drop the cached instance."""
    monkeypatch.setenv("STORAGE_DATA_DIR", str(tmp_path / "data"))
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def sample_purchase_invoice() -> PurchaseInvoice:
    """Purchase invoice from the worked example: 93 kg net, 4650 amount."""
    return PurchaseInvoice(
        contractor_id=7,
        invoice_date=date(2024, 6, 15),
        cutting_rate=Decimal("10"),
        total_advance=Decimal("50"),
        items=[
            PurchaseItem(
                grade_id=1,
                total_weight=Decimal("100"),
                deduct_weight1=Decimal("5"),
                deduct_weight2=Decimal("2"),
                rate=Decimal("50"),
            ),
        ],
    )


@pytest.fixture
def sample_sales_invoice() -> SalesInvoice:
    """Sales invoice with a 100 subtotal, discount 10 and tax 10%."""
    return SalesInvoice(
        customer=CustomerSnapshot(name="Ceylon Spice Traders", phone="0771234567"),
        invoice_date=date(2024, 6, 15),
        discount=Decimal("10"),
        tax=Decimal("10"),
        items=[
            SalesItem(product_id=3, quantity=Decimal("2"), unit_price=Decimal("50")),
        ],
    )


@pytest.fixture
def sample_payroll() -> Payroll:
    """Two-employee payroll for June 2024."""
    return Payroll(
        month=6,
        year=2024,
        from_date=date(2024, 6, 1),
        to_date=date(2024, 6, 30),
        items=[
            PayrollItem(
                employee_id=1,
                basic_salary=Decimal("1000"),
                gross_salary=Decimal("1200"),
                net_salary=Decimal("1000"),
                earnings=[PayrollComponent(name="Overtime", amount=Decimal("200"))],
                deductions=[
                    PayrollComponent(name="EPF", amount=Decimal("150")),
                    PayrollComponent(name="Loan", amount=Decimal("50")),
                ],
            ),
            PayrollItem(
                employee_id=2,
                basic_salary=Decimal("800"),
                gross_salary=Decimal("900"),
                net_salary=Decimal("750"),
                deductions=[PayrollComponent(name="EPF", amount=Decimal("150"))],
            ),
        ],
    )
