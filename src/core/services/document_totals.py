"""
Pre-save totals for purchase invoices, sales invoices and payrolls.

Each calculator reads only its own document's line items, overwrites the
document's aggregate fields in place and returns the same object. Line items
are the source of truth; aggregates are never read back into them.

All arithmetic is Decimal. Empty item lists produce zero aggregates.
"""

from decimal import Decimal

from src.core.entities import (
    FinalizableDocument,
    Payroll,
    PurchaseInvoice,
    SalesInvoice,
)
from src.core.entities.common import ZERO

HUNDRED = Decimal("100")


def finalize_purchase_invoice(invoice: PurchaseInvoice) -> PurchaseInvoice:
    """
    Aggregate net weight and amount, then deduct cutting charges and advances.

    ``final_amount`` can go negative when charges and advances exceed the
    invoice amount; it is not clamped.
    """
    invoice.total_net_weight = sum((item.net_weight for item in invoice.items), ZERO)
    invoice.total_amount = sum((item.amount for item in invoice.items), ZERO)
    invoice.cutting_charges = invoice.total_net_weight * invoice.cutting_rate
    invoice.final_amount = (
        invoice.total_amount - invoice.cutting_charges - invoice.total_advance
    )
    return invoice


def finalize_sales_invoice(
    invoice: SalesInvoice, apply_line_discount: bool = False
) -> SalesInvoice:
    """
    Sum line subtotals, subtract the flat discount, then add tax.

    Tax is a percentage of the discounted total: 100 with discount 10 and
    tax 10 gives 99. With ``apply_line_discount`` each line contributes
    ``sub_total - discount`` instead of ``sub_total``.
    """
    if apply_line_discount:
        invoice.sub_total = sum(
            (item.sub_total - item.discount for item in invoice.items), ZERO
        )
    else:
        invoice.sub_total = sum((item.sub_total for item in invoice.items), ZERO)

    total = invoice.sub_total
    if invoice.discount:
        total -= invoice.discount
    if invoice.tax:
        total += total * invoice.tax / HUNDRED
    invoice.total = total
    return invoice


def finalize_payroll(payroll: Payroll) -> Payroll:
    """Sum salaries across items; deductions are summed per item first."""
    payroll.total_basic_salary = sum((item.basic_salary for item in payroll.items), ZERO)
    payroll.total_gross_salary = sum((item.gross_salary for item in payroll.items), ZERO)
    payroll.total_deductions = sum((item.total_deductions for item in payroll.items), ZERO)
    payroll.total_net_salary = sum((item.net_salary for item in payroll.items), ZERO)
    return payroll


def finalize(
    document: FinalizableDocument, *, apply_line_discount: bool = False
) -> FinalizableDocument:
    """Run the totals calculator that matches ``document``."""
    if isinstance(document, PurchaseInvoice):
        return finalize_purchase_invoice(document)
    if isinstance(document, SalesInvoice):
        return finalize_sales_invoice(document, apply_line_discount=apply_line_discount)
    if isinstance(document, Payroll):
        return finalize_payroll(document)
    raise TypeError(f"Cannot finalize {type(document).__name__}")
