"""Core domain entities."""

from src.core.entities.common import DocumentType
from src.core.entities.payroll import (
    ComponentType,
    PaymentDetails,
    Payroll,
    PayrollComponent,
    PayrollItem,
    PayrollItemStatus,
    PayrollStatus,
)
from src.core.entities.purchase_invoice import (
    PurchaseInvoice,
    PurchaseInvoiceStatus,
    PurchaseItem,
)
from src.core.entities.sales_invoice import (
    CustomerSnapshot,
    PaymentStatus,
    SalesInvoice,
    SalesInvoiceStatus,
    SalesItem,
)

# Any document that goes through numbering and finalization
FinalizableDocument = PurchaseInvoice | SalesInvoice | Payroll

__all__ = [
    # Common
    "DocumentType",
    "FinalizableDocument",
    # Purchase
    "PurchaseInvoice",
    "PurchaseInvoiceStatus",
    "PurchaseItem",
    # Sales
    "CustomerSnapshot",
    "PaymentStatus",
    "SalesInvoice",
    "SalesInvoiceStatus",
    "SalesItem",
    # Payroll
    "ComponentType",
    "PaymentDetails",
    "Payroll",
    "PayrollComponent",
    "PayrollItem",
    "PayrollItemStatus",
    "PayrollStatus",
]
