"""Application use cases."""

from src.application.use_cases.change_document_status import (
    ChangeDocumentStatusUseCase,
    StatusChangeResult,
)
from src.application.use_cases.create_payroll import CreatePayrollResult, CreatePayrollUseCase
from src.application.use_cases.create_purchase_invoice import (
    CreatePurchaseInvoiceResult,
    CreatePurchaseInvoiceUseCase,
)
from src.application.use_cases.create_sales_invoice import (
    CreateSalesInvoiceResult,
    CreateSalesInvoiceUseCase,
)

__all__ = [
    "CreatePurchaseInvoiceUseCase",
    "CreatePurchaseInvoiceResult",
    "CreateSalesInvoiceUseCase",
    "CreateSalesInvoiceResult",
    "CreatePayrollUseCase",
    "CreatePayrollResult",
    "ChangeDocumentStatusUseCase",
    "StatusChangeResult",
]
