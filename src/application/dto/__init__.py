"""Data Transfer Objects for the application layer.

Request DTOs validate and parse caller input before entities are built.
"""

from src.application.dto.requests import (
    ChangePayrollItemStatusRequest,
    ChangeStatusRequest,
    CreatePayrollItemRequest,
    CreatePayrollRequest,
    CreatePurchaseInvoiceRequest,
    CreatePurchaseItemRequest,
    CreateSalesInvoiceRequest,
    CreateSalesItemRequest,
    CustomerRequest,
    PayrollComponentRequest,
)

__all__ = [
    "CreatePurchaseItemRequest",
    "CreatePurchaseInvoiceRequest",
    "CustomerRequest",
    "CreateSalesItemRequest",
    "CreateSalesInvoiceRequest",
    "PayrollComponentRequest",
    "CreatePayrollItemRequest",
    "CreatePayrollRequest",
    "ChangeStatusRequest",
    "ChangePayrollItemStatusRequest",
]
