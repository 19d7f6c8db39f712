"""
Application layer - Use cases and DTOs.

This layer orchestrates business logic by:
1. Defining request DTOs that validate caller input
2. Implementing use cases that build documents and hand them to stores

Use cases are the only entry point for callers outside the package.
"""

from src.application.dto.requests import (
    ChangePayrollItemStatusRequest,
    ChangeStatusRequest,
    CreatePayrollRequest,
    CreatePurchaseInvoiceRequest,
    CreateSalesInvoiceRequest,
)
from src.application.use_cases import (
    ChangeDocumentStatusUseCase,
    CreatePayrollUseCase,
    CreatePurchaseInvoiceUseCase,
    CreateSalesInvoiceUseCase,
)

__all__ = [
    # Request DTOs
    "CreatePurchaseInvoiceRequest",
    "CreateSalesInvoiceRequest",
    "CreatePayrollRequest",
    "ChangeStatusRequest",
    "ChangePayrollItemStatusRequest",
    # Use Cases
    "CreatePurchaseInvoiceUseCase",
    "CreateSalesInvoiceUseCase",
    "CreatePayrollUseCase",
    "ChangeDocumentStatusUseCase",
]
