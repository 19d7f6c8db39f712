"""Create Sales Invoice Use Case."""

from dataclasses import dataclass

from src.application.dto.requests import CreateSalesInvoiceRequest
from src.config import get_logger
from src.core.entities.sales_invoice import CustomerSnapshot, SalesInvoice, SalesItem
from src.core.interfaces.document_store import ISalesInvoiceStore

logger = get_logger(__name__)


@dataclass
class CreateSalesInvoiceResult:
    """Result of creating a sales invoice."""

    invoice: SalesInvoice


class CreateSalesInvoiceUseCase:
    """Create a sales invoice; the store numbers it and applies discount and tax."""

    def __init__(self, store: ISalesInvoiceStore | None = None):
        self._store = store

    async def _get_store(self) -> ISalesInvoiceStore:
        if self._store is None:
            from src.infrastructure.storage.sqlite import get_sales_invoice_store

            self._store = await get_sales_invoice_store()
        return self._store

    async def execute(
        self, request: CreateSalesInvoiceRequest
    ) -> CreateSalesInvoiceResult:
        """Execute create sales invoice use case."""
        logger.info(
            "create_sales_invoice_started",
            customer=request.customer.name,
            items=len(request.items),
        )

        store = await self._get_store()

        invoice = SalesInvoice(
            customer=CustomerSnapshot(**request.customer.model_dump()),
            items=[SalesItem(**item.model_dump()) for item in request.items],
            discount=request.discount,
            tax=request.tax,
            payment_method=request.payment_method,
            notes=request.notes,
        )
        if request.invoice_date:
            invoice.invoice_date = request.invoice_date

        invoice = await store.create(invoice)

        logger.info(
            "create_sales_invoice_complete",
            invoice_id=invoice.id,
            invoice_number=invoice.invoice_number,
            total=str(invoice.total),
        )

        return CreateSalesInvoiceResult(invoice=invoice)
