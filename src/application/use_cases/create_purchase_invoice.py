"""Create Purchase Invoice Use Case."""

from dataclasses import dataclass

from src.application.dto.requests import CreatePurchaseInvoiceRequest
from src.config import get_logger, get_settings
from src.core.entities.purchase_invoice import PurchaseInvoice, PurchaseItem
from src.core.interfaces.document_store import IPurchaseInvoiceStore

logger = get_logger(__name__)


@dataclass
class CreatePurchaseInvoiceResult:
    """Result of creating a purchase invoice."""

    invoice: PurchaseInvoice


class CreatePurchaseInvoiceUseCase:
    """Build a purchase invoice from a request and persist it with a PUR number."""

    def __init__(self, store: IPurchaseInvoiceStore | None = None):
        self._store = store

    async def _get_store(self) -> IPurchaseInvoiceStore:
        if self._store is None:
            from src.infrastructure.storage.sqlite import get_purchase_invoice_store

            self._store = await get_purchase_invoice_store()
        return self._store

    async def execute(
        self, request: CreatePurchaseInvoiceRequest
    ) -> CreatePurchaseInvoiceResult:
        """Execute create purchase invoice use case."""
        logger.info(
            "create_purchase_invoice_started",
            contractor_id=request.contractor_id,
            items=len(request.items),
        )

        store = await self._get_store()

        cutting_rate = request.cutting_rate
        if cutting_rate is None:
            cutting_rate = get_settings().purchase.default_cutting_rate

        invoice = PurchaseInvoice(
            contractor_id=request.contractor_id,
            items=[PurchaseItem(**item.model_dump()) for item in request.items],
            cutting_rate=cutting_rate,
            advance_payment_ids=request.advance_payment_ids,
            total_advance=request.total_advance,
            notes=request.notes,
        )
        if request.invoice_date:
            invoice.invoice_date = request.invoice_date

        # Store assigns the number and derives the totals
        invoice = await store.create(invoice)

        logger.info(
            "create_purchase_invoice_complete",
            invoice_id=invoice.id,
            invoice_number=invoice.invoice_number,
            final_amount=str(invoice.final_amount),
        )

        return CreatePurchaseInvoiceResult(invoice=invoice)
