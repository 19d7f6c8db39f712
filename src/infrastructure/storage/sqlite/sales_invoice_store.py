"""SQLite implementation of sales invoice storage."""

from datetime import date

import aiosqlite

from src.core.entities import (
    CustomerSnapshot,
    DocumentType,
    PaymentStatus,
    SalesInvoice,
    SalesInvoiceStatus,
    SalesItem,
)
from src.core.interfaces.document_store import ISalesInvoiceStore, ISequenceSource
from src.core.services import finalize_sales_invoice
from src.infrastructure.storage.sqlite.base_store import (
    SQLiteNumberedStore,
    from_db,
    parse_date,
    parse_datetime,
    to_db,
)


class SQLiteSalesInvoiceStore(SQLiteNumberedStore[SalesInvoice], ISalesInvoiceStore):
    """Sales invoices with an embedded customer snapshot."""

    doc_type = DocumentType.SALES_INVOICE
    table = "sales_invoices"
    number_column = "invoice_number"
    items_table = "sales_invoice_items"
    items_fk = "invoice_id"

    def __init__(
        self,
        sequence_source: ISequenceSource | None = None,
        apply_line_discount: bool = False,
    ):
        super().__init__(sequence_source)
        self.apply_line_discount = apply_line_discount

    def _finalize(self, document: SalesInvoice) -> SalesInvoice:
        return finalize_sales_invoice(document, apply_line_discount=self.apply_line_discount)

    async def _insert_header(self, conn: aiosqlite.Connection, document: SalesInvoice) -> int:
        customer = document.customer
        cursor = await conn.execute(
            """
            INSERT INTO sales_invoices (
                invoice_number, invoice_date,
                customer_name, customer_address, customer_phone, customer_email,
                sub_total, discount, tax, total,
                payment_method, payment_status, status, notes,
                created_at, updated_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                document.invoice_number,
                document.invoice_date.isoformat(),
                customer.name,
                customer.address,
                customer.phone,
                customer.email,
                to_db(document.sub_total),
                to_db(document.discount),
                to_db(document.tax),
                to_db(document.total),
                document.payment_method,
                document.payment_status.value,
                document.status.value,
                document.notes,
                document.created_at.isoformat(),
                document.updated_at.isoformat(),
            ),
        )
        return cursor.lastrowid

    async def _update_header(self, conn: aiosqlite.Connection, document: SalesInvoice) -> None:
        customer = document.customer
        await conn.execute(
            """
            UPDATE sales_invoices SET
                invoice_number = ?, invoice_date = ?,
                customer_name = ?, customer_address = ?,
                customer_phone = ?, customer_email = ?,
                sub_total = ?, discount = ?, tax = ?, total = ?,
                payment_method = ?, payment_status = ?, status = ?,
                notes = ?, updated_at = ?
            WHERE id = ?
            """,
            (
                document.invoice_number,
                document.invoice_date.isoformat(),
                customer.name,
                customer.address,
                customer.phone,
                customer.email,
                to_db(document.sub_total),
                to_db(document.discount),
                to_db(document.tax),
                to_db(document.total),
                document.payment_method,
                document.payment_status.value,
                document.status.value,
                document.notes,
                document.updated_at.isoformat(),
                document.id,
            ),
        )

    async def _insert_items(self, conn: aiosqlite.Connection, document: SalesInvoice) -> None:
        for item in document.items:
            item.invoice_id = document.id
            cursor = await conn.execute(
                """
                INSERT INTO sales_invoice_items (
                    invoice_id, product_id, quantity,
                    unit_price, discount, sub_total
                ) VALUES (?, ?, ?, ?, ?, ?)
                """,
                (
                    item.invoice_id,
                    item.product_id,
                    to_db(item.quantity),
                    to_db(item.unit_price),
                    to_db(item.discount),
                    to_db(item.sub_total),
                ),
            )
            item.id = cursor.lastrowid

    async def _load(self, conn: aiosqlite.Connection, row: aiosqlite.Row) -> SalesInvoice:
        items_cursor = await conn.execute(
            "SELECT * FROM sales_invoice_items WHERE invoice_id = ? ORDER BY id",
            (row["id"],),
        )
        items = [
            SalesItem(
                id=r["id"],
                invoice_id=r["invoice_id"],
                product_id=r["product_id"],
                quantity=from_db(r["quantity"]),
                unit_price=from_db(r["unit_price"]),
                discount=from_db(r["discount"]),
            )
            for r in await items_cursor.fetchall()
        ]

        return SalesInvoice(
            id=row["id"],
            invoice_number=row["invoice_number"],
            invoice_date=parse_date(row["invoice_date"], date.today()),
            customer=CustomerSnapshot(
                name=row["customer_name"],
                address=row["customer_address"],
                phone=row["customer_phone"],
                email=row["customer_email"],
            ),
            items=items,
            sub_total=from_db(row["sub_total"]),
            discount=from_db(row["discount"]),
            tax=from_db(row["tax"]),
            total=from_db(row["total"]),
            payment_method=row["payment_method"],
            payment_status=PaymentStatus(row["payment_status"]),
            status=SalesInvoiceStatus(row["status"]),
            notes=row["notes"],
            created_at=parse_datetime(row["created_at"]),
            updated_at=parse_datetime(row["updated_at"]),
        )
