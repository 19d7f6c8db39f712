"""SQLite implementation of purchase invoice storage."""

from datetime import date

import aiosqlite

from src.core.entities import DocumentType, PurchaseInvoice, PurchaseInvoiceStatus, PurchaseItem
from src.core.interfaces.document_store import IPurchaseInvoiceStore
from src.infrastructure.storage.sqlite.base_store import (
    SQLiteNumberedStore,
    from_db,
    parse_date,
    parse_datetime,
    to_db,
)


class SQLitePurchaseInvoiceStore(SQLiteNumberedStore[PurchaseInvoice], IPurchaseInvoiceStore):
    """Purchase invoices with graded line items and advance references."""

    doc_type = DocumentType.PURCHASE_INVOICE
    table = "purchase_invoices"
    number_column = "invoice_number"
    items_table = "purchase_invoice_items"
    items_fk = "invoice_id"

    async def _insert_header(self, conn: aiosqlite.Connection, document: PurchaseInvoice) -> int:
        cursor = await conn.execute(
            """
            INSERT INTO purchase_invoices (
                invoice_number, contractor_id, invoice_date,
                cutting_rate, total_advance, total_net_weight,
                total_amount, cutting_charges, final_amount,
                status, notes, created_at, updated_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                document.invoice_number,
                document.contractor_id,
                document.invoice_date.isoformat(),
                to_db(document.cutting_rate),
                to_db(document.total_advance),
                to_db(document.total_net_weight),
                to_db(document.total_amount),
                to_db(document.cutting_charges),
                to_db(document.final_amount),
                document.status.value,
                document.notes,
                document.created_at.isoformat(),
                document.updated_at.isoformat(),
            ),
        )
        return cursor.lastrowid

    async def _update_header(self, conn: aiosqlite.Connection, document: PurchaseInvoice) -> None:
        await conn.execute(
            """
            UPDATE purchase_invoices SET
                invoice_number = ?, contractor_id = ?, invoice_date = ?,
                cutting_rate = ?, total_advance = ?, total_net_weight = ?,
                total_amount = ?, cutting_charges = ?, final_amount = ?,
                status = ?, notes = ?, updated_at = ?
            WHERE id = ?
            """,
            (
                document.invoice_number,
                document.contractor_id,
                document.invoice_date.isoformat(),
                to_db(document.cutting_rate),
                to_db(document.total_advance),
                to_db(document.total_net_weight),
                to_db(document.total_amount),
                to_db(document.cutting_charges),
                to_db(document.final_amount),
                document.status.value,
                document.notes,
                document.updated_at.isoformat(),
                document.id,
            ),
        )
        await conn.execute(
            "DELETE FROM purchase_invoice_advances WHERE invoice_id = ?",
            (document.id,),
        )

    async def _insert_items(self, conn: aiosqlite.Connection, document: PurchaseInvoice) -> None:
        for item in document.items:
            item.invoice_id = document.id
            cursor = await conn.execute(
                """
                INSERT INTO purchase_invoice_items (
                    invoice_id, grade_id, total_weight,
                    deduct_weight1, deduct_weight2, net_weight,
                    rate, amount
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    item.invoice_id,
                    item.grade_id,
                    to_db(item.total_weight),
                    to_db(item.deduct_weight1),
                    to_db(item.deduct_weight2),
                    to_db(item.net_weight),
                    to_db(item.rate),
                    to_db(item.amount),
                ),
            )
            item.id = cursor.lastrowid

        await conn.executemany(
            """
            INSERT OR IGNORE INTO purchase_invoice_advances (invoice_id, advance_payment_id)
            VALUES (?, ?)
            """,
            [(document.id, advance_id) for advance_id in document.advance_payment_ids],
        )

    async def _load(self, conn: aiosqlite.Connection, row: aiosqlite.Row) -> PurchaseInvoice:
        items_cursor = await conn.execute(
            "SELECT * FROM purchase_invoice_items WHERE invoice_id = ? ORDER BY id",
            (row["id"],),
        )
        items = [self._row_to_item(r) for r in await items_cursor.fetchall()]

        advances_cursor = await conn.execute(
            """
            SELECT advance_payment_id FROM purchase_invoice_advances
            WHERE invoice_id = ? ORDER BY advance_payment_id
            """,
            (row["id"],),
        )
        advance_ids = [r[0] for r in await advances_cursor.fetchall()]

        return PurchaseInvoice(
            id=row["id"],
            invoice_number=row["invoice_number"],
            contractor_id=row["contractor_id"],
            invoice_date=parse_date(row["invoice_date"], date.today()),
            items=items,
            cutting_rate=from_db(row["cutting_rate"]),
            advance_payment_ids=advance_ids,
            total_advance=from_db(row["total_advance"]),
            total_net_weight=from_db(row["total_net_weight"]),
            total_amount=from_db(row["total_amount"]),
            cutting_charges=from_db(row["cutting_charges"]),
            final_amount=from_db(row["final_amount"]),
            status=PurchaseInvoiceStatus(row["status"]),
            notes=row["notes"],
            created_at=parse_datetime(row["created_at"]),
            updated_at=parse_datetime(row["updated_at"]),
        )

    @staticmethod
    def _row_to_item(row: aiosqlite.Row) -> PurchaseItem:
        return PurchaseItem(
            id=row["id"],
            invoice_id=row["invoice_id"],
            grade_id=row["grade_id"],
            total_weight=from_db(row["total_weight"]),
            deduct_weight1=from_db(row["deduct_weight1"]),
            deduct_weight2=from_db(row["deduct_weight2"]),
            rate=from_db(row["rate"]),
        )
