"""SQLite implementation of payroll storage."""

from datetime import date
from typing import Any

import aiosqlite

from src.config import get_logger
from src.core.entities import (
    ComponentType,
    DocumentType,
    PaymentDetails,
    Payroll,
    PayrollComponent,
    PayrollItem,
    PayrollItemStatus,
    PayrollStatus,
)
from src.core.interfaces.document_store import IPayrollStore
from src.infrastructure.storage.sqlite.base_store import (
    SQLiteNumberedStore,
    from_db,
    parse_date,
    parse_datetime,
    to_db,
)
from src.infrastructure.storage.sqlite.connection import get_connection, get_transaction

logger = get_logger(__name__)


class SQLitePayrollStore(SQLiteNumberedStore[Payroll], IPayrollStore):
    """
    Payroll runs.

    Earnings and deductions share the ``payroll_components`` table, split by
    ``type``.
    """

    doc_type = DocumentType.PAYROLL
    table = "payrolls"
    number_column = "payroll_id"
    items_table = "payroll_items"
    items_fk = "payroll_id"

    def _assigned_fields(self, document: Payroll) -> list[tuple[Any, str]]:
        fields = super()._assigned_fields(document)
        for item in document.items:
            fields += [(c, "id") for c in (*item.earnings, *item.deductions)]
        return fields

    async def _insert_header(self, conn: aiosqlite.Connection, document: Payroll) -> int:
        cursor = await conn.execute(
            """
            INSERT INTO payrolls (
                payroll_id, month, year, from_date, to_date,
                total_basic_salary, total_gross_salary,
                total_deductions, total_net_salary,
                status, approved_by, notes, created_at, updated_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                document.payroll_id,
                document.month,
                document.year,
                document.from_date.isoformat(),
                document.to_date.isoformat(),
                to_db(document.total_basic_salary),
                to_db(document.total_gross_salary),
                to_db(document.total_deductions),
                to_db(document.total_net_salary),
                document.status.value,
                document.approved_by,
                document.notes,
                document.created_at.isoformat(),
                document.updated_at.isoformat(),
            ),
        )
        return cursor.lastrowid

    async def _update_header(self, conn: aiosqlite.Connection, document: Payroll) -> None:
        await conn.execute(
            """
            UPDATE payrolls SET
                payroll_id = ?, month = ?, year = ?, from_date = ?, to_date = ?,
                total_basic_salary = ?, total_gross_salary = ?,
                total_deductions = ?, total_net_salary = ?,
                status = ?, approved_by = ?, notes = ?, updated_at = ?
            WHERE id = ?
            """,
            (
                document.payroll_id,
                document.month,
                document.year,
                document.from_date.isoformat(),
                document.to_date.isoformat(),
                to_db(document.total_basic_salary),
                to_db(document.total_gross_salary),
                to_db(document.total_deductions),
                to_db(document.total_net_salary),
                document.status.value,
                document.approved_by,
                document.notes,
                document.updated_at.isoformat(),
                document.id,
            ),
        )

    async def _insert_items(self, conn: aiosqlite.Connection, document: Payroll) -> None:
        for item in document.items:
            item.payroll_id = document.id
            cursor = await conn.execute(
                """
                INSERT INTO payroll_items (
                    payroll_id, employee_id, basic_salary,
                    gross_salary, net_salary, status,
                    payment_method, payment_reference, paid_on
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    item.payroll_id,
                    item.employee_id,
                    to_db(item.basic_salary),
                    to_db(item.gross_salary),
                    to_db(item.net_salary),
                    item.status.value,
                    item.payment.method,
                    item.payment.reference,
                    item.payment.paid_on.isoformat() if item.payment.paid_on else None,
                ),
            )
            item.id = cursor.lastrowid

            components = [(ComponentType.EARNING, c) for c in item.earnings] + [
                (ComponentType.DEDUCTION, c) for c in item.deductions
            ]
            for component_type, component in components:
                component_cursor = await conn.execute(
                    """
                    INSERT INTO payroll_components (payroll_item_id, type, name, amount)
                    VALUES (?, ?, ?, ?)
                    """,
                    (item.id, component_type.value, component.name, to_db(component.amount)),
                )
                component.id = component_cursor.lastrowid

    async def _load(self, conn: aiosqlite.Connection, row: aiosqlite.Row) -> Payroll:
        items_cursor = await conn.execute(
            "SELECT * FROM payroll_items WHERE payroll_id = ? ORDER BY id",
            (row["id"],),
        )
        items = [await self._load_item(conn, r) for r in await items_cursor.fetchall()]

        return Payroll(
            id=row["id"],
            payroll_id=row["payroll_id"],
            month=row["month"],
            year=row["year"],
            from_date=parse_date(row["from_date"]),
            to_date=parse_date(row["to_date"]),
            items=items,
            total_basic_salary=from_db(row["total_basic_salary"]),
            total_gross_salary=from_db(row["total_gross_salary"]),
            total_deductions=from_db(row["total_deductions"]),
            total_net_salary=from_db(row["total_net_salary"]),
            status=PayrollStatus(row["status"]),
            approved_by=row["approved_by"],
            notes=row["notes"],
            created_at=parse_datetime(row["created_at"]),
            updated_at=parse_datetime(row["updated_at"]),
        )

    @staticmethod
    async def _load_item(conn: aiosqlite.Connection, row: aiosqlite.Row) -> PayrollItem:
        cursor = await conn.execute(
            """
            SELECT * FROM payroll_components
            WHERE payroll_item_id = ?
            ORDER BY id
            """,
            (row["id"],),
        )
        earnings: list[PayrollComponent] = []
        deductions: list[PayrollComponent] = []
        for r in await cursor.fetchall():
            component = PayrollComponent(id=r["id"], name=r["name"], amount=from_db(r["amount"]))
            if r["type"] == ComponentType.EARNING.value:
                earnings.append(component)
            else:
                deductions.append(component)

        return PayrollItem(
            id=row["id"],
            payroll_id=row["payroll_id"],
            employee_id=row["employee_id"],
            basic_salary=from_db(row["basic_salary"]),
            earnings=earnings,
            deductions=deductions,
            gross_salary=from_db(row["gross_salary"]),
            net_salary=from_db(row["net_salary"]),
            status=PayrollItemStatus(row["status"]),
            payment=PaymentDetails(
                method=row["payment_method"],
                reference=row["payment_reference"],
                paid_on=parse_date(row["paid_on"]),
            ),
        )

    async def get_item(self, item_id: int) -> PayrollItem | None:
        async with get_connection() as conn:
            cursor = await conn.execute("SELECT * FROM payroll_items WHERE id = ?", (item_id,))
            row = await cursor.fetchone()
            if row is None:
                return None
            return await self._load_item(conn, row)

    async def list_documents(
        self,
        limit: int = 100,
        offset: int = 0,
        *,
        employee_id: int | None = None,
        from_date: date | None = None,
        to_date: date | None = None,
    ) -> list[Payroll]:
        """
        Payroll runs, newest period first.

        ``employee_id`` keeps runs that pay that employee; ``from_date`` and
        ``to_date`` keep runs whose period overlaps the range.
        """
        conditions, params = [], []
        if employee_id is not None:
            conditions.append(
                "EXISTS (SELECT 1 FROM payroll_items i"
                " WHERE i.payroll_id = payrolls.id AND i.employee_id = ?)"
            )
            params.append(employee_id)
        if from_date is not None:
            conditions.append("to_date >= ?")
            params.append(from_date.isoformat())
        if to_date is not None:
            conditions.append("from_date <= ?")
            params.append(to_date.isoformat())
        where = f"WHERE {' AND '.join(conditions)}" if conditions else ""

        async with get_connection() as conn:
            cursor = await conn.execute(
                f"""
                SELECT * FROM payrolls {where}
                ORDER BY year DESC, month DESC, id DESC
                LIMIT ? OFFSET ?
                """,
                (*params, limit, offset),
            )
            rows = await cursor.fetchall()
            return [await self._load(conn, row) for row in rows]

    async def update_item_status(
        self,
        item_id: int,
        status: PayrollItemStatus,
        payment_reference: str | None = None,
        paid_on: date | None = None,
        expected_status: PayrollItemStatus | None = None,
    ) -> bool:
        """
        Set item status; payment reference and date are kept when not given.

        ``expected_status`` makes the update conditional on the current status.
        """
        expected = expected_status.value if expected_status else None
        async with get_transaction() as conn:
            cursor = await conn.execute(
                """
                UPDATE payroll_items SET
                    status = ?,
                    payment_reference = COALESCE(?, payment_reference),
                    paid_on = COALESCE(?, paid_on)
                WHERE id = ? AND (? IS NULL OR status = ?)
                """,
                (
                    status.value,
                    payment_reference,
                    paid_on.isoformat() if paid_on else None,
                    item_id,
                    expected,
                    expected,
                ),
            )
            updated = cursor.rowcount > 0

        logger.info(
            "payroll_item_status_updated",
            item_id=item_id,
            status=status.value,
            updated=updated,
        )
        return updated
