"""
Shared save path for numbered SQLite document stores.

Every write goes: open transaction → assign number (first save only) →
finalize totals → write header → rewrite items → commit.
"""

from abc import ABC, abstractmethod
from datetime import date, datetime
from decimal import Decimal
from typing import Any, ClassVar, Generic

import aiosqlite

from src.config import get_logger
from src.core.entities import DocumentType
from src.core.entities.common import utcnow
from src.core.exceptions import DocumentNotFoundError, DuplicateDocumentNumberError
from src.core.interfaces.document_store import DocT, ISequenceSource
from src.core.services import assign_document_number, finalize
from src.infrastructure.storage.sqlite.connection import get_connection, get_transaction
from src.infrastructure.storage.sqlite.sequence_store import SQLiteCounterSequence

logger = get_logger(__name__)


def to_db(value: Decimal) -> str:
    return str(value)


def from_db(value: Any) -> Decimal:
    return Decimal(str(value)) if value is not None else Decimal("0")


def parse_date(value: Any, default: date | None = None) -> date | None:
    if value:
        try:
            return date.fromisoformat(str(value)[:10])
        except ValueError:
            pass
    return default


def parse_datetime(value: Any) -> datetime:
    if value:
        try:
            return datetime.fromisoformat(str(value))
        except ValueError:
            pass
    return utcnow()


class SQLiteNumberedStore(ABC, Generic[DocT]):
    """Base for stores whose documents carry a generated, unique number."""

    doc_type: ClassVar[DocumentType]
    table: ClassVar[str]
    number_column: ClassVar[str]
    items_table: ClassVar[str]
    items_fk: ClassVar[str]

    def __init__(self, sequence_source: ISequenceSource | None = None):
        self._sequence = sequence_source or SQLiteCounterSequence()

    # Hooks

    def _finalize(self, document: DocT) -> DocT:
        return finalize(document)

    @abstractmethod
    async def _insert_header(self, conn: aiosqlite.Connection, document: DocT) -> int:
        """Insert the header row and return its id."""

    @abstractmethod
    async def _update_header(self, conn: aiosqlite.Connection, document: DocT) -> None:
        """Overwrite the header row of an existing document."""

    @abstractmethod
    async def _insert_items(self, conn: aiosqlite.Connection, document: DocT) -> None:
        """Insert every line item (and children) for ``document.id``."""

    @abstractmethod
    async def _load(self, conn: aiosqlite.Connection, row: aiosqlite.Row) -> DocT:
        """Build the entity from a header row, loading its items."""

    # Writes

    async def create(self, document: DocT) -> DocT:
        """Number, finalize and insert ``document``."""
        now = utcnow()
        document.created_at = now
        document.updated_at = now
        assigned = self._assigned_fields(document)
        handed_in = [getattr(obj, name) for obj, name in assigned]
        try:
            async with get_transaction() as conn:
                await assign_document_number(document, self._sequence, conn)
                self._finalize(document)
                document.id = await self._insert_header(conn, document)
                await self._insert_items(conn, document)
        except aiosqlite.IntegrityError as e:
            number = getattr(document, document.number_field)
            # Rolled back: restore the ids and number the document arrived with
            for (obj, name), value in zip(assigned, handed_in):
                setattr(obj, name, value)
            self._raise_if_duplicate(e, number)
            raise

        logger.info(
            f"{self.doc_type.value}_created",
            id=document.id,
            number=getattr(document, document.number_field),
            items=len(document.items),
        )
        return document

    async def update(self, document: DocT) -> DocT:
        """Re-finalize ``document`` and rewrite its header and items."""
        if document.id is None:
            raise DocumentNotFoundError(self.doc_type.value, "<unsaved>")

        document.updated_at = utcnow()
        try:
            async with get_transaction() as conn:
                if not await self._exists(conn, document.id):
                    raise DocumentNotFoundError(self.doc_type.value, document.id)
                await assign_document_number(document, self._sequence, conn)
                self._finalize(document)
                await self._update_header(conn, document)
                await conn.execute(
                    f"DELETE FROM {self.items_table} WHERE {self.items_fk} = ?",
                    (document.id,),
                )
                await self._insert_items(conn, document)
        except aiosqlite.IntegrityError as e:
            self._raise_if_duplicate(e, getattr(document, document.number_field))
            raise

        logger.info(
            f"{self.doc_type.value}_updated",
            id=document.id,
            number=getattr(document, document.number_field),
        )
        return document

    async def update_status(
        self,
        document_id: int,
        status: str,
        expected_status: str | None = None,
        **fields: Any,
    ) -> bool:
        """
        Set status and any extra header columns given as keywords.

        With ``expected_status`` the row only changes while it still holds that
        status, so a concurrent change makes this return False.
        """
        columns = {"status": getattr(status, "value", status), **fields}
        columns["updated_at"] = utcnow().isoformat()
        assignments = ", ".join(f"{name} = ?" for name in columns)
        where, params = "id = ?", [document_id]
        if expected_status is not None:
            where += " AND status = ?"
            params.append(getattr(expected_status, "value", expected_status))

        async with get_transaction() as conn:
            cursor = await conn.execute(
                f"UPDATE {self.table} SET {assignments} WHERE {where}",
                (*columns.values(), *params),
            )
            updated = cursor.rowcount > 0

        logger.info(
            f"{self.doc_type.value}_status_updated",
            id=document_id,
            status=columns["status"],
            updated=updated,
        )
        return updated

    async def delete(self, document_id: int) -> bool:
        """Delete a document; items go with it via ON DELETE CASCADE."""
        async with get_transaction() as conn:
            cursor = await conn.execute(
                f"DELETE FROM {self.table} WHERE id = ?", (document_id,)
            )
            deleted = cursor.rowcount > 0

        logger.info(f"{self.doc_type.value}_deleted", id=document_id, deleted=deleted)
        return deleted

    # Reads

    async def get(self, document_id: int) -> DocT | None:
        async with get_connection() as conn:
            cursor = await conn.execute(
                f"SELECT * FROM {self.table} WHERE id = ?", (document_id,)
            )
            row = await cursor.fetchone()
            if row is None:
                return None
            return await self._load(conn, row)

    async def get_by_number(self, number: str) -> DocT | None:
        async with get_connection() as conn:
            cursor = await conn.execute(
                f"SELECT * FROM {self.table} WHERE {self.number_column} = ?",
                (number,),
            )
            row = await cursor.fetchone()
            if row is None:
                return None
            return await self._load(conn, row)

    async def list_documents(self, limit: int = 100, offset: int = 0) -> list[DocT]:
        async with get_connection() as conn:
            cursor = await conn.execute(
                f"""
                SELECT * FROM {self.table}
                ORDER BY created_at DESC, id DESC
                LIMIT ? OFFSET ?
                """,
                (limit, offset),
            )
            rows = await cursor.fetchall()
            return [await self._load(conn, row) for row in rows]

    async def count(self) -> int:
        async with get_connection() as conn:
            cursor = await conn.execute(f"SELECT COUNT(*) FROM {self.table}")
            row = await cursor.fetchone()
            return int(row[0])

    # Helpers

    def _assigned_fields(self, document: DocT) -> list[tuple[Any, str]]:
        """(object, attribute) pairs a successful insert overwrites."""
        fields: list[tuple[Any, str]] = [(document, "id"), (document, document.number_field)]
        for item in document.items:
            fields += [(item, "id"), (item, self.items_fk)]
        return fields

    async def _exists(self, conn: aiosqlite.Connection, document_id: int) -> bool:
        cursor = await conn.execute(
            f"SELECT 1 FROM {self.table} WHERE id = ?", (document_id,)
        )
        return await cursor.fetchone() is not None

    def _raise_if_duplicate(self, error: aiosqlite.IntegrityError, number: str | None) -> None:
        """Translate a UNIQUE violation on the number column."""
        if f"{self.table}.{self.number_column}" not in str(error):
            return
        logger.warning(
            "duplicate_document_number",
            doc_type=self.doc_type.value,
            number=number,
        )
        raise DuplicateDocumentNumberError(self.doc_type.value, number) from error
