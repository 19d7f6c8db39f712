"""SQLite sequence sources for document numbering."""

from typing import Literal

import aiosqlite

from src.config import get_logger
from src.core.entities import DocumentType
from src.core.exceptions import ConfigurationError
from src.core.interfaces.document_store import ISequenceSource

logger = get_logger(__name__)

DOCUMENT_TABLES: dict[DocumentType, str] = {
    DocumentType.PAYROLL: "payrolls",
    DocumentType.PURCHASE_INVOICE: "purchase_invoices",
    DocumentType.SALES_INVOICE: "sales_invoices",
}

SequenceStrategy = Literal["counter", "count"]


class SQLiteCounterSequence(ISequenceSource):
    """
    Atomic per-type counter kept in ``document_sequences``.

    The caller's ``BEGIN IMMEDIATE`` transaction holds SQLite's write lock,
    so concurrent creators increment the row one after another.
    A missing counter row is seeded from the current document count, which
    continues a series started by ``SQLiteCountSequence``.
    """

    async def next_sequence(self, conn: aiosqlite.Connection, doc_type: DocumentType) -> int:
        table = DOCUMENT_TABLES[doc_type]
        # "WHERE true" disambiguates INSERT ... SELECT from the ON CONFLICT clause
        cursor = await conn.execute(
            f"""
            INSERT INTO document_sequences (doc_type, value)
            SELECT ?, COUNT(*) + 1 FROM {table} WHERE true
            ON CONFLICT(doc_type) DO UPDATE SET
                value = value + 1,
                updated_at = datetime('now')
            RETURNING value
            """,
            (doc_type.value,),
        )
        row = await cursor.fetchone()
        await cursor.close()
        return int(row[0])

    async def current_value(self, conn: aiosqlite.Connection, doc_type: DocumentType) -> int:
        """Last issued sequence, 0 if none has been issued."""
        cursor = await conn.execute(
            "SELECT value FROM document_sequences WHERE doc_type = ?",
            (doc_type.value,),
        )
        row = await cursor.fetchone()
        return int(row[0]) if row else 0


class SQLiteCountSequence(ISequenceSource):
    """
    Legacy ``COUNT(*) + 1`` sequence.

    Reuses a number once a document has been deleted; the UNIQUE number
    column turns the clash into ``DuplicateDocumentNumberError``. Store
    writes read the count under ``BEGIN IMMEDIATE``, so concurrent creators
    still see each other's rows.
    """

    async def next_sequence(self, conn: aiosqlite.Connection, doc_type: DocumentType) -> int:
        cursor = await conn.execute(f"SELECT COUNT(*) FROM {DOCUMENT_TABLES[doc_type]}")
        row = await cursor.fetchone()
        return int(row[0]) + 1


def create_sequence_source(strategy: SequenceStrategy) -> ISequenceSource:
    """Build the sequence source for a configured strategy name."""
    if strategy == "counter":
        return SQLiteCounterSequence()
    if strategy == "count":
        logger.warning("count_based_numbering_enabled")
        return SQLiteCountSequence()
    raise ConfigurationError(f"Unknown numbering strategy: {strategy}")
