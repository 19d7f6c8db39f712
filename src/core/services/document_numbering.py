"""
Sequential document numbers: prefix + YY + MM + zero-padded sequence.

Examples: ``PAY24060001``, ``PUR24060001``, ``SAL24060001``.

The sequence itself comes from an ``ISequenceSource``; this module only
decides whether a number is needed and how it is written.
"""

import re
from datetime import datetime
from typing import Any, NamedTuple

from src.config import get_logger
from src.core.entities import DocumentType, FinalizableDocument
from src.core.exceptions import ValidationError
from src.core.interfaces.document_store import ISequenceSource

logger = get_logger(__name__)

SEQUENCE_WIDTH = 4

NUMBER_PATTERN = re.compile(r"^(PAY|PUR|SAL)(\d{2})(\d{2})(\d{4,})$")


class DocumentNumber(NamedTuple):
    doc_type: DocumentType
    year: int  # two-digit
    month: int
    sequence: int


def format_document_number(doc_type: DocumentType, sequence: int, now: datetime) -> str:
    """Render a document number. Sequences past 9999 keep every digit."""
    if sequence < 1:
        raise ValueError(f"Sequence must be positive, got {sequence}")
    return f"{doc_type.prefix}{now:%y}{now:%m}{sequence:0{SEQUENCE_WIDTH}d}"


def parse_document_number(number: str) -> DocumentNumber:
    """Split a document number into its parts."""
    match = NUMBER_PATTERN.match(number or "")
    if not match:
        raise ValidationError("number", "Not a valid document number", number)
    prefix, yy, mm, seq = match.groups()
    month = int(mm)
    if not 1 <= month <= 12:
        raise ValidationError("number", f"Invalid month segment '{mm}'", number)
    return DocumentNumber(
        doc_type=DocumentType.from_prefix(prefix),
        year=int(yy),
        month=month,
        sequence=int(seq),
    )


async def assign_document_number(
    document: FinalizableDocument,
    sequence_source: ISequenceSource,
    conn: Any,
    now: datetime | None = None,
) -> str:
    """
    Give ``document`` a number unless it already has one.

    Returns the (possibly pre-existing) number. The year and month come from
    ``now`` (local time by default), not from the document's own date.
    """
    existing = getattr(document, document.number_field)
    if existing:
        return existing

    sequence = await sequence_source.next_sequence(conn, document.doc_type)
    number = format_document_number(document.doc_type, sequence, now or datetime.now())
    setattr(document, document.number_field, number)

    logger.debug(
        "document_number_assigned",
        doc_type=document.doc_type.value,
        number=number,
        sequence=sequence,
    )
    return number
