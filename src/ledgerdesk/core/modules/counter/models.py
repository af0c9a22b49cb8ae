"""Per-year sequence counters for document numbering."""

from enum import StrEnum
from typing import Protocol

from ledgerdesk.core.db import MongoModel


class DocumentCategory(StrEnum):
    """Document kinds that carry a human-readable sequential number."""

    INVOICE = "invoice"
    ORDER = "order"
    TICKET = "ticket"

    @property
    def prefix(self) -> str:
        return CATEGORY_PREFIXES[self]


CATEGORY_PREFIXES: dict[DocumentCategory, str] = {
    DocumentCategory.INVOICE: "INV",
    DocumentCategory.ORDER: "ORD",
    DocumentCategory.TICKET: "TKT",
}


class SequenceCounter(MongoModel):
    """Atomic counter for sequential numbers per category and calendar year.

    Uses MongoDB atomic operations to prevent duplicates.
    Indexed on (category, year) - unique.
    """

    category: DocumentCategory
    year: int
    seq: int = 0  # Last claimed value; next number will be seq + 1

    @property
    def next_value(self) -> int:
        return self.seq + 1


class CounterStore(Protocol):
    """Durable source of sequence values, one series per (category, year)."""

    async def increment_and_get(self, category: DocumentCategory, year: int) -> int:
        """Atomically claim and return the next sequence value."""
        ...
