from datetime import datetime
from typing import Any

from pymongo.asynchronous.database import AsyncDatabase

from ledgerdesk.core.core import Service
from ledgerdesk.core.modules.counter.models import DocumentCategory
from ledgerdesk.core.modules.numbering.allocator import IdentifierAllocator, RetryPolicy


class NumberingService(Service):
    """Assigns PREFIX-YEAR-SEQ numbers to invoices, orders and tickets."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._allocator: IdentifierAllocator | None = None

    @property
    def allocator(self) -> IdentifierAllocator:
        if self._allocator is None:
            config = self.core.config
            policy = RetryPolicy(
                max_retries=config.allocation_max_retries,
                backoff_seconds=config.allocation_backoff_seconds,
                backoff_max_seconds=config.allocation_backoff_max_seconds,
            )
            self._allocator = IdentifierAllocator(self.core.services.counter, policy)
        return self._allocator

    async def allocate(self, category: DocumentCategory, now: datetime | None = None) -> str:
        """Allocate the next identifier for a document category."""
        return await self.allocator.allocate(category, now)

    async def current_sequence(self, category: DocumentCategory, year: int) -> int:
        """Last claimed sequence number for a category and year."""
        return await self.core.services.counter.get_current_sequence(category, year)
