from typing import Any
from uuid import uuid4

from pymongo import ReturnDocument
from pymongo.asynchronous.database import AsyncDatabase

from ledgerdesk.core.core import Service
from ledgerdesk.core.modules.counter.models import DocumentCategory, SequenceCounter


class CounterService(Service):
    """Service for managing auto-incrementing counters per document category and year."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._collection = database.get_collection("counters")

    async def on_start(self) -> None:
        """Create indexes on startup."""
        # Unique compound index: concurrent first-time upserts for the same key collide instead of duplicating
        await self._collection.create_index([("category", 1), ("year", 1)], unique=True)

    async def increment_and_get(self, category: DocumentCategory, year: int) -> int:
        """Atomically increment and return the claimed sequence number for a category and year.

        Raises pymongo errors unchanged (DuplicateKeyError on a racing first upsert,
        ConnectionFailure when the server is unreachable); callers decide whether to retry.
        """
        result = await self._collection.find_one_and_update(
            {"category": category, "year": year},
            {"$inc": {"seq": 1}, "$setOnInsert": {"_id": uuid4()}},
            upsert=True,
            return_document=ReturnDocument.AFTER,
        )

        # If it was just created (upserted), seq will be 1
        # Otherwise, it returns the incremented value
        return int(result["seq"])

    async def get_counter(self, category: DocumentCategory, year: int) -> SequenceCounter | None:
        """Get the counter document without incrementing."""
        doc = await self._collection.find_one({"category": category, "year": year})
        if doc is None:
            return None
        return SequenceCounter.model_validate(doc)

    async def get_current_sequence(self, category: DocumentCategory, year: int) -> int:
        """Get the last claimed sequence number (0 if nothing was allocated yet)."""
        counter = await self.get_counter(category, year)
        if counter is None:
            return 0
        return counter.seq
