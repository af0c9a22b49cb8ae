"""Shared pytest fixtures: in-memory counter and document stores."""

import asyncio
from collections import defaultdict
from datetime import UTC, datetime
from decimal import Decimal
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest
from pymongo.errors import AutoReconnect

from ledgerdesk.core.modules.counter.models import DocumentCategory
from ledgerdesk.core.store import Collection, DocumentQuery


class InMemoryCounterStore:
    """Counter store whose increment is atomic with respect to other tasks."""

    def __init__(self) -> None:
        self.counters: dict[tuple[DocumentCategory, int], int] = defaultdict(int)
        self.calls = 0
        self._lock = asyncio.Lock()

    async def increment_and_get(self, category: DocumentCategory, year: int) -> int:
        self.calls += 1
        await asyncio.sleep(0)  # Let concurrent callers interleave before the critical section
        async with self._lock:
            self.counters[(category, year)] += 1
            return self.counters[(category, year)]


class FlakyCounterStore(InMemoryCounterStore):
    """Fails the first `failures` increments with a pymongo connection error."""

    def __init__(self, failures: int) -> None:
        super().__init__()
        self.failures = failures

    async def increment_and_get(self, category: DocumentCategory, year: int) -> int:
        if self.failures > 0:
            self.failures -= 1
            self.calls += 1
            raise AutoReconnect("connection reset")
        return await super().increment_and_get(category, year)


def matches(doc: dict[str, Any], query: DocumentQuery) -> bool:
    status = doc.get("status")
    if query.statuses is not None and status not in query.statuses:
        return False
    if status in query.exclude_statuses:
        return False
    return query.created_before is None or doc["created_at"] <= query.created_before


class InMemoryDocumentStore:
    """DocumentStore over plain lists of documents."""

    def __init__(self) -> None:
        self.collections: dict[Collection, list[dict[str, Any]]] = defaultdict(list)

    def add(self, collection: Collection, **doc: Any) -> dict[str, Any]:
        self.collections[collection].append(doc)
        return doc

    async def count(self, collection: Collection, query: DocumentQuery) -> int:
        return sum(1 for doc in self.collections[collection] if matches(doc, query))

    async def sum(self, collection: Collection, field: str, query: DocumentQuery) -> Decimal:
        return sum((Decimal(doc[field]) for doc in self.collections[collection] if matches(doc, query)), Decimal(0))

    async def find_recent(self, collection: Collection, limit: int) -> list[dict[str, Any]]:
        docs = sorted(self.collections[collection], key=lambda doc: doc["created_at"], reverse=True)
        return docs[:limit]


class FakeCursor:
    """Async-iterable stand-in for a pymongo AsyncCursor that records its sort."""

    def __init__(self, docs: list[dict[str, Any]]) -> None:
        self.docs = docs
        self.sort_args: tuple[Any, ...] | None = None

    def sort(self, *args: Any) -> "FakeCursor":
        self.sort_args = args
        return self

    def __aiter__(self) -> "FakeCursor":
        self._iter = iter(self.docs)
        return self

    async def __anext__(self) -> dict[str, Any]:
        try:
            return next(self._iter)
        except StopIteration:
            raise StopAsyncIteration from None


@pytest.fixture
def fixed_now():
    """Mid-month instant used as "now" in period calculations."""
    return datetime(2026, 10, 19, 12, 0, tzinfo=UTC)


@pytest.fixture
def counter_store():
    return InMemoryCounterStore()


@pytest.fixture
def flaky_counter_store():
    """Factory for counter stores that fail a given number of times."""
    return FlakyCounterStore


@pytest.fixture
def document_store():
    return InMemoryDocumentStore()


@pytest.fixture
def mock_collection():
    """AsyncMock standing in for a pymongo AsyncCollection."""
    return AsyncMock()


@pytest.fixture
def mock_database(mock_collection):
    """Database mock whose get_collection always returns mock_collection."""
    database = MagicMock()
    database.get_collection.return_value = mock_collection
    return database


@pytest.fixture
def cursor_over(mock_collection):
    """Make mock_collection.find return a FakeCursor over the given documents."""

    def factory(docs: list[dict[str, Any]]) -> FakeCursor:
        cursor = FakeCursor(docs)
        mock_collection.find = MagicMock(return_value=cursor)
        return cursor

    return factory
