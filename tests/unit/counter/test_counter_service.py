"""Tests for CounterService against a mocked MongoDB collection."""

from unittest.mock import ANY
from uuid import UUID, uuid4

import pytest
from pymongo import ReturnDocument

from ledgerdesk.core.modules.counter.models import DocumentCategory, SequenceCounter
from ledgerdesk.core.modules.counter.service import CounterService


class TestCounterService:
    @pytest.mark.asyncio
    async def test_on_start_creates_unique_index(self, mock_database, mock_collection):
        service = CounterService(mock_database)
        await service.on_start()

        mock_database.get_collection.assert_called_with("counters")
        mock_collection.create_index.assert_awaited_once_with([("category", 1), ("year", 1)], unique=True)

    @pytest.mark.asyncio
    async def test_increment_is_single_atomic_upsert(self, mock_database, mock_collection):
        mock_collection.find_one_and_update.return_value = {"_id": uuid4(), "category": "invoice", "year": 2026, "seq": 7}
        service = CounterService(mock_database)

        assert await service.increment_and_get(DocumentCategory.INVOICE, 2026) == 7
        mock_collection.find_one_and_update.assert_awaited_once_with(
            {"category": DocumentCategory.INVOICE, "year": 2026},
            {"$inc": {"seq": 1}, "$setOnInsert": {"_id": ANY}},
            upsert=True,
            return_document=ReturnDocument.AFTER,
        )

    @pytest.mark.asyncio
    async def test_upserted_counter_gets_uuid_id(self, mock_database, mock_collection):
        mock_collection.find_one_and_update.return_value = {"seq": 1}
        service = CounterService(mock_database)
        await service.increment_and_get(DocumentCategory.TICKET, 2026)

        update = mock_collection.find_one_and_update.await_args.args[1]
        assert isinstance(update["$setOnInsert"]["_id"], UUID)

    @pytest.mark.asyncio
    async def test_current_sequence_without_counter_is_zero(self, mock_database, mock_collection):
        mock_collection.find_one.return_value = None
        service = CounterService(mock_database)
        assert await service.get_current_sequence(DocumentCategory.ORDER, 2026) == 0

    @pytest.mark.asyncio
    async def test_current_sequence_reads_last_claimed_value(self, mock_database, mock_collection):
        mock_collection.find_one.return_value = {"_id": uuid4(), "category": "order", "year": 2026, "seq": 12}
        service = CounterService(mock_database)

        counter = await service.get_counter(DocumentCategory.ORDER, 2026)
        assert counter is not None
        assert counter.next_value == 13
        assert await service.get_current_sequence(DocumentCategory.ORDER, 2026) == 12


class TestDocumentCategory:
    def test_prefixes(self):
        assert [category.prefix for category in DocumentCategory] == ["INV", "ORD", "TKT"]

    def test_new_counter_starts_at_one(self):
        assert SequenceCounter(category=DocumentCategory.INVOICE, year=2026).next_value == 1
