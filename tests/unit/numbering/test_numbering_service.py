"""Tests for NumberingService wiring of config into the allocator."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from ledgerdesk.config import Config
from ledgerdesk.core.modules.counter.models import DocumentCategory
from ledgerdesk.core.modules.numbering.service import NumberingService


@pytest.fixture
def core(counter_store):
    core = MagicMock()
    core.config = Config(
        database_url="mongodb://localhost:27017/ledgerdesk_test",
        host="127.0.0.1",
        port=8000,
        debug=False,
        allocation_max_retries=5,
        allocation_backoff_seconds=0.01,
    )
    core.services.counter = counter_store
    return core


@pytest.fixture
def service(mock_database, core):
    service = NumberingService(mock_database)
    service.set_core(core)
    return service


def test_allocator_uses_configured_policy(service):
    policy = service.allocator.policy
    assert policy.max_retries == 5
    assert policy.backoff_seconds == 0.01
    assert service.allocator is service.allocator  # built once


@pytest.mark.asyncio
async def test_allocate_through_counter(service, fixed_now):
    assert await service.allocate(DocumentCategory.INVOICE, fixed_now) == "INV-2026-001"
    assert await service.allocate(DocumentCategory.INVOICE, fixed_now) == "INV-2026-002"


@pytest.mark.asyncio
async def test_current_sequence_delegates_to_counter(service, core):
    core.services.counter = MagicMock(get_current_sequence=AsyncMock(return_value=41))
    assert await service.current_sequence(DocumentCategory.ORDER, 2026) == 41
