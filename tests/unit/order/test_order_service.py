"""Tests for OrderService with a mocked collection and core."""

from datetime import UTC, datetime
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest

from ledgerdesk.core.modules.counter.models import DocumentCategory
from ledgerdesk.core.modules.order.models import Order, OrderStatus, OrderType
from ledgerdesk.core.modules.order.service import OrderService
from ledgerdesk.core.modules.totals.models import LineItem, PricedLineItem
from ledgerdesk.errors import InvalidItemsError, ValidationError

DELIVERY = datetime(2026, 11, 15, tzinfo=UTC)


@pytest.fixture
def core():
    core = MagicMock()
    core.services.customer.ensure_exists = AsyncMock()
    core.services.numbering.allocate = AsyncMock(return_value="ORD-2026-007")
    return core


@pytest.fixture
def service(mock_database, core):
    service = OrderService(mock_database)
    service.set_core(core)
    return service


@pytest.fixture
def stored_order():
    return Order(
        number="ORD-2026-007",
        customer_id=uuid4(),
        type=OrderType.PRODUCT,
        items=[PricedLineItem(quantity=1, unit_price=Decimal(50), line_total=Decimal(50))],
        subtotal=Decimal(50),
        tax=Decimal(0),
        discount=Decimal(0),
        total=Decimal(50),
        delivery_date=DELIVERY,
    )


@pytest.mark.asyncio
async def test_create_order_with_overrides(service, core, mock_collection):
    order = await service.create_order(
        uuid4(),
        OrderType.SERVICE,
        [LineItem(description="Setup", quantity=1, unit_price=Decimal(100))],
        DELIVERY,
        subtotal=Decimal(80),
        discount=Decimal(10),
    )

    assert order.number == "ORD-2026-007"
    assert order.status == OrderStatus.PENDING
    assert (order.subtotal, order.tax, order.discount, order.total) == (Decimal(80), Decimal(0), Decimal(10), Decimal(70))
    assert order.items[0].line_total == Decimal(100)
    assert order.order_date == order.created_at
    assert core.services.numbering.allocate.await_args.args[0] == DocumentCategory.ORDER
    mock_collection.insert_one.assert_awaited_once()


@pytest.mark.asyncio
async def test_create_order_rejects_bad_quantity(service, core):
    with pytest.raises(InvalidItemsError, match="Item 1"):
        await service.create_order(uuid4(), OrderType.PRODUCT, [LineItem(quantity=0, unit_price=Decimal(1))], DELIVERY)
    core.services.numbering.allocate.assert_not_awaited()


@pytest.mark.asyncio
async def test_update_order_items_recomputes(service, mock_collection, stored_order):
    mock_collection.find_one.return_value = stored_order.to_mongo()

    await service.update_order(
        stored_order.id, items=[LineItem(quantity=2, unit_price=Decimal("0.10"))], tax=Decimal("0.02")
    )

    update = mock_collection.update_one.await_args.args[1]["$set"]
    assert update["subtotal"] == Decimal("0.20")
    assert update["total"] == Decimal("0.22")


@pytest.mark.asyncio
async def test_update_order_discount_without_items_rejected(service, mock_collection, stored_order):
    mock_collection.find_one.return_value = stored_order.to_mongo()

    with pytest.raises(ValidationError):
        await service.update_order(stored_order.id, discount=Decimal(5))
    mock_collection.update_one.assert_not_awaited()


@pytest.mark.asyncio
async def test_update_order_status(service, mock_collection, stored_order):
    mock_collection.find_one.return_value = stored_order.to_mongo()

    await service.update_status(stored_order.id, OrderStatus.SHIPPED)

    assert mock_collection.update_one.await_args.args[1]["$set"]["status"] == OrderStatus.SHIPPED


@pytest.mark.asyncio
async def test_list_orders_filters_by_type_and_summarizes(service, mock_collection, cursor_over, stored_order):
    completed = stored_order.model_copy(update={"id": uuid4(), "status": OrderStatus.COMPLETED, "total": Decimal(30)})
    cancelled = stored_order.model_copy(update={"id": uuid4(), "status": OrderStatus.CANCELLED, "total": Decimal(99)})
    cursor_over([completed.to_mongo(), cancelled.to_mongo(), stored_order.to_mongo()])

    listing = await service.list_orders(status="all", order_type="product")

    assert listing.count == 3
    assert listing.stats.total == 3
    assert listing.stats.completed == 1
    assert listing.stats.processing == 0
    assert listing.stats.total_revenue == Decimal(80)
    mock_collection.find.assert_called_once_with({"type": {"$eq": "product"}})
