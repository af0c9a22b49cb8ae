from collections.abc import Sequence
from datetime import datetime
from decimal import Decimal
from typing import Any
from uuid import UUID

import structlog
from pymongo.asynchronous.database import AsyncDatabase

from ledgerdesk.core.core import Service
from ledgerdesk.core.modules.counter.models import DocumentCategory
from ledgerdesk.core.modules.order.models import Order, OrderListing, OrderStatus, OrderType
from ledgerdesk.core.modules.stats.utils import summarize_orders
from ledgerdesk.core.modules.totals.calculator import compute_totals
from ledgerdesk.core.modules.totals.models import LineItem
from ledgerdesk.core.store import build_list_query, insert_numbered
from ledgerdesk.errors import NotFoundError, ValidationError
from ledgerdesk.utils import now

logger = structlog.get_logger(__name__)


class OrderService(Service):
    """Manages product and service orders."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._collection = database.get_collection("orders")

    async def on_start(self) -> None:
        await self._collection.create_index([("number", 1)], unique=True)
        await self._collection.create_index([("status", 1), ("created_at", 1)])
        await self._collection.create_index([("created_at", -1)])

    async def get_order(self, order_id: UUID) -> Order:
        doc = await self._collection.find_one({"_id": order_id})
        if doc is None:
            raise NotFoundError(f"Order not found: {order_id}")
        return Order.model_validate(doc)

    async def list_orders(
        self, search: str | None = None, status: str | None = None, order_type: str | None = None
    ) -> OrderListing:
        """Orders whose number contains search, optionally filtered by status and type, newest first."""
        query = build_list_query(search, ("number",), status=status, type=order_type)
        orders = await Order.list_cursor(self._collection.find(query).sort("created_at", -1))
        return OrderListing(count=len(orders), stats=summarize_orders(orders), orders=orders)

    async def create_order(
        self,
        customer_id: UUID,
        order_type: OrderType,
        items: Sequence[LineItem],
        delivery_date: datetime,
        subtotal: Decimal | None = None,
        tax: Decimal | None = None,
        discount: Decimal | None = None,
        shipping_address: dict[str, str] | None = None,
        notes: str = "",
    ) -> Order:
        """Create order: compute totals, allocate ORD number, persist."""
        computed = compute_totals(items, subtotal, tax, discount)
        await self.core.services.customer.ensure_exists(customer_id)

        timestamp = now()
        number = await self.core.services.numbering.allocate(DocumentCategory.ORDER, timestamp)
        order = Order(
            number=number,
            customer_id=customer_id,
            type=order_type,
            items=computed.items,
            **computed.totals.model_dump(),
            order_date=timestamp,
            delivery_date=delivery_date,
            shipping_address=shipping_address or {},
            notes=notes,
            created_at=timestamp,
        )
        await insert_numbered(self._collection, order.to_mongo(), number)
        logger.info("order_created", order_id=order.id, number=number, total=str(order.total))
        return order

    async def update_order(
        self,
        order_id: UUID,
        items: Sequence[LineItem] | None = None,
        subtotal: Decimal | None = None,
        tax: Decimal | None = None,
        discount: Decimal | None = None,
        delivery_date: datetime | None = None,
        shipping_address: dict[str, str] | None = None,
        notes: str | None = None,
    ) -> Order:
        """Partially update an order; a new item list recomputes totals."""
        await self.get_order(order_id)

        update_doc: dict[str, Any] = {"updated_at": now()}
        if items is not None:
            update_doc.update(compute_totals(items, subtotal, tax, discount).to_fields())
        elif subtotal is not None or tax is not None or discount is not None:
            raise ValidationError("Subtotal, tax and discount can only be changed together with items")
        if delivery_date is not None:
            update_doc["delivery_date"] = delivery_date
        if shipping_address is not None:
            update_doc["shipping_address"] = shipping_address
        if notes is not None:
            update_doc["notes"] = notes

        await self._collection.update_one({"_id": order_id}, {"$set": update_doc})
        return await self.get_order(order_id)

    async def update_status(self, order_id: UUID, status: OrderStatus) -> Order:
        await self.get_order(order_id)
        await self._collection.update_one({"_id": order_id}, {"$set": {"status": status, "updated_at": now()}})
        return await self.get_order(order_id)

    async def delete_order(self, order_id: UUID) -> None:
        result = await self._collection.delete_one({"_id": order_id})
        if result.deleted_count == 0:
            raise NotFoundError(f"Order not found: {order_id}")
