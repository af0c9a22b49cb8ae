from datetime import datetime
from enum import StrEnum
from uuid import UUID

from pydantic import BaseModel, Field

from ledgerdesk.core.db import MongoModel, Money
from ledgerdesk.core.modules.stats.models import OrderSummary
from ledgerdesk.core.modules.totals.models import PricedLineItem
from ledgerdesk.utils import now


class OrderType(StrEnum):
    PRODUCT = "product"
    SERVICE = "service"


class OrderStatus(StrEnum):
    PENDING = "pending"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


ACTIVE_ORDER_STATUSES = frozenset({OrderStatus.PENDING, OrderStatus.PROCESSING, OrderStatus.SHIPPED})


class Order(MongoModel):
    """Product or service order with priced items.

    Indexed on number - unique, created_at, status.
    """

    number: str  # ORD-YYYY-NNN
    customer_id: UUID
    type: OrderType
    items: list[PricedLineItem]
    subtotal: Money
    tax: Money
    discount: Money
    total: Money
    status: OrderStatus = OrderStatus.PENDING
    order_date: datetime = Field(default_factory=now)
    delivery_date: datetime
    shipping_address: dict[str, str] = Field(default_factory=dict)
    notes: str = ""
    created_at: datetime = Field(default_factory=now)
    updated_at: datetime | None = None


class OrderListing(BaseModel):
    """Filtered orders, newest first, with counts and revenue over the same set."""

    count: int
    stats: OrderSummary
    orders: list[Order]
