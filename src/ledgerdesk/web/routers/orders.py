from datetime import datetime
from decimal import Decimal
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Query
from pydantic import BaseModel, Field

from ledgerdesk.core.modules.order.models import Order, OrderListing, OrderStatus, OrderType
from ledgerdesk.core.modules.stats.models import OrderSummary
from ledgerdesk.core.modules.totals.models import LineItem
from ledgerdesk.web.deps import AppDep
from ledgerdesk.web.openapi import ErrorResponse

router: APIRouter = APIRouter(tags=["orders"])


class CreateOrderRequest(BaseModel):
    customer_id: UUID
    type: OrderType
    items: list[LineItem] = Field(..., description="At least one item; quantity > 0, unit_price >= 0")
    delivery_date: datetime
    subtotal: Decimal | None = None
    tax: Decimal | None = None
    discount: Decimal | None = None
    shipping_address: dict[str, str] | None = None
    notes: str = ""


class UpdateOrderRequest(BaseModel):
    items: list[LineItem] | None = None
    subtotal: Decimal | None = None
    tax: Decimal | None = None
    discount: Decimal | None = None
    delivery_date: datetime | None = None
    shipping_address: dict[str, str] | None = None
    notes: str | None = None


class UpdateOrderStatusRequest(BaseModel):
    status: OrderStatus


@router.get(
    "/orders/summary",
    summary="Get order summary",
    description="Order counts by status and revenue over non-cancelled orders.",
    operation_id="getOrderSummary",
    responses={200: {"description": "Order summary"}},
)
async def get_order_summary(app: AppDep) -> OrderSummary:
    return await app.get_order_summary()


@router.get(
    "/orders",
    summary="List orders",
    description="Orders newest first, with counts by status and revenue over the listed set.",
    operation_id="listOrders",
    responses={200: {"description": "Orders and their summary"}},
)
async def list_orders(
    app: AppDep,
    search: Annotated[str | None, Query(description="Case-insensitive substring of the order number")] = None,
    status: Annotated[str | None, Query(description="Order status, or `all`")] = None,
    order_type: Annotated[str | None, Query(alias="type", description="`product`, `service` or `all`")] = None,
) -> OrderListing:
    return await app.list_orders(search, status, order_type)


@router.post(
    "/orders",
    summary="Create order",
    operation_id="createOrder",
    status_code=201,
    responses={
        201: {"description": "Order created successfully"},
        400: {"model": ErrorResponse, "description": "Invalid items"},
        404: {"model": ErrorResponse, "description": "Customer not found"},
    },
)
async def create_order(request: CreateOrderRequest, app: AppDep) -> Order:
    return await app.create_order(
        request.customer_id,
        request.type,
        request.items,
        request.delivery_date,
        request.subtotal,
        request.tax,
        request.discount,
        request.shipping_address,
        request.notes,
    )


@router.get(
    "/orders/{order_id}",
    summary="Get order",
    operation_id="getOrder",
    responses={
        200: {"description": "Order details"},
        404: {"model": ErrorResponse, "description": "Order not found"},
    },
)
async def get_order(order_id: UUID, app: AppDep) -> Order:
    return await app.get_order(order_id)


@router.put(
    "/orders/{order_id}",
    summary="Update order",
    operation_id="updateOrder",
    responses={
        200: {"description": "Order updated"},
        400: {"model": ErrorResponse, "description": "Invalid items or amounts without items"},
        404: {"model": ErrorResponse, "description": "Order not found"},
    },
)
async def update_order(order_id: UUID, request: UpdateOrderRequest, app: AppDep) -> Order:
    return await app.update_order(
        order_id,
        request.items,
        request.subtotal,
        request.tax,
        request.discount,
        request.delivery_date,
        request.shipping_address,
        request.notes,
    )


@router.put(
    "/orders/{order_id}/status",
    summary="Update order status",
    operation_id="updateOrderStatus",
    responses={
        200: {"description": "Order updated"},
        404: {"model": ErrorResponse, "description": "Order not found"},
    },
)
async def update_order_status(order_id: UUID, request: UpdateOrderStatusRequest, app: AppDep) -> Order:
    return await app.update_order_status(order_id, request.status)


@router.delete(
    "/orders/{order_id}",
    summary="Delete order",
    operation_id="deleteOrder",
    status_code=204,
    responses={
        204: {"description": "Order deleted"},
        404: {"model": ErrorResponse, "description": "Order not found"},
    },
)
async def delete_order(order_id: UUID, app: AppDep) -> None:
    await app.delete_order(order_id)
