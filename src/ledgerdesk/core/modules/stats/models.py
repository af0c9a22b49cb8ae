"""Read-only dashboard projections; recomputed on every query, never persisted."""

from datetime import datetime
from decimal import Decimal
from enum import StrEnum

from pydantic import BaseModel, Field

from ledgerdesk.core.db import Money


class MetricSnapshot(BaseModel):
    """Current value compared with the value as of the end of the previous month."""

    current: int = Field(..., ge=0)
    previous: int = Field(..., ge=0)
    percent_change: float


class StatsReport(BaseModel):
    """Dashboard statistics.

    Snapshot `previous` values filter on creation time only and use present-day status,
    so status-dependent metrics approximate rather than replay history.
    """

    total_customers: MetricSnapshot
    active_worksheets: MetricSnapshot
    pending_invoices: MetricSnapshot
    active_orders: MetricSnapshot
    total_revenue: Money = Decimal(0)  # Non-cancelled invoices
    paid_revenue: Money = Decimal(0)  # Paid invoices
    completed_orders: int = 0
    open_tickets: int = 0
    period_start: datetime  # First instant of the current month
    previous_period_end: datetime  # Last instant of the previous month


class ActivityType(StrEnum):
    INVOICE = "invoice"
    ORDER = "order"
    CUSTOMER = "customer"
    TICKET = "ticket"


class ActivityEntry(BaseModel):
    type: ActivityType
    message: str
    time: datetime


class InvoiceSummary(BaseModel):
    """Invoice amounts by status group."""

    total: Money = Decimal(0)
    paid: Money = Decimal(0)
    pending: Money = Decimal(0)


class OrderSummary(BaseModel):
    total: int = 0
    processing: int = 0
    completed: int = 0
    total_revenue: Money = Decimal(0)  # Non-cancelled orders
