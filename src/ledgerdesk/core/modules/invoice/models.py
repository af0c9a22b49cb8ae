from datetime import datetime
from enum import StrEnum
from uuid import UUID

from pydantic import BaseModel, Field

from ledgerdesk.core.db import MongoModel, Money
from ledgerdesk.core.modules.stats.models import InvoiceSummary
from ledgerdesk.core.modules.totals.models import PricedLineItem
from ledgerdesk.utils import now


class InvoiceStatus(StrEnum):
    DRAFT = "draft"
    PENDING = "pending"
    PAID = "paid"
    OVERDUE = "overdue"
    CANCELLED = "cancelled"


class Invoice(MongoModel):
    """Invoice with priced items and denormalized totals.

    Indexed on number - unique, created_at, status.
    """

    number: str  # INV-YYYY-NNN, assigned once at creation
    customer_id: UUID
    items: list[PricedLineItem]
    subtotal: Money
    tax: Money
    discount: Money
    total: Money
    status: InvoiceStatus = InvoiceStatus.PENDING
    issue_date: datetime = Field(default_factory=now)
    due_date: datetime
    paid_date: datetime | None = None
    notes: str = ""
    created_at: datetime = Field(default_factory=now)
    updated_at: datetime | None = None


class InvoiceListing(BaseModel):
    """Filtered invoices, newest first, with totals over the same set."""

    count: int
    stats: InvoiceSummary
    invoices: list[Invoice]
