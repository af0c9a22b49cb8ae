from datetime import datetime
from enum import StrEnum
from uuid import UUID

from pydantic import Field

from ledgerdesk.core.db import MongoModel
from ledgerdesk.core.modules.worksheet.models import Priority
from ledgerdesk.utils import now


class TicketStatus(StrEnum):
    OPEN = "open"
    IN_PROGRESS = "in-progress"
    RESOLVED = "resolved"
    CLOSED = "closed"


OPEN_TICKET_STATUSES = frozenset({TicketStatus.OPEN, TicketStatus.IN_PROGRESS})


class Ticket(MongoModel):
    """Customer support ticket."""

    number: str  # TKT-YYYY-NNN
    subject: str
    description: str
    customer_id: UUID
    status: TicketStatus = TicketStatus.OPEN
    priority: Priority = Priority.MEDIUM
    category: str = "general"
    tags: list[str] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=now)
    updated_at: datetime | None = None
