from datetime import datetime
from enum import StrEnum
from uuid import UUID

from pydantic import BaseModel, Field

from ledgerdesk.core.db import MongoModel
from ledgerdesk.utils import now


class WorksheetStatus(StrEnum):
    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"


class Priority(StrEnum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


ACTIVE_WORKSHEET_STATUSES = frozenset({WorksheetStatus.PENDING, WorksheetStatus.IN_PROGRESS})


class Worksheet(MongoModel):
    """Unit of field or office work, optionally tied to a customer."""

    title: str
    description: str = ""
    customer_id: UUID | None = None
    status: WorksheetStatus = WorksheetStatus.PENDING
    priority: Priority = Priority.MEDIUM
    due_date: datetime | None = None
    created_at: datetime = Field(default_factory=now)
    updated_at: datetime | None = None


class WorksheetListing(BaseModel):
    count: int
    worksheets: list[Worksheet]
