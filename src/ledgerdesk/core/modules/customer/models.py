from datetime import datetime
from enum import StrEnum

from pydantic import Field

from ledgerdesk.core.db import MongoModel
from ledgerdesk.utils import now


class CustomerStatus(StrEnum):
    ACTIVE = "active"
    INACTIVE = "inactive"


class Customer(MongoModel):
    """Customer that documents are issued to."""

    name: str
    email: str = ""
    company: str = ""
    phone: str = ""
    status: CustomerStatus = CustomerStatus.ACTIVE
    created_at: datetime = Field(default_factory=now)
