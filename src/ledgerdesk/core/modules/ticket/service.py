from typing import Any
from uuid import UUID

import structlog
from pymongo.asynchronous.database import AsyncDatabase

from ledgerdesk.core.core import Service
from ledgerdesk.core.modules.counter.models import DocumentCategory
from ledgerdesk.core.modules.ticket.models import Ticket, TicketStatus
from ledgerdesk.core.modules.worksheet.models import Priority
from ledgerdesk.core.store import insert_numbered
from ledgerdesk.errors import NotFoundError, ValidationError
from ledgerdesk.utils import now

logger = structlog.get_logger(__name__)


class TicketService(Service):
    """Manages support tickets."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._collection = database.get_collection("tickets")

    async def on_start(self) -> None:
        await self._collection.create_index([("number", 1)], unique=True)
        await self._collection.create_index([("status", 1)])
        await self._collection.create_index([("created_at", -1)])

    async def get_ticket(self, ticket_id: UUID) -> Ticket:
        doc = await self._collection.find_one({"_id": ticket_id})
        if doc is None:
            raise NotFoundError(f"Ticket not found: {ticket_id}")
        return Ticket.model_validate(doc)

    async def create_ticket(
        self,
        customer_id: UUID,
        subject: str,
        description: str,
        priority: Priority = Priority.MEDIUM,
        category: str = "general",
        tags: list[str] | None = None,
    ) -> Ticket:
        """Create ticket with an allocated TKT number."""
        if not subject.strip():
            raise ValidationError("Please provide subject")
        if not description.strip():
            raise ValidationError("Please provide description")
        await self.core.services.customer.ensure_exists(customer_id)

        timestamp = now()
        number = await self.core.services.numbering.allocate(DocumentCategory.TICKET, timestamp)
        ticket = Ticket(
            number=number,
            subject=subject.strip(),
            description=description,
            customer_id=customer_id,
            priority=priority,
            category=category,
            tags=tags or [],
            created_at=timestamp,
        )
        await insert_numbered(self._collection, ticket.to_mongo(), number)
        logger.info("ticket_created", ticket_id=ticket.id, number=number)
        return ticket

    async def update_status(self, ticket_id: UUID, status: TicketStatus) -> Ticket:
        await self.get_ticket(ticket_id)
        await self._collection.update_one({"_id": ticket_id}, {"$set": {"status": status, "updated_at": now()}})
        return await self.get_ticket(ticket_id)
