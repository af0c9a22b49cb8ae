from datetime import datetime
from typing import Any
from uuid import UUID

from pymongo import ReturnDocument
from pymongo.asynchronous.database import AsyncDatabase

from ledgerdesk.core.core import Service
from ledgerdesk.core.modules.worksheet.models import Priority, Worksheet, WorksheetListing, WorksheetStatus
from ledgerdesk.core.store import build_list_query
from ledgerdesk.errors import NotFoundError, ValidationError
from ledgerdesk.utils import now


class WorksheetService(Service):
    """Manages worksheets; only their status matters to the dashboard."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._collection = database.get_collection("worksheets")

    async def on_start(self) -> None:
        await self._collection.create_index([("status", 1), ("created_at", 1)])

    async def get_worksheet(self, worksheet_id: UUID) -> Worksheet:
        doc = await self._collection.find_one({"_id": worksheet_id})
        if doc is None:
            raise NotFoundError(f"Worksheet not found: {worksheet_id}")
        return Worksheet.model_validate(doc)

    async def create_worksheet(
        self,
        title: str,
        description: str = "",
        customer_id: UUID | None = None,
        priority: Priority = Priority.MEDIUM,
        due_date: datetime | None = None,
    ) -> Worksheet:
        if not title.strip():
            raise ValidationError("Please provide worksheet title")
        if customer_id is not None:
            await self.core.services.customer.ensure_exists(customer_id)
        worksheet = Worksheet(
            title=title.strip(), description=description, customer_id=customer_id, priority=priority, due_date=due_date
        )
        await self._collection.insert_one(worksheet.to_mongo())
        return worksheet

    async def update_status(self, worksheet_id: UUID, status: WorksheetStatus) -> Worksheet:
        doc = await self._collection.find_one_and_update(
            {"_id": worksheet_id},
            {"$set": {"status": status, "updated_at": now()}},
            return_document=ReturnDocument.AFTER,
        )
        if doc is None:
            raise NotFoundError(f"Worksheet not found: {worksheet_id}")
        return Worksheet.model_validate(doc)

    async def list_worksheets(self, search: str | None = None, status: str | None = None) -> WorksheetListing:
        """Worksheets whose title or description contains search, newest first."""
        query = build_list_query(search, ("title", "description"), status=status)
        worksheets = await Worksheet.list_cursor(self._collection.find(query).sort("created_at", -1))
        return WorksheetListing(count=len(worksheets), worksheets=worksheets)

    async def update_worksheet(
        self,
        worksheet_id: UUID,
        title: str | None = None,
        description: str | None = None,
        customer_id: UUID | None = None,
        priority: Priority | None = None,
        status: WorksheetStatus | None = None,
        due_date: datetime | None = None,
    ) -> Worksheet:
        """Partially update a worksheet; fields left as None keep their value."""
        await self.get_worksheet(worksheet_id)

        update_doc: dict[str, Any] = {"updated_at": now()}
        if title is not None:
            if not title.strip():
                raise ValidationError("Please provide worksheet title")
            update_doc["title"] = title.strip()
        if description is not None:
            update_doc["description"] = description
        if customer_id is not None:
            await self.core.services.customer.ensure_exists(customer_id)
            update_doc["customer_id"] = customer_id
        if priority is not None:
            update_doc["priority"] = priority
        if status is not None:
            update_doc["status"] = status
        if due_date is not None:
            update_doc["due_date"] = due_date

        await self._collection.update_one({"_id": worksheet_id}, {"$set": update_doc})
        return await self.get_worksheet(worksheet_id)

    async def delete_worksheet(self, worksheet_id: UUID) -> None:
        result = await self._collection.delete_one({"_id": worksheet_id})
        if result.deleted_count == 0:
            raise NotFoundError(f"Worksheet not found: {worksheet_id}")
