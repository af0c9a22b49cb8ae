from typing import Any
from uuid import UUID

import structlog
from pymongo.asynchronous.database import AsyncDatabase

from ledgerdesk.core.core import Service
from ledgerdesk.core.modules.customer.models import Customer
from ledgerdesk.errors import NotFoundError, ValidationError

logger = structlog.get_logger(__name__)


class CustomerService(Service):
    """Manages customers referenced by invoices, orders and tickets."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._collection = database.get_collection("customers")

    async def on_start(self) -> None:
        await self._collection.create_index([("created_at", -1)])

    async def get_customer(self, customer_id: UUID) -> Customer:
        doc = await self._collection.find_one({"_id": customer_id})
        if doc is None:
            raise NotFoundError(f"Customer not found: {customer_id}")
        return Customer.model_validate(doc)

    async def ensure_exists(self, customer_id: UUID) -> None:
        """Raise NotFoundError unless the customer exists."""
        if await self._collection.count_documents({"_id": customer_id}, limit=1) == 0:
            raise NotFoundError(f"Customer not found: {customer_id}")

    async def create_customer(self, name: str, email: str = "", company: str = "", phone: str = "") -> Customer:
        if not name.strip():
            raise ValidationError("Please provide customer name")
        customer = Customer(name=name.strip(), email=email, company=company, phone=phone)
        await self._collection.insert_one(customer.to_mongo())
        logger.debug("customer_created", customer_id=customer.id)
        return customer
