from collections.abc import Sequence
from datetime import datetime
from decimal import Decimal
from typing import Any
from uuid import UUID

import structlog
from pymongo.asynchronous.database import AsyncDatabase

from ledgerdesk.core.core import Service
from ledgerdesk.core.modules.counter.models import DocumentCategory
from ledgerdesk.core.modules.invoice.models import Invoice, InvoiceListing, InvoiceStatus
from ledgerdesk.core.modules.stats.utils import summarize_invoices
from ledgerdesk.core.modules.totals.calculator import compute_totals
from ledgerdesk.core.modules.totals.models import LineItem
from ledgerdesk.core.store import build_list_query, insert_numbered
from ledgerdesk.errors import NotFoundError, ValidationError
from ledgerdesk.utils import now

logger = structlog.get_logger(__name__)


class InvoiceService(Service):
    """Manages invoices: totals are computed and the number allocated at creation."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._collection = database.get_collection("invoices")

    async def on_start(self) -> None:
        """Create indexes for number lookup and dashboard queries."""
        await self._collection.create_index([("number", 1)], unique=True)
        await self._collection.create_index([("status", 1), ("created_at", 1)])
        await self._collection.create_index([("created_at", -1)])

    async def get_invoice(self, invoice_id: UUID) -> Invoice:
        """Get invoice by ID."""
        doc = await self._collection.find_one({"_id": invoice_id})
        if doc is None:
            raise NotFoundError(f"Invoice not found: {invoice_id}")
        return Invoice.model_validate(doc)

    async def list_invoices(self, search: str | None = None, status: str | None = None) -> InvoiceListing:
        """Invoices whose number contains search, optionally of one status, newest first."""
        query = build_list_query(search, ("number",), status=status)
        invoices = await Invoice.list_cursor(self._collection.find(query).sort("created_at", -1))
        return InvoiceListing(count=len(invoices), stats=summarize_invoices(invoices), invoices=invoices)

    async def create_invoice(
        self,
        customer_id: UUID,
        items: Sequence[LineItem],
        due_date: datetime,
        subtotal: Decimal | None = None,
        tax: Decimal | None = None,
        discount: Decimal | None = None,
        status: InvoiceStatus = InvoiceStatus.PENDING,
        issue_date: datetime | None = None,
        notes: str = "",
    ) -> Invoice:
        """Create invoice: compute totals, allocate INV number, persist."""
        computed = compute_totals(items, subtotal, tax, discount)
        await self.core.services.customer.ensure_exists(customer_id)

        timestamp = now()
        number = await self.core.services.numbering.allocate(DocumentCategory.INVOICE, timestamp)
        invoice = Invoice(
            number=number,
            customer_id=customer_id,
            items=computed.items,
            **computed.totals.model_dump(),
            status=status,
            issue_date=issue_date or timestamp,
            due_date=due_date,
            paid_date=timestamp if status == InvoiceStatus.PAID else None,
            notes=notes,
            created_at=timestamp,
        )
        await insert_numbered(self._collection, invoice.to_mongo(), number)
        logger.info("invoice_created", invoice_id=invoice.id, number=number, total=str(invoice.total))
        return invoice

    async def update_invoice(
        self,
        invoice_id: UUID,
        items: Sequence[LineItem] | None = None,
        subtotal: Decimal | None = None,
        tax: Decimal | None = None,
        discount: Decimal | None = None,
        due_date: datetime | None = None,
        notes: str | None = None,
    ) -> Invoice:
        """Partially update an invoice.

        A new item list replaces the old one and recomputes all totals with the same
        override rules as creation. Without items, stored totals are left untouched,
        so amount overrides are rejected on their own.
        """
        await self.get_invoice(invoice_id)

        update_doc: dict[str, Any] = {"updated_at": now()}
        if items is not None:
            update_doc.update(compute_totals(items, subtotal, tax, discount).to_fields())
        elif subtotal is not None or tax is not None or discount is not None:
            raise ValidationError("Subtotal, tax and discount can only be changed together with items")
        if due_date is not None:
            update_doc["due_date"] = due_date
        if notes is not None:
            update_doc["notes"] = notes

        await self._collection.update_one({"_id": invoice_id}, {"$set": update_doc})
        return await self.get_invoice(invoice_id)

    async def update_status(self, invoice_id: UUID, status: InvoiceStatus) -> Invoice:
        """Change invoice status; marking as paid stamps paid_date."""
        await self.get_invoice(invoice_id)
        timestamp = now()
        update_doc: dict[str, Any] = {"status": status, "updated_at": timestamp}
        if status == InvoiceStatus.PAID:
            update_doc["paid_date"] = timestamp
        await self._collection.update_one({"_id": invoice_id}, {"$set": update_doc})
        return await self.get_invoice(invoice_id)

    async def delete_invoice(self, invoice_id: UUID) -> None:
        """Delete an invoice. Its number is never reused."""
        result = await self._collection.delete_one({"_id": invoice_id})
        if result.deleted_count == 0:
            raise NotFoundError(f"Invoice not found: {invoice_id}")
