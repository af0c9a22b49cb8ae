from collections.abc import AsyncGenerator, Sequence
from contextlib import asynccontextmanager
from datetime import datetime
from decimal import Decimal
from uuid import UUID

from ledgerdesk.config import Config
from ledgerdesk.core.core import Core
from ledgerdesk.core.modules.counter.models import DocumentCategory
from ledgerdesk.core.modules.customer.models import Customer
from ledgerdesk.core.modules.invoice.models import Invoice, InvoiceListing, InvoiceStatus
from ledgerdesk.core.modules.order.models import Order, OrderListing, OrderStatus, OrderType
from ledgerdesk.core.modules.stats.models import ActivityEntry, InvoiceSummary, OrderSummary, StatsReport
from ledgerdesk.core.modules.ticket.models import Ticket, TicketStatus
from ledgerdesk.core.modules.totals.calculator import compute_totals
from ledgerdesk.core.modules.totals.models import ComputedTotals, LineItem
from ledgerdesk.core.modules.worksheet.models import Priority, Worksheet, WorksheetListing, WorksheetStatus


class App:
    """Facade for all application operations, delegating to Core services."""

    def __init__(self, config: Config) -> None:
        self._core = Core(config)

    @asynccontextmanager
    async def lifespan(self) -> AsyncGenerator[None]:
        """Application lifespan management - delegates to Core."""
        async with self._core.lifespan():
            yield

    # === Numbering and totals ===
    async def allocate_identifier(self, category: DocumentCategory, now: datetime | None = None) -> str:
        """Claim the next PREFIX-YEAR-SEQ identifier for a category."""
        return await self._core.services.numbering.allocate(category, now)

    def compute_totals(
        self,
        items: Sequence[LineItem],
        subtotal: Decimal | None = None,
        tax: Decimal | None = None,
        discount: Decimal | None = None,
    ) -> ComputedTotals:
        """Price items and derive totals without persisting anything."""
        return compute_totals(items, subtotal, tax, discount)

    async def get_current_sequence(self, category: DocumentCategory, year: int) -> int:
        return await self._core.services.numbering.current_sequence(category, year)

    # === Dashboard ===
    async def get_dashboard_stats(self) -> StatsReport:
        return await self._core.services.stats.get_dashboard_stats()

    async def get_recent_activity(self) -> list[ActivityEntry]:
        return await self._core.services.stats.get_recent_activity()

    # === Customers and worksheets ===
    async def create_customer(self, name: str, email: str, company: str, phone: str) -> Customer:
        return await self._core.services.customer.create_customer(name, email, company, phone)

    async def get_customer(self, customer_id: UUID) -> Customer:
        return await self._core.services.customer.get_customer(customer_id)

    async def create_worksheet(
        self, title: str, description: str, customer_id: UUID | None, priority: Priority, due_date: datetime | None
    ) -> Worksheet:
        return await self._core.services.worksheet.create_worksheet(title, description, customer_id, priority, due_date)

    async def list_worksheets(self, search: str | None = None, status: str | None = None) -> WorksheetListing:
        return await self._core.services.worksheet.list_worksheets(search, status)

    async def get_worksheet(self, worksheet_id: UUID) -> Worksheet:
        return await self._core.services.worksheet.get_worksheet(worksheet_id)

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
        return await self._core.services.worksheet.update_worksheet(
            worksheet_id, title, description, customer_id, priority, status, due_date
        )

    async def update_worksheet_status(self, worksheet_id: UUID, status: WorksheetStatus) -> Worksheet:
        return await self._core.services.worksheet.update_status(worksheet_id, status)

    async def delete_worksheet(self, worksheet_id: UUID) -> None:
        await self._core.services.worksheet.delete_worksheet(worksheet_id)

    # === Invoices ===
    async def list_invoices(self, search: str | None = None, status: str | None = None) -> InvoiceListing:
        """Invoices filtered by number substring and status ("all" or None for any)."""
        return await self._core.services.invoice.list_invoices(search, status)

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
        return await self._core.services.invoice.create_invoice(
            customer_id, items, due_date, subtotal, tax, discount, status, issue_date, notes
        )

    async def get_invoice(self, invoice_id: UUID) -> Invoice:
        return await self._core.services.invoice.get_invoice(invoice_id)

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
        return await self._core.services.invoice.update_invoice(invoice_id, items, subtotal, tax, discount, due_date, notes)

    async def update_invoice_status(self, invoice_id: UUID, status: InvoiceStatus) -> Invoice:
        return await self._core.services.invoice.update_status(invoice_id, status)

    async def delete_invoice(self, invoice_id: UUID) -> None:
        await self._core.services.invoice.delete_invoice(invoice_id)

    async def get_invoice_summary(self) -> InvoiceSummary:
        return await self._core.services.stats.get_invoice_summary()

    # === Orders ===
    async def list_orders(
        self, search: str | None = None, status: str | None = None, order_type: str | None = None
    ) -> OrderListing:
        return await self._core.services.order.list_orders(search, status, order_type)

    async def create_order(
        self,
        customer_id: UUID,
        order_type: OrderType,
        items: Sequence[LineItem],
        delivery_date: datetime,
        subtotal: Decimal | None = None,
        tax: Decimal | None = None,
        discount: Decimal | None = None,
        shipping_address: dict[str, str] | None = None,
        notes: str = "",
    ) -> Order:
        return await self._core.services.order.create_order(
            customer_id, order_type, items, delivery_date, subtotal, tax, discount, shipping_address, notes
        )

    async def get_order(self, order_id: UUID) -> Order:
        return await self._core.services.order.get_order(order_id)

    async def update_order(
        self,
        order_id: UUID,
        items: Sequence[LineItem] | None = None,
        subtotal: Decimal | None = None,
        tax: Decimal | None = None,
        discount: Decimal | None = None,
        delivery_date: datetime | None = None,
        shipping_address: dict[str, str] | None = None,
        notes: str | None = None,
    ) -> Order:
        return await self._core.services.order.update_order(
            order_id, items, subtotal, tax, discount, delivery_date, shipping_address, notes
        )

    async def update_order_status(self, order_id: UUID, status: OrderStatus) -> Order:
        return await self._core.services.order.update_status(order_id, status)

    async def delete_order(self, order_id: UUID) -> None:
        await self._core.services.order.delete_order(order_id)

    async def get_order_summary(self) -> OrderSummary:
        return await self._core.services.stats.get_order_summary()

    # === Tickets ===
    async def create_ticket(
        self,
        customer_id: UUID,
        subject: str,
        description: str,
        priority: Priority = Priority.MEDIUM,
        category: str = "general",
        tags: list[str] | None = None,
    ) -> Ticket:
        return await self._core.services.ticket.create_ticket(customer_id, subject, description, priority, category, tags)

    async def get_ticket(self, ticket_id: UUID) -> Ticket:
        return await self._core.services.ticket.get_ticket(ticket_id)

    async def update_ticket_status(self, ticket_id: UUID, status: TicketStatus) -> Ticket:
        return await self._core.services.ticket.update_status(ticket_id, status)
