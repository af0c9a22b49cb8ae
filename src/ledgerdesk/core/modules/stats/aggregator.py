import asyncio
from collections.abc import Callable
from datetime import datetime
from typing import Any

import structlog

from ledgerdesk import utils
from ledgerdesk.core.modules.invoice.models import InvoiceStatus
from ledgerdesk.core.modules.order.models import ACTIVE_ORDER_STATUSES, OrderStatus
from ledgerdesk.core.modules.stats.models import (
    ActivityEntry,
    ActivityType,
    InvoiceSummary,
    MetricSnapshot,
    OrderSummary,
    StatsReport,
)
from ledgerdesk.core.modules.stats.utils import percent_change, period_bounds
from ledgerdesk.core.modules.ticket.models import OPEN_TICKET_STATUSES, TicketStatus
from ledgerdesk.core.modules.worksheet.models import ACTIVE_WORKSHEET_STATUSES
from ledgerdesk.core.store import Collection, DocumentQuery, DocumentStore

logger = structlog.get_logger(__name__)

# (report field, collection, predicate) for every period-over-period metric
TRACKED_METRICS: list[tuple[str, Collection, DocumentQuery]] = [
    ("total_customers", Collection.CUSTOMERS, DocumentQuery()),
    ("active_worksheets", Collection.WORKSHEETS, DocumentQuery(statuses=frozenset(ACTIVE_WORKSHEET_STATUSES))),
    ("pending_invoices", Collection.INVOICES, DocumentQuery(statuses=frozenset({InvoiceStatus.PENDING}))),
    ("active_orders", Collection.ORDERS, DocumentQuery(statuses=frozenset(ACTIVE_ORDER_STATUSES))),
]

NOT_CANCELLED_INVOICES = DocumentQuery(exclude_statuses=frozenset({InvoiceStatus.CANCELLED}))
PAID_INVOICES = DocumentQuery(statuses=frozenset({InvoiceStatus.PAID}))
PENDING_INVOICES = DocumentQuery(statuses=frozenset({InvoiceStatus.PENDING}))
NOT_CANCELLED_ORDERS = DocumentQuery(exclude_statuses=frozenset({OrderStatus.CANCELLED}))
PROCESSING_ORDERS = DocumentQuery(statuses=frozenset({OrderStatus.PROCESSING}))
COMPLETED_ORDERS = DocumentQuery(statuses=frozenset({OrderStatus.COMPLETED}))
OPEN_TICKETS = DocumentQuery(statuses=frozenset(OPEN_TICKET_STATUSES))


def invoice_activity(doc: dict[str, Any]) -> str:
    return f"New invoice {doc.get('number')} created"


def order_activity(doc: dict[str, Any]) -> str:
    action = "completed" if doc.get("status") == OrderStatus.COMPLETED else "created"
    return f"Order {doc.get('number')} {action}"


def customer_activity(_: dict[str, Any]) -> str:
    return "New customer registered"


def ticket_activity(doc: dict[str, Any]) -> str:
    if doc.get("status") == TicketStatus.RESOLVED:
        return f"Support ticket {doc.get('number')} resolved"
    return f"New ticket {doc.get('number')} created"


# Stream order doubles as the tie-break for equal timestamps
ACTIVITY_STREAMS: list[tuple[ActivityType, Collection, Callable[[dict[str, Any]], str]]] = [
    (ActivityType.INVOICE, Collection.INVOICES, invoice_activity),
    (ActivityType.ORDER, Collection.ORDERS, order_activity),
    (ActivityType.CUSTOMER, Collection.CUSTOMERS, customer_activity),
    (ActivityType.TICKET, Collection.TICKETS, ticket_activity),
]


class MetricsAggregator:
    """Computes dashboard figures from a DocumentStore. Read-only."""

    def __init__(self, store: DocumentStore) -> None:
        self._store = store

    async def metric_snapshot(self, collection: Collection, query: DocumentQuery, previous_period_end: datetime) -> MetricSnapshot:
        """Count matching documents now and as created up to the end of the previous period."""
        current, previous = await asyncio.gather(
            self._store.count(collection, query),
            self._store.count(collection, query.with_created_before(previous_period_end)),
        )
        return MetricSnapshot(current=current, previous=previous, percent_change=percent_change(current, previous))

    async def compute_dashboard_stats(self, now: datetime | None = None) -> StatsReport:
        """Current counts, previous-month-end snapshots, deltas and revenue figures."""
        period_start, previous_period_end = period_bounds(now or utils.now())

        snapshots, (total_revenue, paid_revenue, completed_orders, open_tickets) = await asyncio.gather(
            asyncio.gather(
                *(self.metric_snapshot(collection, query, previous_period_end) for _, collection, query in TRACKED_METRICS)
            ),
            asyncio.gather(
                self._store.sum(Collection.INVOICES, "total", NOT_CANCELLED_INVOICES),
                self._store.sum(Collection.INVOICES, "total", PAID_INVOICES),
                self._store.count(Collection.ORDERS, COMPLETED_ORDERS),
                self._store.count(Collection.TICKETS, OPEN_TICKETS),
            ),
        )

        report = StatsReport(
            **{name: snapshot for (name, _, _), snapshot in zip(TRACKED_METRICS, snapshots, strict=True)},
            total_revenue=total_revenue,
            paid_revenue=paid_revenue,
            completed_orders=completed_orders,
            open_tickets=open_tickets,
            period_start=period_start,
            previous_period_end=previous_period_end,
        )
        logger.debug(
            "dashboard_stats_computed",
            previous_period_end=previous_period_end,
            total_customers=report.total_customers.current,
            total_revenue=str(report.total_revenue),
        )
        return report

    async def recent_activity(self, per_stream: int = 5, limit: int = 10) -> list[ActivityEntry]:
        """Merge the newest documents of every stream, newest first.

        Python's sort is stable, so entries with equal timestamps keep stream order.
        """
        results = await asyncio.gather(
            *(self._store.find_recent(collection, per_stream) for _, collection, _ in ACTIVITY_STREAMS)
        )

        entries = [
            ActivityEntry(type=activity_type, message=describe(doc), time=doc["created_at"])
            for (activity_type, _, describe), docs in zip(ACTIVITY_STREAMS, results, strict=True)
            for doc in docs
        ]
        entries.sort(key=lambda entry: entry.time, reverse=True)
        return entries[:limit]

    async def invoice_summary(self) -> InvoiceSummary:
        total, paid, pending = await asyncio.gather(
            self._store.sum(Collection.INVOICES, "total", DocumentQuery()),
            self._store.sum(Collection.INVOICES, "total", PAID_INVOICES),
            self._store.sum(Collection.INVOICES, "total", PENDING_INVOICES),
        )
        return InvoiceSummary(total=total, paid=paid, pending=pending)

    async def order_summary(self) -> OrderSummary:
        total, processing, completed, revenue = await asyncio.gather(
            self._store.count(Collection.ORDERS, DocumentQuery()),
            self._store.count(Collection.ORDERS, PROCESSING_ORDERS),
            self._store.count(Collection.ORDERS, COMPLETED_ORDERS),
            self._store.sum(Collection.ORDERS, "total", NOT_CANCELLED_ORDERS),
        )
        return OrderSummary(total=total, processing=processing, completed=completed, total_revenue=revenue)
