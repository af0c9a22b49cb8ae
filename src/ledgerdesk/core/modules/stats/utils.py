from collections.abc import Iterable
from datetime import datetime, timedelta

from ledgerdesk.core.modules.invoice.models import Invoice, InvoiceStatus
from ledgerdesk.core.modules.order.models import Order, OrderStatus
from ledgerdesk.core.modules.stats.models import InvoiceSummary, OrderSummary


def percent_change(current: float, previous: float) -> float:
    """Period-over-period change in percent.

    A zero baseline yields 100 when anything appeared and 0 otherwise.
    """
    if previous == 0:
        return 100.0 if current > 0 else 0.0
    return ((current - previous) / previous) * 100


def period_bounds(now: datetime) -> tuple[datetime, datetime]:
    """Return (first instant of now's month, last instant of the previous month)."""
    current_period_start = now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
    previous_period_end = current_period_start - timedelta(microseconds=1)
    return current_period_start, previous_period_end


def summarize_invoices(invoices: Iterable[Invoice]) -> InvoiceSummary:
    """Totals over a listed set of invoices: all of them, paid and pending."""
    summary = InvoiceSummary()
    for invoice in invoices:
        summary.total += invoice.total
        if invoice.status == InvoiceStatus.PAID:
            summary.paid += invoice.total
        elif invoice.status == InvoiceStatus.PENDING:
            summary.pending += invoice.total
    return summary


def summarize_orders(orders: Iterable[Order]) -> OrderSummary:
    """Counts by status and revenue over non-cancelled orders."""
    summary = OrderSummary()
    for order in orders:
        summary.total += 1
        if order.status == OrderStatus.PROCESSING:
            summary.processing += 1
        elif order.status == OrderStatus.COMPLETED:
            summary.completed += 1
        if order.status != OrderStatus.CANCELLED:
            summary.total_revenue += order.total
    return summary
