from datetime import datetime
from typing import Any

from pymongo.asynchronous.database import AsyncDatabase

from ledgerdesk.core.core import Service
from ledgerdesk.core.modules.stats.aggregator import MetricsAggregator
from ledgerdesk.core.modules.stats.models import ActivityEntry, InvoiceSummary, OrderSummary, StatsReport
from ledgerdesk.core.store import MongoDocumentStore


class StatsService(Service):
    """Dashboard statistics and recent activity over the document collections."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._aggregator = MetricsAggregator(MongoDocumentStore(database))

    async def get_dashboard_stats(self, now: datetime | None = None) -> StatsReport:
        return await self._aggregator.compute_dashboard_stats(now)

    async def get_recent_activity(self) -> list[ActivityEntry]:
        config = self.core.config
        return await self._aggregator.recent_activity(config.recent_activity_per_stream, config.recent_activity_limit)

    async def get_invoice_summary(self) -> InvoiceSummary:
        return await self._aggregator.invoice_summary()

    async def get_order_summary(self) -> OrderSummary:
        return await self._aggregator.order_summary()
