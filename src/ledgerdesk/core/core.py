from __future__ import annotations

import importlib
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Any, cast
from urllib.parse import urlparse

from pymongo import AsyncMongoClient
from pymongo.asynchronous.database import AsyncDatabase

from ledgerdesk.config import Config
from ledgerdesk.core.db import TYPE_REGISTRY


class Service:
    """Base class for services with direct database access."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        self.database = database
        self._core: Core | None = None

    async def on_start(self) -> None:
        """Initialize service on application startup."""

    async def on_stop(self) -> None:
        """Cleanup service on application shutdown."""

    @property
    def core(self) -> Core:
        """Get the core application context."""
        if self._core is None:
            raise RuntimeError("Core not set for service")
        return self._core

    def set_core(self, core: Core) -> None:
        """Set the core application context."""
        self._core = core


class Services:
    """Service registry that automatically discovers and initializes services."""

    # Type-only: service modules import Service from here, so runtime imports go through importlib
    if TYPE_CHECKING:
        from ledgerdesk.core.modules.counter.service import CounterService  # noqa: PLC0415
        from ledgerdesk.core.modules.customer.service import CustomerService  # noqa: PLC0415
        from ledgerdesk.core.modules.invoice.service import InvoiceService  # noqa: PLC0415
        from ledgerdesk.core.modules.numbering.service import NumberingService  # noqa: PLC0415
        from ledgerdesk.core.modules.order.service import OrderService  # noqa: PLC0415
        from ledgerdesk.core.modules.stats.service import StatsService  # noqa: PLC0415
        from ledgerdesk.core.modules.ticket.service import TicketService  # noqa: PLC0415
        from ledgerdesk.core.modules.worksheet.service import WorksheetService  # noqa: PLC0415

    counter: CounterService
    numbering: NumberingService
    customer: CustomerService
    worksheet: WorksheetService
    invoice: InvoiceService
    order: OrderService
    ticket: TicketService
    stats: StatsService

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        """Initialize all services automatically using service configuration."""
        self._services: list[Service] = []
        self._database = database

        # Service configuration: (attribute_name, module_path, class_name)
        # Order matters for initialization - counter must start before numbering
        service_configs = [
            ("counter", "ledgerdesk.core.modules.counter.service", "CounterService"),
            ("numbering", "ledgerdesk.core.modules.numbering.service", "NumberingService"),
            ("customer", "ledgerdesk.core.modules.customer.service", "CustomerService"),
            ("worksheet", "ledgerdesk.core.modules.worksheet.service", "WorksheetService"),
            ("invoice", "ledgerdesk.core.modules.invoice.service", "InvoiceService"),
            ("order", "ledgerdesk.core.modules.order.service", "OrderService"),
            ("ticket", "ledgerdesk.core.modules.ticket.service", "TicketService"),
            ("stats", "ledgerdesk.core.modules.stats.service", "StatsService"),
        ]

        # Dynamically import and instantiate services
        for attr_name, module_path, class_name in service_configs:
            module = importlib.import_module(module_path)
            service_class = cast(type[Service], getattr(module, class_name))
            service_instance = service_class(database)
            setattr(self, attr_name, service_instance)
            self._services.append(service_instance)

    def set_core(self, core: Core) -> None:
        """Set core reference for all services."""
        for service in self._services:
            service.set_core(core)

    async def start_all(self) -> None:
        """Start all services that have startup logic."""
        for service in self._services:
            await service.on_start()

    async def stop_all(self) -> None:
        """Stop all services that have cleanup logic."""
        for service in reversed(self._services):
            await service.on_stop()


class Core:
    """Container providing config, database, and all service instances."""

    config: Config
    mongo_client: AsyncMongoClient[dict[str, Any]]
    database: AsyncDatabase[dict[str, Any]]
    services: Services

    def __init__(self, config: Config) -> None:
        """Initialize core with config, MongoDB, and auto-register services."""
        self.config = config
        self.mongo_client = AsyncMongoClient(
            config.database_url,
            uuidRepresentation="standard",
            tz_aware=True,
            type_registry=TYPE_REGISTRY,
        )
        self.database = self.mongo_client.get_database(urlparse(config.database_url).path[1:])
        self.services = Services(self.database)
        self.services.set_core(self)

    @asynccontextmanager
    async def lifespan(self) -> AsyncGenerator[None]:
        """Manage application lifecycle - startup and shutdown."""
        await self.on_start()
        try:
            yield
        finally:
            await self.on_stop()

    async def on_start(self) -> None:
        """Start all services on application startup."""
        await self.services.start_all()

    async def on_stop(self) -> None:
        """Stop services and close MongoDB connection on shutdown."""
        await self.services.stop_all()
        await self.mongo_client.aclose()
