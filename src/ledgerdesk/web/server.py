from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from pymongo.errors import ConnectionFailure, ExecutionTimeout

from ledgerdesk.app import App
from ledgerdesk.config import Config
from ledgerdesk.errors import StoreUnavailableError, UserError
from ledgerdesk.web.error_handlers import general_exception_handler, store_unavailable_handler, user_error_handler
from ledgerdesk.web.routers import (
    customers_router,
    dashboard_router,
    invoices_router,
    numbering_router,
    orders_router,
    tickets_router,
    totals_router,
    worksheets_router,
)


def create_fastapi_app(app_instance: App, config: Config) -> FastAPI:
    """Create and configure FastAPI application."""

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
        """FastAPI application lifespan management."""
        app.state.app = app_instance
        app.state.config = config
        async with app_instance.lifespan():
            yield

    app = FastAPI(title="Ledgerdesk API", version="0.1.0", lifespan=lifespan)

    if config.cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=config.cors_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    # Health check endpoint (at root level, not versioned)
    @app.get("/health")
    async def health_check() -> dict[str, str]:
        return {"status": "healthy"}

    # API v1 routes
    app.include_router(dashboard_router, prefix="/api/v1")
    app.include_router(customers_router, prefix="/api/v1")
    app.include_router(worksheets_router, prefix="/api/v1")
    app.include_router(invoices_router, prefix="/api/v1")
    app.include_router(orders_router, prefix="/api/v1")
    app.include_router(tickets_router, prefix="/api/v1")
    app.include_router(totals_router, prefix="/api/v1")
    app.include_router(numbering_router, prefix="/api/v1")

    # Register error handlers
    app.add_exception_handler(UserError, user_error_handler)
    app.add_exception_handler(StoreUnavailableError, store_unavailable_handler)
    # Raw pymongo outages from CRUD paths that bypass the document store
    app.add_exception_handler(ConnectionFailure, store_unavailable_handler)
    app.add_exception_handler(ExecutionTimeout, store_unavailable_handler)
    app.add_exception_handler(Exception, general_exception_handler)

    return app
