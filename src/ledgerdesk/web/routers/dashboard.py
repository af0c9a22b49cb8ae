"""Dashboard statistics endpoints."""

from fastapi import APIRouter

from ledgerdesk.core.modules.stats.models import ActivityEntry, StatsReport
from ledgerdesk.web.deps import AppDep
from ledgerdesk.web.openapi import ErrorResponse

router: APIRouter = APIRouter(tags=["dashboard"])


@router.get(
    "/dashboard/stats",
    summary="Get dashboard statistics",
    description=(
        "Counts of customers, active worksheets, pending invoices and active orders, each compared with "
        "the count as of the end of the previous month, plus revenue figures.\n\n"
        "Previous-month values filter on creation time but use the current status of each document; "
        "they approximate, not replay, historical status."
    ),
    operation_id="getDashboardStats",
    responses={
        200: {"description": "Dashboard statistics"},
        503: {"model": ErrorResponse, "description": "Database unavailable"},
    },
)
async def get_dashboard_stats(app: AppDep) -> StatsReport:
    return await app.get_dashboard_stats()


@router.get(
    "/dashboard/recent",
    summary="Get recent activity",
    description="Newest invoices, orders, customers and tickets merged into one list, newest first.",
    operation_id="getRecentActivity",
    responses={
        200: {"description": "Recent activity entries"},
        503: {"model": ErrorResponse, "description": "Database unavailable"},
    },
)
async def get_recent_activity(app: AppDep) -> list[ActivityEntry]:
    return await app.get_recent_activity()
