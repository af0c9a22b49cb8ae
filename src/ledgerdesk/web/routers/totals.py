from decimal import Decimal

from fastapi import APIRouter
from pydantic import BaseModel

from ledgerdesk.core.modules.totals.models import ComputedTotals, LineItem
from ledgerdesk.web.deps import AppDep
from ledgerdesk.web.openapi import ErrorResponse

router: APIRouter = APIRouter(tags=["totals"])


class ComputeTotalsRequest(BaseModel):
    items: list[LineItem]
    subtotal: Decimal | None = None
    tax: Decimal | None = None
    discount: Decimal | None = None


@router.post(
    "/totals",
    summary="Preview document totals",
    description="Price items and derive subtotal, tax, discount and total exactly as document creation does, without saving.",
    operation_id="computeTotals",
    responses={
        200: {"description": "Priced items and totals"},
        400: {"model": ErrorResponse, "description": "Invalid items"},
    },
)
async def compute_totals(request: ComputeTotalsRequest, app: AppDep) -> ComputedTotals:
    return app.compute_totals(request.items, request.subtotal, request.tax, request.discount)
