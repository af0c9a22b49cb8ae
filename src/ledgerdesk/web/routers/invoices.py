"""Invoice endpoints. Numbers (INV-YYYY-NNN) and totals are assigned by the server."""

from datetime import datetime
from decimal import Decimal
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Query
from pydantic import BaseModel, Field

from ledgerdesk.core.modules.invoice.models import Invoice, InvoiceListing, InvoiceStatus
from ledgerdesk.core.modules.stats.models import InvoiceSummary
from ledgerdesk.core.modules.totals.models import LineItem
from ledgerdesk.web.deps import AppDep
from ledgerdesk.web.openapi import ErrorResponse

router: APIRouter = APIRouter(tags=["invoices"])


class CreateInvoiceRequest(BaseModel):
    """Request to create a new invoice."""

    customer_id: UUID
    items: list[LineItem] = Field(..., description="At least one item; quantity > 0, unit_price >= 0")
    due_date: datetime
    subtotal: Decimal | None = Field(None, description="Overrides the computed subtotal when present")
    tax: Decimal | None = Field(None, description="Defaults to 0")
    discount: Decimal | None = Field(None, description="Defaults to 0")
    status: InvoiceStatus = InvoiceStatus.PENDING
    issue_date: datetime | None = None
    notes: str = ""

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "customer_id": "87654321-4321-8765-4321-876543218765",
                    "items": [
                        {"description": "Consulting", "quantity": 2, "unit_price": "10.00"},
                        {"description": "Travel", "quantity": 1, "unit_price": "5.00"},
                    ],
                    "due_date": "2026-11-30T00:00:00Z",
                    "tax": "2.50",
                }
            ]
        }
    }


class UpdateInvoiceRequest(BaseModel):
    """Partial update. A new item list recomputes all totals; amounts require items."""

    items: list[LineItem] | None = None
    subtotal: Decimal | None = None
    tax: Decimal | None = None
    discount: Decimal | None = None
    due_date: datetime | None = None
    notes: str | None = None


class UpdateInvoiceStatusRequest(BaseModel):
    status: InvoiceStatus


@router.get(
    "/invoices/summary",
    summary="Get invoice amount summary",
    description="Sum of totals over all, paid and pending invoices.",
    operation_id="getInvoiceSummary",
    responses={200: {"description": "Invoice summary"}},
)
async def get_invoice_summary(app: AppDep) -> InvoiceSummary:
    return await app.get_invoice_summary()


@router.get(
    "/invoices",
    summary="List invoices",
    description="Invoices newest first, with total, paid and pending amounts over the listed set.",
    operation_id="listInvoices",
    responses={200: {"description": "Invoices and their totals"}},
)
async def list_invoices(
    app: AppDep,
    search: Annotated[str | None, Query(description="Case-insensitive substring of the invoice number")] = None,
    status: Annotated[str | None, Query(description="Invoice status, or `all`")] = None,
) -> InvoiceListing:
    return await app.list_invoices(search, status)


@router.post(
    "/invoices",
    summary="Create invoice",
    operation_id="createInvoice",
    status_code=201,
    responses={
        201: {"description": "Invoice created successfully"},
        400: {"model": ErrorResponse, "description": "Invalid items"},
        404: {"model": ErrorResponse, "description": "Customer not found"},
    },
)
async def create_invoice(request: CreateInvoiceRequest, app: AppDep) -> Invoice:
    return await app.create_invoice(
        request.customer_id,
        request.items,
        request.due_date,
        request.subtotal,
        request.tax,
        request.discount,
        request.status,
        request.issue_date,
        request.notes,
    )


@router.get(
    "/invoices/{invoice_id}",
    summary="Get invoice",
    operation_id="getInvoice",
    responses={
        200: {"description": "Invoice details"},
        404: {"model": ErrorResponse, "description": "Invoice not found"},
    },
)
async def get_invoice(invoice_id: UUID, app: AppDep) -> Invoice:
    return await app.get_invoice(invoice_id)


@router.put(
    "/invoices/{invoice_id}",
    summary="Update invoice",
    operation_id="updateInvoice",
    responses={
        200: {"description": "Invoice updated"},
        400: {"model": ErrorResponse, "description": "Invalid items or amounts without items"},
        404: {"model": ErrorResponse, "description": "Invoice not found"},
    },
)
async def update_invoice(invoice_id: UUID, request: UpdateInvoiceRequest, app: AppDep) -> Invoice:
    return await app.update_invoice(
        invoice_id, request.items, request.subtotal, request.tax, request.discount, request.due_date, request.notes
    )


@router.put(
    "/invoices/{invoice_id}/status",
    summary="Update invoice status",
    description="Setting the status to `paid` stamps the paid date.",
    operation_id="updateInvoiceStatus",
    responses={
        200: {"description": "Invoice updated"},
        404: {"model": ErrorResponse, "description": "Invoice not found"},
    },
)
async def update_invoice_status(invoice_id: UUID, request: UpdateInvoiceStatusRequest, app: AppDep) -> Invoice:
    return await app.update_invoice_status(invoice_id, request.status)


@router.delete(
    "/invoices/{invoice_id}",
    summary="Delete invoice",
    operation_id="deleteInvoice",
    status_code=204,
    responses={
        204: {"description": "Invoice deleted"},
        404: {"model": ErrorResponse, "description": "Invoice not found"},
    },
)
async def delete_invoice(invoice_id: UUID, app: AppDep) -> None:
    await app.delete_invoice(invoice_id)
