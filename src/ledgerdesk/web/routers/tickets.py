from uuid import UUID

from fastapi import APIRouter
from pydantic import BaseModel, Field

from ledgerdesk.core.modules.ticket.models import Ticket, TicketStatus
from ledgerdesk.core.modules.worksheet.models import Priority
from ledgerdesk.web.deps import AppDep
from ledgerdesk.web.openapi import ErrorResponse

router: APIRouter = APIRouter(tags=["tickets"])


class CreateTicketRequest(BaseModel):
    customer_id: UUID
    subject: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)
    priority: Priority = Priority.MEDIUM
    category: str = "general"
    tags: list[str] = []


class UpdateTicketStatusRequest(BaseModel):
    status: TicketStatus


@router.post(
    "/tickets",
    summary="Create ticket",
    operation_id="createTicket",
    status_code=201,
    responses={
        201: {"description": "Ticket created successfully"},
        400: {"model": ErrorResponse, "description": "Validation failed"},
        404: {"model": ErrorResponse, "description": "Customer not found"},
    },
)
async def create_ticket(request: CreateTicketRequest, app: AppDep) -> Ticket:
    return await app.create_ticket(
        request.customer_id, request.subject, request.description, request.priority, request.category, request.tags
    )


@router.get(
    "/tickets/{ticket_id}",
    summary="Get ticket",
    operation_id="getTicket",
    responses={
        200: {"description": "Ticket details"},
        404: {"model": ErrorResponse, "description": "Ticket not found"},
    },
)
async def get_ticket(ticket_id: UUID, app: AppDep) -> Ticket:
    return await app.get_ticket(ticket_id)


@router.put(
    "/tickets/{ticket_id}/status",
    summary="Update ticket status",
    operation_id="updateTicketStatus",
    responses={
        200: {"description": "Ticket updated"},
        404: {"model": ErrorResponse, "description": "Ticket not found"},
    },
)
async def update_ticket_status(ticket_id: UUID, request: UpdateTicketStatusRequest, app: AppDep) -> Ticket:
    return await app.update_ticket_status(ticket_id, request.status)
