from datetime import datetime
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Query
from pydantic import BaseModel, Field

from ledgerdesk.core.modules.worksheet.models import Priority, Worksheet, WorksheetListing, WorksheetStatus
from ledgerdesk.web.deps import AppDep
from ledgerdesk.web.openapi import ErrorResponse

router: APIRouter = APIRouter(tags=["worksheets"])


class CreateWorksheetRequest(BaseModel):
    title: str = Field(..., min_length=1)
    description: str = ""
    customer_id: UUID | None = None
    priority: Priority = Priority.MEDIUM
    due_date: datetime | None = None


class UpdateWorksheetRequest(BaseModel):
    """Partial update; omitted fields keep their value."""

    title: str | None = None
    description: str | None = None
    customer_id: UUID | None = None
    priority: Priority | None = None
    status: WorksheetStatus | None = None
    due_date: datetime | None = None


class UpdateWorksheetStatusRequest(BaseModel):
    status: WorksheetStatus


@router.get(
    "/worksheets",
    summary="List worksheets",
    operation_id="listWorksheets",
    responses={200: {"description": "Worksheets, newest first"}},
)
async def list_worksheets(
    app: AppDep,
    search: Annotated[str | None, Query(description="Case-insensitive substring of title or description")] = None,
    status: Annotated[str | None, Query(description="Worksheet status, or `all`")] = None,
) -> WorksheetListing:
    return await app.list_worksheets(search, status)


@router.post(
    "/worksheets",
    summary="Create worksheet",
    operation_id="createWorksheet",
    status_code=201,
    responses={
        201: {"description": "Worksheet created successfully"},
        400: {"model": ErrorResponse, "description": "Validation failed"},
        404: {"model": ErrorResponse, "description": "Customer not found"},
    },
)
async def create_worksheet(request: CreateWorksheetRequest, app: AppDep) -> Worksheet:
    return await app.create_worksheet(request.title, request.description, request.customer_id, request.priority, request.due_date)


@router.get(
    "/worksheets/{worksheet_id}",
    summary="Get worksheet",
    operation_id="getWorksheet",
    responses={
        200: {"description": "Worksheet details"},
        404: {"model": ErrorResponse, "description": "Worksheet not found"},
    },
)
async def get_worksheet(worksheet_id: UUID, app: AppDep) -> Worksheet:
    return await app.get_worksheet(worksheet_id)


@router.put(
    "/worksheets/{worksheet_id}/status",
    summary="Update worksheet status",
    operation_id="updateWorksheetStatus",
    responses={
        200: {"description": "Worksheet updated"},
        404: {"model": ErrorResponse, "description": "Worksheet not found"},
    },
)
async def update_worksheet_status(worksheet_id: UUID, request: UpdateWorksheetStatusRequest, app: AppDep) -> Worksheet:
    return await app.update_worksheet_status(worksheet_id, request.status)


@router.put(
    "/worksheets/{worksheet_id}",
    summary="Update worksheet",
    operation_id="updateWorksheet",
    responses={
        200: {"description": "Worksheet updated"},
        400: {"model": ErrorResponse, "description": "Validation failed"},
        404: {"model": ErrorResponse, "description": "Worksheet or customer not found"},
    },
)
async def update_worksheet(worksheet_id: UUID, request: UpdateWorksheetRequest, app: AppDep) -> Worksheet:
    return await app.update_worksheet(
        worksheet_id,
        request.title,
        request.description,
        request.customer_id,
        request.priority,
        request.status,
        request.due_date,
    )


@router.delete(
    "/worksheets/{worksheet_id}",
    summary="Delete worksheet",
    operation_id="deleteWorksheet",
    status_code=204,
    responses={
        204: {"description": "Worksheet deleted"},
        404: {"model": ErrorResponse, "description": "Worksheet not found"},
    },
)
async def delete_worksheet(worksheet_id: UUID, app: AppDep) -> None:
    await app.delete_worksheet(worksheet_id)
