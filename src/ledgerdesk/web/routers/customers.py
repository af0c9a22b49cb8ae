from uuid import UUID

from fastapi import APIRouter
from pydantic import BaseModel, Field

from ledgerdesk.core.modules.customer.models import Customer
from ledgerdesk.web.deps import AppDep
from ledgerdesk.web.openapi import ErrorResponse

router: APIRouter = APIRouter(tags=["customers"])


class CreateCustomerRequest(BaseModel):
    name: str = Field(..., min_length=1)
    email: str = ""
    company: str = ""
    phone: str = ""


@router.post(
    "/customers",
    summary="Create customer",
    operation_id="createCustomer",
    status_code=201,
    responses={
        201: {"description": "Customer created successfully"},
        400: {"model": ErrorResponse, "description": "Validation failed"},
    },
)
async def create_customer(request: CreateCustomerRequest, app: AppDep) -> Customer:
    return await app.create_customer(request.name, request.email, request.company, request.phone)


@router.get(
    "/customers/{customer_id}",
    summary="Get customer",
    operation_id="getCustomer",
    responses={
        200: {"description": "Customer details"},
        404: {"model": ErrorResponse, "description": "Customer not found"},
    },
)
async def get_customer(customer_id: UUID, app: AppDep) -> Customer:
    return await app.get_customer(customer_id)
