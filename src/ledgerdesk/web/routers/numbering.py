from fastapi import APIRouter
from pydantic import BaseModel

from ledgerdesk.core.modules.counter.models import DocumentCategory
from ledgerdesk.web.deps import AppDep

router: APIRouter = APIRouter(tags=["numbering"])


class SequenceResponse(BaseModel):
    category: DocumentCategory
    year: int
    sequence: int  # 0 when nothing has been numbered yet


@router.get(
    "/numbering/{category}/{year}",
    summary="Get current sequence",
    description="Last sequence number claimed for a document category in a year. Does not claim a new one.",
    operation_id="getCurrentSequence",
    responses={200: {"description": "Current sequence"}},
)
async def get_current_sequence(category: DocumentCategory, year: int, app: AppDep) -> SequenceResponse:
    sequence = await app.get_current_sequence(category, year)
    return SequenceResponse(category=category, year=year, sequence=sequence)
