"""Patient-facing endpoints: the active series and session history."""

from typing import Annotated

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..database import get_db
from ..models.patient import Patient
from ..models.session import SessionRecord
from ..schemas.series import AssignmentOut
from ..schemas.session import SessionOut
from ..services.assignment_service import get_active_assignment
from .deps import get_current_patient

router = APIRouter(prefix="/api", tags=["portal"])


@router.get(
    "/my-series",
    response_model=AssignmentOut,
    responses={204: {"description": "No series assigned"}},
)
async def get_my_series(
    db: Annotated[AsyncSession, Depends(get_db)],
    patient: Annotated[Patient, Depends(get_current_patient)],
):
    assignment = await get_active_assignment(db, patient.id)
    if assignment is None:
        return Response(status_code=status.HTTP_204_NO_CONTENT)
    return AssignmentOut.model_validate(assignment)


@router.get("/my-sessions", response_model=list[SessionOut])
async def get_my_sessions(
    db: Annotated[AsyncSession, Depends(get_db)],
    patient: Annotated[Patient, Depends(get_current_patient)],
):
    result = await db.execute(
        select(SessionRecord)
        .where(SessionRecord.patient_id == patient.id)
        .order_by(SessionRecord.completed_at.desc())
    )
    return [SessionOut.model_validate(s) for s in result.scalars()]
