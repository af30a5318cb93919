import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from ..database import get_db
from ..models.patient import Patient
from ..models.series import Series
from ..models.session import SessionRecord
from ..schemas.session import SessionCreate, SessionOut
from ..services.assignment_service import record_completed_session
from .deps import get_current_patient

logger = logging.getLogger("yoga_therapy")

router = APIRouter(prefix="/api/sessions", tags=["sessions"])


@router.post("", response_model=SessionOut, status_code=201)
async def create_session(
    body: SessionCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
    patient: Annotated[Patient, Depends(get_current_patient)],
):
    if not await db.get(Series, body.series_id):
        raise HTTPException(status_code=404, detail="Series not found")

    record = SessionRecord(
        patient_id=patient.id,
        series_id=body.series_id,
        pre_intensity=body.pre_intensity,
        post_intensity=body.post_intensity,
        comments=body.comments,
        duration=body.duration,
    )
    db.add(record)
    await record_completed_session(db, patient.id, body.series_id)
    await db.commit()
    await db.refresh(record)

    logger.info(f"Patient {patient.id} completed a session of series {body.series_id}")
    return SessionOut.model_validate(record)
