from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..database import get_db
from ..models.patient import Patient
from ..models.session import SessionRecord
from ..models.user import User
from ..schemas.auth import UserBrief
from ..schemas.patient import PatientCreate, PatientOut
from ..schemas.series import AssignSeriesRequest, AssignmentOut
from ..schemas.session import SessionOut
from ..services import assignment_service, patient_service
from ..services.encryption_service import decrypt
from .deps import require_role

router = APIRouter(prefix="/api/patients", tags=["patients"])


def _decrypt_patient_out(p: Patient) -> PatientOut:
    return PatientOut(
        id=p.id,
        user_id=p.user_id,
        instructor_id=p.instructor_id,
        date_of_birth=p.date_of_birth,
        medical_conditions=decrypt(p.medical_conditions),
        notes=decrypt(p.notes),
        created_at=p.created_at,
        user=UserBrief.model_validate(p.user),
    )


@router.get("", response_model=list[PatientOut])
async def list_patients(
    db: Annotated[AsyncSession, Depends(get_db)],
    user: Annotated[User, Depends(require_role("instructor"))],
):
    patients = await patient_service.list_patients(db, user)
    return [_decrypt_patient_out(p) for p in patients]


@router.post("", response_model=PatientOut, status_code=201)
async def create_patient(
    body: PatientCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
    user: Annotated[User, Depends(require_role("instructor"))],
):
    patient = await patient_service.create_patient_profile(
        db,
        user,
        body.user_id,
        date_of_birth=body.date_of_birth,
        medical_conditions=body.medical_conditions,
        notes=body.notes,
    )
    return _decrypt_patient_out(patient)


@router.post("/{patient_id}/assign-series", response_model=AssignmentOut)
async def assign_series(
    patient_id: str,
    body: AssignSeriesRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
    user: Annotated[User, Depends(require_role("instructor"))],
):
    assignment = await assignment_service.assign_series(db, patient_id, body.series_id, user)
    return AssignmentOut.model_validate(assignment)


@router.get("/{patient_id}/assignments", response_model=list[AssignmentOut])
async def list_assignments(
    patient_id: str,
    db: Annotated[AsyncSession, Depends(get_db)],
    user: Annotated[User, Depends(require_role("instructor"))],
):
    await patient_service.get_owned_patient(db, user, patient_id)
    assignments = await assignment_service.list_assignments(db, patient_id)
    return [AssignmentOut.model_validate(a) for a in assignments]


@router.get("/{patient_id}/sessions", response_model=list[SessionOut])
async def list_patient_sessions(
    patient_id: str,
    db: Annotated[AsyncSession, Depends(get_db)],
    user: Annotated[User, Depends(require_role("instructor"))],
):
    await patient_service.get_owned_patient(db, user, patient_id)
    result = await db.execute(
        select(SessionRecord)
        .where(SessionRecord.patient_id == patient_id)
        .order_by(SessionRecord.completed_at.desc())
    )
    return [SessionOut.model_validate(s) for s in result.scalars()]
