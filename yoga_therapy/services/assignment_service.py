"""Series assignment.

A patient has at most one active series. Assigning a new one deactivates the
current assignment and inserts the replacement in the same transaction, so
readers never see zero or two active rows for a patient.
"""

import logging

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from ..errors import AuthorizationError, NotFoundError
from ..models.patient import Patient
from ..models.series import PatientSeries, Series
from ..models.user import User

logger = logging.getLogger("yoga_therapy")


async def assign_series(db: AsyncSession, patient_id: str, series_id: str, instructor: User) -> PatientSeries:
    patient = await db.get(Patient, patient_id)
    if not patient:
        raise NotFoundError("Patient not found")
    series = await db.get(Series, series_id)
    if not series:
        raise NotFoundError("Series not found")

    if patient.instructor_id != instructor.id:
        raise AuthorizationError("Patient belongs to another instructor")
    if series.instructor_id != instructor.id:
        raise AuthorizationError("Series belongs to another instructor")

    try:
        await db.execute(
            update(PatientSeries)
            .where(PatientSeries.patient_id == patient_id, PatientSeries.is_active == True)  # noqa: E712
            .values(is_active=False)
        )
        assignment = PatientSeries(
            patient_id=patient_id,
            series_id=series_id,
            is_active=True,
            completed_sessions=0,
        )
        db.add(assignment)
        await db.commit()
    except Exception:
        await db.rollback()
        raise

    logger.info(f"Assigned series {series_id} to patient {patient_id}")
    return await _load(db, assignment.id)


async def _load(db: AsyncSession, assignment_id: str) -> PatientSeries:
    result = await db.execute(
        select(PatientSeries)
        .where(PatientSeries.id == assignment_id)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one()


async def get_active_assignment(db: AsyncSession, patient_id: str) -> PatientSeries | None:
    result = await db.execute(
        select(PatientSeries).where(
            PatientSeries.patient_id == patient_id,
            PatientSeries.is_active == True,  # noqa: E712
        )
    )
    return result.scalar_one_or_none()


async def list_assignments(db: AsyncSession, patient_id: str) -> list[PatientSeries]:
    result = await db.execute(
        select(PatientSeries)
        .where(PatientSeries.patient_id == patient_id)
        .order_by(PatientSeries.assigned_at.desc())
    )
    return list(result.scalars())


async def record_completed_session(db: AsyncSession, patient_id: str, series_id: str) -> bool:
    """Count a finished session against the active assignment for that series.

    The increment runs in SQL so overlapping submits each add one.
    """
    result = await db.execute(
        update(PatientSeries)
        .where(
            PatientSeries.patient_id == patient_id,
            PatientSeries.series_id == series_id,
            PatientSeries.is_active == True,  # noqa: E712
        )
        .values(completed_sessions=PatientSeries.completed_sessions + 1)
        .execution_options(synchronize_session=False)
    )
    return result.rowcount > 0
