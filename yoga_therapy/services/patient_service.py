import logging
from datetime import date

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from ..errors import AuthorizationError, ConflictError, NotFoundError, ValidationError
from ..models.patient import Patient
from ..models.user import User
from .auth_service import find_patient_by_user_id
from .encryption_service import encrypt

logger = logging.getLogger("yoga_therapy")


async def list_patients(db: AsyncSession, instructor: User) -> list[Patient]:
    result = await db.execute(
        select(Patient)
        .where(Patient.instructor_id == instructor.id)
        .options(selectinload(Patient.user))
        .order_by(Patient.created_at.desc())
    )
    return list(result.scalars())


async def get_owned_patient(db: AsyncSession, instructor: User, patient_id: str) -> Patient:
    """Load a patient, requiring it to belong to ``instructor``."""
    result = await db.execute(
        select(Patient)
        .where(Patient.id == patient_id)
        .options(selectinload(Patient.user))
        .execution_options(populate_existing=True)
    )
    patient = result.scalar_one_or_none()
    if not patient:
        raise NotFoundError("Patient not found")
    if patient.instructor_id != instructor.id:
        raise AuthorizationError("Patient belongs to another instructor")
    return patient


async def create_patient_profile(
    db: AsyncSession,
    instructor: User,
    user_id: str,
    date_of_birth: date | None = None,
    medical_conditions: str | None = None,
    notes: str | None = None,
) -> Patient:
    """Attach a profile for an existing patient-role user to ``instructor``."""
    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()
    if not user:
        raise NotFoundError("User not found")
    if user.role != "patient":
        raise ValidationError("User is not a patient")
    if await find_patient_by_user_id(db, user.id):
        raise ConflictError("User already has a patient profile")

    patient = Patient(
        user_id=user.id,
        instructor_id=instructor.id,
        date_of_birth=date_of_birth,
        medical_conditions=encrypt(medical_conditions),
        notes=encrypt(notes),
    )
    db.add(patient)
    await db.commit()

    logger.info(f"Instructor {instructor.id} created patient {patient.id}")
    return await get_owned_patient(db, instructor, patient.id)
