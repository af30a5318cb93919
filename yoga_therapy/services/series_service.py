import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..config import settings
from ..durations import effective_duration, estimated_minutes
from ..errors import NotFoundError, ValidationError
from ..models.catalog import Posture, TherapyType
from ..models.series import Series
from ..models.user import User
from ..schemas.series import SeriesCreate

logger = logging.getLogger("yoga_therapy")


async def create_series(db: AsyncSession, instructor: User, body: SeriesCreate) -> Series:
    therapy_type = await db.get(TherapyType, body.therapy_type_id)
    if not therapy_type:
        raise NotFoundError("Therapy type not found")

    if len(body.posture_ids) < settings.MIN_SERIES_POSTURES:
        raise ValidationError(f"A series needs at least {settings.MIN_SERIES_POSTURES} postures")
    if len(body.posture_durations) > len(body.posture_ids):
        raise ValidationError("More posture durations than postures")
    if any(d is not None and d <= 0 for d in body.posture_durations):
        raise ValidationError("Posture durations must be positive")

    result = await db.execute(select(Posture).where(Posture.id.in_(set(body.posture_ids))))
    catalog = {p.id: p for p in result.scalars()}
    missing = sorted(set(body.posture_ids) - catalog.keys())
    if missing:
        raise ValidationError(f"Unknown posture ids: {missing}")

    seconds = [
        effective_duration(
            body.posture_durations, i, catalog[pid].duration, settings.DEFAULT_POSTURE_SECONDS
        )
        for i, pid in enumerate(body.posture_ids)
    ]

    series = Series(
        name=body.name,
        description=body.description,
        instructor_id=instructor.id,
        therapy_type_id=body.therapy_type_id,
        recommended_sessions=body.recommended_sessions,
        estimated_duration=estimated_minutes(seconds),
        posture_ids=list(body.posture_ids),
        posture_durations=list(body.posture_durations),
    )
    db.add(series)
    await db.commit()
    await db.refresh(series)

    logger.info(f"Instructor {instructor.id} created series {series.id} ({len(seconds)} postures)")
    return series


async def list_series(db: AsyncSession, instructor: User) -> list[Series]:
    result = await db.execute(
        select(Series)
        .where(Series.instructor_id == instructor.id)
        .order_by(Series.created_at.desc())
    )
    return list(result.scalars())
