from typing import Annotated, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy import select, or_
from sqlalchemy.ext.asyncio import AsyncSession

from ..database import get_db
from ..models.catalog import Posture, TherapyType
from ..models.user import User
from ..schemas.catalog import PostureOut, TherapyTypeOut
from .deps import get_current_user

router = APIRouter(prefix="/api", tags=["catalog"])


def _escape_like(text: str) -> str:
    """Match LIKE wildcards in user input literally."""
    return text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


@router.get("/therapy-types", response_model=list[TherapyTypeOut])
async def list_therapy_types(
    db: Annotated[AsyncSession, Depends(get_db)],
    user: Annotated[User, Depends(get_current_user)],
):
    result = await db.execute(select(TherapyType).order_by(TherapyType.name))
    return [TherapyTypeOut.model_validate(t) for t in result.scalars()]


@router.get("/postures", response_model=list[PostureOut])
async def list_postures(
    db: Annotated[AsyncSession, Depends(get_db)],
    user: Annotated[User, Depends(get_current_user)],
    therapy_type_id: Optional[int] = Query(None, alias="therapyTypeId"),
    q: str = "",
):
    query = select(Posture).order_by(Posture.spanish_name)
    if q:
        pattern = f"%{_escape_like(q)}%"
        query = query.where(
            or_(
                Posture.spanish_name.ilike(pattern, escape="\\"),
                Posture.sanskrit_name.ilike(pattern, escape="\\"),
            )
        )

    result = await db.execute(query)
    postures = result.scalars().all()

    # therapy_type_ids is a JSON list, filtered here to stay portable across backends
    if therapy_type_id is not None:
        postures = [p for p in postures if therapy_type_id in (p.therapy_type_ids or [])]

    return [PostureOut.model_validate(p) for p in postures]
