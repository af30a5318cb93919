from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ..database import get_db
from ..models.user import User
from ..schemas.series import SeriesCreate, SeriesOut
from ..services import series_service
from .deps import require_role

router = APIRouter(prefix="/api/series", tags=["series"])


@router.get("", response_model=list[SeriesOut])
async def list_series(
    db: Annotated[AsyncSession, Depends(get_db)],
    user: Annotated[User, Depends(require_role("instructor"))],
):
    return [SeriesOut.model_validate(s) for s in await series_service.list_series(db, user)]


@router.post("", response_model=SeriesOut, status_code=201)
async def create_series(
    body: SeriesCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
    user: Annotated[User, Depends(require_role("instructor"))],
):
    series = await series_service.create_series(db, user, body)
    return SeriesOut.model_validate(series)
