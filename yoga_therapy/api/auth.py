from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status, Request
from sqlalchemy.ext.asyncio import AsyncSession

from ..config import settings
from ..database import get_db
from ..models.user import User
from ..rate_limit import limiter
from ..schemas.auth import LoginRequest, RegisterRequest, AuthResponse, UserBrief
from ..services.auth_service import authenticate_user, create_access_token, register_user
from .deps import get_current_user

router = APIRouter(prefix="/api/auth", tags=["auth"])


def _auth_response(user: User) -> AuthResponse:
    return AuthResponse(user=UserBrief.model_validate(user), token=create_access_token(user))


@router.post("/register", response_model=AuthResponse)
async def register(
    body: RegisterRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    user = await register_user(
        db,
        email=body.email,
        password=body.password,
        name=body.name,
        role=body.role,
        instructor_id=body.instructor_id,
    )
    return _auth_response(user)


@router.post("/login", response_model=AuthResponse)
@limiter.limit(settings.LOGIN_RATE_LIMIT)
async def login(
    request: Request,
    body: LoginRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    user = await authenticate_user(db, body.email, body.password)
    if not user:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")
    return _auth_response(user)


@router.get("/me", response_model=UserBrief)
async def me(user: Annotated[User, Depends(get_current_user)]):
    return UserBrief.model_validate(user)
