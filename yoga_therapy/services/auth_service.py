import logging
from datetime import datetime, timedelta, timezone

from jose import jwt, JWTError
from passlib.context import CryptContext
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..config import settings
from ..errors import ConflictError, ValidationError
from ..models.user import User
from ..models.patient import Patient

logger = logging.getLogger("yoga_therapy")

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain: str, hashed: str) -> bool:
    return pwd_context.verify(plain, hashed)


def create_access_token(user: User) -> str:
    expires = datetime.now(timezone.utc) + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    payload = {
        "sub": str(user.id),
        "email": user.email,
        "role": user.role,
        "exp": expires,
    }
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_access_token(token: str) -> dict | None:
    try:
        return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        return None


async def get_user_by_email(db: AsyncSession, email: str) -> User | None:
    result = await db.execute(select(User).where(User.email == email.lower()))
    return result.scalar_one_or_none()


async def authenticate_user(db: AsyncSession, email: str, password: str) -> User | None:
    user = await get_user_by_email(db, email)
    if not user:
        return None
    if not verify_password(password, user.password_hash):
        return None
    return user


async def find_patient_by_user_id(db: AsyncSession, user_id: str) -> Patient | None:
    result = await db.execute(select(Patient).where(Patient.user_id == user_id))
    return result.scalar_one_or_none()


async def _resolve_instructor(db: AsyncSession, instructor_id: str | None) -> User:
    if instructor_id:
        result = await db.execute(
            select(User).where(User.id == instructor_id, User.role == "instructor")
        )
        instructor = result.scalar_one_or_none()
        if not instructor:
            raise ValidationError("Unknown instructor")
        return instructor

    result = await db.execute(
        select(User).where(User.role == "instructor").order_by(User.created_at, User.id).limit(1)
    )
    instructor = result.scalar_one_or_none()
    if not instructor:
        raise ValidationError("No instructor available to take this patient")
    return instructor


async def register_user(
    db: AsyncSession,
    email: str,
    password: str,
    name: str,
    role: str,
    instructor_id: str | None = None,
) -> User:
    """Create a user; patients also get a profile under an instructor."""
    if await get_user_by_email(db, email):
        raise ConflictError("User already exists")

    instructor = None
    if role == "patient":
        instructor = await _resolve_instructor(db, instructor_id)

    user = User(
        email=email.lower(),
        password_hash=hash_password(password),
        name=name,
        role=role,
    )
    db.add(user)
    await db.flush()

    if instructor is not None:
        db.add(Patient(user_id=user.id, instructor_id=instructor.id))

    await db.commit()
    await db.refresh(user)
    logger.info(f"Registered {role} {user.id}")
    return user
