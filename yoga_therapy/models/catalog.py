from sqlalchemy import Integer, String, Text, JSON
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from ..database import Base

# JSONB on PostgreSQL, plain JSON elsewhere
JSONList = JSON().with_variant(JSONB, "postgresql")


class TherapyType(Base):
    __tablename__ = "therapy_types"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    target_condition: Mapped[str] = mapped_column(String(100), nullable=False)


class Posture(Base):
    __tablename__ = "postures"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    sanskrit_name: Mapped[str] = mapped_column(String(100), nullable=False)
    spanish_name: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    image_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    video_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    instructions: Mapped[str] = mapped_column(Text, nullable=False)
    benefits: Mapped[str] = mapped_column(Text, nullable=False)
    modifications: Mapped[str | None] = mapped_column(Text, nullable=True)
    duration: Mapped[int] = mapped_column(Integer, nullable=False)  # seconds
    therapy_type_ids: Mapped[list[int]] = mapped_column(JSONList, nullable=False, default=list)
