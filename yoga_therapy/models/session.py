import uuid
from datetime import datetime

from sqlalchemy import String, Integer, Text, DateTime, ForeignKey, func
from sqlalchemy.orm import Mapped, mapped_column

from ..database import Base


class SessionRecord(Base):
    __tablename__ = "sessions"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    patient_id: Mapped[str] = mapped_column(ForeignKey("patients.id", ondelete="CASCADE"), nullable=False, index=True)
    series_id: Mapped[str] = mapped_column(ForeignKey("series.id"), nullable=False, index=True)
    pre_intensity: Mapped[str] = mapped_column(String(20), nullable=False)
    post_intensity: Mapped[str] = mapped_column(String(20), nullable=False)
    comments: Mapped[str] = mapped_column(Text, nullable=False)
    duration: Mapped[int | None] = mapped_column(Integer, nullable=True)  # minutes
    completed_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
