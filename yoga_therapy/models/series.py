import uuid
from datetime import datetime

from sqlalchemy import String, Boolean, DateTime, Integer, Text, ForeignKey, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ..database import Base
from .catalog import JSONList


class Series(Base):
    __tablename__ = "series"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    instructor_id: Mapped[str] = mapped_column(ForeignKey("users.id"), nullable=False, index=True)
    therapy_type_id: Mapped[int] = mapped_column(ForeignKey("therapy_types.id"), nullable=False)
    recommended_sessions: Mapped[int] = mapped_column(Integer, nullable=False)
    estimated_duration: Mapped[int] = mapped_column(Integer, nullable=False)  # minutes
    posture_ids: Mapped[list[int]] = mapped_column(JSONList, nullable=False)
    posture_durations: Mapped[list[int | None]] = mapped_column(JSONList, nullable=False, default=list)  # seconds
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())


class PatientSeries(Base):
    __tablename__ = "patient_series"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    patient_id: Mapped[str] = mapped_column(ForeignKey("patients.id", ondelete="CASCADE"), nullable=False, index=True)
    series_id: Mapped[str] = mapped_column(ForeignKey("series.id"), nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    completed_sessions: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    assigned_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())

    patient: Mapped["Patient"] = relationship(back_populates="assignments")
    series: Mapped["Series"] = relationship(lazy="joined")


from .patient import Patient  # noqa: E402, F401
