import uuid
from datetime import datetime, date

from sqlalchemy import String, Date, Text, DateTime, ForeignKey, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ..database import Base


class Patient(Base):
    __tablename__ = "patients"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id: Mapped[str] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False, index=True)
    instructor_id: Mapped[str] = mapped_column(ForeignKey("users.id"), nullable=False, index=True)
    date_of_birth: Mapped[date | None] = mapped_column(Date, nullable=True)
    medical_conditions: Mapped[str | None] = mapped_column(Text, nullable=True)  # encrypted
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)               # encrypted
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())

    user: Mapped["User"] = relationship(back_populates="patient_profile", foreign_keys=[user_id])
    assignments: Mapped[list["PatientSeries"]] = relationship(
        back_populates="patient", cascade="all, delete-orphan", order_by="PatientSeries.assigned_at.desc()"
    )


# Avoid circular import
from .user import User  # noqa: E402, F401
from .series import PatientSeries  # noqa: E402, F401
