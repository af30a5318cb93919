from datetime import datetime, date
from typing import Optional

from .auth import UserBrief
from .base import ApiModel


class PatientCreate(ApiModel):
    user_id: str
    date_of_birth: Optional[date] = None
    medical_conditions: Optional[str] = None
    notes: Optional[str] = None


class PatientOut(ApiModel):
    id: str
    user_id: str
    instructor_id: str
    date_of_birth: Optional[date] = None
    medical_conditions: Optional[str] = None
    notes: Optional[str] = None
    created_at: datetime
    user: UserBrief
