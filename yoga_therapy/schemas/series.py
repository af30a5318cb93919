from datetime import datetime
from typing import Optional

from pydantic import Field

from .base import ApiModel


class SeriesCreate(ApiModel):
    name: str = Field(min_length=1)
    description: Optional[str] = None
    therapy_type_id: int
    posture_ids: list[int]
    # may be shorter than posture_ids; null or missing slots use the catalog duration
    posture_durations: list[Optional[int]] = []
    recommended_sessions: int = Field(gt=0)


class SeriesOut(ApiModel):
    id: str
    name: str
    description: Optional[str] = None
    instructor_id: str
    therapy_type_id: int
    recommended_sessions: int
    estimated_duration: int
    posture_ids: list[int]
    posture_durations: list[Optional[int]]
    created_at: datetime


class AssignSeriesRequest(ApiModel):
    series_id: str


class AssignmentOut(ApiModel):
    id: str
    patient_id: str
    series_id: str
    is_active: bool
    completed_sessions: int
    assigned_at: datetime
    series: SeriesOut
