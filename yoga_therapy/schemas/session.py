from datetime import datetime
from typing import Literal, Optional

from pydantic import Field, field_validator

from .base import ApiModel

Intensity = Literal["none", "moderate", "intense"]


class SessionCreate(ApiModel):
    series_id: str
    pre_intensity: Intensity
    post_intensity: Intensity
    comments: str
    duration: Optional[int] = Field(default=None, ge=0)  # minutes

    @field_validator("comments")
    @classmethod
    def _comments_required(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Comments are required")
        return value


class SessionOut(ApiModel):
    id: str
    patient_id: str
    series_id: str
    pre_intensity: Intensity
    post_intensity: Intensity
    comments: str
    duration: Optional[int] = None
    completed_at: datetime
