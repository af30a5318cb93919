from typing import Optional

from .base import ApiModel


class TherapyTypeOut(ApiModel):
    id: int
    name: str
    description: Optional[str] = None
    target_condition: str


class PostureOut(ApiModel):
    id: int
    sanskrit_name: str
    spanish_name: str
    image_url: Optional[str] = None
    video_url: Optional[str] = None
    instructions: str
    benefits: str
    modifications: Optional[str] = None
    duration: int
    therapy_type_ids: list[int] = []
