"""Posture timing rules shared by series authoring and the session walkthrough."""

import math
from typing import Optional, Sequence

DEFAULT_POSTURE_SECONDS = 120


def effective_duration(
    authored: Sequence[Optional[int]] | None,
    index: int,
    catalog_duration: Optional[int],
    fallback: int = DEFAULT_POSTURE_SECONDS,
) -> int:
    """Seconds to hold the posture at ``index`` of a series.

    The authored per-slot duration wins, then the posture's catalog duration,
    then ``fallback``. Missing, null and non-positive values fall through.
    """
    if authored is not None and 0 <= index < len(authored):
        value = authored[index]
        if value is not None and value > 0:
            return value
    if catalog_duration is not None and catalog_duration > 0:
        return catalog_duration
    return fallback


def estimated_minutes(seconds: Sequence[int]) -> int:
    return math.ceil(sum(seconds) / 60)


def format_time(seconds: int) -> str:
    """Render a countdown as ``m:ss``."""
    minutes, remaining = divmod(max(seconds, 0), 60)
    return f"{minutes}:{remaining:02d}"
