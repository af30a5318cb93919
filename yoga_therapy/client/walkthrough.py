"""Guided session walkthrough.

A walkthrough takes a patient through the postures of their series one at a
time. It starts in ``pre-assessment`` (how do you feel now?), counts each
posture down in ``execution``, and ends in ``post-assessment`` where the
patient rates how they feel afterwards and leaves a comment. Submitting
creates the session record on the server and closes the walkthrough.

The countdown is driven by a scheduler tick registered only while the
walkthrough is executing and not paused.
"""

import logging
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterable, Optional, get_args

from ..durations import DEFAULT_POSTURE_SECONDS, effective_duration, format_time
from ..errors import ConflictError, ValidationError
from ..schemas.catalog import PostureOut
from ..schemas.series import SeriesOut
from ..schemas.session import Intensity, SessionCreate, SessionOut
from .api_client import ApiClient
from .scheduler import TickHandle

logger = logging.getLogger("yoga_therapy")

INTENSITY_LEVELS = get_args(Intensity)


class Phase(str, Enum):
    PRE_ASSESSMENT = "pre-assessment"
    EXECUTION = "execution"
    POST_ASSESSMENT = "post-assessment"


class InvalidPhaseError(ConflictError):
    """The action is not available in the walkthrough's current phase."""


@dataclass(frozen=True)
class Step:
    posture: PostureOut
    slot: int       # position in the series' posture list
    duration: int   # seconds


def build_steps(
    series: SeriesOut,
    postures: Iterable[PostureOut],
    fallback: int = DEFAULT_POSTURE_SECONDS,
) -> list[Step]:
    """Resolve the series' posture ids against the catalog.

    Slots referring to a posture missing from the catalog are dropped.
    """
    catalog = {p.id: p for p in postures}
    steps = []
    for slot, posture_id in enumerate(series.posture_ids):
        posture = catalog.get(posture_id)
        if posture is None:
            logger.warning(f"Series {series.id}: posture {posture_id} at slot {slot} is not in the catalog, skipping")
            continue
        duration = effective_duration(series.posture_durations, slot, posture.duration, fallback)
        steps.append(Step(posture=posture, slot=slot, duration=duration))
    return steps


class SessionWalkthrough:
    def __init__(
        self,
        series: SeriesOut,
        postures: Iterable[PostureOut],
        scheduler,
        on_complete: Optional[Callable[[SessionOut], None]] = None,
    ):
        self.series = series
        self.steps = build_steps(series, postures)
        self.scheduler = scheduler
        self.on_complete = on_complete

        self.phase = Phase.PRE_ASSESSMENT
        self.current_index = 0
        self.time_remaining = 0
        self.is_paused = False
        self.pre_intensity: Optional[str] = None
        self.post_intensity: Optional[str] = None
        self.comments = ""
        self.closed = False
        self.record: Optional[SessionOut] = None

        self._tick: Optional[TickHandle] = None
        self._lock = threading.RLock()

    # ═══ Read-only views ═══

    @property
    def total_steps(self) -> int:
        return len(self.steps)

    @property
    def current_step(self) -> Optional[Step]:
        if self.phase is not Phase.EXECUTION or not self.steps:
            return None
        return self.steps[self.current_index]

    @property
    def progress_percentage(self) -> float:
        """Share of postures already finished, not counting the current one."""
        if self.phase is Phase.POST_ASSESSMENT:
            return 100.0
        if not self.steps:
            return 0.0
        return self.current_index / len(self.steps) * 100

    @property
    def time_fraction(self) -> float:
        step = self.current_step
        if step is None:
            return 0.0
        return self.time_remaining / step.duration

    @property
    def countdown(self) -> str:
        return format_time(self.time_remaining)

    @property
    def timer_running(self) -> bool:
        return self._tick is not None

    # ═══ Pre-assessment ═══

    def select_pre_intensity(self, level: str) -> None:
        with self._lock:
            self._require(Phase.PRE_ASSESSMENT)
            self.pre_intensity = _check_level(level)

    def start(self) -> None:
        with self._lock:
            self._require(Phase.PRE_ASSESSMENT)
            if self.pre_intensity is None:
                raise ValidationError("Select how you feel before starting")
            if not self.steps:
                self._set_phase(Phase.POST_ASSESSMENT)
                return
            self._set_phase(Phase.EXECUTION)
            self._enter_step(0)

    # ═══ Execution ═══

    def toggle_pause(self) -> None:
        with self._lock:
            self._require(Phase.EXECUTION)
            self.is_paused = not self.is_paused
            self._sync_timer()

    def next_posture(self) -> None:
        with self._lock:
            self._require(Phase.EXECUTION)
            self._advance()

    def _advance(self) -> None:
        next_index = self.current_index + 1
        if next_index >= len(self.steps):
            self._set_phase(Phase.POST_ASSESSMENT)
        else:
            self._enter_step(next_index)

    def _enter_step(self, index: int) -> None:
        self.current_index = index
        self.time_remaining = self.steps[index].duration
        self.is_paused = False
        # every posture starts with a fresh one-second tick
        self._cancel_timer()
        self._sync_timer()

    def _on_tick(self, handle: TickHandle) -> None:
        with self._lock:
            if handle is not self._tick:
                return
            if self.phase is not Phase.EXECUTION or self.is_paused:
                return
            if self.time_remaining > 0:
                self.time_remaining -= 1
            if self.time_remaining == 0:
                self._advance()

    # ═══ Post-assessment ═══

    def select_post_intensity(self, level: str) -> None:
        with self._lock:
            self._require(Phase.POST_ASSESSMENT)
            self.post_intensity = _check_level(level)

    def set_comments(self, text: str) -> None:
        with self._lock:
            self._require(Phase.POST_ASSESSMENT)
            self.comments = text

    def submit(self, client: ApiClient) -> SessionOut:
        """Send the session record.

        Nothing is sent unless both the post intensity and a comment are
        present. If the request fails the walkthrough keeps every input so
        the patient can try again.
        """
        with self._lock:
            self._require(Phase.POST_ASSESSMENT)
            if self.post_intensity is None:
                raise ValidationError("Select how you feel after the session")
            if not self.comments.strip():
                raise ValidationError("Comments are required")

            payload = SessionCreate(
                series_id=self.series.id,
                pre_intensity=self.pre_intensity,
                post_intensity=self.post_intensity,
                comments=self.comments,
                duration=self.series.estimated_duration,
            )
            record = client.create_session(payload)

            self.record = record
            self.close()

        if self.on_complete is not None:
            self.on_complete(record)
        return record

    # ═══ Lifetime ═══

    def close(self) -> None:
        """Tear down; no tick fires after this returns."""
        with self._lock:
            self.closed = True
            tick = self._tick
            self._cancel_timer()
        if tick is not None:
            # wait for an in-flight tick outside the lock it needs
            tick.cancel()

    def _set_phase(self, phase: Phase) -> None:
        logger.debug(f"Walkthrough {self.series.id}: {self.phase.value} -> {phase.value}")
        self.phase = phase
        self._cancel_timer()
        self._sync_timer()

    def _sync_timer(self) -> None:
        should_run = self.phase is Phase.EXECUTION and not self.is_paused and not self.closed
        if should_run and self._tick is None:
            handle = None

            def fire():
                self._on_tick(handle)

            handle = self.scheduler.every(1, fire)
            self._tick = handle
        elif not should_run:
            self._cancel_timer()

    def _cancel_timer(self) -> None:
        if self._tick is not None:
            self._tick.cancel(wait=False)
            self._tick = None

    def _require(self, phase: Phase) -> None:
        if self.closed:
            raise InvalidPhaseError("The walkthrough is closed")
        if self.phase is not phase:
            raise InvalidPhaseError(f"Not available during {self.phase.value}")


def _check_level(level: str) -> str:
    if level not in INTENSITY_LEVELS:
        raise ValidationError(f"Intensity must be one of {', '.join(INTENSITY_LEVELS)}")
    return level
