# rehab_client/session.py

import logging
import time
import uuid
from dataclasses import dataclass
from typing import Callable, Optional

from rehab_client.coaching import SUMMARY, TIP, CoachingIntent, CoachingScheduler
from rehab_client.exercises import Classification, ExerciseType, classify
from rehab_client.landmarks import LandmarkFrame
from rehab_client.rep_logic import RepState, SessionStats, should_request_coaching, update_rep_state

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FrameResult:
    classification: Optional[Classification]   # None when the frame was dropped
    rep_counted: bool
    stats: SessionStats


class RehabSession:
    """
    One exercise session at a time, driven from the frame thread.

    This object is the only writer of the stats; readers get frozen
    `SessionStats` snapshots. Coaching goes out through the scheduler.
    """

    def __init__(self, scheduler: CoachingScheduler, clock: Callable[[], float] = time.monotonic):
        self.scheduler = scheduler
        self.clock = clock
        self.exercise: Optional[ExerciseType] = None
        self.session_id: Optional[str] = None
        self.active = False
        self._state = RepState()
        self._stats = SessionStats()
        self._started_at = 0.0

    def start_session(self, exercise: ExerciseType, now: Optional[float] = None) -> str:
        exercise = ExerciseType(exercise)   # raises before touching a live session
        if self.active:
            self.end_session(now)
        self.exercise = exercise
        self.session_id = uuid.uuid4().hex
        self._state = RepState()
        self._stats = SessionStats()
        self._started_at = self.clock() if now is None else now
        self.active = True
        self.scheduler.open_session(self.session_id)
        logger.info("[SESSION] started %s (%s)", self.exercise.value, self.session_id)
        return self.session_id

    @property
    def stats(self) -> SessionStats:
        if self.active:
            return self._stats.with_duration(self.clock() - self._started_at)
        return self._stats

    def process_frame(self, frame: Optional[LandmarkFrame], now: Optional[float] = None) -> FrameResult:
        if not self.active:
            return FrameResult(None, False, self._stats)

        now = self.clock() if now is None else now
        self._stats = self._stats.with_duration(now - self._started_at)

        result = classify(self.exercise, frame)
        if result is None:
            return FrameResult(None, False, self._stats)

        event = update_rep_state(self._state, result.phase, now)
        if event is None:
            return FrameResult(result, False, self._stats)

        # Form checks are not implemented yet, so every counted rep is good form.
        self._stats = self._stats.record_rep(good_form=True)

        if should_request_coaching(self._state, now):
            self.scheduler.submit(CoachingIntent(TIP, self.session_id, self.exercise, self._stats))

        return FrameResult(result, True, self._stats)

    def end_session(self, now: Optional[float] = None) -> SessionStats:
        """Freeze the stats and ask for exactly one summary. Safe to call twice."""
        if not self.active:
            return self._stats

        now = self.clock() if now is None else now
        self._stats = self._stats.with_duration(now - self._started_at)
        self.active = False
        self.scheduler.close_session(self.session_id)
        self.scheduler.submit(CoachingIntent(SUMMARY, self.session_id, self.exercise, self._stats))
        logger.info("[SESSION] ended %s: %s", self.session_id, self._stats.to_dict())
        return self._stats
