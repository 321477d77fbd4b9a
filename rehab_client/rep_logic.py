# rehab_client/rep_logic.py

from dataclasses import dataclass, replace
from typing import Optional

from rehab_client.exercises import Phase

# ----------------- Timing & scoring constants -----------------
REP_DEBOUNCE_S = 2.0          # ignore everything this long after a counted rep
COACHING_INTERVAL_S = 12.0    # min gap between coaching requests (rehab: don't overwhelm)

CALORIES_PER_REP = 0.1        # lower calorie count for rehab
ACCURACY_GOOD_FORM_BONUS = 0.5
ACCURACY_BAD_FORM_PENALTY = 1.0
ACCURACY_MIN = 0.0
ACCURACY_MAX = 100.0


@dataclass(frozen=True)
class SessionStats:
    reps: int = 0
    calories: float = 0.0
    accuracy: float = ACCURACY_MAX   # "stability" on screen, 0..100
    duration: float = 0.0            # seconds

    def record_rep(self, good_form: bool = True) -> "SessionStats":
        """Return the stats after one more counted rep."""
        if good_form:
            accuracy = min(ACCURACY_MAX, self.accuracy + ACCURACY_GOOD_FORM_BONUS)
        else:
            accuracy = max(ACCURACY_MIN, self.accuracy - ACCURACY_BAD_FORM_PENALTY)
        return replace(
            self,
            reps=self.reps + 1,
            calories=self.calories + CALORIES_PER_REP,
            accuracy=accuracy,
        )

    def with_duration(self, duration: float) -> "SessionStats":
        return replace(self, duration=max(0.0, duration))

    def to_dict(self) -> dict:
        return {
            "reps": self.reps,
            "calories": round(self.calories, 2),
            "accuracy": self.accuracy,
            "duration": round(self.duration, 1),
        }


@dataclass
class RepState:
    """
    Tracked state for one session's rep counting.

    `phase` is the last phase the machine accepted, which is not the same
    thing as the classifier output for the current frame.
    """
    phase: Phase = Phase.NEUTRAL
    rep_id: int = 0
    last_rep_time: Optional[float] = None
    last_coaching_time: Optional[float] = None


@dataclass(frozen=True)
class RepEvent:
    rep_id: int
    timestamp: float


# -------------------------------------------------------------
# Main update function
# -------------------------------------------------------------

def update_rep_state(state: RepState, phase: Phase, now: float) -> Optional[RepEvent]:
    """
    Feed one classified phase into the rep machine.

    - Inside the debounce window after a rep the observation is dropped.
    - Entering PHASE_1 from anything else counts a rep straight away
      (no hold time: instant credit is more encouraging for this group).
    - PHASE_2 re-arms the machine.
    - NEUTRAL, or PHASE_1 while already in PHASE_1, changes nothing.
    """
    if state.last_rep_time is not None and now - state.last_rep_time < REP_DEBOUNCE_S:
        return None

    if phase == Phase.PHASE_1 and state.phase != Phase.PHASE_1:
        state.phase = Phase.PHASE_1
        state.rep_id += 1
        state.last_rep_time = now
        return RepEvent(rep_id=state.rep_id, timestamp=now)

    if phase == Phase.PHASE_2:
        state.phase = Phase.PHASE_2

    return None


def should_request_coaching(state: RepState, now: float) -> bool:
    """
    Coaching gate, checked after a rep. Stamps the request time right away
    so a slow reply can't let a second request through.
    """
    if state.last_coaching_time is not None and now - state.last_coaching_time < COACHING_INTERVAL_S:
        return False
    state.last_coaching_time = now
    return True
