# rehab_client/exercises.py

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, List, NamedTuple, Optional

from rehab_client.landmarks import LandmarkFrame, PoseLandmark, is_valid_frame


class ExerciseType(str, Enum):
    HAND_RAISE = "HAND_RAISE"
    LEG_LIFT = "LEG_LIFT"
    SIDE_BEND = "SIDE_BEND"
    NECK_ROTATION = "NECK_ROTATION"
    ARM_EXTENSION = "ARM_EXTENSION"


class Phase(str, Enum):
    NEUTRAL = "NEUTRAL"
    PHASE_1 = "PHASE_1"   # effortful / target position, entering it counts a rep
    PHASE_2 = "PHASE_2"   # ready / rest position


class Classification(NamedTuple):
    phase: Phase
    instruction: str


@dataclass(frozen=True)
class ExerciseConfig:
    id: ExerciseType
    name: str
    description: str
    instruction: str
    difficulty: str                   # "Gentle" or "Moderate"
    target_muscles: List[str] = field(default_factory=list)

    def menu_line(self) -> str:
        return f"{self.name} ({self.difficulty}) - {self.description} Targets: {', '.join(self.target_muscles)}"


# ----------------- Exercise catalogue -----------------
EXERCISES: Dict[ExerciseType, ExerciseConfig] = {
    ExerciseType.HAND_RAISE: ExerciseConfig(
        id=ExerciseType.HAND_RAISE,
        name="Dual Hand Reach",
        description="Gentle overhead reaching to improve shoulder mobility.",
        instruction="Slowly raise both hands above your head, then lower them.",
        difficulty="Gentle",
        target_muscles=["Shoulders", "Upper Back"],
    ),
    ExerciseType.LEG_LIFT: ExerciseConfig(
        id=ExerciseType.LEG_LIFT,
        name="Seated Knee Lift",
        description="Hip strengthening exercise suitable for standing or sitting.",
        instruction="Lift one knee up gently towards your chest, then switch.",
        difficulty="Moderate",
        target_muscles=["Hip Flexors", "Thighs"],
    ),
    ExerciseType.SIDE_BEND: ExerciseConfig(
        id=ExerciseType.SIDE_BEND,
        name="Torso Sway",
        description="Lateral spine movement to reduce stiffness.",
        instruction="Keep hips still. Gently lean your upper body to the left, then right.",
        difficulty="Gentle",
        target_muscles=["Core", "Lower Back"],
    ),
    ExerciseType.NECK_ROTATION: ExerciseConfig(
        id=ExerciseType.NECK_ROTATION,
        name="Visual Tracking",
        description="Neck mobility and vestibular system engagement.",
        instruction="Slowly turn your head to look left, then turn to look right.",
        difficulty="Gentle",
        target_muscles=["Neck", "Vestibular System"],
    ),
    ExerciseType.ARM_EXTENSION: ExerciseConfig(
        id=ExerciseType.ARM_EXTENSION,
        name="T-Pose Expansion",
        description="Chest opening and posture correction.",
        instruction="Start hands at chest, open arms wide to the sides like a 'T'.",
        difficulty="Gentle",
        target_muscles=["Chest", "Upper Back"],
    ),
}


def get_exercise_config(exercise: ExerciseType) -> ExerciseConfig:
    return EXERCISES[exercise]


# ----------------- Thresholds (gentle rehab movement, normalized units) -----------------
LEG_LIFT_HIP_KNEE_GAP = 0.15      # knee risen to within this of hip height
SIDE_BEND_TILT = 0.15             # shoulder height difference
NECK_TURN_RATIO = 0.25            # nose offset as a fraction of shoulder width
ARM_OPEN_RATIO = 2.5              # wrist spread vs shoulder spread
ARM_CLOSED_RATIO = 1.5


Classifier = Callable[[LandmarkFrame], Classification]

_CLASSIFIERS: Dict[ExerciseType, Classifier] = {}


def register_classifier(exercise: ExerciseType) -> Callable[[Classifier], Classifier]:
    """Register the phase rule for one exercise type."""
    def decorator(func: Classifier) -> Classifier:
        _CLASSIFIERS[exercise] = func
        return func
    return decorator


def classify(exercise: ExerciseType, frame: Optional[LandmarkFrame]) -> Optional[Classification]:
    """
    Map one landmark frame to (phase, instruction) for the given exercise.

    Pure: no state is kept between calls. Returns None when the frame is
    missing or has fewer than 33 landmarks, so the caller can drop it.
    """
    if not is_valid_frame(frame):
        return None
    return _CLASSIFIERS[ExerciseType(exercise)](frame)


# -------------------------------------------------------------
# Per-exercise rules
# -------------------------------------------------------------

@register_classifier(ExerciseType.HAND_RAISE)
def classify_hand_raise(lm: LandmarkFrame) -> Classification:
    nose = lm[PoseLandmark.NOSE]
    left_shoulder = lm[PoseLandmark.LEFT_SHOULDER]
    right_shoulder = lm[PoseLandmark.RIGHT_SHOULDER]
    left_wrist = lm[PoseLandmark.LEFT_WRIST]
    right_wrist = lm[PoseLandmark.RIGHT_WRIST]

    # y grows downward: smaller y = higher up
    hands_up = left_wrist.y < nose.y and right_wrist.y < nose.y
    hands_down = left_wrist.y > left_shoulder.y and right_wrist.y > right_shoulder.y

    if hands_up:
        return Classification(Phase.PHASE_1, "Hold... Now Relax")
    if hands_down:
        return Classification(Phase.PHASE_2, "Slowly Raise Arms")
    return Classification(Phase.NEUTRAL, "Keep Going")


@register_classifier(ExerciseType.LEG_LIFT)
def classify_leg_lift(lm: LandmarkFrame) -> Classification:
    left_lifted = (lm[PoseLandmark.LEFT_HIP].y - lm[PoseLandmark.LEFT_KNEE].y) < LEG_LIFT_HIP_KNEE_GAP
    right_lifted = (lm[PoseLandmark.RIGHT_HIP].y - lm[PoseLandmark.RIGHT_KNEE].y) < LEG_LIFT_HIP_KNEE_GAP

    if left_lifted or right_lifted:
        return Classification(Phase.PHASE_1, "Good. Lower Leg.")
    return Classification(Phase.PHASE_2, "Lift One Knee")


@register_classifier(ExerciseType.SIDE_BEND)
def classify_side_bend(lm: LandmarkFrame) -> Classification:
    tilt = abs(lm[PoseLandmark.RIGHT_SHOULDER].y - lm[PoseLandmark.LEFT_SHOULDER].y)

    # Tilt itself is the counted position; see DESIGN.md on polarity.
    if tilt > SIDE_BEND_TILT:
        return Classification(Phase.PHASE_1, "Center Your Body")
    return Classification(Phase.PHASE_2, "Lean Side to Side")


@register_classifier(ExerciseType.NECK_ROTATION)
def classify_neck_rotation(lm: LandmarkFrame) -> Classification:
    left_shoulder = lm[PoseLandmark.LEFT_SHOULDER]
    right_shoulder = lm[PoseLandmark.RIGHT_SHOULDER]

    mid_shoulder_x = (left_shoulder.x + right_shoulder.x) / 2
    shoulder_width = abs(left_shoulder.x - right_shoulder.x)
    offset = lm[PoseLandmark.NOSE].x - mid_shoulder_x

    if abs(offset) > shoulder_width * NECK_TURN_RATIO:
        return Classification(Phase.PHASE_1, "Return to Center")
    return Classification(Phase.PHASE_2, "Look Left or Right")


@register_classifier(ExerciseType.ARM_EXTENSION)
def classify_arm_extension(lm: LandmarkFrame) -> Classification:
    wrist_dist = abs(lm[PoseLandmark.LEFT_WRIST].x - lm[PoseLandmark.RIGHT_WRIST].x)
    shoulder_dist = abs(lm[PoseLandmark.LEFT_SHOULDER].x - lm[PoseLandmark.RIGHT_SHOULDER].x)

    if wrist_dist > shoulder_dist * ARM_OPEN_RATIO:
        return Classification(Phase.PHASE_1, "Bring Hands Together")
    if wrist_dist < shoulder_dist * ARM_CLOSED_RATIO:
        return Classification(Phase.PHASE_2, "Open Arms Wide")
    # Between the two thresholds: no transition either way
    return Classification(Phase.NEUTRAL, "Keep Opening Slowly")
