# rehab_client/landmarks.py

from enum import IntEnum
from typing import NamedTuple, Optional, Sequence

NUM_LANDMARKS = 33
VISIBILITY_THRESHOLD = 0.5


class Landmark(NamedTuple):
    """One body landmark, normalized to the frame (y grows downward)."""
    x: float
    y: float
    z: float = 0.0
    visibility: float = 1.0


class PoseLandmark(IntEnum):
    # MediaPipe Pose numbering (only the points we reason about)
    NOSE = 0
    LEFT_SHOULDER = 11
    RIGHT_SHOULDER = 12
    LEFT_ELBOW = 13
    RIGHT_ELBOW = 14
    LEFT_WRIST = 15
    RIGHT_WRIST = 16
    LEFT_HIP = 23
    RIGHT_HIP = 24
    LEFT_KNEE = 25
    RIGHT_KNEE = 26
    LEFT_ANKLE = 27
    RIGHT_ANKLE = 28


# A frame is just the ordered landmark sequence for one person.
LandmarkFrame = Sequence[Landmark]


def is_valid_frame(frame: Optional[LandmarkFrame]) -> bool:
    return frame is not None and len(frame) >= NUM_LANDMARKS


def is_visible(landmark: Landmark, threshold: float = VISIBILITY_THRESHOLD) -> bool:
    return landmark.visibility > threshold
