# rehab_backend/models.py
from pydantic import BaseModel, Field
from typing import Literal

ExerciseName = Literal[
    "HAND_RAISE",
    "LEG_LIFT",
    "SIDE_BEND",
    "NECK_ROTATION",
    "ARM_EXTENSION",
]


class SessionStatsModel(BaseModel):
    reps: int = Field(0, ge=0)
    calories: float = Field(0.0, ge=0)
    accuracy: float = Field(100.0, ge=0, le=100)   # stability score
    duration: float = Field(0.0, ge=0)             # seconds


class CoachingRequest(BaseModel):
    exercise: ExerciseName
    stats: SessionStatsModel = Field(default_factory=SessionStatsModel)


class CoachingResponse(BaseModel):
    exercise: str
    message: str
    fallback: bool = False   # True when the LLM failed and the static text was used
