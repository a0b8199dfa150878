"""Pydantic validation models for records handed to the engine by collaborators.

Numeric sanity (weight > 0, reps > 0) is not enforced here; the analyzers
skip such records themselves.
"""

from __future__ import annotations

from datetime import datetime
from typing import Literal, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator

from training_engine.services.effective_reps import parse_rir


class CompletedSet(BaseModel):
    exercise_id: str = ""
    set_type: str = "working"
    completed: bool = True
    weight_lbs: Optional[float] = Field(
        default=None, validation_alias=AliasChoices("weight_lbs", "actual_weight_lbs", "weight")
    )
    reps: Optional[int] = Field(default=None, validation_alias=AliasChoices("reps", "actual_reps"))
    rpe: Optional[float] = Field(
        default=None, ge=1, le=10, validation_alias=AliasChoices("rpe", "actual_rpe")
    )
    rir: Optional[int] = None
    duration_seconds: Optional[float] = Field(default=None, ge=0)
    performed_at: Optional[datetime] = None

    @field_validator("rir", mode="before")
    @classmethod
    def normalise_rir(cls, v):
        if v is None or v == "":
            return None
        parsed = parse_rir(v)
        if parsed is None:
            raise ValueError(f"unrecognised RIR value: {v!r}")
        return parsed

    @field_validator("set_type")
    @classmethod
    def lower_set_type(cls, v):
        return v.strip().lower()


class WorkoutSession(BaseModel):
    sets: list[CompletedSet] = Field(default_factory=list)
    started_at: Optional[datetime] = None


class ExerciseMuscles(BaseModel):
    exercise_id: str = ""
    primary_muscles: list[str] = Field(default_factory=list)
    secondary_muscles: list[str] = Field(default_factory=list)


class LandmarkOverrides(BaseModel):
    """User-specific landmark overrides; any field left unset keeps the default."""
    model_config = ConfigDict(populate_by_name=True)

    mev: Optional[int] = Field(default=None, ge=0)
    mav_low: Optional[int] = Field(default=None, ge=0, alias="mavLow")
    mav_high: Optional[int] = Field(default=None, ge=0, alias="mavHigh")
    mrv: Optional[int] = Field(default=None, ge=0)

    @model_validator(mode="after")
    def _ascending(self):
        values = [self.mev, self.mav_low, self.mav_high, self.mrv]
        if all(v is not None for v in values) and values != sorted(values):
            raise ValueError("landmarks must satisfy mev <= mavLow <= mavHigh <= mrv")
        return self


class LiftsInput(BaseModel):
    """Current 1RMs (lbs) of the reference lift and the lifts compared to it."""
    squat: Optional[float] = None
    bench: Optional[float] = None
    deadlift: Optional[float] = None
    ohp: Optional[float] = None
    row: Optional[float] = None


class LiftRatiosInput(BaseModel):
    """User target ratios to the squat; unset fields keep the defaults."""
    model_config = ConfigDict(populate_by_name=True)

    bench_to_squat: Optional[float] = Field(default=None, gt=0, alias="benchToSquat")
    deadlift_to_squat: Optional[float] = Field(default=None, gt=0, alias="deadliftToSquat")
    ohp_to_squat: Optional[float] = Field(default=None, gt=0, alias="ohpToSquat")
    row_to_squat: Optional[float] = Field(default=None, gt=0, alias="rowToSquat")


class ProgressionRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    model: Literal["linear", "double", "rpe_based"]
    current_weight: float = Field(ge=0, alias="currentWeight")
    current_reps: int = Field(ge=0, alias="currentReps")
    target_rep_low: int = Field(ge=1, alias="targetRepLow")
    target_rep_high: int = Field(ge=1, alias="targetRepHigh")
    weight_increment: float = Field(ge=0, alias="weightIncrement")
    rpe_target_low: Optional[float] = Field(default=None, ge=1, le=10, alias="rpeTargetLow")
    rpe_target_high: Optional[float] = Field(default=None, ge=1, le=10, alias="rpeTargetHigh")
    current_rpe: Optional[float] = Field(default=None, ge=1, le=10, alias="currentRpe")

    @field_validator("target_rep_high")
    @classmethod
    def high_gte_low(cls, v, info):
        low = info.data.get("target_rep_low")
        if low is not None and v < low:
            raise ValueError("targetRepHigh must be >= targetRepLow")
        return v

    @model_validator(mode="after")
    def _rpe_range(self):
        low, high = self.rpe_target_low, self.rpe_target_high
        if (low is None) != (high is None):
            raise ValueError("rpeTargetLow and rpeTargetHigh must be given together")
        if low is not None and high is not None and high < low:
            raise ValueError("rpeTargetHigh must be >= rpeTargetLow")
        return self
