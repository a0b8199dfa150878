"""JSON response models for the engine's value objects.

Field names serialise in camelCase (``estimated1RM``, ``improvementPercent``)
and enums as their literal strings; UI badges and notification templates key
off both, so neither may change.
"""

from __future__ import annotations

from datetime import date as dt_date
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer
from pydantic.alias_generators import to_camel

from training_engine.services.balance import LiftBalanceStatus, WeakPointAnalysis
from training_engine.services.effective_reps import EffectiveRepsResult
from training_engine.services.formulas import (
    Confidence,
    IntensityZone,
    IntensityZoneName,
    OneRMFormula,
    OneRMResult,
)
from training_engine.services.progression import (
    PlateauResult,
    ProgressionModel,
    ProgressionSuggestion,
    WeeklyBest,
)
from training_engine.services.records import ExerciseBests, PRResult, PRType
from training_engine.services.volume import (
    ExperienceLevel,
    FrequencyAnalysis,
    MuscleWeeklyStats,
    TrainingAge,
    VolumeLandmarks,
    VolumeLandmarkStatus,
    VolumeStatus,
)
from training_engine.services.vo2max import (
    MortalityRiskInfo,
    VO2maxClassification,
    VO2maxProfile,
)


class _CamelModel(BaseModel):
    model_config = ConfigDict(from_attributes=True, alias_generator=to_camel, populate_by_name=True)


class OneRMResultResponse(_CamelModel):
    estimated_1rm: float = Field(alias="estimated1RM")
    formula: OneRMFormula
    confidence: Confidence


class IntensityZoneResponse(_CamelModel):
    zone: IntensityZoneName
    purpose: str


class EffectiveRepsResponse(_CamelModel):
    total_reps: int
    effective_reps: int
    rpe: Optional[float] = None
    rir: Optional[float] = None


class VolumeLandmarksResponse(_CamelModel):
    mev: int
    mav_low: int
    mav_high: int
    mrv: int


class VolumeLandmarkStatusResponse(_CamelModel):
    muscle_group: str
    current_sets: float
    landmarks: VolumeLandmarksResponse
    status: VolumeStatus
    percentage: int
    recommendation: str


class FrequencyAnalysisResponse(_CamelModel):
    muscle_group: str
    sessions_per_week: int
    is_optimal: bool
    recommendation: str


class MuscleWeeklyStatsResponse(_CamelModel):
    sets: float
    effective_reps: int
    volume: float


class TrainingAgeResponse(_CamelModel):
    start_date: Optional[dt_date] = None
    years: int
    months: int
    experience_level: ExperienceLevel
    volume_tolerance: float


class ProgressionSuggestionResponse(_CamelModel):
    model: ProgressionModel
    current_weight: float
    current_reps: int
    suggested_weight: float
    suggested_reps: int
    reasoning: str


class WeeklyBestResponse(_CamelModel):
    week: str
    best_e1rm: float


class PlateauResponse(_CamelModel):
    plateau: bool
    weeks_stagnant: int


class WeakPointResponse(_CamelModel):
    lift: str
    current_1rm: float = Field(alias="current1RM")
    expected_ratio: float
    actual_ratio: float
    status: LiftBalanceStatus
    recommendation: str


class ExerciseBestsResponse(_CamelModel):
    max_weight: Optional[float] = None
    max_reps: Optional[int] = None
    max_volume: Optional[float] = None
    best_1rm: Optional[float] = Field(default=None, alias="best1RM")
    # JSON object keys are strings; "185" and "187.5" parse back to floats
    max_reps_at_weight: dict[float, int] = Field(default_factory=dict)

    @field_serializer("max_reps_at_weight")
    def serialize_weight_keys(self, value: dict[float, int]) -> dict[str, int]:
        return {f"{weight:g}": reps for weight, reps in value.items()}

    def to_bests(self) -> ExerciseBests:
        return ExerciseBests(
            max_weight=self.max_weight,
            max_reps=self.max_reps,
            max_volume=self.max_volume,
            best_1rm=self.best_1rm,
            max_reps_at_weight=dict(self.max_reps_at_weight),
        )


class PRResultResponse(_CamelModel):
    type: PRType
    exercise_id: str
    exercise_name: str
    previous_value: float
    new_value: float
    improvement_percent: float
    weight: float
    reps: int


class VO2maxProfileResponse(_CamelModel):
    percentile: float
    classification: VO2maxClassification
    fitness_age: float


class MortalityRiskResponse(_CamelModel):
    category: str
    risk_reduction: str
    description: str


_RESPONSE_MODELS: dict[type, type[_CamelModel]] = {
    OneRMResult: OneRMResultResponse,
    IntensityZone: IntensityZoneResponse,
    EffectiveRepsResult: EffectiveRepsResponse,
    VolumeLandmarks: VolumeLandmarksResponse,
    VolumeLandmarkStatus: VolumeLandmarkStatusResponse,
    FrequencyAnalysis: FrequencyAnalysisResponse,
    MuscleWeeklyStats: MuscleWeeklyStatsResponse,
    TrainingAge: TrainingAgeResponse,
    ProgressionSuggestion: ProgressionSuggestionResponse,
    WeeklyBest: WeeklyBestResponse,
    PlateauResult: PlateauResponse,
    WeakPointAnalysis: WeakPointResponse,
    ExerciseBests: ExerciseBestsResponse,
    PRResult: PRResultResponse,
    VO2maxProfile: VO2maxProfileResponse,
    MortalityRiskInfo: MortalityRiskResponse,
}


def to_json(result: Any) -> Any:
    """Map an engine result (or list/dict of results) to JSON-ready data.

    Raises TypeError for objects that are not engine value objects.
    """
    if result is None:
        return None
    if isinstance(result, (list, tuple)):
        return [to_json(item) for item in result]
    if isinstance(result, dict):
        return {key: to_json(value) for key, value in result.items()}
    model = _RESPONSE_MODELS.get(type(result))
    if model is None:
        raise TypeError(f"No JSON mapping for {type(result).__name__}")
    return model.model_validate(result).model_dump(mode="json", by_alias=True)


def exercise_bests_from_json(data: dict) -> ExerciseBests:
    """Rebuild a bests snapshot stored as ``to_json`` output."""
    return ExerciseBestsResponse.model_validate(data).to_bests()
