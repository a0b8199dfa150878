"""Weekly volume analysis against MEV / MAV / MRV landmarks.

Volume landmarks are weekly hard-set counts per muscle group:
- MEV: minimum effective volume, the least that still produces growth
- MAV: maximum adaptive volume, a range where most growth happens
- MRV: maximum recoverable volume, beyond which recovery falls behind

Defaults follow Israetel / Nuckols recommendations and can be overridden per
field. Training age scales the landmarks down for less experienced lifters.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, replace
from datetime import date
from enum import Enum
from typing import Iterable, Mapping

from training_engine.services.effective_reps import calculate_effective_reps
from training_engine.services.formulas import round_half_up
from training_engine.validators import CompletedSet, ExerciseMuscles, LandmarkOverrides


class VolumeStatus(str, Enum):
    BELOW_MEV = "below_mev"
    APPROACHING_MEV = "approaching_mev"
    IN_MAV = "in_mav"
    APPROACHING_MRV = "approaching_mrv"
    OVER_MRV = "over_mrv"


class ExperienceLevel(str, Enum):
    NOVICE = "novice"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


@dataclass(frozen=True)
class VolumeLandmarks:
    """Weekly set landmarks for one muscle group (ascending)."""
    mev: int
    mav_low: int
    mav_high: int
    mrv: int


@dataclass(frozen=True)
class VolumeLandmarkStatus:
    muscle_group: str
    current_sets: float
    landmarks: VolumeLandmarks
    status: VolumeStatus
    percentage: int        # position between MEV (0) and MRV (100), may exceed both
    recommendation: str


@dataclass(frozen=True)
class FrequencyAnalysis:
    muscle_group: str
    sessions_per_week: int
    is_optimal: bool
    recommendation: str


@dataclass(frozen=True)
class MuscleWeeklyStats:
    """Set, effective-rep and tonnage totals for one muscle in one week."""
    sets: float
    effective_reps: int
    volume: float


@dataclass(frozen=True)
class TrainingAge:
    start_date: date | None
    years: int
    months: int
    experience_level: ExperienceLevel
    volume_tolerance: float


DEFAULT_LANDMARKS = VolumeLandmarks(mev=6, mav_low=10, mav_high=16, mrv=20)

DEFAULT_VOLUME_LANDMARKS: dict[str, VolumeLandmarks] = {
    "chest": VolumeLandmarks(8, 12, 20, 22),
    "back": VolumeLandmarks(8, 12, 20, 25),
    "shoulders": VolumeLandmarks(8, 12, 20, 22),
    "biceps": VolumeLandmarks(6, 10, 16, 20),
    "triceps": VolumeLandmarks(6, 10, 16, 20),
    "quads": VolumeLandmarks(8, 12, 18, 22),
    "hamstrings": VolumeLandmarks(6, 10, 16, 20),
    "glutes": VolumeLandmarks(6, 10, 16, 20),
    "calves": VolumeLandmarks(8, 12, 16, 20),
    "abs": VolumeLandmarks(6, 12, 20, 25),
    "traps": VolumeLandmarks(6, 10, 16, 20),
    "forearms": VolumeLandmarks(4, 8, 14, 18),
    "lats": VolumeLandmarks(8, 12, 20, 25),
    "lower_back": VolumeLandmarks(4, 8, 12, 16),
}

_VOLUME_TOLERANCE: dict[ExperienceLevel, float] = {
    ExperienceLevel.NOVICE: 0.7,
    ExperienceLevel.INTERMEDIATE: 0.85,
    ExperienceLevel.ADVANCED: 1.0,
}


def normalize_muscle_group(muscle_group: str) -> str:
    """'Lower Back' -> 'lower_back'."""
    return re.sub(r"\s+", "_", muscle_group.strip().lower())


def _fmt_sets(value: float) -> str:
    return f"{value:g}"


def get_volume_landmarks(
    muscle_group: str,
    overrides: LandmarkOverrides | None = None,
) -> VolumeLandmarks:
    """Default landmarks for a muscle group with any user overrides applied."""
    defaults = DEFAULT_VOLUME_LANDMARKS.get(normalize_muscle_group(muscle_group), DEFAULT_LANDMARKS)
    if overrides is None:
        return defaults
    changes = overrides.model_dump(exclude_none=True)
    return replace(defaults, **changes)


def analyze_volume_status(
    weekly_sets: float,
    landmarks: VolumeLandmarks,
    muscle_group: str,
) -> VolumeLandmarkStatus:
    """Classify a weekly set count against its landmarks."""
    span = landmarks.mrv - landmarks.mev
    percentage = (weekly_sets - landmarks.mev) / span * 100 if span > 0 else 0

    if weekly_sets < landmarks.mev:
        deficit = landmarks.mev - weekly_sets
        noun = "set" if deficit == 1 else "sets"
        status = VolumeStatus.BELOW_MEV
        recommendation = (
            f"Add {_fmt_sets(deficit)} more {noun} for {muscle_group} to reach minimum effective volume"
        )
    elif weekly_sets < landmarks.mev + 2:
        status = VolumeStatus.APPROACHING_MEV
        recommendation = f"Just above minimum. Consider adding sets for {muscle_group} for better growth"
    elif weekly_sets <= landmarks.mav_high:
        status = VolumeStatus.IN_MAV
        recommendation = f"Good volume for {muscle_group}. Optimal range for growth."
    elif weekly_sets <= landmarks.mrv:
        status = VolumeStatus.APPROACHING_MRV
        recommendation = f"High volume for {muscle_group}. Monitor recovery closely."
    else:
        status = VolumeStatus.OVER_MRV
        recommendation = f"Exceeding maximum recoverable volume for {muscle_group}. Consider reducing sets."

    return VolumeLandmarkStatus(
        muscle_group=muscle_group,
        current_sets=weekly_sets,
        landmarks=landmarks,
        status=status,
        percentage=int(round_half_up(percentage)),
        recommendation=recommendation,
    )


def analyze_frequency(sessions_per_week: int, muscle_group: str) -> FrequencyAnalysis:
    """Hypertrophy frequency check: two or more sessions a week is optimal."""
    if sessions_per_week <= 0:
        recommendation = f"{muscle_group} not trained this week. Add exercises for balanced development."
    elif sessions_per_week == 1:
        recommendation = f"Train {muscle_group} at least 2x/week for optimal hypertrophy."
    elif sessions_per_week <= 3:
        recommendation = f"Good frequency for {muscle_group}. 2-3x/week is optimal."
    else:
        recommendation = f"High frequency for {muscle_group}. Ensure adequate recovery."

    return FrequencyAnalysis(
        muscle_group=muscle_group,
        sessions_per_week=sessions_per_week,
        is_optimal=sessions_per_week >= 2,
        recommendation=recommendation,
    )


def weekly_sets_per_muscle(
    sets: Iterable[CompletedSet],
    exercises: Mapping[str, ExerciseMuscles],
) -> dict[str, MuscleWeeklyStats]:
    """Aggregate a week's completed working sets into per-muscle totals.

    Primary movers get full credit for a set; secondary movers get half a set,
    half the effective reps (floored) and half the tonnage. Warmups and sets
    for exercises without muscle tags are ignored.
    """
    totals: dict[str, list[float]] = {}

    def _credit(muscle: str, set_credit: float, eff: int, volume: float) -> None:
        key = normalize_muscle_group(muscle)
        bucket = totals.setdefault(key, [0.0, 0, 0.0])
        bucket[0] += set_credit
        bucket[1] += eff
        bucket[2] += volume

    for s in sets:
        if not s.completed or s.set_type == "warmup":
            continue
        exercise = exercises.get(s.exercise_id)
        if exercise is None:
            continue

        reps = s.reps or 0
        effective = calculate_effective_reps(reps, s.rpe, s.rir).effective_reps
        volume = (s.weight_lbs or 0) * reps

        for muscle in exercise.primary_muscles:
            _credit(muscle, 1, effective, volume)
        for muscle in exercise.secondary_muscles:
            _credit(muscle, 0.5, effective // 2, volume * 0.5)

    return {
        muscle: MuscleWeeklyStats(sets=v[0], effective_reps=int(v[1]), volume=v[2])
        for muscle, v in totals.items()
    }


# --- Training age ---

def determine_experience_level(training_years: float) -> ExperienceLevel:
    if training_years < 1:
        return ExperienceLevel.NOVICE
    if training_years < 3:
        return ExperienceLevel.INTERMEDIATE
    return ExperienceLevel.ADVANCED


def volume_tolerance(level: ExperienceLevel) -> float:
    """Fraction of the standard landmarks a lifter at this level can recover from."""
    return _VOLUME_TOLERANCE.get(level, 0.7)


def calculate_training_age(start_date: date | None, today: date) -> TrainingAge:
    """Training age from the date lifting started, measured at ``today``."""
    if start_date is None:
        return TrainingAge(None, 0, 0, ExperienceLevel.NOVICE, volume_tolerance(ExperienceLevel.NOVICE))

    days = max(0, (today - start_date).days)
    level = determine_experience_level(days / 365)
    return TrainingAge(
        start_date=start_date,
        years=days // 365,
        months=(days % 365) // 30,
        experience_level=level,
        volume_tolerance=volume_tolerance(level),
    )


def adjust_volume_landmarks(landmarks: VolumeLandmarks, multiplier: float) -> VolumeLandmarks:
    return VolumeLandmarks(
        mev=int(round_half_up(landmarks.mev * multiplier)),
        mav_low=int(round_half_up(landmarks.mav_low * multiplier)),
        mav_high=int(round_half_up(landmarks.mav_high * multiplier)),
        mrv=int(round_half_up(landmarks.mrv * multiplier)),
    )
