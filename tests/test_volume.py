"""Tests for volume landmarks, frequency and weekly per-muscle aggregation."""

from __future__ import annotations

from datetime import date

import pytest

from training_engine.services.volume import (
    DEFAULT_LANDMARKS,
    ExperienceLevel,
    VolumeLandmarks,
    VolumeStatus,
    adjust_volume_landmarks,
    analyze_frequency,
    analyze_volume_status,
    calculate_training_age,
    determine_experience_level,
    get_volume_landmarks,
    normalize_muscle_group,
    volume_tolerance,
    weekly_sets_per_muscle,
)
from training_engine.validators import CompletedSet, ExerciseMuscles, LandmarkOverrides

GENERIC = VolumeLandmarks(mev=6, mav_low=10, mav_high=16, mrv=20)


# --- Landmark lookup ---

def test_normalize_muscle_group():
    assert normalize_muscle_group("Lower Back") == "lower_back"
    assert normalize_muscle_group("  CHEST ") == "chest"


def test_get_landmarks_known_group():
    lm = get_volume_landmarks("Chest")
    assert lm == VolumeLandmarks(8, 12, 20, 22)


def test_get_landmarks_multiword_group():
    assert get_volume_landmarks("lower back").mrv == 16


def test_get_landmarks_unknown_falls_back():
    assert get_volume_landmarks("neck") == DEFAULT_LANDMARKS


def test_get_landmarks_field_override():
    lm = get_volume_landmarks("chest", LandmarkOverrides(mev=10, mrv=26))
    assert lm.mev == 10
    assert lm.mrv == 26
    assert lm.mav_low == 12
    assert lm.mav_high == 20


def test_get_landmarks_camel_case_override():
    lm = get_volume_landmarks("biceps", LandmarkOverrides.model_validate({"mavHigh": 18}))
    assert lm.mav_high == 18


# --- Status classification ---

def test_below_mev_names_deficit():
    s = analyze_volume_status(5, GENERIC, "chest")
    assert s.status == "below_mev"
    assert "1 more set" in s.recommendation
    assert "chest" in s.recommendation


def test_below_mev_plural_deficit():
    s = analyze_volume_status(2, GENERIC, "quads")
    assert "4 more sets" in s.recommendation


def test_approaching_mev():
    assert analyze_volume_status(7, GENERIC, "chest").status is VolumeStatus.APPROACHING_MEV


def test_in_mav():
    s = analyze_volume_status(12, GENERIC, "chest")
    assert s.status == "in_mav"
    assert s.percentage == 43


def test_in_mav_upper_edge():
    assert analyze_volume_status(16, GENERIC, "chest").status is VolumeStatus.IN_MAV


def test_approaching_mrv():
    assert analyze_volume_status(19, GENERIC, "chest").status is VolumeStatus.APPROACHING_MRV
    assert analyze_volume_status(20, GENERIC, "chest").status is VolumeStatus.APPROACHING_MRV


def test_over_mrv():
    s = analyze_volume_status(24, GENERIC, "chest")
    assert s.status is VolumeStatus.OVER_MRV
    assert s.percentage == 129


def test_percentage_zero_when_mev_equals_mrv():
    flat = VolumeLandmarks(10, 10, 10, 10)
    assert analyze_volume_status(12, flat, "calves").percentage == 0


def test_percentage_negative_below_mev():
    assert analyze_volume_status(3, GENERIC, "chest").percentage == -21


# --- Frequency ---

@pytest.mark.parametrize(
    "sessions,optimal,fragment",
    [
        (0, False, "not trained this week"),
        (1, False, "at least 2x/week"),
        (2, True, "2-3x/week is optimal"),
        (5, True, "Ensure adequate recovery"),
    ],
)
def test_analyze_frequency(sessions, optimal, fragment):
    f = analyze_frequency(sessions, "Back")
    assert f.is_optimal is optimal
    assert fragment in f.recommendation


# --- Weekly aggregation ---

def _exercises():
    return {
        "bench": ExerciseMuscles(exercise_id="bench", primary_muscles=["Chest"], secondary_muscles=["Triceps", "Shoulders"]),
        "curl": ExerciseMuscles(exercise_id="curl", primary_muscles=["Biceps"]),
    }


def test_weekly_sets_primary_and_secondary_credit():
    sets = [
        CompletedSet(exercise_id="bench", weight_lbs=185, reps=8, rpe=8),
        CompletedSet(exercise_id="bench", weight_lbs=185, reps=8, rpe=9),
    ]
    stats = weekly_sets_per_muscle(sets, _exercises())
    assert stats["chest"].sets == 2
    assert stats["chest"].effective_reps == 4 + 5
    assert stats["chest"].volume == 185 * 8 * 2
    assert stats["triceps"].sets == 1.0
    assert stats["triceps"].effective_reps == 2 + 2
    assert stats["triceps"].volume == pytest.approx(185 * 8)


def test_weekly_sets_skip_warmups_incomplete_and_unknown():
    sets = [
        CompletedSet(exercise_id="bench", weight_lbs=95, reps=10, set_type="Warmup"),
        CompletedSet(exercise_id="bench", weight_lbs=185, reps=8, completed=False),
        CompletedSet(exercise_id="mystery", weight_lbs=50, reps=10),
        CompletedSet(exercise_id="curl", weight_lbs=40, reps=12, rir="failure"),
    ]
    stats = weekly_sets_per_muscle(sets, _exercises())
    assert set(stats) == {"biceps"}
    assert stats["biceps"].effective_reps == 5


# --- Training age ---

def test_experience_levels():
    assert determine_experience_level(0.5) is ExperienceLevel.NOVICE
    assert determine_experience_level(2) is ExperienceLevel.INTERMEDIATE
    assert determine_experience_level(3) is ExperienceLevel.ADVANCED


def test_volume_tolerance():
    assert volume_tolerance(ExperienceLevel.NOVICE) == 0.7
    assert volume_tolerance(ExperienceLevel.INTERMEDIATE) == 0.85
    assert volume_tolerance(ExperienceLevel.ADVANCED) == 1.0


def test_training_age_from_start_date():
    ta = calculate_training_age(date(2024, 1, 1), today=date(2026, 3, 1))
    assert ta.years == 2
    assert ta.months == 2
    assert ta.experience_level is ExperienceLevel.INTERMEDIATE
    assert ta.volume_tolerance == 0.85


def test_training_age_without_start_date():
    ta = calculate_training_age(None, today=date(2026, 3, 1))
    assert ta.years == 0
    assert ta.experience_level is ExperienceLevel.NOVICE


def test_adjust_volume_landmarks():
    adjusted = adjust_volume_landmarks(VolumeLandmarks(8, 12, 20, 22), 0.7)
    assert adjusted == VolumeLandmarks(6, 8, 14, 15)
