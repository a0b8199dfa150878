"""Tests for Pydantic input validation models."""

from __future__ import annotations

from datetime import datetime

import pytest
from pydantic import ValidationError

from training_engine.validators import (
    CompletedSet,
    ExerciseMuscles,
    LandmarkOverrides,
    LiftsInput,
    ProgressionRequest,
    WorkoutSession,
)


# --- CompletedSet ---

def test_completed_set_defaults():
    s = CompletedSet()
    assert s.completed is True
    assert s.set_type == "working"
    assert s.weight_lbs is None
    assert s.reps is None


def test_completed_set_accepts_logged_field_names():
    s = CompletedSet.model_validate({
        "actual_weight_lbs": 225,
        "actual_reps": 5,
        "actual_rpe": 8.5,
        "performed_at": "2026-03-02T18:00:00",
    })
    assert s.weight_lbs == 225
    assert s.reps == 5
    assert s.rpe == 8.5
    assert s.performed_at == datetime(2026, 3, 2, 18, 0)


def test_completed_set_set_type_normalised():
    assert CompletedSet(set_type=" Warmup ").set_type == "warmup"


def test_completed_set_rir_tags():
    assert CompletedSet(rir="failure").rir == 0
    assert CompletedSet(rir="5+").rir == 5
    assert CompletedSet(rir="").rir is None
    assert CompletedSet(rir=2).rir == 2


def test_completed_set_rejects_unknown_rir_tag():
    with pytest.raises(ValidationError):
        CompletedSet(rir="loads left")


def test_completed_set_rpe_out_of_range():
    with pytest.raises(ValidationError):
        CompletedSet(rpe=11)
    with pytest.raises(ValidationError):
        CompletedSet(rpe=0.5)


def test_completed_set_allows_non_positive_numbers():
    s = CompletedSet(weight_lbs=0, reps=0)
    assert s.weight_lbs == 0


def test_completed_set_negative_duration():
    with pytest.raises(ValidationError):
        CompletedSet(duration_seconds=-1)


# --- WorkoutSession / ExerciseMuscles ---

def test_workout_session_from_dicts():
    session = WorkoutSession.model_validate({
        "sets": [{"weight": 135, "reps": 10}, {"weight_lbs": 155, "reps": 8}],
    })
    assert [s.weight_lbs for s in session.sets] == [135, 155]
    assert session.started_at is None


def test_exercise_muscles_defaults():
    em = ExerciseMuscles(exercise_id="plank")
    assert em.primary_muscles == []
    assert em.secondary_muscles == []


# --- LandmarkOverrides ---

def test_landmark_overrides_partial():
    o = LandmarkOverrides(mev=8)
    assert o.model_dump(exclude_none=True) == {"mev": 8}


def test_landmark_overrides_camel_and_snake():
    assert LandmarkOverrides.model_validate({"mavLow": 9}).mav_low == 9
    assert LandmarkOverrides(mav_low=9).mav_low == 9


def test_landmark_overrides_must_ascend():
    with pytest.raises(ValidationError):
        LandmarkOverrides(mev=12, mav_low=10, mav_high=16, mrv=20)


def test_landmark_overrides_negative():
    with pytest.raises(ValidationError):
        LandmarkOverrides(mrv=-1)


# --- LiftsInput ---

def test_lifts_input_optional():
    lifts = LiftsInput(squat=405)
    assert lifts.bench is None


# --- ProgressionRequest ---

def test_progression_request_valid_camel_case():
    req = ProgressionRequest.model_validate({
        "model": "double",
        "currentWeight": 135,
        "currentReps": 10,
        "targetRepLow": 8,
        "targetRepHigh": 12,
        "weightIncrement": 5,
    })
    assert req.current_weight == 135
    assert req.rpe_target_low is None


def test_progression_request_unknown_model():
    with pytest.raises(ValidationError):
        ProgressionRequest(
            model="wave", current_weight=100, current_reps=5,
            target_rep_low=5, target_rep_high=8, weight_increment=5,
        )


def test_progression_request_inverted_rpe_range():
    with pytest.raises(ValidationError):
        ProgressionRequest(
            model="rpe_based", current_weight=100, current_reps=5,
            target_rep_low=5, target_rep_high=8, weight_increment=5,
            rpe_target_low=9, rpe_target_high=7,
        )


def test_progression_request_negative_weight():
    with pytest.raises(ValidationError):
        ProgressionRequest(
            model="linear", current_weight=-5, current_reps=5,
            target_rep_low=5, target_rep_high=8, weight_increment=5,
        )
