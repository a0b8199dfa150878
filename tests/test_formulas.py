"""Tests for 1RM formulas, relative intensity and rounding helpers."""

from __future__ import annotations

from datetime import date

import pytest

from training_engine.services.formulas import (
    Confidence,
    IntensityZoneName,
    OneRMFormula,
    brzycki,
    calculate_1rm,
    calculate_relative_intensity,
    calculate_weight_for_reps,
    epley,
    get_intensity_zone,
    kg_to_lbs,
    lbs_to_kg,
    lombardi,
    meters_to_miles,
    miles_to_meters,
    round_half_up,
    round_to_increment,
    week_start,
)


@pytest.mark.parametrize("formula", [brzycki, epley, lombardi])
def test_single_rep_returns_weight(formula):
    assert formula(225, 1) == 225
    assert formula(102.5, 1) == 102.5


@pytest.mark.parametrize("formula", [brzycki, epley, lombardi])
def test_invalid_input_returns_zero(formula):
    assert formula(0, 5) == 0
    assert formula(-10, 5) == 0
    assert formula(135, 0) == 0
    assert formula(135, -3) == 0


def test_brzycki_known_value():
    # 135 * 36 / 32 = 151.875
    assert brzycki(135, 5) == 151.9


def test_brzycki_undefined_at_37_reps():
    assert brzycki(100, 37) == 0
    assert brzycki(100, 40) == 0


def test_epley_known_value():
    # 200 * (1 + 10/30) = 266.67
    assert epley(200, 10) == 266.7


def test_lombardi_known_value():
    assert lombardi(100, 10) == pytest.approx(125.9, abs=0.05)


def test_calculate_1rm_confidence_by_rep_range():
    assert calculate_1rm(135, 5).confidence == "high"
    assert calculate_1rm(135, 8).confidence == "medium"
    assert calculate_1rm(135, 15).confidence == "low"


def test_calculate_1rm_low_reps_uses_brzycki():
    r = calculate_1rm(135, 5)
    assert r.formula is OneRMFormula.BRZYCKI
    assert r.confidence is Confidence.HIGH
    assert r.estimated_1rm == brzycki(135, 5)


def test_calculate_1rm_mid_reps_averages():
    r = calculate_1rm(135, 8)
    expected = (brzycki(135, 8) + epley(135, 8)) / 2
    assert r.estimated_1rm == pytest.approx(expected, abs=0.05)


def test_calculate_1rm_high_reps_uses_epley():
    r = calculate_1rm(100, 15)
    assert r.formula is OneRMFormula.EPLEY
    assert r.estimated_1rm == 150.0


def test_calculate_1rm_invalid_is_zero_low():
    r = calculate_1rm(0, 5)
    assert r.estimated_1rm == 0
    assert r.confidence is Confidence.LOW


def test_calculate_1rm_single_rep():
    assert calculate_1rm(315, 1).estimated_1rm == 315


@pytest.mark.parametrize("weight,reps", [(135, 2), (185, 3), (225, 5), (315, 4)])
def test_weight_for_reps_round_trips_low_reps(weight, reps):
    e1rm = calculate_1rm(weight, reps).estimated_1rm
    assert calculate_weight_for_reps(e1rm, reps) == pytest.approx(weight, abs=2.5)


def test_weight_for_reps_rounds_to_plate():
    w = calculate_weight_for_reps(300, 8)
    assert w % 2.5 == 0


def test_weight_for_reps_edge_cases():
    assert calculate_weight_for_reps(0, 5) == 0
    assert calculate_weight_for_reps(300, 0) == 0
    assert calculate_weight_for_reps(300, 1) == 300
    assert calculate_weight_for_reps(300, 37) == 0


def test_relative_intensity():
    assert calculate_relative_intensity(225, 300) == 75.0
    assert calculate_relative_intensity(100, 300) == 33.3
    assert calculate_relative_intensity(100, 0) == 0


@pytest.mark.parametrize(
    "pct,zone,purpose",
    [
        (95, IntensityZoneName.MAXIMAL, "Strength/Neural"),
        (90, IntensityZoneName.MAXIMAL, "Strength/Neural"),
        (85, IntensityZoneName.HEAVY, "Strength"),
        (72, IntensityZoneName.MODERATE, "Hypertrophy"),
        (60, IntensityZoneName.LIGHT, "Volume/Endurance"),
        (45, IntensityZoneName.VERY_LIGHT, "Warmup/Recovery"),
    ],
)
def test_intensity_zones(pct, zone, purpose):
    z = get_intensity_zone(pct)
    assert z.zone is zone
    assert z.purpose == purpose


def test_intensity_zone_literal_values():
    assert get_intensity_zone(50).zone == "Very Light"


def test_round_half_up_ties():
    assert round_half_up(2.5) == 3
    assert round_half_up(0.25, 1) == 0.3


def test_round_to_increment():
    assert round_to_increment(136.25) == 137.5
    assert round_to_increment(136.0) == 135.0
    assert round_to_increment(142, 5) == 140
    assert round_to_increment(143, 0) == 143


def test_unit_conversions():
    assert kg_to_lbs(100) == pytest.approx(220.462)
    assert lbs_to_kg(220.462) == pytest.approx(100)
    assert miles_to_meters(1) == pytest.approx(1609.34)
    assert meters_to_miles(1609.34) == pytest.approx(1)


def test_week_start_is_monday():
    assert week_start(date(2026, 3, 5)) == date(2026, 3, 2)   # Thursday
    assert week_start(date(2026, 3, 2)) == date(2026, 3, 2)   # Monday
    assert week_start(date(2026, 3, 8)) == date(2026, 3, 2)   # Sunday
