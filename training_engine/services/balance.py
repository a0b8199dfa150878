"""Lift balance analysis relative to the back squat.

Each lift's 1RM is expressed as a ratio of the squat 1RM and compared to a
target ratio. A deviation of more than 10% either way flags the lift as
strong or weak.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Mapping

from training_engine.services.formulas import round_half_up
from training_engine.validators import LiftRatiosInput, LiftsInput

BALANCE_TOLERANCE = 0.10


class LiftBalanceStatus(str, Enum):
    WEAK = "weak"
    BALANCED = "balanced"
    STRONG = "strong"


@dataclass(frozen=True)
class LiftRatios:
    bench_to_squat: float = 0.75
    deadlift_to_squat: float = 1.25
    ohp_to_squat: float = 0.50
    row_to_squat: float = 0.65


DEFAULT_LIFT_RATIOS = LiftRatios()


@dataclass(frozen=True)
class WeakPointAnalysis:
    lift: str
    current_1rm: float
    expected_ratio: float
    actual_ratio: float
    status: LiftBalanceStatus
    recommendation: str


def _analyze_lift(name: str, current_1rm: float, squat: float, expected_ratio: float) -> WeakPointAnalysis:
    actual_ratio = current_1rm / squat
    deviation = (actual_ratio - expected_ratio) / expected_ratio if expected_ratio else 0

    if deviation > BALANCE_TOLERANCE:
        status = LiftBalanceStatus.STRONG
        recommendation = f"{name} is strong relative to squat. Consider more squat focus."
    elif deviation < -BALANCE_TOLERANCE:
        status = LiftBalanceStatus.WEAK
        recommendation = f"{name} is lagging. Consider prioritizing {name} training."
    else:
        status = LiftBalanceStatus.BALANCED
        recommendation = f"{name} is well-balanced relative to squat."

    return WeakPointAnalysis(
        lift=name,
        current_1rm=current_1rm,
        expected_ratio=expected_ratio,
        actual_ratio=round_half_up(actual_ratio, 2),
        status=status,
        recommendation=recommendation,
    )


def resolve_lift_ratios(
    overrides: LiftRatios | LiftRatiosInput | Mapping[str, float | None] | None = None,
) -> LiftRatios:
    """Default target ratios with any user overrides applied."""
    if overrides is None:
        return DEFAULT_LIFT_RATIOS
    if isinstance(overrides, LiftRatios):
        return overrides
    if not isinstance(overrides, LiftRatiosInput):
        overrides = LiftRatiosInput.model_validate(dict(overrides))
    return replace(DEFAULT_LIFT_RATIOS, **overrides.model_dump(exclude_none=True))


def analyze_weak_points(
    lifts: LiftsInput | Mapping[str, float | None],
    target_ratios: LiftRatios | LiftRatiosInput | Mapping[str, float | None] | None = None,
) -> list[WeakPointAnalysis]:
    """Compare bench, deadlift, overhead press and row to the squat.

    Returns an empty list without a positive squat. Lifts that are missing
    (or non-positive) produce no entry.
    """
    if not isinstance(lifts, LiftsInput):
        lifts = LiftsInput.model_validate(dict(lifts))
    ratios = resolve_lift_ratios(target_ratios)

    squat = lifts.squat
    if not squat or squat <= 0:
        return []

    candidates = [
        ("Bench Press", lifts.bench, ratios.bench_to_squat),
        ("Deadlift", lifts.deadlift, ratios.deadlift_to_squat),
        ("Overhead Press", lifts.ohp, ratios.ohp_to_squat),
        ("Barbell Row", lifts.row, ratios.row_to_squat),
    ]
    return [
        _analyze_lift(name, value, squat, expected)
        for name, value, expected in candidates
        if value is not None and value > 0
    ]
