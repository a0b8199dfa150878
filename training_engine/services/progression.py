"""Next-session load prescription and plateau detection.

Three interchangeable progression models:
- linear: add load every session, reset to the bottom of the rep range
- double: climb the rep range at a fixed load, add load at the top of it
- rpe_based: let the logged RPE decide between a full, half or no increase

All prescribed loads are rounded to the nearest 2.5 lbs as the last step.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterable

import pandas as pd

from training_engine.config import get_settings
from training_engine.logging_config import log_context
from training_engine.services.formulas import calculate_1rm, round_to_increment
from training_engine.validators import CompletedSet, ProgressionRequest

logger = logging.getLogger(__name__)


class ProgressionModel(str, Enum):
    LINEAR = "linear"
    DOUBLE = "double"
    RPE_BASED = "rpe_based"


@dataclass(frozen=True)
class RpeTarget:
    low: float
    high: float


@dataclass(frozen=True)
class ProgressionSuggestion:
    model: ProgressionModel
    current_weight: float
    current_reps: int
    suggested_weight: float
    suggested_reps: int
    reasoning: str


@dataclass(frozen=True)
class WeeklyBest:
    """Best e1RM for one exercise in the week starting ``week`` (ISO date)."""
    week: str
    best_e1rm: float


@dataclass(frozen=True)
class PlateauResult:
    plateau: bool
    weeks_stagnant: int


def _num(value: float) -> str:
    return f"{value:g}"


def suggest_progression(
    model: ProgressionModel | str,
    current_weight: float,
    current_reps: int,
    target_rep_low: int,
    target_rep_high: int,
    weight_increment: float,
    rpe_target: RpeTarget | None = None,
    current_rpe: float | None = None,
) -> ProgressionSuggestion:
    """Suggest the next session's weight and reps under the given model.

    Raises ValueError for an unknown model name.
    """
    model = ProgressionModel(model)
    weight = current_weight
    reps = current_reps

    if model is ProgressionModel.LINEAR:
        weight = current_weight + weight_increment
        reps = target_rep_low
        reasoning = (
            f"Linear progression: Add {_num(weight_increment)} lbs and work back up "
            f"from {target_rep_low} reps"
        )

    elif model is ProgressionModel.DOUBLE:
        if current_reps >= target_rep_high:
            weight = current_weight + weight_increment
            reps = target_rep_low
            reasoning = (
                f"You hit the top of the range with {current_reps} reps! "
                f"Add {_num(weight_increment)} lbs and start at {target_rep_low} reps"
            )
        else:
            reps = current_reps + 1
            reasoning = (
                f"Try for {reps} reps at {_num(current_weight)} lbs "
                f"(target: {target_rep_high} before adding weight)"
            )

    else:
        if rpe_target is None or current_rpe is None:
            reasoning = "Log RPE for personalized suggestions"
        elif current_rpe < rpe_target.low:
            weight = current_weight + weight_increment
            reasoning = (
                f"RPE {_num(current_rpe)} was below target "
                f"({_num(rpe_target.low)}-{_num(rpe_target.high)}). Add {_num(weight_increment)} lbs"
            )
        elif current_rpe > rpe_target.high:
            reasoning = f"RPE {_num(current_rpe)} was above target. Keep weight same and focus on technique"
        else:
            weight = current_weight + weight_increment * 0.5
            reasoning = (
                f"RPE {_num(current_rpe)} in target range. "
                f"Small increase of {_num(weight_increment * 0.5)} lbs"
            )

    return ProgressionSuggestion(
        model=model,
        current_weight=current_weight,
        current_reps=current_reps,
        suggested_weight=round_to_increment(weight),
        suggested_reps=reps,
        reasoning=reasoning,
    )


def suggest_from_request(request: ProgressionRequest) -> ProgressionSuggestion:
    """Convenience wrapper for a validated progression request payload."""
    rpe_target = None
    if request.rpe_target_low is not None and request.rpe_target_high is not None:
        rpe_target = RpeTarget(request.rpe_target_low, request.rpe_target_high)
    return suggest_progression(
        request.model,
        request.current_weight,
        request.current_reps,
        request.target_rep_low,
        request.target_rep_high,
        request.weight_increment,
        rpe_target=rpe_target,
        current_rpe=request.current_rpe,
    )


def detect_plateau(
    history: list[WeeklyBest],
    window_weeks: int | None = None,
) -> PlateauResult:
    """Flag a plateau when the recent window's best e1RM fails to beat the prior best.

    ``weeks_stagnant`` walks back from the newest week and counts older weeks
    that matched or beat the running best, stopping at the first that did not.
    """
    if window_weeks is None:
        window_weeks = get_settings().plateau_window_weeks
    if window_weeks <= 0 or len(history) < window_weeks:
        return PlateauResult(plateau=False, weeks_stagnant=0)

    newest_first = sorted(history, key=lambda w: w.week, reverse=True)
    recent_max = max(w.best_e1rm for w in newest_first[:window_weeks])
    earlier = newest_first[window_weeks:]
    prior_max = max(w.best_e1rm for w in earlier) if earlier else 0

    weeks_stagnant = 0
    running_best = newest_first[0].best_e1rm
    for entry in newest_first[1:]:
        if entry.best_e1rm < running_best:
            break
        weeks_stagnant += 1
        running_best = entry.best_e1rm

    return PlateauResult(
        plateau=prior_max > 0 and recent_max <= prior_max,
        weeks_stagnant=weeks_stagnant,
    )


def weekly_best_e1rm(sets: Iterable[CompletedSet]) -> list[WeeklyBest]:
    """Collapse completed sets into one best-e1RM entry per Monday-start week.

    Sets without a timestamp, incomplete sets and non-positive weight/reps are
    skipped. Returns entries oldest first.
    """
    rows = []
    skipped = 0
    for s in sets:
        if not s.completed or s.performed_at is None:
            skipped += 1
            continue
        weight, reps = s.weight_lbs or 0, s.reps or 0
        if weight <= 0 or reps <= 0:
            skipped += 1
            continue
        # bucket on the lifter's own calendar day, not UTC
        rows.append({"date": s.performed_at.date(), "e1rm": calculate_1rm(weight, reps).estimated_1rm})

    if skipped:
        logger.debug("weekly_best_e1rm skipped %d sets", skipped, extra=log_context(skipped_sets=skipped))
    if not rows:
        return []

    df = pd.DataFrame(rows)
    df["date"] = pd.to_datetime(df["date"])
    df["week"] = (df["date"] - pd.to_timedelta(df["date"].dt.weekday, unit="D")).dt.strftime("%Y-%m-%d")
    weekly = df.groupby("week", as_index=False)["e1rm"].max().sort_values("week")
    return [WeeklyBest(week=row.week, best_e1rm=float(row.e1rm)) for row in weekly.itertuples(index=False)]
