"""Personal-record detection for weight, reps, volume and estimated 1RM.

A PR is judged against an ``ExerciseBests`` snapshot built from the lifter's
full history. The snapshot is immutable: ``update_bests`` returns the next
snapshot after a set so callers can carry it through a session and avoid
celebrating the same PR twice.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Iterable, Mapping

from training_engine.logging_config import log_context
from training_engine.services.formulas import calculate_1rm, round_to_increment
from training_engine.validators import WorkoutSession

logger = logging.getLogger(__name__)


class PRType(str, Enum):
    WEIGHT = "weight"
    REPS = "reps"
    VOLUME = "volume"
    E1RM = "e1rm"


# Most significant first
PR_PRIORITY: tuple[PRType, ...] = (PRType.E1RM, PRType.WEIGHT, PRType.REPS, PRType.VOLUME)

_PR_TYPE_NAMES = {
    PRType.WEIGHT: "Weight PR",
    PRType.REPS: "Rep PR",
    PRType.VOLUME: "Volume PR",
    PRType.E1RM: "1RM PR",
}


@dataclass(frozen=True)
class ExerciseBests:
    max_weight: float | None = None
    max_reps: int | None = None
    max_volume: float | None = None
    best_1rm: float | None = None
    # weight rounded to nearest 2.5 -> most reps performed at it
    max_reps_at_weight: Mapping[float, int] = field(default_factory=dict)


@dataclass(frozen=True)
class PRResult:
    type: PRType
    exercise_id: str
    exercise_name: str
    previous_value: float
    new_value: float
    improvement_percent: float
    weight: float
    reps: int


def _improvement(previous: float, new: float) -> float:
    if previous <= 0:
        return 100.0
    return (new - previous) / previous * 100


def detect_prs(
    exercise_id: str,
    exercise_name: str,
    weight: float,
    reps: int,
    previous_bests: ExerciseBests,
) -> list[PRResult]:
    """Evaluate one completed set against the bests snapshot.

    Each PR type is judged independently. A first-ever set counts as a weight
    and e1RM PR (previous value 0, improvement 100%). Rep PRs require an
    earlier set in the same 2.5 lb weight bucket.
    """
    if weight <= 0 or reps <= 0:
        return []

    def _pr(pr_type: PRType, previous: float, new: float, improvement: float) -> PRResult:
        return PRResult(
            type=pr_type,
            exercise_id=exercise_id,
            exercise_name=exercise_name,
            previous_value=previous,
            new_value=new,
            improvement_percent=improvement,
            weight=weight,
            reps=reps,
        )

    prs: list[PRResult] = []
    volume = weight * reps
    e1rm = calculate_1rm(weight, reps).estimated_1rm

    # A stored 0 means "no baseline" just like None
    max_weight = previous_bests.max_weight
    if max_weight is None or max_weight <= 0:
        prs.append(_pr(PRType.WEIGHT, 0, weight, 100))
    elif weight > max_weight:
        prs.append(_pr(PRType.WEIGHT, max_weight, weight, _improvement(max_weight, weight)))

    reps_at_weight = previous_bests.max_reps_at_weight.get(round_to_increment(weight))
    if reps_at_weight is not None and reps > reps_at_weight:
        prs.append(_pr(PRType.REPS, reps_at_weight, reps, _improvement(reps_at_weight, reps)))

    max_volume = previous_bests.max_volume
    if max_volume is not None and volume > max_volume:
        prs.append(_pr(PRType.VOLUME, max_volume, volume, _improvement(max_volume, volume)))

    best_1rm = previous_bests.best_1rm
    if best_1rm is None or best_1rm <= 0:
        if e1rm > 0:
            prs.append(_pr(PRType.E1RM, 0, e1rm, 100))
    elif e1rm > best_1rm:
        prs.append(_pr(PRType.E1RM, best_1rm, e1rm, _improvement(best_1rm, e1rm)))

    return prs


def get_most_significant_pr(prs: list[PRResult]) -> PRResult | None:
    """Pick the PR to headline: e1rm > weight > reps > volume."""
    for pr_type in PR_PRIORITY:
        for pr in prs:
            if pr.type is pr_type:
                return pr
    return prs[0] if prs else None


def pr_type_name(pr_type: PRType | str) -> str:
    return _PR_TYPE_NAMES.get(PRType(pr_type), "PR")


def update_bests(bests: ExerciseBests, weight: float, reps: int) -> ExerciseBests:
    """Return the snapshot that results from adding one completed set.

    Sets with non-positive weight or reps leave the snapshot unchanged.
    """
    if weight <= 0 or reps <= 0:
        return bests

    volume = weight * reps
    e1rm = calculate_1rm(weight, reps).estimated_1rm
    bucket = round_to_increment(weight)

    reps_at_weight = dict(bests.max_reps_at_weight)
    if reps > reps_at_weight.get(bucket, 0):
        reps_at_weight[bucket] = reps

    return replace(
        bests,
        max_weight=weight if bests.max_weight is None else max(bests.max_weight, weight),
        max_reps=reps if bests.max_reps is None else max(bests.max_reps, reps),
        max_volume=volume if bests.max_volume is None else max(bests.max_volume, volume),
        best_1rm=e1rm if bests.best_1rm is None else max(bests.best_1rm, e1rm),
        max_reps_at_weight=reps_at_weight,
    )


def evaluate_set(
    exercise_id: str,
    exercise_name: str,
    weight: float,
    reps: int,
    bests: ExerciseBests,
) -> tuple[list[PRResult], ExerciseBests]:
    """Detect PRs for a set and return them with the updated snapshot."""
    prs = detect_prs(exercise_id, exercise_name, weight, reps, bests)
    return prs, update_bests(bests, weight, reps)


def build_exercise_bests(history: Iterable[WorkoutSession]) -> ExerciseBests:
    """Fold an exercise's full history into a bests snapshot.

    Incomplete sets and sets with missing or non-positive weight/reps are
    skipped.
    """
    bests = ExerciseBests()
    skipped = 0
    for session in history:
        for s in session.sets:
            weight, reps = s.weight_lbs or 0, s.reps or 0
            if not s.completed or weight <= 0 or reps <= 0:
                skipped += 1
                continue
            bests = update_bests(bests, weight, reps)

    if skipped:
        logger.debug("build_exercise_bests skipped %d sets", skipped, extra=log_context(skipped_sets=skipped))
    return bests
