"""RPE/RIR conversion and stimulating ("effective") rep counting.

Only reps performed close to failure are assumed to drive hypertrophy. The
number of effective reps in a set is capped by how hard the set was:

    RPE 10 (failure)  -> up to 5
    RPE 9  (1 RIR)    -> up to 5
    RPE 8  (2 RIR)    -> up to 4
    RPE 7  (3 RIR)    -> up to 3
    RPE 6  (4 RIR)    -> up to 2
    below RPE 6       -> up to 1

Reference: Beardsley, "stimulating reps" model; Helms et al. (2016) RIR scale.
"""

from __future__ import annotations

from dataclasses import dataclass

# Typical working set when the lifter logged neither RPE nor RIR
ASSUMED_RPE = 7.5

_EFFECTIVE_REP_CAPS: list[tuple[float, int]] = [
    (10, 5),
    (9, 5),
    (8, 4),
    (7, 3),
    (6, 2),
]

_RIR_TAGS: dict[str, int] = {
    "failure": 0,
    "0": 0,
    "1": 1,
    "2": 2,
    "3": 3,
    "4": 4,
    "5": 5,
    "5+": 5,
    "easy": 5,
}


@dataclass(frozen=True)
class EffectiveRepsResult:
    total_reps: int
    effective_reps: int
    rpe: float | None
    rir: float | None


def rir_to_rpe(rir: float) -> float:
    return max(1, min(10, 10 - rir))


def rpe_to_rir(rpe: float) -> float:
    return max(0, min(10, 10 - rpe))


def parse_rir(value: int | str | None) -> int | None:
    """Normalise a logged RIR (int or qualitative tag) to an integer.

    Returns None for missing values and tags that are not recognised.
    """
    if value is None:
        return None
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return int(max(0, min(10, value)))
    return _RIR_TAGS.get(str(value).strip().lower())


def resolve_rpe(rpe: float | None, rir: float | None) -> float:
    """Effective RPE for a set: logged RPE, else RPE derived from RIR, else 7.5."""
    if rpe is not None:
        return rpe
    if rir is not None:
        return rir_to_rpe(rir)
    return ASSUMED_RPE


def calculate_effective_reps(
    reps: int,
    rpe: float | None = None,
    rir: float | None = None,
) -> EffectiveRepsResult:
    """Count stimulating reps in a set from its proximity to failure.

    Explicit RPE wins over RIR. The returned rpe/rir fill in whichever of the
    pair was logged; both stay None when neither was.
    """
    effective_rpe = resolve_rpe(rpe, rir)
    reps = max(0, reps)

    cap = 1
    for rpe_floor, rep_cap in _EFFECTIVE_REP_CAPS:
        if effective_rpe >= rpe_floor:
            cap = rep_cap
            break

    reported_rpe = rpe if rpe is not None else (rir_to_rpe(rir) if rir is not None else None)
    reported_rir = rir if rir is not None else (rpe_to_rir(rpe) if rpe is not None else None)

    return EffectiveRepsResult(
        total_reps=reps,
        effective_reps=min(reps, cap),
        rpe=reported_rpe,
        rir=reported_rir,
    )
