"""One-rep-max formulas, relative intensity and shared rounding helpers.

Every higher-level module in the engine builds on these functions. Weights
are in pounds; estimates are rounded to one decimal and prescribed loads to
the nearest 2.5 lb plate increment.

References: Brzycki (1993), Epley (1985), Lombardi (1989).
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from enum import Enum
from math import floor

PLATE_INCREMENT = 2.5
LBS_PER_KG = 2.20462
METERS_PER_MILE = 1609.34

# Brzycki's denominator (37 - reps) reaches zero here
_BRZYCKI_REP_LIMIT = 37


class OneRMFormula(str, Enum):
    BRZYCKI = "brzycki"
    EPLEY = "epley"
    LOMBARDI = "lombardi"


class Confidence(str, Enum):
    """Reliability of a 1RM estimate, fixed by the rep range it came from."""
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class IntensityZoneName(str, Enum):
    MAXIMAL = "Maximal"
    HEAVY = "Heavy"
    MODERATE = "Moderate"
    LIGHT = "Light"
    VERY_LIGHT = "Very Light"


@dataclass(frozen=True)
class OneRMResult:
    estimated_1rm: float
    formula: OneRMFormula
    confidence: Confidence


@dataclass(frozen=True)
class IntensityZone:
    """Named %1RM band and the training quality it targets."""
    zone: IntensityZoneName
    purpose: str


# --- Rounding ---

def round_half_up(value: float, decimals: int = 0) -> float:
    """Round to ``decimals`` places with halves rounded up (2.25 -> 2.3)."""
    factor = 10 ** decimals
    return floor(value * factor + 0.5) / factor


def round_to_increment(weight: float, increment: float = PLATE_INCREMENT) -> float:
    """Round a load to the nearest loadable increment (default 2.5 lbs)."""
    if increment <= 0:
        return weight
    return round_half_up(weight / increment) * increment


# --- 1RM estimation ---

def brzycki(weight: float, reps: int) -> float:
    """Brzycki estimate: weight * 36 / (37 - reps). Most accurate for 1-10 reps."""
    if reps == 1:
        return weight
    if reps <= 0 or weight <= 0 or reps >= _BRZYCKI_REP_LIMIT:
        return 0.0
    return round_half_up(weight * (36 / (37 - reps)), 1)


def epley(weight: float, reps: int) -> float:
    """Epley estimate: weight * (1 + reps / 30). Better suited to 10+ reps."""
    if reps == 1:
        return weight
    if reps <= 0 or weight <= 0:
        return 0.0
    return round_half_up(weight * (1 + reps / 30), 1)


def lombardi(weight: float, reps: int) -> float:
    """Lombardi estimate: weight * reps^0.1."""
    if reps == 1:
        return weight
    if reps <= 0 or weight <= 0:
        return 0.0
    return round_half_up(weight * reps ** 0.1, 1)


def calculate_1rm(weight: float, reps: int) -> OneRMResult:
    """Estimate 1RM using the formula best suited to the rep range.

    - 1-5 reps: Brzycki, high confidence
    - 6-10 reps: mean of Brzycki and Epley, medium confidence
    - 11+ reps: Epley, low confidence

    Non-positive inputs yield a zero estimate with low confidence.
    """
    if reps <= 0 or weight <= 0:
        return OneRMResult(0.0, OneRMFormula.BRZYCKI, Confidence.LOW)

    if reps <= 5:
        return OneRMResult(brzycki(weight, reps), OneRMFormula.BRZYCKI, Confidence.HIGH)

    if reps <= 10:
        averaged = round_half_up((brzycki(weight, reps) + epley(weight, reps)) / 2, 1)
        return OneRMResult(averaged, OneRMFormula.BRZYCKI, Confidence.MEDIUM)

    return OneRMResult(epley(weight, reps), OneRMFormula.EPLEY, Confidence.LOW)


def calculate_weight_for_reps(e1rm: float, target_reps: int) -> float:
    """Load for a target rep count from an e1RM (inverse Brzycki, nearest 2.5)."""
    if target_reps <= 0 or e1rm <= 0 or target_reps >= _BRZYCKI_REP_LIMIT:
        return 0.0
    if target_reps == 1:
        return e1rm
    return round_to_increment(e1rm * (37 - target_reps) / 36)


# --- Relative intensity ---

def calculate_relative_intensity(weight: float, e1rm: float) -> float:
    """Working weight as a percentage of e1RM, one decimal."""
    if e1rm <= 0:
        return 0.0
    return round_half_up(weight / e1rm * 100, 1)


_INTENSITY_ZONES: list[tuple[float, IntensityZoneName, str]] = [
    (90, IntensityZoneName.MAXIMAL, "Strength/Neural"),
    (80, IntensityZoneName.HEAVY, "Strength"),
    (70, IntensityZoneName.MODERATE, "Hypertrophy"),
    (60, IntensityZoneName.LIGHT, "Volume/Endurance"),
]


def get_intensity_zone(relative_intensity: float) -> IntensityZone:
    for floor_pct, name, purpose in _INTENSITY_ZONES:
        if relative_intensity >= floor_pct:
            return IntensityZone(name, purpose)
    return IntensityZone(IntensityZoneName.VERY_LIGHT, "Warmup/Recovery")


# --- Unit conversions ---

def kg_to_lbs(kg: float) -> float:
    return kg * LBS_PER_KG


def lbs_to_kg(lbs: float) -> float:
    return lbs / LBS_PER_KG


def meters_to_miles(meters: float) -> float:
    return meters / METERS_PER_MILE


def miles_to_meters(miles: float) -> float:
    return miles * METERS_PER_MILE


def week_start(day: date) -> date:
    """Monday of the ISO week containing ``day``."""
    return day - timedelta(days=day.weekday())
