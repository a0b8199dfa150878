"""VO2max field-test estimates, age/sex percentiles and fitness age.

Each estimator is valid only for its own protocol; results are never blended
across tests. Estimates are in ml/kg/min, rounded to one decimal.

References:
- Cooper (1968): 12-minute run test
- Kline et al. (1987): Rockport one-mile walk test
- McArdle et al. (1972): Queens College 3-minute step test
- ACSM's Guidelines for Exercise Testing and Prescription: running equation,
  age/sex normative tables
- Mandsager et al. (2018): cardiorespiratory fitness and mortality
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from training_engine.config import get_settings
from training_engine.logging_config import log_context
from training_engine.services.formulas import round_half_up

logger = logging.getLogger(__name__)

TRAINED_DECLINE_RATE = 0.005    # per year while training
UNTRAINED_DECLINE_RATE = 0.01   # per year when sedentary

RUNNING_VO2MAX_RANGE = (15.0, 90.0)
CYCLING_VO2MAX_RANGE = (20.0, 90.0)
FITNESS_AGE_RANGE = (20.0, 90.0)


class Sex(str, Enum):
    MALE = "male"
    FEMALE = "female"


class VO2maxClassification(str, Enum):
    POOR = "Poor"
    FAIR = "Fair"
    GOOD = "Good"
    EXCELLENT = "Excellent"
    SUPERIOR = "Superior"


@dataclass(frozen=True)
class PercentileBand:
    """VO2max values at the 5th/25th/50th/75th/95th percentiles."""
    p5: float
    p25: float
    p50: float
    p75: float
    p95: float


@dataclass(frozen=True)
class AgeBracket:
    start: int
    end: int
    band: PercentileBand

    @property
    def midpoint(self) -> float:
        return (self.start + self.end) / 2

    def contains(self, age: float) -> bool:
        return self.start <= age <= self.end


@dataclass(frozen=True)
class VO2maxNorms:
    """Age-bracketed percentile reference table for each sex."""
    male: tuple[AgeBracket, ...]
    female: tuple[AgeBracket, ...]

    def brackets(self, sex: Sex | str) -> list[AgeBracket]:
        table = self.male if Sex(sex) is Sex.MALE else self.female
        return sorted(table, key=lambda b: b.start)


@dataclass(frozen=True)
class VO2maxProfile:
    percentile: float
    classification: VO2maxClassification
    fitness_age: float


@dataclass(frozen=True)
class MortalityRiskInfo:
    category: str
    risk_reduction: str
    description: str


def _bracket(start: int, end: int, *values: float) -> AgeBracket:
    return AgeBracket(start, end, PercentileBand(*values))


# ACSM / Cooper Institute norms
DEFAULT_VO2MAX_NORMS = VO2maxNorms(
    male=(
        _bracket(20, 29, 29, 38, 44, 51, 60),
        _bracket(30, 39, 27, 36, 42, 49, 58),
        _bracket(40, 49, 24, 33, 39, 45, 55),
        _bracket(50, 59, 21, 30, 35, 41, 50),
        _bracket(60, 69, 18, 26, 31, 37, 46),
        _bracket(70, 79, 16, 23, 27, 32, 41),
    ),
    female=(
        _bracket(20, 29, 24, 33, 39, 45, 54),
        _bracket(30, 39, 22, 31, 36, 42, 51),
        _bracket(40, 49, 20, 28, 33, 39, 48),
        _bracket(50, 59, 18, 25, 30, 35, 44),
        _bracket(60, 69, 15, 22, 26, 31, 40),
        _bracket(70, 79, 12, 19, 23, 27, 36),
    ),
)


# --- Field tests ---

def cooper_test(distance_meters: float) -> float:
    """Cooper 12-minute run: (distance_m - 504.9) / 44.73."""
    if distance_meters <= 0:
        return 0.0
    return round_half_up((distance_meters - 504.9) / 44.73, 1)


def one_point_five_mile_test(time_seconds: float) -> float:
    """1.5-mile run: 483 / time_minutes + 3.5."""
    if time_seconds <= 0:
        return 0.0
    return round_half_up(483 / (time_seconds / 60) + 3.5, 1)


def rockport_walk_test(
    time_minutes: float,
    final_heart_rate: float,
    weight_lbs: float,
    age: float,
    sex: Sex | str,
) -> float:
    """Rockport one-mile walk (Kline et al.). Suited to less fit individuals."""
    if time_minutes <= 0 or final_heart_rate <= 0 or weight_lbs <= 0:
        logger.debug("non-positive input", extra=log_context(estimator="rockport_walk_test"))
        return 0.0
    sex_factor = 1 if Sex(sex) is Sex.MALE else 0
    vo2max = (
        132.853
        - 0.0769 * weight_lbs
        - 0.3877 * age
        + 6.315 * sex_factor
        - 3.2649 * time_minutes
        - 0.1565 * final_heart_rate
    )
    return round_half_up(vo2max, 1)


def step_test(recovery_heart_rate: float, sex: Sex | str) -> float:
    """3-minute step test from the heart rate one minute into recovery."""
    if recovery_heart_rate <= 0:
        return 0.0
    if Sex(sex) is Sex.MALE:
        vo2max = 111.33 - 0.42 * recovery_heart_rate
    else:
        vo2max = 65.81 - 0.1847 * recovery_heart_rate
    return round_half_up(vo2max, 1)


def estimate_from_running(
    distance_meters: float,
    duration_seconds: float,
    avg_heart_rate: float,
    max_heart_rate: float,
    resting_heart_rate: float,
    elevation_gain_meters: float = 0,
) -> float:
    """Estimate VO2max from a GPS run with the heart-rate-reserve method.

    VO2 at the run's pace comes from the ACSM running equation
    (0.2 * speed + 0.9 * speed * grade + 3.5, speed in m/min). Treating the
    %HRR as %VO2max, VO2max = VO2 / HRR fraction, capped to [15, 90].
    """
    if distance_meters <= 0 or duration_seconds <= 0 or max_heart_rate <= resting_heart_rate:
        logger.debug("insufficient run data", extra=log_context(estimator="estimate_from_running"))
        return 0.0
    hr_reserve = (avg_heart_rate - resting_heart_rate) / (max_heart_rate - resting_heart_rate)
    if hr_reserve <= 0:
        logger.debug(
            "average HR at or below resting HR",
            extra=log_context(estimator="estimate_from_running", avg_heart_rate=avg_heart_rate),
        )
        return 0.0

    speed = distance_meters / (duration_seconds / 60)
    grade = elevation_gain_meters / distance_meters if elevation_gain_meters > 0 else 0
    vo2_at_pace = 0.2 * speed + 0.9 * speed * grade + 3.5

    lo, hi = RUNNING_VO2MAX_RANGE
    return round_half_up(max(lo, min(hi, vo2_at_pace / hr_reserve)), 1)


def _cycling_intensity_factor(duration_minutes: float, hr_fraction: float) -> float:
    if duration_minutes >= 60:
        factor = 0.85
    elif duration_minutes >= 20:
        factor = 0.90
    else:
        factor = 0.95 + (20 - duration_minutes) * 0.005

    if hr_fraction < 0.75:
        factor = min(factor, 0.75)
    elif hr_fraction > 0.90:
        factor = max(factor, hr_fraction)
    return factor


def estimate_from_cycling(
    normalized_power: float,
    weight_kg: float,
    avg_heart_rate: float,
    max_heart_rate: float,
    duration_minutes: float,
) -> float:
    """Estimate VO2max from a ride's power, scaled by an effort intensity factor.

    VO2 at the effort is ~10.8 ml/kg/min per W/kg plus resting 3.5; dividing
    by the intensity factor (from duration and %HRmax) gives VO2max, capped
    to [20, 90].
    """
    if normalized_power <= 0 or weight_kg <= 0 or max_heart_rate <= 0:
        logger.debug("non-positive input", extra=log_context(estimator="estimate_from_cycling"))
        return 0.0

    factor = _cycling_intensity_factor(duration_minutes, avg_heart_rate / max_heart_rate)
    vo2_at_effort = 10.8 * (normalized_power / weight_kg) + 3.5

    lo, hi = CYCLING_VO2MAX_RANGE
    return round_half_up(max(lo, min(hi, vo2_at_effort / factor)), 1)


# --- Percentiles and fitness age ---

def select_bracket(age: float, sex: Sex | str, norms: VO2maxNorms = DEFAULT_VO2MAX_NORMS) -> AgeBracket:
    """Bracket containing ``age``; ages outside every bracket use the oldest."""
    brackets = norms.brackets(sex)
    for bracket in brackets:
        if bracket.contains(age):
            return bracket
    return brackets[-1]


def _interpolate_percentile(vo2max: float, band: PercentileBand) -> float:
    if vo2max >= band.p95:
        return min(99.0, 95 + (vo2max - band.p95) / (band.p95 - band.p75) * 4)
    if vo2max >= band.p75:
        return 75 + (vo2max - band.p75) / (band.p95 - band.p75) * 20
    if vo2max >= band.p50:
        return 50 + (vo2max - band.p50) / (band.p75 - band.p50) * 25
    if vo2max >= band.p25:
        return 25 + (vo2max - band.p25) / (band.p50 - band.p25) * 25
    if vo2max >= band.p5:
        return 5 + (vo2max - band.p5) / (band.p25 - band.p5) * 20
    return max(1.0, vo2max / band.p5 * 5)


def _vo2max_at_percentile(percentile: float, band: PercentileBand) -> float:
    if percentile >= 95:
        return band.p95
    if percentile >= 75:
        return band.p75 + (percentile - 75) / 20 * (band.p95 - band.p75)
    if percentile >= 50:
        return band.p50 + (percentile - 50) / 25 * (band.p75 - band.p50)
    if percentile >= 25:
        return band.p25 + (percentile - 25) / 25 * (band.p50 - band.p25)
    return band.p5 + (percentile - 5) / 20 * (band.p25 - band.p5)


def classify_percentile(percentile: float) -> VO2maxClassification:
    if percentile >= 90:
        return VO2maxClassification.SUPERIOR
    if percentile >= 75:
        return VO2maxClassification.EXCELLENT
    if percentile >= 50:
        return VO2maxClassification.GOOD
    if percentile >= 25:
        return VO2maxClassification.FAIR
    return VO2maxClassification.POOR


def calculate_fitness_age(
    vo2max: float,
    sex: Sex | str,
    norms: VO2maxNorms = DEFAULT_VO2MAX_NORMS,
) -> float:
    """Age at which ``vo2max`` would be exactly average (the bracket p50).

    Starts at the midpoint of the bracket whose p50 is nearest, then moves
    toward the neighbouring bracket in proportion to the distance from that
    p50. Clamped to [20, 90] years.
    """
    brackets = norms.brackets(sex)
    index = min(range(len(brackets)), key=lambda i: abs(brackets[i].band.p50 - vo2max))
    closest = brackets[index]
    p50 = closest.band.p50
    fitness_age = closest.midpoint

    if vo2max > p50 and index > 0 and brackets[index - 1].band.p50 != p50:
        younger = brackets[index - 1]
        ratio = (vo2max - p50) / (younger.band.p50 - p50)
        fitness_age = closest.midpoint - ratio * (closest.midpoint - younger.midpoint)
    elif vo2max < p50 and index < len(brackets) - 1 and brackets[index + 1].band.p50 != p50:
        older = brackets[index + 1]
        ratio = (p50 - vo2max) / (p50 - older.band.p50)
        fitness_age = closest.midpoint + ratio * (older.midpoint - closest.midpoint)

    lo, hi = FITNESS_AGE_RANGE
    return round_half_up(max(lo, min(hi, fitness_age)), 1)


def get_vo2max_percentile(
    vo2max: float,
    age: float,
    sex: Sex | str,
    norms: VO2maxNorms = DEFAULT_VO2MAX_NORMS,
) -> VO2maxProfile:
    """Percentile, classification and fitness age for an athlete's VO2max."""
    band = select_bracket(age, sex, norms).band
    percentile = round_half_up(_interpolate_percentile(vo2max, band), 1)
    return VO2maxProfile(
        percentile=percentile,
        classification=classify_percentile(percentile),
        fitness_age=calculate_fitness_age(vo2max, sex, norms),
    )


# --- Decline model ---

def _decline_rate(training: bool) -> float:
    return TRAINED_DECLINE_RATE if training else UNTRAINED_DECLINE_RATE


def calculate_target_vo2max(
    current_age: float,
    target_age: float,
    sex: Sex | str,
    target_percentile: float | None = None,
    training: bool = True,
    norms: VO2maxNorms = DEFAULT_VO2MAX_NORMS,
) -> float:
    """VO2max needed today to sit at ``target_percentile`` at ``target_age``.

    Reads the VO2max for that percentile from the target-age bracket and
    backs out the annual decline: target / (1 - rate) ** years.
    """
    if target_percentile is None:
        target_percentile = get_settings().vo2max_target_percentile
    band = select_bracket(target_age, sex, norms).band
    future_vo2max = _vo2max_at_percentile(target_percentile, band)
    years = max(0, target_age - current_age)
    return round_half_up(future_vo2max / (1 - _decline_rate(training)) ** years, 1)


def project_vo2max(current_vo2max: float, years: float, training: bool = True) -> float:
    """Projected VO2max after ``years`` of decline: current * (1 - rate) ** years."""
    return round_half_up(current_vo2max * (1 - _decline_rate(training)) ** years, 1)


# --- Misc ---

def is_valid_vo2max(vo2max: float) -> bool:
    return 10 <= vo2max <= 100


_MORTALITY_BANDS: list[tuple[float, MortalityRiskInfo]] = [
    (97.7, MortalityRiskInfo(
        "Elite", "80%",
        "Elite fitness is associated with 80% lower all-cause mortality vs. low fitness.",
    )),
    (75, MortalityRiskInfo(
        "High", "60-70%",
        "High fitness associated with 60-70% lower mortality risk vs. low fitness.",
    )),
    (50, MortalityRiskInfo(
        "Above Average", "40-50%",
        "Above average fitness associated with significant mortality reduction.",
    )),
    (25, MortalityRiskInfo(
        "Below Average", "20-30%",
        "Some fitness benefit, but significant room for improvement.",
    )),
]


def mortality_risk_info(percentile: float) -> MortalityRiskInfo:
    """All-cause mortality band for a VO2max percentile (Mandsager et al. 2018)."""
    for floor_pct, info in _MORTALITY_BANDS:
        if percentile >= floor_pct:
            return info
    return MortalityRiskInfo(
        "Low", "Baseline",
        "Low fitness is the strongest predictor of death. Focus on improving VO2max.",
    )
