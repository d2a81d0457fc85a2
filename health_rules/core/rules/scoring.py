"""
Risk Scorer

Accumulates a non-negative integer risk score for one record. Starts at a
base of 10; each contribution below is computed independently and added.
It reads thresholds through the shared band helpers and never looks at the
Evaluator's output.

Weights:
    blood pressure  0.5 per mmHg systolic over high, 0.3 per mmHg diastolic
                    over high, +30 when either axis reaches its very-high cutoff
    glucose         +25 at very-high; otherwise 1.2 per mmol/L over the
                    context cutoff; or 2.0 per mmol/L under the low cutoff,
                    +20 below 3.0
    medication      +15 when missed, +5 each if BP / glucose also elevated
    exercise        +5 under 30 min (or not recorded), +3 more under 15 min
    diet            +3 high salt with hypertension, +5 more if BP elevated
    alcohol         2 per unit when over 2 units
"""
from __future__ import annotations

import math
from typing import Callable, FrozenSet, List

from health_rules.models.entry import MeasurementRecord
from health_rules.models.profile import Condition, ThresholdProfile
from health_rules.utils import get_logger
from .bands import (
    ALCOHOL_UNITS_LIMIT,
    CRITICAL_GLUCOSE_FLOOR,
    EXERCISE_MINIMUM_MINUTES,
    EXERCISE_TARGET_MINUTES,
    HIGH_DIET_LEVEL,
    GlucoseBand,
    bp_elevated,
    classify_bp,
    classify_glucose,
    context_high_threshold,
    glucose_elevated,
    read_bp,
)

logger = get_logger(__name__)

BASE_SCORE = 10

# Blood pressure
BP_SYS_WEIGHT        = 0.5
BP_DIA_WEIGHT        = 0.3
BP_CRISIS_POINTS     = 30

# Glucose
GLUCOSE_VERY_HIGH_POINTS = 25
GLUCOSE_HIGH_WEIGHT      = 1.2
GLUCOSE_LOW_WEIGHT       = 2.0
GLUCOSE_CRITICAL_POINTS  = 20

# Medication
MEDS_MISSED_POINTS       = 15
MEDS_MISSED_COMORBID_POINTS = 5

# Lifestyle
LOW_EXERCISE_POINTS      = 5
VERY_LOW_EXERCISE_POINTS = 3
SALT_POINTS              = 3
SALT_WITH_BP_POINTS      = 5
ALCOHOL_POINTS_PER_UNIT  = 2

ScoreContribution = Callable[[MeasurementRecord, ThresholdProfile, FrozenSet[Condition]], float]


def score_blood_pressure(record, thresholds, conditions) -> float:
    bp = record.blood_pressure
    if bp is None:
        return 0.0
    points = (
        BP_SYS_WEIGHT * max(0, bp.systolic - thresholds.bp_sys_high)
        + BP_DIA_WEIGHT * max(0, bp.diastolic - thresholds.bp_dia_high)
    )
    reading = read_bp(bp, thresholds)
    if reading.sys_very_high or reading.dia_very_high:
        points += BP_CRISIS_POINTS
    return points


def score_glucose(record, thresholds, conditions) -> float:
    glucose = record.glucose
    band = classify_glucose(glucose, thresholds)
    if band == GlucoseBand.VERY_HIGH:
        return GLUCOSE_VERY_HIGH_POINTS
    if band == GlucoseBand.HIGH:
        return GLUCOSE_HIGH_WEIGHT * max(0, glucose.value - context_high_threshold(glucose, thresholds))
    if band in (GlucoseBand.LOW, GlucoseBand.CRITICAL_LOW):
        points = GLUCOSE_LOW_WEIGHT * (thresholds.glucose_low - glucose.value)
        if glucose.value < CRITICAL_GLUCOSE_FLOOR:
            points += GLUCOSE_CRITICAL_POINTS
        return points
    return 0.0


def score_medication(record, thresholds, conditions) -> float:
    if record.medication is None or record.medication.taken:
        return 0.0
    points = MEDS_MISSED_POINTS
    if bp_elevated(classify_bp(record.blood_pressure, thresholds)):
        points += MEDS_MISSED_COMORBID_POINTS
    if glucose_elevated(classify_glucose(record.glucose, thresholds)):
        points += MEDS_MISSED_COMORBID_POINTS
    return points


def score_exercise(record, thresholds, conditions) -> float:
    if record.exercise is None:
        return LOW_EXERCISE_POINTS
    minutes = record.exercise.minutes
    points = 0.0
    if minutes < EXERCISE_TARGET_MINUTES:
        points += LOW_EXERCISE_POINTS
    if minutes < EXERCISE_MINIMUM_MINUTES:
        points += VERY_LOW_EXERCISE_POINTS
    return points


def score_diet(record, thresholds, conditions) -> float:
    diet = record.diet
    if diet is None or diet.salt_level < HIGH_DIET_LEVEL:
        return 0.0
    if Condition.HYPERTENSION not in conditions:
        return 0.0
    points = SALT_POINTS
    if bp_elevated(classify_bp(record.blood_pressure, thresholds)):
        points += SALT_WITH_BP_POINTS
    return points


def score_alcohol(record, thresholds, conditions) -> float:
    units = record.alcohol_units
    if units is None or units <= ALCOHOL_UNITS_LIMIT:
        return 0.0
    return ALCOHOL_POINTS_PER_UNIT * units


SCORE_CONTRIBUTIONS: List[ScoreContribution] = [
    score_blood_pressure,
    score_glucose,
    score_medication,
    score_exercise,
    score_diet,
    score_alcohol,
]


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def score(
    record: MeasurementRecord,
    thresholds: ThresholdProfile,
    conditions: FrozenSet[Condition] = frozenset(),
) -> int:
    """Total risk score, clamped at zero and rounded half-up to an integer."""
    total = float(BASE_SCORE)
    for contribution in SCORE_CONTRIBUTIONS:
        points = contribution(record, thresholds, conditions)
        if points:
            logger.debug(f"Scorer [{contribution.__name__}]: +{points:.2f}")
        total += points
    return max(0, _round_half_up(total))
