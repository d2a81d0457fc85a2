"""
Threshold Evaluator

Derives a record's status and ordered reason codes.

Rule groups run in a fixed order and each returns an optional
RuleOutcome (proposed status + reasons). Outcomes are folded with a
monotonic max, so a later group can never lower a status an earlier group
raised. Reasons keep firing order.

Group order:
    1. Blood pressure  : crisis > very-high > high > elevated (exclusive tiers)
    2. Glucose         : very-high > high > low (exclusive), low may escalate
    3. Medication      : doses missed
    4. Alcohol         : more than 2 units
    5. Diet cross-checks: reason-only, never raise status
"""
from __future__ import annotations

from typing import Callable, FrozenSet, List, Optional

from health_rules.models.entry import GlucoseContext, MeasurementRecord, Status
from health_rules.models.profile import Condition, ThresholdProfile
from health_rules.utils import get_logger
from .base import EvaluationResult, ReasonCode, RuleOutcome, escalate
from .bands import (
    ALCOHOL_UNITS_LIMIT,
    HIGH_DIET_LEVEL,
    BpBand,
    GlucoseBand,
    bp_elevated,
    classify_bp,
    classify_glucose,
    glucose_over_fasting_high,
    read_bp,
)

logger = get_logger(__name__)

StatusRule = Callable[[MeasurementRecord, ThresholdProfile, FrozenSet[Condition]], Optional[RuleOutcome]]


# ── Group 1: Blood pressure ──────────────────────────────────────────────────

def rule_blood_pressure(record, thresholds, conditions) -> Optional[RuleOutcome]:
    reading = read_bp(record.blood_pressure, thresholds)
    if reading is None:
        return None

    band = reading.band
    if band == BpBand.CRISIS:
        return RuleOutcome(Status.RED, (ReasonCode.BP_CRISIS,))

    if band == BpBand.VERY_HIGH:
        reasons = []
        if reading.sys_very_high:
            reasons.append(ReasonCode.BP_SYS_VERY_HIGH)
        if reading.dia_very_high:
            reasons.append(ReasonCode.BP_DIA_VERY_HIGH)
        return RuleOutcome(Status.RED, tuple(reasons))

    if band == BpBand.HIGH:
        reasons = []
        if reading.sys_high:
            reasons.append(ReasonCode.BP_SYS_HIGH)
        if reading.dia_high:
            reasons.append(ReasonCode.BP_DIA_HIGH)
        return RuleOutcome(Status.YELLOW, tuple(reasons))

    if band == BpBand.ELEVATED:
        return RuleOutcome(Status.YELLOW, (ReasonCode.BP_ELEVATED,))

    return None


# ── Group 2: Glucose ─────────────────────────────────────────────────────────

def rule_glucose(record, thresholds, conditions) -> Optional[RuleOutcome]:
    glucose = record.glucose
    band = classify_glucose(glucose, thresholds)

    if band == GlucoseBand.VERY_HIGH:
        reason = (
            ReasonCode.GLUCOSE_FAST_VERY_HIGH
            if glucose.context == GlucoseContext.FASTING
            else ReasonCode.GLUCOSE_RANDOM_VERY_HIGH
        )
        return RuleOutcome(Status.RED, (reason,))

    if band == GlucoseBand.HIGH:
        return RuleOutcome(Status.YELLOW, (ReasonCode.GLUCOSE_HIGH,))

    if band == GlucoseBand.LOW:
        return RuleOutcome(Status.YELLOW, (ReasonCode.GLUCOSE_LOW,))

    if band == GlucoseBand.CRITICAL_LOW:
        return RuleOutcome(Status.RED, (ReasonCode.GLUCOSE_LOW, ReasonCode.GLUCOSE_VERY_LOW))

    return None


# ── Group 3: Medication ──────────────────────────────────────────────────────

def rule_medication(record, thresholds, conditions) -> Optional[RuleOutcome]:
    if record.medication is not None and not record.medication.taken:
        return RuleOutcome(Status.YELLOW, (ReasonCode.MEDS_MISSED,))
    return None


# ── Group 4: Alcohol ─────────────────────────────────────────────────────────

def rule_alcohol(record, thresholds, conditions) -> Optional[RuleOutcome]:
    if record.alcohol_units is not None and record.alcohol_units > ALCOHOL_UNITS_LIMIT:
        return RuleOutcome(Status.YELLOW, (ReasonCode.ALCOHOL_HIGH,))
    return None


# ── Group 5: Diet cross-checks (reason only) ─────────────────────────────────

def rule_salt_with_bp(record, thresholds, conditions) -> Optional[RuleOutcome]:
    diet = record.diet
    if diet is None or diet.salt_level < HIGH_DIET_LEVEL:
        return None
    if Condition.HYPERTENSION not in conditions:
        return None
    if not bp_elevated(classify_bp(record.blood_pressure, thresholds)):
        return None
    return RuleOutcome(Status.GREEN, (ReasonCode.SALT_HIGH_WITH_BP,))


def rule_carbs_with_glucose(record, thresholds, conditions) -> Optional[RuleOutcome]:
    diet = record.diet
    if diet is None or diet.carb_level < HIGH_DIET_LEVEL:
        return None
    if Condition.DIABETES not in conditions:
        return None
    if not glucose_over_fasting_high(record.glucose, thresholds):
        return None
    return RuleOutcome(Status.GREEN, (ReasonCode.CARB_HIGH_WITH_GLUCOSE,))


# ── Public interface ─────────────────────────────────────────────────────────

STATUS_RULES: List[StatusRule] = [
    rule_blood_pressure,
    rule_glucose,
    rule_medication,
    rule_alcohol,
    rule_salt_with_bp,
    rule_carbs_with_glucose,
]


def evaluate(
    record: MeasurementRecord,
    thresholds: ThresholdProfile,
    conditions: FrozenSet[Condition] = frozenset(),
) -> EvaluationResult:
    """
    Run every status rule against one record.

    Returns:
        EvaluationResult with the highest status any group proposed and
        the reasons in firing order. A record with nothing abnormal (or no
        measurements at all) is GREEN with no reasons.
    """
    status = Status.GREEN
    reasons: List[ReasonCode] = []

    for rule in STATUS_RULES:
        outcome = rule(record, thresholds, conditions)
        if outcome is None:
            continue
        status = escalate(status, outcome.status)
        for reason in outcome.reasons:
            if reason not in reasons:
                reasons.append(reason)
        logger.debug(
            f"Evaluator [{rule.__name__}]: proposed {outcome.status.value} "
            f"({', '.join(r.value for r in outcome.reasons)})"
        )

    return EvaluationResult(status=status, reasons=tuple(reasons))
