"""
Action Recommender

Turns a record and its evaluation into a set of action codes.

Groups run in this order and the order is part of the contract: a group
that would add a weaker duplicate of an action an earlier group already
added is suppressed by the accumulator (see ``accumulator.SUPPRESSES``).

    1. Red cascade (status red, first match wins):
         BP very-high / crisis  -> seekImmediateCare, bpCrisis
         glucose very-high      -> contactProvider, glucoseVeryHigh (+checkKetones if diabetic)
         glucose < 3.0          -> seekImmediateCare, glucoseVeryLow, consumeGlucose
         anything else          -> contactProvider
    2. Yellow/red layers (each independent):
         BP high, BP elevated, glucose high, glucose low, missed meds,
         low exercise, high salt, high alcohol
    3. Nothing added (green) -> keepRoutine plus condition-aware reminders
"""
from __future__ import annotations

from typing import Callable, FrozenSet, List, Optional

from health_rules.models.entry import MeasurementRecord, Status
from health_rules.models.profile import DEFAULT_THRESHOLDS, Condition, ThresholdProfile
from health_rules.utils import get_logger
from .accumulator import ActionSet
from .base import ActionCode, EvaluationResult
from .bands import (
    ALCOHOL_UNITS_LIMIT,
    EXERCISE_MINIMUM_MINUTES,
    EXERCISE_TARGET_MINUTES,
    HIGH_DIET_LEVEL,
    MODERATE_DIET_LEVEL,
    BpBand,
    GlucoseBand,
    classify_bp,
    classify_glucose,
    glucose_elevated,
)

logger = get_logger(__name__)

ActionLayer = Callable[
    [MeasurementRecord, EvaluationResult, FrozenSet[Condition], ThresholdProfile, ActionSet],
    None,
]


def _salt_level(record: MeasurementRecord) -> Optional[int]:
    return record.diet.salt_level if record.diet is not None else None


def _carb_level(record: MeasurementRecord) -> Optional[int]:
    return record.diet.carb_level if record.diet is not None else None


def _low_exercise(record: MeasurementRecord) -> bool:
    return record.exercise is None or record.exercise.minutes < EXERCISE_TARGET_MINUTES


# ── Group 1: red cascade ─────────────────────────────────────────────────────

def red_cascade(record, evaluation, conditions, thresholds, actions: ActionSet) -> None:
    if evaluation.status != Status.RED:
        return

    bp_band = classify_bp(record.blood_pressure, thresholds)
    glucose_band = classify_glucose(record.glucose, thresholds)

    if bp_band >= BpBand.VERY_HIGH:
        actions.add(ActionCode.SEEK_IMMEDIATE_CARE, ActionCode.BP_CRISIS)
    elif glucose_band == GlucoseBand.VERY_HIGH:
        actions.add(ActionCode.CONTACT_PROVIDER, ActionCode.GLUCOSE_VERY_HIGH)
        if Condition.DIABETES in conditions:
            actions.add(ActionCode.CHECK_KETONES)
    elif glucose_band == GlucoseBand.CRITICAL_LOW:
        actions.add(
            ActionCode.SEEK_IMMEDIATE_CARE,
            ActionCode.GLUCOSE_VERY_LOW,
            ActionCode.CONSUME_GLUCOSE,
        )
    else:
        actions.add(ActionCode.CONTACT_PROVIDER)


# ── Group 2: yellow/red layers ───────────────────────────────────────────────

def bp_high_actions(record, evaluation, conditions, thresholds, actions: ActionSet) -> None:
    if classify_bp(record.blood_pressure, thresholds) != BpBand.HIGH:
        return
    actions.add(ActionCode.MONITOR_BP)

    salt = _salt_level(record)
    if salt is not None and salt >= HIGH_DIET_LEVEL:
        actions.add(ActionCode.REDUCE_SALT_IMMEDIATELY)
    elif salt is not None and salt >= MODERATE_DIET_LEVEL:
        actions.add(ActionCode.REDUCE_SALT)

    if _low_exercise(record):
        actions.add(ActionCode.INCREASE_EXERCISE)
    if record.alcohol_units is not None and record.alcohol_units > 0:
        actions.add(ActionCode.LIMIT_ALCOHOL)


def bp_elevated_actions(record, evaluation, conditions, thresholds, actions: ActionSet) -> None:
    if classify_bp(record.blood_pressure, thresholds) != BpBand.ELEVATED:
        return
    actions.add(ActionCode.LIFESTYLE_CHANGE, ActionCode.WATCH_SALT)


def glucose_high_actions(record, evaluation, conditions, thresholds, actions: ActionSet) -> None:
    if classify_glucose(record.glucose, thresholds) != GlucoseBand.HIGH:
        return
    actions.add(ActionCode.MONITOR_GLUCOSE)
    if Condition.DIABETES in conditions:
        actions.add(ActionCode.FOLLOW_MEDICATION_PLAN)
    else:
        actions.add(ActionCode.REVIEW_DIET)

    carb = _carb_level(record)
    if carb is not None and carb >= HIGH_DIET_LEVEL:
        actions.add(ActionCode.REDUCE_CARBS)


def glucose_low_actions(record, evaluation, conditions, thresholds, actions: ActionSet) -> None:
    if classify_glucose(record.glucose, thresholds) != GlucoseBand.LOW:
        return
    # A non-critical low is not the cause of a red status; defer to the cascade
    if evaluation.status == Status.RED:
        return
    actions.add(ActionCode.CONSUME_GLUCOSE, ActionCode.RECHECK_GLUCOSE, ActionCode.REVIEW_MEDS)


def missed_meds_actions(record, evaluation, conditions, thresholds, actions: ActionSet) -> None:
    if record.medication is None or record.medication.taken:
        return
    actions.add(ActionCode.TAKE_MEDS)
    if (
        Condition.HYPERTENSION in conditions
        and classify_bp(record.blood_pressure, thresholds) >= BpBand.HIGH
    ):
        actions.add(ActionCode.MISSED_MEDS_BP)
    if (
        Condition.DIABETES in conditions
        and glucose_elevated(classify_glucose(record.glucose, thresholds))
    ):
        actions.add(ActionCode.MISSED_MEDS_GLUCOSE)


def exercise_actions(record, evaluation, conditions, thresholds, actions: ActionSet) -> None:
    if not _low_exercise(record):
        return
    actions.add(ActionCode.LIGHT_WALK)
    if record.exercise is not None and record.exercise.minutes < EXERCISE_MINIMUM_MINUTES:
        actions.add(ActionCode.INCREASE_EXERCISE)


def salt_actions(record, evaluation, conditions, thresholds, actions: ActionSet) -> None:
    salt = _salt_level(record)
    if salt is None or salt < HIGH_DIET_LEVEL:
        return
    if Condition.HYPERTENSION in conditions:
        actions.add(ActionCode.REDUCE_SALT_IMMEDIATELY)
    else:
        actions.add(ActionCode.REDUCE_SALT)


def alcohol_actions(record, evaluation, conditions, thresholds, actions: ActionSet) -> None:
    units = record.alcohol_units
    if units is None or units <= ALCOHOL_UNITS_LIMIT:
        return
    actions.add(ActionCode.LIMIT_ALCOHOL)
    if Condition.HYPERTENSION in conditions:
        actions.add(ActionCode.ALCOHOL_RAISES_BP)


ABNORMAL_LAYERS: List[ActionLayer] = [
    bp_high_actions,
    bp_elevated_actions,
    glucose_high_actions,
    glucose_low_actions,
    missed_meds_actions,
    exercise_actions,
    salt_actions,
    alcohol_actions,
]


# ── Group 3: routine ─────────────────────────────────────────────────────────

def routine_actions(record, conditions, actions: ActionSet) -> None:
    actions.add(ActionCode.KEEP_ROUTINE)
    salt = _salt_level(record)
    if Condition.HYPERTENSION in conditions and salt is not None and salt >= MODERATE_DIET_LEVEL:
        actions.add(ActionCode.WATCH_SALT)
    carb = _carb_level(record)
    if Condition.DIABETES in conditions and carb is not None and carb >= MODERATE_DIET_LEVEL:
        actions.add(ActionCode.WATCH_CARBS)


def build_actions(
    record: MeasurementRecord,
    evaluation: EvaluationResult,
    conditions: FrozenSet[Condition],
    thresholds: ThresholdProfile,
) -> ActionSet:
    """Run every group and return the accumulator (keeps firing order)."""
    actions = ActionSet()
    red_cascade(record, evaluation, conditions, thresholds, actions)

    if evaluation.status in (Status.YELLOW, Status.RED):
        for layer in ABNORMAL_LAYERS:
            before = len(actions)
            layer(record, evaluation, conditions, thresholds, actions)
            if len(actions) != before:
                logger.debug(f"Recommender [{layer.__name__}]: {len(actions) - before:+d} action(s)")

    if not actions:
        routine_actions(record, conditions, actions)

    return actions


def recommend(
    record: MeasurementRecord,
    evaluation: EvaluationResult,
    conditions: FrozenSet[Condition] = frozenset(),
    thresholds: Optional[ThresholdProfile] = None,
) -> FrozenSet[ActionCode]:
    """
    Recommended actions for one evaluated record.

    Args:
        thresholds: Patient thresholds; the default profile when omitted.
    """
    thresholds = thresholds if thresholds is not None else DEFAULT_THRESHOLDS
    return build_actions(record, evaluation, conditions, thresholds).freeze()
