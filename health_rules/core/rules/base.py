"""
Health Rules Base Types

Stable reason and action codes plus the result contracts shared by the
Threshold Evaluator, Risk Scorer and Action Recommender. Codes are the
only thing these components emit; turning them into patient-facing text
is left to the caller's translation layer.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, FrozenSet, List, Tuple

from health_rules.models.entry import Status


class ReasonCode(str, Enum):
    """Why a record reached its status. Emitted in rule-group order."""
    BP_CRISIS             = "bp.crisis"
    BP_SYS_VERY_HIGH      = "bp.sys.veryHigh"
    BP_DIA_VERY_HIGH      = "bp.dia.veryHigh"
    BP_SYS_HIGH           = "bp.sys.high"
    BP_DIA_HIGH           = "bp.dia.high"
    BP_ELEVATED           = "bp.elevated"
    GLUCOSE_FAST_VERY_HIGH   = "glucose.fast.veryHigh"
    GLUCOSE_RANDOM_VERY_HIGH = "glucose.random.veryHigh"
    GLUCOSE_HIGH          = "glucose.high"
    GLUCOSE_LOW           = "glucose.low"
    GLUCOSE_VERY_LOW      = "glucose.veryLow"
    MEDS_MISSED           = "meds.missed"
    ALCOHOL_HIGH          = "alcohol.high"
    SALT_HIGH_WITH_BP     = "salt.highWithBP"
    CARB_HIGH_WITH_GLUCOSE = "carb.highWithGlucose"


class ActionCode(str, Enum):
    """A recommended next step."""
    # Red-status cascade
    SEEK_IMMEDIATE_CARE     = "seekImmediateCare"
    BP_CRISIS               = "bpCrisis"
    CONTACT_PROVIDER        = "contactProvider"
    GLUCOSE_VERY_HIGH       = "glucoseVeryHigh"
    CHECK_KETONES           = "checkKetones"
    GLUCOSE_VERY_LOW        = "glucoseVeryLow"
    CONSUME_GLUCOSE         = "consumeGlucose"

    # Blood pressure
    MONITOR_BP              = "monitorBp"
    LIFESTYLE_CHANGE        = "lifestyleChange"

    # Salt ladder (strongest first)
    REDUCE_SALT_IMMEDIATELY = "reduceSaltImmediately"
    REDUCE_SALT             = "reduceSalt"
    WATCH_SALT              = "watchSalt"

    # Glucose and carbohydrates
    MONITOR_GLUCOSE         = "monitorGlucose"
    RECHECK_GLUCOSE         = "recheckGlucose"
    FOLLOW_MEDICATION_PLAN  = "followMedicationPlan"
    REVIEW_DIET             = "reviewDiet"
    REDUCE_CARBS            = "reduceCarbs"
    WATCH_CARBS             = "watchCarbs"

    # Medication
    TAKE_MEDS               = "takeMeds"
    REVIEW_MEDS             = "reviewMeds"
    MISSED_MEDS_BP          = "missedMedsBp"
    MISSED_MEDS_GLUCOSE     = "missedMedsGlucose"

    # Lifestyle
    LIGHT_WALK              = "lightWalk"
    INCREASE_EXERCISE       = "increaseExercise"
    LIMIT_ALCOHOL           = "limitAlcohol"
    ALCOHOL_RAISES_BP       = "alcoholRaisesBp"

    KEEP_ROUTINE            = "keepRoutine"


def escalate(current: Status, proposed: Status) -> Status:
    """Monotonic max: status may rise, never fall."""
    return proposed if proposed > current else current


@dataclass(frozen=True)
class RuleOutcome:
    """What one rule group proposes: a status and the reasons behind it."""
    status: Status
    reasons: Tuple[ReasonCode, ...] = ()


@dataclass(frozen=True)
class EvaluationResult:
    """Output of the Threshold Evaluator."""
    status: Status = Status.GREEN
    reasons: Tuple[ReasonCode, ...] = ()

    def reason_codes(self) -> List[str]:
        return [r.value for r in self.reasons]

    def to_dict(self) -> dict:
        return {"status": self.status.value, "reasons": self.reason_codes()}


@dataclass(frozen=True)
class Assessment:
    """
    Everything the engine derives for one record.

    ``actions`` is a set; ``to_dict`` sorts it so serialised output is
    deterministic.
    """
    status: Status
    reasons: Tuple[ReasonCode, ...]
    risk_score: int
    actions: FrozenSet[ActionCode] = field(default_factory=frozenset)

    def reason_codes(self) -> List[str]:
        return [r.value for r in self.reasons]

    def action_codes(self) -> List[str]:
        return sorted(a.value for a in self.actions)

    def to_dict(self) -> Dict[str, object]:
        return {
            "status": self.status.value,
            "statusReasons": self.reason_codes(),
            "riskScore": self.risk_score,
            "actions": self.action_codes(),
        }
