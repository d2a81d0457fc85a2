"""
Health Rules Engine

Runs the three components for one record in caller order:
Evaluate -> Score -> Recommend (given the evaluation).

Usage:
    from health_rules.core.rules import HealthRulesEngine

    engine = HealthRulesEngine()
    assessment = engine.assess(record, conditions={Condition.HYPERTENSION})
    saved = engine.apply(record, conditions={Condition.HYPERTENSION})
    print(saved.status, saved.status_reasons, saved.risk_score, saved.actions)

The default threshold profile is injected once at construction (from
settings unless given) and used whenever a call supplies no thresholds.
"""
from __future__ import annotations

from typing import Dict, Iterable, List, Optional

from health_rules.config import settings
from health_rules.models.entry import MeasurementRecord, Status
from health_rules.models.profile import Condition, PatientProfile, ThresholdProfile, parse_conditions
from health_rules.utils import get_logger
from .actions import recommend
from .base import Assessment
from .evaluator import STATUS_RULES, evaluate
from .scoring import score

logger = get_logger(__name__)


class HealthRulesEngine:
    """
    Classifies measurement records.

    Stateless apart from the injected default profile, so one instance is
    safe to share across threads and concurrent requests.
    """

    def __init__(self, default_thresholds: Optional[ThresholdProfile] = None):
        if default_thresholds is None:
            default_thresholds = settings.default_thresholds
        self.default_thresholds = default_thresholds

    def assess(
        self,
        record: MeasurementRecord,
        conditions: Optional[Iterable[Condition]] = None,
        thresholds: Optional[ThresholdProfile] = None,
    ) -> Assessment:
        """
        Evaluate, score and recommend for a single record.

        Args:
            record: The measurement record (already validated).
            conditions: The patient's chronic conditions (strings accepted).
            thresholds: The patient's thresholds; the engine default if None.

        Returns:
            Assessment with status, ordered reasons, risk score and actions.
        """
        condition_set = parse_conditions(conditions)
        thresholds = thresholds if thresholds is not None else self.default_thresholds

        evaluation = evaluate(record, thresholds, condition_set)
        risk_score = score(record, thresholds, condition_set)
        actions = recommend(record, evaluation, condition_set, thresholds)

        assessment = Assessment(
            status=evaluation.status,
            reasons=evaluation.reasons,
            risk_score=risk_score,
            actions=actions,
        )
        logger.info(
            f"HealthRulesEngine: {assessment.status.value} "
            f"[{', '.join(assessment.reason_codes()) or 'no reasons'}] "
            f"score={risk_score} actions={len(actions)}"
        )
        return assessment

    def assess_for_patient(
        self,
        record: MeasurementRecord,
        profile: PatientProfile,
    ) -> Assessment:
        """Assess using a stored patient profile, falling back to the default thresholds."""
        return self.assess(
            record,
            conditions=profile.condition_set,
            thresholds=profile.effective_thresholds(self.default_thresholds),
        )

    def apply(
        self,
        record: MeasurementRecord,
        conditions: Optional[Iterable[Condition]] = None,
        thresholds: Optional[ThresholdProfile] = None,
    ) -> MeasurementRecord:
        """Return a copy of ``record`` with the four outputs attached."""
        assessment = self.assess(record, conditions, thresholds)
        return record.with_assessment(
            status=assessment.status,
            reasons=assessment.reason_codes(),
            risk_score=assessment.risk_score,
            actions=assessment.action_codes(),
        )

    @staticmethod
    def status_rule_names() -> List[str]:
        """Status rule groups in evaluation order."""
        return [rule.__name__ for rule in STATUS_RULES]

    @staticmethod
    def summarise(assessment: Assessment) -> Dict:
        """
        Build a compact summary dict suitable for JSON API responses.

        Example output:
        {
            "status": "red",
            "urgent": true,
            "reason_count": 1,
            "statusReasons": ["bp.crisis"],
            "riskScore": 72,
            "actions": ["bpCrisis", "seekImmediateCare", ...]
        }
        """
        summary = assessment.to_dict()
        return {
            "status": summary["status"],
            "urgent": assessment.status == Status.RED,
            "reason_count": len(assessment.reasons),
            "statusReasons": summary["statusReasons"],
            "riskScore": summary["riskScore"],
            "actions": summary["actions"],
        }
