"""
Health Rules

Classifies a single measurement record against a patient's thresholds and
conditions: status, reason codes, risk score and recommended actions.

Usage:
    from health_rules.core.rules import HealthRulesEngine

    engine = HealthRulesEngine()
    assessment = engine.assess(record, conditions=["hypertension"])

The three components are also usable on their own:
    evaluate(record, thresholds, conditions)              -> EvaluationResult
    score(record, thresholds, conditions)                 -> int
    recommend(record, evaluation, conditions, thresholds) -> frozenset[ActionCode]
"""
from .base import ActionCode, Assessment, EvaluationResult, ReasonCode, RuleOutcome, escalate
from .accumulator import ActionSet, SUPPRESSES
from .bands import BpBand, GlucoseBand, classify_bp, classify_glucose
from .evaluator import evaluate, STATUS_RULES
from .scoring import score, SCORE_CONTRIBUTIONS
from .actions import recommend, build_actions
from .engine import HealthRulesEngine

__all__ = [
    "HealthRulesEngine",
    "Assessment",
    "EvaluationResult",
    "RuleOutcome",
    "ReasonCode",
    "ActionCode",
    "ActionSet",
    "SUPPRESSES",
    "BpBand",
    "GlucoseBand",
    "classify_bp",
    "classify_glucose",
    "escalate",
    "evaluate",
    "score",
    "recommend",
    "build_actions",
    "STATUS_RULES",
    "SCORE_CONTRIBUTIONS",
]
