"""
Health Rules - clinical status and risk classification for home
blood pressure / glucose monitoring records.

Usage:
    from health_rules import HealthRulesEngine, parse_record

    record = parse_record({"timestamp": "2025-01-01T08:00:00",
                           "bloodPressure": {"systolic": 150, "diastolic": 85}})
    assessment = HealthRulesEngine().assess(record, conditions=["hypertension"])
"""
from health_rules.core.rules import (
    HealthRulesEngine,
    Assessment,
    EvaluationResult,
    ReasonCode,
    ActionCode,
    evaluate,
    score,
    recommend,
)
from health_rules.models import (
    Status,
    Condition,
    MeasurementRecord,
    ThresholdProfile,
    PatientProfile,
    DEFAULT_THRESHOLDS,
    parse_record,
    parse_thresholds,
    parse_profile,
    build_record_from_form,
    entry_id_for,
)
from health_rules.utils.exceptions import HealthRulesError, InvalidInputError, ConfigurationError

__version__ = "1.0.0"

__all__ = [
    "HealthRulesEngine",
    "Assessment",
    "EvaluationResult",
    "ReasonCode",
    "ActionCode",
    "evaluate",
    "score",
    "recommend",
    "Status",
    "Condition",
    "MeasurementRecord",
    "ThresholdProfile",
    "PatientProfile",
    "DEFAULT_THRESHOLDS",
    "parse_record",
    "parse_thresholds",
    "parse_profile",
    "build_record_from_form",
    "entry_id_for",
    "HealthRulesError",
    "InvalidInputError",
    "ConfigurationError",
]
