"""
Domain Models

Pydantic models for measurement records, threshold profiles and patient
profiles, plus the boundary parsers that reject malformed input.
"""
from .entry import (
    Status,
    GlucoseContext,
    BloodPressure,
    Glucose,
    Medication,
    Diet,
    Exercise,
    MeasurementRecord,
    parse_record,
)
from .profile import (
    Condition,
    ThresholdProfile,
    DEFAULT_THRESHOLDS,
    PatientProfile,
    parse_conditions,
    parse_thresholds,
    parse_profile,
)
from .intake import build_record_from_form, entry_id_for

__all__ = [
    "Status",
    "GlucoseContext",
    "BloodPressure",
    "Glucose",
    "Medication",
    "Diet",
    "Exercise",
    "MeasurementRecord",
    "parse_record",
    "Condition",
    "ThresholdProfile",
    "DEFAULT_THRESHOLDS",
    "PatientProfile",
    "parse_conditions",
    "parse_thresholds",
    "parse_profile",
    "build_record_from_form",
    "entry_id_for",
]
