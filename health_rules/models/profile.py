"""
Threshold Profile and Patient Profile Models

A threshold profile holds the eight patient-specific cutoffs the rule
engine reads. Profiles are created by a care provider or the patient and
stored externally; the engine treats them as read-only.
"""
from __future__ import annotations

from enum import Enum
from typing import Any, Dict, FrozenSet, Iterable, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator
from pydantic.alias_generators import to_camel

from health_rules.utils.exceptions import InvalidInputError


class Condition(str, Enum):
    """Chronic conditions that gate condition-specific reasons and actions."""
    HYPERTENSION = "hypertension"
    DIABETES     = "diabetes"


class ThresholdProfile(BaseModel):
    """
    Patient-specific clinical cutoffs.

    Field defaults are the documented default profile used for patients
    without personalised thresholds:

        bpSysHigh=140  bpDiaHigh=90  bpSysVeryHigh=180  bpDiaVeryHigh=120
        glucoseFastingHigh=7  glucoseRandomHigh=10
        glucoseVeryHigh=13  glucoseLow=3.9
    """
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="forbid",
    )

    # Blood pressure (mmHg)
    bp_sys_high: float = Field(default=140, gt=0)
    bp_dia_high: float = Field(default=90, gt=0)
    bp_sys_very_high: float = Field(default=180, gt=0)
    bp_dia_very_high: float = Field(default=120, gt=0)

    # Glucose (mmol/L)
    glucose_fasting_high: float = Field(default=7, gt=0)
    glucose_random_high: float = Field(default=10, gt=0)
    glucose_very_high: float = Field(default=13, gt=0)
    glucose_low: float = Field(default=3.9, gt=0)

    @model_validator(mode="after")
    def _check_ordering(self) -> "ThresholdProfile":
        if self.bp_sys_high > self.bp_sys_very_high:
            raise ValueError("bpSysHigh must not exceed bpSysVeryHigh")
        if self.bp_dia_high > self.bp_dia_very_high:
            raise ValueError("bpDiaHigh must not exceed bpDiaVeryHigh")
        if self.glucose_low >= self.glucose_fasting_high:
            raise ValueError("glucoseLow must be below glucoseFastingHigh")
        if self.glucose_fasting_high > self.glucose_very_high:
            raise ValueError("glucoseFastingHigh must not exceed glucoseVeryHigh")
        if self.glucose_random_high > self.glucose_very_high:
            raise ValueError("glucoseRandomHigh must not exceed glucoseVeryHigh")
        return self

    def to_dict(self) -> Dict[str, float]:
        return self.model_dump(by_alias=True)


DEFAULT_THRESHOLDS = ThresholdProfile()


class PatientProfile(BaseModel):
    """The slice of a stored patient profile that the rule engine reads."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="ignore",
    )

    patient_id: str = Field(..., min_length=1)
    conditions: List[Condition] = Field(default_factory=list)
    thresholds: Optional[ThresholdProfile] = None

    @property
    def condition_set(self) -> FrozenSet[Condition]:
        return frozenset(self.conditions)

    def effective_thresholds(
        self, default: ThresholdProfile = DEFAULT_THRESHOLDS
    ) -> ThresholdProfile:
        """The patient's own thresholds, or ``default`` when none are stored."""
        return self.thresholds if self.thresholds is not None else default


def parse_conditions(values: Optional[Iterable[Any]]) -> FrozenSet[Condition]:
    """Normalise strings or Condition members into a condition set."""
    if values is None:
        return frozenset()
    conditions = set()
    for value in values:
        try:
            conditions.add(Condition(value))
        except ValueError as exc:
            raise InvalidInputError(
                f"Unknown condition: {value!r}",
                field="conditions",
                details={"allowed": [c.value for c in Condition]},
            ) from exc
    return frozenset(conditions)


def parse_thresholds(data: Optional[Dict[str, Any]]) -> ThresholdProfile:
    """Build a ThresholdProfile; ``None`` yields the default profile."""
    if data is None:
        return DEFAULT_THRESHOLDS
    try:
        return ThresholdProfile.model_validate(data)
    except ValidationError as exc:
        raise InvalidInputError.from_validation_error(exc, "ThresholdProfile") from exc


def parse_profile(data: Dict[str, Any]) -> PatientProfile:
    try:
        return PatientProfile.model_validate(data)
    except ValidationError as exc:
        raise InvalidInputError.from_validation_error(exc, "PatientProfile") from exc
