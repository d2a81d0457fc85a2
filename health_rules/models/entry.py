"""
Measurement Record Models

One clinical observation snapshot as captured by a patient or provider.
Every clinical field is optional and independently absent-or-present;
``None`` always means "not measured", never zero.

Wire names are camelCase (``bloodPressure``, ``saltLevel``); Python
attributes are snake_case. Both spellings are accepted on input.
"""
from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel

from health_rules.utils.exceptions import InvalidInputError


class Status(str, Enum):
    """
    Overall severity of a record.

    Totally ordered green < yellow < red. Comparison operators use the
    clinical order, not the string order of the values.
    """
    GREEN  = "green"
    YELLOW = "yellow"
    RED    = "red"

    @property
    def rank(self) -> int:
        return _STATUS_RANK[self]

    def __lt__(self, other):
        if not isinstance(other, Status):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other):
        if not isinstance(other, Status):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other):
        if not isinstance(other, Status):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other):
        if not isinstance(other, Status):
            return NotImplemented
        return self.rank >= other.rank


_STATUS_RANK = {Status.GREEN: 0, Status.YELLOW: 1, Status.RED: 2}


class GlucoseContext(str, Enum):
    FASTING = "fasting"
    RANDOM  = "random"


class _WireModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="forbid",
    )


class BloodPressure(_WireModel):
    systolic: int = Field(..., gt=0, le=400, description="Systolic pressure (mmHg)")
    diastolic: int = Field(..., gt=0, le=300, description="Diastolic pressure (mmHg)")


class Glucose(_WireModel):
    value: float = Field(..., ge=0, le=100, description="Blood glucose (mmol/L)")
    context: GlucoseContext = GlucoseContext.RANDOM


class Medication(_WireModel):
    taken: bool
    names: List[str] = Field(default_factory=list)


class Diet(_WireModel):
    salt_level: int = Field(..., ge=1, le=5, description="Self-reported salt intake, 1 (low) to 5 (high)")
    carb_level: int = Field(..., ge=1, le=5, description="Self-reported carb intake, 1 (low) to 5 (high)")
    notes: str = ""


class Exercise(_WireModel):
    minutes: int = Field(..., ge=0, description="Minutes of exercise")


class MeasurementRecord(_WireModel):
    """
    A single health measurement record.

    The four output fields (``status``, ``status_reasons``, ``risk_score``,
    ``actions``) are only ever populated by the engine, through
    ``with_assessment``. Unknown keys (store metadata such as author ids)
    are ignored.
    """
    model_config = ConfigDict(extra="ignore")

    timestamp: datetime

    # ── Clinical inputs ───────────────────────────────────────────────────
    blood_pressure: Optional[BloodPressure] = None
    glucose: Optional[Glucose] = None
    medication: Optional[Medication] = None
    diet: Optional[Diet] = None
    exercise: Optional[Exercise] = None
    alcohol_units: Optional[float] = Field(default=None, ge=0)
    cigarette_count: Optional[float] = Field(default=None, ge=0)
    herbs: Optional[List[str]] = None
    notes: Optional[str] = None

    # ── Engine outputs ────────────────────────────────────────────────────
    status: Optional[Status] = None
    status_reasons: List[str] = Field(default_factory=list)
    risk_score: Optional[int] = Field(default=None, ge=0)
    actions: List[str] = Field(default_factory=list)

    def has_measurements(self) -> bool:
        """True when at least one clinical field is present."""
        return any(
            value is not None
            for value in (
                self.blood_pressure,
                self.glucose,
                self.medication,
                self.diet,
                self.exercise,
                self.alcohol_units,
                self.cigarette_count,
                self.herbs,
            )
        )

    def with_assessment(
        self,
        status: Status,
        reasons: List[str],
        risk_score: int,
        actions: List[str],
    ) -> "MeasurementRecord":
        """Return a copy of this record with the engine outputs attached."""
        return self.model_copy(update={
            "status": status,
            "status_reasons": list(reasons),
            "risk_score": risk_score,
            "actions": list(actions),
        })

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


def parse_record(data: Dict[str, Any]) -> MeasurementRecord:
    """Build a MeasurementRecord from JSON-like data, rejecting malformed input."""
    try:
        return MeasurementRecord.model_validate(data)
    except ValidationError as exc:
        raise InvalidInputError.from_validation_error(exc, "MeasurementRecord") from exc
