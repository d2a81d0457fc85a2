"""
Shared Threshold Reads

Classifies blood pressure and glucose against a patient's threshold
profile. The Evaluator, Scorer and Recommender each call these helpers on
their own, so the three components agree on every boundary without one
depending on another's output.

All comparisons are inclusive: a value equal to a cutoff falls in the more
severe band.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Optional

from health_rules.models.entry import BloodPressure, Glucose, GlucoseContext
from health_rules.models.profile import ThresholdProfile

# ── Fixed clinical constants (not patient-configurable) ─────────────────────

ELEVATED_SYSTOLIC        = 130   # AHA "elevated / stage 1" boundary
ELEVATED_DIASTOLIC       = 80
CRITICAL_GLUCOSE_FLOOR   = 3.0   # mmol/L, severe hypoglycaemia
HIGH_DIET_LEVEL          = 4     # salt / carb level counted as "high"
MODERATE_DIET_LEVEL      = 3
ALCOHOL_UNITS_LIMIT      = 2
EXERCISE_TARGET_MINUTES  = 30
EXERCISE_MINIMUM_MINUTES = 15


class BpBand(IntEnum):
    """Blood pressure bands, ordered by severity. Absent readings are NORMAL."""
    NORMAL    = 0
    ELEVATED  = 1
    HIGH      = 2
    VERY_HIGH = 3   # one axis at or above its very-high cutoff
    CRISIS    = 4   # both axes at or above their very-high cutoffs


class GlucoseBand(str, Enum):
    NORMAL       = "normal"
    LOW          = "low"
    CRITICAL_LOW = "critical_low"
    HIGH         = "high"
    VERY_HIGH    = "very_high"


@dataclass(frozen=True)
class BpReading:
    """Per-axis comparison of one blood pressure reading."""
    sys_very_high: bool
    dia_very_high: bool
    sys_high: bool
    dia_high: bool
    elevated: bool

    @property
    def band(self) -> BpBand:
        if self.sys_very_high and self.dia_very_high:
            return BpBand.CRISIS
        if self.sys_very_high or self.dia_very_high:
            return BpBand.VERY_HIGH
        if self.sys_high or self.dia_high:
            return BpBand.HIGH
        if self.elevated:
            return BpBand.ELEVATED
        return BpBand.NORMAL


def read_bp(bp: Optional[BloodPressure], thresholds: ThresholdProfile) -> Optional[BpReading]:
    if bp is None:
        return None
    return BpReading(
        sys_very_high=bp.systolic >= thresholds.bp_sys_very_high,
        dia_very_high=bp.diastolic >= thresholds.bp_dia_very_high,
        sys_high=bp.systolic >= thresholds.bp_sys_high,
        dia_high=bp.diastolic >= thresholds.bp_dia_high,
        elevated=bp.systolic >= ELEVATED_SYSTOLIC or bp.diastolic >= ELEVATED_DIASTOLIC,
    )


def classify_bp(bp: Optional[BloodPressure], thresholds: ThresholdProfile) -> BpBand:
    reading = read_bp(bp, thresholds)
    return reading.band if reading is not None else BpBand.NORMAL


def context_high_threshold(glucose: Glucose, thresholds: ThresholdProfile) -> float:
    """The "high" cutoff that applies to this reading's measurement context."""
    if glucose.context == GlucoseContext.FASTING:
        return thresholds.glucose_fasting_high
    return thresholds.glucose_random_high


def classify_glucose(glucose: Optional[Glucose], thresholds: ThresholdProfile) -> GlucoseBand:
    """
    Very-high, high and low are mutually exclusive and checked in that
    order. CRITICAL_LOW is a sub-band of LOW: at or below the patient's low
    cutoff and also under the fixed 3.0 mmol/L floor.
    """
    if glucose is None:
        return GlucoseBand.NORMAL
    value = glucose.value
    if value >= thresholds.glucose_very_high:
        return GlucoseBand.VERY_HIGH
    if value >= context_high_threshold(glucose, thresholds):
        return GlucoseBand.HIGH
    if value <= thresholds.glucose_low:
        if value < CRITICAL_GLUCOSE_FLOOR:
            return GlucoseBand.CRITICAL_LOW
        return GlucoseBand.LOW
    return GlucoseBand.NORMAL


def bp_elevated(band: BpBand) -> bool:
    return band >= BpBand.ELEVATED


def glucose_elevated(band: GlucoseBand) -> bool:
    return band in (GlucoseBand.HIGH, GlucoseBand.VERY_HIGH)


def glucose_over_fasting_high(glucose: Optional[Glucose], thresholds: ThresholdProfile) -> bool:
    """At or above the fasting cutoff regardless of context (diet cross-check)."""
    return glucose is not None and glucose.value >= thresholds.glucose_fasting_high
