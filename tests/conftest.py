"""
Pytest Configuration and Fixtures

Shared fixtures for health rules tests.
"""
import sys
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Dict

import pytest

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from health_rules.models import (
    Condition,
    DEFAULT_THRESHOLDS,
    MeasurementRecord,
    ThresholdProfile,
)
from health_rules.core.rules import HealthRulesEngine


@pytest.fixture
def thresholds() -> ThresholdProfile:
    """The documented default threshold profile."""
    return DEFAULT_THRESHOLDS


@pytest.fixture
def make_record() -> Callable[..., MeasurementRecord]:
    """
    Factory for records. Keyword arguments use the wire (camelCase) names,
    e.g. make_record(bloodPressure={"systolic": 150, "diastolic": 85}).
    """
    def _make(**fields: Any) -> MeasurementRecord:
        data: Dict[str, Any] = {"timestamp": datetime(2025, 1, 1, 8, 30)}
        data.update(fields)
        return MeasurementRecord.model_validate(data)
    return _make


@pytest.fixture
def no_conditions() -> frozenset:
    return frozenset()


@pytest.fixture
def hypertensive() -> frozenset:
    return frozenset({Condition.HYPERTENSION})


@pytest.fixture
def diabetic() -> frozenset:
    return frozenset({Condition.DIABETES})


@pytest.fixture
def both_conditions() -> frozenset:
    return frozenset({Condition.HYPERTENSION, Condition.DIABETES})


@pytest.fixture
def engine() -> HealthRulesEngine:
    return HealthRulesEngine(default_thresholds=DEFAULT_THRESHOLDS)
