"""
Record Intake

Turns a flat record-entry form submission into a MeasurementRecord.
A form always carries every field (sliders default to the neutral level 3,
numeric inputs to 0 or empty), so this layer decides which measurements
were actually entered before handing the data to model validation.

Form shape:
    {
        "date": "2025-01-01", "time": "08:30",
        "bp": {"sys": 150, "dia": 95},
        "glucose": {"mmol": 6.2, "context": "fasting"},
        "meds": ["amlodipine"], "medsTaken": true,
        "food": {"salt": 4, "carb": 3, "notes": ""},
        "exercise": {"minutes": 20},
        "alcohol": 0, "cigarettes": 0,
        "herbs": [], "notes": ""
    }
"""
from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional

from health_rules.utils import get_logger
from health_rules.utils.exceptions import InvalidInputError
from .entry import MeasurementRecord, parse_record

logger = get_logger(__name__)

NEUTRAL_DIET_LEVEL = 3

_TRUE_FLAGS = ("true", "1", "yes", "on")
_FALSE_FLAGS = ("false", "0", "no", "off", "")


def _number(value: Any, field: str) -> Optional[float]:
    """Form inputs may arrive as numbers or numeric strings; blank means absent."""
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        raise InvalidInputError(f"Expected a number, got {value!r}", field=field)
    try:
        return float(value)
    except (TypeError, ValueError) as exc:
        raise InvalidInputError(f"Expected a number, got {value!r}", field=field) from exc


def _positive(value: Any, field: str) -> Optional[float]:
    number = _number(value, field)
    return number if number is not None and number > 0 else None


def _flag(value: Any, field: str) -> bool:
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUE_FLAGS:
        return True
    if text in _FALSE_FLAGS:
        return False
    raise InvalidInputError(f"Expected true or false, got {value!r}", field=field)


def _diet_level(value: Any, field: str) -> float:
    number = _number(value, field)
    return NEUTRAL_DIET_LEVEL if number is None else number


def _timestamp(date: Optional[str], time: Optional[str], now: datetime) -> datetime:
    date = date or now.strftime("%Y-%m-%d")
    time = time or now.strftime("%H:%M")
    try:
        return datetime.strptime(f"{date}T{time}", "%Y-%m-%dT%H:%M")
    except ValueError as exc:
        raise InvalidInputError(
            f"Invalid date/time: {date!r} {time!r}",
            field="timestamp",
        ) from exc


def _entered(record: MeasurementRecord) -> bool:
    # Diet sliders alone do not count as an entry
    if record.diet is not None and not record.diet.notes:
        record = record.model_copy(update={"diet": None})
    return record.has_measurements() or bool(record.notes)


def build_record_from_form(
    form: Dict[str, Any],
    now: Optional[datetime] = None,
) -> MeasurementRecord:
    """
    Build a record from a form submission.

    Numeric fields accept numbers or numeric strings; a blank or null diet
    slider reads as the neutral level.

    Raises:
        InvalidInputError: no health metric was entered, blood pressure was
            only half filled in, a value is not a number, or a value fails
            model validation.
    """
    now = now or datetime.now()
    data: Dict[str, Any] = {"timestamp": _timestamp(form.get("date"), form.get("time"), now)}

    bp = form.get("bp") or {}
    sys_value = _number(bp.get("sys"), "bloodPressure.systolic")
    dia_value = _number(bp.get("dia"), "bloodPressure.diastolic")
    if sys_value is not None and dia_value is not None:
        data["bloodPressure"] = {"systolic": sys_value, "diastolic": dia_value}
    elif sys_value is not None or dia_value is not None:
        raise InvalidInputError(
            "Blood pressure needs both systolic and diastolic values",
            field="bloodPressure",
        )

    glucose = form.get("glucose") or {}
    mmol = _number(glucose.get("mmol"), "glucose.value")
    if mmol is not None:
        data["glucose"] = {"value": mmol, "context": glucose.get("context") or "random"}

    med_names = list(form.get("meds") or [])
    if med_names:
        data["medication"] = {"taken": _flag(form.get("medsTaken"), "medsTaken"), "names": med_names}

    food = form.get("food") or {}
    salt = _diet_level(food.get("salt"), "diet.saltLevel")
    carb = _diet_level(food.get("carb"), "diet.carbLevel")
    food_notes = food.get("notes") or ""
    if food_notes or salt != NEUTRAL_DIET_LEVEL or carb != NEUTRAL_DIET_LEVEL:
        data["diet"] = {"saltLevel": salt, "carbLevel": carb, "notes": food_notes}

    minutes = _positive((form.get("exercise") or {}).get("minutes"), "exercise.minutes")
    if minutes is not None:
        data["exercise"] = {"minutes": minutes}

    alcohol = _positive(form.get("alcohol"), "alcoholUnits")
    if alcohol is not None:
        data["alcoholUnits"] = alcohol
    cigarettes = _positive(form.get("cigarettes"), "cigaretteCount")
    if cigarettes is not None:
        data["cigaretteCount"] = cigarettes

    herbs = list(form.get("herbs") or [])
    if herbs:
        data["herbs"] = herbs
    if form.get("notes"):
        data["notes"] = form["notes"]

    record = parse_record(data)
    if not _entered(record):
        raise InvalidInputError("Please enter at least one health metric", field="form")

    logger.debug(f"Intake: built record for {record.timestamp.isoformat()}")
    return record


def entry_id_for(timestamp: datetime) -> str:
    """Stable entry identifier: epoch milliseconds of the measurement time."""
    return str(int(timestamp.timestamp() * 1000))
