# -*- coding: utf-8 -*-
"""FatSecret: convert string-typed API payloads into typed records.

FatSecret encodes every number as a JSON string. Identifier and date fields are
mandatory; nutrient fields may be blank and default to zero. Keys we do not know
yet are kept on the record's ``extra`` and reported as warnings.
"""

from __future__ import annotations

import logging
import math
from typing import Any, Dict, List, Optional, Sequence

from ..dates import days_to_date
from ..errors import ResponseParseError
from .models import DayAggregate, FoodEntry, MonthSummary

logger = logging.getLogger(__name__)

DAY_NUMERIC_FIELDS = ("calories", "carbohydrate", "fat", "protein")
DAY_FIELDS = frozenset({"date_int", *DAY_NUMERIC_FIELDS})

MONTH_FIELDS = frozenset({"day", "from_date_int", "to_date_int"})

ENTRY_ID_FIELDS = ("food_entry_id", "food_id", "serving_id", "date_int")
ENTRY_TEXT_FIELDS = ("food_entry_name", "food_entry_description", "meal")
ENTRY_NUMERIC_FIELDS = (
    "number_of_units",
    "calories",
    "carbohydrate",
    "protein",
    "fat",
    "saturated_fat",
    "polyunsaturated_fat",
    "monounsaturated_fat",
    "trans_fat",
    "cholesterol",
    "sodium",
    "potassium",
    "fiber",
    "sugar",
    "added_sugars",
    "vitamin_a",
    "vitamin_c",
    "vitamin_d",
    "calcium",
    "iron",
)
ENTRY_FIELDS = frozenset({*ENTRY_ID_FIELDS, *ENTRY_TEXT_FIELDS, *ENTRY_NUMERIC_FIELDS})


def parse_required_int(raw: Dict[str, Any], key: str, context: str) -> int:
    value = raw.get(key)
    if value is None or isinstance(value, bool):
        raise ResponseParseError(f"{context}: mandatory field {key!r} is missing")
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    s = str(value).strip()
    if not s:
        raise ResponseParseError(f"{context}: mandatory field {key!r} is empty")
    try:
        return int(s)
    except ValueError as exc:
        raise ResponseParseError(f"{context}: error when parsing int value {key}={value!r}") from exc


def parse_optional_float(raw: Dict[str, Any], key: str, context: str) -> float:
    value = raw.get(key)
    if value is None:
        return 0.0
    if isinstance(value, bool):
        raise ResponseParseError(f"{context}: unexpected boolean for {key!r}")
    if isinstance(value, (int, float)):
        result = float(value)
    else:
        s = str(value).strip()
        if not s:
            return 0.0
        try:
            result = float(s)
        except ValueError as exc:
            raise ResponseParseError(f"{context}: error when parsing float value {key}={value!r}") from exc
    if not math.isfinite(result):
        raise ResponseParseError(f"{context}: non-finite value {key}={value!r}")
    return result


def _text(raw: Dict[str, Any], key: str) -> str:
    value = raw.get(key)
    return "" if value is None else str(value)


def as_record_list(value: Any, context: str) -> List[Dict[str, Any]]:
    """FatSecret returns a bare object for one item and omits empty lists."""
    if value is None or value == "":
        return []
    if isinstance(value, dict):
        return [value]
    if isinstance(value, list):
        out: List[Dict[str, Any]] = []
        for item in value:
            if not isinstance(item, dict):
                raise ResponseParseError(f"{context}: expected an object, got {type(item).__name__}")
            out.append(item)
        return out
    raise ResponseParseError(f"{context}: expected an object or list, got {type(value).__name__}")


def _unknown_fields(
    raw: Dict[str, Any],
    known: frozenset,
    context: str,
    warnings: Optional[List[str]],
) -> Dict[str, Any]:
    extra = {k: v for k, v in raw.items() if k not in known}
    if extra:
        message = f"{context}: unrecognized fields {sorted(extra)}"
        logger.warning("%s", message)
        if warnings is not None:
            warnings.append(message)
    return extra


def parse_day_aggregate(raw: Dict[str, Any], warnings: Optional[List[str]] = None) -> DayAggregate:
    date_int = parse_required_int(raw, "date_int", "month day")
    context = f"month day {date_int}"
    values: Dict[str, Any] = {key: parse_optional_float(raw, key, context) for key in DAY_NUMERIC_FIELDS}
    return DayAggregate(
        date_int=date_int,
        date=days_to_date(date_int),
        extra=_unknown_fields(raw, DAY_FIELDS, context, warnings),
        **values,
    )


def parse_month_summary(body: Dict[str, Any], warnings: Optional[List[str]] = None) -> MonthSummary:
    month = body.get("month")
    if not isinstance(month, dict):
        raise ResponseParseError("month summary: 'month' object is missing")
    days = [parse_day_aggregate(raw, warnings) for raw in as_record_list(month.get("day"), "month day")]
    summary = MonthSummary(
        from_date_int=parse_required_int(month, "from_date_int", "month summary"),
        to_date_int=parse_required_int(month, "to_date_int", "month summary"),
        days=days,
    )
    _unknown_fields(month, MONTH_FIELDS, "month summary", warnings)
    return summary


def parse_food_entry(raw: Dict[str, Any], warnings: Optional[List[str]] = None) -> FoodEntry:
    entry_id = raw.get("food_entry_id")
    context = f"food entry {entry_id}" if entry_id not in (None, "") else "food entry"
    values: Dict[str, Any] = {key: parse_required_int(raw, key, context) for key in ENTRY_ID_FIELDS}
    values.update({key: parse_optional_float(raw, key, context) for key in ENTRY_NUMERIC_FIELDS})
    values.update({key: _text(raw, key) for key in ENTRY_TEXT_FIELDS})
    values["date"] = days_to_date(values["date_int"])
    values["extra"] = _unknown_fields(raw, ENTRY_FIELDS, context, warnings)
    return FoodEntry(**values)


def parse_food_entries(body: Dict[str, Any], warnings: Optional[List[str]] = None) -> List[FoodEntry]:
    container = body.get("food_entries")
    if container is None or container == "":
        return []
    if not isinstance(container, dict):
        raise ResponseParseError("food entries: 'food_entries' is not an object")
    raws: Sequence[Dict[str, Any]] = as_record_list(container.get("food_entry"), "food entry")
    return [parse_food_entry(raw, warnings) for raw in raws]
