from __future__ import annotations

import math
from enum import Enum
from typing import Any


class MetricKind(str, Enum):
    BOOLEAN = "boolean"
    COUNTER = "counter"
    TIMER = "timer"
    NUMERIC = "numeric"
    DISTANCE = "distance"


NON_NEGATIVE_KINDS = {MetricKind.COUNTER, MetricKind.TIMER, MetricKind.DISTANCE}


class EntryValidationError(ValueError):
    def __init__(self, errors: list[dict[str, str]]):
        self.errors = errors
        super().__init__("; ".join(f"{e['field']}: {e['message']}" for e in errors))


def _as_number(raw: Any) -> int | float | None:
    """Return ``raw`` as an int or a finite float, or None when it is not one."""
    if isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return raw
    if isinstance(raw, float):
        return raw if math.isfinite(raw) else None
    if isinstance(raw, str):
        text = raw.strip()
        try:
            return int(text)
        except ValueError:
            pass
        try:
            number = float(text)
        except ValueError:
            return None
        # "nan", "inf" and overflowing literals like "1e999"
        return number if math.isfinite(number) else None
    return None


def _check_metric(kind: MetricKind, raw: Any) -> tuple[Any, str | None]:
    if kind == MetricKind.BOOLEAN:
        if isinstance(raw, bool):
            return raw, None
        return raw, "must be true or false"

    number = _as_number(raw)
    if number is None:
        return raw, "must be a number"
    if kind == MetricKind.COUNTER:
        if isinstance(number, float):
            if not number.is_integer():
                return raw, "must be a whole number"
            number = int(number)
    if kind in NON_NEGATIVE_KINDS and number < 0:
        return raw, "must not be negative"
    return number, None


def _check_exercises(raw: Any, errors: list[dict[str, str]]) -> list[dict]:
    if not isinstance(raw, list):
        errors.append({"field": "exercises", "message": "must be a list"})
        return raw
    cleaned = []
    for i, ex in enumerate(raw):
        where = f"exercises[{i}]"
        if not isinstance(ex, dict):
            errors.append({"field": where, "message": "must be an object"})
            continue
        name = ex.get("name")
        if not isinstance(name, str) or not name.strip():
            errors.append({"field": f"{where}.name", "message": "is required"})
        sets = ex.get("sets", [])
        if not isinstance(sets, list):
            errors.append({"field": f"{where}.sets", "message": "must be a list"})
            continue
        clean_sets = []
        for j, s in enumerate(sets):
            if not isinstance(s, dict):
                errors.append({"field": f"{where}.sets[{j}]", "message": "must be an object"})
                continue
            clean = dict(s)
            for key in ("reps", "weight"):
                number = _as_number(s.get(key))
                if number is None or number < 0:
                    errors.append({"field": f"{where}.sets[{j}].{key}", "message": "must be a non-negative number"})
                else:
                    clean[key] = number
            clean_sets.append(clean)
        cleaned.append({**ex, "name": name.strip() if isinstance(name, str) else name, "sets": clean_sets})
    return cleaned


def validate_entry_value(metrics: list[dict], value: dict | None) -> dict:
    """Check an entry payload against a habit's metric definitions.

    Returns a normalized copy (numeric strings converted). Keys without a metric
    definition are passed through, except ``exercises`` which is checked for the
    set/rep/weight structure.
    """
    if value is None:
        value = {}
    if not isinstance(value, dict):
        raise EntryValidationError([{"field": "value", "message": "must be an object"}])

    cleaned = dict(value)
    errors: list[dict[str, str]] = []

    for metric in metrics or []:
        name = metric.get("name")
        try:
            kind = MetricKind(metric.get("type"))
        except ValueError:
            errors.append({"field": str(name), "message": f"unknown metric type {metric.get('type')!r}"})
            continue
        raw = value.get(name)
        if raw is None or raw == "":
            if metric.get("required"):
                errors.append({"field": name, "message": "is required"})
            continue
        if name == "exercises" and isinstance(raw, list):
            # detailed set log instead of a plain count; checked below
            continue
        normalized, problem = _check_metric(kind, raw)
        if problem:
            errors.append({"field": name, "message": problem})
        else:
            cleaned[name] = normalized

    exercises = value.get("exercises")
    counted = any(m.get("name") == "exercises" for m in metrics or [])
    if isinstance(exercises, list) or ("exercises" in value and not counted):
        cleaned["exercises"] = _check_exercises(exercises, errors)

    if errors:
        raise EntryValidationError(errors)
    return cleaned
