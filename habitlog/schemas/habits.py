from __future__ import annotations

import datetime as dt
from pydantic import BaseModel, Field, field_validator, model_validator


HABIT_TYPE_VALUES = {"running", "gym", "calisthenics", "study", "gaming", "custom"}
FREQUENCY_VALUES = {"daily", "weekly", "custom"}
METRIC_TYPE_VALUES = {"boolean", "counter", "timer", "numeric", "distance"}
WEEKDAY_VALUES = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]


def _validate_enum_str(value: str | None, allowed: set[str], field_name: str) -> str | None:
    if value is None:
        return None
    v = value.strip().lower()
    if v not in allowed:
        raise ValueError(f"{field_name} must be one of: {sorted(allowed)}")
    return v


class HabitTheme(BaseModel):
    color: str = Field(default="#6366F1", max_length=32)
    accent: str = Field(default="#F59E0B", max_length=32)
    icon: str = Field(default="✅", max_length=16)


class RecurrenceTarget(BaseModel):
    unit: str = Field(min_length=1, max_length=32)
    value: float = Field(gt=0)


class HabitRecurrence(BaseModel):
    frequency: str = "daily"
    days: list[str] | None = None
    target: RecurrenceTarget | None = None

    @field_validator("frequency")
    @classmethod
    def _frequency(cls, v: str) -> str:
        return _validate_enum_str(v, FREQUENCY_VALUES, "frequency")

    @field_validator("days")
    @classmethod
    def _days(cls, v: list[str] | None) -> list[str] | None:
        if v is None:
            return v
        by_lower = {d.lower(): d for d in WEEKDAY_VALUES}
        out = []
        for day in v:
            key = day.strip().lower()[:3]
            if key not in by_lower:
                raise ValueError(f"days must be a subset of {WEEKDAY_VALUES}")
            if by_lower[key] not in out:
                out.append(by_lower[key])
        return sorted(out, key=WEEKDAY_VALUES.index)


class MetricDefinition(BaseModel):
    name: str = Field(min_length=1, max_length=64)
    type: str
    unit: str | None = Field(default=None, max_length=32)
    required: bool = False

    @field_validator("name")
    @classmethod
    def _name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name must not be empty")
        return v

    @field_validator("type")
    @classmethod
    def _type(cls, v: str) -> str:
        return _validate_enum_str(v, METRIC_TYPE_VALUES, "type")


def _unique_metric_names(metrics: list[MetricDefinition] | None) -> None:
    if not metrics:
        return
    names = [m.name for m in metrics]
    if len(names) != len(set(names)):
        raise ValueError("metric names must be unique")


class HabitCreate(BaseModel):
    title: str = Field(min_length=1, max_length=120)
    description: str | None = Field(default=None, max_length=500)
    type: str = "custom"
    theme: HabitTheme = Field(default_factory=HabitTheme)
    recurrence: HabitRecurrence = Field(default_factory=HabitRecurrence)
    metrics: list[MetricDefinition] = Field(default_factory=list)

    @field_validator("title")
    @classmethod
    def _title(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("title must not be empty")
        return v

    @field_validator("type")
    @classmethod
    def _type(cls, v: str) -> str:
        return _validate_enum_str(v, HABIT_TYPE_VALUES, "type")

    @model_validator(mode="after")
    def _validate_metrics(self) -> "HabitCreate":
        _unique_metric_names(self.metrics)
        return self


class HabitUpdate(BaseModel):
    title: str | None = Field(default=None, min_length=1, max_length=120)
    description: str | None = Field(default=None, max_length=500)
    type: str | None = None
    theme: HabitTheme | None = None
    recurrence: HabitRecurrence | None = None
    metrics: list[MetricDefinition] | None = None
    is_active: bool | None = None

    @field_validator("title")
    @classmethod
    def _title(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("title must not be empty")
        return v

    @field_validator("type")
    @classmethod
    def _type(cls, v: str | None) -> str | None:
        return _validate_enum_str(v, HABIT_TYPE_VALUES, "type")

    @model_validator(mode="after")
    def _validate_metrics(self) -> "HabitUpdate":
        _unique_metric_names(self.metrics)
        return self


class StreakOut(BaseModel):
    current: int
    best: int
    last_completed: dt.date | None

    class Config:
        from_attributes = True


class HabitOut(BaseModel):
    id: int
    title: str
    description: str | None
    type: str
    theme: dict
    recurrence: dict
    metrics: list[dict]
    is_active: bool
    created_at: dt.datetime
    updated_at: dt.datetime

    class Config:
        from_attributes = True


class HabitWithProgressOut(HabitOut):
    streak: StreakOut
    today_progress: int


class TemplateOut(BaseModel):
    key: str
    title: str
    description: str | None
    type: str
    metrics: list[dict]
