from __future__ import annotations

import datetime as dt
from dataclasses import dataclass
from typing import Iterator, List, Optional, Sequence


Number = int | float


@dataclass(frozen=True)
class ExercisePoint:
    day: dt.date
    weight: Number
    reps: Number
    volume: Number


@dataclass(frozen=True)
class WorkoutVolume:
    day: dt.date
    volume: Number
    sets: int
    duration: Number


@dataclass(frozen=True)
class PersonalRecord:
    exercise: str
    day: dt.date
    weight: Number
    reps: Number


def _num(value) -> Number:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0
    return value


def _exercises(value: dict | None) -> list[dict]:
    exercises = (value or {}).get("exercises") or []
    return [ex for ex in exercises if isinstance(ex, dict)]


def _sets(exercise: dict) -> list[dict]:
    return [s for s in exercise.get("sets") or [] if isinstance(s, dict)]


def set_volume(s: dict) -> Number:
    return _num(s.get("reps")) * _num(s.get("weight"))


def exercise_volume(exercise: dict) -> Number:
    return sum((set_volume(s) for s in _sets(exercise)), 0)


def workout_volume(value: dict | None) -> Number:
    return sum((exercise_volume(ex) for ex in _exercises(value)), 0)


def _best_set(sets: list[dict]) -> Optional[dict]:
    best = None
    for s in sets:
        if best is None or set_volume(s) > set_volume(best):
            best = s
    return best


def _chronological(entries: Sequence) -> list:
    return sorted(entries, key=lambda e: e.day)


class ExerciseSeries:
    """Progress of one exercise: the best set (by volume) of each workout day.

    Points are derived on iteration from the underlying entries, ascending by
    date, so the series can be walked more than once.
    """

    def __init__(self, name: str, entries: Sequence):
        self.name = name
        self._entries = _chronological(entries)

    def __iter__(self) -> Iterator[ExercisePoint]:
        for entry in self._entries:
            sets: list[dict] = []
            for ex in _exercises(entry.value):
                if ex.get("name") == self.name:
                    sets.extend(_sets(ex))
            best = _best_set(sets)
            if best is None:
                continue
            yield ExercisePoint(
                day=entry.day,
                weight=_num(best.get("weight")),
                reps=_num(best.get("reps")),
                volume=set_volume(best),
            )

    def last_two(self) -> tuple[Optional[ExercisePoint], Optional[ExercisePoint]]:
        previous = latest = None
        for point in self:
            previous, latest = latest, point
        return previous, latest

    def recent_pr(self) -> Optional[PersonalRecord]:
        previous, latest = self.last_two()
        if latest is None:
            return None
        if previous is None or latest.weight > previous.weight:
            return PersonalRecord(self.name, latest.day, latest.weight, latest.reps)
        return None


def exercise_names(entries: Sequence) -> list[str]:
    names: list[str] = []
    for entry in _chronological(entries):
        for ex in _exercises(entry.value):
            name = ex.get("name")
            if isinstance(name, str) and name and name not in names:
                names.append(name)
    return names


@dataclass
class WorkoutSummary:
    total_workouts: int
    total_volume: Number
    avg_volume: float
    total_duration: Number
    best_workout: Optional[WorkoutVolume]
    volume_series: List[WorkoutVolume]
    per_exercise_series: dict[str, ExerciseSeries]
    recent_prs: List[PersonalRecord]


def _workout_row(entry) -> WorkoutVolume:
    value = entry.value or {}
    return WorkoutVolume(
        day=entry.day,
        volume=workout_volume(value),
        sets=sum(len(_sets(ex)) for ex in _exercises(value)),
        duration=_num(value.get("duration")),
    )


def analyze(entries: Sequence) -> WorkoutSummary:
    """Volume totals, per-exercise progress and PR candidates for gym entries.

    ``entries`` need ``day`` and ``value`` attributes. The best workout is the
    first one with the highest volume in the order given.
    """
    rows = [_workout_row(e) for e in entries]

    best: Optional[WorkoutVolume] = None
    for row in rows:
        if best is None or row.volume > best.volume:
            best = row

    total_volume = sum((r.volume for r in rows), 0)
    series = {name: ExerciseSeries(name, entries) for name in exercise_names(entries)}
    prs = [pr for pr in (s.recent_pr() for s in series.values()) if pr is not None]

    return WorkoutSummary(
        total_workouts=len(rows),
        total_volume=total_volume,
        avg_volume=total_volume / len(rows) if rows else 0.0,
        total_duration=sum((r.duration for r in rows), 0),
        best_workout=best,
        volume_series=sorted(rows, key=lambda r: r.day),
        per_exercise_series=series,
        recent_prs=prs,
    )
