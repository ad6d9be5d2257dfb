"""habitlog/services/achievements.py

Achievement rules and points.

Each achievement carries a small tagged ``criteria`` dict:
- {"type": "first_entry"}                  any entry logged
- {"type": "streak", "days": N}            some habit's current or best streak >= N
- {"type": "total_days", "days": N}        N distinct days with a completed entry
- {"type": "early_completion", "count": N} N completed entries logged before 08:00 local

Earning is monotonic: rules are only checked for achievements not yet earned.
"""

from __future__ import annotations

import datetime as dt
import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Union

POINTS_PER_ACHIEVEMENT = 50
POINTS_PER_LEVEL = 100
EARLY_COMPLETION_HOUR = 8

logger = logging.getLogger("habitlog.achievements")


@dataclass(frozen=True)
class FirstEntry:
    def is_met(self, history: "ActionHistory") -> bool:
        return len(history.entries) >= 1


@dataclass(frozen=True)
class StreakDays:
    days: int

    def is_met(self, history: "ActionHistory") -> bool:
        return any(max(s.current, s.best) >= self.days for s in history.streaks)


@dataclass(frozen=True)
class TotalDays:
    days: int

    def is_met(self, history: "ActionHistory") -> bool:
        return len(history.completed_days()) >= self.days


@dataclass(frozen=True)
class EarlyCompletion:
    count: int

    def is_met(self, history: "ActionHistory") -> bool:
        return history.early_completions() >= self.count


@dataclass(frozen=True)
class Unsatisfiable:
    raw: dict

    def is_met(self, history: "ActionHistory") -> bool:
        return False


Criteria = Union[FirstEntry, StreakDays, TotalDays, EarlyCompletion, Unsatisfiable]


def _positive_int(raw: dict, key: str) -> int:
    value = raw.get(key)
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise ValueError(f"criteria '{raw.get('type')}' needs a positive integer '{key}'")
    return value


def parse_criteria(raw: dict) -> Criteria:
    kind = (raw or {}).get("type")
    if kind == "first_entry":
        return FirstEntry()
    if kind == "streak":
        return StreakDays(_positive_int(raw, "days"))
    if kind == "total_days":
        return TotalDays(_positive_int(raw, "days"))
    if kind == "early_completion":
        return EarlyCompletion(_positive_int(raw, "count"))
    logger.warning("Unknown achievement criteria type: %r", kind)
    return Unsatisfiable(dict(raw or {}))


@dataclass(frozen=True)
class EntryFact:
    habit_id: int
    day: dt.date
    completed: bool
    logged_at: Optional[dt.datetime] = None  # local time


@dataclass(frozen=True)
class StreakFact:
    habit_id: int
    current: int
    best: int


@dataclass
class ActionHistory:
    entries: List[EntryFact] = field(default_factory=list)
    streaks: List[StreakFact] = field(default_factory=list)

    def completed_days(self) -> set[dt.date]:
        return {e.day for e in self.entries if e.completed}

    def early_completions(self) -> int:
        return sum(
            1
            for e in self.entries
            if e.completed and e.logged_at is not None and e.logged_at.hour < EARLY_COMPLETION_HOUR
        )


def evaluate(achievements: Iterable, history: ActionHistory, earned_ids: Iterable[int] = ()) -> list:
    """Return the achievements newly satisfied by ``history``.

    ``achievements`` are objects with ``id`` and ``criteria`` attributes; any
    whose id is in ``earned_ids`` is skipped.
    """
    earned = set(earned_ids)
    newly = []
    for achievement in achievements:
        if achievement.id in earned:
            continue
        try:
            criteria = parse_criteria(achievement.criteria)
        except ValueError as exc:
            logger.warning("Skipping achievement %s: %s", achievement.id, exc)
            continue
        if criteria.is_met(history):
            newly.append(achievement)
    return newly


@dataclass(frozen=True)
class UserStats:
    points: int
    level: int


def compute_stats(earned_count: int) -> UserStats:
    points = earned_count * POINTS_PER_ACHIEVEMENT
    return UserStats(points=points, level=points // POINTS_PER_LEVEL + 1)


DEFAULT_ACHIEVEMENTS = [
    {
        "key": "first_step",
        "title": "First Step",
        "description": "Complete your first habit entry",
        "icon": "🎯",
        "criteria": {"type": "first_entry"},
    },
    {
        "key": "week_warrior",
        "title": "Week Warrior",
        "description": "Maintain a 7-day streak",
        "icon": "🔥",
        "criteria": {"type": "streak", "days": 7},
    },
    {
        "key": "habit_master",
        "title": "Habit Master",
        "description": "Complete 30 days of any habit",
        "icon": "🏆",
        "criteria": {"type": "total_days", "days": 30},
    },
    {
        "key": "early_bird",
        "title": "Early Bird",
        "description": "Complete 5 habits before 8 AM",
        "icon": "🌅",
        "criteria": {"type": "early_completion", "count": 5},
    },
]
