"""habitlog/services/progress.py

Glue between the store (crud) and the pure engine modules.

- log_entry: validate, upsert the day's entry, advance the streak and award
  achievements in one transaction.
- list_habits_with_progress / achievements_view / heatmap_for_user /
  workout_analytics: read-side views for the API.
"""

from __future__ import annotations

import datetime as dt
import logging
from dataclasses import dataclass

from sqlalchemy.orm import Session

from habitlog import crud
from habitlog.models.habit import Habit, HabitEntry, Streak
from habitlog.services.achievements import (
    ActionHistory,
    EntryFact,
    StreakFact,
    compute_stats,
    evaluate,
)
from habitlog.services.clock import utc_to_local
from habitlog.services.heatmap import HeatmapWindow, build_heatmap, window_for_months
from habitlog.services.metrics import validate_entry_value
from habitlog.services.workouts import WorkoutSummary, analyze

logger = logging.getLogger("habitlog.progress")


@dataclass
class LogResult:
    entry: HabitEntry
    created: bool
    streak: Streak
    new_achievements: list


def build_action_history(db: Session, user_id: int) -> ActionHistory:
    entries = [
        EntryFact(
            habit_id=e.habit_id,
            day=e.day,
            completed=e.completed,
            logged_at=utc_to_local(e.created_at),
        )
        for e in crud.list_user_entries(db, user_id)
    ]
    streaks = [StreakFact(s.habit_id, s.current, s.best) for s in crud.list_user_streaks(db, user_id)]
    return ActionHistory(entries=entries, streaks=streaks)


def evaluate_achievements(db: Session, user_id: int) -> list:
    """Award every achievement the user now qualifies for. Does not commit."""
    achievements = crud.ensure_default_achievements(db, commit=False)
    earned_ids = {ua.achievement_id for ua in crud.list_user_achievements(db, user_id)}
    candidates = evaluate(achievements, build_action_history(db, user_id), earned_ids)
    return crud.award_achievements(db, user_id, candidates)


def log_entry(
    db: Session,
    user_id: int,
    habit: Habit,
    day: dt.date,
    *,
    value: dict | None,
    notes: str | None = None,
    completed: bool = True,
) -> LogResult:
    """Record the habit's entry for ``day`` and update derived state.

    Raises EntryValidationError before anything is written when the payload
    does not match the habit's metrics.
    """
    clean = validate_entry_value(habit.metrics, value)
    try:
        previous = crud.get_entry_for_day(db, habit.id, day)
        was_completed = previous is not None and previous.completed
        entry, created = crud.upsert_entry(db, habit.id, day, value=clean, notes=notes, completed=completed)
        if completed:
            streak = crud.update_streak(db, habit.id, day)
        elif was_completed:
            # the day no longer counts, so the streak may shrink
            streak = crud.rebuild_streak(db, habit.id)
        else:
            streak = crud.ensure_streak(db, habit.id)
        awarded = evaluate_achievements(db, user_id)
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(entry)
    db.refresh(streak)
    logger.info(
        "Entry %s habit=%s day=%s (%s), streak=%s/%s",
        "created" if created else "updated", habit.id, day, "done" if completed else "open",
        streak.current, streak.best,
    )
    if notes:
        logger.debug("Entry notes habit=%s day=%s: %s", habit.id, day, notes)
    return LogResult(entry=entry, created=created, streak=streak, new_achievements=awarded)


def streak_or_empty(db: Session, habit_id: int) -> Streak:
    return crud.get_streak(db, habit_id) or Streak(habit_id=habit_id, current=0, best=0, last_completed=None)


def list_habits_with_progress(db: Session, user_id: int, today: dt.date, active_only: bool = False) -> list[dict]:
    habits = crud.list_habits(db, user_id, active_only=active_only)
    done_today = {
        e.habit_id for e in crud.list_completed_entries(db, [h.id for h in habits], since=today) if e.day == today
    }
    return [
        {
            "habit": habit,
            "streak": streak_or_empty(db, habit.id),
            "today_progress": 100 if habit.id in done_today else 0,
        }
        for habit in habits
    ]


def achievements_view(db: Session, user_id: int) -> dict:
    achievements = crud.ensure_default_achievements(db)
    earned = {ua.achievement_id: ua.earned_at for ua in crud.list_user_achievements(db, user_id)}
    stats = compute_stats(len(earned))
    return {
        "achievements": [
            {
                "id": a.id,
                "key": a.key,
                "title": a.title,
                "description": a.description,
                "icon": a.icon,
                "criteria": a.criteria,
                "earned_at": earned.get(a.id),
            }
            for a in achievements
        ],
        "total_points": stats.points,
        "level": stats.level,
    }


def heatmap_for_user(db: Session, user_id: int, months_back: int, end: dt.date) -> HeatmapWindow:
    window_days = window_for_months(end, months_back)
    habits = crud.list_habits(db, user_id, active_only=True)
    start = end - dt.timedelta(days=window_days - 1)
    by_habit: dict[int, set[dt.date]] = {h.id: set() for h in habits}
    for e in crud.list_completed_entries(db, by_habit.keys(), since=start):
        by_habit[e.habit_id].add(e.day)
    return build_heatmap(by_habit.values(), end, window_days)


def workout_analytics(db: Session, habit: Habit) -> WorkoutSummary:
    entries = [e for e in crud.list_entries(db, habit.id) if e.completed]
    entries.reverse()
    return analyze(entries)
