from __future__ import annotations

import argparse
import datetime as dt
import logging
import random

from sqlalchemy.orm import Session

from habitlog import crud
from habitlog.db import SessionLocal
from habitlog.logging_utils import configure_logging
from habitlog.models.habit import HabitEntry
from habitlog.schemas.habits import HabitCreate
from habitlog.services.clock import local_to_utc, local_today
from habitlog.services.metrics import validate_entry_value
from habitlog.services.progress import evaluate_achievements
from habitlog.services.templates import get_template

SEED_TEMPLATES = ["running", "study", "meditation"]
DAYS = 14

logger = logging.getLogger("habitlog.seed")


def _sample_value(habit_type: str, title: str, rng: random.Random) -> dict:
    if habit_type == "running":
        return {
            "distance": round(rng.random() * 10 + 2, 2),
            "duration": rng.randint(20, 49),
            "pace": rng.randint(4, 6),
            "effort": rng.randint(5, 9),
        }
    if habit_type == "study":
        return {
            "duration": rng.randint(30, 89),
            "pomodoros": rng.randint(1, 4),
            "focus_quality": rng.randint(6, 9),
        }
    if title == "Meditation":
        return {"duration": rng.randint(5, 19), "type": rng.random() > 0.5}
    return {}


def seed_user(db: Session, seed_value: int = 42, today: dt.date | None = None) -> int:
    """Give the demo user sample habits and entries. Returns the number of achievements earned."""
    rng = random.Random(seed_value)
    today = today or local_today()
    user = crud.get_or_create_demo_user(db)
    if crud.list_habits(db, user.id):
        logger.info("Demo user already has habits, skipping seed")
        return 0

    for key in SEED_TEMPLATES:
        habit = crud.create_habit(db, user.id, HabitCreate(**get_template(key)))
        logged = 0
        for offset in range(DAYS):
            if rng.random() <= 0.3:
                continue
            day = today - dt.timedelta(days=offset)
            logged_at = dt.datetime.combine(day, dt.time(rng.randint(6, 21), rng.randint(0, 59)))
            db.add(
                HabitEntry(
                    habit_id=habit.id,
                    day=day,
                    value=validate_entry_value(habit.metrics, _sample_value(habit.type, habit.title, rng)),
                    notes="Great session! Felt really focused." if rng.random() > 0.7 else None,
                    completed=True,
                    created_at=local_to_utc(logged_at),
                )
            )
            logged += 1
        db.commit()
        streak = crud.recompute_streak(db, habit.id)
        logger.info("Seeded %s: %s entries, streak %s/%s", habit.title, logged, streak.current, streak.best)

    awarded = evaluate_achievements(db, user.id)
    db.commit()
    logger.info("Demo data ready, %s achievements earned", len(awarded))
    return len(awarded)


def seed(seed_value: int = 42) -> None:
    with SessionLocal() as db:
        seed_user(db, seed_value)


def main() -> None:
    parser = argparse.ArgumentParser(description="Seed the demo user with sample habits and entries.")
    parser.add_argument("--seed", type=int, default=42)
    args = parser.parse_args()
    configure_logging()
    seed(args.seed)


if __name__ == "__main__":
    main()
