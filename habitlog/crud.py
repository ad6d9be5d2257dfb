from __future__ import annotations

import datetime as dt
import logging
from typing import Iterable

from sqlalchemy import select, and_
from sqlalchemy.orm import Session

from habitlog.models.user import User
from habitlog.models.habit import Habit, HabitEntry, Streak
from habitlog.models.achievement import Achievement, UserAchievement
from habitlog.schemas.habits import HabitCreate, HabitUpdate
from habitlog.services.achievements import DEFAULT_ACHIEVEMENTS
from habitlog.services.streaks import StreakState, advance_streak, replay_streak
from habitlog.settings import settings

logger = logging.getLogger("habitlog.crud")


def get_or_create_user_by_email(db: Session, email: str, name: str | None = None) -> User:
    user = db.execute(select(User).where(User.email == email)).scalar_one_or_none()
    if user:
        return user
    user = User(email=email, name=name, preferences={"theme": "light", "notifications": True})
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def get_or_create_demo_user(db: Session) -> User:
    return get_or_create_user_by_email(db, settings.DEMO_USER_EMAIL, settings.DEMO_USER_NAME)


# Habits


def list_habits(db: Session, user_id: int, active_only: bool = False) -> list[Habit]:
    q = select(Habit).where(Habit.user_id == user_id)
    if active_only:
        q = q.where(Habit.is_active.is_(True))
    return list(db.execute(q.order_by(Habit.created_at.desc(), Habit.id.desc())).scalars())


def get_habit(db: Session, user_id: int, habit_id: int) -> Habit | None:
    return db.execute(
        select(Habit).where(and_(Habit.id == habit_id, Habit.user_id == user_id))
    ).scalar_one_or_none()


def create_habit(db: Session, user_id: int, data: HabitCreate) -> Habit:
    payload = data.model_dump()
    habit = Habit(
        user_id=user_id,
        title=payload["title"],
        description=payload["description"],
        type=payload["type"],
        theme=payload["theme"],
        recurrence=payload["recurrence"],
        metrics=payload["metrics"],
        is_active=True,
    )
    db.add(habit)
    db.flush()
    db.add(Streak(habit_id=habit.id, current=0, best=0))
    db.commit()
    db.refresh(habit)
    logger.info("Habit %s created (%s)", habit.id, habit.type)
    return habit


def update_habit(db: Session, user_id: int, habit_id: int, patch: HabitUpdate) -> Habit | None:
    habit = get_habit(db, user_id, habit_id)
    if not habit:
        return None
    data = patch.model_dump(exclude_unset=True)
    for k, v in data.items():
        if v is None and k in {"title", "type", "theme", "recurrence", "metrics", "is_active"}:
            continue
        setattr(habit, k, v)
    db.add(habit)
    db.commit()
    db.refresh(habit)
    return habit


def delete_habit(db: Session, user_id: int, habit_id: int) -> bool:
    habit = get_habit(db, user_id, habit_id)
    if not habit:
        return False
    db.delete(habit)
    db.commit()
    logger.info("Habit %s deleted", habit_id)
    return True


# Entries


def get_entry_for_day(db: Session, habit_id: int, day: dt.date) -> HabitEntry | None:
    return db.execute(
        select(HabitEntry).where(and_(HabitEntry.habit_id == habit_id, HabitEntry.day == day))
    ).scalar_one_or_none()


def upsert_entry(
    db: Session,
    habit_id: int,
    day: dt.date,
    *,
    value: dict,
    notes: str | None = None,
    completed: bool = True,
) -> tuple[HabitEntry, bool]:
    """Insert or update the single entry of ``habit_id`` for ``day``. Flushes, does not commit."""
    entry = get_entry_for_day(db, habit_id, day)
    created = entry is None
    if created:
        entry = HabitEntry(habit_id=habit_id, day=day, value=value, notes=notes, completed=completed)
    else:
        entry.value = value
        entry.notes = notes
        entry.completed = completed
    db.add(entry)
    db.flush()
    return entry, created


def list_entries(db: Session, habit_id: int, limit: int | None = None) -> list[HabitEntry]:
    q = select(HabitEntry).where(HabitEntry.habit_id == habit_id).order_by(HabitEntry.day.desc())
    if limit:
        q = q.limit(limit)
    return list(db.execute(q).scalars())


def list_completed_entries(db: Session, habit_ids: Iterable[int], since: dt.date | None = None) -> list[HabitEntry]:
    ids = list(habit_ids)
    if not ids:
        return []
    q = select(HabitEntry).where(
        and_(HabitEntry.habit_id.in_(ids), HabitEntry.completed.is_(True))
    )
    if since is not None:
        q = q.where(HabitEntry.day >= since)
    return list(db.execute(q.order_by(HabitEntry.day.asc(), HabitEntry.id.asc())).scalars())


def list_user_entries(db: Session, user_id: int) -> list[HabitEntry]:
    return list(
        db.execute(
            select(HabitEntry)
            .join(Habit, Habit.id == HabitEntry.habit_id)
            .where(Habit.user_id == user_id)
            .order_by(HabitEntry.day.asc(), HabitEntry.id.asc())
        ).scalars()
    )


# Streaks


def get_streak(db: Session, habit_id: int) -> Streak | None:
    return db.execute(select(Streak).where(Streak.habit_id == habit_id)).scalar_one_or_none()


def ensure_streak(db: Session, habit_id: int) -> Streak:
    streak = db.execute(
        select(Streak).where(Streak.habit_id == habit_id).with_for_update()
    ).scalar_one_or_none()
    if streak is None:
        streak = Streak(habit_id=habit_id, current=0, best=0)
        db.add(streak)
        db.flush()
    return streak


def update_streak(db: Session, habit_id: int, day: dt.date) -> Streak:
    """Advance the habit's streak for a completion on ``day``. Flushes, does not commit.

    The row is read with FOR UPDATE so the read-modify-write stays inside the
    caller's transaction.
    """
    streak = ensure_streak(db, habit_id)
    before = StreakState(streak.current, streak.best, streak.last_completed)
    after = advance_streak(before, day)
    streak.current = after.current
    streak.best = after.best
    streak.last_completed = after.last_completed
    db.add(streak)
    db.flush()
    logger.debug(
        "Streak habit=%s day=%s current %s->%s best %s->%s",
        habit_id, day, before.current, after.current, before.best, after.best,
    )
    return streak


def list_user_streaks(db: Session, user_id: int) -> list[Streak]:
    return list(
        db.execute(
            select(Streak).join(Habit, Habit.id == Streak.habit_id).where(Habit.user_id == user_id)
        ).scalars()
    )


def rebuild_streak(db: Session, habit_id: int) -> Streak:
    """Replace the habit's streak with a replay of its completed entries. Flushes, does not commit."""
    days = [e.day for e in list_completed_entries(db, [habit_id])]
    state = replay_streak(days)
    streak = ensure_streak(db, habit_id)
    streak.current = state.current
    streak.best = state.best
    streak.last_completed = state.last_completed
    db.add(streak)
    db.flush()
    logger.debug("Streak for habit %s replayed from %s days", habit_id, len(set(days)))
    return streak


def recompute_streak(db: Session, habit_id: int) -> Streak:
    streak = rebuild_streak(db, habit_id)
    db.commit()
    db.refresh(streak)
    logger.info("Streak for habit %s recomputed: %s/%s", habit_id, streak.current, streak.best)
    return streak


# Achievements


def ensure_default_achievements(db: Session, *, commit: bool = True) -> list[Achievement]:
    existing = {a.key for a in db.execute(select(Achievement)).scalars()}
    added = 0
    for definition in DEFAULT_ACHIEVEMENTS:
        if definition["key"] in existing:
            continue
        db.add(Achievement(**definition))
        added += 1
    if added:
        if commit:
            db.commit()
        else:
            db.flush()
        logger.info("Seeded %s achievements", added)
    return list_achievements(db)


def list_achievements(db: Session) -> list[Achievement]:
    return list(db.execute(select(Achievement).order_by(Achievement.id.asc())).scalars())


def list_user_achievements(db: Session, user_id: int) -> list[UserAchievement]:
    return list(
        db.execute(select(UserAchievement).where(UserAchievement.user_id == user_id)).scalars()
    )


def _insert_ignore_user_achievement(db: Session, user_id: int, achievement_id: int, earned_at: dt.datetime) -> bool:
    values = {"user_id": user_id, "achievement_id": achievement_id, "earned_at": earned_at}
    dialect = db.get_bind().dialect.name
    if dialect == "sqlite":
        from sqlalchemy.dialects.sqlite import insert
    elif dialect == "postgresql":
        from sqlalchemy.dialects.postgresql import insert
    else:
        exists = db.execute(
            select(UserAchievement.id).where(
                and_(UserAchievement.user_id == user_id, UserAchievement.achievement_id == achievement_id)
            )
        ).first()
        if exists:
            return False
        db.add(UserAchievement(**values))
        db.flush()
        return True

    stmt = insert(UserAchievement).values(**values).on_conflict_do_nothing(
        index_elements=["user_id", "achievement_id"]
    )
    return db.execute(stmt).rowcount == 1


def award_achievements(db: Session, user_id: int, achievements: Iterable[Achievement]) -> list[Achievement]:
    """Record earned achievements; ones already held by the user are ignored. Does not commit."""
    now = dt.datetime.utcnow()
    awarded = []
    for achievement in achievements:
        if _insert_ignore_user_achievement(db, user_id, achievement.id, now):
            awarded.append(achievement)
            logger.info("User %s earned achievement %s", user_id, achievement.key)
    return awarded
