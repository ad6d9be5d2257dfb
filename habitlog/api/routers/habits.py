from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from sqlalchemy.orm import Session

from habitlog.api.deps import get_current_user
from habitlog.db import get_db
from habitlog.schemas.entries import EntryLogIn, EntryOut
from habitlog.schemas.habits import (
    HabitCreate,
    HabitOut,
    HabitUpdate,
    HabitWithProgressOut,
    StreakOut,
    TemplateOut,
)
from habitlog.schemas.progress import AchievementOut, LogEntryOut
from habitlog.services import progress
from habitlog.services.clock import local_today
from habitlog.services.metrics import EntryValidationError
from habitlog.services.templates import HABIT_TEMPLATES, get_template
from habitlog.settings import settings
from habitlog import crud

router = APIRouter(prefix="/habits", tags=["habits"])


def _with_progress(row: dict) -> HabitWithProgressOut:
    return HabitWithProgressOut(
        **HabitOut.model_validate(row["habit"]).model_dump(),
        streak=StreakOut.model_validate(row["streak"]),
        today_progress=row["today_progress"],
    )


def _habit_or_404(db: Session, user_id: int, habit_id: int):
    habit = crud.get_habit(db, user_id, habit_id)
    if not habit:
        raise HTTPException(status_code=404, detail="Habit not found")
    return habit


@router.get("", response_model=list[HabitWithProgressOut])
def list_habits(
    active_only: bool = Query(default=False),
    db: Session = Depends(get_db),
    user=Depends(get_current_user),
):
    rows = progress.list_habits_with_progress(db, user.id, local_today(), active_only=active_only)
    return [_with_progress(r) for r in rows]


@router.post("", response_model=HabitOut, status_code=201)
def create_habit(payload: HabitCreate, db: Session = Depends(get_db), user=Depends(get_current_user)):
    return crud.create_habit(db, user.id, payload)


@router.get("/templates", response_model=list[TemplateOut])
def list_templates():
    return [
        TemplateOut(key=key, title=t["title"], description=t["description"], type=t["type"], metrics=t["metrics"])
        for key, t in HABIT_TEMPLATES.items()
    ]


@router.post("/templates/{template_key}", response_model=HabitOut, status_code=201)
def create_from_template(template_key: str, db: Session = Depends(get_db), user=Depends(get_current_user)):
    template = get_template(template_key)
    if not template:
        raise HTTPException(status_code=404, detail="Template not found")
    return crud.create_habit(db, user.id, HabitCreate(**template))


@router.get("/{habit_id}", response_model=HabitWithProgressOut)
def get_habit(habit_id: int, db: Session = Depends(get_db), user=Depends(get_current_user)):
    habit = _habit_or_404(db, user.id, habit_id)
    today = local_today()
    done = crud.get_entry_for_day(db, habit.id, today)
    return _with_progress(
        {
            "habit": habit,
            "streak": progress.streak_or_empty(db, habit.id),
            "today_progress": 100 if done and done.completed else 0,
        }
    )


@router.patch("/{habit_id}", response_model=HabitOut)
def patch_habit(habit_id: int, payload: HabitUpdate, db: Session = Depends(get_db), user=Depends(get_current_user)):
    habit = crud.update_habit(db, user.id, habit_id, payload)
    if not habit:
        raise HTTPException(status_code=404, detail="Habit not found")
    return habit


@router.delete("/{habit_id}")
def delete_habit(habit_id: int, db: Session = Depends(get_db), user=Depends(get_current_user)):
    ok = crud.delete_habit(db, user.id, habit_id)
    if not ok:
        raise HTTPException(status_code=404, detail="Habit not found")
    return {"ok": True}


@router.post("/{habit_id}/log", response_model=LogEntryOut)
def log_habit(
    habit_id: int,
    payload: EntryLogIn,
    response: Response,
    db: Session = Depends(get_db),
    user=Depends(get_current_user),
):
    habit = _habit_or_404(db, user.id, habit_id)
    day = payload.day or local_today()
    try:
        result = progress.log_entry(
            db,
            user.id,
            habit,
            day,
            value=payload.value,
            notes=payload.notes,
            completed=payload.completed,
        )
    except EntryValidationError as exc:
        raise HTTPException(status_code=422, detail=exc.errors)
    response.status_code = 201 if result.created else 200
    return LogEntryOut(
        entry=EntryOut.model_validate(result.entry),
        streak=StreakOut.model_validate(result.streak),
        new_achievements=[
            AchievementOut(
                id=a.id, key=a.key, title=a.title, description=a.description, icon=a.icon, criteria=a.criteria
            )
            for a in result.new_achievements
        ],
    )


@router.get("/{habit_id}/entries", response_model=list[EntryOut])
def list_entries(
    habit_id: int,
    limit: int | None = Query(default=None, ge=1, le=1000),
    db: Session = Depends(get_db),
    user=Depends(get_current_user),
):
    habit = _habit_or_404(db, user.id, habit_id)
    return crud.list_entries(db, habit.id, limit=limit or settings.ENTRIES_PAGE_LIMIT)


@router.get("/{habit_id}/streak", response_model=StreakOut)
def get_streak(habit_id: int, db: Session = Depends(get_db), user=Depends(get_current_user)):
    habit = _habit_or_404(db, user.id, habit_id)
    return progress.streak_or_empty(db, habit.id)


@router.post("/{habit_id}/streak/recompute", response_model=StreakOut)
def recompute_streak(habit_id: int, db: Session = Depends(get_db), user=Depends(get_current_user)):
    habit = _habit_or_404(db, user.id, habit_id)
    return crud.recompute_streak(db, habit.id)
