from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from habitlog.api.deps import get_current_user
from habitlog.db import get_db
from habitlog.schemas.progress import (
    AchievementsView,
    ExercisePointOut,
    ExerciseSeriesOut,
    HeatmapOut,
    PersonalRecordOut,
    WorkoutAnalyticsOut,
    WorkoutVolumeOut,
)
from habitlog.services import progress
from habitlog.services.clock import local_today
from habitlog.services.heatmap import MAX_MONTHS_BACK
from habitlog.settings import settings
from habitlog import crud

router = APIRouter(tags=["progress"])


@router.get("/achievements", response_model=AchievementsView)
def get_achievements(db: Session = Depends(get_db), user=Depends(get_current_user)):
    return progress.achievements_view(db, user.id)


@router.get("/heatmap", response_model=HeatmapOut)
def get_heatmap(
    months_back: int | None = Query(default=None, ge=1, le=MAX_MONTHS_BACK),
    db: Session = Depends(get_db),
    user=Depends(get_current_user),
):
    window = progress.heatmap_for_user(
        db,
        user.id,
        months_back or settings.HEATMAP_DEFAULT_MONTHS,
        local_today(),
    )
    return HeatmapOut(start=window.start, end=window.end, days=window.as_dict())


@router.get("/habits/{habit_id}/workouts", response_model=WorkoutAnalyticsOut)
def get_workout_analytics(habit_id: int, db: Session = Depends(get_db), user=Depends(get_current_user)):
    habit = crud.get_habit(db, user.id, habit_id)
    if not habit:
        raise HTTPException(status_code=404, detail="Habit not found")
    if habit.type != "gym":
        raise HTTPException(status_code=400, detail="Workout analytics are only available for gym habits")

    summary = progress.workout_analytics(db, habit)
    best = summary.best_workout
    return WorkoutAnalyticsOut(
        habit_id=habit.id,
        total_workouts=summary.total_workouts,
        total_volume=summary.total_volume,
        avg_volume=round(summary.avg_volume, 2),
        total_duration=summary.total_duration,
        best_workout=WorkoutVolumeOut(**vars(best)) if best else None,
        volume_series=[WorkoutVolumeOut(**vars(r)) for r in summary.volume_series],
        exercises=[
            ExerciseSeriesOut(name=name, points=[ExercisePointOut(**vars(p)) for p in series])
            for name, series in summary.per_exercise_series.items()
        ],
        recent_prs=[PersonalRecordOut(**vars(pr)) for pr in summary.recent_prs],
    )
