from __future__ import annotations

import datetime as dt

from pydantic import BaseModel

from habitlog.schemas.entries import EntryOut
from habitlog.schemas.habits import StreakOut


class AchievementOut(BaseModel):
    id: int
    key: str
    title: str
    description: str
    icon: str
    criteria: dict
    earned_at: dt.datetime | None = None


class AchievementsView(BaseModel):
    achievements: list[AchievementOut]
    total_points: int
    level: int


class LogEntryOut(BaseModel):
    entry: EntryOut
    streak: StreakOut
    new_achievements: list[AchievementOut]


class HeatmapOut(BaseModel):
    start: dt.date
    end: dt.date
    days: dict[str, float]


class WorkoutVolumeOut(BaseModel):
    day: dt.date
    volume: float
    sets: int
    duration: float


class ExercisePointOut(BaseModel):
    day: dt.date
    weight: float
    reps: float
    volume: float


class ExerciseSeriesOut(BaseModel):
    name: str
    points: list[ExercisePointOut]


class PersonalRecordOut(BaseModel):
    exercise: str
    day: dt.date
    weight: float
    reps: float


class WorkoutAnalyticsOut(BaseModel):
    habit_id: int
    total_workouts: int
    total_volume: float
    avg_volume: float
    total_duration: float
    best_workout: WorkoutVolumeOut | None
    volume_series: list[WorkoutVolumeOut]
    exercises: list[ExerciseSeriesOut]
    recent_prs: list[PersonalRecordOut]
