from .base import Base
from .user import User
from .habit import Habit, HabitEntry, Streak
from .achievement import Achievement, UserAchievement

__all__ = [
    "Base",
    "User",
    "Habit",
    "HabitEntry",
    "Streak",
    "Achievement",
    "UserAchievement",
]
