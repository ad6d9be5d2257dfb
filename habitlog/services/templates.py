from __future__ import annotations

import copy


HABIT_TEMPLATES: dict[str, dict] = {
    "running": {
        "title": "Morning Run",
        "description": "Track your daily runs",
        "type": "running",
        "theme": {"color": "#1E90FF", "accent": "#FFD166", "icon": "🏃"},
        "recurrence": {"frequency": "weekly", "days": ["Mon", "Wed", "Fri"], "target": {"unit": "km", "value": 5}},
        "metrics": [
            {"name": "distance", "type": "distance", "unit": "km", "required": True},
            {"name": "duration", "type": "timer", "unit": "min", "required": True},
            {"name": "pace", "type": "numeric", "unit": "min/km", "required": False},
            {"name": "effort", "type": "numeric", "unit": "1-10", "required": False},
        ],
    },
    "gym": {
        "title": "Gym Workout",
        "description": "Strength training sessions",
        "type": "gym",
        "theme": {"color": "#FF6B6B", "accent": "#4ECDC4", "icon": "💪"},
        "recurrence": {"frequency": "weekly", "days": ["Tue", "Thu", "Sat"], "target": {"unit": "sessions", "value": 3}},
        "metrics": [
            {"name": "duration", "type": "timer", "unit": "min", "required": True},
            {"name": "exercises", "type": "counter", "unit": "exercises", "required": False},
            {"name": "rpe", "type": "numeric", "unit": "1-10", "required": False},
        ],
    },
    "study": {
        "title": "Study Session",
        "description": "Focus time for learning",
        "type": "study",
        "theme": {"color": "#6A5ACD", "accent": "#9AD3BC", "icon": "📚"},
        "recurrence": {"frequency": "daily", "target": {"unit": "hours", "value": 2}},
        "metrics": [
            {"name": "duration", "type": "timer", "unit": "min", "required": True},
            {"name": "pomodoros", "type": "counter", "unit": "sessions", "required": False},
            {"name": "focus_quality", "type": "numeric", "unit": "1-10", "required": False},
        ],
    },
    "meditation": {
        "title": "Meditation",
        "description": "Daily mindfulness practice",
        "type": "custom",
        "theme": {"color": "#00A86B", "accent": "#F7B267", "icon": "🧘"},
        "recurrence": {"frequency": "daily", "target": {"unit": "min", "value": 10}},
        "metrics": [
            {"name": "duration", "type": "timer", "unit": "min", "required": True},
            {"name": "type", "type": "boolean", "unit": "guided", "required": False},
        ],
    },
    "water": {
        "title": "Water Intake",
        "description": "Stay hydrated throughout the day",
        "type": "custom",
        "theme": {"color": "#00CED1", "accent": "#FFB6C1", "icon": "💧"},
        "recurrence": {"frequency": "daily", "target": {"unit": "ml", "value": 2000}},
        "metrics": [
            {"name": "amount", "type": "numeric", "unit": "ml", "required": True},
        ],
    },
}


def get_template(key: str) -> dict | None:
    template = HABIT_TEMPLATES.get((key or "").strip().lower())
    return copy.deepcopy(template) if template else None
