from fastapi import FastAPI

from habitlog.api.routers.habits import router as habits_router
from habitlog.api.routers.progress import router as progress_router
from habitlog.db import describe_db
from habitlog.logging_utils import configure_logging

VERSION = "1.0.0"

FEATURES = [
    "Habit Tracking",
    "Streaks",
    "Progress Analytics",
    "Achievement System",
    "Calendar Heatmap",
    "Gym Workout Analytics",
    "Habit Templates",
]


def create_app() -> FastAPI:
    configure_logging()
    app = FastAPI(title="Habit Tracker API", version=VERSION)

    app.include_router(habits_router)
    app.include_router(progress_router)

    @app.get("/health")
    def health():
        return {"ok": True, "version": VERSION, "db": describe_db()["driver"], "features": FEATURES}

    return app
