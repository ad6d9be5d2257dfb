from __future__ import annotations

import datetime as dt
from typing import Any

from pydantic import BaseModel, Field


class EntryLogIn(BaseModel):
    day: dt.date | None = None
    value: dict[str, Any] = Field(default_factory=dict)
    notes: str | None = Field(default=None, max_length=1000)
    completed: bool = True


class EntryOut(BaseModel):
    id: int
    habit_id: int
    day: dt.date
    value: dict[str, Any]
    notes: str | None
    completed: bool
    created_at: dt.datetime

    class Config:
        from_attributes = True
