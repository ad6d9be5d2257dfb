from __future__ import annotations

import datetime as dt
from dataclasses import dataclass
from typing import Iterable, Optional


@dataclass(frozen=True)
class StreakState:
    current: int = 0
    best: int = 0
    last_completed: Optional[dt.date] = None


def advance_streak(state: StreakState, day: dt.date) -> StreakState:
    """Apply one completion on ``day`` to ``state``.

    The entry's day is treated as "today": a second completion on the same day
    is a no-op, a completion on the following day extends the run, anything
    else (a gap, or a day earlier than the last completion) starts a new run.
    """
    last = state.last_completed
    if last is None:
        current = 1
    elif last == day:
        current = state.current
    elif last == day - dt.timedelta(days=1):
        current = state.current + 1
    else:
        current = 1

    return StreakState(
        current=current,
        best=max(state.best, current),
        last_completed=day,
    )


def replay_streak(days: Iterable[dt.date]) -> StreakState:
    """Rebuild a streak from scratch out of every completed entry day."""
    state = StreakState()
    for day in sorted(set(days)):
        state = advance_streak(state, day)
    return state
