from __future__ import annotations

import calendar
import datetime as dt
from typing import Iterable, Iterator, Tuple


MAX_MONTHS_BACK = 12


def shift_months(day: dt.date, months: int) -> dt.date:
    """Move ``day`` by a number of calendar months, clamping to the month end."""
    index = day.year * 12 + (day.month - 1) + months
    year, month = divmod(index, 12)
    month += 1
    last_day = calendar.monthrange(year, month)[1]
    return dt.date(year, month, min(day.day, last_day))


def window_for_months(end: dt.date, months_back: int) -> int:
    """Number of days from ``months_back`` months before ``end`` up to ``end`` inclusive."""
    if months_back < 1 or months_back > MAX_MONTHS_BACK:
        raise ValueError(f"months_back must be between 1 and {MAX_MONTHS_BACK}")
    start = shift_months(end, -months_back)
    return (end - start).days + 1


class HeatmapWindow:
    """Per-day completion percentage over a trailing window ending at ``end``.

    ``habit_days`` holds one collection of completed days per habit. Iterating
    yields ``(day, percentage)`` pairs in ascending order, one per day, and can
    be repeated.
    """

    def __init__(self, habit_days: Iterable[Iterable[dt.date]], end: dt.date, window_days: int):
        if window_days < 1:
            raise ValueError("window_days must be positive")
        self._habit_days = [frozenset(days) for days in habit_days]
        self.end = end
        self.window_days = window_days

    @property
    def start(self) -> dt.date:
        return self.end - dt.timedelta(days=self.window_days - 1)

    def __len__(self) -> int:
        return self.window_days

    def __iter__(self) -> Iterator[Tuple[dt.date, float]]:
        total = len(self._habit_days)
        day = self.start
        for _ in range(self.window_days):
            if total:
                done = sum(1 for days in self._habit_days if day in days)
                yield day, done / total * 100
            else:
                yield day, 0.0
            day += dt.timedelta(days=1)

    def as_dict(self) -> dict[str, float]:
        return {day.isoformat(): pct for day, pct in self}


def build_heatmap(habit_days: Iterable[Iterable[dt.date]], end: dt.date, window_days: int) -> HeatmapWindow:
    return HeatmapWindow(habit_days, end, window_days)
