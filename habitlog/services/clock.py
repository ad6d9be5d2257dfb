from __future__ import annotations

import datetime as dt
from zoneinfo import ZoneInfo

from habitlog.settings import settings


def _tz() -> ZoneInfo:
    return ZoneInfo(settings.TIMEZONE)


def now_local() -> dt.datetime:
    return dt.datetime.now(_tz()).replace(microsecond=0, tzinfo=None)


def local_today() -> dt.date:
    return now_local().date()


def utc_to_local(ts: dt.datetime | None) -> dt.datetime | None:
    """Stored timestamps are naive UTC; return naive local wall time."""
    if ts is None:
        return None
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=dt.timezone.utc)
    return ts.astimezone(_tz()).replace(tzinfo=None)


def local_to_utc(ts: dt.datetime) -> dt.datetime:
    """Naive local wall time to the naive UTC form used for stored timestamps."""
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=_tz())
    return ts.astimezone(dt.timezone.utc).replace(tzinfo=None)
