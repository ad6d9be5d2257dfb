import datetime as dt

from habitlog.models.habit import HabitEntry, Streak
from habitlog.services.clock import local_to_utc, utc_to_local
from habitlog.settings import settings
from scripts.seed_demo import seed_user


def test_local_to_utc_round_trip(monkeypatch):
    monkeypatch.setattr(settings, "TIMEZONE", "Asia/Tokyo")
    local = dt.datetime(2024, 3, 1, 7, 30)
    assert local_to_utc(local) == dt.datetime(2024, 2, 29, 22, 30)
    assert utc_to_local(local_to_utc(local)) == local


def test_seed_stores_utc_and_clean_values(monkeypatch, SessionLocal):
    monkeypatch.setattr(settings, "TIMEZONE", "Asia/Tokyo")
    today = dt.date(2024, 3, 14)
    with SessionLocal() as db:
        seed_user(db, seed_value=7, today=today)
        entries = db.query(HabitEntry).all()
        assert entries
        for entry in entries:
            assert "completed" not in entry.value
            # sample times are drawn from 06:00-21:59 local
            local = utc_to_local(entry.created_at)
            assert local.date() == entry.day
            assert 6 <= local.hour <= 21
        assert db.query(Streak).count() == 3

        # a second run leaves the data alone
        assert seed_user(db, seed_value=7, today=today) == 0
        assert db.query(HabitEntry).count() == len(entries)
