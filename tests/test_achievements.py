import datetime as dt
from types import SimpleNamespace

import pytest

from habitlog import crud
from habitlog.services.achievements import (
    ActionHistory,
    EarlyCompletion,
    EntryFact,
    StreakFact,
    Unsatisfiable,
    compute_stats,
    evaluate,
    parse_criteria,
)


def _achievement(id_, criteria):
    return SimpleNamespace(id=id_, criteria=criteria)


def _entries(n, hour=12, completed=True):
    start = dt.date(2024, 1, 1)
    return [
        EntryFact(
            habit_id=1,
            day=start + dt.timedelta(days=i),
            completed=completed,
            logged_at=dt.datetime.combine(start + dt.timedelta(days=i), dt.time(hour, 0)),
        )
        for i in range(n)
    ]


def test_first_entry():
    rule = [_achievement(1, {"type": "first_entry"})]
    assert evaluate(rule, ActionHistory()) == []
    assert evaluate(rule, ActionHistory(entries=_entries(1))) == rule


def test_streak_threshold():
    rule = [_achievement(2, {"type": "streak", "days": 7})]
    assert evaluate(rule, ActionHistory(streaks=[StreakFact(1, 7, 7)])) == rule
    assert evaluate(rule, ActionHistory(streaks=[StreakFact(1, 6, 6)])) == []
    # a past best run counts as well
    assert evaluate(rule, ActionHistory(streaks=[StreakFact(1, 1, 9)])) == rule


def test_total_days_counts_distinct_completed_days():
    rule = [_achievement(3, {"type": "total_days", "days": 3})]
    same_day = [EntryFact(habit_id=h, day=dt.date(2024, 1, 1), completed=True) for h in (1, 2, 3)]
    assert evaluate(rule, ActionHistory(entries=same_day)) == []
    assert evaluate(rule, ActionHistory(entries=_entries(3, completed=False))) == []
    assert evaluate(rule, ActionHistory(entries=_entries(3))) == rule


def test_early_completion_before_eight():
    rule = [_achievement(4, {"type": "early_completion", "count": 2})]
    assert evaluate(rule, ActionHistory(entries=_entries(2, hour=8))) == []
    assert evaluate(rule, ActionHistory(entries=_entries(2, hour=7))) == rule


def test_already_earned_is_skipped():
    rule = [_achievement(1, {"type": "first_entry"})]
    history = ActionHistory(entries=_entries(1))
    assert evaluate(rule, history, earned_ids={1}) == []


def test_unknown_or_bad_criteria():
    assert isinstance(parse_criteria({"type": "moon_phase"}), Unsatisfiable)
    assert parse_criteria({"type": "early_completion", "count": 5}) == EarlyCompletion(5)
    with pytest.raises(ValueError):
        parse_criteria({"type": "streak", "days": 0})
    rules = [_achievement(1, {"type": "streak"}), _achievement(2, {"type": "moon_phase"})]
    assert evaluate(rules, ActionHistory(entries=_entries(10), streaks=[StreakFact(1, 10, 10)])) == []


@pytest.mark.parametrize(
    "earned,points,level",
    [(0, 0, 1), (1, 50, 1), (2, 100, 2), (3, 150, 2), (4, 200, 3)],
)
def test_points_and_level(earned, points, level):
    stats = compute_stats(earned)
    assert (stats.points, stats.level) == (points, level)


def test_award_is_idempotent(SessionLocal, demo_user_id):
    with SessionLocal() as db:
        achievements = crud.ensure_default_achievements(db)
        assert len(achievements) == 4
        assert len(crud.ensure_default_achievements(db)) == 4

        first = crud.award_achievements(db, demo_user_id, achievements[:2])
        again = crud.award_achievements(db, demo_user_id, achievements[:3])
        db.commit()

        assert [a.key for a in first] == ["first_step", "week_warrior"]
        assert [a.key for a in again] == ["habit_master"]
        assert len(crud.list_user_achievements(db, demo_user_id)) == 3
