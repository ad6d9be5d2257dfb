import datetime as dt

import pytest

from habitlog.services.heatmap import HeatmapWindow, shift_months, window_for_months


END = dt.date(2024, 3, 10)


def test_window_has_one_entry_per_day_in_range():
    window = HeatmapWindow([[END]], END, 30)
    points = list(window)
    assert len(points) == 30 == len(window)
    assert points[0][0] == END - dt.timedelta(days=29)
    assert points[-1][0] == END
    assert all(0 <= pct <= 100 for _, pct in points)
    days = [d for d, _ in points]
    assert days == sorted(days)


def test_percentage_per_day():
    habit_a = {END, END - dt.timedelta(days=1)}
    habit_b = {END}
    habit_c = set()
    data = HeatmapWindow([habit_a, habit_b, habit_c], END, 3).as_dict()
    assert data == {
        "2024-03-08": 0.0,
        "2024-03-09": pytest.approx(100 / 3),
        "2024-03-10": pytest.approx(200 / 3),
    }


def test_no_habits_yields_zero():
    points = list(HeatmapWindow([], END, 7))
    assert len(points) == 7
    assert {pct for _, pct in points} == {0.0}


def test_window_is_restartable():
    window = HeatmapWindow([{END}], END, 5)
    assert list(window) == list(window)


def test_days_outside_window_are_ignored():
    data = HeatmapWindow([{END + dt.timedelta(days=1), END - dt.timedelta(days=10)}], END, 5).as_dict()
    assert set(data.values()) == {0.0}


def test_invalid_window():
    with pytest.raises(ValueError):
        HeatmapWindow([], END, 0)


def test_shift_months_clamps_to_month_end():
    assert shift_months(dt.date(2024, 3, 31), -1) == dt.date(2024, 2, 29)
    assert shift_months(dt.date(2024, 1, 15), -2) == dt.date(2023, 11, 15)


def test_window_for_months():
    assert window_for_months(dt.date(2024, 3, 10), 1) == 30
    assert window_for_months(dt.date(2024, 3, 10), 3) == 92
    with pytest.raises(ValueError):
        window_for_months(END, 0)
    with pytest.raises(ValueError):
        window_for_months(END, 13)
