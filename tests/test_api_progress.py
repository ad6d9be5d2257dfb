import datetime as dt

import pytest

from habitlog.services.clock import local_today


def _habit(client, title, **extra):
    resp = client.post("/habits", json={"title": title, **extra})
    assert resp.status_code == 201
    return resp.json()


def _earned(client):
    view = client.get("/achievements").json()
    return view, {a["key"] for a in view["achievements"] if a["earned_at"]}


def test_achievements_view_before_any_entry(client):
    view, earned = _earned(client)
    assert {a["key"] for a in view["achievements"]} == {"first_step", "week_warrior", "habit_master", "early_bird"}
    assert earned == set()
    assert view["total_points"] == 0
    assert view["level"] == 1


def test_first_entry_awards_once(client):
    habit = _habit(client, "Read")
    resp = client.post(f"/habits/{habit['id']}/log", json={"day": "2024-01-01"})
    assert "first_step" in {a["key"] for a in resp.json()["new_achievements"]}

    resp = client.post(f"/habits/{habit['id']}/log", json={"day": "2024-01-02"})
    assert "first_step" not in {a["key"] for a in resp.json()["new_achievements"]}

    view, earned = _earned(client)
    assert "first_step" in earned
    assert view["total_points"] == 50 * len(earned)
    assert view["level"] == view["total_points"] // 100 + 1


def test_week_streak_awards_week_warrior(client):
    habit = _habit(client, "Read")
    url = f"/habits/{habit['id']}/log"
    start = dt.date(2024, 1, 1)
    for i in range(6):
        client.post(url, json={"day": (start + dt.timedelta(days=i)).isoformat()})
    assert "week_warrior" not in _earned(client)[1]

    resp = client.post(url, json={"day": (start + dt.timedelta(days=6)).isoformat()})
    assert resp.json()["streak"]["current"] == 7
    assert "week_warrior" in {a["key"] for a in resp.json()["new_achievements"]}

    # a broken run keeps the achievement
    client.post(url, json={"day": "2024-02-01"})
    assert "week_warrior" in _earned(client)[1]


def test_heatmap_window_and_percentages(client):
    today = local_today()
    yesterday = today - dt.timedelta(days=1)
    a = _habit(client, "A")
    b = _habit(client, "B")
    paused = _habit(client, "Paused")
    client.post(f"/habits/{a['id']}/log", json={"day": today.isoformat()})
    client.post(f"/habits/{b['id']}/log", json={"day": today.isoformat()})
    client.post(f"/habits/{a['id']}/log", json={"day": yesterday.isoformat()})
    client.post(f"/habits/{paused['id']}/log", json={"day": yesterday.isoformat()})
    client.patch(f"/habits/{paused['id']}", json={"is_active": False})

    resp = client.get("/heatmap", params={"months_back": 1})
    assert resp.status_code == 200
    data = resp.json()
    days = data["days"]
    assert data["end"] == today.isoformat()
    assert len(days) == (today - dt.date.fromisoformat(data["start"])).days + 1
    assert days[today.isoformat()] == 100.0
    assert days[yesterday.isoformat()] == 50.0
    assert all(0 <= v <= 100 for v in days.values())


def test_heatmap_default_and_bounds(client):
    resp = client.get("/heatmap")
    assert resp.status_code == 200
    assert set(resp.json()["days"].values()) == {0.0}
    assert client.get("/heatmap", params={"months_back": 0}).status_code == 422
    assert client.get("/heatmap", params={"months_back": 13}).status_code == 422


def _workout(day, *exercises, duration=60):
    return {
        "day": day,
        "value": {
            "duration": duration,
            "exercises": [
                {"name": name, "sets": [{"reps": r, "weight": w, "completed": True} for r, w in sets]}
                for name, sets in exercises
            ],
        },
    }


def test_workout_analytics(client, gym_habit):
    url = f"/habits/{gym_habit['id']}/log"
    assert client.post(url, json=_workout("2024-01-01", ("Bench", [(10, 100)]))).status_code == 201
    client.post(url, json=_workout("2024-01-03", ("Bench", [(10, 150)])))
    client.post(url, json=_workout("2024-01-05", ("Bench", [(10, 120)]), ("Squat", [(5, 100)])))

    resp = client.get(f"/habits/{gym_habit['id']}/workouts")
    assert resp.status_code == 200
    data = resp.json()
    assert data["total_workouts"] == 3
    assert data["total_volume"] == 4200
    assert data["best_workout"]["volume"] == 1700
    assert data["best_workout"]["day"] == "2024-01-05"
    assert data["avg_volume"] == pytest.approx(1400)
    assert data["total_duration"] == 180

    series = {s["name"]: s["points"] for s in data["exercises"]}
    assert [p["weight"] for p in series["Bench"]] == [100, 150, 120]
    prs = {pr["exercise"] for pr in data["recent_prs"]}
    assert prs == {"Squat"}


def test_workout_analytics_rejects_non_gym(client):
    habit = _habit(client, "Read")
    assert client.get(f"/habits/{habit['id']}/workouts").status_code == 400
    assert client.get("/habits/999/workouts").status_code == 404


def test_workout_log_rejects_bad_sets(client, gym_habit):
    bad = _workout("2024-01-01", ("Bench", [(10, 100)]))
    bad["value"]["exercises"][0]["sets"][0]["weight"] = "heavy"
    resp = client.post(f"/habits/{gym_habit['id']}/log", json=bad)
    assert resp.status_code == 422
    assert resp.json()["detail"][0]["field"] == "exercises[0].sets[0].weight"


def test_log_rejects_non_finite_numbers(client, gym_habit):
    run = client.post("/habits/templates/running").json()
    resp = client.post(f"/habits/{run['id']}/log", json={"value": {"distance": "nan", "duration": "inf"}})
    assert resp.status_code == 422
    assert {e["field"] for e in resp.json()["detail"]} == {"distance", "duration"}

    bad = _workout("2024-01-01", ("Bench", [(10, 100)]))
    bad["value"]["exercises"][0]["sets"][0]["weight"] = "1e999"
    resp = client.post(f"/habits/{gym_habit['id']}/log", json=bad)
    assert resp.status_code == 422
    assert client.get(f"/habits/{gym_habit['id']}/workouts").json()["total_workouts"] == 0
