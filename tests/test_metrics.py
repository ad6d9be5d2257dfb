import pytest

from habitlog.services.metrics import EntryValidationError, validate_entry_value


RUN_METRICS = [
    {"name": "distance", "type": "distance", "unit": "km", "required": True},
    {"name": "duration", "type": "timer", "unit": "min", "required": True},
    {"name": "effort", "type": "numeric", "required": False},
    {"name": "laps", "type": "counter", "required": False},
    {"name": "outdoor", "type": "boolean", "required": False},
]


def _fields(exc_info):
    return {e["field"] for e in exc_info.value.errors}


def test_valid_payload_is_normalized():
    clean = validate_entry_value(RUN_METRICS, {"distance": "5.2", "duration": 30, "laps": "4", "outdoor": True})
    assert clean == {"distance": 5.2, "duration": 30, "laps": 4, "outdoor": True}


def test_missing_required_metric():
    with pytest.raises(EntryValidationError) as exc_info:
        validate_entry_value(RUN_METRICS, {"distance": 5})
    assert _fields(exc_info) == {"duration"}


def test_optional_metric_may_be_omitted():
    assert validate_entry_value(RUN_METRICS, {"distance": 5, "duration": 20, "effort": None})["distance"] == 5


def test_type_errors_are_collected():
    with pytest.raises(EntryValidationError) as exc_info:
        validate_entry_value(
            RUN_METRICS,
            {"distance": "far", "duration": -1, "laps": 2.5, "outdoor": "yes", "effort": True},
        )
    assert _fields(exc_info) == {"distance", "duration", "laps", "outdoor", "effort"}


def test_negative_numeric_is_allowed():
    clean = validate_entry_value(RUN_METRICS, {"distance": 1, "duration": 1, "effort": -2})
    assert clean["effort"] == -2


def test_unknown_keys_pass_through():
    clean = validate_entry_value([], {"completed": True, "mood": "great"})
    assert clean == {"completed": True, "mood": "great"}


def test_value_must_be_object():
    with pytest.raises(EntryValidationError):
        validate_entry_value([], ["not", "a", "dict"])


def test_exercise_structure():
    gym_metrics = [{"name": "exercises", "type": "counter", "required": False}]
    clean = validate_entry_value(
        gym_metrics,
        {"exercises": [{"name": " Bench ", "sets": [{"reps": "10", "weight": 100, "completed": True}]}]},
    )
    assert clean["exercises"] == [{"name": "Bench", "sets": [{"reps": 10, "weight": 100, "completed": True}]}]

    with pytest.raises(EntryValidationError) as exc_info:
        validate_entry_value(gym_metrics, {"exercises": [{"sets": [{"reps": -1, "weight": "x"}]}]})
    assert _fields(exc_info) == {
        "exercises[0].name",
        "exercises[0].sets[0].reps",
        "exercises[0].sets[0].weight",
    }


def test_exercise_count_still_accepted():
    gym_metrics = [{"name": "exercises", "type": "counter", "required": False}]
    assert validate_entry_value(gym_metrics, {"exercises": 4}) == {"exercises": 4}


@pytest.mark.parametrize("raw", ["nan", "inf", "-inf", "1e999", float("nan"), float("inf")])
def test_non_finite_numbers_rejected(raw):
    with pytest.raises(EntryValidationError) as exc_info:
        validate_entry_value(RUN_METRICS, {"distance": raw, "duration": 30})
    assert exc_info.value.errors == [{"field": "distance", "message": "must be a number"}]


def test_non_finite_set_values_rejected():
    gym_metrics = [{"name": "exercises", "type": "counter", "required": False}]
    with pytest.raises(EntryValidationError) as exc_info:
        validate_entry_value(
            gym_metrics,
            {"exercises": [{"name": "Bench", "sets": [{"reps": "nan", "weight": "1e999"}]}]},
        )
    assert _fields(exc_info) == {"exercises[0].sets[0].reps", "exercises[0].sets[0].weight"}
