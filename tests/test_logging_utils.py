import logging

from habitlog.logging_utils import ShortenArgsFilter, shorten_text


def test_shorten_text():
    assert shorten_text("short") == "short"
    long = "x" * 200
    assert shorten_text(long) == "x" * 77 + "..."


def test_filter_shortens_string_args_only():
    record = logging.LogRecord("habitlog", logging.INFO, __file__, 1, "notes=%s id=%s", ("y" * 200, 7), None)
    assert ShortenArgsFilter().filter(record) is True
    assert record.args == ("y" * 77 + "...", 7)
    assert record.getMessage().endswith("... id=7")


def test_entry_notes_log_is_shortened(caplog, SessionLocal, demo_user_id):
    import datetime as dt

    from habitlog import crud
    from habitlog.schemas.habits import HabitCreate
    from habitlog.services.progress import log_entry

    notes = "felt great " * 30
    with SessionLocal() as db:
        habit = crud.create_habit(db, demo_user_id, HabitCreate(title="Journal"))
        with caplog.at_level(logging.DEBUG, logger="habitlog.progress"):
            log_entry(db, demo_user_id, habit, dt.date(2024, 1, 1), value={}, notes=notes)

    records = [r for r in caplog.records if r.getMessage().startswith("Entry notes")]
    assert len(records) == 1
    ShortenArgsFilter().filter(records[0])
    message = records[0].getMessage()
    assert notes not in message
    assert message.endswith("...")
