from datetime import datetime, timedelta, timezone

import pytest

from core.session import next_local_midnight, start_session

SGT = timezone(timedelta(hours=8))


def test_expires_at_next_local_midnight():
    now = datetime(2026, 10, 19, 1, 0, tzinfo=timezone.utc)  # 09:00 local
    session = start_session(" PDD ", "AM", "S01 Alex", now=now, tz=SGT)

    assert session.store == "PDD"
    assert session.started_at == now
    assert session.expires_at == datetime(2026, 10, 19, 16, 0, tzinfo=timezone.utc)
    assert session.is_active(now)


def test_session_started_just_before_midnight():
    now = datetime(2026, 10, 19, 15, 59, tzinfo=timezone.utc)  # 23:59 local
    session = start_session("PDD", "PM", "S02", now=now, tz=SGT)

    assert session.expires_at - now == timedelta(minutes=1)
    assert not session.is_active(now + timedelta(minutes=1))


def test_next_local_midnight_in_utc():
    now = datetime(2026, 10, 19, 23, 30, tzinfo=timezone.utc)
    assert next_local_midnight(now, timezone.utc) == datetime(2026, 10, 20, tzinfo=timezone.utc)


@pytest.mark.parametrize("field", ["store", "shift", "staff"])
def test_required_fields(field):
    values = {"store": "PDD", "shift": "AM", "staff": "S01"}
    values[field] = "  "
    with pytest.raises(ValueError, match=f"{field} is required"):
        start_session(**values)


def test_is_active_accepts_naive_utc():
    now = datetime(2026, 10, 19, 1, 0, tzinfo=timezone.utc)
    session = start_session("PDD", "AM", "S01", now=now, tz=SGT)

    assert session.is_active(datetime(2026, 10, 19, 15, 59))
    assert not session.is_active(datetime(2026, 10, 19, 16, 0))
