"""
Tests for working-window resolution
"""
import uuid

import pytest

from atlas.core.exceptions import InvalidArgumentError, NotFoundError
from atlas.services.scheduling.opening_hours import resolve_from_records, resolve_working_window
from atlas.services.scheduling.window import DaySchedule

from tests.conftest import MONDAY, SUNDAY, add_override


def test_weekly_schedule_applies_without_override(db, business):
    window = resolve_working_window(db, business.id, MONDAY)

    assert window.is_open
    assert window.source == "weekly"
    assert window.to_dict() == {
        "isOpen": True,
        "openTime": "09:00",
        "closeTime": "18:00",
        "breaks": [{"start": "12:00", "end": "13:00"}],
        "source": "weekly",
    }


def test_closed_weekday(db, business):
    window = resolve_working_window(db, business.id, SUNDAY)
    assert window == DaySchedule.closed()


def test_closed_override_wins_over_open_weekday(db, business):
    add_override(db, business, MONDAY, is_closed=True, notes="Holiday")

    window = resolve_working_window(db, business.id, MONDAY)
    assert not window.is_open
    assert window.source == "override"


def test_open_override_is_never_blended_with_weekly_breaks(db, business):
    add_override(db, business, MONDAY, is_closed=False, open_time="10:00", close_time="14:00")

    window = resolve_working_window(db, business.id, MONDAY)
    assert (window.open_time, window.close_time) == (600, 840)
    assert window.breaks == ()
    assert window.source == "override"


def test_override_opens_a_normally_closed_day(db, business):
    add_override(
        db, business, SUNDAY,
        is_closed=False, open_time="08:00", close_time="12:00",
        breaks=[{"start": "10:00", "end": "10:15"}],
    )

    window = resolve_working_window(db, business.id, SUNDAY)
    assert window.is_open
    assert [b.to_dict() for b in window.breaks] == [{"start": "10:00", "end": "10:15"}]


def test_open_override_without_times_is_invalid(db, business):
    add_override(db, business, MONDAY, is_closed=False)
    with pytest.raises(InvalidArgumentError):
        resolve_working_window(db, business.id, MONDAY)


def test_legacy_weekly_shape():
    weekly = {
        "monday": {"open": "08:00", "close": "17:00", "closed": False},
        "tuesday": {"open": "08:00", "close": "17:00", "closed": True},
    }
    monday = resolve_from_records(weekly, None, MONDAY)
    assert (monday.open_time, monday.close_time) == (480, 1020)

    tuesday = resolve_from_records(weekly, None, MONDAY.replace(day=4))
    assert not tuesday.is_open


def test_missing_or_empty_weekly_schedule_means_closed():
    assert not resolve_from_records(None, None, MONDAY).is_open
    assert not resolve_from_records({}, None, MONDAY).is_open


def test_unrecognized_weekly_entry_is_invalid():
    with pytest.raises(InvalidArgumentError):
        resolve_from_records({"monday": {"from": "09:00"}}, None, MONDAY)


def test_unknown_business(db):
    with pytest.raises(NotFoundError):
        resolve_working_window(db, uuid.uuid4(), MONDAY)


def test_malformed_business_id_is_not_found(db):
    with pytest.raises(NotFoundError):
        resolve_working_window(db, "not-a-uuid", MONDAY)


def test_malformed_date(db, business):
    with pytest.raises(InvalidArgumentError):
        resolve_working_window(db, business.id, "2030-13-01")


def test_inactive_business_is_not_found(db, business):
    business.is_active = False
    db.commit()
    with pytest.raises(NotFoundError):
        resolve_working_window(db, business.id, MONDAY)
