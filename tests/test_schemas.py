"""
Tests for request and schedule schemas
"""
from datetime import date
import uuid

import pytest
from pydantic import ValidationError

from atlas.schemas.scheduling import BookingCreateRequest, DayScheduleSchema, WeeklyScheduleSchema
from atlas.services.scheduling.opening_hours import resolve_from_records


def test_weekly_schedule_storage_shape_round_trips_through_resolver():
    schedule = WeeklyScheduleSchema(
        monday={"isOpen": True, "openTime": "09:00", "closeTime": "18:00",
                "breaks": [{"start": "12:00", "end": "13:00"}]},
    )
    stored = schedule.to_storage()

    assert set(stored) == {"sunday", "monday", "tuesday", "wednesday", "thursday", "friday", "saturday"}
    assert stored["tuesday"]["isOpen"] is False

    window = resolve_from_records(stored, None, date(2030, 6, 3))
    assert (window.open_time, window.close_time) == (540, 1080)
    assert len(window.breaks) == 1


def test_day_schedule_accepts_field_names_too():
    day = DayScheduleSchema(is_open=True, open_time="08:00", close_time="12:00")
    assert day.model_dump(by_alias=True)["openTime"] == "08:00"


@pytest.mark.parametrize("bad", ["8:00", "24:00", "09:60", "0900"])
def test_schedule_times_must_be_hhmm(bad):
    with pytest.raises(ValidationError):
        DayScheduleSchema(isOpen=True, openTime=bad, closeTime="18:00")


def test_booking_request_requires_a_service():
    with pytest.raises(ValidationError):
        BookingCreateRequest(client_id=uuid.uuid4(), date="2030-06-03", start_time="10:00", service_ids=[])
