"""
Tests for clock-time helpers
"""
from datetime import date, datetime, time, timezone

import pytest

from atlas.core.exceptions import InvalidArgumentError
from atlas.utils.time_utils import (
    format_minutes,
    local_now,
    minutes_to_time,
    parse_date,
    to_minutes,
    weekday_name,
)


def test_to_minutes_accepts_common_shapes():
    assert to_minutes("09:00") == 540
    assert to_minutes("9:30") == 570
    assert to_minutes("17:45:00") == 1065
    assert to_minutes(time(12, 15)) == 735


@pytest.mark.parametrize("value", ["24:00", "12:60", "noon", "", None, 540])
def test_to_minutes_rejects_malformed_values(value):
    with pytest.raises(InvalidArgumentError):
        to_minutes(value)


def test_format_and_time_conversion():
    assert format_minutes(0) == "00:00"
    assert format_minutes(1065) == "17:45"
    assert minutes_to_time(1439) == time(23, 59)
    with pytest.raises(InvalidArgumentError):
        minutes_to_time(1440)


def test_parse_date():
    assert parse_date("2030-06-03") == date(2030, 6, 3)
    assert parse_date(datetime(2030, 6, 3, 10, 0)) == date(2030, 6, 3)
    with pytest.raises(InvalidArgumentError):
        parse_date("03/06/2030")


def test_weekday_name_uses_sunday_first_index():
    assert weekday_name(date(2030, 6, 3)) == "monday"
    assert weekday_name(date(2030, 6, 9)) == "sunday"


def test_local_now_treats_naive_values_as_wall_clock():
    naive = datetime(2030, 6, 3, 8, 0)
    local = local_now("America/Sao_Paulo", naive)
    assert (local.hour, local.minute) == (8, 0)


def test_local_now_converts_aware_values():
    # Sao Paulo is UTC-3
    aware = datetime(2030, 6, 3, 2, 0, tzinfo=timezone.utc)
    local = local_now("America/Sao_Paulo", aware)
    assert local.date() == date(2030, 6, 2)
    assert local.hour == 23


def test_unknown_timezone_is_rejected():
    with pytest.raises(InvalidArgumentError):
        local_now("Mars/Olympus_Mons")
