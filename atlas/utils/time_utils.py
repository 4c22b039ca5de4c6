# atlas/utils/time_utils.py
"""Clock-time helpers: HH:MM parsing, minute arithmetic and business-local dates"""
import re
from datetime import date, datetime, time, timezone
from typing import Optional, Union
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from atlas.core.exceptions import InvalidArgumentError

MINUTES_PER_DAY = 24 * 60

# Index matches date.isoweekday() % 7 (0 = Sunday)
WEEKDAY_NAMES = ("sunday", "monday", "tuesday", "wednesday", "thursday", "friday", "saturday")

_HHMM_RE = re.compile(r"^(\d{1,2}):(\d{2})(?::(\d{2}))?$")

TimeLike = Union[str, time]
DateLike = Union[str, date]


def to_minutes(value: TimeLike) -> int:
    """Convert 'HH:MM' (or 'HH:MM:SS', or a time) to minutes since midnight"""
    if isinstance(value, time):
        return value.hour * 60 + value.minute

    if not isinstance(value, str):
        raise InvalidArgumentError(f"Invalid time value: {value!r}")

    match = _HHMM_RE.match(value.strip())
    if not match:
        raise InvalidArgumentError(f"Invalid time format (expected HH:MM): {value!r}")

    hours, minutes = int(match.group(1)), int(match.group(2))
    if hours > 23 or minutes > 59:
        raise InvalidArgumentError(f"Time out of range: {value!r}")
    return hours * 60 + minutes


def format_minutes(minutes: int) -> str:
    """Render minutes since midnight as HH:MM"""
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def minutes_to_time(minutes: int) -> time:
    if minutes < 0 or minutes >= MINUTES_PER_DAY:
        raise InvalidArgumentError(f"Minute offset outside a single day: {minutes}")
    return time(minutes // 60, minutes % 60)


def parse_date(value: DateLike) -> date:
    """Accept a date or a YYYY-MM-DD string"""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value.strip())
        except ValueError:
            raise InvalidArgumentError(f"Invalid date (expected YYYY-MM-DD): {value!r}")
    raise InvalidArgumentError(f"Invalid date value: {value!r}")


def weekday_name(day: date) -> str:
    return WEEKDAY_NAMES[day.isoweekday() % 7]


def get_zone(tz_name: Optional[str]) -> ZoneInfo:
    from atlas.config.settings import get_settings

    name = tz_name or get_settings().DEFAULT_TIMEZONE
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        raise InvalidArgumentError(f"Unknown timezone: {name!r}")


def local_now(tz_name: Optional[str] = None, now: Optional[datetime] = None) -> datetime:
    """Current instant (or `now`) expressed in the business timezone.

    A naive `now` is already wall-clock time in that timezone.
    """
    zone = get_zone(tz_name)
    if now is None:
        return datetime.now(timezone.utc).astimezone(zone)
    if now.tzinfo is None:
        return now.replace(tzinfo=zone)
    return now.astimezone(zone)
