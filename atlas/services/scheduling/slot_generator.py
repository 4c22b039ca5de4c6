# atlas/services/scheduling/slot_generator.py
"""
Slot generation - pure function of its inputs.

Given a resolved working window, the occupied intervals of that date and the
requested duration, walk the grid from opening time and keep every start
time whose whole [start, start + duration) range is free.
"""
from datetime import date, datetime, time
from typing import Iterable, List, Optional, Sequence, Tuple, Union

from atlas.core.exceptions import InvalidArgumentError
from atlas.services.scheduling.window import DaySchedule
from atlas.utils.time_utils import format_minutes, parse_date, to_minutes

ClockValue = Union[int, str, time]
Interval = Tuple[ClockValue, ClockValue]


def intervals_overlap(a_start: int, a_end: int, b_start: int, b_end: int) -> bool:
    """Half-open overlap test; empty intervals never overlap anything"""
    if a_end <= a_start or b_end <= b_start:
        return False
    return a_start < b_end and b_start < a_end


def _clock_minutes(value: ClockValue) -> int:
    if isinstance(value, bool):
        raise InvalidArgumentError(f"Invalid clock value: {value!r}")
    if isinstance(value, int):
        return value
    return to_minutes(value)


def normalize_intervals(intervals: Iterable[Interval]) -> List[Tuple[int, int]]:
    """Convert (start, end) pairs to sorted minute tuples, dropping empty ones"""
    result = []
    for start, end in intervals:
        start_m, end_m = _clock_minutes(start), _clock_minutes(end)
        if end_m > start_m:
            result.append((start_m, end_m))
    result.sort()
    return result


def _lead_cutoff_seconds(day: date, now: datetime, minimum_lead_minutes: int) -> Optional[int]:
    """Earliest allowed start (seconds since midnight of `day`), None when unrestricted.

    `now` must already be wall-clock time in the business timezone.
    """
    today = now.date()
    if day > today:
        return None
    if day < today:
        # Every start on a past date is in the past
        return 24 * 3600 + 1
    now_seconds = now.hour * 3600 + now.minute * 60 + now.second
    return now_seconds + minimum_lead_minutes * 60


def generate_slots(
        window: DaySchedule,
        day: Union[date, str],
        granularity_minutes: int,
        total_duration_minutes: int,
        occupied: Sequence[Interval],
        now: datetime,
        minimum_lead_minutes: int = 0,
        limit: Optional[int] = None,
        allowed_granularities: Optional[Iterable[int]] = None,
) -> List[str]:
    """
    Compute the bookable start times (HH:MM, ascending) for one date.

    Args:
        window: Effective working window from the opening-hours resolver
        day: The calendar date the window belongs to
        granularity_minutes: Step between consecutive candidate starts
        total_duration_minutes: Sum of the selected services' durations
        occupied: [start, end) ranges already held by pending/confirmed bookings
        now: Current instant, as wall-clock time in the business timezone
        minimum_lead_minutes: Buffer between now and the first bookable start today
        limit: Return at most this many slots (does not change which are valid)
        allowed_granularities: When given, granularity must be one of these

    Raises:
        InvalidArgumentError: On non-positive duration/granularity, negative
            lead or limit, or a granularity outside `allowed_granularities`
    """
    day = parse_date(day)

    if isinstance(total_duration_minutes, bool) or not isinstance(total_duration_minutes, int) \
            or total_duration_minutes <= 0:
        raise InvalidArgumentError(
            f"Duration must be a positive number of minutes, got {total_duration_minutes!r}"
        )
    if isinstance(granularity_minutes, bool) or not isinstance(granularity_minutes, int) \
            or granularity_minutes <= 0:
        raise InvalidArgumentError(f"Granularity must be positive, got {granularity_minutes!r}")
    if allowed_granularities is not None and granularity_minutes not in set(allowed_granularities):
        raise InvalidArgumentError(f"Unknown granularity: {granularity_minutes} minutes")
    if minimum_lead_minutes < 0:
        raise InvalidArgumentError("Minimum lead time cannot be negative")
    if limit is not None and limit < 0:
        raise InvalidArgumentError("Limit cannot be negative")

    if not window.is_open:
        return []

    blocked = [(b.start, b.end) for b in window.blocked_intervals()]
    blocked.extend(normalize_intervals(occupied))
    cutoff = _lead_cutoff_seconds(day, now, minimum_lead_minutes)

    slots: List[str] = []
    start = window.open_time
    while start < window.close_time:
        end = start + total_duration_minutes
        if end > window.close_time:
            # Later candidates end even later
            break

        if cutoff is not None and start * 60 < cutoff:
            start += granularity_minutes
            continue

        if not any(intervals_overlap(start, end, b_start, b_end) for b_start, b_end in blocked):
            slots.append(format_minutes(start))

        start += granularity_minutes

    if limit is not None:
        return slots[:limit]
    return slots


def fits_window(window: DaySchedule, start: int, end: int) -> bool:
    """True when [start, end) lies inside opening hours and clear of every break"""
    if not window.is_open or end <= start:
        return False
    if start < window.open_time or end > window.close_time:
        return False
    return not any(intervals_overlap(start, end, b.start, b.end) for b in window.breaks)
