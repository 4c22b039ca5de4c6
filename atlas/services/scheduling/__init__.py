# atlas/services/scheduling/__init__.py
from atlas.services.scheduling.window import BreakInterval, DaySchedule
from atlas.services.scheduling.opening_hours import resolve_working_window, resolve_from_records
from atlas.services.scheduling.slot_generator import generate_slots, intervals_overlap
from atlas.services.scheduling.booking_committer import (
    commit_booking,
    reschedule_booking,
    cancel_booking,
    confirm_booking,
    complete_booking,
    transition_status,
)
from atlas.services.scheduling.completion_sweep import complete_past_appointments

__all__ = [
    "BreakInterval",
    "DaySchedule",
    "resolve_working_window",
    "resolve_from_records",
    "generate_slots",
    "intervals_overlap",
    "commit_booking",
    "reschedule_booking",
    "cancel_booking",
    "confirm_booking",
    "complete_booking",
    "transition_status",
    "complete_past_appointments",
]
