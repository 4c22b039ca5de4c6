# atlas/models/__init__.py
from .base import Base
from .business import Business
from .special_hours import SpecialHours
from .service import Service
from .appointment import Appointment, AppointmentServiceLink, AppointmentStatus, ACTIVE_STATUSES
from .booking_day_lock import BookingDayLock

__all__ = [
    "Base",
    "Business",
    "SpecialHours",
    "Service",
    "Appointment",
    "AppointmentServiceLink",
    "AppointmentStatus",
    "ACTIVE_STATUSES",
    "BookingDayLock",
]
