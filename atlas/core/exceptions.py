# atlas/core/exceptions.py
"""Error taxonomy of the scheduling core.

Infrastructure failures are not wrapped: SQLAlchemy errors propagate as-is so
callers can tell "slot taken" (ConflictError) apart from "something broke".
"""
from datetime import date, time
from typing import Any, Dict, Optional


class SchedulingError(Exception):
    """Base class for scheduling errors"""

    error_code = "scheduling_error"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.error_code, "message": self.message, "details": self.details}


class InvalidArgumentError(SchedulingError):
    """Caller bug: malformed date/time, non-positive duration, unknown granularity"""

    error_code = "invalid_argument"


class NotFoundError(SchedulingError):
    """Unknown business, service or appointment"""

    error_code = "not_found"


class ConflictError(SchedulingError):
    """The requested slot is no longer available; refresh slots and re-select"""

    error_code = "slot_unavailable"

    def __init__(
            self,
            message: str = "Time slot is no longer available",
            business_id: Any = None,
            day: Optional[date] = None,
            start_time: Optional[time] = None,
            end_time: Optional[time] = None,
    ):
        details = {
            "business_id": str(business_id) if business_id else None,
            "date": day.isoformat() if day else None,
            "start_time": start_time.strftime("%H:%M") if start_time else None,
            "end_time": end_time.strftime("%H:%M") if end_time else None,
        }
        super().__init__(message, details)
        self.business_id = business_id
        self.day = day
        self.start_time = start_time
        self.end_time = end_time
