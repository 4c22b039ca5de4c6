"""
Pydantic schemas for scheduling requests, responses and stored schedules
"""
from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Optional, Dict, List
from datetime import date
from uuid import UUID
import re

HHMM_PATTERN = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")


def _check_hhmm(value: Optional[str]) -> Optional[str]:
    if value is None:
        return value
    if not HHMM_PATTERN.match(value):
        raise ValueError("Time must be in HH:MM format")
    return value


# ============================================================================
# Stored schedule shapes (businesses.opening_hours, special hours)
# ============================================================================

class BreakIntervalSchema(BaseModel):
    """A break inside a working day, [start, end)"""
    start: str
    end: str

    @field_validator("start", "end")
    @classmethod
    def validate_times(cls, v):
        return _check_hhmm(v)


class DayScheduleSchema(BaseModel):
    """One weekday entry of the weekly schedule"""
    model_config = ConfigDict(populate_by_name=True)

    is_open: bool = Field(False, alias="isOpen")
    open_time: Optional[str] = Field(None, alias="openTime")
    close_time: Optional[str] = Field(None, alias="closeTime")
    breaks: List[BreakIntervalSchema] = Field(default_factory=list)

    @field_validator("open_time", "close_time")
    @classmethod
    def validate_times(cls, v):
        return _check_hhmm(v)


class WeeklyScheduleSchema(BaseModel):
    """Weekday name -> day schedule; a missing day is closed"""
    sunday: Optional[DayScheduleSchema] = None
    monday: Optional[DayScheduleSchema] = None
    tuesday: Optional[DayScheduleSchema] = None
    wednesday: Optional[DayScheduleSchema] = None
    thursday: Optional[DayScheduleSchema] = None
    friday: Optional[DayScheduleSchema] = None
    saturday: Optional[DayScheduleSchema] = None

    def to_storage(self) -> Dict[str, Dict]:
        """Always seven keys, in the camelCase shape the resolver reads"""
        stored = {}
        for day_name in ("sunday", "monday", "tuesday", "wednesday", "thursday", "friday", "saturday"):
            entry = getattr(self, day_name) or DayScheduleSchema()
            stored[day_name] = entry.model_dump(by_alias=True)
        return stored


# ============================================================================
# Request Schemas
# ============================================================================

class BookingCreateRequest(BaseModel):
    """Client or business-initiated booking"""
    client_id: UUID
    date: date
    start_time: str = Field(..., description="HH:MM")
    service_ids: List[UUID] = Field(..., min_length=1)
    notes: Optional[str] = Field(None, max_length=2000)
    used_loyalty_redemption: bool = False

    @field_validator("start_time")
    @classmethod
    def validate_start_time(cls, v):
        return _check_hhmm(v)


class BusinessBookingCreateRequest(BookingCreateRequest):
    """Business-initiated booking may bypass opening hours and pick the status"""
    auto_confirm: Optional[bool] = None
    enforce_working_hours: bool = False


class RescheduleRequest(BaseModel):
    date: date
    start_time: str = Field(..., description="HH:MM")
    service_ids: Optional[List[UUID]] = None
    enforce_working_hours: bool = True

    @field_validator("start_time")
    @classmethod
    def validate_start_time(cls, v):
        return _check_hhmm(v)


class CancelRequest(BaseModel):
    reason: Optional[str] = Field(None, max_length=1000)


# ============================================================================
# Response Schemas
# ============================================================================

class SlotsResponse(BaseModel):
    business_id: UUID
    date: date
    duration_minutes: int
    granularity_minutes: int
    slots: List[str]


class UpcomingSlot(BaseModel):
    date: date
    time: str
    display_date: str
    display_time: str


class UpcomingSlotsResponse(BaseModel):
    business_id: UUID
    slots: List[UpcomingSlot]


class AppointmentResponse(BaseModel):
    id: UUID
    business_id: UUID
    client_id: UUID
    service_ids: List[UUID]
    date: date
    start_time: str
    end_time: str
    status: str
    notes: Optional[str] = None
    used_loyalty_redemption: bool = False

    @classmethod
    def from_model(cls, appointment) -> "AppointmentResponse":
        return cls(
            id=appointment.id,
            business_id=appointment.business_id,
            client_id=appointment.client_id,
            service_ids=appointment.service_ids,
            date=appointment.appointment_date,
            start_time=appointment.start_time.strftime("%H:%M"),
            end_time=appointment.end_time.strftime("%H:%M"),
            status=appointment.status,
            notes=appointment.notes,
            used_loyalty_redemption=appointment.used_loyalty_redemption,
        )


class SweepResponse(BaseModel):
    completed: int
