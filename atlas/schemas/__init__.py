# atlas/schemas/__init__.py
from .task_payloads import (
    AppointmentEventType,
    AppointmentNotificationPayload,
    CompletionSweepResult
)

from .scheduling import (
    BreakIntervalSchema,
    DayScheduleSchema,
    WeeklyScheduleSchema,
    BookingCreateRequest,
    BusinessBookingCreateRequest,
    RescheduleRequest,
    CancelRequest,
    SlotsResponse,
    UpcomingSlot,
    UpcomingSlotsResponse,
    AppointmentResponse,
    SweepResponse
)
