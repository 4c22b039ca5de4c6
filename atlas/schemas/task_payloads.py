from __future__ import annotations
# atlas/schemas/task_payloads.py
from pydantic import BaseModel, Field
from typing import Literal
from datetime import datetime, timezone
from uuid import UUID

AppointmentEventType = Literal[
    "new_appointment",
    "appointment_confirmed",
    "appointment_rescheduled",
    "appointment_cancelled",
    "appointment_completed",
]


class AppointmentNotificationPayload(BaseModel):
    """Payload for appointment notification tasks"""
    appointment_id: UUID = Field(..., description="Appointment the event refers to")
    event_type: AppointmentEventType = Field(..., description="What happened to the appointment")
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class CompletionSweepResult(BaseModel):
    """Result of one completion sweep run"""
    status: Literal["success"] = "success"
    completed: int = Field(..., ge=0, description="Appointments moved to completed")
    ran_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
