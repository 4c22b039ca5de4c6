# atlas/services/notification/notification_service.py
"""Hands appointment events to the notification worker after a commit"""
from typing import Union
from uuid import UUID
import enum
import logging

logger = logging.getLogger(__name__)


class AppointmentEvent(str, enum.Enum):
    NEW = "new_appointment"
    CONFIRMED = "appointment_confirmed"
    RESCHEDULED = "appointment_rescheduled"
    CANCELLED = "appointment_cancelled"
    COMPLETED = "appointment_completed"


class NotificationService:
    """Fire-and-forget dispatch; the booking never waits on delivery"""

    @staticmethod
    def dispatch_appointment_event(
            appointment_id: Union[UUID, str],
            event_type: Union[AppointmentEvent, str]
    ) -> bool:
        """
        Queue a notification task for an appointment event.

        Returns:
            True if the task was queued, False if the broker refused it
        """
        from atlas.tasks.appointment_tasks import send_appointment_notification

        event = AppointmentEvent(event_type)
        try:
            send_appointment_notification.delay(str(appointment_id), event.value)
        except Exception as e:
            # The appointment is already committed; a broker outage only loses the email
            logger.error(f"Failed to queue {event.value} notification for appointment {appointment_id}: {e}")
            return False

        logger.info(f"Queued {event.value} notification for appointment {appointment_id}")
        return True
