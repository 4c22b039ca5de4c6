# ===== atlas/tasks/appointment_tasks.py =====
import logging

from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError

from atlas.config.celery_config import celery_app
from atlas.config.database import SessionLocal
from atlas.models.appointment import Appointment
from atlas.schemas.task_payloads import AppointmentNotificationPayload, CompletionSweepResult
from atlas.services.scheduling.completion_sweep import complete_past_appointments as run_completion_sweep

logger = logging.getLogger(__name__)


@celery_app.task(bind=True, max_retries=3)
def send_appointment_notification(self, appointment_id: str, event_type: str):
    """
    Deliver an appointment event to the notification channel.

    Args:
        appointment_id: Appointment the event refers to
        event_type: new_appointment, appointment_confirmed, appointment_rescheduled,
            appointment_cancelled or appointment_completed
    """
    try:
        payload = AppointmentNotificationPayload(appointment_id=appointment_id, event_type=event_type)
    except ValidationError as e:
        logger.error(f"Rejected notification payload for {appointment_id}: {e}")
        return {"status": "failed", "reason": "invalid_payload"}

    db = SessionLocal()
    try:
        appointment = db.query(Appointment).filter_by(id=payload.appointment_id).first()
        if not appointment:
            logger.error(f"Appointment {appointment_id} not found")
            return {"status": "failed", "reason": "appointment_not_found"}

        # Email delivery lives outside this service; record the event for the mailer
        logger.info(
            f"Notification {payload.event_type} for appointment {appointment.id} "
            f"({appointment.appointment_date} {appointment.start_time:%H:%M}, status={appointment.status})"
        )
        return {"status": "success", "appointment_id": str(appointment.id), "event_type": payload.event_type}

    except SQLAlchemyError as exc:
        logger.error(f"Failed to load appointment {appointment_id} for notification: {exc}")

        # Retry with exponential backoff: 1min, 2min, 4min
        raise self.retry(
            exc=exc,
            countdown=60 * (2 ** self.request.retries)
        )
    finally:
        db.close()


@celery_app.task(bind=True, max_retries=3)
def complete_past_appointments(self):
    """Periodic sweep: mark finished pending/confirmed appointments as completed"""
    db = SessionLocal()
    try:
        changed = run_completion_sweep(db)
        return CompletionSweepResult(completed=changed).model_dump(mode="json")

    except SQLAlchemyError as exc:
        logger.error(f"Completion sweep failed: {exc}")
        raise self.retry(exc=exc, countdown=60 * (self.request.retries + 1))
    finally:
        db.close()
