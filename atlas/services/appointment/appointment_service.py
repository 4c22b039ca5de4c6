# ============================================================================
# atlas/services/appointment/appointment_service.py
# ============================================================================
"""Booking flows shared by the public page, the business dashboard and the reschedule dialog"""
from datetime import date, time
from typing import Optional, Sequence, Union
from uuid import UUID

from sqlalchemy.orm import Session

from atlas.models.appointment import Appointment, AppointmentStatus
from atlas.services.notification.notification_service import AppointmentEvent, NotificationService
from atlas.services.scheduling import booking_committer

IdLike = Union[UUID, str]


class AppointmentService:
    """Commits through the booking committer, then queues the matching notification"""

    @staticmethod
    def book(
            db: Session,
            business_id: IdLike,
            appointment_date: Union[date, str],
            start_time: Union[time, str],
            service_ids: Sequence[IdLike],
            client_id: IdLike,
            notes: Optional[str] = None,
            auto_confirm: Optional[bool] = None,
            used_loyalty_redemption: bool = False,
            enforce_working_hours: bool = True
    ) -> Appointment:
        """Create an appointment (client or business initiated)"""
        appointment = booking_committer.commit_booking(
            db,
            business_id=business_id,
            day=appointment_date,
            start_time=start_time,
            service_ids=service_ids,
            client_id=client_id,
            notes=notes,
            auto_confirm=auto_confirm,
            used_loyalty_redemption=used_loyalty_redemption,
            enforce_working_hours=enforce_working_hours,
        )
        NotificationService.dispatch_appointment_event(appointment.id, AppointmentEvent.NEW)
        return appointment

    @staticmethod
    def reschedule(
            db: Session,
            appointment_id: IdLike,
            appointment_date: Union[date, str],
            start_time: Union[time, str],
            service_ids: Optional[Sequence[IdLike]] = None,
            enforce_working_hours: bool = True
    ) -> Appointment:
        appointment = booking_committer.reschedule_booking(
            db,
            appointment_id=appointment_id,
            new_day=appointment_date,
            new_start_time=start_time,
            service_ids=service_ids,
            enforce_working_hours=enforce_working_hours,
        )
        NotificationService.dispatch_appointment_event(appointment.id, AppointmentEvent.RESCHEDULED)
        return appointment

    @staticmethod
    def _change_status(
            db: Session,
            appointment_id: IdLike,
            target: AppointmentStatus,
            event: AppointmentEvent,
            reason: Optional[str] = None
    ) -> Appointment:
        appointment, changed = booking_committer.transition_status(db, appointment_id, target, reason)
        # Repeated requests are no-ops and must not notify again
        if changed:
            NotificationService.dispatch_appointment_event(appointment.id, event)
        return appointment

    @staticmethod
    def confirm(db: Session, appointment_id: IdLike) -> Appointment:
        return AppointmentService._change_status(
            db, appointment_id, AppointmentStatus.CONFIRMED, AppointmentEvent.CONFIRMED
        )

    @staticmethod
    def cancel(db: Session, appointment_id: IdLike, reason: Optional[str] = None) -> Appointment:
        return AppointmentService._change_status(
            db, appointment_id, AppointmentStatus.CANCELLED, AppointmentEvent.CANCELLED, reason
        )

    @staticmethod
    def complete(db: Session, appointment_id: IdLike) -> Appointment:
        return AppointmentService._change_status(
            db, appointment_id, AppointmentStatus.COMPLETED, AppointmentEvent.COMPLETED
        )
