# atlas/services/scheduling/booking_committer.py
"""
Booking commit - the only code path that writes appointment slots.

Every write runs as one transaction:
    lock (business, date) -> re-check overlap -> insert/update -> commit

The lock is the BookingDayLock row for the target day. Competing commits for
the same day queue on it inside the database, so the overlap check always
sees the winner's row and the loser gets ConflictError. Nothing here retries.
"""
from datetime import date, datetime, time, timezone
from typing import Iterable, List, Optional, Sequence, Tuple, Union
from uuid import UUID
import logging

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from atlas.core.exceptions import ConflictError, InvalidArgumentError, NotFoundError
from atlas.models.appointment import (
    ACTIVE_STATUSES,
    Appointment,
    AppointmentServiceLink,
    AppointmentStatus,
)
from atlas.models.booking_day_lock import BookingDayLock
from atlas.models.service import Service
from atlas.services.scheduling.opening_hours import get_business, resolve_working_window
from atlas.services.scheduling.slot_generator import fits_window
from atlas.utils.ids import as_uuid
from atlas.utils.time_utils import MINUTES_PER_DAY, minutes_to_time, parse_date, to_minutes

logger = logging.getLogger(__name__)

IdLike = Union[UUID, str]


# ============================================================================
# Helpers
# ============================================================================

def load_active_services(db: Session, business_id: UUID, service_ids: Sequence[IdLike]) -> List[Service]:
    """Load the selected services in request order; duplicates count once.

    Raises:
        InvalidArgumentError: Empty selection
        NotFoundError: Unknown, foreign or inactive service
    """
    ordered: List[UUID] = []
    for raw in service_ids or ():
        service_id = as_uuid(raw, "Service")
        if service_id not in ordered:
            ordered.append(service_id)

    if not ordered:
        raise InvalidArgumentError("At least one service must be selected")

    rows = db.query(Service).filter(
        Service.id.in_(ordered),
        Service.business_id == business_id,
        Service.is_active.is_(True),
    ).all()
    by_id = {service.id: service for service in rows}

    missing = [str(sid) for sid in ordered if sid not in by_id]
    if missing:
        raise NotFoundError(
            f"Service(s) not found or inactive: {', '.join(missing)}",
            {"service_ids": missing, "business_id": str(business_id)},
        )
    return [by_id[sid] for sid in ordered]


def compute_end_minutes(start_minutes: int, services: Iterable[Service]) -> int:
    total = sum(service.duration_minutes or 0 for service in services)
    if total <= 0:
        raise InvalidArgumentError("Selected services must add up to a positive duration")

    end = start_minutes + total
    if end >= MINUTES_PER_DAY:
        raise InvalidArgumentError("Appointment cannot run past midnight")
    return end


def acquire_day_lock(db: Session, business_id: UUID, day: date) -> None:
    """Take the write lock for one business calendar day until commit/rollback"""
    touched = db.query(BookingDayLock).filter(
        BookingDayLock.business_id == business_id,
        BookingDayLock.lock_date == day,
    ).update({BookingDayLock.version: BookingDayLock.version + 1}, synchronize_session=False)

    if touched:
        return

    try:
        with db.begin_nested():
            db.add(BookingDayLock(business_id=business_id, lock_date=day, version=1))
            db.flush()
    except IntegrityError:
        # Another transaction created the row first; queue behind it
        db.query(BookingDayLock).filter(
            BookingDayLock.business_id == business_id,
            BookingDayLock.lock_date == day,
        ).update({BookingDayLock.version: BookingDayLock.version + 1}, synchronize_session=False)


def find_overlapping(
        db: Session,
        business_id: UUID,
        day: date,
        start: time,
        end: time,
        exclude_appointment_id: Optional[UUID] = None,
) -> Optional[Appointment]:
    query = db.query(Appointment).filter(
        Appointment.business_id == business_id,
        Appointment.appointment_date == day,
        Appointment.status.in_(ACTIVE_STATUSES),
        Appointment.start_time < end,
        Appointment.end_time > start,
    )
    if exclude_appointment_id is not None:
        query = query.filter(Appointment.id != exclude_appointment_id)
    return query.first()


def _check_working_hours(db: Session, business_id: UUID, day: date, start_m: int, end_m: int) -> None:
    window = resolve_working_window(db, business_id, day)
    if not fits_window(window, start_m, end_m):
        raise ConflictError(
            "Requested time is outside working hours",
            business_id=business_id,
            day=day,
            start_time=minutes_to_time(start_m),
            end_time=minutes_to_time(end_m),
        )


def _get_appointment_for_update(db: Session, appointment_id: IdLike) -> Appointment:
    appointment = db.query(Appointment).filter(
        Appointment.id == as_uuid(appointment_id, "Appointment")
    ).with_for_update().first()
    if not appointment:
        raise NotFoundError(f"Appointment {appointment_id} not found", {"appointment_id": str(appointment_id)})
    return appointment


# ============================================================================
# Operations
# ============================================================================

def commit_booking(
        db: Session,
        business_id: IdLike,
        day: Union[date, str],
        start_time: Union[time, str],
        service_ids: Sequence[IdLike],
        client_id: IdLike,
        notes: Optional[str] = None,
        auto_confirm: Optional[bool] = None,
        used_loyalty_redemption: bool = False,
        enforce_working_hours: bool = False,
) -> Appointment:
    """
    Atomically check a slot and reserve it.

    Args:
        auto_confirm: None uses the business's auto-confirm setting
        enforce_working_hours: Also reject slots outside the resolved window

    Returns:
        The created appointment, end_time resolved

    Raises:
        ConflictError: The range overlaps a pending/confirmed appointment
        InvalidArgumentError / NotFoundError: Bad input
        SQLAlchemyError: Infrastructure failure, surfaced unchanged
    """
    day = parse_date(day)
    start_m = to_minutes(start_time)
    client_uuid = as_uuid(client_id, "Client")

    try:
        business = get_business(db, business_id)
        services = load_active_services(db, business.id, service_ids)
        end_m = compute_end_minutes(start_m, services)
        start_t, end_t = minutes_to_time(start_m), minutes_to_time(end_m)

        acquire_day_lock(db, business.id, day)

        if enforce_working_hours:
            _check_working_hours(db, business.id, day, start_m, end_m)

        clash = find_overlapping(db, business.id, day, start_t, end_t)
        if clash is not None:
            raise ConflictError(business_id=business.id, day=day, start_time=start_t, end_time=end_t)

        confirm = business.auto_confirm_appointments if auto_confirm is None else auto_confirm
        appointment = Appointment(
            business_id=business.id,
            client_id=client_uuid,
            service_id=services[0].id,
            appointment_date=day,
            start_time=start_t,
            end_time=end_t,
            notes=notes,
            status=(AppointmentStatus.CONFIRMED if confirm else AppointmentStatus.PENDING).value,
            used_loyalty_redemption=used_loyalty_redemption,
        )
        appointment.service_links = [
            AppointmentServiceLink(service_id=service.id, position=index)
            for index, service in enumerate(services)
        ]
        db.add(appointment)
        db.commit()

    except ConflictError:
        db.rollback()
        logger.info(f"Slot conflict for business {business_id} on {day} at {start_time}")
        raise
    except (InvalidArgumentError, NotFoundError):
        db.rollback()
        raise
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Booking commit failed for business {business_id} on {day}: {e}")
        raise

    logger.info(
        f"Booked appointment {appointment.id} for business {appointment.business_id} "
        f"on {day} {start_t:%H:%M}-{end_t:%H:%M} ({appointment.status})"
    )
    return appointment


def reschedule_booking(
        db: Session,
        appointment_id: IdLike,
        new_day: Union[date, str],
        new_start_time: Union[time, str],
        service_ids: Optional[Sequence[IdLike]] = None,
        enforce_working_hours: bool = False,
) -> Appointment:
    """
    Move an appointment to a new date/time (and optionally a new service set).

    The original slot is released in the same transaction that claims the new
    one; on ConflictError nothing changes.
    """
    new_day = parse_date(new_day)
    start_m = to_minutes(new_start_time)

    try:
        appointment = _get_appointment_for_update(db, appointment_id)
        if not appointment.is_active:
            raise InvalidArgumentError(
                f"Cannot reschedule a {appointment.status} appointment",
                {"appointment_id": str(appointment.id), "status": appointment.status},
            )

        selected = list(service_ids) if service_ids else appointment.service_ids
        if not selected and appointment.service_id:
            selected = [appointment.service_id]
        services = load_active_services(db, appointment.business_id, selected)
        end_m = compute_end_minutes(start_m, services)
        start_t, end_t = minutes_to_time(start_m), minutes_to_time(end_m)

        acquire_day_lock(db, appointment.business_id, new_day)

        if enforce_working_hours:
            _check_working_hours(db, appointment.business_id, new_day, start_m, end_m)

        clash = find_overlapping(
            db, appointment.business_id, new_day, start_t, end_t,
            exclude_appointment_id=appointment.id,
        )
        if clash is not None:
            raise ConflictError(
                business_id=appointment.business_id, day=new_day, start_time=start_t, end_time=end_t
            )

        previous = (appointment.appointment_date, appointment.start_time)
        appointment.appointment_date = new_day
        appointment.start_time = start_t
        appointment.end_time = end_t
        appointment.service_id = services[0].id

        appointment.service_links.clear()
        db.flush()
        appointment.service_links.extend(
            AppointmentServiceLink(service_id=service.id, position=index)
            for index, service in enumerate(services)
        )
        db.commit()

    except ConflictError:
        db.rollback()
        logger.info(f"Reschedule conflict for appointment {appointment_id} -> {new_day} {new_start_time}")
        raise
    except (InvalidArgumentError, NotFoundError):
        db.rollback()
        raise
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Reschedule failed for appointment {appointment_id}: {e}")
        raise

    logger.info(
        f"Rescheduled appointment {appointment.id} from {previous[0]} {previous[1]:%H:%M} "
        f"to {new_day} {start_t:%H:%M}-{end_t:%H:%M}"
    )
    return appointment


# Allowed source statuses per target; the target itself is an idempotent no-op
_TRANSITIONS = {
    AppointmentStatus.CONFIRMED: (AppointmentStatus.PENDING,),
    AppointmentStatus.CANCELLED: (AppointmentStatus.PENDING, AppointmentStatus.CONFIRMED),
    AppointmentStatus.COMPLETED: (AppointmentStatus.PENDING, AppointmentStatus.CONFIRMED),
}


def transition_status(
        db: Session,
        appointment_id: IdLike,
        target: AppointmentStatus,
        reason: Optional[str] = None,
) -> Tuple[Appointment, bool]:
    """
    Move an appointment to `target` under its row lock.

    Returns:
        (appointment, changed); changed is False when it already had `target`

    Raises:
        InvalidArgumentError: The current status cannot move to `target`
        NotFoundError: Unknown appointment
    """
    target = AppointmentStatus(target)
    try:
        appointment = _get_appointment_for_update(db, appointment_id)

        if appointment.status == target.value:
            db.rollback()
            return appointment, False
        if appointment.status not in {s.value for s in _TRANSITIONS[target]}:
            raise InvalidArgumentError(
                f"Cannot move a {appointment.status} appointment to {target.value}",
                {"appointment_id": str(appointment.id), "status": appointment.status},
            )

        appointment.status = target.value
        if target == AppointmentStatus.CANCELLED:
            appointment.cancelled_at = datetime.now(timezone.utc)
            appointment.cancellation_reason = reason
        db.commit()

    except (InvalidArgumentError, NotFoundError):
        db.rollback()
        raise
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Status change to {target.value} failed for appointment {appointment_id}: {e}")
        raise

    logger.info(f"Appointment {appointment.id} is now {target.value}")
    return appointment, True


def cancel_booking(db: Session, appointment_id: IdLike, reason: Optional[str] = None) -> Appointment:
    """Release an appointment's slot; cancelling twice is a no-op"""
    return transition_status(db, appointment_id, AppointmentStatus.CANCELLED, reason)[0]


def confirm_booking(db: Session, appointment_id: IdLike) -> Appointment:
    """pending -> confirmed; confirming twice is a no-op"""
    return transition_status(db, appointment_id, AppointmentStatus.CONFIRMED)[0]


def complete_booking(db: Session, appointment_id: IdLike) -> Appointment:
    """Business marks an appointment as done; completing twice is a no-op"""
    return transition_status(db, appointment_id, AppointmentStatus.COMPLETED)[0]
