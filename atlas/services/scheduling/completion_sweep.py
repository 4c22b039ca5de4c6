# atlas/services/scheduling/completion_sweep.py
"""Marks finished appointments as completed. Safe to run any number of times."""
from collections import defaultdict
from datetime import datetime, timedelta, timezone
from typing import List, Optional, Tuple
import logging

from sqlalchemy import and_, or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from atlas.models.appointment import ACTIVE_STATUSES, Appointment, AppointmentStatus
from atlas.models.business import Business
from atlas.utils.time_utils import local_now

logger = logging.getLogger(__name__)


def find_finished_appointments(db: Session, now: Optional[datetime] = None) -> List[Tuple]:
    """(id, appointment_date, end_time) of pending/confirmed appointments whose end
    has passed in their business timezone.

    A naive `now` is read as wall-clock time in each business's timezone.
    """
    if now is None:
        now = datetime.now(timezone.utc)

    # No timezone is more than a day ahead of UTC
    reference = now.date() if now.tzinfo is None else now.astimezone(timezone.utc).date()
    horizon = reference + timedelta(days=1)

    rows = db.query(
        Appointment.id,
        Appointment.appointment_date,
        Appointment.end_time,
        Business.timezone,
    ).join(Business, Business.id == Appointment.business_id).filter(
        Appointment.status.in_(ACTIVE_STATUSES),
        Appointment.appointment_date <= horizon,
    ).all()

    finished = []
    local_cache = {}
    for appointment_id, appointment_date, end_time, tz_name in rows:
        if tz_name not in local_cache:
            local_cache[tz_name] = local_now(tz_name, now)
        local = local_cache[tz_name]
        if (appointment_date, end_time) <= (local.date(), local.time()):
            finished.append((appointment_id, appointment_date, end_time))
    return finished


def complete_past_appointments(db: Session, now: Optional[datetime] = None) -> int:
    """
    Transition every finished pending/confirmed appointment to completed.

    The UPDATE matches each row on the date and end time that were judged
    finished, so an appointment rescheduled in the meantime is left alone.

    Returns:
        Number of appointments changed (0 when re-run)
    """
    try:
        finished = find_finished_appointments(db, now)
        if not finished:
            db.rollback()
            return 0

        by_slot = defaultdict(list)
        for appointment_id, appointment_date, end_time in finished:
            by_slot[(appointment_date, end_time)].append(appointment_id)

        changed = db.query(Appointment).filter(
            Appointment.status.in_(ACTIVE_STATUSES),
            or_(*[
                and_(
                    Appointment.id.in_(ids),
                    Appointment.appointment_date == appointment_date,
                    Appointment.end_time == end_time,
                )
                for (appointment_date, end_time), ids in by_slot.items()
            ]),
        ).update({Appointment.status: AppointmentStatus.COMPLETED.value}, synchronize_session=False)
        db.commit()

    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Completion sweep failed: {e}")
        raise

    if changed < len(finished):
        logger.info(f"Completion sweep skipped {len(finished) - changed} appointment(s) changed mid-sweep")
    logger.info(f"Completion sweep marked {changed} appointment(s) completed")
    return changed
