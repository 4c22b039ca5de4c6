# ===== atlas/services/availability/availability_service.py =====
from typing import List, Dict, Optional, Sequence, Tuple, Union
from datetime import date, datetime, time, timedelta
from uuid import UUID
from sqlalchemy.orm import Session
from atlas.config.settings import get_settings
from atlas.core.exceptions import InvalidArgumentError
from atlas.models.appointment import Appointment, ACTIVE_STATUSES
from atlas.services.scheduling.booking_committer import load_active_services
from atlas.services.scheduling.opening_hours import (
    get_business,
    load_overrides,
    resolve_from_records,
    resolve_working_window,
)
from atlas.services.scheduling.slot_generator import generate_slots
from atlas.utils.ids import as_uuid
from atlas.utils.time_utils import local_now, parse_date
import logging

logger = logging.getLogger(__name__)


class AvailabilityService:
    """Single entry point for every screen that lists bookable times"""

    @staticmethod
    def total_duration(
            db: Session,
            business_id: Union[UUID, str],
            service_ids: Sequence[Union[UUID, str]]
    ) -> int:
        """Sum of the selected active services' durations"""
        business = get_business(db, business_id)
        services = load_active_services(db, business.id, service_ids)
        return sum(service.duration_minutes for service in services)

    @staticmethod
    def get_occupied_intervals(
            db: Session,
            business_id: Union[UUID, str],
            day: Union[date, str],
            exclude_appointment_id: Optional[Union[UUID, str]] = None
    ) -> List[Tuple[time, time]]:
        """[start, end) ranges held by pending/confirmed appointments on a date"""
        query = db.query(Appointment.start_time, Appointment.end_time).filter(
            Appointment.business_id == as_uuid(business_id, "Business"),
            Appointment.appointment_date == parse_date(day),
            Appointment.status.in_(ACTIVE_STATUSES)
        )
        if exclude_appointment_id is not None:
            query = query.filter(Appointment.id != as_uuid(exclude_appointment_id, "Appointment"))

        return [(row.start_time, row.end_time) for row in query.order_by(Appointment.start_time).all()]

    @staticmethod
    def get_available_slots(
            db: Session,
            business_id: Union[UUID, str],
            day: Union[date, str],
            service_ids: Optional[Sequence[Union[UUID, str]]] = None,
            duration_minutes: Optional[int] = None,
            now: Optional[datetime] = None,
            granularity_minutes: Optional[int] = None,
            minimum_lead_minutes: Optional[int] = None,
            limit: Optional[int] = None,
            exclude_appointment_id: Optional[Union[UUID, str]] = None
    ) -> List[str]:
        """
        Bookable start times (HH:MM) for one business and date.

        Pass either service_ids (duration is their sum) or duration_minutes.
        exclude_appointment_id frees that appointment's own range, which is
        what the reschedule dialog needs.
        """
        settings = get_settings()
        day = parse_date(day)
        business = get_business(db, business_id)

        if service_ids:
            services = load_active_services(db, business.id, service_ids)
            duration_minutes = sum(service.duration_minutes for service in services)
        elif duration_minutes is None:
            raise InvalidArgumentError("Either service_ids or duration_minutes is required")

        window = resolve_working_window(db, business.id, day)
        occupied = AvailabilityService.get_occupied_intervals(
            db, business.id, day, exclude_appointment_id
        )

        slots = generate_slots(
            window=window,
            day=day,
            granularity_minutes=(
                settings.DEFAULT_SLOT_GRANULARITY_MINUTES if granularity_minutes is None else granularity_minutes
            ),
            total_duration_minutes=duration_minutes,
            occupied=occupied,
            now=local_now(business.timezone, now).replace(tzinfo=None),
            minimum_lead_minutes=(
                settings.DEFAULT_MINIMUM_LEAD_MINUTES if minimum_lead_minutes is None else minimum_lead_minutes
            ),
            limit=limit,
            allowed_granularities=settings.SLOT_GRANULARITY_CHOICES,
        )

        logger.info(
            f"Generated {len(slots)} slots for business {business.id} on {day} "
            f"({duration_minutes} min, {len(occupied)} occupied)"
        )
        return slots

    @staticmethod
    def get_upcoming_slots(
            db: Session,
            business_id: Union[UUID, str],
            days: Optional[int] = None,
            duration_minutes: int = 30,
            granularity_minutes: int = 30,
            limit: Optional[int] = None,
            now: Optional[datetime] = None
    ) -> List[Dict]:
        """Next free slots across several days, for marketing suggestions"""
        settings = get_settings()
        days = settings.UPCOMING_SLOTS_DAYS if days is None else days
        limit = settings.UPCOMING_SLOTS_LIMIT if limit is None else limit
        if days <= 0:
            raise InvalidArgumentError("days must be positive")
        if limit <= 0:
            return []

        business = get_business(db, business_id)
        local = local_now(business.timezone, now).replace(tzinfo=None)
        start_day = local.date()
        end_day = start_day + timedelta(days=days - 1)

        overrides = load_overrides(db, business.id, start_day, end_day)
        booked = db.query(
            Appointment.appointment_date, Appointment.start_time, Appointment.end_time
        ).filter(
            Appointment.business_id == business.id,
            Appointment.appointment_date.between(start_day, end_day),
            Appointment.status.in_(ACTIVE_STATUSES)
        ).all()

        occupied_by_day: Dict[date, List[Tuple[time, time]]] = {}
        for row in booked:
            occupied_by_day.setdefault(row.appointment_date, []).append((row.start_time, row.end_time))

        slots: List[Dict] = []
        current_day = start_day
        while current_day <= end_day and len(slots) < limit:
            window = resolve_from_records(business.opening_hours, overrides.get(current_day), current_day)
            day_slots = generate_slots(
                window=window,
                day=current_day,
                granularity_minutes=granularity_minutes,
                total_duration_minutes=duration_minutes,
                occupied=occupied_by_day.get(current_day, []),
                now=local,
                limit=limit - len(slots),
                allowed_granularities=settings.SLOT_GRANULARITY_CHOICES,
            )
            for slot in day_slots:
                slots.append({
                    'date': current_day.isoformat(),
                    'time': f"{slot}:00",
                    'display_date': current_day.strftime("%d/%m"),
                    'display_time': slot,
                })

            current_day += timedelta(days=1)

        return slots
