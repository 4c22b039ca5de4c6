# atlas/services/scheduling/opening_hours.py
"""Opening-hours resolution: which working window applies to a business on a date"""
from datetime import date
from typing import Any, Dict, Mapping, Optional, Union
from uuid import UUID
import logging

from sqlalchemy.orm import Session

from atlas.core.exceptions import InvalidArgumentError, NotFoundError
from atlas.models.business import Business
from atlas.models.special_hours import SpecialHours
from atlas.services.scheduling.window import DaySchedule
from atlas.utils.ids import as_uuid
from atlas.utils.time_utils import parse_date, weekday_name

logger = logging.getLogger(__name__)


def _weekly_entry_to_window(entry: Optional[Mapping[str, Any]]) -> DaySchedule:
    """Interpret one weekly-schedule entry.

    Accepts the settings-page shape {isOpen, openTime, closeTime, breaks} and
    the older {open, close, closed} shape.
    """
    if not entry:
        return DaySchedule.closed()

    if "isOpen" in entry or "openTime" in entry:
        if not entry.get("isOpen"):
            return DaySchedule.closed()
        return DaySchedule.open(entry.get("openTime"), entry.get("closeTime"), entry.get("breaks"))

    if "open" in entry or "closed" in entry:
        if entry.get("closed"):
            return DaySchedule.closed()
        return DaySchedule.open(entry.get("open"), entry.get("close"), entry.get("breaks"))

    raise InvalidArgumentError(f"Unrecognized weekly schedule entry: {dict(entry)!r}")


def _override_to_window(override: SpecialHours) -> DaySchedule:
    if override.is_closed:
        return DaySchedule.closed(source="override")
    if not override.open_time or not override.close_time:
        raise InvalidArgumentError(
            f"Special hours for {override.date} are open but missing opening/closing time"
        )
    return DaySchedule.open(
        override.open_time,
        override.close_time,
        override.breaks,
        source="override",
    )


def resolve_from_records(
        weekly: Optional[Mapping[str, Any]],
        override: Optional[SpecialHours],
        day: date,
) -> DaySchedule:
    """Pure resolution step; an override always wins and is never blended"""
    if override is not None:
        return _override_to_window(override)
    return _weekly_entry_to_window((weekly or {}).get(weekday_name(day)))


def get_business(db: Session, business_id: Union[UUID, str]) -> Business:
    business = db.query(Business).filter(
        Business.id == as_uuid(business_id, "Business"),
        Business.is_active.is_(True),
    ).first()
    if not business:
        raise NotFoundError(f"Business {business_id} not found", {"business_id": str(business_id)})
    return business


def resolve_working_window(
        db: Session,
        business_id: Union[UUID, str],
        day: Union[date, str],
) -> DaySchedule:
    """
    Effective working window of a business on a date.

    Raises:
        NotFoundError: Unknown or inactive business
        InvalidArgumentError: Malformed date or stored schedule
    """
    day = parse_date(day)
    business = get_business(db, business_id)

    override = db.query(SpecialHours).filter(
        SpecialHours.business_id == business.id,
        SpecialHours.date == day,
    ).first()

    window = resolve_from_records(business.opening_hours, override, day)
    logger.debug(f"Resolved window for business {business.id} on {day}: {window.to_dict()}")
    return window


def load_overrides(db: Session, business_id: UUID, start: date, end: date) -> Dict[date, SpecialHours]:
    """Overrides for an inclusive date range, keyed by date"""
    rows = db.query(SpecialHours).filter(
        SpecialHours.business_id == business_id,
        SpecialHours.date.between(start, end),
    ).all()
    return {row.date: row for row in rows}
