# ============================================================================
# atlas/api/v1/public/booking.py
# Public booking page - slot listing and client booking
# ============================================================================
from fastapi import APIRouter, Depends, Path, Query
from sqlalchemy.orm import Session
from datetime import date
from typing import List, Optional
from uuid import UUID
import logging

from atlas.config.database import get_db
from atlas.config.settings import get_settings
from atlas.schemas.scheduling import (
    AppointmentResponse,
    BookingCreateRequest,
    SlotsResponse,
    UpcomingSlotsResponse,
)
from atlas.services.appointment.appointment_service import AppointmentService
from atlas.services.availability.availability_service import AvailabilityService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/businesses", tags=["public-booking"])


@router.get("/{business_id}/slots", response_model=SlotsResponse)
def list_available_slots(
        business_id: UUID = Path(..., description="The business ID"),
        day: date = Query(..., alias="date", description="Date to list slots for (YYYY-MM-DD)"),
        service_ids: List[UUID] = Query(default=[], description="Selected services"),
        duration: Optional[int] = Query(None, ge=1, description="Duration in minutes when no services are given"),
        granularity: Optional[int] = Query(None, ge=1, description="Minutes between candidate starts"),
        lead_minutes: Optional[int] = Query(None, ge=0, description="Minimum notice for same-day slots"),
        limit: Optional[int] = Query(None, ge=1, le=200),
        db: Session = Depends(get_db)
):
    """Bookable start times for a date. Same-day slots respect the public lead time."""
    settings = get_settings()
    granularity = granularity or settings.DEFAULT_SLOT_GRANULARITY_MINUTES
    if service_ids:
        duration = AvailabilityService.total_duration(db, business_id, service_ids)

    slots = AvailabilityService.get_available_slots(
        db=db,
        business_id=business_id,
        day=day,
        duration_minutes=duration,
        granularity_minutes=granularity,
        minimum_lead_minutes=settings.PUBLIC_MINIMUM_LEAD_MINUTES if lead_minutes is None else lead_minutes,
        limit=limit,
    )

    return SlotsResponse(
        business_id=business_id,
        date=day,
        duration_minutes=duration,
        granularity_minutes=granularity,
        slots=slots,
    )


@router.get("/{business_id}/upcoming-slots", response_model=UpcomingSlotsResponse)
def list_upcoming_slots(
        business_id: UUID = Path(..., description="The business ID"),
        days: Optional[int] = Query(None, ge=1, le=60),
        duration: int = Query(30, ge=1),
        limit: Optional[int] = Query(None, ge=1, le=200),
        db: Session = Depends(get_db)
):
    """Next free slots over the coming days (used by marketing messages)"""
    slots = AvailabilityService.get_upcoming_slots(
        db=db,
        business_id=business_id,
        days=days,
        duration_minutes=duration,
        limit=limit,
    )
    return UpcomingSlotsResponse(business_id=business_id, slots=slots)


@router.post("/{business_id}/appointments", response_model=AppointmentResponse, status_code=201)
def create_public_appointment(
        payload: BookingCreateRequest,
        business_id: UUID = Path(..., description="The business ID"),
        db: Session = Depends(get_db)
):
    """
    Book a slot. Returns 409 when the slot was taken in the meantime;
    the page should reload slots and let the client choose again.
    """
    appointment = AppointmentService.book(
        db=db,
        business_id=business_id,
        appointment_date=payload.date,
        start_time=payload.start_time,
        service_ids=payload.service_ids,
        client_id=payload.client_id,
        notes=payload.notes,
        used_loyalty_redemption=payload.used_loyalty_redemption,
        enforce_working_hours=True,
    )
    return AppointmentResponse.from_model(appointment)
