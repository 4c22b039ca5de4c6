# ============================================================================
# atlas/api/v1/dashboard/appointments.py
# Business-side appointment management - thin HTTP layer
# ============================================================================
from fastapi import APIRouter, Depends, Path, Query
from sqlalchemy.orm import Session
from datetime import date
from typing import Optional
from uuid import UUID

from atlas.config.database import get_db
from atlas.schemas.scheduling import (
    AppointmentResponse,
    BusinessBookingCreateRequest,
    CancelRequest,
    RescheduleRequest,
    SlotsResponse,
    SweepResponse,
)
from atlas.services.appointment.appointment_query_service import AppointmentQueryService
from atlas.services.appointment.appointment_service import AppointmentService
from atlas.services.availability.availability_service import AvailabilityService
from atlas.services.scheduling.completion_sweep import complete_past_appointments

router = APIRouter(tags=["dashboard-appointments"])


@router.get("/businesses/{business_id}/appointments")
def list_appointments(
        business_id: UUID = Path(..., description="The business ID"),
        start_date: Optional[date] = Query(None, description="Filter appointments on or after this date"),
        end_date: Optional[date] = Query(None, description="Filter appointments on or before this date"),
        status: Optional[str] = Query(None, description="Filter by status (pending, confirmed, completed, cancelled)"),
        client_id: Optional[UUID] = Query(None, description="Filter by client"),
        skip: int = Query(0, ge=0, description="Number of records to skip"),
        limit: int = Query(50, ge=1, le=100, description="Number of records to return"),
        db: Session = Depends(get_db)
):
    """Paginated list of a business's appointments."""
    return AppointmentQueryService.list_appointments(
        db=db,
        business_id=business_id,
        start_date=start_date,
        end_date=end_date,
        status=status,
        client_id=client_id,
        skip=skip,
        limit=limit
    )


@router.post("/businesses/{business_id}/appointments", response_model=AppointmentResponse, status_code=201)
def create_business_appointment(
        payload: BusinessBookingCreateRequest,
        business_id: UUID = Path(..., description="The business ID"),
        db: Session = Depends(get_db)
):
    """Business books on behalf of a client; opening hours are optional here."""
    appointment = AppointmentService.book(
        db=db,
        business_id=business_id,
        appointment_date=payload.date,
        start_time=payload.start_time,
        service_ids=payload.service_ids,
        client_id=payload.client_id,
        notes=payload.notes,
        auto_confirm=payload.auto_confirm,
        used_loyalty_redemption=payload.used_loyalty_redemption,
        enforce_working_hours=payload.enforce_working_hours,
    )
    return AppointmentResponse.from_model(appointment)


@router.get("/appointments/{appointment_id}/reschedule-slots", response_model=SlotsResponse)
def list_reschedule_slots(
        appointment_id: UUID = Path(..., description="The appointment ID"),
        day: date = Query(..., alias="date"),
        granularity: int = Query(15, ge=1),
        db: Session = Depends(get_db)
):
    """Slots for moving an appointment; its own current range counts as free."""
    appointment = AppointmentQueryService.get_appointment(db, appointment_id)
    service_ids = appointment.service_ids or [appointment.service_id]

    duration = AvailabilityService.total_duration(db, appointment.business_id, service_ids)
    slots = AvailabilityService.get_available_slots(
        db=db,
        business_id=appointment.business_id,
        day=day,
        duration_minutes=duration,
        granularity_minutes=granularity,
        exclude_appointment_id=appointment.id,
    )
    return SlotsResponse(
        business_id=appointment.business_id,
        date=day,
        duration_minutes=duration,
        granularity_minutes=granularity,
        slots=slots,
    )


@router.post("/appointments/{appointment_id}/reschedule", response_model=AppointmentResponse)
def reschedule_appointment(
        payload: RescheduleRequest,
        appointment_id: UUID = Path(..., description="The appointment ID"),
        db: Session = Depends(get_db)
):
    appointment = AppointmentService.reschedule(
        db=db,
        appointment_id=appointment_id,
        appointment_date=payload.date,
        start_time=payload.start_time,
        service_ids=payload.service_ids,
        enforce_working_hours=payload.enforce_working_hours,
    )
    return AppointmentResponse.from_model(appointment)


@router.post("/appointments/{appointment_id}/confirm", response_model=AppointmentResponse)
def confirm_appointment(
        appointment_id: UUID = Path(..., description="The appointment ID"),
        db: Session = Depends(get_db)
):
    return AppointmentResponse.from_model(AppointmentService.confirm(db, appointment_id))


@router.post("/appointments/{appointment_id}/cancel", response_model=AppointmentResponse)
def cancel_appointment(
        payload: Optional[CancelRequest] = None,
        appointment_id: UUID = Path(..., description="The appointment ID"),
        db: Session = Depends(get_db)
):
    reason = payload.reason if payload else None
    return AppointmentResponse.from_model(AppointmentService.cancel(db, appointment_id, reason))


@router.post("/appointments/{appointment_id}/complete", response_model=AppointmentResponse)
def complete_appointment(
        appointment_id: UUID = Path(..., description="The appointment ID"),
        db: Session = Depends(get_db)
):
    return AppointmentResponse.from_model(AppointmentService.complete(db, appointment_id))


@router.post("/maintenance/complete-past-appointments", response_model=SweepResponse)
def run_completion_sweep(db: Session = Depends(get_db)):
    """Run the completion sweep now (normally triggered by Celery beat)"""
    return SweepResponse(completed=complete_past_appointments(db))
