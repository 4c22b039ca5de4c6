# ============================================================================
# atlas/services/appointment/appointment_query_service.py
# Read-only appointment listings - no FastAPI dependencies
# ============================================================================
from sqlalchemy.orm import Session, selectinload
from datetime import date
from typing import Optional, Dict, Any, Union
from uuid import UUID

from atlas.core.exceptions import InvalidArgumentError, NotFoundError
from atlas.models.appointment import Appointment, AppointmentStatus
from atlas.utils.ids import as_uuid

VALID_STATUSES = {status.value for status in AppointmentStatus}


class AppointmentQueryService:
    """Service layer for appointment listings."""

    @staticmethod
    def list_appointments(
            db: Session,
            business_id: Union[UUID, str],
            start_date: Optional[date] = None,
            end_date: Optional[date] = None,
            status: Optional[str] = None,
            client_id: Optional[Union[UUID, str]] = None,
            skip: int = 0,
            limit: int = 50
    ) -> Dict[str, Any]:
        """Get paginated list of appointments with filters."""
        business_uuid = as_uuid(business_id, "Business")
        query = db.query(Appointment).options(
            selectinload(Appointment.service_links)
        ).filter(Appointment.business_id == business_uuid)

        if start_date:
            query = query.filter(Appointment.appointment_date >= start_date)
        if end_date:
            query = query.filter(Appointment.appointment_date <= end_date)
        if status:
            if status not in VALID_STATUSES:
                raise InvalidArgumentError(f"Unknown status: {status}")
            query = query.filter(Appointment.status == status)
        if client_id:
            query = query.filter(Appointment.client_id == as_uuid(client_id, "Client"))

        query = query.order_by(Appointment.appointment_date.asc(), Appointment.start_time.asc())
        total = query.count()
        appointments = query.offset(skip).limit(limit).all()

        return {
            "business_id": str(business_uuid),
            "total_appointments": total,
            "page": {
                "skip": skip,
                "limit": limit,
                "total_pages": (total + limit - 1) // limit if total > 0 else 0
            },
            "filters": {
                "start_date": start_date.isoformat() if start_date else None,
                "end_date": end_date.isoformat() if end_date else None,
                "status": status,
                "client_id": str(client_id) if client_id else None
            },
            "appointments": [appt.to_dict() for appt in appointments]
        }

    @staticmethod
    def get_appointment(db: Session, appointment_id: Union[UUID, str]) -> Appointment:
        appointment = db.query(Appointment).options(
            selectinload(Appointment.service_links)
        ).filter(Appointment.id == as_uuid(appointment_id, "Appointment")).first()

        if not appointment:
            raise NotFoundError(f"Appointment {appointment_id} not found", {"appointment_id": str(appointment_id)})
        return appointment
