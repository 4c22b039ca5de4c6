# atlas/models/appointment.py
from sqlalchemy import (
    Column, String, Boolean, Date, Time, Text, DateTime, ForeignKey, Index, Integer,
    UniqueConstraint, Uuid,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import enum
import uuid

from atlas.models.base import Base


class AppointmentStatus(str, enum.Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


# Statuses that hold a time range on the business calendar
ACTIVE_STATUSES = (AppointmentStatus.PENDING.value, AppointmentStatus.CONFIRMED.value)


class Appointment(Base):
    __tablename__ = "appointments"
    __table_args__ = (
        Index("idx_appointments_business_date_status", "business_id", "appointment_date", "status"),
    )

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)

    # References
    business_id = Column(Uuid(as_uuid=True), ForeignKey("businesses.id", ondelete="CASCADE"), nullable=False)
    client_id = Column(Uuid(as_uuid=True), nullable=False, index=True)
    service_id = Column(Uuid(as_uuid=True), ForeignKey("services.id"), nullable=True)  # primary service

    # Slot (business-local civil date and clock times, end is exclusive)
    appointment_date = Column(Date, nullable=False)
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)
    notes = Column(Text, nullable=True)

    status = Column(String(20), nullable=False, default=AppointmentStatus.PENDING.value)
    used_loyalty_redemption = Column(Boolean, default=False, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
    cancelled_at = Column(DateTime(timezone=True), nullable=True)
    cancellation_reason = Column(Text, nullable=True)

    service_links = relationship(
        "AppointmentServiceLink",
        back_populates="appointment",
        cascade="all, delete-orphan",
        order_by="AppointmentServiceLink.position",
    )

    @property
    def service_ids(self):
        return [link.service_id for link in self.service_links]

    @property
    def is_active(self) -> bool:
        return self.status in ACTIVE_STATUSES

    def __repr__(self):
        return (
            f"<Appointment(id={self.id}, business_id={self.business_id}, "
            f"date={self.appointment_date}, {self.start_time}-{self.end_time}, status={self.status})>"
        )

    def to_dict(self):
        """Convert to dictionary for API responses"""
        return {
            "id": str(self.id),
            "business_id": str(self.business_id),
            "client_id": str(self.client_id),
            "service_ids": [str(sid) for sid in self.service_ids],
            "date": self.appointment_date.isoformat(),
            "start_time": self.start_time.strftime("%H:%M"),
            "end_time": self.end_time.strftime("%H:%M"),
            "status": self.status,
            "notes": self.notes,
            "used_loyalty_redemption": self.used_loyalty_redemption,
            "cancelled_at": self.cancelled_at.isoformat() if self.cancelled_at else None,
            "cancellation_reason": self.cancellation_reason,
        }


class AppointmentServiceLink(Base):
    """One row per service selected for an appointment"""
    __tablename__ = "appointment_services"
    __table_args__ = (
        UniqueConstraint("appointment_id", "service_id", name="uq_appointment_services_pair"),
    )

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    appointment_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("appointments.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    service_id = Column(Uuid(as_uuid=True), ForeignKey("services.id"), nullable=False)
    position = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    appointment = relationship("Appointment", back_populates="service_links")
