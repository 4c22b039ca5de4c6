# atlas/models/business.py
"""
Business Model - only the fields the scheduling core reads.
Profile, billing and loyalty settings live with their own collaborators.
"""
from sqlalchemy import Column, String, Boolean, DateTime, JSON, Uuid
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import uuid

from atlas.models.base import Base


class Business(Base):
    __tablename__ = "businesses"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String(200), nullable=False)

    # IANA timezone used for "today" and the completion sweep (null = settings default)
    timezone = Column(String(50), nullable=True)

    # Weekly schedule: {"monday": {"isOpen": true, "openTime": "09:00", "closeTime": "18:00",
    #                              "breaks": [{"start": "12:00", "end": "13:00"}]}, ...}
    opening_hours = Column(JSON, default=dict)

    auto_confirm_appointments = Column(Boolean, default=False, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    special_hours = relationship("SpecialHours", back_populates="business", cascade="all, delete-orphan")
    services = relationship("Service", back_populates="business", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<Business(id={self.id}, name={self.name})>"

    def to_dict(self):
        """Convert to dictionary for API responses"""
        return {
            "id": str(self.id),
            "name": self.name,
            "timezone": self.timezone,
            "opening_hours": self.opening_hours,
            "auto_confirm_appointments": self.auto_confirm_appointments,
            "is_active": self.is_active,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
