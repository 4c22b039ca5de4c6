# atlas/models/special_hours.py
from sqlalchemy import Column, String, Boolean, Date, DateTime, JSON, Text, ForeignKey, UniqueConstraint, Uuid
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import uuid

from atlas.models.base import Base


class SpecialHours(Base):
    """Date-specific override of the weekly schedule (holidays, special hours).

    Supersedes the weekly schedule for its date entirely. Past rows are inert
    and never cleaned up automatically.
    """
    __tablename__ = "business_special_hours"
    __table_args__ = (
        UniqueConstraint("business_id", "date", name="uq_special_hours_business_date"),
    )

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    business_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("businesses.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    date = Column(Date, nullable=False)
    is_closed = Column(Boolean, default=False, nullable=False)
    open_time = Column(String(5), nullable=True)  # HH:MM
    close_time = Column(String(5), nullable=True)  # HH:MM
    breaks = Column(JSON, default=list)  # [{"start": "HH:MM", "end": "HH:MM"}]
    notes = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    business = relationship("Business", back_populates="special_hours")

    def __repr__(self):
        return f"<SpecialHours(business_id={self.business_id}, date={self.date}, closed={self.is_closed})>"
