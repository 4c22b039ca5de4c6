# atlas/models/booking_day_lock.py
from sqlalchemy import Column, Date, Integer, ForeignKey, Uuid, PrimaryKeyConstraint

from atlas.models.base import Base


class BookingDayLock(Base):
    """Serialization point for writes to one business calendar day.

    The booking committer bumps `version` before its overlap check, so
    concurrent commits for the same (business_id, date) queue on this row.
    """
    __tablename__ = "booking_day_locks"
    __table_args__ = (
        PrimaryKeyConstraint("business_id", "lock_date", name="pk_booking_day_locks"),
    )

    business_id = Column(Uuid(as_uuid=True), ForeignKey("businesses.id", ondelete="CASCADE"), nullable=False)
    lock_date = Column(Date, nullable=False)
    version = Column(Integer, nullable=False, default=0)

    def __repr__(self):
        return f"<BookingDayLock(business_id={self.business_id}, date={self.lock_date}, version={self.version})>"
