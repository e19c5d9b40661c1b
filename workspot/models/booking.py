from datetime import datetime, timezone
from sqlalchemy import Boolean, Column, Date, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship
from workspot.db import Base


# statuses whose interval is held in the spot's blocked dates
ACTIVE_STATUSES = ("pending", "confirmed", "completed", "blocked")


def _utcnow():
    return datetime.now(timezone.utc)


class Booking(Base):
    __tablename__ = "bookings"

    id = Column(Integer, primary_key=True, index=True)
    spot_id = Column(Integer, ForeignKey("spots.id"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    start_date = Column(Date, nullable=False, index=True)
    end_date = Column(Date, nullable=False)
    status = Column(String, nullable=False, default="pending")
    created_by_host = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)
    updated_at = Column(
        DateTime(timezone=True), default=_utcnow, onupdate=_utcnow, nullable=False
    )

    spot = relationship("Spot", back_populates="bookings")
    user = relationship("User", back_populates="bookings")

    @property
    def is_active(self) -> bool:
        return self.status in ACTIVE_STATUSES
