from datetime import datetime, timezone
from sqlalchemy.orm import relationship
from sqlalchemy import (
    Column,
    Date,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    JSON,
    String,
    Text,
)
from workspot.db import Base


def _utcnow():
    return datetime.now(timezone.utc)


class Spot(Base):
    __tablename__ = "spots"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String, index=True, nullable=False)
    description = Column(Text, nullable=False)
    type = Column(String, nullable=False, default="spot")
    desk_count = Column(Integer, nullable=True)
    city = Column(String, index=True, nullable=False)
    address = Column(String, nullable=False)
    amenities = Column(JSON, nullable=False, default=list)
    price = Column(Float, nullable=False)
    images = Column(JSON, nullable=False)
    status = Column(String, nullable=False, default="active")
    created_by = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)
    updated_at = Column(
        DateTime(timezone=True), default=_utcnow, onupdate=_utcnow, nullable=False
    )
    version_id = Column(Integer, nullable=False)

    owner = relationship("User", back_populates="created_spots")
    blocked_dates = relationship(
        "SpotInterval",
        back_populates="spot",
        cascade="all, delete-orphan",
        order_by="SpotInterval.start_date",
    )
    bookings = relationship(
        "Booking", back_populates="spot", cascade="all, delete-orphan"
    )
    favorited_by = relationship(
        "User", secondary="user_favorites", back_populates="favorites"
    )

    # every write to the spot row is guarded by the version it was read at
    __mapper_args__ = {"version_id_col": version_id}

    @property
    def location(self):
        return {"city": self.city, "address": self.address}

    def touch(self):
        """Force an UPDATE of the row so its version is checked and bumped."""
        self.updated_at = _utcnow()


class SpotInterval(Base):
    __tablename__ = "spot_intervals"

    id = Column(Integer, primary_key=True, index=True)
    spot_id = Column(
        Integer, ForeignKey("spots.id", ondelete="CASCADE"), nullable=False, index=True
    )
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)

    spot = relationship("Spot", back_populates="blocked_dates")
