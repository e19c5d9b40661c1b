from datetime import datetime, timezone
from sqlalchemy import Column, DateTime, ForeignKey, Integer, JSON, String, Table
from sqlalchemy.orm import relationship
from workspot.db import Base


user_favorites = Table(
    "user_favorites",
    Base.metadata,
    Column("user_id", Integer, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
    Column("spot_id", Integer, ForeignKey("spots.id", ondelete="CASCADE"), primary_key=True),
)


def _utcnow():
    return datetime.now(timezone.utc)


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    first_name = Column(String, nullable=False)
    last_name = Column(String, nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)
    hashed_password = Column(String, nullable=False)
    company = Column(String, nullable=False)
    position = Column(String, nullable=True)
    linkedin_url = Column(String, nullable=True)
    phone_number = Column(String, nullable=True)
    roles = Column(JSON, nullable=False, default=lambda: ["guest"])
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)

    created_spots = relationship("Spot", back_populates="owner", cascade="all")
    bookings = relationship("Booking", back_populates="user", cascade="all")
    favorites = relationship(
        "Spot", secondary=user_favorites, back_populates="favorited_by", lazy="selectin"
    )

    @property
    def profile(self):
        return {
            "company": self.company,
            "position": self.position,
            "linkedin_url": self.linkedin_url,
            "phone_number": self.phone_number,
        }

    def has_role(self, role: str) -> bool:
        return role in (self.roles or [])
