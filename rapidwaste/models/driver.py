from datetime import datetime
from sqlalchemy import (
    Column, Integer, String, Boolean, DateTime, Float, ForeignKey, Enum, JSON
)
from sqlalchemy.orm import relationship
from rapidwaste.database.session import Base
from enum import Enum as PyEnum


class DriverStatusEnum(str, PyEnum):
    AVAILABLE = "available"
    BUSY = "busy"
    OFFLINE = "offline"


class Driver(Base):
    __tablename__ = "drivers"
    __table_args__ = (
        {"extend_existing": True}
    )

    id = Column(Integer, primary_key=True, index=True)
    # External sequential code, e.g. D0001
    driver_id = Column(String(10), nullable=False, unique=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True)

    status = Column(
        Enum(DriverStatusEnum, native_enum=False),
        default=DriverStatusEnum.OFFLINE,
        nullable=False,
        index=True
    )

    # Last known location
    current_lat = Column(Float, nullable=True)
    current_lng = Column(Float, nullable=True)
    location_updated_at = Column(DateTime, nullable=True)

    rating = Column(Float, default=4.5, nullable=False)
    total_ratings = Column(Integer, default=0, nullable=False)
    total_pickups = Column(Integer, default=0, nullable=False)
    total_earnings = Column(Float, default=0, nullable=False)

    vehicle_info = Column(JSON, nullable=True)
    working_hours = Column(JSON, nullable=True)
    working_days = Column(JSON, nullable=True)
    emergency_contact = Column(JSON, nullable=True)

    is_active = Column(Boolean, default=True, nullable=False)
    last_active_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=datetime.now, nullable=False)
    updated_at = Column(DateTime, default=datetime.now, onupdate=datetime.now, nullable=False)

    user = relationship("User", back_populates="driver_profile")

    @property
    def current_location(self):
        if self.current_lat is None or self.current_lng is None:
            return None
        return {
            "lat": self.current_lat,
            "lng": self.current_lng,
            "timestamp": self.location_updated_at,
        }
