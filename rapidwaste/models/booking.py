from datetime import datetime
from sqlalchemy import (
    Column, Integer, String, DateTime, Date, Float,
    ForeignKey, Enum, Text, Boolean
)
from sqlalchemy import inspect
from sqlalchemy.orm import relationship, validates
from rapidwaste.database.session import Base
from enum import Enum as PyEnum


def _enum_values(enum_cls):
    return [member.value for member in enum_cls]


class ServiceTypeEnum(str, PyEnum):
    REGULAR = "regular"
    EMERGENCY = "emergency"
    BULK = "bulk"


class BagCountEnum(str, PyEnum):
    SMALL = "1-5"
    MEDIUM = "6-10"
    LARGE = "11+"


class BookingStatusEnum(str, PyEnum):
    PENDING = "pending"          # request raised
    SCHEDULED = "scheduled"      # driver assigned
    IN_PROGRESS = "in-progress"  # driver on site
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class PriorityEnum(str, PyEnum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class PaymentStatusEnum(str, PyEnum):
    PENDING = "pending"
    PAID = "paid"
    FAILED = "failed"
    REFUNDED = "refunded"


class Booking(Base):
    __tablename__ = "bookings"
    __table_args__ = (
        {"extend_existing": True}
    )

    id = Column(Integer, primary_key=True, index=True)
    booking_id = Column(String(20), nullable=False, unique=True, index=True)

    customer_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    driver_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)

    # Customer snapshot taken at creation time
    customer_name = Column(String(200), nullable=False)
    phone = Column(String(30), nullable=False)
    email = Column(String(150), nullable=False)
    address = Column(Text, nullable=False)
    city = Column(String(100), nullable=False)
    zip_code = Column(String(20), nullable=False)

    # Service details
    service_type = Column(Enum(ServiceTypeEnum, native_enum=False, values_callable=_enum_values), nullable=False)
    bag_count = Column(
        Enum(BagCountEnum, native_enum=False, values_callable=_enum_values),
        default=BagCountEnum.SMALL,
        nullable=False
    )
    urgent_pickup = Column(Boolean, default=False, nullable=False)
    preferred_date = Column(Date, nullable=True, index=True)
    preferred_time = Column(String(50), nullable=True)
    scheduled_time = Column(String(50), nullable=True)
    special_instructions = Column(Text, nullable=True)
    notes = Column(Text, nullable=True)
    location_lat = Column(Float, nullable=True)
    location_lng = Column(Float, nullable=True)

    status = Column(
        Enum(BookingStatusEnum, native_enum=False, values_callable=_enum_values),
        default=BookingStatusEnum.PENDING,
        nullable=False,
        index=True
    )
    priority = Column(
        Enum(PriorityEnum, native_enum=False, values_callable=_enum_values),
        default=PriorityEnum.MEDIUM,
        nullable=False
    )

    # Pricing & payment
    estimated_price = Column(Float, nullable=False)
    actual_price = Column(Float, nullable=True)
    payment_status = Column(
        Enum(PaymentStatusEnum, native_enum=False, values_callable=_enum_values),
        default=PaymentStatusEnum.PENDING,
        nullable=False
    )
    payment_method = Column(String(50), nullable=True)
    payment_reference = Column(String(100), nullable=True, index=True)

    # Lifecycle
    driver_notes = Column(Text, nullable=True)
    completed_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=datetime.now, nullable=False, index=True)
    updated_at = Column(DateTime, default=datetime.now, onupdate=datetime.now, nullable=False)

    # Relationships
    customer = relationship("User", foreign_keys=[customer_id])
    driver = relationship("User", foreign_keys=[driver_id])

    @validates("estimated_price")
    def validate_estimated_price(self, key, value):
        if not inspect(self).has_identity:
            return value
        current = getattr(self, key)
        if value != current:
            raise ValueError(f"estimated_price is fixed at creation ({current}) and cannot change to {value}")
        return value
