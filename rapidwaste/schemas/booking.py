from pydantic import BaseModel, ConfigDict, EmailStr, Field
from datetime import date, datetime
from typing import Optional

from rapidwaste.models.booking import (
    BagCountEnum,
    BookingStatusEnum,
    PaymentStatusEnum,
    PriorityEnum,
    ServiceTypeEnum,
)


# ---------- JOINED DISPLAY FIELDS ----------
class CustomerSummary(BaseModel):
    id: int
    first_name: str
    last_name: str
    email: str
    phone: str

    model_config = ConfigDict(from_attributes=True)


class AssignedDriverSummary(BaseModel):
    id: int
    first_name: str
    last_name: str
    driver_id: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


# ---------- REQUESTS ----------
class BookingCreate(BaseModel):
    first_name: str = Field(..., min_length=2)
    last_name: str = Field(..., min_length=2)
    email: EmailStr
    phone: str
    address: str
    city: str
    zip_code: str
    service_type: ServiceTypeEnum
    bag_count: BagCountEnum = BagCountEnum.SMALL
    preferred_date: Optional[date] = None
    preferred_time: Optional[str] = None
    special_instructions: Optional[str] = None
    urgent_pickup: bool = False


class BookingImport(BookingCreate):
    """Administrative seeding payload: may carry an arbitrary initial state."""
    status: BookingStatusEnum = BookingStatusEnum.PENDING
    driver_id: Optional[int] = None
    payment_status: PaymentStatusEnum = PaymentStatusEnum.PENDING
    actual_price: Optional[float] = Field(None, ge=0)
    completed_at: Optional[datetime] = None


class BookingStatusUpdate(BaseModel):
    status: BookingStatusEnum
    driver_notes: Optional[str] = None
    actual_price: Optional[float] = Field(None, ge=0)
    payment_method: Optional[str] = None
    payment_status: Optional[PaymentStatusEnum] = None


class AssignDriverRequest(BaseModel):
    driver_id: int = Field(..., description="User id of the driver account")


# ---------- RESPONSES ----------
class BookingResponse(BaseModel):
    id: int
    booking_id: str
    customer_id: int
    driver_id: Optional[int] = None
    customer_name: str
    email: str
    phone: str
    address: str
    city: str
    zip_code: str
    service_type: ServiceTypeEnum
    bag_count: BagCountEnum
    urgent_pickup: bool
    preferred_date: Optional[date] = None
    preferred_time: Optional[str] = None
    scheduled_time: Optional[str] = None
    special_instructions: Optional[str] = None
    status: BookingStatusEnum
    priority: PriorityEnum
    estimated_price: float
    actual_price: Optional[float] = None
    payment_status: PaymentStatusEnum
    payment_method: Optional[str] = None
    payment_reference: Optional[str] = None
    driver_notes: Optional[str] = None
    completed_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime
    customer: Optional[CustomerSummary] = None
    driver: Optional[AssignedDriverSummary] = None

    model_config = ConfigDict(from_attributes=True)


class BookingStats(BaseModel):
    total_bookings: int = 0
    total_revenue: float = 0
    completed_bookings: int = 0
    pending_bookings: int = 0
    emergency_bookings: int = 0
