from pydantic import BaseModel, ConfigDict, EmailStr, Field
from typing import Optional, List
from datetime import datetime

from rapidwaste.models.driver import DriverStatusEnum
from rapidwaste.schemas.booking import BookingResponse


# ---------- NESTED ----------
class VehicleInfo(BaseModel):
    make: str
    model: str
    year: int
    license_plate: str
    capacity: Optional[str] = None


class WorkingHours(BaseModel):
    start: str
    end: str


class EmergencyContact(BaseModel):
    name: str
    phone: str
    relationship: str


class Location(BaseModel):
    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)
    timestamp: Optional[datetime] = None


# ---------- REQUESTS ----------
class DriverUserCreate(BaseModel):
    first_name: str = Field(..., min_length=2)
    last_name: str = Field(..., min_length=2)
    email: EmailStr
    phone: str
    password: str = Field(..., min_length=6)


class DriverProfileCreate(BaseModel):
    vehicle_info: Optional[VehicleInfo] = None
    working_hours: Optional[WorkingHours] = None
    working_days: List[str] = Field(default_factory=list)
    emergency_contact: Optional[EmergencyContact] = None
    status: DriverStatusEnum = DriverStatusEnum.OFFLINE


class DriverCreate(BaseModel):
    user: DriverUserCreate
    driver: DriverProfileCreate = Field(default_factory=DriverProfileCreate)


class DriverStatusUpdate(BaseModel):
    status: DriverStatusEnum


class DriverLocationUpdate(BaseModel):
    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)


# ---------- RESPONSES ----------
class DriverResponse(BaseModel):
    id: int
    driver_id: str
    user_id: int
    status: DriverStatusEnum
    current_location: Optional[Location] = None
    rating: float
    total_ratings: int
    total_pickups: int
    total_earnings: float
    vehicle_info: Optional[dict] = None
    working_hours: Optional[dict] = None
    working_days: Optional[List[str]] = None
    is_active: bool
    last_active_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class DriverListItem(BaseModel):
    """Driver profile flattened with the identity fields of its user."""
    user_id: int
    first_name: str
    last_name: str
    email: str
    phone: str
    role: str
    driver_id: str
    status: DriverStatusEnum
    vehicle_info: Optional[dict] = None
    working_hours: Optional[dict] = None
    working_days: Optional[List[str]] = None
    is_active: bool
    created_at: datetime
    updated_at: datetime


class DashboardDriver(BaseModel):
    id: str
    name: str
    status: DriverStatusEnum
    rating: float
    vehicle: Optional[dict] = None


class DashboardStats(BaseModel):
    total_bookings: int = 0
    completed_bookings: int = 0
    pending_bookings: int = 0
    in_progress_bookings: int = 0
    earnings: float = 0


class DriverDashboard(BaseModel):
    driver: DashboardDriver
    todays_stats: DashboardStats
    bookings: List[BookingResponse]
