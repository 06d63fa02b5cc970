# Import all models here so Base.metadata knows every table
from rapidwaste.models.user import User, UserRoleEnum
from rapidwaste.models.driver import Driver, DriverStatusEnum
from rapidwaste.models.booking import (
    Booking,
    BookingStatusEnum,
    ServiceTypeEnum,
    BagCountEnum,
    PriorityEnum,
    PaymentStatusEnum,
)
from rapidwaste.models.sequence import Sequence
