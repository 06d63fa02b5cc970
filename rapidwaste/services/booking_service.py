"""
Booking engine: creation with pricing, status lifecycle, driver assignment
and reporting.
"""
from datetime import date, datetime
from typing import Any, Dict, List, Optional, Union

from sqlalchemy.orm import Session

from rapidwaste.config import settings
from rapidwaste.core.exceptions import (
    BookingIdExhausted,
    InvalidAssignment,
    InvalidTransition,
    NotFound,
)
from rapidwaste.core.logging_config import get_logger
from rapidwaste.crud.booking import booking_crud
from rapidwaste.crud.driver import driver_crud
from rapidwaste.crud.user import user_crud
from rapidwaste.models.booking import (
    Booking,
    BookingStatusEnum,
    PriorityEnum,
    ServiceTypeEnum,
)
from rapidwaste.models.user import UserRoleEnum
from rapidwaste.schemas.booking import BookingCreate, BookingImport, BookingStatusUpdate
from rapidwaste.services.booking_id import generate_booking_id
from rapidwaste.services.pricing import calculate_price
from rapidwaste.services.status_transition import DRIVER_REQUIRED_STATUSES, validate_transition
from rapidwaste.services.user_service import UserService
from rapidwaste.utils.date_utils import day_window

logger = get_logger(__name__)

# Fields a status update may carry besides the status itself
STATUS_UPDATE_FIELDS = ("driver_notes", "actual_price", "payment_method", "payment_status")


def priority_for(service_type) -> PriorityEnum:
    return PriorityEnum.HIGH if service_type == ServiceTypeEnum.EMERGENCY else PriorityEnum.MEDIUM


class BookingService:

    def __init__(self, db: Session, notifier=None):
        self.db = db
        self.notifier = notifier
        self.users = UserService(db)

    # ---------- creation ----------
    def _unique_booking_id(self, service_type) -> str:
        attempts = max(1, settings.BOOKING_ID_MAX_ATTEMPTS)
        for attempt in range(1, attempts + 1):
            candidate = generate_booking_id(service_type)
            if not booking_crud.booking_id_exists(self.db, booking_id=candidate):
                return candidate
            logger.warning(f"[booking] Booking id collision on {candidate} (attempt {attempt}/{attempts})")
        raise BookingIdExhausted(
            f"Could not allocate a unique booking id after {attempts} attempts",
            details={"service_type": str(service_type)},
        )

    def _build(self, data: BookingCreate) -> Booking:
        customer = self.users.get_or_create_customer(
            email=data.email,
            first_name=data.first_name,
            last_name=data.last_name,
            phone=data.phone,
        )
        return Booking(
            booking_id=self._unique_booking_id(data.service_type),
            customer_id=customer.id,
            customer_name=f"{data.first_name} {data.last_name}",
            email=str(data.email),
            phone=data.phone,
            address=data.address,
            city=data.city,
            zip_code=data.zip_code,
            service_type=data.service_type,
            bag_count=data.bag_count,
            urgent_pickup=data.urgent_pickup,
            preferred_date=data.preferred_date,
            preferred_time=data.preferred_time,
            special_instructions=data.special_instructions,
            estimated_price=calculate_price(data.service_type, data.bag_count, data.urgent_pickup),
            priority=priority_for(data.service_type),
            status=BookingStatusEnum.PENDING,
        )

    def _save(self, booking: Booking) -> Booking:
        self.db.add(booking)
        self.db.commit()
        self.db.refresh(booking)
        return booking

    def create_booking(self, data: Union[BookingCreate, Dict[str, Any]]) -> Booking:
        """Create a pending booking for a customer request."""
        if isinstance(data, dict):
            data = BookingCreate(**data)

        booking = self._save(self._build(data))
        logger.info(
            f"[booking] Created {booking.booking_id} service={booking.service_type.value} "
            f"price={booking.estimated_price}"
        )

        if self.notifier is not None:
            self.notifier.notify_new_booking(booking)
        return booking

    def import_booking(self, record: Union[BookingImport, Dict[str, Any]]) -> Booking:
        """
        Administrative constructor for seeding and bulk loads.

        Goes through the same pricing and id path as ``create_booking`` but
        keeps the supplied status, driver and payment state. A record in
        progress or completed must name a driver. No notification is published.
        """
        if isinstance(record, dict):
            record = BookingImport(**record)
        if record.status.value in DRIVER_REQUIRED_STATUSES and record.driver_id is None:
            raise InvalidTransition(
                BookingStatusEnum.PENDING.value, record.status.value, reason="no driver assigned"
            )

        if record.driver_id is not None:
            self._require_driver_user(record.driver_id)

        booking = self._build(record)
        booking.status = record.status
        booking.driver_id = record.driver_id
        booking.payment_status = record.payment_status
        booking.actual_price = record.actual_price
        if record.status == BookingStatusEnum.COMPLETED:
            booking.completed_at = record.completed_at or datetime.now()

        booking = self._save(booking)
        logger.info(f"[booking] Imported {booking.booking_id} with status={booking.status.value}")
        return booking

    # ---------- queries ----------
    def find_all(
        self,
        *,
        status: Optional[BookingStatusEnum] = None,
        service_type: Optional[ServiceTypeEnum] = None,
        date: Optional[date] = None,
        driver_id: Optional[str] = None,
    ) -> List[Booking]:
        """
        List bookings newest first. ``date`` matches the creation day and
        ``driver_id`` is the external driver code.
        """
        driver_user_id = None
        if driver_id:
            driver = driver_crud.get_by_driver_id(self.db, driver_id=driver_id)
            if driver is None:
                return []
            driver_user_id = driver.user_id

        return booking_crud.search(
            self.db,
            status=status,
            service_type=service_type,
            created_on=date,
            driver_user_id=driver_user_id,
        )

    def find_by_id(self, id: int) -> Booking:
        booking = booking_crud.get_by_id(self.db, id=id)
        if not booking:
            raise NotFound("Booking", id)
        return booking

    # ---------- lifecycle ----------
    def update_status(
        self,
        id: int,
        new_status: Union[BookingStatusEnum, str],
        extra: Optional[Dict[str, Any]] = None,
    ) -> Booking:
        booking = booking_crud.get_by_id(self.db, id=id, for_update=True)
        if not booking:
            raise NotFound("Booking", id)

        current = booking.status
        validate_transition(current, new_status)
        new_status = BookingStatusEnum(new_status)
        if new_status.value in DRIVER_REQUIRED_STATUSES and booking.driver_id is None:
            raise InvalidTransition(current.value, new_status.value, reason="no driver assigned")

        for field, value in (extra or {}).items():
            if field in STATUS_UPDATE_FIELDS and value is not None:
                setattr(booking, field, value)

        booking.status = new_status
        if new_status == BookingStatusEnum.COMPLETED:
            booking.completed_at = datetime.now()

        self.db.commit()
        logger.info(f"[booking] {booking.booking_id} moved {current.value} -> {new_status.value}")

        booking = self.find_by_id(id)
        if self.notifier is not None:
            self.notifier.notify_status_change(booking)
        return booking

    def apply_status_update(self, id: int, update: BookingStatusUpdate) -> Booking:
        extra = update.model_dump(exclude={"status"}, exclude_none=True)
        return self.update_status(id, update.status, extra)

    def _require_driver_user(self, driver_user_id: int):
        driver_user = user_crud.get(self.db, driver_user_id)
        if not driver_user or driver_user.role != UserRoleEnum.DRIVER:
            raise InvalidAssignment(
                "Invalid driver",
                details={"driver_id": driver_user_id},
            )
        return driver_user

    @staticmethod
    def _force_scheduled(booking: Booking) -> None:
        """
        Assignment always lands on ``scheduled`` without consulting the
        transition graph, so an in-progress booking is rewound.
        """
        booking.status = BookingStatusEnum.SCHEDULED

    def assign_driver(self, booking_id: int, driver_id: int) -> Booking:
        """Attach the driver user ``driver_id`` to the booking."""
        booking = booking_crud.get_by_id(self.db, id=booking_id, for_update=True)
        if not booking:
            raise NotFound("Booking", booking_id)
        driver_user = self._require_driver_user(driver_id)

        previous = booking.status
        booking.driver_id = driver_user.id
        self._force_scheduled(booking)
        self.db.commit()
        logger.info(
            f"[booking] {booking.booking_id} assigned to driver user={driver_user.id} "
            f"({previous.value} -> scheduled)"
        )

        booking = self.find_by_id(booking_id)
        if self.notifier is not None:
            self.notifier.notify_status_change(booking)
        return booking

    # ---------- reporting ----------
    def get_stats(self, start_date: Optional[date] = None, end_date: Optional[date] = None) -> Dict[str, Any]:
        """Aggregates over bookings created between the two dates, both days inclusive."""
        start = day_window(start_date)[0] if start_date else None
        end = day_window(end_date)[1] if end_date else None
        return booking_crud.aggregate_stats(self.db, start=start, end=end)
