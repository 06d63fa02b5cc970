from datetime import date, datetime
from typing import Any, Dict, List, Optional, Union

from sqlalchemy import func
from sqlalchemy.orm import Session

from rapidwaste.config import settings
from rapidwaste.core.exceptions import InvalidStatusFilter, NotFound
from rapidwaste.core.logging_config import get_logger
from rapidwaste.crud.booking import booking_crud
from rapidwaste.crud.driver import driver_crud
from rapidwaste.crud.sequence import sequence_crud
from rapidwaste.models.booking import Booking, BookingStatusEnum
from rapidwaste.models.driver import Driver, DriverStatusEnum
from rapidwaste.models.user import UserRoleEnum
from rapidwaste.schemas.driver import (
    DashboardDriver,
    DashboardStats,
    DriverDashboard,
    DriverListItem,
    DriverProfileCreate,
    DriverUserCreate,
)
from rapidwaste.schemas.booking import BookingResponse
from rapidwaste.services.user_service import UserService

logger = get_logger(__name__)

DRIVER_CODE_FORMAT = "D%04d"
ALL_STATUSES = "all"


def format_driver_code(number: int) -> str:
    return DRIVER_CODE_FORMAT % number


def booking_status_filter(value: Optional[Union[BookingStatusEnum, str]]) -> Optional[BookingStatusEnum]:
    if not value or value == ALL_STATUSES:
        return None
    try:
        return BookingStatusEnum(value)
    except ValueError:
        raise InvalidStatusFilter(value, [s.value for s in BookingStatusEnum] + [ALL_STATUSES])


def _booking_revenue(booking: Booking) -> float:
    return booking.actual_price if booking.actual_price is not None else booking.estimated_price


class DriverService:
    """Driver directory: profiles, availability, location and dashboards."""

    def __init__(self, db: Session, notifier=None):
        self.db = db
        self.notifier = notifier

    def _get_driver(self, driver_id: str, with_user: bool = False) -> Driver:
        driver = driver_crud.get_by_driver_id(self.db, driver_id=driver_id, with_user=with_user)
        if not driver:
            raise NotFound("Driver", driver_id)
        return driver

    # ---------- dashboard ----------
    def get_dashboard(self, driver_id: str, today: Optional[date] = None) -> DriverDashboard:
        """
        Today's bookings for the driver with summary counts.

        A booking belongs to today when its preferred date is today or it
        was created today. ``pending_bookings`` counts pending and scheduled.
        """
        driver = self._get_driver(driver_id, with_user=True)
        today = today or datetime.now().date()

        bookings = booking_crud.search(
            self.db,
            driver_user_id=driver.user_id,
            scheduled_on=today,
        )

        stats = DashboardStats(
            total_bookings=len(bookings),
            completed_bookings=sum(1 for b in bookings if b.status == BookingStatusEnum.COMPLETED),
            pending_bookings=sum(
                1 for b in bookings
                if b.status in (BookingStatusEnum.PENDING, BookingStatusEnum.SCHEDULED)
            ),
            in_progress_bookings=sum(1 for b in bookings if b.status == BookingStatusEnum.IN_PROGRESS),
            earnings=sum(
                _booking_revenue(b) for b in bookings if b.status == BookingStatusEnum.COMPLETED
            ),
        )

        return DriverDashboard(
            driver=DashboardDriver(
                id=driver.driver_id,
                name=driver.user.full_name,
                status=driver.status,
                rating=driver.rating,
                vehicle=driver.vehicle_info,
            ),
            todays_stats=stats,
            bookings=[BookingResponse.model_validate(b) for b in bookings],
        )

    def get_driver_bookings(
        self,
        driver_id: str,
        status: Optional[Union[BookingStatusEnum, str]] = None,
        on_date: Optional[date] = None,
    ) -> List[Booking]:
        """``status`` of None or ``"all"`` applies no status filter."""
        status = booking_status_filter(status)
        driver = self._get_driver(driver_id)
        return booking_crud.search(
            self.db,
            driver_user_id=driver.user_id,
            status=status,
            scheduled_on=on_date,
        )

    # ---------- availability & location ----------
    def update_status(self, driver_id: str, status: Union[DriverStatusEnum, str]) -> Driver:
        driver = self._get_driver(driver_id, with_user=True)
        status = DriverStatusEnum(status)

        driver_crud.update(self.db, db_obj=driver, obj_in={
            "status": status,
            "last_active_at": datetime.now(),
        })
        self.db.commit()
        self.db.refresh(driver)
        logger.info(f"[driver] {driver_id} is now {status.value}")

        if self.notifier is not None:
            self.notifier.notify_driver_status_change(driver.driver_id, status.value)
        return driver

    def update_location(self, driver_id: str, lat: float, lng: float) -> Driver:
        driver = self._get_driver(driver_id, with_user=True)
        now = datetime.now()

        driver_crud.update(self.db, db_obj=driver, obj_in={
            "current_lat": lat,
            "current_lng": lng,
            "location_updated_at": now,
            "last_active_at": now,
        })
        self.db.commit()
        self.db.refresh(driver)
        logger.debug(f"[driver] {driver_id} location updated to ({lat}, {lng})")
        return driver

    # ---------- directory ----------
    def _next_driver_code(self) -> str:
        number = sequence_crud.next_value(
            self.db,
            name=settings.DRIVER_SEQUENCE_NAME,
            initial=lambda: self.db.query(func.count(Driver.id)).scalar() or 0,
        )
        return format_driver_code(number)

    def create_driver(
        self,
        user_data: Union[DriverUserCreate, Dict[str, Any]],
        driver_data: Optional[Union[DriverProfileCreate, Dict[str, Any]]] = None,
    ) -> Driver:
        """
        Create a driver user and its profile in one transaction.

        The profile gets the next sequential code, which is mirrored onto
        the user record.
        """
        if isinstance(user_data, dict):
            user_data = DriverUserCreate(**user_data)
        if driver_data is None:
            driver_data = DriverProfileCreate()
        elif isinstance(driver_data, dict):
            driver_data = DriverProfileCreate(**driver_data)

        try:
            user_payload = user_data.model_dump()
            user_payload["role"] = UserRoleEnum.DRIVER
            user = UserService(self.db).create(user_payload, commit=False)

            code = self._next_driver_code()
            profile = driver_data.model_dump(mode="json", exclude={"status"})
            driver = driver_crud.create(self.db, obj_in={
                **profile,
                "driver_id": code,
                "user_id": user.id,
                "status": driver_data.status,
            })
            user.driver_id = code

            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        self.db.refresh(driver)
        logger.info(f"[driver] Created driver {driver.driver_id} for user id={user.id}")
        return driver

    def _list_item(self, driver: Driver) -> DriverListItem:
        user = driver.user
        return DriverListItem(
            user_id=user.id,
            first_name=user.first_name,
            last_name=user.last_name,
            email=user.email,
            phone=user.phone,
            role=user.role.value,
            driver_id=driver.driver_id,
            status=driver.status,
            vehicle_info=driver.vehicle_info,
            working_hours=driver.working_hours,
            working_days=driver.working_days,
            is_active=driver.is_active,
            created_at=driver.created_at,
            updated_at=driver.updated_at,
        )

    def get_available_drivers(self) -> List[DriverListItem]:
        return [
            self._list_item(d)
            for d in driver_crud.get_active(self.db, status=DriverStatusEnum.AVAILABLE)
        ]

    def get_all_drivers(self) -> List[DriverListItem]:
        return [self._list_item(d) for d in driver_crud.get_active(self.db)]
