from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from rapidwaste.core.exceptions import RapidWasteError
from rapidwaste.core.logging_config import get_logger
from rapidwaste.database.session import get_db
from rapidwaste.models.booking import BookingStatusEnum, ServiceTypeEnum
from rapidwaste.schemas.booking import (
    AssignDriverRequest,
    BookingCreate,
    BookingResponse,
    BookingStats,
    BookingStatusUpdate,
)
from rapidwaste.services.booking_service import BookingService
from rapidwaste.services.notification_service import get_notifier
from rapidwaste.utils.response_utils import (
    ResponseWrapper,
    handle_db_error,
    handle_domain_error,
    handle_http_error,
)

logger = get_logger(__name__)
router = APIRouter(prefix="/bookings", tags=["bookings"])


def get_booking_service(db: Session = Depends(get_db), notifier=Depends(get_notifier)) -> BookingService:
    return BookingService(db, notifier)


def _unexpected(action: str) -> HTTPException:
    logger.exception(f"Unexpected error occurred while {action}")
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=ResponseWrapper.error(
            message=f"Unexpected error occurred while {action}",
            error_code="INTERNAL_SERVER_ERROR",
        ),
    )


@router.post("/", status_code=status.HTTP_201_CREATED)
def create_booking(
    booking_in: BookingCreate,
    service: BookingService = Depends(get_booking_service),
):
    try:
        logger.info(f"Creating {booking_in.service_type.value} booking for {booking_in.email}")
        booking = service.create_booking(booking_in)
        return ResponseWrapper.created(
            data=BookingResponse.model_validate(booking),
            message="Booking created successfully",
        )
    except RapidWasteError as e:
        service.db.rollback()
        raise handle_domain_error(e)
    except SQLAlchemyError as e:
        service.db.rollback()
        logger.exception("Database error occurred while creating booking")
        raise handle_db_error(e)
    except HTTPException as e:
        raise handle_http_error(e)
    except Exception:
        service.db.rollback()
        raise _unexpected("creating booking")


@router.get("/")
def list_bookings(
    status_filter: Optional[BookingStatusEnum] = Query(None, alias="status"),
    service_type: Optional[ServiceTypeEnum] = Query(None, alias="serviceType"),
    created_on: Optional[date] = Query(None, alias="date", description="Creation day (YYYY-MM-DD)"),
    driver_id: Optional[str] = Query(None, alias="driverId", description="External driver code, e.g. D0001"),
    service: BookingService = Depends(get_booking_service),
):
    try:
        bookings = service.find_all(
            status=status_filter,
            service_type=service_type,
            date=created_on,
            driver_id=driver_id,
        )
        return ResponseWrapper.listing(
            [BookingResponse.model_validate(b) for b in bookings],
            message="Bookings fetched successfully",
        )
    except SQLAlchemyError as e:
        logger.exception("Database error occurred while fetching bookings")
        raise handle_db_error(e)
    except Exception:
        raise _unexpected("fetching bookings")


@router.get("/stats")
def booking_stats(
    start_date: Optional[date] = Query(None, alias="startDate"),
    end_date: Optional[date] = Query(None, alias="endDate"),
    service: BookingService = Depends(get_booking_service),
):
    try:
        stats = service.get_stats(start_date=start_date, end_date=end_date)
        return ResponseWrapper.success(BookingStats(**stats), message="Booking statistics fetched successfully")
    except SQLAlchemyError as e:
        logger.exception("Database error occurred while computing booking stats")
        raise handle_db_error(e)
    except Exception:
        raise _unexpected("computing booking stats")


@router.get("/{booking_id}")
def get_booking(
    booking_id: int,
    service: BookingService = Depends(get_booking_service),
):
    try:
        booking = service.find_by_id(booking_id)
        return ResponseWrapper.success(BookingResponse.model_validate(booking), message="Booking fetched successfully")
    except RapidWasteError as e:
        raise handle_domain_error(e)
    except SQLAlchemyError as e:
        logger.exception(f"Database error occurred while fetching booking id={booking_id}")
        raise handle_db_error(e)
    except Exception:
        raise _unexpected("fetching booking")


@router.patch("/{booking_id}/status")
def update_booking_status(
    booking_id: int,
    update: BookingStatusUpdate,
    service: BookingService = Depends(get_booking_service),
):
    try:
        logger.info(f"Updating booking id={booking_id} to status={update.status.value}")
        booking = service.apply_status_update(booking_id, update)
        return ResponseWrapper.updated(
            data=BookingResponse.model_validate(booking),
            message="Booking status updated successfully",
        )
    except RapidWasteError as e:
        service.db.rollback()
        raise handle_domain_error(e)
    except SQLAlchemyError as e:
        service.db.rollback()
        logger.exception(f"Database error occurred while updating booking id={booking_id}")
        raise handle_db_error(e)
    except Exception:
        service.db.rollback()
        raise _unexpected("updating booking status")


@router.patch("/{booking_id}/assign-driver")
def assign_driver(
    booking_id: int,
    payload: AssignDriverRequest,
    service: BookingService = Depends(get_booking_service),
):
    try:
        logger.info(f"Assigning driver user={payload.driver_id} to booking id={booking_id}")
        booking = service.assign_driver(booking_id, payload.driver_id)
        return ResponseWrapper.updated(
            data=BookingResponse.model_validate(booking),
            message="Driver assigned successfully",
        )
    except RapidWasteError as e:
        service.db.rollback()
        raise handle_domain_error(e)
    except SQLAlchemyError as e:
        service.db.rollback()
        logger.exception(f"Database error occurred while assigning driver to booking id={booking_id}")
        raise handle_db_error(e)
    except Exception:
        service.db.rollback()
        raise _unexpected("assigning driver")
