from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from rapidwaste.core.exceptions import RapidWasteError
from rapidwaste.core.logging_config import get_logger
from rapidwaste.database.session import get_db
from rapidwaste.schemas.booking import BookingResponse
from rapidwaste.schemas.driver import (
    DriverCreate,
    DriverLocationUpdate,
    DriverResponse,
    DriverStatusUpdate,
)
from rapidwaste.services.driver_service import DriverService
from rapidwaste.services.notification_service import get_notifier
from rapidwaste.utils.response_utils import ResponseWrapper, handle_db_error, handle_domain_error

logger = get_logger(__name__)
router = APIRouter(prefix="/drivers", tags=["drivers"])


def get_driver_service(db: Session = Depends(get_db), notifier=Depends(get_notifier)) -> DriverService:
    return DriverService(db, notifier)


def _unexpected(action: str) -> HTTPException:
    logger.exception(f"Unexpected error occurred while {action}")
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=ResponseWrapper.error(
            message=f"Unexpected error occurred while {action}",
            error_code="INTERNAL_SERVER_ERROR",
        ),
    )


@router.get("/")
def list_drivers(service: DriverService = Depends(get_driver_service)):
    try:
        return ResponseWrapper.listing(service.get_all_drivers(), message="Drivers fetched successfully")
    except SQLAlchemyError as e:
        logger.exception("Database error occurred while fetching drivers")
        raise handle_db_error(e)
    except Exception:
        raise _unexpected("fetching drivers")


@router.get("/available")
def list_available_drivers(service: DriverService = Depends(get_driver_service)):
    try:
        return ResponseWrapper.listing(service.get_available_drivers(), message="Available drivers fetched successfully")
    except SQLAlchemyError as e:
        logger.exception("Database error occurred while fetching available drivers")
        raise handle_db_error(e)
    except Exception:
        raise _unexpected("fetching available drivers")


@router.post("/", status_code=status.HTTP_201_CREATED)
def create_driver(
    payload: DriverCreate,
    service: DriverService = Depends(get_driver_service),
):
    try:
        logger.info(f"Creating driver account for {payload.user.email}")
        driver = service.create_driver(payload.user, payload.driver)
        return ResponseWrapper.created(
            data=DriverResponse.model_validate(driver),
            message="Driver created successfully",
        )
    except RapidWasteError as e:
        raise handle_domain_error(e)
    except SQLAlchemyError as e:
        logger.exception("Database error occurred while creating driver")
        raise handle_db_error(e)
    except Exception:
        raise _unexpected("creating driver")


@router.get("/{driver_id}/dashboard")
def driver_dashboard(
    driver_id: str,
    service: DriverService = Depends(get_driver_service),
):
    try:
        dashboard = service.get_dashboard(driver_id)
        return ResponseWrapper.success(dashboard, message="Dashboard fetched successfully")
    except RapidWasteError as e:
        raise handle_domain_error(e)
    except SQLAlchemyError as e:
        logger.exception(f"Database error occurred while building dashboard for {driver_id}")
        raise handle_db_error(e)
    except Exception:
        raise _unexpected("building driver dashboard")


@router.get("/{driver_id}/bookings")
def driver_bookings(
    driver_id: str,
    status_filter: Optional[str] = Query(None, alias="status", description="Booking status or 'all'"),
    on_date: Optional[date] = Query(None, alias="date"),
    service: DriverService = Depends(get_driver_service),
):
    try:
        bookings = service.get_driver_bookings(driver_id, status=status_filter, on_date=on_date)
        return ResponseWrapper.listing(
            [BookingResponse.model_validate(b) for b in bookings],
            message="Driver bookings fetched successfully",
        )
    except RapidWasteError as e:
        raise handle_domain_error(e)
    except SQLAlchemyError as e:
        logger.exception(f"Database error occurred while fetching bookings for {driver_id}")
        raise handle_db_error(e)
    except Exception:
        raise _unexpected("fetching driver bookings")


@router.patch("/{driver_id}/status")
def update_driver_status(
    driver_id: str,
    payload: DriverStatusUpdate,
    service: DriverService = Depends(get_driver_service),
):
    try:
        driver = service.update_status(driver_id, payload.status)
        return ResponseWrapper.updated(DriverResponse.model_validate(driver), message="Driver status updated successfully")
    except RapidWasteError as e:
        service.db.rollback()
        raise handle_domain_error(e)
    except SQLAlchemyError as e:
        service.db.rollback()
        logger.exception(f"Database error occurred while updating status of {driver_id}")
        raise handle_db_error(e)
    except Exception:
        service.db.rollback()
        raise _unexpected("updating driver status")


@router.patch("/{driver_id}/location")
def update_driver_location(
    driver_id: str,
    payload: DriverLocationUpdate,
    service: DriverService = Depends(get_driver_service),
):
    try:
        driver = service.update_location(driver_id, payload.lat, payload.lng)
        return ResponseWrapper.updated(DriverResponse.model_validate(driver), message="Driver location updated successfully")
    except RapidWasteError as e:
        service.db.rollback()
        raise handle_domain_error(e)
    except SQLAlchemyError as e:
        service.db.rollback()
        logger.exception(f"Database error occurred while updating location of {driver_id}")
        raise handle_db_error(e)
    except Exception:
        service.db.rollback()
        raise _unexpected("updating driver location")
