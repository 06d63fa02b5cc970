from typing import Optional

from fastapi import APIRouter, Body, Depends
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from rapidwaste.core.exceptions import RapidWasteError
from rapidwaste.core.logging_config import get_logger
from rapidwaste.database.session import get_db
from rapidwaste.schemas.payment import RefundRequest
from rapidwaste.services.payment_service import PaymentService
from rapidwaste.utils.response_utils import ResponseWrapper, handle_db_error, handle_domain_error

logger = get_logger(__name__)
router = APIRouter(prefix="/payments", tags=["payments"])


def get_payment_service(db: Session = Depends(get_db)) -> PaymentService:
    return PaymentService(db)


@router.post("/create-intent/{booking_id}")
def create_payment_intent(booking_id: int, service: PaymentService = Depends(get_payment_service)):
    try:
        intent = service.create_payment_intent(booking_id)
        return ResponseWrapper.created(intent, message="Payment intent created successfully")
    except RapidWasteError as e:
        service.db.rollback()
        raise handle_domain_error(e)
    except SQLAlchemyError as e:
        service.db.rollback()
        logger.exception(f"Database error occurred while creating payment intent for booking id={booking_id}")
        raise handle_db_error(e)


@router.post("/confirm/{reference}")
def confirm_payment(reference: str, service: PaymentService = Depends(get_payment_service)):
    try:
        result = service.confirm_payment(reference)
        return ResponseWrapper.success(result, message=result.message)
    except RapidWasteError as e:
        service.db.rollback()
        raise handle_domain_error(e)
    except SQLAlchemyError as e:
        service.db.rollback()
        logger.exception(f"Database error occurred while confirming payment {reference}")
        raise handle_db_error(e)


@router.get("/status/{booking_id}")
def payment_status(booking_id: int, service: PaymentService = Depends(get_payment_service)):
    try:
        return ResponseWrapper.success(service.get_payment_status(booking_id), message="Payment status fetched successfully")
    except RapidWasteError as e:
        raise handle_domain_error(e)
    except SQLAlchemyError as e:
        logger.exception(f"Database error occurred while fetching payment status for booking id={booking_id}")
        raise handle_db_error(e)


@router.post("/refund/{booking_id}")
def refund_payment(
    booking_id: int,
    payload: Optional[RefundRequest] = Body(None),
    service: PaymentService = Depends(get_payment_service),
):
    try:
        amount = payload.amount if payload else None
        refund = service.refund_payment(booking_id, amount)
        return ResponseWrapper.success(refund, message="Refund processed successfully")
    except RapidWasteError as e:
        service.db.rollback()
        raise handle_domain_error(e)
    except SQLAlchemyError as e:
        service.db.rollback()
        logger.exception(f"Database error occurred while refunding booking id={booking_id}")
        raise handle_db_error(e)
