"""
Payment boundary.

``PaymentService`` talks to a ``PaymentProvider``; the manual provider
(cash or card on pickup) settles every charge immediately and is used
unless another provider is configured.
"""
import uuid
from typing import Any, Dict, Optional, Protocol

from pydantic import BaseModel
from sqlalchemy.orm import Session

from rapidwaste.config import settings
from rapidwaste.core.exceptions import NotFound, PaymentError
from rapidwaste.core.logging_config import get_logger
from rapidwaste.crud.booking import booking_crud
from rapidwaste.models.booking import Booking, PaymentStatusEnum
from rapidwaste.schemas.payment import (
    PaymentConfirmResponse,
    PaymentIntentResponse,
    PaymentStatusResponse,
    RefundResponse,
)
from rapidwaste.services.pricing import from_minor_units, to_minor_units

logger = get_logger(__name__)

CHARGE_SUCCEEDED = "succeeded"
CHARGE_PENDING = "pending"
CHARGE_FAILED = "failed"


class ChargeResult(BaseModel):
    reference: str
    status: str
    amount_minor: int


class RefundResult(BaseModel):
    reference: str
    amount_minor: int


class PaymentProvider(Protocol):

    def create_charge(
        self, amount_minor: int, currency: str, reference: str, metadata: Dict[str, Any]
    ) -> ChargeResult:
        ...

    def retrieve(self, reference: str) -> ChargeResult:
        ...

    def refund(self, reference: str, amount_minor: Optional[int] = None) -> RefundResult:
        ...


class ManualPaymentProvider:
    """Settles charges on creation; amounts are collected by the driver."""

    def __init__(self):
        self._charges: Dict[str, ChargeResult] = {}

    def create_charge(self, amount_minor, currency, reference, metadata):
        result = ChargeResult(
            reference=f"manual_{uuid.uuid4().hex}",
            status=CHARGE_SUCCEEDED,
            amount_minor=amount_minor,
        )
        self._charges[result.reference] = result
        return result

    def retrieve(self, reference):
        # Charges this process never issued stay unsettled
        return self._charges.get(reference) or ChargeResult(
            reference=reference, status=CHARGE_PENDING, amount_minor=0
        )

    def refund(self, reference, amount_minor=None):
        charge = self._charges.get(reference)
        if amount_minor is None:
            amount_minor = charge.amount_minor if charge else 0
        return RefundResult(reference=f"refund_{uuid.uuid4().hex}", amount_minor=amount_minor)


_PROVIDERS = {
    "manual": ManualPaymentProvider,
}
_provider_instance: Optional[PaymentProvider] = None


def get_payment_provider() -> PaymentProvider:
    global _provider_instance
    if _provider_instance is None:
        try:
            _provider_instance = _PROVIDERS[settings.PAYMENT_PROVIDER]()
        except KeyError:
            raise PaymentError(
                f"Unknown payment provider '{settings.PAYMENT_PROVIDER}'",
                details={"provider": settings.PAYMENT_PROVIDER},
            )
    return _provider_instance


class PaymentService:

    def __init__(self, db: Session, provider: Optional[PaymentProvider] = None):
        self.db = db
        self.provider = provider or get_payment_provider()
        self.currency = settings.PAYMENT_CURRENCY

    def _get_booking(self, booking_pk: int) -> Booking:
        booking = booking_crud.get(self.db, booking_pk)
        if not booking:
            raise NotFound("Booking", booking_pk)
        return booking

    def create_payment_intent(self, booking_pk: int) -> PaymentIntentResponse:
        booking = self._get_booking(booking_pk)
        if booking.payment_status == PaymentStatusEnum.PAID:
            raise PaymentError(
                f"Booking {booking.booking_id} is already paid",
                details={"booking_id": booking.booking_id},
            )

        amount_minor = to_minor_units(booking.estimated_price)
        charge = self.provider.create_charge(
            amount_minor,
            self.currency,
            booking.booking_id,
            {"booking_id": booking.booking_id, "customer_email": booking.email},
        )

        booking.payment_reference = charge.reference
        self.db.commit()
        logger.info(f"[payment] Charge {charge.reference} created for {booking.booking_id} ({amount_minor} {self.currency})")

        return PaymentIntentResponse(
            booking_id=booking.booking_id,
            payment_reference=charge.reference,
            amount=amount_minor,
            currency=self.currency,
            status=charge.status,
        )

    def confirm_payment(self, reference: str) -> PaymentConfirmResponse:
        booking = booking_crud.get_by_payment_reference(self.db, reference=reference)
        if not booking:
            raise NotFound("Payment", reference)

        charge = self.provider.retrieve(reference)
        if charge.status != CHARGE_SUCCEEDED:
            booking.payment_status = (
                PaymentStatusEnum.FAILED if charge.status == CHARGE_FAILED else PaymentStatusEnum.PENDING
            )
            self.db.commit()
            logger.warning(f"[payment] Charge {reference} not settled: {charge.status}")
            return PaymentConfirmResponse(
                success=False,
                message=f"Payment not completed: {charge.status}",
                booking_id=booking.booking_id,
            )

        booking.payment_status = PaymentStatusEnum.PAID
        booking.actual_price = (
            from_minor_units(charge.amount_minor) if charge.amount_minor else booking.estimated_price
        )
        self.db.commit()
        logger.info(f"[payment] {booking.booking_id} paid via {reference}")

        return PaymentConfirmResponse(
            success=True,
            message="Payment confirmed successfully",
            booking_id=booking.booking_id,
        )

    def refund_payment(self, booking_pk: int, amount: Optional[float] = None) -> RefundResponse:
        booking = self._get_booking(booking_pk)
        if not booking.payment_reference:
            raise PaymentError(
                "No payment found for this booking",
                details={"booking_id": booking.booking_id},
            )

        amount_minor = to_minor_units(amount) if amount is not None else None
        refund = self.provider.refund(booking.payment_reference, amount_minor)

        booking.payment_status = PaymentStatusEnum.REFUNDED
        self.db.commit()
        logger.info(f"[payment] Refund {refund.reference} issued for {booking.booking_id}")

        return RefundResponse(
            success=True,
            refund_reference=refund.reference,
            amount=from_minor_units(refund.amount_minor),
        )

    def get_payment_status(self, booking_pk: int) -> PaymentStatusResponse:
        booking = self._get_booking(booking_pk)
        if not booking.payment_reference:
            return PaymentStatusResponse(
                payment_status=booking.payment_status.value,
                message="No payment initiated",
            )
        return PaymentStatusResponse(
            payment_status=booking.payment_status.value,
            amount=booking.actual_price if booking.actual_price is not None else booking.estimated_price,
            currency=self.currency,
        )
