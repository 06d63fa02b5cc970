"""
Tests for the payment boundary with the manual provider and a failing
provider double.
"""
import pytest

from rapidwaste.core.exceptions import NotFound, PaymentError
from rapidwaste.models.booking import PaymentStatusEnum
from rapidwaste.services.payment_service import (
    CHARGE_FAILED,
    ChargeResult,
    ManualPaymentProvider,
    PaymentService,
    RefundResult,
)


class DecliningProvider:
    """Provider whose charges never settle."""

    def create_charge(self, amount_minor, currency, reference, metadata):
        return ChargeResult(reference="decl_1", status=CHARGE_FAILED, amount_minor=amount_minor)

    def retrieve(self, reference):
        return ChargeResult(reference=reference, status=CHARGE_FAILED, amount_minor=0)

    def refund(self, reference, amount_minor=None):
        return RefundResult(reference="refund_decl", amount_minor=amount_minor or 0)


@pytest.fixture(scope="function")
def payment_service(test_db):
    return PaymentService(test_db, ManualPaymentProvider())


class TestPaymentIntent:

    def test_intent_uses_estimated_price_in_minor_units(self, payment_service, pending_booking, test_db):
        intent = payment_service.create_payment_intent(pending_booking.id)

        assert intent.amount == 4500
        assert intent.currency == "usd"
        assert intent.booking_id == pending_booking.booking_id
        assert intent.payment_reference.startswith("manual_")

        test_db.refresh(pending_booking)
        assert pending_booking.payment_reference == intent.payment_reference

    def test_missing_booking(self, payment_service):
        with pytest.raises(NotFound):
            payment_service.create_payment_intent(9999)

    def test_already_paid(self, payment_service, pending_booking):
        intent = payment_service.create_payment_intent(pending_booking.id)
        payment_service.confirm_payment(intent.payment_reference)

        with pytest.raises(PaymentError):
            payment_service.create_payment_intent(pending_booking.id)


class TestConfirmPayment:

    def test_confirm_marks_paid(self, payment_service, pending_booking, test_db):
        intent = payment_service.create_payment_intent(pending_booking.id)

        result = payment_service.confirm_payment(intent.payment_reference)

        assert result.success is True
        test_db.refresh(pending_booking)
        assert pending_booking.payment_status == PaymentStatusEnum.PAID
        assert pending_booking.actual_price == 45.0

    def test_unknown_reference(self, payment_service):
        with pytest.raises(NotFound):
            payment_service.confirm_payment("manual_missing")

    def test_reference_from_another_provider_stays_pending(self, test_db, payment_service, pending_booking):
        payment_service.create_payment_intent(pending_booking.id)
        restarted = PaymentService(test_db, ManualPaymentProvider())

        test_db.refresh(pending_booking)
        result = restarted.confirm_payment(pending_booking.payment_reference)

        assert result.success is False
        test_db.refresh(pending_booking)
        assert pending_booking.payment_status == PaymentStatusEnum.PENDING
        assert pending_booking.actual_price is None

    def test_declined_charge(self, test_db, pending_booking):
        service = PaymentService(test_db, DecliningProvider())
        intent = service.create_payment_intent(pending_booking.id)

        result = service.confirm_payment(intent.payment_reference)

        assert result.success is False
        test_db.refresh(pending_booking)
        assert pending_booking.payment_status == PaymentStatusEnum.FAILED


class TestRefundAndStatus:

    def test_refund_without_payment(self, payment_service, pending_booking):
        with pytest.raises(PaymentError):
            payment_service.refund_payment(pending_booking.id)

    def test_full_refund(self, payment_service, pending_booking, test_db):
        intent = payment_service.create_payment_intent(pending_booking.id)
        payment_service.confirm_payment(intent.payment_reference)

        refund = payment_service.refund_payment(pending_booking.id)

        assert refund.success is True
        assert refund.amount == 45.0
        test_db.refresh(pending_booking)
        assert pending_booking.payment_status == PaymentStatusEnum.REFUNDED

    def test_partial_refund(self, payment_service, pending_booking):
        payment_service.create_payment_intent(pending_booking.id)

        refund = payment_service.refund_payment(pending_booking.id, amount=10.5)
        assert refund.amount == 10.5

    def test_status_before_payment(self, payment_service, pending_booking):
        status = payment_service.get_payment_status(pending_booking.id)

        assert status.payment_status == "pending"
        assert status.message == "No payment initiated"
        assert status.amount is None

    def test_status_after_payment(self, payment_service, pending_booking):
        intent = payment_service.create_payment_intent(pending_booking.id)
        payment_service.confirm_payment(intent.payment_reference)

        status = payment_service.get_payment_status(pending_booking.id)
        assert status.payment_status == "paid"
        assert status.amount == 45.0
        assert status.currency == "usd"
