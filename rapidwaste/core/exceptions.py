"""
Domain errors raised by the booking engine and its collaborators.

Every error carries an ``error_code`` and a ``status_code`` so the routing
layer can translate it into the standard error envelope without inspecting
messages.
"""
from typing import Any, Dict, Optional


class RapidWasteError(Exception):
    error_code = "RAPIDWASTE_ERROR"
    status_code = 500

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class NotFound(RapidWasteError):
    error_code = "NOT_FOUND"
    status_code = 404

    def __init__(self, resource: str, identifier: Any):
        super().__init__(
            f"{resource} not found",
            details={"resource": resource, "id": identifier},
        )
        self.error_code = f"{resource.upper().replace(' ', '_')}_NOT_FOUND"


class InvalidTransition(RapidWasteError):
    error_code = "INVALID_STATUS_TRANSITION"
    status_code = 400

    def __init__(self, current: str, requested: str, reason: Optional[str] = None):
        message = f"Invalid status transition from {current} to {requested}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message, details={"current_status": current, "requested_status": requested})
        self.current = current
        self.requested = requested


class InvalidAssignment(RapidWasteError):
    error_code = "INVALID_DRIVER"
    status_code = 400


class DuplicateIdentity(RapidWasteError):
    error_code = "DUPLICATE_IDENTITY"
    status_code = 409


class PaymentError(RapidWasteError):
    error_code = "PAYMENT_ERROR"
    status_code = 400


class BookingIdExhausted(RapidWasteError):
    error_code = "BOOKING_ID_EXHAUSTED"
    status_code = 500


class InvalidStatusFilter(RapidWasteError):
    error_code = "INVALID_STATUS"
    status_code = 400

    def __init__(self, value: Any, allowed):
        super().__init__(
            f"Unknown booking status '{value}'",
            details={"allowed": list(allowed)},
        )
