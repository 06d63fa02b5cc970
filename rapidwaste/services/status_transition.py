"""
Booking status graph.

Every status change made through the booking engine passes through
``validate_transition`` before anything is written.
"""
from typing import Dict, FrozenSet

from rapidwaste.core.exceptions import InvalidTransition
from rapidwaste.models.booking import BookingStatusEnum

VALID_TRANSITIONS: Dict[str, FrozenSet[str]] = {
    BookingStatusEnum.PENDING.value: frozenset({
        BookingStatusEnum.SCHEDULED.value,
        BookingStatusEnum.CANCELLED.value,
    }),
    BookingStatusEnum.SCHEDULED.value: frozenset({
        BookingStatusEnum.IN_PROGRESS.value,
        BookingStatusEnum.CANCELLED.value,
    }),
    BookingStatusEnum.IN_PROGRESS.value: frozenset({
        BookingStatusEnum.COMPLETED.value,
        BookingStatusEnum.CANCELLED.value,
    }),
    BookingStatusEnum.COMPLETED.value: frozenset(),
    BookingStatusEnum.CANCELLED.value: frozenset(),
}

# Statuses that only make sense once a driver is attached
DRIVER_REQUIRED_STATUSES = frozenset({
    BookingStatusEnum.IN_PROGRESS.value,
    BookingStatusEnum.COMPLETED.value,
})


def _value(status) -> str:
    return status.value if hasattr(status, "value") else str(status)


def allowed_transitions(current) -> FrozenSet[str]:
    return VALID_TRANSITIONS.get(_value(current), frozenset())


def is_terminal(status) -> bool:
    return not allowed_transitions(status)


def validate_transition(current, requested) -> None:
    """Raise InvalidTransition unless ``requested`` is reachable from ``current``."""
    current_value, requested_value = _value(current), _value(requested)
    if requested_value not in allowed_transitions(current_value):
        raise InvalidTransition(current_value, requested_value)
