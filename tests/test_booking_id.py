"""
Tests for booking id generation and collision handling.
"""
from unittest.mock import patch

import pytest

from rapidwaste.core.exceptions import BookingIdExhausted
from rapidwaste.services.booking_id import BOOKING_ID_PATTERN, booking_id_prefix, generate_booking_id


class TestGenerateBookingId:

    @pytest.mark.parametrize("service_type, prefix", [
        ("emergency", "EMG"),
        ("bulk", "BLK"),
        ("regular", "REG"),
        ("something-else", "REG"),
    ])
    def test_prefix_follows_service_type(self, service_type, prefix):
        booking_id = generate_booking_id(service_type)
        assert booking_id.startswith(f"{prefix}-")
        assert booking_id_prefix(service_type) == prefix

    def test_format(self):
        for _ in range(50):
            assert BOOKING_ID_PATTERN.match(generate_booking_id("bulk"))

    def test_ids_vary(self):
        ids = {generate_booking_id("regular") for _ in range(50)}
        assert len(ids) > 1


class TestUniqueBookingId:
    """Collision retries inside the booking engine"""

    def test_retries_after_collision(self, booking_service, pending_booking, sample_booking_data):
        taken = pending_booking.booking_id
        with patch(
            "rapidwaste.services.booking_service.generate_booking_id",
            side_effect=[taken, "REG-ZZZZZZ"],
        ):
            booking = booking_service.create_booking({**sample_booking_data, "email": "other@example.com"})

        assert booking.booking_id == "REG-ZZZZZZ"

    def test_gives_up_after_max_attempts(self, booking_service, pending_booking):
        taken = pending_booking.booking_id
        with patch("rapidwaste.services.booking_service.generate_booking_id", return_value=taken):
            with pytest.raises(BookingIdExhausted):
                booking_service._unique_booking_id("regular")
