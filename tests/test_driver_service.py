"""
Tests for the driver directory: creation, availability, location and the
daily dashboard.
"""
from datetime import date, datetime, timedelta

import pytest

from rapidwaste.core.exceptions import DuplicateIdentity, InvalidStatusFilter, NotFound
from rapidwaste.models import Driver, Sequence, User, UserRoleEnum
from rapidwaste.models.booking import BookingStatusEnum
from rapidwaste.models.driver import DriverStatusEnum
from rapidwaste.services.driver_service import format_driver_code
from rapidwaste.utils.auth import verify_password


def _driver_user(n: int) -> dict:
    return {
        "first_name": "Driver",
        "last_name": f"Number{n}",
        "email": f"driver{n}@example.com",
        "phone": f"(555) 000-000{n}",
        "password": "password123",
    }


class TestCreateDriver:
    """Test cases for driver onboarding"""

    def test_first_driver_gets_d0001(self, driver):
        assert driver.driver_id == "D0001"
        assert driver.status == DriverStatusEnum.AVAILABLE
        assert driver.rating == 4.5
        assert driver.vehicle_info["license_plate"] == "RW-001"

    def test_user_is_driver_with_hashed_password(self, driver):
        user = driver.user
        assert user.role == UserRoleEnum.DRIVER
        assert user.password != "password123"
        assert verify_password("password123", user.password)
        assert user.driver_id == driver.driver_id

    def test_codes_are_sequential(self, driver_service, driver):
        second = driver_service.create_driver(_driver_user(2))
        third = driver_service.create_driver(_driver_user(3))

        assert [second.driver_id, third.driver_id] == ["D0002", "D0003"]
        assert second.status == DriverStatusEnum.OFFLINE

    def test_sequence_seeded_from_existing_drivers(self, driver_service, test_db, driver):
        # Simulate a database populated before the counter existed
        test_db.query(Sequence).delete()
        test_db.commit()

        second = driver_service.create_driver(_driver_user(2))
        assert second.driver_id == "D0002"

    def test_duplicate_email_rolls_back(self, driver_service, test_db, driver):
        with pytest.raises(DuplicateIdentity):
            driver_service.create_driver({**_driver_user(2), "email": "driver@rapidwaste.com"})

        assert test_db.query(Driver).count() == 1
        assert test_db.query(User).count() == 1

    def test_format_driver_code(self):
        assert format_driver_code(7) == "D0007"
        assert format_driver_code(12345) == "D12345"


class TestDriverStatusAndLocation:

    def test_update_status_notifies(self, driver_service, driver, notifier):
        updated = driver_service.update_status(driver.driver_id, "busy")

        assert updated.status == DriverStatusEnum.BUSY
        assert updated.last_active_at is not None
        notifier.notify_driver_status_change.assert_called_once_with("D0001", "busy")

    def test_update_location(self, driver_service, driver):
        updated = driver_service.update_location(driver.driver_id, 40.7128, -74.006)

        assert updated.current_location["lat"] == 40.7128
        assert updated.current_location["lng"] == -74.006
        assert updated.location_updated_at is not None

    def test_no_location_until_reported(self, driver):
        assert driver.current_location is None

    def test_unknown_driver(self, driver_service):
        with pytest.raises(NotFound) as exc_info:
            driver_service.update_status("D9999", "available")
        assert exc_info.value.error_code == "DRIVER_NOT_FOUND"

        with pytest.raises(NotFound):
            driver_service.update_location("D9999", 0, 0)


class TestDriverListings:

    def test_available_drivers(self, driver_service, driver):
        driver_service.create_driver(_driver_user(2))

        available = driver_service.get_available_drivers()
        assert [d.driver_id for d in available] == ["D0001"]
        assert available[0].email == "driver@rapidwaste.com"
        assert available[0].role == "driver"

    def test_all_drivers_ordered_by_code(self, driver_service, driver):
        driver_service.create_driver(_driver_user(2))

        assert [d.driver_id for d in driver_service.get_all_drivers()] == ["D0001", "D0002"]


class TestDriverBookings:

    def test_filters_by_status(self, driver_service, booking_service, scheduled_booking, driver):
        booking_service.update_status(scheduled_booking.id, "in-progress")

        assert len(driver_service.get_driver_bookings(driver.driver_id)) == 1
        assert driver_service.get_driver_bookings(driver.driver_id, status=BookingStatusEnum.PENDING) == []
        in_progress = driver_service.get_driver_bookings(driver.driver_id, status=BookingStatusEnum.IN_PROGRESS)
        assert [b.id for b in in_progress] == [scheduled_booking.id]

    def test_all_status_is_no_filter(self, driver_service, scheduled_booking, driver):
        unfiltered = driver_service.get_driver_bookings(driver.driver_id)
        everything = driver_service.get_driver_bookings(driver.driver_id, status="all")

        assert [b.id for b in everything] == [b.id for b in unfiltered] == [scheduled_booking.id]

    def test_status_given_as_string(self, driver_service, scheduled_booking, driver):
        scheduled = driver_service.get_driver_bookings(driver.driver_id, status="scheduled")
        assert [b.id for b in scheduled] == [scheduled_booking.id]

    def test_unknown_status_filter(self, driver_service, driver):
        with pytest.raises(InvalidStatusFilter) as exc_info:
            driver_service.get_driver_bookings(driver.driver_id, status="lost")
        assert "all" in exc_info.value.details["allowed"]

    def test_date_matches_preferred_or_created(
        self, driver_service, booking_service, driver_user, driver, sample_booking_data, test_db
    ):
        next_week = date.today() + timedelta(days=7)
        preferred = booking_service.create_booking({**sample_booking_data, "preferred_date": next_week.isoformat()})
        other = booking_service.create_booking({**sample_booking_data, "email": "b@example.com"})
        for booking in (preferred, other):
            booking_service.assign_driver(booking.id, driver_user.id)

        on_next_week = driver_service.get_driver_bookings(driver.driver_id, on_date=next_week)
        assert [b.id for b in on_next_week] == [preferred.id]

        today = driver_service.get_driver_bookings(driver.driver_id, on_date=date.today())
        assert {b.id for b in today} == {preferred.id, other.id}

    def test_unknown_driver(self, driver_service):
        with pytest.raises(NotFound):
            driver_service.get_driver_bookings("D9999")


class TestDashboard:
    """Today's snapshot for a driver"""

    def test_counts_and_earnings(self, driver_service, booking_service, driver_user, driver, sample_booking_data, test_db):
        bookings = [
            booking_service.create_booking({**sample_booking_data, "email": f"c{i}@example.com"})
            for i in range(4)
        ]
        for booking in bookings:
            booking_service.assign_driver(booking.id, driver_user.id)

        completed, in_progress, scheduled, old = bookings
        booking_service.update_status(completed.id, "in-progress")
        booking_service.update_status(completed.id, "completed", {"actual_price": 60.0})
        booking_service.update_status(in_progress.id, "in-progress")

        # Created last week with no preferred date: not part of today
        old.created_at = datetime.now() - timedelta(days=7)
        test_db.commit()

        dashboard = driver_service.get_dashboard(driver.driver_id)

        assert dashboard.driver.id == "D0001"
        assert dashboard.driver.name == "John Driver"
        assert dashboard.driver.vehicle["make"] == "Ford"
        assert dashboard.todays_stats.total_bookings == 3
        assert dashboard.todays_stats.completed_bookings == 1
        assert dashboard.todays_stats.in_progress_bookings == 1
        assert dashboard.todays_stats.pending_bookings == 1
        assert dashboard.todays_stats.earnings == 60.0
        assert {b.id for b in dashboard.bookings} == {completed.id, in_progress.id, scheduled.id}

    def test_earnings_fall_back_to_estimate(self, driver_service, booking_service, scheduled_booking, driver):
        booking_service.update_status(scheduled_booking.id, "in-progress")
        booking_service.update_status(scheduled_booking.id, "completed")

        dashboard = driver_service.get_dashboard(driver.driver_id)
        assert dashboard.todays_stats.earnings == 45

    def test_empty_day(self, driver_service, driver):
        dashboard = driver_service.get_dashboard(driver.driver_id)

        assert dashboard.todays_stats.total_bookings == 0
        assert dashboard.bookings == []

    def test_unknown_driver(self, driver_service):
        with pytest.raises(NotFound):
            driver_service.get_dashboard("D9999")
