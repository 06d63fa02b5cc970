"""
Tests for the sample data loader.
"""
from rapidwaste.models import Booking, Driver, User, UserRoleEnum
from rapidwaste.models.booking import BookingStatusEnum
from rapidwaste.seed.seed_data import seed_all, seed_bookings


class TestSeedAll:

    def test_seeds_accounts_and_bookings(self, test_db):
        seed_all(test_db)

        assert test_db.query(User).filter(User.role == UserRoleEnum.ADMIN).count() == 1
        driver = test_db.query(Driver).one()
        assert driver.driver_id == "D0001"

        bookings = test_db.query(Booking).all()
        assert len(bookings) == 10
        assert sum(1 for b in bookings if b.status == BookingStatusEnum.COMPLETED) == 2
        assert all(b.completed_at for b in bookings if b.status == BookingStatusEnum.COMPLETED)
        assert sum(1 for b in bookings if b.driver_id is None) == 2

    def test_is_idempotent(self, test_db):
        seed_all(test_db)
        seed_all(test_db)

        assert test_db.query(Driver).count() == 1
        assert test_db.query(Booking).count() == 10

    def test_bookings_without_sample_driver_skip_active_records(self, test_db):
        seed_bookings(test_db)

        bookings = test_db.query(Booking).all()
        assert len(bookings) == 6
        assert all(b.driver_id is None for b in bookings)
        assert not any(
            b.status in (BookingStatusEnum.IN_PROGRESS, BookingStatusEnum.COMPLETED) for b in bookings
        )

    def test_seed_endpoint(self, client):
        response = client.post("/seed-database")

        assert response.status_code == 200
        assert client.get("/api/v1/bookings/").json()["count"] == 10
