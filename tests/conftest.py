"""
Pytest configuration and fixtures for testing.
"""
import os

# The application engine is built at import time; keep it off PostgreSQL
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("LOG_COLORS", "false")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from unittest.mock import Mock

from rapidwaste.database.session import Base, get_db
from rapidwaste.main import app
from rapidwaste.models import Driver, User, UserRoleEnum
from rapidwaste.services.booking_service import BookingService
from rapidwaste.services.driver_service import DriverService
from rapidwaste.services.notification_service import get_notifier
from rapidwaste.utils.auth import get_password_hash


# Test database URL - using in-memory SQLite for tests
SQLALCHEMY_TEST_DATABASE_URL = "sqlite:///:memory:"


@pytest.fixture(scope="function")
def test_db():
    """
    Create a fresh test database for each test function.
    """
    engine = create_engine(
        SQLALCHEMY_TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)

    TestingSessionLocal = sessionmaker(autoflush=False, bind=engine)
    db = TestingSessionLocal()

    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def notifier():
    """Stand-in for the notification relay that records calls."""
    return Mock()


@pytest.fixture(scope="function")
def client(test_db, notifier):
    """
    Create a test client bound to the test database and the mock notifier.
    """
    def override_get_db():
        try:
            yield test_db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_notifier] = lambda: notifier

    yield TestClient(app)

    app.dependency_overrides.clear()


@pytest.fixture(scope="function")
def booking_service(test_db, notifier):
    return BookingService(test_db, notifier)


@pytest.fixture(scope="function")
def driver_service(test_db, notifier):
    return DriverService(test_db, notifier)


@pytest.fixture(scope="function")
def sample_booking_data():
    """Common booking request used across tests"""
    return {
        "first_name": "Sarah",
        "last_name": "Johnson",
        "email": "sarah@example.com",
        "phone": "(555) 123-4567",
        "address": "1234 Oak Street",
        "city": "Downtown",
        "zip_code": "12345",
        "service_type": "regular",
        "bag_count": "1-5",
        "urgent_pickup": False,
    }


@pytest.fixture(scope="function")
def admin_user(test_db):
    user = User(
        first_name="Admin",
        last_name="User",
        email="admin@rapidwaste.com",
        phone="(555) 999-0000",
        password=get_password_hash("admin123"),
        role=UserRoleEnum.ADMIN,
    )
    test_db.add(user)
    test_db.commit()
    test_db.refresh(user)
    return user


@pytest.fixture(scope="function")
def driver(driver_service) -> Driver:
    """Driver profile D0001 with its user, created through the directory."""
    return driver_service.create_driver(
        {
            "first_name": "John",
            "last_name": "Driver",
            "email": "driver@rapidwaste.com",
            "phone": "(555) 123-4567",
            "password": "password123",
        },
        {
            "vehicle_info": {
                "make": "Ford",
                "model": "Transit",
                "year": 2022,
                "license_plate": "RW-001",
                "capacity": "Large",
            },
            "working_days": ["Monday", "Tuesday"],
            "status": "available",
        },
    )


@pytest.fixture(scope="function")
def driver_user(driver) -> User:
    return driver.user


@pytest.fixture(scope="function")
def pending_booking(booking_service, sample_booking_data):
    return booking_service.create_booking(sample_booking_data)


@pytest.fixture(scope="function")
def scheduled_booking(booking_service, pending_booking, driver_user):
    return booking_service.assign_driver(pending_booking.id, driver_user.id)
