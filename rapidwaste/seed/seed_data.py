import logging
from datetime import date, timedelta
from typing import Optional

from sqlalchemy.orm import Session

from rapidwaste.config import settings
from rapidwaste.models.booking import Booking
from rapidwaste.models.user import UserRoleEnum
from rapidwaste.services.booking_service import BookingService
from rapidwaste.services.driver_service import DriverService
from rapidwaste.services.status_transition import DRIVER_REQUIRED_STATUSES
from rapidwaste.services.user_service import UserService

logger = logging.getLogger(__name__)


def seed_driver(db: Session) -> None:
    """
    Seed the sample driver account and profile (idempotent).
    """
    users = UserService(db)
    if users.find_by_email(settings.SEED_DRIVER_EMAIL):
        logger.info("Sample driver already exists, skipping.")
        return

    driver = DriverService(db).create_driver(
        {
            "first_name": "John",
            "last_name": "Driver",
            "email": settings.SEED_DRIVER_EMAIL,
            "phone": "(555) 123-4567",
            "password": settings.SEED_DRIVER_PASSWORD,
        },
        {
            "vehicle_info": {
                "make": "Ford",
                "model": "Transit",
                "year": 2022,
                "license_plate": "RW-001",
                "capacity": "Large",
            },
            "working_hours": {"start": "08:00", "end": "18:00"},
            "working_days": ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday"],
            "status": "available",
        },
    )
    logger.info(f"Driver {driver.driver_id} created.")


def seed_admin(db: Session) -> None:
    """
    Seed the admin account (idempotent).
    """
    users = UserService(db)
    if users.find_by_email(settings.SEED_ADMIN_EMAIL):
        logger.info("Sample admin already exists, skipping.")
        return

    admin = users.create({
        "first_name": "Admin",
        "last_name": "User",
        "email": settings.SEED_ADMIN_EMAIL,
        "phone": "(555) 999-0000",
        "password": settings.SEED_ADMIN_PASSWORD,
        "role": UserRoleEnum.ADMIN,
    })
    logger.info(f"Admin {admin.email} created.")


def sample_bookings(driver_user_id: Optional[int], today: Optional[date] = None) -> list:
    """Sample pickups spread over yesterday, today and the next few days."""
    today = today or date.today()

    def day(offset: int) -> date:
        return today + timedelta(days=offset)

    return [
        {
            "first_name": "Sarah", "last_name": "Johnson", "email": "sarah@example.com",
            "phone": "(555) 123-4567", "address": "1234 Oak Street", "city": "Downtown", "zip_code": "12345",
            "service_type": "emergency", "bag_count": "1-5", "urgent_pickup": True,
            "preferred_date": day(0), "preferred_time": "Next 2 hours",
            "special_instructions": "Behind garage, use side gate",
            "status": "in-progress", "driver_id": driver_user_id,
        },
        {
            "first_name": "Mike", "last_name": "Chen", "email": "mike@example.com",
            "phone": "(555) 987-6543", "address": "5678 Pine Avenue", "city": "Suburbs", "zip_code": "67890",
            "service_type": "regular", "bag_count": "6-10",
            "preferred_date": day(1), "preferred_time": "10:00 AM",
            "special_instructions": "Front curb pickup",
            "status": "scheduled", "driver_id": driver_user_id,
        },
        {
            "first_name": "Jennifer", "last_name": "Smith", "email": "jennifer@example.com",
            "phone": "(555) 456-7890", "address": "9012 Maple Drive", "city": "East Side", "zip_code": "11111",
            "service_type": "bulk", "bag_count": "11+",
            "preferred_date": day(-1), "preferred_time": "2:00 PM",
            "special_instructions": "Old couch and dining table, call upon arrival",
            "status": "completed", "driver_id": driver_user_id, "payment_status": "paid",
        },
        {
            "first_name": "Robert", "last_name": "Wilson", "email": "robert@example.com",
            "phone": "(555) 321-0987", "address": "3456 Cedar Lane", "city": "North", "zip_code": "22222",
            "service_type": "emergency", "bag_count": "1-5",
            "preferred_date": day(0), "preferred_time": "Today by 6 PM",
            "special_instructions": "Apartment building, unit 4B",
            "status": "pending", "driver_id": driver_user_id,
        },
        {
            "first_name": "Lisa", "last_name": "Garcia", "email": "lisa.garcia@example.com",
            "phone": "(555) 555-1234", "address": "7890 Elm Street", "city": "Westside", "zip_code": "33333",
            "service_type": "regular", "bag_count": "1-5",
            "preferred_date": day(1), "preferred_time": "4:00 PM",
            "special_instructions": "Ring doorbell twice",
            "status": "cancelled", "driver_id": driver_user_id,
        },
        {
            "first_name": "David", "last_name": "Brown", "email": "david.brown@example.com",
            "phone": "(555) 888-9999", "address": "1111 Main Street", "city": "Downtown", "zip_code": "44444",
            "service_type": "emergency", "bag_count": "6-10", "urgent_pickup": True,
            "preferred_date": day(-1), "preferred_time": "Next 4 hours",
            "special_instructions": "Commercial building, loading dock access",
            "status": "completed", "driver_id": driver_user_id, "payment_status": "paid",
        },
        {
            "first_name": "Amanda", "last_name": "Martinez", "email": "amanda@example.com",
            "phone": "(555) 777-8888", "address": "2468 Broadway", "city": "Midtown", "zip_code": "55555",
            "service_type": "bulk", "bag_count": "11+",
            "preferred_date": day(2), "preferred_time": "12:00 PM",
            "special_instructions": "Large appliances - refrigerator and washing machine",
            "status": "scheduled",
        },
        {
            "first_name": "Kevin", "last_name": "Lee", "email": "kevin.lee@example.com",
            "phone": "(555) 333-4444", "address": "3579 Oak Avenue", "city": "Eastside", "zip_code": "66666",
            "service_type": "regular", "bag_count": "6-10",
            "preferred_date": day(0), "preferred_time": "8:00 AM",
            "special_instructions": "Weekly pickup, bags in alley",
            "status": "in-progress", "driver_id": driver_user_id,
        },
        {
            "first_name": "Maria", "last_name": "Rodriguez", "email": "maria@example.com",
            "phone": "(555) 222-3333", "address": "4680 Sunset Blvd", "city": "Hollywood", "zip_code": "77777",
            "service_type": "emergency", "bag_count": "1-5", "urgent_pickup": True,
            "preferred_date": day(0), "preferred_time": "Today by 6 PM",
            "special_instructions": "Office building cleanup after water damage",
            "status": "scheduled", "driver_id": driver_user_id,
        },
        {
            "first_name": "James", "last_name": "Taylor", "email": "james.taylor@example.com",
            "phone": "(555) 111-2222", "address": "5791 Pine Street", "city": "Southside", "zip_code": "88888",
            "service_type": "bulk", "bag_count": "11+",
            "preferred_date": day(3), "preferred_time": "10:00 AM",
            "special_instructions": "Construction debris from home renovation",
            "status": "pending",
        },
    ]


def seed_bookings(db: Session) -> None:
    """
    Seed sample bookings (idempotent: skipped when any booking exists).
    """
    if db.query(Booking.id).first() is not None:
        logger.info("Sample bookings already exist, skipping.")
        return

    driver_user = UserService(db).find_by_email(settings.SEED_DRIVER_EMAIL)
    driver_user_id = driver_user.id if driver_user else None

    service = BookingService(db)
    for record in sample_bookings(driver_user_id):
        if record.get("driver_id") is None and record["status"] in DRIVER_REQUIRED_STATUSES:
            logger.warning(f"No sample driver, skipping {record['status']} booking for {record['email']}")
            continue
        booking = service.import_booking(record)
        logger.info(f"Booking {booking.booking_id} created.")

    logger.info("Booking seeding completed.")


def seed_all(db: Session) -> None:
    seed_driver(db)
    seed_admin(db)
    seed_bookings(db)
    logger.info("Database seeding completed successfully.")
