from datetime import date, datetime
from typing import Optional, List, Dict, Any
from sqlalchemy import and_, case, func, or_
from sqlalchemy.orm import Session, joinedload

from rapidwaste.crud.base import CRUDBase
from rapidwaste.models.booking import (
    Booking,
    BookingStatusEnum,
    ServiceTypeEnum,
)
from rapidwaste.schemas.booking import BookingCreate, BookingStatusUpdate
from rapidwaste.utils.date_utils import day_window


class CRUDBooking(CRUDBase[Booking, BookingCreate, BookingStatusUpdate]):

    def _joined(self, db: Session):
        return db.query(Booking).options(
            joinedload(Booking.customer),
            joinedload(Booking.driver),
        )

    def get_by_id(self, db: Session, *, id: int, for_update: bool = False) -> Optional[Booking]:
        if for_update:
            # Row lock without eager joins; outer joins cannot be locked on PostgreSQL
            return db.query(Booking).filter(Booking.id == id).with_for_update().first()
        return self._joined(db).filter(Booking.id == id).first()

    def booking_id_exists(self, db: Session, *, booking_id: str) -> bool:
        return db.query(Booking.id).filter(Booking.booking_id == booking_id).first() is not None

    def get_by_payment_reference(self, db: Session, *, reference: str) -> Optional[Booking]:
        return db.query(Booking).filter(Booking.payment_reference == reference).first()

    def search(
        self,
        db: Session,
        *,
        status: Optional[BookingStatusEnum] = None,
        service_type: Optional[ServiceTypeEnum] = None,
        created_on: Optional[date] = None,
        driver_user_id: Optional[int] = None,
        scheduled_on: Optional[date] = None,
    ) -> List[Booking]:
        """
        Filtered listing, newest first, with customer and driver joined.

        ``created_on`` matches the creation day only; ``scheduled_on`` matches
        either the preferred pickup date or the creation day.
        """
        query = self._joined(db)

        if status is not None:
            query = query.filter(Booking.status == status)
        if service_type is not None:
            query = query.filter(Booking.service_type == service_type)
        if driver_user_id is not None:
            query = query.filter(Booking.driver_id == driver_user_id)
        if created_on is not None:
            start, end = day_window(created_on)
            query = query.filter(Booking.created_at >= start, Booking.created_at < end)
        if scheduled_on is not None:
            start, end = day_window(scheduled_on)
            query = query.filter(
                or_(
                    Booking.preferred_date == start.date(),
                    and_(Booking.created_at >= start, Booking.created_at < end),
                )
            )

        return query.order_by(Booking.created_at.desc(), Booking.id.desc()).all()

    def aggregate_stats(
        self,
        db: Session,
        *,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> Dict[str, Any]:
        """Totals over bookings created in [start, end)."""
        query = db.query(
            func.count(Booking.id),
            func.coalesce(func.sum(Booking.estimated_price), 0),
            func.coalesce(func.sum(case((Booking.status == BookingStatusEnum.COMPLETED, 1), else_=0)), 0),
            func.coalesce(func.sum(case((Booking.status == BookingStatusEnum.PENDING, 1), else_=0)), 0),
            func.coalesce(func.sum(case((Booking.service_type == ServiceTypeEnum.EMERGENCY, 1), else_=0)), 0),
        )
        if start is not None:
            query = query.filter(Booking.created_at >= start)
        if end is not None:
            query = query.filter(Booking.created_at < end)

        total, revenue, completed, pending, emergency = query.one()
        return {
            "total_bookings": int(total or 0),
            "total_revenue": float(revenue or 0),
            "completed_bookings": int(completed or 0),
            "pending_bookings": int(pending or 0),
            "emergency_bookings": int(emergency or 0),
        }


booking_crud = CRUDBooking(Booking)
