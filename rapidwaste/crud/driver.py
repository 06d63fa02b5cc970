from typing import Optional, List
from sqlalchemy.orm import Session, joinedload

from rapidwaste.crud.base import CRUDBase
from rapidwaste.models.driver import Driver, DriverStatusEnum
from rapidwaste.schemas.driver import DriverProfileCreate, DriverStatusUpdate


class CRUDDriver(CRUDBase[Driver, DriverProfileCreate, DriverStatusUpdate]):

    def get_by_driver_id(self, db: Session, *, driver_id: str, with_user: bool = False) -> Optional[Driver]:
        """Fetch a driver profile by its external code (e.g. D0001)."""
        query = db.query(Driver).filter(Driver.driver_id == driver_id)
        if with_user:
            query = query.options(joinedload(Driver.user))
        return query.first()

    def get_active(self, db: Session, *, status: Optional[DriverStatusEnum] = None) -> List[Driver]:
        query = (
            db.query(Driver)
            .options(joinedload(Driver.user))
            .filter(Driver.is_active.is_(True))
        )
        if status is not None:
            query = query.filter(Driver.status == status)
        return query.order_by(Driver.driver_id.asc()).all()


driver_crud = CRUDDriver(Driver)
