from typing import Optional, List
from sqlalchemy import func
from sqlalchemy.orm import Session

from rapidwaste.crud.base import CRUDBase
from rapidwaste.models.user import User, UserRoleEnum
from rapidwaste.schemas.user import UserCreate, UserRoleUpdate


class CRUDUser(CRUDBase[User, UserCreate, UserRoleUpdate]):

    def get_by_email(self, db: Session, *, email: str) -> Optional[User]:
        return db.query(User).filter(func.lower(User.email) == email.strip().lower()).first()

    def get_drivers(self, db: Session, *, active: bool = True) -> List[User]:
        return (
            db.query(User)
            .filter(User.role == UserRoleEnum.DRIVER, User.is_active.is_(active))
            .order_by(User.created_at.desc())
            .all()
        )


user_crud = CRUDUser(User)
