from datetime import datetime
from typing import Any, Dict, List, Optional, Union

from sqlalchemy.orm import Session

from rapidwaste.core.exceptions import DuplicateIdentity, NotFound
from rapidwaste.core.logging_config import get_logger
from rapidwaste.crud.user import user_crud
from rapidwaste.models.user import User, UserRoleEnum
from rapidwaste.schemas.user import UserCreate
from rapidwaste.utils.auth import generate_placeholder_password, get_password_hash

logger = get_logger(__name__)


class UserService:
    """User directory: identity records behind customers, drivers and admins."""

    def __init__(self, db: Session):
        self.db = db

    def find_by_email(self, email: str) -> Optional[User]:
        return user_crud.get_by_email(self.db, email=email)

    def find_by_id(self, user_id: int) -> User:
        user = user_crud.get(self.db, user_id)
        if not user:
            raise NotFound("User", user_id)
        return user

    def create(self, user_in: Union[UserCreate, Dict[str, Any]], *, commit: bool = True) -> User:
        """Create a user with a hashed credential; email must be unused."""
        data = dict(user_in) if isinstance(user_in, dict) else user_in.model_dump()
        email = str(data["email"]).strip()

        if self.find_by_email(email):
            raise DuplicateIdentity(
                f"A user with email {email} already exists",
                details={"email": email},
            )

        data["email"] = email
        data["password"] = get_password_hash(data["password"])
        user = user_crud.create(self.db, obj_in=data)
        if commit:
            self.db.commit()
            self.db.refresh(user)
        logger.info(f"[user] Created {user.role} user id={user.id}")
        return user

    def get_or_create_customer(
        self,
        *,
        email: str,
        first_name: str,
        last_name: str,
        phone: str,
    ) -> User:
        """
        Idempotent customer lookup by email.

        An existing account of any role is reused. Otherwise a placeholder
        customer is created with a random credential; it is flushed but left
        uncommitted so it shares the caller's transaction.
        """
        customer = self.find_by_email(email)
        if customer:
            return customer

        customer = user_crud.create(self.db, obj_in={
            "first_name": first_name,
            "last_name": last_name,
            "email": str(email).strip(),
            "phone": phone,
            "password": get_password_hash(generate_placeholder_password()),
            "role": UserRoleEnum.CUSTOMER,
        })
        logger.info(f"[user] Created placeholder customer id={customer.id}")
        return customer

    def find_drivers(self, active: bool = True) -> List[User]:
        return user_crud.get_drivers(self.db, active=active)

    def update_role(self, user_id: int, role: UserRoleEnum) -> User:
        user = self.find_by_id(user_id)
        user.role = role
        self.db.commit()
        self.db.refresh(user)
        logger.info(f"[user] Role of user id={user_id} set to {role}")
        return user

    def touch_last_login(self, user_id: int) -> None:
        user = self.find_by_id(user_id)
        user.last_login = datetime.now()
        self.db.commit()
