from datetime import datetime
from sqlalchemy import Column, Integer, String, Boolean, DateTime, Text, Enum
from sqlalchemy.orm import relationship
from rapidwaste.database.session import Base
from enum import Enum as PyEnum


class UserRoleEnum(str, PyEnum):
    CUSTOMER = "customer"
    DRIVER = "driver"
    ADMIN = "admin"


class User(Base):
    """Identity record shared by customers, drivers and admins."""
    __tablename__ = "users"
    __table_args__ = (
        {"extend_existing": True}
    )

    id = Column(Integer, primary_key=True, index=True)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    email = Column(String(150), nullable=False, unique=True, index=True)
    phone = Column(String(30), nullable=False)
    password = Column(String(255), nullable=False)
    role = Column(
        Enum(UserRoleEnum, native_enum=False),
        default=UserRoleEnum.CUSTOMER,
        nullable=False,
        index=True
    )
    is_active = Column(Boolean, default=True, nullable=False)

    address = Column(Text, nullable=True)
    city = Column(String(100), nullable=True)
    zip_code = Column(String(20), nullable=True)

    # Mirror of drivers.driver_id for driver accounts
    driver_id = Column(String(10), nullable=True, index=True)

    last_login = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=datetime.now, nullable=False)
    updated_at = Column(DateTime, default=datetime.now, onupdate=datetime.now, nullable=False)

    driver_profile = relationship("Driver", back_populates="user", uselist=False)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()
