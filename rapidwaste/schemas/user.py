from pydantic import BaseModel, ConfigDict, EmailStr, Field
from datetime import datetime
from typing import Optional

from rapidwaste.models.user import UserRoleEnum


class UserCreate(BaseModel):
    first_name: str = Field(..., min_length=2)
    last_name: str = Field(..., min_length=2)
    email: EmailStr
    phone: str
    password: str = Field(..., min_length=6)
    role: UserRoleEnum = UserRoleEnum.CUSTOMER
    address: Optional[str] = None
    city: Optional[str] = None
    zip_code: Optional[str] = None


class UserRoleUpdate(BaseModel):
    role: UserRoleEnum


class UserResponse(BaseModel):
    id: int
    first_name: str
    last_name: str
    email: str
    phone: str
    role: UserRoleEnum
    is_active: bool
    address: Optional[str] = None
    city: Optional[str] = None
    zip_code: Optional[str] = None
    driver_id: Optional[str] = None
    last_login: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
