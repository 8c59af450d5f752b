# thriftstock/schemas/user.py
from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from thriftstock.models.user import UserRole


class UserLogin(BaseModel):
    username: str
    password: str


class LoginResponse(BaseModel):
    id: int
    email: str
    name: str
    role: UserRole
    access_token: str
    token_type: str = "bearer"


class CurrentUser(BaseModel):
    """Authenticated caller, resolved once per request from the token."""

    user_id: int
    username: str
    role: UserRole

    @property
    def is_admin(self) -> bool:
        return self.role is UserRole.admin


class StaffCreate(BaseModel):
    username: Optional[str] = None
    # Optional on update, where leaving it out keeps the current password
    password: Optional[str] = None
    role_id: Optional[int] = None
    phone_number: Optional[str] = None
    address: Optional[str] = None


class StaffResponse(BaseModel):
    user_id: int
    username: str
    role_id: int
    role_name: str
    phone_number: Optional[str] = None
    address: Optional[str] = None
    created_at: Optional[datetime] = None
