# thriftstock/models/user.py
import enum

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from thriftstock.core.database import Base


class UserRole(enum.Enum):
    admin = "admin"
    staff = "staff"

    @property
    def role_id(self) -> int:
        return 1 if self is UserRole.admin else 2

    @classmethod
    def from_role_id(cls, role_id) -> "UserRole":
        """1 is admin; every other id is treated as staff."""
        return cls.admin if role_id == 1 else cls.staff


class Role(Base):
    __tablename__ = "roles"

    role_id = Column(Integer, primary_key=True, autoincrement=False)
    role_name = Column(String(50), unique=True, nullable=False)

    users = relationship("User", back_populates="role")


class User(Base):
    __tablename__ = "users"

    user_id = Column(Integer, primary_key=True, index=True)
    username = Column(String(100), unique=True, index=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    role_id = Column(Integer, ForeignKey("roles.role_id"), nullable=False, default=UserRole.staff.role_id)
    phone_number = Column(String(30))
    address = Column(Text)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Relationships
    role = relationship("Role", back_populates="users")

    @property
    def user_role(self) -> UserRole:
        return UserRole.from_role_id(self.role_id)
