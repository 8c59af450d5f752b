# thriftstock/api/deps.py
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from thriftstock.core.database import get_db
from thriftstock.core.security import decode_token
from thriftstock.models.user import UserRole
from thriftstock.schemas.user import CurrentUser
from thriftstock.services.auth_service import auth_service

security = HTTPBearer(auto_error=False)


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db)
) -> CurrentUser:
    """Resolve the caller and their role from the bearer token"""

    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )

    payload = decode_token(credentials.credentials)
    if payload is None or not str(payload.get("sub", "")).isdigit():
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    user = auth_service.get_current_user(db, int(payload["sub"]))
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found"
        )

    return user


def require_role(allowed_roles: list[UserRole]):
    """Dependency factory restricting an endpoint to the given roles"""
    def role_checker(current_user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
        if current_user.role not in allowed_roles:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Access denied. Allowed roles: {[role.value for role in allowed_roles]}"
            )
        return current_user
    return role_checker


def get_staff(current_user: CurrentUser = Depends(require_role([UserRole.staff, UserRole.admin]))):
    return current_user


def get_admin(current_user: CurrentUser = Depends(require_role([UserRole.admin]))):
    return current_user
