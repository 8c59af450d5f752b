# thriftstock/api/v1/auth.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from thriftstock.api.deps import get_current_user
from thriftstock.core.database import get_db
from thriftstock.schemas.user import CurrentUser, LoginResponse, UserLogin
from thriftstock.services.auth_service import auth_service

router = APIRouter()


@router.post("/login", response_model=LoginResponse)
def login(
    credentials: UserLogin,
    db: Session = Depends(get_db)
):
    """Login with username and password"""
    return auth_service.login(db, credentials.username, credentials.password)


@router.get("/me", response_model=CurrentUser)
def get_current_user_info(current_user: CurrentUser = Depends(get_current_user)):
    """Current user"""
    return current_user
