# thriftstock/api/v1/staff.py
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from thriftstock.api.deps import get_admin
from thriftstock.core.database import get_db
from thriftstock.schemas.catalog import MAX_INT
from thriftstock.schemas.user import CurrentUser, StaffCreate, StaffResponse
from thriftstock.services.auth_service import auth_service

router = APIRouter()


@router.get("", response_model=List[StaffResponse])
def list_staff(
    current_user: CurrentUser = Depends(get_admin),
    db: Session = Depends(get_db)
):
    return auth_service.list_staff(db)


@router.post("", response_model=StaffResponse, status_code=status.HTTP_201_CREATED)
def save_staff(
    data: StaffCreate,
    response: Response,
    id: Optional[int] = Query(None, le=MAX_INT),
    current_user: CurrentUser = Depends(get_admin),
    db: Session = Depends(get_db)
):
    """Create a staff account, or update it when ``?id=`` is given"""
    if id is not None:
        response.status_code = status.HTTP_200_OK
        return auth_service.update_user(db, id, data)
    return auth_service.create_user(db, data)


@router.delete("")
def delete_staff(
    id: int = Query(..., le=MAX_INT),
    current_user: CurrentUser = Depends(get_admin),
    db: Session = Depends(get_db)
):
    auth_service.delete_user(db, id, acting_user=current_user)
    return {"success": True}
