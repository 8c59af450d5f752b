# thriftstock/api/v1/categories.py
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from thriftstock.api.deps import get_staff
from thriftstock.core.database import get_db
from thriftstock.schemas.catalog import MAX_INT, CategoryCreate, CategoryResponse
from thriftstock.schemas.user import CurrentUser
from thriftstock.services.catalog_service import catalog_service
from thriftstock.services.ledger import ledger_service

router = APIRouter()


@router.get("", response_model=List[CategoryResponse])
def list_categories(
    current_user: CurrentUser = Depends(get_staff),
    db: Session = Depends(get_db)
):
    return catalog_service.list_categories(db)


@router.post("", response_model=CategoryResponse, status_code=status.HTTP_201_CREATED)
def save_category(
    data: CategoryCreate,
    response: Response,
    id: Optional[int] = Query(None, le=MAX_INT),
    current_user: CurrentUser = Depends(get_staff),
    db: Session = Depends(get_db)
):
    """Create a category, or rename it when ``?id=`` is given"""
    if id is not None:
        response.status_code = status.HTTP_200_OK
        return catalog_service.update_category(db, id, data)
    return catalog_service.create_category(db, data)


@router.delete("")
def delete_category(
    id: int = Query(..., le=MAX_INT),
    current_user: CurrentUser = Depends(get_staff),
    db: Session = Depends(get_db)
):
    """Delete a category; refused with 409 while items use it"""
    ledger_service.delete_category(db, id)
    return {"success": True}
