# thriftstock/api/v1/items.py
from typing import List, Optional

from fastapi import APIRouter, Depends, Path, Query, Response, status
from sqlalchemy.orm import Session

from thriftstock.api.deps import get_admin, get_staff
from thriftstock.core.database import get_db
from thriftstock.schemas.catalog import MAX_INT, ItemCreate, ItemResponse
from thriftstock.schemas.stock import BalanceDrift
from thriftstock.schemas.user import CurrentUser
from thriftstock.services.catalog_service import catalog_service
from thriftstock.services.ledger import ledger_service

router = APIRouter()


@router.get("", response_model=List[ItemResponse])
def list_items(
    current_user: CurrentUser = Depends(get_staff),
    db: Session = Depends(get_db)
):
    return catalog_service.list_items(db)


@router.get("/audit", response_model=List[BalanceDrift])
def audit_stock(
    current_user: CurrentUser = Depends(get_admin),
    db: Session = Depends(get_db)
):
    """Items whose current_stock does not match their stock history"""
    return ledger_service.audit_balances(db)


@router.get("/{item_id}", response_model=ItemResponse)
def get_item(
    item_id: int = Path(..., le=MAX_INT),
    current_user: CurrentUser = Depends(get_staff),
    db: Session = Depends(get_db)
):
    return catalog_service.get_item(db, item_id)


@router.post("", response_model=ItemResponse, status_code=status.HTTP_201_CREATED)
def save_item(
    data: ItemCreate,
    response: Response,
    id: Optional[int] = Query(None, le=MAX_INT),
    current_user: CurrentUser = Depends(get_staff),
    db: Session = Depends(get_db)
):
    """Create an item, or update it when ``?id=`` is given.

    Stock levels are not writable here; use stock-in and stock-out.
    """
    if id is not None:
        response.status_code = status.HTTP_200_OK
        return catalog_service.update_item(db, id, data)
    return catalog_service.create_item(db, data)


@router.delete("")
def delete_item(
    id: int = Query(..., le=MAX_INT),
    current_user: CurrentUser = Depends(get_staff),
    db: Session = Depends(get_db)
):
    ledger_service.delete_item(db, id)
    return {"success": True}
