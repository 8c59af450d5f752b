# thriftstock/api/v1/suppliers.py
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from thriftstock.api.deps import get_staff
from thriftstock.core.database import get_db
from thriftstock.schemas.catalog import MAX_INT, SupplierCreate, SupplierResponse
from thriftstock.schemas.user import CurrentUser
from thriftstock.services.catalog_service import catalog_service
from thriftstock.services.ledger import ledger_service

router = APIRouter()


@router.get("", response_model=List[SupplierResponse])
def list_suppliers(
    current_user: CurrentUser = Depends(get_staff),
    db: Session = Depends(get_db)
):
    return catalog_service.list_suppliers(db)


@router.post("", response_model=SupplierResponse, status_code=status.HTTP_201_CREATED)
def save_supplier(
    data: SupplierCreate,
    response: Response,
    id: Optional[int] = Query(None, le=MAX_INT),
    current_user: CurrentUser = Depends(get_staff),
    db: Session = Depends(get_db)
):
    if id is not None:
        response.status_code = status.HTTP_200_OK
        return catalog_service.update_supplier(db, id, data)
    return catalog_service.create_supplier(db, data)


@router.delete("")
def delete_supplier(
    id: int = Query(..., le=MAX_INT),
    current_user: CurrentUser = Depends(get_staff),
    db: Session = Depends(get_db)
):
    ledger_service.delete_supplier(db, id)
    return {"success": True}
