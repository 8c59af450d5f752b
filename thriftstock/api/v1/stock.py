# thriftstock/api/v1/stock.py
from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from thriftstock.api.deps import get_staff
from thriftstock.core.database import get_db
from thriftstock.schemas.stock import StockInCreate, StockInResponse, StockOutCreate, StockOutResponse
from thriftstock.schemas.user import CurrentUser
from thriftstock.services.ledger import ledger_service

router = APIRouter()


@router.get("/stock-in", response_model=List[StockInResponse])
def list_stock_in(
    current_user: CurrentUser = Depends(get_staff),
    db: Session = Depends(get_db)
):
    return ledger_service.list_stock_in(db)


@router.post("/stock-in", response_model=StockInResponse, status_code=status.HTTP_201_CREATED)
def create_stock_in(
    data: StockInCreate,
    current_user: CurrentUser = Depends(get_staff),
    db: Session = Depends(get_db)
):
    """Receive stock from a supplier"""
    return ledger_service.record_stock_in(
        db,
        item_id=data.item_id,
        supplier_id=data.supplier_id,
        quantity=data.quantity,
        purchase_price=data.purchase_price,
        date_in=data.date_in,
        user_id=data.user_id or current_user.user_id,
    )


@router.get("/stock-out", response_model=List[StockOutResponse])
def list_stock_out(
    current_user: CurrentUser = Depends(get_staff),
    db: Session = Depends(get_db)
):
    return ledger_service.list_stock_out(db)


@router.post("/stock-out", response_model=StockOutResponse, status_code=status.HTTP_201_CREATED)
def create_stock_out(
    data: StockOutCreate,
    current_user: CurrentUser = Depends(get_staff),
    db: Session = Depends(get_db)
):
    """Sell or remove stock; 400 when there is not enough on hand"""
    return ledger_service.record_stock_out(
        db,
        item_id=data.item_id,
        quantity=data.quantity,
        selling_price=data.selling_price,
        date_out=data.date_out,
        user_id=data.user_id or current_user.user_id,
    )
