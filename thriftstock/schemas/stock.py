# thriftstock/schemas/stock.py
from datetime import date
from typing import Optional

from pydantic import BaseModel, Field

from thriftstock.schemas.catalog import MAX_INT, MAX_PRICE


class StockInCreate(BaseModel):
    item_id: int = Field(..., gt=0, le=MAX_INT)
    supplier_id: int = Field(..., gt=0, le=MAX_INT)
    quantity: int = Field(..., le=MAX_INT)
    purchase_price: Optional[float] = Field(None, lt=MAX_PRICE)
    date_in: date
    user_id: Optional[int] = Field(None, gt=0, le=MAX_INT)  # defaults to the caller


class StockOutCreate(BaseModel):
    item_id: int = Field(..., gt=0, le=MAX_INT)
    quantity: int = Field(..., le=MAX_INT)
    selling_price: Optional[float] = Field(None, lt=MAX_PRICE)
    date_out: date
    user_id: Optional[int] = Field(None, gt=0, le=MAX_INT)  # defaults to the caller


class StockInResponse(BaseModel):
    stock_in_id: int
    item_id: int
    item_name: Optional[str] = None
    supplier_id: int
    supplier_name: Optional[str] = None
    quantity: int
    purchase_price: Optional[float] = None
    date_in: date
    user_id: int
    username: Optional[str] = None
    current_stock: Optional[int] = None


class StockOutResponse(BaseModel):
    stock_out_id: int
    item_id: int
    item_name: Optional[str] = None
    quantity: int
    selling_price: Optional[float] = None
    date_out: date
    user_id: int
    username: Optional[str] = None
    current_stock: Optional[int] = None


class BalanceDrift(BaseModel):
    item_id: int
    item_name: str
    current_stock: int
    ledger_balance: int
