# thriftstock/schemas/catalog.py
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

# Largest value an INTEGER column holds on every supported backend
MAX_INT = 2_147_483_647
# Prices are stored as DECIMAL(10, 2)
MAX_PRICE = 10 ** 8


class CategoryCreate(BaseModel):
    category_name: Optional[str] = None


class CategoryResponse(BaseModel):
    category_id: int
    category_name: str
    item_count: int = 0


class ItemCreate(BaseModel):
    item_name: Optional[str] = None
    category_id: Optional[int] = Field(None, gt=0, le=MAX_INT)
    purchase_price: Optional[float] = Field(None, lt=MAX_PRICE)
    selling_price: Optional[float] = Field(None, lt=MAX_PRICE)
    image: Optional[str] = None


class ItemResponse(BaseModel):
    item_id: int
    item_name: str
    category_id: int
    category_name: Optional[str] = None
    purchase_price: float
    selling_price: float
    current_stock: int
    image: Optional[str] = None


class SupplierCreate(BaseModel):
    supplier_name: Optional[str] = None
    contact_person: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None


class SupplierResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    supplier_id: int
    supplier_name: str
    contact_person: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
