# thriftstock/schemas/report.py
from typing import List, Optional

from pydantic import BaseModel


class DashboardSummary(BaseModel):
    total_items: int
    low_stock_items: int
    low_stock_threshold: int
    total_suppliers: int
    total_categories: int


class StockReportRow(BaseModel):
    item_id: int
    item_name: str
    category_name: Optional[str] = None
    current_stock: int
    purchase_price: float
    selling_price: float
    stock_value: float


class StockReport(BaseModel):
    rows: List[StockReportRow]
    total_units: int
    total_value: float
