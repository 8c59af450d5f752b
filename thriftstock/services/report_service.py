# thriftstock/services/report_service.py
import csv
import io
from typing import Dict

from sqlalchemy import func
from sqlalchemy.orm import Session

from thriftstock.core.config import settings
from thriftstock.models.catalog import Category, Item, Supplier

REPORT_COLUMNS = [
    ("item_id", "Item ID"),
    ("item_name", "Item Name"),
    ("category_name", "Category"),
    ("current_stock", "Current Stock"),
    ("purchase_price", "Purchase Price"),
    ("selling_price", "Selling Price"),
    ("stock_value", "Stock Value"),
]


class ReportService:

    def dashboard(self, db: Session, low_stock_threshold: int = None) -> Dict:
        """Counts shown on the staff dashboard"""
        threshold = settings.LOW_STOCK_THRESHOLD if low_stock_threshold is None else low_stock_threshold
        return {
            "total_items": db.query(func.count(Item.item_id)).scalar(),
            "low_stock_items": (
                db.query(func.count(Item.item_id)).filter(Item.current_stock < threshold).scalar()
            ),
            "low_stock_threshold": threshold,
            "total_suppliers": db.query(func.count(Supplier.supplier_id)).scalar(),
            "total_categories": db.query(func.count(Category.category_id)).scalar(),
        }

    def stock_report(self, db: Session) -> Dict:
        """Per-item stock valued at purchase price"""
        rows = (
            db.query(Item, Category.category_name)
            .outerjoin(Category, Item.category_id == Category.category_id)
            .order_by(Item.item_name.asc())
            .all()
        )

        report_rows = []
        for item, category_name in rows:
            purchase_price = float(item.purchase_price or 0)
            report_rows.append({
                "item_id": item.item_id,
                "item_name": item.item_name,
                "category_name": category_name or "N/A",
                "current_stock": item.current_stock,
                "purchase_price": purchase_price,
                "selling_price": float(item.selling_price or 0),
                "stock_value": round(item.current_stock * purchase_price, 2),
            })

        return {
            "rows": report_rows,
            "total_units": sum(row["current_stock"] for row in report_rows),
            "total_value": round(sum(row["stock_value"] for row in report_rows), 2),
        }

    def stock_report_csv(self, db: Session) -> str:
        output = io.StringIO()
        writer = csv.writer(output, quoting=csv.QUOTE_ALL)
        writer.writerow([header for _, header in REPORT_COLUMNS])

        for row in self.stock_report(db)["rows"]:
            values = []
            for key, _ in REPORT_COLUMNS:
                value = row[key]
                if key in ("purchase_price", "selling_price", "stock_value"):
                    value = f"{value:.2f}"
                values.append(value)
            writer.writerow(values)

        return output.getvalue()


report_service = ReportService()
