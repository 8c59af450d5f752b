# thriftstock/services/catalog_service.py
import logging
from typing import Dict, List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from thriftstock.core.database import commit_or_conflict
from thriftstock.core.exceptions import ConflictError, NotFoundError, ValidationError
from thriftstock.models.catalog import Category, Item, Supplier
from thriftstock.schemas.catalog import CategoryCreate, ItemCreate, SupplierCreate

logger = logging.getLogger(__name__)


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


class CatalogService:

    # ---- categories ----

    def list_categories(self, db: Session) -> List[Dict]:
        rows = (
            db.query(Category, func.count(Item.item_id))
            .outerjoin(Item, Item.category_id == Category.category_id)
            .group_by(Category.category_id)
            .order_by(Category.category_name.asc())
            .all()
        )
        return [self._format_category(category, item_count) for category, item_count in rows]

    def create_category(self, db: Session, data: CategoryCreate) -> Dict:
        name = _clean(data.category_name)
        if not name:
            raise ValidationError("Category name is required")
        self._ensure_category_name_free(db, name)

        category = Category(category_name=name)
        db.add(category)
        commit_or_conflict(db, "Category already exists")
        db.refresh(category)
        logger.info("Created category %s (%s)", category.category_id, name)
        return self._format_category(category)

    def update_category(self, db: Session, category_id: int, data: CategoryCreate) -> Dict:
        category = db.get(Category, category_id)
        if category is None:
            raise NotFoundError(f"Category {category_id} not found")

        name = _clean(data.category_name)
        if not name:
            raise ValidationError("Category name is required")
        self._ensure_category_name_free(db, name, exclude_id=category_id)

        category.category_name = name
        commit_or_conflict(db, "Category already exists")
        db.refresh(category)
        return self._format_category(category, len(category.items))

    def _ensure_category_name_free(self, db: Session, name: str, exclude_id: int = None) -> None:
        # Names compare case-insensitively, as the store's MySQL collation did
        query = db.query(Category).filter(func.lower(Category.category_name) == name.lower())
        if exclude_id is not None:
            query = query.filter(Category.category_id != exclude_id)
        if query.first() is not None:
            raise ConflictError("Category already exists")

    def _format_category(self, category: Category, item_count: int = 0) -> Dict:
        return {
            "category_id": category.category_id,
            "category_name": category.category_name,
            "item_count": item_count,
        }

    # ---- items ----

    def list_items(self, db: Session) -> List[Dict]:
        rows = (
            db.query(Item, Category.category_name)
            .outerjoin(Category, Item.category_id == Category.category_id)
            .order_by(Item.item_name.asc())
            .all()
        )
        return [self._format_item(item, category_name) for item, category_name in rows]

    def get_item(self, db: Session, item_id: int) -> Dict:
        item = db.get(Item, item_id)
        if item is None:
            raise NotFoundError(f"Item {item_id} not found")
        return self._format_item(item, item.category.category_name if item.category else None)

    def create_item(self, db: Session, data: ItemCreate) -> Dict:
        values = self._item_values(db, data)

        # Opening stock is recorded as a stock-in, never set directly
        item = Item(current_stock=0, **values)
        db.add(item)
        commit_or_conflict(db, "Item could not be created")
        db.refresh(item)
        logger.info("Created item %s (%s)", item.item_id, item.item_name)
        return self._format_item(item, item.category.category_name)

    def update_item(self, db: Session, item_id: int, data: ItemCreate) -> Dict:
        item = db.get(Item, item_id)
        if item is None:
            raise NotFoundError(f"Item {item_id} not found")

        for field, value in self._item_values(db, data).items():
            setattr(item, field, value)
        commit_or_conflict(db, "Item could not be updated")
        db.refresh(item)
        return self._format_item(item, item.category.category_name)

    def _item_values(self, db: Session, data: ItemCreate) -> Dict:
        name = _clean(data.item_name)
        if not name or not data.category_id:
            raise ValidationError("Item name and category are required")
        if db.get(Category, data.category_id) is None:
            raise NotFoundError(f"Category {data.category_id} not found")

        purchase_price = data.purchase_price or 0
        selling_price = data.selling_price or 0
        if purchase_price < 0 or selling_price < 0:
            raise ValidationError("Prices cannot be negative")

        return {
            "item_name": name,
            "category_id": data.category_id,
            "purchase_price": purchase_price,
            "selling_price": selling_price,
            "image": _clean(data.image),
        }

    def _format_item(self, item: Item, category_name: Optional[str] = None) -> Dict:
        return {
            "item_id": item.item_id,
            "item_name": item.item_name,
            "category_id": item.category_id,
            "category_name": category_name,
            "purchase_price": float(item.purchase_price or 0),
            "selling_price": float(item.selling_price or 0),
            "current_stock": item.current_stock,
            "image": item.image,
        }

    # ---- suppliers ----

    def list_suppliers(self, db: Session) -> List[Supplier]:
        return db.query(Supplier).order_by(Supplier.supplier_name.asc()).all()

    def create_supplier(self, db: Session, data: SupplierCreate) -> Supplier:
        supplier = Supplier(**self._supplier_values(data))
        db.add(supplier)
        commit_or_conflict(db, "Supplier could not be created")
        db.refresh(supplier)
        logger.info("Created supplier %s (%s)", supplier.supplier_id, supplier.supplier_name)
        return supplier

    def update_supplier(self, db: Session, supplier_id: int, data: SupplierCreate) -> Supplier:
        supplier = db.get(Supplier, supplier_id)
        if supplier is None:
            raise NotFoundError(f"Supplier {supplier_id} not found")

        for field, value in self._supplier_values(data).items():
            setattr(supplier, field, value)
        commit_or_conflict(db, "Supplier could not be updated")
        db.refresh(supplier)
        return supplier

    def _supplier_values(self, data: SupplierCreate) -> Dict:
        name = _clean(data.supplier_name)
        if not name:
            raise ValidationError("Supplier name is required")
        return {
            "supplier_name": name,
            "contact_person": _clean(data.contact_person),
            "phone": _clean(data.phone),
            "address": _clean(data.address),
        }


catalog_service = CatalogService()
