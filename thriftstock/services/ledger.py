# thriftstock/services/ledger.py
"""Stock movements and the guards that protect transactional history.

``items.current_stock`` is a denormalized running total. It is only ever
changed here, and always in the same transaction as the stock row that
explains the change, so that for every item::

    current_stock == sum(stock_in.quantity) - sum(stock_out.quantity)

Stock rows are append-only. A wrong entry is corrected with a compensating
stock-in or stock-out, never by editing or deleting the original.
"""
import logging
from datetime import date
from typing import Dict, List, Optional

from sqlalchemy import func, update
from sqlalchemy.orm import Session

from thriftstock.core.database import commit_or_conflict
from thriftstock.core.exceptions import (
    ConflictError,
    InsufficientStockError,
    NotFoundError,
    ValidationError,
)
from thriftstock.models.catalog import Category, Item, Supplier
from thriftstock.models.stock import StockIn, StockOut
from thriftstock.models.user import User

logger = logging.getLogger(__name__)


class LedgerService:

    # ---- stock movements ----

    def record_stock_in(
        self,
        db: Session,
        item_id: int,
        supplier_id: int,
        quantity: int,
        purchase_price: Optional[float] = None,
        date_in: Optional[date] = None,
        user_id: Optional[int] = None,
    ) -> Dict:
        """Receive ``quantity`` units of an item from a supplier."""
        self._check_quantity(quantity)
        item = self._get_item(db, item_id)
        if db.get(Supplier, supplier_id) is None:
            raise NotFoundError(f"Supplier {supplier_id} not found")
        self._get_user(db, user_id)

        if purchase_price is None:
            purchase_price = item.purchase_price
        elif purchase_price < 0:
            raise ValidationError("Purchase price cannot be negative")

        entry = StockIn(
            item_id=item_id,
            supplier_id=supplier_id,
            quantity=quantity,
            purchase_price=purchase_price,
            date_in=date_in or date.today(),
            user_id=user_id,
        )
        try:
            result = db.execute(
                update(Item)
                .where(Item.item_id == item_id)
                .values(current_stock=Item.current_stock + quantity)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 0:
                # Deleted since it was looked up
                db.rollback()
                raise NotFoundError(f"Item {item_id} not found")
            db.add(entry)
            db.commit()
        except NotFoundError:
            raise
        except Exception:
            db.rollback()
            raise

        db.refresh(item)
        logger.info(
            "Stock in: item=%s supplier=%s qty=%s -> current_stock=%s",
            item_id, supplier_id, quantity, item.current_stock,
        )
        return self._format_stock_in(entry, item.current_stock, item_name=item.item_name)

    def record_stock_out(
        self,
        db: Session,
        item_id: int,
        quantity: int,
        selling_price: Optional[float] = None,
        date_out: Optional[date] = None,
        user_id: Optional[int] = None,
    ) -> Dict:
        """Remove ``quantity`` units of an item, refusing to go below zero."""
        self._check_quantity(quantity)
        item = self._get_item(db, item_id)
        self._get_user(db, user_id)

        if selling_price is None:
            selling_price = item.selling_price
        elif selling_price < 0:
            raise ValidationError("Selling price cannot be negative")

        try:
            # Check and decrement in one statement so concurrent stock-outs
            # cannot both pass the sufficiency check.
            result = db.execute(
                update(Item)
                .where(Item.item_id == item_id, Item.current_stock >= quantity)
                .values(current_stock=Item.current_stock - quantity)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 0:
                db.rollback()
                available = (
                    db.query(Item.current_stock).filter(Item.item_id == item_id).scalar()
                )
                if available is None:
                    raise NotFoundError(f"Item {item_id} not found")
                logger.warning(
                    "Stock out refused: item=%s requested=%s available=%s",
                    item_id, quantity, available,
                )
                raise InsufficientStockError(
                    f"Insufficient stock: requested {quantity}, available {available}",
                    details={"requested": quantity, "available": available},
                )

            entry = StockOut(
                item_id=item_id,
                quantity=quantity,
                selling_price=selling_price,
                date_out=date_out or date.today(),
                user_id=user_id,
            )
            db.add(entry)
            db.commit()
        except (InsufficientStockError, NotFoundError):
            raise
        except Exception:
            db.rollback()
            raise

        db.refresh(item)
        logger.info(
            "Stock out: item=%s qty=%s -> current_stock=%s",
            item_id, quantity, item.current_stock,
        )
        return self._format_stock_out(entry, item.current_stock, item_name=item.item_name)

    def list_stock_in(self, db: Session) -> List[Dict]:
        rows = (
            db.query(StockIn, Item.item_name, Supplier.supplier_name, User.username)
            .outerjoin(Item, StockIn.item_id == Item.item_id)
            .outerjoin(Supplier, StockIn.supplier_id == Supplier.supplier_id)
            .outerjoin(User, StockIn.user_id == User.user_id)
            .order_by(StockIn.date_in.desc(), StockIn.stock_in_id.desc())
            .all()
        )
        return [
            self._format_stock_in(entry, item_name=item_name, supplier_name=supplier_name, username=username)
            for entry, item_name, supplier_name, username in rows
        ]

    def list_stock_out(self, db: Session) -> List[Dict]:
        rows = (
            db.query(StockOut, Item.item_name, User.username)
            .outerjoin(Item, StockOut.item_id == Item.item_id)
            .outerjoin(User, StockOut.user_id == User.user_id)
            .order_by(StockOut.date_out.desc(), StockOut.stock_out_id.desc())
            .all()
        )
        return [
            self._format_stock_out(entry, item_name=item_name, username=username)
            for entry, item_name, username in rows
        ]

    # ---- balances ----

    def item_balance(self, db: Session, item_id: int) -> int:
        """Stock on hand recomputed from the full stock history."""
        received = (
            db.query(func.coalesce(func.sum(StockIn.quantity), 0))
            .filter(StockIn.item_id == item_id)
            .scalar()
        )
        removed = (
            db.query(func.coalesce(func.sum(StockOut.quantity), 0))
            .filter(StockOut.item_id == item_id)
            .scalar()
        )
        return int(received) - int(removed)

    def audit_balances(self, db: Session) -> List[Dict]:
        """Items whose stored counter disagrees with their history."""
        received = (
            db.query(StockIn.item_id, func.sum(StockIn.quantity).label("qty"))
            .group_by(StockIn.item_id)
            .subquery()
        )
        removed = (
            db.query(StockOut.item_id, func.sum(StockOut.quantity).label("qty"))
            .group_by(StockOut.item_id)
            .subquery()
        )
        rows = (
            db.query(
                Item.item_id,
                Item.item_name,
                Item.current_stock,
                func.coalesce(received.c.qty, 0),
                func.coalesce(removed.c.qty, 0),
            )
            .outerjoin(received, received.c.item_id == Item.item_id)
            .outerjoin(removed, removed.c.item_id == Item.item_id)
            .order_by(Item.item_id)
            .all()
        )

        drift = []
        for item_id, item_name, current_stock, qty_in, qty_out in rows:
            balance = int(qty_in) - int(qty_out)
            if balance != current_stock:
                drift.append({
                    "item_id": item_id,
                    "item_name": item_name,
                    "current_stock": current_stock,
                    "ledger_balance": balance,
                })

        if drift:
            logger.warning("Stock audit found %d item(s) out of balance", len(drift))
        return drift

    # ---- deletion guards ----

    def delete_category(self, db: Session, category_id: int) -> None:
        category = db.get(Category, category_id)
        if category is None:
            raise NotFoundError(f"Category {category_id} not found")

        in_use = db.query(func.count(Item.item_id)).filter(Item.category_id == category_id).scalar()
        if in_use:
            logger.warning("Refused to delete category %s: %d item(s) reference it", category_id, in_use)
            raise ConflictError(
                f"Category is in use by {in_use} item(s)",
                details={"items": in_use},
            )

        db.delete(category)
        commit_or_conflict(db, "Category is in use")
        logger.info("Deleted category %s", category_id)

    def delete_item(self, db: Session, item_id: int) -> None:
        item = self._get_item(db, item_id)

        movements = (
            db.query(func.count(StockIn.stock_in_id)).filter(StockIn.item_id == item_id).scalar()
            + db.query(func.count(StockOut.stock_out_id)).filter(StockOut.item_id == item_id).scalar()
        )
        if movements:
            logger.warning("Refused to delete item %s: %d stock record(s) reference it", item_id, movements)
            raise ConflictError(
                f"Item has {movements} stock record(s) and cannot be deleted",
                details={"stock_records": movements},
            )

        db.delete(item)
        commit_or_conflict(db, "Item has stock records and cannot be deleted")
        logger.info("Deleted item %s", item_id)

    def delete_supplier(self, db: Session, supplier_id: int) -> None:
        supplier = db.get(Supplier, supplier_id)
        if supplier is None:
            raise NotFoundError(f"Supplier {supplier_id} not found")

        deliveries = (
            db.query(func.count(StockIn.stock_in_id)).filter(StockIn.supplier_id == supplier_id).scalar()
        )
        if deliveries:
            raise ConflictError(
                f"Supplier has {deliveries} stock-in record(s) and cannot be deleted",
                details={"stock_records": deliveries},
            )

        db.delete(supplier)
        commit_or_conflict(db, "Supplier has stock records and cannot be deleted")
        logger.info("Deleted supplier %s", supplier_id)

    # ---- helpers ----

    def _check_quantity(self, quantity) -> None:
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
            raise ValidationError("Quantity must be a positive whole number")

    def _get_item(self, db: Session, item_id: int) -> Item:
        item = db.get(Item, item_id)
        if item is None:
            raise NotFoundError(f"Item {item_id} not found")
        return item

    def _get_user(self, db: Session, user_id: Optional[int]) -> User:
        if user_id is None:
            raise ValidationError("user_id is required")
        user = db.get(User, user_id)
        if user is None:
            raise NotFoundError(f"User {user_id} not found")
        return user

    def _format_stock_in(self, entry: StockIn, current_stock: int = None, **names) -> Dict:
        return {
            "stock_in_id": entry.stock_in_id,
            "item_id": entry.item_id,
            "item_name": names.get("item_name"),
            "supplier_id": entry.supplier_id,
            "supplier_name": names.get("supplier_name"),
            "quantity": entry.quantity,
            "purchase_price": float(entry.purchase_price) if entry.purchase_price is not None else None,
            "date_in": entry.date_in,
            "user_id": entry.user_id,
            "username": names.get("username"),
            "current_stock": current_stock,
        }

    def _format_stock_out(self, entry: StockOut, current_stock: int = None, **names) -> Dict:
        return {
            "stock_out_id": entry.stock_out_id,
            "item_id": entry.item_id,
            "item_name": names.get("item_name"),
            "quantity": entry.quantity,
            "selling_price": float(entry.selling_price) if entry.selling_price is not None else None,
            "date_out": entry.date_out,
            "user_id": entry.user_id,
            "username": names.get("username"),
            "current_stock": current_stock,
        }


ledger_service = LedgerService()
