# thriftstock/models/stock.py
from sqlalchemy import DECIMAL, CheckConstraint, Column, Date, DateTime, ForeignKey, Integer
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from thriftstock.core.database import Base


class StockIn(Base):
    __tablename__ = "stock_in"

    stock_in_id = Column(Integer, primary_key=True, index=True)
    item_id = Column(Integer, ForeignKey("items.item_id"), nullable=False, index=True)
    supplier_id = Column(Integer, ForeignKey("suppliers.supplier_id"), nullable=False)
    quantity = Column(Integer, nullable=False)
    purchase_price = Column(DECIMAL(10, 2))
    date_in = Column(Date, nullable=False)
    user_id = Column(Integer, ForeignKey("users.user_id"), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Relationships
    item = relationship("Item", back_populates="stock_in")
    supplier = relationship("Supplier", back_populates="stock_in")
    user = relationship("User")

    __table_args__ = (
        CheckConstraint("quantity > 0", name="ck_stock_in_quantity_positive"),
    )


class StockOut(Base):
    __tablename__ = "stock_out"

    stock_out_id = Column(Integer, primary_key=True, index=True)
    item_id = Column(Integer, ForeignKey("items.item_id"), nullable=False, index=True)
    quantity = Column(Integer, nullable=False)
    selling_price = Column(DECIMAL(10, 2))
    date_out = Column(Date, nullable=False)
    user_id = Column(Integer, ForeignKey("users.user_id"), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Relationships
    item = relationship("Item", back_populates="stock_out")
    user = relationship("User")

    __table_args__ = (
        CheckConstraint("quantity > 0", name="ck_stock_out_quantity_positive"),
    )
