# thriftstock/models/catalog.py
from sqlalchemy import DECIMAL, CheckConstraint, Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from thriftstock.core.database import Base


class Category(Base):
    __tablename__ = "categories"

    category_id = Column(Integer, primary_key=True, index=True)
    category_name = Column(String(100), unique=True, nullable=False)

    # Relationships
    items = relationship("Item", back_populates="category")


class Item(Base):
    __tablename__ = "items"

    item_id = Column(Integer, primary_key=True, index=True)
    item_name = Column(String(200), nullable=False, index=True)
    category_id = Column(Integer, ForeignKey("categories.category_id"), nullable=False)
    purchase_price = Column(DECIMAL(10, 2), nullable=False, default=0)
    selling_price = Column(DECIMAL(10, 2), nullable=False, default=0)
    # Written only by services.ledger
    current_stock = Column(Integer, nullable=False, default=0)
    image = Column(Text)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Relationships
    category = relationship("Category", back_populates="items")
    stock_in = relationship("StockIn", back_populates="item")
    stock_out = relationship("StockOut", back_populates="item")

    __table_args__ = (
        CheckConstraint("current_stock >= 0", name="ck_items_current_stock_non_negative"),
    )


class Supplier(Base):
    __tablename__ = "suppliers"

    supplier_id = Column(Integer, primary_key=True, index=True)
    supplier_name = Column(String(150), nullable=False)
    contact_person = Column(String(150))
    phone = Column(String(30))
    address = Column(Text)

    # Relationships
    stock_in = relationship("StockIn", back_populates="supplier")
