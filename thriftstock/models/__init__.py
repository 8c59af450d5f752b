from .user import User, Role, UserRole
from .catalog import Category, Item, Supplier
from .stock import StockIn, StockOut

__all__ = ["User", "Role", "UserRole", "Category", "Item", "Supplier", "StockIn", "StockOut"]
