# scripts/init_db.py
import logging
import os
import sys

sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from thriftstock.core.database import SessionLocal, init_db
from thriftstock.core.exceptions import ConflictError
from thriftstock.core.logging_setup import configure_logging
from thriftstock.models.user import UserRole
from thriftstock.schemas.catalog import CategoryCreate
from thriftstock.schemas.user import StaffCreate
from thriftstock.services.auth_service import auth_service
from thriftstock.services.catalog_service import catalog_service

logger = logging.getLogger("scripts.init_db")

STARTER_CATEGORIES = ["Clothing", "Shoes", "Accessories", "Home Goods", "Books"]


def create_initial_data():
    """Create tables, default accounts and starter categories"""

    init_db()

    db = SessionLocal()
    try:
        accounts = [
            ("admin", os.getenv("ADMIN_PASSWORD", "admin123"), UserRole.admin),
            ("staff", os.getenv("STAFF_PASSWORD", "staff123"), UserRole.staff),
        ]
        for username, password, role in accounts:
            try:
                auth_service.create_user(
                    db, StaffCreate(username=username, password=password, role_id=role.role_id)
                )
                logger.info("Created %s user: %s", role.value, username)
            except ConflictError:
                logger.info("User %s already exists", username)

        for name in STARTER_CATEGORIES:
            try:
                catalog_service.create_category(db, CategoryCreate(category_name=name))
                logger.info("Created category %s", name)
            except ConflictError:
                logger.info("Category %s already exists", name)
    finally:
        db.close()


if __name__ == "__main__":
    configure_logging()
    create_initial_data()
