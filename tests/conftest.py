"""
Shared fixtures: an in-memory SQLite database per test and a TestClient
wired to it.
"""
import os

# Keep the module-level engine off the on-disk database
os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from thriftstock.core.database import drop_db, get_db, init_db
from thriftstock.core.security import create_access_token
from thriftstock.main import app
from thriftstock.models.user import UserRole
from thriftstock.schemas.catalog import CategoryCreate, ItemCreate, SupplierCreate
from thriftstock.schemas.user import StaffCreate
from thriftstock.services.auth_service import auth_service
from thriftstock.services.catalog_service import catalog_service


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(bind=engine)
    yield engine
    drop_db(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


# ---- data helpers ----

@pytest.fixture
def admin(db):
    return auth_service.create_user(
        db, StaffCreate(username="admin", password="admin-pass", role_id=UserRole.admin.role_id)
    )


@pytest.fixture
def clerk(db):
    return auth_service.create_user(
        db, StaffCreate(username="clerk", password="clerk-pass", role_id=UserRole.staff.role_id)
    )


def auth_headers(user):
    token = create_access_token({"sub": str(user["user_id"])})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_headers(admin):
    return auth_headers(admin)


@pytest.fixture
def clerk_headers(clerk):
    return auth_headers(clerk)


@pytest.fixture
def category(db):
    return catalog_service.create_category(db, CategoryCreate(category_name="Jackets"))


@pytest.fixture
def item(db, category):
    return catalog_service.create_item(
        db,
        ItemCreate(
            item_name="Denim jacket",
            category_id=category["category_id"],
            purchase_price=8.5,
            selling_price=20,
        ),
    )


@pytest.fixture
def supplier(db):
    return catalog_service.create_supplier(db, SupplierCreate(supplier_name="Estate Lots Co", phone="555-0100"))
