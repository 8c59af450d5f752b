# thriftstock/core/database.py
import logging
import os
from typing import Generator

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from thriftstock.core.config import settings
from thriftstock.core.exceptions import ConflictError

logger = logging.getLogger(__name__)

Base = declarative_base()


def _make_engine(database_url: str) -> Engine:
    connect_args = {}
    url = make_url(database_url)
    if url.get_backend_name() == "sqlite":
        connect_args = {"check_same_thread": False}
        if url.database and url.database != ":memory:" and os.path.dirname(url.database):
            os.makedirs(os.path.dirname(url.database), exist_ok=True)

    return create_engine(database_url, connect_args=connect_args, echo=settings.SQL_ECHO)


@event.listens_for(Engine, "connect")
def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    # SQLite ignores REFERENCES clauses unless asked per connection
    if type(dbapi_connection).__module__.startswith("sqlite3"):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


engine = _make_engine(settings.DATABASE_URL)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Generator[Session, None, None]:
    """Request-scoped session"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def seed_roles(db: Session) -> None:
    """Insert the fixed role lookup rows if they are missing."""
    from thriftstock.models.user import Role, UserRole

    for role in UserRole:
        if db.get(Role, role.role_id) is None:
            db.add(Role(role_id=role.role_id, role_name=role.value))
    db.commit()


def init_db(bind: Engine = None) -> None:
    """Create all tables and seed the role lookup."""
    # Import models so they register on Base.metadata
    from thriftstock import models  # noqa: F401

    bind = bind or engine
    logger.info("Creating tables on %s", bind.url.render_as_string(hide_password=True))
    Base.metadata.create_all(bind=bind)

    db = Session(bind=bind)
    try:
        seed_roles(db)
    finally:
        db.close()


def drop_db(bind: Engine = None) -> None:
    from thriftstock import models  # noqa: F401

    Base.metadata.drop_all(bind=bind or engine)


def commit_or_conflict(db: Session, message: str) -> None:
    """Commit, turning a constraint violation into a ConflictError."""
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        logger.warning("Integrity error on commit: %s", e.orig)
        raise ConflictError(message) from e
