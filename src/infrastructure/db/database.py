"""
Database connection management.

Supports:
  - SQLite (local dev / tests, no setup; in-memory uses a single shared connection)
  - PostgreSQL (hosted database)

Connection string comes from Settings.database_url (DATABASE_URL env var).
"""

import logging
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

from src.config.settings import get_settings
from src.core.exceptions import ConstraintConflict, RemoteStoreError
from src.infrastructure.db.models import Base

logger = logging.getLogger(__name__)


def get_database_url() -> str:
    """Get database URL from settings."""
    return get_settings().database_url


def create_db_engine(url: str = None) -> Engine:
    """Create SQLAlchemy engine."""
    db_url = url or get_database_url()

    if db_url.startswith("sqlite"):
        kwargs = {}
        if db_url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
        engine = create_engine(
            db_url,
            connect_args={"check_same_thread": False},
            echo=False,
            **kwargs,
        )

        @event.listens_for(engine, "connect")
        def _enable_foreign_keys(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()
    else:
        # PostgreSQL
        engine = create_engine(
            db_url,
            pool_size=10,
            max_overflow=20,
            pool_pre_ping=True,
            echo=False,
        )

    return engine


# ── Global engine & session factory ──
_engine = None
_SessionFactory = None


def get_engine() -> Engine:
    """Get or create the global engine."""
    global _engine
    if _engine is None:
        _engine = create_db_engine()
    return _engine


def create_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(bind=engine, expire_on_commit=False)


def get_session_factory() -> sessionmaker:
    """Get or create the session factory."""
    global _SessionFactory
    if _SessionFactory is None:
        _SessionFactory = create_session_factory(get_engine())
    return _SessionFactory


def init_db(engine: Engine = None):
    """Create all tables. Safe to call multiple times."""
    engine = engine or get_engine()
    Base.metadata.create_all(engine)
    url = engine.url.render_as_string(hide_password=True)
    logger.info(f"Database initialized: {url.split('@')[-1] if '@' in url else url}")


UNIQUE_VIOLATION_PGCODE = "23505"


def is_unique_violation(error: IntegrityError) -> bool:
    """True only for uniqueness failures (not FK / NOT NULL / CHECK)."""
    if getattr(error.orig, "pgcode", None) == UNIQUE_VIOLATION_PGCODE:
        return True
    return "UNIQUE constraint failed" in str(error.orig)


@contextmanager
def store_errors(operation: str, entity: str = "") -> Iterator[None]:
    """Translate SQLAlchemy failures into the store error taxonomy."""
    try:
        yield
    except IntegrityError as e:
        logger.warning(f"{operation}: integrity error on {entity or 'record'}: {e.orig}")
        if is_unique_violation(e):
            raise ConstraintConflict(entity or operation, str(e.orig)) from e
        raise RemoteStoreError(f"{operation} failed: {e.orig}", operation=operation) from e
    except SQLAlchemyError as e:
        logger.error(f"{operation} failed: {e}")
        raise RemoteStoreError(f"{operation} failed: {e.__class__.__name__}", operation=operation) from e


@contextmanager
def get_db(factory: sessionmaker = None) -> Iterator[Session]:
    """Context manager for database sessions."""
    factory = factory or get_session_factory()
    session = factory()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
