"""
Database Session Management

One lazily built engine per process, resolved from the environment:
PostgreSQL when a URL is configured, SQLite otherwise. ``reset_engine``
drops it so tests can point the next session at a fresh database.
"""

import os
import logging
from contextlib import contextmanager
from typing import Generator, Optional

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import QueuePool, StaticPool

from .models import Base

logger = logging.getLogger(__name__)

_engine: Optional[Engine] = None
_session_factory: Optional[sessionmaker] = None


def get_database_url() -> str:
    """
    Resolve the audit database URL.

    DATABASE_URL, then POSTGRES_URL, then SQLite at SQLITE_PATH
    (``:memory:`` gives an in-process database).
    """
    for var in ("DATABASE_URL", "POSTGRES_URL"):
        url = os.getenv(var)
        if url:
            logger.info(f"Audit history stored in PostgreSQL ({var})")
            # SQLAlchemy only accepts the postgresql:// scheme
            if url.startswith("postgres://"):
                url = "postgresql://" + url[len("postgres://"):]
            return url

    sqlite_path = os.getenv("SQLITE_PATH", "seo_audit.db")
    logger.warning(f"No DATABASE_URL found, storing audit history in SQLite: {sqlite_path}")
    return f"sqlite:///{sqlite_path}"


def _build_engine(url: str) -> Engine:
    if url.startswith("postgresql://"):
        return create_engine(url, poolclass=QueuePool, pool_size=5, max_overflow=10, pool_pre_ping=True)

    kwargs = {"connect_args": {"check_same_thread": False}}
    if url == "sqlite:///:memory:":
        # Every session must see the same in-memory database
        kwargs["poolclass"] = StaticPool
    engine = create_engine(url, **kwargs)

    @event.listens_for(engine, "connect")
    def enable_foreign_keys(dbapi_conn, connection_record):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    return engine


def get_engine() -> Engine:
    global _engine
    if _engine is None:
        _engine = _build_engine(get_database_url())
    return _engine


def reset_engine() -> None:
    """Dispose the engine so the next session re-reads the environment."""
    global _engine, _session_factory
    if _engine is not None:
        _engine.dispose()
    _engine = None
    _session_factory = None


@contextmanager
def get_db_context() -> Generator[Session, None, None]:
    """
    Session scope: commits on success, rolls back and re-raises on error.

    Usage:
        with get_db_context() as db:
            db.get(SeoAudit, audit_id)
    """
    global _session_factory
    if _session_factory is None:
        _session_factory = sessionmaker(bind=get_engine(), autoflush=False, expire_on_commit=False)

    db = _session_factory()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


def init_db() -> None:
    """Create the audit tables if they do not exist."""
    Base.metadata.create_all(bind=get_engine())
    logger.info("Audit tables ready")


def check_db_connection() -> bool:
    try:
        with get_engine().connect() as conn:
            conn.execute(text("SELECT 1"))
        return True
    except Exception as e:
        logger.error(f"Database connection failed: {e}")
        return False
