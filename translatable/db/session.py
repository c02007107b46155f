"""
Database session management for translatable.

This module provides:
1. Engine creation with the SQLite specifics the persistence layer relies on
   (foreign key cascades and working SAVEPOINTs)
2. The session factory and FastAPI session dependency
3. Transaction scopes for callers that need save() to be atomic

Usage:
    from translatable.db.session import session_scope

    with session_scope() as db:
        service = TranslatableService(db, Country, locale_context)
        ...
"""

import logging
from contextlib import contextmanager
from typing import Generator, Optional

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from translatable.core.config import settings

# Configure module logger
logger = logging.getLogger(__name__)


def _is_memory_database(url: str) -> bool:
    database = make_url(url).database
    return not database or database == ":memory:"


def create_engine_for(url: str, echo: bool = False) -> Engine:
    """
    Create a SQLAlchemy engine.

    For SQLite the engine enables foreign keys on every connection, so that
    translation rows are removed with their parent, and takes over BEGIN from
    the pysqlite driver so SAVEPOINTs behave. In-memory databases share one
    connection through StaticPool.

    Args:
        url: Database URL
        echo: Log emitted SQL

    Returns:
        Configured engine
    """
    if not url.startswith("sqlite"):
        logger.info(f"Creating SQLAlchemy engine for {make_url(url).render_as_string(hide_password=True)}")
        return create_engine(url, echo=echo, pool_pre_ping=True)

    engine_args = {"connect_args": {"check_same_thread": False}, "echo": echo}
    if _is_memory_database(url):
        engine_args["poolclass"] = StaticPool

    logger.info(f"Creating SQLite engine for {url}")
    engine = create_engine(url, **engine_args)

    @event.listens_for(engine, "connect")
    def set_sqlite_pragma(dbapi_connection, connection_record):
        # pysqlite must not emit BEGIN itself or SAVEPOINT breaks
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON;")
        cursor.close()

    @event.listens_for(engine, "begin")
    def do_begin(conn):
        conn.exec_driver_sql("BEGIN")

    return engine


engine = create_engine_for(settings.DATABASE_URL, echo=settings.DB_ECHO)

# Create session factory
SessionLocal = sessionmaker(autoflush=False, bind=engine)


# -----------------------------------------------------------------------------
# FastAPI Dependency
# -----------------------------------------------------------------------------


def get_db() -> Generator[Session, None, None]:
    """
    Get a database session with proper resource management.

    Returns:
        SQLAlchemy Session for database operations
    """
    db = SessionLocal()
    try:
        yield db
    except Exception as e:
        logger.error(f"Error in get_db: {e}")
        raise
    finally:
        db.close()


# -----------------------------------------------------------------------------
# Transaction Support
# -----------------------------------------------------------------------------


@contextmanager
def session_scope(session: Optional[Session] = None) -> Generator[Session, None, None]:
    """
    Context manager for database transactions.

    Args:
        session: Optional session to use (if None, creates a new one)

    Yields:
        Database session for use within the transaction
    """
    close_session = False

    if session is None:
        session = SessionLocal()
        close_session = True

    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        if close_session:
            session.close()


def verify_db_connection(bind: Optional[Engine] = None) -> bool:
    """
    Verify that we can connect to the database.

    Returns:
        True if connection succeeds, False otherwise
    """
    try:
        with (bind or engine).connect() as connection:
            result = connection.execute(text("SELECT 1")).scalar()
            logger.info(f"Database connection verified: {result}")
            return True
    except Exception as e:
        logger.error(f"Database connection verification failed: {e}")
        return False
