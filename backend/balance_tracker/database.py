# backend/balance_tracker/database.py
"""
Database engine and session management.

Two backends are supported:
- PostgreSQL: pooled connections sized from DB_POOL_* settings
- SQLite: one shared connection (StaticPool), used by tests and local runs

SQLite engines are adjusted by configure_sqlite_engine() so foreign keys
and savepoints behave as on PostgreSQL.
"""

import logging
import time
from collections.abc import Generator

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool, QueuePool

from .config import settings

logger = logging.getLogger(__name__)

POOL_TIMEOUT_SECONDS = 30


def configure_sqlite_engine(sqlite_engine: Engine) -> Engine:
    """
    Make a pysqlite engine behave like PostgreSQL for this application.

    - Foreign keys are enforced on every connection.
    - The driver's own transaction handling is switched off and SQLAlchemy
      emits BEGIN itself, so SAVEPOINTs nest inside the outer transaction
      instead of committing on RELEASE.
    """

    @event.listens_for(sqlite_engine, "connect")
    def _on_connect(dbapi_connection, connection_record) -> None:
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(sqlite_engine, "begin")
    def _on_begin(conn) -> None:
        conn.exec_driver_sql("BEGIN")

    return sqlite_engine


def _create_engine() -> Engine:
    if settings.is_sqlite:
        logger.info("Configuring SQLite database (shared connection)")
        return configure_sqlite_engine(create_engine(
            settings.database_url,
            poolclass=StaticPool,
            connect_args={"check_same_thread": False},
            echo=settings.debug,
        ))

    logger.info(
        f"Configuring PostgreSQL pool: size={settings.db_pool_size}, "
        f"max_overflow={settings.db_pool_max_overflow}, "
        f"recycle={settings.db_pool_recycle}s"
    )
    return create_engine(
        settings.database_url,
        poolclass=QueuePool,
        pool_size=settings.db_pool_size,
        max_overflow=settings.db_pool_max_overflow,
        pool_recycle=settings.db_pool_recycle,
        pool_pre_ping=settings.db_pool_pre_ping,
        pool_timeout=POOL_TIMEOUT_SECONDS,
        echo=settings.debug,
    )


engine = _create_engine()
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Generator[Session, None, None]:
    """
    FastAPI dependency yielding one session per request.

    Services decide when to commit; the session is always closed afterwards.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def check_database_health() -> dict:
    """
    Run a trivial query and report how long it took.

    Returns:
        {"status": "healthy", "database", "latencyMs", "pool"} or
        {"status": "unhealthy", "error"}
    """
    started = time.perf_counter()
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
    except Exception as e:
        logger.error(f"Database health check failed: {e}")
        return {"status": "unhealthy", "error": str(e)}

    return {
        "status": "healthy",
        "database": "sqlite" if settings.is_sqlite else "postgresql",
        "latencyMs": round((time.perf_counter() - started) * 1000, 2),
        "pool": engine.pool.status(),
    }
