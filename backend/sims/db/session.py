"""
Database session management
"""
import logging
import os

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from sims.core.settings import settings
from sims.db.base import Base

logger = logging.getLogger(__name__)


def enable_sqlite_foreign_keys(engine: Engine) -> None:
    """Turn on ON DELETE CASCADE / SET NULL enforcement for SQLite connections."""

    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def build_engine(database_url: str, echo: bool = False) -> Engine:
    """
    Create an engine for the given URL.

    SQLite file databases get their directory created; in-memory SQLite
    shares a single connection so every session sees the same tables.
    """
    url = make_url(database_url)

    if url.get_backend_name() != "sqlite":
        return create_engine(
            database_url,
            echo=echo,
            pool_pre_ping=True,  # Verify connections before using
            pool_recycle=3600,  # Recycle connections after 1 hour
        )

    kwargs = {"connect_args": {"check_same_thread": False}}
    if url.database in (None, "", ":memory:"):
        kwargs["poolclass"] = StaticPool
    else:
        directory = os.path.dirname(url.database)
        if directory:
            os.makedirs(directory, exist_ok=True)

    sqlite_engine = create_engine(database_url, echo=echo, **kwargs)
    enable_sqlite_foreign_keys(sqlite_engine)
    return sqlite_engine


engine = build_engine(settings.DATABASE_URL, echo=settings.SQL_ECHO)

logger.info(f"Database connection: {engine.url.render_as_string(hide_password=True)}")

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db():
    """
    Dependency for getting database session

    Usage in FastAPI endpoints:
        @router.get("/filaments")
        def list_filaments(db: Session = Depends(get_db)):
            return db.query(Filament).all()
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db() -> None:
    """
    Create all tables and seed default pricing settings.

    Called once on application startup.
    """
    # Register every model on Base.metadata
    import sims.models  # noqa: F401
    from sims.services.settings_service import ensure_default_settings

    Base.metadata.create_all(bind=engine)

    db = SessionLocal()
    try:
        ensure_default_settings(db)
    finally:
        db.close()
    logger.info("Database initialized")
