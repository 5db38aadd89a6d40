"""
Database Configuration and Session Management

This module handles SQLAlchemy setup with connection pooling.
PostgreSQL is the production target; SQLite is accepted for local
development and the test suite.
"""
from sqlalchemy import create_engine, event
from sqlalchemy.orm import declarative_base, sessionmaker, Session
from sqlalchemy.pool import QueuePool, StaticPool
from typing import Iterator
from shipyard.config import get_settings
import logging

logger = logging.getLogger(__name__)

settings = get_settings()


def _engine_options(database_url: str) -> dict:
    """Pool options for the configured backend."""
    if database_url.startswith("sqlite"):
        options = {"connect_args": {"check_same_thread": False}}
        # In-memory databases live inside one connection, so every session
        # has to share it.
        if database_url in ("sqlite://", "sqlite:///:memory:"):
            options["poolclass"] = StaticPool
        return options

    return {
        "poolclass": QueuePool,
        "pool_size": settings.DATABASE_POOL_SIZE,
        "max_overflow": settings.DATABASE_MAX_OVERFLOW,
        "pool_pre_ping": True,  # Verify connections before using (handles stale connections)
    }


engine = create_engine(
    settings.DATABASE_URL,
    echo=settings.DEBUG,  # Log SQL in debug mode
    **_engine_options(settings.DATABASE_URL),
)

# expire_on_commit=False lets resolvers keep reading attributes of objects
# they just committed without another round trip.
SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
    expire_on_commit=False,
)

# Base class for all models
Base = declarative_base()


@event.listens_for(engine, "connect")
def set_connection_options(dbapi_connection, connection_record):
    """Set connection-level configuration on new connections."""
    cursor = dbapi_connection.cursor()
    if settings.DATABASE_URL.startswith("postgresql"):
        cursor.execute("SET TIME ZONE 'UTC'")
    elif settings.DATABASE_URL.startswith("sqlite"):
        # SQLite ignores ON DELETE clauses unless asked
        cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()
    logger.debug("New database connection established")


def get_db() -> Iterator[Session]:
    """
    Dependency function that provides a database session.

    Used with FastAPI's dependency injection system (the GraphQL context
    depends on it). The session is closed after the request completes.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db():
    """
    Initialize database tables.

    In production, you'd use Alembic migrations instead.
    """
    # Import models so they register with Base.metadata
    import shipyard.models  # noqa: F401

    logger.warning("init_db() called - use Alembic migrations in production!")
    Base.metadata.create_all(bind=engine)
