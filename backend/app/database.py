# backend/app/database.py
"""
Database connection and session management.

This module configures SQLAlchemy with:
- Environment-aware engine settings (SQLite file, in-memory or server DB)
- Schema creation on startup

The portfolio is single-user: one database holds one portfolio.
"""

import logging
from collections.abc import Generator

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

from .config import settings

logger = logging.getLogger(__name__)


def _create_engine():
    """
    Create SQLAlchemy engine with environment-appropriate configuration.

    Returns:
        Engine: Configured SQLAlchemy engine

    Configuration varies by database type:
    - In-memory SQLite: StaticPool so every session shares one database
    - SQLite file: default pool, check_same_thread disabled for FastAPI
    - Anything else: default pool with pre-ping
    """
    if settings.is_memory_sqlite:
        logger.info("Configuring in-memory SQLite database")
        return create_engine(
            settings.database_url,
            poolclass=StaticPool,
            connect_args={"check_same_thread": False},
            echo=settings.debug,
        )

    if settings.is_sqlite:
        logger.info(f"Configuring SQLite database: {settings.database_url}")
        return create_engine(
            settings.database_url,
            connect_args={"check_same_thread": False},
            echo=settings.debug,
        )

    logger.info("Configuring server database connection pool")
    return create_engine(
        settings.database_url,
        pool_pre_ping=True,
        echo=settings.debug,
    )


# Create engine and session factory
engine = _create_engine()
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def init_db() -> None:
    """Create all tables defined in models (no-op for existing tables)."""
    from app.models import Base

    Base.metadata.create_all(bind=engine)
    logger.info("Database schema ready")


def get_db() -> Generator[Session, None, None]:
    """
    Dependency that provides a database session.

    Yields:
        Session: A SQLAlchemy database session that auto-closes after use.

    Usage:
        @router.get("/items")
        def get_items(db: Session = Depends(get_db)):
            return db.query(Item).all()
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
