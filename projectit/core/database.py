"""
Database engine, session factory and FastAPI dependency.
"""
from typing import Generator

import structlog
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from projectit.core.config import settings

logger = structlog.get_logger(__name__)

Base = declarative_base()

connect_args = {"check_same_thread": False} if settings.DATABASE_URL.startswith("sqlite") else {}

engine = create_engine(
    settings.DATABASE_URL,
    echo=False,
    pool_pre_ping=True,
    connect_args=connect_args,
)

SessionLocal = sessionmaker(bind=engine, autoflush=True, autocommit=False)


def get_db() -> Generator[Session, None, None]:
    """Get database session for FastAPI dependency injection."""
    db = SessionLocal()
    try:
        yield db
    except Exception as e:
        db.rollback()
        logger.error("Database session error", error=str(e))
        raise
    finally:
        db.close()


async def init_db() -> None:
    """Create tables for all registered models."""
    import projectit.models  # noqa: F401

    logger.info("Initializing database")
    Base.metadata.create_all(bind=engine)
