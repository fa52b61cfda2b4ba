"""
Database engine and session management using SQLAlchemy 2.x.
Provides connection pooling and session factory for the application.
"""
from contextlib import contextmanager
from typing import Generator, Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session, DeclarativeBase

from customer_api.lib.settings import settings


# Base class for all SQLAlchemy models
class Base(DeclarativeBase):
    """Base class for all database models."""
    pass


_engine: Optional[Engine] = None
_SessionLocal: Optional[sessionmaker] = None


def get_engine() -> Engine:
    """Create the engine on first use so importing models never needs a driver."""
    global _engine
    if _engine is None:
        options = {"echo": settings.debug, "pool_pre_ping": True}
        if not settings.database_url.startswith("sqlite"):
            options.update(pool_size=5, max_overflow=10)
        _engine = create_engine(settings.database_url, **options)
    return _engine


def get_session_factory() -> sessionmaker:
    global _SessionLocal
    if _SessionLocal is None:
        _SessionLocal = sessionmaker(
            bind=get_engine(),
            autocommit=False,
            autoflush=False,
            expire_on_commit=False,
        )
    return _SessionLocal


@contextmanager
def get_db_context() -> Generator[Session, None, None]:
    """
    Session scope: rolled back if the block raises, always closed.

    Usage:
        with get_db_context() as db:
            customer = db.get(Customer, 1)
    """
    db = get_session_factory()()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()
