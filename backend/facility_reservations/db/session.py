"""
Database engine and session factory.

The engine is created on first use so importing the application never opens
a connection; tests replace the store dependency and never reach it.
"""

from functools import lru_cache
from typing import Iterator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from facility_reservations.core.config import get_settings


@lru_cache()
def get_engine() -> Engine:
    settings = get_settings()
    return create_engine(
        settings.DATABASE_URL_SYNC,
        pool_size=settings.DB_POOL_SIZE,
        max_overflow=settings.DB_MAX_OVERFLOW,
        pool_timeout=settings.DB_POOL_TIMEOUT,
        pool_recycle=settings.DB_POOL_RECYCLE,
        pool_pre_ping=True,
        echo=settings.DB_ECHO,
    )


@lru_cache()
def get_session_factory() -> sessionmaker:
    return sessionmaker(bind=get_engine(), expire_on_commit=False)


def get_db() -> Iterator[Session]:
    """One session per request, always closed."""
    session = get_session_factory()()
    try:
        yield session
    finally:
        session.close()
