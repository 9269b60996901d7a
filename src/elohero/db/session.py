"""
Database session management for EloHero.

Provides the SQLAlchemy engine and session factory. Uses the settings from
config.py. The engine is created on first use, not at import, so that tests
and tools can point the package at another database first.

Usage:
    # As a context manager (recommended for scripts)
    from elohero.db import get_session

    with get_session() as session:
        ratings = session.query(Rating).all()
        # Commits automatically on exit, rolls back on exception

    # With an explicit factory (tests, the ledger)
    factory = make_session_factory(engine)
    with session_scope(factory) as session:
        ...
"""

from contextlib import contextmanager
from functools import lru_cache
from typing import Callable, Generator, Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from elohero.config import settings


def get_engine(database_url: Optional[str] = None) -> Engine:
    """
    Create SQLAlchemy engine with connection pooling.

    The engine is configured with:
    - Connection pool sized from settings (not for SQLite, which has its own)
    - Echo mode only when LOG_LEVEL=DEBUG
    - Pre-ping to verify connections before use (handles stale connections)
    """
    url = database_url or settings.database_url
    kwargs = {
        "pool_pre_ping": True,
        "echo": settings.log_level == "DEBUG",
    }
    if not url.startswith("sqlite"):
        kwargs["pool_size"] = settings.db_pool_size
        kwargs["max_overflow"] = settings.db_max_overflow

    return create_engine(url, **kwargs)


def make_session_factory(engine: Engine) -> sessionmaker:
    """Session factory with explicit commits and no surprise flushes."""
    return sessionmaker(
        bind=engine,
        autoflush=False,
        expire_on_commit=False,  # Returned rows stay readable after commit
    )


@lru_cache
def get_session_factory() -> sessionmaker:
    """Get or create the singleton session factory for settings.database_url."""
    return make_session_factory(get_engine())


@contextmanager
def session_scope(factory: Callable[[], Session]) -> Generator[Session, None, None]:
    """
    One transaction: commit on success, roll back on exception.

    Raises:
        Any exception from the block or from commit (after rollback)
    """
    session = factory()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


@contextmanager
def get_session() -> Generator[Session, None, None]:
    """
    Context manager for database sessions on the configured database.

    Example:
        with get_session() as session:
            rating = session.query(Rating).filter_by(participant_id="alice").first()
    """
    with session_scope(get_session_factory()) as session:
        yield session
