"""
Database module for EloHero.

Provides SQLAlchemy ORM models and session management.

Usage:
    from elohero.db import get_session, Rating

    with get_session() as session:
        ratings = session.query(Rating).filter_by(season_id="s1").all()
"""

from elohero.db.models import (
    Base,
    Group,
    Season,
    Rating,
    MatchResult,
    ParticipantOutcome,
    RatingChangeRecord,
)
from elohero.db.session import (
    get_engine,
    get_session,
    get_session_factory,
    make_session_factory,
    session_scope,
)

__all__ = [
    # Base
    "Base",
    # Models
    "Group",
    "Season",
    "Rating",
    "MatchResult",
    "ParticipantOutcome",
    "RatingChangeRecord",
    # Session
    "get_engine",
    "get_session",
    "get_session_factory",
    "make_session_factory",
    "session_scope",
]
