"""
Pytest configuration and fixtures.

This file is automatically loaded by pytest and provides
shared fixtures for all tests.
"""

import pytest
from sqlalchemy import create_engine

from elohero.db.models import Base, Group, Season
from elohero.db.session import make_session_factory, session_scope
from elohero.elo.calculator import EloParams
from elohero.ledger import MatchLedger

GROUP_ID = "g1"
SEASON_ID = "s1"


@pytest.fixture
def test_engine(tmp_path):
    """
    Create a test database engine.

    Uses a SQLite file per test rather than :memory:, so that separate
    sessions get separate connections (needed to simulate concurrent
    writers).
    """
    engine = create_engine(f"sqlite:///{tmp_path / 'elohero.db'}", echo=False)
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(test_engine):
    return make_session_factory(test_engine)


@pytest.fixture
def db_session(session_factory):
    """A plain session for reading back what the ledger wrote."""
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def open_season(session_factory):
    """
    Group g1 with its current, open season s1.

    Returns:
        (group_id, season_id)
    """
    with session_scope(session_factory) as session:
        session.add(Group(id=GROUP_ID, name="Friday board games", current_season_id=SEASON_ID))
        session.add(Season(id=SEASON_ID, group_id=GROUP_ID, name="Season 1", is_active=True))
    return GROUP_ID, SEASON_ID


@pytest.fixture
def ledger(session_factory):
    """Ledger with the default ELO parameters (K 32, N0 30, S 400)."""
    return MatchLedger(session_factory, EloParams(), max_attempts=3)
