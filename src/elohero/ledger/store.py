"""Rating records per (season, participant)."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from decimal import Decimal
from typing import Optional

from sqlalchemy.orm import Session

from elohero.db.models import Rating, Season
from elohero.elo.constants import DEFAULT_RATING

logger = logging.getLogger(__name__)


def _new_rating(season: Season, participant_id: str, initial_rating: float) -> Rating:
    return Rating(
        season_id=season.id,
        group_id=season.group_id,
        participant_id=participant_id,
        current_rating=Decimal(str(initial_rating)),
        games_played=0,
        wins=0,
        losses=0,
        draws=0,
    )


def get_rating(session: Session, season_id: str, participant_id: str) -> Optional[Rating]:
    """Get one participant's rating in a season, or None if they have none yet."""
    return (
        session.query(Rating)
        .filter(Rating.season_id == season_id, Rating.participant_id == participant_id)
        .first()
    )


def get_or_create_ratings(
    session: Session,
    season: Season,
    participant_ids: Iterable[str],
    initial_rating: float = DEFAULT_RATING,
) -> dict[str, Rating]:
    """
    Load the ratings of all participants, creating missing ones.

    Existing rows are locked for update (a no-op on SQLite) in participant id
    order. Missing rows are inserted at ``initial_rating`` and flushed, so a
    concurrent insert of the same participant surfaces here as IntegrityError.

    Returns:
        Mapping participant id -> Rating
    """
    wanted = sorted(set(participant_ids))
    rows = (
        session.query(Rating)
        .filter(Rating.season_id == season.id, Rating.participant_id.in_(wanted))
        .order_by(Rating.participant_id)
        .with_for_update()
        .all()
    )
    ratings = {row.participant_id: row for row in rows}

    missing = [pid for pid in wanted if pid not in ratings]
    if missing:
        for participant_id in missing:
            rating = _new_rating(season, participant_id, initial_rating)
            session.add(rating)
            ratings[participant_id] = rating
        session.flush()
        logger.debug("Created %d ratings in season %s", len(missing), season.id)

    return ratings


def initialize_season_ratings(
    session: Session,
    season: Season,
    participant_ids: Iterable[str],
    initial_rating: float = DEFAULT_RATING,
) -> int:
    """
    Seed a rating for every given participant of a new season.

    Idempotent: participants that already have a rating in the season keep
    it untouched.

    Returns:
        Number of ratings created
    """
    wanted = sorted(set(participant_ids))
    existing = {
        pid
        for (pid,) in session.query(Rating.participant_id).filter(
            Rating.season_id == season.id, Rating.participant_id.in_(wanted)
        )
    }

    created = 0
    for participant_id in wanted:
        if participant_id in existing:
            continue
        session.add(_new_rating(season, participant_id, initial_rating))
        created += 1

    if created:
        session.flush()
    logger.info("Initialized %d ratings for season %s", created, season.id)
    return created
