"""
Read models over the stored ratings and audit trail.

All lookups hit plain indexed columns; nothing is decoded from blobs.
"""

from __future__ import annotations

from typing import Optional

from sqlalchemy.orm import Session

from elohero.db.models import MatchResult, ParticipantOutcome, Rating, RatingChangeRecord


def season_leaderboard(session: Session, season_id: str) -> list[Rating]:
    """Ratings of a season, best first (ties: more games first, then by id)."""
    return (
        session.query(Rating)
        .filter(Rating.season_id == season_id)
        .order_by(
            Rating.current_rating.desc(),
            Rating.games_played.desc(),
            Rating.participant_id,
        )
        .all()
    )


def rating_history(
    session: Session,
    participant_id: str,
    *,
    season_id: Optional[str] = None,
    group_id: Optional[str] = None,
    include_reversed: bool = False,
) -> list[RatingChangeRecord]:
    """
    Rating changes of one participant, newest first.

    Args:
        session: Database session
        participant_id: Participant to look up
        season_id: Restrict to one season
        group_id: Restrict to one group
        include_reversed: Also return changes from reversed matches

    Returns:
        RatingChangeRecord rows ordered by created_at desc
    """
    query = session.query(RatingChangeRecord).filter(
        RatingChangeRecord.participant_id == participant_id
    )
    if season_id is not None:
        query = query.filter(RatingChangeRecord.season_id == season_id)
    if group_id is not None:
        query = query.filter(RatingChangeRecord.group_id == group_id)
    if not include_reversed:
        query = query.join(MatchResult, RatingChangeRecord.match_id == MatchResult.id).filter(
            MatchResult.deleted_at.is_(None)
        )

    return query.order_by(RatingChangeRecord.created_at.desc(), RatingChangeRecord.id.desc()).all()


def match_outcomes(session: Session, match_id: str) -> list[ParticipantOutcome]:
    """Outcome rows of one match, best placement first."""
    return (
        session.query(ParticipantOutcome)
        .filter(ParticipantOutcome.match_id == match_id)
        .order_by(ParticipantOutcome.placement, ParticipantOutcome.id)
        .all()
    )
