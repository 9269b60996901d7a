"""
SQLAlchemy ORM models for EloHero.

The rating core owns three record types and reads two collaborator tables:

Tables:
- groups: Competition groups (owned by the group management layer)
- seasons: Rating periods of a group (owned by the group management layer)
- ratings: Current rating state per (season, participant)
- match_results: One row per reported match, soft-deleted on reversal
- participant_outcomes: Per-participant outcome of a match
- rating_changes: Permanent audit trail, one row per (match, participant)

Key design decisions:
- Participant ids are opaque strings; the core never resolves them to users
- Ratings carry a version counter; every UPDATE is a compare-and-swap
- Match results are never hard-deleted; reversal only sets deleted_at
- rating_changes rows are never touched after insert, even on reversal
- No JSON blobs: every queried field is a plain indexed column
"""

from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship

from elohero.elo.constants import DEFAULT_RATING


def utcnow() -> datetime:
    """Naive UTC timestamp, matching the DateTime columns below."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""
    pass


# =============================================================================
# Collaborator Models
# =============================================================================

class Group(Base):
    """
    A group of people who play together.

    Created and managed outside the rating core. The core only reads
    current_season_id and keeps game_count in step with applied matches.
    """
    __tablename__ = "groups"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)

    # The season new matches must be reported against
    current_season_id: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)

    game_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, onupdate=utcnow)

    seasons: Mapped[list["Season"]] = relationship(back_populates="group")

    def __repr__(self) -> str:
        return f"<Group(id='{self.id}', name='{self.name}')>"


class Season(Base):
    """
    A bounded rating period with its own rating pool.

    A season is open while is_active is set and end_date is empty.
    """
    __tablename__ = "seasons"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    group_id: Mapped[str] = mapped_column(ForeignKey("groups.id"), nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    start_date: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
    end_date: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    game_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)

    group: Mapped["Group"] = relationship(back_populates="seasons")

    __table_args__ = (
        Index("idx_seasons_group", "group_id"),
    )

    @property
    def is_open(self) -> bool:
        return bool(self.is_active) and self.end_date is None

    def __repr__(self) -> str:
        return f"<Season(id='{self.id}', group_id='{self.group_id}', active={self.is_active})>"


# =============================================================================
# Rating Models
# =============================================================================

class Rating(Base):
    """
    Current rating state of one participant in one season.

    Invariant: wins + losses + draws == games_played.

    The version column is SQLAlchemy's version_id_col: each UPDATE is issued
    as ``... WHERE id = :id AND version = :loaded_version`` and raises
    StaleDataError when another transaction got there first.
    """
    __tablename__ = "ratings"

    id: Mapped[int] = mapped_column(primary_key=True)
    season_id: Mapped[str] = mapped_column(ForeignKey("seasons.id"), nullable=False)
    group_id: Mapped[str] = mapped_column(ForeignKey("groups.id"), nullable=False)
    participant_id: Mapped[str] = mapped_column(String(128), nullable=False)

    current_rating: Mapped[Decimal] = mapped_column(
        Numeric(10, 2), nullable=False, default=Decimal(str(DEFAULT_RATING))
    )
    games_played: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    wins: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    losses: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    draws: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    version: Mapped[int] = mapped_column(Integer, nullable=False)
    last_updated: Mapped[datetime] = mapped_column(DateTime, default=utcnow, onupdate=utcnow)

    __mapper_args__ = {"version_id_col": version}

    __table_args__ = (
        UniqueConstraint("season_id", "participant_id", name="uq_ratings_season_participant"),
        CheckConstraint(
            "games_played >= 0 AND wins >= 0 AND losses >= 0 AND draws >= 0",
            name="ck_ratings_counters_non_negative",
        ),
        Index("idx_ratings_season_rating", "season_id", "current_rating"),
        Index("idx_ratings_participant", "participant_id"),
    )

    def __repr__(self) -> str:
        return (
            f"<Rating(season_id='{self.season_id}', participant_id='{self.participant_id}', "
            f"rating={self.current_rating})>"
        )


# =============================================================================
# Ledger Models
# =============================================================================

class MatchResult(Base):
    """
    One reported match.

    Immutable once written except for deleted_at, which marks the match as
    reversed. Rows are never hard-deleted.

    Modes:
    - 'individual': every outcome is one participant
    - 'team': outcomes carry the team_id the participant played for
    """
    __tablename__ = "match_results"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    season_id: Mapped[str] = mapped_column(ForeignKey("seasons.id"), nullable=False)
    group_id: Mapped[str] = mapped_column(ForeignKey("groups.id"), nullable=False)
    mode: Mapped[str] = mapped_column(String(20), nullable=False, default="individual")
    created_by: Mapped[Optional[str]] = mapped_column(String(128), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, nullable=False)
    deleted_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)

    outcomes: Mapped[list["ParticipantOutcome"]] = relationship(
        back_populates="match",
        cascade="all, delete-orphan",
        order_by="ParticipantOutcome.placement",
        lazy="selectin",
    )

    __table_args__ = (
        CheckConstraint("mode IN ('individual', 'team')", name="ck_match_results_mode"),
        Index("idx_match_results_group_created", "group_id", "created_at"),
        Index("idx_match_results_season", "season_id"),
    )

    @property
    def is_reversed(self) -> bool:
        return self.deleted_at is not None

    def __repr__(self) -> str:
        return f"<MatchResult(id='{self.id}', mode='{self.mode}', reversed={self.is_reversed})>"


class ParticipantOutcome(Base):
    """Outcome of one participant in one match."""

    __tablename__ = "participant_outcomes"

    id: Mapped[int] = mapped_column(primary_key=True)
    match_id: Mapped[str] = mapped_column(
        ForeignKey("match_results.id", ondelete="CASCADE"), nullable=False
    )
    participant_id: Mapped[str] = mapped_column(String(128), nullable=False)
    placement: Mapped[int] = mapped_column(Integer, nullable=False)
    is_tied: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    team_id: Mapped[Optional[str]] = mapped_column(String(128), nullable=True)
    rating_before: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    rating_after: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    rating_change: Mapped[int] = mapped_column(Integer, nullable=False)

    match: Mapped["MatchResult"] = relationship(back_populates="outcomes")

    __table_args__ = (
        UniqueConstraint("match_id", "participant_id", name="uq_participant_outcomes_match_participant"),
        CheckConstraint("placement >= 1", name="ck_participant_outcomes_placement"),
    )

    def __repr__(self) -> str:
        return (
            f"<ParticipantOutcome(participant_id='{self.participant_id}', "
            f"placement={self.placement}, change={self.rating_change})>"
        )


class RatingChangeRecord(Base):
    """
    Permanent audit row for one rating mutation.

    Duplicates the outcome fields so "rating history of participant X" is a
    single indexed lookup. Never updated or deleted: when the parent match is
    reversed the row stays, and readers filter on match_results.deleted_at.
    """
    __tablename__ = "rating_changes"

    id: Mapped[int] = mapped_column(primary_key=True)
    match_id: Mapped[str] = mapped_column(ForeignKey("match_results.id"), nullable=False)
    participant_id: Mapped[str] = mapped_column(String(128), nullable=False)
    season_id: Mapped[str] = mapped_column(ForeignKey("seasons.id"), nullable=False)
    group_id: Mapped[str] = mapped_column(ForeignKey("groups.id"), nullable=False)
    rating_before: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    rating_after: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    rating_change: Mapped[int] = mapped_column(Integer, nullable=False)
    placement: Mapped[int] = mapped_column(Integer, nullable=False)
    is_tied: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    team_id: Mapped[Optional[str]] = mapped_column(String(128), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, nullable=False)

    match: Mapped["MatchResult"] = relationship()

    __table_args__ = (
        UniqueConstraint("match_id", "participant_id", name="uq_rating_changes_match_participant"),
        Index("idx_rating_changes_participant_season", "participant_id", "season_id", "created_at"),
        Index("idx_rating_changes_participant_group", "participant_id", "group_id", "created_at"),
    )

    def __repr__(self) -> str:
        return (
            f"<RatingChangeRecord(match_id='{self.match_id}', "
            f"participant_id='{self.participant_id}', change={self.rating_change})>"
        )
