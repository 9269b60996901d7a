"""
Match ledger: apply a match result atomically, reverse it exactly.

Applying a match, in one transaction:
1. Check the submission, then the season gate
2. Load (or lazily create) every participant's rating
3. Resolve placements, aggregate teams, run the ELO calculation
4. Write the match, its outcomes and one audit row per participant
5. Update every rating and counter, bump the group and season game counts

Reversing a match subtracts the stored deltas from the current ratings. No
other match is replayed, so matches can be reversed in any order and the
ratings of participants outside the match are never read or written.

Ratings are updated with optimistic concurrency (see Rating.version). When
a concurrent match wins the race the whole cycle is retried from step 2 with
fresh ratings, up to settings.ledger_max_attempts times.

Usage:
    from elohero.ledger import MatchLedger, Entrant

    ledger = MatchLedger(get_session_factory())
    match = ledger.apply("g1", "s1", entrants=[Entrant("alice"), Entrant("bob")])
    ledger.reverse(match.id)
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Sequence
from dataclasses import dataclass
from decimal import Decimal
from typing import Callable, Optional, TypeVar

from sqlalchemy import case, update
from sqlalchemy.exc import DBAPIError, IntegrityError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from elohero.config import settings
from elohero.db.models import (
    Group,
    MatchResult,
    ParticipantOutcome,
    Rating,
    RatingChangeRecord,
    Season,
    utcnow,
)
from elohero.db.session import session_scope
from elohero.elo.calculator import EloCalculator, EloParams, RatedEntrant
from elohero.elo.constants import (
    MODE_INDIVIDUAL,
    MODE_TEAM,
    OUTCOME_DRAW,
    OUTCOME_LOSS,
    OUTCOME_WIN,
)
from elohero.elo.entrants import Entrant, TeamEntrant, tie_map
from elohero.elo.placement import resolve_placements, tied_entrants
from elohero.elo.teams import RatedMember, RatedTeam, expand_teams, fan_out
from elohero.elo.validation import validate_season, validate_submission
from elohero.exceptions import ConcurrencyConflict, PreconditionFailed, StorageUnavailable
from elohero.ledger.store import get_or_create_ratings

logger = logging.getLogger(__name__)

T = TypeVar("T")

COUNTER_FIELDS = {
    OUTCOME_WIN: "wins",
    OUTCOME_LOSS: "losses",
    OUTCOME_DRAW: "draws",
}

# How a lost race on the lazy rating insert shows up: the constraint name
# (PostgreSQL) or the constrained columns (SQLite)
RATING_COLLISION_MARKERS = (
    "uq_ratings_season_participant",
    "ratings.season_id, ratings.participant_id",
)


@dataclass(frozen=True)
class ComputedOutcome:
    """Rating change of one participant, before anything is written."""

    participant_id: str
    placement: int
    is_tied: bool
    team_id: Optional[str]
    rating_before: float
    rating_after: float
    rating_change: int


def classify_outcome(placement: int, min_placement: int, max_placement: int) -> str:
    """
    Decide which counter a participant's result goes to.

    Everyone on one placement is a draw. Otherwise 1st is a win and last is
    a loss, tied or not; every middle finisher counts as a draw. Exactly one
    class per participant, so wins + losses + draws stays equal to
    games_played.
    """
    if min_placement == max_placement:
        return OUTCOME_DRAW
    if placement == 1:
        return OUTCOME_WIN
    if placement == max_placement:
        return OUTCOME_LOSS
    return OUTCOME_DRAW


def _is_rating_collision(exc: IntegrityError) -> bool:
    message = str(exc.orig)
    return any(marker in message for marker in RATING_COLLISION_MARKERS)


def _shift_counters(rating: Rating, outcome: str, step: int) -> None:
    field = COUNTER_FIELDS[outcome]
    rating.games_played = max(0, rating.games_played + step)
    setattr(rating, field, max(0, getattr(rating, field) + step))


def _participant_ids(
    entrants: Optional[Sequence[Entrant]],
    teams: Optional[Sequence[TeamEntrant]],
) -> list[str]:
    if entrants is not None:
        return [entrant.participant_id for entrant in entrants]
    return [member for team in teams for member in team.member_ids]


class MatchLedger:
    """
    Applies and reverses match results against the rating store.

    Args:
        session_factory: Callable returning a new Session (a sessionmaker)
        params: ELO parameters, defaults to the configured ones
        max_attempts: Attempts of the optimistic cycle before giving up
    """

    def __init__(
        self,
        session_factory: Callable[[], Session],
        params: Optional[EloParams] = None,
        *,
        max_attempts: Optional[int] = None,
    ):
        self.session_factory = session_factory
        self.params = params or EloParams.from_settings(settings)
        self.max_attempts = max_attempts or settings.ledger_max_attempts
        self.calculator = EloCalculator(self.params)

    # ------------------------------------------------------------------
    # Public operations
    # ------------------------------------------------------------------

    def apply(
        self,
        group_id: str,
        season_id: str,
        entrants: Optional[Sequence[Entrant]] = None,
        teams: Optional[Sequence[TeamEntrant]] = None,
        *,
        created_by: Optional[str] = None,
    ) -> MatchResult:
        """
        Rate one match and record it.

        Pass ``entrants`` for an individual match or ``teams`` for a team
        match, best finisher first.

        Returns:
            The stored MatchResult with its outcomes

        Raises:
            InvalidInput: malformed submission (nothing touched storage)
            PreconditionFailed: season missing, closed or not current
            ConcurrencyConflict: retries exhausted
            StorageUnavailable: database error
        """
        validate_submission(entrants, teams)

        def work(session: Session) -> MatchResult:
            return self._apply_in_session(session, group_id, season_id, entrants, teams, created_by)

        match = self._run_with_retry(work, f"apply match in season {season_id}")
        logger.info(
            "Applied %s match %s in season %s (%d participants)",
            match.mode, match.id, season_id, len(match.outcomes),
        )
        return match

    def reverse(self, match_id: str) -> None:
        """
        Undo a previously applied match.

        Raises:
            PreconditionFailed: match missing or already reversed
            ConcurrencyConflict: retries exhausted
            StorageUnavailable: database error
        """
        def work(session: Session) -> int:
            return self._reverse_in_session(session, match_id)

        count = self._run_with_retry(work, f"reverse match {match_id}")
        logger.info("Reversed match %s (%d participants)", match_id, count)

    def preview(
        self,
        group_id: str,
        season_id: str,
        entrants: Optional[Sequence[Entrant]] = None,
        teams: Optional[Sequence[TeamEntrant]] = None,
    ) -> list[ComputedOutcome]:
        """
        Compute what apply() would do against current ratings, writing nothing.

        Participants without a rating are treated as new (initial rating,
        no games).
        """
        validate_submission(entrants, teams)

        try:
            with session_scope(self.session_factory) as session:
                season = self._load_season(session, group_id, season_id)
                participant_ids = _participant_ids(entrants, teams)
                rows = (
                    session.query(Rating)
                    .filter(Rating.season_id == season.id, Rating.participant_id.in_(participant_ids))
                    .all()
                )
                state = {
                    pid: (float(self.params.initial_rating), 0) for pid in participant_ids
                }
                for row in rows:
                    state[row.participant_id] = (float(row.current_rating), row.games_played)
                return self._compute(entrants, teams, state)
        except DBAPIError as exc:
            raise StorageUnavailable(f"could not preview match: {exc}") from exc

    # ------------------------------------------------------------------
    # Retry loop
    # ------------------------------------------------------------------

    def _run_with_retry(self, work: Callable[[Session], T], description: str) -> T:
        last_error: Optional[Exception] = None

        for attempt in range(1, self.max_attempts + 1):
            try:
                with session_scope(self.session_factory) as session:
                    return work(session)
            except IntegrityError as exc:
                if not _is_rating_collision(exc):
                    raise StorageUnavailable(f"could not {description}: {exc}") from exc
                last_error = exc
                logger.warning(
                    "Concurrent rating insert during %s (attempt %d/%d): %s",
                    description, attempt, self.max_attempts, exc,
                )
            except StaleDataError as exc:
                last_error = exc
                logger.warning(
                    "Concurrent update during %s (attempt %d/%d): %s",
                    description, attempt, self.max_attempts, exc,
                )
            except DBAPIError as exc:
                raise StorageUnavailable(f"could not {description}: {exc}") from exc

        raise ConcurrencyConflict(f"could not {description}", self.max_attempts) from last_error

    # ------------------------------------------------------------------
    # Computation
    # ------------------------------------------------------------------

    def _compute(
        self,
        entrants: Optional[Sequence[Entrant]],
        teams: Optional[Sequence[TeamEntrant]],
        state: dict[str, tuple[float, int]],
    ) -> list[ComputedOutcome]:
        """Run placement, team aggregation and ELO on (rating, games_played) state."""
        if entrants is not None:
            ids = [entrant.participant_id for entrant in entrants]
            ties = tie_map(entrants)
            placements = resolve_placements(ids, ties)
            tied = tied_entrants(ids, ties)

            rated = [
                RatedEntrant(
                    entrant_id=pid,
                    rating_before=state[pid][0],
                    games_played=state[pid][1],
                    placement=placements[pid],
                )
                for pid in ids
            ]
            return [
                ComputedOutcome(
                    participant_id=delta.entrant_id,
                    placement=delta.placement,
                    is_tied=delta.entrant_id in tied,
                    team_id=None,
                    rating_before=delta.rating_before,
                    rating_after=delta.rating_after,
                    rating_change=delta.rating_change,
                )
                for delta in self.calculator.compute_deltas(rated)
            ]

        team_ids = [team.team_id for team in teams]
        ties = tie_map(teams)
        placements = resolve_placements(team_ids, ties)
        tied = tied_entrants(team_ids, ties)

        rated_teams = [
            RatedTeam(
                team_id=team.team_id,
                members=tuple(
                    RatedMember(participant_id=pid, rating_before=state[pid][0], games_played=state[pid][1])
                    for pid in team.member_ids
                ),
                placement=placements[team.team_id],
                is_tied=team.team_id in tied,
            )
            for team in teams
        ]
        virtual_entrants, fanout = expand_teams(rated_teams)
        team_deltas = self.calculator.compute_deltas(virtual_entrants)

        return [
            ComputedOutcome(
                participant_id=member.participant_id,
                placement=member.placement,
                is_tied=member.is_tied,
                team_id=member.team_id,
                rating_before=member.rating_before,
                rating_after=member.rating_after,
                rating_change=member.rating_change,
            )
            for member in fan_out(team_deltas, fanout)
        ]

    # ------------------------------------------------------------------
    # Storage
    # ------------------------------------------------------------------

    @staticmethod
    def _load_season(session: Session, group_id: str, season_id: str) -> Season:
        group = session.get(Group, group_id)
        season = session.get(Season, season_id)
        validate_season(group, season, group_id=group_id, season_id=season_id)
        return season

    def _apply_in_session(
        self,
        session: Session,
        group_id: str,
        season_id: str,
        entrants: Optional[Sequence[Entrant]],
        teams: Optional[Sequence[TeamEntrant]],
        created_by: Optional[str],
    ) -> MatchResult:
        season = self._load_season(session, group_id, season_id)

        ratings = get_or_create_ratings(
            session, season, _participant_ids(entrants, teams), self.params.initial_rating
        )
        state = {
            pid: (float(rating.current_rating), rating.games_played)
            for pid, rating in ratings.items()
        }
        outcomes = self._compute(entrants, teams, state)

        placements = [outcome.placement for outcome in outcomes]
        min_placement, max_placement = min(placements), max(placements)
        now = utcnow()

        match = MatchResult(
            id=str(uuid.uuid4()),
            season_id=season_id,
            group_id=group_id,
            mode=MODE_INDIVIDUAL if entrants is not None else MODE_TEAM,
            created_by=created_by,
            created_at=now,
        )
        session.add(match)

        for outcome in outcomes:
            rating = ratings[outcome.participant_id]
            change = Decimal(outcome.rating_change)
            rating_before = rating.current_rating
            rating_after = rating_before + change

            match.outcomes.append(
                ParticipantOutcome(
                    participant_id=outcome.participant_id,
                    placement=outcome.placement,
                    is_tied=outcome.is_tied,
                    team_id=outcome.team_id,
                    rating_before=rating_before,
                    rating_after=rating_after,
                    rating_change=outcome.rating_change,
                )
            )
            session.add(
                RatingChangeRecord(
                    match=match,
                    participant_id=outcome.participant_id,
                    season_id=season_id,
                    group_id=group_id,
                    rating_before=rating_before,
                    rating_after=rating_after,
                    rating_change=outcome.rating_change,
                    placement=outcome.placement,
                    is_tied=outcome.is_tied,
                    team_id=outcome.team_id,
                    created_at=now,
                )
            )

            rating.current_rating = rating_after
            _shift_counters(rating, classify_outcome(outcome.placement, min_placement, max_placement), +1)

        self._shift_game_counts(session, group_id, season_id, +1)

        # Version-checked rating UPDATEs run here; a lost race raises StaleDataError
        session.flush()

        # Loaded and detached: readable after commit under any expire_on_commit
        session.expunge(match)
        return match

    def _reverse_in_session(self, session: Session, match_id: str) -> int:
        match = (
            session.query(MatchResult)
            .filter(MatchResult.id == match_id)
            .with_for_update()
            .first()
        )
        if match is None:
            raise PreconditionFailed(f"match '{match_id}' not found")
        if match.is_reversed:
            raise PreconditionFailed(f"match '{match_id}' is already reversed")

        outcomes = list(match.outcomes)
        participant_ids = sorted(outcome.participant_id for outcome in outcomes)
        rows = (
            session.query(Rating)
            .filter(Rating.season_id == match.season_id, Rating.participant_id.in_(participant_ids))
            .order_by(Rating.participant_id)
            .with_for_update()
            .all()
        )
        ratings = {row.participant_id: row for row in rows}

        placements = [outcome.placement for outcome in outcomes]
        min_placement, max_placement = min(placements), max(placements)

        for outcome in outcomes:
            rating = ratings.get(outcome.participant_id)
            if rating is None:
                logger.warning(
                    "No rating for %s in season %s while reversing match %s, skipping",
                    outcome.participant_id, match.season_id, match_id,
                )
                continue
            rating.current_rating = rating.current_rating - Decimal(outcome.rating_change)
            _shift_counters(rating, classify_outcome(outcome.placement, min_placement, max_placement), -1)

        match.deleted_at = utcnow()
        self._shift_game_counts(session, match.group_id, match.season_id, -1)

        session.flush()
        return len(outcomes)

    @staticmethod
    def _shift_game_counts(session: Session, group_id: str, season_id: str, step: int) -> None:
        """SQL-side game_count +/- 1 on the group and the season, floored at 0."""
        for model, key in ((Group, group_id), (Season, season_id)):
            if step > 0:
                new_value = model.game_count + step
            else:
                new_value = case((model.game_count + step < 0, 0), else_=model.game_count + step)
            session.execute(
                update(model)
                .where(model.id == key)
                .values(game_count=new_value)
                .execution_options(synchronize_session=False)
            )
