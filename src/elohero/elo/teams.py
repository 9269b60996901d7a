"""
Team aggregation for team matches.

A team plays as one virtual entrant whose rating is the mean of its members'
ratings. The team's rating change is then given unchanged to every member:
a 1800 player and a 1000 player on the same winning team gain the same
number of points.

Team experience (for the K-factor) is the mean of the members' games
played, rounded half away from zero.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass

from elohero.elo.calculator import EloDelta, RatedEntrant, round_half_away_from_zero
from elohero.exceptions import InvalidInput


@dataclass(frozen=True)
class RatedMember:
    """A team member with their pre-match rating state."""

    participant_id: str
    rating_before: float
    games_played: int


@dataclass(frozen=True)
class RatedTeam:
    """A team with its resolved placement."""

    team_id: str
    members: tuple[RatedMember, ...]
    placement: int
    is_tied: bool = False


@dataclass(frozen=True)
class MemberDelta:
    """Rating change of one member, copied from their team's delta."""

    participant_id: str
    team_id: str
    placement: int
    is_tied: bool
    rating_before: float
    rating_after: float
    rating_change: int


def team_rating(team: RatedTeam) -> float:
    """Arithmetic mean of member ratings. Requires a non-empty team."""
    return sum(member.rating_before for member in team.members) / len(team.members)


def team_games_played(team: RatedTeam) -> int:
    """Mean member experience, rounded half away from zero."""
    total = sum(member.games_played for member in team.members)
    return round_half_away_from_zero(total / len(team.members))


def expand_teams(
    teams: Sequence[RatedTeam],
) -> tuple[list[RatedEntrant], dict[str, RatedTeam]]:
    """
    Build one virtual entrant per team.

    Args:
        teams: Teams with at least one member each (validated upstream)

    Returns:
        (virtual entrants for the calculator, team id -> team for fan-out)

    Raises:
        InvalidInput: if a team has no members
    """
    virtual_entrants: list[RatedEntrant] = []
    fanout: dict[str, RatedTeam] = {}

    for team in teams:
        if not team.members:
            raise InvalidInput(f"team '{team.team_id}' has no members", field="teams")
        virtual_entrants.append(
            RatedEntrant(
                entrant_id=team.team_id,
                rating_before=team_rating(team),
                games_played=team_games_played(team),
                placement=team.placement,
            )
        )
        fanout[team.team_id] = team

    return virtual_entrants, fanout


def fan_out(
    team_deltas: Sequence[EloDelta],
    fanout: Mapping[str, RatedTeam],
) -> list[MemberDelta]:
    """Give every member of a team exactly the team's rating change."""
    results: list[MemberDelta] = []
    for delta in team_deltas:
        team = fanout[delta.entrant_id]
        for member in team.members:
            results.append(
                MemberDelta(
                    participant_id=member.participant_id,
                    team_id=team.team_id,
                    placement=team.placement,
                    is_tied=team.is_tied,
                    rating_before=member.rating_before,
                    rating_after=member.rating_before + delta.rating_change,
                    rating_change=delta.rating_change,
                )
            )
    return results
