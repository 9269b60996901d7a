"""
Precondition gate run by the ledger before any rating is computed.

Input checks (validate_entrants, validate_teams) look only at the
submission and raise InvalidInput. The season check needs stored state and
raises PreconditionFailed.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Optional

from elohero.elo.constants import MIN_ENTRANTS
from elohero.elo.entrants import Entrant, TeamEntrant, tie_map
from elohero.elo.placement import resolve_placements
from elohero.exceptions import InvalidInput, PreconditionFailed


def _check_ids(ids: Sequence[str], label: str) -> None:
    for value in ids:
        if not isinstance(value, str) or not value.strip():
            raise InvalidInput(f"{label} ids must be non-empty strings, got {value!r}", field=label)

    seen: set[str] = set()
    duplicates: list[str] = []
    for value in ids:
        if value in seen and value not in duplicates:
            duplicates.append(value)
        seen.add(value)
    if duplicates:
        raise InvalidInput(f"duplicate {label} ids: {duplicates}", field=label)


def validate_entrants(entrants: Sequence[Entrant]) -> None:
    """Individual mode: at least two distinct, non-blank participants."""
    if len(entrants) < MIN_ENTRANTS:
        raise InvalidInput(
            f"at least {MIN_ENTRANTS} entrants are required, got {len(entrants)}",
            field="entrants",
        )
    _check_ids([entrant.participant_id for entrant in entrants], "participant")


def validate_teams(teams: Sequence[TeamEntrant]) -> None:
    """Team mode: at least two non-empty teams, each participant in exactly one team."""
    if len(teams) < MIN_ENTRANTS:
        raise InvalidInput(
            f"at least {MIN_ENTRANTS} teams are required, got {len(teams)}",
            field="teams",
        )
    _check_ids([team.team_id for team in teams], "team")

    for team in teams:
        if not team.member_ids:
            raise InvalidInput(f"team '{team.team_id}' has no members", field="teams")

    # Duplicates across teams mean a participant is on two teams
    _check_ids([member for team in teams for member in team.member_ids], "participant")


def validate_submission(
    entrants: Optional[Sequence[Entrant]],
    teams: Optional[Sequence[TeamEntrant]],
) -> None:
    """Exactly one of entrants/teams must be given, valid, with adjacent ties."""
    if (entrants is None) == (teams is None):
        raise InvalidInput("provide either entrants or teams, not both or neither")
    if entrants is not None:
        validate_entrants(entrants)
        resolve_placements([entrant.participant_id for entrant in entrants], tie_map(entrants))
    else:
        validate_teams(teams)
        resolve_placements([team.team_id for team in teams], tie_map(teams))


def validate_season(group, season, *, group_id: str, season_id: str) -> None:
    """
    Ensure a match may be rated in this season.

    The season must exist, belong to the group, be open, and be the group's
    current season. A client retrying against a rotated season fails here
    instead of rating the wrong pool.

    Args:
        group: Group row or None if not found
        season: Season row or None if not found
        group_id: Requested group id
        season_id: Requested season id

    Raises:
        PreconditionFailed: on any mismatch
    """
    if group is None:
        raise PreconditionFailed(f"group '{group_id}' not found")
    if season is None:
        raise PreconditionFailed(f"season '{season_id}' not found")
    if season.group_id != group_id:
        raise PreconditionFailed(f"season '{season_id}' does not belong to group '{group_id}'")
    if not season.is_open:
        raise PreconditionFailed(f"season '{season_id}' is closed")
    if group.current_season_id != season_id:
        raise PreconditionFailed(
            f"season '{season_id}' is not the current season of group '{group_id}' "
            f"(current: {group.current_season_id!r})"
        )
