"""Match submission payloads.

A submission is an ordered list, best finisher first. Entrants that share a
``tie_group`` key with their neighbour finished level.
"""

from __future__ import annotations

from collections.abc import Hashable, Sequence
from dataclasses import dataclass


@dataclass(frozen=True)
class Entrant:
    """One individual participant in an individual-mode match."""

    participant_id: str
    tie_group: Hashable | None = None


@dataclass(frozen=True)
class TeamEntrant:
    """One team in a team-mode match."""

    team_id: str
    member_ids: tuple[str, ...]
    tie_group: Hashable | None = None


def tie_map(entries: Sequence[Entrant] | Sequence[TeamEntrant]) -> dict[str, Hashable]:
    """Entrant (or team) id -> tie-group key, for entries that declare one."""
    ties: dict[str, Hashable] = {}
    for entry in entries:
        if entry.tie_group is None:
            continue
        key = entry.participant_id if isinstance(entry, Entrant) else entry.team_id
        ties[key] = entry.tie_group
    return ties
