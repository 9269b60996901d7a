"""
Placement resolution for ordered, possibly tied, entrants.

The submitted order is the ranking: position 0 finished first. Entrants may
share a tie-group key with their immediate neighbours; a tie group shares
one placement, and placements are compressed across ties:

    order   A  B  C  D        ties: B and C share a key
    place   1  2  2  3        (D is 3rd, not 4th)

Tied entrants take the placement of the best-ranked member of their group,
which is simply "distinct placements already consumed, plus one".
"""

from __future__ import annotations

from collections.abc import Hashable, Mapping, Sequence

from elohero.exceptions import InvalidInput


def _tie_key(entrant_id: str, ties: Mapping[str, Hashable]) -> Hashable | None:
    return ties.get(entrant_id)


def _validate_contiguous_ties(entrant_ids: Sequence[str], ties: Mapping[str, Hashable]) -> None:
    """Reject tie groups that are split by an entrant outside the group."""
    closed_groups: set[Hashable] = set()
    previous_key: Hashable | None = None

    for entrant_id in entrant_ids:
        key = _tie_key(entrant_id, ties)
        if key != previous_key and previous_key is not None:
            closed_groups.add(previous_key)
        if key is not None and key in closed_groups:
            raise InvalidInput(
                f"tie group {key!r} is not a run of adjacent entrants "
                f"(entrant '{entrant_id}' is separated from its group)",
                field="ties",
            )
        previous_key = key


def resolve_placements(
    entrant_ids: Sequence[str],
    ties: Mapping[str, Hashable] | None = None,
) -> dict[str, int]:
    """
    Turn an ordered entrant list into compressed integer placements.

    Args:
        entrant_ids: Entrant ids, best first
        ties: Optional mapping entrant id -> tie-group key. Entrants absent
              from the mapping (or mapped to None) are not tied.

    Returns:
        Mapping entrant id -> placement (1 = best). Empty input gives an
        empty mapping.

    Raises:
        InvalidInput: if a tie group is not a contiguous run

    Example:
        resolve_placements(["A", "B", "C", "D"], {"B": 1, "C": 1})
        # {"A": 1, "B": 2, "C": 2, "D": 3}
    """
    ties = ties or {}
    _validate_contiguous_ties(entrant_ids, ties)

    placements: dict[str, int] = {}
    distinct_consumed = 0
    previous_key: Hashable | None = None

    for entrant_id in entrant_ids:
        key = _tie_key(entrant_id, ties)
        if key is not None and key == previous_key:
            # Same tie group as the entrant above: share its placement
            placements[entrant_id] = distinct_consumed
        else:
            distinct_consumed += 1
            placements[entrant_id] = distinct_consumed
        previous_key = key

    return placements


def tied_entrants(
    entrant_ids: Sequence[str],
    ties: Mapping[str, Hashable] | None = None,
) -> set[str]:
    """Ids whose tie group holds at least one other entrant of this match."""
    ties = ties or {}
    members: dict[Hashable, list[str]] = {}
    for entrant_id in entrant_ids:
        key = _tie_key(entrant_id, ties)
        if key is not None:
            members.setdefault(key, []).append(entrant_id)

    return {
        entrant_id
        for group in members.values()
        if len(group) > 1
        for entrant_id in group
    }
