"""Error taxonomy for the rating ledger.

Every failure surfaced by ``MatchLedger`` is one of these classes, so callers
can map them to responses without inspecting messages.
"""

from __future__ import annotations


class EloHeroError(Exception):
    """Base exception for all EloHero errors."""

    pass


class InvalidInput(EloHeroError, ValueError):
    """Malformed match submission.

    Raised before any storage access: fewer than two entrants or teams,
    empty teams, duplicate or blank participant ids, non-adjacent ties.
    Never retried.
    """

    def __init__(self, message: str, field: str | None = None):
        self.field = field
        full_message = message
        if field:
            full_message = f"Invalid '{field}': {message}"
        super().__init__(full_message)


class PreconditionFailed(EloHeroError):
    """Stored state does not allow the operation.

    Season missing, closed or not the group's current season; match missing
    or already reversed.
    """

    pass


class ConcurrencyConflict(EloHeroError):
    """Optimistic write kept colliding with concurrent matches.

    Raised once the bounded retry of the read-compute-write cycle is
    exhausted. Transient: the caller may resubmit.
    """

    def __init__(self, message: str, attempts: int):
        self.attempts = attempts
        super().__init__(f"{message} (after {attempts} attempts)")


class StorageUnavailable(EloHeroError):
    """The database could not complete the operation.

    Nothing was written; the original driver error is chained as ``__cause__``.
    """

    pass
