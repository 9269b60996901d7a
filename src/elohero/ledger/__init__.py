"""
Match ledger and rating store.

Usage:
    from elohero.ledger import MatchLedger, Entrant, TeamEntrant
"""

from elohero.elo.entrants import Entrant, TeamEntrant
from elohero.ledger.history import match_outcomes, rating_history, season_leaderboard
from elohero.ledger.ledger import ComputedOutcome, MatchLedger, classify_outcome
from elohero.ledger.store import get_or_create_ratings, get_rating, initialize_season_ratings

__all__ = [
    "ComputedOutcome",
    "Entrant",
    "MatchLedger",
    "TeamEntrant",
    "classify_outcome",
    "get_or_create_ratings",
    "get_rating",
    "initialize_season_ratings",
    "match_outcomes",
    "rating_history",
    "season_leaderboard",
]
