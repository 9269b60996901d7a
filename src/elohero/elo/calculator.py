"""
Multiplayer ELO rating calculator.

Generalizes two-player ELO to N entrants by treating a match as a round
robin: every entrant is compared with every other entrant, and the pairwise
expected and actual scores are summed.

The ELO formula:
  Expected score: E_ij = 1 / (1 + 10^((R_j - R_i) / S))
  Actual score:   A_ij = 1 (i placed better), 0.5 (same placement), 0 (worse)
  K-factor:       K_i  = K_BASE / (1 + games_played_i / N0)
  Rating change:  D_i  = round(K_i * (sum_j A_ij - sum_j E_ij))

Where:
  R_i, R_j = Ratings of entrants i and j before the match
  S = Scale factor (400)
  K_BASE, N0 = K-factor base and decay scale (32 and 30)

Rating changes are whole points, rounded half away from zero, so two
equally rated entrants always move by exactly opposite amounts. With two
entrants the calculation is exactly classical pairwise ELO.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

from elohero.config import Settings
from elohero.elo.constants import ELO_DEFAULTS


@dataclass(frozen=True)
class EloParams:
    """Tunable constants of the rating system."""

    initial_rating: float = ELO_DEFAULTS["initial_rating"]
    k_base: float = ELO_DEFAULTS["k_base"]
    n0: float = ELO_DEFAULTS["n0"]
    scale_factor: float = ELO_DEFAULTS["scale_factor"]

    @classmethod
    def from_settings(cls, settings: Settings) -> "EloParams":
        return cls(
            initial_rating=settings.elo_initial_rating,
            k_base=settings.elo_k_base,
            n0=settings.elo_n0,
            scale_factor=settings.elo_scale_factor,
        )


@dataclass(frozen=True)
class RatedEntrant:
    """One side of a match as seen by the calculator (a player or a team)."""

    entrant_id: str
    rating_before: float
    games_played: int
    placement: int


@dataclass(frozen=True)
class EloDelta:
    """
    Result of the calculation for one entrant.

    expected_score and actual_score are the sums over all opponents, kept
    so a change can be explained after the fact.
    """

    entrant_id: str
    placement: int
    rating_before: float
    rating_after: float
    rating_change: int
    expected_score: float
    actual_score: float
    k_factor: float


def round_half_away_from_zero(value: float) -> int:
    """Round to the nearest integer, ties away from zero (2.5 -> 3, -2.5 -> -3)."""
    return int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def calculate_expected_score(rating: float, opponent_rating: float, scale_factor: float) -> float:
    """Compute the ELO expected score of one side against one opponent."""
    try:
        return 1.0 / (1.0 + 10.0 ** ((opponent_rating - rating) / scale_factor))
    except OverflowError:
        # Gap beyond float range: the weaker side has no chance
        return 0.0


def calculate_actual_score(placement: int, opponent_placement: int) -> float:
    """1 for finishing ahead, 0.5 for sharing a placement, 0 for finishing behind."""
    if placement < opponent_placement:
        return 1.0
    if placement > opponent_placement:
        return 0.0
    return 0.5


def calculate_k_factor(games_played: int, params: EloParams) -> float:
    """K-factor decaying with experience: K_BASE / (1 + games / N0)."""
    return params.k_base * (1.0 / (1.0 + games_played / params.n0))


class EloCalculator:
    """
    N-way ELO calculator.

    Pure: no I/O and no state between calls, so the same entrants always
    produce the same deltas.

    Usage:
        calculator = EloCalculator()

        deltas = calculator.compute_deltas([
            RatedEntrant("alice", rating_before=1200, games_played=0, placement=1),
            RatedEntrant("bob", rating_before=1200, games_played=0, placement=2),
        ])
        # alice +16, bob -16
    """

    def __init__(self, params: EloParams | None = None):
        self.params = params or EloParams()

    def compute_deltas(self, entrants: Sequence[RatedEntrant]) -> list[EloDelta]:
        """
        Calculate the rating change of every entrant of one match.

        Args:
            entrants: All entrants of the match with their pre-match ratings,
                      experience and resolved placement

        Returns:
            One EloDelta per entrant, in input order

        Raises:
            ValueError: if an entrant id appears twice
        """
        ids = [entrant.entrant_id for entrant in entrants]
        if len(ids) != len(set(ids)):
            raise ValueError(f"duplicate entrant ids in {ids}")

        deltas: list[EloDelta] = []
        for entrant in entrants:
            total_expected = 0.0
            total_actual = 0.0

            for opponent in entrants:
                if opponent.entrant_id == entrant.entrant_id:
                    continue
                total_expected += calculate_expected_score(
                    rating=entrant.rating_before,
                    opponent_rating=opponent.rating_before,
                    scale_factor=self.params.scale_factor,
                )
                total_actual += calculate_actual_score(entrant.placement, opponent.placement)

            k_factor = calculate_k_factor(entrant.games_played, self.params)
            rating_change = round_half_away_from_zero(k_factor * (total_actual - total_expected))

            deltas.append(
                EloDelta(
                    entrant_id=entrant.entrant_id,
                    placement=entrant.placement,
                    rating_before=entrant.rating_before,
                    rating_after=entrant.rating_before + rating_change,
                    rating_change=rating_change,
                    expected_score=total_expected,
                    actual_score=total_actual,
                    k_factor=k_factor,
                )
            )

        return deltas
