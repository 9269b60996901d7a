"""
EloHero - multiplayer ELO ratings for recurring group competitions

Turns the final placements of a match (individuals or teams, ties allowed)
into per-participant rating changes, and keeps a reversible ledger of every
change.

Main components:
- elo: placement resolution, N-way ELO calculation, team aggregation
- ledger: applying and reversing matches, rating store, history queries
- db: SQLAlchemy models and session management
"""

__version__ = "1.0.0"
