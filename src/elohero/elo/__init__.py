"""
ELO rating system module.

Implements the multiplayer rating calculation with:
- Placement resolution with compressed ties
- Pairwise (round robin) expected and actual scores over all entrants
- K-factor that decays with games played in the season
- Team matches rated as one virtual entrant per team
"""

from elohero.elo.calculator import EloCalculator, EloDelta, EloParams, RatedEntrant
from elohero.elo.constants import DEFAULT_RATING, ELO_DEFAULTS
from elohero.elo.entrants import Entrant, TeamEntrant
from elohero.elo.placement import resolve_placements, tied_entrants
from elohero.elo.teams import RatedMember, RatedTeam, expand_teams, fan_out

__all__ = [
    "DEFAULT_RATING",
    "ELO_DEFAULTS",
    "EloCalculator",
    "EloDelta",
    "EloParams",
    "Entrant",
    "RatedEntrant",
    "RatedMember",
    "RatedTeam",
    "TeamEntrant",
    "expand_teams",
    "fan_out",
    "resolve_placements",
    "tied_entrants",
]
