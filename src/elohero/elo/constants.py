"""
ELO rating system constants.

Default values for the multiplayer rating:

K_BASE: K-factor for a participant with no games in the season.
  - Higher K = bigger rating swings

N0: Experience scale of the K-factor decay.
  K = K_BASE / (1 + games_played / N0), so K halves after N0 games.

SCALE_FACTOR: Rating gap that corresponds to 10:1 expected odds.

DEFAULT_RATING: Rating every participant starts a season with.

All of them can be overridden through settings (ELO_K_BASE, ELO_N0, ...).
"""

DEFAULT_RATING = 1200.0

ELO_DEFAULTS = {
    "initial_rating": DEFAULT_RATING,
    "k_base": 32.0,
    "n0": 30.0,
    "scale_factor": 400.0,
}

# Minimum number of entrants (or teams) in one match
MIN_ENTRANTS = 2

# Outcome classes recorded on Rating counters
OUTCOME_WIN = "win"
OUTCOME_LOSS = "loss"
OUTCOME_DRAW = "draw"

# Match modes
MODE_INDIVIDUAL = "individual"
MODE_TEAM = "team"
