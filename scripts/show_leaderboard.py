#!/usr/bin/env python3
"""
Print a season leaderboard, or one participant's rating history.

Leaderboard of a season:
    python scripts/show_leaderboard.py --season-id s2026

Rating history of one participant (newest first):
    python scripts/show_leaderboard.py --season-id s2026 --participant alice

Include changes from reversed matches:
    python scripts/show_leaderboard.py --season-id s2026 --participant alice --include-reversed
"""
from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

# Add src to path so this script can be run directly
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from elohero.db import get_session
from elohero.ledger import rating_history, season_leaderboard
from elohero.log import configure_logging


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Show a season leaderboard or a participant's rating history.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("--season-id", required=True, help="Season to report on.")
    parser.add_argument(
        "--participant",
        default=None,
        help="Show this participant's rating history instead of the leaderboard.",
    )
    parser.add_argument(
        "--include-reversed",
        action="store_true",
        help="With --participant: also list changes from reversed matches.",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print JSON instead of a table.",
    )
    return parser


def _print_leaderboard(session, season_id: str, as_json: bool) -> None:
    rows = season_leaderboard(session, season_id)
    if as_json:
        payload = [
            {
                "rank": rank,
                "participant_id": row.participant_id,
                "rating": float(row.current_rating),
                "games_played": row.games_played,
                "wins": row.wins,
                "losses": row.losses,
                "draws": row.draws,
            }
            for rank, row in enumerate(rows, start=1)
        ]
        print(json.dumps(payload, indent=2))
        return

    print(f"LEADERBOARD  season={season_id}  participants={len(rows)}")
    print("-" * 60)
    print(f"{'#':>3}  {'participant':<24} {'rating':>8} {'games':>6} {'W-L-D':>10}")
    for rank, row in enumerate(rows, start=1):
        record = f"{row.wins}-{row.losses}-{row.draws}"
        print(
            f"{rank:>3}  {row.participant_id:<24} {float(row.current_rating):>8.1f} "
            f"{row.games_played:>6} {record:>10}"
        )


def _print_history(session, season_id: str, participant_id: str, include_reversed: bool, as_json: bool) -> None:
    rows = rating_history(
        session, participant_id, season_id=season_id, include_reversed=include_reversed
    )
    if as_json:
        payload = [
            {
                "match_id": row.match_id,
                "created_at": row.created_at.isoformat(),
                "placement": row.placement,
                "is_tied": row.is_tied,
                "team_id": row.team_id,
                "rating_before": float(row.rating_before),
                "rating_after": float(row.rating_after),
                "rating_change": row.rating_change,
            }
            for row in rows
        ]
        print(json.dumps(payload, indent=2))
        return

    print(f"HISTORY  participant={participant_id}  season={season_id}  entries={len(rows)}")
    print("-" * 60)
    for row in rows:
        tie = "=" if row.is_tied else " "
        print(
            f"{row.created_at:%Y-%m-%d %H:%M}  {row.match_id}  #{row.placement}{tie} "
            f"{float(row.rating_before):>7.1f} -> {float(row.rating_after):>7.1f}  ({row.rating_change:+d})"
        )


def main() -> int:
    args = _build_parser().parse_args()
    configure_logging()

    with get_session() as session:
        if args.participant:
            _print_history(session, args.season_id, args.participant, args.include_reversed, args.json)
        else:
            _print_leaderboard(session, args.season_id, args.json)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
