#!/usr/bin/env python3
"""Reverse (soft-delete) a reported match and undo its rating changes."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from elohero.db import get_session, get_session_factory
from elohero.exceptions import EloHeroError
from elohero.ledger import MatchLedger, match_outcomes
from elohero.log import configure_logging

logger = logging.getLogger("reverse_match")


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Reverse a reported match")
    parser.add_argument("match_id", help="Id of the match to reverse")
    parser.add_argument(
        "--yes",
        action="store_true",
        help="Do not ask for confirmation",
    )
    args = parser.parse_args(argv)
    configure_logging()

    with get_session() as session:
        outcomes = match_outcomes(session, args.match_id)
    if not outcomes:
        print(f"Match {args.match_id} not found.", file=sys.stderr)
        return 1

    for outcome in outcomes:
        print(f"  #{outcome.placement}  {outcome.participant_id:<24} {outcome.rating_change:+d}")

    if not args.yes:
        answer = input(f"Reverse match {args.match_id}? [y/N] ")
        if answer.strip().lower() != "y":
            print("Aborted.")
            return 1

    ledger = MatchLedger(get_session_factory())
    try:
        ledger.reverse(args.match_id)
    except EloHeroError as exc:
        logger.error("Could not reverse match %s: %s", args.match_id, exc)
        return 1

    print(f"Match {args.match_id} reversed ({len(outcomes)} participants)")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
