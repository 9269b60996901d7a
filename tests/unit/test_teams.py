"""Unit tests for team aggregation."""

import pytest

from elohero.elo.calculator import EloCalculator
from elohero.exceptions import InvalidInput
from elohero.elo.teams import (
    RatedMember,
    RatedTeam,
    expand_teams,
    fan_out,
    team_games_played,
    team_rating,
)


def _team(team_id, placement, *members, is_tied=False):
    return RatedTeam(
        team_id=team_id,
        members=tuple(RatedMember(pid, rating, games) for pid, rating, games in members),
        placement=placement,
        is_tied=is_tied,
    )


class TestTeamStats:

    def test_team_rating_is_mean(self):
        team = _team("red", 1, ("a", 1300.0, 0), ("b", 1100.0, 0))
        assert team_rating(team) == pytest.approx(1200.0)

    def test_team_games_rounds_half_away_from_zero(self):
        team = _team("red", 1, ("a", 1200.0, 1), ("b", 1200.0, 2))
        assert team_games_played(team) == 2

    def test_team_games_rounds_down_below_half(self):
        team = _team("red", 1, ("a", 1200.0, 1), ("b", 1200.0, 1), ("c", 1200.0, 2))
        assert team_games_played(team) == 1


class TestExpandAndFanOut:

    def test_one_virtual_entrant_per_team(self):
        teams = [
            _team("red", 1, ("a", 1300.0, 4), ("b", 1100.0, 2)),
            _team("blue", 2, ("c", 1250.0, 0)),
        ]
        entrants, fanout = expand_teams(teams)

        assert [e.entrant_id for e in entrants] == ["red", "blue"]
        assert entrants[0].rating_before == pytest.approx(1200.0)
        assert entrants[0].games_played == 3
        assert entrants[0].placement == 1
        assert set(fanout) == {"red", "blue"}

    def test_empty_team_rejected(self):
        with pytest.raises(InvalidInput):
            expand_teams([RatedTeam("ghost", members=(), placement=1)])

    def test_every_member_gets_the_team_change(self):
        teams = [
            _team("red", 1, ("a", 1800.0, 0), ("b", 600.0, 0)),
            _team("blue", 2, ("c", 1200.0, 0), ("d", 1200.0, 0)),
        ]
        entrants, fanout = expand_teams(teams)
        deltas = EloCalculator().compute_deltas(entrants)
        members = {m.participant_id: m for m in fan_out(deltas, fanout)}

        assert members["a"].rating_change == members["b"].rating_change == 16
        assert members["c"].rating_change == members["d"].rating_change == -16
        assert members["a"].rating_after == 1816
        assert members["b"].rating_after == 616
        assert members["a"].team_id == "red"
        assert members["c"].placement == 2

    def test_tied_teams_propagate_flag(self):
        teams = [
            _team("red", 1, ("a", 1200.0, 0), is_tied=True),
            _team("blue", 1, ("b", 1200.0, 0), is_tied=True),
        ]
        entrants, fanout = expand_teams(teams)
        members = fan_out(EloCalculator().compute_deltas(entrants), fanout)

        assert all(m.is_tied for m in members)
        assert [m.rating_change for m in members] == [0, 0]
