"""Unit tests for the precondition gate."""

from datetime import datetime

import pytest

from elohero.db.models import Group, Season
from elohero.elo.entrants import Entrant, TeamEntrant
from elohero.elo.validation import (
    validate_entrants,
    validate_season,
    validate_submission,
    validate_teams,
)
from elohero.exceptions import InvalidInput, PreconditionFailed


class TestValidateEntrants:

    def test_two_entrants_ok(self):
        validate_entrants([Entrant("a"), Entrant("b")])

    def test_single_entrant_rejected(self):
        with pytest.raises(InvalidInput) as exc_info:
            validate_entrants([Entrant("a")])
        assert exc_info.value.field == "entrants"

    def test_duplicate_participant_rejected(self):
        with pytest.raises(InvalidInput, match="duplicate participant ids"):
            validate_entrants([Entrant("a"), Entrant("b"), Entrant("a")])

    @pytest.mark.parametrize("blank", ["", "   "])
    def test_blank_id_rejected(self, blank):
        with pytest.raises(InvalidInput):
            validate_entrants([Entrant("a"), Entrant(blank)])


class TestValidateTeams:

    def test_two_teams_ok(self):
        validate_teams([TeamEntrant("red", ("a", "b")), TeamEntrant("blue", ("c",))])

    def test_single_team_rejected(self):
        with pytest.raises(InvalidInput):
            validate_teams([TeamEntrant("red", ("a", "b"))])

    def test_empty_team_rejected(self):
        with pytest.raises(InvalidInput, match="no members"):
            validate_teams([TeamEntrant("red", ("a",)), TeamEntrant("blue", ())])

    def test_participant_on_two_teams_rejected(self):
        with pytest.raises(InvalidInput, match="duplicate participant ids"):
            validate_teams([TeamEntrant("red", ("a", "b")), TeamEntrant("blue", ("b", "c"))])

    def test_duplicate_team_ids_rejected(self):
        with pytest.raises(InvalidInput, match="duplicate team ids"):
            validate_teams([TeamEntrant("red", ("a",)), TeamEntrant("red", ("b",))])


class TestValidateSubmission:

    def test_neither_given(self):
        with pytest.raises(InvalidInput):
            validate_submission(None, None)

    def test_both_given(self):
        with pytest.raises(InvalidInput):
            validate_submission([Entrant("a"), Entrant("b")], [TeamEntrant("red", ("c",))])

    def test_non_adjacent_ties_rejected(self):
        entrants = [Entrant("a", tie_group=1), Entrant("b"), Entrant("c", tie_group=1)]
        with pytest.raises(InvalidInput):
            validate_submission(entrants, None)

    def test_non_adjacent_team_ties_rejected(self):
        teams = [
            TeamEntrant("red", ("a",), tie_group="x"),
            TeamEntrant("blue", ("b",)),
            TeamEntrant("green", ("c",), tie_group="x"),
        ]
        with pytest.raises(InvalidInput):
            validate_submission(None, teams)


class TestValidateSeason:

    @pytest.fixture
    def group(self):
        return Group(id="g1", name="Group", current_season_id="s1")

    @pytest.fixture
    def season(self):
        return Season(id="s1", group_id="g1", name="Season", is_active=True)

    def test_current_open_season_ok(self, group, season):
        validate_season(group, season, group_id="g1", season_id="s1")

    def test_missing_group(self, season):
        with pytest.raises(PreconditionFailed, match="group 'g1' not found"):
            validate_season(None, season, group_id="g1", season_id="s1")

    def test_missing_season(self, group):
        with pytest.raises(PreconditionFailed, match="season 's1' not found"):
            validate_season(group, None, group_id="g1", season_id="s1")

    def test_season_of_another_group(self, group):
        other = Season(id="s1", group_id="g2", name="Other", is_active=True)
        with pytest.raises(PreconditionFailed, match="does not belong"):
            validate_season(group, other, group_id="g1", season_id="s1")

    def test_inactive_season(self, group):
        season = Season(id="s1", group_id="g1", name="Season", is_active=False)
        with pytest.raises(PreconditionFailed, match="closed"):
            validate_season(group, season, group_id="g1", season_id="s1")

    def test_ended_season(self, group):
        season = Season(
            id="s1", group_id="g1", name="Season", is_active=True, end_date=datetime(2026, 1, 1)
        )
        with pytest.raises(PreconditionFailed, match="closed"):
            validate_season(group, season, group_id="g1", season_id="s1")

    def test_not_current_season(self, season):
        group = Group(id="g1", name="Group", current_season_id="s2")
        with pytest.raises(PreconditionFailed, match="not the current season"):
            validate_season(group, season, group_id="g1", season_id="s1")
