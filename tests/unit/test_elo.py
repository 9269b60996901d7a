"""
Unit tests for the multiplayer ELO calculator.

Tests the core calculation to ensure:
- Two entrants reduce to classical pairwise ELO
- Equal entrants move by exactly opposite amounts
- Ties between equal entrants are neutral
- The K-factor decays with games played
"""

import pytest

from elohero.elo.calculator import (
    EloCalculator,
    EloParams,
    RatedEntrant,
    calculate_actual_score,
    calculate_expected_score,
    calculate_k_factor,
    round_half_away_from_zero,
)


def _entrant(entrant_id, rating=1200.0, games=0, placement=1):
    return RatedEntrant(entrant_id, rating_before=rating, games_played=games, placement=placement)


class TestScoringFunctions:

    def test_expected_score_equal_ratings(self):
        assert calculate_expected_score(1200, 1200, 400) == pytest.approx(0.5)

    def test_expected_score_400_points_is_ten_to_one(self):
        assert calculate_expected_score(1600, 1200, 400) == pytest.approx(10 / 11)

    def test_expected_scores_are_complementary(self):
        e_ab = calculate_expected_score(1530, 1275, 400)
        e_ba = calculate_expected_score(1275, 1530, 400)
        assert e_ab + e_ba == pytest.approx(1.0)

    def test_expected_score_huge_gap_does_not_overflow(self):
        assert calculate_expected_score(0, 1_000_000, 400) == 0.0
        assert calculate_expected_score(1_000_000, 0, 400) == pytest.approx(1.0)

    def test_actual_score(self):
        assert calculate_actual_score(1, 2) == 1.0
        assert calculate_actual_score(3, 2) == 0.0
        assert calculate_actual_score(2, 2) == 0.5

    def test_k_factor_decay(self):
        params = EloParams()
        assert calculate_k_factor(0, params) == pytest.approx(32.0)
        assert calculate_k_factor(30, params) == pytest.approx(16.0)
        assert calculate_k_factor(90, params) == pytest.approx(8.0)

    @pytest.mark.parametrize(
        "value,expected",
        [(2.5, 3), (-2.5, -3), (0.5, 1), (-0.5, -1), (2.4, 2), (-2.4, -2), (0.0, 0)],
    )
    def test_round_half_away_from_zero(self, value, expected):
        assert round_half_away_from_zero(value) == expected


class TestEloCalculator:

    @pytest.fixture
    def calculator(self):
        return EloCalculator()

    def test_two_new_players(self, calculator):
        """A and B at 1200 with no games, A first: +16 / -16."""
        deltas = calculator.compute_deltas([
            _entrant("A", placement=1),
            _entrant("B", placement=2),
        ])
        by_id = {d.entrant_id: d for d in deltas}

        assert by_id["A"].rating_change == 16
        assert by_id["B"].rating_change == -16
        assert by_id["A"].rating_after == 1216
        assert by_id["B"].rating_after == 1184

    def test_three_way_equal_ratings(self, calculator):
        deltas = calculator.compute_deltas([
            _entrant("A", placement=1),
            _entrant("B", placement=2),
            _entrant("C", placement=3),
        ])
        assert [d.rating_change for d in deltas] == [32, 0, -32]
        assert [d.actual_score for d in deltas] == [2.0, 1.0, 0.0]
        assert [d.expected_score for d in deltas] == pytest.approx([1.0, 1.0, 1.0])

    def test_two_player_reduction(self, calculator):
        deltas = calculator.compute_deltas([
            _entrant("A", rating=1400, games=10, placement=1),
            _entrant("B", rating=1200, games=50, placement=2),
        ])
        expected_a = calculate_expected_score(1400, 1200, 400)
        k_a = 32 / (1 + 10 / 30)
        k_b = 32 / (1 + 50 / 30)

        assert deltas[0].rating_change == round_half_away_from_zero(k_a * (1 - expected_a))
        assert deltas[1].rating_change == round_half_away_from_zero(k_b * (0 - (1 - expected_a)))

    def test_equal_entrants_are_zero_sum(self, calculator):
        deltas = calculator.compute_deltas([
            _entrant("A", rating=1350, games=7, placement=2),
            _entrant("B", rating=1350, games=7, placement=1),
        ])
        assert deltas[0].rating_change == -deltas[1].rating_change

    def test_tie_between_equals_is_neutral(self, calculator):
        deltas = calculator.compute_deltas([
            _entrant("A", rating=1275, games=4, placement=1),
            _entrant("B", rating=1275, games=4, placement=1),
        ])
        assert [d.rating_change for d in deltas] == [0, 0]

    def test_tied_equals_get_the_same_change(self, calculator):
        deltas = calculator.compute_deltas([
            _entrant("A", placement=1),
            _entrant("B", placement=2),
            _entrant("C", placement=2),
            _entrant("D", placement=3),
        ])
        by_id = {d.entrant_id: d.rating_change for d in deltas}
        assert by_id["B"] == by_id["C"]

    def test_underdog_gains_more_than_favorite(self, calculator):
        favorite_wins = calculator.compute_deltas([
            _entrant("fav", rating=1500, placement=1),
            _entrant("dog", rating=1200, placement=2),
        ])
        underdog_wins = calculator.compute_deltas([
            _entrant("fav", rating=1500, placement=2),
            _entrant("dog", rating=1200, placement=1),
        ])
        assert underdog_wins[1].rating_change > favorite_wins[0].rating_change > 0

    def test_experienced_players_move_less(self, calculator):
        rookies = calculator.compute_deltas([_entrant("A", placement=1), _entrant("B", placement=2)])
        veterans = calculator.compute_deltas([
            _entrant("A", games=60, placement=1),
            _entrant("B", games=60, placement=2),
        ])
        assert 0 < veterans[0].rating_change < rookies[0].rating_change

    def test_custom_params(self):
        calculator = EloCalculator(EloParams(k_base=64.0))
        deltas = calculator.compute_deltas([_entrant("A", placement=1), _entrant("B", placement=2)])
        assert deltas[0].rating_change == 32

    def test_duplicate_ids_rejected(self, calculator):
        with pytest.raises(ValueError):
            calculator.compute_deltas([_entrant("A"), _entrant("A", placement=2)])

    def test_output_keeps_input_order(self, calculator):
        deltas = calculator.compute_deltas([
            _entrant("C", placement=3),
            _entrant("A", placement=1),
            _entrant("B", placement=2),
        ])
        assert [d.entrant_id for d in deltas] == ["C", "A", "B"]
