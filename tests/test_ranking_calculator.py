"""Unit tests for Elo-style ranking points."""

from __future__ import annotations

import pytest

from domain.common import PlayerStanding, PointChanges
from domain.protocol import RankingCategory
from domain.ratings.elo.calculator import (
    RankingCalculator,
    RankingParameters,
    calculate_doubles_points_change,
    calculate_points_change,
    get_default_rankings,
    get_expected_score,
    get_k_factor,
    get_team_rating,
    round_half_up,
    update_rankings,
)


def test_ranking_parameters_defaults_are_expected_constants() -> None:
    params = RankingParameters()
    assert params.default_rating == 1000
    assert params.rating_floor == 100
    assert params.scale_factor == pytest.approx(400.0)
    assert params.new_player_k_factor == 32
    assert params.intermediate_k_factor == 24
    assert params.experienced_k_factor == 16
    assert params.minimum_points_change == 1


@pytest.mark.parametrize(
    ("games_played", "expected"),
    [(0, 32), (29, 32), (30, 24), (99, 24), (100, 16), (5000, 16)],
)
def test_k_factor_steps(games_played: int, expected: int) -> None:
    assert get_k_factor(games_played) == expected


def test_expected_score_equal_ratings_is_half() -> None:
    assert get_expected_score(1000, 1000) == pytest.approx(0.5)


@pytest.mark.parametrize(("rating_a", "rating_b"), [(1000, 1200), (1500, 900), (100, 2400), (1337, 1336)])
def test_expected_scores_sum_to_one(rating_a: int, rating_b: int) -> None:
    assert get_expected_score(rating_a, rating_b) + get_expected_score(rating_b, rating_a) == pytest.approx(1.0)


def test_expected_score_increases_with_rating_gap() -> None:
    scores = [get_expected_score(1000 + gap, 1000) for gap in range(-400, 401, 100)]
    assert scores == sorted(scores)
    assert len(set(scores)) == len(scores)


def test_even_singles_match_between_new_players_moves_sixteen() -> None:
    assert calculate_points_change(1000, 1000, 0, 0) == 16


def test_k_factor_is_averaged_across_sides() -> None:
    # (32 + 24) / 2 = 28 at even ratings
    assert calculate_points_change(1000, 1000, 0, 50) == 14
    assert calculate_points_change(1000, 1000, 150, 150) == 8


def test_points_change_never_increases_as_winner_gets_stronger() -> None:
    changes = [calculate_points_change(1000 + gap, 1000, 10, 10) for gap in range(-800, 801, 25)]
    assert all(earlier >= later for earlier, later in zip(changes, changes[1:]))
    assert changes[0] > changes[-1]


def test_heavy_favourite_still_gains_at_least_one_point() -> None:
    assert calculate_points_change(3000, 100, 500, 500) == 1
    assert calculate_points_change(2400, 800, 0, 0) >= 1


def test_round_half_up_differs_from_bankers_rounding() -> None:
    assert round_half_up(2.5) == 3
    assert round_half_up(7.688) == 8
    assert round_half_up(7.4) == 7


def test_team_rating_is_rounded_mean() -> None:
    assert get_team_rating(1000, 1200) == 1100
    assert get_team_rating(900, 900) == 900
    assert get_team_rating(1000, 1001) == 1001


def test_doubles_points_change_uses_team_ratings() -> None:
    # Team ratings 1100 vs 900 at K=32: round(32 * (1 - 0.7597)) = 8
    team_a_wins = calculate_doubles_points_change((1000, 1200), (0, 0), (900, 900), (0, 0), team1_won=True)
    assert team_a_wins == 8
    assert team_a_wins == calculate_points_change(1100, 900, 0, 0)

    team_b_wins = calculate_doubles_points_change((1000, 1200), (0, 0), (900, 900), (0, 0), team1_won=False)
    assert team_b_wins == calculate_points_change(900, 1100, 0, 0)
    assert team_b_wins > team_a_wins


def test_doubles_points_change_averages_games_played() -> None:
    # Team 1 averages 65 games (K=24), team 2 averages 15 (K=32) -> K=28
    assert calculate_doubles_points_change((1000, 1000), (30, 100), (1000, 1000), (10, 20), team1_won=True) == 14


def test_update_rankings_applies_signed_delta() -> None:
    current = get_default_rankings()
    updated = update_rankings(current, RankingCategory.SINGLES, 16)
    assert updated["singles"] == 1016
    assert updated["sameGenderDoubles"] == 1000
    assert current["singles"] == 1000

    lowered = update_rankings(updated, "sameGenderDoubles", -24)
    assert lowered["sameGenderDoubles"] == 976


def test_update_rankings_never_goes_below_floor() -> None:
    rankings = {"singles": 120, "sameGenderDoubles": 1000, "mixedDoubles": 1000}
    for _ in range(10):
        rankings = update_rankings(rankings, RankingCategory.SINGLES, -16)
        assert rankings["singles"] >= 100
    assert rankings["singles"] == 100


def test_default_rankings_cover_every_category() -> None:
    assert get_default_rankings() == {"singles": 1000, "sameGenderDoubles": 1000, "mixedDoubles": 1000}


def test_calculator_signed_point_changes() -> None:
    calculator = RankingCalculator()
    alice = [PlayerStanding("alice", 1000, 0)]
    bob = [PlayerStanding("bob", 1000, 0)]
    assert calculator.match_point_changes(alice, bob, winner=1) == PointChanges(team1=16, team2=-16)
    assert calculator.match_point_changes(alice, bob, winner=2) == PointChanges(team1=-16, team2=16)


def test_calculator_doubles_scenario_is_shared_within_team() -> None:
    calculator = RankingCalculator()
    team_a = [PlayerStanding("a1", 1000, 0), PlayerStanding("a2", 1200, 0)]
    team_b = [PlayerStanding("b1", 900, 0), PlayerStanding("b2", 900, 0)]

    assert calculator.team_rating(team_a) == 1100
    assert calculator.team_rating(team_b) == 900
    assert calculator.match_point_changes(team_a, team_b, winner=1) == PointChanges(team1=8, team2=-8)


def test_calculator_stakes_preview_both_outcomes() -> None:
    calculator = RankingCalculator()
    stakes = calculator.stakes([PlayerStanding("fav", 1200, 0)], [PlayerStanding("dog", 1000, 0)])
    assert stakes.team1_win == 8
    assert stakes.team1_loss == 24
    assert stakes.team2_win == 24
    assert stakes.team2_loss == 8
    assert (stakes.team1_average, stakes.team2_average) == (1200, 1000)
    assert stakes.as_dict()["team1Win"] == 8


def test_calculator_rejects_mismatched_team_sizes() -> None:
    calculator = RankingCalculator()
    with pytest.raises(ValueError, match="team sizes differ"):
        calculator.match_point_changes(
            [PlayerStanding("a", 1000, 0)],
            [PlayerStanding("b", 1000, 0), PlayerStanding("c", 1000, 0)],
            winner=1,
        )
    with pytest.raises(ValueError, match="winner must be 1 or 2"):
        calculator.match_point_changes([PlayerStanding("a", 1000, 0)], [PlayerStanding("b", 1000, 0)], winner=3)


def test_custom_parameters_change_k_factor_tiers() -> None:
    params = RankingParameters(new_player_k_factor=40, new_player_max_games=10)
    assert get_k_factor(5, params) == 40
    assert get_k_factor(10, params) == 24
    assert calculate_points_change(1000, 1000, 0, 0, params) == 20
