"""Elo-style ranking points with experience-based K-factor."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from math import floor

from domain.common import MatchStakes, PlayerStanding, PointChanges
from domain.protocol import RankingCategory


@dataclass(frozen=True)
class RankingParameters:
    default_rating: int = 1000
    rating_floor: int = 100
    scale_factor: float = 400.0
    new_player_k_factor: int = 32
    intermediate_k_factor: int = 24
    experienced_k_factor: int = 16
    new_player_max_games: int = 30
    intermediate_max_games: int = 100
    minimum_points_change: int = 1


DEFAULT_PARAMETERS = RankingParameters()


def round_half_up(value: float) -> int:
    """Round .5 away from zero for positives (Python's round() is banker's rounding)."""
    return int(floor(value + 0.5))


def get_k_factor(games_played: int, params: RankingParameters = DEFAULT_PARAMETERS) -> int:
    """Pick the K-factor tier for a player's experience."""
    if games_played < params.new_player_max_games:
        return params.new_player_k_factor
    if games_played < params.intermediate_max_games:
        return params.intermediate_k_factor
    return params.experienced_k_factor


def get_expected_score(rating_a: float, rating_b: float, scale_factor: float = 400.0) -> float:
    """Compute the Elo expected score for side A against side B."""
    return 1.0 / (1.0 + 10.0 ** ((rating_b - rating_a) / scale_factor))


def calculate_points_change(
    winner_rating: float,
    loser_rating: float,
    winner_games_played: int,
    loser_games_played: int,
    params: RankingParameters = DEFAULT_PARAMETERS,
) -> int:
    """Points the winner gains (and the loser gives up) for one match."""
    k_factor = (
        get_k_factor(winner_games_played, params) + get_k_factor(loser_games_played, params)
    ) / 2
    expected = get_expected_score(winner_rating, loser_rating, params.scale_factor)
    points_change = round_half_up(k_factor * (1.0 - expected))
    return max(params.minimum_points_change, points_change)


def get_team_rating(player1_rating: float, player2_rating: float) -> int:
    return round_half_up((player1_rating + player2_rating) / 2)


def calculate_doubles_points_change(
    team1_ratings: tuple[int, int],
    team1_games_played: tuple[int, int],
    team2_ratings: tuple[int, int],
    team2_games_played: tuple[int, int],
    *,
    team1_won: bool,
    params: RankingParameters = DEFAULT_PARAMETERS,
) -> int:
    """Reduce each doubles team to one rating and score the match team-vs-team.

    Both members of a team move by the same amount; the returned value is
    the winning team's gain.
    """
    team1_rating = get_team_rating(*team1_ratings)
    team2_rating = get_team_rating(*team2_ratings)
    team1_games = round_half_up(sum(team1_games_played) / 2)
    team2_games = round_half_up(sum(team2_games_played) / 2)

    if team1_won:
        return calculate_points_change(team1_rating, team2_rating, team1_games, team2_games, params)
    return calculate_points_change(team2_rating, team1_rating, team2_games, team1_games, params)


def update_rankings(
    current_rankings: Mapping[str, int],
    category: RankingCategory | str,
    points_change: int,
    params: RankingParameters = DEFAULT_PARAMETERS,
) -> dict[str, int]:
    """Return a copy of ``current_rankings`` with one category moved and floored."""
    key = RankingCategory(category).value
    new_rankings = dict(current_rankings)
    new_rankings[key] = max(params.rating_floor, current_rankings[key] + points_change)
    return new_rankings


def get_default_rankings(params: RankingParameters = DEFAULT_PARAMETERS) -> dict[str, int]:
    return {category.value: params.default_rating for category in RankingCategory}


class RankingCalculator:
    """Binds one set of ranking parameters to the team-level formulas."""

    def __init__(self, params: RankingParameters = DEFAULT_PARAMETERS) -> None:
        self.params = params

    def team_rating(self, team: Sequence[PlayerStanding]) -> int:
        self._validate_team(team)
        if len(team) == 1:
            return team[0].rating
        return get_team_rating(team[0].rating, team[1].rating)

    def team_games_played(self, team: Sequence[PlayerStanding]) -> int:
        self._validate_team(team)
        if len(team) == 1:
            return team[0].games_played
        return round_half_up((team[0].games_played + team[1].games_played) / 2)

    def points_for_win(
        self,
        winners: Sequence[PlayerStanding],
        losers: Sequence[PlayerStanding],
    ) -> int:
        if len(winners) != len(losers):
            raise ValueError(
                f"team sizes differ ({len(winners)} vs {len(losers)}); cannot score match"
            )
        if len(winners) == 2:
            return calculate_doubles_points_change(
                (winners[0].rating, winners[1].rating),
                (winners[0].games_played, winners[1].games_played),
                (losers[0].rating, losers[1].rating),
                (losers[0].games_played, losers[1].games_played),
                team1_won=True,
                params=self.params,
            )
        return calculate_points_change(
            self.team_rating(winners),
            self.team_rating(losers),
            self.team_games_played(winners),
            self.team_games_played(losers),
            self.params,
        )

    def match_point_changes(
        self,
        team1: Sequence[PlayerStanding],
        team2: Sequence[PlayerStanding],
        winner: int,
    ) -> PointChanges:
        """Signed deltas for both teams once the winner is known."""
        if winner not in (1, 2):
            raise ValueError(f"winner must be 1 or 2, got {winner!r}")
        if winner == 1:
            points = self.points_for_win(team1, team2)
            return PointChanges(team1=points, team2=-points)
        points = self.points_for_win(team2, team1)
        return PointChanges(team1=-points, team2=points)

    def stakes(
        self,
        team1: Sequence[PlayerStanding],
        team2: Sequence[PlayerStanding],
    ) -> MatchStakes:
        """Preview both outcomes so players see what is on the line."""
        team1_win = self.points_for_win(team1, team2)
        team2_win = self.points_for_win(team2, team1)
        return MatchStakes(
            team1_win=team1_win,
            team1_loss=team2_win,
            team2_win=team2_win,
            team2_loss=team1_win,
            team1_average=self.team_rating(team1),
            team2_average=self.team_rating(team2),
        )

    def apply(self, current_rating: int, points_change: int) -> int:
        return max(self.params.rating_floor, current_rating + points_change)

    @staticmethod
    def _validate_team(team: Sequence[PlayerStanding]) -> None:
        if len(team) not in (1, 2):
            raise ValueError(f"a team has 1 or 2 players, got {len(team)}")


__all__ = [
    "DEFAULT_PARAMETERS",
    "RankingCalculator",
    "RankingParameters",
    "calculate_doubles_points_change",
    "calculate_points_change",
    "get_default_rankings",
    "get_expected_score",
    "get_k_factor",
    "get_team_rating",
    "round_half_up",
    "update_rankings",
]
