"""Elo-style ranking modules."""

from domain.ratings.elo.calculator import (
    DEFAULT_PARAMETERS,
    RankingCalculator,
    RankingParameters,
    calculate_doubles_points_change,
    calculate_points_change,
    get_default_rankings,
    get_expected_score,
    get_k_factor,
    get_team_rating,
    update_rankings,
)
from domain.ratings.elo.config import RankingSystemConfig, load_ranking_configs

__all__ = [
    "DEFAULT_PARAMETERS",
    "RankingCalculator",
    "RankingParameters",
    "RankingSystemConfig",
    "calculate_doubles_points_change",
    "calculate_points_change",
    "get_default_rankings",
    "get_expected_score",
    "get_k_factor",
    "get_team_rating",
    "load_ranking_configs",
    "update_rankings",
]
