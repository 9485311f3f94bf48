"""Pickleball score validation."""

from domain.scoring.rules import (
    ScoreRange,
    ScoreValidation,
    clamp_score_to_range,
    determine_winner,
    get_default_score_in_range,
    get_valid_score_range,
    is_valid_pickleball_score,
)

__all__ = [
    "ScoreRange",
    "ScoreValidation",
    "clamp_score_to_range",
    "determine_winner",
    "get_default_score_in_range",
    "get_valid_score_range",
    "is_valid_pickleball_score",
]
