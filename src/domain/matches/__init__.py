"""Match completion and history modules."""

from domain.matches.completion import MatchCompletionSummary, MatchCompletionTransaction
from domain.matches.history import (
    build_match_history_records,
    calculate_game_duration,
    determine_game_category,
)

__all__ = [
    "MatchCompletionSummary",
    "MatchCompletionTransaction",
    "build_match_history_records",
    "calculate_game_duration",
    "determine_game_category",
]
