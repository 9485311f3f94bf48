"""Pickleball score rules: first to 11, win by 2."""

from __future__ import annotations

from dataclasses import dataclass

from domain.errors import InvalidScoreError

WINNING_SCORE = 11
WIN_MARGIN = 2


@dataclass(frozen=True)
class ScoreRange:
    """Inclusive bounds for one team's score given the other team's score."""

    min: int
    max: int
    explanation: str = ""

    def __contains__(self, value: object) -> bool:
        return isinstance(value, int) and self.min <= value <= self.max


@dataclass(frozen=True)
class ScoreValidation:
    valid: bool
    error: str | None = None

    def raise_for_error(self) -> None:
        if not self.valid:
            raise InvalidScoreError(self.error or "invalid score")


def get_valid_score_range(other_team_score: int) -> ScoreRange:
    """Return the scores one team may hold given the other team's score."""
    if other_team_score < WINNING_SCORE - 1:
        return ScoreRange(
            min=0,
            max=WINNING_SCORE,
            explanation=f"Can be 0-11 (game ends at 11-{other_team_score})",
        )

    if other_team_score == WINNING_SCORE - 1:
        return ScoreRange(
            min=0,
            max=WINNING_SCORE + 1,
            explanation="Can be 0-9 (losing), 10 (tied), or 12 (won after tie)",
        )

    if other_team_score == WINNING_SCORE:
        return ScoreRange(
            min=0,
            max=WINNING_SCORE + 2,
            explanation="Can be 0-9 (lost) or 11-13 (extended game)",
        )

    # Both sides past 11: the game only ends on an exact two-point lead.
    return ScoreRange(
        min=other_team_score - WIN_MARGIN,
        max=other_team_score + WIN_MARGIN,
        explanation=(
            f"Must be {other_team_score - WIN_MARGIN} (lost by 2) "
            f"or {other_team_score + WIN_MARGIN} (won by 2)"
        ),
    )


def is_valid_pickleball_score(team1_score: int, team2_score: int) -> ScoreValidation:
    """Check whether a final score pair is a legal finished game."""
    if team1_score == team2_score:
        return ScoreValidation(False, "Game cannot end tied - the winner must win by 2")

    winning = max(team1_score, team2_score)
    losing = min(team1_score, team2_score)

    if winning < WINNING_SCORE:
        return ScoreValidation(
            False, "Game not complete - at least one team must reach 11 points"
        )

    if winning == WINNING_SCORE:
        if losing >= WINNING_SCORE - 1:
            return ScoreValidation(
                False, "Score 11-10 is invalid - game must continue to 12-10 (win by 2)"
            )
        return ScoreValidation(True)

    # Past 11 the loser must have reached 10, or the game ended earlier.
    if losing < WINNING_SCORE - 1:
        return ScoreValidation(
            False,
            f"Score {winning}-{losing} is invalid - game would've ended at 11-{losing}",
        )

    if winning - losing != WIN_MARGIN:
        return ScoreValidation(
            False,
            f"Score {winning}-{losing} is invalid - an extended game is won by exactly 2",
        )

    return ScoreValidation(True)


def clamp_score_to_range(value: int, score_range: ScoreRange) -> int:
    if value < score_range.min:
        return score_range.min
    if value > score_range.max:
        return score_range.max
    return value


def get_default_score_in_range(score_range: ScoreRange, prefer_winning: bool = False) -> int:
    """Suggest a starting value for a score picker."""
    if prefer_winning and WINNING_SCORE in score_range:
        return WINNING_SCORE

    # Narrow range means an extended game; start on the losing side.
    if score_range.max - score_range.min <= WIN_MARGIN:
        return score_range.min

    return (score_range.min + score_range.max) // 2


def determine_winner(team1_score: int, team2_score: int) -> int:
    """Return 1 or 2 for a valid final score, raising InvalidScoreError otherwise."""
    is_valid_pickleball_score(team1_score, team2_score).raise_for_error()
    return 1 if team1_score > team2_score else 2


__all__ = [
    "ScoreRange",
    "ScoreValidation",
    "clamp_score_to_range",
    "determine_winner",
    "get_default_score_in_range",
    "get_valid_score_range",
    "is_valid_pickleball_score",
]
