"""Exception hierarchy for score validation and match completion."""

from __future__ import annotations


class RankingError(Exception):
    """Base class for errors surfaced to callers of the ranking engine."""


class InvalidScoreError(RankingError, ValueError):
    """A score pair does not describe a finished pickleball game."""


class PlayerNotFoundError(RankingError, LookupError):
    """A participant has no stored player record."""

    def __init__(self, player_id: str) -> None:
        super().__init__(f"Player {player_id} not found")
        self.player_id = player_id


class RecordNotFoundError(RankingError, LookupError):
    """A record targeted by a read or update does not exist."""

    def __init__(self, collection: str, record_id: str) -> None:
        super().__init__(f"{collection}/{record_id} does not exist")
        self.collection = collection
        self.record_id = record_id


class MatchAlreadyCompletedError(RankingError):
    """The lobby has already been marked completed."""

    def __init__(self, match_id: str) -> None:
        super().__init__(f"match_id={match_id} is already completed")
        self.match_id = match_id


class ConcurrentUpdateError(RankingError):
    """A conditional write found a newer version than the one read."""

    def __init__(self, collection: str, record_id: str, expected_version: int) -> None:
        super().__init__(
            f"{collection}/{record_id} changed since it was read "
            f"(expected version {expected_version})"
        )
        self.collection = collection
        self.record_id = record_id
        self.expected_version = expected_version


class BatchCommitError(RankingError):
    """The persistence layer rejected the batch; nothing was applied."""


__all__ = [
    "BatchCommitError",
    "ConcurrentUpdateError",
    "InvalidScoreError",
    "MatchAlreadyCompletedError",
    "PlayerNotFoundError",
    "RankingError",
    "RecordNotFoundError",
]
