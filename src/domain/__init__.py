"""Ranking engine domain modules."""

from domain.common import (
    Lobby,
    LobbyPlayer,
    LobbyTeam,
    MatchHistoryRecord,
    MatchResult,
    MatchStakes,
    PlayerStanding,
    PointChanges,
)
from domain.protocol import Collection, DocumentStore, GameCategory, GameMode, RankingCategory

__all__ = [
    "Collection",
    "DocumentStore",
    "GameCategory",
    "GameMode",
    "Lobby",
    "LobbyPlayer",
    "LobbyTeam",
    "MatchHistoryRecord",
    "MatchResult",
    "MatchStakes",
    "PlayerStanding",
    "PointChanges",
    "RankingCategory",
]
