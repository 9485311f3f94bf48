"""Database repository helpers."""

from repositories.base import SqlDocumentStore
from repositories.definitions import COLLECTION_MODELS, create_document_store
from repositories.repository import (
    LeaderboardRow,
    count_completed_matches,
    fetch_leaderboard,
    fetch_match_history,
    upsert_lobby,
    upsert_player,
)

__all__ = [
    "COLLECTION_MODELS",
    "LeaderboardRow",
    "SqlDocumentStore",
    "count_completed_matches",
    "create_document_store",
    "fetch_leaderboard",
    "fetch_match_history",
    "upsert_lobby",
    "upsert_player",
]
