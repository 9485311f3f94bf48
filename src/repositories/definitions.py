"""Collection-to-model wiring for the document store."""

from __future__ import annotations

from sqlalchemy.orm import Session, sessionmaker

from domain.protocol import Collection
from models import Lobby, MatchHistory, Player
from repositories.base import SqlDocumentStore

COLLECTION_MODELS = {
    Collection.PLAYERS: Player,
    Collection.MATCH_HISTORY: MatchHistory,
    Collection.LOBBIES: Lobby,
}


def create_document_store(session_factory: sessionmaker[Session]) -> SqlDocumentStore:
    return SqlDocumentStore(session_factory, collection_models=COLLECTION_MODELS)


__all__ = ["COLLECTION_MODELS", "create_document_store"]
