"""Shared fixtures: a file-backed SQLite document store per test."""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime
from pathlib import Path

import pytest
from sqlalchemy.orm import Session, sessionmaker

from db import create_db_engine, create_session_factory
from domain.common import Lobby, LobbyPlayer, LobbyTeam
from domain.protocol import GameMode
from models import Player
from repositories import SqlDocumentStore, create_document_store, upsert_lobby, upsert_player

FIXED_NOW = datetime(2026, 3, 14, 18, 30, 0)


@pytest.fixture
def session_factory(tmp_path: Path) -> sessionmaker[Session]:
    engine = create_db_engine(f"sqlite:///{tmp_path / 'rankings.db'}")
    factory = create_session_factory(engine)
    create_document_store(factory).ensure_schema(engine)
    return factory


@pytest.fixture
def store(session_factory: sessionmaker[Session]) -> SqlDocumentStore:
    return create_document_store(session_factory)


@pytest.fixture
def add_player(session_factory: sessionmaker[Session]) -> Callable[..., None]:
    def _add(
        player_id: str,
        *,
        name: str | None = None,
        gender: str | None = None,
        rating: int | None = None,
        wins: int = 0,
        losses: int = 0,
    ) -> None:
        with session_factory.begin() as session:
            upsert_player(session, player_id=player_id, display_name=name or player_id.title(), gender=gender)
            player = session.get(Player, player_id)
            assert player is not None
            if rating is not None:
                player.singles_rating = rating
                player.same_gender_doubles_rating = rating
                player.mixed_doubles_rating = rating
            player.wins = wins
            player.losses = losses
            player.total_matches = wins + losses

    return _add


@pytest.fixture
def open_lobby(session_factory: sessionmaker[Session]) -> Callable[..., Lobby]:
    def _open(room_code: str, team1: list[str], team2: list[str]) -> Lobby:
        mode = GameMode.SINGLES if len(team1) == 1 else GameMode.DOUBLES
        lobby = Lobby(
            room_code=room_code,
            game_mode=mode,
            team1=LobbyTeam(*(LobbyPlayer(uid=uid, display_name=uid.title()) for uid in team1)),
            team2=LobbyTeam(*(LobbyPlayer(uid=uid, display_name=uid.title()) for uid in team2)),
        )
        with session_factory.begin() as session:
            upsert_lobby(session, lobby)
        return lobby

    return _open
