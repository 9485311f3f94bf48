"""Tests for leaderboard, history, and seeding queries."""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime, timedelta

import pytest
from sqlalchemy.orm import Session, sessionmaker

from domain.common import Lobby, MatchResult
from domain.matches import MatchCompletionTransaction
from domain.protocol import RankingCategory
from repositories import (
    SqlDocumentStore,
    count_completed_matches,
    fetch_leaderboard,
    fetch_match_history,
    upsert_lobby,
    upsert_player,
)

START = datetime(2026, 3, 14, 9, 0, 0)


def _complete(store: SqlDocumentStore, lobby: Lobby, team1_score: int, team2_score: int, at: datetime) -> None:
    transaction = MatchCompletionTransaction(store, clock=lambda: at)
    winner = 1 if team1_score > team2_score else 2
    transaction.complete_match(
        lobby,
        MatchResult(
            team1_score=team1_score,
            team2_score=team2_score,
            winner=winner,
            duration_seconds=600,
            point_changes=transaction.compute_point_changes(lobby, winner),
        ),
    )


def test_leaderboard_orders_by_category_rating(
    session_factory: sessionmaker[Session],
    add_player: Callable[..., None],
) -> None:
    add_player("alice", rating=1200, wins=3, losses=1)
    add_player("bob", rating=1350, wins=1, losses=0)
    add_player("cy", rating=1200, wins=0, losses=0)

    with session_factory() as session:
        rows = fetch_leaderboard(session, RankingCategory.SINGLES)
        filtered = fetch_leaderboard(session, RankingCategory.SINGLES, min_matches=2)
        top_one = fetch_leaderboard(session, RankingCategory.MIXED_DOUBLES, limit=1)

    assert [(row.rank, row.player_id, row.rating) for row in rows] == [
        (1, "bob", 1350),
        (2, "alice", 1200),
        (3, "cy", 1200),
    ]
    assert rows[1].total_matches == 4
    assert [row.player_id for row in filtered] == ["alice"]
    assert [row.player_id for row in top_one] == ["bob"]


def test_history_is_newest_first_and_counts_completions(
    store: SqlDocumentStore,
    session_factory: sessionmaker[Session],
    add_player: Callable[..., None],
    open_lobby: Callable[..., Lobby],
) -> None:
    add_player("alice")
    add_player("bob")
    add_player("cy")
    first = open_lobby("EARLY", ["alice"], ["bob"])
    second = open_lobby("LATE", ["cy"], ["alice"])

    _complete(store, first, 11, 6, START)
    _complete(store, second, 13, 11, START + timedelta(hours=2))

    with session_factory() as session:
        history = fetch_match_history(session, "alice")
        limited = fetch_match_history(session, "alice", limit=1)
        assert count_completed_matches(session) == 2
        assert count_completed_matches(session, since=START + timedelta(hours=1)) == 1
        assert fetch_match_history(session, "nobody") == []

    assert [record.match_id for record in history] == ["LATE", "EARLY"]
    assert [record.result for record in history] == ["loss", "win"]
    assert [record.match_id for record in limited] == ["LATE"]


def test_upsert_player_renames_and_bumps_version(session_factory: sessionmaker[Session]) -> None:
    with session_factory.begin() as session:
        created = upsert_player(session, player_id="p1", display_name="Pat")
        assert created.version == 1
        assert created.singles_rating == 1000

    with session_factory.begin() as session:
        renamed = upsert_player(session, player_id="p1", display_name="Patricia", gender="female")
        assert renamed.version == 2
        assert renamed.display_name == "Patricia"
        assert renamed.gender == "female"


def test_upsert_lobby_refuses_completed_lobby(
    store: SqlDocumentStore,
    session_factory: sessionmaker[Session],
    add_player: Callable[..., None],
    open_lobby: Callable[..., Lobby],
) -> None:
    add_player("alice")
    add_player("bob")
    lobby = open_lobby("DONE", ["alice"], ["bob"])
    _complete(store, lobby, 11, 0, START)

    with pytest.raises(ValueError, match="already completed"):
        with session_factory.begin() as session:
            upsert_lobby(session, lobby)


def test_upsert_player_keeps_gender_when_not_given(session_factory: sessionmaker[Session]) -> None:
    with session_factory.begin() as session:
        upsert_player(session, player_id="p1", display_name="Pat", gender="female")

    with session_factory.begin() as session:
        renamed = upsert_player(session, player_id="p1", display_name="Pat S.")
        assert renamed.display_name == "Pat S."
        assert renamed.gender == "female"
