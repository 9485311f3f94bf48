"""Query and seeding helpers for players, lobbies, and match history."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from sqlalchemy import desc, func, select
from sqlalchemy.orm import Session

from domain.common import Lobby as LobbyAggregate
from domain.protocol import RankingCategory
from domain.ratings.elo.calculator import DEFAULT_PARAMETERS, RankingParameters
from models import Lobby, MatchHistory, Player


@dataclass(frozen=True)
class LeaderboardRow:
    rank: int
    player_id: str
    display_name: str
    rating: int
    wins: int
    losses: int
    total_matches: int


def upsert_player(
    session: Session,
    *,
    player_id: str,
    display_name: str,
    gender: str | None = None,
    params: RankingParameters = DEFAULT_PARAMETERS,
) -> Player:
    """Create a player at the default rating, or rename an existing one.

    An existing player keeps their stored gender unless a new one is given.
    """
    player = session.get(Player, player_id)
    if player is None:
        player = Player(
            id=player_id,
            display_name=display_name,
            gender=gender,
            singles_rating=params.default_rating,
            same_gender_doubles_rating=params.default_rating,
            mixed_doubles_rating=params.default_rating,
            wins=0,
            losses=0,
            total_matches=0,
            version=1,
        )
        session.add(player)
    else:
        player.display_name = display_name
        if gender is not None:
            player.gender = gender
        player.version = player.version + 1
    session.flush()
    return player


def upsert_lobby(session: Session, lobby: LobbyAggregate) -> Lobby:
    """Store an open lobby's roster so it can later be completed."""
    lobby.validate_roster()
    row = session.get(Lobby, lobby.room_code)
    fields = lobby.as_record()
    if row is None:
        row = Lobby(id=lobby.room_code, version=1, game_completed=False, **fields)
        session.add(row)
    else:
        if row.game_completed:
            raise ValueError(f"lobby {lobby.room_code} is already completed")
        for key, value in fields.items():
            setattr(row, key, value)
        row.version = row.version + 1
    session.flush()
    return row


def fetch_match_history(session: Session, player_id: str, *, limit: int = 20) -> list[MatchHistory]:
    """Newest-first match history for one player."""
    statement = (
        select(MatchHistory)
        .where(MatchHistory.player_id == player_id)
        .order_by(desc(MatchHistory.created_at), desc(MatchHistory.id))
        .limit(limit)
    )
    return list(session.scalars(statement))


def fetch_leaderboard(
    session: Session,
    category: RankingCategory,
    *,
    limit: int = 50,
    min_matches: int = 0,
) -> list[LeaderboardRow]:
    """Top players by rating in one category."""
    rating_column = getattr(Player, RankingCategory(category).rating_field)
    statement = (
        select(Player)
        .where(Player.total_matches >= min_matches)
        .order_by(desc(rating_column), Player.id)
        .limit(limit)
    )
    return [
        LeaderboardRow(
            rank=index,
            player_id=player.id,
            display_name=player.display_name,
            rating=int(getattr(player, rating_column.key)),
            wins=player.wins,
            losses=player.losses,
            total_matches=player.total_matches,
        )
        for index, player in enumerate(session.scalars(statement), start=1)
    ]


def count_completed_matches(session: Session, *, since: datetime | None = None) -> int:
    statement = select(func.count()).select_from(Lobby).where(Lobby.game_completed.is_(True))
    if since is not None:
        statement = statement.where(Lobby.game_completed_at >= since)
    return int(session.scalar(statement) or 0)
