"""Shared types for score validation, rating, and match completion."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from domain.protocol import GameCategory, GameMode


@dataclass(frozen=True)
class LobbyPlayer:
    """Roster slot as the lobby stores it."""

    uid: str
    display_name: str = "Unknown"
    photo_url: str | None = None

    def as_record(self) -> dict[str, Any]:
        return {"uid": self.uid, "display_name": self.display_name, "photo_url": self.photo_url}

    @classmethod
    def from_record(cls, raw: dict[str, Any]) -> LobbyPlayer:
        return cls(
            uid=str(raw["uid"]),
            display_name=str(raw.get("display_name") or "Unknown"),
            photo_url=raw.get("photo_url"),
        )


@dataclass(frozen=True)
class LobbyTeam:
    player1: LobbyPlayer | None = None
    player2: LobbyPlayer | None = None

    @property
    def players(self) -> tuple[LobbyPlayer, ...]:
        return tuple(player for player in (self.player1, self.player2) if player is not None)

    @property
    def player_ids(self) -> tuple[str, ...]:
        return tuple(player.uid for player in self.players)


@dataclass(frozen=True)
class Lobby:
    """The slice of a lobby aggregate the ranking engine reads."""

    room_code: str
    game_mode: GameMode
    team1: LobbyTeam
    team2: LobbyTeam
    host_id: str | None = None
    game_started_at: datetime | None = None

    @property
    def player_ids(self) -> tuple[str, ...]:
        return self.team1.player_ids + self.team2.player_ids

    def team_of(self, player_id: str) -> int:
        if player_id in self.team1.player_ids:
            return 1
        if player_id in self.team2.player_ids:
            return 2
        raise ValueError(f"player_id={player_id} is not on a team in lobby {self.room_code}")

    def validate_roster(self) -> None:
        expected = self.game_mode.team_size
        for team_number, team in ((1, self.team1), (2, self.team2)):
            if len(team.players) != expected:
                raise ValueError(
                    f"lobby {self.room_code} team{team_number} has {len(team.players)} players; "
                    f"{self.game_mode.value} requires {expected}"
                )
        if len(set(self.player_ids)) != len(self.player_ids):
            raise ValueError(f"lobby {self.room_code} lists a player more than once")

    def as_record(self) -> dict[str, Any]:
        return {
            "host_id": self.host_id,
            "game_mode": self.game_mode.value,
            "team1_players": [player.as_record() for player in self.team1.players],
            "team2_players": [player.as_record() for player in self.team2.players],
            "game_started_at": self.game_started_at,
        }

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> Lobby:
        return cls(
            room_code=str(record["id"]),
            game_mode=GameMode(record["game_mode"]),
            team1=_team_from_records(record.get("team1_players") or []),
            team2=_team_from_records(record.get("team2_players") or []),
            host_id=record.get("host_id"),
            game_started_at=record.get("game_started_at"),
        )


def _team_from_records(raw_players: list[dict[str, Any]]) -> LobbyTeam:
    if len(raw_players) > 2:
        raise ValueError(f"a team has at most 2 players, got {len(raw_players)}")
    players = [LobbyPlayer.from_record(raw) for raw in raw_players]
    return LobbyTeam(
        player1=players[0] if players else None,
        player2=players[1] if len(players) > 1 else None,
    )


@dataclass(frozen=True)
class PlayerStanding:
    """A player's current rating in one category plus experience."""

    player_id: str
    rating: int
    games_played: int


@dataclass(frozen=True)
class PointChanges:
    """Signed per-team deltas; winner positive, loser negative."""

    team1: int
    team2: int

    def for_team(self, team_number: int) -> int:
        return self.team1 if team_number == 1 else self.team2

    def as_dict(self) -> dict[str, int]:
        return {"team1": self.team1, "team2": self.team2}


@dataclass(frozen=True)
class MatchStakes:
    """What each team gains on a win and loses on a loss, before play starts."""

    team1_win: int
    team1_loss: int
    team2_win: int
    team2_loss: int
    team1_average: int
    team2_average: int

    def as_dict(self) -> dict[str, int]:
        return {
            "team1Win": self.team1_win,
            "team1Loss": self.team1_loss,
            "team2Win": self.team2_win,
            "team2Loss": self.team2_loss,
            "team1Avg": self.team1_average,
            "team2Avg": self.team2_average,
        }


@dataclass(frozen=True)
class MatchResult:
    """Final scores and pre-computed deltas handed to the completion transaction.

    ``player_versions`` holds the player record versions the deltas were
    computed from; completion refuses to commit against newer records.
    """

    team1_score: int
    team2_score: int
    winner: int
    duration_seconds: int
    point_changes: PointChanges
    stakes: MatchStakes | None = None
    player_versions: dict[str, int] | None = None


@dataclass(frozen=True)
class MatchHistoryRecord:
    """One participant's immutable view of a completed match."""

    id: str
    match_id: str
    player_id: str
    game_type: GameMode
    game_category: GameCategory
    result: str
    team1_score: int
    team2_score: int
    points_change: int
    opponent_ids: tuple[str, ...]
    opponent_names: tuple[str, ...]
    duration_seconds: int
    created_at: datetime
    partner_id: str | None = None
    partner_name: str | None = None
    status: str = "confirmed"

    def as_record(self) -> dict[str, Any]:
        return {
            "match_id": self.match_id,
            "player_id": self.player_id,
            "game_type": self.game_type.value,
            "game_category": self.game_category.value,
            "result": self.result,
            "team1_score": self.team1_score,
            "team2_score": self.team2_score,
            "points_change": self.points_change,
            "opponent_ids": list(self.opponent_ids),
            "opponent_names": list(self.opponent_names),
            "partner_id": self.partner_id,
            "partner_name": self.partner_name,
            "duration_seconds": self.duration_seconds,
            "status": self.status,
            "created_at": self.created_at,
        }
