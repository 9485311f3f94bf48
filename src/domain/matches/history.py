"""Build per-participant match history rows."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import UTC, datetime

from domain.common import Lobby, MatchHistoryRecord, MatchResult
from domain.protocol import GameCategory, GameMode


def determine_game_category(game_mode: GameMode, genders: Iterable[str | None]) -> GameCategory:
    """Classify a match; doubles is mixed only when both genders are known to be present."""
    if game_mode is GameMode.SINGLES:
        return GameCategory.SINGLES

    known = {gender.lower() for gender in genders if gender}
    if {"male", "female"} <= known:
        return GameCategory.MIXED_DOUBLES
    return GameCategory.SAME_GENDER_DOUBLES


def calculate_game_duration(started_at: datetime, now: datetime | None = None) -> int:
    """Whole seconds elapsed since the game started."""
    end = now or datetime.now(UTC).replace(tzinfo=None)
    return max(0, int((end - started_at).total_seconds()))


def history_record_id(match_id: str, player_id: str) -> str:
    return f"{match_id}:{player_id}"


def build_match_history_records(
    lobby: Lobby,
    result: MatchResult,
    category: GameCategory,
    *,
    created_at: datetime,
) -> list[MatchHistoryRecord]:
    """One record per participant, team 1 first, in roster order."""
    records: list[MatchHistoryRecord] = []
    for team_number, team, opponents in (
        (1, lobby.team1, lobby.team2),
        (2, lobby.team2, lobby.team1),
    ):
        won = team_number == result.winner
        for player in team.players:
            partner = next((mate for mate in team.players if mate.uid != player.uid), None)
            records.append(
                MatchHistoryRecord(
                    id=history_record_id(lobby.room_code, player.uid),
                    match_id=lobby.room_code,
                    player_id=player.uid,
                    game_type=lobby.game_mode,
                    game_category=category,
                    result="win" if won else "loss",
                    team1_score=result.team1_score,
                    team2_score=result.team2_score,
                    points_change=result.point_changes.for_team(team_number),
                    opponent_ids=opponents.player_ids,
                    opponent_names=tuple(opponent.display_name for opponent in opponents.players),
                    duration_seconds=result.duration_seconds,
                    created_at=created_at,
                    partner_id=partner.uid if partner is not None else None,
                    partner_name=partner.display_name if partner is not None else None,
                )
            )
    return records
