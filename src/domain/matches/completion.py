"""Atomic match completion: history rows, rating updates, and lobby result."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime

from domain.common import (
    Lobby,
    MatchHistoryRecord,
    MatchResult,
    MatchStakes,
    PlayerStanding,
    PointChanges,
)
from domain.errors import (
    ConcurrentUpdateError,
    InvalidScoreError,
    MatchAlreadyCompletedError,
    PlayerNotFoundError,
    RecordNotFoundError,
)
from domain.matches.history import build_match_history_records, determine_game_category
from domain.protocol import (
    Collection,
    DocumentStore,
    GameCategory,
    MutationOp,
    Record,
    RecordMutation,
)
from domain.ratings.elo.calculator import DEFAULT_PARAMETERS, RankingCalculator, RankingParameters
from domain.scoring.rules import determine_winner

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(UTC).replace(tzinfo=None)


@dataclass(frozen=True)
class MatchCompletionSummary:
    """What the caller can show once the batch has committed."""

    match_id: str
    game_category: GameCategory
    point_changes: PointChanges
    history_records: tuple[MatchHistoryRecord, ...]
    new_ratings: dict[str, int]
    completed_at: datetime


class MatchCompletionTransaction:
    """Turns a finished lobby into one all-or-nothing batch of writes.

    Player records are read first and every player update is conditioned on
    the version seen, so two completions racing on a shared player cannot
    both apply; the loser of the race gets ``ConcurrentUpdateError`` and can
    recompute from fresh reads. A missing player record aborts the whole
    transaction before anything is written.
    """

    def __init__(
        self,
        store: DocumentStore,
        *,
        params: RankingParameters = DEFAULT_PARAMETERS,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self.store = store
        self.calculator = RankingCalculator(params)
        self.clock = clock

    def read_player_records(self, lobby: Lobby) -> dict[str, Record]:
        records: dict[str, Record] = {}
        for player_id in lobby.player_ids:
            record = self.store.read_record(Collection.PLAYERS, player_id)
            if record is None:
                logger.warning(
                    "Aborting match %s: player record %s is missing", lobby.room_code, player_id
                )
                raise PlayerNotFoundError(player_id)
            records[player_id] = record
        return records

    def game_category(self, lobby: Lobby, player_records: dict[str, Record]) -> GameCategory:
        return determine_game_category(
            lobby.game_mode,
            (record.get("gender") for record in player_records.values()),
        )

    def team_standings(
        self,
        lobby: Lobby,
        player_records: dict[str, Record] | None = None,
    ) -> tuple[list[PlayerStanding], list[PlayerStanding], GameCategory]:
        """Current rating and experience of both teams in the match's category."""
        lobby.validate_roster()
        records = player_records if player_records is not None else self.read_player_records(lobby)
        category = self.game_category(lobby, records)
        rating_field = category.ranking_category.rating_field

        def standing(player_id: str) -> PlayerStanding:
            record = records[player_id]
            return PlayerStanding(
                player_id=player_id,
                rating=int(record[rating_field]),
                games_played=int(record["total_matches"]),
            )

        return (
            [standing(player_id) for player_id in lobby.team1.player_ids],
            [standing(player_id) for player_id in lobby.team2.player_ids],
            category,
        )

    def preview_stakes(self, lobby: Lobby) -> MatchStakes:
        team1, team2, _ = self.team_standings(lobby)
        return self.calculator.stakes(team1, team2)

    def compute_point_changes(self, lobby: Lobby, winner: int) -> PointChanges:
        team1, team2, _ = self.team_standings(lobby)
        return self.calculator.match_point_changes(team1, team2, winner)

    def prepare_result(
        self,
        lobby: Lobby,
        team1_score: int,
        team2_score: int,
        duration_seconds: int,
    ) -> MatchResult:
        """Score a finished game from one read of the player records.

        The versions of that read travel with the result, so ``complete_match``
        rejects it if any player's rating moved in between.
        """
        winner = determine_winner(team1_score, team2_score)
        records = self.read_player_records(lobby)
        team1, team2, _ = self.team_standings(lobby, records)
        return MatchResult(
            team1_score=team1_score,
            team2_score=team2_score,
            winner=winner,
            duration_seconds=duration_seconds,
            point_changes=self.calculator.match_point_changes(team1, team2, winner),
            stakes=self.calculator.stakes(team1, team2),
            player_versions={
                player_id: int(record["version"]) for player_id, record in records.items()
            },
        )

    def complete_match(self, lobby: Lobby, result: MatchResult) -> MatchCompletionSummary:
        """Validate, build, and commit the completion batch for ``lobby``."""
        lobby.validate_roster()
        self._validate_result(result)

        lobby_record = self.store.read_record(Collection.LOBBIES, lobby.room_code)
        if lobby_record is None:
            raise RecordNotFoundError(Collection.LOBBIES.value, lobby.room_code)
        if lobby_record.get("game_completed"):
            logger.warning("Refusing to complete match %s twice", lobby.room_code)
            raise MatchAlreadyCompletedError(lobby.room_code)

        player_records = self.read_player_records(lobby)
        expected_versions = self._expected_versions(lobby, result, player_records)
        category = self.game_category(lobby, player_records)
        rating_field = category.ranking_category.rating_field
        completed_at = self.clock()

        history_records = build_match_history_records(
            lobby,
            result,
            category,
            created_at=completed_at,
        )
        mutations = [
            RecordMutation(
                collection=Collection.MATCH_HISTORY,
                record_id=record.id,
                op=MutationOp.SET,
                fields=record.as_record(),
            )
            for record in history_records
        ]

        new_ratings: dict[str, int] = {}
        for player_id, record in player_records.items():
            won = lobby.team_of(player_id) == result.winner
            delta = result.point_changes.for_team(lobby.team_of(player_id))
            new_rating = self.calculator.apply(int(record[rating_field]), delta)
            new_ratings[player_id] = new_rating
            mutations.append(
                RecordMutation(
                    collection=Collection.PLAYERS,
                    record_id=player_id,
                    op=MutationOp.UPDATE,
                    fields={
                        rating_field: new_rating,
                        "wins": int(record["wins"]) + (1 if won else 0),
                        "losses": int(record["losses"]) + (0 if won else 1),
                        "total_matches": int(record["total_matches"]) + 1,
                        "last_match_at": completed_at,
                    },
                    expected_version=expected_versions[player_id],
                )
            )

        mutations.append(
            RecordMutation(
                collection=Collection.LOBBIES,
                record_id=lobby.room_code,
                op=MutationOp.UPDATE,
                fields={
                    "game_completed": True,
                    "game_completed_at": completed_at,
                    "team1_final_score": result.team1_score,
                    "team2_final_score": result.team2_score,
                    "winner": result.winner,
                    "team1_points_change": result.point_changes.team1,
                    "team2_points_change": result.point_changes.team2,
                    "stakes_json": result.stakes.as_dict() if result.stakes is not None else None,
                    "last_activity": completed_at,
                },
                expected_version=lobby_record.get("version"),
            )
        )

        self.store.commit_batch(mutations)
        logger.info(
            "Completed match %s (%s) %d-%d winner=team%d changes=%+d/%+d",
            lobby.room_code,
            category.value,
            result.team1_score,
            result.team2_score,
            result.winner,
            result.point_changes.team1,
            result.point_changes.team2,
        )

        return MatchCompletionSummary(
            match_id=lobby.room_code,
            game_category=category,
            point_changes=result.point_changes,
            history_records=tuple(history_records),
            new_ratings=new_ratings,
            completed_at=completed_at,
        )

    @staticmethod
    def _expected_versions(
        lobby: Lobby,
        result: MatchResult,
        player_records: dict[str, Record],
    ) -> dict[str, int]:
        current = {player_id: int(record["version"]) for player_id, record in player_records.items()}
        if result.player_versions is None:
            return current

        for player_id, version in current.items():
            if player_id not in result.player_versions:
                raise ValueError(f"result has no version for player_id={player_id}")
            expected = int(result.player_versions[player_id])
            if expected != version:
                logger.warning(
                    "Aborting match %s: player %s changed since its points were computed",
                    lobby.room_code,
                    player_id,
                )
                raise ConcurrentUpdateError(Collection.PLAYERS.value, player_id, expected)
        return current

    def _validate_result(self, result: MatchResult) -> None:
        winner = determine_winner(result.team1_score, result.team2_score)
        if result.winner != winner:
            raise InvalidScoreError(
                f"winner=team{result.winner} does not match score "
                f"{result.team1_score}-{result.team2_score}"
            )
        if result.duration_seconds < 0:
            raise ValueError("duration_seconds must be >= 0")

        winner_change = result.point_changes.for_team(winner)
        loser_change = result.point_changes.for_team(2 if winner == 1 else 1)
        if winner_change < 0 or loser_change > 0:
            raise ValueError(
                f"point changes {result.point_changes.as_dict()} do not favour team{winner}"
            )
        if loser_change != -winner_change:
            raise ValueError(
                f"point changes {result.point_changes.as_dict()} must be equal and opposite"
            )
        if winner_change < self.calculator.params.minimum_points_change:
            raise ValueError(
                f"winning team must gain at least {self.calculator.params.minimum_points_change} "
                f"point(s), got {winner_change}"
            )


__all__ = ["MatchCompletionSummary", "MatchCompletionTransaction"]
