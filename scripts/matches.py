#!/usr/bin/env python3
"""Score validation, stakes preview, and match completion commands."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Annotated

import typer

ROOT_DIR = Path(__file__).resolve().parents[1]
SRC_DIR = ROOT_DIR / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from db import DEFAULT_DB_URL, create_db_engine, create_session_factory
from domain.common import Lobby, LobbyPlayer, LobbyTeam
from domain.config_base import select_system_config
from domain.errors import RankingError, RecordNotFoundError
from domain.matches import MatchCompletionTransaction, calculate_game_duration
from domain.protocol import Collection, GameMode
from domain.ratings.elo.calculator import RankingParameters
from domain.ratings.elo.config import load_ranking_configs
from domain.scoring import determine_winner, get_valid_score_range, is_valid_pickleball_score
from repositories import SqlDocumentStore, create_document_store, upsert_lobby, upsert_player

DEFAULT_CONFIG_DIR = ROOT_DIR / "configs" / "ranking"

DbUrlOption = Annotated[
    str,
    typer.Option("--db-url", help="Database URL. Defaults to the local postgres instance."),
]
ConfigDirOption = Annotated[
    Path,
    typer.Option("--config-dir", help="Directory of ranking TOML configs."),
]
ConfigNameOption = Annotated[
    str | None,
    typer.Option("--config-name", help="Config file or system name (for example: default.toml)."),
]

app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    help="Pickleball match scoring and ranking commands.",
)


@app.callback()
def main(
    log_level: Annotated[
        str,
        typer.Option("--log-level", help="Logging level (DEBUG, INFO, WARNING, ERROR)."),
    ] = "WARNING",
) -> None:
    logging.basicConfig(
        level=getattr(logging, log_level.upper(), logging.WARNING),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def _load_parameters(config_dir: Path, config_name: str | None) -> RankingParameters:
    try:
        config = select_system_config(load_ranking_configs(config_dir), config_name)
    except (OSError, ValueError) as exc:
        raise typer.BadParameter(str(exc), param_hint="--config-name") from exc
    return config.parameters


def _open_store(db_url: str) -> SqlDocumentStore:
    engine = create_db_engine(db_url)
    store = create_document_store(create_session_factory(engine))
    store.ensure_schema(engine)
    return store


def _read_lobby(store: SqlDocumentStore, room_code: str) -> Lobby:
    record = store.read_record(Collection.LOBBIES, room_code)
    if record is None:
        raise RecordNotFoundError(Collection.LOBBIES.value, room_code)
    return Lobby.from_record(record)


def _split_ids(raw: str) -> list[str]:
    return [value.strip() for value in raw.split(",") if value.strip()]


@app.command("init-db")
def init_db(db_url: DbUrlOption = DEFAULT_DB_URL) -> None:
    """Create the players, lobbies, and match_history tables."""
    _open_store(db_url)
    typer.echo("schema ready")


@app.command("add-player")
def add_player(
    player_id: Annotated[str, typer.Argument(help="Player id.")],
    display_name: Annotated[str, typer.Option("--name", help="Display name.")],
    gender: Annotated[str | None, typer.Option("--gender", help="male or female.")] = None,
    db_url: DbUrlOption = DEFAULT_DB_URL,
    config_dir: ConfigDirOption = DEFAULT_CONFIG_DIR,
    config_name: ConfigNameOption = None,
) -> None:
    """Create a player at the default rating, or update their name."""
    params = _load_parameters(config_dir, config_name)
    store = _open_store(db_url)
    with store.session_factory.begin() as session:
        player = upsert_player(
            session,
            player_id=player_id,
            display_name=display_name,
            gender=gender,
            params=params,
        )
        typer.echo(f"player={player.id} name={player.display_name} version={player.version}")


@app.command("create-lobby")
def create_lobby(
    room_code: Annotated[str, typer.Argument(help="Lobby room code.")],
    team1: Annotated[str, typer.Option("--team1", help="Comma-separated player ids.")],
    team2: Annotated[str, typer.Option("--team2", help="Comma-separated player ids.")],
    mode: Annotated[GameMode, typer.Option("--mode", help="singles or doubles.")] = GameMode.SINGLES,
    db_url: DbUrlOption = DEFAULT_DB_URL,
) -> None:
    """Open a lobby with fixed rosters."""
    store = _open_store(db_url)

    def roster(raw: str) -> LobbyTeam:
        players = []
        for player_id in _split_ids(raw):
            record = store.read_record(Collection.PLAYERS, player_id)
            if record is None:
                raise typer.BadParameter(f"unknown player '{player_id}'")
            players.append(LobbyPlayer(uid=player_id, display_name=record["display_name"]))
        if len(players) > 2:
            raise typer.BadParameter("a team has at most 2 players")
        return LobbyTeam(*players)

    lobby = Lobby(room_code=room_code, game_mode=mode, team1=roster(team1), team2=roster(team2))
    try:
        with store.session_factory.begin() as session:
            upsert_lobby(session, lobby)
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc
    typer.echo(
        f"lobby={room_code} mode={mode.value} "
        f"team1={','.join(lobby.team1.player_ids)} team2={','.join(lobby.team2.player_ids)}"
    )


@app.command("score-range")
def score_range(
    other_team_score: Annotated[int, typer.Argument(min=0, help="The other team's score.")],
) -> None:
    """Show the scores one team may hold given the other team's score."""
    valid_range = get_valid_score_range(other_team_score)
    typer.echo(f"min={valid_range.min} max={valid_range.max} ({valid_range.explanation})")


@app.command("validate-score")
def validate_score(
    team1_score: Annotated[int, typer.Argument(min=0)],
    team2_score: Annotated[int, typer.Argument(min=0)],
) -> None:
    """Check a final score pair against first-to-11, win-by-2."""
    validation = is_valid_pickleball_score(team1_score, team2_score)
    if validation.valid:
        typer.echo(f"valid winner=team{determine_winner(team1_score, team2_score)}")
        return
    typer.echo(f"invalid: {validation.error}", err=True)
    raise typer.Exit(code=1)


@app.command("stakes")
def stakes(
    room_code: Annotated[str, typer.Argument(help="Lobby room code.")],
    db_url: DbUrlOption = DEFAULT_DB_URL,
    config_dir: ConfigDirOption = DEFAULT_CONFIG_DIR,
    config_name: ConfigNameOption = None,
) -> None:
    """Preview points won or lost by each team."""
    params = _load_parameters(config_dir, config_name)
    store = _open_store(db_url)
    transaction = MatchCompletionTransaction(store, params=params)
    try:
        preview = transaction.preview_stakes(_read_lobby(store, room_code))
    except (RankingError, ValueError) as exc:
        typer.echo(f"error: {exc}", err=True)
        raise typer.Exit(code=1) from exc

    typer.echo(
        f"team1 avg={preview.team1_average} win=+{preview.team1_win} loss=-{preview.team1_loss}\n"
        f"team2 avg={preview.team2_average} win=+{preview.team2_win} loss=-{preview.team2_loss}"
    )


@app.command("complete")
def complete(
    room_code: Annotated[str, typer.Argument(help="Lobby room code.")],
    team1_score: Annotated[int, typer.Argument(min=0)],
    team2_score: Annotated[int, typer.Argument(min=0)],
    duration: Annotated[
        int | None,
        typer.Option("--duration", min=0, help="Game length in seconds; defaults to time since start."),
    ] = None,
    db_url: DbUrlOption = DEFAULT_DB_URL,
    config_dir: ConfigDirOption = DEFAULT_CONFIG_DIR,
    config_name: ConfigNameOption = None,
) -> None:
    """Record a finished game and move every participant's rating."""
    params = _load_parameters(config_dir, config_name)
    store = _open_store(db_url)
    transaction = MatchCompletionTransaction(store, params=params)

    try:
        lobby = _read_lobby(store, room_code)
        if duration is None:
            duration = (
                calculate_game_duration(lobby.game_started_at)
                if lobby.game_started_at is not None
                else 0
            )
        result = transaction.prepare_result(lobby, team1_score, team2_score, duration)
        summary = transaction.complete_match(lobby, result)
    except (RankingError, ValueError) as exc:
        typer.echo(f"failed to save match result, please retry: {exc}", err=True)
        raise typer.Exit(code=1) from exc

    typer.echo(
        f"completed match={summary.match_id} category={summary.game_category.value} "
        f"score={team1_score}-{team2_score} winner=team{result.winner}"
    )
    for record in summary.history_records:
        typer.echo(
            f"  {record.player_id}: {record.result} {record.points_change:+d} "
            f"-> {summary.new_ratings[record.player_id]}"
        )


if __name__ == "__main__":
    app()
