#!/usr/bin/env python3
"""Show the top players for a ranking category, or one player's recent matches."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Annotated

import typer

ROOT_DIR = Path(__file__).resolve().parents[1]
SRC_DIR = ROOT_DIR / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from db import DEFAULT_DB_URL, create_db_engine, create_session_factory
from domain.protocol import RankingCategory
from repositories import count_completed_matches, fetch_leaderboard, fetch_match_history

app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    help="Query leaderboards and match history.",
)


@app.command("top")
def show_top(
    category: Annotated[
        RankingCategory,
        typer.Option("--category", help="Ranking category."),
    ] = RankingCategory.SINGLES,
    limit: Annotated[int, typer.Option("--limit", min=1, help="Rows to show.")] = 20,
    min_matches: Annotated[
        int,
        typer.Option("--min-matches", min=0, help="Hide players with fewer completed matches."),
    ] = 0,
    db_url: Annotated[str, typer.Option("--db-url", help="Database URL.")] = DEFAULT_DB_URL,
) -> None:
    """Print the leaderboard for one category."""
    session_factory = create_session_factory(create_db_engine(db_url))
    with session_factory() as session:
        rows = fetch_leaderboard(session, category, limit=limit, min_matches=min_matches)
        completed = count_completed_matches(session)

    typer.echo(f"category={category.value} completed_matches={completed} shown={len(rows)}")
    for row in rows:
        typer.echo(
            f"{row.rank:>3}. {row.display_name:<24} {row.rating:>5} "
            f"W{row.wins}-L{row.losses} ({row.total_matches} played)"
        )


@app.command("history")
def show_history(
    player_id: Annotated[str, typer.Argument(help="Player id.")],
    limit: Annotated[int, typer.Option("--limit", min=1, help="Rows to show.")] = 20,
    db_url: Annotated[str, typer.Option("--db-url", help="Database URL.")] = DEFAULT_DB_URL,
) -> None:
    """Print a player's most recent matches, newest first."""
    session_factory = create_session_factory(create_db_engine(db_url))
    with session_factory() as session:
        records = fetch_match_history(session, player_id, limit=limit)

    if not records:
        typer.echo(f"no matches for player={player_id}")
        return

    for record in records:
        partner = f" with {record.partner_name}" if record.partner_name else ""
        typer.echo(
            f"{record.created_at:%Y-%m-%d %H:%M} {record.game_category:<20} "
            f"{record.result:<4} {record.team1_score}-{record.team2_score} "
            f"{record.points_change:+d} vs {', '.join(record.opponent_names)}{partner}"
        )


if __name__ == "__main__":
    app()
