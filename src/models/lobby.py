"""lobbies table model."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlalchemy import Boolean, CheckConstraint, DateTime, Enum, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from models.base import Base
from models.mixins import DocumentRecordMixin, JSONType


class Lobby(DocumentRecordMixin, Base):
    """Game lobby keyed by room code; completion fields are filled once."""

    __tablename__ = "lobbies"
    __table_args__ = (
        CheckConstraint("winner IS NULL OR winner IN (1, 2)", name="ck_lobbies_winner"),
        CheckConstraint(
            "team1_final_score IS NULL OR team1_final_score >= 0",
            name="ck_lobbies_team1_final_score",
        ),
        CheckConstraint(
            "team2_final_score IS NULL OR team2_final_score >= 0",
            name="ck_lobbies_team2_final_score",
        ),
    )

    host_id: Mapped[str | None] = mapped_column(String(128), nullable=True)
    game_mode: Mapped[str] = mapped_column(
        Enum("singles", "doubles", name="game_mode", native_enum=False),
        nullable=False,
    )
    team1_players: Mapped[list[dict[str, Any]]] = mapped_column(JSONType, nullable=False)
    team2_players: Mapped[list[dict[str, Any]]] = mapped_column(JSONType, nullable=False)
    game_started_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=False), nullable=True)
    game_completed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    game_completed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=False), nullable=True)
    team1_final_score: Mapped[int | None] = mapped_column(Integer, nullable=True)
    team2_final_score: Mapped[int | None] = mapped_column(Integer, nullable=True)
    winner: Mapped[int | None] = mapped_column(Integer, nullable=True)
    team1_points_change: Mapped[int | None] = mapped_column(Integer, nullable=True)
    team2_points_change: Mapped[int | None] = mapped_column(Integer, nullable=True)
    stakes_json: Mapped[dict[str, Any] | None] = mapped_column(JSONType, nullable=True)
    last_activity: Mapped[datetime | None] = mapped_column(DateTime(timezone=False), nullable=True)
