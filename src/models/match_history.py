"""match_history table model."""

from __future__ import annotations

from typing import Any

from sqlalchemy import CheckConstraint, ForeignKey, Index, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from models.base import Base
from models.mixins import DocumentRecordMixin, JSONType


class MatchHistory(DocumentRecordMixin, Base):
    """Immutable per-participant match result (one row per player per match)."""

    __tablename__ = "match_history"
    __table_args__ = (
        UniqueConstraint("match_id", "player_id", name="uq_match_history_match_player"),
        CheckConstraint("result IN ('win', 'loss')", name="ck_match_history_result"),
        CheckConstraint(
            "team1_score >= 0 AND team2_score >= 0",
            name="ck_match_history_scores",
        ),
        CheckConstraint("duration_seconds >= 0", name="ck_match_history_duration"),
        Index("idx_match_history_player_created", "player_id", "created_at"),
        Index("idx_match_history_match", "match_id"),
    )

    match_id: Mapped[str] = mapped_column(ForeignKey("lobbies.id"), nullable=False)
    player_id: Mapped[str] = mapped_column(ForeignKey("players.id"), nullable=False)
    game_type: Mapped[str] = mapped_column(String(16), nullable=False)
    game_category: Mapped[str] = mapped_column(String(32), nullable=False)
    result: Mapped[str] = mapped_column(String(8), nullable=False)
    team1_score: Mapped[int] = mapped_column(Integer, nullable=False)
    team2_score: Mapped[int] = mapped_column(Integer, nullable=False)
    points_change: Mapped[int] = mapped_column(Integer, nullable=False)
    opponent_ids: Mapped[list[str]] = mapped_column(JSONType, nullable=False)
    opponent_names: Mapped[list[str]] = mapped_column(JSONType, nullable=False)
    partner_id: Mapped[str | None] = mapped_column(ForeignKey("players.id"), nullable=True)
    partner_name: Mapped[str | None] = mapped_column(String(128), nullable=True)
    duration_seconds: Mapped[int] = mapped_column(Integer, nullable=False)
    status: Mapped[str] = mapped_column(String(16), nullable=False, default="confirmed")
