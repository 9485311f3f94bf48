"""players table model."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from models.base import Base
from models.mixins import DocumentRecordMixin


class Player(DocumentRecordMixin, Base):
    """Per-player rankings (one column per category) and match counters."""

    __tablename__ = "players"
    __table_args__ = (
        CheckConstraint("singles_rating >= 100", name="ck_players_singles_rating_floor"),
        CheckConstraint(
            "same_gender_doubles_rating >= 100",
            name="ck_players_same_gender_doubles_rating_floor",
        ),
        CheckConstraint(
            "mixed_doubles_rating >= 100",
            name="ck_players_mixed_doubles_rating_floor",
        ),
        CheckConstraint(
            "wins >= 0 AND losses >= 0 AND total_matches = wins + losses",
            name="ck_players_match_counters",
        ),
        Index("idx_players_singles_rating", "singles_rating"),
        Index("idx_players_same_gender_doubles_rating", "same_gender_doubles_rating"),
        Index("idx_players_mixed_doubles_rating", "mixed_doubles_rating"),
    )

    display_name: Mapped[str] = mapped_column(String(128), nullable=False)
    gender: Mapped[str | None] = mapped_column(String(16), nullable=True)
    singles_rating: Mapped[int] = mapped_column(Integer, nullable=False, default=1000)
    same_gender_doubles_rating: Mapped[int] = mapped_column(Integer, nullable=False, default=1000)
    mixed_doubles_rating: Mapped[int] = mapped_column(Integer, nullable=False, default=1000)
    wins: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    losses: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    total_matches: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    last_match_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=False), nullable=True)
