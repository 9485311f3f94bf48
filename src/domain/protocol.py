"""Shared protocols and enums for the ranking engine."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Protocol, runtime_checkable

Record = dict[str, Any]


class GameMode(str, Enum):
    """How many players each team fields."""

    SINGLES = "singles"
    DOUBLES = "doubles"

    @property
    def team_size(self) -> int:
        return 1 if self is GameMode.SINGLES else 2


class RankingCategory(str, Enum):
    """Rating bucket a completed match moves."""

    SINGLES = "singles"
    SAME_GENDER_DOUBLES = "sameGenderDoubles"
    MIXED_DOUBLES = "mixedDoubles"

    @property
    def rating_field(self) -> str:
        """Player record field holding this category's rating."""
        return _RATING_FIELDS[self]


_RATING_FIELDS = {
    RankingCategory.SINGLES: "singles_rating",
    RankingCategory.SAME_GENDER_DOUBLES: "same_gender_doubles_rating",
    RankingCategory.MIXED_DOUBLES: "mixed_doubles_rating",
}


class GameCategory(str, Enum):
    """Category recorded on match history rows."""

    SINGLES = "singles"
    SAME_GENDER_DOUBLES = "same_gender_doubles"
    MIXED_DOUBLES = "mixed_doubles"

    @property
    def ranking_category(self) -> RankingCategory:
        if self is GameCategory.SINGLES:
            return RankingCategory.SINGLES
        if self is GameCategory.SAME_GENDER_DOUBLES:
            return RankingCategory.SAME_GENDER_DOUBLES
        return RankingCategory.MIXED_DOUBLES


class Collection(str, Enum):
    """Document collections the completion transaction touches."""

    PLAYERS = "players"
    MATCH_HISTORY = "matchHistory"
    LOBBIES = "lobbies"


class MutationOp(str, Enum):
    SET = "set"
    UPDATE = "update"


@dataclass(frozen=True)
class RecordMutation:
    """One write inside an atomic batch.

    ``expected_version`` turns an update into a conditional write: the batch
    fails unless the stored record still carries that version.
    """

    collection: Collection
    record_id: str
    op: MutationOp
    fields: Record = field(default_factory=dict)
    expected_version: int | None = None


@runtime_checkable
class DocumentStore(Protocol):
    """Keyed reads plus all-or-nothing multi-record commits."""

    def read_record(self, collection: Collection, record_id: str) -> Record | None: ...

    def commit_batch(self, mutations: Sequence[RecordMutation]) -> None: ...


__all__ = [
    "Collection",
    "DocumentStore",
    "GameCategory",
    "GameMode",
    "MutationOp",
    "RankingCategory",
    "Record",
    "RecordMutation",
]
