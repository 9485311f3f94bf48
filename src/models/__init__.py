"""ORM models."""

from models.base import Base
from models.lobby import Lobby
from models.match_history import MatchHistory
from models.player import Player

__all__ = [
    "Base",
    "Lobby",
    "MatchHistory",
    "Player",
]
