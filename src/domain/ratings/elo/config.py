"""Load ranking system definitions from TOML files."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

from domain.config_base import BaseSystemConfig, load_system_configs
from domain.ratings.elo.calculator import RankingParameters


@dataclass(frozen=True)
class RankingSystemConfig(BaseSystemConfig):
    """Configuration for one ranking parameter set."""

    parameters: RankingParameters

    def as_config_json(self) -> dict[str, Any]:
        return {
            "default_rating": self.parameters.default_rating,
            "rating_floor": self.parameters.rating_floor,
            "scale_factor": self.parameters.scale_factor,
            "new_player_k_factor": self.parameters.new_player_k_factor,
            "intermediate_k_factor": self.parameters.intermediate_k_factor,
            "experienced_k_factor": self.parameters.experienced_k_factor,
            "new_player_max_games": self.parameters.new_player_max_games,
            "intermediate_max_games": self.parameters.intermediate_max_games,
            "minimum_points_change": self.parameters.minimum_points_change,
        }


def load_ranking_configs(config_dir: Path) -> list[RankingSystemConfig]:
    """Load and validate all ranking TOML config files in a directory."""
    return load_system_configs(
        config_dir,
        _parse_ranking_config,
        duplicate_name_label="ranking",
    )


def _parse_ranking_config(raw: dict[str, Any], file_path: Path) -> RankingSystemConfig:
    system_raw = raw.get("system", {})
    ranking_raw = raw.get("ranking", {})

    name = str(system_raw.get("name", "")).strip()
    if not name:
        raise ValueError(f"{file_path}: [system].name is required")

    description_value = system_raw.get("description")
    description = None if description_value is None else str(description_value)

    parameters = RankingParameters(
        default_rating=int(ranking_raw.get("default_rating", 1000)),
        rating_floor=int(ranking_raw.get("rating_floor", 100)),
        scale_factor=float(ranking_raw.get("scale_factor", 400.0)),
        new_player_k_factor=int(ranking_raw.get("new_player_k_factor", 32)),
        intermediate_k_factor=int(ranking_raw.get("intermediate_k_factor", 24)),
        experienced_k_factor=int(ranking_raw.get("experienced_k_factor", 16)),
        new_player_max_games=int(ranking_raw.get("new_player_max_games", 30)),
        intermediate_max_games=int(ranking_raw.get("intermediate_max_games", 100)),
        minimum_points_change=int(ranking_raw.get("minimum_points_change", 1)),
    )
    _validate_parameters(file_path=file_path, parameters=parameters)

    return RankingSystemConfig(
        name=name,
        description=description,
        file_path=file_path,
        parameters=parameters,
    )


def _validate_parameters(*, file_path: Path, parameters: RankingParameters) -> None:
    if parameters.rating_floor <= 0:
        raise ValueError(f"{file_path}: [ranking].rating_floor must be > 0")
    if parameters.default_rating < parameters.rating_floor:
        raise ValueError(f"{file_path}: [ranking].default_rating must be >= rating_floor")
    if parameters.scale_factor <= 0.0:
        raise ValueError(f"{file_path}: [ranking].scale_factor must be > 0")
    if parameters.new_player_k_factor <= 0:
        raise ValueError(f"{file_path}: [ranking].new_player_k_factor must be > 0")
    if parameters.intermediate_k_factor <= 0:
        raise ValueError(f"{file_path}: [ranking].intermediate_k_factor must be > 0")
    if parameters.experienced_k_factor <= 0:
        raise ValueError(f"{file_path}: [ranking].experienced_k_factor must be > 0")
    if parameters.new_player_max_games < 0:
        raise ValueError(f"{file_path}: [ranking].new_player_max_games must be >= 0")
    if parameters.intermediate_max_games < parameters.new_player_max_games:
        raise ValueError(
            f"{file_path}: [ranking].intermediate_max_games must be >= new_player_max_games"
        )
    if parameters.minimum_points_change < 1:
        raise ValueError(f"{file_path}: [ranking].minimum_points_change must be >= 1")
