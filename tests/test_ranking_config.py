"""Tests for TOML-based ranking config loading."""

from __future__ import annotations

from pathlib import Path

import pytest

from domain.config_base import select_system_config
from domain.ratings.elo.config import load_ranking_configs

ROOT_DIR = Path(__file__).resolve().parents[1]


def test_load_ranking_configs_from_directory(tmp_path: Path) -> None:
    config_path = tmp_path / "default.toml"
    config_path.write_text(
        """
[system]
name = "system_a"
description = "A test system"

[ranking]
default_rating = 1200
rating_floor = 150
scale_factor = 420.0
new_player_k_factor = 40
intermediate_k_factor = 28
experienced_k_factor = 12
new_player_max_games = 20
intermediate_max_games = 80
minimum_points_change = 2
""".strip()
    )

    configs = load_ranking_configs(tmp_path)
    assert len(configs) == 1

    system = configs[0]
    assert system.name == "system_a"
    assert system.description == "A test system"
    assert system.parameters.default_rating == 1200
    assert system.parameters.rating_floor == 150
    assert system.parameters.scale_factor == pytest.approx(420.0)
    assert system.parameters.new_player_k_factor == 40
    assert system.parameters.intermediate_k_factor == 28
    assert system.parameters.experienced_k_factor == 12
    assert system.parameters.new_player_max_games == 20
    assert system.parameters.intermediate_max_games == 80
    assert system.parameters.minimum_points_change == 2
    assert system.as_config_json()["scale_factor"] == pytest.approx(420.0)


def test_missing_values_fall_back_to_defaults(tmp_path: Path) -> None:
    (tmp_path / "minimal.toml").write_text('[system]\nname = "minimal"\n')

    system = load_ranking_configs(tmp_path)[0]
    assert system.description is None
    assert system.parameters.default_rating == 1000
    assert system.parameters.rating_floor == 100
    assert system.parameters.new_player_k_factor == 32


def test_shipped_default_config_matches_built_in_constants() -> None:
    configs = load_ranking_configs(ROOT_DIR / "configs" / "ranking")
    system = select_system_config(configs, None)
    assert system.name == "pickleball_default"
    assert system.parameters.default_rating == 1000
    assert system.parameters.experienced_k_factor == 16


def test_duplicate_names_raise_error(tmp_path: Path) -> None:
    template = '[system]\nname = "dup"\n\n[ranking]\nscale_factor = 400.0\n'
    (tmp_path / "a.toml").write_text(template)
    (tmp_path / "b.toml").write_text(template)

    with pytest.raises(ValueError, match="Duplicate ranking system names"):
        load_ranking_configs(tmp_path)


def test_missing_name_raises_error(tmp_path: Path) -> None:
    (tmp_path / "nameless.toml").write_text("[ranking]\nrating_floor = 100\n")

    with pytest.raises(ValueError, match=r"\[system\].name is required"):
        load_ranking_configs(tmp_path)


@pytest.mark.parametrize(
    ("line", "message"),
    [
        ("rating_floor = 0", "rating_floor must be > 0"),
        ("default_rating = 50", "default_rating must be >= rating_floor"),
        ("scale_factor = 0.0", "scale_factor must be > 0"),
        ("new_player_k_factor = 0", "new_player_k_factor must be > 0"),
        ("intermediate_max_games = 10", "intermediate_max_games must be >= new_player_max_games"),
        ("minimum_points_change = 0", "minimum_points_change must be >= 1"),
    ],
)
def test_invalid_parameters_raise_error(tmp_path: Path, line: str, message: str) -> None:
    (tmp_path / "bad.toml").write_text(f'[system]\nname = "bad"\n\n[ranking]\n{line}\n')

    with pytest.raises(ValueError, match=message):
        load_ranking_configs(tmp_path)


def test_select_system_config_by_name(tmp_path: Path) -> None:
    (tmp_path / "default.toml").write_text('[system]\nname = "base"\n')
    (tmp_path / "aggressive.toml").write_text('[system]\nname = "aggressive"\n\n[ranking]\nnew_player_k_factor = 48\n')
    configs = load_ranking_configs(tmp_path)

    assert select_system_config(configs, None).name == "base"
    assert select_system_config(configs, "aggressive.toml").parameters.new_player_k_factor == 48
    assert select_system_config(configs, "aggressive").name == "aggressive"
    with pytest.raises(ValueError, match="No config named"):
        select_system_config(configs, "missing.toml")


def test_missing_directory_raises(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_ranking_configs(tmp_path / "absent")
