"""Directory-of-TOML loading shared by ranking parameter configs."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, TypeVar
import tomllib


@dataclass(frozen=True)
class BaseSystemConfig:
    """Minimal metadata shared across all ranking-system configs."""

    name: str
    description: str | None
    file_path: Path

    def as_config_json(self) -> dict[str, Any]:
        raise NotImplementedError


T = TypeVar("T", bound=BaseSystemConfig)


def load_system_configs(
    config_dir: Path,
    parser: Callable[[dict[str, Any], Path], T],
    *,
    duplicate_name_label: str = "ranking",
) -> list[T]:
    """Parse every ``*.toml`` file in ``config_dir`` with ``parser``.

    Each file describes one ranking parameter set: a ``[system]`` table with
    its name and description, and a ``[ranking]`` table of tunables (K-factor
    tiers, scale factor, default rating, rating floor, minimum gain). Files
    load in name order and system names must be unique across the directory.
    """
    if not config_dir.exists():
        raise FileNotFoundError(f"Config directory not found: {config_dir}")
    if not config_dir.is_dir():
        raise NotADirectoryError(f"Config path is not a directory: {config_dir}")

    config_files = sorted(config_dir.glob("*.toml"))
    if not config_files:
        raise ValueError(f"No .toml config files found in: {config_dir}")

    systems: list[T] = []
    for file_path in config_files:
        with file_path.open("rb") as file:
            raw = tomllib.load(file)
        systems.append(parser(raw, file_path))

    names = [system.name for system in systems]
    if len(names) != len(set(names)):
        raise ValueError(
            f"Duplicate {duplicate_name_label} system names found in {config_dir}: {names}"
        )

    return systems


def select_system_config(configs: list[T], config_name: str | None) -> T:
    """Pick one config by file name, or the only/``default.toml`` one when unnamed."""
    if config_name is not None:
        for config in configs:
            if config.file_path.name == config_name or config.name == config_name:
                return config
        raise ValueError(f"No config named '{config_name}'")

    if len(configs) == 1:
        return configs[0]
    for config in configs:
        if config.file_path.name == "default.toml":
            return config
    raise ValueError("Several configs found; pass a config name to choose one")


__all__ = ["BaseSystemConfig", "load_system_configs", "select_system_config"]
