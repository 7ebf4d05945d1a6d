"""
Configuration Loader
====================

Loads and validates tower_config.yaml, providing typed access to all parameters.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

import yaml

# Catalog geometry the validator checks against (see rock_catalog.py)
MAX_ROCK_WIDTH = 4
MAX_ROCK_HEIGHT = 4

PROFILE_MODES = ("reachable", "rows")


@dataclass(frozen=True)
class ChamberConfig:
    """Chamber geometry and row retention."""
    width: int                 # Columns between the walls
    max_retained_rows: int     # Row store size that triggers a trim
    trim_keep_rows: int        # Rows kept below the top after a trim


@dataclass(frozen=True)
class SpawnConfig:
    """Where new rocks appear."""
    left_offset: int           # Empty columns left of a new rock
    clearance: int             # Empty rows between tower top and a new rock


@dataclass(frozen=True)
class DetectionConfig:
    """Cycle detection parameters."""
    profile: str               # "reachable" or "rows"
    profile_depth: int         # Rows of tower top in each fingerprint


@dataclass(frozen=True)
class RunConfig:
    """Default drop counts to report."""
    targets: Tuple[int, ...]


@dataclass(frozen=True)
class TowerConfig:
    """
    Complete simulation configuration loaded from YAML.

    All values are immutable to prevent accidental modification during runtime.
    """
    chamber: ChamberConfig
    spawn: SpawnConfig
    detection: DetectionConfig
    run: RunConfig

    @property
    def width(self) -> int:
        """Chamber width in columns."""
        return self.chamber.width

    @property
    def full_row_mask(self) -> int:
        """Bitmask with every column of a row set."""
        return (1 << self.chamber.width) - 1


def _validate_config(config: TowerConfig) -> None:
    """Validate configuration consistency."""
    width = config.chamber.width
    if not 4 <= width <= 32:
        raise ValueError(f"chamber.width must be in [4, 32], got {width}")

    # Every rock must fit at the spawn column
    if config.spawn.left_offset < 0:
        raise ValueError(f"spawn.left_offset must be >= 0, got {config.spawn.left_offset}")
    if config.spawn.left_offset + MAX_ROCK_WIDTH > width:
        raise ValueError(
            f"spawn.left_offset ({config.spawn.left_offset}) leaves no room for a "
            f"{MAX_ROCK_WIDTH}-wide rock in a {width}-wide chamber"
        )
    if config.spawn.clearance < 0:
        raise ValueError(f"spawn.clearance must be >= 0, got {config.spawn.clearance}")

    if config.detection.profile not in PROFILE_MODES:
        raise ValueError(
            f"detection.profile must be one of {PROFILE_MODES}, got '{config.detection.profile}'"
        )
    if config.detection.profile_depth < MAX_ROCK_HEIGHT:
        raise ValueError(
            f"detection.profile_depth ({config.detection.profile_depth}) must be at least "
            f"the tallest rock ({MAX_ROCK_HEIGHT})"
        )

    # Trimming must never cut into the fingerprint window
    if config.chamber.trim_keep_rows < config.detection.profile_depth:
        raise ValueError(
            f"chamber.trim_keep_rows ({config.chamber.trim_keep_rows}) must be >= "
            f"detection.profile_depth ({config.detection.profile_depth})"
        )
    if config.chamber.trim_keep_rows >= config.chamber.max_retained_rows:
        raise ValueError(
            f"chamber.trim_keep_rows ({config.chamber.trim_keep_rows}) must be below "
            f"chamber.max_retained_rows ({config.chamber.max_retained_rows})"
        )

    if not config.run.targets:
        raise ValueError("run.targets must list at least one drop count")
    for target in config.run.targets:
        if target <= 0:
            raise ValueError(f"run.targets must be positive, got {target}")


def load_config(config_path: Optional[str] = None) -> TowerConfig:
    """
    Load and validate simulation configuration from YAML.

    Args:
        config_path: Path to tower_config.yaml. If None, uses default location.

    Returns:
        Validated TowerConfig instance.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        ValueError: If config validation fails.
    """
    if config_path is None:
        config_path = os.path.join(
            os.path.dirname(os.path.dirname(__file__)),
            "tower_config.yaml"
        )

    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, "r") as f:
        raw = yaml.safe_load(f)

    chamber_data = raw["chamber"]
    chamber = ChamberConfig(
        width=int(chamber_data["width"]),
        max_retained_rows=int(chamber_data.get("max_retained_rows", 8192)),
        trim_keep_rows=int(chamber_data.get("trim_keep_rows", 2048))
    )

    spawn_data = raw["spawn"]
    spawn = SpawnConfig(
        left_offset=int(spawn_data["left_offset"]),
        clearance=int(spawn_data["clearance"])
    )

    detection_data = raw.get("detection", {})
    detection = DetectionConfig(
        profile=str(detection_data.get("profile", "reachable")),
        profile_depth=int(detection_data.get("profile_depth", 32))
    )

    run_data = raw.get("run", {})
    run = RunConfig(
        targets=tuple(int(t) for t in run_data.get("targets", (2022, 1000000000000)))
    )

    config = TowerConfig(
        chamber=chamber,
        spawn=spawn,
        detection=detection,
        run=run
    )

    _validate_config(config)
    return config


# Module-level singleton for convenience
_cached_config: Optional[TowerConfig] = None


def get_config() -> TowerConfig:
    """Get the cached simulation configuration, loading if necessary."""
    global _cached_config
    if _cached_config is None:
        _cached_config = load_config()
    return _cached_config


def reload_config(config_path: Optional[str] = None) -> TowerConfig:
    """Reload the configuration (useful for testing)."""
    global _cached_config
    _cached_config = load_config(config_path)
    return _cached_config
