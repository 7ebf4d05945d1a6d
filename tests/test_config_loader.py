"""
Tests for configuration loading and validation.
"""

import pytest
import yaml

from rockfall.tower_core.config_loader import (
    get_config,
    load_config,
    reload_config,
)


def _base_raw():
    return {
        "chamber": {"width": 7, "max_retained_rows": 8192, "trim_keep_rows": 2048},
        "spawn": {"left_offset": 2, "clearance": 3},
        "detection": {"profile": "reachable", "profile_depth": 32},
        "run": {"targets": [2022, 1000000000000]},
    }


def _write(tmp_path, raw):
    path = tmp_path / "tower_config.yaml"
    path.write_text(yaml.safe_dump(raw))
    return str(path)


class TestDefaults:
    """Test the shipped configuration."""

    def test_default_values(self, config):
        """Default config describes the standard 7-wide chamber."""
        assert config.width == 7
        assert config.full_row_mask == 0b1111111
        assert config.spawn.left_offset == 2
        assert config.spawn.clearance == 3
        assert config.detection.profile == "reachable"
        assert config.detection.profile_depth == 32
        assert config.run.targets == (2022, 1000000000000)

    def test_singleton(self):
        """get_config caches one instance."""
        assert get_config() is get_config()

    def test_reload_from_path(self, tmp_path):
        """reload_config replaces the cached instance."""
        raw = _base_raw()
        raw["run"]["targets"] = [10]
        try:
            config = reload_config(_write(tmp_path, raw))
            assert get_config() is config
            assert config.run.targets == (10,)
        finally:
            reload_config()

    def test_optional_sections(self, tmp_path):
        """detection and run fall back to their defaults."""
        raw = _base_raw()
        del raw["detection"]
        del raw["run"]
        config = load_config(_write(tmp_path, raw))
        assert config.detection.profile_depth == 32
        assert config.run.targets == (2022, 1000000000000)


class TestValidation:
    """Test rejection of inconsistent configuration."""

    def test_missing_file(self, tmp_path):
        """Missing config file is reported."""
        with pytest.raises(FileNotFoundError):
            load_config(str(tmp_path / "missing.yaml"))

    @pytest.mark.parametrize("section,key,value", [
        ("chamber", "width", 3),
        ("chamber", "width", 33),
        ("spawn", "left_offset", -1),
        ("spawn", "left_offset", 4),
        ("spawn", "clearance", -1),
        ("detection", "profile", "columns"),
        ("detection", "profile_depth", 3),
        ("chamber", "trim_keep_rows", 16),
        ("chamber", "trim_keep_rows", 8192),
        ("run", "targets", []),
        ("run", "targets", [2022, 0]),
    ])
    def test_invalid_values(self, tmp_path, section, key, value):
        """Each inconsistent setting raises ValueError."""
        raw = _base_raw()
        raw[section][key] = value
        with pytest.raises(ValueError):
            load_config(_write(tmp_path, raw))

    def test_wider_chamber_accepted(self, tmp_path):
        """Other widths are fine as long as a rock fits at the spawn column."""
        raw = _base_raw()
        raw["chamber"]["width"] = 9
        raw["spawn"]["left_offset"] = 5
        config = load_config(_write(tmp_path, raw))
        assert config.full_row_mask == 0b111111111
