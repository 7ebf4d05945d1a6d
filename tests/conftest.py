"""
Shared fixtures.
"""

import pytest

from rockfall.tower_core.config_loader import load_config
from rockfall.tower_core.jet_pattern import JetPattern

EXAMPLE_JETS = ">>><<><>><<<>><>>><<<>>><<<><<<>><>><<>>"


@pytest.fixture
def config():
    return load_config()


@pytest.fixture
def example_jets():
    return JetPattern.parse(EXAMPLE_JETS)
