"""
Tests for single-rock descent and settle logic.
"""

import pytest

from rockfall.tower_core.chamber import Chamber
from rockfall.tower_core.config_loader import SpawnConfig
from rockfall.tower_core.errors import SimulationInvariantError
from rockfall.tower_core.jet_pattern import JetPattern
from rockfall.tower_core.rock_catalog import RockCatalog, RockKind
from rockfall.tower_core.rock_stepper import drop_rock, spawn_position


@pytest.fixture
def catalog():
    return RockCatalog()


@pytest.fixture
def chamber(config):
    return Chamber(config)


class TestSpawn:
    """Test the spawn rule."""

    def test_spawn_above_tower(self, chamber, config, catalog):
        """Rocks appear two columns from the left wall, three rows above the top."""
        assert spawn_position(chamber, config.spawn) == (3, 2)
        chamber.settle(catalog[RockKind.VLINE], 0, 0)
        assert spawn_position(chamber, config.spawn) == (7, 2)

    def test_blocked_spawn_is_fatal(self, chamber, catalog, example_jets):
        """Spawning into settled material is an invariant failure."""
        hline = catalog[RockKind.HLINE]
        chamber.settle(hline, 0, 2)
        overlapping = SpawnConfig(left_offset=2, clearance=-1)

        with pytest.raises(SimulationInvariantError):
            drop_rock(chamber, hline, example_jets, 0, overlapping)


class TestDescent:
    """Test push/fall alternation."""

    def test_first_example_rock(self, chamber, config, catalog, example_jets):
        """First rock of the example pattern: >>> then <, resting at col 2."""
        result = drop_rock(chamber, catalog[RockKind.HLINE], example_jets, 0, config.spawn)

        assert result.kind == RockKind.HLINE
        assert (result.row, result.col) == (0, 2)
        assert result.pushes == 4
        assert result.moved_sideways == 2
        assert result.falls == 3
        assert result.wind_pointer == 4
        assert result.height_gain == 1
        assert chamber.row_mask(0) == 0b0111100

    def test_push_into_wall_still_consumes_jet(self, chamber, config, catalog):
        """The wind pointer advances even when the push is blocked."""
        jets = JetPattern.parse(">>>>>>>>")
        result = drop_rock(chamber, catalog[RockKind.HLINE], jets, 0, config.spawn)

        # Only one push can move a 4-wide rock from col 2 to the right wall
        assert result.col == 3
        assert result.moved_sideways == 1
        assert result.pushes == 4
        assert result.wind_pointer == 4

    def test_wind_pointer_wraps(self, chamber, config, catalog):
        """The returned pointer is modulo the pattern length."""
        jets = JetPattern.parse("<>>")
        result = drop_rock(chamber, catalog[RockKind.SQUARE], jets, 2, config.spawn)
        assert result.wind_pointer == (2 + result.pushes) % 3

    def test_rock_rests_on_settled_material(self, chamber, config, catalog):
        """A rock stops on top of earlier rocks, not on the floor."""
        jets = JetPattern.parse("<")
        vline = catalog[RockKind.VLINE]
        first = drop_rock(chamber, vline, jets, 0, config.spawn)
        assert (first.row, first.col) == (0, 0)

        second = drop_rock(chamber, vline, jets, first.wind_pointer, config.spawn)
        assert (second.row, second.col) == (4, 0)
        assert chamber.height == 8

    def test_left_wind_pins_rock_to_wall(self, chamber, config, catalog):
        """A steady left jet carries the rock against the left wall."""
        jets = JetPattern.parse("<")
        square = catalog[RockKind.SQUARE]
        drop_rock(chamber, square, jets, 0, config.spawn)
        for col in range(7):
            assert chamber.is_occupied(0, col) == (col in (0, 1))

    def test_single_jet_drop_terminates(self, chamber, config, catalog):
        """A length-1 pattern still lets every rock settle."""
        jets = JetPattern.parse(">")
        pointer = 0
        for i in range(20):
            result = drop_rock(chamber, catalog.shape_for(i), jets, pointer, config.spawn)
            pointer = result.wind_pointer
            assert pointer == 0
        assert chamber.height > 0
