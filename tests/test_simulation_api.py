"""
Tests for the TowerSimulation API, snapshots and stop rules.
"""

from dataclasses import replace

import numpy as np
import pytest

from rockfall.tower_core.config_loader import ChamberConfig
from rockfall.tower_core.rock_catalog import RockKind
from rockfall.tower_core.rules import DropLimit, FirstOf, HeightLimit, TerminationResult
from rockfall.tower_core.simulation import TowerSimulation

# Tower after ten rocks of the example pattern, bottom row first
TEN_ROCK_LAYOUT = [
    "..####.",
    "...#...",
    "..###..",
    "#####..",
    "..#.#..",
    "..#.#..",
    "....#..",
    "....##.",
    "....##.",
    ".####..",
    "..#....",
    ".###...",
    "######.",
    "##..##.",
    "....##.",
    "....#..",
    "....#..",
]


@pytest.fixture
def sim(config, example_jets):
    return TowerSimulation(example_jets, config=config)


class TestStepping:
    """Test drop-by-drop behaviour."""

    def test_initial_state(self, sim):
        """Fresh simulation: nothing dropped, first rock is the flat line."""
        assert sim.height == 0
        assert sim.drops_used == 0
        assert sim.wind_pointer == 0
        assert sim.current_rock.kind == RockKind.HLINE

    def test_accepts_pattern_text(self, config, example_jets):
        """The jet pattern may be given as text."""
        sim = TowerSimulation(str(example_jets) + "\n", config=config)
        assert len(sim.jets) == 40

    def test_first_ten_heights(self, sim):
        """Heights after each of the first ten example rocks."""
        heights = [sim.step().height for _ in range(10)]
        assert heights == [1, 4, 6, 7, 9, 10, 13, 15, 17, 17]

    def test_ten_rock_layout(self, sim):
        """Cell-exact tower after ten example rocks."""
        sim.run(10)
        expected = np.array([[c == "#" for c in row] for row in TEN_ROCK_LAYOUT])
        np.testing.assert_array_equal(sim.chamber.to_array(), expected)

    def test_step_result(self, sim):
        """StepResult reports the drop and new totals."""
        result = sim.step()
        assert result.drops_used == 1
        assert result.height == 1
        assert result.drop.kind == RockKind.HLINE
        assert result.trimmed_rows == 0
        assert sim.wind_pointer == result.drop.wind_pointer

    def test_heights_are_monotonic(self, sim):
        """Height after N+1 drops is never below height after N drops."""
        previous = 0
        for _ in range(500):
            height = sim.step().height
            assert height >= previous
            previous = height

    def test_example_2022(self, sim):
        """Direct simulation of 2022 example rocks reaches 3068."""
        assert sim.run(2022) == 3068

    def test_reset(self, sim):
        """Reset returns to the empty chamber and the start of the pattern."""
        sim.run(20)
        sim.reset()
        assert sim.height == 0
        assert sim.drops_used == 0
        assert sim.wind_pointer == 0
        assert sim.run(10) == 17

    def test_deterministic(self, config, example_jets):
        """Two runs with the same input give identical towers."""
        a = TowerSimulation(example_jets, config=config)
        b = TowerSimulation(example_jets, config=config)
        a.run(300)
        b.run(300)
        assert a.height == b.height
        assert a.wind_pointer == b.wind_pointer
        np.testing.assert_array_equal(a.chamber.to_array(), b.chamber.to_array())

    def test_get_info(self, sim):
        """get_info summarises the state."""
        sim.run(3)
        info = sim.get_info()
        assert info["drops_used"] == 3
        assert info["height"] == 6
        assert info["next_rock"] == "vline"
        assert info["jet_count"] == 40


class TestTrimming:
    """Test automatic row trimming during long runs."""

    def test_trim_does_not_change_heights(self, config, example_jets):
        """Aggressive trimming leaves every height unchanged."""
        tight = replace(config, chamber=ChamberConfig(
            width=7, max_retained_rows=96, trim_keep_rows=48
        ))
        trimmed = TowerSimulation(example_jets, config=tight)
        full = TowerSimulation(example_jets, config=config)

        trims = 0
        for _ in range(1000):
            trims += trimmed.step().trimmed_rows
            full.step()
            assert trimmed.height == full.height

        assert trims > 0
        assert trimmed.chamber.retained_rows <= 96


class TestSnapshots:
    """Test snapshot capture and replay."""

    def test_snapshot_is_frozen(self, sim):
        """Later drops don't alter an earlier snapshot."""
        sim.run(30)
        snap = sim.snapshot()
        height = snap.height
        sim.run(30)
        assert snap.height == height
        assert snap.chamber.height == height
        assert snap.drops_used == 30

    def test_resume_matches_continuous_run(self, sim, config):
        """Resuming from a snapshot reproduces the continuous run."""
        sim.run(50)
        snap = sim.snapshot()
        sim.run(70)

        resumed = TowerSimulation.from_snapshot(snap, config=config)
        resumed.run(70)
        assert resumed.height == sim.height
        assert resumed.wind_pointer == sim.wind_pointer
        assert resumed.drops_used == sim.drops_used

    def test_snapshot_replayable_twice(self, sim, config):
        """Replaying does not consume the snapshot."""
        sim.run(25)
        snap = sim.snapshot()
        first = TowerSimulation.from_snapshot(snap, config=config).run(40)
        second = TowerSimulation.from_snapshot(snap, config=config).run(40)
        assert first == second
        assert snap.height == sim.height

    def test_obs_dict(self, sim, config):
        """Snapshot observations have fixed shapes."""
        sim.run(40)
        obs = sim.snapshot().to_obs_dict()
        depth = config.detection.profile_depth

        assert obs["height"].dtype == np.int64
        assert int(obs["drops_used"]) == 40
        assert int(obs["rock_index"]) == 0
        assert obs["top_rows"].shape == (depth, 7)
        assert obs["top_rows"].dtype == bool
        assert obs["column_depths"].shape == (7,)
        # Some column reaches the top row
        assert obs["top_rows"][0].any()
        assert obs["column_depths"].min() == 0

    def test_obs_dict_pads_short_tower(self, sim):
        """A tower shorter than the window is zero-padded at the bottom."""
        sim.run(1)
        obs = sim.snapshot().to_obs_dict(depth=4)
        assert obs["top_rows"].shape == (4, 7)
        assert obs["top_rows"][0].tolist() == [False, False, True, True, True, True, False]
        assert not obs["top_rows"][1:].any()


class TestStopRules:
    """Test pluggable termination."""

    def test_drop_limit_zero(self, sim):
        """A zero drop limit stops before any drop."""
        result = sim.run_until(DropLimit(0))
        assert result.stop
        assert result.reason == "drop_limit"
        assert sim.drops_used == 0

    def test_drop_limit(self, sim):
        """DropLimit stops at exactly N drops."""
        sim.run_until(DropLimit(10))
        assert sim.drops_used == 10
        assert sim.height == 17

    def test_negative_drop_limit(self):
        """Negative limits are rejected."""
        with pytest.raises(ValueError):
            DropLimit(-1)

    def test_height_limit(self, sim):
        """HeightLimit stops at the first drop reaching the height."""
        result = sim.run_until(HeightLimit(9))
        assert result.reason == "height_limit"
        assert sim.drops_used == 5
        assert sim.height == 9

    def test_first_of_order(self, sim):
        """FirstOf reports the first rule that fires."""
        result = sim.run_until(FirstOf(DropLimit(5), HeightLimit(9)))
        assert result.reason == "drop_limit"
        assert sim.drops_used == 5

    def test_plain_callable_rule(self, sim):
        """Any callable returning a TerminationResult works as a rule."""
        pointers = []

        def until_wrapped(s):
            if pointers and s.wind_pointer < pointers[-1]:
                return TerminationResult.halt("wrapped")
            pointers.append(s.wind_pointer)
            return TerminationResult.none()

        result = sim.run_until(until_wrapped)
        assert result.reason == "wrapped"
        assert sim.drops_used > 1
