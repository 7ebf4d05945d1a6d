"""
Extrapolator
============

Computes tower heights for drop counts far beyond what can be simulated.

The tower settles into a repeating pattern: after ``start_drops`` rocks,
every further ``cycle_length`` rocks add exactly ``cycle_height`` rows. The
height for a target count is the height at the cycle start, plus the whole
cycles, plus whatever the leftover rocks add when replayed from a snapshot of
the repeated state.
"""

from __future__ import annotations

from typing import Iterable, Optional, Tuple, Union

from rockfall.tower_core.config_loader import TowerConfig, get_config
from rockfall.tower_core.cycle_detector import CycleDetector, CycleInfo
from rockfall.tower_core.jet_pattern import JetPattern
from rockfall.tower_core.rules import CycleWatch, DropLimit, FirstOf
from rockfall.tower_core.simulation import TowerSimulation

Jets = Union[JetPattern, str]


def simulate_height(
    jets: Jets,
    drops: int,
    config: Optional[TowerConfig] = None
) -> int:
    """Tower height after ``drops`` rocks, by dropping every one of them."""
    simulation = TowerSimulation(jets, config=config)
    return simulation.run(drops)


def extrapolate_height(
    cycle: CycleInfo,
    target: int,
    config: Optional[TowerConfig] = None,
    debug: bool = False
) -> int:
    """
    Tower height after ``target`` drops, using a detected cycle.

    Args:
        cycle: Cycle reported by a CycleDetector.
        target: Total number of drops.
        config: Simulation configuration. Uses default if None.
        debug: Print the arithmetic.

    Returns:
        Projected tower height.

    Raises:
        ValueError: If ``target`` precedes the cycle start; such targets
            must be simulated directly.
    """
    if target < cycle.start_drops:
        raise ValueError(
            f"Target {target} is before the cycle start ({cycle.start_drops} drops)"
        )

    remaining = target - cycle.start_drops
    full_cycles, leftover = divmod(remaining, cycle.cycle_length)

    replay = TowerSimulation.from_snapshot(cycle.snapshot, config=config)
    replay.run(leftover)
    leftover_height = replay.height - cycle.snapshot.height

    height = cycle.start_height + full_cycles * cycle.cycle_height + leftover_height

    if debug:
        print(f"[DEBUG] Extrapolate {target}: {cycle.start_height} + "
              f"{full_cycles} x {cycle.cycle_height} + {leftover_height} "
              f"({leftover} leftover drops) = {height}")

    return height


def tower_height(
    jets: Jets,
    target: int,
    config: Optional[TowerConfig] = None,
    debug: bool = False
) -> int:
    """
    Tower height after ``target`` drops.

    Simulates until either the target is reached or a cycle is found. In the
    first case the live height is the answer; in the second the height is
    extrapolated from the cycle.
    """
    if config is None:
        config = get_config()

    simulation = TowerSimulation(jets, config=config, debug=debug)
    detector = CycleDetector(config, debug=debug)
    simulation.run_until(FirstOf(DropLimit(target), CycleWatch(detector)))

    if detector.cycle is None:
        return simulation.height
    return extrapolate_height(detector.cycle, target, config=config, debug=debug)


def solve(
    jets: Jets,
    targets: Optional[Iterable[int]] = None,
    config: Optional[TowerConfig] = None,
    debug: bool = False
) -> Tuple[int, ...]:
    """
    Tower heights for each target drop count.

    Args:
        jets: Jet pattern, or its text form.
        targets: Drop counts. Uses the configured run targets if None.
        config: Simulation configuration. Uses default if None.
        debug: Print diagnostic messages.
    """
    if config is None:
        config = get_config()
    if targets is None:
        targets = config.run.targets
    if isinstance(jets, str):
        jets = JetPattern.parse(jets)

    return tuple(tower_height(jets, target, config=config, debug=debug) for target in targets)
