"""
Cycle Detector
==============

Fingerprints the simulation after every settle and reports the first repeat.

A fingerprint is (next rock index, wind pointer, profile of the tower top).
Two states with the same fingerprint evolve identically from then on, so the
tower gains the same height every ``cycle_length`` drops after the first
occurrence.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, NamedTuple, Optional, Tuple, Union

from rockfall.tower_core.config_loader import TowerConfig, get_config
from rockfall.tower_core.errors import DegenerateCycleError
from rockfall.tower_core.simulation import TowerSimulation
from rockfall.tower_core.state_snapshot import TowerSnapshot

State = Union[TowerSimulation, TowerSnapshot]


class DetectorState(Enum):
    DETECTING = "detecting"
    EXTRAPOLATED = "extrapolated"


class Fingerprint(NamedTuple):
    """Key identifying a simulation state for cycle detection."""
    rock_index: int
    wind_pointer: int
    profile: Tuple[int, ...]


@dataclass(frozen=True)
class CycleInfo:
    """A detected cycle."""
    start_drops: int          # Drops at the first occurrence of the fingerprint
    start_height: int
    end_drops: int            # Drops at the repeat
    end_height: int
    exact: bool               # Both profiles covered the whole reachable region
    snapshot: TowerSnapshot   # State at the repeat, equivalent to the state at start_drops

    @property
    def cycle_length(self) -> int:
        """Drops per cycle."""
        return self.end_drops - self.start_drops

    @property
    def cycle_height(self) -> int:
        """Rows gained per cycle."""
        return self.end_height - self.start_height


class CycleDetector:
    """
    Two-state machine: DETECTING until a fingerprint repeats, then EXTRAPOLATED.

    Only the first occurrence of each fingerprint is recorded. Once a cycle is
    found, further observations are ignored and return the same CycleInfo.
    """

    def __init__(self, config: Optional[TowerConfig] = None, debug: bool = False):
        """
        Initialize detector.

        Args:
            config: Simulation configuration. Uses default if None.
            debug: Print diagnostic messages.
        """
        if config is None:
            config = get_config()

        self._config = config
        self._debug = debug
        self._mode = config.detection.profile
        self._depth = config.detection.profile_depth

        self._seen: Dict[Fingerprint, Tuple[int, int, bool]] = {}
        self._state = DetectorState.DETECTING
        self._cycle: Optional[CycleInfo] = None

    @property
    def state(self) -> DetectorState:
        return self._state

    @property
    def cycle(self) -> Optional[CycleInfo]:
        """The detected cycle, or None while still detecting."""
        return self._cycle

    @property
    def profile_depth(self) -> int:
        return self._depth

    @property
    def seen_count(self) -> int:
        """Number of distinct fingerprints recorded."""
        return len(self._seen)

    def reset(self) -> None:
        self._seen.clear()
        self._state = DetectorState.DETECTING
        self._cycle = None

    def fingerprint(self, state: State) -> Tuple[Fingerprint, bool]:
        """
        Fingerprint a simulation or snapshot.

        Returns:
            (fingerprint, exact). ``exact`` is True when the profile provably
            contains everything that can influence future drops.

        Raises:
            SimulationInvariantError: If the tower is shorter than the profile depth.
        """
        if self._mode == "rows":
            profile = state.chamber.surface_profile(self._depth)
            exact = False
        else:
            profile, exact = state.chamber.reachable_profile(self._depth)
        return Fingerprint(state.rock_index, state.wind_pointer, profile), exact

    def observe(self, state: State) -> Optional[CycleInfo]:
        """
        Record the state after a settle.

        Returns:
            CycleInfo once a fingerprint repeats, otherwise None.

        Raises:
            DegenerateCycleError: If a repeat is observed without any drops in between.
        """
        if self._state is DetectorState.EXTRAPOLATED:
            return self._cycle

        # Not enough tower yet for a full profile
        if state.height < self._depth:
            return None

        key, exact = self.fingerprint(state)
        drops = state.drops_used
        height = state.height

        first = self._seen.get(key)
        if first is None:
            self._seen[key] = (drops, height, exact)
            return None

        start_drops, start_height, start_exact = first
        if drops - start_drops <= 0:
            raise DegenerateCycleError(
                f"Fingerprint repeated at drop {drops} with no drops since {start_drops}"
            )

        self._cycle = CycleInfo(
            start_drops=start_drops,
            start_height=start_height,
            end_drops=drops,
            end_height=height,
            exact=start_exact and exact,
            snapshot=state.snapshot()
        )
        self._state = DetectorState.EXTRAPOLATED

        if self._debug:
            print(f"[DEBUG] Cycle found: drops {start_drops} -> {drops} "
                  f"({self._cycle.cycle_length} per cycle, +{self._cycle.cycle_height} rows, "
                  f"exact={self._cycle.exact}, {len(self._seen)} states seen)")

        return self._cycle
