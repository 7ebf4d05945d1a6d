"""
State Snapshot
==============

Immutable captures of a running simulation.

A snapshot holds everything needed to resume the simulation (chamber, drop
count, wind pointer) and packs the tower top into fixed-size numpy arrays
for inspection.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Optional, TYPE_CHECKING
import numpy as np

from rockfall.tower_core.jet_pattern import JetPattern
from rockfall.tower_core.rock_catalog import RockKind, get_catalog

if TYPE_CHECKING:
    from rockfall.tower_core.chamber import Chamber


@dataclass(frozen=True)
class TowerSnapshot:
    """
    Frozen simulation state.

    The chamber held here is a private copy; ``restore_chamber`` hands out
    further copies so the snapshot can be replayed any number of times.
    """
    jets: JetPattern
    drops_used: int
    wind_pointer: int
    height: int
    _chamber: "Chamber" = field(repr=False, compare=False)

    @classmethod
    def capture(
        cls,
        jets: JetPattern,
        chamber: "Chamber",
        drops_used: int,
        wind_pointer: int
    ) -> "TowerSnapshot":
        return cls(
            jets=jets,
            drops_used=drops_used,
            wind_pointer=wind_pointer,
            height=chamber.height,
            _chamber=chamber.copy()
        )

    @property
    def rock_index(self) -> int:
        """Catalog index of the next rock to drop."""
        return get_catalog().index_for(self.drops_used)

    @property
    def next_rock(self) -> RockKind:
        return RockKind(self.rock_index)

    @property
    def chamber(self) -> "Chamber":
        """Read-only view; callers must not mutate it."""
        return self._chamber

    def restore_chamber(self) -> "Chamber":
        """Fresh mutable copy of the captured chamber."""
        return self._chamber.copy()

    def snapshot(self) -> "TowerSnapshot":
        return self

    def to_obs_dict(self, depth: Optional[int] = None) -> Dict[str, np.ndarray]:
        """
        Pack the snapshot into numpy arrays.

        Args:
            depth: Rows of the tower top to include. Uses the configured
                profile depth if None.

        Returns:
            Dict of scalar and array observations. ``top_rows`` is a
            (depth, width) bool grid, top row first, zero-padded when the
            tower is shorter than ``depth``.
        """
        if depth is None:
            depth = self._chamber.config.detection.profile_depth

        width = self._chamber.width
        top_rows = np.zeros((depth, width), dtype=bool)
        grid = self._chamber.to_array(depth)[::-1]
        top_rows[:len(grid)] = grid

        return {
            "drops_used": np.array(self.drops_used, dtype=np.int64),
            "height": np.array(self.height, dtype=np.int64),
            "rock_index": np.array(self.rock_index, dtype=np.int32),
            "wind_pointer": np.array(self.wind_pointer, dtype=np.int32),
            "column_depths": self._chamber.column_depths(depth),
            "top_rows": top_rows,
        }
