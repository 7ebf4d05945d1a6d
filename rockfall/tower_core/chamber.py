"""
Chamber
=======

Fixed-width, upward-growing occupancy grid that settled rocks are merged into.

Each row is stored as a column bitmask (bit ``c`` set means column ``c`` is
occupied) in a growable numpy array. Old rows far below the surface can be
trimmed away; the height counter always stays exact.
"""

from __future__ import annotations

from typing import List, Optional, Tuple

import numpy as np

from rockfall.tower_core.config_loader import TowerConfig, get_config
from rockfall.tower_core.errors import SimulationInvariantError
from rockfall.tower_core.rock_catalog import RockShape

_INITIAL_CAPACITY = 256


class Chamber:
    """
    Occupancy surface of the tower.

    Coordinates are absolute: row 0 sits directly on the floor and rows grow
    upward. Rows at or above ``height`` are always empty. Rows below the trim
    base were discarded and count as solid.
    """

    def __init__(self, config: Optional[TowerConfig] = None):
        """
        Initialize an empty chamber.

        Args:
            config: Simulation configuration. Uses default if None.
        """
        if config is None:
            config = get_config()

        self._config = config
        self._width = config.chamber.width
        self._full_mask = config.full_row_mask

        self._rows = np.zeros(_INITIAL_CAPACITY, dtype=np.uint32)
        self._base: int = 0      # Absolute row index of self._rows[0]
        self._count: int = 0     # Rows currently stored

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------

    @property
    def config(self) -> TowerConfig:
        return self._config

    @property
    def width(self) -> int:
        """Number of columns."""
        return self._width

    @property
    def height(self) -> int:
        """One past the highest occupied row; 0 for an empty chamber."""
        return self._base + self._count

    @property
    def trimmed_rows(self) -> int:
        """Number of rows discarded from the bottom."""
        return self._base

    @property
    def retained_rows(self) -> int:
        """Number of rows currently stored."""
        return self._count

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def row_mask(self, row: int) -> int:
        """Occupancy bitmask of an absolute row."""
        if row >= self.height:
            return 0
        if row < self._base:
            return self._full_mask
        return int(self._rows[row - self._base])

    def is_occupied(self, row: int, col: int) -> bool:
        """True if the cell is filled (walls and floor count as filled)."""
        if col < 0 or col >= self._width or row < 0:
            return True
        return bool(self.row_mask(row) >> col & 1)

    def can_place(self, shape: RockShape, row: int, col: int) -> bool:
        """
        Check whether ``shape`` fits with its bottom-left corner at (row, col).

        Returns:
            True iff every cell is inside the walls, on or above the floor,
            and not already occupied.
        """
        if col < 0 or col + shape.width > self._width or row < 0:
            return False

        height = self.height
        for offset, mask in enumerate(shape.row_masks):
            r = row + offset
            if r >= height:
                break
            if self.row_mask(r) & (mask << col):
                return False
        return True

    def _rows_top_down(self, depth: int) -> List[int]:
        """Masks of the top ``depth`` rows, top row first."""
        top = self.height - 1
        return [self.row_mask(top - i) for i in range(depth)]

    def surface_profile(self, depth: int) -> Tuple[int, ...]:
        """
        Raw occupancy of the top ``depth`` rows, top row first.

        Raises:
            SimulationInvariantError: If the tower is shorter than ``depth``.
        """
        if self.height < depth:
            raise SimulationInvariantError(
                f"Surface profile of depth {depth} requested with height {self.height}"
            )
        return tuple(self._rows_top_down(depth))

    def reachable_profile(self, depth: int) -> Tuple[Tuple[int, ...], bool]:
        """
        Empty cells of the top ``depth`` rows that a falling rock could reach.

        Flood fills (4-connected) from the open row above the tower, staying
        inside the window. Cells a rock can never touch are left out, so
        towers that differ only in sealed-off pockets compare equal.

        Returns:
            (profile, exact): per-row bitmasks of reachable cells, top row
            first, and whether the fill stayed clear of the window's bottom
            row (or the window reaches the floor). When ``exact`` is True the
            profile contains the whole reachable region.

        Raises:
            SimulationInvariantError: If the tower is shorter than ``depth``.
        """
        if self.height < depth:
            raise SimulationInvariantError(
                f"Reachable profile of depth {depth} requested with height {self.height}"
            )

        full = self._full_mask
        free = [~mask & full for mask in self._rows_top_down(depth)]
        reach = [0] * depth
        # Every empty cell of the top row touches the open row above it
        reach[0] = free[0]

        changed = True
        while changed:
            changed = False
            for i in range(depth):
                current = reach[i]
                grown = current
                if i > 0:
                    grown |= reach[i - 1] & free[i]
                if i + 1 < depth:
                    grown |= reach[i + 1] & free[i]
                # Spread sideways within the row
                while True:
                    spread = (grown | (grown << 1) | (grown >> 1)) & free[i]
                    if spread == grown:
                        break
                    grown = spread
                if grown != current:
                    reach[i] = grown
                    changed = True

        exact = reach[-1] == 0 or self.height == depth
        return tuple(reach), exact

    def column_depths(self, limit: int) -> np.ndarray:
        """
        Distance from the top of the tower to each column's highest filled cell.

        A column whose top cell sits in row ``height - 1`` has depth 0.
        Columns with nothing filled within ``limit`` rows report ``limit``.
        """
        depths = np.full(self._width, limit, dtype=np.int64)
        remaining = self._full_mask
        for i, mask in enumerate(self._rows_top_down(min(limit, self.height))):
            hit = mask & remaining
            for col in range(self._width):
                if hit >> col & 1:
                    depths[col] = i
            remaining &= ~hit
            if not remaining:
                break
        return depths

    # -------------------------------------------------------------------------
    # Mutation
    # -------------------------------------------------------------------------

    def _ensure_capacity(self, count: int) -> None:
        if count <= len(self._rows):
            return
        capacity = len(self._rows)
        while capacity < count:
            capacity *= 2
        grown = np.zeros(capacity, dtype=np.uint32)
        grown[:self._count] = self._rows[:self._count]
        self._rows = grown

    def settle(self, shape: RockShape, row: int, col: int) -> None:
        """
        Merge ``shape`` into the grid at (row, col) and grow the height.

        The caller must already have checked the position with ``can_place``.
        """
        top = row + shape.height
        if top > self.height:
            new_count = top - self._base
            self._ensure_capacity(new_count)
            self._rows[self._count:new_count] = 0
            self._count = new_count

        for offset, mask in enumerate(shape.row_masks):
            self._rows[row + offset - self._base] |= mask << col

    def trim(self, keep_rows: int) -> int:
        """
        Discard rows more than ``keep_rows`` below the top.

        Returns:
            Number of rows discarded by this call.
        """
        new_base = max(self._base, self.height - keep_rows)
        dropped = new_base - self._base
        if dropped <= 0:
            return 0

        kept = self._rows[dropped:self._count].copy()
        capacity = max(_INITIAL_CAPACITY, len(kept) * 2)
        self._rows = np.zeros(capacity, dtype=np.uint32)
        self._rows[:len(kept)] = kept
        self._base = new_base
        self._count = len(kept)
        return dropped

    def copy(self) -> "Chamber":
        """Independent copy of this chamber."""
        clone = Chamber(self._config)
        clone._rows = self._rows.copy()
        clone._base = self._base
        clone._count = self._count
        return clone

    # -------------------------------------------------------------------------
    # Export
    # -------------------------------------------------------------------------

    def to_array(self, rows: Optional[int] = None) -> np.ndarray:
        """
        Boolean occupancy grid of the top ``rows`` retained rows.

        Returns:
            (rows, width) bool array, bottom row first.
        """
        if rows is None or rows > self._count:
            rows = self._count
        masks = self._rows[self._count - rows:self._count].astype(np.int64)
        bits = np.arange(self._width, dtype=np.int64)
        return ((masks[:, None] >> bits) & 1).astype(bool)

    def render(self, rows: Optional[int] = None) -> str:
        """
        ASCII drawing of the top ``rows`` retained rows, top row first.

        The floor is drawn when the bottom of the drawing reaches row 0.
        """
        grid = self.to_array(rows)
        lines = [
            "|" + "".join("#" if cell else "." for cell in row) + "|"
            for row in grid[::-1]
        ]
        if self.height - len(grid) == 0:
            lines.append("+" + "-" * self._width + "+")
        return "\n".join(lines)

    def __repr__(self) -> str:
        return f"Chamber(width={self._width}, height={self.height})"
