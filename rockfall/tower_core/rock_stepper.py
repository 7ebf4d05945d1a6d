"""
Rock Stepper
============

Moves a single rock from its spawn point to its resting place.

One drop alternates a jet push attempt with a gravity attempt until the
rock cannot fall any further, then merges it into the chamber.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from rockfall.tower_core.chamber import Chamber
from rockfall.tower_core.config_loader import SpawnConfig
from rockfall.tower_core.errors import SimulationInvariantError
from rockfall.tower_core.jet_pattern import JetPattern
from rockfall.tower_core.rock_catalog import RockKind, RockShape


@dataclass(frozen=True)
class DropResult:
    """Outcome of one rock's descent."""
    kind: RockKind
    row: int               # Resting row of the rock's bottom edge
    col: int               # Resting column of the rock's left edge
    wind_pointer: int      # Wind pointer after the drop
    pushes: int            # Jet push attempts consumed
    moved_sideways: int    # Pushes that actually moved the rock
    falls: int             # Rows fallen before coming to rest
    height_gain: int       # Rows the tower grew by


def spawn_position(chamber: Chamber, spawn: SpawnConfig) -> Tuple[int, int]:
    """(row, col) where the next rock appears."""
    return chamber.height + spawn.clearance, spawn.left_offset


def drop_rock(
    chamber: Chamber,
    shape: RockShape,
    jets: JetPattern,
    wind_pointer: int,
    spawn: SpawnConfig
) -> DropResult:
    """
    Drop ``shape`` into ``chamber`` and settle it.

    Args:
        chamber: Chamber to drop into (mutated).
        shape: Rock being dropped.
        jets: Jet pattern.
        wind_pointer: Index of the next jet to apply.
        spawn: Spawn rule.

    Returns:
        DropResult with the resting position and the advanced wind pointer.

    Raises:
        SimulationInvariantError: If the spawn position is already blocked.
    """
    height_before = chamber.height
    row, col = spawn_position(chamber, spawn)
    if not chamber.can_place(shape, row, col):
        raise SimulationInvariantError(
            f"{shape!r} cannot spawn at row {row}, col {col} (height {height_before})"
        )

    pushes = 0
    moved = 0
    falls = 0

    while True:
        # Jet push; the pointer advances whether or not the rock moves
        shifted = col + jets.direction_at(wind_pointer)
        wind_pointer = jets.advance(wind_pointer)
        pushes += 1
        if chamber.can_place(shape, row, shifted):
            col = shifted
            moved += 1

        # Gravity
        if not chamber.can_place(shape, row - 1, col):
            break
        row -= 1
        falls += 1

    chamber.settle(shape, row, col)

    return DropResult(
        kind=shape.kind,
        row=row,
        col=col,
        wind_pointer=wind_pointer,
        pushes=pushes,
        moved_sideways=moved,
        falls=falls,
        height_gain=chamber.height - height_before
    )
