"""
Rock Catalog
============

The five rock shapes, in drop order, and round-robin selection by drop index.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import FrozenSet, Iterator, Optional, Tuple, Union


class RockKind(IntEnum):
    """The closed set of rock shapes. Values are the drop order."""
    HLINE = 0
    PLUS = 1
    CORNER = 2
    VLINE = 3
    SQUARE = 4


# (row, col) offsets from the bottom-left of each shape's bounding box.
#
#   HLINE   PLUS   CORNER  VLINE  SQUARE
#   ####    .#.    ..#     #      ##
#           ###    ..#     #      ##
#           .#.    ###     #
#                          #
_SHAPE_CELLS = {
    RockKind.HLINE: ((0, 0), (0, 1), (0, 2), (0, 3)),
    RockKind.PLUS: ((0, 1), (1, 0), (1, 1), (1, 2), (2, 1)),
    RockKind.CORNER: ((0, 0), (0, 1), (0, 2), (1, 2), (2, 2)),
    RockKind.VLINE: ((0, 0), (1, 0), (2, 0), (3, 0)),
    RockKind.SQUARE: ((0, 0), (0, 1), (1, 0), (1, 1)),
}


def _row_masks(cells: FrozenSet[Tuple[int, int]], height: int) -> Tuple[int, ...]:
    masks = [0] * height
    for row, col in cells:
        masks[row] |= 1 << col
    return tuple(masks)


@dataclass(frozen=True)
class RockShape:
    """
    Immutable rock template.

    ``row_masks[i]`` holds bit ``c`` for every occupied cell ``(i, c)``,
    so shifting a mask left by ``col`` places the rock at that column.
    """
    kind: RockKind
    cells: FrozenSet[Tuple[int, int]]
    width: int
    height: int
    row_masks: Tuple[int, ...] = field(repr=False)

    @classmethod
    def from_cells(cls, kind: RockKind, cells) -> "RockShape":
        cells = frozenset(cells)
        width = max(c for _, c in cells) + 1
        height = max(r for r, _ in cells) + 1
        return cls(
            kind=kind,
            cells=cells,
            width=width,
            height=height,
            row_masks=_row_masks(cells, height)
        )

    @property
    def name(self) -> str:
        return self.kind.name.lower()

    @property
    def cell_count(self) -> int:
        return len(self.cells)

    def cells_at(self, row: int, col: int) -> FrozenSet[Tuple[int, int]]:
        """Absolute cells occupied with the bottom-left corner at (row, col)."""
        return frozenset((row + r, col + c) for r, c in self.cells)

    def render(self) -> str:
        """ASCII drawing, top row first."""
        lines = []
        for mask in reversed(self.row_masks):
            lines.append("".join("#" if mask >> c & 1 else "." for c in range(self.width)))
        return "\n".join(lines)

    def __repr__(self) -> str:
        return f"RockShape({self.kind.value}: {self.name})"


class RockCatalog:
    """
    Ordered collection of the rock shapes.

    Rocks are dropped round-robin: drop ``n`` uses ``catalog[n % len(catalog)]``.
    """

    def __init__(self):
        self._shapes: Tuple[RockShape, ...] = tuple(
            RockShape.from_cells(kind, _SHAPE_CELLS[kind]) for kind in RockKind
        )

    def __len__(self) -> int:
        return len(self._shapes)

    def __getitem__(self, kind: Union[RockKind, int]) -> RockShape:
        if 0 <= kind < len(self._shapes):
            return self._shapes[kind]
        raise IndexError(f"Rock kind {kind} out of range [0, {len(self._shapes)})")

    def __iter__(self) -> Iterator[RockShape]:
        return iter(self._shapes)

    @property
    def all_shapes(self) -> Tuple[RockShape, ...]:
        """All shapes in drop order."""
        return self._shapes

    @property
    def max_width(self) -> int:
        return max(shape.width for shape in self._shapes)

    @property
    def max_height(self) -> int:
        return max(shape.height for shape in self._shapes)

    def index_for(self, drop_index: int) -> int:
        """Catalog index of the rock dropped at ``drop_index``."""
        return drop_index % len(self._shapes)

    def shape_for(self, drop_index: int) -> RockShape:
        """Shape of the rock dropped at ``drop_index`` (0-based, unbounded)."""
        return self._shapes[drop_index % len(self._shapes)]

    def get_by_name(self, name: str) -> Optional[RockShape]:
        """Get shape by kind name (case-insensitive)."""
        name_lower = name.lower()
        for shape in self._shapes:
            if shape.name == name_lower:
                return shape
        return None


# Module-level singleton
_cached_catalog: Optional[RockCatalog] = None


def get_catalog() -> RockCatalog:
    """Get the rock catalog singleton."""
    global _cached_catalog
    if _cached_catalog is None:
        _cached_catalog = RockCatalog()
    return _cached_catalog


def shape_for(drop_index: int) -> RockShape:
    """Shape of the rock dropped at ``drop_index``."""
    return get_catalog().shape_for(drop_index)
