"""
Jet Pattern
===========

The cyclic sequence of horizontal pushes applied to falling rocks.

The pattern itself is immutable. The position within it (the wind pointer)
is a plain int owned by the caller and threaded through every call, so the
simulation can be snapshotted and replayed.
"""

from __future__ import annotations

from enum import IntEnum
from typing import Iterable, Iterator, List, Tuple

from rockfall.tower_core.errors import JetPatternError


class Jet(IntEnum):
    """Push direction, as a column delta."""
    LEFT = -1
    RIGHT = 1

    @property
    def symbol(self) -> str:
        return "<" if self is Jet.LEFT else ">"


_SYMBOLS = {"<": Jet.LEFT, ">": Jet.RIGHT}


class JetPattern:
    """
    Immutable cyclic jet sequence.

    Example:
        jets = JetPattern.parse(">>><<><>")
        jet = jets.direction_at(pointer)
        pointer = jets.advance(pointer)
    """

    def __init__(self, jets: Iterable[Jet]):
        self._jets: Tuple[Jet, ...] = tuple(Jet(j) for j in jets)
        if not self._jets:
            raise JetPatternError("Jet pattern must contain at least one push")

    @classmethod
    def parse(cls, text: str) -> "JetPattern":
        """
        Parse a line of ``<`` / ``>`` characters.

        Surrounding whitespace (such as the trailing newline of an input
        file) is ignored; anything else outside ``{'<', '>'}`` is an error.

        Raises:
            JetPatternError: On an unknown character or an empty pattern.
        """
        stripped = text.strip()
        if not stripped:
            raise JetPatternError("Jet pattern is empty")

        jets: List[Jet] = []
        for position, char in enumerate(stripped):
            jet = _SYMBOLS.get(char)
            if jet is None:
                raise JetPatternError(
                    f"Invalid jet character {char!r} at position {position}",
                    position=position,
                    char=char
                )
            jets.append(jet)
        return cls(jets)

    def __len__(self) -> int:
        return len(self._jets)

    def __getitem__(self, index: int) -> Jet:
        return self._jets[index]

    def __iter__(self) -> Iterator[Jet]:
        return iter(self._jets)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, JetPattern):
            return NotImplemented
        return self._jets == other._jets

    def __hash__(self) -> int:
        return hash(self._jets)

    def __str__(self) -> str:
        return "".join(jet.symbol for jet in self._jets)

    def __repr__(self) -> str:
        text = str(self)
        if len(text) > 20:
            text = text[:20] + "..."
        return f"JetPattern({text!r}, len={len(self._jets)})"

    def direction_at(self, pointer: int) -> Jet:
        """Jet applied when the wind pointer is at ``pointer``."""
        return self._jets[pointer % len(self._jets)]

    def advance(self, pointer: int, count: int = 1) -> int:
        """Wind pointer after ``count`` push attempts."""
        return (pointer + count) % len(self._jets)

    def peek(self, pointer: int, count: int = 2) -> List[Jet]:
        """Upcoming jets starting at ``pointer``, without consuming them."""
        return [self.direction_at(pointer + i) for i in range(count)]
