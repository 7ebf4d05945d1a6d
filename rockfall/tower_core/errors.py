"""
Errors
======

Exception hierarchy for the tower simulation.

Malformed input is surfaced to the caller as a ``ValueError`` subclass.
Broken geometric invariants are logic defects and are never retried.
"""

from __future__ import annotations


class RockfallError(Exception):
    """Base class for all simulation errors."""


class JetPatternError(RockfallError, ValueError):
    """Jet pattern text contains a character outside ``{'<', '>'}`` or is empty."""

    def __init__(self, message: str, position: int = -1, char: str = ""):
        super().__init__(message)
        self.position = position
        self.char = char


class SimulationInvariantError(RockfallError, RuntimeError):
    """Internal invariant failure (spawn into an occupied cell, short profile, ...)."""


class DegenerateCycleError(SimulationInvariantError):
    """A repeated fingerprint produced a cycle of zero drops."""
