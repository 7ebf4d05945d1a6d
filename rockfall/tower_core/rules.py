"""
Stop Rules
==========

Pluggable termination checks for the simulation run loop.

A stop rule is any callable taking the simulation and returning a
TerminationResult. The run loop consults it before the first drop and after
every settle, so the same stepping loop serves "drop exactly N rocks",
"drop until a cycle is found" and "replay K more rocks from a snapshot".
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, TYPE_CHECKING

if TYPE_CHECKING:
    from rockfall.tower_core.cycle_detector import CycleDetector
    from rockfall.tower_core.simulation import TowerSimulation


@dataclass
class TerminationResult:
    """Result of a stop rule check."""
    stop: bool
    reason: str

    @staticmethod
    def none() -> "TerminationResult":
        return TerminationResult(False, "")

    @staticmethod
    def halt(reason: str) -> "TerminationResult":
        return TerminationResult(True, reason)


StopRule = Callable[["TowerSimulation"], TerminationResult]


class DropLimit:
    """Stop once ``limit`` rocks have been dropped in total."""

    def __init__(self, limit: int):
        if limit < 0:
            raise ValueError(f"Drop limit must be >= 0, got {limit}")
        self.limit = limit

    def __call__(self, simulation: "TowerSimulation") -> TerminationResult:
        if simulation.drops_used >= self.limit:
            return TerminationResult.halt("drop_limit")
        return TerminationResult.none()


class CycleWatch:
    """Feed every settled state to a cycle detector; stop when it fires."""

    def __init__(self, detector: "CycleDetector"):
        self.detector = detector

    def __call__(self, simulation: "TowerSimulation") -> TerminationResult:
        if self.detector.observe(simulation) is not None:
            return TerminationResult.halt("cycle_found")
        return TerminationResult.none()


class HeightLimit:
    """Stop once the tower is at least ``height`` rows tall."""

    def __init__(self, height: int):
        self.height = height

    def __call__(self, simulation: "TowerSimulation") -> TerminationResult:
        if simulation.height >= self.height:
            return TerminationResult.halt("height_limit")
        return TerminationResult.none()


class FirstOf:
    """Combine rules; the first one (in order) that stops wins."""

    def __init__(self, *rules: StopRule):
        self.rules = rules

    def __call__(self, simulation: "TowerSimulation") -> TerminationResult:
        for rule in self.rules:
            result = rule(simulation)
            if result.stop:
                return result
        return TerminationResult.none()

