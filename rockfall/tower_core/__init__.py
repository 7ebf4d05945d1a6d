"""
Tower Core - The heart of the rockfall simulation.

This module provides the chamber, the rock catalog, the jet pattern, the
per-rock stepper, and the cycle detection used to extrapolate tower heights
to drop counts that cannot be simulated directly.

Main exports:
- TowerSimulation: Drop-by-drop simulation with snapshots and stop rules
- CycleDetector: Fingerprints settled states and reports the first repeat
- tower_height / solve: Heights for arbitrary drop counts
- TowerConfig: Configuration loaded from tower_config.yaml
"""

from rockfall.tower_core.config_loader import TowerConfig, load_config
from rockfall.tower_core.errors import (
    RockfallError,
    JetPatternError,
    SimulationInvariantError,
    DegenerateCycleError,
)
from rockfall.tower_core.rock_catalog import RockKind, RockShape, RockCatalog
from rockfall.tower_core.jet_pattern import Jet, JetPattern
from rockfall.tower_core.chamber import Chamber
from rockfall.tower_core.rock_stepper import DropResult, drop_rock
from rockfall.tower_core.state_snapshot import TowerSnapshot
from rockfall.tower_core.simulation import TowerSimulation, StepResult
from rockfall.tower_core.rules import (
    TerminationResult,
    DropLimit,
    HeightLimit,
    CycleWatch,
    FirstOf,
)
from rockfall.tower_core.cycle_detector import (
    CycleDetector,
    CycleInfo,
    DetectorState,
    Fingerprint,
)
from rockfall.tower_core.extrapolator import (
    extrapolate_height,
    simulate_height,
    solve,
    tower_height,
)

__all__ = [
    "TowerConfig",
    "load_config",
    "RockfallError",
    "JetPatternError",
    "SimulationInvariantError",
    "DegenerateCycleError",
    "RockKind",
    "RockShape",
    "RockCatalog",
    "Jet",
    "JetPattern",
    "Chamber",
    "DropResult",
    "drop_rock",
    "TowerSnapshot",
    "TowerSimulation",
    "StepResult",
    "TerminationResult",
    "DropLimit",
    "HeightLimit",
    "CycleWatch",
    "FirstOf",
    "CycleDetector",
    "CycleInfo",
    "DetectorState",
    "Fingerprint",
    "extrapolate_height",
    "simulate_height",
    "solve",
    "tower_height",
]
