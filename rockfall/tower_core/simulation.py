"""
Tower Simulation
================

Main simulation orchestrator combining chamber, rock catalog, jets and stepper.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional, Union

from rockfall.tower_core.chamber import Chamber
from rockfall.tower_core.config_loader import TowerConfig, get_config
from rockfall.tower_core.jet_pattern import JetPattern
from rockfall.tower_core.rock_catalog import RockCatalog, RockShape, get_catalog
from rockfall.tower_core.rock_stepper import DropResult, drop_rock
from rockfall.tower_core.rules import StopRule, TerminationResult
from rockfall.tower_core.state_snapshot import TowerSnapshot


@dataclass
class StepResult:
    """Result of a single simulation step (one drop + settle)."""
    drop: DropResult
    drops_used: int
    height: int
    trimmed_rows: int


class TowerSimulation:
    """
    Main simulation class.

    Orchestrates:
    - Chamber occupancy
    - Round-robin rock selection
    - Jet pattern and wind pointer
    - Row trimming

    One step = one rock spawned, pushed and dropped until it settles.
    """

    def __init__(
        self,
        jets: Union[JetPattern, str],
        config: Optional[TowerConfig] = None,
        debug: bool = False
    ):
        """
        Initialize simulation.

        Args:
            jets: Jet pattern, or its text form.
            config: Simulation configuration. Uses default if None.
            debug: Print diagnostic messages.
        """
        if config is None:
            config = get_config()
        if isinstance(jets, str):
            jets = JetPattern.parse(jets)

        self._config = config
        self._jets = jets
        self._debug = debug
        self._catalog = get_catalog()

        self._chamber = Chamber(config)
        self._drops_used: int = 0
        self._wind_pointer: int = 0

    @classmethod
    def from_snapshot(
        cls,
        snapshot: TowerSnapshot,
        config: Optional[TowerConfig] = None,
        debug: bool = False
    ) -> "TowerSimulation":
        """Resume a simulation from a snapshot. The snapshot is left untouched."""
        simulation = cls(snapshot.jets, config=config, debug=debug)
        simulation._chamber = snapshot.restore_chamber()
        simulation._drops_used = snapshot.drops_used
        simulation._wind_pointer = snapshot.wind_pointer
        return simulation

    @property
    def config(self) -> TowerConfig:
        """Simulation configuration."""
        return self._config

    @property
    def jets(self) -> JetPattern:
        return self._jets

    @property
    def chamber(self) -> Chamber:
        """Live chamber. Mutated by every step."""
        return self._chamber

    @property
    def catalog(self) -> RockCatalog:
        return self._catalog

    @property
    def height(self) -> int:
        """Current tower height."""
        return self._chamber.height

    @property
    def drops_used(self) -> int:
        """Number of rocks dropped so far."""
        return self._drops_used

    @property
    def rock_index(self) -> int:
        """Catalog index of the next rock to drop."""
        return self._catalog.index_for(self._drops_used)

    @property
    def current_rock(self) -> RockShape:
        """Shape of the next rock to drop."""
        return self._catalog.shape_for(self._drops_used)

    @property
    def wind_pointer(self) -> int:
        """Index of the next jet to apply."""
        return self._wind_pointer

    def reset(self) -> None:
        """Reset to an empty chamber at the start of the jet pattern."""
        self._chamber = Chamber(self._config)
        self._drops_used = 0
        self._wind_pointer = 0

    def step(self) -> StepResult:
        """
        Drop the next rock and let it settle.

        Returns:
            StepResult with the drop outcome and new totals.
        """
        drop = drop_rock(
            self._chamber,
            self.current_rock,
            self._jets,
            self._wind_pointer,
            self._config.spawn
        )
        self._wind_pointer = drop.wind_pointer
        self._drops_used += 1

        trimmed = 0
        if self._chamber.retained_rows > self._config.chamber.max_retained_rows:
            trimmed = self._chamber.trim(self._config.chamber.trim_keep_rows)
            if self._debug:
                print(f"[DEBUG] Trimmed {trimmed} rows at height {self.height}")

        return StepResult(
            drop=drop,
            drops_used=self._drops_used,
            height=self.height,
            trimmed_rows=trimmed
        )

    def run(self, drops: int) -> int:
        """
        Drop ``drops`` more rocks.

        Returns:
            Tower height afterwards.
        """
        for _ in range(drops):
            self.step()
        return self.height

    def run_until(self, rule: StopRule) -> TerminationResult:
        """
        Step until ``rule`` says stop.

        The rule is checked before the first drop and after every settle.

        Returns:
            The TerminationResult that ended the run.
        """
        while True:
            result = rule(self)
            if result.stop:
                if self._debug:
                    print(f"[DEBUG] Stopped after {self._drops_used} drops "
                          f"({result.reason}), height {self.height}")
                return result
            self.step()

    def snapshot(self) -> TowerSnapshot:
        """Capture the current state."""
        return TowerSnapshot.capture(
            self._jets,
            self._chamber,
            self._drops_used,
            self._wind_pointer
        )

    def get_info(self) -> Dict[str, Any]:
        """Summary of the current state."""
        return {
            "height": self.height,
            "drops_used": self._drops_used,
            "rock_index": self.rock_index,
            "next_rock": self.current_rock.name,
            "wind_pointer": self._wind_pointer,
            "jet_count": len(self._jets),
            "retained_rows": self._chamber.retained_rows,
            "trimmed_rows": self._chamber.trimmed_rows,
        }
