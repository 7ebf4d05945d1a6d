"""
Chamber Viewer
==============

Print the tower as ASCII art after a number of drops, or step through drops
one at a time in the terminal.

Usage:
    python -m tools.view_chamber [--drops N] [--rows R] [--jets PATH]
    python -m tools.view_chamber --step --drops 10
"""

from __future__ import annotations

import argparse
import sys
from typing import Optional

from rockfall.tower_core.config_loader import load_config
from rockfall.tower_core.jet_pattern import JetPattern
from rockfall.tower_core.rules import DropLimit, FirstOf, HeightLimit
from rockfall.tower_core.simulation import TowerSimulation

EXAMPLE_JETS = ">>><<><>><<<>><>>><<<>>><<<><<<>><>><<>>"


def render_state(simulation: TowerSimulation, rows: Optional[int] = None) -> str:
    """Tower drawing with a one-line header."""
    info = simulation.get_info()
    header = (f"drops={info['drops_used']} height={info['height']} "
              f"next={info['next_rock']} wind={info['wind_pointer']}/{info['jet_count']}")
    return header + "\n" + simulation.chamber.render(rows)


def main():
    parser = argparse.ArgumentParser(description="View the rock tower in the terminal")
    parser.add_argument("--drops", type=int, default=10, help="Rocks to drop")
    parser.add_argument("--height", type=int, default=None,
                        help="Stop early once the tower reaches this height")
    parser.add_argument("--rows", type=int, default=40, help="Rows of the tower top to show")
    parser.add_argument("--jets", type=str, default=None,
                        help="Jet pattern file (uses the example pattern if not given)")
    parser.add_argument("--config", type=str, default=None, help="Path to tower_config.yaml")
    parser.add_argument("--step", action="store_true",
                        help="Show the tower after every drop (press Enter to continue)")

    args = parser.parse_args()

    config = load_config(args.config)
    if args.jets:
        with open(args.jets, "r") as f:
            jets = JetPattern.parse(f.readline())
    else:
        jets = JetPattern.parse(EXAMPLE_JETS)

    simulation = TowerSimulation(jets, config=config)
    rules = [DropLimit(args.drops)]
    if args.height is not None:
        rules.append(HeightLimit(args.height))
    rule = FirstOf(*rules)

    if args.step:
        while not rule(simulation).stop:
            result = simulation.step()
            drop = result.drop
            print(f"Rock {drop.kind.name} rests at row {drop.row}, col {drop.col} "
                  f"after {drop.pushes} pushes, {drop.falls} falls")
            print(render_state(simulation, args.rows))
            try:
                input()
            except (EOFError, KeyboardInterrupt):
                return 0
    else:
        simulation.run_until(rule)
        print(render_state(simulation, args.rows))

    return 0


if __name__ == "__main__":
    sys.exit(main())
