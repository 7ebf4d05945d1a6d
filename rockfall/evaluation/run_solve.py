"""
Solve Harness
=============

Reads a jet pattern and prints the tower height for each target drop count.

Usage:
    python -m rockfall.evaluation.run_solve --input input.txt
    python -m rockfall.evaluation.run_solve < input.txt
"""

from __future__ import annotations

import argparse
import json
import sys
import time
from dataclasses import dataclass
from typing import List, Optional, Sequence

from rockfall.tower_core.config_loader import TowerConfig, load_config
from rockfall.tower_core.errors import JetPatternError
from rockfall.tower_core.jet_pattern import JetPattern
from rockfall.tower_core.extrapolator import tower_height


@dataclass
class SolveResult:
    """Height for a single target."""
    target: int
    height: int
    elapsed_time: float


@dataclass
class SolveSummary:
    """Results across all targets."""
    jet_count: int
    total_time: float
    results: List[SolveResult]

    @property
    def heights(self) -> List[int]:
        return [r.height for r in self.results]


def read_jets(path: Optional[str] = None) -> JetPattern:
    """
    Read a jet pattern from a file, or stdin when ``path`` is None.

    Raises:
        FileNotFoundError: If the file doesn't exist.
        JetPatternError: If the pattern is malformed.
    """
    if path is None:
        text = sys.stdin.readline()
    else:
        with open(path, "r") as f:
            text = f.readline()
    return JetPattern.parse(text)


def solve_targets(
    jets: JetPattern,
    targets: Sequence[int],
    config: TowerConfig,
    verbose: bool = False
) -> SolveSummary:
    """
    Compute the tower height for every target.

    Args:
        jets: Jet pattern.
        targets: Drop counts.
        config: Simulation configuration.
        verbose: If True, print progress and diagnostics.

    Returns:
        SolveSummary with one result per target.
    """
    results: List[SolveResult] = []
    total_start = time.time()

    for i, target in enumerate(targets):
        if verbose:
            print(f"[{i+1}/{len(targets)}] Target {target} drops...")

        start = time.time()
        height = tower_height(jets, target, config=config, debug=verbose)
        elapsed = time.time() - start

        results.append(SolveResult(target=target, height=height, elapsed_time=elapsed))

        if verbose:
            print(f"  height={height}, time={elapsed:.3f}s")

    return SolveSummary(
        jet_count=len(jets),
        total_time=time.time() - total_start,
        results=results
    )


def save_results(summary: SolveSummary, output_path: str) -> None:
    """Save final heights to JSON."""
    data = {
        "timestamp": time.strftime("%Y-%m-%d %H:%M:%S"),
        "jet_count": summary.jet_count,
        "total_time": summary.total_time,
        "results": [
            {
                "target": r.target,
                "height": r.height,
                "elapsed_time": r.elapsed_time
            }
            for r in summary.results
        ]
    }

    with open(output_path, "w") as f:
        json.dump(data, f, indent=2)

    print(f"Results saved to {output_path}", file=sys.stderr)


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Compute rock tower heights")
    parser.add_argument(
        "--input",
        type=str,
        default=None,
        help="Path to the jet pattern file (reads stdin if not specified)"
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to tower_config.yaml (uses default if not specified)"
    )
    parser.add_argument(
        "--targets",
        type=int,
        nargs="+",
        default=None,
        help="Drop counts to report (uses config run.targets if not specified)"
    )
    parser.add_argument(
        "--output",
        type=str,
        default=None,
        help="Path to save results JSON"
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Print progress and cycle diagnostics"
    )

    args = parser.parse_args(argv)

    config = load_config(args.config)
    targets = args.targets if args.targets else list(config.run.targets)

    try:
        jets = read_jets(args.input)
    except (FileNotFoundError, JetPatternError) as e:
        print(f"Error reading jet pattern: {e}", file=sys.stderr)
        return 1

    summary = solve_targets(jets, targets, config, verbose=args.verbose)

    for height in summary.heights:
        print(height)

    if args.output:
        save_results(summary, args.output)

    return 0


if __name__ == "__main__":
    sys.exit(main())
