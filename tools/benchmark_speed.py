"""
Performance Benchmark
=====================

Measures drop throughput and cycle detection time for performance tuning.

Usage:
    python -m tools.benchmark_speed [--drops N] [--jets PATH]
"""

from __future__ import annotations

import argparse
import sys
import time
from typing import Optional

import numpy as np

from rockfall.tower_core.config_loader import TowerConfig, load_config
from rockfall.tower_core.cycle_detector import CycleDetector
from rockfall.tower_core.jet_pattern import Jet, JetPattern
from rockfall.tower_core.rules import CycleWatch
from rockfall.tower_core.simulation import TowerSimulation

EXAMPLE_JETS = ">>><<><>><<<>><>>><<<>>><<<><<<>><>><<>>"


def random_jets(length: int, seed: int = 42) -> JetPattern:
    """Random jet pattern of the given length."""
    rng = np.random.default_rng(seed)
    return JetPattern(Jet.RIGHT if bit else Jet.LEFT for bit in rng.integers(0, 2, size=length))


def benchmark_drops(
    jets: JetPattern,
    num_drops: int = 5000,
    config: Optional[TowerConfig] = None
) -> dict:
    """
    Benchmark raw drop-and-settle throughput.

    Args:
        jets: Jet pattern.
        num_drops: Number of rocks to drop.
        config: Simulation configuration.

    Returns:
        Dict with timing results.
    """
    simulation = TowerSimulation(jets, config=config)

    # Warmup
    simulation.run(10)
    simulation.reset()

    start = time.perf_counter()
    simulation.run(num_drops)
    elapsed = time.perf_counter() - start

    return {
        "mode": "drops",
        "jet_count": len(jets),
        "num_drops": num_drops,
        "height": simulation.height,
        "elapsed_seconds": elapsed,
        "drops_per_second": num_drops / elapsed,
        "ms_per_drop": (elapsed * 1000) / num_drops
    }


def benchmark_detection(
    jets: JetPattern,
    config: Optional[TowerConfig] = None
) -> dict:
    """
    Benchmark dropping with fingerprinting until the first cycle.

    Returns:
        Dict with timing results and the cycle found.
    """
    simulation = TowerSimulation(jets, config=config)
    detector = CycleDetector(simulation.config)

    start = time.perf_counter()
    simulation.run_until(CycleWatch(detector))
    elapsed = time.perf_counter() - start

    cycle = detector.cycle
    return {
        "mode": f"detect[{simulation.config.detection.profile}]",
        "jet_count": len(jets),
        "num_drops": simulation.drops_used,
        "cycle_start": cycle.start_drops,
        "cycle_length": cycle.cycle_length,
        "cycle_height": cycle.cycle_height,
        "exact": cycle.exact,
        "elapsed_seconds": elapsed,
        "drops_per_second": simulation.drops_used / elapsed,
        "ms_per_drop": (elapsed * 1000) / simulation.drops_used
    }


def run_all_benchmarks(
    jets_list: list,
    drops: int = 5000,
    config: Optional[TowerConfig] = None
) -> list:
    """Run comprehensive benchmarks."""
    results = []

    print("=" * 60)
    print("ROCKFALL SIMULATION PERFORMANCE BENCHMARK")
    print("=" * 60)
    print()

    for jets in jets_list:
        print(f"Benchmarking {drops} drops ({len(jets)} jets)...")
        result = benchmark_drops(jets, num_drops=drops, config=config)
        results.append(result)
        print(f"  Drops/sec: {result['drops_per_second']:.1f}")
        print(f"  ms/drop:   {result['ms_per_drop']:.3f}")
        print()

        print(f"Benchmarking cycle detection ({len(jets)} jets)...")
        result = benchmark_detection(jets, config=config)
        results.append(result)
        print(f"  Cycle: start={result['cycle_start']}, length={result['cycle_length']}, "
              f"+{result['cycle_height']} rows, exact={result['exact']}")
        print(f"  Drops until found: {result['num_drops']}")
        print(f"  ms/drop:   {result['ms_per_drop']:.3f}")
        print()

    print("=" * 60)
    print("SUMMARY")
    print("=" * 60)
    print()
    print(f"{'Mode':<20} {'Jets':>6} {'Drops':>8} {'Drops/s':>12} {'ms/drop':>10}")
    print("-" * 60)

    for r in results:
        print(f"{r['mode']:<20} {r['jet_count']:>6} {r['num_drops']:>8} "
              f"{r['drops_per_second']:>12.1f} {r['ms_per_drop']:>10.3f}")

    return results


def main():
    parser = argparse.ArgumentParser(description="Benchmark rockfall simulation performance")
    parser.add_argument("--drops", type=int, default=5000, help="Drops per throughput benchmark")
    parser.add_argument("--jets", type=str, default=None,
                        help="Jet pattern file (uses the example and a random pattern if not given)")
    parser.add_argument("--config", type=str, default=None, help="Path to tower_config.yaml")
    parser.add_argument("--quick", action="store_true", help="Quick benchmark (fewer drops)")

    args = parser.parse_args()

    config = load_config(args.config)
    drops = 500 if args.quick else args.drops

    if args.jets:
        with open(args.jets, "r") as f:
            jets_list = [JetPattern.parse(f.readline())]
    else:
        jets_list = [JetPattern.parse(EXAMPLE_JETS), random_jets(10091)]

    run_all_benchmarks(jets_list, drops=drops, config=config)

    return 0


if __name__ == "__main__":
    sys.exit(main())
