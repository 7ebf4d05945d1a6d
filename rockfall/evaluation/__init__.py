"""
Evaluation Package
==================

Command-line harness that reads a jet pattern and reports tower heights.
"""

from rockfall.evaluation.run_solve import read_jets, solve_targets

__all__ = ["read_jets", "solve_targets"]
