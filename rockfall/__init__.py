"""
Rockfall Package
================

Simulates rocks falling into a narrow chamber under a repeating jet pattern
and reports how tall the tower grows.

- tower_core: chamber geometry, rock catalog, jets, stepping, cycle detection
  and extrapolation
- evaluation: command-line harness that reads a jet pattern and prints heights

All tunable parameters are in tower_config.yaml.
"""
