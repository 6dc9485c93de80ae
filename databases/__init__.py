"""Database configurations for carbonate equilibrium tools.

This package contains YAML configuration files for:
- sweep_presets.yaml: Sweep ranges and solver limits for the speciation sweeps
"""
