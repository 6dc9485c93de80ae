"""
Utility modules for carbonate equilibrium tools.

- sweep_presets: YAML-backed sweep ranges and solver limits
"""
