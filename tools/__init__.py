"""
MCP tool implementations for carbonate equilibrium.

Tools are organized by tier:
- Tier 1: Chemistry (carbonate speciation, speciation sweeps)
"""

from tools.chemistry.carbonate_speciation import (
    calculate_speciation_from_pco2_ph,
    calculate_speciation_from_hco3_dic,
)
from tools.chemistry.speciation_sweeps import sweep_ph, sweep_bicarbonate

__all__ = [
    "calculate_speciation_from_pco2_ph",
    "calculate_speciation_from_hco3_dic",
    "sweep_ph",
    "sweep_bicarbonate",
]
