"""
Tier 1 Chemistry Tools - carbonate equilibrium calculations.

These tools provide fast (<1 ms per sample) calculations for:
- Carbonate speciation from (PCO2, pH) or (HCO3-, DIC)
- Speciation sweeps over pH or bicarbonate, returned as DataFrames

All tools build the immutable CarbonateSystem from core.
"""

from .carbonate_speciation import (
    calculate_speciation_from_pco2_ph,
    calculate_speciation_from_hco3_dic,
)
from .speciation_sweeps import sweep_ph, sweep_bicarbonate, sweep_result_from_frame

__all__ = [
    "calculate_speciation_from_pco2_ph",
    "calculate_speciation_from_hco3_dic",
    "sweep_ph",
    "sweep_bicarbonate",
    "sweep_result_from_frame",
]
