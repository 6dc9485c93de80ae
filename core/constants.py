"""
Equilibrium constants for the aqueous carbonate system.

Values are fixed for a single implicit temperature (about 25°C, freshwater);
no temperature or ionic-strength correction is applied.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class EquilibriumConstants:
    """
    Read-only set of carbonate equilibrium constants.

    Attributes:
        KH: Henry's law constant for CO2 solubility, mol/(L·atm)
        K1: First dissociation constant, H2CO3 ⇌ HCO3⁻ + H⁺ (mol/L)
        K2: Second dissociation constant, HCO3⁻ ⇌ CO3²⁻ + H⁺ (mol/L)
    """
    KH: float = 3.3e-2
    K1: float = 4.3e-7
    K2: float = 4.7e-11


CARBONATE_CONSTANTS = EquilibriumConstants()

KH = CARBONATE_CONSTANTS.KH
K1 = CARBONATE_CONSTANTS.K1
K2 = CARBONATE_CONSTANTS.K2
