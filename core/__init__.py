"""
Carbonate equilibrium engine.

This package provides:
- Immutable species value types (Concentration tagged by Species, PH)
- The fixed equilibrium constant set (KH, K1, K2)
- Pure equilibrium formulas (Henry's law, dissociation, mass balance)
- A bounded fixed-point solver for the (DIC, HCO3-) case
- The CarbonateSystem aggregate with its two construction paths
- Pydantic response schemas used by the tool layer
"""

from .exceptions import (
    CarbonateChemistryError,
    InvalidValueError,
    InvalidRangeError,
    MissingInputError,
    ConvergenceError,
)
from .species import Species, Concentration, PH, concentration
from .constants import EquilibriumConstants, CARBONATE_CONSTANTS, KH, K1, K2
from .solver import SolverOptions, FixedPointSolution, solve_fixed_point
from .carbonate_system import CarbonateSystem
from .schemas import (
    CarbonateSpeciationResult,
    SpeciationSweepResult,
    ProvenanceMetadata,
    ConfidenceLevel,
)

__all__ = [
    "CarbonateChemistryError",
    "InvalidValueError",
    "InvalidRangeError",
    "MissingInputError",
    "ConvergenceError",
    "Species",
    "Concentration",
    "PH",
    "concentration",
    "EquilibriumConstants",
    "CARBONATE_CONSTANTS",
    "KH",
    "K1",
    "K2",
    "SolverOptions",
    "FixedPointSolution",
    "solve_fixed_point",
    "CarbonateSystem",
    "CarbonateSpeciationResult",
    "SpeciationSweepResult",
    "ProvenanceMetadata",
    "ConfidenceLevel",
]
