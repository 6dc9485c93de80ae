"""
Tier 1 Tool: Carbonate speciation

Derives the full carbonate speciation (PCO2, pH, CO2(aq), H2CO3, HCO3⁻, CO3²⁻)
from either of two measurement pairs:

- PCO2 + pH      closed form via Henry's law and K1/K2
- HCO3⁻ + DIC    fixed-point solve on the DIC mass balance

Constants are fixed (KH = 3.3e-2, K1 = 4.3e-7, K2 = 4.7e-11); no temperature
or ionic-strength correction.

Performance: <1 ms per call
"""

from typing import Optional
import logging

from core.carbonate_system import CarbonateSystem
from core.schemas import CarbonateSpeciationResult, ConfidenceLevel, ProvenanceMetadata
from core.solver import SolverOptions
from core.species import PH, Species, concentration
from utils.sweep_presets import get_default_presets

logger = logging.getLogger(__name__)


ENGINE_VERSION = "1.0.0"

COMMON_ASSUMPTIONS = [
    "Equilibrium constants fixed at KH=3.3e-2 mol/(L·atm), K1=4.3e-7, K2=4.7e-11 mol/L",
    "Dissolved CO2 and carbonic acid treated as one pool (CO2(aq) = H2CO3)",
    "Ideal solution: activities equal concentrations",
]

NATURAL_LOG_PH_WARNING = (
    "pH derived from H2CO3/HCO3- uses -ln([H+]) rather than -log10([H+]); "
    "it is ln(10) ≈ 2.303 times the conventional pH"
)


def calculate_speciation_from_pco2_ph(pco2_atm: float, pH: float) -> CarbonateSpeciationResult:
    """
    Calculate carbonate speciation from CO2 partial pressure and pH.

    Args:
        pco2_atm: Partial pressure of CO2 (atm), e.g. 4e-4 for open atmosphere
        pH: Solution pH (0-14)

    Returns:
        CarbonateSpeciationResult with all six species values

    Example:
        >>> result = calculate_speciation_from_pco2_ph(4.0e-4, 8.1)
        >>> f"{result.hco3_mol_L:.3e}"
        '7.146e-04'

    Raises:
        InvalidValueError: If pco2_atm is negative
        InvalidRangeError: If pH is outside [0, 14]
        MissingInputError: If either input is None
    """
    logger.info(f"Carbonate speciation from PCO2={pco2_atm} atm, pH={pH}")

    system = CarbonateSystem.from_pco2_ph(
        concentration(pco2_atm, Species.PCO2),
        PH(pH),
    )

    provenance = ProvenanceMetadata(
        model="carbonate.pco2_ph",
        version=ENGINE_VERSION,
        confidence=ConfidenceLevel.HIGH,
        sources=["Stumm & Morgan (1996), Aquatic Chemistry, 3rd ed., Ch. 4"],
        assumptions=list(COMMON_ASSUMPTIONS),
    )
    result = _build_result(system, provenance)
    logger.info(f"Dominant species: {result.dominant_species} (DIC={result.dic_mol_L:.3e} mol/L)")
    return result


def calculate_speciation_from_hco3_dic(
    hco3_mol_L: float,
    dic_mol_L: float,
    tolerance: Optional[float] = None,
    max_iterations: Optional[int] = None,
) -> CarbonateSpeciationResult:
    """
    Calculate carbonate speciation from bicarbonate and DIC.

    CO3²⁻ has no closed form here; it is solved by fixed-point iteration on
    the DIC mass balance, seeded with CO2(aq) = DIC - HCO3⁻.

    Args:
        hco3_mol_L: Bicarbonate concentration (mol/L), must be > 0
        dic_mol_L: Dissolved inorganic carbon (mol/L), must exceed hco3_mol_L
        tolerance: Convergence tolerance on CO2(aq) (default from presets, 1e-6)
        max_iterations: Iteration cap (default from presets, 10000)

    Returns:
        CarbonateSpeciationResult with all six species values

    Raises:
        ConvergenceError: If HCO3⁻ is zero, DIC <= HCO3⁻, or no convergence
        InvalidValueError: If an input is negative or the mass balance
            leaves negative H2CO3
        InvalidRangeError: If the derived pH falls outside [0, 14]
    """
    logger.info(f"Carbonate speciation from HCO3-={hco3_mol_L} mol/L, DIC={dic_mol_L} mol/L")

    defaults = get_default_presets().get_solver_options()
    options = SolverOptions(
        tolerance=tolerance if tolerance is not None else defaults.tolerance,
        max_iterations=max_iterations if max_iterations is not None else defaults.max_iterations,
    )

    system = CarbonateSystem.from_hco3_dic(
        concentration(hco3_mol_L, Species.HCO3),
        concentration(dic_mol_L, Species.DIC),
        options=options,
    )

    provenance = ProvenanceMetadata(
        model="carbonate.hco3_dic",
        version=ENGINE_VERSION,
        confidence=ConfidenceLevel.LOW,
        sources=["Stumm & Morgan (1996), Aquatic Chemistry, 3rd ed., Ch. 4"],
        assumptions=COMMON_ASSUMPTIONS + [
            f"Fixed-point tolerance {options.tolerance:.1e} mol/L on CO2(aq)",
        ],
        warnings=[NATURAL_LOG_PH_WARNING],
    )
    result = _build_result(system, provenance)
    logger.info(f"PCO2={result.pco2_atm:.3e} atm, pH={result.pH:.3f}")
    return result


def _build_result(system: CarbonateSystem, provenance: ProvenanceMetadata) -> CarbonateSpeciationResult:
    dominant = _dominant_species(system)
    return CarbonateSpeciationResult(
        input_pair=system.input_pair,
        pco2_atm=system.pco2_atm,
        pH=system.pH_value,
        co2_aq_mol_L=system.co2_aq_mol_L,
        h2co3_mol_L=system.h2co3_mol_L,
        hco3_mol_L=system.hco3_mol_L,
        co3_mol_L=system.co3_mol_L,
        dic_mol_L=system.dic_mol_L,
        dominant_species=dominant,
        interpretation=_interpret(system, dominant),
        provenance=provenance,
    )


def _dominant_species(system: CarbonateSystem) -> str:
    fractions = {
        Species.H2CO3.value: system.h2co3_mol_L,
        Species.HCO3.value: system.hco3_mol_L,
        Species.CO3.value: system.co3_mol_L,
    }
    return max(fractions, key=fractions.get)


def _interpret(system: CarbonateSystem, dominant: str) -> str:
    dic = system.dic_mol_L
    if dic <= 0.0:
        return "No dissolved inorganic carbon"

    share = {
        Species.H2CO3.value: system.h2co3_mol_L,
        Species.HCO3.value: system.hco3_mol_L,
        Species.CO3.value: system.co3_mol_L,
    }[dominant] / dic

    if dominant == Species.H2CO3.value:
        regime = "Acidic regime: DIC is mostly dissolved CO2/carbonic acid"
    elif dominant == Species.HCO3.value:
        regime = "Buffered regime: DIC is mostly bicarbonate"
    else:
        regime = "Alkaline regime: DIC is mostly carbonate"
    return f"{regime} ({share:.0%} {dominant})"
