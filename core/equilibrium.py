"""
Carbonate equilibrium formulas.

Pure functions implementing Henry's law, the two carbonic acid dissociation
equilibria and the DIC mass balance, in both directions. Every function takes
validated value types (Concentration, PH) and returns a plain float; callers
wrap the result in the value type for the species it represents.

Equilibria (constants from core.constants):
    Henry's law:      [CO2(aq)] = KH · PCO2
    Hydration:        [H2CO3]   = [CO2(aq)]   (model assumption)
    First dissoc.:    [HCO3⁻]   = K1 · [H2CO3] / [H⁺]
    Second dissoc.:   [CO3²⁻]   = K2 · [HCO3⁻] / [H⁺]
    Mass balance:     DIC       = [H2CO3] + [HCO3⁻] + [CO3²⁻]

Known inconsistency: the forward dissociation formulas use [H⁺] = 10^(-pH),
but calculate_ph_from_h2co3_hco3 returns -ln([H⁺]) (natural logarithm). Both
are kept as-is, so pH derived from (HCO3⁻, DIC) is larger than the base-10 pH
by a factor of ln(10).

When only DIC and HCO3⁻ are known there is no closed form: CO3²⁻ depends on
CO2(aq), which depends on CO3²⁻ through the mass balance. Those cases go
through the bounded fixed-point solver in core.solver.
"""

from typing import Optional
import math

from .constants import K1, K2, KH
from .exceptions import ConvergenceError, InvalidRangeError, MissingInputError
from .solver import FixedPointSolution, SolverOptions, solve_fixed_point
from .species import PH, Concentration


def _require(argument, name: str, target: str):
    if argument is None:
        raise MissingInputError(f"{name} is needed to calculate {target}")
    return argument


def _hydrogen_ion(pH: PH) -> float:
    return 10.0 ** (-pH.value)


# ============================================================================
# Henry's law
# ============================================================================

def calculate_pco2_from_co2aq(co2_aq: Concentration) -> float:
    """
    Partial pressure of CO2 in equilibrium with dissolved CO2.

    Args:
        co2_aq: Dissolved CO2 concentration (mol/L)

    Returns:
        PCO2 (atm)
    """
    _require(co2_aq, "co2_aq", "PCO2")
    return co2_aq.value / KH


def calculate_co2aq_from_pco2(pco2: Concentration) -> float:
    """
    Dissolved CO2 in equilibrium with a CO2 partial pressure.

    Args:
        pco2: Partial pressure of CO2 (atm)

    Returns:
        CO2(aq) concentration (mol/L)
    """
    _require(pco2, "pco2", "CO2(aq) concentration")
    return KH * pco2.value


# ============================================================================
# Hydration (CO2(aq) ≡ H2CO3)
# ============================================================================

def calculate_co2aq_from_h2co3(h2co3: Concentration) -> float:
    """Dissolved CO2 concentration, taken equal to carbonic acid (mol/L)"""
    _require(h2co3, "h2co3", "CO2(aq) concentration")
    return h2co3.value


def calculate_h2co3_from_co2aq(co2_aq: Concentration) -> float:
    """Carbonic acid concentration, taken equal to dissolved CO2 (mol/L)"""
    _require(co2_aq, "co2_aq", "H2CO3 concentration")
    return co2_aq.value


# ============================================================================
# Mass balance
# ============================================================================

def calculate_h2co3_from_dic_hco3_co3(
    dic: Concentration,
    hco3: Concentration,
    co3: Concentration,
) -> float:
    """
    Carbonic acid by DIC mass balance: H2CO3 = DIC - HCO3⁻ - CO3²⁻.

    The result is negative when the inputs are chemically inconsistent
    (HCO3⁻ + CO3²⁻ > DIC). It is returned unchanged; wrapping it in a
    Concentration rejects it.
    """
    _require(dic, "dic", "H2CO3 concentration")
    _require(hco3, "hco3", "H2CO3 concentration")
    _require(co3, "co3", "H2CO3 concentration")
    return dic.value - hco3.value - co3.value


# ============================================================================
# Dissociation equilibria
# ============================================================================

def calculate_hco3_from_h2co3_ph(h2co3: Concentration, pH: PH) -> float:
    """
    Bicarbonate from the first dissociation: HCO3⁻ = K1·H2CO3 / [H⁺].

    Args:
        h2co3: Carbonic acid concentration (mol/L)
        pH: Solution pH, with [H⁺] = 10^(-pH)

    Returns:
        HCO3⁻ concentration (mol/L)
    """
    _require(h2co3, "h2co3", "HCO3- concentration")
    _require(pH, "pH", "HCO3- concentration")
    return (K1 * h2co3.value) / _hydrogen_ion(pH)


def calculate_co3_from_hco3_ph(hco3: Concentration, pH: PH) -> float:
    """
    Carbonate from the second dissociation: CO3²⁻ = K2·HCO3⁻ / [H⁺].

    Args:
        hco3: Bicarbonate concentration (mol/L)
        pH: Solution pH, with [H⁺] = 10^(-pH)

    Returns:
        CO3²⁻ concentration (mol/L)
    """
    _require(hco3, "hco3", "CO3-2 concentration")
    _require(pH, "pH", "CO3-2 concentration")
    return (K2 * hco3.value) / _hydrogen_ion(pH)


def calculate_ph_from_h2co3_hco3(h2co3: Concentration, hco3: Concentration) -> float:
    """
    pH from the first dissociation: [H⁺] = K1·H2CO3 / HCO3⁻, pH = -ln([H⁺]).

    Uses the natural logarithm, unlike the 10^(-pH) convention of the forward
    formulas. See the module docstring.

    Args:
        h2co3: Carbonic acid concentration (mol/L)
        hco3: Bicarbonate concentration (mol/L)

    Returns:
        pH (not range-checked; wrap in PH to validate)

    Raises:
        InvalidRangeError: If either concentration is zero, so that [H⁺] is
            zero or unbounded and no finite pH exists
    """
    _require(h2co3, "h2co3", "pH")
    _require(hco3, "hco3", "pH")
    if h2co3.value == 0.0 or hco3.value == 0.0:
        raise InvalidRangeError(
            f"pH is unbounded for H2CO3={h2co3.value} mol/L, HCO3-={hco3.value} mol/L"
        )
    h_plus = (K1 * h2co3.value) / hco3.value
    return -math.log(h_plus)


# ============================================================================
# Iterative solve from (DIC, HCO3⁻)
# ============================================================================

def _solve_co2_from_dic_hco3(
    dic: Concentration,
    hco3: Concentration,
    options: Optional[SolverOptions],
) -> FixedPointSolution:
    """
    Fixed point on CO2(aq): co2 → DIC - HCO3⁻ - K2·HCO3⁻ / (co2·K1/HCO3⁻).

    Seeded with co2 = DIC - HCO3⁻ (negligible carbonate).
    """
    dic_value = dic.value
    hco3_value = hco3.value

    if hco3_value <= 0.0:
        raise ConvergenceError(
            f"HCO3- must be positive to solve for CO3-2 (got {hco3_value}); "
            "the fixed-point update divides by it"
        )

    def update(co2: float) -> float:
        return dic_value - hco3_value - _co3_from_co2(co2, hco3_value)

    return solve_fixed_point(
        update,
        seed=dic_value - hco3_value,
        options=options,
        label="CO2(aq) from DIC/HCO3-",
    )


def _co3_from_co2(co2: float, hco3_value: float) -> float:
    divisor = co2 * (K1 / hco3_value)
    if divisor <= 0.0:
        raise ConvergenceError(
            f"Non-positive divisor in CO3-2 update (CO2(aq) estimate {co2:.6g} mol/L); "
            "DIC must exceed HCO3-"
        )
    return (K2 * hco3_value) / divisor


def calculate_co3_from_dic_hco3(
    dic: Concentration,
    hco3: Concentration,
    options: Optional[SolverOptions] = None,
) -> float:
    """
    Carbonate concentration from DIC and bicarbonate, solved iteratively.

    Args:
        dic: Dissolved inorganic carbon (mol/L)
        hco3: Bicarbonate concentration (mol/L)
        options: Solver tolerance and iteration cap

    Returns:
        CO3²⁻ concentration (mol/L) from the final iteration

    Raises:
        MissingInputError: If dic or hco3 is None
        ConvergenceError: If HCO3⁻ is zero, DIC <= HCO3⁻, or the solver
            does not converge within the iteration cap
    """
    _require(dic, "dic", "CO3-2 concentration")
    _require(hco3, "hco3", "CO3-2 concentration")
    solution = _solve_co2_from_dic_hco3(dic, hco3, options)
    return _co3_from_co2(solution.previous, hco3.value)


def calculate_pco2_from_dic_hco3(
    dic: Concentration,
    hco3: Concentration,
    options: Optional[SolverOptions] = None,
) -> float:
    """
    Partial pressure of CO2 from DIC and bicarbonate, solved iteratively.

    Args:
        dic: Dissolved inorganic carbon (mol/L)
        hco3: Bicarbonate concentration (mol/L)
        options: Solver tolerance and iteration cap

    Returns:
        PCO2 (atm): the converged CO2(aq) divided by KH

    Raises:
        MissingInputError: If dic or hco3 is None
        ConvergenceError: Same conditions as calculate_co3_from_dic_hco3
    """
    _require(dic, "dic", "PCO2")
    _require(hco3, "hco3", "PCO2")
    solution = _solve_co2_from_dic_hco3(dic, hco3, options)
    return solution.value / KH
