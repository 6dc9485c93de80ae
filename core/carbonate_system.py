"""
Carbonate system aggregate.

CarbonateSystem holds the full speciation of an aqueous carbonate system
(PCO2, pH, CO2(aq), H2CO3, HCO3⁻, CO3²⁻). It is built from one of two pairs of
independent measurements and never changes afterwards:

    from_pco2_ph(pco2, pH)    closed form
        CO2(aq) = KH·PCO2 → H2CO3 = CO2(aq) → HCO3⁻ (K1, pH) → CO3²⁻ (K2, pH)

    from_hco3_dic(hco3, dic)  iterative
        CO3²⁻ (fixed point) → H2CO3 = DIC - HCO3⁻ - CO3²⁻ → CO2(aq) = H2CO3
        → PCO2 = CO2(aq)/KH → pH = -ln(K1·H2CO3/HCO3⁻)

Every derived value is validated as it is wrapped, so a failing formula or an
inconsistent input raises before any CarbonateSystem exists.

Usage:
    >>> system = CarbonateSystem.from_pco2_ph(
    ...     concentration(4.0e-4, Species.PCO2), PH(8.1)
    ... )
    >>> round(system.h2co3_mol_L, 10)
    1.32e-05
"""

from dataclasses import dataclass, fields
from typing import Dict, Optional

from . import equilibrium
from .exceptions import MissingInputError
from .solver import SolverOptions
from .species import PH, Concentration, Species, concentration


INPUT_PAIR_PCO2_PH = "pco2_ph"
INPUT_PAIR_HCO3_DIC = "hco3_dic"


@dataclass(frozen=True)
class CarbonateSystem:
    """
    Immutable speciation of a carbonate system.

    Build instances with from_pco2_ph or from_hco3_dic.

    Attributes:
        pco2: Partial pressure of CO2 (atm)
        pH: Solution pH
        co2_aq: Dissolved CO2 (mol/L)
        h2co3: Carbonic acid (mol/L)
        hco3: Bicarbonate (mol/L)
        co3: Carbonate (mol/L)
        input_pair: Which measurements the system was built from
    """
    pco2: Concentration
    pH: PH
    co2_aq: Concentration
    h2co3: Concentration
    hco3: Concentration
    co3: Concentration
    input_pair: str = INPUT_PAIR_PCO2_PH

    def __post_init__(self):
        for field_ in fields(self):
            if getattr(self, field_.name) is None:
                raise MissingInputError(f"CarbonateSystem requires {field_.name}")

    # ========================================================================
    # Construction
    # ========================================================================

    @classmethod
    def from_pco2_ph(cls, pco2: Concentration, pH: PH) -> "CarbonateSystem":
        """
        Speciate from CO2 partial pressure and pH (closed form).

        Args:
            pco2: Partial pressure of CO2 (atm)
            pH: Solution pH

        Raises:
            MissingInputError: If either input is None
        """
        if pco2 is None:
            raise MissingInputError("pco2 is needed to build a carbonate system")
        if pH is None:
            raise MissingInputError("pH is needed to build a carbonate system")

        co2_aq = concentration(equilibrium.calculate_co2aq_from_pco2(pco2), Species.CO2_AQ)
        h2co3 = concentration(equilibrium.calculate_h2co3_from_co2aq(co2_aq), Species.H2CO3)
        hco3 = concentration(equilibrium.calculate_hco3_from_h2co3_ph(h2co3, pH), Species.HCO3)
        co3 = concentration(equilibrium.calculate_co3_from_hco3_ph(hco3, pH), Species.CO3)

        return cls(
            pco2=pco2,
            pH=pH,
            co2_aq=co2_aq,
            h2co3=h2co3,
            hco3=hco3,
            co3=co3,
            input_pair=INPUT_PAIR_PCO2_PH,
        )

    @classmethod
    def from_hco3_dic(
        cls,
        hco3: Concentration,
        dic: Concentration,
        options: Optional[SolverOptions] = None,
    ) -> "CarbonateSystem":
        """
        Speciate from bicarbonate and DIC (iterative).

        Args:
            hco3: Bicarbonate concentration (mol/L)
            dic: Dissolved inorganic carbon (mol/L)
            options: Solver tolerance and iteration cap

        Raises:
            MissingInputError: If either input is None
            ConvergenceError: If the carbonate fixed point cannot be solved
            InvalidValueError: If the mass balance leaves negative H2CO3
            InvalidRangeError: If the derived pH falls outside [0, 14]
        """
        if hco3 is None:
            raise MissingInputError("hco3 is needed to build a carbonate system")
        if dic is None:
            raise MissingInputError("dic is needed to build a carbonate system")

        co3 = concentration(
            equilibrium.calculate_co3_from_dic_hco3(dic, hco3, options), Species.CO3
        )
        h2co3 = concentration(
            equilibrium.calculate_h2co3_from_dic_hco3_co3(dic, hco3, co3), Species.H2CO3
        )
        co2_aq = concentration(equilibrium.calculate_co2aq_from_h2co3(h2co3), Species.CO2_AQ)
        pco2 = concentration(equilibrium.calculate_pco2_from_co2aq(co2_aq), Species.PCO2)
        pH = PH(equilibrium.calculate_ph_from_h2co3_hco3(h2co3, hco3))

        return cls(
            pco2=pco2,
            pH=pH,
            co2_aq=co2_aq,
            h2co3=h2co3,
            hco3=hco3,
            co3=co3,
            input_pair=INPUT_PAIR_HCO3_DIC,
        )

    # ========================================================================
    # Accessors (plain floats)
    # ========================================================================

    @property
    def pco2_atm(self) -> float:
        return self.pco2.value

    @property
    def pH_value(self) -> float:
        return self.pH.value

    @property
    def co2_aq_mol_L(self) -> float:
        return self.co2_aq.value

    @property
    def h2co3_mol_L(self) -> float:
        return self.h2co3.value

    @property
    def hco3_mol_L(self) -> float:
        return self.hco3.value

    @property
    def co3_mol_L(self) -> float:
        return self.co3.value

    @property
    def dic_mol_L(self) -> float:
        """DIC by mass balance, counting CO2(aq) and H2CO3 once"""
        return self.h2co3.value + self.hco3.value + self.co3.value

    def to_dict(self) -> Dict[str, float]:
        """Species values keyed by species label"""
        return {
            Species.PCO2.value: self.pco2_atm,
            "pH": self.pH_value,
            Species.CO2_AQ.value: self.co2_aq_mol_L,
            Species.H2CO3.value: self.h2co3_mol_L,
            Species.HCO3.value: self.hco3_mol_L,
            Species.CO3.value: self.co3_mol_L,
        }
