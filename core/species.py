"""
Immutable value types for carbonate system species.

A single Concentration type carries every species quantity. The Species tag
records which role a value plays (bicarbonate, DIC, partial pressure, ...)
and its unit, but carries no behavior of its own.

Usage:
    >>> hco3 = concentration(1.0e-3, Species.HCO3)
    >>> hco3.value
    0.001
    >>> PH(8.1).value
    8.1
"""

from dataclasses import dataclass
from enum import Enum
import math

from .exceptions import InvalidRangeError, InvalidValueError, MissingInputError


PH_MIN = 0.0
PH_MAX = 14.0


class Species(str, Enum):
    """Role of a carbonate system quantity"""
    CO2_AQ = "CO2(aq)"    # Dissolved carbon dioxide
    H2CO3 = "H2CO3"       # Carbonic acid
    HCO3 = "HCO3-"        # Bicarbonate
    CO3 = "CO3-2"         # Carbonate
    DIC = "DIC"           # Dissolved inorganic carbon
    PCO2 = "PCO2"         # Partial pressure of CO2

    @property
    def unit(self) -> str:
        """Unit of quantities tagged with this species"""
        if self is Species.PCO2:
            return "atm"
        return "mol/L"


@dataclass(frozen=True)
class Concentration:
    """
    Non-negative concentration (mol/L) or partial pressure (atm).

    Attributes:
        value: Magnitude in the unit given by ``species.unit``
        species: Species role of the value
    """
    value: float
    species: Species

    def __post_init__(self):
        if self.species is None:
            raise MissingInputError("species is needed to build a concentration")
        species = Species(self.species)
        if self.value is None:
            raise MissingInputError(
                f"{species.value} concentration cannot be None"
            )
        value = float(self.value)
        if not math.isfinite(value):
            raise InvalidValueError(
                f"{species.value} concentration must be finite (got {value})"
            )
        if value < 0:
            raise InvalidValueError(
                f"{species.value} concentration cannot be negative (got {value})"
            )
        object.__setattr__(self, "species", species)
        object.__setattr__(self, "value", value)

    @property
    def unit(self) -> str:
        return self.species.unit


@dataclass(frozen=True)
class PH:
    """pH of the solution, bounded to [0, 14]"""
    value: float

    def __post_init__(self):
        if self.value is None:
            raise MissingInputError("pH value cannot be None")
        value = float(self.value)
        if not PH_MIN <= value <= PH_MAX:
            raise InvalidRangeError(
                f"pH value must be between {PH_MIN:g} and {PH_MAX:g} (got {value})"
            )
        object.__setattr__(self, "value", value)


def concentration(value: float, species: Species) -> Concentration:
    """
    Build a validated Concentration for a species.

    Args:
        value: Concentration in mol/L (atm for Species.PCO2)
        species: Species role of the value

    Returns:
        Immutable Concentration

    Raises:
        MissingInputError: If value or species is None
        InvalidValueError: If value is negative, NaN or infinite
    """
    if species is None:
        raise MissingInputError("species is needed to build a concentration")
    return Concentration(value=value, species=Species(species))
