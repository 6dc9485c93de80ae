"""
Tier 1 Tool: Carbonate speciation sweeps

Samples the carbonate system over one independent variable and returns a
pandas DataFrame, one row per sample, ready for plotting:

- sweep_ph:          H2CO3 / HCO3⁻ / CO3²⁻ vs pH at fixed PCO2
                     (default PCO2 = 4e-4 atm, pH 0 → 14 in steps of 0.1)
- sweep_bicarbonate: PCO2 and pH vs HCO3⁻ at fixed DIC
                     (default DIC = 1e-4 mol/L, HCO3⁻ from 1e-8 ×1.2 per step)

Defaults come from databases/sweep_presets.yaml.

A sample whose construction fails (for example a derived pH above 14) is
logged and left out when on_error="skip", or re-raised when on_error="raise".
The number of skipped samples is stored in ``frame.attrs["skipped"]``.
"""

from typing import Dict, List, Optional
import logging

import numpy as np
import pandas as pd

from core.carbonate_system import CarbonateSystem
from core.exceptions import CarbonateChemistryError
from core.schemas import ConfidenceLevel, ProvenanceMetadata, SpeciationSweepResult
from core.species import PH, Species, concentration
from utils.sweep_presets import (
    BICARBONATE_SWEEP_PRESET,
    PH_SWEEP_PRESET,
    get_default_presets,
)
from .carbonate_speciation import ENGINE_VERSION, NATURAL_LOG_PH_WARNING

logger = logging.getLogger(__name__)


ON_ERROR_CHOICES = ("skip", "raise")

PH_SWEEP_COLUMNS = ["pH", Species.H2CO3.value, Species.HCO3.value, Species.CO3.value]
BICARBONATE_SWEEP_COLUMNS = [Species.HCO3.value, Species.PCO2.value, "pH"]


def ph_grid(start: float, stop: float, step: float) -> np.ndarray:
    """
    Evenly spaced pH values from start to stop inclusive.

    Values are rounded to 10 decimals so accumulated float error cannot push
    the last point past ``stop`` (e.g. 14.000000000000002).
    """
    if step <= 0:
        raise ValueError(f"pH step must be positive (got {step})")
    if stop < start:
        raise ValueError(f"pH stop ({stop}) must not be below start ({start})")
    n_points = int(np.floor((stop - start) / step + 1e-9)) + 1
    return np.round(start + step * np.arange(n_points), 10)


def bicarbonate_grid(start: float, dic_mol_L: float, factor: float) -> List[float]:
    """
    Geometric HCO3⁻ values from start, multiplied by factor while <= DIC.
    """
    if start <= 0:
        raise ValueError(f"HCO3- start must be positive (got {start})")
    if factor <= 1.0:
        raise ValueError(f"Growth factor must exceed 1 (got {factor})")

    values = []
    hco3 = start
    while hco3 <= dic_mol_L:
        values.append(hco3)
        hco3 *= factor
    return values


def _check_on_error(on_error: str) -> None:
    if on_error not in ON_ERROR_CHOICES:
        raise ValueError(f"on_error must be one of {ON_ERROR_CHOICES} (got '{on_error}')")


def sweep_ph(
    pco2_atm: Optional[float] = None,
    ph_start: Optional[float] = None,
    ph_stop: Optional[float] = None,
    ph_step: Optional[float] = None,
    on_error: str = "skip",
) -> pd.DataFrame:
    """
    Species concentrations across a pH range at fixed PCO2.

    Args:
        pco2_atm: Partial pressure of CO2 (atm), default 4e-4
        ph_start: First pH, default 0.0
        ph_stop: Last pH (inclusive), default 14.0
        ph_step: pH increment, default 0.1
        on_error: "skip" to drop failing samples, "raise" to propagate

    Returns:
        DataFrame with columns pH, H2CO3, HCO3-, CO3-2 (mol/L)

    Example:
        >>> frame = sweep_ph()
        >>> len(frame)
        141
    """
    _check_on_error(on_error)
    preset = get_default_presets().get_preset(PH_SWEEP_PRESET)
    pco2_atm = preset.fixed["pco2_atm"] if pco2_atm is None else pco2_atm
    ph_start = preset.start if ph_start is None else ph_start
    ph_stop = preset.stop if ph_stop is None else ph_stop
    ph_step = preset.step if ph_step is None else ph_step

    pco2 = concentration(pco2_atm, Species.PCO2)
    grid = ph_grid(ph_start, ph_stop, ph_step)
    logger.info(f"pH sweep: PCO2={pco2_atm} atm, pH {ph_start}→{ph_stop} step {ph_step} ({len(grid)} samples)")

    rows = []
    skipped = 0
    for ph_value in grid:
        try:
            system = CarbonateSystem.from_pco2_ph(pco2, PH(float(ph_value)))
        except CarbonateChemistryError as e:
            if on_error == "raise":
                raise
            skipped += 1
            logger.warning(f"pH sweep: skipped pH={ph_value:g}: {e}")
            continue
        rows.append((system.pH_value, system.h2co3_mol_L, system.hco3_mol_L, system.co3_mol_L))

    frame = pd.DataFrame(rows, columns=PH_SWEEP_COLUMNS)
    frame.attrs["n_samples"] = len(grid)
    frame.attrs["skipped"] = skipped
    frame.attrs["fixed"] = {"pco2_atm": pco2_atm}
    return frame


def sweep_bicarbonate(
    dic_mol_L: Optional[float] = None,
    hco3_start: Optional[float] = None,
    growth_factor: Optional[float] = None,
    on_error: str = "skip",
) -> pd.DataFrame:
    """
    PCO2 and pH across geometric HCO3⁻ steps at fixed DIC.

    With the default DIC of 1e-4 mol/L the upper HCO3⁻ samples derive a
    (natural-log) pH above 14; those samples are skipped by default.

    Args:
        dic_mol_L: Dissolved inorganic carbon (mol/L), default 1e-4
        hco3_start: First HCO3⁻ value (mol/L), default 1e-8
        growth_factor: Multiplier between samples, default 1.2
        on_error: "skip" to drop failing samples, "raise" to propagate

    Returns:
        DataFrame with columns HCO3- (mol/L), PCO2 (atm), pH
    """
    _check_on_error(on_error)
    presets = get_default_presets()
    preset = presets.get_preset(BICARBONATE_SWEEP_PRESET)
    dic_mol_L = preset.fixed["dic_mol_L"] if dic_mol_L is None else dic_mol_L
    hco3_start = preset.start if hco3_start is None else hco3_start
    growth_factor = preset.factor if growth_factor is None else growth_factor
    options = presets.get_solver_options()

    dic = concentration(dic_mol_L, Species.DIC)
    grid = bicarbonate_grid(hco3_start, dic_mol_L, growth_factor)
    logger.info(
        f"Bicarbonate sweep: DIC={dic_mol_L} mol/L, HCO3- from {hco3_start} ×{growth_factor} "
        f"({len(grid)} samples)"
    )

    rows = []
    skipped = 0
    for hco3_value in grid:
        try:
            system = CarbonateSystem.from_hco3_dic(
                concentration(hco3_value, Species.HCO3), dic, options=options
            )
        except CarbonateChemistryError as e:
            if on_error == "raise":
                raise
            skipped += 1
            logger.warning(f"Bicarbonate sweep: skipped HCO3-={hco3_value:.3e}: {e}")
            continue
        rows.append((system.hco3_mol_L, system.pco2_atm, system.pH_value))

    frame = pd.DataFrame(rows, columns=BICARBONATE_SWEEP_COLUMNS)
    frame.attrs["n_samples"] = len(grid)
    frame.attrs["skipped"] = skipped
    frame.attrs["fixed"] = {"dic_mol_L": dic_mol_L}
    return frame


def sweep_result_from_frame(frame: pd.DataFrame, sweep: str) -> SpeciationSweepResult:
    """
    Package a sweep DataFrame as a SpeciationSweepResult.

    Args:
        frame: Output of sweep_ph or sweep_bicarbonate
        sweep: "ph" or "bicarbonate"
    """
    fixed: Dict[str, float] = dict(frame.attrs.get("fixed", {}))
    warnings = []
    if sweep == "bicarbonate":
        warnings.append(NATURAL_LOG_PH_WARNING)
    if frame.attrs.get("skipped"):
        warnings.append(f"{frame.attrs['skipped']} samples failed and were left out")

    return SpeciationSweepResult(
        sweep=sweep,
        x_variable=frame.columns[0],
        fixed=fixed,
        columns=list(frame.columns),
        records=frame.to_dict(orient="records"),
        n_samples=int(frame.attrs.get("n_samples", len(frame))),
        n_skipped=int(frame.attrs.get("skipped", 0)),
        provenance=ProvenanceMetadata(
            model=f"carbonate.sweep_{sweep}",
            version=ENGINE_VERSION,
            confidence=ConfidenceLevel.HIGH if sweep == "ph" else ConfidenceLevel.LOW,
            warnings=warnings,
        ),
    )
