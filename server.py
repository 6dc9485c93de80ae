"""
Carbonate Equilibrium MCP Server

FastMCP server providing carbonate-system speciation tools for AI agents.

Architecture:
- Core: immutable species value types, fixed constants, equilibrium
  formulas and a bounded fixed-point solver (core/)
- Tier 1: speciation and sweep tools returning pydantic results (tools/)

Implemented Tools:
- carbonate_speciation_from_pco2_ph   (closed form)
- carbonate_speciation_from_hco3_dic  (fixed-point solve)
- carbonate_sweep_ph                  (species vs pH at fixed PCO2)
- carbonate_sweep_bicarbonate         (PCO2 vs HCO3- at fixed DIC)
- carbonate_get_server_info

Usage:
    python server.py
"""

from fastmcp import FastMCP
from mcp.types import ToolAnnotations
import anyio
import logging
from typing import Literal, Optional

from tools.chemistry.carbonate_speciation import (
    ENGINE_VERSION,
    calculate_speciation_from_hco3_dic,
    calculate_speciation_from_pco2_ph,
)
from tools.chemistry.speciation_sweeps import (
    sweep_bicarbonate,
    sweep_ph,
    sweep_result_from_frame,
)
from core.constants import CARBONATE_CONSTANTS
from core.schemas import CarbonateSpeciationResult, SpeciationSweepResult

# Pydantic imports for input validation
from pydantic import BaseModel, Field, ConfigDict

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


# ============================================================================
# Pydantic Input Models
# ============================================================================

class SpeciationFromPCO2Input(BaseModel):
    """Input for speciation from CO2 partial pressure and pH."""
    model_config = ConfigDict(validate_assignment=True)

    pco2_atm: float = Field(
        ...,
        description="Partial pressure of CO2 in atm (e.g., 4e-4 for open atmosphere)",
        ge=0.0,
    )
    pH: float = Field(
        ...,
        description="Solution pH",
        ge=0.0,
        le=14.0,
    )


class SpeciationFromHCO3Input(BaseModel):
    """Input for speciation from bicarbonate and dissolved inorganic carbon."""
    model_config = ConfigDict(validate_assignment=True)

    hco3_mol_L: float = Field(
        ...,
        description="Bicarbonate concentration in mol/L (must be > 0)",
        gt=0.0,
    )
    dic_mol_L: float = Field(
        ...,
        description="Dissolved inorganic carbon in mol/L (must exceed HCO3-)",
        gt=0.0,
    )
    tolerance: Optional[float] = Field(
        default=None,
        description="Fixed-point convergence tolerance on CO2(aq), mol/L (default 1e-6)",
        gt=0.0,
    )
    max_iterations: Optional[int] = Field(
        default=None,
        description="Fixed-point iteration cap (default 10000)",
        ge=1,
        le=1_000_000,
    )


class SweepPHInput(BaseModel):
    """Input for a pH sweep at fixed PCO2."""
    model_config = ConfigDict(validate_assignment=True)

    pco2_atm: Optional[float] = Field(default=None, description="Fixed PCO2 in atm (default 4e-4)", ge=0.0)
    ph_start: Optional[float] = Field(default=None, description="First pH (default 0.0)", ge=0.0, le=14.0)
    ph_stop: Optional[float] = Field(default=None, description="Last pH, inclusive (default 14.0)", ge=0.0, le=14.0)
    ph_step: Optional[float] = Field(default=None, description="pH increment (default 0.1)", gt=0.0, le=14.0)
    on_error: Literal["skip", "raise"] = Field(default="skip", description="Drop or propagate failing samples")


class SweepBicarbonateInput(BaseModel):
    """Input for a bicarbonate sweep at fixed DIC."""
    model_config = ConfigDict(validate_assignment=True)

    dic_mol_L: Optional[float] = Field(default=None, description="Fixed DIC in mol/L (default 1e-4)", gt=0.0)
    hco3_start: Optional[float] = Field(default=None, description="First HCO3- in mol/L (default 1e-8)", gt=0.0)
    growth_factor: Optional[float] = Field(default=None, description="Multiplier between samples (default 1.2)", gt=1.0)
    on_error: Literal["skip", "raise"] = Field(default="skip", description="Drop or propagate failing samples")


# ============================================================================
# Initialize FastMCP Server
# ============================================================================

mcp = FastMCP("Carbonate Equilibrium")


# ============================================================================
# Tier 1: Speciation Tools
# ============================================================================

@mcp.tool(
    name="carbonate_speciation_from_pco2_ph",
    annotations=ToolAnnotations(
        readOnlyHint=True,
        openWorldHint=False,
    )
)
async def speciation_from_pco2_ph(params: SpeciationFromPCO2Input) -> CarbonateSpeciationResult:
    """
    Derive full carbonate speciation from CO2 partial pressure and pH.

    Closed form: CO2(aq) = KH·PCO2, H2CO3 = CO2(aq), HCO3- = K1·H2CO3/[H+],
    CO3-2 = K2·HCO3-/[H+] with [H+] = 10^-pH.

    Args:
        params (SpeciationFromPCO2Input): Validated input parameters containing:
            - pco2_atm (float): Partial pressure of CO2 (atm)
            - pH (float): Solution pH (0-14)

    Returns:
        CarbonateSpeciationResult with PCO2, pH, CO2(aq), H2CO3, HCO3-, CO3-2,
        DIC, dominant species and provenance.

    Example:
        result = await speciation_from_pco2_ph(SpeciationFromPCO2Input(pco2_atm=4e-4, pH=8.1))
        print(result.hco3_mol_L)  # 7.15e-04
    """
    return await anyio.to_thread.run_sync(
        lambda: calculate_speciation_from_pco2_ph(params.pco2_atm, params.pH)
    )


@mcp.tool(
    name="carbonate_speciation_from_hco3_dic",
    annotations=ToolAnnotations(
        readOnlyHint=True,
        openWorldHint=False,
    )
)
async def speciation_from_hco3_dic(params: SpeciationFromHCO3Input) -> CarbonateSpeciationResult:
    """
    Derive full carbonate speciation from bicarbonate and DIC.

    CO3-2 is solved by bounded fixed-point iteration on the DIC mass balance.
    The returned pH uses -ln([H+]) (known model defect, flagged in provenance).

    Args:
        params (SpeciationFromHCO3Input): Validated input parameters containing:
            - hco3_mol_L (float): Bicarbonate (mol/L)
            - dic_mol_L (float): Dissolved inorganic carbon (mol/L)
            - tolerance (Optional[float]): Convergence tolerance
            - max_iterations (Optional[int]): Iteration cap

    Returns:
        CarbonateSpeciationResult (see carbonate_speciation_from_pco2_ph)
    """
    return await anyio.to_thread.run_sync(
        lambda: calculate_speciation_from_hco3_dic(
            params.hco3_mol_L,
            params.dic_mol_L,
            tolerance=params.tolerance,
            max_iterations=params.max_iterations,
        )
    )


# ============================================================================
# Tier 1: Sweep Tools
# ============================================================================

@mcp.tool(
    name="carbonate_sweep_ph",
    annotations=ToolAnnotations(
        readOnlyHint=True,
        openWorldHint=False,
    )
)
async def sweep_ph_tool(params: SweepPHInput) -> SpeciationSweepResult:
    """
    Sample H2CO3, HCO3- and CO3-2 across a pH range at fixed PCO2.

    Defaults: PCO2 = 4e-4 atm, pH 0.0 to 14.0 in steps of 0.1 (141 samples).

    Returns:
        SpeciationSweepResult with columns [pH, H2CO3, HCO3-, CO3-2] and one
        record per sample.
    """
    frame = await anyio.to_thread.run_sync(
        lambda: sweep_ph(
            pco2_atm=params.pco2_atm,
            ph_start=params.ph_start,
            ph_stop=params.ph_stop,
            ph_step=params.ph_step,
            on_error=params.on_error,
        )
    )
    logger.info(f"pH sweep: {len(frame)} samples ({frame.attrs['skipped']} skipped)")
    return sweep_result_from_frame(frame, "ph")


@mcp.tool(
    name="carbonate_sweep_bicarbonate",
    annotations=ToolAnnotations(
        readOnlyHint=True,
        openWorldHint=False,
    )
)
async def sweep_bicarbonate_tool(params: SweepBicarbonateInput) -> SpeciationSweepResult:
    """
    Sample PCO2 and pH across geometric HCO3- steps at fixed DIC.

    Defaults: DIC = 1e-4 mol/L, HCO3- from 1e-8 multiplied by 1.2 up to DIC.
    Samples whose derived pH exceeds 14 are skipped unless on_error="raise".

    Returns:
        SpeciationSweepResult with columns [HCO3-, PCO2, pH].
    """
    frame = await anyio.to_thread.run_sync(
        lambda: sweep_bicarbonate(
            dic_mol_L=params.dic_mol_L,
            hco3_start=params.hco3_start,
            growth_factor=params.growth_factor,
            on_error=params.on_error,
        )
    )
    logger.info(f"Bicarbonate sweep: {len(frame)} samples ({frame.attrs['skipped']} skipped)")
    return sweep_result_from_frame(frame, "bicarbonate")


# ============================================================================
# Server Info
# ============================================================================

@mcp.tool(
    name="carbonate_get_server_info",
    annotations=ToolAnnotations(
        readOnlyHint=True,
        openWorldHint=False,
    )
)
async def get_server_info() -> dict:
    """
    Get information about the carbonate equilibrium server and its tools.

    Returns:
        Dictionary with server name, version, constants and tool list.
    """
    return {
        "server_name": "Carbonate Equilibrium MCP Server",
        "version": ENGINE_VERSION,
        "constants": {
            "KH_mol_per_L_atm": CARBONATE_CONSTANTS.KH,
            "K1_mol_per_L": CARBONATE_CONSTANTS.K1,
            "K2_mol_per_L": CARBONATE_CONSTANTS.K2,
        },
        "tools": [
            "carbonate_speciation_from_pco2_ph",
            "carbonate_speciation_from_hco3_dic",
            "carbonate_sweep_ph",
            "carbonate_sweep_bicarbonate",
            "carbonate_get_server_info",
        ],
        "units": {"PCO2": "atm", "concentrations": "mol/L"},
        "known_issues": [
            "pH derived from (HCO3-, DIC) uses the natural logarithm of [H+]",
        ],
    }


# ============================================================================
# Run Server
# ============================================================================

if __name__ == "__main__":
    logger.info("=" * 70)
    logger.info("Carbonate Equilibrium MCP Server")
    logger.info("=" * 70)
    logger.info("Implemented Tools:")
    logger.info("  [Tier 1] carbonate_speciation_from_pco2_ph - Closed-form speciation")
    logger.info("  [Tier 1] carbonate_speciation_from_hco3_dic - Fixed-point speciation")
    logger.info("  [Tier 1] carbonate_sweep_ph - Species vs pH at fixed PCO2")
    logger.info("  [Tier 1] carbonate_sweep_bicarbonate - PCO2 vs HCO3- at fixed DIC")
    logger.info("  [Info] carbonate_get_server_info - Server information")
    logger.info("=" * 70)

    # Run the server
    mcp.run()
