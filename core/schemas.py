"""
Pydantic models for carbonate speciation responses.

All tool results carry:
- The six speciation values in fixed units (atm for PCO2, mol/L otherwise)
- The derived DIC by mass balance
- Provenance metadata (model, confidence, assumptions, warnings)

Schemas are documented early so downstream agent frameworks can introspect
them without calling the engine.
"""

from typing import Any, Dict, List, Optional, Literal
from pydantic import BaseModel, Field
from enum import Enum


# ============================================================================
# Confidence Levels
# ============================================================================

class ConfidenceLevel(str, Enum):
    """Confidence in result quality"""
    HIGH = "high"          # Closed-form result from fixed constants
    MEDIUM = "medium"      # Iterative result within solver tolerance
    LOW = "low"            # Result relies on a known model defect
    UNKNOWN = "unknown"


# ============================================================================
# Provenance Metadata
# ============================================================================

class ProvenanceMetadata(BaseModel):
    """
    Provenance tracking for all results.

    Lets callers see which construction path produced a value and which
    simplifications it rests on.
    """
    model: str = Field(..., description="Model identifier (e.g., 'carbonate.pco2_ph')")
    version: Optional[str] = Field(None, description="Engine version")
    confidence: ConfidenceLevel = Field(..., description="Confidence level in the result")
    sources: List[str] = Field(default_factory=list, description="Literature references")
    assumptions: List[str] = Field(default_factory=list, description="Key modeling assumptions")
    warnings: List[str] = Field(default_factory=list, description="Known defects or extrapolation notices")


# ============================================================================
# Speciation Results
# ============================================================================

class CarbonateSpeciationResult(BaseModel):
    """Full speciation of an aqueous carbonate system"""
    input_pair: Literal["pco2_ph", "hco3_dic"] = Field(..., description="Measurements the system was built from")

    pco2_atm: float = Field(..., description="Partial pressure of CO2 (atm)", ge=0)
    pH: float = Field(..., description="Solution pH", ge=0, le=14)
    co2_aq_mol_L: float = Field(..., description="Dissolved CO2 (mol/L)", ge=0)
    h2co3_mol_L: float = Field(..., description="Carbonic acid (mol/L)", ge=0)
    hco3_mol_L: float = Field(..., description="Bicarbonate (mol/L)", ge=0)
    co3_mol_L: float = Field(..., description="Carbonate (mol/L)", ge=0)
    dic_mol_L: float = Field(..., description="DIC by mass balance, H2CO3 + HCO3- + CO3-2 (mol/L)", ge=0)

    dominant_species: Literal["H2CO3", "HCO3-", "CO3-2"] = Field(..., description="Largest DIC fraction")
    interpretation: str = Field(..., description="Plain-language summary")

    provenance: ProvenanceMetadata


class SpeciationSweepResult(BaseModel):
    """Speciation sampled over one independent variable"""
    sweep: Literal["ph", "bicarbonate"] = Field(..., description="Sweep kind")
    x_variable: str = Field(..., description="Name of the swept column")
    fixed: Dict[str, float] = Field(default_factory=dict, description="Quantities held fixed during the sweep")
    columns: List[str] = Field(..., description="Column names of each record")
    records: List[Dict[str, Any]] = Field(default_factory=list, description="One record per successful sample")
    n_samples: int = Field(..., description="Samples attempted")
    n_skipped: int = Field(0, description="Samples whose construction failed and were left out")
    provenance: ProvenanceMetadata
