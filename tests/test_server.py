"""
MCP server tests

Input model validation and tool calls through the FastMCP in-memory client.
"""

import json
from pathlib import Path
import sys

import pytest
from pydantic import ValidationError

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from server import (
    SpeciationFromHCO3Input,
    SpeciationFromPCO2Input,
    SweepBicarbonateInput,
    SweepPHInput,
)


class TestInputModels:
    """Pydantic input validation"""

    def test_ph_bounds(self):
        with pytest.raises(ValidationError):
            SpeciationFromPCO2Input(pco2_atm=4e-4, pH=15.0)

    def test_negative_pco2(self):
        with pytest.raises(ValidationError):
            SpeciationFromPCO2Input(pco2_atm=-1.0, pH=7.0)

    def test_bicarbonate_must_be_positive(self):
        with pytest.raises(ValidationError):
            SpeciationFromHCO3Input(hco3_mol_L=0.0, dic_mol_L=1e-4)

    def test_solver_defaults(self):
        params = SpeciationFromHCO3Input(hco3_mol_L=1e-8, dic_mol_L=1e-4)
        assert params.tolerance is None
        assert params.max_iterations is None

    def test_sweep_defaults(self):
        assert SweepPHInput().on_error == "skip"
        assert SweepBicarbonateInput().growth_factor is None

    def test_growth_factor_above_one(self):
        with pytest.raises(ValidationError):
            SweepBicarbonateInput(growth_factor=1.0)

    def test_on_error_choices(self):
        with pytest.raises(ValidationError):
            SweepPHInput(on_error="ignore")


class TestMCPServerIntegration:
    """Tool calls through the FastMCP client"""

    @pytest.mark.asyncio
    async def test_speciation_from_pco2_ph(self):
        from fastmcp import Client
        from server import mcp

        async with Client(mcp) as client:
            result = await client.call_tool(
                "carbonate_speciation_from_pco2_ph",
                {"params": {"pco2_atm": 4e-4, "pH": 8.1}},
            )
            parsed = json.loads(result.content[0].text)

            assert parsed["input_pair"] == "pco2_ph"
            assert parsed["h2co3_mol_L"] == pytest.approx(1.32e-5)
            assert parsed["dominant_species"] == "HCO3-"

    @pytest.mark.asyncio
    async def test_speciation_from_hco3_dic(self):
        from fastmcp import Client
        from server import mcp

        async with Client(mcp) as client:
            result = await client.call_tool(
                "carbonate_speciation_from_hco3_dic",
                {"params": {"hco3_mol_L": 1e-8, "dic_mol_L": 1e-4}},
            )
            parsed = json.loads(result.content[0].text)

            assert parsed["pco2_atm"] == pytest.approx(3.03e-3, rel=1e-3)
            assert parsed["provenance"]["confidence"] == "low"

    @pytest.mark.asyncio
    async def test_derived_ph_error(self):
        from fastmcp import Client
        from fastmcp.exceptions import ToolError
        from server import mcp

        async with Client(mcp) as client:
            with pytest.raises(ToolError, match="between 0 and 14"):
                await client.call_tool(
                    "carbonate_speciation_from_hco3_dic",
                    {"params": {"hco3_mol_L": 5e-5, "dic_mol_L": 1e-4}},
                )

    @pytest.mark.asyncio
    async def test_bicarbonate_sweep(self):
        from fastmcp import Client
        from server import mcp

        async with Client(mcp) as client:
            result = await client.call_tool("carbonate_sweep_bicarbonate", {"params": {}})
            parsed = json.loads(result.content[0].text)

            assert parsed["n_samples"] == 51
            assert parsed["n_skipped"] == 6
            assert len(parsed["records"]) == 45

    @pytest.mark.asyncio
    async def test_server_info(self):
        from fastmcp import Client
        from server import mcp

        async with Client(mcp) as client:
            result = await client.call_tool("carbonate_get_server_info", {})
            parsed = json.loads(result.content[0].text)

            assert parsed["constants"]["KH_mol_per_L_atm"] == 3.3e-2
            assert "carbonate_sweep_ph" in parsed["tools"]
