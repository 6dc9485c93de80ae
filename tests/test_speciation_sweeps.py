"""
Unit tests for carbonate speciation sweeps

Tests:
- pH and bicarbonate grids
- Default sweeps (141 pH samples; 51 HCO3- samples with 6 skipped)
- on_error skip / raise
- Packaging as SpeciationSweepResult
"""

from pathlib import Path
import sys

import numpy as np
import pandas as pd
import pytest

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from core.exceptions import InvalidRangeError, InvalidValueError
from core.schemas import ConfidenceLevel
from tools.chemistry.carbonate_speciation import NATURAL_LOG_PH_WARNING
from tools.chemistry.speciation_sweeps import (
    BICARBONATE_SWEEP_COLUMNS,
    PH_SWEEP_COLUMNS,
    bicarbonate_grid,
    ph_grid,
    sweep_bicarbonate,
    sweep_ph,
    sweep_result_from_frame,
)


# ============================================================================
# Grids
# ============================================================================

class TestGrids:
    """Test sample grids"""

    def test_ph_grid_inclusive(self):
        grid = ph_grid(0.0, 14.0, 0.1)
        assert len(grid) == 141
        assert grid[0] == 0.0
        assert grid[-1] == 14.0
        assert np.all(np.diff(grid) > 0)

    def test_ph_grid_single_point(self):
        assert list(ph_grid(7.0, 7.0, 0.5)) == [7.0]

    def test_ph_grid_invalid(self):
        with pytest.raises(ValueError, match="step"):
            ph_grid(0.0, 14.0, 0.0)
        with pytest.raises(ValueError, match="below start"):
            ph_grid(8.0, 7.0, 0.1)

    def test_bicarbonate_grid(self):
        grid = bicarbonate_grid(1e-8, 1e-4, 1.2)
        assert len(grid) == 51
        assert grid[0] == 1e-8
        assert grid[-1] <= 1e-4
        assert grid[-1] * 1.2 > 1e-4
        assert grid[1] == pytest.approx(1.2e-8)

    def test_bicarbonate_grid_invalid(self):
        with pytest.raises(ValueError, match="start"):
            bicarbonate_grid(0.0, 1e-4, 1.2)
        with pytest.raises(ValueError, match="factor"):
            bicarbonate_grid(1e-8, 1e-4, 1.0)


# ============================================================================
# pH sweep
# ============================================================================

class TestSweepPH:
    """Test sweep_ph"""

    def test_defaults(self):
        frame = sweep_ph()

        assert isinstance(frame, pd.DataFrame)
        assert list(frame.columns) == PH_SWEEP_COLUMNS
        assert len(frame) == 141
        assert frame.attrs["skipped"] == 0
        assert frame.attrs["fixed"] == {"pco2_atm": 4.0e-4}
        assert frame["pH"].iloc[0] == 0.0
        assert frame["pH"].iloc[-1] == 14.0

    def test_h2co3_constant_at_fixed_pco2(self):
        frame = sweep_ph()
        assert np.allclose(frame["H2CO3"], 1.32e-5)

    def test_bicarbonate_and_carbonate_rise_with_ph(self):
        frame = sweep_ph()
        assert frame["HCO3-"].is_monotonic_increasing
        assert frame["CO3-2"].is_monotonic_increasing

    def test_custom_range(self):
        frame = sweep_ph(pco2_atm=1e-3, ph_start=6.0, ph_stop=8.0, ph_step=0.5)
        assert list(frame["pH"]) == [6.0, 6.5, 7.0, 7.5, 8.0]
        assert frame["H2CO3"].iloc[0] == pytest.approx(3.3e-5)

    def test_negative_pco2(self):
        with pytest.raises(InvalidValueError):
            sweep_ph(pco2_atm=-1.0)

    def test_invalid_on_error(self):
        with pytest.raises(ValueError, match="on_error"):
            sweep_ph(on_error="ignore")


# ============================================================================
# Bicarbonate sweep
# ============================================================================

class TestSweepBicarbonate:
    """Test sweep_bicarbonate"""

    def test_defaults_skip_high_ph_samples(self):
        """Upper HCO3- samples derive a natural-log pH above 14"""
        frame = sweep_bicarbonate()

        assert list(frame.columns) == BICARBONATE_SWEEP_COLUMNS
        assert frame.attrs["n_samples"] == 51
        assert frame.attrs["skipped"] == 6
        assert len(frame) == 45
        assert frame["pH"].max() <= 14.0

    def test_first_sample(self):
        frame = sweep_bicarbonate()
        first = frame.iloc[0]
        assert first["HCO3-"] == 1e-8
        assert first["PCO2"] == pytest.approx(3.03e-3, rel=1e-3)
        assert first["pH"] == pytest.approx(5.449, abs=1e-3)

    def test_pco2_falls_as_bicarbonate_rises(self):
        frame = sweep_bicarbonate()
        assert frame["PCO2"].is_monotonic_decreasing
        assert frame["pH"].is_monotonic_increasing

    def test_raise_mode(self):
        with pytest.raises(InvalidRangeError):
            sweep_bicarbonate(on_error="raise")

    def test_small_range_has_no_failures(self):
        frame = sweep_bicarbonate(dic_mol_L=5e-5, hco3_start=1e-8, growth_factor=10.0, on_error="raise")
        assert len(frame) == 4
        assert frame.attrs["skipped"] == 0


# ============================================================================
# Result packaging
# ============================================================================

class TestSweepResult:
    """Test sweep_result_from_frame"""

    def test_ph_sweep_result(self):
        result = sweep_result_from_frame(sweep_ph(), "ph")

        assert result.sweep == "ph"
        assert result.x_variable == "pH"
        assert result.columns == PH_SWEEP_COLUMNS
        assert result.n_samples == 141
        assert len(result.records) == 141
        assert result.n_skipped == 0
        assert result.provenance.confidence == ConfidenceLevel.HIGH
        assert result.records[0]["pH"] == 0.0

    def test_bicarbonate_sweep_result(self):
        result = sweep_result_from_frame(sweep_bicarbonate(), "bicarbonate")

        assert result.x_variable == "HCO3-"
        assert result.fixed == {"dic_mol_L": 1e-4}
        assert result.n_samples == 51
        assert result.n_skipped == 6
        assert len(result.records) == 45
        assert NATURAL_LOG_PH_WARNING in result.provenance.warnings
        assert any("6 samples" in warning for warning in result.provenance.warnings)
