"""
Unit tests for SweepPresetDatabase

Tests packaged presets, YAML overrides merged over built-in defaults, and
fallback behavior for missing or malformed files.
"""

from pathlib import Path
import sys
import threading

import pytest

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from core.solver import SolverOptions
from utils import sweep_presets
from utils.sweep_presets import (
    BICARBONATE_SWEEP_PRESET,
    PH_SWEEP_PRESET,
    SweepPresetDatabase,
    get_default_presets,
)


OVERRIDE_YAML = """
solver:
  tolerance: 1.0e-9

presets:
  ph_open_atmosphere:
    step: 0.5

  ph_high_pco2:
    kind: ph
    description: "Closed vessel"
    fixed:
      pco2_atm: 1.0e-2
    start: 4.0
    stop: 9.0
    step: 0.25
"""


class TestPackagedPresets:
    """Presets shipped in databases/sweep_presets.yaml"""

    def test_ph_preset(self):
        preset = get_default_presets().get_preset(PH_SWEEP_PRESET)
        assert preset.kind == "ph"
        assert preset.fixed == {"pco2_atm": 4.0e-4}
        assert preset.start == 0.0
        assert preset.stop == 14.0
        assert preset.step == 0.1

    def test_bicarbonate_preset(self):
        preset = get_default_presets().get_preset(BICARBONATE_SWEEP_PRESET)
        assert preset.kind == "bicarbonate"
        assert preset.fixed == {"dic_mol_L": 1.0e-4}
        assert preset.start == 1.0e-8
        assert preset.factor == 1.2
        assert preset.stop is None

    def test_solver_options(self):
        assert get_default_presets().get_solver_options() == SolverOptions(1e-6, 10_000)

    def test_list_presets(self):
        assert get_default_presets().list_presets() == [BICARBONATE_SWEEP_PRESET, PH_SWEEP_PRESET]

    def test_unknown_preset(self):
        with pytest.raises(KeyError, match="Unknown sweep preset"):
            get_default_presets().get_preset("tidal_pool")

    def test_shared_instance(self):
        assert get_default_presets() is get_default_presets()

    def test_shared_instance_across_threads(self, monkeypatch):
        """Concurrent first access creates exactly one database"""
        monkeypatch.setattr(sweep_presets, "_default_database", None)
        seen = []

        def fetch():
            seen.append(get_default_presets())

        threads = [threading.Thread(target=fetch) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len(seen) == 8
        assert all(db is seen[0] for db in seen)
        assert seen[0]._yaml_data is not None


class TestYamlOverrides:
    """Custom YAML merged over defaults"""

    @pytest.fixture
    def override_db(self, tmp_path):
        path = tmp_path / "presets.yaml"
        path.write_text(OVERRIDE_YAML)
        return SweepPresetDatabase(yaml_path=str(path))

    def test_solver_override(self, override_db):
        options = override_db.get_solver_options()
        assert options.tolerance == 1e-9
        assert options.max_iterations == 10_000

    def test_partial_preset_override(self, override_db):
        """Only step changes; the rest comes from defaults"""
        preset = override_db.get_preset(PH_SWEEP_PRESET)
        assert preset.step == 0.5
        assert preset.stop == 14.0
        assert preset.fixed == {"pco2_atm": 4.0e-4}

    def test_new_preset(self, override_db):
        preset = override_db.get_preset("ph_high_pco2")
        assert preset.description == "Closed vessel"
        assert preset.fixed["pco2_atm"] == 1.0e-2
        assert preset.step == 0.25
        assert "ph_high_pco2" in override_db.list_presets()


class TestFallback:
    """Missing or malformed YAML falls back to built-in defaults"""

    def test_missing_file(self, tmp_path):
        db = SweepPresetDatabase(yaml_path=str(tmp_path / "absent.yaml"))
        assert db.get_preset(PH_SWEEP_PRESET).step == 0.1
        assert db.get_solver_options().tolerance == 1e-6

    def test_malformed_file(self, tmp_path):
        path = tmp_path / "broken.yaml"
        path.write_text("presets: [unclosed\n")
        db = SweepPresetDatabase(yaml_path=str(path))
        assert db.get_preset(BICARBONATE_SWEEP_PRESET).factor == 1.2

    def test_non_mapping_file(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- just\n- a list\n")
        db = SweepPresetDatabase(yaml_path=str(path))
        assert db.list_presets() == [BICARBONATE_SWEEP_PRESET, PH_SWEEP_PRESET]
