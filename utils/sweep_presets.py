"""
Sweep preset database.

Loads the sweep ranges and solver limits used by the speciation sweeps from
databases/sweep_presets.yaml. The YAML is read lazily on first access and
cached. If the file is missing or cannot be parsed, the built-in defaults
below are used and the problem is logged.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
import copy
import logging
import threading
from pathlib import Path

import yaml

from core.solver import SolverOptions, DEFAULT_MAX_ITERATIONS, DEFAULT_TOLERANCE

logger = logging.getLogger(__name__)


PH_SWEEP_PRESET = "ph_open_atmosphere"
BICARBONATE_SWEEP_PRESET = "bicarbonate_fixed_dic"

DEFAULT_PRESET_DATA: Dict[str, Any] = {
    "solver": {
        "tolerance": DEFAULT_TOLERANCE,
        "max_iterations": DEFAULT_MAX_ITERATIONS,
    },
    "presets": {
        PH_SWEEP_PRESET: {
            "kind": "ph",
            "description": "H2CO3 / HCO3- / CO3-2 vs pH at atmospheric PCO2",
            "fixed": {"pco2_atm": 4.0e-4},
            "start": 0.0,
            "stop": 14.0,
            "step": 0.1,
        },
        BICARBONATE_SWEEP_PRESET: {
            "kind": "bicarbonate",
            "description": "PCO2 vs HCO3- at fixed DIC, geometric HCO3- steps",
            "fixed": {"dic_mol_L": 1.0e-4},
            "start": 1.0e-8,
            "factor": 1.2,
        },
    },
}


@dataclass(frozen=True)
class SweepPreset:
    """
    Definition of one speciation sweep.

    Attributes:
        name: Preset key
        kind: "ph" (linear pH steps) or "bicarbonate" (geometric HCO3- steps)
        description: Human-readable summary
        fixed: Quantities held constant (e.g. {"pco2_atm": 4e-4})
        start: First value of the swept variable
        stop: Last value (pH sweeps only; bicarbonate sweeps stop at DIC)
        step: Linear increment (pH sweeps)
        factor: Geometric growth factor (bicarbonate sweeps)
    """
    name: str
    kind: str
    description: str = ""
    fixed: Dict[str, float] = field(default_factory=dict)
    start: float = 0.0
    stop: Optional[float] = None
    step: Optional[float] = None
    factor: Optional[float] = None


class SweepPresetDatabase:
    """
    YAML-backed sweep preset lookup.

    Usage:
        db = SweepPresetDatabase()
        preset = db.get_preset("ph_open_atmosphere")
        options = db.get_solver_options()
    """

    def __init__(self, yaml_path: Optional[str] = None):
        """
        Initialize preset database.

        Args:
            yaml_path: Path to preset YAML (defaults to databases/sweep_presets.yaml)
        """
        self.yaml_path = yaml_path or self._default_yaml_path()
        self._yaml_data: Optional[Dict] = None

    def _default_yaml_path(self) -> str:
        """Get default YAML path relative to this module"""
        base_dir = Path(__file__).parent.parent
        return str(base_dir / "databases" / "sweep_presets.yaml")

    def _load_yaml(self) -> Dict:
        """Lazy load YAML data on first access"""
        if self._yaml_data is not None:
            return self._yaml_data

        yaml_file = Path(self.yaml_path)
        loaded: Any = None
        if not yaml_file.exists():
            logger.warning(f"Preset file not found: {self.yaml_path}; using built-in defaults")
        else:
            try:
                with open(yaml_file, "r") as f:
                    loaded = yaml.safe_load(f)
                logger.info(f"Loaded sweep presets from {self.yaml_path}")
            except (OSError, yaml.YAMLError) as e:
                logger.error(f"Failed to load preset YAML {self.yaml_path}: {e}; using built-in defaults")

        if not isinstance(loaded, dict):
            loaded = {}
        self._yaml_data = self._merge_with_defaults(loaded)
        return self._yaml_data

    @staticmethod
    def _merge_with_defaults(loaded: Dict) -> Dict:
        merged = copy.deepcopy(DEFAULT_PRESET_DATA)
        merged["solver"].update(loaded.get("solver") or {})
        for name, preset in (loaded.get("presets") or {}).items():
            base = merged["presets"].get(name, {})
            merged["presets"][name] = {**base, **preset}
        return merged

    def list_presets(self) -> List[str]:
        """Names of all available presets"""
        return sorted(self._load_yaml()["presets"])

    def get_preset(self, name: str) -> SweepPreset:
        """
        Look up a sweep preset.

        Args:
            name: Preset key (e.g., "ph_open_atmosphere")

        Returns:
            SweepPreset

        Raises:
            KeyError: If no preset has that name
        """
        presets = self._load_yaml()["presets"]
        if name not in presets:
            raise KeyError(f"Unknown sweep preset '{name}'. Available: {sorted(presets)}")

        entry = presets[name]
        return SweepPreset(
            name=name,
            kind=entry["kind"],
            description=entry.get("description", ""),
            fixed={key: float(value) for key, value in (entry.get("fixed") or {}).items()},
            start=float(entry.get("start", 0.0)),
            stop=_optional_float(entry.get("stop")),
            step=_optional_float(entry.get("step")),
            factor=_optional_float(entry.get("factor")),
        )

    def get_solver_options(self) -> SolverOptions:
        """Solver limits configured for sweeps and tools"""
        solver = self._load_yaml()["solver"]
        return SolverOptions(
            tolerance=float(solver["tolerance"]),
            max_iterations=int(solver["max_iterations"]),
        )


def _optional_float(value: Any) -> Optional[float]:
    return None if value is None else float(value)


_default_database: Optional[SweepPresetDatabase] = None
_default_database_lock = threading.Lock()


def get_default_presets() -> SweepPresetDatabase:
    """
    Shared preset database backed by the packaged YAML file.

    Server tools call this from worker threads; creation and the first YAML
    load happen under a lock so every thread sees the same instance.
    """
    global _default_database
    with _default_database_lock:
        if _default_database is None:
            database = SweepPresetDatabase()
            database._load_yaml()
            _default_database = database
    return _default_database
