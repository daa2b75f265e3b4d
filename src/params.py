from dataclasses import dataclass
from typing import Optional
from pathlib import Path
import numpy as np
import json


WAVE_MODES = ("noWave", "regular", "irregular")
DEFAULT_SEED = 1


#=============================================================================
#                      Hydrodynamic Inputs (wave configuration)
#=============================================================================

@dataclass
class HydroInputs:
    """
    Wave condition and simulation time base for one run.

    Validated on construction so that every configuration error surfaces
    before any force provider is built.
    """
    # Simulation time base (supplied by the outer simulation)
    num_bodies:          int   = 1
    simulation_dt:       float = 0.01
    simulation_duration: float = 100.0

    # Wave condition
    mode:                str   = "noWave"
    wave_height:         float = 1.0      # significant wave height Hs [m]
    wave_period:         float = 10.0     # peak period Tp [s]
    seed:                int   = DEFAULT_SEED   # None in JSON also means the default

    # Regular wave parameters
    regular_wave_amplitude: float = 1.0   # [m]
    regular_wave_omega:     float = 1.0   # [rad/s]

    # Irregular wave spectrum discretization (Hz)
    spectrum_start:   float = 0.001
    spectrum_end:     float = 1.0
    num_frequencies:  int   = 1000
    ramp_duration:    float = 0.0         # [s], 0 disables the start-up ramp

    direction_index:  int   = 0           # wave heading slice of the hydro data

    def __post_init__(self):
        if self.seed is None:
            self.seed = DEFAULT_SEED
        if isinstance(self.seed, bool) or not isinstance(self.seed, (int, np.integer)):
            raise ValueError(f"seed must be an integer, got {self.seed!r}")
        if self.mode not in WAVE_MODES:
            raise ValueError(f"mode must be one of {WAVE_MODES}, got {self.mode!r}")
        if int(self.num_bodies) < 1:
            raise ValueError(f"num_bodies must be >= 1, got {self.num_bodies}")
        if self.simulation_dt <= 0:
            raise ValueError(f"simulation_dt must be > 0, got {self.simulation_dt}")
        if self.simulation_duration <= 0:
            raise ValueError(f"simulation_duration must be > 0, got {self.simulation_duration}")
        if self.wave_height <= 0:
            raise ValueError(f"wave_height must be > 0, got {self.wave_height}")
        if self.wave_period <= 0:
            raise ValueError(f"wave_period must be > 0, got {self.wave_period}")
        if self.ramp_duration < 0:
            raise ValueError(f"ramp_duration must be >= 0, got {self.ramp_duration}")
        if self.direction_index < 0:
            raise ValueError(f"direction_index must be >= 0, got {self.direction_index}")

        if self.mode == "regular" and self.regular_wave_omega <= 0:
            raise ValueError(f"regular_wave_omega must be > 0, got {self.regular_wave_omega}")
        if self.mode == "irregular":
            if not 0 < self.spectrum_start < self.spectrum_end:
                raise ValueError("spectrum frequencies must satisfy 0 < spectrum_start < spectrum_end")
            if int(self.num_frequencies) < 2:
                raise ValueError(f"num_frequencies must be >= 2, got {self.num_frequencies}")

        self.num_bodies = int(self.num_bodies)
        self.num_frequencies = int(self.num_frequencies)
        self.seed = int(self.seed)

    @property
    def total_dofs(self) -> int:
        return 6 * self.num_bodies

    @classmethod
    def from_dict(cls, data: dict) -> "HydroInputs":
        """
        Create HydroInputs from a dictionary, falling back to defaults for
        missing keys.
        """
        defaults = cls()
        return cls(
            num_bodies=data.get("num_bodies", defaults.num_bodies),
            simulation_dt=data.get("simulation_dt", defaults.simulation_dt),
            simulation_duration=data.get("simulation_duration", defaults.simulation_duration),
            mode=data.get("mode", defaults.mode),
            wave_height=data.get("wave_height", defaults.wave_height),
            wave_period=data.get("wave_period", defaults.wave_period),
            seed=data.get("seed", defaults.seed),
            regular_wave_amplitude=data.get("regular_wave_amplitude", defaults.regular_wave_amplitude),
            regular_wave_omega=data.get("regular_wave_omega", defaults.regular_wave_omega),
            spectrum_start=data.get("spectrum_start", defaults.spectrum_start),
            spectrum_end=data.get("spectrum_end", defaults.spectrum_end),
            num_frequencies=data.get("num_frequencies", defaults.num_frequencies),
            ramp_duration=data.get("ramp_duration", defaults.ramp_duration),
            direction_index=data.get("direction_index", defaults.direction_index),
        )

    def to_dict(self) -> dict:
        return {
            "num_bodies": self.num_bodies,
            "simulation_dt": self.simulation_dt,
            "simulation_duration": self.simulation_duration,
            "mode": self.mode,
            "wave_height": self.wave_height,
            "wave_period": self.wave_period,
            "seed": self.seed,
            "regular_wave_amplitude": self.regular_wave_amplitude,
            "regular_wave_omega": self.regular_wave_omega,
            "spectrum_start": self.spectrum_start,
            "spectrum_end": self.spectrum_end,
            "num_frequencies": self.num_frequencies,
            "ramp_duration": self.ramp_duration,
            "direction_index": self.direction_index,
        }


#=============================================================================
#                      Per-body Hydrodynamic Data
#=============================================================================

def _as_dof_dir_samples(arr, name: str) -> np.ndarray:
    """Bring hydro data to (6, ndir, nsamples); 2-D input gets a single direction."""
    arr = np.asarray(arr, dtype=np.float64)
    if arr.ndim == 2:
        arr = arr[:, np.newaxis, :]
    if arr.ndim != 3 or arr.shape[0] != 6:
        raise ValueError(f"{name} must have shape (6, ndir, nsamples) or (6, nsamples), got {arr.shape}")
    return arr


@dataclass
class RegularWaveInfo:
    """Frequency-domain excitation coefficients of one body."""
    freq_list:               list[float]               # omega [rad/s], ascending
    excitation_mag_matrix:   list[list[list[float]]]   # (6, ndir, nfreq)
    excitation_phase_matrix: list[list[list[float]]]   # (6, ndir, nfreq) [rad]

    def __post_init__(self):
        # ndarray-ify lists
        self.freq_list = np.asarray(self.freq_list, dtype=np.float64).flatten()
        self.excitation_mag_matrix = _as_dof_dir_samples(self.excitation_mag_matrix, "excitation_mag_matrix")
        self.excitation_phase_matrix = _as_dof_dir_samples(self.excitation_phase_matrix, "excitation_phase_matrix")

        nfreq = len(self.freq_list)
        if nfreq < 2:
            raise ValueError("freq_list needs at least 2 frequencies")
        if np.any(np.diff(self.freq_list) <= 0):
            raise ValueError("freq_list must be strictly ascending")
        if self.excitation_mag_matrix.shape[2] != nfreq:
            raise ValueError("excitation_mag_matrix frequency axis must match freq_list")
        if self.excitation_phase_matrix.shape != self.excitation_mag_matrix.shape:
            raise ValueError("excitation_phase_matrix must have the same shape as excitation_mag_matrix")

    @classmethod
    def from_dict(cls, data: dict) -> "RegularWaveInfo":
        return cls(
            freq_list=data.get("freq_list", []),
            excitation_mag_matrix=data.get("excitation_mag_matrix", []),
            excitation_phase_matrix=data.get("excitation_phase_matrix", []),
        )


@dataclass
class IrregularWaveInfo:
    """Excitation impulse response function of one body."""
    excitation_irf_time:   list[float]               # lag axis [s], uniform step
    excitation_irf_matrix: list[list[list[float]]]   # (6, ndir, nlag)

    def __post_init__(self):
        # ndarray-ify lists
        self.excitation_irf_time = np.asarray(self.excitation_irf_time, dtype=np.float64).flatten()
        self.excitation_irf_matrix = _as_dof_dir_samples(self.excitation_irf_matrix, "excitation_irf_matrix")

        if len(self.excitation_irf_time) < 2:
            raise ValueError("excitation_irf_time needs at least 2 samples")
        if np.any(np.diff(self.excitation_irf_time) <= 0):
            raise ValueError("excitation_irf_time must be strictly ascending")
        if self.excitation_irf_matrix.shape[2] != len(self.excitation_irf_time):
            raise ValueError("excitation_irf_matrix lag axis must match excitation_irf_time")

    def irf(self, direction_index: int = 0) -> np.ndarray:
        """IRF of all 6 DOFs for one wave heading, shape (6, nlag)."""
        if direction_index >= self.excitation_irf_matrix.shape[1]:
            raise ValueError(
                f"direction_index {direction_index} out of range for "
                f"{self.excitation_irf_matrix.shape[1]} directions"
            )
        return self.excitation_irf_matrix[:, direction_index, :]

    @classmethod
    def from_dict(cls, data: dict) -> "IrregularWaveInfo":
        return cls(
            excitation_irf_time=data.get("excitation_irf_time", []),
            excitation_irf_matrix=data.get("excitation_irf_matrix", []),
        )


@dataclass
class HydroData:
    """Hydrodynamic data of all bodies, as read from one hydro data file."""
    regular:   Optional[list[RegularWaveInfo]] = None
    irregular: Optional[list[IrregularWaveInfo]] = None

    @property
    def num_bodies(self) -> int:
        return max(len(self.regular or []), len(self.irregular or []))

    @classmethod
    def from_dict(cls, data: dict) -> "HydroData":
        bodies = data.get("bodies", [])
        if isinstance(bodies, dict):
            bodies = [bodies]

        regular = [RegularWaveInfo.from_dict(b["regular"]) for b in bodies if b.get("regular")]
        irregular = [IrregularWaveInfo.from_dict(b["irregular"]) for b in bodies if b.get("irregular")]
        return cls(
            regular=regular or None,
            irregular=irregular or None,
        )


#=============================================================================
#                      Helper Functions
#=============================================================================

def load_json(path: Path | str) -> dict:
    """Load a JSON file and return its contents."""
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def load_hydro_inputs(path: Path | str) -> HydroInputs:
    """Load the wave/simulation configuration from JSON file."""
    data = load_json(path)
    return HydroInputs.from_dict(data)


def load_hydro_data(path: Path | str) -> HydroData:
    """Load per-body hydrodynamic data from JSON file."""
    data = load_json(path)
    return HydroData.from_dict(data)
