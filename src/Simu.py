"""Stepping driver: evaluate a wave force provider over the simulation time base."""

from __future__ import annotations

import json
import time
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

import numpy as np
from numpy.typing import NDArray
from tqdm import tqdm

# Support both package import and direct script execution
try:
    from .params import HydroInputs, HydroData, load_hydro_inputs, load_hydro_data
    from .diagnostics import Diagnostics, TextDiagnostics
    from .Forces import build_wave_force
except ImportError:
    from params import HydroInputs, HydroData, load_hydro_inputs, load_hydro_data
    from diagnostics import Diagnostics, TextDiagnostics
    from Forces import build_wave_force


#=============================================================================
#                           Force History Results
#=============================================================================

def get_logo() -> str:
    return """
_____________________________________________________________

                    Welcome to HydroWave!
        wave excitation forces for floating multibodies
_____________________________________________________________
"""


@dataclass
class ForceHistory:
    """Container for the force history of one run."""
    time: NDArray[np.floating] = field(default_factory=lambda: np.array([]))
    force: NDArray[np.floating] = field(default_factory=lambda: np.array([]))  # (n_steps, 6*nbod)

    case_id: int = 0
    info_string: str = ""
    mode: str = ""
    num_bodies: int = 0

    # Status tracking
    success: bool = True
    status: int = 0  # 0=not run, 1=success, -1=failed (NaN/Inf detected)
    message: str = ""

    # File paths for saved data
    force_file: str = ""
    summary_file: str = ""
    diagnostic_files: list[str] = field(default_factory=list)

    # Timing
    timestamp: str = ""
    build_time: float = 0.0
    elapsed_time: float = 0.0
    n_time_steps: int = 0

    # Summary statistics
    max_force: float = 0.0

    def to_dict(self) -> dict:
        """Convert results to dictionary for JSON serialization."""
        return {
            "case_id": self.case_id,
            "info_string": self.info_string,
            "mode": self.mode,
            "num_bodies": self.num_bodies,
            "success": self.success,
            "status": self.status,
            "message": self.message,
            "force_file": self.force_file,
            "diagnostic_files": self.diagnostic_files,
            "timestamp": self.timestamp,
            "build_time": self.build_time,
            "elapsed_time": self.elapsed_time,
            "n_time_steps": self.n_time_steps,
            "max_force": self.max_force,
        }


#=============================================================================
#                           Single Run
#=============================================================================

def run_wave_forces(
    inputs: HydroInputs | str | Path,
    hydro_data: HydroData | str | Path | None = None,
    case_id: int = 1,
    info_string: str = "",
    results_dir: str | Path = "results",
    save_results: bool = True,
    show_progress: bool = True,
    dump_diagnostics: bool = False,
    plot_results: bool = False,
    verbose: bool = True,
) -> ForceHistory:
    """
    Build the wave force provider and query it once per simulation step.

    Stands in for the rigid-body solver loop: the provider is initialized
    before stepping, then `get_force_at_time` is called on every step of
    [0, simulation_duration].

    Args:
        inputs: HydroInputs or path to its JSON file
        hydro_data: HydroData or path to its JSON file (not needed for noWave)
        case_id: Case identifier
        info_string: Description of the case
        results_dir: Directory for saved results and diagnostic dumps
        save_results: Save force history (.npy) and summary (.json)
        show_progress: Show a tqdm progress bar while stepping
        dump_diagnostics: Write spectrum/elevation/IRF text dumps
        plot_results: Plot the force history with matplotlib
        verbose: Print progress information

    Returns:
        ForceHistory with the force at every step
    """
    if not isinstance(inputs, HydroInputs):
        inputs = load_hydro_inputs(inputs)
    if hydro_data is not None and not isinstance(hydro_data, HydroData):
        hydro_data = load_hydro_data(hydro_data)

    results_path = Path(results_dir)
    results = ForceHistory(
        case_id=case_id,
        info_string=info_string,
        mode=inputs.mode,
        num_bodies=inputs.num_bodies,
        timestamp=datetime.now().strftime("%d-%b-%Y_%H-%M-%S"),
    )

    if verbose:
        print(get_logo())
        print("=" * 70)
        print(" " * 15 + f"WAVE FORCE CASE {case_id}")
        print("=" * 70)
        if info_string:
            print(f"  {info_string}")
        print(f"  mode={inputs.mode}, bodies={inputs.num_bodies}, "
              f"dt={inputs.simulation_dt}s, duration={inputs.simulation_duration}s")

    # ================================================================
    # STEP 1: Initialize the wave force provider
    # ================================================================
    diagnostics = TextDiagnostics(results_path / "diagnostics") if dump_diagnostics else Diagnostics()

    t0 = time.perf_counter()
    wave_force = build_wave_force(inputs, hydro_data, diagnostics=diagnostics, verbose=verbose)
    results.build_time = time.perf_counter() - t0

    if isinstance(diagnostics, TextDiagnostics):
        results.diagnostic_files = [str(p) for p in diagnostics.written]
    if verbose:
        print(f"  ✓ Wave force initialized in {results.build_time:.2f}s")

    # ================================================================
    # STEP 2: Step through the simulation time base
    # ================================================================
    t_out = np.arange(0.0, inputs.simulation_duration + 0.5 * inputs.simulation_dt, inputs.simulation_dt)
    f_out = np.zeros((len(t_out), inputs.total_dofs))

    t0 = time.perf_counter()
    with tqdm(total=len(t_out), desc="Stepping", unit="step", disable=not show_progress) as pbar:
        for i, t in enumerate(t_out):
            f_out[i] = wave_force.get_force_at_time(t)
            pbar.update(1)
    results.elapsed_time = time.perf_counter() - t0

    results.time = t_out
    results.force = f_out
    results.n_time_steps = len(t_out)

    # ================================================================
    # STEP 3: Check for NaN and Inf
    # ================================================================
    if np.any(np.isnan(f_out)):
        results.success = False
        results.status = -1
        results.message = "Force history contains NaN values"
    elif np.any(np.isinf(f_out)):
        results.success = False
        results.status = -1
        results.message = "Force history contains Inf values"
    else:
        results.success = True
        results.status = 1
        results.max_force = float(np.max(np.abs(f_out))) if f_out.size else 0.0

    if verbose:
        if results.success:
            print(f"  ✓ {results.n_time_steps} steps in {results.elapsed_time:.2f}s, "
                  f"max |F| = {results.max_force:.4e}")
        else:
            print(f"  ⚠ WARNING: {results.message}")

    # ================================================================
    # STEP 4: Save results
    # ================================================================
    if save_results:
        results_path.mkdir(parents=True, exist_ok=True)
        bin_path = results_path / "bin"
        bin_path.mkdir(exist_ok=True)

        force_file = write_binary(np.column_stack([t_out, f_out]),
                                  bin_path / f"force_{results.timestamp}_{case_id}")
        results.force_file = str(force_file)

        summary_file = results_path / f"results_{results.timestamp}_{case_id}.json"
        with open(summary_file, "w") as f:
            json.dump(results.to_dict(), f, indent=2)
        results.summary_file = str(summary_file)

        if verbose:
            print(f"  Saved force history: {results.force_file}")
            print(f"  Saved summary: {results.summary_file}")

    if plot_results:
        plot_force_history(results, save_path=results_path if save_results else None)

    return results


def plot_force_history(results: ForceHistory, save_path: Path | None = None):
    """Plot the heave force (DOF 2) of every body."""
    import matplotlib.pyplot as plt

    nbod = results.num_bodies
    fig, axes = plt.subplots(nbod, 1, figsize=(8, 2.5 * nbod), sharex=True, squeeze=False)
    fig.suptitle(f"Wave excitation ({results.mode}) - heave force", fontweight="bold")

    for ibod in range(nbod):
        ax = axes[ibod, 0]
        ax.plot(results.time, results.force[:, 6 * ibod + 2], "b-", lw=1.0)
        ax.set_ylabel("F_z [N]")
        ax.set_title(f"Body {ibod}")
        ax.grid(True, alpha=0.3)
    axes[-1, 0].set_xlabel("Time [s]")

    plt.tight_layout()
    if save_path is not None:
        fig_file = Path(save_path) / f"force_history_{results.timestamp}.png"
        plt.savefig(fig_file, dpi=150)
        print(f"  Saved figure: {fig_file}")
    plt.show()
    return fig


def write_binary(data: NDArray, filepath: str | Path) -> Path:
    """
    Save data to binary file (numpy format).

    Args:
        data: NumPy array to save
        filepath: Output file path (extension optional)

    Returns:
        Path to saved file
    """
    filepath = Path(filepath)
    if not filepath.suffix:
        filepath = filepath.with_suffix('.npy')
    np.save(filepath, data)
    return filepath


def read_binary(filepath: str | Path) -> NDArray:
    """Load data from binary file (numpy format)."""
    return np.load(filepath)
