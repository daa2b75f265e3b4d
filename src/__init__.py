"""
HydroWave - wave excitation forces for floating multibody simulation
====================================================================

Computes the hydrodynamic excitation force on each body of a floating
multibody system (wave energy converter hulls, flaps) for time-domain
simulation with an external rigid-body solver.

Modules:
    - params: Configuration dataclasses (HydroInputs, RegularWaveInfo, ...)
    - Waves: Spectrum, free-surface elevation, IRF resampling, convolution
    - Forces: Wave force providers (no wave, regular, irregular)
    - diagnostics: Optional text dumps of the initialization tables
    - Simu: Stepping driver and results

Quick Start:
    >>> from hydrowave import HydroInputs, build_wave_force, load_hydro_data
    >>> inputs = HydroInputs(mode="irregular", num_bodies=2, simulation_dt=0.05,
    ...                      simulation_duration=60.0, wave_height=2.0, wave_period=8.0)
    >>> wave_force = build_wave_force(inputs, load_hydro_data("hydro_data.json"))
    >>> f = wave_force.get_force_at_time(12.5)   # shape (12,)

CLI Usage:
    $ hydrowave run hydro_inputs.json --hydro hydro_data.json
    $ python -m hydrowave run hydro_inputs.json --hydro hydro_data.json
"""

__version__ = "0.1.0"

# Lazy imports to avoid circular dependencies and improve startup time
def __getattr__(name):
    """Lazy load modules and classes on first access."""

    # Configuration classes
    if name in ("HydroInputs", "HydroData", "RegularWaveInfo", "IrregularWaveInfo",
                "WAVE_MODES", "load_json", "load_hydro_inputs", "load_hydro_data"):
        from . import params
        return getattr(params, name)

    # Wave numerics
    if name in ("set_spectrum_frequencies", "pierson_moskowitz_spectrum_hz",
                "create_time_index", "free_surface_elevation", "apply_ramp",
                "resample_time", "resample_vals", "excitation_convolution"):
        from . import Waves
        return getattr(Waves, name)

    # Force providers
    if name in ("BaseForce", "NoWaveForce", "RegularWaveForce", "IrregularWaveForce",
                "build_wave_force"):
        from . import Forces
        return getattr(Forces, name)

    # Diagnostics
    if name in ("Diagnostics", "TextDiagnostics"):
        from . import diagnostics
        return getattr(diagnostics, name)

    # Simulation
    if name in ("run_wave_forces", "ForceHistory", "write_binary", "read_binary"):
        from . import Simu
        return getattr(Simu, name)

    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


# Define what gets exported with "from hydrowave import *"
__all__ = [
    # Version
    "__version__",

    # Main entry points
    "build_wave_force",
    "run_wave_forces",
    "ForceHistory",

    # Configuration classes
    "HydroInputs",
    "HydroData",
    "RegularWaveInfo",
    "IrregularWaveInfo",
    "WAVE_MODES",

    # Force providers
    "BaseForce",
    "NoWaveForce",
    "RegularWaveForce",
    "IrregularWaveForce",

    # Wave numerics
    "set_spectrum_frequencies",
    "pierson_moskowitz_spectrum_hz",
    "create_time_index",
    "free_surface_elevation",
    "apply_ramp",
    "resample_time",
    "resample_vals",
    "excitation_convolution",

    # Diagnostics
    "Diagnostics",
    "TextDiagnostics",

    # Loaders / IO
    "load_json",
    "load_hydro_inputs",
    "load_hydro_data",
    "write_binary",
    "read_binary",
]
