#=============================================================================
#                               Import necessary modules
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from functools import wraps
from typing import Any, Callable, Union
import math
import warnings
import numpy as np
from numpy.typing import NDArray

# Support both package import and direct script execution
try:
    from .params import HydroInputs, HydroData, RegularWaveInfo, IrregularWaveInfo
    from .diagnostics import Diagnostics
    from .Waves import (
        set_spectrum_frequencies, pierson_moskowitz_spectrum_hz,
        create_time_index, free_surface_elevation, apply_ramp,
        resample_time, resample_vals, check_irf_time, excitation_convolution,
    )
except ImportError:
    from params import HydroInputs, HydroData, RegularWaveInfo, IrregularWaveInfo
    from diagnostics import Diagnostics
    from Waves import (
        set_spectrum_frequencies, pierson_moskowitz_spectrum_hz,
        create_time_index, free_surface_elevation, apply_ramp,
        resample_time, resample_vals, check_irf_time, excitation_convolution,
    )




#=============================================================================
#                               Timeit decorator
def timer(fn):
    import time
    @wraps(fn)
    def wrapper(*args, **kwargs):
        start = time.perf_counter()
        result = fn(*args, **kwargs)
        end = time.perf_counter()
        print(f"[TIME] {fn.__name__}: {end - start:.6e} s")
        return result
    return wrapper


def _read_only(arr: NDArray) -> NDArray:
    arr = np.ascontiguousarray(arr, dtype=np.float64)
    arr.flags.writeable = False
    return arr


def _check_body_count(inputs: HydroInputs, infos: list, kind: str) -> None:
    if infos is None or len(infos) == 0:
        raise ValueError(f"{kind} wave mode needs {kind} hydro data for every body")
    if len(infos) != inputs.num_bodies:
        raise ValueError(
            f"num_bodies is {inputs.num_bodies} but {kind} hydro data "
            f"is given for {len(infos)} bodies"
        )




#=============================================================================
#                                 Forces Library - Base Class
class BaseForce(ABC):
    """
    Wave excitation force provider.

    Instances are only created fully initialized (through `build`), so any
    instance can be queried right away.
    """
    num_bodies: int

    @abstractmethod
    def get_force_at_time(self, t: float) -> NDArray[np.floating]:
        """Force vector of length 6*num_bodies at time t."""

    def __call__(self, t: float, x: Any = None) -> NDArray[np.floating]:
        return self.get_force_at_time(t)

    def get_force_function(self) -> Callable[[float, NDArray], NDArray]:
        """Get a force function f(t, x) for an ODE solver."""
        def force_func(t: float, x: NDArray[np.floating]) -> NDArray[np.floating]:
            return self.get_force_at_time(t)
        return force_func


#=============================================================================
#                                 No Wave

@dataclass
class NoWaveForce(BaseForce):
    num_bodies: int = 1

    @classmethod
    def build(cls, inputs: HydroInputs) -> "NoWaveForce":
        return cls(num_bodies=inputs.num_bodies)

    def get_force_at_time(self, t: float) -> NDArray[np.floating]:
        return np.zeros(6 * self.num_bodies)


#=============================================================================
#                                 Regular Wave Force

def get_omega_delta(freq_list: NDArray[np.floating]) -> float:
    """Frequency step of the tabulated data, omega_max / n_freq."""
    return freq_list[-1] / len(freq_list)


def interp_excitation(
    matrix: NDArray[np.floating], dof: int, direction: int, freq_index_des: float
) -> float:
    """
    Linear interpolation of tabulated excitation data at a fractional
    frequency index, between floor(index) and floor(index) + 1.
    """
    nfreq = matrix.shape[2]
    i_floor = int(math.floor(freq_index_des))
    frac = freq_index_des - i_floor
    i_ceil = i_floor + 1 if frac > 0 else i_floor

    if i_floor < 0 or i_ceil > nfreq - 1:
        raise ValueError(
            f"frequency index {freq_index_des:.4f} is outside the tabulated range [0, {nfreq - 1}]"
        )

    val_floor = matrix[dof, direction, i_floor]
    val_ceil = matrix[dof, direction, i_ceil]
    return frac * (val_ceil - val_floor) + val_floor


@dataclass
class RegularWaveForce(BaseForce):
    """
    Monochromatic wave excitation.

        F_i(t) = mag_i * A * cos(omega*t + phase_i)

    with mag/phase interpolated once from the frequency-domain coefficients.
    """
    num_bodies: int = 1
    amplitude: float = 1.0
    omega: float = 1.0
    excitation_force_mag: NDArray[np.floating] = field(default_factory=lambda: np.zeros(6))
    excitation_force_phase: NDArray[np.floating] = field(default_factory=lambda: np.zeros(6))

    @classmethod
    def build(
        cls,
        inputs: HydroInputs,
        infos: list[RegularWaveInfo],
        verbose: bool = False,
    ) -> "RegularWaveForce":
        """
        Interpolate excitation magnitude and phase at the regular wave frequency.

        Args:
            inputs: Wave configuration (regular_wave_omega, regular_wave_amplitude)
            infos: Frequency-domain excitation data, one entry per body

        Returns:
            Initialized RegularWaveForce
        """
        _check_body_count(inputs, infos, "regular")

        total_dofs = inputs.total_dofs
        mag = np.zeros(total_dofs)
        phase = np.zeros(total_dofs)

        wave_omega_delta = get_omega_delta(infos[0].freq_list)
        freq_index_des = inputs.regular_wave_omega / wave_omega_delta - 1

        direction = inputs.direction_index
        for b, info in enumerate(infos):
            if direction >= info.excitation_mag_matrix.shape[1]:
                raise ValueError(
                    f"direction_index {direction} out of range for body {b} "
                    f"({info.excitation_mag_matrix.shape[1]} directions)"
                )
            body_offset = 6 * b
            for dof in range(6):
                mag[body_offset + dof] = interp_excitation(
                    info.excitation_mag_matrix, dof, direction, freq_index_des)
                phase[body_offset + dof] = interp_excitation(
                    info.excitation_phase_matrix, dof, direction, freq_index_des)

        last_index = len(infos[0].freq_list) - 1
        if freq_index_des == last_index:
            warnings.warn(
                f"regular_wave_omega={inputs.regular_wave_omega} sits on the last tabulated "
                f"frequency (index {last_index}), no interpolation neighbour above it"
            )

        if verbose:
            print(f"RegularWaveForce: omega={inputs.regular_wave_omega:.4f} rad/s "
                  f"-> frequency index {freq_index_des:.3f} for {inputs.num_bodies} bodies")

        return cls(
            num_bodies=inputs.num_bodies,
            amplitude=inputs.regular_wave_amplitude,
            omega=inputs.regular_wave_omega,
            excitation_force_mag=_read_only(mag),
            excitation_force_phase=_read_only(phase),
        )

    def get_force_at_time(self, t: float) -> NDArray[np.floating]:
        return (self.excitation_force_mag * self.amplitude
                * np.cos(self.omega * t + self.excitation_force_phase))


#=============================================================================
#                                 Irregular Wave Force

@dataclass
class IrregularWaveForce(BaseForce):
    """
    Irregular wave excitation through IRF convolution.

    Mirrors the time-domain excitation of WEC-Sim style solvers:
        F(t) = sum_j IRF(tau_j) * eta(t - tau_j) * dt
    with eta synthesized once from a Pierson-Moskowitz spectrum.
    """
    num_bodies: int = 1
    simulation_dt: float = 0.01
    spectrum_frequencies: NDArray[np.floating] = field(default_factory=lambda: np.array([]))
    spectral_densities: NDArray[np.floating] = field(default_factory=lambda: np.array([]))
    time_index: NDArray[np.floating] = field(default_factory=lambda: np.array([]))
    eta: NDArray[np.floating] = field(default_factory=lambda: np.array([]))
    irf_time_resampled: list[NDArray[np.floating]] = field(default_factory=list)  # per body (nlag,)
    irf_resampled: list[NDArray[np.floating]] = field(default_factory=list)       # per body (6, nlag)

    @classmethod
    @timer
    def build(
        cls,
        inputs: HydroInputs,
        infos: list[IrregularWaveInfo],
        diagnostics: Diagnostics | None = None,
        rng: np.random.Generator | int | None = None,
        verbose: bool = False,
    ) -> "IrregularWaveForce":
        """
        Build spectrum, free-surface elevation and resampled IRFs.

        Args:
            inputs: Wave configuration and simulation time base
            infos: Excitation IRF data, one entry per body
            diagnostics: Optional observer receiving the intermediate tables
            rng: Phase generator or seed; defaults to inputs.seed

        Returns:
            Initialized IrregularWaveForce
        """
        _check_body_count(inputs, infos, "irregular")
        diagnostics = diagnostics or Diagnostics()
        dt = inputs.simulation_dt

        # ___Spectrum___
        freqs = set_spectrum_frequencies(
            inputs.spectrum_start, inputs.spectrum_end, inputs.num_frequencies)
        spectral_densities = pierson_moskowitz_spectrum_hz(
            freqs, inputs.wave_height, inputs.wave_period)
        diagnostics.spectrum(freqs, spectral_densities)

        # ___Free surface elevation___
        time_index = create_time_index(inputs.simulation_duration, dt)
        eta = free_surface_elevation(
            freqs, spectral_densities, time_index,
            rng=inputs.seed if rng is None else rng,
        )
        eta = apply_ramp(eta, dt, inputs.ramp_duration)
        diagnostics.elevation(time_index, eta)

        # ___Resample excitation IRFs onto the simulation time step___
        irf_time_resampled = []
        irf_resampled = []
        for b, info in enumerate(infos):
            t_old = info.excitation_irf_time
            vals_old = info.irf(inputs.direction_index)
            check_irf_time(t_old, b)

            t_new = resample_time(t_old, dt)
            vals_new = resample_vals(t_old, vals_old, t_new)
            diagnostics.irf_original(b, t_old, vals_old)
            diagnostics.irf_resampled(b, t_new, vals_new)

            irf_time_resampled.append(_read_only(t_new))
            irf_resampled.append(_read_only(vals_new))

            if verbose:
                print(f"  Body {b}: IRF {len(t_old)} samples (dt={t_old[1] - t_old[0]:.4g}s) "
                      f"-> {len(t_new)} samples (dt={dt:.4g}s)")

        if verbose:
            print(f"IrregularWaveForce: Hs={inputs.wave_height}m, Tp={inputs.wave_period}s, "
                  f"{len(freqs)} frequencies, {len(eta)} elevation samples, "
                  f"{inputs.num_bodies} bodies")

        return cls(
            num_bodies=inputs.num_bodies,
            simulation_dt=dt,
            spectrum_frequencies=_read_only(freqs),
            spectral_densities=_read_only(spectral_densities),
            time_index=_read_only(time_index),
            eta=_read_only(eta),
            irf_time_resampled=irf_time_resampled,
            irf_resampled=irf_resampled,
        )

    def excitation_convolution(self, body: int, dof: int, t: float) -> float:
        """Excitation force of one body DOF at time t."""
        return excitation_convolution(
            self.irf_resampled[body][dof],
            self.irf_time_resampled[body],
            self.eta,
            self.simulation_dt,
            t,
        )

    def get_force_at_time(self, t: float) -> NDArray[np.floating]:
        f = np.zeros(6 * self.num_bodies)
        for body in range(self.num_bodies):
            f[6 * body:6 * body + 6] = excitation_convolution(
                self.irf_resampled[body],
                self.irf_time_resampled[body],
                self.eta,
                self.simulation_dt,
                t,
            )
        return f


#=============================================================================
#                                 Dispatch

WaveForce = Union[NoWaveForce, RegularWaveForce, IrregularWaveForce]


def build_wave_force(
    inputs: HydroInputs,
    hydro_data: HydroData | None = None,
    diagnostics: Diagnostics | None = None,
    verbose: bool = False,
) -> WaveForce:
    """
    Initialize the wave force provider selected by inputs.mode.

    All configuration errors surface here, before the simulation loop starts.
    """
    if inputs.mode == "noWave":
        if hydro_data is not None and hydro_data.num_bodies not in (0, inputs.num_bodies):
            warnings.warn(
                f"hydro data has {hydro_data.num_bodies} bodies, "
                f"num_bodies is {inputs.num_bodies}; ignored for noWave"
            )
        return NoWaveForce.build(inputs)
    elif inputs.mode == "regular":
        infos = hydro_data.regular if hydro_data is not None else None
        return RegularWaveForce.build(inputs, infos, verbose=verbose)
    elif inputs.mode == "irregular":
        infos = hydro_data.irregular if hydro_data is not None else None
        return IrregularWaveForce.build(inputs, infos, diagnostics=diagnostics, verbose=verbose)
    else:
        raise ValueError(f"Unknown wave mode: {inputs.mode!r}")


#=============================================================================
#                                 Exports
__all__ = [
    # Base
    "BaseForce",
    # Wave forces
    "NoWaveForce",
    "RegularWaveForce",
    "IrregularWaveForce",
    "WaveForce",
    "build_wave_force",
    # Helpers
    "get_omega_delta",
    "interp_excitation",
    # Decorators
    "timer",
]
