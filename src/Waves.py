#=============================================================================
#                               Import necessary modules
from __future__ import annotations

import math
import warnings
import numpy as np
from numpy.typing import NDArray
from scipy.interpolate import interp1d


#=============================================================================
#                               Spectral Model

def set_spectrum_frequencies(
    start: float, end: float, num_points: int
) -> NDArray[np.floating]:
    """Uniform frequency grid [Hz] from start to end (inclusive)."""
    if num_points < 2:
        raise ValueError(f"num_points must be >= 2, got {num_points}")
    if not 0 < start < end:
        raise ValueError(f"need 0 < start < end, got start={start}, end={end}")

    step = (end - start) / (num_points - 1)
    return start + step * np.arange(num_points)


def pierson_moskowitz_spectrum_hz(
    freqs_hz: NDArray[np.floating], Hs: float, Tp: float
) -> NDArray[np.floating]:
    """
    Pierson-Moskowitz spectrum in Hz.

        S(f) = 1.25 Tp^-4 (Hs/2)^2 f^-5 exp(-1.25 Tp^-4 f^-4)

    Args:
        freqs_hz: Strictly ascending frequencies [Hz], all > 0
        Hs: Significant wave height [m]
        Tp: Peak period [s]

    Returns:
        Spectral densities [m^2/Hz], one per frequency
    """
    if Hs <= 0:
        raise ValueError(f"Hs must be > 0, got {Hs}")
    if Tp <= 0:
        raise ValueError(f"Tp must be > 0, got {Tp}")

    f = np.asarray(freqs_hz, dtype=np.float64).flatten()
    if np.any(f <= 0):
        raise ValueError("spectrum frequencies must all be > 0")
    if np.any(np.diff(f) <= 0):
        raise ValueError("spectrum frequencies must be strictly ascending")

    B = 1.25 * Tp**-4
    # f**-5 overflows long before exp(-x) stops underflowing; that side is 0
    with np.errstate(over="ignore", invalid="ignore"):
        x = B * f**-4
        S = B * (Hs / 2)**2 * f**-5 * np.exp(-x)
    return np.where(x > 700.0, 0.0, S)


#=============================================================================
#                               Free-Surface Synthesizer

def num_samples(duration: float, dt: float) -> int:
    """Samples of step dt that fit in [0, duration], start included."""
    # 0.7/0.1 evaluates to 6.999999999999999
    return int(math.floor(duration / dt + 1e-9)) + 1


def create_time_index(duration: float, dt: float) -> NDArray[np.floating]:
    """Time samples i*dt over [0, duration]; the step is always exactly dt."""
    return dt * np.arange(num_samples(duration, dt))


def free_surface_elevation(
    freqs_hz: NDArray[np.floating],
    spectral_densities: NDArray[np.floating],
    time_index: NDArray[np.floating],
    rng: np.random.Generator | int | None = 1,
    block_size: int = 4096,
) -> NDArray[np.floating]:
    """
    Random-phase superposition of the spectral components.

        eta(t) = sum_i sqrt(2 S(f_i) df) cos(2 pi f_i t + phi_i),  df = f_max / N

    One phase per frequency is drawn from `rng` in frequency order, so a given
    seed always reproduces the same elevation. The sum is evaluated over
    blocks of `block_size` time samples, which bounds memory at
    block_size * N values regardless of the run length.

    Args:
        freqs_hz: Frequency grid [Hz]
        spectral_densities: S(f) on the grid
        time_index: Sample times [s]
        rng: Seed or numpy Generator owned by the caller
        block_size: Time samples evaluated per block

    Returns:
        Elevation [m] at each sample time
    """
    f = np.asarray(freqs_hz, dtype=np.float64).flatten()
    S = np.asarray(spectral_densities, dtype=np.float64).flatten()
    t = np.asarray(time_index, dtype=np.float64).flatten()
    if len(f) != len(S):
        raise ValueError(
            f"freqs_hz and spectral_densities must have the same length, got {len(f)} and {len(S)}"
        )
    if block_size < 1:
        raise ValueError(f"block_size must be >= 1, got {block_size}")

    rng = np.random.default_rng(rng)

    delta_f = f[-1] / len(f)
    amplitudes = np.sqrt(2 * S * delta_f)
    omegas = 2 * np.pi * f
    phases = rng.uniform(0.0, 2 * np.pi, size=len(f))

    eta = np.empty(len(t))
    for start in range(0, len(t), block_size):
        t_block = t[start:start + block_size]
        # (n_block, n_freq) @ (n_freq,) -> (n_block,)
        eta[start:start + block_size] = np.cos(np.outer(t_block, omegas) + phases) @ amplitudes
    return eta


def apply_ramp(
    eta: NDArray[np.floating], dt: float, ramp_duration: float
) -> NDArray[np.floating]:
    """Scale the first ramp_duration seconds of eta by a 0 -> 1 linear ramp."""
    eta = np.array(eta, dtype=np.float64)
    if ramp_duration <= 0:
        return eta

    ramp = np.linspace(0.0, 1.0, num_samples(ramp_duration, dt))
    n = min(len(ramp), len(eta))
    eta[:n] *= ramp[:n]
    return eta


#=============================================================================
#                               Impulse-Response Resampler

def resample_time(t_old: NDArray[np.floating], dt_new: float) -> NDArray[np.floating]:
    """
    Lag axis with step dt_new starting at 0.

    The length is ceil(n_old * dt_old / dt_new), so the last sample may fall
    up to one step short of, or slightly past, the end of the original axis.
    """
    t_old = np.asarray(t_old, dtype=np.float64).flatten()
    if len(t_old) < 2:
        raise ValueError("need at least 2 samples to resample a time axis")
    if dt_new <= 0:
        raise ValueError(f"dt_new must be > 0, got {dt_new}")

    dt_old = t_old[1] - t_old[0]
    size_new = int(math.ceil(len(t_old) * dt_old / dt_new))
    return dt_new * np.arange(size_new)


def resample_vals(
    t_old: NDArray[np.floating],
    vals_old: NDArray[np.floating],
    t_new: NDArray[np.floating],
) -> NDArray[np.floating]:
    """
    Cubic-spline resampling of per-DOF response values onto t_new.

    The old axis is shifted to start at 0 (t_new always does), then one cubic
    spline per row of vals_old is evaluated at t_new.

    t_new can run up to one old step past the last original sample. Those lags
    are filled by extrapolating the last polynomial piece of the spline,
    not by zeros. IRFs are expected to have decayed by the end of their axis,
    so the extrapolated values stay small.

    Args:
        t_old: Original lag axis, uniform step
        vals_old: Values with shape (ndof, len(t_old))
        t_new: Target lag axis from `resample_time`

    Returns:
        Resampled values with shape (ndof, len(t_new))
    """
    t_old = np.asarray(t_old, dtype=np.float64).flatten()
    vals_old = np.atleast_2d(np.asarray(vals_old, dtype=np.float64))
    n_old = len(t_old)

    if vals_old.shape[1] != n_old:
        raise ValueError(
            f"vals_old must have {n_old} samples per DOF, got shape {vals_old.shape}"
        )
    if n_old < 4:
        raise ValueError(f"cubic resampling needs at least 4 samples per DOF, got {n_old}")

    dt_old = t_old[1] - t_old[0]
    t_old_shifted = dt_old * np.arange(n_old)

    spline = interp1d(
        t_old_shifted, vals_old,
        kind="cubic", axis=1,
        assume_sorted=True, fill_value="extrapolate",
    )
    return spline(np.asarray(t_new, dtype=np.float64))


#=============================================================================
#                               Excitation Convolution Engine

def excitation_convolution(
    irf: NDArray[np.floating],
    tau: NDArray[np.floating],
    eta: NDArray[np.floating],
    dt: float,
    t: float,
) -> float | NDArray[np.floating]:
    """
    Causal convolution of the excitation IRF with the elevation history.

        F(t) = sum_j IRF[j] * eta[floor((t - tau_j)/dt) - 1] * dt

    Only lags with 0 < t - tau_j < len(eta)*dt contribute, and a lag whose
    lookup index would be negative (no earlier sample recorded) adds nothing.

    Args:
        irf: Resampled IRF, one DOF (nlag,) or a block (ndof, nlag)
        tau: Resampled lag axis (nlag,)
        eta: Free-surface elevation history
        dt: Simulation time step
        t: Query time

    Returns:
        Force for one DOF, or one value per row of `irf`
    """
    t_tau = t - tau
    mask = (t_tau > 0.0) & (t_tau < len(eta) * dt)
    eta_index = np.floor(t_tau[mask] / dt).astype(np.int64) - 1

    eta_val = np.zeros_like(tau)
    valid = eta_index >= 0
    eta_val[np.flatnonzero(mask)[valid]] = eta[eta_index[valid]]

    f_ex = (irf @ eta_val) * dt
    if np.ndim(f_ex) == 0:
        return float(f_ex)
    return f_ex


def check_irf_time(t_old: NDArray[np.floating], body: int) -> None:
    """Warn about IRF lag axes that the resampler will silently reshape."""
    dt = np.diff(t_old)
    if not np.allclose(dt, dt[0], rtol=1e-6, atol=1e-12):
        warnings.warn(
            f"Body {body}: excitation IRF time step is not uniform, "
            f"resampling assumes dt_old = {dt[0]:.6g} s"
        )
    if t_old[0] != 0.0:
        warnings.warn(
            f"Body {body}: excitation IRF time starts at {t_old[0]:.6g} s, "
            "lag axis is shifted to start at 0"
        )


__all__ = [
    # Spectral model
    "set_spectrum_frequencies",
    "pierson_moskowitz_spectrum_hz",
    # Free surface
    "num_samples",
    "create_time_index",
    "free_surface_elevation",
    "apply_ramp",
    # Resampling
    "resample_time",
    "resample_vals",
    "check_irf_time",
    # Convolution
    "excitation_convolution",
]
