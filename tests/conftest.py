"""
Pytest configuration.

Synthetic hydrodynamic data so the suite runs without any data files.
"""

import numpy as np
import pytest

from hydrowave.params import HydroData, HydroInputs, IrregularWaveInfo, RegularWaveInfo


def make_irf_info(n_lag: int = 101, dt_old: float = 0.05, scale: float = 1.0e3) -> IrregularWaveInfo:
    """Damped-oscillation IRF over [0, (n_lag-1)*dt_old], one heading."""
    t = dt_old * np.arange(n_lag)
    rows = [scale * (dof + 1) * np.exp(-t) * np.cos(2.0 * t) for dof in range(6)]
    return IrregularWaveInfo(
        excitation_irf_time=t,
        excitation_irf_matrix=np.array(rows)[:, np.newaxis, :],
    )


def make_regular_info(mag, phase, n_freq: int = 10, d_omega: float = 0.5) -> RegularWaveInfo:
    """Frequency table omega_k = (k+1)*d_omega with mag/phase broadcast to (6, 1, n_freq)."""
    shape = (6, 1, n_freq)
    return RegularWaveInfo(
        freq_list=d_omega * np.arange(1, n_freq + 1),
        excitation_mag_matrix=np.broadcast_to(mag, shape).copy(),
        excitation_phase_matrix=np.broadcast_to(phase, shape).copy(),
    )


@pytest.fixture
def irregular_inputs():
    return HydroInputs(
        num_bodies=2,
        simulation_dt=0.05,
        simulation_duration=60.0,
        mode="irregular",
        wave_height=2.0,
        wave_period=8.0,
        seed=7,
    )


@pytest.fixture
def irregular_hydro():
    return HydroData(irregular=[make_irf_info(), make_irf_info(scale=2.5e3)])


@pytest.fixture
def regular_hydro():
    return HydroData(regular=[make_regular_info(2.0, 0.0)])
