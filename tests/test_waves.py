"""Tests for spectrum, free-surface synthesis, IRF resampling and convolution."""

import math
import warnings

import numpy as np
import pytest

from hydrowave.Waves import (
    apply_ramp,
    create_time_index,
    excitation_convolution,
    free_surface_elevation,
    pierson_moskowitz_spectrum_hz,
    resample_time,
    resample_vals,
    set_spectrum_frequencies,
)


# ----------------------------------------------------------------
#                   < Spectral model >

def test_spectrum_frequencies_grid():
    f = set_spectrum_frequencies(0.001, 1.0, 1000)

    assert len(f) == 1000
    assert f[0] == pytest.approx(0.001)
    assert f[-1] == pytest.approx(1.0)
    assert np.all(np.diff(f) > 0)


@pytest.mark.parametrize("Hs, Tp", [(0.5, 4.0), (2.0, 8.0), (6.0, 14.0)])
def test_spectrum_non_negative(Hs, Tp):
    f = set_spectrum_frequencies(0.001, 2.0, 500)
    S = pierson_moskowitz_spectrum_hz(f, Hs, Tp)

    assert S.shape == f.shape
    assert np.all(S >= 0)
    assert np.all(np.isfinite(S))


def test_spectrum_decays_at_both_ends():
    Hs, Tp = 2.0, 8.0
    S_peak = pierson_moskowitz_spectrum_hz(np.array([1.0 / Tp]), Hs, Tp)[0]
    S_low = pierson_moskowitz_spectrum_hz(np.array([0.03, 0.05]), Hs, Tp)
    S_high = pierson_moskowitz_spectrum_hz(np.array([10.0, 100.0]), Hs, Tp)

    assert 0.0 < S_low[0] < S_low[1] < 1e-6 * S_peak
    assert S_high[1] < S_high[0] < 1e-3 * S_peak


def test_spectrum_zeroth_moment_matches_hs():
    # Hs = 4 sqrt(m0) for the Pierson-Moskowitz shape
    Hs, Tp = 2.0, 8.0
    f = set_spectrum_frequencies(0.001, 1.0, 4000)
    S = pierson_moskowitz_spectrum_hz(f, Hs, Tp)
    m0 = np.sum(S) * (f[1] - f[0])

    assert m0 == pytest.approx(Hs**2 / 16, rel=0.02)


def test_spectrum_vanishes_without_overflow_at_tiny_frequency():
    with warnings.catch_warnings():
        warnings.simplefilter("error")
        S = pierson_moskowitz_spectrum_hz(np.array([1e-70, 1e-3, 0.1]), 2.0, 8.0)

    assert np.all(np.isfinite(S))
    assert S[0] == 0.0
    assert S[2] > 0.0


@pytest.mark.parametrize("freqs", [[0.0, 0.1, 0.2], [-0.1, 0.1, 0.2], [0.3, 0.2, 0.1]])
def test_spectrum_rejects_bad_frequencies(freqs):
    with pytest.raises(ValueError):
        pierson_moskowitz_spectrum_hz(np.array(freqs), 2.0, 8.0)


@pytest.mark.parametrize("Hs, Tp", [(0.0, 8.0), (2.0, 0.0), (-1.0, 8.0)])
def test_spectrum_rejects_bad_parameters(Hs, Tp):
    with pytest.raises(ValueError):
        pierson_moskowitz_spectrum_hz(np.array([0.1, 0.2]), Hs, Tp)


# ----------------------------------------------------------------
#                   < Free-surface synthesis >

@pytest.fixture
def spectrum():
    f = set_spectrum_frequencies(0.001, 1.0, 400)
    return f, pierson_moskowitz_spectrum_hz(f, 2.0, 8.0)


def test_time_index():
    t = create_time_index(60.0, 0.05)

    assert len(t) == 1201
    assert t[0] == 0.0
    assert t[-1] == pytest.approx(60.0)


@pytest.mark.parametrize("duration, dt, n", [(0.7, 0.1, 8), (60.0, 0.01, 6001), (1.0, 0.3, 4)])
def test_time_index_step_is_exact(duration, dt, n):
    t = create_time_index(duration, dt)

    assert len(t) == n
    np.testing.assert_allclose(np.diff(t), dt)
    assert t[-1] <= duration + 1e-9


def test_elevation_is_reproducible(spectrum):
    f, S = spectrum
    t = create_time_index(30.0, 0.1)

    eta1 = free_surface_elevation(f, S, t, rng=42)
    eta2 = free_surface_elevation(f, S, t, rng=42)
    eta3 = free_surface_elevation(f, S, t, rng=np.random.default_rng(42))

    assert np.array_equal(eta1, eta2)
    assert np.array_equal(eta1, eta3)


def test_elevation_depends_on_seed(spectrum):
    f, S = spectrum
    t = create_time_index(30.0, 0.1)

    assert not np.allclose(
        free_surface_elevation(f, S, t, rng=1),
        free_surface_elevation(f, S, t, rng=2),
    )


def test_elevation_matches_superposition(spectrum):
    f, S = spectrum
    t = np.array([0.0, 1.3, 7.7])
    eta = free_surface_elevation(f, S, t, rng=3)

    phases = np.random.default_rng(3).uniform(0.0, 2 * np.pi, size=len(f))
    df = f[-1] / len(f)
    for k, tk in enumerate(t):
        expected = sum(
            math.sqrt(2 * S[i] * df) * math.cos(2 * math.pi * f[i] * tk + phases[i])
            for i in range(len(f))
        )
        assert eta[k] == pytest.approx(expected, rel=1e-9, abs=1e-12)


def test_elevation_zero_mean_over_seeds(spectrum):
    f, S = spectrum
    t = create_time_index(20.0, 0.5)
    ensemble = np.array([free_surface_elevation(f, S, t, rng=seed) for seed in range(300)])

    # var(eta) = sum(S df) ~ Hs^2/16 = 0.25, so the ensemble mean std is ~0.03
    assert np.all(np.abs(ensemble.mean(axis=0)) < 0.2)
    assert abs(ensemble.mean()) < 0.1


def test_elevation_blocks_match_single_pass(spectrum):
    f, S = spectrum
    t = create_time_index(30.0, 0.1)

    whole = free_surface_elevation(f, S, t, rng=5, block_size=len(t))
    blocked = free_surface_elevation(f, S, t, rng=5, block_size=7)

    np.testing.assert_allclose(blocked, whole, rtol=1e-12, atol=1e-14)


def test_elevation_rejects_length_mismatch(spectrum):
    f, S = spectrum
    with pytest.raises(ValueError):
        free_surface_elevation(f, S[:-1], np.zeros(3))


def test_ramp():
    eta = np.ones(21)
    ramped = apply_ramp(eta, 0.1, 1.0)

    assert ramped[0] == 0.0
    assert ramped[5] == pytest.approx(0.5)
    np.testing.assert_array_equal(ramped[10:], 1.0)
    np.testing.assert_array_equal(eta, 1.0)  # input untouched
    np.testing.assert_array_equal(apply_ramp(eta, 0.1, 0.0), eta)


# ----------------------------------------------------------------
#                   < IRF resampling >

def test_resample_time_grid():
    t_old = 0.02 * np.arange(250)  # 5 s of data
    dt_new = 0.05
    t_new = resample_time(t_old, dt_new)

    assert t_new[0] == 0.0
    assert len(t_new) == math.ceil(250 * 0.02 / dt_new)
    np.testing.assert_allclose(np.diff(t_new), dt_new)
    assert t_new[-1] >= t_old[-1] - dt_new


def test_resample_time_shifted_axis():
    t_old = -2.0 + 0.1 * np.arange(41)
    t_new = resample_time(t_old, 0.3)

    assert t_new[0] == 0.0
    assert len(t_new) == math.ceil(41 * 0.1 / 0.3)


def test_resample_vals_round_trip():
    t_old = 0.1 * np.arange(101)
    vals_old = np.array([np.sin((dof + 1) * 0.3 * t_old) for dof in range(6)])
    t_new = resample_time(t_old, 0.05)
    vals_new = resample_vals(t_old, vals_old, t_new)

    assert vals_new.shape == (6, len(t_new))
    # every other new sample sits on an original sample
    np.testing.assert_allclose(vals_new[:, ::2][:, :101], vals_old, atol=1e-9)
    # in between the spline follows the smooth signal
    mid = t_new[1:200:2]
    expected = np.array([np.sin((dof + 1) * 0.3 * mid) for dof in range(6)])
    np.testing.assert_allclose(vals_new[:, 1:200:2], expected, atol=1e-3)


def test_resample_vals_extrapolates_past_last_sample():
    # a cubic is reproduced exactly by the spline, including its end piece
    t_old = 0.1 * np.arange(11)
    vals_old = np.array([(dof + 1) * (t_old**3 - 2.0 * t_old) for dof in range(6)])
    t_new = resample_time(t_old, 0.04)
    vals_new = resample_vals(t_old, vals_old, t_new)

    t_tail = t_new[-1]
    assert t_tail > t_old[-1]
    expected = np.array([(dof + 1) * (t_tail**3 - 2.0 * t_tail) for dof in range(6)])
    np.testing.assert_allclose(vals_new[:, -1], expected, atol=1e-9)


def test_resample_vals_needs_four_samples():
    t_old = 0.1 * np.arange(3)
    with pytest.raises(ValueError, match="at least 4"):
        resample_vals(t_old, np.ones((6, 3)), np.array([0.0, 0.05]))


def test_resample_vals_shape_mismatch():
    t_old = 0.1 * np.arange(10)
    with pytest.raises(ValueError):
        resample_vals(t_old, np.ones((6, 9)), np.array([0.0, 0.05]))


# ----------------------------------------------------------------
#                   < Convolution >

def reference_convolution(irf, tau, eta, dt, t):
    total = 0.0
    for j in range(len(tau)):
        t_tau = t - tau[j]
        if 0.0 < t_tau < len(eta) * dt:
            k = int(t_tau / dt) - 1
            if k >= 0:
                total += irf[j] * eta[k] * dt
    return total


@pytest.fixture
def conv_data():
    rng = np.random.default_rng(0)
    dt = 0.1
    tau = dt * np.arange(40)
    irf = rng.normal(size=(6, 40))
    eta = rng.normal(size=300)
    return irf, tau, eta, dt


@pytest.mark.parametrize("t", [0.35, 2.0, 3.95, 7.3, 29.95, 31.0, 40.0])
def test_convolution_matches_direct_sum(conv_data, t):
    irf, tau, eta, dt = conv_data

    block = excitation_convolution(irf, tau, eta, dt, t)
    for dof in range(6):
        expected = reference_convolution(irf[dof], tau, eta, dt, t)
        assert excitation_convolution(irf[dof], tau, eta, dt, t) == pytest.approx(expected, abs=1e-12)
        assert block[dof] == pytest.approx(expected, abs=1e-12)


def test_convolution_zero_before_first_sample(conv_data):
    irf, tau, eta, dt = conv_data

    np.testing.assert_array_equal(excitation_convolution(irf, tau, eta, dt, 0.0), 0.0)
    np.testing.assert_array_equal(excitation_convolution(irf, tau, eta, dt, 0.5 * dt), 0.0)
    np.testing.assert_array_equal(excitation_convolution(irf, tau, eta, dt, -5.0), 0.0)


def test_convolution_ignores_future_elevation(conv_data):
    irf, tau, eta, dt = conv_data
    t = 12.34
    f_before = excitation_convolution(irf, tau, eta, dt, t)

    eta_future = eta.copy()
    eta_future[int(t / dt):] = 1e6
    f_after = excitation_convolution(irf, tau, eta_future, dt, t)

    np.testing.assert_array_equal(f_before, f_after)


def test_convolution_zero_past_elevation_history(conv_data):
    irf, tau, eta, dt = conv_data
    t_end = len(eta) * dt + tau[-1] + dt

    np.testing.assert_array_equal(excitation_convolution(irf, tau, eta, dt, t_end), 0.0)


def test_convolution_uses_previous_sample():
    # eta[k] = k makes the looked-up index visible in the result
    dt = 0.5
    eta = np.arange(10, dtype=float)
    tau = np.array([0.0])
    irf = np.array([1.0])

    assert excitation_convolution(irf, tau, eta, dt, 0.7) == pytest.approx(0.0)
    assert excitation_convolution(irf, tau, eta, dt, 1.0) == pytest.approx(1.0 * dt)
    assert excitation_convolution(irf, tau, eta, dt, 2.2) == pytest.approx(3.0 * dt)
