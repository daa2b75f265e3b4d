"""Optional text dumps of the tables built during wave force initialization."""

from __future__ import annotations

from pathlib import Path

import numpy as np
from numpy.typing import NDArray


class Diagnostics:
    """Observer for intermediate wave tables. The base class ignores everything."""

    def spectrum(self, freqs_hz: NDArray, spectral_densities: NDArray) -> None:
        pass

    def elevation(self, time_index: NDArray, eta: NDArray) -> None:
        pass

    def irf_original(self, body: int, t_old: NDArray, vals_old: NDArray) -> None:
        pass

    def irf_resampled(self, body: int, t_new: NDArray, vals_new: NDArray) -> None:
        pass


class TextDiagnostics(Diagnostics):
    """
    Write each table as whitespace-delimited text, one line per sample.

    Files written to `out_dir`:
        spectral_densities.txt   f  S(f)
        eta.txt                  t  eta(t)
        compare_body{b}.txt      t_old  irf_dof0 ... irf_dof5
        resample_body{b}.txt     t_new  irf_dof0 ... irf_dof5
    """

    def __init__(self, out_dir: str | Path = ".", fmt: str = "%.10e"):
        self.out_dir = Path(out_dir)
        self.fmt = fmt
        self.written: list[Path] = []

    def _write(self, name: str, *columns: NDArray) -> Path:
        self.out_dir.mkdir(parents=True, exist_ok=True)
        path = self.out_dir / name
        np.savetxt(path, np.column_stack(columns), fmt=self.fmt)
        self.written.append(path)
        return path

    def spectrum(self, freqs_hz, spectral_densities):
        self._write("spectral_densities.txt", freqs_hz, spectral_densities)

    def elevation(self, time_index, eta):
        self._write("eta.txt", time_index, eta)

    def irf_original(self, body, t_old, vals_old):
        self._write(f"compare_body{body}.txt", t_old, np.asarray(vals_old).T)

    def irf_resampled(self, body, t_new, vals_new):
        self._write(f"resample_body{body}.txt", t_new, np.asarray(vals_new).T)
