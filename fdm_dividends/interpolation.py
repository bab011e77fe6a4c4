"""Piecewise-linear interpolation on strictly increasing nodes."""

from __future__ import annotations

import numpy as np
from scipy.interpolate import make_interp_spline


class LinearInterpolation:
    """Linear interpolant through (x, y) nodes.

    Evaluation inside [x_min, x_max] is exact linear interpolation. Outside the
    domain, `allow_extrapolation=True` extends the first/last segment linearly;
    otherwise a ValueError is raised.
    """

    def __init__(self, x: np.ndarray, y: np.ndarray):
        x = np.asarray(x, dtype=float)
        y = np.asarray(y, dtype=float)
        if x.ndim != 1 or y.ndim != 1:
            raise ValueError("Interpolation nodes must be 1-d")
        if x.size != y.size:
            raise ValueError(f"x and y lengths differ: {x.size} vs {y.size}")
        if x.size < 2:
            raise ValueError("Linear interpolation requires at least 2 nodes")
        if not np.all(np.isfinite(x)) or not np.all(np.diff(x) > 0.0):
            raise ValueError("Interpolation abscissae must be finite and strictly increasing")
        self._x = x
        self._y = y
        # k=1 B-spline: piecewise linear, extrapolates with the end segments.
        self._spline = make_interp_spline(x, y, k=1, check_finite=False)

    @property
    def x_min(self) -> float:
        return float(self._x[0])

    @property
    def x_max(self) -> float:
        return float(self._x[-1])

    def __call__(self, x, allow_extrapolation: bool = False):
        xq = np.asarray(x, dtype=float)
        if not allow_extrapolation:
            if np.any(xq < self._x[0]) or np.any(xq > self._x[-1]):
                raise ValueError(
                    f"Interpolation range is [{self.x_min}, {self.x_max}]; "
                    "pass allow_extrapolation=True to evaluate outside it"
                )
        out = self._spline(xq, extrapolate=True)
        if out.ndim == 0:
            return float(out)
        return out
