"""Grid geometry for flattened finite-difference meshes.

A layout describes a tensor-product mesh: one coordinate vector per axis and
the strides used to flatten a multi-dimensional index into a 1-d array.

Convention: the first axis varies fastest, so
    stride[0] = 1,  stride[i] = stride[i-1] * dim[i-1]
and the flat index of a point is sum_i coord_i * stride_i.
"""

from __future__ import annotations

from typing import Sequence, Tuple

import numpy as np


class GridLayout:
    """
    Base class for grid layouts.
    Subclasses must implement :meth:`dimension_sizes`, :meth:`strides` and
    :meth:`coordinates`.
    """

    def dimension_sizes(self) -> Tuple[int, ...]:
        """Number of points along each axis."""
        raise NotImplementedError

    def strides(self) -> Tuple[int, ...]:
        """Flattening stride of each axis."""
        raise NotImplementedError

    def coordinates(self, axis: int) -> np.ndarray:
        """Raw coordinate values along `axis` in the layout's native representation."""
        raise NotImplementedError


class TensorGridLayout(GridLayout):
    """Tensor-product layout built from one coordinate vector per axis.

    Usage:
        layout = TensorGridLayout([log_price_axis(50.0, 200.0, 101), uniform_axis(0.01, 0.5, 11)])
        layout.strides()        # (1, 101)
        layout.index((3, 2))    # 3 + 2*101
    """

    def __init__(self, axes: Sequence[np.ndarray]):
        if len(axes) == 0:
            raise ValueError("Layout requires at least one axis")

        coords = []
        for i, axis in enumerate(axes):
            x = np.array(axis, dtype=float)
            if x.ndim != 1 or x.size == 0:
                raise ValueError(f"Axis {i} must be a non-empty 1-d array")
            if not np.all(np.isfinite(x)):
                raise ValueError(f"Axis {i} coordinates must be finite")
            if x.size > 1 and not np.all(np.diff(x) > 0.0):
                raise ValueError(f"Axis {i} coordinates must be strictly increasing")
            x.setflags(write=False)
            coords.append(x)
        self._coords = tuple(coords)

        self._dim = tuple(int(x.size) for x in self._coords)
        spacing = [1]
        for n in self._dim[:-1]:
            spacing.append(spacing[-1] * n)
        self._spacing = tuple(spacing)

    def dimension_sizes(self) -> Tuple[int, ...]:
        return self._dim

    def strides(self) -> Tuple[int, ...]:
        return self._spacing

    def coordinates(self, axis: int) -> np.ndarray:
        return self._coords[axis]

    @property
    def ndim(self) -> int:
        return len(self._dim)

    @property
    def size(self) -> int:
        """Total number of grid points (length of the flattened array)."""
        return int(np.prod(self._dim))

    def index(self, coords: Sequence[int]) -> int:
        """Flat index of the point with per-axis indices `coords`."""
        if len(coords) != self.ndim:
            raise ValueError(f"Expected {self.ndim} coordinates, got {len(coords)}")
        idx = 0
        for c, n, s in zip(coords, self._dim, self._spacing):
            c = int(c)
            if not (0 <= c < n):
                raise ValueError(f"Coordinate {c} out of range [0, {n})")
            idx += c * s
        return idx

    def coords(self, index: int) -> Tuple[int, ...]:
        """Per-axis indices of the point at flat position `index`."""
        index = int(index)
        if not (0 <= index < self.size):
            raise ValueError(f"Index {index} out of range [0, {self.size})")
        out = []
        for n in self._dim:
            out.append(index % n)
            index //= n
        return tuple(out)


def uniform_axis(low: float, high: float, n: int) -> np.ndarray:
    """Uniformly spaced coordinates on [low, high]."""
    low = float(low)
    high = float(high)
    n = int(n)
    if n < 1:
        raise ValueError("Axis requires n >= 1")
    if n > 1 and not high > low:
        raise ValueError("Axis requires high > low")
    return np.linspace(low, high, n)


def log_price_axis(s_min: float, s_max: float, n: int) -> np.ndarray:
    """Price axis uniform in log space, returned as log prices.

    The dividend handler exponentiates these back to price levels.
    """
    s_min = float(s_min)
    s_max = float(s_max)
    if s_min <= 0.0:
        raise ValueError("Log price axis requires s_min > 0")
    return uniform_axis(np.log(s_min), np.log(s_max), n)
