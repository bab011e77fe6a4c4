"""Cash dividend step condition for finite-difference grids.

At an ex-dividend time the spot drops by the cash amount D, so the value just
before the dividend is the value just after it at the lower spot:
    V_pre(S) = V_post(max(S_min, S - D))

The grid stores log-spot along the price axis; the handler resamples every
price-axis slice of the flattened grid with a linear interpolant in spot space.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Callable, Sequence, Tuple

import numpy as np

from .interpolation import LinearInterpolation
from .layout import GridLayout
from .stepping import StepCondition

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class DividendSchedule:
    """Ex-dividend times paired positionally with cash amounts (spot currency).

    Times are matched by exact equality; a stepper must land on them exactly.
    """

    times: Tuple[float, ...]
    amounts: Tuple[float, ...]

    def __post_init__(self) -> None:
        times = tuple(float(t) for t in self.times)
        amounts = tuple(float(d) for d in self.amounts)
        if len(times) != len(amounts):
            raise ValueError(
                f"incorrect dimensions: {len(times)} dividend times vs {len(amounts)} dividends"
            )
        object.__setattr__(self, "times", times)
        object.__setattr__(self, "amounts", amounts)

    def __len__(self) -> int:
        return len(self.times)

    def amount_at(self, t: float) -> float | None:
        """Cash amount of the first dividend paid exactly at `t`, else None."""
        for t_div, amount in zip(self.times, self.amounts):
            if t_div == t:
                return amount
        return None


class DividendHandler(StepCondition):
    """Applies discrete cash dividends to a flattened PDE grid.

    Usage:
        handler = DividendHandler([0.5], [2.0], layout, direction=0)
        handler.apply_to(values, t)   # no-op unless t is exactly 0.5

    `values` is the flat grid (1-d float numpy array) in the layout's order and
    is mutated in place.
    """

    def __init__(self,
                 dividend_times: Sequence[float],
                 dividends: Sequence[float],
                 layout: GridLayout,
                 direction: int,
                 interpolation: Callable[[np.ndarray, np.ndarray], LinearInterpolation] = LinearInterpolation):
        self._schedule = DividendSchedule(tuple(dividend_times), tuple(dividends))

        dims = layout.dimension_sizes()
        direction = int(direction)
        if not (0 <= direction < len(dims)):
            raise ValueError(f"Price direction {direction} outside layout with {len(dims)} axes")

        self._layout = layout
        self._direction = direction
        self._interpolation = interpolation

        n = int(dims[direction])
        # Layout stores log-spot along the price axis.
        x = np.exp(np.asarray(layout.coordinates(direction), dtype=float)[:n])
        x.setflags(write=False)
        self._x = x

        logger.debug(
            "DividendHandler: %d dividends, price axis %d with %d nodes in [%g, %g]",
            len(self._schedule), direction, n, x[0], x[-1],
        )

    @property
    def schedule(self) -> DividendSchedule:
        return self._schedule

    @property
    def dividend_times(self) -> Tuple[float, ...]:
        return self._schedule.times

    @property
    def dividends(self) -> Tuple[float, ...]:
        return self._schedule.amounts

    @property
    def layout(self) -> GridLayout:
        return self._layout

    @property
    def direction(self) -> int:
        return self._direction

    @property
    def price_coordinates(self) -> np.ndarray:
        """Spot levels along the price axis (exp of the layout coordinates)."""
        return self._x

    def stopping_times(self) -> Tuple[float, ...]:
        return self._schedule.times

    def apply_to(self, values: np.ndarray, t: float) -> None:
        dividend = self._schedule.amount_at(t)
        if dividend is None:
            return

        logger.debug("Applying dividend %g at t=%r", dividend, t)

        # Every slice reads the pre-dividend state, never values written earlier in this call.
        values_copy = values.copy()

        x = self._x
        query = np.maximum(x[0], x - dividend)
        dims = self._layout.dimension_sizes()
        spacing = self._layout.strides()
        x_offsets = np.arange(x.size) * spacing[self._direction]

        for i in range(len(dims)):
            if i == self._direction:
                continue
            y_spacing = spacing[i]
            # Other orthogonal axes stay at coordinate 0 (see DESIGN.md).
            for j in range(dims[i]):
                index = j * y_spacing + x_offsets
                interp = self._interpolation(x, values_copy[index])
                values[index] = interp(query, allow_extrapolation=True)
