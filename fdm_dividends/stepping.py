"""Backward time stepping with step conditions.

The rollback walks from `from_time` down to `to_time` in equal steps. When a
condition reports stopping times (dividend dates, exercise dates), any step
that straddles one is split so the condition sees the exact stopping time.
"""

from __future__ import annotations

import logging
import math
from typing import Callable, Iterable, Optional, Sequence, Tuple

import numpy as np

logger = logging.getLogger(__name__)

Evolver = Callable[[np.ndarray, float, float], np.ndarray]

_TIME_EPS = math.sqrt(np.finfo(float).eps)


class StepCondition:
    """
    Base class for conditions applied to the grid after each time step.
    Subclasses must implement :meth:`apply_to`.
    """

    def apply_to(self, values: np.ndarray, t: float) -> None:
        raise NotImplementedError


class StepConditionComposite(StepCondition):
    """Applies several step conditions in order and merges their stopping times."""

    def __init__(self, conditions: Iterable[StepCondition], stopping_times: Iterable[float] = ()):
        self._conditions = tuple(conditions)
        times = {float(t) for t in stopping_times}
        for cond in self._conditions:
            if hasattr(cond, "stopping_times"):
                times.update(float(t) for t in cond.stopping_times())
        self._stopping_times = tuple(sorted(times))

    @property
    def conditions(self) -> Tuple[StepCondition, ...]:
        return self._conditions

    def stopping_times(self) -> Tuple[float, ...]:
        return self._stopping_times

    def apply_to(self, values: np.ndarray, t: float) -> None:
        for cond in self._conditions:
            cond.apply_to(values, t)


def rollback(values: np.ndarray,
             from_time: float,
             to_time: float,
             steps: int,
             evolve: Evolver,
             condition: Optional[StepCondition] = None) -> np.ndarray:
    """Roll `values` back from `from_time` to `to_time`.

    `evolve(values, t_from, t_to)` advances the grid over one (possibly
    shortened) step and returns the new array. `condition.apply_to` runs after
    every step at the time landed on, and at `from_time` if that is itself a
    stopping time.
    """
    from_time = float(from_time)
    to_time = float(to_time)
    steps = int(steps)
    if steps < 1:
        raise ValueError("Rollback requires steps >= 1")
    if from_time < to_time:
        raise ValueError(f"Cannot roll back from {from_time} to later time {to_time}")

    stopping: Sequence[float] = ()
    if condition is not None and hasattr(condition, "stopping_times"):
        stopping = sorted(condition.stopping_times())

    dt = (from_time - to_time) / steps
    t = from_time

    if condition is not None and from_time in stopping:
        condition.apply_to(values, from_time)

    for _ in range(steps):
        now = t
        next_t = t - dt
        if abs(to_time - next_t) < _TIME_EPS:
            next_t = to_time

        hit = False
        for t_stop in reversed(stopping):
            if next_t <= t_stop < now:
                hit = True
                values = evolve(values, now, t_stop)
                if condition is not None:
                    condition.apply_to(values, t_stop)
                logger.debug("Rollback stopped at t=%r", t_stop)
                now = t_stop

        if hit:
            if now > next_t:
                values = evolve(values, now, next_t)
                if condition is not None:
                    condition.apply_to(values, next_t)
        else:
            values = evolve(values, now, next_t)
            if condition is not None:
                condition.apply_to(values, next_t)

        t -= dt

    return values
