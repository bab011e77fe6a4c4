"""Discrete dividend handling for finite-difference grids: package exports."""

from .dividend_handler import DividendHandler, DividendSchedule
from .interpolation import LinearInterpolation
from .layout import GridLayout, TensorGridLayout, log_price_axis, uniform_axis
from .stepping import StepCondition, StepConditionComposite, rollback

__all__ = [
    "DividendHandler",
    "DividendSchedule",
    "LinearInterpolation",
    "GridLayout",
    "TensorGridLayout",
    "log_price_axis",
    "uniform_axis",
    "StepCondition",
    "StepConditionComposite",
    "rollback",
]
