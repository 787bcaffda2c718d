#!/usr/bin/env python3
"""
General utilities for turning host input into engine parameters.
"""
import math
from typing import Optional

from .constants import (
    MASS_UNITS,
    PERIOD_SLIDER_MAX_YEARS,
    PERIOD_SLIDER_MIN_YEARS,
    PERIOD_SLIDER_STEPS,
)


def try_float(val) -> Optional[float]:
    try:
        return float(val)
    except (TypeError, ValueError):
        return None


def log_slider(position: float, lo: float = PERIOD_SLIDER_MIN_YEARS,
               hi: float = PERIOD_SLIDER_MAX_YEARS, steps: int = PERIOD_SLIDER_STEPS) -> float:
    """Map a linear slider position in [0, steps] onto [lo, hi] logarithmically."""
    lo_log = math.log(lo)
    scale = (math.log(hi) - lo_log) / steps
    return math.exp(lo_log + scale * position)


def log_slider_position(value: float, lo: float = PERIOD_SLIDER_MIN_YEARS,
                        hi: float = PERIOD_SLIDER_MAX_YEARS, steps: int = PERIOD_SLIDER_STEPS) -> float:
    """Inverse of log_slider."""
    lo_log = math.log(lo)
    return (math.log(value) - lo_log) * steps / (math.log(hi) - lo_log)


def mass_to_si(val: float, unit: str) -> float:
    """Convert a mass in Earths, Suns or Moons to kilograms; unknown units are kg."""
    return val * MASS_UNITS.get(unit, 1.0)
