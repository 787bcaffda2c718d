#!/usr/bin/env python3
"""
Runtime simulation settings.

Physical constants live in constants.py and never change; the knobs here are
owned by a World and may be adjusted by the host while the simulation runs
(trails, radius multiplier, pacing).
"""
from dataclasses import dataclass

from .constants import (
    COLLISION_RADIUS_MULTIPLIER,
    DEFAULT_DT,
    DEFAULT_STEPS_PER_FRAME,
    ELLIPSE_SAMPLES,
    GHOST_MAX_STEPS,
    MAX_PATH_LENGTH,
    MAX_STEPS_PER_FRAME,
    SOFTENING_DISTANCE,
)
from .vector_utils import clamp


@dataclass
class SimSettings:
    """
    Container for simulation settings.

    Fields:
    - dt: seconds of simulation time per substep
    - steps_per_frame: substeps the host runs per animation tick
    - trails_enabled: record trails, or keep only the current position
    - max_trail_length: trail cap per body
    - collision_radius_multiplier: scale applied to physical radii
    - softening: separation (m) at or below which a pair exerts no force
    - ghost_max_steps: cap on forward-integrated preview steps
    - ellipse_samples: angular intervals of the paused preview ellipse
    """
    dt: float = DEFAULT_DT
    steps_per_frame: int = DEFAULT_STEPS_PER_FRAME
    trails_enabled: bool = True
    max_trail_length: int = MAX_PATH_LENGTH
    collision_radius_multiplier: float = COLLISION_RADIUS_MULTIPLIER
    softening: float = SOFTENING_DISTANCE
    ghost_max_steps: int = GHOST_MAX_STEPS
    ellipse_samples: int = ELLIPSE_SAMPLES

    def __post_init__(self):
        self.dt = max(1e-3, float(self.dt))
        self.steps_per_frame = int(clamp(int(self.steps_per_frame), 1, MAX_STEPS_PER_FRAME))
        self.trails_enabled = bool(self.trails_enabled)
        self.max_trail_length = max(1, int(self.max_trail_length))
        self.collision_radius_multiplier = max(0.01, float(self.collision_radius_multiplier))
        self.softening = max(0.0, float(self.softening))
        self.ghost_max_steps = max(0, int(self.ghost_max_steps))
        self.ellipse_samples = max(3, int(self.ellipse_samples))
