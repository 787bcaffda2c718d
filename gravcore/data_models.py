#!/usr/bin/env python3
"""
Data models for Gravity Sandbox.

This module defines the Body dataclass shared between physics, collisions, the
orbit preview and the host, plus the small records the engine hands back.

Units and usage
- position is in meters [m], velocity in meters per second [m/s], mass in kg.
- radius and display_size are derived from mass and are never stored.
- trail stores past positions to render motion paths; it is mutated by the integrator.
"""
import math
from collections import deque
from dataclasses import dataclass, field
from typing import Deque, List, Optional, Tuple

from .config import SimSettings
from .constants import (
    COLLISION_RADIUS_MULTIPLIER,
    M_EARTH,
    M_MOON,
    M_SUN,
    MAX_BODY_SIZE,
    MAX_PATH_LENGTH,
    MIN_BODY_SIZE,
    R_EARTH,
)
from .errors import InvalidBodyError
from .vector_utils import ZERO, Vector2D, as_vector, clamp

Color = Tuple[int, int, int]

_LOG_MOON_MASS = math.log10(M_MOON)
_LOG_SIZE_CEILING = math.log10(M_SUN * 10)


def _checked_mass(name: str, mass) -> float:
    try:
        value = float(mass)
    except (TypeError, ValueError):
        raise InvalidBodyError(f"Body '{name}': mass {mass!r} is not a number") from None
    if not (value > 0.0 and math.isfinite(value)):
        raise InvalidBodyError(f"Body '{name}': mass must be positive and finite, got {value!r}")
    return value


def radius_for_mass(mass: float, multiplier: float = COLLISION_RADIUS_MULTIPLIER) -> float:
    """Earth-density radius for ``mass``, scaled by ``multiplier``."""
    return R_EARTH * (mass / M_EARTH) ** (1.0 / 3.0) * multiplier


def size_for_mass(mass: float) -> float:
    """Marker size in pixels, log-scaled between a Moon and ten Suns."""
    frac = (math.log10(mass) - _LOG_MOON_MASS) / (_LOG_SIZE_CEILING - _LOG_MOON_MASS)
    return clamp(MIN_BODY_SIZE + (MAX_BODY_SIZE - MIN_BODY_SIZE) * frac, MIN_BODY_SIZE, MAX_BODY_SIZE)


@dataclass
class Body:
    """
    Represents a celestial body in the simulation.

    Fields:
    - name: Identifier for the body, rewritten by merges
    - mass: Mass in kilograms, always > 0 (checked on every assignment)
    - position: 2D position in meters
    - velocity: 2D velocity in meters/second
    - color: RGB tuple used for rendering
    - acceleration: last acceleration stored by the integrator
    - radius_multiplier: scale applied to the physical collision radius
    - trail: Deque of past positions, oldest dropped first
    """
    name: str
    mass: float
    position: Vector2D
    velocity: Vector2D
    color: Color = (200, 200, 255)
    acceleration: Vector2D = ZERO
    radius_multiplier: float = COLLISION_RADIUS_MULTIPLIER
    trail: Deque[Vector2D] = field(default_factory=lambda: deque(maxlen=MAX_PATH_LENGTH))

    def __setattr__(self, key, value):
        if key == "mass":
            value = _checked_mass(getattr(self, "name", "?"), value)
        elif key in ("position", "velocity", "acceleration"):
            value = as_vector(value)
        super().__setattr__(key, value)

    def __post_init__(self):
        if not self.trail:
            self.trail.append(self.position)

    @property
    def radius(self) -> float:
        """Collision radius in meters."""
        return radius_for_mass(self.mass, self.radius_multiplier)

    @property
    def display_size(self) -> float:
        return size_for_mass(self.mass)

    @property
    def momentum(self) -> Vector2D:
        return self.velocity.scale(self.mass)

    @property
    def kinetic_energy(self) -> float:
        return 0.5 * self.mass * self.velocity.dot(self.velocity)

    def record_trail(self, enabled: bool = True) -> None:
        """Append the current position, or collapse the trail to it when trails are off."""
        if enabled:
            self.trail.append(self.position)
        else:
            self.collapse_trail()

    def collapse_trail(self) -> None:
        self.trail.clear()
        self.trail.append(self.position)

    def set_trail_length(self, n: int) -> None:
        self.trail = deque(self.trail, maxlen=max(1, int(n)))

    def clone(self, name: Optional[str] = None) -> "Body":
        """Independent copy, including the trail."""
        return Body(
            name=self.name if name is None else name,
            mass=self.mass,
            position=self.position,
            velocity=self.velocity,
            color=self.color,
            acceleration=self.acceleration,
            radius_multiplier=self.radius_multiplier,
            trail=deque(self.trail, maxlen=self.trail.maxlen),
        )


@dataclass
class CollisionEvent:
    """Where a merge happened and how much kinetic energy it dissipated (J)."""
    position: Vector2D
    energy_lost: float
    names: Tuple[str, str] = ("", "")
    merged_name: str = ""


@dataclass
class World:
    """The canonical body set, its clock and its settings."""
    bodies: List[Body] = field(default_factory=list)
    elapsed_time: float = 0.0
    settings: SimSettings = field(default_factory=SimSettings)

    def new_body(self, name: str, mass: float, position, velocity, color: Color = (200, 200, 255)) -> Body:
        """Build a body that follows this world's trail cap and radius multiplier."""
        return Body(
            name=name,
            mass=mass,
            position=position,
            velocity=velocity,
            color=color,
            radius_multiplier=self.settings.collision_radius_multiplier,
            trail=deque(maxlen=self.settings.max_trail_length),
        )


@dataclass
class PreviewResult:
    """
    Disposable candidate body plus its projected path.

    mode is "analytic" for the paused Kepler ellipse and "ghost" for the
    forward-integrated path.
    """
    body: Body
    path: List[Vector2D]
    elements: "OrbitElements"
    mode: str = "analytic"


@dataclass(frozen=True)
class OrbitElements:
    """Two-body orbit derived from a period and eccentricity."""
    semi_major_axis: float
    eccentricity: float
    periapsis: float
    periapsis_speed: float
    mu: float  # G * (M_center + m_trial)
    period: float  # seconds

    @property
    def linear_eccentricity(self) -> float:
        return self.semi_major_axis * self.eccentricity

    @property
    def semi_minor_axis(self) -> float:
        return self.semi_major_axis * math.sqrt(1.0 - self.eccentricity ** 2)
