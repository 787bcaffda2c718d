#!/usr/bin/env python3
"""
Orbit preview for a body that has not been added to the world yet.

Given a reference ("center") body and a trial mass, period and eccentricity, the
two-body problem (center + trial, everything else ignored) fixes the semi-major axis
through Kepler's third law and the periapsis speed through vis-viva:

    a   = (G (M + m) T^2 / 4 pi^2)^(1/3)
    r_p = a (1 - e)
    v_p = sqrt(G (M + m) (2 / r_p - 1 / a))

The trial body starts at periapsis, displaced from the center along the direction
anchor -> center (anchor is world body 0) and moving along its perpendicular,
relative to the center's own velocity.

Two path strategies:
- ellipse_path: analytic Kepler ellipse, used while the simulation is paused.
- ghost_path: forward integration of clones of every body plus the trial body, used
  while time is running so that perturbations from the other bodies show up.
Neither touches the canonical bodies.
"""
import math
from typing import List, Optional, Sequence, Tuple

from .constants import ANCHOR_EPSILON, G, YEAR
from .data_models import Body, OrbitElements
from .errors import DegenerateOrbitError, InvalidBodyError
from .physics import NBodyPhysics
from .vector_utils import Vector2D

X_AXIS = Vector2D(1.0, 0.0)


def derive_orbit(center_mass: float, trial_mass: float, period_years: float,
                 eccentricity: float) -> OrbitElements:
    """
    Semi-major axis, periapsis distance and periapsis speed for a two-body orbit.

    Raises:
        InvalidBodyError: if the trial mass is not positive.
        DegenerateOrbitError: if the parameters do not describe a bound ellipse.
    """
    if not (trial_mass > 0 and math.isfinite(trial_mass)):
        raise InvalidBodyError(f"Trial mass must be positive and finite, got {trial_mass!r}")
    if not (period_years > 0 and math.isfinite(period_years)):
        raise DegenerateOrbitError(f"Orbital period must be positive, got {period_years!r} years")
    if not (0.0 <= eccentricity < 1.0):
        raise DegenerateOrbitError(f"Eccentricity must be in [0, 1), got {eccentricity!r}")

    mu = G * (center_mass + trial_mass)
    T = period_years * YEAR
    a = (mu * T * T / (4.0 * math.pi * math.pi)) ** (1.0 / 3.0)
    r_p = a * (1.0 - eccentricity)
    if not r_p > 0:
        raise DegenerateOrbitError(f"Periapsis distance must be positive, got {r_p!r} m")

    v_p = vis_viva_speed(mu, r_p, a)
    if not (math.isfinite(a) and math.isfinite(v_p)):
        raise DegenerateOrbitError("Orbit parameters overflowed")

    return OrbitElements(
        semi_major_axis=a,
        eccentricity=eccentricity,
        periapsis=r_p,
        periapsis_speed=v_p,
        mu=mu,
        period=T,
    )


def orbital_frame(anchor: Vector2D, center: Vector2D) -> Tuple[Vector2D, Vector2D]:
    """
    Unit direction from ``anchor`` to ``center`` and its perpendicular.

    A center sitting on the anchor falls back to the x axis.
    """
    offset = center.sub(anchor)
    if offset.norm() < ANCHOR_EPSILON:
        direction = X_AXIS
    else:
        direction = offset.unit()
    return direction, direction.perpendicular()


def place_trial_body(center: Body, elements: OrbitElements, direction: Vector2D,
                     perpendicular: Vector2D, mass: float, color=(255, 255, 255),
                     name: str = "(preview)") -> Body:
    """Trial body at periapsis, velocity relative to the (possibly moving) center."""
    return Body(
        name=name,
        mass=mass,
        position=center.position.add(direction.scale(elements.periapsis)),
        velocity=center.velocity.add(perpendicular.scale(elements.periapsis_speed)),
        color=color,
        radius_multiplier=center.radius_multiplier,
    )


def ellipse_path(focus: Vector2D, elements: OrbitElements, direction: Vector2D,
                 perpendicular: Vector2D, samples: int = 200) -> List[Vector2D]:
    """
    Closed Kepler ellipse with one focus on ``focus``.

    Point k of ``samples`` (inclusive, so the path closes on itself) is
    (a cos t - c) along ``direction`` plus (b sin t) along ``perpendicular``; t = 0
    is periapsis.
    """
    a = elements.semi_major_axis
    b = elements.semi_minor_axis
    c = elements.linear_eccentricity
    path = []
    for k in range(samples + 1):
        angle = 2.0 * math.pi * k / samples
        ex = a * math.cos(angle) - c
        ey = b * math.sin(angle)
        path.append(focus.add(direction.scale(ex)).add(perpendicular.scale(ey)))
    return path


def ghost_step_count(period: float, dt: float, max_steps: int) -> int:
    """min(max_steps, floor(period / dt))"""
    if dt <= 0:
        return 0
    return max(0, min(int(max_steps), int(math.floor(period / dt))))


def ghost_path(bodies: Sequence[Body], trial: Body, dt: float, steps: int,
               physics: Optional[NBodyPhysics] = None) -> List[Vector2D]:
    """
    Forward-integrate disposable clones of ``bodies`` plus ``trial``.

    Returns the trial clone's start position followed by its position after each
    step. The clones pull on each other (trial included); the input bodies are untouched.
    """
    physics = physics or NBodyPhysics()
    ghosts = [b.clone() for b in bodies]
    ghost_trial = trial.clone()
    ghosts.append(ghost_trial)

    path = [ghost_trial.position]
    for _ in range(steps):
        physics.leapfrog_step(ghosts, dt, trails_enabled=False)
        path.append(ghost_trial.position)
    return path


def vis_viva_speed(mu: float, r: float, a: float) -> float:
    """Orbital speed at distance r on an orbit with semi-major axis a."""
    return math.sqrt(mu * (2.0 / r - 1.0 / a))
