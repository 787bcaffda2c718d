#!/usr/bin/env python3
"""
Core Physics Engine for Gravity Sandbox

Responsibilities
- Compute pairwise gravitational accelerations for a set of target bodies under the pull
  of a (possibly different) set of source bodies.
- Advance body states using a kick-drift-kick leapfrog (velocity Verlet) integrator.
- Provide small helpers for common orbital computations (circular speed, Kepler period).

Units and conventions
- World space positions are in meters [m].
- Velocities are in meters per second [m/s].
- Masses are in kilograms [kg].
- Time steps are in seconds [s].
- The gravitational constant G is expressed in SI: m^3 kg^-1 s^-2.

Numerical notes
- Softening: pairs closer than the softening distance (1e6 m by default) contribute no
  acceleration at all for that evaluation. This hard cutoff keeps near-contact encounters
  from producing enormous kicks; merging usually removes such pairs on the same step.
- Complexity: acceleration computation is O(targets * sources) per evaluation (direct
  summation). Body counts are tens, not thousands.
- Energy: leapfrog is symplectic and time-reversible, so orbital energy oscillates around
  its true value instead of drifting; orbits neither decay nor blow up over long runs.

Target/source split
- A preview body must feel the canonical bodies without pulling on them. The force kernel
  therefore takes two collections; a body present in both is skipped by identity.
"""

import math
from typing import List, Optional, Sequence

from .constants import G, SOFTENING_DISTANCE
from .data_models import Body
from .vector_utils import Vector2D


class NBodyPhysics:
    """
    N-body gravitational physics engine with a hard softening cutoff.

    The acceleration of target i due to source j is:
    a_i += G * m_j * r_ij / |r_ij|^3     for |r_ij| > softening
    and zero otherwise.
    """

    def __init__(self, softening: float = SOFTENING_DISTANCE):
        """
        Initialize the physics engine.

        Args:
            softening: Separation in meters at or below which a pair is ignored
        """
        self.softening = max(0.0, float(softening))

    def set_softening(self, softening: float) -> None:
        self.softening = max(0.0, float(softening))

    def compute_accelerations(self, targets: Sequence[Body],
                              sources: Optional[Sequence[Body]] = None) -> List[Vector2D]:
        """
        Compute gravitational accelerations for every target.

        For each target i, sums the pull of every source j that is not the very same
        object (identity, not equality):

            a_i = Σ_j G * m_j * r_ij / |r_ij|^3

        where r_ij points from target i to source j.

        Args:
            targets: Bodies that need accelerations.
            sources: Bodies exerting gravity; defaults to ``targets``.

        Returns:
            List of accelerations (m/s^2), same order as ``targets``.
        """
        if sources is None:
            sources = targets
        softening = self.softening
        accelerations = []

        for target in targets:
            ax_total, ay_total = 0.0, 0.0
            xi, yi = target.position

            for source in sources:
                if source is target:
                    continue

                dx = source.position.x - xi
                dy = source.position.y - yi
                r = math.hypot(dx, dy)
                if r <= softening:
                    continue

                factor = G * source.mass / (r * r * r)
                ax_total += dx * factor
                ay_total += dy * factor

            accelerations.append(Vector2D(ax_total, ay_total))

        return accelerations

    def leapfrog_step(self, targets: Sequence[Body], timestep: float,
                      sources: Optional[Sequence[Body]] = None,
                      trails_enabled: bool = True) -> None:
        """
        Perform one kick-drift-kick leapfrog step on ``targets`` (modified in place).

        Workflow:
        1) a(t) from current positions; v += a(t) * dt/2
        2) x += v * dt
        3) a(t+dt) from the updated positions
        4) v += a(t+dt) * dt/2
        5) store a(t+dt) and record the new position in the trail

        When ``sources`` is the same list as ``targets`` the second force evaluation sees
        every body's drifted position; with distinct sources (preview bodies) the sources
        stay where they are.

        Args:
            targets: Bodies to integrate.
            timestep: Time step size in seconds.
            sources: Bodies exerting gravity; defaults to ``targets``.
            trails_enabled: Append to trails, or collapse each trail to its current point.
        """
        if sources is None:
            sources = targets
        half_dt = 0.5 * timestep

        for body, acc in zip(targets, self.compute_accelerations(targets, sources)):
            body.velocity = body.velocity.add(acc.scale(half_dt))
            body.position = body.position.add(body.velocity.scale(timestep))

        for body, acc in zip(targets, self.compute_accelerations(targets, sources)):
            body.velocity = body.velocity.add(acc.scale(half_dt))
            body.acceleration = acc
            body.record_trail(trails_enabled)


def circular_orbit_velocity(central_mass: float, orbital_radius: float) -> float:
    """
    Calculate the velocity needed for a circular orbit.

    For a circular orbit, the gravitational force provides exactly the
    centripetal force needed: G * M / r = v^2 / r, so v = sqrt(G * M / r).

    Args:
        central_mass: Mass of the central body in kg
        orbital_radius: Orbital radius in meters

    Returns:
        Orbital velocity in m/s for a circular orbit
    """
    if orbital_radius <= 0:
        return 0.0

    return math.sqrt(G * central_mass / orbital_radius)


def orbital_period(total_mass: float, semi_major_axis: float) -> float:
    """Kepler's third law: T = 2*pi*sqrt(a^3 / (G*M))."""
    if semi_major_axis <= 0 or total_mass <= 0:
        return 0.0

    return 2.0 * math.pi * math.sqrt(semi_major_axis ** 3 / (G * total_mass))
