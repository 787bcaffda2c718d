#!/usr/bin/env python3
"""
Conservation diagnostics for a body set.

Used to watch integrator drift (total energy) and to check that merges conserve
momentum. Potential energy skips pairs inside the softening distance, matching the
force kernel.
"""
import math
from typing import Sequence

from .constants import G, SOFTENING_DISTANCE
from .data_models import Body
from .vector_utils import ZERO, Vector2D


def kinetic_energy(bodies: Sequence[Body]) -> float:
    return sum(b.kinetic_energy for b in bodies)


def potential_energy(bodies: Sequence[Body], softening: float = SOFTENING_DISTANCE) -> float:
    pe = 0.0
    n = len(bodies)
    for i in range(n):
        for j in range(i + 1, n):
            r = bodies[i].position.sub(bodies[j].position).norm()
            if r > softening:
                pe -= G * bodies[i].mass * bodies[j].mass / r
    return pe


def total_energy(bodies: Sequence[Body], softening: float = SOFTENING_DISTANCE) -> float:
    return kinetic_energy(bodies) + potential_energy(bodies, softening)


def total_momentum(bodies: Sequence[Body]) -> Vector2D:
    p = ZERO
    for b in bodies:
        p = p.add(b.momentum)
    return p


def total_mass(bodies: Sequence[Body]) -> float:
    return math.fsum(b.mass for b in bodies)


def center_of_mass(bodies: Sequence[Body]) -> Vector2D:
    """Mass-weighted mean position; the origin for an empty set."""
    m = total_mass(bodies)
    if m <= 0:
        return ZERO
    acc = ZERO
    for b in bodies:
        acc = acc.add(b.position.scale(b.mass))
    return acc.scale(1.0 / m)
