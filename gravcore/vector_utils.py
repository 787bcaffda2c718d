#!/usr/bin/env python3
"""
Immutable 2D vector used for every position, velocity and acceleration.

Every operation returns a new value; nothing mutates in place.
"""
import math
from typing import NamedTuple, Sequence


def clamp(x: float, a: float, b: float) -> float:
    """Clamp x to the inclusive range [a, b]."""
    return max(a, min(b, x))


class Vector2D(NamedTuple):
    x: float = 0.0
    y: float = 0.0

    def add(self, other: Sequence[float]) -> "Vector2D":
        return Vector2D(self.x + other[0], self.y + other[1])

    def sub(self, other: Sequence[float]) -> "Vector2D":
        return Vector2D(self.x - other[0], self.y - other[1])

    def scale(self, s: float) -> "Vector2D":
        return Vector2D(self.x * s, self.y * s)

    def norm(self) -> float:
        return math.hypot(self.x, self.y)

    def dot(self, other: Sequence[float]) -> float:
        return self.x * other[0] + self.y * other[1]

    def unit(self) -> "Vector2D":
        l = self.norm()
        if l == 0:
            return ZERO
        return Vector2D(self.x / l, self.y / l)

    def perpendicular(self) -> "Vector2D":
        """Rotate by +90 degrees."""
        return Vector2D(-self.y, self.x)


ZERO = Vector2D(0.0, 0.0)


def as_vector(v: Sequence[float]) -> Vector2D:
    """Coerce any (x, y) pair into a Vector2D of floats."""
    if isinstance(v, Vector2D):
        return v
    return Vector2D(float(v[0]), float(v[1]))
