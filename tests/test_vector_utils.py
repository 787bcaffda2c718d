import math

import pytest

from gravcore.vector_utils import ZERO, Vector2D, as_vector, clamp


def test_arithmetic_returns_new_vectors():
    a = Vector2D(1.0, 2.0)
    b = Vector2D(3.0, -4.0)
    assert a.add(b) == Vector2D(4.0, -2.0)
    assert a.sub(b) == Vector2D(-2.0, 6.0)
    assert a.scale(2.5) == Vector2D(2.5, 5.0)
    assert a == Vector2D(1.0, 2.0)


def test_norm_and_dot():
    v = Vector2D(3.0, 4.0)
    assert v.norm() == pytest.approx(5.0)
    assert v.dot(Vector2D(1.0, 1.0)) == pytest.approx(7.0)


def test_unit_of_zero_is_zero():
    assert ZERO.unit() == ZERO
    u = Vector2D(0.0, -2.0).unit()
    assert u == Vector2D(0.0, -1.0)
    assert math.isclose(Vector2D(5.0, 12.0).unit().norm(), 1.0)


def test_perpendicular_rotates_counter_clockwise():
    assert Vector2D(1.0, 0.0).perpendicular() == Vector2D(-0.0, 1.0)
    v = Vector2D(2.0, 7.0)
    assert v.dot(v.perpendicular()) == 0.0


def test_operations_accept_plain_pairs():
    assert Vector2D(1.0, 1.0).add((2, 3)) == Vector2D(3.0, 4.0)
    assert Vector2D(1.0, 1.0).sub([1, 1]) == ZERO


def test_as_vector():
    v = as_vector((1, 2))
    assert isinstance(v, Vector2D)
    assert isinstance(v.x, float)
    same = Vector2D(1.0, 2.0)
    assert as_vector(same) is same


def test_clamp():
    assert clamp(5, 0, 3) == 3
    assert clamp(-1, 0, 3) == 0
    assert clamp(1.5, 0, 3) == 1.5
