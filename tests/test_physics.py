import math

import pytest

from gravcore.constants import AU, G, M_EARTH, M_SUN, SOFTENING_DISTANCE, YEAR
from gravcore.data_models import Body
from gravcore.physics import NBodyPhysics, circular_orbit_velocity, orbital_period
from gravcore.vector_utils import Vector2D


def _pair(separation):
    pebble = Body("Pebble", 1.0, (0.0, 0.0), (0.0, 0.0))
    earth = Body("Earth", M_EARTH, (separation, 0.0), (0.0, 0.0))
    return pebble, earth


def test_acceleration_points_at_source():
    pebble, earth = _pair(1.0e7)
    acc_pebble, acc_earth = NBodyPhysics().compute_accelerations([pebble, earth])
    assert acc_pebble.x == pytest.approx(G * M_EARTH / 1.0e14)
    assert acc_pebble.y == 0.0
    assert acc_earth.x == pytest.approx(-G * 1.0 / 1.0e14)


def test_softening_cutoff_is_inclusive():
    physics = NBodyPhysics()
    pebble, earth = _pair(SOFTENING_DISTANCE)
    assert physics.compute_accelerations([pebble, earth])[0] == Vector2D(0.0, 0.0)

    r = SOFTENING_DISTANCE + 1.0
    pebble, earth = _pair(r)
    acc = physics.compute_accelerations([pebble, earth])[0]
    assert acc.x == pytest.approx(G * M_EARTH / r ** 2)
    assert acc.y == 0.0

    pebble, earth = _pair(SOFTENING_DISTANCE / 2)
    assert physics.compute_accelerations([pebble, earth])[0] == Vector2D(0.0, 0.0)


def test_lone_body_feels_nothing():
    pebble, _ = _pair(1.0)
    assert NBodyPhysics().compute_accelerations([pebble]) == [Vector2D(0.0, 0.0)]


def test_separate_sources_are_not_moved(sun):
    pebble = Body("Pebble", 1.0, (AU, 0.0), (0.0, circular_orbit_velocity(M_SUN, AU)))
    NBodyPhysics().leapfrog_step([pebble], 3600.0, sources=[sun])
    assert sun.position == Vector2D(0.0, 0.0)
    assert sun.velocity == Vector2D(0.0, 0.0)
    assert pebble.position != Vector2D(AU, 0.0)
    assert pebble.acceleration.x < 0.0


def test_leapfrog_records_trail():
    pebble, earth = _pair(1.0e8)
    physics = NBodyPhysics()
    physics.leapfrog_step([pebble, earth], 60.0)
    assert len(pebble.trail) == 2
    physics.leapfrog_step([pebble, earth], 60.0, trails_enabled=False)
    assert list(pebble.trail) == [pebble.position]


def test_circular_orbit_closes_after_one_period(sun):
    v = circular_orbit_velocity(M_SUN + M_EARTH, AU)
    earth = Body("Earth", M_EARTH, (AU, 0.0), (0.0, v))
    bodies = [sun, earth]
    physics = NBodyPhysics()
    dt = 3600.0
    for _ in range(int(round(YEAR / dt))):
        physics.leapfrog_step(bodies, dt)
    drift = earth.position.sub(Vector2D(AU, 0.0)).norm()
    assert drift < 0.01 * AU
    assert earth.position.norm() == pytest.approx(AU, rel=0.01)


def test_kepler_circle_returns_to_start(sun):
    r = AU
    v = math.sqrt(G * M_SUN / r)
    period = 2 * math.pi * math.sqrt(r ** 3 / (G * M_SUN))
    earth = Body("Earth", M_EARTH, (r, 0.0), (0.0, v))
    bodies = [sun, earth]
    physics = NBodyPhysics()
    dt = 3600.0
    for _ in range(int(round(period / dt))):
        physics.leapfrog_step(bodies, dt)
    drift = earth.position.sub(Vector2D(r, 0.0)).norm()
    assert drift < 0.01 * r


def test_orbit_helpers():
    assert circular_orbit_velocity(M_SUN, 0.0) == 0.0
    assert orbital_period(M_SUN, AU) == pytest.approx(YEAR, rel=5e-3)
    assert orbital_period(M_SUN, -1.0) == 0.0


def test_set_softening_never_negative():
    physics = NBodyPhysics()
    physics.set_softening(-5)
    assert physics.softening == 0.0
