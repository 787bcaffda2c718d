import math

import pytest

from gravcore.constants import AU, G, M_EARTH, M_SUN, YEAR
from gravcore.data_models import Body
from gravcore.errors import DegenerateOrbitError, InvalidBodyError
from gravcore.orbits import (
    X_AXIS,
    derive_orbit,
    ellipse_path,
    ghost_path,
    ghost_step_count,
    orbital_frame,
    place_trial_body,
    vis_viva_speed,
)
from gravcore.vector_utils import Vector2D


def test_one_year_orbit_is_one_au():
    e = derive_orbit(M_SUN, M_EARTH, 1.0, 0.0)
    assert e.semi_major_axis == pytest.approx(AU, rel=0.01)
    assert e.periapsis == e.semi_major_axis
    assert e.periapsis_speed == pytest.approx(math.sqrt(G * (M_SUN + M_EARTH) / e.semi_major_axis))
    assert e.period == pytest.approx(YEAR)


def test_vis_viva_regression():
    mu = G * M_SUN
    a = AU
    assert vis_viva_speed(mu, a, a) == pytest.approx(math.sqrt(mu / a))
    assert vis_viva_speed(mu, a / 2, a) == pytest.approx(math.sqrt(3 * mu / a))

    e = derive_orbit(M_SUN, M_EARTH, 2.0, 0.5)
    assert e.periapsis == pytest.approx(e.semi_major_axis / 2)
    assert e.periapsis_speed == pytest.approx(math.sqrt(3 * e.mu / e.semi_major_axis))


@pytest.mark.parametrize("period", [0.0, -1.0, float("nan"), float("inf")])
def test_bad_period_is_degenerate(period):
    with pytest.raises(DegenerateOrbitError):
        derive_orbit(M_SUN, M_EARTH, period, 0.0)


@pytest.mark.parametrize("ecc", [1.0, 1.5, -0.1])
def test_unbound_eccentricity_is_degenerate(ecc):
    with pytest.raises(DegenerateOrbitError):
        derive_orbit(M_SUN, M_EARTH, 1.0, ecc)


@pytest.mark.parametrize("mass", [0.0, -M_EARTH])
def test_bad_trial_mass(mass):
    with pytest.raises(InvalidBodyError):
        derive_orbit(M_SUN, mass, 1.0, 0.0)


def test_orbital_frame():
    d, p = orbital_frame(Vector2D(0.0, 0.0), Vector2D(0.0, 0.0))
    assert d == X_AXIS
    assert p == Vector2D(-0.0, 1.0)

    d, p = orbital_frame(Vector2D(0.0, 0.0), Vector2D(0.0, 5.0e10))
    assert d == Vector2D(0.0, 1.0)
    assert p == Vector2D(-1.0, 0.0)

    # Within the anchor epsilon counts as coincident
    d, _ = orbital_frame(Vector2D(0.0, 0.0), Vector2D(0.0, 10.0))
    assert d == X_AXIS


def _trial_around(center, ecc=0.3):
    elements = derive_orbit(center.mass, M_EARTH, 1.0, ecc)
    d, p = orbital_frame(Vector2D(0.0, 0.0), center.position)
    trial = place_trial_body(center, elements, d, p, M_EARTH)
    return elements, d, p, trial


def test_trial_body_starts_at_periapsis():
    center = Body("Star", M_SUN, (3.0e11, 4.0e11), (100.0, -50.0))
    elements, d, p, trial = _trial_around(center)
    assert trial.position.sub(center.position).norm() == pytest.approx(elements.periapsis)
    rel_v = trial.velocity.sub(center.velocity)
    assert rel_v.norm() == pytest.approx(elements.periapsis_speed)
    assert rel_v.dot(d) == pytest.approx(0.0, abs=1e-6)
    assert trial.name == "(preview)"


def test_ellipse_starts_on_trial_body_and_closes():
    center = Body("Star", M_SUN, (3.0e11, 4.0e11), (0.0, 0.0))
    elements, d, p, trial = _trial_around(center)
    path = ellipse_path(center.position, elements, d, p, samples=200)
    assert len(path) == 201
    assert path[0].x == pytest.approx(trial.position.x)
    assert path[0].y == pytest.approx(trial.position.y)
    assert path[-1].x == pytest.approx(path[0].x)
    assert path[-1].y == pytest.approx(path[0].y)


def test_ellipse_runs_with_the_trial_velocity():
    center = Body("Star", M_SUN, (0.0, 2.0e11), (0.0, 0.0))
    elements, d, p, trial = _trial_around(center)
    path = ellipse_path(center.position, elements, d, p, samples=200)
    heading = path[1].sub(path[0])
    assert heading.dot(trial.velocity) > 0


def test_ellipse_apoapsis_distance():
    center = Body("Sun", M_SUN, (0.0, 0.0), (0.0, 0.0))
    elements, d, p, _ = _trial_around(center, ecc=0.5)
    path = ellipse_path(center.position, elements, d, p, samples=200)
    far = path[100]
    assert far.norm() == pytest.approx(elements.semi_major_axis * 1.5)


def test_ghost_step_count():
    assert ghost_step_count(YEAR, 3600.0, 2000) == 2000
    assert ghost_step_count(10 * 3600.0 + 5.0, 3600.0, 2000) == 10
    assert ghost_step_count(YEAR, 0.0, 2000) == 0


def test_ghost_path_leaves_canonical_bodies_untouched(sun):
    elements, d, p, trial = _trial_around(sun, ecc=0.0)
    other = Body("Jupiter", 1.9e27, (7.8e11, 0.0), (0.0, 13000.0))
    bodies = [sun, other]
    snapshot = [(b.position, b.velocity, len(b.trail)) for b in bodies]
    trial_start = trial.position

    path = ghost_path(bodies, trial, 3600.0, 50)

    assert len(path) == 51
    assert path[0] == trial_start
    assert path[-1] != trial_start
    assert [(b.position, b.velocity, len(b.trail)) for b in bodies] == snapshot
    assert trial.position == trial_start
    assert len(bodies) == 2
