import random

import pytest

from gravcore.collisions import (
    CollisionReport,
    grown_name,
    handle_collisions,
    is_colliding,
    merge_bodies,
)
from gravcore.constants import M_EARTH, M_MOON, R_EARTH
from gravcore.data_models import Body
from gravcore.diagnostics import total_momentum
from gravcore.vector_utils import Vector2D


def test_name_ladder():
    assert grown_name("Earth") == "Giant Earth"
    assert grown_name("Giant Earth") == "Super Earth"
    assert grown_name("Super Earth") == "Super Earth"
    assert grown_name(grown_name(grown_name("Mars"))) == "Super Mars"


def test_contact_must_be_strictly_inside_radii():
    a = Body("A", M_EARTH, (0.0, 0.0), (0, 0), radius_multiplier=1.0)
    b = Body("B", M_EARTH, (2 * R_EARTH, 0.0), (0, 0), radius_multiplier=1.0)
    assert not is_colliding(a, b)
    b.position = (2 * R_EARTH - 1.0, 0.0)
    assert is_colliding(a, b)


def test_head_on_equal_mass_merge():
    v = 1.0e4
    a = Body("A", M_EARTH, (-1.0e3, 0.0), (v, 0.0))
    b = Body("B", M_EARTH, (1.0e3, 0.0), (-v, 0.0))
    merged, event = merge_bodies(a, b)
    assert merged.mass == pytest.approx(2 * M_EARTH)
    assert merged.velocity == Vector2D(0.0, 0.0)
    assert merged.position == Vector2D(0.0, 0.0)
    assert event.energy_lost == pytest.approx(M_EARTH * v * v)
    assert event.position == merged.position


def test_merge_conserves_momentum_and_mass():
    a = Body("A", 3.3e23, (1.0e9, 2.0e9), (1.2e4, -3.0e3), color=(1, 2, 3))
    b = Body("B", 5.9e24, (1.0e9 + 5.0e5, 2.0e9), (-2.0e3, 8.0e3), color=(4, 5, 6))
    before = total_momentum([a, b])
    merged, event = merge_bodies(a, b)
    after = merged.momentum
    assert after.x == pytest.approx(before.x, rel=1e-9)
    assert after.y == pytest.approx(before.y, rel=1e-9)
    assert merged.mass == a.mass + b.mass
    assert event.energy_lost >= 0.0


def test_merge_never_gains_kinetic_energy():
    rng = random.Random(20240611)
    for _ in range(2000):
        a = Body("A", 10 ** rng.uniform(20, 31), (0.0, 0.0),
                 (rng.uniform(-5e4, 5e4), rng.uniform(-5e4, 5e4)))
        b = Body("B", 10 ** rng.uniform(20, 31), (1.0, 0.0),
                 (rng.uniform(-5e4, 5e4), rng.uniform(-5e4, 5e4)))
        _, event = merge_bodies(a, b)
        scale = a.kinetic_energy + b.kinetic_energy
        assert event.energy_lost >= -1e-12 * scale


def test_heavier_body_names_the_merge():
    light = Body("Moon", M_MOON, (0.0, 0.0), (0, 0), color=(1, 1, 1))
    heavy = Body("Earth", M_EARTH, (1.0, 0.0), (0, 0), color=(2, 2, 2))
    merged, event = merge_bodies(light, heavy)
    assert merged.name == "Giant Earth"
    assert merged.color == (2, 2, 2)
    assert event.names == ("Moon", "Earth")
    assert event.merged_name == "Giant Earth"


def test_equal_masses_favour_first_body():
    a = Body("A", M_EARTH, (0.0, 0.0), (0, 0))
    b = Body("B", M_EARTH, (1.0, 0.0), (0, 0))
    assert merge_bodies(a, b)[0].name == "Giant A"


def test_merged_trail_starts_fresh():
    a = Body("A", M_EARTH, (0.0, 0.0), (0, 0))
    b = Body("B", M_EARTH, (2.0, 0.0), (0, 0))
    for _ in range(5):
        a.record_trail()
    merged, _ = merge_bodies(a, b)
    assert list(merged.trail) == [Vector2D(1.0, 0.0)]


def test_handle_collisions_rebuilds_list_in_place():
    a = Body("A", M_EARTH, (0.0, 0.0), (0, 0))
    b = Body("B", M_EARTH, (1.0e3, 0.0), (0, 0))
    c = Body("C", M_EARTH, (1.0e12, 0.0), (0, 0))
    bodies = [a, b, c]
    report = handle_collisions(bodies)
    assert [x.name for x in bodies] == ["C", "Giant A"]
    assert report.removed_indices == [0, 1]
    assert len(report.events) == 1
    assert report.merged[0] is bodies[1]
    assert report.remap_index(2) == 0
    assert report.remap_index(0) is None
    assert report.remap_index(1) is None


def test_merged_bodies_do_not_chain_in_one_pass():
    bodies = [Body(n, M_EARTH, (float(i), 0.0), (0, 0)) for i, n in enumerate("ABC")]
    report = handle_collisions(bodies)
    assert len(report.events) == 1
    assert [x.name for x in bodies] == ["C", "Giant A"]
    # The next pass picks up the leftover overlap
    report = handle_collisions(bodies)
    assert [x.name for x in bodies] == ["Super A"]
    assert bodies[0].mass == pytest.approx(3 * M_EARTH)


def test_no_collisions_leaves_list_alone():
    bodies = [Body("A", M_EARTH, (0.0, 0.0), (0, 0)), Body("B", M_EARTH, (1.0e12, 0.0), (0, 0))]
    before = list(bodies)
    report = handle_collisions(bodies)
    assert report.events == []
    assert report.removed_indices == []
    assert all(x is y for x, y in zip(bodies, before))
    assert handle_collisions([]).events == []


def test_remap_index_shifts_past_removed():
    report = CollisionReport(removed_indices=[1, 3])
    assert report.remap_index(0) == 0
    assert report.remap_index(2) == 1
    assert report.remap_index(5) == 3
