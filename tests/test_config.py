from gravcore.config import SimSettings
from gravcore.constants import DEFAULT_DT, MAX_STEPS_PER_FRAME, SOFTENING_DISTANCE


def test_defaults():
    s = SimSettings()
    assert s.dt == DEFAULT_DT
    assert s.softening == SOFTENING_DISTANCE
    assert s.trails_enabled is True
    assert s.max_trail_length == 2000
    assert s.collision_radius_multiplier == 50.0


def test_values_are_clamped():
    s = SimSettings(dt=0, steps_per_frame=500, max_trail_length=0,
                    collision_radius_multiplier=-3, ellipse_samples=1, ghost_max_steps=-5)
    assert s.dt > 0
    assert s.steps_per_frame == MAX_STEPS_PER_FRAME
    assert s.max_trail_length == 1
    assert s.collision_radius_multiplier == 0.01
    assert s.ellipse_samples == 3
    assert s.ghost_max_steps == 0


def test_steps_per_frame_floor():
    assert SimSettings(steps_per_frame=0).steps_per_frame == 1
