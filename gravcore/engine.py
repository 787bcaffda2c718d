#!/usr/bin/env python3
"""
Engine entry points used by the host.

The World is passed explicitly to every call and is mutated only by ``step`` (the
integrator followed by the collision resolver), by ``commit_preview`` and by the
setting helpers. Preview computation clones whatever it needs and never writes to
the World.

Typical driver loop, once per animation tick::

    result = engine.step(world, sub_steps=world.settings.steps_per_frame)
    selected = result.track_index(selected)
    for event in result.events:
        effects.spawn(event)
"""
import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Union

from .collisions import CollisionReport, handle_collisions
from .config import SimSettings
from .constants import DAY
from .data_models import Body, CollisionEvent, PreviewResult, World
from .orbits import derive_orbit, ellipse_path, ghost_path, ghost_step_count, orbital_frame, place_trial_body
from .physics import NBodyPhysics
from .presets_loader import SOLAR_SYSTEM, SeedBody, SeedTemplate, build_bodies

logger = logging.getLogger(__name__)


@dataclass
class StepResult:
    """Collision events and per-substep resolution reports from one ``step`` call."""
    events: List[CollisionEvent] = field(default_factory=list)
    reports: List[CollisionReport] = field(default_factory=list)

    @property
    def removed_any(self) -> bool:
        return any(r.removed_indices for r in self.reports)

    def track_index(self, index: Optional[int]) -> Optional[int]:
        """
        Follow a host-held body index through every substep of this call.

        A body that was consumed by a merge resets the index to 0.
        """
        if index is None:
            return None
        for report in self.reports:
            mapped = report.remap_index(index)
            if mapped is None:
                return 0
            index = mapped
        return index


def _physics_for(world: World, physics: Optional[NBodyPhysics]) -> NBodyPhysics:
    return physics or NBodyPhysics(world.settings.softening)


def initialize_world(seed: Union[SeedTemplate, Sequence[SeedBody], None] = None,
                     settings: Optional[SimSettings] = None) -> World:
    """
    Build a canonical World from a seed template or an ordered list of seed bodies.

    Defaults to the Sun and the eight major planets. A template's own ``dt`` and
    radius multiplier override the corresponding ``settings`` fields.
    """
    if seed is None:
        seed = SOLAR_SYSTEM
    if isinstance(seed, SeedTemplate):
        settings = seed.settings(settings)
        seed_bodies = seed.bodies
        label = seed.name
    else:
        settings = settings or SimSettings()
        seed_bodies = list(seed)
        label = "custom seed"

    world = World(bodies=build_bodies(seed_bodies, settings), settings=settings)
    logger.info(f"Initialized world from {label} with {len(world.bodies)} bodies "
                f"(dt={settings.dt:g}s)")
    return world


def step(world: World, dt: Optional[float] = None, sub_steps: Optional[int] = None,
         physics: Optional[NBodyPhysics] = None) -> StepResult:
    """
    Advance the canonical bodies by ``sub_steps`` leapfrog steps of ``dt`` seconds,
    resolving collisions after each one.
    """
    settings = world.settings
    dt = settings.dt if dt is None else float(dt)
    sub_steps = 1 if sub_steps is None else int(sub_steps)
    physics = _physics_for(world, physics)

    result = StepResult()
    for _ in range(sub_steps):
        physics.leapfrog_step(world.bodies, dt, trails_enabled=settings.trails_enabled)
        world.elapsed_time += dt
        report = handle_collisions(world.bodies)
        if report.events:
            result.events.extend(report.events)
            result.reports.append(report)

    logger.debug(f"Stepped {sub_steps}x{dt:g}s, t={world.elapsed_time:.0f}s, "
                 f"{len(world.bodies)} bodies, {len(result.events)} merges")
    return result


def compute_preview(world: World, center_index: int, trial_mass: float,
                    trial_period_years: float, trial_eccentricity: float,
                    is_paused: bool, color=(255, 255, 255),
                    physics: Optional[NBodyPhysics] = None) -> PreviewResult:
    """
    Candidate body orbiting ``world.bodies[center_index]`` and its projected path.

    Paused: analytic Kepler ellipse. Running: forward-integrated ghost path that
    includes the pull of every canonical body.

    Raises:
        IndexError: if ``center_index`` does not name a body.
        DegenerateOrbitError: for parameters that do not give a bound ellipse.
    """
    if not 0 <= center_index < len(world.bodies):
        raise IndexError(f"No body at index {center_index} (world has {len(world.bodies)})")

    settings = world.settings
    center = world.bodies[center_index]
    anchor = world.bodies[0]

    elements = derive_orbit(center.mass, trial_mass, trial_period_years, trial_eccentricity)
    direction, perpendicular = orbital_frame(anchor.position, center.position)
    trial = place_trial_body(center, elements, direction, perpendicular, trial_mass, color=color)
    trial.set_trail_length(settings.max_trail_length)

    if is_paused:
        path = ellipse_path(center.position, elements, direction, perpendicular,
                            samples=settings.ellipse_samples)
        mode = "analytic"
    else:
        steps = ghost_step_count(elements.period, settings.dt, settings.ghost_max_steps)
        path = ghost_path(world.bodies, trial, settings.dt, steps,
                          physics=_physics_for(world, physics))
        mode = "ghost"

    return PreviewResult(body=trial, path=path, elements=elements, mode=mode)


def advance_preview(world: World, preview: PreviewResult, dt: Optional[float] = None,
                    physics: Optional[NBodyPhysics] = None) -> None:
    """
    Move the preview body one step under the pull of the canonical bodies.

    The canonical bodies act only as sources: they do not feel the preview body and
    the world clock does not advance.
    """
    dt = world.settings.dt if dt is None else float(dt)
    _physics_for(world, physics).leapfrog_step(
        [preview.body], dt, sources=world.bodies, trails_enabled=world.settings.trails_enabled)


def commit_preview(world: World, preview: PreviewResult, name: Optional[str] = None) -> Body:
    """Append a fresh body with the preview body's state to the canonical set."""
    src = preview.body
    body = world.new_body(
        name=name or src.name,
        mass=src.mass,
        position=src.position,
        velocity=src.velocity,
        color=src.color,
    )
    world.bodies.append(body)
    logger.info(f"Committed {body.name} ({body.mass:.3e} kg) as body #{len(world.bodies) - 1}")
    return body


def set_trails_enabled(world: World, enabled: bool) -> None:
    """Toggle trail recording; disabling collapses every trail to its current point."""
    world.settings.trails_enabled = bool(enabled)
    if not enabled:
        for body in world.bodies:
            body.collapse_trail()


def set_trail_length(world: World, n: int) -> None:
    world.settings.max_trail_length = max(1, int(n))
    for body in world.bodies:
        body.set_trail_length(world.settings.max_trail_length)


def set_collision_radius_multiplier(world: World, multiplier: float) -> None:
    """Rescale every collision radius; new and merged bodies follow the same value."""
    world.settings.collision_radius_multiplier = max(0.01, float(multiplier))
    for body in world.bodies:
        body.radius_multiplier = world.settings.collision_radius_multiplier


def elapsed_days(world: World) -> float:
    return world.elapsed_time / DAY
