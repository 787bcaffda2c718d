#!/usr/bin/env python3
"""
Host-side simulation controller.

Owns the canonical World plus everything the engine deliberately does not track:
run/pause, the selected body, the view lock, preview inputs and the current
preview, and the naming/colour of committed planets.

Threading
- The pygame viewport thread and the Dear PyGui main thread both talk to this object.
  Every method takes ``lock`` (re-entrant) around its critical section, so the engine
  only ever sees sequential calls on the live World.
- The one exception is the running-mode preview rebuilt by ``set_preview_params``: its
  ghost path is integrated on a private snapshot outside the lock.
"""
import logging
import threading
from collections import deque
from dataclasses import replace
from typing import Deque, List, Optional, Tuple

from . import engine
from .constants import M_EARTH, MAX_STEPS_PER_FRAME, PLANET_COLORS
from .data_models import Body, CollisionEvent, PreviewResult, World
from .diagnostics import total_energy
from .errors import DegenerateOrbitError, InvalidBodyError
from .physics import NBodyPhysics
from .presets_loader import SOLAR_SYSTEM, SeedTemplate
from .utils import mass_to_si
from .vector_utils import clamp

logger = logging.getLogger(__name__)

NAME_DISPLAY_LIMIT = 12


def short_name(name: str) -> str:
    if len(name) > NAME_DISPLAY_LIMIT:
        return name[:10] + "..."
    return name


class SimulationController:
    """
    Shared state between the viewport thread and the controls UI.
    Includes thread-safe operations guarded by a lock.
    """

    def __init__(self, template: Optional[SeedTemplate] = None):
        self.lock = threading.RLock()
        self.running = True  # app running
        self.playing = True  # simulation running
        self.template = template or SOLAR_SYSTEM
        self.world = engine.initialize_world(self.template)
        self.physics = NBodyPhysics(self.world.settings.softening)
        self.selected_index = 0
        self.view_locked = False

        # Preview inputs
        self.preview_mass = 1.0
        self.preview_mass_unit = "Earths"
        self.preview_period_years = 1.0
        self.preview_eccentricity = 0.0
        self.preview: Optional[PreviewResult] = None
        self.preview_error: Optional[str] = None

        self.planets_added = 0
        self.recent_events: Deque[CollisionEvent] = deque(maxlen=64)
        self.last_collision_msg: Optional[str] = None

        self.update_preview()

    # -----------------------
    # World lifecycle
    # -----------------------

    def reset(self, template: Optional[SeedTemplate] = None) -> None:
        """
        Rebuild the world from ``template`` (or the current one).

        Raises ValueError (including DegenerateOrbitError) when the template's bodies
        cannot be built; the current template and world are then left untouched.
        """
        template = template or self.template
        world = engine.initialize_world(template)
        with self.lock:
            self.template = template
            self.world = world
            self.physics = NBodyPhysics(world.settings.softening)
            self.playing = True
            self.selected_index = 0
            self.planets_added = 0
            self.recent_events.clear()
            self.last_collision_msg = None
            self.update_preview()

    def step_frame(self) -> List[CollisionEvent]:
        """
        Run one animation tick: ``steps_per_frame`` substeps, each followed by a
        preview advance. Returns the collision events of this tick.
        """
        with self.lock:
            if not self.playing:
                return []
            events: List[CollisionEvent] = []
            world = self.world
            for _ in range(world.settings.steps_per_frame):
                selected = self.get_selected_body()
                result = engine.step(world, sub_steps=1, physics=self.physics)
                if self.preview is not None:
                    engine.advance_preview(world, self.preview, physics=self.physics)
                if not result.events:
                    continue
                events.extend(result.events)
                self.recent_events.extend(result.events)
                last = result.events[-1]
                self.last_collision_msg = f"Merged {last.names[0]} + {last.names[1]} -> {last.merged_name}"
                self.selected_index = result.track_index(self.selected_index)
                if selected is not None and not any(b is selected for b in world.bodies):
                    self.update_preview()
            return events

    # -----------------------
    # Run state and settings
    # -----------------------

    def set_playing(self, playing: bool) -> None:
        with self.lock:
            self.playing = bool(playing)
            self.update_preview()

    def toggle_play(self) -> bool:
        with self.lock:
            self.set_playing(not self.playing)
            return self.playing

    def set_trails_enabled(self, enabled: bool) -> None:
        with self.lock:
            engine.set_trails_enabled(self.world, enabled)

    def set_trail_length(self, n: int) -> None:
        with self.lock:
            engine.set_trail_length(self.world, n)

    def set_steps_per_frame(self, n: int) -> None:
        with self.lock:
            self.world.settings.steps_per_frame = int(clamp(int(n), 1, MAX_STEPS_PER_FRAME))

    def set_collision_radius_multiplier(self, value: float) -> None:
        with self.lock:
            engine.set_collision_radius_multiplier(self.world, value)
            self.update_preview()

    # -----------------------
    # Selection
    # -----------------------

    def select(self, index: int) -> bool:
        """Select a body by index; returns False for an invalid index."""
        with self.lock:
            if not 0 <= index < len(self.world.bodies):
                return False
            if index != self.selected_index:
                self.selected_index = index
                self.update_preview()
            return True

    def select_body_at(self, world_pos: Tuple[float, float], pick_radius_m: float) -> Optional[int]:
        """Select the nearest body within ``pick_radius_m`` of ``world_pos``."""
        with self.lock:
            idx = None
            min_d = float("inf")
            for i, b in enumerate(self.world.bodies):
                d = b.position.sub(world_pos).norm()
                if d < pick_radius_m and d < min_d:
                    min_d = d
                    idx = i
            if idx is not None:
                self.select(idx)
            return idx

    def toggle_view_lock(self) -> bool:
        with self.lock:
            self.view_locked = not self.view_locked
            return self.view_locked

    def get_selected_body(self) -> Optional[Body]:
        with self.lock:
            if 0 <= self.selected_index < len(self.world.bodies):
                return self.world.bodies[self.selected_index]
            return None

    # -----------------------
    # Preview
    # -----------------------

    @property
    def preview_mass_si(self) -> float:
        return mass_to_si(self.preview_mass, self.preview_mass_unit)

    @property
    def next_color(self) -> Tuple[int, int, int]:
        return PLANET_COLORS[self.planets_added % len(PLANET_COLORS)]

    def set_preview_params(self, mass: Optional[float] = None, unit: Optional[str] = None,
                           period_years: Optional[float] = None,
                           eccentricity: Optional[float] = None) -> None:
        """
        Update the preview inputs and rebuild the preview.

        While running, the ghost path is integrated on a snapshot of the world without
        holding ``lock``, so slider drags do not stall the viewport. The finished preview
        is then advanced through the substeps that ran in the meantime.
        """
        with self.lock:
            if mass is not None:
                self.preview_mass = float(mass)
            if unit is not None:
                self.preview_mass_unit = unit
            if period_years is not None:
                self.preview_period_years = float(period_years)
            if eccentricity is not None:
                self.preview_eccentricity = float(eccentricity)
            if not self.playing or self.get_selected_body() is None:
                self.update_preview()
                return
            world = self.world
            index = self.selected_index
            inputs = self._preview_inputs()
            snapshot = World(
                bodies=[b.clone() for b in world.bodies],
                elapsed_time=world.elapsed_time,
                settings=replace(world.settings),
            )

        preview, error = self._build_preview(snapshot, index, inputs, is_paused=False,
                                             physics=NBodyPhysics(snapshot.settings.softening))

        with self.lock:
            if (self.world is not world or not self.playing or self.selected_index != index
                    or len(world.bodies) != len(snapshot.bodies) or self._preview_inputs() != inputs):
                # Something changed while integrating; rebuild against the live world
                self.update_preview()
                return
            if preview is not None:
                lag = int(round((world.elapsed_time - snapshot.elapsed_time) / world.settings.dt))
                for _ in range(max(0, lag)):
                    engine.advance_preview(world, preview, physics=self.physics)
            self.preview = preview
            self.preview_error = error

    def _preview_inputs(self) -> Tuple[float, float, float, Tuple[int, int, int]]:
        return (self.preview_mass_si, self.preview_period_years, self.preview_eccentricity, self.next_color)

    def _build_preview(self, world: World, index: int, inputs, is_paused: bool,
                       physics: NBodyPhysics) -> Tuple[Optional[PreviewResult], Optional[str]]:
        mass, period_years, eccentricity, color = inputs
        try:
            preview = engine.compute_preview(
                world,
                index,
                mass,
                period_years,
                eccentricity,
                is_paused=is_paused,
                color=color,
                physics=physics,
            )
        except (DegenerateOrbitError, InvalidBodyError) as e:
            logger.warning(f"Preview unavailable: {e}")
            return None, str(e)
        return preview, None

    def update_preview(self) -> Optional[PreviewResult]:
        """Recompute the preview from the current inputs; None when it cannot be built."""
        with self.lock:
            self.preview = None
            self.preview_error = None
            if self.get_selected_body() is None:
                return None
            self.preview, self.preview_error = self._build_preview(
                self.world, self.selected_index, self._preview_inputs(),
                is_paused=not self.playing, physics=self.physics)
            return self.preview

    def add_planet(self) -> Optional[Body]:
        """Commit the current preview as ``Planet-N`` and start a fresh preview."""
        with self.lock:
            if self.preview is None:
                self.update_preview()
            if self.preview is None:
                return None
            body = engine.commit_preview(self.world, self.preview, name=f"Planet-{self.planets_added + 1}")
            self.planets_added += 1
            self.update_preview()
            return body

    # -----------------------
    # Readouts
    # -----------------------

    def elapsed_days(self) -> float:
        with self.lock:
            return engine.elapsed_days(self.world)

    def system_energy(self) -> float:
        with self.lock:
            return total_energy(self.world.bodies, self.world.settings.softening)

    def body_rows(self) -> List[Tuple[str, float, float, bool]]:
        """(name, mass in Earths, speed in km/s, selected) for the body table."""
        with self.lock:
            return [
                (short_name(b.name), b.mass / M_EARTH, b.velocity.norm() / 1000.0, i == self.selected_index)
                for i, b in enumerate(self.world.bodies)
            ]
