#!/usr/bin/env python3
"""
Gravity Sandbox application entry point and UI/renderer coordination.

What this module does
- Starts two event loops: a Pygame rendering thread (viewport) and the Dear PyGui UI
  (running on the main thread).
- Shares one gravcore SimulationController between them; it owns the World and all
  host state, and every access is guarded by its re-entrant lock.
- Lets the user preview a new planet around the selected body (analytic ellipse while
  paused, forward-integrated ghost path while running) and commit it.

Threading model
- PygameRenderer runs in a background thread and performs: input handling (for the viewport),
  stepping the simulation, and drawing. It snapshots shared state under the lock.
- The UI class runs in the main thread via Dear PyGui. It refreshes its readouts on a
  periodic frame callback and invokes SimulationController methods as needed.

Units and conventions
- SI units throughout: meters [m], kilograms [kg], seconds [s]. Camera stores meters-per-pixel.
- Colors are RGB tuples in 0..255.

Running
1) Install dependencies: `pip install -e .`
2) Run this module: `python gravity_sandbox.py [--template NAME] [--log-level DEBUG]`
"""

import argparse
import logging
import math
import threading
from dataclasses import dataclass
from typing import List, Optional, Sequence

# GUI and Rendering libs
import pygame
from pygame import gfxdraw
import dearpygui.dearpygui as dpg

from gravcore.camera import Camera2D
from gravcore.constants import (
    BACKGROUND_COLOR,
    MAX_STEPS_PER_FRAME,
    PERIOD_SLIDER_STEPS,
    PREVIEW_COLOR,
    SAFE_COORD_LIMIT,
    SELECTION_COLOR,
    VIEW_HEIGHT,
    VIEW_WIDTH,
)
from gravcore.controller import SimulationController
from gravcore.data_models import CollisionEvent
from gravcore.presets_loader import (
    BUILTIN_TEMPLATES,
    SeedTemplate,
    list_templates as list_json_templates,
    load_template as load_json_template,
)
from gravcore.utils import log_slider, log_slider_position

logger = logging.getLogger("gravity_sandbox")

FLASH_MAX_AGE = 30  # frames
DASH_PIXELS = 8

# ============================================================
# Collision flash effects
# ============================================================


@dataclass
class CollisionFlash:
    """Fading ring drawn where a merge happened, sized by the energy it dissipated."""
    position: Sequence[float]
    energy: float
    age: int = 0

    @property
    def log_energy(self) -> float:
        return math.log10(max(self.energy, 1.0))

    @property
    def size(self) -> float:
        return min(50.0, 5.0 + 1.5 * self.log_energy)

    @property
    def alpha(self) -> float:
        peak = min(0.8, max(0.1, 0.1 + (self.log_energy - 25.0) * 0.05))
        return peak * (1.0 - self.age / FLASH_MAX_AGE)

    @property
    def expired(self) -> bool:
        return self.age >= FLASH_MAX_AGE

    @classmethod
    def from_event(cls, event: CollisionEvent) -> "CollisionFlash":
        return cls(position=event.position, energy=event.energy_lost)


# ============================================================
# Pygame Renderer Thread
# ============================================================

class PygameRenderer(threading.Thread):
    """
    Pygame loop: steps the simulation, draws trails, bodies, the preview path and
    collision flashes. Handles click-to-select, camera panning and zoom.
    """
    def __init__(self, sim: SimulationController):
        super().__init__(daemon=True)
        self.sim = sim
        self.camera = Camera2D(center=(0.0, 0.0))
        self.surface = None
        self.clock = None
        self.dragging_background = False
        self.drag_start_screen = (0, 0)
        self.pan_speed_keys = 600  # pixels per second
        self.flashes: List[CollisionFlash] = []
        self.running = True

    def auto_frame_camera(self):
        """Adjust camera to fit all bodies into view with margin."""
        with self.sim.lock:
            positions = [b.position for b in self.sim.world.bodies]
        self.camera.fit(positions)

    def run(self):
        pygame.init()
        pygame.display.set_caption("Gravity Sandbox - Viewport")
        self.surface = pygame.display.set_mode((VIEW_WIDTH, VIEW_HEIGHT), pygame.RESIZABLE)
        self.camera.set_viewport_size(VIEW_WIDTH, VIEW_HEIGHT)
        self.clock = pygame.time.Clock()
        self.auto_frame_camera()

        while self.running and self.sim.running:
            real_dt = self.clock.tick(60) / 1000.0

            self.handle_events(real_dt)

            for event in self.sim.step_frame():
                self.flashes.append(CollisionFlash.from_event(event))

            with self.sim.lock:
                self.camera.locked = self.sim.view_locked
                selected = self.sim.get_selected_body()
                if selected is not None:
                    self.camera.follow(selected.position)

            self.draw()

        pygame.quit()

    def handle_events(self, real_dt):
        keys = pygame.key.get_pressed()
        if keys[pygame.K_LEFT]:
            self.camera.pan_pixels(self.pan_speed_keys * real_dt, 0)
        if keys[pygame.K_RIGHT]:
            self.camera.pan_pixels(-self.pan_speed_keys * real_dt, 0)
        if keys[pygame.K_UP]:
            self.camera.pan_pixels(0, self.pan_speed_keys * real_dt)
        if keys[pygame.K_DOWN]:
            self.camera.pan_pixels(0, -self.pan_speed_keys * real_dt)

        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.sim.running = False
                self.running = False

            elif event.type == pygame.VIDEORESIZE:
                self.surface = pygame.display.set_mode((event.w, event.h), pygame.RESIZABLE)
                self.camera.set_viewport_size(event.w, event.h)

            elif event.type == pygame.KEYDOWN and event.key == pygame.K_SPACE:
                self.sim.toggle_play()

            elif event.type == pygame.MOUSEWHEEL:
                factor = 1.1 if event.y > 0 else 1.0 / 1.1
                self.camera.zoom(factor, pygame.mouse.get_pos())

            elif event.type == pygame.MOUSEBUTTONDOWN:
                mouse = pygame.mouse.get_pos()
                if event.button == 1:
                    world = self.camera.screen_to_world(mouse)
                    idx = self.sim.select_body_at(world, pick_radius_m=self.camera.mpp * 10)
                    if idx is None:
                        self.dragging_background = True
                        self.drag_start_screen = mouse
                elif event.button in (2, 3):
                    self.dragging_background = True
                    self.drag_start_screen = mouse

            elif event.type == pygame.MOUSEBUTTONUP:
                if event.button in (1, 2, 3):
                    self.dragging_background = False

            elif event.type == pygame.MOUSEMOTION and self.dragging_background:
                mouse = pygame.mouse.get_pos()
                # Panning is ignored while the view follows the selected body
                if not self.camera.locked:
                    dx = mouse[0] - self.drag_start_screen[0]
                    dy = mouse[1] - self.drag_start_screen[1]
                    self.camera.pan_pixels(dx, dy)
                self.drag_start_screen = mouse

    def draw_trails(self, surf, bodies):
        for b in bodies:
            if len(b.trail) < 2:
                continue
            pts = [p for p in (_safe_point(self.camera.world_to_screen(t)) for t in b.trail) if p]
            if len(pts) > 1:
                pygame.draw.aalines(surf, b.color, False, pts)

    def draw_preview(self, surf, preview):
        if preview is None:
            return
        pts = [_safe_point(self.camera.world_to_screen(p)) for p in preview.path]
        draw_dashed_path(surf, PREVIEW_COLOR, pts)
        pos = _safe_point(self.camera.world_to_screen(preview.body.position))
        if pos:
            r = max(2, int(preview.body.display_size))
            gfxdraw.aacircle(surf, pos[0], pos[1], r, preview.body.color)

    def draw_flashes(self, surf):
        alive = []
        for flash in self.flashes:
            pos = _safe_point(self.camera.world_to_screen(flash.position))
            if pos:
                r = max(1, int(flash.size * (1.0 + flash.age / FLASH_MAX_AGE)))
                overlay = pygame.Surface((2 * r + 2, 2 * r + 2), pygame.SRCALPHA)
                a = int(255 * flash.alpha)
                pygame.draw.circle(overlay, (255, 200, 120, a), (r + 1, r + 1), r)
                surf.blit(overlay, (pos[0] - r - 1, pos[1] - r - 1))
            flash.age += 1
            if not flash.expired:
                alive.append(flash)
        self.flashes = alive

    def draw(self):
        surf = self.surface
        surf.fill(BACKGROUND_COLOR)

        # Snapshot shared state for consistency during draw
        with self.sim.lock:
            bodies = [b.clone() for b in self.sim.world.bodies]
            selected_idx = self.sim.selected_index
            preview = self.sim.preview
            trails = self.sim.world.settings.trails_enabled
            playing = self.sim.playing
            days = self.sim.elapsed_days()
            steps = self.sim.world.settings.steps_per_frame
            locked = self.sim.view_locked

        if trails:
            self.draw_trails(surf, bodies)
        self.draw_preview(surf, preview)

        for i, b in enumerate(bodies):
            pos = _safe_point(self.camera.world_to_screen(b.position))
            if not pos:
                continue
            vis_r = max(2, int(b.display_size))
            gfxdraw.filled_circle(surf, pos[0], pos[1], vis_r, b.color)
            gfxdraw.aacircle(surf, pos[0], pos[1], vis_r, b.color)
            if i == selected_idx:
                gfxdraw.aacircle(surf, pos[0], pos[1], vis_r + 5, SELECTION_COLOR)

        self.draw_flashes(surf)

        draw_text(surf, "Click: select | Drag: pan | Wheel: zoom | Arrows: pan | Space: Pause/Play",
                  10, 10, (200, 200, 200))
        state = "Playing" if playing else "Paused"
        lock = "  [View locked]" if locked else ""
        draw_text(surf, f"Day {days:,.1f}  Speed: {steps} steps/frame  [{state}]{lock}",
                  10, 30, (200, 200, 200))

        pygame.display.flip()


_cached_font = None


def draw_text(surface, text, x, y, color):
    global _cached_font
    if not pygame.font.get_init():
        pygame.font.init()
    if _cached_font is None:
        _cached_font = pygame.font.SysFont("consolas", 16)
    img = _cached_font.render(text, True, color)
    surface.blit(img, (x, y))


def _safe_point(pt):
    x, y = int(pt[0]), int(pt[1])
    if -SAFE_COORD_LIMIT <= x <= SAFE_COORD_LIMIT and -SAFE_COORD_LIMIT <= y <= SAFE_COORD_LIMIT:
        return (x, y)
    return None


def draw_dashed_path(surface, color, pts):
    """Draw a polyline as alternating dashes; ``None`` points break the line."""
    drawing = True
    carried = 0.0
    for a, b in zip(pts, pts[1:]):
        if a is None or b is None:
            continue
        seg = math.hypot(b[0] - a[0], b[1] - a[1])
        if seg == 0:
            continue
        t = 0.0
        while t < seg:
            run = min(DASH_PIXELS - carried, seg - t)
            if drawing:
                start = (a[0] + (b[0] - a[0]) * t / seg, a[1] + (b[1] - a[1]) * t / seg)
                end_t = t + run
                end = (a[0] + (b[0] - a[0]) * end_t / seg, a[1] + (b[1] - a[1]) * end_t / seg)
                pygame.draw.aaline(surface, color, start, end)
            t += run
            carried += run
            if carried >= DASH_PIXELS:
                carried = 0.0
                drawing = not drawing


# ============================================================
# Dear PyGui UI
# ============================================================

class UI:
    """
    Dear PyGui interface: body table, new-planet preview inputs, simulation controls.
    """
    def __init__(self, sim: SimulationController, renderer: PygameRenderer):
        self.sim = sim
        self.renderer = renderer

        self.body_list_id = None
        self.status_msg_id = None
        self.period_label_id = None
        self.time_label_id = None
        self.energy_label_id = None
        self.preview_label_id = None
        self._template_map = {}
        self._build_ui()
        self._schedule_sync()

    def _schedule_sync(self):
        """Reschedule the periodic sync callback using frame callbacks (approx ~10Hz)."""
        dpg.set_frame_callback(dpg.get_frame_count() + 6, self._sync_ui_with_sim)

    # -----------------------
    # UI Construction
    # -----------------------

    def _template_items(self) -> List[str]:
        self._template_map = {name: tpl for name, tpl in BUILTIN_TEMPLATES.items()}
        for fn, display in list_json_templates():
            self._template_map[display] = fn
        return list(self._template_map.keys())

    def _build_ui(self):
        dpg.create_context()
        dpg.create_viewport(title='Gravity Sandbox - Controls', width=520, height=760)

        with dpg.window(label="Controls", width=500, height=740, pos=(10, 10), tag="main_window"):
            with dpg.group(horizontal=True):
                dpg.add_text("Template:")
                items = self._template_items()
                with self.sim.lock:
                    current = self.sim.template.name
                dpg.add_combo(items, default_value=current if current in items else items[0],
                              width=240, tag="template_combo")
                dpg.add_button(label="Load", callback=lambda: self.load_template(dpg.get_value("template_combo")))
                dpg.add_button(label="Auto-fit Camera", callback=self.renderer.auto_frame_camera)

            dpg.add_separator()

            self.time_label_id = dpg.add_text("Day 0.0")
            self.energy_label_id = dpg.add_text("Total energy: ")
            dpg.add_text("Bodies")
            self.body_list_id = dpg.add_listbox(items=[], width=480, num_items=9, callback=self._on_select_body)

            dpg.add_separator()

            dpg.add_text("New Planet (orbits the selected body)")
            with dpg.group(horizontal=True):
                dpg.add_slider_float(label="Mass", min_value=0.1, max_value=100.0, default_value=1.0,
                                     width=220, format="%.1f", tag="mass_slider",
                                     callback=lambda s, a, u: self.sim.set_preview_params(mass=a))
                dpg.add_radio_button(["Earths", "Suns", "Moons"], default_value="Earths", horizontal=True,
                                     callback=lambda s, a, u: self.sim.set_preview_params(unit=a))
            with dpg.group(horizontal=True):
                dpg.add_slider_int(label="Period", min_value=0, max_value=PERIOD_SLIDER_STEPS,
                                   default_value=int(round(log_slider_position(1.0))), width=220,
                                   format="", tag="period_slider", callback=self._on_period)
                self.period_label_id = dpg.add_text("1.00 years")
            dpg.add_slider_float(label="Eccentricity", min_value=0.0, max_value=0.95, default_value=0.0,
                                 width=220, format="%.2f", tag="ecc_slider",
                                 callback=lambda s, a, u: self.sim.set_preview_params(eccentricity=a))
            self.preview_label_id = dpg.add_text("")
            dpg.add_button(label="Add Planet", callback=self._on_add_planet)

            dpg.add_separator()

            dpg.add_text("Simulation Controls")
            with dpg.group(horizontal=True):
                dpg.add_button(label="Pause/Play", callback=self._toggle_play, tag="play_button")
                dpg.add_button(label="Reset", callback=lambda: self.load_template(None))
                dpg.add_checkbox(label="Trails", default_value=True, callback=self._toggle_trails,
                                 tag="trails_checkbox")
                dpg.add_button(label="Lock View", callback=self._toggle_view_lock, tag="lock_button")
            dpg.add_slider_int(label="Speed (steps/frame)", min_value=1, max_value=MAX_STEPS_PER_FRAME,
                               default_value=self.sim.world.settings.steps_per_frame, width=220,
                               tag="speed_slider",
                               callback=lambda s, a, u: self.sim.set_steps_per_frame(a))
            dpg.add_slider_float(label="Collision radius x", min_value=1.0, max_value=100.0,
                                 default_value=self.sim.world.settings.collision_radius_multiplier,
                                 width=220, format="%.0f", tag="radius_slider",
                                 callback=lambda s, a, u: self.sim.set_collision_radius_multiplier(a))
            self.status_msg_id = dpg.add_text("")

        dpg.setup_dearpygui()
        dpg.show_viewport()
        dpg.set_primary_window("main_window", True)

    # -----------------------
    # UI Callbacks
    # -----------------------

    def _set_status(self, msg: str, color=(180, 220, 180)):
        dpg.set_value(self.status_msg_id, msg)
        dpg.configure_item(self.status_msg_id, color=color)

    def _set_error(self, msg: str):
        self._set_status(msg, color=(255, 120, 120))

    def _on_select_body(self, sender, app_data, user_data):
        items = dpg.get_item_configuration(self.body_list_id)["items"]
        if app_data in items:
            self.sim.select(items.index(app_data))

    def _on_period(self, sender, app_data, user_data=None):
        years = log_slider(app_data)
        dpg.set_value(self.period_label_id, f"{years:.2f} years")
        self.sim.set_preview_params(period_years=years)

    def _on_add_planet(self):
        body = self.sim.add_planet()
        if body is None:
            self._set_error(f"Cannot add planet: {self.sim.preview_error or 'no body selected'}")
            return
        self._set_status(f"Added {body.name}.")

    def _toggle_play(self):
        playing = self.sim.toggle_play()
        self._set_status(f"Simulation {'Playing' if playing else 'Paused'}.")

    def _toggle_trails(self, sender, value, user_data=None):
        self.sim.set_trails_enabled(bool(value))
        self._set_status(f"Trails {'ON' if value else 'OFF'}.")

    def _toggle_view_lock(self):
        locked = self.sim.toggle_view_lock()
        dpg.configure_item("lock_button", label="Unlock View" if locked else "Lock View")

    def load_template(self, name: Optional[str]):
        """Reset the world, optionally switching to the named template first."""
        template: Optional[SeedTemplate] = None
        if name is not None:
            choice = self._template_map.get(name)
            if isinstance(choice, SeedTemplate):
                template = choice
            elif choice is not None:
                template = load_json_template(choice)
            if template is None:
                self._set_error(f"Failed to load template '{name}'.")
                return
        try:
            self.sim.reset(template)
        except ValueError as e:
            logger.warning(f"Template '{name}' could not be built: {e}")
            self._set_error(f"Failed to load template '{name}': {e}")
            return
        with self.sim.lock:
            settings = self.sim.world.settings
            dpg.set_value("trails_checkbox", settings.trails_enabled)
            dpg.set_value("speed_slider", settings.steps_per_frame)
            dpg.set_value("radius_slider", settings.collision_radius_multiplier)
            label = self.sim.template.name
        self.renderer.auto_frame_camera()
        self._set_status(f"Loaded template: {label}")

    def _sync_ui_with_sim(self):
        """Periodic UI update: elapsed time, body table, preview status and collision messages."""
        rows = self.sim.body_rows()
        items = [f"{name:<13} {mass:>12.3f} M_E {speed:>8.2f} km/s" for name, mass, speed, _ in rows]
        dpg.configure_item(self.body_list_id, items=items)
        for item, row in zip(items, rows):
            if row[3]:
                dpg.set_value(self.body_list_id, item)

        dpg.set_value(self.time_label_id, f"Day {self.sim.elapsed_days():,.1f}")
        dpg.set_value(self.energy_label_id, f"Total energy: {self.sim.system_energy():.4e} J")

        with self.sim.lock:
            preview = self.sim.preview
            error = self.sim.preview_error
            msg = self.sim.last_collision_msg
            self.sim.last_collision_msg = None
        if preview is not None:
            e = preview.elements
            dpg.set_value(self.preview_label_id,
                          f"a = {e.semi_major_axis:.3e} m, r_p = {e.periapsis:.3e} m ({preview.mode})")
        else:
            dpg.set_value(self.preview_label_id, f"No preview: {error}" if error else "No preview")
        if msg:
            self._set_status(msg)

        self._schedule_sync()


# ============================================================
# Application Entry
# ============================================================

def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Interactive 2D N-body gravity sandbox.")
    parser.add_argument("--template", default=None,
                        help="Built-in template name or a JSON file in templates/")
    parser.add_argument("--log-level", default="INFO",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    return parser.parse_args(argv)


def resolve_template(name: Optional[str]) -> Optional[SeedTemplate]:
    if name is None:
        return None
    if name in BUILTIN_TEMPLATES:
        return BUILTIN_TEMPLATES[name]
    template = load_json_template(name)
    if template is None:
        logger.warning(f"Unknown or unusable template '{name}', using the default")
    return template


def main(argv=None):
    args = parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level),
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    sim = SimulationController(resolve_template(args.template))
    renderer = PygameRenderer(sim)

    # Start Pygame renderer thread
    renderer.start()

    ui = UI(sim, renderer)

    # Keyboard shortcut in UI window to toggle play/pause (Space)
    with dpg.handler_registry():
        def key_down(sender, app_data):
            if app_data == dpg.mvKey_Spacebar:
                ui._toggle_play()
        dpg.add_key_press_handler(callback=key_down)

    # Run Dear PyGui event loop
    try:
        dpg.start_dearpygui()
    finally:
        sim.running = False
        renderer.running = False
        renderer.join(timeout=2.0)
        dpg.destroy_context()


if __name__ == "__main__":
    main()
