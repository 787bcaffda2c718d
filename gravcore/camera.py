#!/usr/bin/env python3
"""
Camera utilities for 2D world-to-screen transforms.
"""
from typing import Iterable, Optional, Sequence, Tuple

from .constants import (
    DEFAULT_METERS_PER_PIXEL,
    MAX_METERS_PER_PIXEL,
    MIN_METERS_PER_PIXEL,
    VIEW_HEIGHT,
    VIEW_WIDTH,
)
from .vector_utils import ZERO, Vector2D, as_vector, clamp


class Camera2D:
    """
    Maps world coordinates (meters) to screen pixels around a movable center.

    When ``locked`` is set the host calls ``follow`` every frame with the selected
    body's position so that body stays centred.
    """

    def __init__(self, center=(0.0, 0.0), meters_per_pixel=DEFAULT_METERS_PER_PIXEL):
        self.center = as_vector(center)
        self.mpp = meters_per_pixel
        self.viewport_size = (VIEW_WIDTH, VIEW_HEIGHT)
        self.locked = False

    def set_viewport_size(self, w: int, h: int) -> None:
        self.viewport_size = (w, h)

    @property
    def screen_center(self) -> Vector2D:
        return Vector2D(self.viewport_size[0] / 2, self.viewport_size[1] / 2)

    def world_to_screen(self, pos: Sequence[float]) -> Tuple[int, int]:
        d = as_vector(pos).sub(self.center)
        c = self.screen_center
        return (int(d.x / self.mpp + c.x), int(d.y / self.mpp + c.y))

    def screen_to_world(self, screen: Sequence[float]) -> Vector2D:
        return as_vector(screen).sub(self.screen_center).scale(self.mpp).add(self.center)

    def zoom(self, factor, pivot_screen: Optional[Tuple[int, int]] = None):
        """Zoom in by ``factor`` (> 1 zooms in), keeping the world point under the pivot fixed."""
        factor = clamp(factor, 0.05, 20.0)
        anchor = self.screen_to_world(pivot_screen) if pivot_screen is not None else None
        self.mpp = clamp(self.mpp / factor, MIN_METERS_PER_PIXEL, MAX_METERS_PER_PIXEL)
        if anchor is not None:
            self.center = self.center.add(anchor.sub(self.screen_to_world(pivot_screen)))

    def pan_pixels(self, dx_pixels, dy_pixels):
        self.center = self.center.sub((dx_pixels * self.mpp, dy_pixels * self.mpp))

    def follow(self, pos: Sequence[float]) -> None:
        if self.locked:
            self.center = as_vector(pos)

    def fit(self, positions: Iterable[Sequence[float]], margin: float = 1.3) -> None:
        """Center on the bounding box of ``positions`` and zoom so it fits with a margin."""
        pts = [as_vector(p) for p in positions]
        if not pts:
            self.center = ZERO
            self.mpp = DEFAULT_METERS_PER_PIXEL
            return
        lo = Vector2D(min(p.x for p in pts), min(p.y for p in pts))
        hi = Vector2D(max(p.x for p in pts), max(p.y for p in pts))
        extent = hi.sub(lo).scale(margin).add((1.0, 1.0))
        w, h = self.viewport_size
        self.center = lo.add(hi).scale(0.5)
        self.mpp = clamp(max(extent.x / max(w, 1), extent.y / max(h, 1)),
                         MIN_METERS_PER_PIXEL, MAX_METERS_PER_PIXEL)
