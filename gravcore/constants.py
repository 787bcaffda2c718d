#!/usr/bin/env python3
"""
Shared constants for Gravity Sandbox (SI units unless stated otherwise).

Keeping constants in one place helps ensure values are consistent across the
engine and the host application.
"""

# Physical constants
G = 6.67430e-11  # m^3 kg^-1 s^-2
M_SUN = 1.989e30  # kg
M_EARTH = 5.972e24  # kg
M_MOON = 7.342e22  # kg
R_EARTH = 6.371e6  # m
AU = 1.496e11  # m
DAY = 24 * 60 * 60  # s
YEAR = 365.25 * DAY  # s

# Physics controls
SOFTENING_DISTANCE = 1e6  # m; pairs at or below this separation exert no force
COLLISION_RADIUS_MULTIPLIER = 50.0  # artistic scale-up of physical radii
MAX_PATH_LENGTH = 2000  # trail points kept per body
DEFAULT_DT = 60 * 60  # seconds of simulation time per physics substep
DEFAULT_STEPS_PER_FRAME = 6
MAX_STEPS_PER_FRAME = 50

# Orbit preview
ELLIPSE_SAMPLES = 200  # angular intervals of the analytic preview ellipse
GHOST_MAX_STEPS = 2000  # forward-integration cap for the running preview
ANCHOR_EPSILON = 1e6  # m; center closer than this to the anchor uses the x axis

# Display sizes (pixels), log-interpolated between a Moon and ten Suns
MIN_BODY_SIZE = 2.0
MAX_BODY_SIZE = 25.0

# Palette cycled through when committing preview bodies
PLANET_COLORS = [
    (255, 127, 80), (106, 90, 205), (0, 250, 154), (255, 105, 180),
    (30, 144, 255), (255, 215, 0), (173, 255, 47), (240, 128, 128),
    (186, 85, 211), (123, 104, 238), (60, 179, 113), (255, 160, 122),
]

# Host preview controls
PERIOD_SLIDER_MIN_YEARS = 0.1
PERIOD_SLIDER_MAX_YEARS = 20.0
PERIOD_SLIDER_STEPS = 1000
MASS_UNITS = {"Earths": M_EARTH, "Suns": M_SUN, "Moons": M_MOON}

# Rendering (viewport)
VIEW_WIDTH = 1100
VIEW_HEIGHT = 800
BACKGROUND_COLOR = (10, 12, 18)
TRAIL_COLOR = (200, 200, 200)
PREVIEW_COLOR = (255, 255, 255)
SELECTION_COLOR = (255, 60, 60)

# Camera zoom bounds (meters-per-pixel)
DEFAULT_METERS_PER_PIXEL = 2.5e10
MIN_METERS_PER_PIXEL = 1e5
MAX_METERS_PER_PIXEL = 1e13

# Safety: avoid drawing outside reasonable integer pixel ranges
SAFE_COORD_LIMIT = 30000
