#!/usr/bin/env python3
"""
Seed configurations: built-in presets and JSON templates.

A seed lists bodies in order. Each body is either placed explicitly (position and
velocity) or described by orbital parameters around a parent body (period in years
and eccentricity). Orbiting bodies start at periapsis on the parent's +x side with
their periapsis speed along +y, on top of the parent's own velocity.

Schemas
=======
Template JSON (templates/*.json):
{
  "name": "Human-friendly preset name",
  "description": "Optional description",
  "dt": 3600.0,                          # optional, seconds per substep
  "collision_radius_multiplier": 50.0,   # optional
  "bodies": [
    {"name": "Sun", "mass": 1.989e30, "position": [0.0, 0.0], "velocity": [0.0, 0.0],
     "color": [255, 215, 0]},
    {"name": "Earth", "mass": 5.9724e24, "period_years": 1.0, "eccentricity": 0.0167,
     "parent": "Sun", "color": [30, 144, 255]}
  ]
}

Templates only seed a fresh world; world state is never written back.
"""
import json
import logging
import os
from collections import deque
from dataclasses import dataclass, field, replace
from typing import Dict, List, Optional, Sequence, Tuple

from .config import SimSettings
from .constants import M_SUN
from .data_models import Body
from .errors import InvalidBodyError
from .orbits import derive_orbit
from .vector_utils import ZERO, Vector2D, as_vector

logger = logging.getLogger(__name__)

TEMPLATES_DIR = os.path.join(os.path.dirname(os.path.dirname(__file__)), "templates")

Color = Tuple[int, int, int]


@dataclass
class SeedBody:
    name: str
    mass: float
    color: Color = (200, 200, 255)
    position: Optional[Tuple[float, float]] = None
    velocity: Optional[Tuple[float, float]] = None
    period_years: Optional[float] = None
    eccentricity: float = 0.0
    parent: Optional[str] = None  # defaults to the first body


@dataclass
class SeedTemplate:
    name: str
    bodies: List[SeedBody] = field(default_factory=list)
    description: str = ""
    dt: Optional[float] = None
    collision_radius_multiplier: Optional[float] = None

    def settings(self, base: Optional[SimSettings] = None) -> SimSettings:
        """Settings for a world seeded from this template."""
        base = base or SimSettings()
        overrides = {}
        if self.dt is not None:
            overrides["dt"] = self.dt
        if self.collision_radius_multiplier is not None:
            overrides["collision_radius_multiplier"] = self.collision_radius_multiplier
        return replace(base, **overrides)


SOLAR_SYSTEM = SeedTemplate(
    name="Solar System",
    description="The Sun and the eight major planets, each starting at perihelion.",
    bodies=[
        SeedBody("Sun", M_SUN, (255, 215, 0), position=(0.0, 0.0), velocity=(0.0, 0.0)),
        SeedBody("Mercury", 3.3011e23, (169, 169, 169), period_years=0.241, eccentricity=0.2056),
        SeedBody("Venus", 4.8675e24, (244, 164, 96), period_years=0.615, eccentricity=0.0068),
        SeedBody("Earth", 5.9724e24, (30, 144, 255), period_years=1.0, eccentricity=0.0167),
        SeedBody("Mars", 6.4171e23, (255, 69, 0), period_years=1.881, eccentricity=0.0934),
        SeedBody("Jupiter", 1.8982e27, (210, 180, 140), period_years=11.86, eccentricity=0.0488),
        SeedBody("Saturn", 5.6834e26, (240, 230, 140), period_years=29.45, eccentricity=0.0557),
        SeedBody("Uranus", 8.6810e25, (173, 216, 230), period_years=84.02, eccentricity=0.0472),
        SeedBody("Neptune", 1.0241e26, (70, 130, 180), period_years=164.8, eccentricity=0.0086),
    ],
)

# Physical radii: with the default 50x multiplier the Moon would start inside the Earth.
EARTH_MOON = SeedTemplate(
    name="Sun, Earth & Moon",
    description="A smaller system with the Moon orbiting the Earth.",
    dt=600.0,
    collision_radius_multiplier=1.0,
    bodies=[
        SeedBody("Sun", M_SUN, (255, 215, 0), position=(0.0, 0.0), velocity=(0.0, 0.0)),
        SeedBody("Earth", 5.972e24, (30, 144, 255), period_years=1.0, eccentricity=0.0167),
        SeedBody("Moon", 7.342e22, (200, 200, 200), period_years=0.0748, eccentricity=0.0549,
                 parent="Earth"),
    ],
)

BUILTIN_TEMPLATES: Dict[str, SeedTemplate] = {t.name: t for t in (SOLAR_SYSTEM, EARTH_MOON)}


def build_bodies(seed: Sequence[SeedBody], settings: Optional[SimSettings] = None) -> List[Body]:
    """
    Instantiate seed bodies in order.

    Raises:
        ValueError: if an orbiting body has no parent to orbit.
        InvalidBodyError / DegenerateOrbitError: for unusable masses or orbits.
    """
    settings = settings or SimSettings()
    bodies: List[Body] = []
    by_name: Dict[str, Body] = {}

    for s in seed:
        if s.period_years is not None:
            parent = by_name.get(s.parent) if s.parent else (bodies[0] if bodies else None)
            if parent is None:
                raise ValueError(f"Seed body '{s.name}' has no parent body to orbit")
            elements = derive_orbit(parent.mass, s.mass, s.period_years, s.eccentricity)
            position = parent.position.add(Vector2D(elements.periapsis, 0.0))
            velocity = parent.velocity.add(Vector2D(0.0, elements.periapsis_speed))
        else:
            position = as_vector(s.position) if s.position is not None else ZERO
            velocity = as_vector(s.velocity) if s.velocity is not None else ZERO

        body = Body(
            name=s.name,
            mass=s.mass,
            position=position,
            velocity=velocity,
            color=s.color,
            radius_multiplier=settings.collision_radius_multiplier,
            trail=deque(maxlen=settings.max_trail_length),
        )
        bodies.append(body)
        by_name[s.name] = body

    return bodies


def _read_json(path: str) -> Optional[dict]:
    try:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except (OSError, ValueError) as e:
        logger.warning(f"Could not read template {path}: {e}")
        return None


def _coerce_color(c) -> Color:
    try:
        r, g, b = int(c[0]), int(c[1]), int(c[2])
    except (TypeError, ValueError, IndexError):
        return (200, 200, 255)
    r = max(0, min(255, r)); g = max(0, min(255, g)); b = max(0, min(255, b))
    return (r, g, b)


def _pair(v) -> Optional[Tuple[float, float]]:
    if v is None:
        return None
    return (float(v[0]), float(v[1]))


def seed_body_from_dict(data: dict) -> SeedBody:
    """Parse one body entry; raises KeyError/TypeError/ValueError on bad input."""
    name = str(data.get("name", "Body"))
    mass = float(data["mass"])
    if not mass > 0:
        raise InvalidBodyError(f"Body '{name}': mass must be positive, got {mass!r}")
    period = data.get("period_years")
    return SeedBody(
        name=name,
        mass=mass,
        color=_coerce_color(data.get("color", [200, 200, 255])),
        position=_pair(data.get("position")),
        velocity=_pair(data.get("velocity")),
        period_years=None if period is None else float(period),
        eccentricity=float(data.get("eccentricity", 0.0)),
        parent=data.get("parent"),
    )


def template_from_dict(data: dict, default_name: str = "Template") -> SeedTemplate:
    """Build a template, skipping (and logging) malformed body entries."""
    seeds: List[SeedBody] = []
    for i, entry in enumerate(data.get("bodies", [])):
        try:
            seeds.append(seed_body_from_dict(entry))
        except (KeyError, TypeError, ValueError, IndexError) as e:
            logger.warning(f"Skipping body #{i} in template '{default_name}': {e!r}")
    dt = data.get("dt")
    multiplier = data.get("collision_radius_multiplier")
    return SeedTemplate(
        name=data.get("name") or default_name,
        bodies=seeds,
        description=data.get("description", ""),
        dt=None if dt is None else float(dt),
        collision_radius_multiplier=None if multiplier is None else float(multiplier),
    )


def list_templates(directory: str = TEMPLATES_DIR) -> List[Tuple[str, str]]:
    """Return list of (file_name, display_name) for available templates."""
    items: List[Tuple[str, str]] = []
    if not os.path.isdir(directory):
        return items
    for fn in sorted(os.listdir(directory)):
        if not fn.lower().endswith(".json"):
            continue
        data = _read_json(os.path.join(directory, fn)) or {}
        display = data.get("name") or os.path.splitext(fn)[0]
        items.append((fn, display))
    return items


def load_template(file_name: str, directory: str = TEMPLATES_DIR) -> Optional[SeedTemplate]:
    """
    Load a template JSON by file name.

    Returns None when the file cannot be read or its bodies cannot be built
    (bad orbit, unknown parent), so a loaded template always seeds a world.
    """
    data = _read_json(os.path.join(directory, file_name))
    if data is None:
        return None
    try:
        template = template_from_dict(data, default_name=os.path.splitext(file_name)[0])
        build_bodies(template.bodies, template.settings())
    except (TypeError, ValueError) as e:
        logger.warning(f"Rejected template {file_name}: {e}")
        return None
    logger.info(f"Loaded template '{template.name}' with {len(template.bodies)} bodies")
    return template
