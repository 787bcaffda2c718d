#!/usr/bin/env python3
"""
Collision handling for Gravity Sandbox.

Every collision is a perfectly inelastic merge: the two bodies are replaced by one
body that conserves mass and momentum and sits at their mass-weighted centroid. The
kinetic energy that disappears is reported in a CollisionEvent for the effects layer.

Pairs are scanned left to right; once a body has merged it is skipped for the rest of
the pass, so with three or more mutually overlapping bodies the lowest index pair wins.
"""
import logging
from dataclasses import dataclass, field
from typing import List, Optional, Set, Tuple

from .data_models import Body, CollisionEvent

logger = logging.getLogger(__name__)

GIANT_PREFIX = "Giant "
SUPER_PREFIX = "Super "

# Relative tolerance for rounding in the kinetic energy difference.
ENERGY_TOLERANCE = 1e-9


@dataclass
class CollisionReport:
    """Outcome of one resolution pass over the canonical body list."""
    events: List[CollisionEvent] = field(default_factory=list)
    merged: List[Body] = field(default_factory=list)
    removed_indices: List[int] = field(default_factory=list)

    def remap_index(self, index: int) -> Optional[int]:
        """
        New index of the body that sat at ``index`` before the pass.

        Returns None when that body was consumed by a merge.
        """
        if index in self.removed_indices:
            return None
        return index - sum(1 for r in self.removed_indices if r < index)


def grown_name(name: str) -> str:
    """
    Name ladder for the heavier partner of a merge: X -> Giant X -> Super X.

    "Super " is the top rung and is never extended.
    """
    if name.startswith(SUPER_PREFIX):
        return name
    if name.startswith(GIANT_PREFIX):
        return SUPER_PREFIX + name[len(GIANT_PREFIX):]
    return GIANT_PREFIX + name


def is_colliding(b1: Body, b2: Body) -> bool:
    return b1.position.sub(b2.position).norm() < b1.radius + b2.radius


def merge_bodies(b1: Body, b2: Body) -> Tuple[Body, CollisionEvent]:
    """
    Perfectly inelastic merge of two bodies.

    The heavier body supplies the base name and color; on equal masses ``b1`` wins.
    """
    m1, m2 = b1.mass, b2.mass
    m_total = m1 + m2

    new_vel = b1.velocity.scale(m1).add(b2.velocity.scale(m2)).scale(1.0 / m_total)
    new_pos = b1.position.scale(m1).add(b2.position.scale(m2)).scale(1.0 / m_total)

    ke_before = b1.kinetic_energy + b2.kinetic_energy
    ke_after = 0.5 * m_total * new_vel.dot(new_vel)
    energy_lost = ke_before - ke_after
    if energy_lost < -ENERGY_TOLERANCE * max(ke_before, 1.0):
        logger.warning(f"Merge of {b1.name} + {b2.name} gained kinetic energy ({energy_lost:.3e} J)")

    base = b1 if m1 >= m2 else b2
    merged = Body(
        name=grown_name(base.name),
        mass=m_total,
        position=new_pos,
        velocity=new_vel,
        color=base.color,
        radius_multiplier=base.radius_multiplier,
    )
    if base.trail.maxlen:
        merged.set_trail_length(base.trail.maxlen)

    event = CollisionEvent(
        position=new_pos,
        energy_lost=energy_lost,
        names=(b1.name, b2.name),
        merged_name=merged.name,
    )
    return merged, event


def handle_collisions(bodies: List[Body]) -> CollisionReport:
    """
    Detect and resolve collisions between bodies, rebuilding ``bodies`` in place.

    Consumed bodies are dropped and merged bodies are appended in the order their
    collisions were found. Only canonical bodies should be passed here.
    """
    report = CollisionReport()
    if len(bodies) < 2:
        return report

    to_remove: Set[int] = set()

    n = len(bodies)
    for i in range(n):
        for j in range(i + 1, n):
            if i in to_remove or j in to_remove:
                continue
            bi = bodies[i]
            bj = bodies[j]
            if not is_colliding(bi, bj):
                continue

            merged, event = merge_bodies(bi, bj)
            report.merged.append(merged)
            report.events.append(event)
            to_remove.add(i)
            to_remove.add(j)
            logger.info(f"Merged {bi.name} + {bj.name} -> {merged.name} "
                        f"(lost {event.energy_lost:.3e} J)")

    if to_remove:
        bodies[:] = [b for idx, b in enumerate(bodies) if idx not in to_remove]
        bodies.extend(report.merged)

    report.removed_indices = sorted(to_remove)
    return report
