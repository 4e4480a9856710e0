from __future__ import annotations

import logging
import math
import time
from enum import Enum
from pathlib import Path
from typing import Optional, Tuple

import numpy as np

from galaxy.cloud import PointCloud, PointMaterial
from galaxy.colors import lerp
from galaxy.parameters import GalaxyParameters
from galaxy.random_source import RandomSource

logger = logging.getLogger(__name__)

TWO_PI = math.pi * 2.0


class VoidPolicy(str, Enum):
    """What happens to an index whose radius falls inside the void."""

    REMOVE = "remove"  # no point emitted, output is compacted
    ORIGIN = "origin"  # zero position, zero color, output keeps `count` points


def arm_angle(index: int, radius: float, params: GalaxyParameters) -> Tuple[float, float]:
    """Return ``(branch_angle, spin_angle)`` for a point after twist and curl."""
    spin_angle = radius * params.spin
    branch_angle = (index % params.branches) / params.branches * TWO_PI
    branch_angle += math.sin(spin_angle * params.twist_factor) * params.twist_amount
    branch_angle += math.sin(branch_angle * params.curl_frequency) * params.curl_amplitude
    return branch_angle, spin_angle


def jitter(rng: RandomSource, power: float) -> float:
    magnitude = rng.uniform() ** power
    return magnitude * (-1.0 if rng.uniform() < 0.5 else 1.0)


def nebula_sample(
    angle: float, params: GalaxyParameters, rng: RandomSource
) -> Optional[Tuple[float, float, float]]:
    """Roll the nebula overlay for one point.

    Returns the replacement position when the point becomes a nebula sample,
    ``None`` otherwise. Draws nothing when the overlay is disabled. Unlike an
    always-roll overlay, it also skips the activation draw when the density is
    zero (no draw in [0, 1) could activate it), so a zero-density nebula
    consumes the same draws as a disabled one and yields an identical cloud.
    """
    if not params.has_nebula or params.nebula_density <= 0.0:
        return None
    if rng.uniform() >= params.nebula_density:
        return None
    nebula_radius = max(rng.uniform() * params.radius, 0.0)
    return math.cos(angle) * nebula_radius, 0.0, math.sin(angle) * nebula_radius


def material_for(params: GalaxyParameters, sprite: Optional[Path] = None) -> PointMaterial:
    return PointMaterial(point_size=params.point_size, opacity=params.opacity, sprite=sprite)


def generate(
    params: GalaxyParameters,
    rng: RandomSource,
    void_policy: VoidPolicy = VoidPolicy.REMOVE,
    sprite: Optional[Path] = None,
) -> PointCloud:
    """Build a spiral galaxy point cloud.

    Per index the draws are taken in a fixed order: radius, then magnitude and
    sign for x, y and z, then the nebula roll and (when it hits) the nebula
    radius. An index inside the void consumes only its radius draw.
    """
    started = time.perf_counter()
    material = material_for(params, sprite)
    if params.count == 0:
        return PointCloud.empty(material)

    positions = np.zeros((params.count, 3), dtype=np.float32)
    colors = np.zeros((params.count, 3), dtype=np.float32)
    # A non-positive radius collapses the disk onto the origin. Every clamped
    # radius is then 0, so any positive void_size still excludes the whole disk.
    max_radius = max(params.radius, 0.0)
    emitted = 0
    excluded = 0
    nebula_hits = 0

    for i in range(params.count):
        radius = max(rng.uniform() * params.radius, 0.0)
        branch_angle, spin_angle = arm_angle(i, radius, params)

        if radius < params.void_size:
            excluded += 1
            if void_policy is VoidPolicy.ORIGIN:
                emitted += 1
            continue

        offset_x = jitter(rng, params.randomness_power)
        offset_y = jitter(rng, params.randomness_power)
        offset_z = jitter(rng, params.randomness_power)

        angle = branch_angle + spin_angle
        position = (
            math.cos(angle) * radius + offset_x,
            offset_y,
            math.sin(angle) * radius + offset_z,
        )
        t = radius / max_radius if max_radius > 0.0 else 0.0
        color = lerp(params.inside_color, params.outside_color, t)

        nebula = nebula_sample(angle, params, rng)
        if nebula is not None:
            position = nebula
            color = params.nebula_color
            nebula_hits += 1

        positions[emitted] = position
        colors[emitted] = color
        emitted += 1

    cloud = PointCloud(positions[:emitted], colors[:emitted], material)
    logger.debug(
        "Generated %d/%d points (%d in void, %d nebula) in %.3fs",
        len(cloud),
        params.count,
        excluded,
        nebula_hits,
        time.perf_counter() - started,
    )
    return cloud
