from __future__ import annotations

import math
from dataclasses import dataclass, fields, replace
from typing import Dict, Tuple

from galaxy.colors import RGB, parse_color
from galaxy.errors import GalaxyConfigError


@dataclass(frozen=True)
class GalaxyParameters:
    """Immutable snapshot of every input to one generation call.

    Colors may be passed as ``#rrggbb`` strings or RGB triples and are stored
    as float triples. ``randomness`` is kept for the panel but the jitter only
    reads ``randomness_power``. ``rotation_speed`` is consumed by the renderer.
    """

    count: int = 50000
    point_size: float = 0.01
    radius: float = 25.0
    branches: int = 5
    spin: float = 1.0
    randomness: float = 0.4
    randomness_power: float = 3.0
    inside_color: RGB = "#ff6030"  # type: ignore[assignment]
    outside_color: RGB = "#1b3984"  # type: ignore[assignment]
    opacity: float = 1.0
    has_nebula: bool = True
    nebula_density: float = 0.1
    nebula_color: RGB = "#646264"  # type: ignore[assignment]
    void_size: float = 2.5
    twist_factor: float = -1.3
    twist_amount: float = 0.5
    rotation_speed: float = 0.1
    curl_frequency: float = -1.8
    curl_amplitude: float = -1.36

    def __post_init__(self) -> None:
        for name in ("inside_color", "outside_color", "nebula_color"):
            object.__setattr__(self, name, parse_color(getattr(self, name)))
        if isinstance(self.branches, bool) or int(self.branches) != self.branches:
            raise GalaxyConfigError(f"branches must be an integer, got {self.branches!r}.")
        if self.branches < 1:
            raise GalaxyConfigError(f"branches must be at least 1, got {self.branches}.")
        if int(self.count) != self.count or self.count < 0:
            raise GalaxyConfigError(f"count must be a non-negative integer, got {self.count!r}.")
        object.__setattr__(self, "branches", int(self.branches))
        object.__setattr__(self, "count", int(self.count))
        if not math.isfinite(self.radius):
            raise GalaxyConfigError(f"radius must be finite, got {self.radius}.")

    def with_changes(self, **changes: object) -> "GalaxyParameters":
        unknown = set(changes) - FIELD_NAMES
        if unknown:
            raise GalaxyConfigError(f"Unknown galaxy parameter(s): {', '.join(sorted(unknown))}.")
        return replace(self, **changes)


FIELD_NAMES = frozenset(f.name for f in fields(GalaxyParameters))

# (minimum, maximum, step) for every field editable from the panel.
PARAMETER_RANGES: Dict[str, Tuple[float, float, float]] = {
    "count": (100, 100000, 100),
    "point_size": (0.001, 0.1, 0.001),
    "radius": (0.01, 30.0, 0.01),
    "branches": (2, 20, 1),
    "spin": (-5.0, 5.0, 0.001),
    "rotation_speed": (-3.0, 5.0, 0.01),
    "randomness": (0.0, 2.0, 0.001),
    "randomness_power": (1.0, 10.0, 0.001),
    "opacity": (0.1, 1.0, 0.001),
    "nebula_density": (0.0, 1.0, 0.1),
    "void_size": (0.0, 30.0, 0.1),
    "twist_factor": (-2.0, 5.0, 0.01),
    "twist_amount": (-1.0, 1.0, 0.01),
    "curl_frequency": (-3.0, 5.0, 0.01),
    "curl_amplitude": (-5.0, 5.0, 0.01),
}

INTEGER_FIELDS = frozenset({"count", "branches"})


def step_decimals(step: float) -> int:
    """Number of decimal places a value on this step grid needs."""
    return len(f"{step:g}".partition(".")[2])


def clamp_parameter(name: str, value: float) -> float:
    """Snap ``value`` onto the field's step grid and clamp it to its range."""
    if name not in PARAMETER_RANGES:
        raise GalaxyConfigError(f"Parameter '{name}' has no editable range.")
    low, high, step = PARAMETER_RANGES[name]
    snapped = low + round((value - low) / step) * step
    snapped = round(min(high, max(low, snapped)), step_decimals(step))
    if name in INTEGER_FIELDS:
        return int(snapped)
    return snapped
