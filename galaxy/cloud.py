from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, NamedTuple, Optional, Tuple

import numpy as np


class Point(NamedTuple):
    position: Tuple[float, float, float]
    color: Tuple[float, float, float]


@dataclass(frozen=True)
class PointMaterial:
    """How the renderer should draw a cloud."""

    point_size: float
    opacity: float
    additive_blending: bool = True
    depth_write: bool = False
    sprite: Optional[Path] = None


class PointCloud:
    """Read-only parallel position/color buffers produced by one generation call."""

    def __init__(self, positions: np.ndarray, colors: np.ndarray, material: PointMaterial) -> None:
        positions = np.array(positions, dtype=np.float32).reshape(-1, 3)
        colors = np.array(colors, dtype=np.float32).reshape(-1, 3)
        if positions.shape != colors.shape:
            raise ValueError(
                f"positions and colors must have equal length, got {positions.shape[0]} and {colors.shape[0]}."
            )
        positions.flags.writeable = False
        colors.flags.writeable = False
        self._positions = positions
        self._colors = colors
        self._material = material

    @classmethod
    def empty(cls, material: PointMaterial) -> "PointCloud":
        return cls(np.zeros((0, 3), dtype=np.float32), np.zeros((0, 3), dtype=np.float32), material)

    @property
    def positions(self) -> np.ndarray:
        return self._positions

    @property
    def colors(self) -> np.ndarray:
        return self._colors

    @property
    def material(self) -> PointMaterial:
        return self._material

    @property
    def nbytes(self) -> int:
        return self._positions.nbytes + self._colors.nbytes

    def __len__(self) -> int:
        return self._positions.shape[0]

    def __getitem__(self, index: int) -> Point:
        p = self._positions[index]
        c = self._colors[index]
        return Point((float(p[0]), float(p[1]), float(p[2])), (float(c[0]), float(c[1]), float(c[2])))

    def __iter__(self) -> Iterator[Point]:
        for i in range(len(self)):
            yield self[i]

    def __repr__(self) -> str:
        return f"PointCloud(points={len(self)}, point_size={self._material.point_size})"
