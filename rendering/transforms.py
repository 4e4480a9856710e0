from __future__ import annotations

import math
from typing import Sequence

import numpy as np

# All matrices are row-major; upload them with transpose=GL_TRUE.


def perspective(fov_degrees: float, aspect: float, near: float, far: float) -> np.ndarray:
    f = 1.0 / math.tan(math.radians(fov_degrees) / 2.0)
    m = np.zeros((4, 4), dtype=np.float32)
    m[0, 0] = f / aspect
    m[1, 1] = f
    m[2, 2] = (far + near) / (near - far)
    m[2, 3] = (2.0 * far * near) / (near - far)
    m[3, 2] = -1.0
    return m


def look_at(eye: Sequence[float], target: Sequence[float], up: Sequence[float] = (0.0, 1.0, 0.0)) -> np.ndarray:
    eye_v = np.asarray(eye, dtype=np.float64)
    forward = np.asarray(target, dtype=np.float64) - eye_v
    forward /= np.linalg.norm(forward)
    side = np.cross(forward, np.asarray(up, dtype=np.float64))
    side /= np.linalg.norm(side)
    true_up = np.cross(side, forward)
    m = np.identity(4, dtype=np.float64)
    m[0, :3] = side
    m[1, :3] = true_up
    m[2, :3] = -forward
    m[:3, 3] = -m[:3, :3] @ eye_v
    return m.astype(np.float32)


def rotation_y(angle: float) -> np.ndarray:
    """Rotation about the vertical axis, counter-clockwise seen from +Y."""
    c = math.cos(angle)
    s = math.sin(angle)
    m = np.identity(4, dtype=np.float32)
    m[0, 0] = c
    m[0, 2] = s
    m[2, 0] = -s
    m[2, 2] = c
    return m


def orbit_eye(position: Sequence[float], zoom: float) -> np.ndarray:
    """Scale the camera position along its line of sight to the origin."""
    return np.asarray(position, dtype=np.float32) * np.float32(zoom)
