from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple


@dataclass(frozen=True)
class RenderConfig:
    window_width: int = 1280
    window_height: int = 720
    title: str = "Galaxy Generator"
    camera_fov: float = 75.0
    camera_near: float = 0.1
    camera_far: float = 100.0
    camera_position: Tuple[float, float, float] = (3.0, 3.0, 3.0)
    background: Tuple[float, float, float] = (0.0, 0.0, 0.0)
    max_pixel_ratio: float = 2.0
    sprite_path: Optional[Path] = None
    zoom_step: float = 0.9  # camera distance factor per scroll notch

    @property
    def aspect(self) -> float:
        return self.window_width / max(1, self.window_height)


@dataclass(frozen=True)
class HUDConfig:
    text_color: Tuple[int, int, int, int] = (255, 255, 255, 255)
    accent_color: Tuple[int, int, int, int] = (255, 176, 96, 255)
    muted_color: Tuple[int, int, int, int] = (170, 170, 170, 200)
    text_scale: float = 1.0
    line_height: int = 16
    margin: int = 24
    refresh_interval: float = 0.5  # seconds between FPS redraws


def project_path(*parts: str) -> Path:
    """Resolve a path relative to the repository root."""
    base = Path(__file__).resolve().parents[1]
    return base.joinpath(*parts)
