from __future__ import annotations

from typing import Sequence

import cv2
import numpy as np

from ui.panel import PanelLine
from utils.config import HUDConfig

HELP_TEXT = "tab/up/down select  left/right adjust (shift x10)  space toggle  r reroll  h hide  esc quit"


class HUDOverlay:
    """Draws the parameter panel and stats onto a transparent RGBA canvas."""

    def __init__(self, config: HUDConfig, width: int, height: int) -> None:
        self._config = config
        self._font = cv2.FONT_HERSHEY_PLAIN
        self._width = width
        self._height = height

    def render(self, lines: Sequence[PanelLine], fps: float, point_count: int) -> np.ndarray:
        canvas = np.zeros((self._height, self._width, 4), dtype=np.uint8)
        margin = self._config.margin
        step = self._config.line_height
        y = margin + step
        self._text(canvas, f"fps {fps:05.2f}  points {point_count}", margin, y, self._config.text_color)
        y += step * 2
        folder = None
        for line in lines:
            if line.folder != folder:
                folder = line.folder
                self._text(canvas, folder.upper(), margin, y, self._config.muted_color)
                y += step
            color = self._config.accent_color if line.selected else self._config.text_color
            marker = "> " if line.selected else "  "
            suffix = " *" if line.pending else ""
            self._text(canvas, f"{marker}{line.label}: {line.value}{suffix}", margin, y, color)
            y += step
        self._text(canvas, HELP_TEXT, margin, self._height - margin, self._config.muted_color)
        # GL expects the first row at the bottom.
        return np.ascontiguousarray(np.flipud(canvas))

    def _text(self, canvas: np.ndarray, text: str, x: int, y: int, color: Sequence[int]) -> None:
        cv2.putText(
            canvas,
            text,
            (x, y),
            self._font,
            self._config.text_scale,
            tuple(int(c) for c in color),
            1,
            cv2.LINE_AA,
        )
