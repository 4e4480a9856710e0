from __future__ import annotations

import numpy as np

from ui.hud import HUDOverlay
from ui.panel import PanelLine
from utils.config import HUDConfig


def test_render_draws_text_on_transparent_canvas():
    hud = HUDOverlay(HUDConfig(), 320, 240)
    lines = [
        PanelLine("General", "Stars Count", "5000", True, False),
        PanelLine("Nebula", "Active", "on", False, False),
    ]
    image = hud.render(lines, fps=59.9, point_count=4000)

    assert image.shape == (240, 320, 4)
    assert image.dtype == np.uint8
    assert image[..., 3].any()
    assert image.flags["C_CONTIGUOUS"]


def test_empty_panel_still_renders_stats():
    image = HUDOverlay(HUDConfig(), 200, 100).render([], fps=0.0, point_count=0)
    assert image[..., 3].any()
