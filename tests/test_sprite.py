from __future__ import annotations

import logging

import cv2
import numpy as np

from rendering.sprite import load_sprite


def test_missing_sprite_falls_back(tmp_path, caplog):
    with caplog.at_level(logging.WARNING, logger="rendering.sprite"):
        assert load_sprite(tmp_path / "nope.png") is None
    assert "untextured" in caplog.text


def test_no_path_means_untextured():
    assert load_sprite(None) is None


def test_grayscale_sprite_uses_luminance_as_alpha(tmp_path):
    image = np.zeros((8, 8), dtype=np.uint8)
    image[0, :] = 200
    path = tmp_path / "sprite.png"
    cv2.imwrite(str(path), image)

    sprite = load_sprite(path)
    assert sprite.shape == (8, 8, 4)
    assert sprite.dtype == np.uint8
    # Rows are flipped for GL, so the bright top row ends up last.
    assert sprite[-1, 0].tolist() == [200, 200, 200, 200]
    assert sprite[0, 0].tolist() == [0, 0, 0, 0]


def test_color_sprite_is_rgba(tmp_path):
    image = np.zeros((4, 4, 3), dtype=np.uint8)
    image[..., 2] = 255  # red in BGR
    path = tmp_path / "sprite.png"
    cv2.imwrite(str(path), image)

    sprite = load_sprite(path)
    assert sprite[0, 0, :3].tolist() == [255, 0, 0]
    assert sprite[0, 0, 3] > 0
