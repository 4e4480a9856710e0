from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import cv2
import numpy as np

logger = logging.getLogger(__name__)


def load_sprite(path: Optional[Path]) -> Optional[np.ndarray]:
    """Load a point sprite as a contiguous RGBA ``uint8`` image.

    Grayscale sprites are expanded so the luminance doubles as alpha. Returns
    ``None`` when no path is given or the image cannot be read; the renderer
    then draws untextured points.
    """
    if path is None:
        return None
    image = cv2.imread(str(path), cv2.IMREAD_UNCHANGED)
    if image is None:
        logger.warning("Could not load sprite texture '%s'; drawing untextured points.", path)
        return None
    if image.ndim == 2:
        rgba = np.dstack([image, image, image, image])
    elif image.shape[2] == 3:
        gray = cv2.cvtColor(image, cv2.COLOR_BGR2GRAY)
        rgba = np.dstack([cv2.cvtColor(image, cv2.COLOR_BGR2RGB), gray])
    else:
        rgba = cv2.cvtColor(image, cv2.COLOR_BGRA2RGBA)
    if rgba.dtype != np.uint8:
        rgba = cv2.normalize(rgba, None, 0, 255, cv2.NORM_MINMAX).astype(np.uint8)
    # GL expects the first row at the bottom.
    return np.ascontiguousarray(np.flipud(rgba))
