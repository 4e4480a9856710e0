from __future__ import annotations

import numpy as np
import pytest

from galaxy.cloud import Point, PointCloud, PointMaterial

MATERIAL = PointMaterial(point_size=0.01, opacity=1.0)


def test_buffers_are_read_only():
    cloud = PointCloud(np.ones((2, 3)), np.zeros((2, 3)), MATERIAL)
    with pytest.raises(ValueError):
        cloud.positions[0, 0] = 5.0
    with pytest.raises(ValueError):
        cloud.colors[1, 2] = 1.0


def test_buffers_are_float32_and_copied():
    source = np.arange(6, dtype=np.float64).reshape(2, 3)
    cloud = PointCloud(source, source, MATERIAL)
    source[0, 0] = 99.0
    assert cloud.positions.dtype == np.float32
    assert cloud.positions[0, 0] == 0.0
    assert cloud.nbytes == 2 * 2 * 3 * 4


def test_length_mismatch():
    with pytest.raises(ValueError):
        PointCloud(np.zeros((3, 3)), np.zeros((2, 3)), MATERIAL)


def test_points_iterate_in_order():
    positions = np.array([[1, 2, 3], [4, 5, 6]], dtype=np.float32)
    colors = np.array([[0, 0, 1], [1, 0, 0]], dtype=np.float32)
    cloud = PointCloud(positions, colors, MATERIAL)
    assert list(cloud) == [
        Point((1.0, 2.0, 3.0), (0.0, 0.0, 1.0)),
        Point((4.0, 5.0, 6.0), (1.0, 0.0, 0.0)),
    ]


def test_empty():
    cloud = PointCloud.empty(MATERIAL)
    assert len(cloud) == 0
    assert list(cloud) == []
