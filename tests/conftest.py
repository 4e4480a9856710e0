from __future__ import annotations

from typing import Callable

import pytest

from galaxy.parameters import GalaxyParameters
from galaxy.random_source import SequenceRandomSource


@pytest.fixture
def flat_params() -> Callable[..., GalaxyParameters]:
    """Parameters with every shear switched off, overridable per test."""

    def _make(**changes: object) -> GalaxyParameters:
        base = dict(
            count=1,
            branches=1,
            radius=10.0,
            spin=0.0,
            twist_factor=0.0,
            twist_amount=0.0,
            curl_frequency=0.0,
            curl_amplitude=0.0,
            void_size=0.0,
            has_nebula=False,
            inside_color=(1.0, 0.0, 0.0),
            outside_color=(0.0, 0.0, 1.0),
            nebula_color=(0.5, 0.5, 0.5),
        )
        base.update(changes)
        return GalaxyParameters(**base)

    return _make


@pytest.fixture
def zeros() -> SequenceRandomSource:
    return SequenceRandomSource([0.0], cycle=True)
