from __future__ import annotations

from typing import Iterable, Optional, Protocol, Sequence

import numpy as np

from galaxy.errors import GalaxyError


class RandomSource(Protocol):
    def uniform(self) -> float:
        """Return a value in [0, 1)."""
        ...


class SystemRandomSource:
    """numpy-backed source; unseeded in the viewer, seeded for reproducible runs."""

    def __init__(self, seed: Optional[int] = None) -> None:
        self._rng = np.random.default_rng(seed)

    def uniform(self) -> float:
        return float(self._rng.random())


class SequenceRandomSource:
    """Replays a fixed sequence of draws, optionally cycling through it."""

    def __init__(self, values: Iterable[float], cycle: bool = False) -> None:
        self._values: Sequence[float] = tuple(float(v) for v in values)
        if not self._values:
            raise GalaxyError("SequenceRandomSource needs at least one value.")
        if any(v < 0.0 or v >= 1.0 for v in self._values):
            raise GalaxyError("Replayed draws must lie in [0, 1).")
        self._cycle = cycle
        self._index = 0

    def uniform(self) -> float:
        if self._index >= len(self._values):
            if not self._cycle:
                raise GalaxyError(f"Random sequence exhausted after {len(self._values)} draws.")
            self._index = 0
        value = self._values[self._index]
        self._index += 1
        return value

    @property
    def draws(self) -> int:
        return self._index


class RecordingRandomSource:
    """Wraps another source and keeps every value it hands out."""

    def __init__(self, source: RandomSource) -> None:
        self._source = source
        self.history: list[float] = []

    def uniform(self) -> float:
        value = self._source.uniform()
        self.history.append(value)
        return value

    def replay(self) -> SequenceRandomSource:
        return SequenceRandomSource(self.history)
