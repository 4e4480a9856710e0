from __future__ import annotations

import logging
import threading
import time
from pathlib import Path
from typing import Callable, List, Optional, Tuple

from galaxy.cloud import PointCloud
from galaxy.generator import VoidPolicy, generate
from galaxy.parameters import GalaxyParameters
from galaxy.random_source import RandomSource, SystemRandomSource

logger = logging.getLogger(__name__)

ReleaseCallback = Callable[[PointCloud], None]


class CloudController:
    """Owns the single displayed cloud and swaps it when parameters are committed.

    The new cloud is built outside the lock; only the swap itself is guarded,
    so readers of :meth:`snapshot` always get a complete cloud together with
    the parameters that produced it. The previous cloud is released after the
    swap.
    """

    def __init__(
        self,
        rng_factory: Callable[[], RandomSource] = SystemRandomSource,
        void_policy: VoidPolicy = VoidPolicy.REMOVE,
        sprite: Optional[Path] = None,
    ) -> None:
        self._lock = threading.Lock()
        self._commit_lock = threading.Lock()
        self._rng_factory = rng_factory
        self._void_policy = void_policy
        self._sprite = sprite
        self._cloud: Optional[PointCloud] = None
        self._params: Optional[GalaxyParameters] = None
        self._version = 0
        self._release_callbacks: List[ReleaseCallback] = []

    def add_release_callback(self, callback: ReleaseCallback) -> None:
        with self._lock:
            self._release_callbacks.append(callback)

    def regenerate(self, params: GalaxyParameters) -> PointCloud:
        started = time.perf_counter()
        cloud = generate(params, self._rng_factory(), self._void_policy, self._sprite)
        with self._lock:
            previous = self._cloud
            self._cloud = cloud
            self._params = params
            self._version += 1
            version = self._version
            callbacks = list(self._release_callbacks)
        if previous is not None:
            self._release(previous, callbacks)
        logger.info(
            "Galaxy v%d: %d points in %.3fs", version, len(cloud), time.perf_counter() - started
        )
        return cloud

    def commit(self, **changes: object) -> PointCloud:
        """Apply a finished panel edit and regenerate from the result.

        Commits are serialized: each one reads the parameters left by the
        previous commit, so edits from different threads are never lost.
        """
        with self._commit_lock:
            with self._lock:
                base = self._params
            if base is None:
                base = GalaxyParameters()
            return self.regenerate(base.with_changes(**changes))

    def snapshot(self) -> Tuple[Optional[PointCloud], Optional[GalaxyParameters], int]:
        with self._lock:
            return self._cloud, self._params, self._version

    @property
    def parameters(self) -> Optional[GalaxyParameters]:
        with self._lock:
            return self._params

    @property
    def version(self) -> int:
        with self._lock:
            return self._version

    def close(self) -> None:
        with self._lock:
            previous = self._cloud
            self._cloud = None
            callbacks = list(self._release_callbacks)
        if previous is not None:
            self._release(previous, callbacks)

    def _release(self, cloud: PointCloud, callbacks: List[ReleaseCallback]) -> None:
        for callback in callbacks:
            callback(cloud)
        logger.debug("Released %r", cloud)
