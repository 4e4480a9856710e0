from __future__ import annotations

import argparse
import logging
import signal
from functools import partial
from pathlib import Path
from typing import Optional, Sequence

import numpy as np

from galaxy.controller import CloudController
from galaxy.generator import VoidPolicy
from galaxy.parameters import GalaxyParameters
from galaxy.random_source import SystemRandomSource
from utils.config import HUDConfig, RenderConfig
from utils.logging_config import setup_logging

logger = logging.getLogger(__name__)


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    defaults = GalaxyParameters()
    parser = argparse.ArgumentParser(description="Procedural spiral galaxy viewer.")
    parser.add_argument("--count", type=int, default=defaults.count, help="number of stars")
    parser.add_argument("--branches", type=int, default=defaults.branches)
    parser.add_argument("--radius", type=float, default=defaults.radius)
    parser.add_argument("--spin", type=float, default=defaults.spin)
    parser.add_argument("--no-nebula", action="store_true", help="disable the nebula overlay")
    parser.add_argument("--seed", type=int, default=None, help="seed every regeneration for repeatable clouds")
    parser.add_argument(
        "--void-policy",
        choices=[p.value for p in VoidPolicy],
        default=VoidPolicy.REMOVE.value,
        help="drop points inside the void or park them at the origin",
    )
    parser.add_argument("--sprite", type=Path, default=None, help="point sprite image")
    parser.add_argument("--headless", action="store_true", help="generate once, log a summary and exit")
    parser.add_argument("--log-level", default="INFO", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    parser.add_argument("--log-file", default=None)
    return parser.parse_args(argv)


def _summarize(controller: CloudController) -> None:
    cloud, params, version = controller.snapshot()
    if cloud is None or len(cloud) == 0:
        logger.info("Galaxy v%d is empty", version)
        return
    radii = np.hypot(cloud.positions[:, 0], cloud.positions[:, 2])
    logger.info(
        "Galaxy v%d: %d/%d points, radius %.2f..%.2f, y spread %.3f",
        version,
        len(cloud),
        params.count,
        float(radii.min()),
        float(radii.max()),
        float(cloud.positions[:, 1].std()),
    )


def run(argv: Optional[Sequence[str]] = None) -> None:
    args = _parse_args(argv)
    setup_logging(getattr(logging, args.log_level), args.log_file)

    params = GalaxyParameters(
        count=args.count,
        branches=args.branches,
        radius=args.radius,
        spin=args.spin,
        has_nebula=not args.no_nebula,
    )
    rng_factory = partial(SystemRandomSource, args.seed)
    controller = CloudController(rng_factory, VoidPolicy(args.void_policy), args.sprite)
    controller.regenerate(params)

    if args.headless:
        _summarize(controller)
        controller.close()
        return

    from rendering.renderer import GalaxyRenderer

    render_cfg = RenderConfig(sprite_path=args.sprite)
    renderer = GalaxyRenderer(render_cfg, HUDConfig(), controller)
    renderer.start()

    def _handle_exit(signum, frame):  # pragma: no cover - signal handling
        renderer.stop()

    signal.signal(signal.SIGINT, _handle_exit)
    signal.signal(signal.SIGTERM, _handle_exit)

    try:
        while not renderer.wait(0.1):
            pass
    finally:
        renderer.stop()
        controller.close()


if __name__ == "__main__":
    run()
