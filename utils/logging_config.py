from __future__ import annotations

import logging
import sys
from typing import Optional

LOGGER_NAMESPACES = ("galaxy", "rendering", "ui", "main", "__main__")


def setup_logging(level: int = logging.INFO, log_file: Optional[str] = None) -> None:
    """Attach a stdout handler (and optionally a file handler) to the project loggers.

    Args:
        level: Logging level (e.g. logging.DEBUG, logging.INFO)
        log_file: Optional path to save logs to a file.
    """
    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%H:%M:%S",
    )
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, mode="w", encoding="utf-8"))
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)

    for name in LOGGER_NAMESPACES:
        logger = logging.getLogger(name)
        logger.setLevel(level)
        # Drop handlers from an earlier call so lines are not duplicated.
        for old in list(logger.handlers):
            logger.removeHandler(old)
            old.close()
        for handler in handlers:
            logger.addHandler(handler)

    logging.getLogger("galaxy").info("Logging initialized.")
