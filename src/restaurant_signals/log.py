"""
Logging setup.

Uses loguru. Library code just does ``from loguru import logger``; the CLI
calls :func:`configure_logging` once at startup to install sinks:

- stderr, coloured, at the configured level
- ``{log_dir}/combined.log`` - everything at the configured level, rotated at 10 MB
- ``{log_dir}/error.log`` - errors only, rotated at 10 MB
"""

from __future__ import annotations

import sys
from pathlib import Path

from loguru import logger

LOG_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} [{level}]: {message}"
ROTATION = "10 MB"
RETENTION = 5  # files kept per sink


def configure_logging(level: str = "INFO", log_dir: str | Path | None = "logs") -> None:
    """
    Replace loguru's default sink with console and rotating file sinks.

    Args:
        level: Minimum level name (``DEBUG``, ``INFO``, ...).
        log_dir: Directory for file sinks. None disables file logging.
    """
    logger.remove()
    logger.add(sys.stderr, level=level.upper(), format=LOG_FORMAT, colorize=True)

    if log_dir is None:
        return

    base = Path(log_dir)
    base.mkdir(parents=True, exist_ok=True)
    logger.add(
        base / "combined.log",
        level=level.upper(),
        format=LOG_FORMAT,
        rotation=ROTATION,
        retention=RETENTION,
        enqueue=True,
    )
    logger.add(
        base / "error.log",
        level="ERROR",
        format=LOG_FORMAT,
        rotation=ROTATION,
        retention=RETENTION,
        backtrace=True,
        enqueue=True,
    )
