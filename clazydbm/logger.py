"""File logging setup.

The terminal belongs to the TUI while it runs, so log records only go to a
rotating file in the config directory.
"""

from __future__ import annotations

import os
from pathlib import Path

from loguru import logger

LOG_FILENAME = "clazydbm.log"
LOG_LEVELS = ("TRACE", "DEBUG", "INFO", "WARNING", "ERROR")

_LEVEL_ALIASES = {"WARN": "WARNING"}


def resolve_level(level: str | None = None) -> str:
    """Pick the log level from the argument, then ``CLAZYDBM_LOG``, else INFO."""
    raw = (level or os.environ.get("CLAZYDBM_LOG") or "INFO").strip().upper()
    raw = _LEVEL_ALIASES.get(raw, raw)
    return raw if raw in LOG_LEVELS else "INFO"


def setup_logging(log_dir: Path, level: str | None = None) -> Path:
    logger.remove()

    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / LOG_FILENAME

    logger.add(
        log_file,
        rotation="10 MB",
        retention=3,
        level=resolve_level(level),
        format="{time:YYYY-MM-DD HH:mm:ss} | {level:<8} | {module}:{function}:{line} | {message}",
        backtrace=True,
        diagnose=False,
        enqueue=True,
    )

    logger.info("clazydbm logger initialized")
    return log_file
