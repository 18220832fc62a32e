"""
Logging setup for the layout runtime.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Optional

from loguru import logger as _logger

_LOG_INITIALISED = False
LOG_DIR_ENV = "ISLAND_LAYOUT_LOG_DIR"
LOG_FILE_NAME = "layout.log"


def default_log_path() -> Path:
    log_dir = os.environ.get(LOG_DIR_ENV)
    if log_dir:
        return Path(log_dir) / LOG_FILE_NAME
    return Path.home() / ".local" / "state" / "island-layout" / LOG_FILE_NAME


def configure(log_path: Optional[Path] = None, *, console_level: str = "INFO") -> None:
    """
    Configure loguru for the application.

    Configuration only happens once per process; later calls are ignored.
    """
    global _LOG_INITIALISED
    if _LOG_INITIALISED:
        return
    target = log_path or default_log_path()
    target.parent.mkdir(parents=True, exist_ok=True)

    # Keep console output and add a persistent file sink.
    _logger.remove()
    if sys.stderr is not None:
        _logger.add(sys.stderr, level=console_level, enqueue=True)
    _logger.add(
        target,
        level="DEBUG",
        rotation="10 MB",
        retention=5,
        encoding="utf-8",
        enqueue=True,
        backtrace=True,
        diagnose=False,
    )
    _LOG_INITIALISED = True


def get_logger():
    """Return the shared logger instance."""
    configure()
    return _logger
