"""
Entry point for the island layout application.
"""

from __future__ import annotations

import sys
import time
from pathlib import Path
from typing import Iterable, Tuple

from PySide6.QtCore import QDir, QLockFile
from PySide6.QtWidgets import QApplication

from island_core.app import APP_NAME, LayoutCoordinator
from island_core.logger import get_logger

_LOGGER = get_logger()
_LOCK_NAME = "island-layout.lock"


class _InstanceGuard:
    """Lock file guard to prevent concurrent instances."""

    def __init__(self, path: Path) -> None:
        self._lock = QLockFile(str(path))
        self._lock.setStaleLockTime(0)

    def acquire(self) -> bool:
        return self._lock.tryLock(0)

    def release(self) -> None:
        if self._lock.isLocked():
            self._lock.unlock()


def _run_application_once(argv: Iterable[str]) -> Tuple[int, bool]:
    """Start the Qt application once and report whether shutdown was intentional."""
    app = QApplication.instance() or QApplication(list(argv))
    app.setApplicationName(APP_NAME)
    app.setQuitOnLastWindowClosed(False)
    coordinator = LayoutCoordinator()
    try:
        coordinator.start()
        exit_code = app.exec()
    finally:
        # A restart must not leave the previous run's windows on screen.
        if not coordinator.manual_shutdown_requested:
            coordinator.close()
    return exit_code, coordinator.manual_shutdown_requested


def main() -> int:
    """Launch the layout with single-instance and recovery safeguards."""
    guard = _InstanceGuard(Path(QDir.tempPath()) / _LOCK_NAME)
    if not guard.acquire():
        _LOGGER.debug("Island layout instance already running; exiting silently.")
        return 0

    backoff_seconds = 2
    max_backoff = 30

    try:
        while True:
            try:
                exit_code, manual = _run_application_once(sys.argv)
            except Exception:  # pragma: no cover - crash guard
                _LOGGER.exception("Layout crashed; attempting automatic recovery.")
                exit_code = 1
                manual = False

            if manual:
                return exit_code

            _LOGGER.warning(
                "Layout exited unexpectedly (code={}). Restarting in {} seconds.",
                exit_code,
                backoff_seconds,
            )
            time.sleep(backoff_seconds)
            backoff_seconds = min(backoff_seconds * 2, max_backoff)
    finally:
        guard.release()


if __name__ == "__main__":
    raise SystemExit(main())
