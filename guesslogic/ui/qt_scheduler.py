"""Scheduler backed by single-shot QTimers."""

from __future__ import annotations

from typing import Callable, List, Optional

from PySide6.QtCore import QObject, QTimer


class QtScheduler:
    def __init__(self, parent: Optional[QObject] = None) -> None:
        self._parent = parent
        self._timers: List[QTimer] = []

    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> QTimer:
        timer = QTimer(self._parent)
        timer.setSingleShot(True)

        def _fire() -> None:
            if timer in self._timers:
                self._timers.remove(timer)
            timer.deleteLater()
            callback()

        timer.timeout.connect(_fire)
        self._timers.append(timer)
        timer.start(max(0, int(delay_ms)))
        return timer

    def cancel_all(self) -> None:
        for timer in self._timers:
            timer.stop()
            timer.deleteLater()
        self._timers.clear()
