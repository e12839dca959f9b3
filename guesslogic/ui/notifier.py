"""Audio/haptic cues for the desktop build."""

from __future__ import annotations

import logging

from PySide6.QtWidgets import QApplication

from guesslogic.core.state import Cue

logger = logging.getLogger(__name__)


class QtNotifier:
    """Rings the system bell for error cues; other cues are only logged.

    The reducer already drops cues the player switched off, so everything
    that reaches here is meant to be heard.
    """

    def play(self, cue: Cue) -> None:
        logger.debug("cue: %s", cue.value)
        if cue is Cue.ERROR:
            QApplication.beep()

    def set_music(self, playing: bool) -> None:
        logger.info("Background music %s", "on" if playing else "off")
