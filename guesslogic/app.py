"""Application entry point and setup for the Guess the Logic puzzle game."""

import logging
import sys

from PySide6.QtGui import QGuiApplication
from PySide6.QtWidgets import QApplication

from guesslogic.core.levels import LevelCatalog
from guesslogic.core.progress import ProgressStore
from guesslogic.core.session import GameConfig, GameSession
from guesslogic.ui.main_window import MainWindow
from guesslogic.ui.notifier import QtNotifier
from guesslogic.ui.qt_scheduler import QtScheduler


def configure_logging() -> None:
    """Configure application-wide logging with a standard format."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def run() -> None:
    """Initialize the application, load the level catalog and progress, and show the window."""
    configure_logging()
    app = QApplication(sys.argv)
    app.setApplicationName("Guess the Logic")
    app.setApplicationDisplayName("Guess the Logic")

    catalog = LevelCatalog()
    store = ProgressStore()
    config = GameConfig.from_env()
    if config.unlock_all:
        logging.info("GUESSLOGIC_UNLOCK_ALL is set: every level is playable this session")

    scheduler = QtScheduler(app)
    session = GameSession(catalog, store, scheduler, notifier=QtNotifier(), config=config)
    logging.info("Loaded %d levels, %d unlocked, score %d", catalog.count(), len(session.state.unlocked), session.state.score)

    window = MainWindow(session)
    screen = QGuiApplication.primaryScreen()
    if screen is not None:
        geometry = screen.availableGeometry()
        window.resize(min(1200, geometry.width()), min(820, geometry.height()))
    window.show()

    sys.exit(app.exec())


if __name__ == "__main__":
    run()
