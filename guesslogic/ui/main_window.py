from __future__ import annotations

import logging
from typing import Optional

from PySide6.QtCore import Qt
from PySide6.QtGui import QCloseEvent
from PySide6.QtWidgets import (
    QFrame,
    QGridLayout,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QMainWindow,
    QMessageBox,
    QPushButton,
    QScrollArea,
    QStackedWidget,
    QVBoxLayout,
    QWidget,
)

from guesslogic.core.session import GameSession
from guesslogic.core.state import Feedback, Phase, SessionState
from guesslogic.ui.colors import GameColors, difficulty_color
from guesslogic.ui.models import build_level_tiles, format_number
from guesslogic.ui.pattern_widgets import LevelTile, PatternSequenceWidget

logger = logging.getLogger(__name__)

_GRID_COLUMNS = 8


class MainWindow(QMainWindow):
    """Main application window: home hub, level map, puzzle screen and summary.

    The window never decides anything itself. Buttons forward to the
    session, and every state change re-renders the page for the current phase.
    """

    def __init__(self, session: GameSession) -> None:
        super().__init__()
        self._session = session
        self._rendered_unlocked: Optional[frozenset] = None

        self._stack: Optional[QStackedWidget] = None
        self._pages: dict[Phase, QWidget] = {}
        self._score_labels: list[QLabel] = []

        self._build_ui()
        self._session.on_change(self._render)
        self._render(self._session.state)

    # -- construction ------------------------------------------------------

    def _build_ui(self) -> None:
        self.setWindowTitle("Guess the Logic")
        self.setMinimumSize(900, 640)

        root = QWidget()
        root.setObjectName("root")
        root.setStyleSheet(
            f"""
            #root {{
                background: qlineargradient(x1:0, y1:0, x2:0, y2:1,
                    stop:0 {GameColors.BG_TOP}, stop:1 {GameColors.BG_BOTTOM});
            }}
            QLabel {{ color: {GameColors.TEXT_ON_DARK}; }}
            """
        )
        layout = QVBoxLayout(root)
        layout.setContentsMargins(24, 24, 24, 12)

        self._stack = QStackedWidget()
        self._pages[Phase.HOME] = self._build_home_page()
        self._pages[Phase.LEVEL_SELECT] = self._build_levels_page()
        self._pages[Phase.PLAYING] = self._build_playing_page()
        self._pages[Phase.SUMMARY] = self._build_summary_page()
        for page in self._pages.values():
            self._stack.addWidget(page)
        layout.addWidget(self._stack, 1)

        self._footer = QLabel("")
        self._footer.setAlignment(Qt.AlignCenter)
        self._footer.setStyleSheet(f"color: {GameColors.TEXT_MUTED}; font-size: 10px; font-weight: 900; letter-spacing: 2px;")
        layout.addWidget(self._footer)

        self.setCentralWidget(root)

    def _button(self, text: str, primary: bool = True) -> QPushButton:
        button = QPushButton(text)
        button.setCursor(Qt.PointingHandCursor)
        background = GameColors.PRIMARY if primary else GameColors.PANEL_BG
        button.setStyleSheet(
            f"""
            QPushButton {{
                background: {background};
                color: white;
                border: 2px solid {GameColors.CARD_BORDER};
                border-radius: 22px;
                padding: 10px 26px;
                font-size: 16px;
                font-weight: 800;
            }}
            QPushButton:hover {{ background: {GameColors.PRIMARY_DARK}; }}
            QPushButton:disabled {{ background: #9ca3af; }}
            """
        )
        return button

    def _score_label(self) -> QLabel:
        label = QLabel("")
        label.setStyleSheet(f"color: {GameColors.GOLD}; font-size: 18px; font-weight: 900;")
        self._score_labels.append(label)
        return label

    def _header(self, back_text: str, on_back, title: QLabel) -> QWidget:
        header = QFrame()
        header.setStyleSheet(f"QFrame {{ background: {GameColors.PANEL_BG}; border-radius: 20px; }}")
        row = QHBoxLayout(header)
        back = self._button(back_text, primary=False)
        back.clicked.connect(on_back)
        row.addWidget(back, 0)
        row.addWidget(title, 1, Qt.AlignCenter)
        row.addWidget(self._score_label(), 0)
        return header

    def _build_home_page(self) -> QWidget:
        page = QWidget()
        layout = QVBoxLayout(page)
        layout.addStretch(1)

        title = QLabel("Guess the Logic")
        title.setAlignment(Qt.AlignCenter)
        title.setStyleSheet("font-size: 56px; font-weight: 900;")
        subtitle = QLabel("Find the rule behind each sequence and name the missing number.")
        subtitle.setAlignment(Qt.AlignCenter)
        subtitle.setStyleSheet("font-size: 18px;")
        layout.addWidget(title)
        layout.addWidget(subtitle)

        play = self._button("▶  Play Now")
        play.clicked.connect(self._session.start)
        layout.addWidget(play, 0, Qt.AlignCenter)

        toggles = QHBoxLayout()
        toggles.addStretch(1)
        self._sound_button = self._button("", primary=False)
        self._sound_button.clicked.connect(self._session.toggle_sound)
        self._music_button = self._button("", primary=False)
        self._music_button.clicked.connect(self._session.toggle_music)
        self._vibration_button = self._button("", primary=False)
        self._vibration_button.clicked.connect(self._session.toggle_vibration)
        reset = self._button("⟲  Reset", primary=False)
        reset.clicked.connect(self._confirm_reset)
        for button in (self._sound_button, self._music_button, self._vibration_button, reset):
            toggles.addWidget(button)
        toggles.addStretch(1)
        layout.addLayout(toggles)

        self._high_score_label = QLabel("")
        self._high_score_label.setAlignment(Qt.AlignCenter)
        self._high_score_label.setStyleSheet(f"color: {GameColors.GOLD}; font-size: 20px; font-weight: 800;")
        layout.addWidget(self._high_score_label)
        layout.addStretch(1)
        return page

    def _build_levels_page(self) -> QWidget:
        page = QWidget()
        layout = QVBoxLayout(page)
        title = QLabel("Level Selection")
        title.setStyleSheet("font-size: 30px; font-weight: 900;")
        layout.addWidget(self._header("← Home", self._session.go_home, title))

        self._levels_container = QWidget()
        self._levels_grid = QGridLayout(self._levels_container)
        self._levels_grid.setSpacing(12)
        scroll = QScrollArea()
        scroll.setWidgetResizable(True)
        scroll.setFrameShape(QFrame.NoFrame)
        scroll.setStyleSheet("background: transparent;")
        scroll.setWidget(self._levels_container)
        layout.addWidget(scroll, 1)
        return page

    def _build_playing_page(self) -> QWidget:
        page = QWidget()
        layout = QVBoxLayout(page)
        self._level_title = QLabel("")
        self._level_title.setAlignment(Qt.AlignCenter)
        layout.addWidget(self._header("← Map", self._session.open_map, self._level_title))

        card = QFrame()
        card.setStyleSheet(f"QFrame {{ background: {GameColors.CARD_BG}; border-radius: 32px; }}")
        card_layout = QVBoxLayout(card)
        card_layout.setContentsMargins(32, 32, 32, 32)
        card_layout.setSpacing(20)

        self._pattern_widget = PatternSequenceWidget()
        card_layout.addWidget(self._pattern_widget)

        self._answer_input = QLineEdit()
        self._answer_input.setPlaceholderText("Enter next number...")
        self._answer_input.setAlignment(Qt.AlignCenter)
        self._answer_input.setStyleSheet(
            f"""
            QLineEdit {{
                background: {GameColors.TILE_UNLOCKED};
                color: {GameColors.TEXT_PRIMARY};
                border: 3px solid {GameColors.PRIMARY_LIGHT};
                border-radius: 18px;
                padding: 12px;
                font-size: 28px;
                font-weight: 800;
            }}
            """
        )
        self._answer_input.textEdited.connect(self._session.edit_input)
        self._answer_input.returnPressed.connect(self._session.submit)
        card_layout.addWidget(self._answer_input)

        self._submit_button = self._button("Submit Logic")
        self._submit_button.clicked.connect(self._session.submit)
        card_layout.addWidget(self._submit_button)

        self._hint_button = self._button("💡 Unlock Hint", primary=False)
        self._hint_button.clicked.connect(self._session.reveal_hint)
        card_layout.addWidget(self._hint_button, 0, Qt.AlignCenter)

        self._hint_label = QLabel("")
        self._hint_label.setWordWrap(True)
        self._hint_label.setStyleSheet(
            f"QLabel {{ background: {GameColors.HINT_BG}; color: {GameColors.HINT_TEXT};"
            " border-radius: 16px; padding: 16px; font-size: 16px; font-style: italic; }"
        )
        card_layout.addWidget(self._hint_label)

        layout.addWidget(card, 1)

        self._attempts_label = QLabel("")
        self._attempts_label.setAlignment(Qt.AlignCenter)
        self._attempts_label.setStyleSheet("font-size: 16px; font-weight: 800;")
        layout.addWidget(self._attempts_label)
        return page

    def _build_summary_page(self) -> QWidget:
        page = QWidget()
        layout = QVBoxLayout(page)
        layout.addStretch(1)

        victory = QLabel("Victory!")
        victory.setAlignment(Qt.AlignCenter)
        victory.setStyleSheet("font-size: 56px; font-weight: 900;")
        layout.addWidget(victory)

        heading = QLabel("THE HIDDEN LOGIC")
        heading.setAlignment(Qt.AlignCenter)
        heading.setStyleSheet(f"color: {GameColors.TEXT_MUTED}; font-size: 14px; font-weight: 800;")
        layout.addWidget(heading)
        self._logic_label = QLabel("")
        self._logic_label.setAlignment(Qt.AlignCenter)
        self._logic_label.setWordWrap(True)
        self._logic_label.setStyleSheet("font-size: 24px; font-weight: 900; font-style: italic;")
        layout.addWidget(self._logic_label)

        self._gained_label = QLabel("")
        self._gained_label.setAlignment(Qt.AlignCenter)
        self._gained_label.setStyleSheet(f"color: {GameColors.GOLD}; font-size: 32px; font-weight: 900;")
        layout.addWidget(self._gained_label)

        self._advance_button = self._button("")
        self._advance_button.clicked.connect(self._session.advance)
        layout.addWidget(self._advance_button, 0, Qt.AlignCenter)
        select_map = self._button("Select Map", primary=False)
        select_map.clicked.connect(self._session.open_map)
        layout.addWidget(select_map, 0, Qt.AlignCenter)
        layout.addStretch(1)
        return page

    # -- rendering -----------------------------------------------------------

    def _render(self, state: SessionState) -> None:
        if self._stack is None:
            return
        self._stack.setCurrentWidget(self._pages[state.phase])

        for label in self._score_labels:
            label.setText(f"★ {state.score}")
        catalog = self._session.catalog
        self._footer.setText(
            f"LEVELS: {catalog.count()}    PROGRESS: {self._session.progress_percent()}%"
        )

        if state.phase is Phase.HOME:
            self._render_home(state)
        elif state.phase is Phase.LEVEL_SELECT:
            self._render_levels(state)
        elif state.phase is Phase.PLAYING:
            self._render_playing(state)
        elif state.phase is Phase.SUMMARY:
            self._render_summary(state)

    def _render_home(self, state: SessionState) -> None:
        settings = state.settings
        self._sound_button.setText("🔊 Sound" if settings.sound_enabled else "🔇 Muted")
        self._music_button.setText("🎵 Music on" if settings.music_enabled else "🎵 Music off")
        self._vibration_button.setText("📳 Haptics on" if settings.vibration_enabled else "📳 Haptics off")
        self._high_score_label.setText(f"🏆 High Score: {state.score}")

    def _render_levels(self, state: SessionState) -> None:
        if self._rendered_unlocked == state.unlocked:
            return
        while self._levels_grid.count():
            item = self._levels_grid.takeAt(0)
            widget = item.widget()
            if widget is not None:
                widget.setParent(None)
                widget.deleteLater()
        for i, tile_state in enumerate(build_level_tiles(self._session)):
            tile = LevelTile(tile_state, self._session.select_level)
            self._levels_grid.addWidget(tile, i // _GRID_COLUMNS, i % _GRID_COLUMNS)
        self._rendered_unlocked = state.unlocked

    def _render_playing(self, state: SessionState) -> None:
        level = self._session.current_level()
        if level is None:
            return
        color = difficulty_color(level.difficulty)
        self._level_title.setText(
            f"<div style='font-size:12px'>LEVEL {level.id}</div>"
            f"<div style='font-size:20px; font-weight:900; color:{color}'>{level.difficulty.value} Mode</div>"
        )
        self._pattern_widget.set_pattern(level.pattern)
        self._pattern_widget.set_feedback(state.feedback, format_number(level.answer))

        if self._answer_input.text() != state.raw_input:
            self._answer_input.setText(state.raw_input)
        solved = state.feedback is Feedback.CORRECT
        self._answer_input.setReadOnly(solved)
        if not solved:
            self._answer_input.setFocus()
        self._submit_button.setEnabled(self._session.can_submit())

        self._hint_button.setVisible(not state.hint_visible)
        self._hint_button.setEnabled(not solved)
        self._hint_label.setVisible(state.hint_visible)
        self._hint_label.setText(f"Hint: “{level.hint}”")

        self._attempts_label.setVisible(state.attempts > 0)
        self._attempts_label.setText(f"Attempts: {state.attempts}")

    def _render_summary(self, state: SessionState) -> None:
        level = self._session.current_level()
        if level is None:
            return
        self._logic_label.setText(f"“{level.logic}”")
        self._gained_label.setText(f"+{state.last_award}   ·   Total {state.score}")
        label = self._session.next_label()
        self._advance_button.setText(f"{label} →" if self._session.has_next_level() else f"{label}!")

    # -- events --------------------------------------------------------------

    def _confirm_reset(self) -> None:
        answer = QMessageBox.question(self, "Reset progress", "Reset all progress?")
        if answer == QMessageBox.StandardButton.Yes:
            self._session.reset_progress()

    def closeEvent(self, event: QCloseEvent) -> None:
        logger.info("Closing with score %d", self._session.state.score)
        super().closeEvent(event)
