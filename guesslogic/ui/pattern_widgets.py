"""Puzzle UI: the visible sequence with the hidden term, and the level tile."""

from __future__ import annotations

from typing import Callable, Optional, Sequence

from PySide6.QtCore import Qt
from PySide6.QtGui import QColor, QPainter, QPen
from PySide6.QtWidgets import QPushButton, QWidget

from guesslogic.core.state import Feedback
from guesslogic.ui.colors import GameColors, blend_hex, difficulty_color
from guesslogic.ui.models import LevelTileState, format_number


class PatternSequenceWidget(QWidget):
    """Horizontal row of boxes: the shown terms, then a dashed "?" box."""

    def __init__(self, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self._terms: list[str] = []
        self._feedback = Feedback.NONE
        self._answer_text = "?"
        self.setFixedHeight(110)
        self.setMinimumWidth(300)

    def set_pattern(self, pattern: Sequence[float]) -> None:
        self._terms = [format_number(n) for n in pattern]
        self._answer_text = "?"
        self._feedback = Feedback.NONE
        self.update()

    def set_feedback(self, feedback: Feedback, answer_text: str = "?") -> None:
        """Tint the hidden box; once solved it shows *answer_text*."""
        self._feedback = feedback
        self._answer_text = answer_text if feedback is Feedback.CORRECT else "?"
        self.update()

    def paintEvent(self, event) -> None:
        super().paintEvent(event)
        if not self._terms:
            return
        painter = QPainter(self)
        painter.setRenderHint(QPainter.Antialiasing, True)

        count = len(self._terms) + 1
        spacing = 12
        box_size = max(40, min(90, (self.width() - spacing * (count - 1)) // count))
        total_width = count * (box_size + spacing) - spacing
        start_x = max(0, (self.width() - total_width) // 2)
        y = (self.height() - box_size) // 2

        font = painter.font()
        font.setBold(True)
        font.setPointSize(max(12, box_size // 3))
        painter.setFont(font)

        for i, term in enumerate(self._terms):
            x = start_x + i * (box_size + spacing)
            painter.setBrush(QColor(GameColors.TILE_UNLOCKED))
            painter.setPen(QPen(QColor(GameColors.PRIMARY_LIGHT), 2))
            painter.drawRoundedRect(x, y, box_size, box_size, 14, 14)
            painter.setPen(QColor(GameColors.PRIMARY_DARK))
            painter.drawText(x, y, box_size, box_size, Qt.AlignCenter, term)

        x = start_x + len(self._terms) * (box_size + spacing)
        if self._feedback is Feedback.CORRECT:
            border = GameColors.SUCCESS
        elif self._feedback is Feedback.WRONG:
            border = GameColors.ERROR
        else:
            border = GameColors.PRIMARY
        painter.setBrush(QColor(blend_hex(GameColors.TILE_UNLOCKED, border, 0.15)))
        painter.setPen(QPen(QColor(border), 3, Qt.DashLine))
        painter.drawRoundedRect(x, y, box_size, box_size, 14, 14)
        painter.setPen(QColor(border))
        painter.drawText(x, y, box_size, box_size, Qt.AlignCenter, self._answer_text)


class LevelTile(QPushButton):
    """A square level button; locked tiles are dimmed and inert."""

    def __init__(self, state: LevelTileState, on_click: Callable[[int], None], parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self._level_id = state.level.id
        self.setFixedSize(84, 84)
        self.setCursor(Qt.PointingHandCursor if state.unlocked else Qt.ForbiddenCursor)
        self.setEnabled(state.unlocked)
        if state.unlocked:
            self.setText(f"{state.level.id}\n{state.level.difficulty.value}")
        else:
            self.setText(f"🔒\n{state.level.id}")
        self._apply_styles(state)
        self.clicked.connect(lambda: on_click(self._level_id))

    def _apply_styles(self, state: LevelTileState) -> None:
        if state.unlocked:
            accent = difficulty_color(state.level.difficulty)
            border = accent if state.is_current else GameColors.PRIMARY_LIGHT
            self.setStyleSheet(
                f"""
                QPushButton {{
                    background: {GameColors.TILE_UNLOCKED};
                    color: {accent};
                    border: 2px solid {border};
                    border-radius: 16px;
                    font-size: 14px;
                    font-weight: 900;
                }}
                QPushButton:hover {{ background: white; border-color: {GameColors.PRIMARY}; }}
                """
            )
        else:
            muted = blend_hex(GameColors.TILE_LOCKED, GameColors.BG_BOTTOM, 0.4)
            self.setStyleSheet(
                f"""
                QPushButton {{
                    background: {muted};
                    color: {GameColors.TEXT_MUTED};
                    border: 2px solid transparent;
                    border-radius: 16px;
                    font-size: 13px;
                }}
                """
            )
