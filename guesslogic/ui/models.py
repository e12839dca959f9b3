"""Data models used by the UI."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List

from guesslogic.core.levels import Level
from guesslogic.core.session import GameSession


@dataclass
class LevelTileState:
    """UI state for a single tile on the level map."""

    level: Level
    unlocked: bool
    is_current: bool = False


def build_level_tiles(session: GameSession) -> List[LevelTileState]:
    """One tile per catalog level; the highest unlocked level is marked current."""
    tiles = [
        LevelTileState(level=level, unlocked=session.is_unlocked(level.id))
        for level in session.catalog.all()
    ]
    unlocked = [tile for tile in tiles if tile.unlocked]
    if unlocked:
        unlocked[-1].is_current = True
    return tiles


def format_number(value: float) -> str:
    """Render 4.0 as "4" and 12.5 as "12.5"."""
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))
