"""Theme colors and color utilities for the UI."""

from guesslogic.core.levels import Difficulty


class GameColors:
    """Emerald palette shared by every screen."""

    BG_TOP = "#064e3b"
    BG_BOTTOM = "#022c22"

    PRIMARY = "#10b981"
    PRIMARY_LIGHT = "#6ee7b7"
    PRIMARY_DARK = "#047857"

    SUCCESS = "#22c55e"
    ERROR = "#ef4444"
    HINT_BG = "#fffbeb"
    HINT_TEXT = "#78350f"
    GOLD = "#facc15"

    CARD_BG = "rgba(255, 255, 255, 0.92)"
    CARD_BORDER = "rgba(167, 243, 208, 0.5)"
    PANEL_BG = "rgba(6, 78, 59, 0.55)"

    TEXT_PRIMARY = "#064e3b"
    TEXT_ON_DARK = "#ecfdf5"
    TEXT_MUTED = "#6ee7b7"

    TILE_UNLOCKED = "#ecfdf5"
    TILE_LOCKED = "#065f46"


DIFFICULTY_COLORS = {
    Difficulty.EASY: "#16a34a",
    Difficulty.MEDIUM: "#d97706",
    Difficulty.HARD: "#ea580c",
    Difficulty.EXPERT: "#dc2626",
}


def difficulty_color(difficulty: Difficulty) -> str:
    return DIFFICULTY_COLORS[Difficulty(difficulty)]


def blend_hex(a: str, b: str, t: float) -> str:
    """Blend two #RRGGBB colors. t=0 -> a, t=1 -> b."""
    try:
        a = a.strip()
        b = b.strip()
        if not (a.startswith("#") and b.startswith("#") and len(a) == 7 and len(b) == 7):
            return a
        t = max(0.0, min(1.0, float(t)))
        ar, ag, ab = int(a[1:3], 16), int(a[3:5], 16), int(a[5:7], 16)
        br, bg, bb = int(b[1:3], 16), int(b[3:5], 16), int(b[5:7], 16)
        r = int(ar + (br - ar) * t)
        g = int(ag + (bg - ag) * t)
        bl = int(ab + (bb - ab) * t)
        return f"#{r:02X}{g:02X}{bl:02X}"
    except (AttributeError, TypeError, ValueError):
        return a
