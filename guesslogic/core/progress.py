from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, Optional, Set

logger = logging.getLogger(__name__)

UNLOCKED_KEY = "gtl_unlocked"
SCORE_KEY = "gtl_score"


def _default_unlocked() -> Set[int]:
    return {1}


class ProgressStore:
    """Stores unlocked levels and cumulative score. Persists to disk across app restarts.
    File: ~/.guesslogic/progress.json. Reads fall back to defaults and writes are
    best-effort, so a broken file only ever costs progress, never a crash."""

    def __init__(self, file_path: Optional[Path] = None) -> None:
        self._file_path = Path(file_path) if file_path is not None else Path.home() / ".guesslogic" / "progress.json"
        self._data = self._load()

    @property
    def file_path(self) -> Path:
        return self._file_path

    def get(self, key: str, default: Any = None) -> Any:
        return self._data.get(key, default)

    def set(self, key: str, value: Any) -> None:
        self._data[key] = value
        self._save()

    def load_unlocked(self) -> Set[int]:
        """Return the unlocked level ids; always contains level 1."""
        raw = self._data.get(UNLOCKED_KEY)
        if raw is None:
            return _default_unlocked()
        if not isinstance(raw, list) or not all(isinstance(i, int) and not isinstance(i, bool) for i in raw):
            logger.warning("Ignoring malformed %s in %s: %r", UNLOCKED_KEY, self._file_path, raw)
            return _default_unlocked()
        unlocked = {i for i in raw if i >= 1}
        unlocked.add(1)
        return unlocked

    def load_score(self) -> int:
        raw = self._data.get(SCORE_KEY)
        if raw is None:
            return 0
        try:
            value = int(raw)
        except (TypeError, ValueError):
            logger.warning("Ignoring malformed %s in %s: %r", SCORE_KEY, self._file_path, raw)
            return 0
        if isinstance(raw, bool) or value < 0:
            logger.warning("Ignoring malformed %s in %s: %r", SCORE_KEY, self._file_path, raw)
            return 0
        return value

    def save_unlocked(self, level_ids: Iterable[int]) -> None:
        self.set(UNLOCKED_KEY, sorted(set(level_ids)))

    def save_score(self, score: int) -> None:
        self.set(SCORE_KEY, int(score))

    def reset(self) -> None:
        """Clear all progress. Only called when the player resets from the home screen."""
        self._data = {}
        try:
            self._file_path.unlink(missing_ok=True)
        except OSError as e:
            logger.warning("Could not remove progress file %s: %s", self._file_path, e)

    def _load(self) -> Dict[str, Any]:
        if not self._file_path.exists():
            return {}
        try:
            payload = json.loads(self._file_path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, OSError, UnicodeDecodeError) as e:
            logger.warning("Could not load progress from %s: %s", self._file_path, e)
            return {}
        if not isinstance(payload, dict):
            logger.warning("Could not load progress from %s: expected a JSON object", self._file_path)
            return {}
        return payload

    def _save(self) -> None:
        try:
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
            self._file_path.write_text(json.dumps(self._data, indent=2), encoding="utf-8")
        except OSError as e:
            logger.warning("Could not save progress to %s: %s", self._file_path, e)
