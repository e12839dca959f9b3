from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import List, Optional, Tuple

import yaml


class Difficulty(str, Enum):
    EASY = "Easy"
    MEDIUM = "Medium"
    HARD = "Hard"
    EXPERT = "Expert"


@dataclass(frozen=True)
class Level:
    id: int
    pattern: Tuple[float, ...]
    answer: float
    difficulty: Difficulty
    hint: str
    logic: str


def default_catalog_path() -> Path:
    return Path(__file__).resolve().parent.parent / "data" / "levels.yaml"


def _is_number(value: object) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


class LevelCatalog:
    """Read-only, id-ordered collection of puzzles loaded from YAML."""

    def __init__(self, path: Optional[Path] = None) -> None:
        self._path = Path(path) if path is not None else default_catalog_path()
        self._levels = self._load_levels()
        self._index_by_id = {level.id: idx for idx, level in enumerate(self._levels)}

    def __len__(self) -> int:
        return len(self._levels)

    def all(self) -> List[Level]:
        return list(self._levels)

    def count(self) -> int:
        return len(self._levels)

    def get(self, index: int) -> Level:
        if index < 0 or index >= len(self._levels):
            raise IndexError(f"Level index out of range: {index}")
        return self._levels[index]

    def find_by_id(self, level_id: int) -> Optional[int]:
        return self._index_by_id.get(level_id)

    def _load_levels(self) -> List[Level]:
        if not self._path.exists():
            raise FileNotFoundError(f"Level catalog not found: {self._path}")

        name = self._path.name
        raw = yaml.safe_load(self._path.read_text(encoding="utf-8"))
        if not raw or not isinstance(raw, dict):
            raise ValueError(f"{name}: expected YAML mapping with 'levels'")
        records = raw.get("levels")
        if not records or not isinstance(records, list):
            raise ValueError(f"{name}: 'levels' must be a non-empty list")

        levels: List[Level] = []
        for position, record in enumerate(records, start=1):
            levels.append(self._parse_level(name, position, record))
        return levels

    @staticmethod
    def _parse_level(name: str, position: int, record: object) -> Level:
        where = f"{name}: level #{position}"
        if not isinstance(record, dict):
            raise ValueError(f"{where}: expected a mapping")

        level_id = record.get("id")
        if not isinstance(level_id, int) or isinstance(level_id, bool):
            raise ValueError(f"{where}: missing or invalid 'id'")
        # ids are dense and in order, so the id doubles as the unlock position
        if level_id != position:
            raise ValueError(f"{where}: expected id {position}, got {level_id}")

        pattern = record.get("pattern")
        if not pattern or not isinstance(pattern, list) or not all(_is_number(n) for n in pattern):
            raise ValueError(f"{where}: 'pattern' must be a non-empty list of numbers")

        answer = record.get("answer")
        if not _is_number(answer):
            raise ValueError(f"{where}: missing or invalid 'answer'")

        try:
            difficulty = Difficulty(record.get("difficulty"))
        except ValueError:
            raise ValueError(f"{where}: unknown difficulty {record.get('difficulty')!r}") from None

        hint = record.get("hint")
        logic = record.get("logic")
        if not isinstance(hint, str) or not hint.strip():
            raise ValueError(f"{where}: missing or invalid 'hint'")
        if not isinstance(logic, str) or not logic.strip():
            raise ValueError(f"{where}: missing or invalid 'logic'")

        return Level(
            id=level_id,
            pattern=tuple(pattern),
            answer=float(answer),
            difficulty=difficulty,
            hint=hint.strip(),
            logic=logic.strip(),
        )
