"""Shared fixtures: a small on-disk catalog and a temp-file progress store."""

from __future__ import annotations

from pathlib import Path
from typing import Callable, List

import pytest
import yaml

from guesslogic.core.levels import LevelCatalog
from guesslogic.core.progress import ProgressStore


SAMPLE_LEVELS: List[dict] = [
    {"id": 1, "pattern": [2, 4, 6, 8], "answer": 7, "difficulty": "Easy",
     "hint": "Count.", "logic": "Authored to have answer 7."},
    {"id": 2, "pattern": [1, 3, 9], "answer": 27, "difficulty": "Medium",
     "hint": "Multiply.", "logic": "Multiply by 3."},
    {"id": 3, "pattern": [1, 2, 6, 24], "answer": 120, "difficulty": "Hard",
     "hint": "Factorials.", "logic": "Multiply by 2, 3, 4, 5."},
    {"id": 4, "pattern": [100, 50, 25], "answer": 12.5, "difficulty": "Expert",
     "hint": "Halve it.", "logic": "Divide by 2."},
]


def write_catalog(path: Path, levels: List[dict]) -> Path:
    path.write_text(yaml.dump({"levels": levels}, allow_unicode=True, default_flow_style=False), encoding="utf-8")
    return path


@pytest.fixture()
def catalog_file(tmp_path: Path) -> Callable[[List[dict]], Path]:
    """Return a writer that stores *levels* as levels.yaml under tmp_path."""

    def _write(levels: List[dict]) -> Path:
        return write_catalog(tmp_path / "levels.yaml", levels)

    return _write


@pytest.fixture()
def catalog(tmp_path: Path) -> LevelCatalog:
    return LevelCatalog(write_catalog(tmp_path / "levels.yaml", SAMPLE_LEVELS))


@pytest.fixture()
def store(tmp_path: Path) -> ProgressStore:
    """ProgressStore backed by a temp file so tests don't touch ~/.guesslogic."""
    return ProgressStore(tmp_path / "progress" / "progress.json")
