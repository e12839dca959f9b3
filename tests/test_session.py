"""Tests for guesslogic.core.session – the session engine end to end."""

from __future__ import annotations

from pathlib import Path
from typing import List

import pytest

from guesslogic.core.levels import LevelCatalog
from guesslogic.core.progress import ProgressStore
from guesslogic.core.scheduler import ManualScheduler
from guesslogic.core.scoring import score
from guesslogic.core.session import GameConfig, GameSession, NullNotifier
from guesslogic.core.state import Cue, Feedback, Phase, SessionState


class RecordingNotifier:
    def __init__(self) -> None:
        self.cues: List[Cue] = []
        self.music: List[bool] = []

    def play(self, cue: Cue) -> None:
        self.cues.append(cue)

    def set_music(self, playing: bool) -> None:
        self.music.append(playing)


class BrokenStore(ProgressStore):
    """Store whose writes always fail."""

    def save_score(self, score: int) -> None:
        raise OSError("disk full")

    def save_unlocked(self, level_ids) -> None:
        raise OSError("disk full")


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture()
def scheduler() -> ManualScheduler:
    return ManualScheduler()


@pytest.fixture()
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture()
def session(catalog: LevelCatalog, store: ProgressStore, scheduler: ManualScheduler, notifier: RecordingNotifier) -> GameSession:
    return GameSession(catalog, store, scheduler, notifier=notifier)


def _play(session: GameSession, level_id: int) -> None:
    session.start()
    session.select_level(level_id)


# ---------------------------------------------------------------------------
# GameConfig
# ---------------------------------------------------------------------------

class TestGameConfig:
    def test_defaults(self):
        c = GameConfig()
        assert c.correct_delay_ms == 1000
        assert c.wrong_delay_ms == 1000
        assert c.unlock_all is False

    def test_from_env(self):
        assert GameConfig.from_env({"GUESSLOGIC_UNLOCK_ALL": "1"}).unlock_all is True
        assert GameConfig.from_env({"GUESSLOGIC_UNLOCK_ALL": "yes"}).unlock_all is False
        assert GameConfig.from_env({}).unlock_all is False


# ---------------------------------------------------------------------------
# Construction
# ---------------------------------------------------------------------------

class TestConstruction:
    def test_fresh_progress(self, session: GameSession):
        assert session.state == SessionState.initial()
        assert session.state.phase is Phase.HOME

    def test_loads_saved_progress(self, catalog, store, scheduler):
        store.save_unlocked({1, 2, 3})
        store.save_score(450)
        s = GameSession(catalog, store, scheduler)
        assert s.state.unlocked == frozenset({1, 2, 3})
        assert s.state.score == 450

    def test_ignores_ids_outside_catalog(self, catalog, store, scheduler):
        store.save_unlocked({1, 2, 77})
        s = GameSession(catalog, store, scheduler)
        assert s.state.unlocked == frozenset({1, 2})

    def test_unlock_all(self, catalog, store, scheduler):
        s = GameSession(catalog, store, scheduler, config=GameConfig(unlock_all=True))
        assert s.state.unlocked == frozenset({1, 2, 3, 4})

    def test_default_notifier(self, catalog, store, scheduler):
        s = GameSession(catalog, store, scheduler)
        s.start()
        assert s.state.phase is Phase.LEVEL_SELECT

    def test_null_notifier_is_silent(self):
        n = NullNotifier()
        n.play(Cue.CLICK)
        n.set_music(True)


# ---------------------------------------------------------------------------
# Playing a level
# ---------------------------------------------------------------------------

class TestPlay:
    def test_locked_level_changes_nothing(self, session: GameSession, store: ProgressStore):
        session.start()
        before = session.state
        session.select_level(2)
        assert session.state is before
        assert store.load_unlocked() == {1}

    def test_wrong_then_correct_scenario(self, session: GameSession, scheduler: ManualScheduler, store: ProgressStore):
        _play(session, 1)
        session.edit_input("5")
        session.submit()
        assert session.state.feedback is Feedback.WRONG
        assert session.state.attempts == 1

        scheduler.advance(1000)
        assert session.state.feedback is Feedback.NONE
        assert session.state.attempts == 1
        assert session.state.raw_input == "5"

        session.edit_input("7")
        session.submit()
        assert session.state.feedback is Feedback.CORRECT
        assert session.state.last_award == 80
        assert session.state.score == 80
        assert session.state.unlocked == frozenset({1, 2})
        # persisted before the summary screen appears
        assert store.load_score() == 80
        assert store.load_unlocked() == {1, 2}
        assert session.state.phase is Phase.PLAYING

        scheduler.advance(999)
        assert session.state.phase is Phase.PLAYING
        scheduler.advance(1)
        assert session.state.phase is Phase.SUMMARY

    def test_expert_first_try(self, catalog, store, scheduler):
        store.save_unlocked({1, 2, 3, 4})
        s = GameSession(catalog, store, scheduler)
        _play(s, 4)
        s.edit_input("12.5")
        s.submit()
        assert s.state.feedback is Feedback.CORRECT
        assert s.state.last_award == 300
        assert s.state.unlocked == frozenset({1, 2, 3, 4})

    def test_score_accumulates_across_levels(self, catalog, store, scheduler):
        store.save_score(1000)
        s = GameSession(catalog, store, scheduler)
        _play(s, 1)
        s.edit_input("7")
        s.submit()
        scheduler.advance(1000)
        s.advance()
        assert s.state.current_level_index == 1
        for _ in range(2):
            s.edit_input("1")
            s.submit()
            scheduler.advance(1000)
        s.edit_input("27")
        s.submit()
        expected = 1000 + score(catalog.get(0).difficulty, 0) + score(catalog.get(1).difficulty, 2)
        assert s.state.score == expected
        assert store.load_score() == expected

    def test_submit_during_wrong_delay_is_rejected(self, session: GameSession, scheduler: ManualScheduler):
        _play(session, 1)
        session.edit_input("5")
        session.submit()
        session.edit_input("7")
        session.submit()
        assert session.state.attempts == 1
        assert session.state.feedback is Feedback.WRONG
        scheduler.advance(1000)
        session.submit()
        assert session.state.feedback is Feedback.CORRECT

    def test_submit_after_correct_is_rejected(self, session: GameSession, notifier: RecordingNotifier):
        _play(session, 1)
        session.edit_input("7")
        session.submit()
        score_after = session.state.score
        session.submit()
        assert session.state.score == score_after
        assert notifier.cues.count(Cue.SUCCESS) == 1

    def test_reentering_level_resets_attempts(self, session: GameSession, scheduler: ManualScheduler):
        _play(session, 1)
        for _ in range(3):
            session.edit_input("0")
            session.submit()
            scheduler.advance(1000)
        assert session.state.attempts == 3
        session.open_map()
        session.select_level(1)
        assert session.state.attempts == 0
        assert session.state.total_attempts == 3

    def test_cues(self, session: GameSession, notifier: RecordingNotifier):
        _play(session, 1)
        session.edit_input("5")
        session.submit()
        assert notifier.cues == [Cue.CLICK, Cue.CLICK, Cue.ERROR, Cue.VIBRATE]

    def test_can_submit(self, session: GameSession, scheduler: ManualScheduler):
        _play(session, 1)
        assert not session.can_submit()
        session.edit_input("abc")
        assert not session.can_submit()
        session.edit_input("5")
        assert session.can_submit()
        session.submit()
        assert not session.can_submit()
        scheduler.advance(1000)
        assert session.can_submit()


# ---------------------------------------------------------------------------
# Timers and navigation
# ---------------------------------------------------------------------------

class TestTimers:
    def test_leaving_cancels_pending_summary(self, session: GameSession, scheduler: ManualScheduler):
        _play(session, 1)
        session.edit_input("7")
        session.submit()
        session.go_home()
        assert scheduler.pending() == 0
        scheduler.advance(5000)
        assert session.state.phase is Phase.HOME

    def test_stale_clear_does_not_touch_new_level(self, catalog, store, scheduler):
        store.save_unlocked({1, 2})
        s = GameSession(catalog, store, scheduler)
        _play(s, 1)
        s.edit_input("5")
        s.submit()
        s.open_map()
        s.select_level(2)
        s.edit_input("1")
        s.submit()
        assert s.state.feedback is Feedback.WRONG
        scheduler.advance(1000)
        assert s.state.feedback is Feedback.NONE
        assert s.state.current_level_index == 1

    def test_configurable_delays(self, catalog, store, scheduler):
        s = GameSession(catalog, store, scheduler, config=GameConfig(correct_delay_ms=50, wrong_delay_ms=10))
        _play(s, 1)
        s.edit_input("5")
        s.submit()
        scheduler.advance(10)
        assert s.state.feedback is Feedback.NONE
        s.edit_input("7")
        s.submit()
        scheduler.advance(50)
        assert s.state.phase is Phase.SUMMARY

    def test_grand_finale(self, catalog, store, scheduler):
        store.save_unlocked({1, 2, 3, 4})
        s = GameSession(catalog, store, scheduler)
        _play(s, 4)
        assert s.next_label() == "Grand Finale"
        s.edit_input("12.5")
        s.submit()
        scheduler.advance(1000)
        s.advance()
        assert s.state.phase is Phase.HOME

    def test_next_label_advance(self, session: GameSession):
        _play(session, 1)
        assert session.has_next_level()
        assert session.next_label() == "Advance"


# ---------------------------------------------------------------------------
# Queries, listeners, reset
# ---------------------------------------------------------------------------

class TestQueries:
    def test_current_level(self, session: GameSession):
        assert session.current_level() is None
        _play(session, 1)
        assert session.current_level().id == 1

    def test_progress_percent(self, catalog, store, scheduler):
        store.save_unlocked({1, 2, 3})
        s = GameSession(catalog, store, scheduler)
        assert s.progress_percent() == 75

    def test_is_unlocked(self, session: GameSession):
        assert session.is_unlocked(1)
        assert not session.is_unlocked(2)

    def test_listener_called_on_change_only(self, session: GameSession):
        seen: List[Phase] = []
        session.on_change(lambda state: seen.append(state.phase))
        session.select_level(1)  # ignored in HOME
        session.start()
        session.select_level(3)  # locked
        session.select_level(1)
        assert seen == [Phase.LEVEL_SELECT, Phase.PLAYING]

    def test_reset_progress(self, session: GameSession, store: ProgressStore, scheduler: ManualScheduler):
        _play(session, 1)
        session.edit_input("7")
        session.submit()
        session.reset_progress()
        assert session.state.phase is Phase.HOME
        assert session.state.score == 0
        assert session.state.unlocked == frozenset({1})
        assert store.load_score() == 0
        assert not store.file_path.exists()
        scheduler.advance(5000)
        assert session.state.phase is Phase.HOME

    def test_toggle_music(self, session: GameSession, notifier: RecordingNotifier):
        session.toggle_music()
        session.toggle_sound()
        assert notifier.music == [True, False]

    def test_muted_session_plays_nothing(self, session: GameSession, notifier: RecordingNotifier):
        session.toggle_sound()
        session.toggle_vibration()
        _play(session, 1)
        session.edit_input("5")
        session.submit()
        assert notifier.cues == []


# ---------------------------------------------------------------------------
# Best-effort persistence
# ---------------------------------------------------------------------------

class TestPersistenceFailures:
    def test_write_failure_does_not_break_play(self, catalog, tmp_path: Path, scheduler, caplog):
        s = GameSession(catalog, BrokenStore(tmp_path / "p.json"), scheduler)
        _play(s, 1)
        s.edit_input("7")
        s.submit()
        assert s.state.feedback is Feedback.CORRECT
        assert s.state.score == 100
        assert s.state.unlocked == frozenset({1, 2})
        assert "Could not persist progress" in caplog.text
        scheduler.advance(1000)
        assert s.state.phase is Phase.SUMMARY

    def test_unlock_all_not_persisted(self, catalog, store, scheduler):
        s = GameSession(catalog, store, scheduler, config=GameConfig(unlock_all=True))
        _play(s, 1)
        s.edit_input("7")
        s.submit()
        assert store.load_unlocked() == {1}
        assert store.load_score() == 100
