from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Callable, List, Mapping, Optional, Protocol

from guesslogic.core.evaluator import is_submittable
from guesslogic.core.levels import Level, LevelCatalog
from guesslogic.core.progress import ProgressStore
from guesslogic.core.scheduler import Scheduler
from guesslogic.core.state import (
    Action,
    Advance,
    CancelScheduled,
    ClearProgress,
    Cue,
    Delay,
    EditInput,
    Effect,
    Feedback,
    GoHome,
    Notify,
    OpenMap,
    Phase,
    ResetProgress,
    RevealHint,
    SaveScore,
    SaveUnlocked,
    Schedule,
    SelectLevel,
    SessionState,
    SetMusic,
    Start,
    Submit,
    ToggleMusic,
    ToggleSound,
    ToggleVibration,
    reduce,
)

logger = logging.getLogger(__name__)


@dataclass
class GameConfig:
    """Pacing and debug switches for a session."""

    correct_delay_ms: int = 1000
    wrong_delay_ms: int = 1000
    unlock_all: bool = False

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "GameConfig":
        env = os.environ if environ is None else environ
        return cls(unlock_all=env.get("GUESSLOGIC_UNLOCK_ALL") == "1")

    def delay_ms(self, delay: Delay) -> int:
        if delay is Delay.AFTER_CORRECT:
            return self.correct_delay_ms
        return self.wrong_delay_ms


class Notifier(Protocol):
    def play(self, cue: Cue) -> None:
        ...

    def set_music(self, playing: bool) -> None:
        ...


class NullNotifier:
    """Notifier that stays silent (tests, headless runs)."""

    def play(self, cue: Cue) -> None:
        logger.debug("cue: %s", cue.value)

    def set_music(self, playing: bool) -> None:
        logger.debug("music: %s", "on" if playing else "off")


class GameSession:
    """Owns the live session state and carries out the reducer's effects.

    Every player action goes through :meth:`dispatch`. The new state is in
    place before any effect runs, and effects run in the order the reducer
    produced them, so a solve's score and unlock are persisted before the
    delayed move to the summary screen is even scheduled.
    """

    def __init__(
        self,
        catalog: LevelCatalog,
        store: ProgressStore,
        scheduler: Scheduler,
        notifier: Optional[Notifier] = None,
        config: Optional[GameConfig] = None,
    ) -> None:
        self._catalog = catalog
        self._store = store
        self._scheduler = scheduler
        self._notifier: Notifier = notifier if notifier is not None else NullNotifier()
        self._config = config if config is not None else GameConfig()
        self._listeners: List[Callable[[SessionState], None]] = []
        self._state = self._initial_state()

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def catalog(self) -> LevelCatalog:
        return self._catalog

    @property
    def config(self) -> GameConfig:
        return self._config

    def on_change(self, callback: Callable[[SessionState], None]) -> None:
        """Register *callback* to be called with the new state after every change."""
        self._listeners.append(callback)

    def dispatch(self, action: Action) -> SessionState:
        previous = self._state
        step = reduce(previous, action, self._catalog)
        if step.state is previous and not step.effects:
            logger.debug("Ignored %s in phase %s", type(action).__name__, previous.phase.value)
            return previous

        self._state = step.state
        for effect in step.effects:
            self._run_effect(effect)
        if step.state is not previous:
            for listener in list(self._listeners):
                listener(self._state)
        return self._state

    # -- player actions ----------------------------------------------------

    def start(self) -> SessionState:
        return self.dispatch(Start())

    def select_level(self, level_id: int) -> SessionState:
        return self.dispatch(SelectLevel(level_id))

    def edit_input(self, text: str) -> SessionState:
        return self.dispatch(EditInput(text))

    def submit(self) -> SessionState:
        return self.dispatch(Submit())

    def reveal_hint(self) -> SessionState:
        return self.dispatch(RevealHint())

    def advance(self) -> SessionState:
        return self.dispatch(Advance())

    def open_map(self) -> SessionState:
        return self.dispatch(OpenMap())

    def go_home(self) -> SessionState:
        return self.dispatch(GoHome())

    def reset_progress(self) -> SessionState:
        return self.dispatch(ResetProgress())

    def toggle_sound(self) -> SessionState:
        return self.dispatch(ToggleSound())

    def toggle_music(self) -> SessionState:
        return self.dispatch(ToggleMusic())

    def toggle_vibration(self) -> SessionState:
        return self.dispatch(ToggleVibration())

    # -- queries -------------------------------------------------------------

    def current_level(self) -> Optional[Level]:
        index = self._state.current_level_index
        if index is None:
            return None
        return self._catalog.get(index)

    def can_submit(self) -> bool:
        s = self._state
        return s.phase is Phase.PLAYING and s.feedback is Feedback.NONE and is_submittable(s.raw_input)

    def is_unlocked(self, level_id: int) -> bool:
        return level_id in self._state.unlocked

    def progress_percent(self) -> int:
        count = self._catalog.count()
        if not count:
            return 0
        return round(len(self._state.unlocked) / count * 100)

    def has_next_level(self) -> bool:
        index = self._state.current_level_index
        return index is not None and index + 1 < self._catalog.count()

    def next_label(self) -> str:
        return "Advance" if self.has_next_level() else "Grand Finale"

    # -- internals -----------------------------------------------------------

    def _initial_state(self) -> SessionState:
        known = {level.id for level in self._catalog.all()}
        if self._config.unlock_all:
            unlocked = known
        else:
            unlocked = {i for i in self._store.load_unlocked() if i in known}
        return SessionState.initial(unlocked=unlocked, score=self._store.load_score())

    def _run_effect(self, effect: Effect) -> None:
        if isinstance(effect, SaveScore):
            self._persist(self._store.save_score, effect.score)
            logger.info("Score is now %d", effect.score)
        elif isinstance(effect, SaveUnlocked):
            if self._config.unlock_all:
                logger.debug("unlock_all is set; not persisting unlocked levels")
                return
            self._persist(self._store.save_unlocked, effect.level_ids)
            logger.info("Unlocked levels: %s", sorted(effect.level_ids))
        elif isinstance(effect, ClearProgress):
            self._persist(self._store.reset)
            logger.info("Progress reset")
        elif isinstance(effect, Notify):
            self._notifier.play(effect.cue)
        elif isinstance(effect, SetMusic):
            self._notifier.set_music(effect.playing)
        elif isinstance(effect, Schedule):
            action = effect.action
            self._scheduler.call_later(self._config.delay_ms(effect.delay), lambda: self.dispatch(action))
        elif isinstance(effect, CancelScheduled):
            self._scheduler.cancel_all()
        else:
            raise TypeError(f"Unknown effect: {effect!r}")

    def _persist(self, write: Callable[..., None], *args: object) -> None:
        # Progress writes are best-effort; gameplay carries on regardless.
        try:
            write(*args)
        except (OSError, ValueError, TypeError) as e:
            logger.warning("Could not persist progress (%s): %s", getattr(write, "__name__", write), e)
