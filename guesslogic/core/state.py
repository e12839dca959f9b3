"""Session state, player actions and the reducer that ties them together.

``reduce`` is pure: it never touches the progress store, the clock or the
speakers. Instead it returns the effects that the session must carry out,
in the order they must happen (persistence first, then cues, then timers).
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import FrozenSet, Iterable, NamedTuple, Optional, Tuple, Union

from guesslogic.core.evaluator import Verdict, evaluate
from guesslogic.core.levels import LevelCatalog
from guesslogic.core.scoring import score


class Phase(Enum):
    HOME = "home"
    LEVEL_SELECT = "levels"
    PLAYING = "playing"
    SUMMARY = "summary"


class Feedback(Enum):
    NONE = "none"
    CORRECT = "correct"
    WRONG = "wrong"


class Cue(Enum):
    CLICK = "click"
    SUCCESS = "success"
    ERROR = "error"
    VIBRATE = "vibrate"


class Delay(Enum):
    AFTER_CORRECT = "after_correct"
    AFTER_WRONG = "after_wrong"


@dataclass(frozen=True)
class Settings:
    sound_enabled: bool = True
    music_enabled: bool = False
    vibration_enabled: bool = True

    @property
    def music_playing(self) -> bool:
        return self.sound_enabled and self.music_enabled


@dataclass(frozen=True)
class SessionState:
    unlocked: FrozenSet[int] = frozenset({1})
    score: int = 0
    phase: Phase = Phase.HOME
    current_level_index: Optional[int] = None
    attempts: int = 0
    feedback: Feedback = Feedback.NONE
    raw_input: str = ""
    hint_visible: bool = False
    last_award: int = 0
    total_attempts: int = 0
    # Bumped on every level entry; timed actions carry it so stale timers do nothing.
    epoch: int = 0
    settings: Settings = field(default_factory=Settings)

    @classmethod
    def initial(
        cls,
        unlocked: Iterable[int] = (1,),
        score: int = 0,
        settings: Optional[Settings] = None,
    ) -> "SessionState":
        return cls(
            unlocked=frozenset(unlocked) | {1},
            score=score,
            settings=settings if settings is not None else Settings(),
        )


# ---------------------------------------------------------------------------
# Actions
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Start:
    pass


@dataclass(frozen=True)
class SelectLevel:
    level_id: int


@dataclass(frozen=True)
class EditInput:
    text: str


@dataclass(frozen=True)
class Submit:
    pass


@dataclass(frozen=True)
class RevealHint:
    pass


@dataclass(frozen=True)
class ClearFeedback:
    token: int


@dataclass(frozen=True)
class ShowSummary:
    token: int


@dataclass(frozen=True)
class Advance:
    pass


@dataclass(frozen=True)
class OpenMap:
    pass


@dataclass(frozen=True)
class GoHome:
    pass


@dataclass(frozen=True)
class ResetProgress:
    pass


@dataclass(frozen=True)
class ToggleSound:
    pass


@dataclass(frozen=True)
class ToggleMusic:
    pass


@dataclass(frozen=True)
class ToggleVibration:
    pass


Action = Union[
    Start, SelectLevel, EditInput, Submit, RevealHint, ClearFeedback, ShowSummary,
    Advance, OpenMap, GoHome, ResetProgress, ToggleSound, ToggleMusic, ToggleVibration,
]


# ---------------------------------------------------------------------------
# Effects
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class SaveScore:
    score: int


@dataclass(frozen=True)
class SaveUnlocked:
    level_ids: FrozenSet[int]


@dataclass(frozen=True)
class ClearProgress:
    pass


@dataclass(frozen=True)
class Notify:
    cue: Cue


@dataclass(frozen=True)
class SetMusic:
    playing: bool


@dataclass(frozen=True)
class Schedule:
    delay: Delay
    action: Action


@dataclass(frozen=True)
class CancelScheduled:
    pass


Effect = Union[SaveScore, SaveUnlocked, ClearProgress, Notify, SetMusic, Schedule, CancelScheduled]


class Step(NamedTuple):
    state: SessionState
    effects: Tuple[Effect, ...] = ()


# ---------------------------------------------------------------------------
# Reducer
# ---------------------------------------------------------------------------

def _cue(state: SessionState, cue: Cue) -> Tuple[Effect, ...]:
    if cue is Cue.VIBRATE:
        return (Notify(cue),) if state.settings.vibration_enabled else ()
    return (Notify(cue),) if state.settings.sound_enabled else ()


def _enter_level(state: SessionState, index: int) -> Step:
    entered = replace(
        state,
        phase=Phase.PLAYING,
        current_level_index=index,
        attempts=0,
        feedback=Feedback.NONE,
        raw_input="",
        hint_visible=False,
        last_award=0,
        epoch=state.epoch + 1,
    )
    return Step(entered, (CancelScheduled(),) + _cue(state, Cue.CLICK))


def _leave_level(state: SessionState, phase: Phase) -> SessionState:
    return replace(
        state,
        phase=phase,
        current_level_index=None,
        attempts=0,
        feedback=Feedback.NONE,
        raw_input="",
        hint_visible=False,
    )


def _submit(state: SessionState, catalog: LevelCatalog) -> Step:
    if state.phase is not Phase.PLAYING or state.current_level_index is None:
        return Step(state)
    # Wrong feedback is still showing: the submit is debounced until it clears.
    if state.feedback is not Feedback.NONE:
        return Step(state)

    level = catalog.get(state.current_level_index)
    verdict = evaluate(state.raw_input, level.answer)
    if verdict is Verdict.NOT_SUBMITTABLE:
        return Step(state)

    if verdict is Verdict.WRONG:
        wrong = replace(
            state,
            feedback=Feedback.WRONG,
            attempts=state.attempts + 1,
            total_attempts=state.total_attempts + 1,
        )
        effects = _cue(state, Cue.ERROR) + _cue(state, Cue.VIBRATE)
        effects += (Schedule(Delay.AFTER_WRONG, ClearFeedback(state.epoch)),)
        return Step(wrong, effects)

    award = score(level.difficulty, state.attempts)
    unlocked = state.unlocked
    next_id = level.id + 1
    effects: Tuple[Effect, ...] = (SaveScore(state.score + award),)
    if next_id <= catalog.count() and next_id not in unlocked:
        unlocked = unlocked | {next_id}
        effects += (SaveUnlocked(unlocked),)
    solved = replace(
        state,
        feedback=Feedback.CORRECT,
        score=state.score + award,
        unlocked=unlocked,
        last_award=award,
    )
    effects += _cue(state, Cue.SUCCESS)
    effects += (Schedule(Delay.AFTER_CORRECT, ShowSummary(state.epoch)),)
    return Step(solved, effects)


def _toggle(state: SessionState, settings: Settings) -> Step:
    toggled = replace(state, settings=settings)
    effects: Tuple[Effect, ...] = ()
    if settings.music_playing != state.settings.music_playing:
        effects += (SetMusic(settings.music_playing),)
    return Step(toggled, effects)


def reduce(state: SessionState, action: Action, catalog: LevelCatalog) -> Step:
    """Apply *action* to *state*.

    Refused actions (locked level, wrong phase, stale timer, unsubmittable
    input) return the very same state object with no effects.
    """
    if isinstance(action, Start):
        if state.phase is not Phase.HOME:
            return Step(state)
        return Step(replace(state, phase=Phase.LEVEL_SELECT), _cue(state, Cue.CLICK))

    if isinstance(action, SelectLevel):
        if state.phase is not Phase.LEVEL_SELECT or action.level_id not in state.unlocked:
            return Step(state)
        index = catalog.find_by_id(action.level_id)
        if index is None:
            return Step(state)
        return _enter_level(state, index)

    if isinstance(action, EditInput):
        if state.phase is not Phase.PLAYING or state.feedback is Feedback.CORRECT:
            return Step(state)
        return Step(replace(state, raw_input=action.text))

    if isinstance(action, Submit):
        return _submit(state, catalog)

    if isinstance(action, RevealHint):
        if state.phase is not Phase.PLAYING or state.feedback is Feedback.CORRECT or state.hint_visible:
            return Step(state)
        return Step(replace(state, hint_visible=True), _cue(state, Cue.CLICK))

    if isinstance(action, ClearFeedback):
        if state.phase is not Phase.PLAYING or action.token != state.epoch or state.feedback is not Feedback.WRONG:
            return Step(state)
        return Step(replace(state, feedback=Feedback.NONE))

    if isinstance(action, ShowSummary):
        if state.phase is not Phase.PLAYING or action.token != state.epoch or state.feedback is not Feedback.CORRECT:
            return Step(state)
        return Step(replace(state, phase=Phase.SUMMARY))

    if isinstance(action, Advance):
        if state.phase is not Phase.SUMMARY or state.current_level_index is None:
            return Step(state)
        next_index = state.current_level_index + 1
        if next_index < catalog.count():
            return _enter_level(state, next_index)
        # Grand finale: the last level loops back to the hub.
        return Step(_leave_level(state, Phase.HOME), _cue(state, Cue.CLICK))

    if isinstance(action, OpenMap):
        if state.phase not in (Phase.PLAYING, Phase.SUMMARY):
            return Step(state)
        return Step(_leave_level(state, Phase.LEVEL_SELECT), (CancelScheduled(),) + _cue(state, Cue.CLICK))

    if isinstance(action, GoHome):
        if state.phase is Phase.HOME:
            return Step(state)
        return Step(_leave_level(state, Phase.HOME), (CancelScheduled(),))

    if isinstance(action, ResetProgress):
        fresh = SessionState.initial(settings=state.settings)
        return Step(replace(fresh, epoch=state.epoch + 1), (CancelScheduled(), ClearProgress()))

    if isinstance(action, ToggleSound):
        return _toggle(state, replace(state.settings, sound_enabled=not state.settings.sound_enabled))

    if isinstance(action, ToggleMusic):
        return _toggle(state, replace(state.settings, music_enabled=not state.settings.music_enabled))

    if isinstance(action, ToggleVibration):
        return _toggle(state, replace(state.settings, vibration_enabled=not state.settings.vibration_enabled))

    raise TypeError(f"Unknown action: {action!r}")
