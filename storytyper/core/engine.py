"""Typing session engine: the surface a front end drives.

The host feeds three kinds of stimulus: typed-text updates, countdown ticks
(once per second) and periodic :meth:`TypingSessionEngine.check_time` polls.
The engine never blocks and owns no timer; everything it wants shown goes
out through a :class:`Renderer`.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Optional, Tuple

from storytyper.core import metrics
from storytyper.core.aggregator import SessionAggregator
from storytyper.core.clock import Clock, MonotonicClock
from storytyper.core.config import MIN_DURATION_SECONDS, MIN_NAME_LENGTH, EngineConfig
from storytyper.core.feedback import Recommendation, recommend
from storytyper.core.models import SessionResult, SessionTotals
from storytyper.core.phases import (
    AWAITING_DURATION,
    AWAITING_LANGUAGE,
    AWAITING_NAME,
    IDLE,
    PLAYING,
    SHOWING_RESULTS,
    TIME_UP,
    IllegalTransition,
    Phase,
    SessionPhase,
    SessionStateMachine,
)
from storytyper.core.profile import ProfileStore, UserProfile
from storytyper.core.sentences import Language, SentenceBank
from storytyper.core.tracker import ActiveAttempt, CharState, ProgressTracker, UpdateOutcome, char_states

logger = logging.getLogger(__name__)

# phases in which language and duration may change
_CONFIGURABLE = frozenset(
    {Phase.IDLE, Phase.AWAITING_NAME, Phase.AWAITING_LANGUAGE, Phase.AWAITING_DURATION, Phase.SHOWING_RESULTS}
)


@dataclass(frozen=True)
class LiveStats:
    """Progress of the current attempt plus the running session figures."""

    typed_count: int
    correct_count: int
    wpm: float
    accuracy: float
    session_wpm: float
    session_accuracy: float
    remaining: float
    char_states: Tuple[CharState, ...]


class Renderer(ABC):
    """Outbound notifications. Implementations must not call back into the engine."""

    @abstractmethod
    def show_phase(self, phase: SessionPhase) -> None: ...

    @abstractmethod
    def show_countdown(self, count: int, message: str) -> None: ...

    @abstractmethod
    def show_sentence(self, sentence: str) -> None: ...

    @abstractmethod
    def show_progress(self, stats: LiveStats) -> None: ...

    @abstractmethod
    def show_result(self, result: SessionResult, recommendation: Recommendation) -> None: ...


class NullRenderer(Renderer):
    def show_phase(self, phase: SessionPhase) -> None:
        pass

    def show_countdown(self, count: int, message: str) -> None:
        pass

    def show_sentence(self, sentence: str) -> None:
        pass

    def show_progress(self, stats: LiveStats) -> None:
        pass

    def show_result(self, result: SessionResult, recommendation: Recommendation) -> None:
        pass


class TypingSessionEngine:
    def __init__(
        self,
        sentences: SentenceBank,
        profiles: Optional[ProfileStore] = None,
        renderer: Optional[Renderer] = None,
        clock: Optional[Clock] = None,
        config: Optional[EngineConfig] = None,
    ) -> None:
        self._config = config or EngineConfig()
        self._sentences = sentences
        self._profiles = profiles
        self._renderer = renderer or NullRenderer()
        self._clock = clock or MonotonicClock()
        self._machine = SessionStateMachine(self._config.countdown_start)
        self._tracker = ProgressTracker()
        self._aggregator = SessionAggregator()

        self._user_name = ""
        self._language = sentences.resolve(self._config.default_language)
        self._duration = max(MIN_DURATION_SECONDS, float(self._config.default_duration))
        self._profile = UserProfile(language=self._language, duration=self._duration)
        self._attempt: Optional[ActiveAttempt] = None
        self._totals = SessionTotals()
        self._result: Optional[SessionResult] = None

    # -- read-only state ---------------------------------------------------

    @property
    def phase(self) -> SessionPhase:
        return self._machine.phase

    @property
    def last_error(self) -> Optional[IllegalTransition]:
        return self._machine.last_error

    @property
    def user_name(self) -> str:
        return self._user_name

    @property
    def language(self) -> str:
        return self._language

    @property
    def duration(self) -> float:
        return self._duration

    @property
    def profile(self) -> UserProfile:
        return self._profile

    @property
    def attempt(self) -> Optional[ActiveAttempt]:
        return self._attempt

    @property
    def current_sentence(self) -> str:
        return self._attempt.sentence if self._attempt is not None else ""

    @property
    def totals(self) -> SessionTotals:
        return self._totals

    @property
    def result(self) -> Optional[SessionResult]:
        return self._result

    def languages(self) -> List[Language]:
        return self._sentences.all()

    # -- configuration -----------------------------------------------------

    def initialize(self) -> bool:
        """Apply the stored profile (if any) and show the welcome step."""
        stored = self._profiles.load_profile() if self._profiles is not None else None
        if stored is not None:
            self._profile = stored
            self.set_user_name(stored.name)
            self.set_language(stored.language)
            self.set_duration(stored.duration)
        return self._enter(AWAITING_NAME)

    def set_user_name(self, name: str) -> bool:
        name = (name or "").strip()
        if len(name) < MIN_NAME_LENGTH:
            return False
        self._user_name = name
        return True

    def set_language(self, code: str) -> bool:
        if not self._configurable("language"):
            return False
        if not self._sentences.has_language(code):
            logger.debug("Rejected unknown language %r", code)
            return False
        self._language = code
        return True

    def set_duration(self, seconds: float) -> float:
        """Store *seconds* (at least 1) and return the duration now in effect."""
        if not self._configurable("duration"):
            return self._duration
        self._duration = max(MIN_DURATION_SECONDS, float(seconds))
        return self._duration

    # -- phase flow --------------------------------------------------------

    def proceed_to_language(self) -> bool:
        if not self._user_name:
            logger.info("Cannot continue without a name")
            return False
        return self._enter(AWAITING_LANGUAGE)

    def proceed_to_duration(self) -> bool:
        return self._enter(AWAITING_DURATION)

    def start_countdown(self) -> bool:
        phase = SessionPhase.countdown(self._machine.countdown_start)
        if not self._enter(phase):
            return False
        self._renderer.show_countdown(phase.count, phase.message)
        return True

    def countdown_tick(self) -> bool:
        """Advance the countdown; the tick that reaches 0 starts the session."""
        if not self._machine.tick():
            return False
        phase = self._machine.phase
        self._renderer.show_phase(phase)
        if phase.kind is Phase.PLAYING:
            self._start_session()
        else:
            self._renderer.show_countdown(phase.count, phase.message)
        return True

    def restart(self) -> bool:
        """Replay with the same settings."""
        return self.start_countdown()

    def change_settings(self) -> bool:
        if not self._enter(AWAITING_LANGUAGE):
            return False
        self._reset()
        return True

    def new_session(self) -> bool:
        """Start over from the welcome step with a blank name."""
        if not self._machine.is_in(Phase.IDLE):
            self._enter(IDLE)
        self._reset()
        self._user_name = ""
        return self._enter(AWAITING_NAME)

    def abandon(self) -> bool:
        """Drop the current session, if any, and return to IDLE without a result."""
        if not self._enter(IDLE):
            return False
        self._reset()
        return True

    # -- playing -----------------------------------------------------------

    def update_typing(self, typed_text: str) -> Optional[UpdateOutcome]:
        """Evaluate the full current input. Returns None when not playing."""
        attempt = self._attempt
        if not self._machine.is_in(Phase.PLAYING) or attempt is None or not attempt.active:
            return None
        now = self._clock.now()
        outcome = self._tracker.update(typed_text, attempt.sentence, attempt, now)
        self._renderer.show_progress(self._live_stats(now))
        if self._time_expired(now):
            self._finish_session(now)
        elif outcome.is_complete:
            self._complete_attempt(attempt, now)
        return outcome

    def check_time(self) -> bool:
        """Poll for timeout; ends the session and returns True once time is up."""
        if not self._machine.is_in(Phase.PLAYING):
            return False
        now = self._clock.now()
        if not self._time_expired(now):
            return False
        self._finish_session(now)
        return True

    def remaining_time(self) -> float:
        return self._remaining(self._clock.now())

    def live_stats(self) -> LiveStats:
        return self._live_stats(self._clock.now())

    # -- internals ---------------------------------------------------------

    def _enter(self, phase: SessionPhase) -> bool:
        if not self._machine.transition(phase):
            return False
        self._renderer.show_phase(phase)
        return True

    def _configurable(self, setting: str) -> bool:
        if self._machine.phase.kind in _CONFIGURABLE:
            return True
        logger.warning("Cannot change %s during %s", setting, self._machine.phase)
        return False

    def _reset(self) -> None:
        self._attempt = None
        self._totals = SessionTotals()
        self._result = None

    def _start_session(self) -> None:
        now = self._clock.now()
        self._reset()
        self._totals = SessionTotals(session_start=now)
        logger.info(
            "Session started for %s: language=%s duration=%.0fs",
            self._user_name or "<anonymous>",
            self._language,
            self._duration,
        )
        self._next_sentence()

    def _next_sentence(self) -> None:
        sentence = self._sentences.pick(self._language)
        self._attempt = ActiveAttempt(sentence=sentence)
        self._renderer.show_sentence(sentence)
        self._renderer.show_progress(self.live_stats())

    def _complete_attempt(self, attempt: ActiveAttempt, now: float) -> None:
        if self._tracker.finalize(attempt, now):
            self._totals = self._aggregator.fold(attempt, self._totals)
        self._enter(PLAYING)
        self._next_sentence()

    def _finish_session(self, now: float) -> None:
        if self._attempt is not None and self._tracker.finalize(self._attempt, now):
            self._totals = self._aggregator.fold(self._attempt, self._totals)
        self._enter(TIME_UP)
        result = self._aggregator.finalize(self._totals, self._totals.session_start, now)
        self._result = result
        self._enter(SHOWING_RESULTS)
        self._save_profile(result)
        self._renderer.show_result(result, recommend(result.wpm, result.accuracy))

    def _save_profile(self, result: SessionResult) -> None:
        self._profile.name = self._user_name
        self._profile.language = self._language
        self._profile.duration = self._duration
        self._profile.record(result)
        if self._profiles is not None:
            self._profiles.save_profile(self._profile)

    def _time_expired(self, now: float) -> bool:
        return self._totals.session_start is not None and self._remaining(now) <= 0.0

    def _remaining(self, now: float) -> float:
        start = self._totals.session_start
        if start is None:
            return self._duration
        return max(0.0, self._duration - (now - start) / 1000.0)

    def _live_stats(self, now: float) -> LiveStats:
        attempt = self._attempt
        if attempt is None:
            typed, correct, wpm, accuracy, states = 0, 0, 0.0, 100.0, ()
        else:
            end = attempt.end_time if attempt.end_time is not None else now
            typed = attempt.typed_count
            correct = attempt.correct_count
            wpm = metrics.instantaneous_wpm(typed, attempt.start_time, end)
            accuracy = metrics.instantaneous_accuracy(correct, typed)
            states = tuple(char_states(attempt.typed_text, attempt.sentence))
        return LiveStats(
            typed_count=typed,
            correct_count=correct,
            wpm=wpm,
            accuracy=accuracy,
            session_wpm=metrics.session_wpm(self._totals, self._totals.session_start, now),
            session_accuracy=metrics.session_accuracy(self._totals),
            remaining=self._remaining(now),
            char_states=states,
        )
