"""Screen/session lifecycle.

::

    IDLE -> AWAITING_NAME -> AWAITING_LANGUAGE -> AWAITING_DURATION
         -> COUNTDOWN(5) -> ... -> COUNTDOWN(0) -> PLAYING
    PLAYING -> PLAYING (next sentence) | TIME_UP -> SHOWING_RESULTS
    SHOWING_RESULTS -> IDLE (new session)
                     | AWAITING_LANGUAGE (change settings)
                     | COUNTDOWN(5) (restart)

Any phase may also return to IDLE when a session is abandoned. Every other
transition is refused without changing the current phase.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from storytyper.core.config import COUNTDOWN_START

logger = logging.getLogger(__name__)

# Indexed by remaining count - 1: COUNTDOWN(5) shows the last entry, COUNTDOWN(1) says go.
COUNTDOWN_MESSAGES: Tuple[str, ...] = (
    "Go!",
    "Take a deep breath...",
    "Eyes on the screen, not on the keyboard.",
    "Rest your fingers on the home row.",
    "Get ready and sit up straight!",
)


class Phase(str, Enum):
    IDLE = "idle"
    AWAITING_NAME = "awaiting_name"
    AWAITING_LANGUAGE = "awaiting_language"
    AWAITING_DURATION = "awaiting_duration"
    COUNTDOWN = "countdown"
    PLAYING = "playing"
    TIME_UP = "time_up"
    SHOWING_RESULTS = "showing_results"


@dataclass(frozen=True)
class SessionPhase:
    kind: Phase
    count: Optional[int] = None

    @classmethod
    def countdown(cls, count: int) -> SessionPhase:
        return cls(Phase.COUNTDOWN, count)

    @property
    def message(self) -> str:
        """Instruction shown for a countdown step ("" for other phases and for 0)."""
        if self.kind is not Phase.COUNTDOWN or not self.count:
            return ""
        return countdown_message(self.count)

    def __str__(self) -> str:
        if self.kind is Phase.COUNTDOWN:
            return f"countdown({self.count})"
        return self.kind.value


IDLE = SessionPhase(Phase.IDLE)
AWAITING_NAME = SessionPhase(Phase.AWAITING_NAME)
AWAITING_LANGUAGE = SessionPhase(Phase.AWAITING_LANGUAGE)
AWAITING_DURATION = SessionPhase(Phase.AWAITING_DURATION)
PLAYING = SessionPhase(Phase.PLAYING)
TIME_UP = SessionPhase(Phase.TIME_UP)
SHOWING_RESULTS = SessionPhase(Phase.SHOWING_RESULTS)


def countdown_message(count: int) -> str:
    index = max(0, min(count - 1, len(COUNTDOWN_MESSAGES) - 1))
    return COUNTDOWN_MESSAGES[index]


@dataclass(frozen=True)
class IllegalTransition:
    source: SessionPhase
    target: SessionPhase

    def __str__(self) -> str:
        return f"illegal transition {self.source} -> {self.target}"


_FORWARD = {
    Phase.IDLE: {Phase.AWAITING_NAME},
    Phase.AWAITING_NAME: {Phase.AWAITING_LANGUAGE},
    Phase.AWAITING_LANGUAGE: {Phase.AWAITING_DURATION},
    Phase.AWAITING_DURATION: {Phase.COUNTDOWN},
    Phase.PLAYING: {Phase.PLAYING, Phase.TIME_UP},
    Phase.TIME_UP: {Phase.SHOWING_RESULTS},
    Phase.SHOWING_RESULTS: {Phase.IDLE, Phase.AWAITING_LANGUAGE, Phase.COUNTDOWN},
}


class SessionStateMachine:
    """Owns the current phase; :meth:`transition` is the only way to change it."""

    def __init__(self, countdown_start: int = COUNTDOWN_START) -> None:
        self._countdown_start = countdown_start
        self._phase = IDLE
        self._last_error: Optional[IllegalTransition] = None

    @property
    def phase(self) -> SessionPhase:
        return self._phase

    @property
    def countdown_start(self) -> int:
        return self._countdown_start

    @property
    def last_error(self) -> Optional[IllegalTransition]:
        """The most recently refused transition, if any."""
        return self._last_error

    def is_in(self, kind: Phase) -> bool:
        return self._phase.kind is kind

    def can_transition(self, target: SessionPhase) -> bool:
        source = self._phase
        if target.kind is Phase.IDLE:
            return source.kind is not Phase.IDLE
        if source.kind is Phase.COUNTDOWN:
            if source.count == 0:
                return target.kind is Phase.PLAYING
            return target.kind is Phase.COUNTDOWN and target.count == source.count - 1
        if target.kind is Phase.COUNTDOWN and target.count != self._countdown_start:
            return False
        return target.kind in _FORWARD.get(source.kind, set())

    def transition(self, target: SessionPhase) -> bool:
        if not self.can_transition(target):
            self._last_error = IllegalTransition(self._phase, target)
            logger.warning("Refused %s", self._last_error)
            return False
        logger.debug("Phase %s -> %s", self._phase, target)
        self._phase = target
        return True

    def tick(self) -> bool:
        """Advance the countdown by one step; reaching 0 moves on to PLAYING."""
        if self._phase.kind is not Phase.COUNTDOWN:
            return self.transition(SessionPhase.countdown((self._phase.count or 0) - 1))
        remaining = (self._phase.count or 0) - 1
        if not self.transition(SessionPhase.countdown(remaining)):
            return False
        if remaining == 0:
            return self.transition(PLAYING)
        return True
