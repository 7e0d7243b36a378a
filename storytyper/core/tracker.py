"""Live comparison of typed text against the active sentence."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional


class CharState(str, Enum):
    CORRECT = "correct"
    INCORRECT = "incorrect"
    CURRENT = "current"
    PENDING = "pending"


@dataclass
class ActiveAttempt:
    """In-progress state for one sentence.

    ``typed_count`` is the length of the last submitted text, not a running
    keystroke counter. ``start_time`` is set by the first update only.
    """

    sentence: str
    start_time: Optional[float] = None
    end_time: Optional[float] = None
    typed_count: int = 0
    correct_count: int = 0
    active: bool = True
    typed_text: str = ""

    @property
    def elapsed_seconds(self) -> float:
        """Completion time of a finalized attempt, 0.0 while either timestamp is missing."""
        if self.start_time is None or self.end_time is None:
            return 0.0
        return max(0.0, (self.end_time - self.start_time) / 1000.0)

    @property
    def is_exact_match(self) -> bool:
        target_len = len(self.sentence)
        return target_len > 0 and self.typed_count == target_len and self.correct_count == target_len


@dataclass(frozen=True)
class UpdateOutcome:
    correct_count: int
    typed_count: int
    is_complete: bool


def count_correct(typed: str, target: str) -> int:
    """Position-by-position matches; characters past the end of *target* never count."""
    return sum(1 for a, b in zip(typed, target) if a == b)


def char_states(typed: str, target: str) -> List[CharState]:
    """Rendering state for every character of *target* given the text typed so far."""
    states: List[CharState] = []
    for i, expected in enumerate(target):
        if i < len(typed):
            states.append(CharState.CORRECT if typed[i] == expected else CharState.INCORRECT)
        elif i == len(typed):
            states.append(CharState.CURRENT)
        else:
            states.append(CharState.PENDING)
    return states


class ProgressTracker:
    def update(self, typed_text: str, target: str, attempt: ActiveAttempt, now: float) -> UpdateOutcome:
        """Re-evaluate *attempt* against the full *typed_text* and report progress.

        Completion only looks at length: once the user has typed as many
        characters as the sentence holds the attempt is done, typos included.
        """
        typed_text = typed_text or ""
        if attempt.start_time is None:
            attempt.start_time = now
        attempt.typed_text = typed_text
        attempt.typed_count = len(typed_text)
        attempt.correct_count = count_correct(typed_text, target)
        is_complete = len(target) > 0 and len(typed_text) >= len(target)
        return UpdateOutcome(
            correct_count=attempt.correct_count,
            typed_count=attempt.typed_count,
            is_complete=is_complete,
        )

    def finalize(self, attempt: ActiveAttempt, now: float) -> bool:
        """Stamp the end time and deactivate. Returns False if already finalized."""
        if not attempt.active:
            return False
        attempt.end_time = now
        attempt.active = False
        return True
