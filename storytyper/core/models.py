"""Session value objects shared by the aggregator, metrics and engine."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class SessionTotals:
    """Running totals for one session. ``total_active_time`` is in seconds."""

    total_typed_chars: int = 0
    total_correct_chars: int = 0
    total_active_time: float = 0.0
    sentences_completed: int = 0
    session_start: Optional[float] = None


@dataclass(frozen=True)
class SessionResult:
    """Snapshot taken once when a session ends."""

    wpm: float
    accuracy: float
    typed_chars: int
    correct_chars: int
    time_spent: float
    sentences_completed: int
