"""Speed and accuracy metrics.

Speed follows the usual convention of one word per five typed characters
(correct or not). Two time bases are used:

* **Sentence WPM** measures from the first keystroke of the attempt, so
  think-time before typing does not count.
* **Session WPM** sums only the active interval of each attempt, so breaks
  between sentences do not count. Until an attempt has been folded it falls
  back to wall-clock time since the session started.

All results are clamped: WPM to ``[0, MAX_WPM]``, accuracy to ``[0, 100]``.
"""

from __future__ import annotations

from typing import Optional

from storytyper.core.config import CHARS_PER_WORD, MAX_WPM, MIN_ELAPSED_MS
from storytyper.core.models import SessionTotals


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def _wpm(typed_count: int, elapsed_ms: float) -> float:
    if elapsed_ms < MIN_ELAPSED_MS:
        return 0.0
    words = typed_count / CHARS_PER_WORD
    minutes = elapsed_ms / 60000.0
    return clamp(words / minutes, 0.0, MAX_WPM)


def _accuracy(correct_count: int, typed_count: int) -> float:
    if typed_count == 0:
        return 100.0
    if correct_count > typed_count:
        # corrupted counters
        return 0.0
    return clamp(correct_count / typed_count * 100.0, 0.0, 100.0)


def instantaneous_wpm(typed_count: int, start_time: Optional[float], end_time_or_now: float) -> float:
    """WPM of a single attempt; 0.0 before the first keystroke or within the first second."""
    if typed_count == 0 or start_time is None:
        return 0.0
    return _wpm(typed_count, end_time_or_now - start_time)


def instantaneous_accuracy(correct_count: int, typed_count: int) -> float:
    """Accuracy of a single attempt; 100.0 when nothing has been typed yet."""
    return _accuracy(correct_count, typed_count)


def session_wpm(totals: SessionTotals, session_start: Optional[float], now: float) -> float:
    """WPM over the whole session, preferring summed active time to wall-clock time."""
    if totals.total_typed_chars == 0:
        return 0.0
    if totals.total_active_time > 0:
        elapsed_ms = totals.total_active_time * 1000.0
    elif session_start is not None:
        elapsed_ms = now - session_start
    else:
        return 0.0
    return _wpm(totals.total_typed_chars, elapsed_ms)


def session_accuracy(totals: SessionTotals) -> float:
    return _accuracy(totals.total_correct_chars, totals.total_typed_chars)
