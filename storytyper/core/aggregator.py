"""Folding finished attempts into session totals."""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Optional

from storytyper.core import metrics
from storytyper.core.models import SessionResult, SessionTotals
from storytyper.core.tracker import ActiveAttempt

logger = logging.getLogger(__name__)


class SessionAggregator:
    def fold(self, attempt: ActiveAttempt, totals: SessionTotals) -> SessionTotals:
        """Return *totals* with one finalized *attempt* added.

        Active time is only added when both timestamps exist. A sentence only
        counts as completed when it was typed out exactly; running out of
        time mid-sentence, or finishing with typos, does not count.
        """
        completed = 1 if attempt.is_exact_match else 0
        return replace(
            totals,
            total_typed_chars=totals.total_typed_chars + attempt.typed_count,
            total_correct_chars=totals.total_correct_chars + attempt.correct_count,
            total_active_time=totals.total_active_time + attempt.elapsed_seconds,
            sentences_completed=totals.sentences_completed + completed,
        )

    def finalize(self, totals: SessionTotals, session_start: Optional[float], now: float) -> SessionResult:
        result = SessionResult(
            wpm=metrics.session_wpm(totals, session_start, now),
            accuracy=metrics.session_accuracy(totals),
            typed_chars=totals.total_typed_chars,
            correct_chars=totals.total_correct_chars,
            time_spent=totals.total_active_time,
            sentences_completed=totals.sentences_completed,
        )
        logger.info(
            "Session finished: %.1f WPM, %.1f%% accuracy, %d sentence(s) completed",
            result.wpm,
            result.accuracy,
            result.sentences_completed,
        )
        return result
