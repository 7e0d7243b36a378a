"""Text helpers for the game and results screens."""

from __future__ import annotations

import html
import math
from typing import Sequence

from storytyper.core.models import SessionResult
from storytyper.core.tracker import CharState
from storytyper.ui.colors import HomeColors


def format_remaining(seconds: float) -> str:
    """``1:05`` for a minute or more, ``45s`` below that."""
    seconds = max(0.0, seconds)
    minutes, secs = divmod(int(math.floor(seconds)), 60)
    if minutes > 0:
        return f"{minutes}:{secs:02d}"
    return f"{secs}s"


def sentence_html(sentence: str, states: Sequence[CharState]) -> str:
    """Rich text for the target sentence, one span per character."""
    parts = []
    for i, ch in enumerate(sentence):
        state = states[i] if i < len(states) else CharState.PENDING
        text = html.escape(ch).replace(" ", "&nbsp;")
        if state is CharState.CORRECT:
            style = f"color:{HomeColors.CHAR_CORRECT};"
        elif state is CharState.INCORRECT:
            style = f"color:{HomeColors.CHAR_INCORRECT}; background:{HomeColors.CHAR_INCORRECT_BG};"
        elif state is CharState.CURRENT:
            style = f"color:{HomeColors.PRIMARY_DARK}; background:{HomeColors.CHAR_CURRENT_BG}; font-weight:700;"
        else:
            style = f"color:{HomeColors.TEXT_MUTED};"
        parts.append(f'<span style="{style}">{text}</span>')
    return "".join(parts)


def result_lines(result: SessionResult) -> list[str]:
    return [
        f"{result.wpm:.0f} WPM",
        f"{result.accuracy:.1f}% accuracy",
        f"{result.sentences_completed} sentence(s) completed",
        f"{result.correct_chars}/{result.typed_chars} characters correct",
        f"{result.time_spent:.1f}s of typing",
    ]
