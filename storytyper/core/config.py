"""Tuning constants and runtime configuration."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

DEFAULT_LANGUAGE = "en"
DEFAULT_DURATION_SECONDS = 60.0
MIN_DURATION_SECONDS = 1.0
MIN_NAME_LENGTH = 2
COUNTDOWN_START = 5

# Speed metrics
CHARS_PER_WORD = 5.0
MIN_ELAPSED_MS = 1000.0  # below this a WPM reading is meaningless
MAX_WPM = 300.0


def data_dir() -> Path:
    """Per-user directory for the stored profile (``$STORYTYPER_HOME`` or ~/.storytyper)."""
    override = os.environ.get("STORYTYPER_HOME")
    if override:
        return Path(override).expanduser()
    return Path.home() / ".storytyper"


@dataclass(frozen=True)
class EngineConfig:
    default_language: str = DEFAULT_LANGUAGE
    default_duration: float = DEFAULT_DURATION_SECONDS
    countdown_start: int = COUNTDOWN_START

    @classmethod
    def from_env(cls) -> EngineConfig:
        """Build a config, letting STORYTYPER_LANGUAGE / STORYTYPER_DURATION override defaults."""
        language = os.environ.get("STORYTYPER_LANGUAGE", "").strip() or DEFAULT_LANGUAGE
        duration = DEFAULT_DURATION_SECONDS
        raw = os.environ.get("STORYTYPER_DURATION")
        if raw:
            try:
                duration = max(MIN_DURATION_SECONDS, float(raw))
            except ValueError:
                logger.warning("Ignoring invalid STORYTYPER_DURATION %r", raw)
        return cls(default_language=language, default_duration=duration)
