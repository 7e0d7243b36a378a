from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Union

from storytyper.core.config import DEFAULT_DURATION_SECONDS, DEFAULT_LANGUAGE, data_dir
from storytyper.core.models import SessionResult

logger = logging.getLogger(__name__)

_NUMBER = (int, float)


def _field(payload: Dict[str, Any], key: str, default: Any, types: Union[type, Tuple[type, ...]]) -> Any:
    """Read *key* from a stored profile, rejecting values of the wrong JSON type."""
    value = payload.get(key, default)
    # bool is an int subclass
    if isinstance(value, bool) or not isinstance(value, types):
        raise TypeError(f"{key!r} has unexpected type {type(value).__name__}")
    return value


@dataclass
class UserProfile:
    name: str = ""
    language: str = DEFAULT_LANGUAGE
    duration: float = DEFAULT_DURATION_SECONDS
    best_wpm: float = 0.0
    best_accuracy: float = 0.0
    total_sessions: int = 0

    def record(self, result: SessionResult) -> None:
        """Merge a finished session into the stored bests."""
        self.best_wpm = max(self.best_wpm, result.wpm)
        self.best_accuracy = max(self.best_accuracy, result.accuracy)
        self.total_sessions += 1


class ProfileStore:
    """Stores the user profile as JSON. Default file: ~/.storytyper/profile.json.

    Missing or corrupt data reads as "no stored profile"; write failures are
    logged and otherwise ignored.
    """

    def __init__(self, file_path: Optional[Path] = None) -> None:
        self._file_path = file_path or data_dir() / "profile.json"

    @property
    def file_path(self) -> Path:
        return self._file_path

    def load_profile(self) -> Optional[UserProfile]:
        if not self._file_path.exists():
            return None
        try:
            payload = json.loads(self._file_path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, OSError, UnicodeDecodeError) as e:
            logger.warning("Could not load profile from %s: %s", self._file_path, e)
            return None
        if not isinstance(payload, dict):
            logger.warning("Ignoring malformed profile in %s", self._file_path)
            return None
        try:
            return UserProfile(
                name=_field(payload, "name", "", str),
                language=_field(payload, "language", DEFAULT_LANGUAGE, str),
                duration=float(_field(payload, "duration", DEFAULT_DURATION_SECONDS, _NUMBER)),
                best_wpm=float(_field(payload, "best_wpm", 0.0, _NUMBER)),
                best_accuracy=float(_field(payload, "best_accuracy", 0.0, _NUMBER)),
                total_sessions=_field(payload, "total_sessions", 0, int),
            )
        except (TypeError, ValueError) as e:
            logger.warning("Ignoring malformed profile in %s: %s", self._file_path, e)
            return None

    def save_profile(self, profile: UserProfile) -> None:
        try:
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
            self._file_path.write_text(json.dumps(asdict(profile), indent=2), encoding="utf-8")
        except OSError as e:
            logger.warning("Could not save profile to %s: %s", self._file_path, e)
