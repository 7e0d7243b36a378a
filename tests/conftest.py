"""Shared fixtures: a hand-driven clock, a fixed corpus and a recording renderer."""

from __future__ import annotations

import random
from typing import Any, List, Tuple

import pytest

from storytyper.core.clock import Clock
from storytyper.core.engine import LiveStats, Renderer, TypingSessionEngine
from storytyper.core.feedback import Recommendation
from storytyper.core.models import SessionResult
from storytyper.core.phases import SessionPhase
from storytyper.core.profile import ProfileStore
from storytyper.core.sentences import SentenceBank


class ManualClock(Clock):
    def __init__(self, start: float = 10_000.0) -> None:
        self.ms = start

    def now(self) -> float:
        return self.ms

    def advance(self, ms: float) -> None:
        self.ms += ms


class RecordingRenderer(Renderer):
    def __init__(self) -> None:
        self.events: List[Tuple[str, Any]] = []

    def show_phase(self, phase: SessionPhase) -> None:
        self.events.append(("phase", phase))

    def show_countdown(self, count: int, message: str) -> None:
        self.events.append(("countdown", (count, message)))

    def show_sentence(self, sentence: str) -> None:
        self.events.append(("sentence", sentence))

    def show_progress(self, stats: LiveStats) -> None:
        self.events.append(("progress", stats))

    def show_result(self, result: SessionResult, recommendation: Recommendation) -> None:
        self.events.append(("result", (result, recommendation)))

    def of(self, kind: str) -> list:
        return [payload for k, payload in self.events if k == kind]


@pytest.fixture()
def clock() -> ManualClock:
    return ManualClock()


@pytest.fixture()
def bank() -> SentenceBank:
    return SentenceBank.from_sentences(
        {"en": ["cat"], "id": ["ibu"]},
        default_language="en",
        rng=random.Random(7),
    )


@pytest.fixture()
def renderer() -> RecordingRenderer:
    return RecordingRenderer()


@pytest.fixture()
def profile_store(tmp_path) -> ProfileStore:
    return ProfileStore(tmp_path / "profile.json")


@pytest.fixture()
def engine(bank, profile_store, renderer, clock) -> TypingSessionEngine:
    return TypingSessionEngine(bank, profiles=profile_store, renderer=renderer, clock=clock)


@pytest.fixture()
def start_playing():
    """Drive an engine from IDLE through the countdown into PLAYING."""

    def _start(engine: TypingSessionEngine, name: str = "Ani", language: str = "en", duration: float = 60) -> None:
        engine.initialize()
        assert engine.set_user_name(name)
        assert engine.proceed_to_language()
        engine.set_language(language)
        assert engine.proceed_to_duration()
        engine.set_duration(duration)
        assert engine.start_countdown()
        for _ in range(engine.phase.count):
            assert engine.countdown_tick()

    return _start
