"""Tests for storytyper.core.engine – orchestration of a full session."""

from __future__ import annotations

import json

import pytest

from storytyper.core.config import EngineConfig
from storytyper.core.engine import TypingSessionEngine
from storytyper.core.feedback import Recommendation
from storytyper.core.phases import (
    AWAITING_LANGUAGE,
    AWAITING_NAME,
    IDLE,
    PLAYING,
    SHOWING_RESULTS,
    TIME_UP,
    SessionPhase,
)
from storytyper.core.profile import UserProfile


# ---------------------------------------------------------------------------
# Configuration surface
# ---------------------------------------------------------------------------

class TestConfiguration:
    def test_defaults(self, engine: TypingSessionEngine):
        assert engine.phase == IDLE
        assert engine.language == "en"
        assert engine.duration == 60.0
        assert engine.user_name == ""

    def test_short_name_rejected(self, engine: TypingSessionEngine):
        assert engine.set_user_name("A") is False
        assert engine.user_name == ""

    def test_name_is_stripped(self, engine: TypingSessionEngine):
        assert engine.set_user_name("  Budi ") is True
        assert engine.user_name == "Budi"

    def test_rejected_name_keeps_previous(self, engine: TypingSessionEngine):
        engine.set_user_name("Budi")
        assert engine.set_user_name(" x ") is False
        assert engine.user_name == "Budi"

    def test_unknown_language_rejected(self, engine: TypingSessionEngine):
        engine.set_language("id")
        assert engine.set_language("klingon") is False
        assert engine.language == "id"

    @pytest.mark.parametrize("given,expected", [(30, 30.0), (0, 1.0), (-5, 1.0), (0.25, 1.0)])
    def test_duration_coerced(self, engine: TypingSessionEngine, given, expected):
        assert engine.set_duration(given) == expected
        assert engine.duration == expected

    def test_unknown_default_language_falls_back(self, bank, clock):
        engine = TypingSessionEngine(bank, clock=clock, config=EngineConfig(default_language="xx"))
        assert engine.language == "en"

    def test_default_renderer(self, bank, clock):
        engine = TypingSessionEngine(bank, clock=clock)
        assert engine.initialize()
        assert engine.phase == AWAITING_NAME


class TestSettingsLockedDuringPlay:
    def test_duration_ignored_while_playing(self, engine, clock, start_playing):
        start_playing(engine, duration=30)
        assert engine.set_duration(1) == 30.0
        clock.advance(2000)
        assert engine.check_time() is False
        assert engine.remaining_time() == pytest.approx(28.0)

    def test_language_ignored_while_playing(self, engine, start_playing):
        start_playing(engine, language="en")
        assert engine.set_language("id") is False
        assert engine.language == "en"

    def test_locked_during_countdown(self, engine, caplog):
        engine.initialize()
        engine.set_user_name("Ani")
        engine.proceed_to_language()
        engine.proceed_to_duration()
        engine.start_countdown()
        with caplog.at_level("WARNING"):
            assert engine.set_duration(300) == 60.0
        assert "Cannot change duration" in caplog.text

    def test_allowed_on_results_screen(self, engine, clock, start_playing):
        start_playing(engine, duration=5)
        clock.advance(5000)
        engine.check_time()
        assert engine.phase == SHOWING_RESULTS
        assert engine.set_duration(120) == 120.0
        assert engine.set_language("id") is True


# ---------------------------------------------------------------------------
# Phase flow
# ---------------------------------------------------------------------------

class TestFlow:
    def test_initialize_shows_welcome(self, engine, renderer):
        assert engine.initialize()
        assert renderer.of("phase") == [AWAITING_NAME]

    def test_language_step_needs_name(self, engine):
        engine.initialize()
        assert engine.proceed_to_language() is False
        assert engine.phase == AWAITING_NAME

    def test_countdown_messages_rendered(self, engine, renderer, start_playing):
        start_playing(engine)
        counts = [count for count, _ in renderer.of("countdown")]
        assert counts == [5, 4, 3, 2, 1]
        assert renderer.of("countdown")[-1][1] == "Go!"

    def test_countdown_end_starts_session(self, engine, renderer, clock, start_playing):
        start_playing(engine)
        assert engine.phase == PLAYING
        assert engine.totals.session_start == clock.now()
        assert engine.current_sentence == "cat"
        assert renderer.of("sentence") == ["cat"]

    def test_tick_outside_countdown_is_reported(self, engine):
        engine.initialize()
        assert engine.countdown_tick() is False
        assert engine.phase == AWAITING_NAME
        assert engine.last_error is not None

    def test_cannot_start_countdown_early(self, engine):
        engine.initialize()
        assert engine.start_countdown() is False
        assert engine.phase == AWAITING_NAME

    def test_language_choice_used_for_sentences(self, engine, start_playing):
        start_playing(engine, language="id")
        assert engine.current_sentence == "ibu"


# ---------------------------------------------------------------------------
# Typing
# ---------------------------------------------------------------------------

class TestTyping:
    def test_ignored_before_playing(self, engine):
        engine.initialize()
        assert engine.update_typing("cat") is None

    def test_partial_progress(self, engine, renderer, start_playing):
        start_playing(engine)
        outcome = engine.update_typing("ca")
        assert (outcome.typed_count, outcome.correct_count, outcome.is_complete) == (2, 2, False)
        stats = renderer.of("progress")[-1]
        assert stats.typed_count == 2
        assert stats.accuracy == 100.0
        assert stats.wpm == 0.0  # first keystroke, nothing measurable yet

    def test_start_time_is_first_keystroke(self, engine, clock, start_playing):
        start_playing(engine)
        clock.advance(4000)
        engine.update_typing("c")
        assert engine.attempt.start_time == clock.now()

    def test_live_wpm_after_a_second(self, engine, clock, start_playing):
        start_playing(engine)
        engine.update_typing("c")
        clock.advance(1000)
        engine.update_typing("ca")
        # 2 chars -> 0.4 words in 1/60 minute
        assert engine.live_stats().wpm == pytest.approx(24.0)

    def test_completion_moves_to_next_sentence(self, engine, renderer, clock, start_playing):
        start_playing(engine)
        engine.update_typing("c")
        clock.advance(3000)
        outcome = engine.update_typing("cat")
        assert outcome.is_complete
        assert engine.phase == PLAYING
        assert engine.totals.sentences_completed == 1
        assert engine.totals.total_active_time == 3.0
        assert renderer.of("sentence") == ["cat", "cat"]
        assert engine.attempt.active and engine.attempt.typed_count == 0

    def test_typo_completion_advances_but_does_not_score(self, engine, start_playing):
        start_playing(engine)
        outcome = engine.update_typing("cbt")
        assert outcome.correct_count == 2
        assert outcome.is_complete
        assert engine.phase == PLAYING
        assert engine.totals.sentences_completed == 0
        assert engine.totals.total_typed_chars == 3
        assert engine.totals.total_correct_chars == 2

    def test_idle_gap_between_sentences_not_counted(self, engine, clock, start_playing):
        start_playing(engine)
        engine.update_typing("c")
        clock.advance(2000)
        engine.update_typing("cat")
        clock.advance(10_000)  # thinking
        engine.update_typing("c")
        clock.advance(2000)
        engine.update_typing("cat")
        assert engine.totals.total_active_time == 4.0


# ---------------------------------------------------------------------------
# Timeout and results
# ---------------------------------------------------------------------------

class TestTimeout:
    def test_remaining_before_session(self, engine):
        engine.set_duration(30)
        assert engine.remaining_time() == 30.0

    def test_remaining_counts_down(self, engine, clock, start_playing):
        start_playing(engine, duration=30)
        clock.advance(12_500)
        assert engine.remaining_time() == pytest.approx(17.5)

    def test_check_time_before_expiry(self, engine, clock, start_playing):
        start_playing(engine, duration=30)
        clock.advance(29_999)
        assert engine.check_time() is False
        assert engine.phase == PLAYING

    def test_check_time_outside_playing(self, engine):
        assert engine.check_time() is False

    def test_timeout_shows_results(self, engine, renderer, clock, start_playing):
        start_playing(engine, duration=30)
        engine.update_typing("c")
        clock.advance(2000)
        engine.update_typing("ca")
        clock.advance(28_000)
        assert engine.check_time() is True
        assert engine.phase == SHOWING_RESULTS
        phases = renderer.of("phase")
        assert phases[-2:] == [TIME_UP, SHOWING_RESULTS]
        result = engine.result
        assert result.typed_chars == 2
        assert result.sentences_completed == 0
        assert result.time_spent == pytest.approx(30.0)
        [(rendered, recommendation)] = renderer.of("result")
        assert rendered is result
        assert isinstance(recommendation, Recommendation)
        assert engine.remaining_time() == 0.0

    def test_typing_after_expiry_ends_session(self, engine, clock, start_playing):
        start_playing(engine, duration=5)
        clock.advance(6000)
        outcome = engine.update_typing("cat")
        assert outcome is not None
        assert engine.phase == SHOWING_RESULTS
        assert engine.update_typing("cat") is None

    def test_session_without_typing(self, engine, clock, start_playing):
        start_playing(engine, duration=5)
        clock.advance(5000)
        engine.check_time()
        assert engine.result.wpm == 0.0
        assert engine.result.accuracy == 100.0

    def test_result_uses_active_time(self, engine, clock, start_playing):
        start_playing(engine, duration=60)
        for _ in range(5):
            engine.update_typing("c")
            clock.advance(1000)
            engine.update_typing("cat")
            clock.advance(5000)  # pause between sentences
        clock.advance(60_000)
        engine.check_time()
        # 15 chars = 3 words over 5 active seconds
        assert engine.result.wpm == pytest.approx(36.0)
        assert engine.result.sentences_completed == 5

    def test_profile_saved_with_bests(self, engine, profile_store, clock, start_playing):
        start_playing(engine, name="Sari", language="id", duration=10)
        engine.update_typing("i")
        clock.advance(1000)
        engine.update_typing("ibu")
        clock.advance(10_000)
        engine.check_time()
        payload = json.loads(profile_store.file_path.read_text(encoding="utf-8"))
        assert payload["name"] == "Sari"
        assert payload["language"] == "id"
        assert payload["duration"] == 10.0
        assert payload["total_sessions"] == 1
        assert payload["best_wpm"] == pytest.approx(36.0)
        assert payload["best_accuracy"] == 100.0


# ---------------------------------------------------------------------------
# After the results screen
# ---------------------------------------------------------------------------

@pytest.fixture()
def finished(engine, clock, start_playing) -> TypingSessionEngine:
    start_playing(engine, duration=5)
    engine.update_typing("c")
    clock.advance(1000)
    engine.update_typing("cat")
    clock.advance(5000)
    engine.check_time()
    assert engine.phase == SHOWING_RESULTS
    return engine


class TestAfterResults:
    def test_restart_replays_countdown(self, finished, renderer):
        assert finished.restart()
        assert finished.phase == SessionPhase.countdown(5)
        assert renderer.of("countdown")[-1][0] == 5

    def test_restart_resets_totals(self, finished, clock):
        finished.restart()
        for _ in range(5):
            finished.countdown_tick()
        assert finished.phase == PLAYING
        assert finished.totals.total_typed_chars == 0
        assert finished.totals.session_start == clock.now()
        assert finished.result is None

    def test_change_settings(self, finished):
        assert finished.change_settings()
        assert finished.phase == AWAITING_LANGUAGE
        assert finished.user_name == "Ani"
        assert finished.totals.total_typed_chars == 0

    def test_new_session_clears_name(self, finished, renderer):
        assert finished.new_session()
        assert finished.phase == AWAITING_NAME
        assert finished.user_name == ""
        assert renderer.of("phase")[-2:] == [IDLE, AWAITING_NAME]

    def test_results_cannot_go_back_to_playing(self, finished):
        assert finished.countdown_tick() is False
        assert finished.phase == SHOWING_RESULTS


# ---------------------------------------------------------------------------
# Abandon / profile loading
# ---------------------------------------------------------------------------

class TestAbandon:
    def test_abandon_mid_session(self, engine, start_playing):
        start_playing(engine)
        engine.update_typing("ca")
        assert engine.abandon()
        assert engine.phase == IDLE
        assert engine.attempt is None
        assert engine.result is None
        assert engine.totals.total_typed_chars == 0

    def test_abandon_when_idle(self, engine):
        assert engine.abandon() is False

    def test_abandon_does_not_save(self, engine, profile_store, start_playing):
        start_playing(engine)
        engine.abandon()
        assert profile_store.load_profile() is None


class TestStoredProfile:
    def test_initialize_applies_profile(self, engine, profile_store):
        profile_store.save_profile(UserProfile(name="Dewi", language="id", duration=120.0, total_sessions=3))
        engine.initialize()
        assert engine.user_name == "Dewi"
        assert engine.language == "id"
        assert engine.duration == 120.0
        assert engine.proceed_to_language()

    def test_stored_unknown_language_ignored(self, engine, profile_store):
        profile_store.save_profile(UserProfile(name="Dewi", language="fr"))
        engine.initialize()
        assert engine.language == "en"

    def test_corrupt_profile_uses_defaults(self, engine, profile_store):
        profile_store.file_path.write_text("{not json", encoding="utf-8")
        assert engine.initialize()
        assert engine.user_name == ""
        assert engine.profile == UserProfile()

    def test_null_name_is_not_applied(self, engine, profile_store):
        profile_store.file_path.write_text(
            json.dumps({"name": None, "language": "en", "duration": 60}), encoding="utf-8"
        )
        assert engine.initialize()
        assert engine.user_name == ""
        assert engine.proceed_to_language() is False

    def test_bests_accumulate(self, engine, profile_store, clock, start_playing):
        profile_store.save_profile(UserProfile(name="Dewi", best_wpm=500.0, total_sessions=3))
        start_playing(engine, duration=1)
        clock.advance(1000)
        engine.check_time()
        stored = profile_store.load_profile()
        assert stored.best_wpm == 500.0
        assert stored.total_sessions == 4
