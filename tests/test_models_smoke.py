"""Smoke tests for Pydantic models."""

from datetime import datetime

import pytest
from pydantic import ValidationError

from outloud.models.metrics import AccuracyResult, Mispronunciation, ReadingMetrics
from outloud.models.score import Achievement, GameScore
from outloud.models.session import AppState, ProgressStats, ReadingSession, SessionState


class TestReadingMetrics:
    def test_defaults(self):
        metrics = ReadingMetrics()
        assert metrics.accuracy == 0.0
        assert metrics.wpm == 0.0
        assert metrics.added_words == ()
        assert metrics.missed_words == ()

    def test_ratios_clamped(self):
        metrics = ReadingMetrics(accuracy=1.5, completion_rate=-0.2, confidence_score=3.0)
        assert metrics.accuracy == 1.0
        assert metrics.completion_rate == 0.0
        assert metrics.confidence_score == 1.0

    def test_negative_wpm_rejected(self):
        with pytest.raises(ValidationError):
            ReadingMetrics(wpm=-1.0)

    def test_immutable(self):
        metrics = ReadingMetrics(accuracy=0.5)
        with pytest.raises(ValidationError):
            metrics.accuracy = 0.9

    def test_word_lists_cannot_be_mutated(self):
        metrics = ReadingMetrics(added_words=["red"], missed_words=["brown"])
        assert metrics.added_words == ("red",)
        with pytest.raises(AttributeError):
            metrics.missed_words.append("fox")


class TestAccuracyModels:
    def test_accuracy_result_defaults(self):
        result = AccuracyResult()
        assert result.total_words == 0
        assert result.spoken_words == 0

    def test_mispronunciation_position_non_negative(self):
        with pytest.raises(ValidationError):
            Mispronunciation(original_word="cat", spoken_word="bat", position=-1)


class TestScoreModels:
    def test_achievement_identity(self):
        a = Achievement(name="Finisher", description="Read the entire text", icon_name="x")
        b = Achievement(name="Finisher", description="Read the entire text", icon_name="x")
        assert a.id != b.id
        assert isinstance(a.unlocked_at, datetime)

    def test_game_score_defaults(self):
        score = GameScore()
        assert score.overall_score == 0
        assert score.achievements == ()
        assert score.achievement_names == []

    def test_achievements_cannot_be_mutated(self):
        score = GameScore(
            achievements=[Achievement(name="First Steps", description="d", icon_name="i")]
        )
        assert isinstance(score.achievements, tuple)
        with pytest.raises(AttributeError):
            score.achievements.append(score.achievements[0])


class TestReadingSession:
    def test_identity_assigned_at_creation(self):
        first = ReadingSession(original_text="Read me please")
        second = ReadingSession(original_text="Read me please")
        assert first.id != second.id
        assert isinstance(first.timestamp, datetime)
        assert first.recording_path is None

    def test_immutable(self):
        session = ReadingSession(original_text="Read me please")
        with pytest.raises(ValidationError):
            session.transcribed_text = "changed"

    def test_json_roundtrip(self):
        session = ReadingSession(
            original_text="Read me please",
            transcribed_text="read me",
            metrics=ReadingMetrics(accuracy=0.66, wpm=120.0, missed_words=["please"]),
            score=GameScore(
                overall_score=70,
                achievements=[Achievement(name="First Steps", description="d", icon_name="i")],
            ),
        )
        restored = ReadingSession.model_validate_json(session.model_dump_json())
        assert restored == session


class TestAppState:
    def test_initial_state(self):
        state = AppState()
        assert state.state == SessionState.TEXT_INPUT
        assert state.message is None
        assert not state.is_error

    def test_error_state(self):
        state = AppState.error("Network error: down")
        assert state.is_error
        assert state.message == "Network error: down"

    def test_progress_stats_defaults(self):
        stats = ProgressStats()
        assert stats.total_sessions == 0
        assert stats.improvement_trend == 0.0
