"""Tests for turning a transcript into a scored session."""

from pathlib import Path

import pytest

from outloud.session.pipeline import score_reading

ORIGINAL = "The quick brown fox jumps over the lazy dog."


class TestScoreReading:
    def test_perfect_reading(self):
        session = score_reading(ORIGINAL, "the quick brown fox jumps over the lazy dog", 3.6, 0.95)
        assert session.metrics.word_count == 9
        assert session.metrics.wpm == pytest.approx(150.0)
        assert session.metrics.accuracy == 1.0
        assert session.score.overall_score == 100
        assert session.recording_path is None
        assert "Perfectionist" in session.score.achievement_names

    def test_recording_path_stored_as_string(self):
        session = score_reading(ORIGINAL, ORIGINAL, 3.6, 0.95, recording_path=Path("a/b.wav"))
        assert session.recording_path == str(Path("a/b.wav"))

    def test_extra_and_missing_words(self):
        session = score_reading(ORIGINAL, "the quick red fox", 10.0, 0.9)
        assert session.metrics.added_words == ("red",)
        assert session.metrics.missed_words == ("brown", "jumps", "over", "lazy", "dog")
        assert session.metrics.confidence_score == 0.9
        assert session.score.completion_score < 100

    def test_zero_duration(self):
        session = score_reading(ORIGINAL, ORIGINAL, 0.0, 0.95)
        assert session.metrics.wpm == 0.0
        assert session.metrics.duration == 0.0

    def test_sessions_get_unique_ids(self):
        a = score_reading(ORIGINAL, ORIGINAL, 3.6, 0.95)
        b = score_reading(ORIGINAL, ORIGINAL, 3.6, 0.95)
        assert a.id != b.id
