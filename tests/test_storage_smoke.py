"""Smoke tests for the reading session store."""

from datetime import datetime, timedelta

import pytest

from outloud.errors import PersistenceError, PersistenceFailure
from outloud.models.metrics import ReadingMetrics
from outloud.models.score import GameScore
from outloud.models.session import ReadingSession
from outloud.storage.sessions import SESSIONS_FILENAME, SessionStore

BASE_TIME = datetime(2026, 2, 28, 10, 0, 0)


def make_session(minutes: int = 0, overall: int = 50, accuracy: float = 0.5, wpm: float = 120.0):
    return ReadingSession(
        original_text="The quick brown fox jumps over the lazy dog.",
        transcribed_text="the quick brown fox",
        metrics=ReadingMetrics(accuracy=accuracy, wpm=wpm),
        score=GameScore(overall_score=overall),
        timestamp=BASE_TIME + timedelta(minutes=minutes),
    )


@pytest.fixture
def store(tmp_path):
    return SessionStore(tmp_path / "sessions")


class TestLoadAll:
    def test_empty_when_no_file(self, store):
        assert store.load_all() == []

    def test_roundtrip(self, store):
        session = make_session()
        store.save(session)
        loaded = store.load_all()
        assert loaded == [session]

    def test_newest_first(self, store):
        for minutes in (5, 1, 9, 3):
            store.save(make_session(minutes=minutes))
        timestamps = [s.timestamp for s in store.load_all()]
        assert timestamps == sorted(timestamps, reverse=True)

    def test_corrupt_file(self, store):
        store.sessions_dir.mkdir(parents=True)
        store.path.write_text("{not json")
        with pytest.raises(PersistenceError) as exc_info:
            store.load_all()
        assert exc_info.value.reason == PersistenceFailure.DECODING_FAILED

    def test_invalid_session_payload(self, store):
        store.sessions_dir.mkdir(parents=True)
        store.path.write_text('{"sessions": [{"id": "x"}]}')
        with pytest.raises(PersistenceError) as exc_info:
            store.load_all()
        assert exc_info.value.reason == PersistenceFailure.DECODING_FAILED


class TestSave:
    def test_creates_file(self, store):
        store.save(make_session())
        assert (store.sessions_dir / SESSIONS_FILENAME).exists()

    def test_history_is_capped(self, tmp_path):
        store = SessionStore(tmp_path, max_sessions=5)
        sessions = [make_session(minutes=i) for i in range(7)]
        for session in sessions:
            store.save(session)
        kept = store.load_all()
        assert len(kept) == 5
        assert {s.id for s in kept} == {s.id for s in sessions[2:]}

    def test_default_cap_is_100(self, store):
        assert store.max_sessions == 100

    def test_same_id_replaced(self, store):
        session = make_session()
        store.save(session)
        store.save(session.model_copy(update={"transcribed_text": "updated"}))
        loaded = store.load_all()
        assert len(loaded) == 1
        assert loaded[0].transcribed_text == "updated"

    def test_write_failure(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("")
        store = SessionStore(blocker / "sessions")
        with pytest.raises(PersistenceError) as exc_info:
            store.save(make_session())
        assert exc_info.value.reason == PersistenceFailure.WRITE_FAILED


class TestDelete:
    def test_delete(self, store):
        keep, drop = make_session(minutes=1), make_session(minutes=2)
        store.save(keep)
        store.save(drop)
        store.delete(drop.id)
        assert store.load_all() == [keep]
        assert store.get(drop.id) is None
        assert store.get(keep.id) == keep

    def test_delete_unknown_id_is_noop(self, store):
        store.save(make_session())
        store.delete("missing")
        assert store.count() == 1


class TestStats:
    def test_empty(self, store):
        assert store.count() == 0
        assert store.average_score() == 0.0
        assert store.best_score() == 0
        stats = store.progress_stats()
        assert stats.total_sessions == 0

    def test_unreadable_history_counts_as_empty(self, store):
        store.sessions_dir.mkdir(parents=True)
        store.path.write_text("garbage")
        assert store.count() == 0
        assert store.best_score() == 0

    def test_scores(self, store):
        for minutes, overall in enumerate((40, 80, 60)):
            store.save(make_session(minutes=minutes, overall=overall))
        assert store.count() == 3
        assert store.average_score() == pytest.approx(60.0)
        assert store.best_score() == 80

    def test_progress_stats_with_trend(self, store):
        # minutes 0-4 are the older five (70), 5-9 the newest five (90)
        for minutes in range(10):
            overall = 90 if minutes >= 5 else 70
            store.save(make_session(minutes=minutes, overall=overall, accuracy=0.8, wpm=150.0))
        stats = store.progress_stats()
        assert stats.total_sessions == 10
        assert stats.average_score == pytest.approx(80.0)
        assert stats.best_score == 90
        assert stats.average_accuracy == pytest.approx(0.8)
        assert stats.average_wpm == pytest.approx(150.0)
        assert stats.improvement_trend == pytest.approx(20.0)

    def test_no_trend_below_ten_sessions(self, store):
        for minutes in range(9):
            store.save(make_session(minutes=minutes, overall=10 * minutes))
        assert store.progress_stats().improvement_trend == 0.0

    def test_recent_and_date_range(self, store):
        for minutes in range(6):
            store.save(make_session(minutes=minutes))
        recent = store.recent(limit=3)
        assert [s.timestamp for s in recent] == [
            BASE_TIME + timedelta(minutes=m) for m in (5, 4, 3)
        ]
        window = store.in_date_range(
            BASE_TIME + timedelta(minutes=1), BASE_TIME + timedelta(minutes=2)
        )
        assert len(window) == 2
