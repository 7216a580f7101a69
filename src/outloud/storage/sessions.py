"""Reading session history persistence (JSON + fcntl.flock + atomic write)."""

import fcntl
import json
import os
import tempfile
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path

import structlog
from pydantic import TypeAdapter, ValidationError

from outloud.errors import PersistenceError, PersistenceFailure
from outloud.models.session import ProgressStats, ReadingSession

logger = structlog.get_logger()

SESSIONS_FILENAME = "reading_sessions.json"
MAX_SESSION_HISTORY = 100

_sessions_adapter = TypeAdapter(list[ReadingSession])


class SessionStore:
    """Keeps the newest reading sessions in a single JSON file.

    Args:
        sessions_dir: Directory holding the sessions file.
        max_sessions: Number of sessions kept; the oldest are dropped on overflow.
    """

    def __init__(self, sessions_dir: Path, max_sessions: int = MAX_SESSION_HISTORY):
        self.sessions_dir = sessions_dir
        self.max_sessions = max_sessions

    @property
    def path(self) -> Path:
        return self.sessions_dir / SESSIONS_FILENAME

    @contextmanager
    def _locked(self) -> Iterator[None]:
        try:
            self.sessions_dir.mkdir(parents=True, exist_ok=True)
            lock_file = open(self.sessions_dir / (SESSIONS_FILENAME + ".lock"), "w")
        except OSError as e:
            raise PersistenceError(PersistenceFailure.WRITE_FAILED) from e
        with lock_file:
            fcntl.flock(lock_file, fcntl.LOCK_EX)
            yield

    def _write(self, sessions: list[ReadingSession]) -> None:
        try:
            payload = json.dumps(
                {"sessions": _sessions_adapter.dump_python(sessions, mode="json")},
                indent=2,
            )
        except (TypeError, ValueError) as e:
            raise PersistenceError(PersistenceFailure.ENCODING_FAILED) from e
        try:
            with tempfile.NamedTemporaryFile(
                "w", dir=self.sessions_dir, delete=False, suffix=".json"
            ) as tmp:
                tmp.write(payload)
            os.replace(tmp.name, self.path)
        except OSError as e:
            raise PersistenceError(PersistenceFailure.WRITE_FAILED) from e

    def load_all(self) -> list[ReadingSession]:
        """All stored sessions, newest first. Empty if nothing was saved yet."""
        if not self.path.exists():
            return []
        try:
            raw = self.path.read_text()
        except OSError as e:
            raise PersistenceError(PersistenceFailure.LOAD_FAILED) from e
        try:
            data = json.loads(raw)
            sessions = _sessions_adapter.validate_python(data.get("sessions", []))
        except (ValueError, AttributeError, ValidationError) as e:
            raise PersistenceError(PersistenceFailure.DECODING_FAILED) from e
        return sorted(sessions, key=lambda s: s.timestamp, reverse=True)

    def save(self, session: ReadingSession) -> None:
        """Store a session, replacing any previous entry with the same id."""
        with self._locked():
            sessions = [s for s in self.load_all() if s.id != session.id]
            sessions.append(session)
            sessions.sort(key=lambda s: s.timestamp, reverse=True)
            dropped = len(sessions) - self.max_sessions
            if dropped > 0:
                sessions = sessions[: self.max_sessions]
                logger.debug("session_history_truncated", dropped=dropped)
            self._write(sessions)
        logger.info("session_saved", session_id=session.id)

    def delete(self, session_id: str) -> None:
        with self._locked():
            try:
                sessions = self.load_all()
            except PersistenceError as e:
                raise PersistenceError(PersistenceFailure.WRITE_FAILED) from e
            self._write([s for s in sessions if s.id != session_id])
        logger.info("session_deleted", session_id=session_id)

    def get(self, session_id: str) -> ReadingSession | None:
        for session in self.load_all():
            if session.id == session_id:
                return session
        return None

    def _load_or_empty(self) -> list[ReadingSession]:
        try:
            return self.load_all()
        except PersistenceError as e:
            logger.warning("session_history_unreadable", error=e.description)
            return []

    def count(self) -> int:
        return len(self._load_or_empty())

    def average_score(self) -> float:
        sessions = self._load_or_empty()
        if not sessions:
            return 0.0
        return sum(s.score.overall_score for s in sessions) / len(sessions)

    def best_score(self) -> int:
        return max((s.score.overall_score for s in self._load_or_empty()), default=0)

    def recent(self, limit: int = 10) -> list[ReadingSession]:
        return self.load_all()[:limit]

    def in_date_range(self, start: datetime, end: datetime) -> list[ReadingSession]:
        return [s for s in self.load_all() if start <= s.timestamp <= end]

    def progress_stats(self) -> ProgressStats:
        """Averages over the history plus the recent improvement trend.

        The trend compares the mean overall score of the newest five sessions
        with the five before them, and is 0 until ten sessions exist.
        """
        sessions = self._load_or_empty()
        if not sessions:
            return ProgressStats()

        total = len(sessions)
        overall = [s.score.overall_score for s in sessions]
        trend = 0.0
        if total >= 10:
            trend = sum(overall[:5]) / 5.0 - sum(overall[5:10]) / 5.0

        return ProgressStats(
            total_sessions=total,
            average_accuracy=sum(s.metrics.accuracy for s in sessions) / total,
            average_wpm=sum(s.metrics.wpm for s in sessions) / total,
            average_score=sum(overall) / total,
            best_score=max(overall),
            improvement_trend=trend,
        )
