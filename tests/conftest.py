"""Shared test doubles for the session collaborators."""

from pathlib import Path

import pytest

from outloud.errors import PersistenceError, PersistenceFailure
from outloud.models.session import ReadingSession
from outloud.services.protocols import Transcription


class FakeCapture:
    def __init__(self, artifact: Path | None = Path("reading.wav")):
        self.artifact = artifact
        self.error: Exception | None = None
        self.start_calls = 0
        self._recording = False

    @property
    def is_recording(self) -> bool:
        return self._recording

    async def start_recording(self) -> None:
        self.start_calls += 1
        if self.error is not None:
            raise self.error
        self._recording = True

    async def stop_recording(self) -> Path | None:
        if not self._recording:
            return None
        self._recording = False
        return self.artifact

    def current_duration(self) -> float:
        return 0.0


class FakeTranscriber:
    def __init__(self, text: str = "", confidence: float = 0.95):
        self.text = text
        self.confidence = confidence
        self.error: Exception | None = None
        self.calls: list[Path] = []

    async def transcribe(self, audio_path: Path) -> Transcription:
        self.calls.append(audio_path)
        if self.error is not None:
            raise self.error
        return Transcription(text=self.text, confidence=self.confidence)


class FakeRepository:
    def __init__(self):
        self.sessions: list[ReadingSession] = []
        self.should_throw_error = False
        self.save_called = False

    def save(self, session: ReadingSession) -> None:
        self.save_called = True
        if self.should_throw_error:
            raise PersistenceError(PersistenceFailure.WRITE_FAILED)
        self.sessions.append(session)

    def load_all(self) -> list[ReadingSession]:
        return sorted(self.sessions, key=lambda s: s.timestamp, reverse=True)

    def delete(self, session_id: str) -> None:
        self.sessions = [s for s in self.sessions if s.id != session_id]


class FakeClock:
    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def capture() -> FakeCapture:
    return FakeCapture()


@pytest.fixture
def transcriber() -> FakeTranscriber:
    return FakeTranscriber()


@pytest.fixture
def repository() -> FakeRepository:
    return FakeRepository()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()
