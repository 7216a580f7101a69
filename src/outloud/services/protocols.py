"""Collaborator interfaces the session orchestrator depends on."""

from pathlib import Path
from typing import NamedTuple, Protocol, runtime_checkable

from outloud.models.session import ReadingSession


class Transcription(NamedTuple):
    text: str
    confidence: float  # 0-1


@runtime_checkable
class AudioCaptureService(Protocol):
    """Records the user's voice to an audio artifact.

    ``start_recording`` raises CaptureError (permission denied or device failure).
    """

    @property
    def is_recording(self) -> bool: ...

    async def start_recording(self) -> None: ...

    async def stop_recording(self) -> Path | None: ...

    def current_duration(self) -> float: ...


@runtime_checkable
class TranscriptionService(Protocol):
    """Turns a recorded artifact into text. Raises TranscriptionError."""

    async def transcribe(self, audio_path: Path) -> Transcription: ...


@runtime_checkable
class SessionRepository(Protocol):
    """Stores completed sessions. Raises PersistenceError."""

    def save(self, session: ReadingSession) -> None: ...

    def load_all(self) -> list[ReadingSession]: ...

    def delete(self, session_id: str) -> None: ...
