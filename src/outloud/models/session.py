"""Reading session, state machine and validation models."""

import uuid
from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field

from outloud.models.metrics import ReadingMetrics
from outloud.models.score import GameScore


class SessionState(StrEnum):
    """Orchestrator lifecycle states."""

    TEXT_INPUT = "text_input"
    RECORDING = "recording"
    PROCESSING = "processing"
    RESULTS = "results"
    ERROR = "error"


class AppState(BaseModel):
    """Externally observable orchestrator state.

    ``message`` is only set for the error state.
    """

    model_config = ConfigDict(frozen=True)

    state: SessionState = SessionState.TEXT_INPUT
    message: str | None = None

    @classmethod
    def error(cls, message: str) -> "AppState":
        return cls(state=SessionState.ERROR, message=message)

    @property
    def is_error(self) -> bool:
        return self.state == SessionState.ERROR


class ReadingSession(BaseModel):
    """One completed reading attempt. Immutable once created."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    original_text: str
    recording_path: str | None = None
    transcribed_text: str = ""
    metrics: ReadingMetrics = Field(default_factory=ReadingMetrics)
    score: GameScore = Field(default_factory=GameScore)
    timestamp: datetime = Field(default_factory=datetime.now)


class ValidationResult(BaseModel):
    """Outcome of checking the reading text before recording."""

    is_valid: bool
    error_message: str | None = None
    word_count: int = 0
    character_count: int = 0


class ProgressStats(BaseModel):
    """Aggregates over the stored session history."""

    total_sessions: int = 0
    average_accuracy: float = 0.0
    average_wpm: float = 0.0
    average_score: float = 0.0
    best_score: int = 0
    improvement_trend: float = 0.0  # positive means improving
