"""Reading measurement models."""

from pydantic import BaseModel, ConfigDict, Field, field_validator


def clamp_unit(value: float) -> float:
    """Clamp a ratio into [0, 1]."""
    return max(0.0, min(1.0, value))


class ReadingMetrics(BaseModel):
    """Measured outcome of one reading attempt."""

    model_config = ConfigDict(frozen=True)

    accuracy: float = 0.0
    wpm: float = Field(default=0.0, ge=0.0)
    duration: float = Field(default=0.0, ge=0.0)  # seconds
    word_count: int = Field(default=0, ge=0)
    completion_rate: float = 0.0
    confidence_score: float = 0.0
    added_words: tuple[str, ...] = ()
    missed_words: tuple[str, ...] = ()

    @field_validator("accuracy", "completion_rate", "confidence_score")
    @classmethod
    def _clamp(cls, value: float) -> float:
        return clamp_unit(value)


class AccuracyResult(BaseModel):
    """Word-level comparison between the original and spoken text."""

    model_config = ConfigDict(frozen=True)

    overall_accuracy: float = 0.0
    word_level_accuracy: float = 0.0
    completion_rate: float = 0.0
    added_words: tuple[str, ...] = ()
    missed_words: tuple[str, ...] = ()
    total_words: int = Field(default=0, ge=0)
    spoken_words: int = Field(default=0, ge=0)


class Mispronunciation(BaseModel):
    """A missed word paired with a similar-looking word that was spoken instead."""

    model_config = ConfigDict(frozen=True)

    original_word: str
    spoken_word: str
    position: int = Field(ge=0)  # index into the missed-words sequence
