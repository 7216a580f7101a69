"""Game score and achievement models."""

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class Achievement(BaseModel):
    """A badge unlocked by a single scoring call."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    name: str
    description: str
    icon_name: str
    unlocked_at: datetime = Field(default_factory=datetime.now)


class GameScore(BaseModel):
    """Sub-scores (0-100 each) plus the achievements they unlocked."""

    model_config = ConfigDict(frozen=True)

    overall_score: int = 0
    accuracy_score: int = 0
    speed_score: int = 0
    completion_score: int = 0
    achievements: tuple[Achievement, ...] = ()

    @property
    def achievement_names(self) -> list[str]:
        return [a.name for a in self.achievements]
