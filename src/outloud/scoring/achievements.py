"""Achievement rules evaluated against a single game score."""

from collections.abc import Callable
from typing import NamedTuple

from outloud.models.score import Achievement, GameScore


class AchievementRule(NamedTuple):
    name: str
    description: str
    icon_name: str
    predicate: Callable[[GameScore], bool]


# Evaluated in order; every matching rule fires.
ACHIEVEMENT_RULES: list[AchievementRule] = [
    AchievementRule(
        "Word Perfect",
        "Achieved 95%+ accuracy",
        "star.fill",
        lambda s: s.accuracy_score >= 95,
    ),
    AchievementRule(
        "Speed Reader",
        "Hit the ideal reading speed",
        "bolt.fill",
        lambda s: s.speed_score >= 95,
    ),
    AchievementRule(
        "Finisher",
        "Read the entire text",
        "checkmark.circle.fill",
        lambda s: s.completion_score == 100,
    ),
    AchievementRule(
        "Reading Master",
        "Excellent overall performance",
        "crown.fill",
        lambda s: s.overall_score >= 90,
    ),
    AchievementRule(
        "Well Rounded",
        "Good performance in all areas",
        "circle.hexagongrid.fill",
        lambda s: s.accuracy_score >= 80 and s.speed_score >= 80 and s.completion_score >= 80,
    ),
    AchievementRule(
        "First Steps",
        "Completed your first reading session",
        "figure.walk",
        lambda s: True,
    ),
    AchievementRule(
        "Perfectionist",
        "Perfect accuracy and completion",
        "diamond.fill",
        lambda s: s.accuracy_score == 100 and s.completion_score == 100,
    ),
    AchievementRule(
        "Speed Demon",
        "Fast and accurate reading",
        "flame.fill",
        lambda s: s.speed_score >= 90 and s.accuracy_score >= 85,
    ),
]


def check_achievements(score: GameScore) -> list[Achievement]:
    """Return a fresh Achievement for every rule the score satisfies."""
    return [
        Achievement(name=rule.name, description=rule.description, icon_name=rule.icon_name)
        for rule in ACHIEVEMENT_RULES
        if rule.predicate(score)
    ]
