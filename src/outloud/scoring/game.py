"""Composite game score from reading metrics."""

import math

import structlog

from outloud.analysis.wpm import ACCEPTABLE_WPM_RANGE, IDEAL_WPM_RANGE
from outloud.models.metrics import ReadingMetrics
from outloud.models.score import GameScore
from outloud.scoring.achievements import check_achievements

logger = structlog.get_logger()


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero (scores are non-negative)."""
    return int(math.floor(value + 0.5))


def calculate_accuracy_score(accuracy: float) -> int:
    return round_half_up(accuracy * 100)


def calculate_completion_score(completion_rate: float) -> int:
    return round_half_up(completion_rate * 100)


def calculate_speed_score(wpm: float) -> int:
    """Score reading speed against the ideal and acceptable WPM ranges.

    Args:
        wpm: Words per minute.

    Returns:
        100 inside the ideal range, 70-100 inside the acceptable range,
        otherwise a proportional score floored at 10.
    """
    ideal_low, ideal_high = IDEAL_WPM_RANGE
    acceptable_low, acceptable_high = ACCEPTABLE_WPM_RANGE

    if ideal_low <= wpm <= ideal_high:
        return 100
    if acceptable_low <= wpm <= acceptable_high:
        distance_from_ideal = min(abs(wpm - ideal_low), abs(wpm - ideal_high))
        max_distance = max(ideal_low - acceptable_low, acceptable_high - ideal_high)
        score = 100 - int(distance_from_ideal / max_distance * 30)
        return max(score, 70)
    if wpm < acceptable_low:
        return max(int(wpm / acceptable_low * 70), 10)
    return max(int(acceptable_high / wpm * 70), 10)


def calculate_overall_score(metrics: ReadingMetrics) -> GameScore:
    """Combine accuracy, speed and completion into a GameScore.

    The overall score is the rounded mean of the three sub-scores. Achievements
    are evaluated against the freshly computed score and attached to the result.
    """
    accuracy_score = calculate_accuracy_score(metrics.accuracy)
    speed_score = calculate_speed_score(metrics.wpm)
    completion_score = calculate_completion_score(metrics.completion_rate)
    overall_score = round_half_up((accuracy_score + speed_score + completion_score) / 3.0)

    base = GameScore(
        overall_score=overall_score,
        accuracy_score=accuracy_score,
        speed_score=speed_score,
        completion_score=completion_score,
    )
    achievements = check_achievements(base)

    logger.debug(
        "game_score_calculated",
        overall=overall_score,
        accuracy=accuracy_score,
        speed=speed_score,
        completion=completion_score,
        achievements=len(achievements),
    )

    return base.model_copy(update={"achievements": tuple(achievements)})
