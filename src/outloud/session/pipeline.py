"""Pure scoring pipeline: transcript in, completed ReadingSession out."""

from pathlib import Path

import structlog

from outloud.analysis.accuracy import calculate_wpm, compare_texts
from outloud.analysis.text import count_words
from outloud.analysis.wpm import classify_wpm
from outloud.models.metrics import ReadingMetrics
from outloud.models.session import ReadingSession
from outloud.scoring.game import calculate_overall_score

logger = structlog.get_logger()


def score_reading(
    original_text: str,
    transcribed_text: str,
    duration: float,
    confidence: float,
    recording_path: Path | None = None,
) -> ReadingSession:
    """Turn one transcribed reading into a scored session.

    Args:
        original_text: Text the user was asked to read.
        transcribed_text: What the transcription service heard.
        duration: Seconds between the start of recording and the artifact.
        confidence: Transcription confidence (0-1).
        recording_path: Recorded audio file, if kept.

    Returns:
        A new immutable ReadingSession.
    """
    word_count = count_words(original_text)
    wpm = calculate_wpm(word_count, duration)
    accuracy = compare_texts(original_text, transcribed_text)

    metrics = ReadingMetrics(
        accuracy=accuracy.overall_accuracy,
        wpm=wpm,
        duration=max(duration, 0.0),
        word_count=word_count,
        completion_rate=accuracy.completion_rate,
        confidence_score=confidence,
        added_words=accuracy.added_words,
        missed_words=accuracy.missed_words,
    )
    score = calculate_overall_score(metrics)

    session = ReadingSession(
        original_text=original_text,
        recording_path=str(recording_path) if recording_path is not None else None,
        transcribed_text=transcribed_text,
        metrics=metrics,
        score=score,
    )
    logger.info(
        "reading_scored",
        session_id=session.id,
        wpm=round(wpm, 1),
        pace=classify_wpm(wpm).value,
        overall=score.overall_score,
        achievements=score.achievement_names,
    )
    return session
