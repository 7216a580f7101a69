"""Word-level accuracy comparison between reference text and transcript."""

from collections.abc import Sequence

import structlog

from outloud.analysis.edit_distance import similarity
from outloud.analysis.text import tokenize
from outloud.models.metrics import AccuracyResult, Mispronunciation

logger = structlog.get_logger()

SIMILARITY_THRESHOLD = 0.6


def _ordered_difference(tokens: list[str], exclude: set[str]) -> list[str]:
    """Unique tokens not in ``exclude``, in first-occurrence order."""
    return [t for t in dict.fromkeys(tokens) if t not in exclude]


def find_word_differences(
    original: list[str], spoken: list[str]
) -> tuple[list[str], list[str]]:
    """Compute (added, missed) words as set differences.

    Duplicates are collapsed; order follows the first occurrence in the
    respective token sequence.
    """
    added = _ordered_difference(spoken, set(original))
    missed = _ordered_difference(original, set(spoken))
    return added, missed


def compare_texts(original: str, spoken: str) -> AccuracyResult:
    """Compare the reference text with what was transcribed.

    Args:
        original: Text the user was asked to read.
        spoken: Transcription of the user's reading.

    Returns:
        AccuracyResult. An empty reference yields zero accuracy and completion.
    """
    original_tokens = tokenize(original)
    spoken_tokens = tokenize(spoken)
    total_words = len(original_tokens)
    spoken_words = len(spoken_tokens)

    added, missed = find_word_differences(original_tokens, spoken_tokens)

    if total_words == 0:
        return AccuracyResult(
            added_words=added,
            missed_words=missed,
            total_words=0,
            spoken_words=spoken_words,
        )

    completion_rate = min(spoken_words / total_words, 1.0)
    word_level_accuracy = (total_words - len(missed)) / total_words
    total_errors = len(missed) + len(added)
    overall_accuracy = max(0.0, 1.0 - total_errors / max(total_words, spoken_words))

    logger.debug(
        "texts_compared",
        total_words=total_words,
        spoken_words=spoken_words,
        missed=len(missed),
        added=len(added),
    )

    return AccuracyResult(
        overall_accuracy=overall_accuracy,
        word_level_accuracy=word_level_accuracy,
        completion_rate=completion_rate,
        added_words=added,
        missed_words=missed,
        total_words=total_words,
        spoken_words=spoken_words,
    )


def find_similar_word(
    target: str,
    candidates: Sequence[str],
    threshold: float = SIMILARITY_THRESHOLD,
) -> str | None:
    """Return the candidate most similar to ``target`` above ``threshold``.

    Ties keep the earliest candidate.
    """
    best_match = None
    best_score = 0.0
    for word in candidates:
        score = similarity(target, word)
        if score > best_score and score > threshold:
            best_score = score
            best_match = word
    return best_match


def identify_mispronunciations(comparison: AccuracyResult) -> list[Mispronunciation]:
    """Pair each missed word with a similar added word, if one exists."""
    pairs = []
    for index, missed_word in enumerate(comparison.missed_words):
        similar = find_similar_word(missed_word, comparison.added_words)
        if similar is not None:
            pairs.append(
                Mispronunciation(
                    original_word=missed_word,
                    spoken_word=similar,
                    position=index,
                )
            )
    return pairs


def calculate_wpm(word_count: int, duration: float) -> float:
    """Words per minute for ``word_count`` words read in ``duration`` seconds."""
    if duration <= 0:
        return 0.0
    return word_count / (duration / 60.0)
