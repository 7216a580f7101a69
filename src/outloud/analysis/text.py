"""Text normalisation, tokenisation and input validation."""

import re
from collections.abc import Iterator

from outloud.errors import TextValidationError
from outloud.models.session import ValidationResult

MIN_CHARACTER_COUNT = 10
MAX_CHARACTER_COUNT = 10000
MAX_WORD_COUNT = 2000

_NON_TOKEN_CHARS = re.compile(r"[^a-z0-9\s]")
_NON_COMPARABLE_CHARS = re.compile(r"[^a-zA-Z0-9\s]")


def iter_tokens(text: str) -> Iterator[str]:
    """Yield lowercase tokens with everything outside [a-z0-9] removed."""
    cleaned = _NON_TOKEN_CHARS.sub("", text.lower())
    for token in cleaned.split():
        if token:
            yield token


def tokenize(text: str) -> list[str]:
    """Normalise text into a list of comparable words.

    Example: "Hello, World!" -> ["hello", "world"]
    """
    return list(iter_tokens(text))


def tokenize_to_string(text: str) -> str:
    """Normalised form of the text as a single space-joined string."""
    return " ".join(iter_tokens(text))


def count_words(text: str) -> int:
    """Count whitespace-separated words without normalising them."""
    return len(text.split())


def prepare_text_for_comparison(text: str) -> str:
    return _NON_COMPARABLE_CHARS.sub("", text.strip().lower())


def validate_text(text: str) -> ValidationResult:
    """Check that reading text is within the accepted length bounds.

    Args:
        text: Raw text entered by the user.

    Returns:
        ValidationResult with counts taken from the trimmed text.
    """
    trimmed = text.strip()
    if not trimmed:
        return ValidationResult(
            is_valid=False,
            error_message="Please enter some text to read",
            word_count=0,
            character_count=0,
        )

    character_count = len(trimmed)
    word_count = count_words(trimmed)

    error_message = None
    if character_count < MIN_CHARACTER_COUNT:
        error_message = (
            f"Text is too short. Please enter at least {MIN_CHARACTER_COUNT} characters"
        )
    elif character_count > MAX_CHARACTER_COUNT:
        error_message = (
            f"Text is too long. Please keep it under {MAX_CHARACTER_COUNT} characters"
        )
    elif word_count > MAX_WORD_COUNT:
        error_message = (
            f"Text has too many words. Please keep it under {MAX_WORD_COUNT} words"
        )

    return ValidationResult(
        is_valid=error_message is None,
        error_message=error_message,
        word_count=word_count,
        character_count=character_count,
    )


def require_valid_text(text: str) -> ValidationResult:
    """Like validate_text, but raise TextValidationError for rejected text."""
    result = validate_text(text)
    if not result.is_valid:
        raise TextValidationError(result.error_message or "invalid text")
    return result
