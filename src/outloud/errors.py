"""Error taxonomy with user-facing descriptions, recovery hints and retryability."""

from enum import StrEnum

import httpx
import openai
from pydantic import BaseModel


class ErrorKind(StrEnum):
    CAPTURE = "capture"
    TRANSCRIPTION = "transcription"
    PERSISTENCE = "persistence"
    VALIDATION = "validation"
    CONFIG = "config"
    UNKNOWN = "unknown"


class OutLoudError(Exception):
    """Base error carrying what the user should be told.

    Args:
        description: Human-readable description of what went wrong.
        recovery_suggestion: Optional hint on how to recover.
        retryable: Whether the user may retry without changing anything.
    """

    kind: ErrorKind = ErrorKind.UNKNOWN

    def __init__(
        self,
        description: str,
        recovery_suggestion: str | None = None,
        retryable: bool = True,
    ):
        super().__init__(description)
        self.description = description
        self.recovery_suggestion = recovery_suggestion
        self.retryable = retryable


class CaptureFailure(StrEnum):
    PERMISSION_DENIED = "permission_denied"
    RECORDING_FAILED = "recording_failed"
    NO_ACTIVE_RECORDING = "no_active_recording"
    FILE_SYSTEM_ERROR = "file_system_error"


class CaptureError(OutLoudError):
    """Microphone permission or recording device failure."""

    kind = ErrorKind.CAPTURE

    def __init__(self, reason: CaptureFailure, detail: str | None = None):
        self.reason = reason
        self.detail = detail
        if reason == CaptureFailure.PERMISSION_DENIED:
            description = (
                "Microphone permission is required to record audio. "
                "Please enable it in your system settings."
            )
            hint = "Please enable microphone access in your system privacy settings"
        elif reason == CaptureFailure.RECORDING_FAILED:
            description = f"Recording failed: {detail or 'unknown reason'}"
            hint = "Try checking your microphone connection and try again"
        elif reason == CaptureFailure.NO_ACTIVE_RECORDING:
            description = "No active recording to stop."
            hint = "Start a new recording session"
        else:
            description = "Unable to save recording file."
            hint = "Check available storage space and try again"
        super().__init__(
            description,
            recovery_suggestion=hint,
            retryable=reason != CaptureFailure.PERMISSION_DENIED,
        )


class TranscriptionFailure(StrEnum):
    NO_CREDENTIAL = "no_credential"
    INVALID_ENDPOINT = "invalid_endpoint"
    NETWORK_ERROR = "network_error"
    SERVICE_ERROR = "service_error"
    MALFORMED_RESPONSE = "malformed_response"


class TranscriptionError(OutLoudError):
    """Speech-to-text failure: credential, network, service or response format."""

    kind = ErrorKind.TRANSCRIPTION

    def __init__(self, reason: TranscriptionFailure, detail: str | None = None):
        self.reason = reason
        self.detail = detail
        if reason == TranscriptionFailure.NO_CREDENTIAL:
            description = "OpenAI API key not configured"
            hint = "Please configure your OpenAI API key in the app settings"
        elif reason == TranscriptionFailure.INVALID_ENDPOINT:
            description = "Invalid API URL"
            hint = "There's a configuration issue. Please restart the app"
        elif reason == TranscriptionFailure.NETWORK_ERROR:
            description = f"Network error: {detail}"
            hint = "Check your internet connection and try again"
        elif reason == TranscriptionFailure.SERVICE_ERROR:
            description = f"API error: {detail}"
            hint = (
                "There may be an issue with the speech recognition service. "
                "Please try again later"
            )
        else:
            description = "Invalid response from Whisper API"
            hint = (
                "The speech recognition service returned an unexpected response. "
                "Please try again"
            )
        super().__init__(
            description,
            recovery_suggestion=hint,
            retryable=reason != TranscriptionFailure.NO_CREDENTIAL,
        )


class PersistenceFailure(StrEnum):
    ENCODING_FAILED = "encoding_failed"
    DECODING_FAILED = "decoding_failed"
    WRITE_FAILED = "write_failed"
    LOAD_FAILED = "load_failed"


_PERSISTENCE_DESCRIPTIONS: dict[PersistenceFailure, str] = {
    PersistenceFailure.ENCODING_FAILED: "Failed to encode session data",
    PersistenceFailure.DECODING_FAILED: "Failed to decode session data",
    PersistenceFailure.WRITE_FAILED: "Failed to save session",
    PersistenceFailure.LOAD_FAILED: "Failed to load sessions",
}


class PersistenceError(OutLoudError):
    """Session store encode/decode/write failure."""

    kind = ErrorKind.PERSISTENCE

    def __init__(self, reason: PersistenceFailure):
        self.reason = reason
        super().__init__(
            _PERSISTENCE_DESCRIPTIONS[reason],
            recovery_suggestion="Try restarting the app. Your data should be preserved",
            retryable=True,
        )


class TextValidationError(OutLoudError):
    """Reading text outside the accepted bounds."""

    kind = ErrorKind.VALIDATION

    def __init__(self, message: str):
        self.detail = message
        super().__init__(
            f"Text validation error: {message}",
            recovery_suggestion="Please check your text input and try again",
            retryable=False,
        )


class ConfigFailure(StrEnum):
    MISSING_CREDENTIAL = "missing_credential"
    INVALID_CREDENTIAL_FORMAT = "invalid_credential_format"


class ConfigError(OutLoudError):
    """Missing or malformed API credential."""

    kind = ErrorKind.CONFIG

    def __init__(self, reason: ConfigFailure):
        self.reason = reason
        if reason == ConfigFailure.MISSING_CREDENTIAL:
            description = (
                "OpenAI API key is missing. Please set OPENAI_API_KEY or add it "
                "to config/settings.yaml"
            )
        else:
            description = "OpenAI API key format is invalid. It should start with 'sk-'"
        super().__init__(
            description,
            recovery_suggestion="Please configure your OpenAI API key in the app settings",
            retryable=False,
        )


class UnknownError(OutLoudError):
    def __init__(self, message: str):
        super().__init__(
            f"An unexpected error occurred: {message}",
            recovery_suggestion="Please try again. If the problem persists, restart the app",
            retryable=True,
        )


class ErrorInfo(BaseModel):
    """Serializable summary of a classified error."""

    kind: ErrorKind
    description: str
    recovery_suggestion: str | None = None
    retryable: bool = True

    @property
    def message(self) -> str:
        """Description followed by the recovery hint, when there is one."""
        if self.recovery_suggestion:
            return f"{self.description}\n\n{self.recovery_suggestion}"
        return self.description


def classify_error(error: BaseException) -> OutLoudError:
    """Map any exception into the error taxonomy."""
    if isinstance(error, OutLoudError):
        return error
    # APITimeoutError subclasses APIConnectionError
    if isinstance(error, (openai.APITimeoutError, httpx.TimeoutException, TimeoutError)):
        return TranscriptionError(TranscriptionFailure.NETWORK_ERROR, "Request timed out")
    if isinstance(error, (openai.APIConnectionError, httpx.ConnectError)):
        return TranscriptionError(TranscriptionFailure.NETWORK_ERROR, "Cannot connect to server")
    if isinstance(error, (httpx.TransportError, ConnectionError)):
        return TranscriptionError(TranscriptionFailure.NETWORK_ERROR, str(error))
    return UnknownError(str(error) or type(error).__name__)


def describe_error(error: BaseException) -> ErrorInfo:
    classified = classify_error(error)
    return ErrorInfo(
        kind=classified.kind,
        description=classified.description,
        recovery_suggestion=classified.recovery_suggestion,
        retryable=classified.retryable,
    )


def user_friendly_message(error: BaseException) -> str:
    return classify_error(error).description


def recovery_suggestion(error: BaseException) -> str | None:
    return classify_error(error).recovery_suggestion


def can_retry(error: BaseException) -> bool:
    return classify_error(error).retryable
