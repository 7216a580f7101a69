"""Speech-to-text through the OpenAI Whisper transcription endpoint."""

from pathlib import Path
from typing import Any

import httpx
import openai
import structlog
from openai import AsyncOpenAI

from outloud.config import Settings
from outloud.errors import TranscriptionError, TranscriptionFailure
from outloud.services.protocols import Transcription

logger = structlog.get_logger()

# Whisper does not report a confidence, so a fixed value is used.
DEFAULT_CONFIDENCE = 0.95
COST_PER_MINUTE_USD = 0.006


def _error_message(body: Any) -> str | None:
    """Pull ``message`` out of an OpenAI error body (nested or flat)."""
    if not isinstance(body, dict):
        return None
    inner = body.get("error", body)
    if isinstance(inner, dict) and isinstance(inner.get("message"), str):
        return inner["message"]
    return None


class WhisperTranscriber:
    """Transcribes recorded audio files.

    Args:
        api_key: OpenAI API key.
        base_url: API base URL.
        model: Transcription model name.
    """

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://api.openai.com/v1",
        model: str = "whisper-1",
    ):
        self.api_key = api_key
        self.base_url = base_url
        self.model = model
        self._client: AsyncOpenAI | None = None

    @classmethod
    def from_settings(cls, settings: Settings) -> "WhisperTranscriber":
        return cls(
            api_key=settings.openai_api_key,
            base_url=settings.api_base_url,
            model=settings.transcription_model,
        )

    def _get_client(self) -> AsyncOpenAI:
        if self._client is None:
            self._client = AsyncOpenAI(api_key=self.api_key, base_url=self.base_url)
        return self._client

    def _check_endpoint(self) -> None:
        try:
            url = httpx.URL(self.base_url)
        except httpx.InvalidURL as e:
            raise TranscriptionError(TranscriptionFailure.INVALID_ENDPOINT) from e
        if url.scheme not in ("http", "https") or not url.host:
            raise TranscriptionError(TranscriptionFailure.INVALID_ENDPOINT)

    async def transcribe(self, audio_path: Path) -> Transcription:
        """Send an audio file to Whisper and return its text.

        Args:
            audio_path: Recorded audio file.

        Returns:
            Transcription with the recognised text and a fixed confidence.

        Raises:
            TranscriptionError: Missing key, bad endpoint, network or service
                failure, or a response without text.
        """
        if not self.api_key:
            raise TranscriptionError(TranscriptionFailure.NO_CREDENTIAL)
        self._check_endpoint()

        try:
            audio = audio_path.read_bytes()
        except OSError as e:
            raise TranscriptionError(
                TranscriptionFailure.NETWORK_ERROR,
                f"Failed to read audio file: {e}",
            ) from e

        try:
            response = await self._get_client().audio.transcriptions.create(
                model=self.model,
                file=(audio_path.name, audio),
                response_format="json",
            )
        except openai.APIStatusError as e:
            message = _error_message(e.body) or f"HTTP {e.status_code}"
            logger.error("transcription_service_error", status=e.status_code, error=message)
            raise TranscriptionError(TranscriptionFailure.SERVICE_ERROR, message) from e
        except openai.APIResponseValidationError as e:
            raise TranscriptionError(TranscriptionFailure.MALFORMED_RESPONSE) from e
        except openai.APIConnectionError as e:
            logger.error("transcription_network_error", error=str(e))
            raise TranscriptionError(TranscriptionFailure.NETWORK_ERROR, str(e)) from e

        text = getattr(response, "text", None)
        if not isinstance(text, str):
            raise TranscriptionError(TranscriptionFailure.MALFORMED_RESPONSE)

        logger.info("transcription_complete", path=str(audio_path), characters=len(text))
        return Transcription(text=text, confidence=DEFAULT_CONFIDENCE)

    @staticmethod
    def estimate_cost(duration: float) -> float:
        """Estimated USD cost of transcribing ``duration`` seconds of audio."""
        return duration / 60.0 * COST_PER_MINUTE_USD
