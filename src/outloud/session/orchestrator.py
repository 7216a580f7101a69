"""Reading session state machine: record, transcribe, score, persist, show results."""

import asyncio
import time
from collections.abc import Callable
from pathlib import Path

import structlog
from pydantic import BaseModel

from outloud.analysis.text import require_valid_text
from outloud.config import Settings
from outloud.errors import (
    CaptureError,
    CaptureFailure,
    ConfigError,
    ErrorInfo,
    OutLoudError,
    TextValidationError,
    describe_error,
)
from outloud.models.session import AppState, ReadingSession, SessionState
from outloud.services.protocols import (
    AudioCaptureService,
    SessionRepository,
    TranscriptionService,
)
from outloud.session.pipeline import score_reading
from outloud.storage.sessions import SessionStore
from outloud.transcription.whisper import WhisperTranscriber

logger = structlog.get_logger()

INVALID_TEXT_ALERT = "Please enter valid text before recording."


class PipelineResult(BaseModel):
    """Outcome of one processing run: a session or an error, never both."""

    session: ReadingSession | None = None
    error: ErrorInfo | None = None

    @property
    def ok(self) -> bool:
        return self.session is not None


class SessionOrchestrator:
    """Owns the current state and the current session.

    All pipeline stages other than transcription and persistence are pure;
    at most one processing run is in flight per orchestrator.

    Args:
        capture: Audio capture collaborator.
        transcriber: Transcription collaborator.
        repository: Session persistence collaborator.
        clock: Monotonic clock used to time the recording.
    """

    def __init__(
        self,
        capture: AudioCaptureService,
        transcriber: TranscriptionService,
        repository: SessionRepository,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.capture = capture
        self.transcriber = transcriber
        self.repository = repository
        self._clock = clock

        self.state = AppState()
        self.input_text = ""
        self.current_session: ReadingSession | None = None
        self.showing_alert = False
        self.alert_message = ""

        self._recording_started_at: float | None = None
        self._pipeline_task: asyncio.Task[PipelineResult] | None = None

    @classmethod
    def from_settings(cls, settings: Settings) -> "SessionOrchestrator":
        """Wire the production collaborators from settings."""
        from outloud.audio.recorder import AudioRecorder  # noqa: PLC0415

        try:
            settings.validate_credentials()
        except ConfigError as e:
            # Recording still works; transcription will report the problem.
            logger.warning("configuration_invalid", error=e.description)
        return cls(
            capture=AudioRecorder(
                output_dir=settings.recordings_dir,
                sample_rate=settings.audio_sample_rate,
                channels=settings.audio_channels,
                device=settings.audio_input_device,
                max_duration=settings.max_recording_duration,
            ),
            transcriber=WhisperTranscriber.from_settings(settings),
            repository=SessionStore(
                settings.sessions_dir, max_sessions=settings.max_session_history
            ),
        )

    # -- state helpers -------------------------------------------------

    def _set_state(self, state: AppState) -> None:
        if state != self.state:
            logger.info(
                "state_transition",
                from_state=self.state.state.value,
                to_state=state.state.value,
            )
        self.state = state

    def _fail(self, error: BaseException) -> ErrorInfo:
        info = describe_error(error)
        self._set_state(AppState.error(info.message))
        return info

    def _show_alert(self, message: str) -> None:
        self.alert_message = message
        self.showing_alert = True

    @property
    def is_processing(self) -> bool:
        return self._pipeline_task is not None and not self._pipeline_task.done()

    async def _begin_capture(self) -> bool:
        try:
            await self.capture.start_recording()
        except OutLoudError as e:
            logger.error("recording_start_failed", error=e.description)
            self._fail(e)
            return False
        self._recording_started_at = self._clock()
        self._set_state(AppState(state=SessionState.RECORDING))
        return True

    # -- transitions ---------------------------------------------------

    async def start_recording(self) -> bool:
        """TextInput -> Recording when the input text is valid.

        Invalid text leaves the state unchanged and raises an alert.
        """
        if self.state.state != SessionState.TEXT_INPUT:
            logger.warning("start_recording_ignored", state=self.state.state.value)
            return False
        try:
            require_valid_text(self.input_text)
        except TextValidationError as e:
            logger.info("input_text_rejected", reason=e.detail)
            self._show_alert(INVALID_TEXT_ALERT)
            return False
        return await self._begin_capture()

    async def cancel_recording(self) -> None:
        """Recording -> TextInput, discarding any audio. Input text is kept."""
        if self.state.state != SessionState.RECORDING:
            logger.warning("cancel_recording_ignored", state=self.state.state.value)
            return
        await self.capture.stop_recording()
        self._recording_started_at = None
        self._set_state(AppState(state=SessionState.TEXT_INPUT))

    async def stop_recording(self) -> asyncio.Task[PipelineResult] | None:
        """Finish capture and hand the recorded artifact to processing."""
        if self.state.state != SessionState.RECORDING:
            logger.warning("stop_recording_ignored", state=self.state.state.value)
            return None
        audio_path = await self.capture.stop_recording()
        if audio_path is None:
            self._fail(CaptureError(CaptureFailure.NO_ACTIVE_RECORDING))
            return None
        return self.process_recording(audio_path)

    def process_recording(self, audio_path: Path) -> asyncio.Task[PipelineResult] | None:
        """Recording -> Processing; schedules the pipeline and returns its task.

        A second call while a run is in flight returns the running task.
        Outside the recording state nothing is scheduled and None is returned.
        Must be called from within a running event loop.
        """
        if self.is_processing:
            logger.warning("pipeline_already_running")
            return self._pipeline_task
        if self.state.state != SessionState.RECORDING:
            logger.warning("process_recording_ignored", state=self.state.state.value)
            return None

        ended_at = self._clock()
        started_at = self._recording_started_at
        duration = ended_at - started_at if started_at is not None else 0.0

        self._set_state(AppState(state=SessionState.PROCESSING))
        self._pipeline_task = asyncio.create_task(
            self._run_pipeline(audio_path, self.input_text, duration)
        )
        return self._pipeline_task

    async def _run_pipeline(
        self, audio_path: Path, original_text: str, duration: float
    ) -> PipelineResult:
        try:
            transcription = await self.transcriber.transcribe(audio_path)
            session = score_reading(
                original_text=original_text,
                transcribed_text=transcription.text,
                duration=duration,
                confidence=transcription.confidence,
                recording_path=audio_path,
            )
        except Exception as e:
            logger.exception("pipeline_failed", path=str(audio_path))
            return PipelineResult(error=self._fail(e))

        await self._persist(session)

        self.current_session = session
        self._set_state(AppState(state=SessionState.RESULTS))
        return PipelineResult(session=session)

    async def _persist(self, session: ReadingSession) -> None:
        """Save the session; storage failures never block the results."""
        try:
            await asyncio.to_thread(self.repository.save, session)
        except Exception as e:
            logger.error(
                "session_save_failed",
                session_id=session.id,
                error=describe_error(e).description,
            )

    async def wait_for_pipeline(self) -> PipelineResult | None:
        """Await the most recent processing run, if any."""
        if self._pipeline_task is None:
            return None
        return await self._pipeline_task

    async def retry_from_error(self) -> None:
        """Error -> Results when a session exists, otherwise restart capture.

        Ignored while recording or processing; from any other non-error
        state it returns to TextInput.
        """
        if self.state.state in (SessionState.PROCESSING, SessionState.RECORDING):
            logger.warning("retry_from_error_ignored", state=self.state.state.value)
            return
        if not self.state.is_error:
            self._set_state(AppState(state=SessionState.TEXT_INPUT))
            return
        if self.current_session is not None:
            self._set_state(AppState(state=SessionState.RESULTS))
        else:
            await self._begin_capture()

    async def retry_recording(self) -> bool:
        """Restart capture with a fresh start time."""
        if self.is_processing:
            logger.warning("retry_recording_ignored", state=self.state.state.value)
            return False
        if self.capture.is_recording:
            await self.capture.stop_recording()
        return await self._begin_capture()

    def start_new_session(self) -> None:
        """Clear the input and current session and return to TextInput."""
        if self.state.state in (SessionState.PROCESSING, SessionState.RECORDING):
            logger.warning("start_new_session_ignored", state=self.state.state.value)
            return
        self.input_text = ""
        self.current_session = None
        self._recording_started_at = None
        self._set_state(AppState(state=SessionState.TEXT_INPUT))

    def dismiss_alert(self) -> None:
        self.showing_alert = False
        self.alert_message = ""
