"""Microphone recorder writing a single WAV artifact per reading."""

import asyncio
import time
import uuid
import wave
from pathlib import Path

import numpy as np
import sounddevice as sd
import structlog

from outloud.errors import CaptureError, CaptureFailure

logger = structlog.get_logger()


class AudioRecorder:
    """Captures microphone audio straight to a 16-bit WAV file.

    Args:
        output_dir: Directory to save recordings.
        sample_rate: Audio sample rate in Hz.
        channels: Number of audio channels.
        device: Input device index (None for default).
        max_duration: Seconds after which incoming audio is dropped.
    """

    def __init__(
        self,
        output_dir: Path,
        sample_rate: int = 44100,
        channels: int = 1,
        device: int | None = None,
        max_duration: float = 300.0,
    ):
        self.output_dir = output_dir
        self.sample_rate = sample_rate
        self.channels = channels
        self.device = device
        self.max_duration = max_duration
        self._stream: sd.InputStream | None = None
        self._file: wave.Wave_write | None = None
        self._path: Path | None = None
        self._started_at: float | None = None
        self._frames_written = 0
        self._recording = False

    @property
    def is_recording(self) -> bool:
        return self._recording

    def _audio_callback(
        self,
        indata: np.ndarray,
        frames: int,
        time_info: object,
        status: sd.CallbackFlags,
    ) -> None:
        """Sounddevice callback - appends the chunk to the open WAV file."""
        if status:
            logger.warning("audio_capture_status", status=str(status))
        if not self._recording or self._file is None:
            return
        if self._frames_written >= self.max_duration * self.sample_rate:
            return
        pcm16 = (np.clip(indata, -1.0, 1.0) * 32767).astype(np.int16)
        self._file.writeframes(pcm16.tobytes())
        self._frames_written += frames

    def _open_file(self) -> None:
        try:
            self.output_dir.mkdir(parents=True, exist_ok=True)
            self._path = self.output_dir / f"recording_{uuid.uuid4().hex[:8]}.wav"
            self._file = wave.open(str(self._path), "wb")
        except OSError as e:
            logger.error("recording_file_open_failed", error=str(e))
            raise CaptureError(CaptureFailure.FILE_SYSTEM_ERROR, str(e)) from e
        self._file.setnchannels(self.channels)
        self._file.setsampwidth(2)  # 16-bit
        self._file.setframerate(self.sample_rate)

    def _close_file(self) -> None:
        if self._file:
            self._file.close()
            self._file = None

    def _abort_start(self) -> None:
        """Undo a failed start: drop the stream and remove the empty file."""
        self._recording = False
        if self._stream is not None:
            self._stream.close()
            self._stream = None
        self._close_file()
        if self._path is not None:
            self._path.unlink(missing_ok=True)
            self._path = None

    async def start_recording(self) -> None:
        """Open the input stream and start writing audio.

        Raises:
            CaptureError: Microphone access denied, device failure, or the
                recording file could not be created.
        """
        if self._recording:
            return
        self._open_file()
        self._frames_written = 0
        try:
            self._stream = sd.InputStream(
                samplerate=self.sample_rate,
                channels=self.channels,
                dtype="float32",
                device=self.device,
                callback=self._audio_callback,
            )
            self._recording = True
            self._stream.start()
        except Exception as e:
            self._abort_start()
            logger.error("audio_capture_start_failed", error=str(e))
            message = str(e).lower()
            if isinstance(e, sd.PortAudioError) and (
                "denied" in message or "permission" in message
            ):
                raise CaptureError(CaptureFailure.PERMISSION_DENIED) from e
            raise CaptureError(CaptureFailure.RECORDING_FAILED, str(e)) from e
        self._started_at = time.monotonic()
        logger.info("recording_started", path=str(self._path), sample_rate=self.sample_rate)

    async def stop_recording(self) -> Path | None:
        """Stop recording and return the finished WAV file, or None if idle."""
        if not self._recording:
            return None
        self._recording = False
        if self._stream:
            stream = self._stream
            self._stream = None
            await asyncio.to_thread(stream.stop)
            stream.close()
        self._close_file()
        self._started_at = None
        logger.info(
            "recording_stopped",
            path=str(self._path),
            seconds=round(self._frames_written / self.sample_rate, 2),
        )
        return self._path

    def current_duration(self) -> float:
        """Seconds since recording started, 0 if not recording."""
        if self._started_at is None:
            return 0.0
        return time.monotonic() - self._started_at
