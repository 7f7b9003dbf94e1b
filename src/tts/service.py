"""Speech sinks that turn announcement phrases into audio."""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING, Any, Optional, Protocol

from .errors import TTSError

if TYPE_CHECKING:
    import numpy as np


class SpeechEngine(Protocol):
    def synthesize(self, text: str) -> tuple["np.ndarray", int]: ...


class AudioOutput(Protocol):
    def play(self, wav: Any, sample_rate_hz: int) -> None: ...


class SpeechService:
    """Fire-and-forget speech: synthesis and playback run on a worker thread.

    At most one phrase is in flight. While it plays `is_busy()` reports True
    and further `speak()` calls are dropped, not queued. Synthesis and
    playback failures are logged and swallowed.
    """
    def __init__(
        self,
        engine: SpeechEngine,
        output: AudioOutput,
        logger: Optional[logging.Logger] = None,
    ):
        self._engine = engine
        self._output = output
        self._logger = logger or logging.getLogger(__name__)
        self._lock = threading.Lock()
        self._worker: Optional[threading.Thread] = None

    def is_busy(self) -> bool:
        with self._lock:
            return self._worker is not None

    def speak(self, text: str) -> None:
        if not text.strip():
            return

        with self._lock:
            if self._worker is not None:
                self._logger.debug("Dropping phrase while speaking: %r", text)
                return
            worker = threading.Thread(
                target=self._speak_worker,
                args=(text,),
                daemon=True,
                name="speech",
            )
            self._worker = worker
        worker.start()

    def wait_until_idle(self, timeout: Optional[float] = None) -> bool:
        """Block until the current phrase finished; returns False on timeout."""
        with self._lock:
            worker = self._worker
        if worker is None:
            return True
        worker.join(timeout=timeout)
        return not worker.is_alive()

    def _speak_worker(self, text: str) -> None:
        try:
            wav, sample_rate_hz = self._engine.synthesize(text)
            self._logger.debug(
                "Playing %d samples of synthesized audio at %d Hz",
                len(wav),
                sample_rate_hz,
            )
            self._output.play(wav, sample_rate_hz)
        except TTSError as error:
            self._logger.error("TTS announcement failed: %s", error)
        except Exception:
            self._logger.exception("Unexpected failure while speaking %r", text)
        finally:
            with self._lock:
                self._worker = None


class SilentSpeechService:
    """Speech sink used when TTS is disabled; logs phrases instead of speaking."""
    def __init__(self, logger: Optional[logging.Logger] = None):
        self._logger = logger or logging.getLogger(__name__)

    def is_busy(self) -> bool:
        return False

    def speak(self, text: str) -> None:
        self._logger.info("Announcement: %s", text.strip())
