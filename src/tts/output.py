"""Sounddevice-backed audio playback for spoken announcements."""

import logging
from typing import Optional

import numpy as np
import sounddevice as sd

from .errors import TTSError


class SoundDeviceAudioOutput:
    """Plays mono PCM arrays through a selected sounddevice output."""
    def __init__(
        self,
        output_device_index: Optional[int] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self._output_device_index = output_device_index
        self._logger = logger or logging.getLogger(__name__)

    def play(self, wav: np.ndarray, sample_rate_hz: int) -> None:
        """Play `wav` and block until playback has finished."""
        if wav.ndim != 1:
            raise TTSError("Expected mono PCM array for playback")
        if len(wav) == 0:
            raise TTSError("Cannot play empty audio buffer")

        self._logger.debug(
            "Playing %.2fs of audio on device %s",
            len(wav) / sample_rate_hz,
            self._output_device_index,
        )
        try:
            sd.play(wav, samplerate=sample_rate_hz, device=self._output_device_index)
            sd.wait()
        except Exception as error:
            raise TTSError(f"Audio playback failed: {error}") from error
