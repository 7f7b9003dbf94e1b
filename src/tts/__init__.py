"""Public exports for text-to-speech components.

The Piper engine and sounddevice output live in `tts.engine` and
`tts.output`; import them directly so the audio stack is only loaded
when speech is enabled.
"""

from .config import TTSConfig
from .errors import TTSConfigurationError, TTSError
from .service import SilentSpeechService, SpeechService

__all__ = [
    "SilentSpeechService",
    "SpeechService",
    "TTSConfig",
    "TTSConfigurationError",
    "TTSError",
]
