class TTSError(Exception):
    """Raised when speech synthesis or playback fails."""


class TTSConfigurationError(TTSError):
    """Raised when TTS configuration is invalid."""
