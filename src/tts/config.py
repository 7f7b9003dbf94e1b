"""Configuration model for Piper voice assets and output selection."""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .errors import TTSConfigurationError


@dataclass(frozen=True)
class TTSConfig:
    """Resolved Piper voice settings and optional output-device selection."""
    model_path: str = ""
    hf_filename: str = ""
    hf_repo_id: str = ""
    hf_revision: str = "main"
    hf_token: Optional[str] = None
    output_device_index: Optional[int] = None

    @property
    def model_file(self) -> Path:
        return Path(self.model_path).expanduser() / self.hf_filename

    @property
    def model_config_file(self) -> Path:
        return Path(self.model_path).expanduser() / f"{self.hf_filename}.json"

    @classmethod
    def from_settings(cls, settings, *, hf_token: Optional[str] = None) -> "TTSConfig":
        model_path = (settings.model_path or "").strip()
        hf_filename = (settings.hf_filename or "").strip()
        hf_repo_id = (settings.hf_repo_id or "").strip()
        hf_revision = (settings.hf_revision or "main").strip() or "main"

        if not model_path:
            raise TTSConfigurationError("TTS model_path cannot be empty")
        if not hf_filename:
            # A model_path pointing straight at the .onnx voice is also accepted.
            voice_file = Path(model_path)
            if voice_file.suffix.lower() != ".onnx":
                raise TTSConfigurationError("TTS hf_filename cannot be empty")
            hf_filename = voice_file.name
            model_path = str(voice_file.parent)

        return cls(
            model_path=model_path,
            hf_filename=hf_filename,
            hf_repo_id=hf_repo_id,
            hf_revision=hf_revision,
            hf_token=hf_token,
            output_device_index=settings.output_device,
        )
