import logging
from pathlib import Path
from typing import Any, Optional

import numpy as np
from huggingface_hub import hf_hub_download
from huggingface_hub.utils import (
    EntryNotFoundError,
    HfHubHTTPError,
    RepositoryNotFoundError,
)
from piper.voice import PiperVoice

from .config import TTSConfig
from .errors import TTSError


class PiperTTSEngine:
    """Synthesizes announcement text into mono float32 PCM with a Piper voice."""

    def __init__(
        self,
        config: TTSConfig,
        logger: Optional[logging.Logger] = None,
    ):
        self._config = config
        self._logger = logger or logging.getLogger(__name__)
        model_file = self._ensure_voice_files()

        try:
            self._voice = PiperVoice.load(str(model_file))
            self._sample_rate_hz = int(self._voice.config.sample_rate)
        except Exception as error:
            raise TTSError(f"Failed to load Piper voice {model_file}: {error}") from error

        self._logger.info(
            "Piper voice loaded: %s (%d Hz)",
            model_file.name,
            self._sample_rate_hz,
        )

    @property
    def sample_rate_hz(self) -> int:
        return self._sample_rate_hz

    def _ensure_voice_files(self) -> Path:
        model_file = self._config.model_file
        config_file = self._config.model_config_file
        # Repo-relative names; hf_filename may include sub-directories.
        wanted = {
            self._config.hf_filename: model_file,
            f"{self._config.hf_filename}.json": config_file,
        }
        missing = {name: path for name, path in wanted.items() if not path.is_file()}
        if not missing:
            return model_file

        repo_id = self._config.hf_repo_id
        if not repo_id:
            raise TTSError(
                "Piper voice files are missing: "
                f"{', '.join(path.name for path in missing.values())}. "
                "Place them in tts.model_path or set tts.hf_repo_id for auto-download."
            )

        model_dir = Path(self._config.model_path).expanduser()
        try:
            model_dir.mkdir(parents=True, exist_ok=True)
        except OSError as error:
            raise TTSError(f"Failed to create TTS model directory {model_dir}: {error}") from error

        for name in missing:
            self._logger.info("Downloading Piper voice file %s from %s", name, repo_id)
            self._download(repo_id=repo_id, filename=name, model_dir=model_dir)

        still_missing = [name for name, path in missing.items() if not path.is_file()]
        if still_missing:
            raise TTSError(
                f"Downloaded Piper voice is incomplete, missing: {', '.join(still_missing)}"
            )
        return model_file

    def _download(self, *, repo_id: str, filename: str, model_dir: Path) -> None:
        try:
            hf_hub_download(
                repo_id=repo_id,
                filename=filename,
                revision=self._config.hf_revision,
                token=self._config.hf_token,
                local_dir=str(model_dir),
            )
        except RepositoryNotFoundError as error:
            raise TTSError(f"Piper Hugging Face repository not found: {repo_id}") from error
        except EntryNotFoundError as error:
            raise TTSError(f"Piper voice file not found in {repo_id}: {filename}") from error
        except HfHubHTTPError as error:
            raise TTSError(
                f"HTTP error downloading Piper voice file {filename} from {repo_id}: {error}"
            ) from error
        except Exception as error:
            raise TTSError(
                f"Failed to download Piper voice file {filename} from {repo_id}: {error}"
            ) from error

    def synthesize(self, text: str) -> tuple[np.ndarray, int]:
        if not text.strip():
            raise TTSError("Text to synthesize cannot be empty")

        try:
            pcm = b"".join(_chunk_bytes(chunk) for chunk in self._voice.synthesize(text))
        except TTSError:
            raise
        except Exception as error:
            raise TTSError(f"TTS synthesis failed: {error}") from error

        samples = np.frombuffer(pcm, dtype=np.int16)
        if samples.size == 0:
            raise TTSError("Piper synthesis produced an empty audio buffer")
        return samples.astype(np.float32) / 32768.0, self._sample_rate_hz


def _chunk_bytes(chunk: Any) -> bytes:
    raw = getattr(chunk, "audio_int16_bytes", None)
    if raw is None:
        raw = getattr(chunk, "audio_data", chunk)

    if isinstance(raw, np.ndarray):
        return raw.astype(np.int16, copy=False).tobytes()
    if isinstance(raw, (bytes, bytearray, memoryview)):
        return bytes(raw)
    raise TTSError(f"Unsupported Piper chunk audio type: {type(raw).__name__}")
