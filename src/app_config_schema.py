"""Dataclass schema objects used by runtime configuration loading."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

DEFAULT_CONFIG_FILE = "config.toml"
DEFAULT_NOTES_STORE_FILE = "time_tell_store.json"


class AppConfigurationError(Exception):
    """Raised when application configuration fails."""


@dataclass(frozen=True)
class AppSettings:
    """Process-wide settings from `[app]`."""
    log_level: str = "INFO"


@dataclass(frozen=True)
class TTSSettings:
    """Text-to-speech settings from `[tts]`."""
    enabled: bool = False
    model_path: str = ""
    hf_filename: str = ""
    hf_repo_id: str = ""
    hf_revision: str = "main"
    output_device: Optional[int] = None


@dataclass(frozen=True)
class NotesSettings:
    """Notes persistence settings from `[notes]`."""
    store_file: str = ""


@dataclass(frozen=True)
class ConsoleSettings:
    """Terminal front-end settings from `[console]`."""
    show_ticks: bool = True


@dataclass(frozen=True)
class AppConfig:
    """Complete typed runtime configuration loaded from `config.toml`."""
    app: AppSettings
    tts: TTSSettings
    notes: NotesSettings
    console: ConsoleSettings
    source_file: str


@dataclass(frozen=True)
class SecretConfig:
    """Environment-provided secrets kept out of `config.toml`."""
    hf_token: Optional[str]
