"""Typed parser for config.toml sections into immutable app settings."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Mapping

from app_config_schema import (
    DEFAULT_NOTES_STORE_FILE,
    AppConfig,
    AppConfigurationError,
    AppSettings,
    ConsoleSettings,
    NotesSettings,
    TTSSettings,
)

_ALLOWED_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


def parse_app_config(
    raw: Mapping[str, Any],
    *,
    base_dir: Path,
    source_file: str,
) -> AppConfig:
    """Parse raw TOML mappings into strongly typed application settings."""
    return AppConfig(
        app=_parse_app_settings(_section(raw, "app")),
        tts=_parse_tts_settings(_section(raw, "tts"), base_dir=base_dir),
        notes=_parse_notes_settings(_section(raw, "notes"), base_dir=base_dir),
        console=_parse_console_settings(_section(raw, "console")),
        source_file=source_file,
    )


def _parse_app_settings(section: Mapping[str, Any]) -> AppSettings:
    return AppSettings(
        log_level=_as_log_level(section.get("log_level", "INFO"), "app.log_level"),
    )


def _parse_tts_settings(
    section: Mapping[str, Any],
    *,
    base_dir: Path,
) -> TTSSettings:
    _forbid_secret_fields(section, "tts", ("hf_token",))
    return TTSSettings(
        enabled=_as_bool(section.get("enabled", False), "tts.enabled"),
        model_path=_resolve_path(
            base_dir,
            _as_str(section.get("model_path", ""), "tts.model_path"),
        ),
        hf_filename=_as_str(section.get("hf_filename", ""), "tts.hf_filename"),
        hf_repo_id=_as_str(section.get("hf_repo_id", ""), "tts.hf_repo_id"),
        hf_revision=(
            _as_str(section.get("hf_revision", "main"), "tts.hf_revision") or "main"
        ),
        output_device=(
            _as_int(section.get("output_device"), "tts.output_device")
            if "output_device" in section
            else None
        ),
    )


def _parse_notes_settings(
    section: Mapping[str, Any],
    *,
    base_dir: Path,
) -> NotesSettings:
    store_file = _as_str(
        section.get("store_file", DEFAULT_NOTES_STORE_FILE),
        "notes.store_file",
    )
    return NotesSettings(
        store_file=_resolve_path(base_dir, store_file or DEFAULT_NOTES_STORE_FILE),
    )


def _parse_console_settings(section: Mapping[str, Any]) -> ConsoleSettings:
    return ConsoleSettings(
        show_ticks=_as_bool(section.get("show_ticks", True), "console.show_ticks"),
    )


def _section(root: Mapping[str, Any], name: str) -> Mapping[str, Any]:
    raw = root.get(name, {})
    if raw is None:
        return {}
    if not isinstance(raw, Mapping):
        raise AppConfigurationError(f"[{name}] must be a table.")
    return raw


def _as_str(value: Any, field: str) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value.strip()
    raise AppConfigurationError(f"{field} must be a string.")


def _as_bool(value: Any, field: str) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in ("true", "1", "yes", "on"):
            return True
        if lowered in ("false", "0", "no", "off"):
            return False
    raise AppConfigurationError(f"{field} must be a boolean.")


def _as_int(value: Any, field: str) -> int:
    if isinstance(value, bool):
        raise AppConfigurationError(f"{field} must be an integer.")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError as error:
            raise AppConfigurationError(f"{field} must be an integer.") from error
    raise AppConfigurationError(f"{field} must be an integer.")


def _as_log_level(value: Any, field: str) -> str:
    level = _as_str(value, field).upper() or "INFO"
    if level not in _ALLOWED_LOG_LEVELS:
        allowed = ", ".join(sorted(_ALLOWED_LOG_LEVELS))
        raise AppConfigurationError(f"{field} must be one of: {allowed}.")
    return level


def _resolve_path(base_dir: Path, raw: str) -> str:
    if not raw:
        return ""
    path = Path(raw).expanduser()
    if not path.is_absolute():
        path = (base_dir / path).resolve()
    return str(path)


def _forbid_secret_fields(
    section: Mapping[str, Any],
    section_name: str,
    fields: tuple[str, ...],
) -> None:
    present = [field for field in fields if field in section]
    if present:
        joined = ", ".join(f"{section_name}.{field}" for field in present)
        raise AppConfigurationError(
            f"Secret values must not be stored in config.toml: {joined}. "
            "Move them to environment variables."
        )
