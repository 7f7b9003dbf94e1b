"""Locate, read, and parse `config.toml` plus environment secrets."""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Mapping

try:  # Python 3.11+
    import tomllib
except ModuleNotFoundError:  # pragma: no cover - fallback for older runtimes
    import tomli as tomllib  # type: ignore

from app_config_parser import parse_app_config
from app_config_schema import (
    DEFAULT_CONFIG_FILE,
    AppConfig,
    AppConfigurationError,
    SecretConfig,
)

__all__ = [
    "AppConfig",
    "AppConfigurationError",
    "SecretConfig",
    "load_app_config",
    "load_secret_config",
    "resolve_config_path",
]


def resolve_config_path(config_path: str | None = None) -> Path:
    env_path = os.getenv("APP_CONFIG_FILE")
    raw = config_path or env_path or DEFAULT_CONFIG_FILE
    path = Path(raw).expanduser()
    if not path.is_absolute():
        path = (Path.cwd() / path).resolve()
    if path.exists() or config_path is not None or env_path is not None:
        return path

    # Packaged builds ship config.toml next to the executable or in the bundle.
    if getattr(sys, "frozen", False):
        executable_dir_path = Path(sys.executable).resolve().parent / DEFAULT_CONFIG_FILE
        if executable_dir_path.exists():
            return executable_dir_path
    bundle_root = getattr(sys, "_MEIPASS", "")
    if bundle_root:
        bundled_path = Path(bundle_root) / DEFAULT_CONFIG_FILE
        if bundled_path.exists():
            return bundled_path

    return path


def load_app_config(
    config_path: str | None = None,
    *,
    allow_missing: bool = False,
) -> AppConfig:
    """Load typed settings; with `allow_missing`, an absent file yields defaults."""
    path = resolve_config_path(config_path)
    if not path.exists():
        if allow_missing:
            return parse_app_config({}, base_dir=path.parent, source_file="")
        raise AppConfigurationError(f"Config file not found: {path}")
    if not path.is_file():
        raise AppConfigurationError(f"Config path is not a file: {path}")

    try:
        with open(path, "rb") as fh:
            raw = tomllib.load(fh)
    except Exception as error:
        raise AppConfigurationError(f"Failed to parse config TOML: {error}") from error

    if not isinstance(raw, Mapping):
        raise AppConfigurationError("Root config TOML object must be a table.")

    return parse_app_config(raw, base_dir=path.parent, source_file=str(path))


def load_secret_config(
    *,
    environ: Mapping[str, str] | None = None,
) -> SecretConfig:
    env = environ if environ is not None else os.environ
    hf_token = env.get("HF_TOKEN", "").strip() or None
    return SecretConfig(hf_token=hf_token)
