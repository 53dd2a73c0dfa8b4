"""Configuration using Pydantic Settings for automatic env var support."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Optional

from pydantic import Field, SecretStr, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .errors import ConfigError
from .lib.json import loads
from .paths import DEFAULT_CONFIG_PATH

CONFIG_ENV = "CHATEXTRACTOR_CONFIG"
ENV_PREFIX = "CHATEXTRACTOR_"
DEFAULT_BASE_URL = "https://claude.ai"


class ExtractorSettings(BaseSettings):
    """Runtime settings for retrieval and saving.

    Values come from (lowest to highest precedence) defaults, the JSON config
    file, ``CHATEXTRACTOR_*`` environment variables and explicit overrides.
    """

    base_url: str = Field(default=DEFAULT_BASE_URL)
    organization_id: Optional[str] = Field(default=None)
    session_key: Optional[SecretStr] = Field(default=None)
    output_dir: Path = Field(default_factory=Path.cwd)
    request_timeout: Optional[float] = Field(default=None, gt=0)
    retries: int = Field(default=0, ge=0)

    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX,
        extra="forbid",
    )

    @field_validator("output_dir", mode="before")
    @classmethod
    def expand_path(cls, v: Any) -> Any:
        if isinstance(v, str):
            return Path(v).expanduser()
        if isinstance(v, Path):
            return v.expanduser()
        return v

    @field_validator("base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")


def config_path(explicit: Optional[Path] = None) -> Path:
    if explicit:
        return explicit.expanduser()
    env_path = os.environ.get(CONFIG_ENV)
    if env_path:
        return Path(env_path).expanduser()
    return DEFAULT_CONFIG_PATH


def _env_overrides() -> set[str]:
    names = set(ExtractorSettings.model_fields)
    present: set[str] = set()
    for key in os.environ:
        upper = key.upper()
        if upper.startswith(ENV_PREFIX) and upper[len(ENV_PREFIX):].lower() in names:
            present.add(upper[len(ENV_PREFIX):].lower())
    return present


def load_settings(path: Optional[Path] = None, **overrides: Any) -> ExtractorSettings:
    """Load settings from the config file, environment and overrides.

    A missing config file is not an error. ``None`` overrides are ignored so
    CLI options that were not given fall through to lower layers.
    """
    target = config_path(path)
    file_data: dict[str, Any] = {}
    if target.exists():
        try:
            raw = loads(target.read_bytes())
        except ValueError as exc:
            raise ConfigError(f"Invalid JSON in {target}: {exc}") from exc
        if not isinstance(raw, dict):
            raise ConfigError(f"Config file {target} must contain a JSON object")
        unknown = set(raw) - set(ExtractorSettings.model_fields)
        if unknown:
            raise ConfigError(f"Unknown config key(s) in {target}: {', '.join(sorted(unknown))}")
        file_data = raw

    # Init kwargs beat env vars in pydantic-settings, so drop file values the
    # environment already provides.
    env_keys = _env_overrides()
    values = {key: value for key, value in file_data.items() if key not in env_keys}
    values.update({key: value for key, value in overrides.items() if value is not None})
    try:
        return ExtractorSettings(**values)
    except ValidationError as exc:
        raise ConfigError(str(exc)) from exc


__all__ = ["CONFIG_ENV", "DEFAULT_BASE_URL", "ExtractorSettings", "config_path", "load_settings"]
