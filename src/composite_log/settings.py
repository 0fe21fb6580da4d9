from __future__ import annotations

import os
from collections.abc import Mapping

from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, ConfigDict, Field, field_validator

from .protocol import Level

_LEVEL_ALIASES = {
    "WARNING": Level.WARN,
    "CRITICAL": Level.ERROR,
    "FATAL": Level.ERROR,
}

_ENV_FIELDS = {
    "LOG_LEVEL": "level",
    "LOG_CONSOLE_ENABLED": "console_enabled",
    "LOG_JSON": "json_format",
    "LOG_GENERAL_ENABLED": "general_enabled",
    "LOG_ROTATE_WHEN": "rotate_when",
    "LOG_BACKUP_COUNT": "backup_count",
    "LOG_CAPTURE_STDLIB": "capture_stdlib",
}

# blank values for these disable the sink instead of falling back
_ENV_PATH_FIELDS = {
    "LOG_ERROR_DIR": "error_dir",
    "LOG_GENERAL_DIR": "general_dir",
}


class LoggingSettings(BaseModel):
    """Settings for the sinks built by :func:`build_composite_logger`."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    level: Level = Level.INFO
    console_enabled: bool = True
    json_format: bool = True
    error_dir: str | None = "logs/error"
    general_enabled: bool = False
    general_dir: str | None = "logs/general"
    rotate_when: str = "midnight"
    backup_count: int = Field(default=14, ge=0)
    capture_stdlib: bool = True

    @field_validator("level", mode="before")
    @classmethod
    def _parse_level(cls, value: object) -> Level:
        return parse_level(value)

    @field_validator("error_dir", "general_dir", mode="before")
    @classmethod
    def _blank_to_none(cls, value: object) -> object:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @classmethod
    def from_env(
        cls, environ: Mapping[str, str] | None = None
    ) -> "LoggingSettings":
        env = os.environ if environ is None else environ
        data: dict[str, object] = {}
        for name, field_name in _ENV_FIELDS.items():
            value = env.get(name)
            if value is not None and value.strip():
                data[field_name] = value.strip()
        for name, field_name in _ENV_PATH_FIELDS.items():
            value = env.get(name)
            if value is not None:
                data[field_name] = value.strip()
        settings = cls.model_validate(data)
        if not settings.general_enabled and settings.general_dir is not None:
            settings = settings.model_copy(update={"general_dir": None})
        return settings


def load_logging_settings(*, dotenv: bool = True) -> LoggingSettings:
    """Load settings from the environment, merging a local ``.env`` first."""
    if dotenv:
        load_dotenv(find_dotenv(usecwd=True))
    return LoggingSettings.from_env()


def parse_level(value: object) -> Level:
    if isinstance(value, Level):
        return value
    if isinstance(value, int) and not isinstance(value, bool):
        return Level.from_stdlib(value)
    if isinstance(value, str):
        name = value.strip().upper()
        if name.isdigit():
            return Level.from_stdlib(int(name))
        if name in _LEVEL_ALIASES:
            return _LEVEL_ALIASES[name]
        try:
            return Level[name]
        except KeyError:
            pass
    raise ValueError(f"Invalid LOG_LEVEL: {value!r}")
