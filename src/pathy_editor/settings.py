"""Application settings loaded from the environment or .env via Pydantic."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Literal, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .config import EditorConfig, load_editor_config


logger = logging.getLogger(__name__)


class EditorSettings(BaseSettings):
    config_path: Optional[Path] = Field(default=None, validation_alias="PATHY_CONFIG")
    theme: Literal["dark", "light"] = Field(default="dark", validation_alias="PATHY_THEME")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("config_path", mode="before")
    @classmethod
    def _expand_config_path(cls, value: object) -> Optional[Path]:
        if value is None or value == "":
            return None
        return Path(str(value)).expanduser().resolve()

    @field_validator("theme", mode="before")
    @classmethod
    def _normalise_theme(cls, value: object) -> object:
        return value.strip().lower() if isinstance(value, str) else value


_settings: Optional[EditorSettings] = None


def get_settings() -> EditorSettings:
    global _settings
    if _settings is None:
        _settings = EditorSettings()
    return _settings


def default_editor_config() -> EditorConfig:
    """Configuration named by ``PATHY_CONFIG``, or the built-in defaults."""
    settings = get_settings()
    if settings.config_path is None:
        return EditorConfig()
    logger.debug("Loading editor configuration from %s", settings.config_path)
    return load_editor_config(settings.config_path)


def reset_settings_cache() -> None:
    global _settings
    _settings = None
