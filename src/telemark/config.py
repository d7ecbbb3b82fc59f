"""Centralised configuration using pydantic-settings.

All environment variables are read through the Settings class.
Consumers call ``get_settings()`` to obtain a cached, validated instance.
Tests construct ``Settings(_env_file=None, ...)`` directly for isolation.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path

from pydantic import BaseModel, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from rich.errors import StyleSyntaxError
from rich.style import Style as RichStyle

from telemark.text.compositor import OffsetUnit
from telemark.text.spans import Style

logger = logging.getLogger(__name__)

# src/telemark/config.py  ->  parent x3  ->  project root
_PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent


# ---------------------------------------------------------------------------
# Sub-models (one per configuration domain)
# ---------------------------------------------------------------------------
class StyleConfig(BaseModel):
    """rich style definitions for each display face."""

    mention: str = "bold cyan"
    bold: str = "bold"
    italic: str = "italic"
    code: str = "magenta"
    pre: str = "magenta"
    pre_code: str = "magenta"
    url: str = "underline blue"

    @field_validator("*")
    @classmethod
    def _parse_as_rich_style(cls, value: str) -> str:
        try:
            RichStyle.parse(value)
        except StyleSyntaxError as exc:
            msg = f"invalid rich style {value!r}: {exc}"
            raise ValueError(msg) from exc
        return value

    def for_face(self, face: Style) -> str:
        """Return the rich style string configured for *face*."""
        return getattr(self, face.value.replace("-", "_"))


class EntityConfig(BaseModel):
    """How incoming protocol entities are interpreted."""

    # The messaging protocol counts offsets in UTF-16 code units.
    offset_unit: OffsetUnit = OffsetUnit.UTF16


class DisplayConfig(BaseModel):
    """Display index defaults."""

    separator: str = ""


class LogConfig(BaseModel):
    """Logging destinations and levels."""

    log_dir: Path = Path("logs")
    console_level: str = "INFO"

    @field_validator("console_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        level = value.upper()
        if level not in logging.getLevelNamesMapping():
            msg = f"unknown log level {value!r}"
            raise ValueError(msg)
        return level


# ---------------------------------------------------------------------------
# Root settings
# ---------------------------------------------------------------------------
class Settings(BaseSettings):
    """Settings with automatic .env loading and type validation.

    Environment variables use double-underscore delimiter for nesting:
    ``STYLES__MENTION``, ``ENTITIES__OFFSET_UNIT``, ``LOG__LOG_DIR``, etc.
    """

    model_config = SettingsConfigDict(
        env_file=_PROJECT_ROOT / ".env",
        env_nested_delimiter="__",
        extra="ignore",
    )

    styles: StyleConfig = StyleConfig()
    entities: EntityConfig = EntityConfig()
    display: DisplayConfig = DisplayConfig()
    log: LogConfig = LogConfig()


# ---------------------------------------------------------------------------
# Singleton access
# ---------------------------------------------------------------------------
@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached Settings instance.

    Call ``get_settings.cache_clear()`` in tests to reset.
    """
    settings = Settings()

    env_file = settings.model_config.get("env_file")
    if env_file is not None and Path(str(env_file)).is_file():
        logger.info("Settings loaded .env from: %s", env_file)
    else:
        logger.info("Settings: no .env file found, using env vars and defaults")

    return settings
