"""Tests for pydantic-settings configuration."""

from __future__ import annotations

import os
from typing import TYPE_CHECKING

import pytest
from pydantic import ValidationError

from telemark.config import LogConfig, Settings, StyleConfig, get_settings
from telemark.text.compositor import OffsetUnit
from telemark.text.spans import Style

if TYPE_CHECKING:
    from pathlib import Path


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    for key in list(os.environ):
        if key.startswith(("STYLES__", "ENTITIES__", "DISPLAY__", "LOG__")):
            monkeypatch.delenv(key, raising=False)
    return monkeypatch


class TestDefaults:
    """Settings without env or .env input."""

    def test_defaults(self, clean_env: pytest.MonkeyPatch) -> None:
        s = Settings(_env_file=None)  # type: ignore[call-arg]
        assert s.entities.offset_unit is OffsetUnit.UTF16
        assert s.display.separator == ""
        assert s.styles.mention == "bold cyan"
        assert s.log.console_level == "INFO"

    @pytest.mark.parametrize("face", list(Style))
    def test_every_face_has_a_style(self, face: Style) -> None:
        assert StyleConfig().for_face(face)


class TestEnvOverrides:
    """Nested env vars use the double-underscore delimiter."""

    def test_style_override(self, clean_env: pytest.MonkeyPatch) -> None:
        clean_env.setenv("STYLES__MENTION", "bold green")
        s = Settings(_env_file=None)  # type: ignore[call-arg]
        assert s.styles.for_face(Style.MENTION) == "bold green"

    def test_offset_unit_override(self, clean_env: pytest.MonkeyPatch) -> None:
        clean_env.setenv("ENTITIES__OFFSET_UNIT", "codepoint")
        s = Settings(_env_file=None)  # type: ignore[call-arg]
        assert s.entities.offset_unit is OffsetUnit.CODEPOINT

    def test_get_settings_is_cached(self, clean_env: pytest.MonkeyPatch) -> None:
        assert get_settings() is get_settings()


class TestValidation:
    """Bad values fail at load time."""

    def test_invalid_rich_style(self) -> None:
        with pytest.raises(ValidationError, match="invalid rich style"):
            StyleConfig(url="not-a-colour-name")

    def test_log_level_is_normalised(self, tmp_path: Path) -> None:
        cfg = LogConfig(log_dir=tmp_path, console_level="debug")
        assert cfg.console_level == "DEBUG"

    def test_unknown_log_level(self) -> None:
        with pytest.raises(ValidationError, match="unknown log level"):
            LogConfig(console_level="LOUD")
