"""Tests for setup_logging handler installation."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import pytest

from telemark import setup_logging
from telemark.config import LogConfig

if TYPE_CHECKING:
    from collections.abc import Iterator
    from pathlib import Path


def _telemark_handlers() -> list[logging.Handler]:
    return [
        h
        for h in logging.getLogger().handlers
        if (h.get_name() or "").startswith("telemark.")
    ]


@pytest.fixture
def clean_root() -> Iterator[None]:
    root = logging.getLogger()
    level = root.level
    yield
    for handler in _telemark_handlers():
        root.removeHandler(handler)
        handler.close()
    root.setLevel(level)


@pytest.mark.usefixtures("clean_root")
class TestSetupLogging:
    """Handlers attached to the root logger."""

    def test_adds_file_and_console_handlers(self, tmp_path: Path) -> None:
        setup_logging(LogConfig(log_dir=tmp_path / "logs"))
        names = sorted(h.get_name() for h in _telemark_handlers())
        assert names == ["telemark.console", "telemark.file"]
        assert list((tmp_path / "logs").glob("telemark.*.log"))

    def test_second_call_adds_nothing(self, tmp_path: Path) -> None:
        config = LogConfig(log_dir=tmp_path)
        setup_logging(config)
        setup_logging(config)
        assert len(_telemark_handlers()) == 2
