"""Shared pytest fixtures for telemark tests."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from telemark.config import get_settings

if TYPE_CHECKING:
    from collections.abc import Iterator


@pytest.fixture(autouse=True)
def _fresh_settings() -> Iterator[None]:
    """Drop the cached Settings so env changes made by a test are seen."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
