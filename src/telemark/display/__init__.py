"""Ordered display indexes for chat and message lists."""

from telemark.display.index import (
    FOOTER,
    HEADER,
    NodeHandle,
    OrderedDisplayIndex,
    StaleNodeError,
)
from telemark.display.surface import RenderSurface, TextSurface

__all__ = [
    "FOOTER",
    "HEADER",
    "NodeHandle",
    "OrderedDisplayIndex",
    "RenderSurface",
    "StaleNodeError",
    "TextSurface",
]
