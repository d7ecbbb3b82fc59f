"""Span model shared by the resolver, compositor and interval index.

A span is a half-open ``[start, end)`` range of a text tagged with the
attribute channel it belongs to and carrying an opaque payload (a
:class:`Style` on the style channel, an :class:`ActionLink` on the
action channel).
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Any


class Channel(StrEnum):
    """Independent attribute dimensions of a decorated text."""

    STYLE = "style"
    ACTION = "action"


class Style(StrEnum):
    """Display faces produced by entity resolution."""

    MENTION = "mention"
    BOLD = "bold"
    ITALIC = "italic"
    CODE = "code"
    PRE = "pre"
    PRE_CODE = "pre-code"
    URL = "url"


class LinkKind(StrEnum):
    """Action kinds a presentation layer knows how to dispatch."""

    URL = "url"
    FILE = "file"
    USER = "user"
    HASHTAG = "hashtag"
    DOWNLOAD = "download"
    CANCEL_DOWNLOAD = "cancel-download"
    UPLOAD = "upload"
    CANCEL_UPLOAD = "cancel-upload"


@dataclass(frozen=True)
class ActionLink:
    """A clickable action bound to a region of text.

    Attributes:
        kind: Which handler the presentation layer invokes.
        target: Handler argument (URL, user id, hashtag text, file id...).
        face: Optional display style for the linked region.
    """

    kind: LinkKind
    target: Any
    face: Style | None = None


@dataclass(frozen=True)
class Span:
    """A tagged half-open range ``[start, end)``."""

    start: int
    end: int
    tag: Channel
    payload: Any = None

    def __post_init__(self) -> None:
        if self.start < 0:
            msg = f"span start must be non-negative, got {self.start}"
            raise ValueError(msg)
        if self.end <= self.start:
            msg = f"span end {self.end} must be greater than start {self.start}"
            raise ValueError(msg)

    def __len__(self) -> int:
        return self.end - self.start

    def contains(self, pos: int) -> bool:
        return self.start <= pos < self.end
