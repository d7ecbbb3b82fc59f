"""Rendering surfaces that an :class:`OrderedDisplayIndex` writes into."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class RenderSurface(Protocol):
    """A flat, position-addressed text region.

    An index owns one surface and writes its header, nodes and footer
    contiguously from offset 0.
    """

    @property
    def text(self) -> str:
        """Current contents of the surface."""
        ...

    def __len__(self) -> int: ...

    def replace(self, start: int, end: int, text: str) -> None:
        """Replace the characters in ``[start, end)`` with *text*."""
        ...


class TextSurface:
    """In-memory :class:`RenderSurface` backed by a string."""

    def __init__(self, text: str = "") -> None:
        self._text = text

    @property
    def text(self) -> str:
        return self._text

    def __len__(self) -> int:
        return len(self._text)

    def __repr__(self) -> str:
        return f"TextSurface({self._text!r})"

    def replace(self, start: int, end: int, text: str) -> None:
        if not 0 <= start <= end <= len(self._text):
            msg = f"invalid surface range [{start}, {end}) for length {len(self)}"
            raise ValueError(msg)
        self._text = self._text[:start] + text + self._text[end:]
