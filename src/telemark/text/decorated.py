"""Immutable text with per-channel attribute interval maps.

Each channel is a sorted tuple of disjoint :class:`Span` objects; positions
not covered by any span are unset on that channel.  Adjacent spans with
equal payloads are coalesced, so every stored span is a maximal run.

Attributes are merged first-writer-wins: :meth:`DecoratedText.with_attributes`
only fills the parts of its range that are still unset on each channel.
"""

from __future__ import annotations

from bisect import bisect_right
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from telemark.text.errors import OutOfRangeError
from telemark.text.spans import Channel, Span

if TYPE_CHECKING:
    from telemark.text.resolver import AttributeSet


def _coalesce(spans: list[Span]) -> tuple[Span, ...]:
    """Merge touching spans that carry equal payloads."""
    merged: list[Span] = []
    for span in spans:
        if merged and merged[-1].end == span.start:
            prev = merged[-1]
            if prev.payload == span.payload:
                merged[-1] = Span(prev.start, span.end, prev.tag, prev.payload)
                continue
        merged.append(span)
    return tuple(merged)


def _fill_unset(
    spans: tuple[Span, ...],
    start: int,
    end: int,
    channel: Channel,
    value: Any,
) -> tuple[Span, ...]:
    """Return *spans* plus *value* over every unset position of ``[start, end)``."""
    gaps: list[Span] = []
    cursor = start
    for span in spans:
        if span.end <= cursor:
            continue
        if span.start >= end:
            break
        if span.start > cursor:
            gaps.append(Span(cursor, span.start, channel, value))
        cursor = span.end
    if cursor < end:
        gaps.append(Span(cursor, end, channel, value))
    if not gaps:
        return spans
    return _coalesce(sorted([*spans, *gaps], key=lambda s: s.start))


@dataclass(frozen=True)
class DecoratedText:
    """A text value plus its resolved attribute channels.

    Never mutated in place: merging attributes returns a new instance.

    Attributes:
        text: The characters.
        intervals: Channel -> sorted, disjoint, coalesced spans.  Channels
            with no set position are absent.
    """

    text: str
    intervals: Mapping[Channel, tuple[Span, ...]] = field(
        default_factory=dict, repr=False
    )

    def __len__(self) -> int:
        return len(self.text)

    def __str__(self) -> str:
        return self.text

    @property
    def plain(self) -> str:
        return self.text

    @property
    def channels(self) -> frozenset[Channel]:
        """Channels with at least one set position."""
        return frozenset(self.intervals)

    def spans(self, channel: Channel) -> tuple[Span, ...]:
        """Maximal runs set on *channel*, in ascending order."""
        return self.intervals.get(channel, ())

    def value_at(self, pos: int, channel: Channel) -> Any:
        """Return the value of *channel* at *pos*, or ``None`` if unset.

        Raises:
            OutOfRangeError: *pos* is not a character index of the text.
        """
        if not 0 <= pos < len(self.text):
            raise OutOfRangeError(pos, len(self.text))
        spans = self.spans(channel)
        i = bisect_right(spans, pos, key=lambda s: s.start) - 1
        if i >= 0 and pos < spans[i].end:
            return spans[i].payload
        return None

    def span_at(self, pos: int, channel: Channel) -> Span | None:
        """Return the stored run of *channel* covering *pos*, if any."""
        if not 0 <= pos < len(self.text):
            raise OutOfRangeError(pos, len(self.text))
        spans = self.spans(channel)
        i = bisect_right(spans, pos, key=lambda s: s.start) - 1
        if i >= 0 and pos < spans[i].end:
            return spans[i]
        return None

    def with_attributes(
        self,
        start: int,
        end: int,
        attrs: AttributeSet,
    ) -> DecoratedText:
        """Merge *attrs* over ``[start, end)`` without overwriting set values.

        Raises:
            OutOfRangeError: the range does not lie within the text.
        """
        if start < 0 or start > len(self.text):
            raise OutOfRangeError(start, len(self.text))
        if end > len(self.text):
            raise OutOfRangeError(end, len(self.text))
        if end <= start:
            return self

        channels = dict(self.intervals)
        for channel, value in attrs.items():
            if value is None:
                continue
            channels[channel] = _fill_unset(
                channels.get(channel, ()), start, end, channel, value
            )
        return DecoratedText(self.text, channels)
