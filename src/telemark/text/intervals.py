"""Region queries over one attribute channel of a decorated text.

Used by presentation code to find the actionable region under a cursor
and to break a text into runs of constant attribute value.
"""

from __future__ import annotations

from bisect import bisect_right
from typing import TYPE_CHECKING, Any

from telemark.text.errors import OutOfRangeError

if TYPE_CHECKING:
    from telemark.text.decorated import DecoratedText
    from telemark.text.spans import Channel, Span


def _check_position(decorated: DecoratedText, pos: int) -> None:
    # One-past-the-end is a valid query position; it has no region.
    if not 0 <= pos <= len(decorated):
        raise OutOfRangeError(pos, len(decorated))


def _next_span(decorated: DecoratedText, pos: int, channel: Channel) -> Span | None:
    """First span of *channel* starting after *pos*."""
    spans = decorated.spans(channel)
    i = bisect_right(spans, pos, key=lambda s: s.start)
    return spans[i] if i < len(spans) else None


def region_around(
    decorated: DecoratedText,
    pos: int,
    channel: Channel,
) -> tuple[int, int] | None:
    """Return the maximal ``[start, end)`` region of *channel* at *pos*.

    If *pos* is unset on *channel*, the search moves forward to the next
    region where it is set.  Returns ``None`` when there is no such region.

    Raises:
        OutOfRangeError: *pos* lies outside ``[0, len(decorated)]``.
    """
    _check_position(decorated, pos)
    if pos == len(decorated):
        return None
    span = decorated.span_at(pos, channel)
    if span is None:
        span = _next_span(decorated, pos, channel)
    if span is None or span.end <= span.start:
        return None
    return (span.start, span.end)


def extended_region(
    decorated: DecoratedText,
    pos: int,
    channel: Channel,
) -> tuple[int, int] | None:
    """Like :func:`region_around`, but a *pos* sitting right after a region
    resolves to that region instead of skipping ahead to the next one.

    This is the query to use for a cursor placed at the end of a link.
    """
    _check_position(decorated, pos)
    if pos > 0 and decorated.value_at(pos - 1, channel) is not None:
        here = decorated.value_at(pos, channel) if pos < len(decorated) else None
        if here is None:
            return region_around(decorated, pos - 1, channel)
    return region_around(decorated, pos, channel)


def split_runs_with_values(
    decorated: DecoratedText,
    channel: Channel,
) -> list[tuple[str, Any]]:
    """Partition the text into maximal runs of constant *channel* value.

    Unset stretches appear as runs with value ``None``.  Concatenating the
    substrings reproduces the text.
    """
    text = decorated.text
    runs: list[tuple[str, Any]] = []
    cursor = 0
    for span in decorated.spans(channel):
        if span.start > cursor:
            runs.append((text[cursor : span.start], None))
        runs.append((text[span.start : span.end], span.payload))
        cursor = span.end
    if cursor < len(text):
        runs.append((text[cursor:], None))
    return runs


def split_runs(decorated: DecoratedText, channel: Channel) -> list[str]:
    """Substrings of :func:`split_runs_with_values`, without their values."""
    return [run for run, _value in split_runs_with_values(decorated, channel)]
