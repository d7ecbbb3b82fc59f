"""Apply a list of raw entities to a message text.

Entities are applied in the order given.  Each one is resolved against the
slice it covers and merged into the accumulating :class:`DecoratedText`;
channel values already set by an earlier entity are kept, which is what
lets a bold run nested in a link keep the link's action while still
picking up bold on the style channel where nothing else set it.
"""

from __future__ import annotations

import logging
from bisect import bisect_left
from enum import StrEnum
from itertools import accumulate
from typing import TYPE_CHECKING

from telemark.text.decorated import DecoratedText
from telemark.text.errors import EntityRangeError
from telemark.text.resolver import RawEntity, resolve

if TYPE_CHECKING:
    from collections.abc import Iterable

logger = logging.getLogger(__name__)


class OffsetUnit(StrEnum):
    """How entity offsets and lengths are measured."""

    CODEPOINT = "codepoint"
    UTF16 = "utf16"


def _utf16_starts(text: str) -> list[int]:
    """UTF-16 offset at which each character of *text* starts."""
    widths = (2 if ord(ch) > 0xFFFF else 1 for ch in text)
    return [0, *accumulate(widths)][:-1] if text else []


def _utf16_to_index(starts: list[int], total_units: int, offset: int) -> int:
    """Convert a UTF-16 offset to a character index.

    Offsets inside a surrogate pair round forward to the next character.
    Offsets past the end stay past the end so range checks still fire.
    """
    if offset >= total_units:
        return len(starts) + (offset - total_units)
    return bisect_left(starts, offset)


def _utf16_length(text: str) -> int:
    return sum(2 if ord(ch) > 0xFFFF else 1 for ch in text)


def _to_codepoints(
    text: str,
    entities: list[RawEntity],
) -> list[tuple[RawEntity, RawEntity]]:
    """Pair each entity with its code-point equivalent."""
    starts = _utf16_starts(text)
    total = _utf16_length(text)
    converted: list[tuple[RawEntity, RawEntity]] = []
    for entity in entities:
        begin = _utf16_to_index(starts, total, entity.offset)
        end = _utf16_to_index(starts, total, entity.offset + entity.length)
        if end <= begin:
            logger.debug("Entity %r collapses to an empty range, skipping", entity)
            continue
        converted.append(
            (entity, RawEntity(begin, end - begin, entity.kind, entity.extra)),
        )
    return converted


def apply_entities(
    text: str,
    entities: Iterable[RawEntity],
    *,
    offset_unit: OffsetUnit = OffsetUnit.CODEPOINT,
) -> DecoratedText:
    """Decorate *text* with the attributes of *entities*.

    Args:
        text: The raw message text.
        entities: Entities in application order; ordering is not validated.
        offset_unit: Unit of the entities' offsets and lengths.

    Returns:
        The decorated text.  Its characters are exactly *text*.

    Raises:
        EntityRangeError: an entity extends past the end of *text*.  The
            error carries the entity as given, in *offset_unit* units.
    """
    if offset_unit == OffsetUnit.UTF16:
        pairs = _to_codepoints(text, list(entities))
        length_in_unit = _utf16_length(text)
    else:
        pairs = [(entity, entity) for entity in entities]
        length_in_unit = len(text)

    decorated = DecoratedText(text)
    for given, entity in pairs:
        if entity.end > len(text):
            raise EntityRangeError(given, length_in_unit)
        attrs = resolve(entity.kind, entity.extra, text[entity.offset : entity.end])
        if not attrs:
            continue
        decorated = decorated.with_attributes(entity.offset, entity.end, attrs)
    return decorated
