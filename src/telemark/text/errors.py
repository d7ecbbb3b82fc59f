"""Exceptions raised by the decorated-text layer."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from telemark.text.resolver import RawEntity


class EntityRangeError(ValueError):
    """An entity's ``[offset, offset+length)`` does not fit inside its text."""

    def __init__(self, entity: RawEntity, text_length: int) -> None:
        self.entity = entity
        self.text_length = text_length
        super().__init__(
            f"entity {entity.kind!r} at [{entity.offset}, "
            f"{entity.offset + entity.length}) exceeds text length {text_length}"
        )


class OutOfRangeError(IndexError):
    """A position query landed outside the decorated text."""

    def __init__(self, pos: int, length: int) -> None:
        self.pos = pos
        self.length = length
        super().__init__(f"position {pos} outside text of length {length}")
