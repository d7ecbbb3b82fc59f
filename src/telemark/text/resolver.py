"""Entity resolution: one raw protocol entity -> attributes for its range.

The kind table is closed.  Kinds outside :class:`EntityKind` resolve to
``None`` and are skipped by the compositor without raising, since the
protocol grows new entity types faster than clients learn them.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any, TypeAlias

from telemark.text.spans import ActionLink, Channel, LinkKind, Style

logger = logging.getLogger(__name__)

AttributeSet: TypeAlias = Mapping[Channel, Any]

_TDLIB_TYPE_PREFIX = "textEntityType"


class EntityKind(StrEnum):
    """Entity kinds the resolver understands."""

    MENTION = "mention"
    MENTION_BY_ID = "mention-by-id"
    HASHTAG = "hashtag"
    BOLD = "bold"
    ITALIC = "italic"
    CODE = "code"
    PRE = "pre"
    PRE_CODE = "pre-code"
    URL = "url"
    TEXT_URL = "text-url"


# Protocol type names (without the ``textEntityType`` prefix) -> kind.
_TDLIB_KINDS: dict[str, EntityKind] = {
    "Mention": EntityKind.MENTION,
    "MentionName": EntityKind.MENTION_BY_ID,
    "Hashtag": EntityKind.HASHTAG,
    "Bold": EntityKind.BOLD,
    "Italic": EntityKind.ITALIC,
    "Code": EntityKind.CODE,
    "Pre": EntityKind.PRE,
    "PreCode": EntityKind.PRE_CODE,
    "Url": EntityKind.URL,
    "TextUrl": EntityKind.TEXT_URL,
}

_STYLE_ONLY: dict[EntityKind, Style] = {
    EntityKind.BOLD: Style.BOLD,
    EntityKind.ITALIC: Style.ITALIC,
    EntityKind.CODE: Style.CODE,
    EntityKind.PRE: Style.PRE,
    EntityKind.PRE_CODE: Style.PRE_CODE,
}


@dataclass(frozen=True)
class RawEntity:
    """A protocol-supplied entity over ``[offset, offset+length)`` of a text.

    Attributes:
        offset: Start index into the message text.
        length: Number of characters covered.
        kind: Entity kind; usually an :class:`EntityKind` value, but any
            string is accepted so unknown protocol kinds pass through.
        extra: Kind-specific payload (``user_id``, ``url``, ``language``).
    """

    offset: int
    length: int
    kind: str
    extra: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if self.offset < 0:
            msg = f"entity offset must be non-negative, got {self.offset}"
            raise ValueError(msg)
        if self.length <= 0:
            msg = f"entity length must be positive, got {self.length}"
            raise ValueError(msg)

    @property
    def end(self) -> int:
        return self.offset + self.length

    @classmethod
    def from_tdlib(cls, obj: Mapping[str, Any]) -> RawEntity:
        """Build an entity from its protocol JSON form.

        ``{"@type": "textEntity", "offset": 0, "length": 4,
        "type": {"@type": "textEntityTypeBold"}}``
        """
        etype = dict(obj.get("type") or {})
        type_name = str(etype.pop("@type", "")).removeprefix(_TDLIB_TYPE_PREFIX)
        kind = _TDLIB_KINDS.get(type_name)
        return cls(
            offset=int(obj["offset"]),
            length=int(obj["length"]),
            kind=str(kind) if kind is not None else type_name,
            extra=etype,
        )


def resolve(
    kind: str,
    extra: Mapping[str, Any],
    covered_text: str,
) -> AttributeSet | None:
    """Map one entity to the attributes it contributes to its range.

    Args:
        kind: Entity kind string.
        extra: Kind-specific payload.
        covered_text: The slice of the message text the entity covers.

    Returns:
        A channel -> value mapping, or ``None`` for kinds without a rule.
    """
    try:
        ekind = EntityKind(kind)
    except ValueError:
        logger.debug("No attribute rule for entity kind %r", kind)
        return None

    match ekind:
        case EntityKind.MENTION:
            return {Channel.STYLE: Style.MENTION}
        case EntityKind.MENTION_BY_ID:
            return {
                Channel.ACTION: ActionLink(
                    LinkKind.USER, extra.get("user_id"), face=Style.MENTION
                ),
                Channel.STYLE: Style.MENTION,
            }
        case EntityKind.HASHTAG:
            return {Channel.ACTION: ActionLink(LinkKind.HASHTAG, covered_text)}
        case EntityKind.URL:
            return {
                Channel.ACTION: ActionLink(LinkKind.URL, covered_text, face=Style.URL),
                Channel.STYLE: Style.URL,
            }
        case EntityKind.TEXT_URL:
            return {
                Channel.ACTION: ActionLink(
                    LinkKind.URL, extra.get("url"), face=Style.URL
                ),
                Channel.STYLE: Style.URL,
            }
        case _:
            return {Channel.STYLE: _STYLE_ONLY[ekind]}
