"""Entity-annotated message text: resolution, composition and region queries."""

from telemark.text.compositor import OffsetUnit, apply_entities
from telemark.text.decorated import DecoratedText
from telemark.text.errors import EntityRangeError, OutOfRangeError
from telemark.text.intervals import (
    extended_region,
    region_around,
    split_runs,
    split_runs_with_values,
)
from telemark.text.resolver import AttributeSet, EntityKind, RawEntity, resolve
from telemark.text.spans import ActionLink, Channel, LinkKind, Span, Style

__all__ = [
    "ActionLink",
    "AttributeSet",
    "Channel",
    "DecoratedText",
    "EntityKind",
    "EntityRangeError",
    "LinkKind",
    "OffsetUnit",
    "OutOfRangeError",
    "RawEntity",
    "Span",
    "Style",
    "apply_entities",
    "extended_region",
    "region_around",
    "resolve",
    "split_runs",
    "split_runs_with_values",
]
