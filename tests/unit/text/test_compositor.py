"""Tests for apply_entities: composing raw entities onto a text."""

from __future__ import annotations

import logging

import pytest

from telemark.text.compositor import OffsetUnit, apply_entities
from telemark.text.errors import EntityRangeError
from telemark.text.resolver import RawEntity
from telemark.text.spans import ActionLink, Channel, LinkKind, Span, Style


class TestScenarios:
    """Concrete end-to-end decorations."""

    def test_mention_styles_exactly_its_range(self) -> None:
        dt = apply_entities("hello @bob world", [RawEntity(6, 4, "mention")])
        assert dt.text == "hello @bob world"
        assert dt.spans(Channel.STYLE) == (Span(6, 10, Channel.STYLE, Style.MENTION),)
        assert dt.spans(Channel.ACTION) == ()

    def test_url_attaches_action_link(self) -> None:
        dt = apply_entities("check https://x.test now", [RawEntity(6, 14, "url")])
        (span,) = dt.spans(Channel.ACTION)
        assert (span.start, span.end) == (6, 20)
        assert span.payload == ActionLink(LinkKind.URL, "https://x.test", Style.URL)
        assert dt.value_at(6, Channel.STYLE) == Style.URL

    def test_no_entities_leaves_text_plain(self) -> None:
        dt = apply_entities("plain", [])
        assert dt.spans(Channel.STYLE) == ()
        assert dt.spans(Channel.ACTION) == ()


class TestMergePolicy:
    """Entities apply in input order, first writer wins per channel."""

    def test_bold_inside_link_keeps_link_style(self) -> None:
        entities = [
            RawEntity(4, 4, "text-url", {"url": "https://d.test"}),
            RawEntity(0, 12, "bold"),
        ]
        dt = apply_entities("see docs now", entities)
        assert dt.spans(Channel.STYLE) == (
            Span(0, 4, Channel.STYLE, Style.BOLD),
            Span(4, 8, Channel.STYLE, Style.URL),
            Span(8, 12, Channel.STYLE, Style.BOLD),
        )
        assert dt.value_at(5, Channel.ACTION).target == "https://d.test"

    def test_bold_then_link_keeps_bold_and_gains_action(self) -> None:
        entities = [
            RawEntity(0, 12, "bold"),
            RawEntity(4, 4, "text-url", {"url": "https://d.test"}),
        ]
        dt = apply_entities("see docs now", entities)
        assert dt.spans(Channel.STYLE) == (Span(0, 12, Channel.STYLE, Style.BOLD),)
        assert dt.value_at(4, Channel.ACTION) == ActionLink(
            LinkKind.URL, "https://d.test", Style.URL
        )

    def test_applying_twice_is_idempotent(self) -> None:
        entities = [
            RawEntity(0, 3, "bold"),
            RawEntity(4, 5, "hashtag"),
            RawEntity(2, 6, "italic"),
        ]
        text = "abc #tags xyz"
        assert apply_entities(text, entities * 2) == apply_entities(text, entities)

    def test_length_is_preserved(self) -> None:
        text = "some *text* here"
        dt = apply_entities(text, [RawEntity(5, 6, "code")])
        assert len(dt) == len(text)


class TestErrors:
    """Range violations fail, unknown kinds do not."""

    def test_entity_past_end_raises_range_error(self) -> None:
        entity = RawEntity(2, 5, "bold")
        with pytest.raises(EntityRangeError) as exc_info:
            apply_entities("abc", [entity])
        assert exc_info.value.entity == entity
        assert exc_info.value.text_length == 3

    def test_unknown_kind_is_silently_skipped(
        self, caplog: pytest.LogCaptureFixture
    ) -> None:
        with caplog.at_level(logging.DEBUG, logger="telemark.text.resolver"):
            dt = apply_entities("abc", [RawEntity(0, 3, "spoiler")])
        assert dt.spans(Channel.STYLE) == ()
        assert dt.spans(Channel.ACTION) == ()
        assert "spoiler" in caplog.text


class TestUtf16Offsets:
    """Protocol offsets count UTF-16 code units."""

    def test_astral_character_shifts_offsets(self) -> None:
        text = "\U0001f600 @bob"
        dt = apply_entities(
            text, [RawEntity(3, 4, "mention")], offset_unit=OffsetUnit.UTF16
        )
        assert dt.spans(Channel.STYLE) == (Span(2, 6, Channel.STYLE, Style.MENTION),)

    def test_bmp_text_matches_codepoints(self) -> None:
        entities = [RawEntity(6, 4, "mention")]
        assert apply_entities(
            "hello @bob", entities, offset_unit=OffsetUnit.UTF16
        ) == apply_entities("hello @bob", entities)

    def test_offset_inside_surrogate_pair_rounds_forward(self) -> None:
        dt = apply_entities(
            "\U0001f600ab", [RawEntity(1, 3, "bold")], offset_unit=OffsetUnit.UTF16
        )
        assert dt.spans(Channel.STYLE) == (Span(1, 3, Channel.STYLE, Style.BOLD),)

    def test_utf16_range_past_end_reports_given_entity(self) -> None:
        entity = RawEntity(0, 5, "bold")
        with pytest.raises(EntityRangeError) as exc_info:
            apply_entities("\U0001f600a", [entity], offset_unit=OffsetUnit.UTF16)
        assert exc_info.value.entity is entity
        assert exc_info.value.text_length == 3
        assert "[0, 5)" in str(exc_info.value)
