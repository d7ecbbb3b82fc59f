"""Tests for the telemark-render CLI: parsing and command output."""

from __future__ import annotations

import json
from io import StringIO
from typing import TYPE_CHECKING

import pytest
from rich.console import Console

from telemark.cli import _build_parser, _cmd_render
from telemark.text.compositor import OffsetUnit

if TYPE_CHECKING:
    from pathlib import Path


def _console() -> tuple[Console, StringIO]:
    buf = StringIO()
    return Console(file=buf, width=120, color_system=None), buf


def _message_file(tmp_path: Path, message: object) -> str:
    path = tmp_path / "message.json"
    path.write_text(json.dumps(message), encoding="utf-8")
    return str(path)


_MENTION = {
    "text": "hello @bob world",
    "entities": [
        {
            "@type": "textEntity",
            "offset": 6,
            "length": 4,
            "type": {"@type": "textEntityTypeMention"},
        }
    ],
}


class TestParser:
    """Argument parsing."""

    def test_source_required(self) -> None:
        with pytest.raises(SystemExit):
            _build_parser().parse_args([])

    def test_defaults(self) -> None:
        args = _build_parser().parse_args(["msg.json"])
        assert args.source == "msg.json"
        assert args.offset_unit is None
        assert args.runs is None

    def test_options(self) -> None:
        args = _build_parser().parse_args(
            ["-", "--offset-unit", "codepoint", "--runs", "action"]
        )
        assert args.offset_unit == "codepoint"
        assert args.runs == "action"

    def test_rejects_unknown_channel(self) -> None:
        with pytest.raises(SystemExit):
            _build_parser().parse_args(["-", "--runs", "colour"])


class TestRenderCommand:
    """_cmd_render output and exit codes."""

    def test_prints_text(self, tmp_path: Path) -> None:
        con, buf = _console()
        code = _cmd_render(_message_file(tmp_path, _MENTION), console=con)
        assert code == 0
        assert "hello @bob world" in buf.getvalue()

    def test_runs_table(self, tmp_path: Path) -> None:
        con, buf = _console()
        code = _cmd_render(
            _message_file(tmp_path, _MENTION),
            offset_unit=OffsetUnit.CODEPOINT,
            runs="style",
            console=con,
        )
        assert code == 0
        out = buf.getvalue()
        assert "style runs" in out
        assert "'@bob'" in out
        assert "mention" in out

    def test_missing_file(self, tmp_path: Path) -> None:
        con, buf = _console()
        assert _cmd_render(str(tmp_path / "nope.json"), console=con) == 1
        assert "Error:" in buf.getvalue()

    def test_entity_out_of_range(self, tmp_path: Path) -> None:
        message = {
            "text": "abc",
            "entities": [
                {"offset": 1, "length": 9, "type": {"@type": "textEntityTypeBold"}}
            ],
        }
        con, buf = _console()
        assert _cmd_render(_message_file(tmp_path, message), console=con) == 1
        assert "exceeds text length 3" in buf.getvalue()

    def test_rejects_non_message_json(self, tmp_path: Path) -> None:
        con, buf = _console()
        assert _cmd_render(_message_file(tmp_path, [1, 2]), console=con) == 1
        assert "'text'" in buf.getvalue()

    @pytest.mark.parametrize(
        ("entities", "needle"),
        [
            pytest.param([1], "list of JSON objects", id="non-object-entity"),
            pytest.param(None, "list of JSON objects", id="null-entities"),
            pytest.param(
                [{"offset": None, "length": 1, "type": {}}],
                "Error:",
                id="null-offset",
            ),
        ],
    )
    def test_malformed_entities(
        self, tmp_path: Path, entities: object, needle: str
    ) -> None:
        con, buf = _console()
        message = {"text": "abc", "entities": entities}
        assert _cmd_render(_message_file(tmp_path, message), console=con) == 1
        out = buf.getvalue()
        assert "Error:" in out
        assert needle in out
