"""Command-line entry points.

``telemark-render`` decorates a message read as protocol JSON and prints it
with the configured rich styles::

    uv run telemark-render message.json --runs action
    echo '{"text": "hi @bob", "entities": [...]}' | uv run telemark-render -
"""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import TYPE_CHECKING, Any

from rich.console import Console
from rich.markup import escape
from rich.table import Table

if TYPE_CHECKING:
    import argparse

    from telemark.text.compositor import OffsetUnit

console = Console()


def _build_parser() -> argparse.ArgumentParser:
    """Build argparse parser for telemark-render."""
    import argparse

    from telemark.text.compositor import OffsetUnit
    from telemark.text.spans import Channel

    parser = argparse.ArgumentParser(
        prog="telemark-render",
        description="Render a message's entities as styled terminal text.",
    )
    parser.add_argument(
        "source",
        help="JSON file with 'text' and 'entities' keys, or '-' for stdin",
    )
    parser.add_argument(
        "--offset-unit",
        choices=[u.value for u in OffsetUnit],
        default=None,
        help="Unit of entity offsets (default: from settings)",
    )
    parser.add_argument(
        "--runs",
        choices=[c.value for c in Channel],
        default=None,
        help="Also print the runs of this channel as a table",
    )
    return parser


def _load_message(source: str) -> dict[str, Any]:
    raw = sys.stdin.read() if source == "-" else Path(source).read_text("utf-8")
    message = json.loads(raw)
    if not isinstance(message, dict) or not isinstance(message.get("text"), str):
        msg = "expected a JSON object with a string 'text' field"
        raise ValueError(msg)
    entities = message.setdefault("entities", [])
    if not isinstance(entities, list) or not all(
        isinstance(e, dict) for e in entities
    ):
        msg = "expected 'entities' to be a list of JSON objects"
        raise ValueError(msg)
    return message


def _runs_table(decorated: Any, channel_name: str) -> Table:
    from telemark.text.intervals import split_runs_with_values
    from telemark.text.spans import Channel

    table = Table(title=f"{channel_name} runs")
    table.add_column("Start", justify="right")
    table.add_column("End", justify="right")
    table.add_column("Text")
    table.add_column("Value")

    offset = 0
    for run, value in split_runs_with_values(decorated, Channel(channel_name)):
        end = offset + len(run)
        table.add_row(
            str(offset),
            str(end),
            escape(repr(run)),
            "-" if value is None else escape(str(value)),
        )
        offset = end
    return table


def _cmd_render(
    source: str,
    *,
    offset_unit: OffsetUnit | None = None,
    runs: str | None = None,
    console: Console | None = None,
) -> int:
    """Render one message; returns the process exit code."""
    from telemark.config import get_settings
    from telemark.render import to_rich_text
    from telemark.text.compositor import apply_entities
    from telemark.text.errors import EntityRangeError
    from telemark.text.resolver import RawEntity

    con = console or globals()["console"]
    settings = get_settings()

    try:
        message = _load_message(source)
        entities = [RawEntity.from_tdlib(e) for e in message["entities"]]
        decorated = apply_entities(
            message["text"],
            entities,
            offset_unit=offset_unit or settings.entities.offset_unit,
        )
    except (OSError, ValueError, TypeError, KeyError, EntityRangeError) as exc:
        con.print(f"[red]Error:[/] {escape(str(exc))}")
        return 1

    con.print(to_rich_text(decorated, settings.styles))
    if runs is not None:
        con.print(_runs_table(decorated, runs))
    return 0


def render() -> None:
    """Decorate a protocol message and print it.

    Usage:
        uv run telemark-render <file.json|-> [--offset-unit utf16] [--runs style]
    """
    from telemark import setup_logging
    from telemark.config import get_settings
    from telemark.text.compositor import OffsetUnit

    args = _build_parser().parse_args(sys.argv[1:])
    setup_logging(get_settings().log)

    offset_unit = OffsetUnit(args.offset_unit) if args.offset_unit else None
    sys.exit(_cmd_render(args.source, offset_unit=offset_unit, runs=args.runs))
