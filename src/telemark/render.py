"""Render a decorated text as a ``rich.text.Text``."""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.text import Text

from telemark.text.spans import ActionLink, Channel, LinkKind, Style

if TYPE_CHECKING:
    from telemark.config import StyleConfig
    from telemark.text.decorated import DecoratedText


def to_rich_text(decorated: DecoratedText, styles: StyleConfig) -> Text:
    """Apply style runs and link faces of *decorated* as rich styles.

    Link faces are applied after style runs, so they take precedence where
    both set the same attribute.  URL links also get rich's ``link`` style
    so terminals that support hyperlinks make them clickable.
    """
    text = Text(decorated.text)
    for span in decorated.spans(Channel.STYLE):
        if isinstance(span.payload, Style):
            text.stylize(styles.for_face(span.payload), span.start, span.end)
    for span in decorated.spans(Channel.ACTION):
        link = span.payload
        if not isinstance(link, ActionLink):
            continue
        if link.face is not None:
            text.stylize(styles.for_face(link.face), span.start, span.end)
        if link.kind == LinkKind.URL and link.target:
            text.stylize(f"link {link.target}", span.start, span.end)
    return text
