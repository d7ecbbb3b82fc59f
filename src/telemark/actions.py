"""Action-link dispatch.

Presentation code registers one handler per :class:`LinkKind` (browser
opener, user-info viewer, download manager...) and hands triggered links
to :meth:`LinkDispatcher.dispatch`.

Usage:
    dispatcher = LinkDispatcher()

    @dispatcher.register(LinkKind.URL)
    def open_url(target):
        webbrowser.open(target)

    dispatcher.activate(decorated, cursor_pos)
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Protocol

from telemark.text.intervals import extended_region
from telemark.text.spans import ActionLink, Channel, LinkKind

if TYPE_CHECKING:
    from collections.abc import Callable

    from telemark.text.decorated import DecoratedText

__all__ = ["LinkDispatcher", "LinkHandler", "UnhandledLinkError", "link_at"]

logger = logging.getLogger(__name__)


class LinkHandler(Protocol):
    """Callable invoked with a triggered link's target."""

    def __call__(self, target: Any) -> Any: ...


class UnhandledLinkError(LookupError):
    """No handler is registered for a link's kind."""

    def __init__(self, link: ActionLink) -> None:
        self.link = link
        super().__init__(f"no handler registered for {link.kind.value!r} links")


def link_at(decorated: DecoratedText, pos: int) -> ActionLink | None:
    """Return the action link at *pos*, including a cursor just after a link."""
    region = extended_region(decorated, pos, Channel.ACTION)
    if region is None:
        return None
    start, _end = region
    # extended_region may skip forward to a later link; only accept the
    # region when it actually touches pos.
    if start > pos:
        return None
    link = decorated.value_at(start, Channel.ACTION)
    return link if isinstance(link, ActionLink) else None


class LinkDispatcher:
    """Registry of link handlers keyed by :class:`LinkKind`."""

    def __init__(self) -> None:
        self._handlers: dict[LinkKind, LinkHandler] = {}

    def register(self, kind: LinkKind) -> Callable[[LinkHandler], LinkHandler]:
        """Decorator registering a handler for *kind*, replacing any existing one."""

        def decorator(handler: LinkHandler) -> LinkHandler:
            if kind in self._handlers:
                logger.warning("Replacing handler for %s links", kind.value)
            self._handlers[kind] = handler
            logger.debug("Registered link handler for %s", kind.value)
            return handler

        return decorator

    def handler_for(self, kind: LinkKind) -> LinkHandler | None:
        return self._handlers.get(kind)

    def dispatch(self, link: ActionLink) -> Any:
        """Invoke the handler for *link* and return its result.

        Raises:
            UnhandledLinkError: no handler is registered for ``link.kind``.
        """
        handler = self._handlers.get(link.kind)
        if handler is None:
            raise UnhandledLinkError(link)
        logger.debug("Dispatching %s link to %r", link.kind.value, link.target)
        return handler(link.target)

    def activate(self, decorated: DecoratedText, pos: int) -> Any:
        """Dispatch the link at *pos*; returns ``None`` when there is none."""
        link = link_at(decorated, pos)
        if link is None:
            return None
        return self.dispatch(link)
