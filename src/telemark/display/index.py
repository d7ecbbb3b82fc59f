"""Ordered display index: a sentinel-bounded node list bound to a surface.

Nodes live in an arena keyed by :data:`NodeHandle`.  Two handles are
reserved: :data:`HEADER` and :data:`FOOTER`.  They bound the sequence
``header -> n1 -> ... -> footer``, are never returned by searches and
carry their own string payloads instead of user values.

Every node's rendered text is kept on the surface in list order, so a
node's location is the total length rendered before it.  Values are
opaque to the index; only the pretty-printer interprets them.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from typing import Any, Final, Generic, NewType, TypeVar

from telemark.display.surface import RenderSurface

logger = logging.getLogger(__name__)

V = TypeVar("V")
T = TypeVar("T")

NodeHandle = NewType("NodeHandle", int)

HEADER: Final = NodeHandle(0)
FOOTER: Final = NodeHandle(1)

_SENTINELS: Final = frozenset((HEADER, FOOTER))


class StaleNodeError(KeyError):
    """A handle does not name a live node of this index."""


class _Node:
    """One arena slot.

    Attributes:
        value: User value, or the sentinel's string payload.
        prev: Handle of the preceding node (``None`` for the header).
        next: Handle of the following node (``None`` for the footer).
        rendered: Text currently written to the surface for this node.
    """

    __slots__ = ("next", "prev", "rendered", "value")

    def __init__(
        self,
        value: Any,
        prev: NodeHandle | None,
        next: NodeHandle | None,
    ) -> None:
        self.value = value
        self.prev = prev
        self.next = next
        self.rendered = ""


class OrderedDisplayIndex(Generic[V]):
    """A doubly-linked, sentinel-bounded sequence rendered to a surface.

    Args:
        surface: Surface this index renders into.  Its prior contents are
            replaced.
        pretty_printer: Renders one node value to text.
        header: Header sentinel text.
        footer: Footer sentinel text.
        separator: Appended after every real node's rendered text.
    """

    def __init__(
        self,
        surface: RenderSurface,
        pretty_printer: Callable[[V], str],
        header: str = "",
        footer: str = "",
        *,
        separator: str = "",
    ) -> None:
        self._surface = surface
        self._printer = pretty_printer
        self._separator = separator
        self._nodes: dict[NodeHandle, _Node] = {
            HEADER: _Node(header, None, FOOTER),
            FOOTER: _Node(footer, HEADER, None),
        }
        self._last_handle = FOOTER
        self._nodes[HEADER].rendered = header
        self._nodes[FOOTER].rendered = footer
        # Total length this index has written to the surface.
        self._rendered_length = len(header) + len(footer)
        surface.replace(0, len(surface), header + footer)

    # ------------------------------------------------------------------
    # Arena access
    # ------------------------------------------------------------------

    def _node(self, handle: NodeHandle) -> _Node:
        try:
            return self._nodes[handle]
        except KeyError:
            raise StaleNodeError(handle) from None

    def _real(self, handle: NodeHandle) -> _Node:
        if handle in _SENTINELS:
            msg = "header and footer sentinels cannot be used here"
            raise ValueError(msg)
        return self._node(handle)

    def _handles(self, start: NodeHandle | None = None) -> Iterator[NodeHandle]:
        """Real-node handles from *start* (default: first) up to the footer."""
        if start is None or start == HEADER:
            start = self._node(HEADER).next
        else:
            self._node(start)
        handle = start
        while handle is not None and handle != FOOTER:
            node = self._nodes[handle]
            yield handle
            handle = node.next

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    @property
    def surface(self) -> RenderSurface:
        return self._surface

    @property
    def pretty_printer(self) -> Callable[[V], str]:
        return self._printer

    def _render(self, handle: NodeHandle) -> str:
        node = self._nodes[handle]
        if handle in _SENTINELS:
            return str(node.value)
        return self._printer(node.value) + self._separator

    def _redisplay(self, handle: NodeHandle) -> None:
        node = self._nodes[handle]
        text = self._render(handle)
        start = self.location(handle)
        self._surface.replace(start, start + len(node.rendered), text)
        self._rendered_length += len(text) - len(node.rendered)
        node.rendered = text

    def location(self, handle: NodeHandle) -> int:
        """Surface offset at which *handle*'s rendered text begins.

        Walks inward from both sentinels at once, so nodes near either end
        (the footer included) are found in a few steps.
        """
        self._node(handle)
        ahead: NodeHandle = HEADER
        before = 0
        behind: NodeHandle = FOOTER
        # Rendered length from the start of ``behind`` to the end.
        after = len(self._nodes[FOOTER].rendered)
        while True:
            if ahead == handle:
                return before
            if behind == handle:
                return self._rendered_length - after
            ahead_node = self._nodes[ahead]
            before += len(ahead_node.rendered)
            ahead = ahead_node.next  # type: ignore[assignment]
            behind = self._nodes[behind].prev  # type: ignore[assignment]
            after += len(self._nodes[behind].rendered)

    def locate(self, pos: int) -> NodeHandle | None:
        """Return the real node whose rendered text covers surface offset *pos*."""
        offset = len(self._nodes[HEADER].rendered)
        for handle in self._handles():
            width = len(self._nodes[handle].rendered)
            if offset <= pos < offset + width:
                return handle
            offset += width
        return None

    def invalidate(self, *handles: NodeHandle) -> None:
        """Re-render the given nodes with the current pretty-printer."""
        for handle in handles:
            self._node(handle)
            self._redisplay(handle)

    def refresh(self) -> None:
        """Re-render every node, header and footer included.

        If the pretty-printer raises, the index and surface keep their
        previous rendering.
        """
        rendered: list[tuple[_Node, str]] = []
        handle: NodeHandle | None = HEADER
        while handle is not None:
            node = self._nodes[handle]
            rendered.append((node, self._render(handle)))
            handle = node.next

        text = "".join(part for _node, part in rendered)
        self._surface.replace(0, self._rendered_length, text)
        for node, part in rendered:
            node.rendered = part
        self._rendered_length = len(text)

    def set_pretty_printer(self, pretty_printer: Callable[[V], str]) -> None:
        """Use *pretty_printer* for future renders.

        Already rendered nodes keep their text until :meth:`refresh` or
        :meth:`invalidate` is called.
        """
        self._printer = pretty_printer

    @property
    def header(self) -> str:
        return self._nodes[HEADER].value

    @property
    def footer(self) -> str:
        return self._nodes[FOOTER].value

    def set_header(self, text: str) -> None:
        """Replace the header text, re-rendering only the header."""
        self._nodes[HEADER].value = text
        self._redisplay(HEADER)

    def set_footer(self, text: str) -> None:
        """Replace the footer text, re-rendering only the footer."""
        self._nodes[FOOTER].value = text
        self._redisplay(FOOTER)

    # ------------------------------------------------------------------
    # Insertion and removal
    # ------------------------------------------------------------------

    def _link_after(self, prev: NodeHandle, value: V) -> NodeHandle:
        prev_node = self._nodes[prev]
        nxt = prev_node.next
        assert nxt is not None
        self._last_handle = NodeHandle(self._last_handle + 1)
        handle = self._last_handle
        self._nodes[handle] = _Node(value, prev, nxt)
        prev_node.next = handle
        self._nodes[nxt].prev = handle
        self._redisplay(handle)
        return handle

    def enter_first(self, value: V) -> NodeHandle:
        return self._link_after(HEADER, value)

    def enter_last(self, value: V) -> NodeHandle:
        last = self._nodes[FOOTER].prev
        assert last is not None
        return self._link_after(last, value)

    def enter_after(self, handle: NodeHandle, value: V) -> NodeHandle:
        """Insert *value* right after *handle* (the header is allowed)."""
        if handle == FOOTER:
            msg = "cannot insert after the footer"
            raise ValueError(msg)
        self._node(handle)
        return self._link_after(handle, value)

    def enter_before(self, handle: NodeHandle, value: V) -> NodeHandle:
        """Insert *value* right before *handle* (the footer is allowed)."""
        if handle == HEADER:
            msg = "cannot insert before the header"
            raise ValueError(msg)
        prev = self._node(handle).prev
        assert prev is not None
        return self._link_after(prev, value)

    def delete(self, *handles: NodeHandle) -> None:
        """Remove the given real nodes and their rendered text."""
        for handle in handles:
            node = self._real(handle)
            start = self.location(handle)
            self._surface.replace(start, start + len(node.rendered), "")
            self._rendered_length -= len(node.rendered)
            assert node.prev is not None
            assert node.next is not None
            self._nodes[node.prev].next = node.next
            self._nodes[node.next].prev = node.prev
            del self._nodes[handle]

    def filter(self, predicate: Callable[[V], bool]) -> int:
        """Keep only nodes whose value satisfies *predicate*.

        Returns:
            Number of nodes removed.
        """
        doomed = [h for h in self._handles() if not predicate(self._nodes[h].value)]
        self.delete(*doomed)
        logger.debug("Filtered %d node(s), %d remain", len(doomed), len(self))
        return len(doomed)

    def clear(self) -> None:
        """Remove every real node; header and footer stay."""
        self.filter(lambda _value: False)

    # ------------------------------------------------------------------
    # Navigation and data
    # ------------------------------------------------------------------

    def __len__(self) -> int:
        return len(self._nodes) - len(_SENTINELS)

    def __iter__(self) -> Iterator[NodeHandle]:
        return self._handles()

    def __contains__(self, handle: object) -> bool:
        return handle in self._nodes and handle not in _SENTINELS

    def values(self) -> list[V]:
        return [self._nodes[h].value for h in self._handles()]

    def value(self, handle: NodeHandle) -> V:
        return self._real(handle).value

    def set_value(self, handle: NodeHandle, value: V) -> None:
        """Replace a node's value without re-rendering it."""
        self._real(handle).value = value

    def first(self) -> NodeHandle | None:
        return self.next_node(HEADER)

    def last(self) -> NodeHandle | None:
        return self.prev_node(FOOTER)

    def next_node(self, handle: NodeHandle) -> NodeHandle | None:
        nxt = self._node(handle).next
        return None if nxt is None or nxt == FOOTER else nxt

    def prev_node(self, handle: NodeHandle) -> NodeHandle | None:
        prev = self._node(handle).prev
        return None if prev is None or prev == HEADER else prev

    def nth(self, n: int) -> NodeHandle | None:
        """The *n*-th real node; negative *n* counts back from the last."""
        step = self.next_node if n >= 0 else self.prev_node
        handle = self.first() if n >= 0 else self.last()
        for _ in range(n if n >= 0 else -n - 1):
            if handle is None:
                return None
            handle = step(handle)
        return handle

    def collect(self, predicate: Callable[[V], bool] | None = None) -> list[V]:
        """Values in order, optionally only those satisfying *predicate*."""
        values = self.values()
        if predicate is None:
            return values
        return [v for v in values if predicate(v)]

    def map(self, fn: Callable[[V], Any]) -> None:
        """Call *fn* on each value; re-render nodes for which it returns true."""
        for handle in list(self._handles()):
            if fn(self._nodes[handle].value):
                self._redisplay(handle)

    def is_empty(self) -> bool:
        """True when nothing is rendered between header and footer."""
        first = self._nodes[HEADER].next
        assert first is not None
        if first == FOOTER:
            return True
        return self.location(first) == self.location(FOOTER)

    # ------------------------------------------------------------------
    # Search
    # ------------------------------------------------------------------

    def find(
        self,
        item: T,
        test: Callable[[T, Any], bool],
        key: Callable[[V], Any] | None = None,
        start: NodeHandle | None = None,
    ) -> NodeHandle | None:
        """First node from *start* for which ``test(item, key(value))`` holds.

        Sentinels are never tested.  *start* defaults to the first real
        node; starting at the footer finds nothing.
        """
        for handle in self._handles(start):
            value = self._nodes[handle].value
            if test(item, key(value) if key is not None else value):
                return handle
        return None

    def find_if(
        self,
        predicate: Callable[[Any], bool],
        key: Callable[[V], Any] | None = None,
        start: NodeHandle | None = None,
    ) -> NodeHandle | None:
        return self.find(None, lambda _item, v: predicate(v), key, start)

    def find_by_identity(
        self,
        value: Any,
        start: NodeHandle | None = None,
    ) -> NodeHandle | None:
        """First node holding *value* itself (``is``, not ``==``)."""
        return self.find(value, lambda item, v: item is v, start=start)
