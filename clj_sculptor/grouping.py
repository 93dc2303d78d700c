"""Grouping of raw collection children into semantic items."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Iterable, Sequence

from .nodes import Atom, Comment, Newline, Node, Uneval, Whitespace, is_noise

VARIADIC_MARKERS = {"&"}


@dataclass(frozen=True, slots=True)
class Item:
    """An element together with its ``&`` marker and the comment that trails it on the same line."""

    element: Node
    prefix: Atom | None = None
    comment: Comment | None = None

    @property
    def is_comment(self) -> bool:
        return isinstance(self.element, Comment)

    def without_comment(self) -> Item:
        return replace(self, comment=None) if self.comment else self


def group_items(children: Sequence[Node]) -> list[Item]:
    items: list[Item] = []
    pending_prefix: Atom | None = None
    pending_unevals = 0
    newline_seen = True
    for node in children:
        if isinstance(node, Newline):
            newline_seen = True
            continue
        if is_noise(node):
            continue
        if isinstance(node, Comment):
            if pending_prefix is not None:
                items.append(Item(element=pending_prefix))
                pending_prefix = None
            previous = items[-1] if items else None
            if previous and not newline_seen and not previous.is_comment and previous.comment is None:
                items[-1] = replace(previous, comment=node)
            else:
                items.append(Item(element=node))
            continue
        newline_seen = False
        if isinstance(node, Atom) and node.text in VARIADIC_MARKERS and pending_prefix is None:
            pending_prefix = node
            continue
        depth, inner = _unwrap_uneval(node)
        if pending_unevals:
            pending_unevals -= 1
            depth += 1
        if depth:
            pending_unevals += depth - 1
            node = Uneval(child=inner)
        items.append(Item(element=node, prefix=pending_prefix))
        pending_prefix = None
    if pending_prefix is not None:
        items.append(Item(element=pending_prefix))
    if pending_unevals:
        # markers with nothing left to discard go back on the last element
        for index in range(len(items) - 1, -1, -1):
            if not items[index].is_comment:
                element = items[index].element
                for _ in range(pending_unevals):
                    element = Uneval(child=element)
                items[index] = replace(items[index], element=element)
                break
    return items


def _unwrap_uneval(node: Node) -> tuple[int, Node]:
    depth = 0
    while isinstance(node, Uneval):
        depth += 1
        node = node.child
    return depth, node


def ungroup(items: Iterable[Item]) -> tuple[Node, ...]:
    """Lay items back out as raw children that :func:`group_items` turns into the same items."""
    nodes: list[Node] = []
    for item in items:
        if nodes and not isinstance(nodes[-1], Newline):
            nodes.append(Newline() if item.is_comment else Whitespace())
        if item.prefix is not None:
            nodes.extend([item.prefix, Whitespace()])
        nodes.append(item.element)
        if item.is_comment:
            nodes.append(Newline())
        elif item.comment is not None:
            nodes.extend([Whitespace(), item.comment, Newline()])
    return tuple(nodes)


def split_head(items: Sequence[Item]) -> tuple[list[Item], Item | None, list[Item]]:
    """Split list items into the comments before the head, the head and the remaining items."""
    for index, item in enumerate(items):
        if not item.is_comment:
            return list(items[:index]), item, list(items[index + 1 :])
    return list(items), None, []
