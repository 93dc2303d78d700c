"""Building blocks shared by the renderer and the special-form handlers."""

from __future__ import annotations

from dataclasses import dataclass, field

from .grouping import group_items
from .nodes import Collection, Comment, Meta, Newline, Node, Whitespace, Wrapper
from .utils import end_column


@dataclass(slots=True)
class Rendered:
    """A rendered node plus the comments that have to be written on their own lines before it."""

    node: Node
    hoisted: list[Comment] = field(default_factory=list)


class NodeBuffer:
    """Accumulates rendered nodes while tracking the column the next node starts at."""

    def __init__(self, column: int):
        self.nodes: list[Node] = []
        self.column = column
        self.ends_with_comment = False

    def emit(self, node: Node) -> None:
        self.nodes.append(node)
        self.column = end_column(self.column, node.to_string())
        self.ends_with_comment = isinstance(node, Comment)

    def space(self) -> None:
        self.emit(Whitespace())

    def newline(self, column: int, blank: bool = False) -> None:
        self.nodes.append(Newline())
        if blank:
            self.nodes.append(Newline())
        if column:
            self.nodes.append(Whitespace(text=" " * column))
        self.column = column
        self.ends_with_comment = False

    def extend(self, other: NodeBuffer) -> None:
        self.nodes.extend(other.nodes)
        self.column = other.column
        self.ends_with_comment = other.ends_with_comment

    def children(self) -> tuple[Node, ...]:
        return tuple(self.nodes)


def normalize_comment(comment: Comment) -> Comment:
    text = comment.text.rstrip()
    if text.startswith(";") and not text.startswith(";;"):
        text = ";" + text
    if text == comment.text:
        return comment
    return Comment(text=text)


def flatten(node: Node) -> Node:
    """Lay ``node`` out on a single line with one space between elements.

    Only meaningful for comment-free subtrees; callers check with
    :func:`clj_sculptor.nodes.contains_comment` first.
    """
    match node:
        case Collection():
            children: list[Node] = []
            for item in group_items(node.children):
                if children:
                    children.append(Whitespace())
                if item.prefix is not None:
                    children.extend([item.prefix, Whitespace()])
                children.append(flatten(item.element))
            return node.model_copy(update={"children": tuple(children)})
        case Wrapper():
            return node.model_copy(update={"child": flatten(node.child)})
        case Meta():
            return node.model_copy(update={"meta": flatten(node.meta), "target": flatten(node.target)})
    return node
