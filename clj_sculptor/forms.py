"""Layout handlers for lists headed by a special symbol.

A handler is called as ``handler(renderer, column, head, items)`` where
``items`` are the grouped items after the head, and returns a ``Rendered``
list. ``SPECIAL_FORMS`` maps head symbols to handlers; pass a modified copy to
``Renderer`` to change how a form is laid out.
"""

from __future__ import annotations

from functools import partial
from typing import TYPE_CHECKING, Callable, Sequence

from .grouping import Item, group_items, split_head
from .layout import NodeBuffer, Rendered, flatten, normalize_comment
from .namespace import IMPORT_KEYWORDS, REQUIRE_KEYWORDS, normalize_declarations
from .nodes import Atom, Comment, ListNode, MapNode, Node, VectorNode, contains_comment
from .pairs import CommentRecord, OrphanKey, Pair, PairRecord, build_pairs

if TYPE_CHECKING:
    from .renderer import Renderer

Handler = Callable[["Renderer", int, Item, Sequence[Item]], Rendered]

DEF_HEADS = ("def", "defonce", "defmulti")
NAMED_FN_HEADS = ("defn", "defn-", "defmacro")
FN_HEADS = ("fn", "fn*")
BINDING_HEADS = (
    "let",
    "loop",
    "binding",
    "with-open",
    "with-redefs",
    "with-local-vars",
    "when-let",
    "if-let",
    "when-some",
    "if-some",
    "when-first",
    "for",
    "doseq",
    "dotimes",
)
CONDITIONAL_HEADS = (
    "if",
    "if-not",
    "when",
    "when-not",
    "while",
    "letfn",
    "locking",
    "doto",
    "deftest",
    "testing",
    "defprotocol",
    "definterface",
    "extend-type",
    "extend-protocol",
    "reify",
)
RECORD_HEADS = ("defrecord", "deftype")
SEQUENCING_HEADS = ("do", "comment", "future", "delay", "lazy-seq", "dosync")
CLAUSE_HEADS = {"cond": 0, "cond->": 1, "cond->>": 1, "case": 1, "condp": 2}


def _elements(items: Sequence[Item]) -> list[Item]:
    return [item for item in items if not item.is_comment]


def render_block(renderer: Renderer, column: int, head: Item, items: Sequence[Item]) -> Rendered:
    return renderer.render_form(column, head, items, call_line=1, body_column=column + 2)


def render_record(renderer: Renderer, column: int, head: Item, items: Sequence[Item]) -> Rendered:
    return renderer.render_form(column, head, items, call_line=2, body_column=column + 2)


def render_body(renderer: Renderer, column: int, head: Item, items: Sequence[Item], hoist: bool = True) -> Rendered:
    return renderer.render_form(column, head, items, call_line=0, body_column=column + 2, hoist=hoist)


def render_catch(renderer: Renderer, column: int, head: Item, items: Sequence[Item]) -> Rendered:
    return renderer.render_form(column, head, items, call_line=2, body_column=column + 2)


# Functions -------------------------------------------------------------------


def layout_arity(renderer: Renderer, column: int, node: Node) -> Rendered:
    """``([params] body...)``: body one item per line, one column inside the parenthesis."""
    if not isinstance(node, ListNode):
        return renderer.layout(column, node)
    leading, head, items = split_head(group_items(node.children))
    if head is None or not isinstance(head.element, VectorNode):
        return renderer.layout(column, node)
    rendered = renderer.render_form(column, head, items, call_line=0, body_column=column + 1)
    rendered.hoisted[:0] = [item.element for item in leading]
    return rendered


def _is_docstring(node: Node) -> bool:
    return isinstance(node, Atom) and node.is_string


def _is_attr_map(node: Node) -> bool:
    return isinstance(node, MapNode)


def render_fn(
    renderer: Renderer, column: int, head: Item, items: Sequence[Item], named: bool = False
) -> Rendered:
    elements = _elements(items)
    position = 0
    has_name = bool(elements) and not isinstance(elements[0].element, (VectorNode, ListNode))
    if has_name:
        position = 1
    preamble = 0
    if named and has_name:
        # docstring, then attribute map, each only when something follows it
        for accepts in (_is_docstring, _is_attr_map):
            index = position + preamble
            if index < len(elements) - 1 and accepts(elements[index].element):
                preamble += 1
    body = elements[position + preamble :]
    arity = partial(layout_arity, renderer)
    if body and isinstance(body[0].element, ListNode):
        if not named and not has_name:
            # anonymous: first arity on the call line, later ones aligned with it
            return renderer.render_form(column, head, items, call_line=1, call_layout=arity, body_layout=arity)
        return renderer.render_form(
            column, head, items, call_line=1 if has_name else 0, body_column=column + 2, body_layout=arity
        )
    call_line = 1
    if has_name and not preamble:
        call_line = 2
    return renderer.render_form(column, head, items, call_line=call_line, body_column=column + 2)


def render_defmethod(renderer: Renderer, column: int, head: Item, items: Sequence[Item]) -> Rendered:
    elements = _elements(items)
    if len(elements) > 2 and isinstance(elements[2].element, ListNode):
        return renderer.render_form(
            column,
            head,
            items,
            call_line=2,
            body_column=column + 2,
            body_layout=partial(layout_arity, renderer),
        )
    return renderer.render_form(column, head, items, call_line=3, body_column=column + 2)


# Bindings --------------------------------------------------------------------


def layout_bindings(renderer: Renderer, column: int, node: Node) -> Rendered:
    if not isinstance(node, VectorNode):
        return renderer.layout(column, node)
    return Rendered(renderer.layout_pairs(column, node))


def render_binding(renderer: Renderer, column: int, head: Item, items: Sequence[Item]) -> Rendered:
    elements = _elements(items)
    if not elements or not isinstance(elements[0].element, VectorNode):
        return renderer.render_call(column, head, items)
    return renderer.render_form(
        column,
        head,
        items,
        call_line=1,
        body_column=column + 2,
        call_layout=partial(layout_bindings, renderer),
    )


# Clauses ---------------------------------------------------------------------


def render_clauses(renderer: Renderer, column: int, head: Item, items: Sequence[Item], leading: int = 0) -> Rendered:
    """Leading items on the head line, then test/result pairs separated by blank lines."""
    body_column = column + 2
    hoisted: list[Comment] = []
    buffer = NodeBuffer(column + 1)
    renderer.emit_item(buffer, head.without_comment(), hoisted)
    inline = head.comment is None
    if head.comment is not None:
        buffer.space()
        buffer.emit(normalize_comment(head.comment))
    remaining = list(items)
    taken = 0
    while taken < leading and remaining:
        item = remaining.pop(0)
        if item.is_comment:
            inline = False
        if inline:
            buffer.space()
            renderer.emit_item(buffer, item, hoisted)
        else:
            buffer.newline(body_column)
            renderer.emit_item(buffer, item)
        if not item.is_comment:
            taken += 1
            if item.comment is not None:
                inline = False
    previous: PairRecord | None = None
    for record in build_pairs(remaining):
        buffer.newline(body_column, blank=previous is not None and not isinstance(previous, CommentRecord))
        match record:
            case Pair(key=key, value=value):
                # comments lifted out of either half go above the key
                pair_hoisted: list[Comment] = []
                lines = NodeBuffer(body_column)
                renderer.emit_item(lines, key, pair_hoisted)
                lines.newline(body_column)
                renderer.emit_item(lines, value, pair_hoisted)
                renderer.write_hoisted(buffer, pair_hoisted, body_column)
                buffer.extend(lines)
            case OrphanKey(item=item):
                renderer.emit_item(buffer, item)
            case CommentRecord(node=comment):
                buffer.emit(normalize_comment(comment))
        previous = record
    if buffer.ends_with_comment:
        buffer.newline(body_column)
    return Rendered(ListNode(children=buffer.children()), hoisted)


# Namespaces ------------------------------------------------------------------


def layout_flat(renderer: Renderer, column: int, node: Node) -> Rendered:
    if contains_comment(node):
        return renderer.layout(column, node)
    return Rendered(flatten(node))


def layout_ns_clause(renderer: Renderer, column: int, node: Node) -> Rendered:
    if not isinstance(node, ListNode):
        return renderer.layout(column, node)
    leading, head, entries = split_head(group_items(node.children))
    if head is None or not isinstance(head.element, Atom) or not head.element.is_keyword:
        return renderer.layout(column, node)
    if head.element.text not in REQUIRE_KEYWORDS | IMPORT_KEYWORDS:
        return layout_flat(renderer, column, node)
    flat = partial(layout_flat, renderer)
    rendered = renderer.render_form(column, head, entries, call_line=1, call_layout=flat, body_layout=flat)
    rendered.hoisted[:0] = [item.element for item in leading]
    return rendered


def render_ns(renderer: Renderer, column: int, head: Item, items: Sequence[Item]) -> Rendered:
    return renderer.render_form(
        column,
        head,
        normalize_declarations(items),
        call_line=1,
        body_column=column + 2,
        body_layout=partial(layout_ns_clause, renderer),
    )


SPECIAL_FORMS: dict[str, Handler] = {
    **dict.fromkeys(DEF_HEADS, render_block),
    **dict.fromkeys(NAMED_FN_HEADS, partial(render_fn, named=True)),
    **dict.fromkeys(FN_HEADS, render_fn),
    "defmethod": render_defmethod,
    **dict.fromkeys(BINDING_HEADS, render_binding),
    **dict.fromkeys(CONDITIONAL_HEADS, render_block),
    **dict.fromkeys(RECORD_HEADS, render_record),
    **{name: partial(render_clauses, leading=leading) for name, leading in CLAUSE_HEADS.items()},
    "try": render_body,
    "catch": render_catch,
    "finally": render_body,
    **dict.fromkeys(SEQUENCING_HEADS, partial(render_body, hoist=False)),
    "ns": render_ns,
}
