"""Recursive renderer: rebuilds a syntax tree with the whitespace of the canonical layout."""

from __future__ import annotations

from typing import Callable, Mapping, NotRequired, Optional, Sequence, TypedDict

from clj_sculptor.forms import SPECIAL_FORMS, Handler
from clj_sculptor.grouping import Item, group_items, split_head
from clj_sculptor.layout import NodeBuffer, Rendered, normalize_comment
from clj_sculptor.logger import Logger
from clj_sculptor.nodes import (
    Atom,
    Collection,
    Comment,
    Forms,
    Fragment,
    ListNode,
    MapNode,
    Meta,
    Node,
    ReaderConditional,
    Wrapper,
)
from clj_sculptor.pairs import CommentRecord, OrphanKey, Pair, PairRecord, build_pairs
from clj_sculptor.sequencer import TopLevelEntry, join_top_level
from clj_sculptor.utils import end_column, resolve_config

Layout = Callable[[int, Node], Rendered]


class RendererConfig(TypedDict):
    enable_logger: NotRequired[bool]


class RendererConfigRequired(TypedDict):
    enable_logger: bool


DEFAULT_CONFIG: RendererConfigRequired = {"enable_logger": False}


class Renderer:
    """Renders nodes at a target column.

    ``render(column, node)`` returns ``node`` rebuilt with newline and
    indentation nodes so that serializing it yields the formatted text when
    the node's first character sits at ``column``. Lists whose head symbol is
    in ``special_forms`` are laid out by the registered handler, everything
    else by the generic collection and call-form rules.
    """

    def __init__(self, config: Optional[RendererConfig] = None, special_forms: Optional[Mapping[str, Handler]] = None):
        self.config = resolve_config(config or {}, DEFAULT_CONFIG)
        self.logger = Logger(config={"name": "Renderer Logger", "is_enabled": self.config["enable_logger"]}).logger
        self.special_forms = dict(SPECIAL_FORMS if special_forms is None else special_forms)

    def render(self, column: int, node: Node) -> Node:
        rendered = self.layout(column, node)
        if not rendered.hoisted:
            return rendered.node
        buffer = NodeBuffer(column)
        self.write_hoisted(buffer, rendered.hoisted, column)
        buffer.emit(rendered.node)
        return Fragment(children=buffer.children())

    def layout(self, column: int, node: Node) -> Rendered:
        match node:
            case Comment():
                return Rendered(normalize_comment(node))
            case ListNode():
                return self.layout_list(column, node)
            case MapNode():
                return Rendered(self.layout_pairs(column, node))
            case Collection():
                return Rendered(self.layout_sequence(column, node))
            case ReaderConditional(child=ListNode() as child):
                return Rendered(node.model_copy(update={"child": self.layout_pairs(column + len(node.prefix), child)}))
            case Wrapper():
                rendered = self.layout(column + len(node.prefix), node.child)
                return Rendered(node.model_copy(update={"child": rendered.node}), rendered.hoisted)
            case Meta():
                return self.layout_meta(column, node)
            case Forms():
                return Rendered(self.layout_forms(node))
        return Rendered(node)

    # Collections ---------------------------------------------------------------
    def layout_sequence(self, column: int, node: Collection) -> Collection:
        align = column + len(node.open)
        buffer = NodeBuffer(align)
        for index, item in enumerate(group_items(node.children)):
            if index:
                buffer.newline(align)
            self.emit_item(buffer, item)
        if buffer.ends_with_comment:
            buffer.newline(align)
        return node.model_copy(update={"children": buffer.children()})

    def layout_pairs(self, column: int, node: Collection) -> Collection:
        align = column + len(node.open)
        buffer = NodeBuffer(align)
        for index, record in enumerate(build_pairs(group_items(node.children))):
            if index:
                buffer.newline(align)
            self.emit_record(buffer, record)
        if buffer.ends_with_comment:
            buffer.newline(align)
        return node.model_copy(update={"children": buffer.children()})

    def layout_meta(self, column: int, node: Meta) -> Rendered:
        meta = self.layout(column + 1, node.meta)
        target = self.layout(end_column(column + 1, meta.node.to_string()) + 1, node.target)
        return Rendered(
            node.model_copy(update={"meta": meta.node, "target": target.node}),
            [*meta.hoisted, *target.hoisted],
        )

    def layout_forms(self, forms: Forms) -> Forms:
        entries: list[TopLevelEntry] = []
        for item in group_items(forms.children):
            if item.is_comment:
                entries.append(TopLevelEntry((normalize_comment(item.element),), is_comment=True))
                continue
            buffer = NodeBuffer(0)
            hoisted: list[Comment] = []
            self.emit_item(buffer, item, hoisted)
            entries.extend(TopLevelEntry((normalize_comment(comment),), is_comment=True) for comment in hoisted)
            entries.append(TopLevelEntry(buffer.children()))
        self.logger.info(f"Rendered {len(entries)} top-level entries")
        return join_top_level(entries)

    # Lists ---------------------------------------------------------------------
    def layout_list(self, column: int, node: ListNode) -> Rendered:
        leading, head, items = split_head(group_items(node.children))
        hoisted: list[Comment] = [item.element for item in leading]
        if head is None:
            return Rendered(ListNode(), hoisted)
        handler = None
        if isinstance(head.element, Atom) and head.prefix is None:
            handler = self.special_forms.get(head.element.text)
        if handler is None:
            rendered = self.render_call(column, head, items)
        else:
            self.logger.debug(f"Rendering special form '{head.element.text}' at column {column}")
            rendered = handler(self, column, head, items)
        rendered.hoisted[:0] = hoisted
        return rendered

    def render_call(self, column: int, head: Item, items: Sequence[Item]) -> Rendered:
        return self.render_form(column, head, items, call_line=1)

    def render_form(
        self,
        column: int,
        head: Item,
        items: Sequence[Item],
        *,
        call_line: int = 0,
        body_column: Optional[int] = None,
        hoist: bool = True,
        call_layout: Optional[Layout] = None,
        body_layout: Optional[Layout] = None,
    ) -> Rendered:
        """Lay out a list as ``(head call-line-items... <newline> body-items...)``.

        Up to ``call_line`` items follow the head on its line; the rest go one
        per line at ``body_column`` (aligned with the first call-line item when
        ``None``). With ``hoist`` set, comments standing between the head and
        the call-line items are moved in front of the whole form; otherwise they
        stay where they are and push the remaining items onto their own lines.
        """
        hoisted: list[Comment] = []
        buffer = NodeBuffer(column + 1)
        self.emit_item(buffer, head.without_comment(), hoisted)
        inline = True
        if head.comment is not None:
            if hoist:
                hoisted.append(head.comment)
            else:
                buffer.space()
                buffer.emit(normalize_comment(head.comment))
                inline = False
        remaining = list(items)
        placed = 0
        first_column = None
        while inline and placed < call_line and remaining:
            item = remaining[0]
            if item.is_comment:
                if not hoist:
                    break
                hoisted.append(item.element)
                remaining.pop(0)
                continue
            remaining.pop(0)
            buffer.space()
            if first_column is None:
                first_column = buffer.column
            self.emit_item(buffer, item.without_comment(), hoisted, call_layout)
            placed += 1
            if item.comment is not None:
                more = placed < call_line and any(not rest.is_comment for rest in remaining)
                if more and hoist:
                    hoisted.append(item.comment)
                else:
                    buffer.space()
                    buffer.emit(normalize_comment(item.comment))
                    inline = False
        if body_column is None:
            body_column = first_column if first_column is not None else column + 1
        for item in remaining:
            buffer.newline(body_column)
            self.emit_item(buffer, item, layout=body_layout)
        if buffer.ends_with_comment:
            buffer.newline(body_column)
        return Rendered(ListNode(children=buffer.children()), hoisted)

    # Items ---------------------------------------------------------------------
    def emit_item(
        self,
        buffer: NodeBuffer,
        item: Item,
        hoisted: Optional[list[Comment]] = None,
        layout: Optional[Layout] = None,
    ) -> None:
        """Write ``item`` at the buffer's column.

        Comments lifted out of the element go to ``hoisted`` when the caller
        collects them, otherwise they are written on their own lines first.
        """
        if item.is_comment:
            buffer.emit(normalize_comment(item.element))
            return
        start = buffer.column
        element_column = start + (len(item.prefix.text) + 1 if item.prefix is not None else 0)
        rendered = (layout or self.layout)(element_column, item.element)
        if rendered.hoisted:
            if hoisted is not None:
                hoisted.extend(rendered.hoisted)
            else:
                self.write_hoisted(buffer, rendered.hoisted, start)
        if item.prefix is not None:
            buffer.emit(item.prefix)
            buffer.space()
        buffer.emit(rendered.node)
        if item.comment is not None:
            buffer.space()
            buffer.emit(normalize_comment(item.comment))

    def emit_record(self, buffer: NodeBuffer, record: PairRecord) -> None:
        match record:
            case CommentRecord(node=comment):
                buffer.emit(normalize_comment(comment))
            case OrphanKey(item=item):
                self.emit_item(buffer, item)
            case Pair(key=key, value=value):
                start = buffer.column
                hoisted: list[Comment] = []
                line = NodeBuffer(start)
                self.emit_item(line, key, hoisted)
                line.space()
                self.emit_item(line, value, hoisted)
                self.write_hoisted(buffer, hoisted, start)
                buffer.extend(line)

    def write_hoisted(self, buffer: NodeBuffer, comments: Sequence[Comment], column: int) -> None:
        for comment in comments:
            buffer.emit(normalize_comment(comment))
            buffer.newline(column)
